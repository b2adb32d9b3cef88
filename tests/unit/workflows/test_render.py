"""Unit tests for description rendering."""

import pytest

from tpaws.workflows import html_to_text, render_description


def _lines(text: str) -> list[str]:
    return [line.strip() for line in text.splitlines()]


@pytest.mark.unit
class TestRenderDescription:
    """Tests for render_description."""

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_empty(self, value: str | None) -> None:
        assert render_description(value) == "no description provided."

    def test_markdown_shown_as_is(self) -> None:
        assert render_description("<!--markdown-->## Goal\n*bold*") == "## Goal\n*bold*"

    def test_html_list(self) -> None:
        html = "<div>Steps:</div><ul><li>Open &amp; click</li><li>Check</li></ul>"

        lines = _lines(render_description(html))

        assert lines[0] == "Steps:"
        assert "- Open & click" in lines
        assert "- Check" in lines

    def test_links_and_emphasis_survive(self) -> None:
        html = (
            '<p>See <a href="https://docs.example.com/export">the docs</a> '
            "and <b>do not</b> merge</p>"
        )

        text = render_description(html)

        assert "[the docs](https://docs.example.com/export)" in text
        assert "**do not**" in text

    def test_long_paragraph_not_wrapped(self) -> None:
        html = "<p>" + " ".join(["word"] * 60) + "</p>"

        assert "\n" not in render_description(html)

    def test_html_to_text_collapses_blank_lines(self) -> None:
        assert html_to_text("<p>a</p><p></p><p></p><p>b</p>") == "a\n\nb"
