"""Terminal rendering of TargetProcess descriptions."""

from __future__ import annotations

import re

import html2text

MARKDOWN_MARKER = "<!--markdown-->"
NO_DESCRIPTION = "no description provided."


def _converter() -> html2text.HTML2Text:
    converter = html2text.HTML2Text()
    converter.body_width = 0  # no wrapping
    converter.unicode_snob = True
    converter.ul_item_mark = "-"
    return converter


def html_to_text(content: str) -> str:
    """Convert an HTML description to markdown, keeping links and emphasis."""
    text = _converter().handle(content)
    text = "\n".join(line.rstrip() for line in text.splitlines())
    return re.sub(r"\n{3,}", "\n\n", text).strip()


def render_description(description: str | None) -> str:
    """Markdown descriptions are shown as is, HTML ones converted to markdown."""
    if not description or not description.strip():
        return NO_DESCRIPTION
    if description.startswith(MARKDOWN_MARKER):
        return description[len(MARKDOWN_MARKER) :].strip() or NO_DESCRIPTION
    return html_to_text(description) or NO_DESCRIPTION
