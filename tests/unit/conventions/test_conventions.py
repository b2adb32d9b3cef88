"""Unit tests for branch and ticket naming conventions."""

import pytest

from tpaws.conventions import (
    branch_to_title,
    feature_name,
    repository_from_remote,
    resolve_ticket_id,
    slugify_ticket_name,
    strip_heads,
    ticket_branch_name,
    ticket_id_from_branch,
    ticket_id_from_url,
)


@pytest.mark.unit
class TestTicketIdFromBranch:
    """Tests for ticket_id_from_branch."""

    @pytest.mark.parametrize(
        ("branch", "expected"),
        [
            ("feature/115068_translate_report_type", "115068"),
            ("bugfix/42_fix", "42"),
            ("feature/7_", "7"),
            ("  feature/99_trailing_space  ", "99"),
        ],
    )
    def test_extracts_id(self, branch: str, expected: str) -> None:
        assert ticket_id_from_branch(branch) == expected

    @pytest.mark.parametrize(
        "branch",
        ["feature/no-id-here", "develop", "feature/123", "115068_no_prefix", ""],
    )
    def test_returns_none_without_convention(self, branch: str) -> None:
        assert ticket_id_from_branch(branch) is None

    def test_round_trip_with_ticket_branch_name(self) -> None:
        """A generated feature branch always yields the ticket ID back."""
        branch = f"feature/{ticket_branch_name(115068, 'Translate (report) type: payout')}"

        assert ticket_id_from_branch(branch) == "115068"


@pytest.mark.unit
class TestTicketIdFromUrl:
    """Tests for ticket_id_from_url."""

    @pytest.mark.parametrize(
        "url",
        [
            "https://company.tpondemand.com/entity/115068",
            "https://company.tpondemand.com/entity/115068-translate-report-type",
            "http://localhost:8080/entity/115068-x?tab=1",
            "https://company.tpondemand.com/entity/115068#comments",
        ],
    )
    def test_extracts_id(self, url: str) -> None:
        assert ticket_id_from_url(url) == "115068"

    @pytest.mark.parametrize(
        "url",
        [
            "https://company.tpondemand.com/restui/board.aspx",
            "https://company.tpondemand.com/entity/",
            "ftp://company.tpondemand.com/entity/123",
            "not a url",
            "company.tpondemand.com/entity/123",
        ],
    )
    def test_returns_none_for_other_shapes(self, url: str) -> None:
        assert ticket_id_from_url(url) is None


@pytest.mark.unit
class TestResolveTicketId:
    """Tests for resolve_ticket_id."""

    def test_digits_unchanged(self) -> None:
        assert resolve_ticket_id("123") == "123"

    def test_hash_prefix_stripped(self) -> None:
        assert resolve_ticket_id("#123") == "123"

    def test_url(self) -> None:
        assert resolve_ticket_id("https://x.tpondemand.com/entity/55-slug") == "55"

    def test_garbage(self) -> None:
        assert resolve_ticket_id("abc") is None


@pytest.mark.unit
class TestBranchToTitle:
    """Tests for branch_to_title."""

    def test_convention_branch(self) -> None:
        title = branch_to_title("feature/115068_translate_report_type_payout_transactions")

        assert title == "Translate report type payout transactions"

    def test_branch_without_id(self) -> None:
        assert branch_to_title("feature/improve_logging") == "Improve logging"

    def test_only_digits(self) -> None:
        assert branch_to_title("feature/123") == ""

    def test_empty(self) -> None:
        assert branch_to_title("") == ""


@pytest.mark.unit
class TestNaming:
    """Tests for slugs, feature names and remotes."""

    def test_slug_drops_punctuation(self) -> None:
        assert slugify_ticket_name('Fix "login" (SSO) - part 2.') == "fix_login_sso__part_2"

    def test_ticket_branch_name(self) -> None:
        assert ticket_branch_name(12, "Add Export") == "12_add_export"

    def test_feature_name(self) -> None:
        assert feature_name("feature/12_add_export") == "12_add_export"

    @pytest.mark.parametrize(
        "url",
        [
            "codecommit::eu-west-1://payments-api",
            "https://git-codecommit.eu-west-1.amazonaws.com/v1/repos/payments-api",
            "git@github.com:org/payments-api.git",
            "codecommit://dev-profile@payments-api",
            "codecommit::eu-west-1://dev-profile@payments-api",
        ],
    )
    def test_repository_from_remote(self, url: str) -> None:
        assert repository_from_remote(url) == "payments-api"

    def test_repository_from_empty_remote(self) -> None:
        assert repository_from_remote("") is None

    def test_strip_heads(self) -> None:
        assert strip_heads("refs/heads/feature/1_x") == "feature/1_x"
        assert strip_heads("develop") == "develop"
