"""Unit tests for pull request workflows."""

from dataclasses import replace
from unittest.mock import AsyncMock

import click
import pytest

from tpaws.ai import AIResponseError, PullRequestDraft
from tpaws.aws import PullRequest, PullRequestStatus
from tpaws.git import GitError
from tpaws.slack import SlackError
from tpaws.target_process import AssignableNotFoundError, EntityState
from tpaws.workflows import (
    AppContext,
    PullRequestNotFoundError,
    create_pull_request,
    list_pull_requests,
    merge_pull_request,
    resolve_title,
    view_pull_request,
)

BRANCH = "feature/115068_translate_report_type_payout_transactions"
LINK = (
    "https://eu-west-1.console.aws.amazon.com/codesuite/codecommit/repositories/"
    "payments-api/pull-requests/42/details"
)


def _pr(pr_id: str = "42", source: str = BRANCH, title: str = "Add export") -> PullRequest:
    return PullRequest.model_validate(
        {
            "pullRequestId": pr_id,
            "title": title,
            "description": "See: https://company.tpondemand.com/entity/115068",
            "pullRequestStatus": "OPEN",
            "pullRequestTargets": [
                {
                    "repositoryName": "payments-api",
                    "sourceReference": f"refs/heads/{source}",
                    "destinationReference": "refs/heads/develop",
                }
            ],
        }
    )


@pytest.fixture
def repo(ctx: AppContext) -> AppContext:
    """Context sitting on a convention branch of a CodeCommit repository."""
    ctx.aws.get_region.return_value = "eu-west-1"
    ctx.git.remote_url.return_value = "codecommit::eu-west-1://payments-api"
    ctx.git.current_branch.return_value = BRANCH
    ctx.git.config_value.return_value = None
    return ctx


@pytest.mark.unit
class TestResolveTitle:
    """Tests for resolve_title."""

    @pytest.mark.asyncio
    async def test_explicit_title_skips_lookups(self, ctx: AppContext, prompter) -> None:
        assert await resolve_title(ctx, "My title", BRANCH) == "My title"

        ctx.tp.get_assignable.assert_not_awaited()
        assert prompter.asked == []

    @pytest.mark.asyncio
    async def test_ticket_name(self, ctx: AppContext, make_assignable) -> None:
        ctx.tp.get_assignable.return_value = make_assignable(name="Translate report types")

        assert await resolve_title(ctx, None, BRANCH) == "Translate report types"

    @pytest.mark.asyncio
    async def test_falls_back_to_branch(self, ctx: AppContext) -> None:
        ctx.tp.get_assignable.side_effect = AssignableNotFoundError("gone")

        title = await resolve_title(ctx, None, BRANCH)

        assert title == "Translate report type payout transactions"

    @pytest.mark.asyncio
    async def test_prompts_last(self, ctx: AppContext, prompter) -> None:
        prompter.texts = ["Typed title"]

        assert await resolve_title(ctx, None, "feature/123") == "Typed title"


@pytest.mark.unit
class TestCreatePullRequest:
    """Tests for create_pull_request."""

    @pytest.mark.asyncio
    async def test_creates_with_ticket_link(self, repo: AppContext, output) -> None:
        repo.aws.create_pull_request.return_value = _pr()

        pr = await create_pull_request(repo, title="Add export")

        assert pr is not None
        repo.aws.create_pull_request.assert_awaited_once_with(
            "payments-api",
            "Add export",
            "See: https://company.tpondemand.com/entity/115068",
            BRANCH,
            "develop",
        )
        assert any("pull-requests/42/details" in line for line in output.lines)

    @pytest.mark.asyncio
    async def test_declined(self, repo: AppContext, prompter, output) -> None:
        prompter.confirms = [False]

        assert await create_pull_request(repo, title="x", description="y") is None
        repo.aws.create_pull_request.assert_not_awaited()
        assert output.lines[-1] == "Operation aborted."

    @pytest.mark.asyncio
    async def test_dry_run_stops_after_recap(self, repo: AppContext, output) -> None:
        repo.dry_run = True

        assert await create_pull_request(repo, title="x", description="y") is None
        repo.aws.create_pull_request.assert_not_awaited()
        assert any(line.startswith("Repository:") for line in output.lines)

    @pytest.mark.asyncio
    async def test_ai_description(self, repo: AppContext, make_assignable) -> None:
        repo.settings = replace(repo.settings, groq_api_key="gsk_x")
        repo.git.log_subjects.return_value = ["feat(115068): translate"]
        repo.tp.get_assignable.return_value = make_assignable()
        ai = repo.ai_factory.return_value
        ai.complete_json = AsyncMock(
            return_value=PullRequestDraft(title="t", description="## Summary\nTranslate")
        )
        repo.aws.create_pull_request.return_value = _pr()

        await create_pull_request(repo, title="x", use_ai=True)

        assert repo.aws.create_pull_request.await_args.args[2] == "## Summary\nTranslate"
        repo.git.log_subjects.assert_awaited_once_with("origin/develop", BRANCH)

    @pytest.mark.asyncio
    async def test_ai_failure_falls_back(self, repo: AppContext, output) -> None:
        repo.settings = replace(repo.settings, groq_api_key="gsk_x")
        repo.git.log_subjects.return_value = []
        repo.ai_factory.return_value.complete_json = AsyncMock(side_effect=AIResponseError("bad"))
        repo.aws.create_pull_request.return_value = _pr()

        await create_pull_request(repo, title="x", use_ai=True)

        assert repo.aws.create_pull_request.await_args.args[2].startswith("See: ")
        assert output.warnings

    @pytest.mark.asyncio
    async def test_slack_notification(self, repo: AppContext, prompter) -> None:
        repo.aws.create_pull_request.return_value = _pr()
        prompter.selections = [1]

        await create_pull_request(repo, title="Add export", slack=True)

        message = repo.slack.send.await_args.args[0]
        text = message.to_payload()["blocks"][0]["text"]["text"]
        assert text.startswith("<@U1> opened a PR to: <@U3> - `payments-api`")

    @pytest.mark.asyncio
    async def test_slack_failure_is_warning(self, repo: AppContext, output) -> None:
        repo.aws.create_pull_request.return_value = _pr()
        repo.slack.send.side_effect = SlackError("down")

        pr = await create_pull_request(repo, title="Add export", slack=True)

        assert pr is not None
        assert any("Slack" in w for w in output.warnings)

    @pytest.mark.asyncio
    async def test_ai_commit_listing_failure_is_warning(self, repo: AppContext, output) -> None:
        repo.settings = replace(repo.settings, groq_api_key="gsk_x")
        repo.git.log_subjects.side_effect = GitError("unknown revision origin/develop")
        repo.tp.get_assignable.side_effect = AssignableNotFoundError("gone")
        ai = repo.ai_factory.return_value
        ai.complete_json = AsyncMock(
            return_value=PullRequestDraft(title="t", description="## Summary\nTranslate")
        )
        repo.aws.create_pull_request.return_value = _pr()

        pr = await create_pull_request(repo, title="x", use_ai=True)

        assert pr is not None
        assert repo.aws.create_pull_request.await_args.args[2] == "## Summary\nTranslate"
        assert any("Unable to list commits" in w for w in output.warnings)
        ai.complete_json.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_spinner_and_copy(self, repo: AppContext, output) -> None:
        repo.aws.create_pull_request.return_value = _pr()

        await create_pull_request(repo, title="Add export", copy=True)

        assert output.spinners == ["Creating PR ..."]
        assert output.clipboard == [LINK]
        assert click.unstyle(output.lines[-1]) == f"Link to clipboard: {LINK}"

    @pytest.mark.asyncio
    async def test_copy_without_clipboard_warns(self, repo: AppContext, output) -> None:
        repo.aws.create_pull_request.return_value = _pr()
        output.clipboard_available = False

        pr = await create_pull_request(repo, title="Add export", copy=True)

        assert pr is not None
        assert output.clipboard == []
        assert any("Clipboard is not available" in w for w in output.warnings)


@pytest.mark.unit
class TestViewAndList:
    """Tests for view_pull_request and list_pull_requests."""

    @pytest.mark.asyncio
    async def test_view_finds_current_branch(self, repo: AppContext, output) -> None:
        repo.aws.list_pull_requests.return_value = ["1", "42"]
        repo.aws.get_pull_request.side_effect = lambda i: {
            "1": _pr("1", source="feature/1_other"),
            "42": _pr("42"),
        }[i]

        await view_pull_request(repo)

        assert output.lines[0] == "[42] Add export - (OPEN)"

    @pytest.mark.asyncio
    async def test_view_not_found(self, repo: AppContext) -> None:
        repo.aws.list_pull_requests.return_value = ["1"]
        repo.aws.get_pull_request.return_value = _pr("1", source="feature/1_other")

        with pytest.raises(PullRequestNotFoundError):
            await view_pull_request(repo)

    @pytest.mark.asyncio
    async def test_view_web(self, repo: AppContext) -> None:
        repo.aws.get_pull_request.return_value = _pr()

        await view_pull_request(repo, "42", web=True)

        repo.open_url.assert_called_once()
        assert repo.open_url.call_args.args[0].endswith("/pull-requests/42/details")

    @pytest.mark.asyncio
    async def test_view_copy_url(self, repo: AppContext, output) -> None:
        repo.aws.get_pull_request.return_value = _pr()

        await view_pull_request(repo, "42", copy_url=True)

        assert output.clipboard == [LINK]
        assert click.unstyle(output.lines[0]) == f"Link to clipboard: {LINK}"

    @pytest.mark.asyncio
    async def test_view_copy_markdown_link(self, repo: AppContext, output) -> None:
        repo.aws.get_pull_request.return_value = _pr()

        await view_pull_request(repo, "42", copy_url=True, markdown=True)

        assert output.clipboard == [f"[42: Add export]({LINK})"]
        repo.open_url.assert_not_called()

    @pytest.mark.asyncio
    async def test_list_mine(self, repo: AppContext, output) -> None:
        repo.aws.list_pull_requests.return_value = ["1", "2"]
        repo.aws.get_pull_request.side_effect = lambda i: _pr(i, title=f"PR {i}")

        count = await list_pull_requests(repo, PullRequestStatus.OPEN)

        assert count == 2
        repo.aws.list_pull_requests.assert_awaited_once_with(
            "payments-api", PullRequestStatus.OPEN, author_arn=repo.config.arn
        )
        assert sorted(
            click.unstyle(line) for line in output.lines if line.startswith("[")
        ) == [
            "[OPEN] 1 - PR 1",
            "[OPEN] 2 - PR 2",
        ]

    @pytest.mark.asyncio
    async def test_list_empty(self, repo: AppContext, output) -> None:
        repo.aws.list_pull_requests.return_value = []

        assert await list_pull_requests(repo) == 0
        assert output.lines == ["No pull requests found"]


@pytest.mark.unit
class TestMergePullRequest:
    """Tests for merge_pull_request."""

    @pytest.mark.asyncio
    async def test_full_merge(self, repo: AppContext, make_assignable) -> None:
        repo.aws.get_pull_request.return_value = _pr()
        repo.tp.get_assignable.return_value = make_assignable()

        await merge_pull_request(repo, "42", delete_branch=True)

        repo.aws.merge_pull_request_by_squash.assert_awaited_once_with(
            "42",
            "payments-api",
            "See: https://company.tpondemand.com/entity/115068",
            "Jane Doe",
            "jane@example.com",
        )
        repo.git.delete_remote_branch.assert_awaited_once_with("origin", BRANCH)
        repo.git.fetch.assert_awaited_once_with(prune=True)
        repo.tp.update_entity_state.assert_awaited_once_with(115068, EntityState.IN_STAGING)

    @pytest.mark.asyncio
    async def test_slow_steps_show_spinners(
        self, repo: AppContext, output, make_assignable
    ) -> None:
        repo.aws.get_pull_request.return_value = _pr()
        repo.tp.get_assignable.return_value = make_assignable()

        await merge_pull_request(repo, "42", delete_branch=True)

        assert output.spinners == [
            "Squashing 42...",
            "Deleting branch...",
            "Updating ticket status..",
        ]

    @pytest.mark.asyncio
    async def test_git_identity_and_answers(
        self, repo: AppContext, prompter, make_assignable
    ) -> None:
        repo.aws.get_pull_request.return_value = _pr()
        repo.git.config_value.side_effect = lambda key: {
            "user.name": "Git Name",
            "user.email": "git@example.com",
        }[key]
        repo.tp.get_assignable.return_value = make_assignable(entity_type="Bug")
        prompter.confirms = [True, True, False]

        await merge_pull_request(repo, "42", commit_message="feat(115068): translate")

        args = repo.aws.merge_pull_request_by_squash.await_args.args
        assert args[2:] == ("feat(115068): translate", "Git Name", "git@example.com")
        repo.git.delete_remote_branch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_explicit_author_wins(self, repo: AppContext) -> None:
        repo.aws.get_pull_request.return_value = _pr()
        repo.git.config_value.return_value = "Git Name"

        await merge_pull_request(repo, "42", author="Release Bot", delete_branch=False)

        assert repo.aws.merge_pull_request_by_squash.await_args.args[3] == "Release Bot"

    @pytest.mark.asyncio
    async def test_first_confirmation_declined(self, repo: AppContext, prompter, output) -> None:
        repo.aws.get_pull_request.return_value = _pr()
        prompter.confirms = [False]

        assert await merge_pull_request(repo, "42") is None
        repo.aws.merge_pull_request_by_squash.assert_not_awaited()
        assert output.lines[-1] == "Operation aborted."

    @pytest.mark.asyncio
    async def test_bug_status_skipped(self, repo: AppContext, make_assignable) -> None:
        repo.aws.get_pull_request.return_value = _pr()
        repo.tp.get_assignable.return_value = make_assignable(entity_type="Bug")

        await merge_pull_request(repo, "42", delete_branch=False)

        repo.tp.update_entity_state.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_ticket_lookup_failure_is_warning(self, repo: AppContext, output) -> None:
        repo.aws.get_pull_request.return_value = _pr()
        repo.tp.get_assignable.side_effect = AssignableNotFoundError("gone")

        merged = await merge_pull_request(repo, "42", delete_branch=False)

        assert merged is not None
        assert any("ticket status" in w for w in output.warnings)
