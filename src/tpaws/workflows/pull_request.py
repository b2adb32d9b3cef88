"""Pull request workflows on AWS CodeCommit."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import click
from tqdm import tqdm

from tpaws import conventions
from tpaws.ai import AIError, PullRequestDraft, pull_request_prompt
from tpaws.aws import PullRequest, PullRequestStatus, build_pr_link
from tpaws.git import GitError
from tpaws.slack import SlackError, pull_request_message
from tpaws.target_process import Assignable, TargetProcessError
from tpaws.workflows.exceptions import PullRequestNotFoundError, WorkflowError
from tpaws.workflows.ticket import ABORTED, move_to_staging

if TYPE_CHECKING:
    from tpaws.workflows.context import AppContext

logger = logging.getLogger("tpaws.workflows")

DEFAULT_BASE = "develop"
REMOTE = "origin"


@dataclass
class RepoMetadata:
    region: str
    repository: str
    branch: str


async def repo_metadata(ctx: AppContext) -> RepoMetadata:
    """Region, CodeCommit repository and current branch, looked up concurrently."""
    region, remote_url, branch = await asyncio.gather(
        ctx.aws.get_region(),
        ctx.git.remote_url(REMOTE),
        ctx.git.current_branch(),
    )
    repository = conventions.repository_from_remote(remote_url)
    if not repository:
        raise WorkflowError(f"Unable to extract the repository name from '{remote_url}'")
    return RepoMetadata(region=region, repository=repository, branch=branch)


async def _branch_ticket(ctx: AppContext, branch: str) -> Assignable | None:
    """Ticket of a convention branch; lookup failures are logged and ignored."""
    ticket_id = conventions.ticket_id_from_branch(branch)
    if ticket_id is None or not ctx.tp_configured:
        return None
    try:
        return await ctx.tp.get_assignable(ticket_id)
    except TargetProcessError as e:
        logger.info("Unable to fetch ticket #%s for %s: %s", ticket_id, branch, e)
        return None


async def resolve_title(ctx: AppContext, title: str | None, branch: str) -> str:
    """Pull request title.

    An explicit title wins without any lookup. Otherwise the ticket name of a
    convention branch, then a title derived from the branch name, then a prompt.
    """
    if title:
        return title
    ticket = await _branch_ticket(ctx, branch)
    if ticket is not None:
        return ticket.name
    derived = conventions.branch_to_title(branch)
    if derived:
        return derived
    return ctx.prompter.text("Title")


async def _commit_subjects(ctx: AppContext, base: str, branch: str) -> list[str]:
    try:
        return await ctx.git.log_subjects(f"{REMOTE}/{base}", branch)
    except GitError as e:
        ctx.warn(f"Unable to list commits since {REMOTE}/{base}: {e}")
        return []


async def resolve_description(
    ctx: AppContext,
    description: str | None,
    branch: str,
    base: str,
    use_ai: bool = False,
    ai_model: str | None = None,
) -> str:
    if description:
        return description

    ticket_id = conventions.ticket_id_from_branch(branch)
    ticket_link = ctx.ticket_link(ticket_id) if ticket_id and ctx.settings.tp_url else None

    if use_ai:
        commits = await _commit_subjects(ctx, base, branch)
        try:
            ticket = await _branch_ticket(ctx, branch)
            draft = await ctx.ensure_ai(ai_model).complete_json(
                pull_request_prompt(branch, commits, ticket, ticket_link), PullRequestDraft
            )
        except AIError as e:
            ctx.warn(f"AI description failed: {e}")
        else:
            return draft.description

    if ticket_link:
        return f"See: {ticket_link}"
    return ctx.prompter.text("Description", default="")


def markdown_link(pr: PullRequest, link: str) -> str:
    return f"[{pr.pull_request_id}: {pr.title}]({link})"


def copy_link(ctx: AppContext, link: str, text: str | None = None) -> bool:
    """Put ``text`` (default: the link) on the clipboard; warn when there is none."""
    if not ctx.copy(text or link):
        ctx.warn("Clipboard is not available, copy the link above by hand")
        return False
    ctx.echo(f"Link to clipboard: {click.style(link, fg='blue')}")
    return True


async def create_pull_request(
    ctx: AppContext,
    title: str | None = None,
    description: str | None = None,
    base: str = DEFAULT_BASE,
    slack: bool = False,
    use_ai: bool = False,
    ai_model: str | None = None,
    copy: bool = False,
) -> PullRequest | None:
    """Open a pull request from the current branch into ``base``.

    With ``copy`` the new pull request's link goes to the clipboard.

    Returns:
        The created pull request, or None when aborted or in dry-run mode.
    """
    meta = await repo_metadata(ctx)
    title = await resolve_title(ctx, title, meta.branch)
    description = await resolve_description(
        ctx, description, meta.branch, base, use_ai=use_ai, ai_model=ai_model
    )

    ctx.echo("")
    ctx.echo("Check the details below before proceeding:")
    ctx.echo("")
    ctx.echo(f"Title: {click.style(title, fg='yellow')}")
    ctx.echo(f"Description: {click.style(description.strip(), fg='yellow')}")
    ctx.echo(f"Source Branch: {click.style(meta.branch, fg='yellow')}")
    ctx.echo(f"Target Branch: {click.style(base, fg='yellow')}")
    ctx.echo(f"Repository: {click.style(meta.repository, fg='yellow')}")
    ctx.echo("")

    if not ctx.prompter.confirm("Do you confirm?", default=False):
        ctx.echo(ABORTED)
        return None
    if ctx.dry_run:
        return None

    with ctx.status("Creating PR ..."):
        pr = await ctx.aws.create_pull_request(
            meta.repository, title, description, meta.branch, base
        )
    link = build_pr_link(meta.region, meta.repository, pr.pull_request_id)
    ctx.echo(f"PR Available at: {click.style(link, fg='blue')}")
    if copy:
        copy_link(ctx, link)

    if slack:
        await notify_reviewer(ctx, pr, meta, link)
    return pr


async def notify_reviewer(
    ctx: AppContext, pr: PullRequest, meta: RepoMetadata, pr_link: str
) -> None:
    """Ping a reviewer on Slack. The pull request already exists, so failures only warn."""
    author = ctx.settings.slack_user_id
    if not author:
        ctx.warn("SLACK_USER_ID is not set, skipping Slack notification")
        return
    reviewers = ctx.config.reviewers
    if not reviewers:
        ctx.warn("No reviewers configured, skipping Slack notification")
        return

    reviewer = reviewers[ctx.prompter.select("Who is your reviewer?", [r.name for r in reviewers])]
    ctx.echo(f"Reviewer: {click.style(reviewer.name, fg='yellow')}")

    ticket_id = conventions.ticket_id_from_branch(meta.branch)
    ticket_link = ctx.ticket_link(ticket_id) if ticket_id and ctx.settings.tp_url else None
    message = pull_request_message(
        author_slack_id=author,
        reviewer=reviewer,
        repository=meta.repository,
        pull_request_id=pr.pull_request_id,
        title=pr.title,
        pr_link=pr_link,
        ticket_link=ticket_link,
    )
    try:
        with ctx.status("Sending slack message"):
            await ctx.slack.send(message)
    except SlackError as e:
        ctx.warn(f"Slack notification failed: {e}")
        return
    ctx.echo("Slack message sent")


async def _fetch_pull_requests(ctx: AppContext, pull_request_ids: list[str]) -> list[PullRequest]:
    return list(await asyncio.gather(*(ctx.aws.get_pull_request(i) for i in pull_request_ids)))


async def find_pull_request(
    ctx: AppContext, pull_request_id: str | None, meta: RepoMetadata
) -> PullRequest:
    """Pull request by ID, or the open one whose source is the current branch.

    Raises:
        PullRequestNotFoundError: If no open pull request comes from the branch.
    """
    if pull_request_id:
        return await ctx.aws.get_pull_request(pull_request_id)

    ids = await ctx.aws.list_pull_requests(meta.repository, PullRequestStatus.OPEN)
    for pr in await _fetch_pull_requests(ctx, ids):
        if pr.has_source_branch(meta.branch):
            return pr
    raise PullRequestNotFoundError(f"No open pull request found for branch '{meta.branch}'")


async def view_pull_request(
    ctx: AppContext,
    pull_request_id: str | None = None,
    web: bool = False,
    as_json: bool = False,
    copy_url: bool = False,
    markdown: bool = False,
) -> None:
    """Show a pull request, open it in the browser or copy its link.

    With ``markdown`` the copied text is ``[id: title](link)``.
    """
    meta = await repo_metadata(ctx)
    pr = await find_pull_request(ctx, pull_request_id, meta)
    link = build_pr_link(meta.region, meta.repository, pr.pull_request_id)

    if copy_url:
        copy_link(ctx, link, markdown_link(pr, link) if markdown else None)
    elif as_json:
        ctx.echo(pr.model_dump_json(by_alias=True, indent=2))
    elif web:
        ctx.echo(f'Opening "{click.style(pr.title, fg="yellow")}"...')
        ctx.open_url(link)
    else:
        ctx.echo(f"[{pr.pull_request_id}] {pr.title} - ({pr.pull_request_status})")
        ctx.echo("")
        ctx.echo(click.style(link, fg="blue"))


async def list_pull_requests(
    ctx: AppContext, status: PullRequestStatus = PullRequestStatus.OPEN
) -> int:
    """Print my pull requests as their details arrive.

    Returns:
        Number of pull requests printed.
    """
    meta = await repo_metadata(ctx)
    ids = await ctx.aws.list_pull_requests(meta.repository, status, author_arn=ctx.config.arn)
    if not ids:
        ctx.echo("No pull requests found")
        return 0

    printed = 0
    tasks = [ctx.aws.get_pull_request(i) for i in ids]
    for future in tqdm(asyncio.as_completed(tasks), total=len(tasks), disable=len(tasks) <= 1):
        pr = await future
        link = build_pr_link(meta.region, meta.repository, pr.pull_request_id)
        status_label = click.style(str(pr.pull_request_status), fg="yellow", bold=True)
        ctx.echo(
            f"[{status_label}] {click.style(pr.pull_request_id, fg='green')} - {pr.title.strip()}"
        )
        ctx.echo(f"\t- {click.style(link, fg='blue')}")
        printed += 1
    return printed


async def merge_pull_request(
    ctx: AppContext,
    pull_request_id: str | None = None,
    author: str | None = None,
    commit_message: str | None = None,
    delete_branch: bool | None = None,
) -> PullRequest | None:
    """Squash merge a pull request, then tidy the branch and the ticket.

    Args:
        ctx: Application context.
        pull_request_id: Pull request to merge; defaults to the current branch's.
        author: Author name for the squash commit.
        commit_message: Squash commit message; defaults to the PR description.
        delete_branch: Delete the source branch afterwards. None asks.
    """
    meta = await repo_metadata(ctx)
    pr = await find_pull_request(ctx, pull_request_id, meta)
    link = build_pr_link(meta.region, meta.repository, pr.pull_request_id)

    ctx.echo("Found 1 matching PR")
    ctx.echo("")
    ctx.echo(click.style(f"[{pr.pull_request_id}] {pr.title}", fg="yellow"))
    if pr.description:
        ctx.echo(click.style(pr.description, fg="yellow"))
    ctx.echo(click.style(link, fg="blue"))
    ctx.echo("")
    for target in pr.targets:
        ctx.echo(f"From: {click.style(target.source_branch, fg='magenta')}")
        ctx.echo(f"To:   {click.style(target.destination_branch, fg='magenta')}")
        ctx.echo("")

    if not ctx.prompter.confirm("Are the info above correct?", default=False):
        ctx.echo(ABORTED)
        return None

    git_name, git_email = await asyncio.gather(
        ctx.git.config_value("user.name"), ctx.git.config_value("user.email")
    )
    name = ctx.prompter.text("Author Name", default=author or git_name or ctx.config.pr_name)
    email = ctx.prompter.text("Author Email", default=git_email or ctx.config.pr_email)
    message = ctx.prompter.text(
        "Commit Message", default=commit_message or pr.description or pr.title
    )

    if not ctx.prompter.confirm("Confirm?", default=False):
        ctx.echo(ABORTED)
        return None
    if ctx.dry_run:
        ctx.echo(f"Would squash merge {pr.pull_request_id} as {name} <{email}>")
        return None

    with ctx.status(f"Squashing {pr.pull_request_id}..."):
        merged = await ctx.aws.merge_pull_request_by_squash(
            pr.pull_request_id, meta.repository, message, name, email
        )
    ctx.echo(f"Squashed {pr.pull_request_id}")

    source = pr.targets[0].source_branch if pr.targets else meta.branch
    if delete_branch is None:
        delete_branch = ctx.prompter.confirm("Delete remote branch?", default=True)
    if delete_branch:
        with ctx.status("Deleting branch..."):
            await ctx.git.delete_remote_branch(REMOTE, source)
            await ctx.git.fetch(prune=True)
        ctx.echo(f"Deleted {REMOTE}/{source}")

    await _update_ticket_after_merge(ctx, source)
    return merged


async def _update_ticket_after_merge(ctx: AppContext, branch: str) -> None:
    ticket_id = conventions.ticket_id_from_branch(branch)
    if ticket_id is None:
        ctx.warn("Failed to update ticket status: no ticket id in the branch name")
        return
    with ctx.status("Updating ticket status.."):
        try:
            ticket = await ctx.tp.get_assignable(ticket_id)
        except TargetProcessError as e:
            ctx.warn(f"Failed to update ticket status: {e}")
            return
        if not ticket.is_user_story:
            ctx.echo(f"Ticket status update skipped for #{ticket.id}")
            return
        await move_to_staging(ctx, ticket)
