"""Ticket workflows: pick up, finish and inspect TargetProcess tickets."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tpaws import conventions
from tpaws.ai import CommitMessage, commit_message_prompt
from tpaws.config import ProjectConfig
from tpaws.target_process import Assignable, EntityState, Project, TargetProcessError
from tpaws.workflows.exceptions import (
    ProjectNotResolvedError,
    TicketIdNotFoundError,
    WorkflowError,
)
from tpaws.workflows.render import render_description

if TYPE_CHECKING:
    from tpaws.workflows.context import AppContext

logger = logging.getLogger("tpaws.workflows")

ABORTED = "Operation aborted."
NO_TICKETS = "No tickets are available, please provide an id"

# States a ticket can be picked up from
STARTABLE_STATES = frozenset({EntityState.OPEN, EntityState.PLANNED})


async def resolve_ticket_id(ctx: AppContext, id_or_url: str | None) -> str:
    """Ticket ID from an argument, or from the current branch when omitted.

    Raises:
        TicketIdNotFoundError: If nothing resolves to a ticket ID.
    """
    if id_or_url:
        ticket_id = conventions.resolve_ticket_id(id_or_url)
        if ticket_id is None:
            raise TicketIdNotFoundError(f"Invalid ticket id or url: {id_or_url}")
        return ticket_id

    branch = await ctx.git.current_branch()
    ticket_id = conventions.ticket_id_from_branch(branch)
    if ticket_id is None:
        raise TicketIdNotFoundError(f"Unable to extract a ticket id from branch '{branch}'")
    return ticket_id


async def fetch_ticket(ctx: AppContext, id_or_url: str | None) -> Assignable:
    ticket_id = await resolve_ticket_id(ctx, id_or_url)
    return await ctx.tp.get_assignable(ticket_id)


def resolve_project(ctx: AppContext, project: str | None) -> str:
    """Project name from the project config, then from ``--project``.

    Raises:
        ProjectNotResolvedError: If neither is available.
    """
    if ctx.project is not None and ctx.project.name:
        return ctx.project.name
    if project:
        return project
    raise ProjectNotResolvedError("Unable to extract project")


def _ticket_label(ticket: Assignable) -> str:
    return f"#{ticket.id} {ticket.name} [{ticket.entity_type.name}]"


async def start_ticket(
    ctx: AppContext,
    id_or_url: str | None = None,
    branch: str | None = None,
    no_git: bool = False,
    no_assign: bool = False,
    project: str | None = None,
) -> Assignable | None:
    """Assign a ticket, mark it in progress and start its feature branch.

    The open tickets of the project's current sprint are always fetched; they
    are offered for selection when no ID is given. A ticket in a state tpaws
    does not know raises UnknownEntityStateError.

    Returns:
        The started ticket, or None when there was nothing to start.
    """
    project_name = resolve_project(ctx, project)
    tasks = await ctx.tp.get_current_sprint_open_tasks(project_name)
    candidates = [
        task
        for task in tasks
        if task.state in STARTABLE_STATES and task.name.strip()
    ]

    if id_or_url is None:
        if not candidates:
            ctx.echo(NO_TICKETS)
            return None
        index = ctx.prompter.select(
            "Which ticket do you want to start?", [_ticket_label(t) for t in candidates]
        )
        id_or_url = str(candidates[index].id)

    ticket = await fetch_ticket(ctx, id_or_url)
    feature = branch or ticket.branch_name

    if ctx.dry_run:
        ctx.echo(f"Would start #{ticket.id} {ticket.name} on feature/{feature}")
        return ticket

    if not no_assign:
        if not ctx.config.user_id:
            raise WorkflowError("Missing TargetProcess user id, run `tpaws config reset`")
        await ctx.tp.assign(ticket.id, ctx.config.user_id)
        if ticket.is_user_story:
            await ctx.tp.update_entity_state(ticket.id, EntityState.IN_PROGRESS)
        ctx.echo(f"Assigned #{ticket.id} to you")

    if not no_git:
        await ctx.git.flow_feature_start(feature)
        ctx.echo(f"Switched to feature/{feature}")

    return ticket


async def finish_ticket(
    ctx: AppContext,
    id_or_url: str | None = None,
    no_git: bool = False,
    no_status: bool = False,
) -> Assignable | None:
    """Finish the git-flow feature and move the ticket to staging."""
    ticket = await fetch_ticket(ctx, id_or_url)

    if not no_git:
        feature = conventions.feature_name(await ctx.git.current_branch())
        if not ctx.prompter.confirm(f"Finish feature '{feature}' for #{ticket.id}?"):
            ctx.echo(ABORTED)
            return None
        if ctx.dry_run:
            ctx.echo(f"Would run git flow feature finish {feature}")
            return ticket
        await ctx.git.flow_feature_finish(feature)
    elif ctx.dry_run:
        return ticket

    if not no_status and ticket.is_user_story:
        await move_to_staging(ctx, ticket)
    return ticket


async def move_to_staging(ctx: AppContext, ticket: Assignable) -> None:
    """Best effort: a failure only prints a warning."""
    try:
        await ctx.tp.update_entity_state(ticket.id, EntityState.IN_STAGING)
    except TargetProcessError as e:
        logger.warning("Failed to move #%s to staging: %s", ticket.id, e)
        ctx.warn(f"Unable to move #{ticket.id} to staging: {e}")
        return
    ctx.echo(f"#{ticket.id} moved to staging")


async def view_ticket(
    ctx: AppContext,
    id_or_url: str | None = None,
    as_json: bool = False,
    web: bool = False,
) -> None:
    ticket = await fetch_ticket(ctx, id_or_url)
    if web:
        link = ticket.link(ctx.settings.tp_url or "")
        ctx.echo(f'Opening "{ticket.name}"...')
        ctx.open_url(link)
        return
    if as_json:
        ctx.echo(ticket.model_dump_json(by_alias=True, indent=2))
        return
    ctx.echo(ticket.name)
    ctx.echo("=" * len(ticket.name))
    ctx.echo(render_description(ticket.description))


async def ticket_link(ctx: AppContext, id_or_url: str | None = None) -> str:
    ticket_id = await resolve_ticket_id(ctx, id_or_url)
    return ctx.ticket_link(ticket_id)


async def ticket_branch(ctx: AppContext, id_or_url: str | None = None) -> str:
    ticket = await fetch_ticket(ctx, id_or_url)
    return ticket.branch_name


async def ticket_project(ctx: AppContext, id_or_url: str | None = None) -> str:
    if id_or_url is None and ctx.project is not None and ctx.project.name:
        return ctx.project.name
    ticket = await fetch_ticket(ctx, id_or_url)
    if ticket.project is None:
        raise ProjectNotResolvedError(f"Ticket #{ticket.id} has no project")
    return ticket.project.name


async def generate_commit(
    ctx: AppContext,
    id_or_url: str | None = None,
    as_json: bool = False,
    title_only: bool = False,
) -> str:
    """Draft a conventional commit message for a ticket."""
    ticket = await fetch_ticket(ctx, id_or_url)
    ai = ctx.ensure_ai()
    commit = await ai.complete_json(commit_message_prompt(ticket), CommitMessage)
    logger.info("Generated commit message for #%s", ticket.id)

    if as_json:
        return commit.model_dump_json(indent=2)
    if title_only or not commit.description:
        return commit.message
    return f"{commit.message}\n\n{commit.description}"


async def init_project(ctx: AppContext, project: str | None = None, force: bool = False) -> None:
    """Bind the current repository to a TargetProcess project."""
    if ctx.project is not None and not force:
        ctx.echo("Project already initialized")
        return

    projects = await ctx.tp.get_projects()
    if not projects:
        raise ProjectNotResolvedError("No projects available in TargetProcess")

    chosen = _match_project(projects, project) if project else None
    if chosen is None:
        if project:
            ctx.warn(f"No project matches '{project}'")
        index = ctx.prompter.select(
            "Which project is this repository for?", [p.label for p in projects]
        )
        chosen = projects[index]

    config = ProjectConfig(project_id=chosen.id, name=chosen.name)
    if ctx.dry_run:
        ctx.echo(config.model_dump_json(indent=2))
        return
    config.write()
    ctx.project = config
    ctx.echo("Project initialized")


def _match_project(projects: list[Project], wanted: str) -> Project | None:
    wanted = wanted.strip().lower()
    for candidate in projects:
        names = {candidate.name.lower(), (candidate.abbreviation or "").lower()}
        if wanted in names:
            return candidate
    return None
