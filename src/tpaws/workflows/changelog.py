"""Changelog generation from the tickets referenced in a commit range."""

from __future__ import annotations

import asyncio
import logging
import re
from typing import TYPE_CHECKING

from tqdm import tqdm

from tpaws.target_process import Assignable, AssignableNotFoundError

if TYPE_CHECKING:
    from tpaws.workflows.context import AppContext

logger = logging.getLogger("tpaws.workflows")

EMPTY_CHANGELOG = "Empty changelog :("

# feature/123_x, feat(123): and #123
TICKET_REF_RE = re.compile(r"\w+/(\d+)_|\w+\((\d+)\)!?:|#(\d+)\b")


def extract_ticket_ids(subjects: list[str]) -> list[str]:
    """Ticket IDs referenced by commit subjects, deduplicated in first-seen order."""
    seen: dict[str, None] = {}
    for subject in subjects:
        for match in TICKET_REF_RE.finditer(subject):
            ticket_id = next(group for group in match.groups() if group)
            seen.setdefault(ticket_id, None)
    return list(seen)


def format_changelog(
    tickets: list[Assignable],
    from_ref: str,
    to_ref: str,
    base_url: str,
    prefix: str = "#",
    plain: bool = False,
    title: bool = True,
) -> str:
    if not tickets:
        return EMPTY_CHANGELOG

    lines = [f"Changelog {from_ref}..{to_ref}", ""] if title else []
    for ticket in tickets:
        if plain:
            lines.append(f"- {prefix}{ticket.id} {ticket.name}")
        else:
            lines.append(f"- [{prefix}{ticket.id}]({ticket.link(base_url)}) {ticket.name}")
    return "\n".join(lines)


async def _fetch_all(ctx: AppContext, ticket_ids: list[str]) -> list[Assignable]:
    progress = tqdm(total=len(ticket_ids), desc="Tickets", disable=len(ticket_ids) <= 1)

    async def fetch(ticket_id: str) -> Assignable | None:
        try:
            return await ctx.tp.get_assignable(ticket_id)
        except AssignableNotFoundError:
            ctx.warn(f"Ticket #{ticket_id} not found, skipping")
            return None
        finally:
            progress.update(1)

    try:
        results = await asyncio.gather(*(fetch(ticket_id) for ticket_id in ticket_ids))
    finally:
        progress.close()
    return [ticket for ticket in results if ticket is not None]


async def generate_changelog(
    ctx: AppContext,
    from_ref: str,
    to_ref: str = "HEAD",
    project: str | None = None,
    prefix: str = "#",
    plain: bool = False,
    title: bool = True,
) -> str:
    """Changelog of the tickets mentioned between two refs.

    Args:
        ctx: Application context.
        from_ref: Exclusive start of the range (e.g. the previous tag).
        to_ref: Inclusive end of the range.
        project: Only keep tickets of this TargetProcess project.
        prefix: Text put before every ticket ID.
        plain: Plain text instead of markdown links.
        title: Start with a ``Changelog from..to`` line.
    """
    subjects = await ctx.git.log_subjects(from_ref, to_ref)
    ticket_ids = extract_ticket_ids(subjects)
    logger.info("Found %d tickets in %s..%s", len(ticket_ids), from_ref, to_ref)

    tickets = await _fetch_all(ctx, ticket_ids)
    if project:
        wanted = project.lower()
        tickets = [
            t
            for t in tickets
            if t.project is not None
            and wanted in {t.project.name.lower(), (t.project.abbreviation or "").lower()}
        ]

    return format_changelog(
        tickets,
        from_ref,
        to_ref,
        base_url=ctx.settings.tp_url or "",
        prefix=prefix,
        plain=plain,
        title=title,
    )
