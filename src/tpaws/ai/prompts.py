"""Prompt builders for commit messages and pull request descriptions."""

from __future__ import annotations

from textwrap import dedent
from typing import TYPE_CHECKING

from tpaws.ai.models import ChatMessage

if TYPE_CHECKING:
    from tpaws.target_process import Assignable

COMMIT_SYSTEM_PROMPT = dedent(
    """
    You're an expert at writing commit messages.
    Given ID, title and content of a ticket, generate a commit message for it.

    The format should follow conventional commits:
        - "feat(<id>): <message>" -> user stories
        - "fix(<id>): <message>" -> bugs

    The commit message must be lowercased and in present tense.
    Don't just copy the title, provide a meaningful message.
    Add a longer description only when it helps.

    Return a JSON object with the following structure:
    {"message": "feat(123): add new feature", "description": "optional longer text"}
    """
).strip()

PR_SYSTEM_PROMPT = dedent(
    """
    You write pull request descriptions for code reviewers.
    Given the ticket (when available), the branch name and the commit subjects,
    write a short title and a markdown description with a summary of the change
    and a list of notable points. Do not invent changes that are not listed.

    Return a JSON object with the following structure:
    {"title": "Short title", "description": "Markdown description"}
    """
).strip()


def _ticket_block(assignable: Assignable) -> str:
    description = assignable.description or "No description provided"
    return dedent(
        f"""
        ID: {assignable.id}
        Title: {assignable.name}
        Type: {assignable.entity_type.name}
        Description:
        """
    ).strip() + f"\n{description}"


def commit_message_prompt(assignable: Assignable) -> list[ChatMessage]:
    return [ChatMessage.system(COMMIT_SYSTEM_PROMPT), ChatMessage.user(_ticket_block(assignable))]


def pull_request_prompt(
    branch: str,
    commits: list[str],
    assignable: Assignable | None = None,
    ticket_link: str | None = None,
) -> list[ChatMessage]:
    parts = [f"Branch: {branch}"]
    if assignable is not None:
        parts.append(_ticket_block(assignable))
    if ticket_link:
        parts.append(f"Ticket link: {ticket_link}")
    parts.append("Commits:")
    parts.extend(f"- {subject}" for subject in commits or ["(no commits)"])
    return [ChatMessage.system(PR_SYSTEM_PROMPT), ChatMessage.user("\n".join(parts))]
