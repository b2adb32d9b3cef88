"""Branch and ticket naming conventions.

Feature branches follow ``<type>/<ticketId>_<slug>`` (e.g.
``feature/115068_translate_report_type``) and ticket links follow
``https://<company>.tpondemand.com/entity/<id>-<slug>``. Every extractor here
returns ``None`` instead of guessing when the input does not match.
"""

from __future__ import annotations

import re

BRANCH_TICKET_RE = re.compile(r"\w+/(\d+)_.*")
TICKET_URL_RE = re.compile(r"https?://[\w.-]+(?::\d+)?/entity/(\d+)[\w+-]*(?:[/?#]\S*)?")
FIRST_DIGITS_RE = re.compile(r"\d+")

# Characters dropped from ticket names when building branch slugs
SLUG_DROPPED_CHARS = "()[]{},\"/.;:'-_"

HEADS_PREFIX = "refs/heads/"


def ticket_id_from_branch(branch: str) -> str | None:
    """Extract the ticket ID from a ``<segment>/<digits>_<rest>`` branch."""
    match = BRANCH_TICKET_RE.search(branch.strip())
    if match is None:
        return None
    return match.group(1)


def ticket_id_from_url(url: str) -> str | None:
    """Extract the ticket ID from a ``.../entity/<digits><slug>`` URL."""
    match = TICKET_URL_RE.fullmatch(url.strip())
    if match is None:
        return None
    return match.group(1)


def resolve_ticket_id(id_or_url: str) -> str | None:
    """Normalize a user supplied ticket reference to its numeric ID.

    Accepts a bare ID (``"123"``, ``"#123"``) or a ticket URL.
    """
    value = id_or_url.strip().lstrip("#")
    if value.isdigit():
        return value
    return ticket_id_from_url(value)


def feature_name(branch: str) -> str:
    """Last path segment of a branch (``feature/12_x`` -> ``12_x``)."""
    return branch.strip().rsplit("/", 1)[-1]


def branch_to_title(branch: str) -> str:
    """Turn a convention branch into a human title.

    >>> branch_to_title("feature/115068_translate_report_type_payout_transactions")
    'Translate report type payout transactions'
    """
    title = FIRST_DIGITS_RE.sub("", feature_name(branch), count=1)
    title = title.replace("_", " ").strip()
    if not title:
        return ""
    return title[0].upper() + title[1:]


def slugify_ticket_name(name: str) -> str:
    """Lowercase a ticket name, drop punctuation and join words with ``_``."""
    slug = "".join(ch for ch in name.lower() if ch not in SLUG_DROPPED_CHARS)
    return slug.replace(" ", "_")


def ticket_branch_name(ticket_id: int | str, name: str) -> str:
    """Branch name (without the git-flow type prefix) for a ticket."""
    return f"{ticket_id}_{slugify_ticket_name(name)}"


def repository_from_remote(url: str) -> str | None:
    """Repository name from a remote URL.

    Works for ``codecommit::eu-west-1://my-repo``,
    ``codecommit://profile@my-repo``,
    ``https://git-codecommit.eu-west-1.amazonaws.com/v1/repos/my-repo`` and
    ``git@host:org/my-repo.git``.
    """
    tail = re.split(r"[/:]", url.strip().rstrip("/"))[-1]
    tail = tail.rpartition("@")[2]
    if tail.endswith(".git"):
        tail = tail[: -len(".git")]
    return tail or None


def strip_heads(ref: str) -> str:
    """``refs/heads/feature/x`` -> ``feature/x``."""
    if ref.startswith(HEADS_PREFIX):
        return ref[len(HEADS_PREFIX) :]
    return ref
