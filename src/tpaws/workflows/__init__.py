"""Workflows - the sequences behind every CLI command."""

from tpaws.workflows.changelog import extract_ticket_ids, format_changelog, generate_changelog
from tpaws.workflows.config_reset import default_username, reset_config
from tpaws.workflows.context import AppContext, build_context
from tpaws.workflows.exceptions import (
    InputRequiredError,
    ProjectNotResolvedError,
    PullRequestNotFoundError,
    TicketIdNotFoundError,
    WorkflowError,
)
from tpaws.workflows.prompter import ClickPrompter, Prompter
from tpaws.workflows.pull_request import (
    create_pull_request,
    list_pull_requests,
    merge_pull_request,
    resolve_title,
    view_pull_request,
)
from tpaws.workflows.release import (
    DeployTarget,
    finish_release,
    push_release,
    show_pipeline,
    start_release,
)
from tpaws.workflows.render import html_to_text, render_description
from tpaws.workflows.ticket import (
    finish_ticket,
    generate_commit,
    init_project,
    resolve_ticket_id,
    start_ticket,
    ticket_branch,
    ticket_link,
    ticket_project,
    view_ticket,
)

__all__ = [
    "AppContext",
    "ClickPrompter",
    "DeployTarget",
    "InputRequiredError",
    "ProjectNotResolvedError",
    "Prompter",
    "PullRequestNotFoundError",
    "TicketIdNotFoundError",
    "WorkflowError",
    "build_context",
    "create_pull_request",
    "default_username",
    "extract_ticket_ids",
    "finish_release",
    "finish_ticket",
    "format_changelog",
    "generate_changelog",
    "generate_commit",
    "html_to_text",
    "init_project",
    "list_pull_requests",
    "merge_pull_request",
    "push_release",
    "render_description",
    "reset_config",
    "resolve_ticket_id",
    "resolve_title",
    "show_pipeline",
    "start_release",
    "start_ticket",
    "ticket_branch",
    "ticket_link",
    "ticket_project",
    "view_pull_request",
    "view_ticket",
]
