"""Custom exceptions for workflow orchestration."""


class WorkflowError(Exception):
    """Base exception for workflow errors."""


class TicketIdNotFoundError(WorkflowError):
    """No ticket ID could be resolved from the argument or the current branch."""


class PullRequestNotFoundError(WorkflowError):
    """No pull request matches the request."""


class ProjectNotResolvedError(WorkflowError):
    """Neither the project config nor the arguments name a project."""


class InputRequiredError(WorkflowError):
    """A value must be typed in, but prompts are disabled."""
