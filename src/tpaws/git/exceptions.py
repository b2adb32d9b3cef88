"""Custom exceptions for the git client."""


class GitError(Exception):
    """Base exception for git errors."""


class BranchError(GitError):
    """Error reading, creating or deleting branches."""


class RemoteError(GitError):
    """Error reading remotes or fetching."""


class PushError(GitError):
    """Error pushing to remote."""


class GitFlowError(GitError):
    """Error running a git-flow command."""
