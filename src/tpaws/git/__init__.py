"""Git client - git and git-flow operations."""

from tpaws.git.client import GitClient
from tpaws.git.exceptions import BranchError, GitError, GitFlowError, PushError, RemoteError

__all__ = [
    "BranchError",
    "GitClient",
    "GitError",
    "GitFlowError",
    "PushError",
    "RemoteError",
]
