"""Shell - async subprocess execution used by the git and aws adapters."""

from tpaws.shell.exceptions import (
    CommandFailedError,
    CommandNotFoundError,
    CommandOutputError,
    ShellError,
)
from tpaws.shell.process import CommandResult, is_installed, run, run_interactive, run_json

__all__ = [
    "CommandFailedError",
    "CommandNotFoundError",
    "CommandOutputError",
    "CommandResult",
    "ShellError",
    "is_installed",
    "run",
    "run_interactive",
    "run_json",
]
