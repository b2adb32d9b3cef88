"""Custom exceptions for the subprocess runner."""

from __future__ import annotations


class ShellError(Exception):
    """Base exception for subprocess errors."""


class CommandNotFoundError(ShellError):
    """The program is not installed or not on PATH."""

    def __init__(self, program: str) -> None:
        super().__init__(f"{program} is not in your path")
        self.program = program


class CommandFailedError(ShellError):
    """The command exited with a non-zero status."""

    def __init__(self, argv: list[str], returncode: int, stderr: str) -> None:
        message = stderr.strip() or f"exit status {returncode}"
        super().__init__(f"`{' '.join(argv[:3])}` failed: {message}")
        self.argv = argv
        self.returncode = returncode
        self.stderr = stderr


class CommandOutputError(ShellError):
    """The command succeeded but its output could not be parsed."""

    def __init__(self, argv: list[str], output: str, reason: str) -> None:
        super().__init__(f"Unable to parse output of `{' '.join(argv[:3])}`: {reason}")
        self.argv = argv
        self.output = output
