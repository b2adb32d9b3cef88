"""Async subprocess execution with typed failures."""

from __future__ import annotations

import asyncio
import json
import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from tpaws.logging import sanitize_for_log, truncate_output
from tpaws.shell.exceptions import CommandFailedError, CommandNotFoundError, CommandOutputError

logger = logging.getLogger("tpaws.shell")


@dataclass
class CommandResult:
    """Captured result of a finished command.

    Attributes:
        argv: The argument vector that was executed.
        returncode: Process exit status.
        stdout: Decoded, stripped standard output.
        stderr: Decoded, stripped standard error.
    """

    argv: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def is_installed(program: str) -> bool:
    """Check whether a program is available on PATH."""
    return shutil.which(program) is not None


async def run(
    *argv: str,
    cwd: str | Path | None = None,
    check: bool = True,
) -> CommandResult:
    """Run a command and capture its output.

    Args:
        *argv: Program and arguments.
        cwd: Working directory for the command.
        check: Raise CommandFailedError on a non-zero exit status.

    Returns:
        CommandResult with decoded, stripped output.

    Raises:
        CommandNotFoundError: If the program cannot be found.
        CommandFailedError: If check is set and the command fails.
    """
    args = list(argv)
    logger.debug("$ %s", sanitize_for_log(" ".join(args)))
    try:
        process = await asyncio.create_subprocess_exec(
            *args,
            cwd=cwd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as e:
        raise CommandNotFoundError(args[0]) from e

    stdout_bytes, stderr_bytes = await process.communicate()
    returncode = process.returncode if process.returncode is not None else -1
    result = CommandResult(
        argv=args,
        returncode=returncode,
        stdout=stdout_bytes.decode("utf-8", errors="replace").strip(),
        stderr=stderr_bytes.decode("utf-8", errors="replace").strip(),
    )

    if not result.ok:
        logger.debug(
            "%s exited with %d: %s",
            args[0],
            returncode,
            truncate_output(sanitize_for_log(result.stderr)),
        )
        if check:
            raise CommandFailedError(args, returncode, result.stderr)

    return result


async def run_json(*argv: str, cwd: str | Path | None = None) -> Any:
    """Run a command and parse its stdout as JSON.

    Raises:
        CommandOutputError: If stdout is not valid JSON.
    """
    result = await run(*argv, cwd=cwd)
    try:
        return json.loads(result.stdout)
    except json.JSONDecodeError as e:
        raise CommandOutputError(result.argv, result.stdout, str(e)) from e


async def run_interactive(*argv: str, cwd: str | Path | None = None) -> int:
    """Run a command attached to the current terminal (e.g. ``aws sso login``).

    Returns:
        The exit status.
    """
    args = list(argv)
    logger.debug("$ %s (interactive)", " ".join(args))
    try:
        process = await asyncio.create_subprocess_exec(*args, cwd=cwd)
    except FileNotFoundError as e:
        raise CommandNotFoundError(args[0]) from e
    return await process.wait()
