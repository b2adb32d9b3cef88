"""Console output helpers and the crash report writer."""

from __future__ import annotations

import platform
import sys
import tempfile
import traceback
from datetime import datetime
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

import click

CRASH_EXIT_CODE = 101
ERROR_EXIT_CODE = 1


def package_version() -> str:
    try:
        return version("tpaws")
    except PackageNotFoundError:
        return "unknown"


def error(message: str) -> None:
    click.secho(f"Error: {message}", fg="red", err=True)


def write_crash_report(exc: BaseException, argv: list[str] | None = None) -> Path:
    """Write a crash report with the traceback to the temp dir.

    Returns:
        Path of the report.
    """
    stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    path = Path(tempfile.gettempdir()) / f"tpaws-crash-{stamp}.txt"
    lines = [
        f"tpaws {package_version()}",
        f"python {sys.version.split()[0]} on {platform.platform()}",
        f"argv: {' '.join(argv if argv is not None else sys.argv)}",
        "",
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
    ]
    path.write_text("\n".join(lines), encoding="utf-8")
    return path


def report_crash(exc: BaseException) -> None:
    path = write_crash_report(exc)
    click.secho("tpaws crashed unexpectedly. This is a bug.", fg="red", err=True)
    click.echo(f"A crash report was written to {path}", err=True)
