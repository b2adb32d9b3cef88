"""CLI - the click command tree."""

from tpaws.cli.commands import main

__all__ = ["main"]
