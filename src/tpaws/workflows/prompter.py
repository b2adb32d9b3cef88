"""Interactive input, bypassed in quiet mode."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

import click

from tpaws.workflows.exceptions import InputRequiredError


class Prompter(Protocol):
    def confirm(self, message: str, default: bool = True) -> bool: ...

    def text(self, message: str, default: str | None = None) -> str: ...

    def select(self, message: str, choices: Sequence[str]) -> int: ...


class ClickPrompter:
    """Prompts through click.

    In quiet mode no question is asked: confirmations are accepted, text
    prompts return their default and selections fail.
    """

    def __init__(self, quiet: bool = False) -> None:
        self.quiet = quiet

    def confirm(self, message: str, default: bool = True) -> bool:
        if self.quiet:
            return True
        return click.confirm(message, default=default)

    def text(self, message: str, default: str | None = None) -> str:
        if self.quiet:
            if default is None:
                raise InputRequiredError(f"{message}: a value is required in quiet mode")
            return default
        value: str = click.prompt(message, default=default, show_default=bool(default))
        return value.strip()

    def select(self, message: str, choices: Sequence[str]) -> int:
        """Ask for one of ``choices`` and return its index."""
        if self.quiet:
            raise InputRequiredError(f"{message}: a selection is required in quiet mode")
        click.echo(message)
        for number, choice in enumerate(choices, start=1):
            click.echo(f"  {number}) {choice}")
        picked: int = click.prompt("Select", type=click.IntRange(1, len(choices)), default=1)
        return picked - 1
