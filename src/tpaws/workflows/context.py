"""AppContext - everything a workflow needs, passed explicitly."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable
from contextlib import AbstractContextManager
from dataclasses import dataclass, field

import click
import pyperclip
from rich.console import Console

from tpaws.ai import GroqClient, MissingAPIKeyError
from tpaws.aws import DEFAULT_PROFILE, AwsClient
from tpaws.config import GlobalConfig, ProjectConfig, Settings
from tpaws.git import GitClient
from tpaws.slack import SlackNotifier
from tpaws.target_process import TargetProcessClient
from tpaws.workflows.prompter import ClickPrompter, Prompter

logger = logging.getLogger("tpaws.workflows")

_stderr = Console(stderr=True)


def _warn(message: str) -> None:
    click.secho(f"! {message}", fg="yellow", err=True)


def _spinner(message: str) -> AbstractContextManager[object]:
    return _stderr.status(message, spinner="dots")


def copy_to_clipboard(text: str) -> bool:
    """Copy text with pyperclip.

    Returns:
        False when no clipboard is reachable (headless or SSH sessions).
    """
    if not pyperclip.is_available():
        return False
    pyperclip.copy(text)
    return True


@dataclass
class AppContext:
    """Clients, configuration and flags for one CLI invocation.

    Attributes:
        config: Stored global config (mutable; persisted with ``save_config``).
        settings: Effective settings after applying environment variables.
        project: Project config of the current repository, if any.
        dry_run: Stop before the first mutating external call.
        quiet: Skip prompts, using defaults.
        status: Spinner shown on stderr while a slow step runs.
        copy: Puts text on the clipboard; False when there is none.
    """

    config: GlobalConfig
    settings: Settings
    git: GitClient
    aws: AwsClient
    tp: TargetProcessClient
    slack: SlackNotifier
    prompter: Prompter
    project: ProjectConfig | None = None
    dry_run: bool = False
    quiet: bool = False
    echo: Callable[[str], None] = click.echo
    warn: Callable[[str], None] = _warn
    open_url: Callable[[str], object] = click.launch
    status: Callable[[str], AbstractContextManager[object]] = _spinner
    copy: Callable[[str], bool] = copy_to_clipboard
    ai_factory: Callable[[str, str], GroqClient] = GroqClient
    _ai: GroqClient | None = field(default=None, init=False, repr=False)

    @property
    def tp_configured(self) -> bool:
        return bool(self.settings.tp_url and self.settings.tp_token)

    def ticket_link(self, ticket_id: int | str) -> str:
        return f"{(self.settings.tp_url or '').rstrip('/')}/entity/{ticket_id}"

    def save_config(self) -> None:
        if self.dry_run:
            logger.info("Dry run: not writing global config")
            return
        self.config.write()

    def ensure_ai(self, model: str | None = None) -> GroqClient:
        """AI client, asking for (and persisting) an API key when none is set.

        Raises:
            MissingAPIKeyError: If no key is configured and none was entered.
        """
        if self._ai is not None:
            return self._ai

        api_key = self.settings.groq_api_key
        if not api_key and not self.quiet:
            api_key = self.prompter.text("Groq API key (empty to skip)", default="") or None
            if api_key:
                self.config.groq_api_key = api_key
                self.save_config()
                self.settings = dataclasses.replace(self.settings, groq_api_key=api_key)
        if not api_key:
            raise MissingAPIKeyError("Missing AI API key. Set GROQ_API_KEY or run `config reset`.")

        self._ai = self.ai_factory(api_key, model or self.settings.ai_model)
        return self._ai

    async def aclose(self) -> None:
        await self.tp.close()
        await self.slack.close()
        if self._ai is not None:
            await self._ai.close()
            self._ai = None


def build_context(
    config: GlobalConfig,
    dry_run: bool = False,
    quiet: bool = False,
    profile: str | None = None,
    settings: Settings | None = None,
) -> AppContext:
    """Wire the real clients for a CLI invocation."""
    settings = settings or Settings.from_env(config)
    return AppContext(
        config=config,
        settings=settings,
        git=GitClient(),
        aws=AwsClient(profile or settings.aws_profile or DEFAULT_PROFILE),
        tp=TargetProcessClient(settings.tp_url, settings.tp_token),
        slack=SlackNotifier(settings.slack_webhook_url),
        prompter=ClickPrompter(quiet=quiet),
        project=ProjectConfig.read_optional(),
        dry_run=dry_run,
        quiet=quiet,
    )
