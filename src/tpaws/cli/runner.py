"""Glue between click commands and the async workflows."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, TypeVar

import click

from tpaws.ai import AIError
from tpaws.aws import AwsError
from tpaws.config import ConfigError, GlobalConfig
from tpaws.git import GitError
from tpaws.release import ReleaseError
from tpaws.shell import ShellError
from tpaws.slack import SlackError
from tpaws.target_process import TargetProcessError
from tpaws.workflows import AppContext, WorkflowError, build_context

logger = logging.getLogger("tpaws.cli")

T = TypeVar("T")

# Failures reported as "Error: <message>" instead of a crash report
KNOWN_ERRORS: tuple[type[Exception], ...] = (
    AIError,
    AwsError,
    ConfigError,
    GitError,
    ReleaseError,
    ShellError,
    SlackError,
    TargetProcessError,
    WorkflowError,
)


@dataclass
class CliState:
    """Global flags, stored as the click context object."""

    dry_run: bool = False
    quiet: bool = False
    debug: bool = False
    profile: str | None = None
    config: GlobalConfig = field(default_factory=GlobalConfig)


async def ensure_auth(ctx: AppContext) -> None:
    """Refresh the cached AWS identity when it is missing or stale."""
    if not ctx.config.is_auth_expired():
        return
    logger.info("AWS identity expired, refreshing")
    arn = await ctx.aws.refresh_auth()
    ctx.config.update_auth(arn)
    ctx.save_config()


def run_workflow(
    workflow: Callable[..., Awaitable[T]],
    *args: Any,
    auth: bool = False,
    **kwargs: Any,
) -> T:
    """Run an async workflow with a fresh AppContext built from the global flags."""
    state = click.get_current_context().find_object(CliState) or CliState()

    async def _main() -> T:
        ctx = build_context(
            state.config, dry_run=state.dry_run, quiet=state.quiet, profile=state.profile
        )
        try:
            if auth:
                await ensure_auth(ctx)
            return await workflow(ctx, *args, **kwargs)
        finally:
            await ctx.aclose()

    return asyncio.run(_main())
