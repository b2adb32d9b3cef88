"""Interactive (re)creation of the global config."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from tpaws.ai import DEFAULT_AI_MODEL
from tpaws.config import GlobalConfig
from tpaws.target_process import MissingConfigurationError, TargetProcessClient

if TYPE_CHECKING:
    from tpaws.workflows.context import AppContext

logger = logging.getLogger("tpaws.workflows")


def default_username(full_name: str | None, login: str) -> str:
    """``Jane Doe`` -> ``jane.doe``; the TargetProcess login when no name is known."""
    if full_name and full_name.strip():
        return ".".join(full_name.split()).lower()
    return login


async def reset_config(ctx: AppContext) -> GlobalConfig:
    """Ask for every global setting and write a fresh config.

    Raises:
        MissingConfigurationError: If TargetProcess is not configured and the
            user declines to fix it.
    """
    tp_url = ctx.settings.tp_url
    tp_token = ctx.settings.tp_token
    if not tp_url or not tp_token:
        fix = ctx.prompter.confirm(
            "Invalid configuration detected. Do you want to fix this now?", default=True
        )
        if not fix or ctx.quiet:
            raise MissingConfigurationError(
                "Please make sure to have the correct configuration before continuing. "
                "Missing TARGET_PROCESS_API_BASE_URL or TARGET_PROCESS_ACCESS_TOKEN"
            )
        tp_url = tp_url or ctx.prompter.text(
            "Target Process base url (e.g https://my-company.tpondemand.com)"
        )
        tp_token = tp_token or ctx.prompter.text("Target Process access token")

    tp = TargetProcessClient(tp_url, tp_token)
    try:
        me = await tp.get_me()
    finally:
        await tp.close()

    git_name, git_email = await asyncio.gather(
        ctx.git.config_value("user.name"), ctx.git.config_value("user.email")
    )
    ask = ctx.prompter.text
    pr_name = ask("Your full name", default=git_name or me.full_name)
    pr_email = ask("Your email", default=git_email or me.email)
    username = ask("TP Username (e.g: name.surname)", default=default_username(pr_name, me.login))
    groq_api_key = ask("Groq API Key", default=ctx.settings.groq_api_key or "")
    ai_model = ask("AI Model", default=ctx.config.ai_model or DEFAULT_AI_MODEL)
    tp_url = ask("Target Process URL", default=tp_url)
    tp_token = ask("Target Process access token", default=tp_token)

    config = GlobalConfig(
        username=username,
        pr_name=pr_name,
        pr_email=pr_email,
        user_id=me.id,
        groq_api_key=groq_api_key or None,
        ai_model=ai_model or None,
        tp_url=tp_url or None,
        tp_apikey=tp_token or None,
        slack_webhook_url=ctx.config.slack_webhook_url,
        reviewers=ctx.config.reviewers,
    )
    ctx.config = config
    if ctx.dry_run:
        ctx.echo(config.model_dump_json(indent=2, exclude={"groq_api_key", "tp_apikey"}))
    else:
        path = config.write()
        logger.info("Global config written to %s", path)
        ctx.echo(f"Config saved to {path}")
    return config
