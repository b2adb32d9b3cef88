"""Effective settings: environment variables over the stored config."""

from __future__ import annotations

import os
from dataclasses import dataclass

from tpaws.ai import API_KEY_ENV, DEFAULT_AI_MODEL
from tpaws.config.models import GlobalConfig
from tpaws.target_process import BASE_URL_ENV, TOKEN_ENV

SLACK_USER_ENV = "SLACK_USER_ID"
SLACK_WEBHOOK_ENV = "SLACK_WEBHOOK_URL"
AWS_PROFILE_ENV = "AWS_PROFILE"


@dataclass(frozen=True)
class Settings:
    tp_url: str | None = None
    tp_token: str | None = None
    groq_api_key: str | None = None
    ai_model: str = DEFAULT_AI_MODEL
    slack_webhook_url: str | None = None
    slack_user_id: str | None = None
    aws_profile: str | None = None

    @classmethod
    def from_env(cls, config: GlobalConfig, env: dict[str, str] | None = None) -> Settings:
        """Resolve settings, preferring non-empty environment values.

        Args:
            config: The stored global config.
            env: Environment mapping. Defaults to ``os.environ``.
        """
        env = os.environ if env is None else env

        def pick(name: str, stored: str | None) -> str | None:
            return env.get(name) or stored or None

        return cls(
            tp_url=pick(BASE_URL_ENV, config.tp_url),
            tp_token=pick(TOKEN_ENV, config.tp_apikey),
            groq_api_key=pick(API_KEY_ENV, config.groq_api_key),
            ai_model=config.ai_model or DEFAULT_AI_MODEL,
            slack_webhook_url=pick(SLACK_WEBHOOK_ENV, config.slack_webhook_url),
            slack_user_id=env.get(SLACK_USER_ENV) or None,
            aws_profile=env.get(AWS_PROFILE_ENV) or None,
        )
