"""Configuration models persisted as JSON."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime, timedelta
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from tpaws.config.exceptions import ConfigNotFoundError, InvalidConfigError
from tpaws.config.paths import global_config_path, project_config_path
from tpaws.slack import Reviewer

logger = logging.getLogger("tpaws.config")

# How long a cached AWS identity stays valid
AUTH_TTL = timedelta(hours=12)


def _read_json(path: Path) -> dict:
    if not path.exists():
        raise ConfigNotFoundError(f"Config file not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise InvalidConfigError(f"Invalid JSON in {path}: {e}") from e
    if not isinstance(data, dict):
        raise InvalidConfigError(f"Config file {path} must contain a JSON object")
    return data


class GlobalConfig(BaseModel):
    """Per-user settings stored in the tpaws config directory."""

    username: str = ""
    pr_name: str = ""
    pr_email: str = ""
    user_id: int = 0
    last_auth: datetime | None = None
    arn: str | None = None
    groq_api_key: str | None = None
    ai_model: str | None = None
    tp_url: str | None = None
    tp_apikey: str | None = None
    slack_webhook_url: str | None = None
    reviewers: list[Reviewer] = Field(default_factory=list)

    @classmethod
    def exists(cls, path: Path | None = None) -> bool:
        return (path or global_config_path()).exists()

    @classmethod
    def read(cls, path: Path | None = None) -> GlobalConfig:
        """Load the global config.

        Raises:
            ConfigNotFoundError: If the file doesn't exist.
            InvalidConfigError: If the file can't be parsed.
        """
        path = path or global_config_path()
        data = _read_json(path)
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise InvalidConfigError(f"Invalid config in {path}: {e}") from e

    @classmethod
    def read_or_default(cls, path: Path | None = None) -> GlobalConfig:
        try:
            return cls.read(path)
        except ConfigNotFoundError:
            return cls()

    def write(self, path: Path | None = None) -> Path:
        path = path or global_config_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2) + "\n", encoding="utf-8")
        logger.debug("Wrote global config to %s", path)
        return path

    def is_auth_expired(self, now: datetime | None = None) -> bool:
        """Whether the cached AWS identity needs refreshing."""
        if self.last_auth is None or not self.arn:
            return True
        now = now or datetime.now(UTC)
        last_auth = self.last_auth
        if last_auth.tzinfo is None:
            last_auth = last_auth.replace(tzinfo=UTC)
        return now - last_auth > AUTH_TTL

    def update_auth(self, arn: str, now: datetime | None = None) -> None:
        self.arn = arn
        self.last_auth = now or datetime.now(UTC)


class ProjectConfig(BaseModel):
    """Per-repository settings stored in ``tpaws.json``."""

    project_id: int | None = None
    name: str | None = None

    @classmethod
    def exists(cls, path: Path | None = None) -> bool:
        return (path or project_config_path()).exists()

    @classmethod
    def read(cls, path: Path | None = None) -> ProjectConfig:
        path = path or project_config_path()
        data = _read_json(path)
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise InvalidConfigError(f"Invalid project config in {path}: {e}") from e

    @classmethod
    def read_optional(cls, path: Path | None = None) -> ProjectConfig | None:
        try:
            return cls.read(path)
        except ConfigNotFoundError:
            return None

    def write(self, path: Path | None = None) -> Path:
        path = path or project_config_path()
        path.write_text(self.model_dump_json(indent=2) + "\n", encoding="utf-8")
        logger.debug("Wrote project config to %s", path)
        return path
