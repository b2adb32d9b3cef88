"""Config - global user settings, per-project settings and env resolution."""

from tpaws.config.exceptions import ConfigError, ConfigNotFoundError, InvalidConfigError
from tpaws.config.models import AUTH_TTL, GlobalConfig, ProjectConfig
from tpaws.config.paths import (
    CONFIG_DIR_ENV,
    config_dir,
    global_config_path,
    project_config_path,
)
from tpaws.config.settings import (
    AWS_PROFILE_ENV,
    SLACK_USER_ENV,
    SLACK_WEBHOOK_ENV,
    Settings,
)

__all__ = [
    "AUTH_TTL",
    "AWS_PROFILE_ENV",
    "CONFIG_DIR_ENV",
    "ConfigError",
    "ConfigNotFoundError",
    "GlobalConfig",
    "InvalidConfigError",
    "ProjectConfig",
    "SLACK_USER_ENV",
    "SLACK_WEBHOOK_ENV",
    "Settings",
    "config_dir",
    "global_config_path",
    "project_config_path",
]
