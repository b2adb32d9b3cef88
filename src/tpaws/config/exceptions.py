"""Custom exceptions for configuration loading."""


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """The configuration file does not exist."""


class InvalidConfigError(ConfigError):
    """The configuration file exists but cannot be parsed."""
