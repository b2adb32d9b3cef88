"""Centralized logging configuration for tpaws.

Provides rotating file logs with consistent formatting across all components.
Console output is reserved for the CLI itself, so the console handler is only
attached in debug mode.
"""

from __future__ import annotations

import logging
import os
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path

# Default configuration
DEFAULT_LOG_FILE = "tpaws.log"
DEFAULT_MAX_BYTES = 5 * 1024 * 1024  # 5MB
DEFAULT_BACKUP_COUNT = 3
DEFAULT_LOG_LEVEL = "INFO"
DEBUG_ENV = "TPAWS_DEBUG"

# Log format
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def is_debug() -> bool:
    """Whether debug output was requested through the environment."""
    return os.environ.get(DEBUG_ENV, "").lower() not in ("", "0", "false", "no")


def default_log_dir() -> Path:
    """Log directory: TPAWS_LOG_DIR, or `logs` inside the tpaws config dir."""
    env_dir = os.environ.get("TPAWS_LOG_DIR")
    if env_dir:
        return Path(env_dir)

    # Imported lazily: the config package logs through this module.
    from tpaws.config import config_dir

    return config_dir() / "logs"


def setup_logging(
    log_dir: str | Path | None = None,
    log_file: str = DEFAULT_LOG_FILE,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
    level: str | None = None,
    console: bool | None = None,
) -> logging.Logger:
    """Set up logging with rotating file handler.

    Args:
        log_dir: Directory for log files. Defaults to TPAWS_LOG_DIR or the
                 `logs` folder in the tpaws config directory.
        log_file: Log file name. Defaults to 'tpaws.log'.
        max_bytes: Maximum size per log file before rotation. Defaults to 5MB.
        backup_count: Number of backup files to keep. Defaults to 3.
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to INFO, or
               DEBUG when TPAWS_DEBUG is set. TPAWS_LOG_LEVEL overrides both.
        console: Whether to also log to stderr. Defaults to debug mode.

    Returns:
        The root tpaws logger.
    """
    log_dir = Path(log_dir) if log_dir is not None else default_log_dir()
    log_dir.mkdir(parents=True, exist_ok=True)

    debug = is_debug()
    if level is None:
        level = os.environ.get("TPAWS_LOG_LEVEL", "DEBUG" if debug else DEFAULT_LOG_LEVEL)
    log_level = getattr(logging, level.upper(), logging.INFO)

    if console is None:
        console = debug

    logger = logging.getLogger("tpaws")
    logger.setLevel(log_level)
    logger.propagate = False

    # Remove existing handlers to avoid duplicates
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    log_path = log_dir / log_file
    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    logger.debug("tpaws logging initialized (level=%s, file=%s)", level, log_path)

    return logger


def truncate_output(output: str, max_length: int = 2000) -> str:
    """Truncate long output for logging.

    Args:
        output: The output string to truncate.
        max_length: Maximum length before truncation.

    Returns:
        Truncated string with indicator if truncated.
    """
    if len(output) <= max_length:
        return output
    return output[:max_length] + f"\n... [truncated, {len(output) - max_length} more chars]"


def sanitize_for_log(text: str) -> str:
    """Remove sensitive data from log output.

    Args:
        text: Text that may contain sensitive data.

    Returns:
        Sanitized text safe for logging.
    """
    patterns = [
        (r"access_token=[^&\s]+", "access_token=[REDACTED]"),  # TargetProcess query token
        (r"gsk_[a-zA-Z0-9]{20,}", "[GROQ_API_KEY]"),  # Groq API key
        (r"https://hooks\.slack\.com/services/[\w/]+", "[SLACK_WEBHOOK]"),
        (r"Bearer [a-zA-Z0-9._-]+", "Bearer [REDACTED]"),
        (r"token=[a-zA-Z0-9._-]+", "token=[REDACTED]"),
    ]

    result = text
    for pat, replacement in patterns:
        result = re.sub(pat, replacement, result)

    return result
