"""Locations of tpaws configuration files."""

from __future__ import annotations

import os
from pathlib import Path

import click

CONFIG_DIR_ENV = "TPAWS_CONFIG_DIR"
GLOBAL_CONFIG_FILE = "config.json"
PROJECT_CONFIG_FILE = "tpaws.json"


def config_dir() -> Path:
    """The per-user tpaws directory (``TPAWS_CONFIG_DIR`` wins)."""
    env_dir = os.environ.get(CONFIG_DIR_ENV)
    if env_dir:
        return Path(env_dir)
    return Path(click.get_app_dir("tpaws"))


def global_config_path() -> Path:
    return config_dir() / GLOBAL_CONFIG_FILE


def project_config_path(root: Path | None = None) -> Path:
    """``tpaws.json`` in the repository root (the working directory)."""
    return (root or Path.cwd()) / PROJECT_CONFIG_FILE
