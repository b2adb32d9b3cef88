"""Shared pytest fixtures and configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from tpaws.target_process import Assignable


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")
    config.addinivalue_line("markers", "real: talks to real external services (local only)")


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep config and logs of every test inside its own temp dir."""
    config_dir = tmp_path / "tpaws-config"
    monkeypatch.setenv("TPAWS_CONFIG_DIR", str(config_dir))
    monkeypatch.setenv("TPAWS_LOG_DIR", str(tmp_path / "logs"))
    for name in (
        "TARGET_PROCESS_API_BASE_URL",
        "TARGET_PROCESS_ACCESS_TOKEN",
        "GROQ_API_KEY",
        "SLACK_USER_ID",
        "SLACK_WEBHOOK_URL",
        "TPAWS_DEBUG",
        "TPAWS_LOG_LEVEL",
        "AWS_PROFILE",
    ):
        monkeypatch.delenv(name, raising=False)
    return config_dir


def assignable_payload(
    ticket_id: int = 115068,
    name: str = "Translate report type payout transactions",
    entity_type: str = "UserStory",
    state_id: int = 73,
    **extra: Any,
) -> dict[str, Any]:
    """TargetProcess v1 JSON for an assignable."""
    payload: dict[str, Any] = {
        "ResourceType": entity_type,
        "Id": ticket_id,
        "Name": name,
        "Description": None,
        "EntityState": {"Id": state_id, "Name": "Open"},
        "EntityType": {"Id": 4 if entity_type == "UserStory" else 8, "Name": entity_type},
        "Project": {"Id": 7, "Name": "Payments", "ResourceType": "Project"},
    }
    payload.update(extra)
    return payload


@pytest.fixture
def make_assignable():
    """Factory for Assignable models."""

    def _make(**kwargs: Any) -> Assignable:
        return Assignable.model_validate(assignable_payload(**kwargs))

    return _make


@pytest.fixture
def assignable_data():
    """Factory for raw TargetProcess v1 assignable payloads."""
    return assignable_payload
