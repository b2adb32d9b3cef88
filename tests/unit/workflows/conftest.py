"""Fixtures for workflow tests: an AppContext with mocked clients."""

from __future__ import annotations

from collections.abc import Sequence
from contextlib import AbstractContextManager, nullcontext
from dataclasses import dataclass, field
from unittest.mock import MagicMock

import pytest

from tpaws.aws import AwsClient
from tpaws.config import GlobalConfig, Settings
from tpaws.git import GitClient
from tpaws.slack import Reviewer, SlackNotifier
from tpaws.target_process import TargetProcessClient
from tpaws.workflows import AppContext

TP_URL = "https://company.tpondemand.com"


@dataclass
class FakePrompter:
    """Scripted answers; records every question asked."""

    confirms: list[bool] = field(default_factory=list)
    texts: list[str] = field(default_factory=list)
    selections: list[int] = field(default_factory=list)
    asked: list[str] = field(default_factory=list)

    def confirm(self, message: str, default: bool = True) -> bool:
        self.asked.append(message)
        return self.confirms.pop(0) if self.confirms else True

    def text(self, message: str, default: str | None = None) -> str:
        self.asked.append(message)
        if self.texts:
            return self.texts.pop(0)
        return default if default is not None else "typed"

    def select(self, message: str, choices: Sequence[str]) -> int:
        self.asked.append(message)
        return self.selections.pop(0) if self.selections else 0


@dataclass
class Output:
    lines: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    spinners: list[str] = field(default_factory=list)
    clipboard: list[str] = field(default_factory=list)
    clipboard_available: bool = True

    def status(self, message: str) -> AbstractContextManager[None]:
        self.spinners.append(message)
        return nullcontext()

    def copy(self, text: str) -> bool:
        if not self.clipboard_available:
            return False
        self.clipboard.append(text)
        return True

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


@pytest.fixture
def prompter() -> FakePrompter:
    return FakePrompter()


@pytest.fixture
def output() -> Output:
    return Output()


@pytest.fixture
def ctx(prompter: FakePrompter, output: Output) -> AppContext:
    """AppContext with every client mocked (async methods become AsyncMocks)."""
    config = GlobalConfig(
        username="jane.doe",
        pr_name="Jane Doe",
        pr_email="jane@example.com",
        user_id=501,
        arn="arn:aws:sts::123:assumed-role/dev/jane",
        reviewers=[Reviewer(name="Bob", slack_id="U2"), Reviewer(name="Ann", slack_id="U3")],
    )
    settings = Settings(tp_url=TP_URL, tp_token="token", slack_user_id="U1")
    return AppContext(
        config=config,
        settings=settings,
        git=MagicMock(spec=GitClient),
        aws=MagicMock(spec=AwsClient),
        tp=MagicMock(spec=TargetProcessClient),
        slack=MagicMock(spec=SlackNotifier),
        prompter=prompter,
        echo=output.lines.append,
        warn=output.warnings.append,
        status=output.status,
        copy=output.copy,
        open_url=MagicMock(),
        ai_factory=MagicMock(),
    )
