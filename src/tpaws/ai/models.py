"""Data models for OpenAI-compatible chat completions."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class Role(StrEnum):
    USER = "user"
    SYSTEM = "system"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    role: Role
    content: str

    @classmethod
    def system(cls, content: str) -> ChatMessage:
        return cls(role=Role.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> ChatMessage:
        return cls(role=Role.USER, content=content)


class ChatPayload(BaseModel):
    model: str
    messages: list[ChatMessage]
    temperature: float | None = None
    response_format: dict[str, Any] | None = None


class Choice(BaseModel):
    index: int
    message: ChatMessage


class ChatResponse(BaseModel):
    id: str
    model: str
    choices: list[Choice] = Field(default_factory=list)


class CommitMessage(BaseModel):
    """Structured reply for commit message generation."""

    message: str
    description: str | None = None


class PullRequestDraft(BaseModel):
    """Structured reply for pull request drafting."""

    title: str
    description: str
