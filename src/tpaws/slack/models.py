"""Block Kit message models for Slack incoming webhooks."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class Reviewer(BaseModel):
    """A teammate that can be pinged on Slack."""

    name: str
    slack_id: str


class TextObject(BaseModel):
    type: Literal["plain_text", "mrkdwn"]
    text: str
    emoji: bool | None = None

    @classmethod
    def plain(cls, text: str) -> TextObject:
        return cls(type="plain_text", text=text, emoji=True)

    @classmethod
    def markdown(cls, text: str) -> TextObject:
        return cls(type="mrkdwn", text=text)


class Button(BaseModel):
    type: Literal["button"] = "button"
    text: TextObject
    url: str | None = None

    @classmethod
    def link(cls, href: str, label: str) -> Button:
        return cls(text=TextObject.plain(label), url=href)


class Block(BaseModel):
    type: Literal["section", "divider", "actions"]
    text: TextObject | None = None
    elements: list[Button] | None = None

    @classmethod
    def section(cls, text: str) -> Block:
        return cls(type="section", text=TextObject.markdown(text))

    @classmethod
    def divider(cls) -> Block:
        return cls(type="divider")

    @classmethod
    def actions(cls, buttons: list[Button]) -> Block:
        return cls(type="actions", elements=buttons)


class Message(BaseModel):
    blocks: list[Block] = Field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)
