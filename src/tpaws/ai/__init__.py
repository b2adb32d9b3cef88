"""AI - chat completions used to draft commit messages and PR descriptions."""

from tpaws.ai.client import API_KEY_ENV, DEFAULT_AI_MODEL, GroqClient
from tpaws.ai.exceptions import AIError, AIResponseError, MissingAPIKeyError
from tpaws.ai.models import (
    ChatMessage,
    ChatPayload,
    ChatResponse,
    CommitMessage,
    PullRequestDraft,
    Role,
)
from tpaws.ai.prompts import commit_message_prompt, pull_request_prompt

__all__ = [
    "API_KEY_ENV",
    "DEFAULT_AI_MODEL",
    "AIError",
    "AIResponseError",
    "ChatMessage",
    "ChatPayload",
    "ChatResponse",
    "CommitMessage",
    "GroqClient",
    "MissingAPIKeyError",
    "PullRequestDraft",
    "Role",
    "commit_message_prompt",
    "pull_request_prompt",
]
