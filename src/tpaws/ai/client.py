"""GroqClient - chat completions with structured JSON replies."""

from __future__ import annotations

import json
import logging
from typing import TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from tpaws.ai.exceptions import AIError, AIResponseError, MissingAPIKeyError
from tpaws.ai.models import ChatMessage, ChatPayload, ChatResponse

logger = logging.getLogger("tpaws.ai")

M = TypeVar("M", bound=BaseModel)

API_KEY_ENV = "GROQ_API_KEY"
DEFAULT_AI_MODEL = "llama-3.1-8b-instant"
GROQ_BASE_URL = "https://api.groq.com/openai/v1"


class GroqClient:
    """Client for Groq's OpenAI-compatible chat completion endpoint."""

    def __init__(
        self,
        api_key: str | None,
        model: str = DEFAULT_AI_MODEL,
        base_url: str = GROQ_BASE_URL,
        timeout: float = 60.0,
    ) -> None:
        """Initialize Groq client.

        Args:
            api_key: Groq API key (gsk_...)
            model: Default model for completions
            base_url: API base URL (for testing/other OpenAI-compatible providers)
            timeout: Request timeout in seconds
        """
        if not api_key:
            raise MissingAPIKeyError(
                f"Missing AI API key. Set {API_KEY_ENV} or run `config reset`."
            )
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Accept": "application/json",
                },
                timeout=self.timeout,
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def chat(self, payload: ChatPayload) -> ChatResponse:
        """Send a chat completion request.

        Raises:
            AIError: On transport or HTTP errors.
            AIResponseError: If the response body is malformed.
        """
        logger.debug("Chat completion with %s (%d messages)", payload.model, len(payload.messages))
        try:
            response = await self.client.post(
                "/chat/completions", json=payload.model_dump(mode="json", exclude_none=True)
            )
        except httpx.HTTPError as e:
            raise AIError(f"AI request failed: {e}") from e

        if not response.is_success:
            raise AIError(f"AI request failed: {response.status_code} - {response.text}")

        try:
            return ChatResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise AIResponseError(f"Invalid AI response: {e}") from e

    async def complete_json(
        self,
        messages: list[ChatMessage],
        schema: type[M],
        model: str | None = None,
    ) -> M:
        """Ask for a JSON object and parse the first choice into ``schema``.

        Raises:
            AIResponseError: If there are no choices or the content doesn't match.
        """
        payload = ChatPayload(
            model=model or self.model,
            messages=messages,
            response_format={"type": "json_object"},
        )
        response = await self.chat(payload)
        if not response.choices:
            raise AIResponseError("Invalid AI response. No choices returned.")

        content = response.choices[0].message.content
        try:
            return schema.model_validate(json.loads(content))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.debug("Unparseable AI content: %s", content)
            raise AIResponseError(f"AI reply is not a valid {schema.__name__}: {e}") from e
