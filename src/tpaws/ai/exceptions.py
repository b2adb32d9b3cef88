"""Custom exceptions for the AI client."""


class AIError(Exception):
    """Base exception for AI provider errors."""


class MissingAPIKeyError(AIError):
    """No API key is configured for the AI provider."""


class AIResponseError(AIError):
    """The provider answered, but not with the structure we asked for."""
