"""Custom exceptions for the TargetProcess client."""

from __future__ import annotations


class TargetProcessError(Exception):
    """Base exception for TargetProcess errors."""


class MissingConfigurationError(TargetProcessError):
    """Base URL or access token is not configured."""


class TransportError(TargetProcessError):
    """The HTTP request could not be completed."""


class HTTPStatusError(TargetProcessError):
    """The API answered with a non-success status code."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"TargetProcess API error: {status_code} - {body[:500]}")
        self.status_code = status_code
        self.body = body


class AssignableNotFoundError(TargetProcessError):
    """Assignable with given ID does not exist."""


class ResponseParseError(TargetProcessError):
    """The response body does not match the expected schema."""


class UnknownEntityStateError(TargetProcessError):
    """An entity state code outside the known workflow states."""
