"""Custom exceptions for Slack notifications."""


class SlackError(Exception):
    """Base exception for Slack errors."""


class WebhookNotConfiguredError(SlackError):
    """No incoming webhook URL is configured."""
