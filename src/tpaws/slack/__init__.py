"""Slack - pull request notifications through an incoming webhook."""

from tpaws.slack.exceptions import SlackError, WebhookNotConfiguredError
from tpaws.slack.models import Block, Button, Message, Reviewer, TextObject
from tpaws.slack.notifier import SlackNotifier, pull_request_message

__all__ = [
    "Block",
    "Button",
    "Message",
    "Reviewer",
    "SlackError",
    "SlackNotifier",
    "TextObject",
    "WebhookNotConfiguredError",
    "pull_request_message",
]
