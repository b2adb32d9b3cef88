"""SlackNotifier - posts pull request notifications to an incoming webhook."""

from __future__ import annotations

import logging

import httpx

from tpaws.slack.exceptions import SlackError, WebhookNotConfiguredError
from tpaws.slack.models import Block, Button, Message, Reviewer

logger = logging.getLogger("tpaws.slack")


def pull_request_message(
    author_slack_id: str,
    reviewer: Reviewer,
    repository: str,
    pull_request_id: str,
    title: str,
    pr_link: str,
    ticket_link: str | None,
) -> Message:
    """Build the "opened a PR" message with links to CodeCommit and TargetProcess."""
    content = (
        f"<@{author_slack_id}> opened a PR to: <@{reviewer.slack_id}> - `{repository}` "
        f"<{pr_link}|{pull_request_id}: {title}>"
    )
    buttons = [Button.link(pr_link, "Code Commit")]
    if ticket_link:
        buttons.append(Button.link(ticket_link, "Target Process"))
    return Message(blocks=[Block.section(content), Block.divider(), Block.actions(buttons)])


class SlackNotifier:
    """Sends Block Kit messages to a Slack incoming webhook."""

    def __init__(self, webhook_url: str | None, timeout: float = 5.0) -> None:
        self.webhook_url = webhook_url
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def send(self, message: Message) -> None:
        """Post a message.

        Raises:
            WebhookNotConfiguredError: If no webhook URL is set.
            SlackError: If the webhook rejects the message.
        """
        if not self.webhook_url:
            raise WebhookNotConfiguredError("Slack webhook URL is not configured")
        if not self.webhook_url.startswith("https://"):
            raise SlackError("Slack webhook URL must use https")

        try:
            response = await self.client.post(self.webhook_url, json=message.to_payload())
        except httpx.HTTPError as e:
            raise SlackError(f"Failed to send Slack message: {e}") from e

        if not response.is_success:
            logger.error("Slack webhook answered %s: %s", response.status_code, response.text)
            raise SlackError(f"Slack webhook error: {response.status_code} - {response.text}")
        logger.info("Slack message sent")
