"""Concrete implementations of notification repositories."""

from typing import Any

from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError

from stale_pr.notifications.domain.value_objects import SlackChannel, StaleNotice
from stale_pr.notifications.repositories.interfaces import NotificationRepository

# Slack has a 3000 char limit per section block, leave room for the code fence
MAX_BLOCK_SIZE = 2900
CODE_FENCE = "```"
# Slack accepts at most 50 blocks per message: header, summary and the diff blocks
MAX_DIFF_BLOCKS = 48
TRUNCATION_NOTICE = "_[Diff of diffs truncated due to size]_"


class SlackNotificationRepositoryImpl(NotificationRepository):
    """Implementation of the notification repository using the Slack SDK."""

    def __init__(self, token: str, client: WebClient | None = None) -> None:
        """Initialize the Slack client with token.

        Args:
            token: The Slack Bot User OAuth Token
            client: Optional pre-built WebClient

        Raises:
            ValueError: If token is empty or None
        """
        if not token:
            raise ValueError(
                "Slack token is required. "
                "Get your token from https://api.slack.com/apps"
            )

        self._client = client or WebClient(token=token)

    def send_stale_notice(self, channel: SlackChannel, notice: StaleNotice) -> bool:
        """Post the notice with the diff of diffs split over code blocks.

        Raises:
            RuntimeError: If there's an error communicating with Slack
        """
        blocks: list[dict[str, Any]] = [
            {
                "type": "header",
                "text": {"type": "plain_text", "text": notice.title, "emoji": True},
            },
            {"type": "section", "text": {"type": "mrkdwn", "text": notice.summary}},
        ]
        chunk_size = MAX_BLOCK_SIZE - 2 * len(CODE_FENCE) - 2
        chunks = split_lines(notice.diff_of_diffs, chunk_size)
        truncated = len(chunks) > MAX_DIFF_BLOCKS
        if truncated:
            chunks = chunks[: MAX_DIFF_BLOCKS - 1]
        for chunk in chunks:
            blocks.append(
                {
                    "type": "section",
                    "text": {"type": "mrkdwn", "text": f"{CODE_FENCE}\n{chunk}\n{CODE_FENCE}"},
                }
            )
        if truncated:
            blocks.append(
                {"type": "section", "text": {"type": "mrkdwn", "text": TRUNCATION_NOTICE}}
            )

        try:
            response = self._client.chat_postMessage(
                channel=channel.name,
                blocks=blocks,
                text=notice.title,  # Fallback for notifications
            )
        except SlackApiError as e:
            error_msg = e.response.get("error", "unknown error")
            if error_msg in ("channel_not_found", "not_in_channel"):
                raise RuntimeError(
                    f"Cannot post to channel '{channel.name}'. "
                    "Make sure the bot is invited to the channel."
                ) from e
            if error_msg == "invalid_auth":
                raise RuntimeError(
                    "Invalid Slack token. Please check your token configuration."
                ) from e
            raise RuntimeError(f"Slack API error: {error_msg}") from e

        return bool(response.get("ok", False))


def split_lines(text: str, max_size: int) -> list[str]:
    """Split text on line boundaries into chunks of at most ``max_size`` characters.

    Lines longer than ``max_size`` are cut into pieces.
    """
    chunks: list[str] = []
    current = ""
    for line in text.split("\n"):
        while len(line) > max_size:
            if current:
                chunks.append(current)
                current = ""
            chunks.append(line[:max_size])
            line = line[max_size:]
        if current and len(current) + len(line) + 1 > max_size:
            chunks.append(current)
            current = line
        else:
            current = f"{current}\n{line}" if current else line
    if current:
        chunks.append(current)
    return chunks
