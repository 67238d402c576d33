"""Repository interfaces for outgoing notifications."""

from abc import ABC, abstractmethod

from stale_pr.notifications.domain.value_objects import SlackChannel, StaleNotice


class NotificationRepository(ABC):
    """Interface for mirroring stale notices to a chat channel."""

    @abstractmethod
    def send_stale_notice(self, channel: SlackChannel, notice: StaleNotice) -> bool:
        """
        Send a stale notice to a channel.

        Args:
            channel: The channel to post to
            notice: The notice to send

        Returns:
            True if the message was sent successfully, False otherwise
        """
        ...
