"""Service for mirroring stale pull request notices."""

from stale_pr.events.domain.value_objects import PullRequestEvent
from stale_pr.notifications.domain.value_objects import SlackChannel, StaleNotice
from stale_pr.notifications.repositories.interfaces import NotificationRepository
from stale_pr.staleness.domain.value_objects import StalenessOutcome


class NotificationService:
    """Service for orchestrating notification operations."""

    def __init__(self, notification_repository: NotificationRepository) -> None:
        """Initialize the notification service.

        Args:
            notification_repository: Repository for sending notifications
        """
        self._notification_repository = notification_repository

    def send_stale_notice(
        self, event: PullRequestEvent, outcome: StalenessOutcome, channel_name: str
    ) -> bool:
        """Send a stale notice for a pull request to a Slack channel.

        Nothing is sent for an outcome that is not stale.

        Args:
            event: Event of the pull request
            outcome: Decision reached for the push
            channel_name: The name of the Slack channel, with or without # prefix

        Returns:
            True if a notice was sent, False if there was nothing to send

        Raises:
            ValueError: If the channel name is invalid
            RuntimeError: If there's an error sending the message to Slack
        """
        if not outcome.stale or outcome.artifact is None:
            return False

        channel = SlackChannel.parse(channel_name)
        repository = event.repository
        notice = StaleNotice(
            pull_request=f"{repository}#{event.pull_number}",
            pull_request_url=f"https://github.com/{repository}/pull/{event.pull_number}",
            diff_of_diffs=outcome.artifact,
            dismissed_review_ids=outcome.dismissed_review_ids,
        )

        success = self._notification_repository.send_stale_notice(channel, notice)
        if not success:
            raise RuntimeError("Failed to send message to Slack (API returned failure)")
        return True
