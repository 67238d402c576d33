"""Value objects for the notifications domain."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SlackChannel:
    """Value object representing a Slack channel.

    Attributes:
        name: The channel name without the # prefix
    """

    name: str

    def __post_init__(self) -> None:
        """Validate the channel name."""
        if not self.name:
            raise ValueError("Channel name cannot be empty")

        # Slack channel names can only contain lowercase letters, numbers, hyphens, and underscores
        if not all(c.islower() or c.isdigit() or c in "-_" for c in self.name):
            raise ValueError(
                f"Invalid channel name '{self.name}'. "
                "Channel names can only contain lowercase letters, numbers, "
                "hyphens, and underscores"
            )

    @classmethod
    def parse(cls, value: str) -> "SlackChannel":
        """Build a channel from user input, accepting a leading ``#``."""
        return cls(name=value.strip().removeprefix("#"))


@dataclass(frozen=True)
class StaleNotice:
    """Notice sent when a push made a pull request's approvals stale.

    Attributes:
        pull_request: Human readable reference, e.g. ``octocat/myrepo#42``
        pull_request_url: Link to the pull request
        diff_of_diffs: What changed between the previous and the new change-set
        dismissed_review_ids: Approvals that were dismissed
    """

    pull_request: str
    pull_request_url: str
    diff_of_diffs: str
    dismissed_review_ids: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        """Validate the notice."""
        if not self.diff_of_diffs:
            raise ValueError("A stale notice requires a diff of diffs")

    @property
    def title(self) -> str:
        return f"🔁 {self.pull_request} has new changes"

    @property
    def summary(self) -> str:
        """Markdown line describing the dismissals."""
        count = len(self.dismissed_review_ids)
        if count == 0:
            dismissed = "No approvals needed dismissing."
        elif count == 1:
            dismissed = "1 stale approval was dismissed."
        else:
            dismissed = f"{count} stale approvals were dismissed."
        return f"<{self.pull_request_url}|{self.pull_request}> {dismissed}"
