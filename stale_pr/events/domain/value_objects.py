"""Value objects for the events domain."""

from dataclasses import dataclass

from stale_pr.github.client import RepositoryRef
from stale_pr.staleness.domain.value_objects import RevisionTriple

PULL_REQUEST_EVENTS: frozenset[str] = frozenset({"pull_request", "pull_request_target"})
SYNCHRONIZE_ACTION = "synchronize"


@dataclass(frozen=True)
class PullRequestEvent:
    """Descriptor of the event that triggered a run.

    Attributes:
        event_name: Name of the webhook event, e.g. ``pull_request``
        action: Activity type of the event, e.g. ``synchronize``
        repository: Repository holding the pull request
        pull_number: Number of the pull request
        revisions: Base, before-push and after-push commits
    """

    event_name: str
    action: str
    repository: RepositoryRef
    pull_number: int
    revisions: RevisionTriple

    @property
    def is_pull_request_event(self) -> bool:
        return self.event_name in PULL_REQUEST_EVENTS

    @property
    def is_synchronize(self) -> bool:
        """Whether new commits were pushed to an existing pull request."""
        return self.is_pull_request_event and self.action == SYNCHRONIZE_ACTION
