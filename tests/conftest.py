"""Shared fixtures and in-memory collaborators for the stale-pr tests."""

from collections.abc import Iterator

import pytest

from stale_pr.diffs.domain.value_objects import RawDiff
from stale_pr.diffs.repositories.interfaces import DiffRepository
from stale_pr.errors import ProviderError
from stale_pr.events.domain.value_objects import PullRequestEvent
from stale_pr.github.client import RepositoryRef
from stale_pr.reviews.domain.value_objects import Review
from stale_pr.reviews.repositories.interfaces import NotifierRepository, ReviewRepository
from stale_pr.staleness.domain.value_objects import RevisionTriple

BASE_SHA = "93a783ae53a771682a2641c4a1f42df78feff95e"
BEFORE_SHA = "790fe8dfc858c01f1620ca3a548e87d83743c968"
AFTER_SHA = "c0de998dbee3354e636211dbad25515fffc57a70"


class FakeDiffRepository(DiffRepository):
    """Diff repository serving canned diffs keyed by head revision."""

    def __init__(self, diffs: dict[str, str], error: Exception | None = None) -> None:
        self._diffs = diffs
        self._error = error
        self.calls: list[tuple[str, str]] = []

    def compare(self, base: str, head: str) -> RawDiff:
        self.calls.append((base, head))
        if self._error is not None:
            raise self._error
        return RawDiff(base=base, head=head, content=self._diffs[head])


class FakeReviewRepository(ReviewRepository):
    """Review repository yielding canned pages."""

    def __init__(self, pages: list[list[Review]], error: Exception | None = None) -> None:
        self._pages = pages
        self._error = error
        self.calls: list[int] = []

    def list_reviews(self, pull_number: int) -> Iterator[tuple[Review, ...]]:
        self.calls.append(pull_number)
        for page in self._pages:
            yield tuple(page)
        if self._error is not None:
            raise self._error


class FakeNotifierRepository(NotifierRepository):
    """Notifier recording dismissals and comments."""

    def __init__(self, fail_on_review: int | None = None) -> None:
        self._fail_on_review = fail_on_review
        self.dismissals: list[tuple[int, int, str]] = []
        self.comments: list[tuple[int, str]] = []

    def dismiss_review(self, pull_number: int, review_id: int, message: str) -> None:
        if review_id == self._fail_on_review:
            raise ProviderError(f"Cannot dismiss review {review_id}")
        self.dismissals.append((pull_number, review_id, message))

    def create_comment(self, pull_number: int, body: str) -> None:
        self.comments.append((pull_number, body))


@pytest.fixture
def revisions() -> RevisionTriple:
    return RevisionTriple(base=BASE_SHA, before=BEFORE_SHA, after=AFTER_SHA)


@pytest.fixture
def event(revisions: RevisionTriple) -> PullRequestEvent:
    return PullRequestEvent(
        event_name="pull_request",
        action="synchronize",
        repository=RepositoryRef(owner="octocat", name="myrepo"),
        pull_number=42,
        revisions=revisions,
    )


@pytest.fixture
def payload() -> dict:
    """Webhook payload of a pull_request synchronize event."""
    return {
        "action": "synchronize",
        "before": BEFORE_SHA,
        "after": AFTER_SHA,
        "number": 42,
        "repository": {"name": "myrepo", "owner": {"login": "octocat"}},
        "pull_request": {"base": {"sha": BASE_SHA}},
    }
