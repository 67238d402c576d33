"""Concrete implementations of review repositories using the GitHub API."""

import logging
from collections.abc import Iterator
from typing import Any

from stale_pr.errors import ProviderError
from stale_pr.github.client import GitHubClient, RepositoryRef
from stale_pr.reviews.domain.value_objects import Review
from stale_pr.reviews.repositories.interfaces import NotifierRepository, ReviewRepository

logger = logging.getLogger(__name__)


class GitHubReviewRepositoryImpl(ReviewRepository):
    """Review lister backed by ``GET /repos/{owner}/{repo}/pulls/{n}/reviews``."""

    def __init__(self, client: GitHubClient, repository: RepositoryRef) -> None:
        self._client = client
        self._repository = repository

    def list_reviews(self, pull_number: int) -> Iterator[tuple[Review, ...]]:
        """List reviews page by page, following GitHub's pagination links."""
        url = f"{self._repository.path}/pulls/{pull_number}/reviews"
        for page in self._client.paginate(url):
            yield tuple(self._to_review(item) for item in page)

    @staticmethod
    def _to_review(item: dict[str, Any]) -> Review:
        """Convert an API review object to a Review."""
        try:
            user = item.get("user") or {}
            return Review(
                review_id=int(item["id"]),
                state=str(item.get("state", "")),
                user=user.get("login"),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ProviderError(f"Malformed review in GitHub API response: {item!r}") from e


class GitHubNotifierRepositoryImpl(NotifierRepository):
    """Notifier dismissing reviews and commenting through the GitHub API."""

    def __init__(self, client: GitHubClient, repository: RepositoryRef) -> None:
        self._client = client
        self._repository = repository

    def dismiss_review(self, pull_number: int, review_id: int, message: str) -> None:
        response = self._client.request(
            "PUT",
            f"{self._repository.path}/pulls/{pull_number}/reviews/{review_id}/dismissals",
            json={"message": message, "event": "DISMISS"},
        )
        logger.debug("Dismissed review %d: %s", review_id, response.text)

    def create_comment(self, pull_number: int, body: str) -> None:
        response = self._client.request(
            "POST",
            f"{self._repository.path}/issues/{pull_number}/comments",
            json={"body": body},
        )
        logger.debug("Created comment: %s", response.text)
