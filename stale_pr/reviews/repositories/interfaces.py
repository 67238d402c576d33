"""Repository interfaces for pull request reviews."""

from abc import ABC, abstractmethod
from collections.abc import Iterator

from stale_pr.reviews.domain.value_objects import Review


class ReviewRepository(ABC):
    """Interface for enumerating the reviews of a pull request."""

    @abstractmethod
    def list_reviews(self, pull_number: int) -> Iterator[tuple[Review, ...]]:
        """
        List every review of a pull request, one page at a time.

        The returned iterator is lazy, finite and cannot be restarted. Reviews
        appear in the order the host reports them.

        Args:
            pull_number: Number of the pull request

        Returns:
            Iterator over pages of reviews

        Raises:
            ProviderError: If a page cannot be fetched
        """
        ...


class NotifierRepository(ABC):
    """Interface for acting on a pull request once it is known to be stale."""

    @abstractmethod
    def dismiss_review(self, pull_number: int, review_id: int, message: str) -> None:
        """
        Revoke a review's approval.

        Args:
            pull_number: Number of the pull request
            review_id: Identifier of the review to dismiss
            message: Explanation attached to the dismissal

        Raises:
            ProviderError: If the dismissal fails
        """
        ...

    @abstractmethod
    def create_comment(self, pull_number: int, body: str) -> None:
        """
        Post a top-level comment on the pull request.

        Args:
            pull_number: Number of the pull request
            body: Markdown body of the comment

        Raises:
            ProviderError: If the comment cannot be created
        """
        ...
