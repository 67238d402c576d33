"""Staleness service deciding whether a push invalidates prior approvals."""

import itertools
import logging
from concurrent.futures import ThreadPoolExecutor

from stale_pr.diffs.domain.value_objects import RawDiff
from stale_pr.diffs.repositories.interfaces import DiffRepository
from stale_pr.diffs.services.comparison_service import DiffComparisonService
from stale_pr.diffs.services.normalizer_service import DiffNormalizerService
from stale_pr.events.domain.value_objects import PullRequestEvent
from stale_pr.reviews.repositories.interfaces import NotifierRepository, ReviewRepository
from stale_pr.staleness.domain.value_objects import (
    DismissalPolicy,
    RevisionTriple,
    StalenessOutcome,
)

logger = logging.getLogger(__name__)

DISMISSAL_MESSAGE = "PR has new changes, this review is stale. Diff of diffs:"
COMMENT_MESSAGE = "PR has new changes. Diff of diffs:"
TRUNCATION_NOTICE = "[Diff of diffs truncated due to size]"


class StalenessService:
    """Service orchestrating diff comparison and the dismissal of stale approvals.

    The caller must only invoke ``decide`` for events where new commits were
    pushed to an existing pull request (``EventService`` enforces this).
    """

    def __init__(
        self,
        diff_repository: DiffRepository,
        review_repository: ReviewRepository,
        notifier_repository: NotifierRepository,
        policy: DismissalPolicy | None = None,
    ) -> None:
        """
        Initialize StalenessService.

        Args:
            diff_repository: Repository providing branch diffs against the base
            review_repository: Repository listing the pull request's reviews
            notifier_repository: Repository dismissing reviews and posting comments
            policy: How to act on a stale pull request. Defaults to DismissalPolicy()
        """
        self._diff_repository = diff_repository
        self._review_repository = review_repository
        self._notifier_repository = notifier_repository
        self._policy = policy or DismissalPolicy()
        self._normalizer_service = DiffNormalizerService()
        self._comparison_service = DiffComparisonService()

    def decide(self, event: PullRequestEvent) -> StalenessOutcome:
        """
        Decide whether a push made the pull request's approvals stale, and act on it.

        Args:
            event: Synchronize event of the pull request

        Returns:
            StalenessOutcome with the diff of diffs when stale

        Raises:
            ProviderError: If fetching diffs, listing reviews, dismissing or
                commenting fails. Dismissals already made are kept.
        """
        revisions = event.revisions
        outcome = self.evaluate(revisions)
        if not outcome.stale:
            logger.info("Diffs are identical, skipping review dismissal")
            return outcome

        assert outcome.artifact is not None
        dismissed = self._dismiss_approvals(event.pull_number, outcome.artifact)
        comment_posted = self._post_comment(event.pull_number, outcome.artifact)
        return StalenessOutcome(
            stale=True,
            artifact=outcome.artifact,
            dismissed_review_ids=dismissed,
            comment_posted=comment_posted,
        )

    def evaluate(self, revisions: RevisionTriple) -> StalenessOutcome:
        """
        Compare the branch before and after the push, without side effects.

        Args:
            revisions: Base, before-push and after-push commits

        Returns:
            StalenessOutcome carrying no side effects
        """
        before_diff, after_diff = self._fetch_diffs(revisions)
        before = self._normalizer_service.normalize(before_diff)
        after = self._normalizer_service.normalize(after_diff)
        if before.is_empty:
            logger.debug("No change-set before the push, %s matches the base", revisions.before)

        result = self._comparison_service.compare(before, after)
        if result.equal:
            return StalenessOutcome(stale=False)

        logger.info("Diffs are different")
        logger.debug(
            "before (%s..%s):\n%s\nafter (%s..%s):\n%s",
            revisions.base,
            revisions.before,
            before.content,
            revisions.base,
            revisions.after,
            after.content,
        )
        return StalenessOutcome(stale=True, artifact=result.explanation)

    def _fetch_diffs(self, revisions: RevisionTriple) -> tuple[RawDiff, RawDiff]:
        """Fetch the before-push and after-push diffs concurrently."""
        with ThreadPoolExecutor(max_workers=2) as executor:
            before_future = executor.submit(
                self._diff_repository.compare, revisions.base, revisions.before
            )
            after_future = executor.submit(
                self._diff_repository.compare, revisions.base, revisions.after
            )
            return before_future.result(), after_future.result()

    def _dismiss_approvals(self, pull_number: int, artifact: str) -> tuple[int, ...]:
        """Dismiss every approved review once, in the order they are listed."""
        message = self.format_message(DISMISSAL_MESSAGE, artifact)
        reviews = itertools.chain.from_iterable(
            self._review_repository.list_reviews(pull_number)
        )

        dismissed: list[int] = []
        for review in reviews:
            if not review.is_approved or review.review_id in dismissed:
                continue
            if self._policy.dry_run:
                logger.info("Dry run: would dismiss review %d", review.review_id)
            else:
                logger.info("Dismissing review %d", review.review_id)
                self._notifier_repository.dismiss_review(
                    pull_number, review.review_id, message
                )
            dismissed.append(review.review_id)

        if self._policy.dry_run:
            return ()
        return tuple(dismissed)

    def _post_comment(self, pull_number: int, artifact: str) -> bool:
        """Post the summary comment when the policy asks for it."""
        if not self._policy.post_comment:
            return False
        if self._policy.dry_run:
            logger.info("Dry run: would comment on pull request #%d", pull_number)
            return False

        self._notifier_repository.create_comment(
            pull_number, self.format_message(COMMENT_MESSAGE, artifact)
        )
        logger.info("Created comment on pull request #%d", pull_number)
        return True

    def format_message(self, header: str, artifact: str) -> str:
        """
        Embed the diff of diffs in a message, truncating it if too long.

        Args:
            header: First line of the message
            artifact: Diff of diffs

        Returns:
            Markdown message with the artifact in a diff code block
        """
        max_size = self._policy.max_artifact_size
        if len(artifact) > max_size:
            artifact = artifact[:max_size] + "\n" + TRUNCATION_NOTICE
        return f"{header}\n```diff\n{artifact}\n```"
