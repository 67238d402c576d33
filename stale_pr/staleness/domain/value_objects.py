"""Value objects for the staleness domain."""

from dataclasses import dataclass

DEFAULT_MAX_ARTIFACT_SIZE = 60000


@dataclass(frozen=True)
class RevisionTriple:
    """Commit states involved in a push to a pull request branch.

    Attributes:
        base: Base commit the pull request is compared against
        before: Branch tip before the push
        after: Branch tip after the push
    """

    base: str
    before: str
    after: str

    def __post_init__(self) -> None:
        """Validate that every revision is set."""
        for field_name in ("base", "before", "after"):
            if not getattr(self, field_name):
                raise ValueError(f"Revision '{field_name}' cannot be empty")


@dataclass(frozen=True)
class DismissalPolicy:
    """How the engine acts on a stale pull request.

    Attributes:
        post_comment: Post one summary comment after dismissing approvals
        dry_run: Log the dismissals and comment instead of performing them
        max_artifact_size: Longest diff of diffs embedded in a message
    """

    post_comment: bool = True
    dry_run: bool = False
    max_artifact_size: int = DEFAULT_MAX_ARTIFACT_SIZE

    def __post_init__(self) -> None:
        """Validate the policy."""
        if self.max_artifact_size <= 0:
            raise ValueError("max_artifact_size must be a positive number of characters")


@dataclass(frozen=True)
class StalenessOutcome:
    """Decision reached for a push.

    Attributes:
        stale: Whether the push changed the pull request's net change
        artifact: Diff of diffs explaining the change, only when stale
        dismissed_review_ids: Approved reviews that were dismissed
        comment_posted: Whether the summary comment was created
    """

    stale: bool
    artifact: str | None = None
    dismissed_review_ids: tuple[int, ...] = ()
    comment_posted: bool = False

    def __post_init__(self) -> None:
        """Validate that the artifact accompanies exactly the stale outcomes."""
        if self.stale and not self.artifact:
            raise ValueError("A stale outcome requires an artifact")
        if not self.stale and (
            self.artifact is not None or self.dismissed_review_ids or self.comment_posted
        ):
            raise ValueError("A fresh outcome cannot carry an artifact or side effects")
