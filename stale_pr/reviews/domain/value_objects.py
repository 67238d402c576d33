"""Value objects for the reviews domain."""

from dataclasses import dataclass
from enum import Enum


class ReviewState(str, Enum):
    """State of a pull request review as reported by GitHub."""

    APPROVED = "APPROVED"
    CHANGES_REQUESTED = "CHANGES_REQUESTED"
    COMMENTED = "COMMENTED"
    DISMISSED = "DISMISSED"
    PENDING = "PENDING"


@dataclass(frozen=True)
class Review:
    """A review left on a pull request."""

    review_id: int
    state: str
    user: str | None = None

    @property
    def is_approved(self) -> bool:
        return self.state == ReviewState.APPROVED
