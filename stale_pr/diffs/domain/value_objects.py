"""Value objects for the diffs domain."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RawDiff:
    """Unified diff of ``head`` relative to ``base`` as returned by a provider."""

    base: str
    head: str
    content: str


@dataclass(frozen=True)
class NormalizedDiff:
    """Diff text reduced to its content lines.

    Two normalized diffs are compared by exact text equality only.
    """

    content: str

    @property
    def lines(self) -> list[str]:
        """Lines of the normalized diff; an empty diff has no lines."""
        if not self.content:
            return []
        return self.content.split("\n")

    @property
    def is_empty(self) -> bool:
        return not self.content


@dataclass(frozen=True)
class ComparisonResult:
    """Result of comparing two normalized diffs.

    Attributes:
        equal: Whether both diffs are textually identical
        explanation: Diff of diffs, present only when ``equal`` is False
    """

    equal: bool
    explanation: str | None = None

    def __post_init__(self) -> None:
        """Validate that an explanation accompanies exactly the unequal results."""
        if self.equal and self.explanation is not None:
            raise ValueError("An equal comparison cannot carry an explanation")
        if not self.equal and not self.explanation:
            raise ValueError("An unequal comparison requires an explanation")
