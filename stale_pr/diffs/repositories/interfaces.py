"""Repository interfaces for diff retrieval."""

from abc import ABC, abstractmethod

from stale_pr.diffs.domain.value_objects import RawDiff


class DiffRepository(ABC):
    """Interface for fetching the diff of a branch state against its base."""

    @abstractmethod
    def compare(self, base: str, head: str) -> RawDiff:
        """
        Get the unified diff of ``head`` relative to ``base``.

        The comparison uses three-dot semantics: the diff runs from the merge
        base of ``base`` and ``head`` to ``head``.

        Args:
            base: Revision the branch is compared against
            head: Branch revision

        Returns:
            RawDiff containing the diff text, possibly empty

        Raises:
            ProviderError: If the diff cannot be retrieved
        """
        ...
