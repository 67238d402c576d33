"""Service for deciding whether two change-sets are the same."""

import difflib

from stale_pr.diffs.domain.value_objects import ComparisonResult, NormalizedDiff


class DiffComparisonService:
    """Service comparing normalized diffs and explaining their differences."""

    BEFORE_LABEL = "before-patch"
    AFTER_LABEL = "after-patch"

    def compare(self, before: NormalizedDiff, after: NormalizedDiff) -> ComparisonResult:
        """
        Compare two normalized diffs.

        Args:
            before: Normalized diff of the branch before the push
            after: Normalized diff of the branch after the push

        Returns:
            ComparisonResult, with a zero-context diff of diffs when they differ
        """
        if before.content == after.content:
            return ComparisonResult(equal=True)

        return ComparisonResult(equal=False, explanation=self.diff_of_diffs(before, after))

    def diff_of_diffs(self, before: NormalizedDiff, after: NormalizedDiff) -> str:
        """
        Render a unified diff treating both normalized diffs as files.

        Only changed lines are shown, so lines common to both change-sets are
        not repeated.

        Args:
            before: Normalized diff used as the old file
            after: Normalized diff used as the new file

        Returns:
            Unified diff text, empty when both diffs are identical
        """
        rendered = difflib.unified_diff(
            before.lines,
            after.lines,
            fromfile=self.BEFORE_LABEL,
            tofile=self.AFTER_LABEL,
            n=0,
            lineterm="",
        )
        return "\n".join(rendered)
