"""Service for stripping non-semantic noise out of unified diffs."""

from stale_pr.diffs.domain.value_objects import NormalizedDiff, RawDiff


class DiffNormalizerService:
    """Service reducing a unified diff to its context, addition and removal lines."""

    # First characters of the lines that carry the actual change
    CONTENT_LINE_MARKERS: frozenset[str] = frozenset({" ", "+", "-"})

    def normalize(self, raw: RawDiff | str) -> NormalizedDiff:
        """
        Normalize a raw diff so that rebased or squashed copies compare equal.

        Every line not starting with a space, ``+`` or ``-`` is dropped. This
        removes lines like ``index b9c4b80ad4..e6c4b00bed 100644``, whose hashes
        change when the commit introducing an identical change is squashed, and
        hunk headers like ``@@ -481,7 +481,7 @@``, whose positions move when the
        branch is rebased onto upstream changes. Retained lines keep their
        markers and their order.

        Args:
            raw: Raw diff, or the diff text itself

        Returns:
            NormalizedDiff holding the retained lines joined with newlines
        """
        content = raw.content if isinstance(raw, RawDiff) else raw
        if not content:
            return NormalizedDiff(content="")

        kept = [line for line in content.split("\n") if self._is_content_line(line)]
        return NormalizedDiff(content="\n".join(kept))

    def _is_content_line(self, line: str) -> bool:
        """Check whether a diff line is a context, addition or removal line."""
        return line[:1] in self.CONTENT_LINE_MARKERS
