"""Errors shared across the stale-pr contexts."""


class PreconditionError(Exception):
    """Raised when the triggering event is not one the engine acts on.

    This is a skip, not a failure: callers log it and exit successfully.
    """


class ProviderError(RuntimeError):
    """Raised when an external collaborator (GitHub API, git) fails.

    Never retried. Side effects performed before the failure are not undone.
    """
