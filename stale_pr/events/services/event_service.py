"""Service for turning a webhook payload into a pull request event."""

import json
import logging
from pathlib import Path
from typing import Any

from stale_pr.errors import PreconditionError
from stale_pr.events.domain.value_objects import (
    PULL_REQUEST_EVENTS,
    SYNCHRONIZE_ACTION,
    PullRequestEvent,
)
from stale_pr.github.client import RepositoryRef
from stale_pr.staleness.domain.value_objects import RevisionTriple

logger = logging.getLogger(__name__)


class EventService:
    """Service for loading the triggering event and checking it can be acted on."""

    def load_event_file(self, event_name: str, event_path: Path) -> PullRequestEvent:
        """
        Load an event from a webhook payload file.

        Args:
            event_name: Name of the webhook event
            event_path: Path to the JSON payload

        Returns:
            The parsed PullRequestEvent

        Raises:
            PreconditionError: If the event is not a pull request synchronize event
            ValueError: If the payload cannot be read or is malformed
        """
        try:
            payload = json.loads(event_path.read_text(encoding="utf-8"))
        except OSError as e:
            raise ValueError(f"Cannot read event payload {event_path}: {e}") from e
        except json.JSONDecodeError as e:
            raise ValueError(f"Event payload {event_path} is not valid JSON: {e}") from e
        if not isinstance(payload, dict):
            raise ValueError(f"Event payload {event_path} is not a JSON object")
        return self.parse_event(event_name, payload)

    def parse_event(self, event_name: str, payload: dict[str, Any]) -> PullRequestEvent:
        """
        Build a PullRequestEvent from a webhook payload.

        The engine only acts when new commits are pushed to an existing pull
        request. Any other event or action is rejected before the payload is
        parsed, since those payloads lack the before/after revisions.

        Args:
            event_name: Name of the webhook event
            payload: Decoded webhook payload

        Returns:
            The parsed PullRequestEvent

        Raises:
            PreconditionError: If the event is not a pull request synchronize event
            ValueError: If the payload is missing required fields
        """
        if event_name not in PULL_REQUEST_EVENTS:
            raise PreconditionError(
                f"This action requires a pull_request synchronize event, got '{event_name}'"
            )
        action = payload.get("action")
        if action != SYNCHRONIZE_ACTION:
            raise PreconditionError(f"Skipping for {action} action")

        try:
            repository = payload["repository"]
            event = PullRequestEvent(
                event_name=event_name,
                action=action,
                repository=RepositoryRef(
                    owner=repository["owner"]["login"], name=repository["name"]
                ),
                pull_number=int(payload["number"]),
                revisions=RevisionTriple(
                    base=payload["pull_request"]["base"]["sha"],
                    before=payload["before"],
                    after=payload["after"],
                ),
            )
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed {event_name} event payload: missing {e}") from e

        logger.debug(
            "Loaded %s event for %s#%d", event_name, event.repository, event.pull_number
        )
        return event

    def ensure_synchronize(self, event: PullRequestEvent) -> None:
        """
        Check an already-built event can be acted on.

        Raises:
            PreconditionError: If the event is not a pull request synchronize event
        """
        if not event.is_pull_request_event:
            raise PreconditionError(
                f"This action requires a pull_request synchronize event, "
                f"got '{event.event_name}'"
            )
        if not event.is_synchronize:
            raise PreconditionError(f"Skipping for {event.action} action")
