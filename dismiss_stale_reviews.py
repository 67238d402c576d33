#!/usr/bin/env python3
"""
Script to dismiss stale pull request approvals after a push:
- Compares the pull request diff before and after the push, ignoring hash and
  line-position noise from rebases and squashes
- If the net change differs, dismisses every approved review and posts a
  "diff of diffs" comment explaining what changed

The triggering event is read from GITHUB_EVENT_NAME / GITHUB_EVENT_PATH when run
as a GitHub Action, or given explicitly with --repository, --pull-number,
--base, --before and --after.
"""

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

from stale_pr.config.settings import Settings, load_settings
from stale_pr.diffs.repositories.implementations import (
    GitHubDiffRepositoryImpl,
    LocalGitDiffRepositoryImpl,
)
from stale_pr.diffs.repositories.interfaces import DiffRepository
from stale_pr.errors import PreconditionError, ProviderError
from stale_pr.events.domain.value_objects import SYNCHRONIZE_ACTION, PullRequestEvent
from stale_pr.events.services.event_service import EventService
from stale_pr.github.client import GitHubClient, RepositoryRef
from stale_pr.notifications.repositories.implementations import (
    SlackNotificationRepositoryImpl,
)
from stale_pr.notifications.services.notification_service import NotificationService
from stale_pr.reviews.repositories.implementations import (
    GitHubNotifierRepositoryImpl,
    GitHubReviewRepositoryImpl,
)
from stale_pr.staleness.domain.value_objects import (
    DEFAULT_MAX_ARTIFACT_SIZE,
    DismissalPolicy,
    RevisionTriple,
    StalenessOutcome,
)
from stale_pr.staleness.services.staleness_service import StalenessService

logger = logging.getLogger("dismiss_stale_reviews")

MANUAL_EVENT_OPTIONS = ("repository", "pull_number", "base", "before", "after")


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        description=(
            "Dismiss approved reviews of a pull request when a push changed "
            "its net code change"
        )
    )
    parser.add_argument(
        "--event-name",
        type=str,
        default=None,
        help="Webhook event name (default: $GITHUB_EVENT_NAME)",
    )
    parser.add_argument(
        "--event-path",
        type=Path,
        default=None,
        help="Path to the webhook event payload (default: $GITHUB_EVENT_PATH)",
    )
    parser.add_argument(
        "--repository",
        type=str,
        default=None,
        help="Repository as owner/name, instead of reading an event payload",
    )
    parser.add_argument("--pull-number", type=int, default=None, help="Pull request number")
    parser.add_argument("--base", type=str, default=None, help="Base commit of the pull request")
    parser.add_argument("--before", type=str, default=None, help="Branch tip before the push")
    parser.add_argument("--after", type=str, default=None, help="Branch tip after the push")
    parser.add_argument(
        "--local-repo",
        type=Path,
        default=None,
        help="Compute diffs with git in this local checkout instead of the GitHub API",
    )
    parser.add_argument(
        "--no-comment",
        action="store_true",
        help="Do not post a summary comment after dismissing approvals",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report the decision without dismissing reviews or commenting",
    )
    parser.add_argument(
        "--max-artifact-size",
        type=int,
        default=DEFAULT_MAX_ARTIFACT_SIZE,
        help=(
            "Maximum diff of diffs size in characters embedded in messages "
            f"(default: {DEFAULT_MAX_ARTIFACT_SIZE})"
        ),
    )
    parser.add_argument(
        "--slack-channel",
        type=str,
        default=None,
        help="Also post stale notices to this Slack channel (requires SLACK_TOKEN)",
    )
    parser.add_argument("--debug", action="store_true", help="Enable verbose logging")
    return parser


def resolve_event(args: argparse.Namespace, settings: Settings) -> PullRequestEvent:
    """
    Build the pull request event from explicit options or the event payload.

    Raises:
        PreconditionError: If the event is not a pull request synchronize event
        ValueError: If the options or payload are incomplete
    """
    event_service = EventService()
    manual_values = [getattr(args, name) for name in MANUAL_EVENT_OPTIONS]
    if any(value is not None for value in manual_values):
        missing = [
            "--" + name.replace("_", "-")
            for name, value in zip(MANUAL_EVENT_OPTIONS, manual_values)
            if value is None
        ]
        if missing:
            raise ValueError(f"Missing options: {', '.join(missing)}")
        event = PullRequestEvent(
            event_name=args.event_name or "pull_request",
            action=SYNCHRONIZE_ACTION,
            repository=RepositoryRef.parse(args.repository),
            pull_number=args.pull_number,
            revisions=RevisionTriple(base=args.base, before=args.before, after=args.after),
        )
        event_service.ensure_synchronize(event)
        return event

    event_name = args.event_name or settings.event_name
    event_path = args.event_path or settings.event_path
    if not event_name or event_path is None:
        raise ValueError(
            "No event to process. Run from a GitHub Actions pull_request workflow "
            "or pass --repository, --pull-number, --base, --before and --after"
        )
    return event_service.load_event_file(event_name, event_path)


def validate_local_revisions(
    repo: LocalGitDiffRepositoryImpl, repo_path: Path, revisions: RevisionTriple
) -> tuple[bool, str]:
    """
    Validate that the local repository knows every revision.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not repo_path.is_dir():
        return False, f"Repository path is not a directory: {repo_path}"

    for label, revision in (
        ("Base", revisions.base),
        ("Before", revisions.before),
        ("After", revisions.after),
    ):
        if not repo.revision_exists(revision):
            return False, f"{label} commit '{revision}' does not exist in the repository"

    return True, "All revisions are valid"


def run(
    args: argparse.Namespace, settings: Settings, event: PullRequestEvent
) -> StalenessOutcome:
    """Wire the repositories for the event and run the staleness decision."""
    policy = DismissalPolicy(
        post_comment=settings.post_comment and not args.no_comment,
        dry_run=args.dry_run,
        max_artifact_size=args.max_artifact_size,
    )

    with GitHubClient(
        token=settings.github_token or "", api_url=settings.api_url, debug=settings.debug
    ) as client:
        diff_repository: DiffRepository
        if args.local_repo is not None:
            local_repository = LocalGitDiffRepositoryImpl(args.local_repo)
            is_valid, message = validate_local_revisions(
                local_repository, args.local_repo, event.revisions
            )
            if not is_valid:
                raise ValueError(message)
            diff_repository = local_repository
        else:
            diff_repository = GitHubDiffRepositoryImpl(client, event.repository)

        staleness_service = StalenessService(
            diff_repository=diff_repository,
            review_repository=GitHubReviewRepositoryImpl(client, event.repository),
            notifier_repository=GitHubNotifierRepositoryImpl(client, event.repository),
            policy=policy,
        )
        return staleness_service.decide(event)


def main(argv: list[str] | None = None) -> None:
    """Main function to parse arguments, decide staleness and report the outcome."""
    args = build_parser().parse_args(argv)
    settings = load_settings()
    debug = args.debug or settings.debug
    if debug != settings.debug:
        settings = dataclasses.replace(settings, debug=debug)

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        event = resolve_event(args, settings)
    except PreconditionError as e:
        logger.info("%s", e)
        print(f"✓ Nothing to do: {e}")
        sys.exit(0)
    except ValueError as e:
        print(f"✗ Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    revisions = event.revisions
    print(f"✓ Checking {event.repository}#{event.pull_number}")
    print(f"  Base: {revisions.base[:8]}")
    print(f"  Before: {revisions.before[:8]}")
    print(f"  After: {revisions.after[:8]}")

    try:
        outcome = run(args, settings, event)
    except ValueError as e:
        print(f"✗ Configuration error: {e}", file=sys.stderr)
        if not settings.github_token:
            print(
                "  Hint: Set GITHUB_TOKEN in .env file or environment",
                file=sys.stderr,
            )
        sys.exit(1)
    except ProviderError as e:
        logger.error("%s", e)
        print(f"✗ Failed to process pull request: {e}", file=sys.stderr)
        sys.exit(1)

    if not outcome.stale:
        print("✓ Diffs are identical, approvals are still valid")
        sys.exit(0)

    print("\n📄 Diff of diffs:\n")
    print(outcome.artifact)
    if args.dry_run:
        print("\n✓ Dry run: no review was dismissed")
    else:
        print(f"\n✓ Dismissed {len(outcome.dismissed_review_ids)} stale approval(s)")
        if outcome.comment_posted:
            print("✓ Posted diff of diffs comment")

    if args.slack_channel and args.dry_run:
        print(f"✓ Dry run: would send stale notice to #{args.slack_channel}")
    elif args.slack_channel:
        try:
            print(f"\n📤 Sending stale notice to Slack channel #{args.slack_channel}...")
            if not settings.slack_token:
                raise ValueError(
                    "SLACK_TOKEN environment variable is required. "
                    "Please set it in a .env file or as an environment variable."
                )
            notification_service = NotificationService(
                SlackNotificationRepositoryImpl(token=settings.slack_token)
            )
            notification_service.send_stale_notice(event, outcome, args.slack_channel)
            print(f"✓ Stale notice sent to #{args.slack_channel}")
        except ValueError as e:
            print(f"\n✗ Configuration error: {e}", file=sys.stderr)
            sys.exit(1)
        except RuntimeError as e:
            print(f"\n✗ Failed to send to Slack: {e}", file=sys.stderr)
            sys.exit(1)

    sys.exit(0)


if __name__ == "__main__":
    main()
