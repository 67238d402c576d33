"""Settings loaded from the environment and an optional .env file."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from stale_pr.github.client import DEFAULT_API_URL


@dataclass(frozen=True)
class Settings:
    """Runtime configuration.

    Attributes:
        github_token: Token allowed to read diffs, list and dismiss reviews, and comment
        api_url: Base URL of the GitHub API
        debug: Verbose logging of engine steps and API calls
        post_comment: Post a summary comment on stale pull requests
        event_name: Name of the triggering webhook event
        event_path: Path to the triggering webhook payload
        slack_token: Slack bot token used by the Slack mirror
    """

    github_token: str | None = None
    api_url: str = DEFAULT_API_URL
    debug: bool = False
    post_comment: bool = True
    event_name: str | None = None
    event_path: Path | None = None
    slack_token: str | None = None


def _load_env_file() -> None:
    """Load environment variables from .env file."""
    # Try to find .env file in project root (parent of stale_pr package)
    project_root = Path(__file__).parent.parent.parent
    env_file = project_root / ".env"
    if env_file.exists():
        load_dotenv(env_file)
    else:
        # Fallback: try current directory
        load_dotenv()


def _getenv_bool(names: tuple[str, ...], default: bool) -> bool:
    """Read the first set variable among ``names`` as a "true"/"false" flag."""
    for name in names:
        value = os.getenv(name)
        if value is not None and value.strip():
            return value.strip().lower() == "true"
    return default


def _getenv_first(names: tuple[str, ...]) -> str | None:
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return None


def load_settings() -> Settings:
    """
    Build Settings from the environment.

    Action inputs (``INPUT_*``) take precedence over plain environment variables.

    Returns:
        The loaded Settings
    """
    _load_env_file()

    event_path = os.getenv("GITHUB_EVENT_PATH")
    return Settings(
        github_token=_getenv_first(("INPUT_GITHUB-TOKEN", "INPUT_GITHUB_TOKEN", "GITHUB_TOKEN")),
        api_url=os.getenv("GITHUB_API_URL") or DEFAULT_API_URL,
        debug=_getenv_bool(("INPUT_DEBUG", "STALE_PR_DEBUG"), default=False),
        post_comment=_getenv_bool(("INPUT_POST-COMMENT", "INPUT_POST_COMMENT"), default=True),
        event_name=os.getenv("GITHUB_EVENT_NAME") or None,
        event_path=Path(event_path) if event_path else None,
        slack_token=os.getenv("SLACK_TOKEN") or None,
    )
