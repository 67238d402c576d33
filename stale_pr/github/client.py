"""Thin client for the GitHub REST API."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

import httpx

from stale_pr.errors import ProviderError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_PAGE_SIZE = 100


@dataclass(frozen=True)
class RepositoryRef:
    """Owner and name of a GitHub repository."""

    owner: str
    name: str

    def __post_init__(self) -> None:
        """Validate the repository reference."""
        if not self.owner or not self.name:
            raise ValueError("Repository owner and name cannot be empty")

    @classmethod
    def parse(cls, full_name: str) -> "RepositoryRef":
        """Build a reference from an ``owner/name`` string."""
        owner, sep, name = full_name.partition("/")
        if not sep or "/" in name:
            raise ValueError(
                f"Invalid repository '{full_name}'. Expected the form 'owner/name'"
            )
        return cls(owner=owner, name=name)

    @property
    def path(self) -> str:
        """API path prefix for this repository."""
        return f"/repos/{self.owner}/{self.name}"

    def __str__(self) -> str:
        return f"{self.owner}/{self.name}"


class GitHubClient:
    """GitHub REST client handling authentication, pagination and errors."""

    def __init__(
        self,
        token: str,
        api_url: str = DEFAULT_API_URL,
        debug: bool = False,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the HTTP client.

        Args:
            token: GitHub token allowed to read pull requests and dismiss reviews
            api_url: Base URL of the GitHub API
            debug: Log every request and response
            timeout: Request timeout in seconds
            transport: Optional httpx transport, used by tests

        Raises:
            ValueError: If token is empty or None
        """
        if not token:
            raise ValueError(
                "GitHub token is required. "
                "Pass the github-token input or set GITHUB_TOKEN"
            )

        event_hooks: dict[str, list[Any]] = {}
        if debug:
            event_hooks = {"request": [_log_request], "response": [_log_response]}

        self._client = httpx.Client(
            base_url=api_url,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
                "User-Agent": "stale-pr",
            },
            timeout=timeout,
            transport=transport,
            event_hooks=event_hooks,
        )

    def request(
        self,
        method: str,
        url: str,
        *,
        accept: str | None = None,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Send a request and fail on any non-success status.

        Args:
            method: HTTP method
            url: API path, or an absolute URL such as a pagination link
            accept: Optional media type overriding the default Accept header
            params: Query parameters
            json: JSON body

        Returns:
            The successful response

        Raises:
            ProviderError: On transport errors or non-2xx responses
        """
        headers = {"Accept": accept} if accept else None
        try:
            response = self._client.request(
                method, url, headers=headers, params=params, json=json
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ProviderError(
                f"GitHub API returned {e.response.status_code} for {method} {url}: "
                f"{_error_message(e.response)}"
            ) from e
        except httpx.RequestError as e:
            raise ProviderError(f"Failed to reach GitHub API for {method} {url}: {e}") from e
        return response

    def paginate(self, url: str, params: dict[str, Any] | None = None) -> Iterator[list[Any]]:
        """Yield the JSON array of every page, following ``Link: rel="next"``.

        Pages are fetched lazily, one request per iteration step.
        """
        page_params: dict[str, Any] | None = {"per_page": DEFAULT_PAGE_SIZE, **(params or {})}
        next_url: str | None = url
        while next_url:
            response = self.request("GET", next_url, params=page_params)
            try:
                page = response.json()
            except ValueError as e:
                raise ProviderError(f"GitHub API returned a non-JSON page for GET {next_url}") from e
            if not isinstance(page, list):
                raise ProviderError(f"GitHub API returned a non-list page for GET {next_url}")
            yield page
            next_link = response.links.get("next")
            next_url = next_link["url"] if next_link else None
            # The next link already carries the query string
            page_params = None

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _error_message(response: httpx.Response) -> str:
    """Extract GitHub's error message from a failed response."""
    try:
        payload = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return response.reason_phrase


def _log_request(request: httpx.Request) -> None:
    logger.debug("GitHub request: %s %s", request.method, request.url)


def _log_response(response: httpx.Response) -> None:
    request = response.request
    logger.debug(
        "GitHub response: %s %s -> %d", request.method, request.url, response.status_code
    )
