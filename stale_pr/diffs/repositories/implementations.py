"""Concrete implementations of diff repositories."""

import subprocess
from pathlib import Path

from stale_pr.diffs.domain.value_objects import RawDiff
from stale_pr.diffs.repositories.interfaces import DiffRepository
from stale_pr.errors import ProviderError
from stale_pr.github.client import GitHubClient, RepositoryRef

DIFF_MEDIA_TYPE = "application/vnd.github.diff"


class GitHubDiffRepositoryImpl(DiffRepository):
    """Diff repository backed by the GitHub compare API."""

    def __init__(self, client: GitHubClient, repository: RepositoryRef) -> None:
        """
        Initialize GitHubDiffRepositoryImpl.

        Args:
            client: GitHub API client
            repository: Repository holding the pull request
        """
        self._client = client
        self._repository = repository

    def compare(self, base: str, head: str) -> RawDiff:
        """Get the diff of ``head`` relative to ``base`` through ``compare/{base}...{head}``."""
        response = self._client.request(
            "GET",
            f"{self._repository.path}/compare/{base}...{head}",
            accept=DIFF_MEDIA_TYPE,
        )
        return RawDiff(base=base, head=head, content=response.text)


class LocalGitDiffRepositoryImpl(DiffRepository):
    """Diff repository running ``git diff`` in a local checkout."""

    def __init__(self, repo_path: Path) -> None:
        """
        Initialize LocalGitDiffRepositoryImpl.

        Args:
            repo_path: Path to the git repository
        """
        self._repo_path = repo_path

    def compare(self, base: str, head: str) -> RawDiff:
        """Get the diff of ``head`` relative to ``base`` through ``git diff base...head``."""
        try:
            result = subprocess.run(
                ["git", "diff", f"{base}...{head}"],
                cwd=self._repo_path,
                capture_output=True,
                text=True,
                check=True,
            )
        except subprocess.CalledProcessError as e:
            raise ProviderError(
                f"Failed to get diff between {base} and {head}: "
                f"{e.stderr.strip() if e.stderr else str(e)}"
            ) from e
        except OSError as e:
            raise ProviderError(f"Failed to run git in {self._repo_path}: {e}") from e
        return RawDiff(base=base, head=head, content=result.stdout)

    def revision_exists(self, revision: str) -> bool:
        """Check if the revision exists in the repository."""
        result = subprocess.run(
            ["git", "cat-file", "-e", f"{revision}^{{commit}}"],
            cwd=self._repo_path,
            capture_output=True,
            check=False,
        )
        return result.returncode == 0
