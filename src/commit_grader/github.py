"""GitHub REST API client that feeds commits and file changes to the grader."""

from __future__ import annotations

import logging
import re
import time
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any
from urllib.parse import urlparse

import httpx

from .config import (
    CACHE_SECONDS,
    COMMITS_PER_PAGE,
    DEFAULT_API_URL,
    REPOS_PER_PAGE,
    RETRY_ATTEMPTS,
    RETRY_BASE_DELAY,
    RICH_RULES,
    ScoringRules,
)
from .models import Commit, FileChange, Repository
from .quality import score_commit_message
from .retry import retry_with_backoff

logger = logging.getLogger(__name__)

_SHORTHAND_PATTERN = re.compile(r"^([\w.-]+)/([\w.-]+)$")


class GitHubError(Exception):
    """Error talking to the GitHub API."""

    pass


class RepositoryNotFoundError(GitHubError):
    """The repository or user does not exist or is private."""

    pass


class RateLimitError(GitHubError):
    """The API rate limit is exhausted."""

    def __init__(self, message: str, reset_at: datetime | None = None) -> None:
        super().__init__(message)
        self.reset_at = reset_at


class FetchError(GitHubError):
    """Any other unsuccessful API response."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def parse_repo_url(url: str) -> tuple[str, str] | None:
    """Extract ``(owner, repo)`` from a GitHub URL or ``owner/repo``.

    Args:
        url: ``https://github.com/owner/repo[/...]`` or ``owner/repo``

    Returns:
        The owner and repository names, or None if the input is not usable
    """
    url = url.strip()
    shorthand = _SHORTHAND_PATTERN.match(url)
    if shorthand:
        return shorthand.group(1), shorthand.group(2)

    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return None
    parts = [p for p in parsed.path.split("/") if p]
    if len(parts) < 2:
        return None
    repo = parts[1][:-4] if parts[1].endswith(".git") else parts[1]
    return parts[0], repo


def _parse_date(value: str | None) -> datetime:
    if not value:
        return datetime.fromtimestamp(0, timezone.utc)
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class GitHubClient:
    """Thin wrapper over the GitHub REST API."""

    def __init__(
        self,
        token: str | None = None,
        base_url: str = DEFAULT_API_URL,
        per_page: int = COMMITS_PER_PAGE,
        retry_attempts: int = RETRY_ATTEMPTS,
        retry_base_delay: float = RETRY_BASE_DELAY,
        cache_seconds: float = CACHE_SECONDS,
        client: httpx.Client | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the client.

        Args:
            token: Personal access token for higher rate limits
            base_url: API root, for GitHub Enterprise
            per_page: Commits fetched per page
            retry_attempts: Attempts per request on network failure
            retry_base_delay: First backoff delay, in seconds
            cache_seconds: How long a fetched commit page is reused
            client: Pre-configured httpx client (tests pass a mock transport)
            clock: Monotonic clock used for cache expiry
        """
        headers = {"Accept": "application/vnd.github.v3+json"}
        if token:
            headers["Authorization"] = f"token {token}"
        self.per_page = per_page
        self.retry_attempts = retry_attempts
        self.retry_base_delay = retry_base_delay
        self.cache_seconds = cache_seconds
        self._clock = clock
        self._cache: dict[tuple[str, str, int], tuple[float, list[Commit], int]] = {}
        self._client = client or httpx.Client(base_url=base_url, timeout=30.0)
        self._client.headers.update(headers)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _get(self, url: str, params: dict[str, Any] | None = None) -> httpx.Response:
        return retry_with_backoff(
            lambda: self._client.get(url, params=params),
            max_attempts=self.retry_attempts,
            base_delay=self.retry_base_delay,
        )

    @staticmethod
    def _raise_for_status(response: httpx.Response, not_found: str, what: str) -> None:
        if response.is_success:
            return
        if response.status_code == 404:
            raise RepositoryNotFoundError(not_found)
        if response.status_code == 403:
            reset = response.headers.get("X-RateLimit-Reset")
            reset_at = datetime.fromtimestamp(int(reset), timezone.utc) if reset else None
            when = reset_at.strftime("%H:%M:%S UTC") if reset_at else "unknown"
            raise RateLimitError(
                f"GitHub API rate limit exceeded.\nResets at: {when}\n"
                "Consider setting GITHUB_TOKEN for higher limits.",
                reset_at=reset_at,
            )
        raise FetchError(
            f"Failed to fetch {what} ({response.status_code})", status_code=response.status_code
        )

    def _resolve(self, repo: str) -> tuple[str, str]:
        info = parse_repo_url(repo)
        if info is None:
            raise GitHubError(f"Invalid GitHub repository: {repo}")
        return info

    def fetch_commits(
        self, repo: str, page: int = 1, rules: ScoringRules = RICH_RULES
    ) -> tuple[list[Commit], int]:
        """Fetch and score one page of commits.

        Args:
            repo: Repository URL or ``owner/repo``
            page: 1-based page number
            rules: Scoring rules applied to each message

        Returns:
            Tuple of (commits newest first, total commit count in the repository)

        Raises:
            GitHubError: If the repository is invalid or the request fails
        """
        owner, name = self._resolve(repo)
        key = (owner, name, page)
        cached = self._cache.get(key)
        if cached and self._clock() - cached[0] < self.cache_seconds:
            logger.debug("Using cached commits for %s/%s page %d", owner, name, page)
            return cached[1], cached[2]

        response = self._get(
            f"/repos/{owner}/{name}/commits", params={"per_page": self.per_page, "page": page}
        )
        self._raise_for_status(
            response,
            "Repository not found. Please check:\n"
            "• The repository exists\n"
            "• The URL is correct\n"
            "• The repository is public",
            "commits",
        )

        commits = [self._to_commit(item, rules) for item in response.json()]
        total = self._total_count(response) or len(commits)
        self._cache[key] = (self._clock(), commits, total)
        return commits, total

    def _to_commit(self, item: dict[str, Any], rules: ScoringRules) -> Commit:
        message = item.get("commit", {}).get("message", "")
        author = item.get("commit", {}).get("author") or {}
        return Commit(
            sha=item.get("sha", ""),
            message=message,
            author=author.get("name", ""),
            date=_parse_date(author.get("date")),
            url=item.get("html_url", ""),
            analysis=score_commit_message(message, rules),
        )

    def _total_count(self, response: httpx.Response) -> int:
        """Work out the repository-wide count from the ``Link`` header."""
        last = response.links.get("last")
        if not last:
            return 0
        last_url = last.get("url", "")
        match = re.search(r"[?&]page=(\d+)", last_url)
        if not match:
            return 0
        last_page = int(match.group(1))
        try:
            last_response = self._client.get(last_url)
        except httpx.HTTPError as e:
            logger.debug("Could not fetch last page, estimating count: %s", e)
            return last_page * self.per_page
        if not last_response.is_success:
            return last_page * self.per_page
        return (last_page - 1) * self.per_page + len(last_response.json())

    def fetch_user_repos(self, username: str) -> list[Repository]:
        """List a user's public repositories, most recently updated first."""
        response = self._get(
            f"/users/{username}/repos",
            params={"sort": "updated", "per_page": REPOS_PER_PAGE, "type": "public"},
        )
        self._raise_for_status(response, "User not found.", "repositories")
        return [Repository.from_github(item) for item in response.json()]

    def fetch_commit_files(self, repo: str, sha: str) -> list[FileChange]:
        """Fetch the changed files of one commit for message synthesis."""
        owner, name = self._resolve(repo)
        response = self._get(f"/repos/{owner}/{name}/commits/{sha}")
        self._raise_for_status(response, f"Commit {sha} not found.", "commit details")
        return [FileChange.from_github(f) for f in response.json().get("files", [])]
