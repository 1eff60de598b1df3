"""
GitHub API client for the combined status check.

This module provides a small asynchronous GitHub REST client that reads commit
statuses and check-runs, following ``Link`` pagination until every page has
been consumed.
"""

import time
from collections.abc import AsyncIterator
from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from .exceptions import AuthenticationError, GitHubAPIError
from .models import CheckRunRecord, StatusRecord

logger = structlog.get_logger(__name__)

PER_PAGE = 100
API_VERSION = "2022-11-28"
LOW_RATE_LIMIT_THRESHOLD = 10


class GitHubClient:
    """
    GitHub API client for commit status data.

    The client owns an ``httpx.AsyncClient`` unless one is passed in, and
    records rate limit information from every response.
    """

    def __init__(
        self,
        token: str,
        repository: str,
        api_url: str = "https://api.github.com",
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the GitHub client.

        Args:
            token: Token sent as a bearer credential
            repository: Repository full name (owner/repo)
            api_url: Base URL of the GitHub REST API
            timeout: Request timeout in seconds
            http_client: Optional preconfigured HTTP client
        """
        self.repository = repository
        self.api_url = api_url.rstrip("/")
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)
        self._headers = {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {token}",
            "X-GitHub-Api-Version": API_VERSION,
        }
        self._rate_limit_remaining: int | None = None
        self._rate_limit_reset_time: float | None = None

    @classmethod
    def from_settings(cls, settings: Any) -> "GitHubClient":
        """Create a client from application settings."""
        return cls(
            token=settings.github_token,
            repository=settings.github_repository,
            api_url=settings.github_api_url,
            timeout=settings.request_timeout_seconds,
        )

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this client created it."""
        if self._owns_http_client:
            await self._http.aclose()

    @property
    def rate_limit_remaining(self) -> int | None:
        return self._rate_limit_remaining

    def _update_rate_limit_info(self, response: httpx.Response) -> None:
        """Update rate limit information from GitHub response headers."""
        remaining = response.headers.get("X-RateLimit-Remaining")
        reset = response.headers.get("X-RateLimit-Reset")
        if remaining is None:
            return

        try:
            self._rate_limit_remaining = int(remaining)
            self._rate_limit_reset_time = float(reset) if reset else None
        except ValueError:
            logger.warning(
                "Unparseable rate limit headers", remaining=remaining, reset=reset
            )
            return

        if self._rate_limit_remaining <= LOW_RATE_LIMIT_THRESHOLD:
            reset_in = (
                self._rate_limit_reset_time - time.time()
                if self._rate_limit_reset_time
                else None
            )
            logger.warning(
                "Rate limit approaching",
                remaining=self._rate_limit_remaining,
                reset_in_seconds=reset_in,
            )

    async def _get(
        self, url: str, params: dict[str, Any] | None = None
    ) -> httpx.Response:
        """Issue a GET request and map failures to client exceptions."""
        try:
            response = await self._http.get(url, params=params, headers=self._headers)
        except httpx.HTTPError as e:
            logger.error("GitHub request failed", url=url, error=str(e))
            raise GitHubAPIError(f"Request to {url} failed: {e}") from e

        self._update_rate_limit_info(response)

        if response.status_code == 401:
            raise AuthenticationError(
                f"GitHub rejected the token: {response.text}", context={"url": url}
            )
        if response.is_error:
            logger.error(
                "GitHub API returned an error",
                url=url,
                status_code=response.status_code,
            )
            raise GitHubAPIError(
                f"GitHub API error {response.status_code} for {url}: {response.text}",
                status_code=response.status_code,
                context={"url": url},
            )
        return response

    async def _paginate(
        self, path: str, key: str
    ) -> AsyncIterator[list[dict[str, Any]]]:
        """
        Yield the ``key`` list of every page of a paginated endpoint.

        Args:
            path: API path relative to the base URL
            key: Name of the list field in each page's JSON body
        """
        url: str | None = f"{self.api_url}{path}"
        params: dict[str, Any] | None = {"per_page": PER_PAGE}
        page = 0

        while url:
            response = await self._get(url, params=params)
            page += 1
            try:
                items = response.json()[key]
            except (ValueError, KeyError, TypeError) as e:
                raise GitHubAPIError(
                    f"Unexpected response body from {url}: missing '{key}'",
                    status_code=response.status_code,
                    context={"url": url, "page": page},
                ) from e

            logger.debug("Fetched page", path=path, page=page, items=len(items))
            yield items

            # The next link already carries the query string
            url = response.links.get("next", {}).get("url")
            params = None

    async def iter_status_pages(self, sha: str) -> AsyncIterator[list[StatusRecord]]:
        """
        Iterate pages of the combined status for a commit.

        Args:
            sha: Commit SHA

        Returns:
            Async iterator of status record lists, one per page
        """
        path = f"/repos/{self.repository}/commits/{sha}/status"
        async for items in self._paginate(path, "statuses"):
            yield [self._parse(StatusRecord, item, path) for item in items]

    async def iter_check_run_pages(
        self, sha: str
    ) -> AsyncIterator[list[CheckRunRecord]]:
        """
        Iterate pages of check-runs for a commit.

        Args:
            sha: Commit SHA

        Returns:
            Async iterator of check-run record lists, one per page
        """
        path = f"/repos/{self.repository}/commits/{sha}/check-runs"
        async for items in self._paginate(path, "check_runs"):
            yield [self._parse(CheckRunRecord, item, path) for item in items]

    @staticmethod
    def _parse(model: Any, item: dict[str, Any], path: str) -> Any:
        try:
            return model.model_validate(item)
        except ValidationError as e:
            raise GitHubAPIError(
                f"Malformed record from {path}: {e}", context={"path": path}
            ) from e
