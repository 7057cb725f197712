"""GitHub REST API adapter, implements the RepoFetcher port."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any
from urllib.parse import quote

import httpx

from repo_dashboard.domain.exceptions import (
    GitHubApiError,
    GitHubRateLimitError,
    InvalidCredentialError,
    RepositoryAccessDeniedError,
    RepositoryNotFoundError,
)
from repo_dashboard.domain.value_objects import RepoId

logger = logging.getLogger(__name__)

_GITHUB_API = "https://api.github.com"
_API_VERSION = "2022-11-28"


class GitHubRestAdapter:
    """Concrete RepoFetcher backed by the GitHub v3 REST API.

    One adapter is bound to one user's access token; the underlying
    :class:`httpx.AsyncClient` is shared across adapters.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        token: str,
        *,
        base_url: str = _GITHUB_API,
        api_version: str = _API_VERSION,
    ) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._api_headers: dict[str, str] = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": api_version,
            "User-Agent": "repo-dashboard/1.0",
            "Authorization": f"Bearer {token}",
        }

    # ── Repository endpoints ────────────────────────────────────────────

    async def fetch_repository(self, repo_id: RepoId) -> Any:
        """GET /repos/{owner}/{repo}."""
        return await self._api_get_json(f"/repos/{repo_id.full_name}")

    async def fetch_contributors(self, repo_id: RepoId) -> Any:
        """GET /repos/{owner}/{repo}/contributors."""
        return await self._api_get_json(
            f"/repos/{repo_id.full_name}/contributors",
            params={"per_page": "100"},
        )

    async def fetch_languages(self, repo_id: RepoId) -> Any:
        """GET /repos/{owner}/{repo}/languages → {lang: bytes}."""
        return await self._api_get_json(f"/repos/{repo_id.full_name}/languages")

    async def fetch_commits(self, repo_id: RepoId, per_page: int = 100) -> Any:
        """GET /repos/{owner}/{repo}/commits?per_page=N (newest first)."""
        return await self._api_get_json(
            f"/repos/{repo_id.full_name}/commits",
            params={"per_page": str(per_page)},
        )

    async def list_directory(self, repo_id: RepoId, path: str = "") -> Any:
        """GET /repos/{owner}/{repo}/contents/{path}."""
        path = path.strip("/")
        return await self._api_get_json(
            f"/repos/{repo_id.full_name}/contents/{quote(path)}"
        )

    # ── User endpoints ──────────────────────────────────────────────────

    async def list_user_repos(self, page: int = 1, per_page: int = 20) -> Any:
        """GET /user/repos sorted by last update, newest first."""
        return await self._api_get_json(
            "/user/repos",
            params={
                "sort": "updated",
                "direction": "desc",
                "page": str(page),
                "per_page": str(per_page),
            },
        )

    async def search_repos(self, query: str, per_page: int = 20) -> Any:
        """GET /search/repositories?q=..."""
        return await self._api_get_json(
            "/search/repositories",
            params={"q": query, "per_page": str(per_page)},
        )

    # ── Transport ───────────────────────────────────────────────────────

    async def _api_get_json(
        self,
        endpoint: str,
        params: dict[str, str] | None = None,
    ) -> Any:
        """Perform a GitHub API GET request and decode the JSON body."""
        resp = await self._api_get(endpoint, params=params)
        try:
            return resp.json()
        except ValueError as exc:
            raise GitHubApiError(
                f"GitHub API returned a malformed body for {endpoint}"
            ) from exc

    async def _api_get(
        self,
        endpoint: str,
        params: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Perform a GitHub API GET request with error translation."""
        url = f"{self._base_url}{endpoint}"
        try:
            resp = await self._client.get(
                url, headers=self._api_headers, params=params
            )
        except httpx.TimeoutException as exc:
            raise GitHubApiError(f"Timed out fetching {url}") from exc
        except httpx.HTTPError as exc:
            raise GitHubApiError(
                f"Network error fetching {url}: {exc}"
            ) from exc

        logger.debug("GET %s -> %d", url, resp.status_code)

        if resp.is_success:
            return resp

        if resp.status_code == 404:
            raise RepositoryNotFoundError(f"Resource not found: {endpoint}")

        if resp.status_code == 401:
            raise InvalidCredentialError(
                "GitHub rejected the access token. Sign in again."
            )

        if resp.status_code == 403:
            remaining = resp.headers.get("x-ratelimit-remaining", "")
            if remaining == "0":
                reset_raw = resp.headers.get("x-ratelimit-reset", "")
                try:
                    reset_str = datetime.fromtimestamp(int(reset_raw), tz=timezone.utc).strftime(
                        "%Y-%m-%d %H:%M:%S UTC"
                    )
                except (ValueError, OSError):
                    reset_str = reset_raw or "unknown"
                raise GitHubRateLimitError(
                    f"GitHub API rate limit exceeded. Resets at {reset_str}."
                )
            raise RepositoryAccessDeniedError(
                f"Access denied to {endpoint}."
            )

        if resp.status_code == 429:
            raise GitHubRateLimitError("GitHub API rate limit exceeded (HTTP 429).")

        raise GitHubApiError(
            f"GitHub API returned HTTP {resp.status_code} for {url}"
        )
