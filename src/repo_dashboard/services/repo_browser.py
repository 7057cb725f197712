"""Repository browsing use cases: listings and details shown on the dashboard.

These are thin pass-throughs to GitHub.  Unlike statistics, errors here
propagate to the caller, so a missing repository renders as "not found".
"""

from __future__ import annotations

import logging
from typing import Any

from repo_dashboard.domain.entities import CommitSummary, ContentEntry, RepoSummary
from repo_dashboard.domain.exceptions import GitHubApiError
from repo_dashboard.domain.ports.repo_fetcher import RepoFetcher
from repo_dashboard.domain.value_objects import RepoId, validate_name

logger = logging.getLogger(__name__)


class RepoBrowserService:
    """Lists, searches and inspects repositories on behalf of one user."""

    def __init__(self, fetcher: RepoFetcher, default_per_page: int = 20) -> None:
        self._fetcher = fetcher
        self._per_page = default_per_page

    async def list_repositories(
        self, page: int = 1, per_page: int | None = None
    ) -> list[RepoSummary]:
        """The user's repositories, most recently updated first."""
        data = await self._fetcher.list_user_repos(
            page=max(1, page), per_page=per_page or self._per_page
        )
        return [_to_repo_summary(item) for item in _expect_list(data, "repositories")]

    async def search_repositories(
        self, username: str, query: str, per_page: int | None = None
    ) -> list[RepoSummary]:
        """Search *username*'s repositories, most recently pushed first.

        An empty query returns the regular listing.
        """
        username = validate_name(username, "user")
        query = query.strip()
        if not query:
            return await self.list_repositories(per_page=per_page)

        data = await self._fetcher.search_repos(
            f"{query} user:{username}", per_page=per_page or self._per_page
        )
        items = data.get("items", []) if isinstance(data, dict) else []
        results = [_to_repo_summary(item) for item in _expect_list(items, "search results")]
        results.sort(key=lambda r: r.pushed_at or "", reverse=True)
        logger.debug("Search %r for %s returned %d repos", query, username, len(results))
        return results

    async def get_repository(self, owner: str, repo: str) -> RepoSummary:
        """Repository details; raises when it is missing or inaccessible."""
        repo_id = RepoId.from_parts(owner, repo)
        data = await self._fetcher.fetch_repository(repo_id)
        if not isinstance(data, dict):
            raise GitHubApiError(f"Unexpected repository payload for {repo_id.full_name}")
        return _to_repo_summary(data)

    async def recent_commits(
        self, owner: str, repo: str, per_page: int | None = None
    ) -> list[CommitSummary]:
        repo_id = RepoId.from_parts(owner, repo)
        data = await self._fetcher.fetch_commits(repo_id, per_page=per_page or self._per_page)
        return [_to_commit_summary(item) for item in _expect_list(data, "commits")]

    async def list_contents(
        self, owner: str, repo: str, path: str = ""
    ) -> list[ContentEntry]:
        """Directory listing with directories first, then files, by name."""
        repo_id = RepoId.from_parts(owner, repo)
        data = await self._fetcher.list_directory(repo_id, path)
        if isinstance(data, dict):
            # The contents API returns a single object when *path* is a file.
            data = [data]
        entries = [_to_content_entry(item) for item in _expect_list(data, "contents")]
        entries.sort(key=lambda e: (e.type != "dir", e.name.lower()))
        return entries


# ── Mapping helpers ─────────────────────────────────────────────────────────


def _expect_list(data: Any, what: str) -> list[dict[str, Any]]:
    if not isinstance(data, list):
        raise GitHubApiError(f"Unexpected payload for {what}: expected a list.")
    return [item for item in data if isinstance(item, dict)]


def _to_repo_summary(data: dict[str, Any]) -> RepoSummary:
    owner = data.get("owner") or {}
    return RepoSummary(
        id=int(data.get("id") or 0),
        name=data.get("name", ""),
        full_name=data.get("full_name", ""),
        owner=owner.get("login", "") if isinstance(owner, dict) else str(owner),
        html_url=data.get("html_url", ""),
        description=data.get("description"),
        language=data.get("language"),
        stargazers_count=int(data.get("stargazers_count") or 0),
        forks_count=int(data.get("forks_count") or 0),
        private=bool(data.get("private", False)),
        default_branch=data.get("default_branch") or "main",
        pushed_at=data.get("pushed_at"),
    )


def _to_commit_summary(data: dict[str, Any]) -> CommitSummary:
    commit = data.get("commit") or {}
    author = commit.get("author") or {}
    message = commit.get("message") or ""
    return CommitSummary(
        sha=data.get("sha", ""),
        message=message.splitlines()[0] if message else "",
        author_name=author.get("name", ""),
        authored_at=author.get("date"),
        html_url=data.get("html_url", ""),
    )


def _to_content_entry(data: dict[str, Any]) -> ContentEntry:
    return ContentEntry(
        name=data.get("name", ""),
        path=data.get("path", ""),
        type=data.get("type", "file"),
        size=int(data.get("size") or 0),
        download_url=data.get("download_url"),
    )
