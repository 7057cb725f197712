"""Port: the GitHub calls the services depend on, implemented by infrastructure."""

from __future__ import annotations

from typing import Any, Protocol

from repo_dashboard.domain.value_objects import RepoId


class RepoFetcher(Protocol):
    """Abstract contract for the GitHub calls the dashboard needs.

    Methods return the decoded JSON body untouched; callers are responsible
    for checking its shape.  Failures are raised as
    :class:`~repo_dashboard.domain.exceptions.RepoDashboardError` subclasses.
    """

    async def fetch_repository(self, repo_id: RepoId) -> Any:
        """``GET /repos/{owner}/{repo}``."""
        ...

    async def fetch_contributors(self, repo_id: RepoId) -> Any:
        """``GET /repos/{owner}/{repo}/contributors``."""
        ...

    async def fetch_languages(self, repo_id: RepoId) -> Any:
        """``GET /repos/{owner}/{repo}/languages`` → ``{language: bytes}``."""
        ...

    async def fetch_commits(self, repo_id: RepoId, per_page: int = 100) -> Any:
        """Most recent commits, newest first."""
        ...

    async def list_directory(self, repo_id: RepoId, path: str = "") -> Any:
        """Contents of the directory at *path* (``""`` is the root)."""
        ...

    async def list_user_repos(self, page: int = 1, per_page: int = 20) -> Any:
        """Repositories of the authenticated user, most recently updated first."""
        ...

    async def search_repos(self, query: str, per_page: int = 20) -> Any:
        """Raw ``/search/repositories`` response body."""
        ...
