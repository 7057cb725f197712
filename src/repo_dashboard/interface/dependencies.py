"""FastAPI dependency injection wiring.

The HTTP client and the statistics cache live for the whole process: they
are created by :func:`startup` and released by :func:`shutdown`.
"""

from __future__ import annotations

from functools import lru_cache

import httpx
from fastapi import Depends, Header

from repo_dashboard.domain.exceptions import MissingCredentialError
from repo_dashboard.domain.ports.repo_fetcher import RepoFetcher
from repo_dashboard.infrastructure.config import Settings, get_settings
from repo_dashboard.infrastructure.github_rest_adapter import GitHubRestAdapter
from repo_dashboard.services.repo_browser import RepoBrowserService
from repo_dashboard.services.repo_stats import RepoStatsService
from repo_dashboard.services.stats_aggregator import StatsAggregator
from repo_dashboard.services.stats_cache import TTLCache

_http_client: httpx.AsyncClient | None = None
_stats_cache: TTLCache | None = None


async def startup() -> None:
    """Initialise shared resources, called from the lifespan context manager."""
    global _http_client, _stats_cache  # noqa: PLW0603

    settings = get_settings()
    _http_client = httpx.AsyncClient(timeout=httpx.Timeout(settings.request_timeout_seconds))
    _stats_cache = TTLCache(ttl_seconds=settings.stats_cache_ttl_seconds)


async def shutdown() -> None:
    """Release shared resources."""
    global _http_client, _stats_cache  # noqa: PLW0603

    if _http_client:
        await _http_client.aclose()
        _http_client = None
    _stats_cache = None


@lru_cache(maxsize=1)
def _settings() -> Settings:
    return get_settings()


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() not in ("bearer", "token") or not token.strip():
        return None
    return token.strip()


def get_credential_or_none(
    authorization: str | None = Header(default=None),
) -> str | None:
    """The GitHub token from ``Authorization: Bearer ...``, if any."""
    return _bearer_token(authorization)


def get_credential(
    credential: str | None = Depends(get_credential_or_none),
) -> str:
    if not credential:
        raise MissingCredentialError("A GitHub access token is required.")
    return credential


def _make_fetcher(token: str) -> RepoFetcher:
    settings = _settings()
    assert _http_client is not None, "startup() was not called"
    return GitHubRestAdapter(
        client=_http_client,
        token=token,
        base_url=settings.github_api_url,
        api_version=settings.github_api_version,
    )


def _make_aggregator(fetcher: RepoFetcher) -> StatsAggregator:
    settings = _settings()
    return StatsAggregator(
        fetcher,
        commits_page_size=settings.commits_page_size,
        max_concurrent_listings=settings.max_concurrent_listings,
    )


def get_stats_service() -> RepoStatsService:
    """Build the statistics use case around the process-wide cache."""
    assert _stats_cache is not None, "startup() was not called"
    return RepoStatsService(
        cache=_stats_cache,
        fetcher_factory=_make_fetcher,
        aggregator_factory=_make_aggregator,
    )


def get_browser_service(credential: str = Depends(get_credential)) -> RepoBrowserService:
    """Build the browsing use case bound to the caller's token."""
    return RepoBrowserService(
        fetcher=_make_fetcher(credential),
        default_per_page=_settings().default_per_page,
    )
