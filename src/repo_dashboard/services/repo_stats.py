"""Repository-statistics use case: cache in front of the aggregator."""

from __future__ import annotations

import logging
from typing import Callable

from repo_dashboard.domain.entities import RepoStats
from repo_dashboard.domain.exceptions import MissingCredentialError
from repo_dashboard.domain.ports.repo_fetcher import RepoFetcher
from repo_dashboard.domain.value_objects import RepoId
from repo_dashboard.services.stats_aggregator import StatsAggregator
from repo_dashboard.services.stats_cache import TTLCache

logger = logging.getLogger(__name__)

FetcherFactory = Callable[[str], RepoFetcher]
AggregatorFactory = Callable[[RepoFetcher], StatsAggregator]


class RepoStatsService:
    """Serves :class:`RepoStats` snapshots, computing them on cache misses.

    Parameters
    ----------
    cache:
        Process-wide snapshot cache, shared between requests.
    fetcher_factory:
        Builds a :class:`RepoFetcher` bound to a user's access token.
    aggregator_factory:
        Builds a :class:`StatsAggregator` around a fetcher.
    """

    def __init__(
        self,
        cache: TTLCache,
        fetcher_factory: FetcherFactory,
        aggregator_factory: AggregatorFactory = StatsAggregator,
    ) -> None:
        self._cache = cache
        self._fetcher_factory = fetcher_factory
        self._aggregator_factory = aggregator_factory

    async def get_repo_stats(
        self, owner: str, repo: str, credential: str | None
    ) -> RepoStats:
        """Return the cached snapshot for ``owner/repo`` or compute a fresh one."""
        if not credential or not credential.strip():
            raise MissingCredentialError("A GitHub access token is required.")
        repo_id = RepoId.from_parts(owner, repo)

        cached = self._cache.get(repo_id.cache_key)
        if isinstance(cached, RepoStats):
            return cached

        aggregator = self._aggregator_factory(self._fetcher_factory(credential.strip()))
        stats = await aggregator.run(repo_id)
        self._cache.set(repo_id.cache_key, stats)
        return stats
