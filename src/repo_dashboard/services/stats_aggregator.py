"""Repository statistics aggregator.

Fans out to the GitHub API through a :class:`RepoFetcher`, walks the
repository tree level by level and derives a :class:`RepoStats` snapshot.
Every upstream call is isolated: a failure degrades only the metric that
depends on it, so a snapshot is always produced.

Commit deltas come from a single page of recent commits; repositories with
more commits than that page holds in the last 14 days under-count the
previous week.
"""

from __future__ import annotations

import asyncio
import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, TypeVar

from repo_dashboard.domain.entities import ContentType, RepoStats
from repo_dashboard.domain.ports.repo_fetcher import RepoFetcher
from repo_dashboard.domain.value_objects import RepoId

logger = logging.getLogger(__name__)

T = TypeVar("T")

_WEEK = timedelta(days=7)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


# ── Pure metric helpers ─────────────────────────────────────────────────────


def lines_of_code(languages: Any) -> float:
    """Sum per-language byte counts, in thousands, rounded to one decimal."""
    if not isinstance(languages, dict):
        return 0.0
    total = sum(
        count
        for count in languages.values()
        if isinstance(count, (int, float)) and not isinstance(count, bool)
    )
    return _round_half_up(total / 100) / 10


def count_contributors(contributors: Any) -> int:
    return len(contributors) if isinstance(contributors, list) else 0


def percentage_change(this_week: int, last_week: int) -> int:
    """Percent change week over week; 0 when there is no baseline."""
    if last_week <= 0:
        return 0
    return _round_half_up((this_week - last_week) / last_week * 100)


def commit_authored_at(commit: Any) -> datetime | None:
    """Extract ``commit.author.date`` as an aware datetime, if present."""
    try:
        raw = commit["commit"]["author"]["date"]
    except (KeyError, TypeError):
        return None
    if not isinstance(raw, str):
        return None
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def bucket_commits(commits: Any, now: datetime) -> tuple[int, int]:
    """Count commits in the trailing week and the week before it.

    Returns ``(this_week, last_week)``.  Commits without a readable author
    date are ignored.
    """
    if not isinstance(commits, list):
        return 0, 0

    one_week_ago = now - _WEEK
    two_weeks_ago = now - 2 * _WEEK
    this_week = last_week = 0
    for commit in commits:
        authored = commit_authored_at(commit)
        if authored is None:
            continue
        if authored > one_week_ago:
            this_week += 1
        elif authored > two_weeks_ago:
            last_week += 1
    return this_week, last_week


def _child_path(parent: str, entry: dict[str, Any]) -> str | None:
    """Repository path of a listed directory, built from *parent* if absent."""
    path = entry.get("path")
    if isinstance(path, str) and path:
        return path.strip("/")
    name = entry.get("name")
    if not isinstance(name, str) or not name:
        return None
    return f"{parent}/{name}".strip("/")


# ── Aggregator ──────────────────────────────────────────────────────────────


class StatsAggregator:
    """Computes a :class:`RepoStats` snapshot for one repository.

    Parameters
    ----------
    fetcher:
        GitHub access bound to the caller's credential.
    commits_page_size:
        Number of recent commits fetched for the weekly delta.
    max_concurrent_listings:
        Upper bound on directory listings in flight during the tree walk.
    now:
        Returns the current aware datetime; injectable for tests.
    """

    def __init__(
        self,
        fetcher: RepoFetcher,
        *,
        commits_page_size: int = 100,
        max_concurrent_listings: int = 8,
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._fetcher = fetcher
        self._commits_page_size = commits_page_size
        self._max_listings = max(1, max_concurrent_listings)
        self._now = now

    async def run(self, repo_id: RepoId) -> RepoStats:
        """Fetch everything for *repo_id* and assemble the snapshot."""
        logger.info("Aggregating statistics for %s", repo_id.full_name)

        contributors, languages, commits, (files, dirs) = await asyncio.gather(
            self._safe(
                f"contributors of {repo_id.full_name}",
                self._fetcher.fetch_contributors(repo_id),
                [],
            ),
            self._safe(
                f"languages of {repo_id.full_name}",
                self._fetcher.fetch_languages(repo_id),
                {},
            ),
            self._safe(
                f"commits of {repo_id.full_name}",
                self._fetcher.fetch_commits(repo_id, per_page=self._commits_page_size),
                [],
            ),
            self.walk_tree(repo_id),
        )

        this_week, last_week = bucket_commits(commits, self._now())
        stats = RepoStats(
            total_files=files,
            directories=dirs,
            lines_of_code=lines_of_code(languages),
            contributors=count_contributors(contributors),
            weekly_commits=this_week,
            commit_percentage_change=percentage_change(this_week, last_week),
        )
        logger.info("Statistics for %s: %s", repo_id.full_name, stats)
        return stats

    async def walk_tree(self, repo_id: RepoId) -> tuple[int, int]:
        """Count files and directories, listing one tree level at a time.

        Returns ``(files, directories)``.  A listing that fails or is not a
        list counts as an empty directory.
        """
        sem = asyncio.Semaphore(self._max_listings)

        async def _list(path: str) -> Any:
            async with sem:
                return await self._safe(
                    f"contents of {repo_id.full_name}/{path}",
                    self._fetcher.list_directory(repo_id, path),
                    [],
                )

        files = dirs = 0
        seen: set[str] = {""}
        pending: list[str] = [""]

        while pending:
            listings = await asyncio.gather(*(_list(path) for path in pending))
            parents, pending = pending, []
            for parent, listing in zip(parents, listings):
                if not isinstance(listing, list):
                    continue
                for entry in listing:
                    if not isinstance(entry, dict):
                        continue
                    kind = entry.get("type")
                    if kind == ContentType.FILE.value:
                        files += 1
                    elif kind == ContentType.DIR.value:
                        dirs += 1
                        path = _child_path(parent, entry)
                        if path is not None and path not in seen:
                            seen.add(path)
                            pending.append(path)

        return files, dirs

    @staticmethod
    async def _safe(label: str, call: Awaitable[T], default: T) -> T:
        """Await *call*, substituting *default* on any failure."""
        try:
            return await call
        except Exception as exc:
            logger.warning("Failed to fetch %s, using default: %s", label, exc)
            logger.debug("Fetch failure detail for %s", label, exc_info=True)
            return default
