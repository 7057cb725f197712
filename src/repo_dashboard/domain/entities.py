"""Domain entities: plain data structures shared by the services and the API."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ContentType(str, Enum):
    """``type`` discriminator of a GitHub contents-API entry."""

    FILE = "file"
    DIR = "dir"
    SYMLINK = "symlink"
    SUBMODULE = "submodule"


@dataclass(frozen=True, slots=True)
class RepoStats:
    """Immutable statistics snapshot for one repository.

    ``lines_of_code`` is a coarse proxy (kilobytes of source reported by the
    languages API), not an exact line count.
    """

    total_files: int = 0
    directories: int = 0
    lines_of_code: float = 0.0
    contributors: int = 0
    weekly_commits: int = 0
    commit_percentage_change: int = 0


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """A cached value together with the clock reading at insertion."""

    key: str
    value: Any
    created_at: float

    def is_fresh(self, now: float, ttl: float) -> bool:
        return now - self.created_at <= ttl


@dataclass(frozen=True, slots=True)
class RepoSummary:
    """Repository metadata as shown on the dashboard list and header."""

    id: int
    name: str
    full_name: str
    owner: str
    html_url: str
    description: str | None = None
    language: str | None = None
    stargazers_count: int = 0
    forks_count: int = 0
    private: bool = False
    default_branch: str = "main"
    pushed_at: str | None = None


@dataclass(frozen=True, slots=True)
class CommitSummary:
    """A single commit from the commits API."""

    sha: str
    message: str
    author_name: str
    authored_at: str | None
    html_url: str


@dataclass(frozen=True, slots=True)
class ContentEntry:
    """A single entry of a directory listing."""

    name: str
    path: str
    type: str  # "file", "dir", "symlink" or "submodule"
    size: int = 0
    download_url: str | None = None
