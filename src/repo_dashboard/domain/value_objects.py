"""Value objects: self-validating identifiers for GitHub repositories."""

from __future__ import annotations

import re
from dataclasses import dataclass

from repo_dashboard.domain.exceptions import InvalidRepositoryIdError

_NAME_RE = re.compile(r"^[A-Za-z0-9\-_.]+$")


def validate_name(value: str | None, label: str) -> str:
    """Strip *value* and check it is a valid GitHub user or repository name."""
    value = (value or "").strip()
    if not value:
        raise InvalidRepositoryIdError(f"Missing {label} name.")
    if not _NAME_RE.match(value) or value in (".", ".."):
        raise InvalidRepositoryIdError(f"Invalid {label} name: '{value}'.")
    return value


@dataclass(frozen=True, slots=True)
class RepoId:
    """Validated ``owner/repo`` pair.

    Used both to address the GitHub API and as the statistics cache key.
    """

    owner: str
    repo: str

    @classmethod
    def from_parts(cls, owner: str | None, repo: str | None) -> RepoId:
        """Strip and validate *owner* and *repo*."""
        return cls(
            owner=validate_name(owner, "owner"),
            repo=validate_name(repo, "repository"),
        )

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def cache_key(self) -> str:
        # GitHub names are case-insensitive.
        return self.full_name.lower()
