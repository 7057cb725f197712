"""Pydantic response DTOs for the API boundary."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from repo_dashboard.domain.entities import CommitSummary, ContentEntry, RepoStats, RepoSummary
from repo_dashboard.services.date_format import format_smart_date


class RepoStatsResponse(BaseModel):
    """Statistics card payload; serialised with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_files: int
    directories: int
    lines_of_code: float
    contributors: int
    weekly_commits: int
    commit_percentage_change: int

    @classmethod
    def from_entity(cls, stats: RepoStats) -> RepoStatsResponse:
        return cls(
            total_files=stats.total_files,
            directories=stats.directories,
            lines_of_code=stats.lines_of_code,
            contributors=stats.contributors,
            weekly_commits=stats.weekly_commits,
            commit_percentage_change=stats.commit_percentage_change,
        )


class RepoResponse(BaseModel):
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

    @classmethod
    def from_entity(cls, repo: RepoSummary) -> RepoResponse:
        return cls(
            id=repo.id,
            name=repo.name,
            full_name=repo.full_name,
            owner=repo.owner,
            html_url=repo.html_url,
            description=repo.description,
            language=repo.language,
            stargazers_count=repo.stargazers_count,
            forks_count=repo.forks_count,
            private=repo.private,
            default_branch=repo.default_branch,
            pushed_at=repo.pushed_at,
        )


class CommitResponse(BaseModel):
    sha: str
    message: str
    author_name: str
    authored_at: str | None
    display_date: str
    html_url: str

    @classmethod
    def from_entity(cls, commit: CommitSummary) -> CommitResponse:
        return cls(
            sha=commit.sha,
            message=commit.message,
            author_name=commit.author_name,
            authored_at=commit.authored_at,
            display_date=format_smart_date(commit.authored_at),
            html_url=commit.html_url,
        )


class ContentEntryResponse(BaseModel):
    name: str
    path: str
    type: str
    size: int
    download_url: str | None = None

    @classmethod
    def from_entity(cls, entry: ContentEntry) -> ContentEntryResponse:
        return cls(
            name=entry.name,
            path=entry.path,
            type=entry.type,
            size=entry.size,
            download_url=entry.download_url,
        )


class ErrorResponse(BaseModel):
    """Standard error envelope returned on all failure paths."""

    status: str = "error"
    message: str
