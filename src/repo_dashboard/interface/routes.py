"""API routes, thin controllers that delegate to the use cases."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from repo_dashboard.interface.dependencies import (
    get_browser_service,
    get_credential_or_none,
    get_stats_service,
)
from repo_dashboard.interface.schemas import (
    CommitResponse,
    ContentEntryResponse,
    ErrorResponse,
    RepoResponse,
    RepoStatsResponse,
)
from repo_dashboard.services.repo_browser import RepoBrowserService
from repo_dashboard.services.repo_stats import RepoStatsService

router = APIRouter(prefix="/repos")

_REPO_ERRORS = {
    401: {"model": ErrorResponse, "description": "Missing GitHub access token"},
    403: {"model": ErrorResponse, "description": "Repository access denied"},
    404: {"model": ErrorResponse, "description": "Repository not found"},
    429: {"model": ErrorResponse, "description": "GitHub API rate limit exceeded"},
}


@router.get("", response_model=list[RepoResponse], responses=_REPO_ERRORS)
async def list_repositories(
    page: int = Query(1, ge=1),
    per_page: int | None = Query(None, ge=1, le=100),
    browser: RepoBrowserService = Depends(get_browser_service),
) -> list[RepoResponse]:
    """The authenticated user's repositories, most recently updated first."""
    repos = await browser.list_repositories(page=page, per_page=per_page)
    return [RepoResponse.from_entity(r) for r in repos]


@router.get("/search", response_model=list[RepoResponse], responses=_REPO_ERRORS)
async def search_repositories(
    username: str = Query(..., min_length=1),
    q: str = Query(""),
    per_page: int | None = Query(None, ge=1, le=100),
    browser: RepoBrowserService = Depends(get_browser_service),
) -> list[RepoResponse]:
    repos = await browser.search_repositories(username, q, per_page=per_page)
    return [RepoResponse.from_entity(r) for r in repos]


@router.get("/{owner}/{repo}", response_model=RepoResponse, responses=_REPO_ERRORS)
async def get_repository(
    owner: str,
    repo: str,
    browser: RepoBrowserService = Depends(get_browser_service),
) -> RepoResponse:
    return RepoResponse.from_entity(await browser.get_repository(owner, repo))


@router.get(
    "/{owner}/{repo}/stats",
    response_model=RepoStatsResponse,
    responses={401: _REPO_ERRORS[401]},
)
async def get_repository_stats(
    owner: str,
    repo: str,
    credential: str | None = Depends(get_credential_or_none),
    service: RepoStatsService = Depends(get_stats_service),
) -> RepoStatsResponse:
    """Cached statistics; unreachable metrics are reported as zero."""
    stats = await service.get_repo_stats(owner, repo, credential)
    return RepoStatsResponse.from_entity(stats)


@router.get(
    "/{owner}/{repo}/commits",
    response_model=list[CommitResponse],
    responses=_REPO_ERRORS,
)
async def list_commits(
    owner: str,
    repo: str,
    per_page: int | None = Query(None, ge=1, le=100),
    browser: RepoBrowserService = Depends(get_browser_service),
) -> list[CommitResponse]:
    commits = await browser.recent_commits(owner, repo, per_page=per_page)
    return [CommitResponse.from_entity(c) for c in commits]


@router.get(
    "/{owner}/{repo}/contents",
    response_model=list[ContentEntryResponse],
    responses=_REPO_ERRORS,
)
@router.get(
    "/{owner}/{repo}/contents/{path:path}",
    response_model=list[ContentEntryResponse],
    responses=_REPO_ERRORS,
)
async def list_contents(
    owner: str,
    repo: str,
    path: str = "",
    browser: RepoBrowserService = Depends(get_browser_service),
) -> list[ContentEntryResponse]:
    entries = await browser.list_contents(owner, repo, path)
    return [ContentEntryResponse.from_entity(e) for e in entries]
