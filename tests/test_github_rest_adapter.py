from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest

from repo_dashboard.domain.exceptions import (
    GitHubApiError,
    GitHubRateLimitError,
    InvalidCredentialError,
    RepositoryAccessDeniedError,
    RepositoryNotFoundError,
)
from repo_dashboard.domain.value_objects import RepoId
from repo_dashboard.infrastructure.github_rest_adapter import GitHubRestAdapter

REPO = RepoId(owner="octo", repo="demo")

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def requests() -> list[httpx.Request]:
    return []


@pytest.fixture
def make_adapter(requests: list[httpx.Request]) -> Callable[[Handler], GitHubRestAdapter]:
    def factory(handler: Handler) -> GitHubRestAdapter:
        def recording(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return handler(request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(recording))
        return GitHubRestAdapter(client=client, token="secret-token")

    return factory


async def test_sends_credential_and_version_headers(make_adapter, requests):
    adapter = make_adapter(lambda request: httpx.Response(200, json={"Python": 100}))

    assert await adapter.fetch_languages(REPO) == {"Python": 100}

    sent = requests[0]
    assert sent.url.path == "/repos/octo/demo/languages"
    assert sent.headers["Authorization"] == "Bearer secret-token"
    assert sent.headers["X-GitHub-Api-Version"] == "2022-11-28"
    assert sent.headers["Accept"] == "application/vnd.github+json"


async def test_commits_page_size(make_adapter, requests):
    adapter = make_adapter(lambda request: httpx.Response(200, json=[]))
    await adapter.fetch_commits(REPO, per_page=100)
    assert requests[0].url.path == "/repos/octo/demo/commits"
    assert requests[0].url.params["per_page"] == "100"


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("", "/repos/octo/demo/contents/"),
        ("src", "/repos/octo/demo/contents/src"),
        ("/docs/api/", "/repos/octo/demo/contents/docs/api"),
    ],
)
async def test_directory_listing_paths(make_adapter, requests, path: str, expected: str):
    adapter = make_adapter(lambda request: httpx.Response(200, json=[]))
    await adapter.list_directory(REPO, path)
    assert requests[0].url.path == expected


async def test_user_repos_sorted_by_update(make_adapter, requests):
    adapter = make_adapter(lambda request: httpx.Response(200, json=[]))
    await adapter.list_user_repos(page=2, per_page=10)
    params = requests[0].url.params
    assert requests[0].url.path == "/user/repos"
    assert (params["sort"], params["direction"], params["page"], params["per_page"]) == ("updated", "desc", "2", "10")


async def test_not_found(make_adapter):
    adapter = make_adapter(lambda request: httpx.Response(404, json={"message": "Not Found"}))
    with pytest.raises(RepositoryNotFoundError):
        await adapter.fetch_repository(REPO)


async def test_forbidden_without_rate_limit(make_adapter):
    adapter = make_adapter(lambda request: httpx.Response(403, headers={"x-ratelimit-remaining": "12"}))
    with pytest.raises(RepositoryAccessDeniedError):
        await adapter.fetch_repository(REPO)


async def test_bad_credentials(make_adapter):
    adapter = make_adapter(lambda request: httpx.Response(401, json={"message": "Bad credentials"}))
    with pytest.raises(InvalidCredentialError, match="Sign in again"):
        await adapter.fetch_repository(REPO)


async def test_rate_limit_reports_reset_time(make_adapter):
    adapter = make_adapter(
        lambda request: httpx.Response(
            403,
            headers={"x-ratelimit-remaining": "0", "x-ratelimit-reset": "1718452800"},
        )
    )
    with pytest.raises(GitHubRateLimitError, match="2024-06-15 12:00:00 UTC"):
        await adapter.fetch_contributors(REPO)


async def test_too_many_requests(make_adapter):
    adapter = make_adapter(lambda request: httpx.Response(429))
    with pytest.raises(GitHubRateLimitError):
        await adapter.fetch_contributors(REPO)


async def test_server_error(make_adapter):
    adapter = make_adapter(lambda request: httpx.Response(502))
    with pytest.raises(GitHubApiError, match="HTTP 502"):
        await adapter.fetch_languages(REPO)


async def test_malformed_body(make_adapter):
    adapter = make_adapter(lambda request: httpx.Response(200, content=b"<html>oops</html>"))
    with pytest.raises(GitHubApiError, match="malformed"):
        await adapter.fetch_languages(REPO)


async def test_network_errors_are_translated(make_adapter):
    def boom(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    adapter = make_adapter(boom)
    with pytest.raises(GitHubApiError, match="Network error"):
        await adapter.list_directory(REPO, "src")


async def test_timeouts_are_translated(make_adapter):
    def slow(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("too slow", request=request)

    adapter = make_adapter(slow)
    with pytest.raises(GitHubApiError, match="Timed out"):
        await adapter.fetch_commits(REPO)
