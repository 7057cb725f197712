"""Domain exception hierarchy.

Each exception maps to a specific HTTP status code at the interface layer.
Inner layers raise these; the outermost error-handler translates them.
Statistics aggregation never lets them escape: failed metrics degrade to
their zero value instead.
"""

from __future__ import annotations


class RepoDashboardError(Exception):
    """Base exception for the entire application."""


# ── Input validation ────────────────────────────────────────────────────────


class MissingCredentialError(RepoDashboardError):
    """No GitHub access token was supplied with the request."""


class InvalidRepositoryIdError(RepoDashboardError):
    """The owner / repository pair is not a valid GitHub identifier."""


# ── GitHub API errors ───────────────────────────────────────────────────────


class InvalidCredentialError(RepoDashboardError):
    """GitHub rejected the access token as bad or expired (401)."""


class RepositoryNotFoundError(RepoDashboardError):
    """The repository does not exist or is not visible to the token (404)."""


class RepositoryAccessDeniedError(RepoDashboardError):
    """Access to the repository was denied (403)."""


class GitHubRateLimitError(RepoDashboardError):
    """GitHub API rate limit exceeded (429 / 403 with rate-limit header)."""


class GitHubApiError(RepoDashboardError):
    """Network failure, timeout or unexpected response from the GitHub API."""
