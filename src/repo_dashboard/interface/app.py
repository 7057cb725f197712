"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from repo_dashboard.interface.dependencies import shutdown, startup
from repo_dashboard.interface.error_handlers import register_error_handlers
from repo_dashboard.interface.routes import router


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the shared HTTP client and statistics cache for the process."""
    await startup()
    yield
    await shutdown()


def create_app() -> FastAPI:
    """Build and wire the FastAPI application."""
    app = FastAPI(
        title="GitHub Repository Dashboard API",
        version="1.0.0",
        description=(
            "Lists a signed-in user's GitHub repositories and serves cached "
            "per-repository statistics: files, directories, contributors "
            "and weekly commit activity."
        ),
        lifespan=_lifespan,
    )

    register_error_handlers(app)
    app.include_router(router)

    @app.get("/health", include_in_schema=False)
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app
