"""FastAPI application factory with lifespan for GoalCoach."""

from __future__ import annotations

from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from goalcoach import __version__
from goalcoach.coach.decomposer import DecompositionError
from goalcoach.notifications import NotificationService, build_notifier
from goalcoach.providers import LiteLLMProvider, LLMProvider, LLMProviderError, friendly_error
from goalcoach.settings import GoalCoachSettings, get_settings
from goalcoach.storage import GoalStore, build_store


def create_app(
    settings: GoalCoachSettings | None = None,
    store: GoalStore | None = None,
    provider: LLMProvider | None = None,
    notifier: NotificationService | None = None,
) -> FastAPI:
    """Build the app. Collaborators not passed in are created from settings."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Startup: open the goal store. Shutdown: close it if we opened it."""
        owns_store = store is None
        app.state.settings = settings
        app.state.store = store or await build_store(settings)
        app.state.provider = provider or LiteLLMProvider.from_settings(settings)
        app.state.notifier = notifier or build_notifier(settings)
        logger.info(
            f"{settings.app_name} API ready (storage={settings.storage_backend}, "
            f"notify={app.state.notifier.channel_names})"
        )
        yield
        if owns_store:
            await app.state.store.close()

    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        lifespan=lifespan,
    )

    @app.exception_handler(LLMProviderError)
    async def _provider_error(request: Request, exc: LLMProviderError) -> JSONResponse:
        logger.error(f"{request.method} {request.url.path} failed on the LLM provider: {exc}")
        return JSONResponse(status_code=502, content={"detail": friendly_error(exc)})

    @app.exception_handler(DecompositionError)
    async def _decomposition_error(request: Request, exc: DecompositionError) -> JSONResponse:
        logger.error(f"Goal breakdown could not be parsed: {exc}")
        return JSONResponse(
            status_code=502,
            content={"detail": "The coach returned a breakdown that could not be read. Please try again."},
        )

    # ── mount routers ──
    from goalcoach.api.routes import coach, goals, health

    app.include_router(health.router)
    app.include_router(goals.router, prefix="/api/v1/goals", tags=["goals"])
    app.include_router(coach.router, prefix="/api/v1/coach", tags=["coach"])

    return app
