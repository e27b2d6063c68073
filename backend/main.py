"""
Application factory for FastAPI.

This module provides a factory function for creating FastAPI application instances.
The factory pattern allows for:
- Easy testing with custom settings
- Multiple app instances with different configurations
- Clear separation of app creation from route definitions

Usage:
    from backend.main import create_app
    from backend.settings import Settings

    # Default app (uses get_settings())
    app = create_app()

    # Test app with custom settings
    test_settings = Settings(environment="test", _env_file=None)
    test_app = create_app(settings=test_settings)
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from application.exceptions import (
    ChallengeNotFoundError,
    ChallengeStateError,
    InsufficientXpError,
    TrackerStateError,
    WorkoutSessionNotFoundError,
)
from backend.settings import Settings, get_settings

logger = logging.getLogger(__name__)

# Headers the web client sends to every endpoint
CORS_ALLOWED_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]

# Application exception -> HTTP status
EXCEPTION_STATUS_CODES = {
    WorkoutSessionNotFoundError: 404,
    ChallengeNotFoundError: 404,
    TrackerStateError: 409,
    ChallengeStateError: 409,
    InsufficientXpError: 402,
    ValueError: 400,
}


@asynccontextmanager
async def _lifespan(app: FastAPI):
    from api.deps import close_completion_client, get_write_queue, shutdown_session_manager

    # Sync handlers submit writes from worker threads; run them on this loop
    write_queue = app.dependency_overrides.get(get_write_queue, get_write_queue)()
    write_queue.bind_loop(asyncio.get_running_loop())
    yield
    # Stop live workout timers and flush queued writes before exit
    await shutdown_session_manager()
    await write_queue.drain()
    close_completion_client()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure a FastAPI application instance.

    Args:
        settings: Optional Settings instance. If not provided, uses get_settings()
                  which loads from environment variables.

    Returns:
        Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    _init_sentry(settings)

    app = FastAPI(
        title="FitCoach API",
        description="Workout tracking, gamification, AI trainer chat and subscriptions",
        version="1.0.0",
        lifespan=_lifespan,
    )

    _configure_cors(app, settings)
    _register_exception_handlers(app)
    _include_routers(app)
    _log_configuration(settings)

    return app


def _init_sentry(settings: Settings) -> None:
    """Initialize Sentry SDK if DSN is configured."""
    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.environment,
            traces_sample_rate=0.1,  # 10% of transactions for performance monitoring
            profiles_sample_rate=0.1,
        )
        logger.info("Sentry initialized for fitcoach-api")


def _configure_cors(app: FastAPI, settings: Settings) -> None:
    """Configure CORS middleware for the application."""
    origins = settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Browsers reject credentials with a wildcard origin
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=CORS_ALLOWED_HEADERS,
    )


def _register_exception_handlers(app: FastAPI) -> None:
    """Map application exceptions raised in routers to HTTP responses."""

    async def handle_application_error(request: Request, exc: Exception) -> JSONResponse:
        status_code = 500
        for exc_type, code in EXCEPTION_STATUS_CODES.items():
            if isinstance(exc, exc_type):
                status_code = code
                break
        logger.warning(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    for exc_type in EXCEPTION_STATUS_CODES:
        app.add_exception_handler(exc_type, handle_application_error)


def _include_routers(app: FastAPI) -> None:
    """Include all API routers in the application."""
    from api.routers import (
        health_router,
        chat_router,
        billing_router,
        workouts_router,
        challenges_router,
        profile_router,
        notifications_router,
    )

    # Health router (no prefix - /health at root)
    app.include_router(health_router)

    # Endpoints the web client calls by function name
    app.include_router(chat_router)
    app.include_router(billing_router)

    # Domain routers (with prefixes defined in each router)
    app.include_router(workouts_router)
    app.include_router(challenges_router)
    app.include_router(profile_router)
    app.include_router(notifications_router)


def _log_configuration(settings: Settings) -> None:
    """Log which integrations are configured at startup."""
    if not settings.supabase_url or not settings.supabase_key:
        logger.warning("Supabase is not configured; data endpoints will return 503")
    if not settings.stripe_secret_key:
        logger.warning("Stripe is not configured; billing endpoints will return 503")
    if not settings.openai_api_key:
        logger.warning("OPENAI_API_KEY is not set; the AI trainer will return fallback replies")
    if settings.helicone_enabled:
        logger.info("Helicone AI observability is enabled")


# Default app instance for uvicorn
# This allows: uvicorn backend.main:app --reload
app = create_app()
