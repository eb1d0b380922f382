"""Application factory for creating FastAPI instances.

This module provides the create_app factory function that:
- Configures the FastAPI application with appropriate settings
- Sets up the middleware stack
- Registers exception handlers
- Mounts the API and Kroger OAuth routers
- Serves the static site when its directory exists
"""

from __future__ import annotations

from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from fastapi.staticfiles import StaticFiles

from deals_to_meals.api.v1.router import oauth_router
from deals_to_meals.api.v1.router import router as v1_router
from deals_to_meals.core.config import Settings, get_settings
from deals_to_meals.core.events import lifespan
from deals_to_meals.core.exceptions import setup_exception_handlers
from deals_to_meals.core.middleware import (
    LoggingMiddleware,
    RequestIDMiddleware,
    SiteGateMiddleware,
)
from deals_to_meals.observability.logging import get_logger


logger = get_logger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure a FastAPI application instance.

    Args:
        settings: Optional settings override. If not provided, uses get_settings().

    Returns:
        Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title=settings.app.name,
        version=settings.app.version,
        description="Deals to Meals - grocery deals, coupons and recipes that use them",
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        docs_url="/docs" if settings.is_development else None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.is_development else None,
        debug=settings.app.debug,
    )

    app.state.settings = settings

    setup_exception_handlers(app)

    # Middleware order matters - first added = last executed
    _setup_middleware(app, settings)

    _setup_routers(app, settings)

    # Static files last so API routes win
    _setup_static(app, settings)

    return app


def _setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Configure middleware stack.

    Order from request perspective:
    1. RequestIDMiddleware (adds request ID for tracing)
    2. LoggingMiddleware (logs requests/responses)
    3. SiteGateMiddleware (only when a site password is set)
    4. CORSMiddleware (handles CORS)
    """
    origins = settings.cors_origins
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            # Browsers reject credentials with a wildcard origin
            allow_credentials="*" not in origins,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["X-Request-ID"],
        )

    if settings.site_gate_enabled:
        app.add_middleware(
            SiteGateMiddleware,
            password=settings.SITE_PASSWORD,
            cookie_name=settings.site.cookie_name,
            login_path=settings.site.login_path,
            open_prefixes=settings.site.open_prefixes,
        )

    app.add_middleware(
        LoggingMiddleware,
        exclude_paths={f"{settings.api.prefix}/health", "/favicon.ico"},
    )

    app.add_middleware(RequestIDMiddleware)


def _setup_routers(app: FastAPI, settings: Settings) -> None:
    app.include_router(v1_router, prefix=settings.api.prefix)
    app.include_router(oauth_router)


def _setup_static(app: FastAPI, settings: Settings) -> None:
    static_dir = settings.api.static_dir
    if not static_dir:
        return
    path = Path(static_dir)
    if not path.is_dir():
        logger.debug("Static directory not found, skipping", path=static_dir)
        return
    app.mount("/", StaticFiles(directory=path, html=True), name="static")
