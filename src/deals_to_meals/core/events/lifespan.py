"""Application lifespan event handlers.

Startup creates one shared outbound HTTP client and wires every upstream
client and service around it; the results are stored on ``app.state``.
The database and Redis are optional: when they fail to come up the
features that need them answer 503 instead of aborting startup.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import httpx

from deals_to_meals.auth.providers import (
    initialize_auth_provider,
    shutdown_auth_provider,
)
from deals_to_meals.cache.redis import close_redis, get_redis_client, init_redis
from deals_to_meals.clients.kroger import KrogerClient
from deals_to_meals.clients.llm import LLMProxyClient
from deals_to_meals.clients.spoonacular import SpoonacularClient
from deals_to_meals.core.config import CredentialBackend, Settings, get_settings
from deals_to_meals.credentials import (
    ConnectionStore,
    InMemoryStore,
    RedisStore,
    TokenManager,
)
from deals_to_meals.database import (
    ProfileRepository,
    SavedRecipeRepository,
    close_database_pool,
    init_database_pool,
)
from deals_to_meals.observability.logging import get_logger, setup_logging
from deals_to_meals.services.account import KrogerAccountService
from deals_to_meals.services.deals import DealsService
from deals_to_meals.services.recipes import RecipeSearchService


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from fastapi import FastAPI

    from deals_to_meals.credentials import KeyValueStore

logger = get_logger(__name__)


def create_http_client(settings: Settings) -> httpx.AsyncClient:
    """Shared client for every outbound call."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http.timeout),
        limits=httpx.Limits(max_connections=settings.http.max_connections),
    )


async def _startup(app: FastAPI, settings: Settings) -> None:
    """Initialize all application services during startup."""
    setup_logging(
        log_level=settings.logging.level,
        log_format=settings.logging.format,
        is_development=settings.is_development,
    )

    logger.info(
        "Starting application",
        app_name=settings.app.name,
        environment=settings.APP_ENV,
        debug=settings.app.debug,
    )

    http_client = create_http_client(settings)
    app.state.http_client = http_client

    # Auth is critical - don't continue without it
    try:
        await initialize_auth_provider(http_client=http_client)
        logger.info("Auth provider initialized", mode=settings.auth.mode)
    except Exception:
        logger.exception("Failed to initialize auth provider")
        raise

    database_ready = await _init_database(settings)
    if database_ready:
        app.state.profile_repository = ProfileRepository(
            schema=settings.database.db_schema
        )
        app.state.saved_recipe_repository = SavedRecipeRepository(
            schema=settings.database.db_schema
        )
    else:
        app.state.profile_repository = None
        app.state.saved_recipe_repository = None

    backend = await _init_credential_backend(settings)
    token_manager = TokenManager(
        client_id=settings.KROGER_CLIENT_ID,
        client_secret=settings.KROGER_CLIENT_SECRET,
        token_url=settings.kroger.token_url,
        connections=ConnectionStore(backend, key_prefix=settings.credentials.key_prefix),
        app_scope=settings.kroger.app_scope,
        redirect_uri=settings.kroger.redirect_uri,
        http_client=http_client,
    )
    kroger = KrogerClient(api_base=settings.kroger.api_base, http_client=http_client)

    app.state.token_manager = token_manager
    app.state.deals_service = DealsService(kroger, token_manager, settings)
    app.state.account_service = KrogerAccountService(
        kroger,
        token_manager,
        settings,
        profiles=app.state.profile_repository,
    )
    app.state.recipe_service = RecipeSearchService(
        SpoonacularClient(
            api_key=settings.SPOONACULAR_API_KEY,
            base_url=settings.spoonacular.base_url,
            http_client=http_client,
        ),
        settings,
    )
    app.state.llm_client = LLMProxyClient(
        api_key=settings.LLM_API_KEY,
        url=settings.llm.url,
        api_version=settings.llm.api_version,
        timeout=settings.llm.timeout,
        http_client=http_client,
    )

    _warn_missing_secrets(settings)
    logger.info("Application startup complete")


async def _init_database(settings: Settings) -> bool:
    """Initialize the database pool (optional - non-critical)."""
    if not settings.database.enabled:
        logger.info("Database disabled - profile and saved recipes unavailable")
        return False
    try:
        await init_database_pool()
    except Exception:
        logger.exception(
            "Failed to initialize database - profile and saved recipes unavailable"
        )
        return False
    return True


async def _init_credential_backend(settings: Settings) -> KeyValueStore:
    """Pick where linked Kroger accounts are stored."""
    if settings.credential_backend_enum == CredentialBackend.REDIS:
        try:
            await init_redis()
            logger.info("Kroger connections stored in Redis")
            return RedisStore(
                get_redis_client(),
                ttl_seconds=settings.credentials.ttl_seconds,
            )
        except Exception:
            logger.exception(
                "Failed to initialize Redis - falling back to in-memory connections"
            )
    logger.info("Kroger connections stored in process memory")
    return InMemoryStore()


def _warn_missing_secrets(settings: Settings) -> None:
    missing = [
        name
        for name in (
            "KROGER_CLIENT_ID",
            "KROGER_CLIENT_SECRET",
            "SPOONACULAR_API_KEY",
            "LLM_API_KEY",
        )
        if not getattr(settings, name)
    ]
    if missing:
        logger.warning("Upstream secrets not configured", missing=missing)


async def _shutdown(app: FastAPI) -> None:
    """Shutdown all application services."""
    logger.info("Shutting down application")

    await shutdown_auth_provider()

    http_client: httpx.AsyncClient | None = getattr(app.state, "http_client", None)
    if http_client is not None:
        await http_client.aclose()
        app.state.http_client = None

    await close_redis()
    await close_database_pool()

    logger.info("Application shutdown complete")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifespan events.

    Yields:
        None - control returns to the application to handle requests.
    """
    settings = get_settings()
    await _startup(app, settings)
    yield
    await _shutdown(app)
