"""Authentication provider factory.

Creates the provider selected by ``auth.mode`` and holds the instance used
by the request dependencies.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from deals_to_meals.auth.providers.exceptions import ConfigurationError
from deals_to_meals.auth.providers.header import HeaderAuthProvider
from deals_to_meals.auth.providers.supabase import SupabaseAuthProvider
from deals_to_meals.core.config import AuthMode, get_settings
from deals_to_meals.observability.logging import get_logger


if TYPE_CHECKING:
    import httpx

    from deals_to_meals.auth.providers.protocol import AuthProvider
    from deals_to_meals.core.config import Settings

logger = get_logger(__name__)

# Provider state container (avoids global statement for mutation)
_state: dict[str, AuthProvider | None] = {"provider": None}


def create_auth_provider(
    settings: Settings | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> AuthProvider:
    """Create an authentication provider based on configuration.

    Args:
        settings: Application settings. If None, loaded from environment.
        http_client: Shared HTTP client for the identity provider.

    Raises:
        ConfigurationError: If required settings are missing for the auth mode.
    """
    if settings is None:
        settings = get_settings()

    mode = settings.auth_mode_enum
    logger.info("Creating auth provider", mode=mode.value)

    if mode == AuthMode.HEADER:
        if settings.is_production:
            msg = "Header auth mode is not allowed in production"
            raise ConfigurationError(msg)
        return HeaderAuthProvider(user_id_header=settings.auth.headers.user_id)

    if mode == AuthMode.SUPABASE:
        if not settings.supabase_user_url:
            msg = "auth.supabase_url is required for supabase mode"
            raise ConfigurationError(msg)
        return SupabaseAuthProvider(
            user_url=settings.supabase_user_url,
            service_key=settings.SUPABASE_SERVICE_KEY,
            timeout=settings.auth.timeout,
            http_client=http_client,
        )

    msg = f"Unknown auth mode: {mode}"
    raise ConfigurationError(msg)


def get_auth_provider() -> AuthProvider:
    """Get the current auth provider instance.

    Raises:
        RuntimeError: If the provider has not been initialized.
    """
    provider = _state["provider"]
    if provider is None:
        msg = "Auth provider not initialized. Call set_auth_provider() during startup."
        raise RuntimeError(msg)
    return provider


def set_auth_provider(provider: AuthProvider | None) -> None:
    """Set the global auth provider instance."""
    _state["provider"] = provider
    if provider is not None:
        logger.info("Auth provider set", provider=provider.provider_name)


async def initialize_auth_provider(
    http_client: httpx.AsyncClient | None = None,
) -> AuthProvider:
    """Create, initialize, and set the auth provider."""
    provider = create_auth_provider(http_client=http_client)
    await provider.initialize()
    set_auth_provider(provider)
    return provider


async def shutdown_auth_provider() -> None:
    """Shut down and clear the auth provider."""
    provider = _state["provider"]
    if provider is not None:
        await provider.shutdown()
        _state["provider"] = None
        logger.info("Auth provider shutdown")
