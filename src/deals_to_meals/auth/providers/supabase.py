"""Supabase authentication provider.

Validates an access token by asking the identity provider who it belongs
to: ``GET {supabase_url}/auth/v1/user`` with the token as bearer and the
project key in the ``apikey`` header.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from deals_to_meals.auth.providers.exceptions import (
    AuthServiceUnavailableError,
    ConfigurationError,
    TokenInvalidError,
)
from deals_to_meals.auth.providers.models import AuthResult, SupabaseUser
from deals_to_meals.observability.logging import get_logger


if TYPE_CHECKING:
    from starlette.requests import Request

logger = get_logger(__name__)


class SupabaseAuthProvider:
    """Validates tokens against the Supabase user endpoint."""

    def __init__(
        self,
        user_url: str,
        service_key: str,
        timeout: float = 5.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the provider.

        Args:
            user_url: Full URL of the ``/auth/v1/user`` endpoint.
            service_key: Project key sent in the ``apikey`` header.
            timeout: HTTP request timeout in seconds.
            http_client: Shared HTTP client. One is created when omitted.

        Raises:
            ConfigurationError: If the URL or key is missing.
        """
        if not user_url or not service_key:
            msg = "SupabaseAuthProvider requires auth.supabase_url and SUPABASE_SERVICE_KEY"
            raise ConfigurationError(msg)

        self._user_url = user_url
        self._service_key = service_key
        self._timeout = timeout
        self._http = http_client
        self._owns_http_client = http_client is None

    @property
    def provider_name(self) -> str:
        """Return provider name for logging."""
        return "supabase"

    async def validate_token(
        self,
        token: str,
        _request: Request | None = None,
    ) -> AuthResult:
        """Resolve a token to the user it was issued to.

        Raises:
            TokenInvalidError: Empty token, or the provider rejected it.
            AuthServiceUnavailableError: Transport error or 5xx from the provider.
        """
        if not token:
            msg = "Missing bearer token"
            raise TokenInvalidError(msg)

        if self._http is None:
            await self.initialize()
        assert self._http is not None

        try:
            response = await self._http.get(
                self._user_url,
                headers={
                    "Authorization": f"Bearer {token}",
                    "apikey": self._service_key,
                },
                timeout=self._timeout,
            )
        except httpx.RequestError as e:
            logger.warning("Identity provider unreachable", error=str(e))
            raise AuthServiceUnavailableError(str(e)) from e

        if response.status_code >= 500:
            logger.warning(
                "Identity provider error",
                status_code=response.status_code,
            )
            msg = f"Identity provider returned {response.status_code}"
            raise AuthServiceUnavailableError(msg)

        if not response.is_success:
            msg = "Invalid token"
            raise TokenInvalidError(msg)

        try:
            user = SupabaseUser.model_validate_json(response.content)
        except ValidationError as e:
            msg = "Identity provider returned an unreadable user"
            raise TokenInvalidError(msg) from e

        return AuthResult(
            user_id=user.id,
            email=user.email,
            raw_claims={"role": user.role, "aud": user.aud},
        )

    async def initialize(self) -> None:
        """Create an HTTP client if none was injected."""
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=self._timeout)
        logger.info("SupabaseAuthProvider initialized")

    async def shutdown(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_http_client and self._http is not None:
            await self._http.aclose()
            self._http = None
        logger.debug("SupabaseAuthProvider shutdown")
