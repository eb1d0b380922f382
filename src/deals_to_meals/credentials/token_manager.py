"""OAuth credential acquisition and refresh for the Kroger API.

Handles three grants against the Kroger token endpoint:
- client credentials, for the application-level token used by catalog calls
- authorization code, when a user links their Kroger account
- refresh token, when a linked user's access token has expired

There is no locking: two requests for the same user may both refresh an
expired token. The provider accepts this and the later write wins.
"""

from __future__ import annotations

import base64
import time
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from deals_to_meals.credentials.exceptions import (
    CredentialUnavailableError,
    UpstreamAuthError,
)
from deals_to_meals.credentials.models import (
    Credential,
    KrogerConnection,
    ScopeKind,
    TokenResponse,
)
from deals_to_meals.observability.logging import get_logger


if TYPE_CHECKING:
    from collections.abc import Callable

    from deals_to_meals.credentials.store import ConnectionStore

logger = get_logger(__name__)


def _epoch_millis() -> int:
    return int(time.time() * 1000)


class TokenManager:
    """Issues and renews Kroger OAuth credentials.

    The application credential is cached on the instance. User credentials
    live in the injected ``ConnectionStore`` so that the storage backend can
    be swapped without touching the refresh logic.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        token_url: str,
        connections: ConnectionStore,
        *,
        app_scope: str = "product.compact",
        redirect_uri: str | None = None,
        http_client: httpx.AsyncClient | None = None,
        clock: Callable[[], int] | None = None,
    ) -> None:
        """Initialize the token manager.

        Args:
            client_id: Kroger application client id.
            client_secret: Kroger application client secret.
            token_url: OAuth token endpoint.
            connections: Store holding per-user connections.
            app_scope: Scope requested for the application credential.
            redirect_uri: Redirect URI registered for the authorization-code grant.
            http_client: Shared HTTP client. One is created when omitted.
            clock: Returns the current time as epoch milliseconds.
        """
        self._client_id = client_id
        self._client_secret = client_secret
        self._token_url = token_url
        self._connections = connections
        self._app_scope = app_scope
        self._redirect_uri = redirect_uri
        self._http = http_client
        self._owns_http_client = http_client is None
        self._clock = clock or _epoch_millis
        self._app_credential: Credential | None = None

    @property
    def connections(self) -> ConnectionStore:
        return self._connections

    async def initialize(self) -> None:
        """Create an HTTP client if none was injected."""
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=10.0)
        logger.info("TokenManager initialized")

    async def shutdown(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_http_client and self._http is not None:
            await self._http.aclose()
            self._http = None
        logger.debug("TokenManager shutdown")

    # =========================================================================
    # Public operations
    # =========================================================================

    async def ensure_valid(self, credential: Credential) -> Credential:
        """Return a usable credential, renewing it when expired.

        Args:
            credential: The credential to check.

        Returns:
            The same credential when still valid, otherwise a renewed one.

        Raises:
            UpstreamAuthError: The token endpoint refused the grant, or a user
                credential expired without a refresh token.
            CredentialUnavailableError: The token endpoint could not be reached.
        """
        if not credential.is_expired(self._clock()):
            return credential

        if credential.scope_kind == ScopeKind.APP:
            logger.info("Application credential expired, requesting a new one")
            return await self._client_credentials_grant()

        if not credential.refresh_token:
            msg = "Kroger credential expired and no refresh token is available"
            raise UpstreamAuthError(msg)

        logger.info("User credential expired, refreshing")
        token = await self._request_token(
            {
                "grant_type": "refresh_token",
                "refresh_token": credential.refresh_token,
            }
        )
        return self._to_credential(
            token,
            ScopeKind.USER,
            fallback_refresh_token=credential.refresh_token,
        )

    async def get_app_token(self) -> str:
        """Return a valid application access token for catalog calls."""
        if self._app_credential is None:
            self._app_credential = await self._client_credentials_grant()
        else:
            self._app_credential = await self.ensure_valid(self._app_credential)
        return self._app_credential.access_token

    async def exchange_code(self, code: str) -> Credential:
        """Trade an authorization code from the OAuth callback for a user credential."""
        form = {"grant_type": "authorization_code", "code": code}
        if self._redirect_uri:
            form["redirect_uri"] = self._redirect_uri
        token = await self._request_token(form)
        return self._to_credential(token, ScopeKind.USER)

    async def get_user_connection(self, user_id: str) -> KrogerConnection | None:
        """Load a user's Kroger connection with a valid credential.

        A refreshed credential is written back to the store.

        Returns:
            The connection, or None when the user has not linked Kroger.
        """
        connection = await self._connections.get(user_id)
        if connection is None:
            return None

        credential = await self.ensure_valid(connection.credential)
        if credential is connection.credential:
            return connection

        refreshed = connection.model_copy(update={"credential": credential})
        await self._connections.save(user_id, refreshed)
        logger.debug("Stored refreshed Kroger credential", user_id=user_id)
        return refreshed

    # =========================================================================
    # Token endpoint
    # =========================================================================

    async def _client_credentials_grant(self) -> Credential:
        token = await self._request_token(
            {"grant_type": "client_credentials", "scope": self._app_scope}
        )
        return self._to_credential(token, ScopeKind.APP)

    async def _request_token(self, form: dict[str, str]) -> TokenResponse:
        """POST a grant to the token endpoint.

        Raises:
            UpstreamAuthError: Non-success status or unreadable body.
            CredentialUnavailableError: Transport failure.
        """
        if self._http is None:
            await self.initialize()
        assert self._http is not None

        headers = {
            "Authorization": self._build_basic_auth_header(),
            "Content-Type": "application/x-www-form-urlencoded",
        }

        try:
            response = await self._http.post(self._token_url, data=form, headers=headers)
        except httpx.RequestError as e:
            logger.error("Failed to reach Kroger token endpoint", error=str(e))
            msg = f"Kroger token endpoint unavailable: {e}"
            raise CredentialUnavailableError(msg) from e

        if not response.is_success:
            logger.error(
                "Kroger token endpoint refused grant",
                grant_type=form["grant_type"],
                status_code=response.status_code,
            )
            raise UpstreamAuthError(response.text, status_code=response.status_code)

        try:
            return TokenResponse.model_validate_json(response.content)
        except ValidationError as e:
            msg = "Kroger token endpoint returned an unreadable response"
            raise UpstreamAuthError(msg, status_code=response.status_code) from e

    def _to_credential(
        self,
        token: TokenResponse,
        scope_kind: ScopeKind,
        fallback_refresh_token: str | None = None,
    ) -> Credential:
        refresh_token = None
        if scope_kind == ScopeKind.USER:
            refresh_token = token.refresh_token or fallback_refresh_token
        return Credential(
            access_token=token.access_token,
            refresh_token=refresh_token,
            expires_at=self._clock() + token.expires_in * 1000,
            scope_kind=scope_kind,
        )

    def _build_basic_auth_header(self) -> str:
        """Build the HTTP Basic header from the client id and secret.

        Raises:
            UpstreamAuthError: If client credentials are not configured.
        """
        if not self._client_id or not self._client_secret:
            msg = "Kroger client credentials not configured"
            raise UpstreamAuthError(msg)

        credentials = f"{self._client_id}:{self._client_secret}"
        encoded = base64.b64encode(credentials.encode("utf-8")).decode("utf-8")
        return f"Basic {encoded}"
