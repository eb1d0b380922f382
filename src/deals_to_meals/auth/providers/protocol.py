"""Authentication provider protocol definition."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable


if TYPE_CHECKING:
    from starlette.requests import Request

    from deals_to_meals.auth.providers.models import AuthResult


@runtime_checkable
class AuthProvider(Protocol):
    """Protocol for authentication providers.

    All auth providers implement token validation with optional request
    context plus startup and shutdown hooks.
    """

    @property
    def provider_name(self) -> str:
        """Return the provider name for logging."""
        ...

    async def validate_token(
        self,
        token: str,
        request: Request | None = None,
    ) -> AuthResult:
        """Validate a token and return authentication result.

        Args:
            token: The bearer token to validate. May be empty for header-based auth.
            request: Optional request object for accessing headers.

        Raises:
            TokenInvalidError: If the token is rejected.
            AuthenticationError: For other authentication failures.
            AuthServiceUnavailableError: If the identity provider is unreachable.
        """
        ...

    async def initialize(self) -> None:
        """Initialize the provider."""
        ...

    async def shutdown(self) -> None:
        """Clean up provider resources."""
        ...
