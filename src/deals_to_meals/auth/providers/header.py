"""Header-based authentication provider.

Use this ONLY for local development and tests.

WARNING: This provider trusts header values completely.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from deals_to_meals.auth.providers.exceptions import AuthenticationError
from deals_to_meals.auth.providers.models import AuthResult
from deals_to_meals.observability.logging import get_logger


if TYPE_CHECKING:
    from starlette.requests import Request

logger = get_logger(__name__)


class HeaderAuthProvider:
    """Reads the caller's user id from a request header.

    Attributes:
        user_id_header: Header name containing the user ID (required).
    """

    def __init__(self, user_id_header: str = "X-User-ID") -> None:
        self.user_id_header = user_id_header

    @property
    def provider_name(self) -> str:
        """Return provider name for logging."""
        return "header"

    async def validate_token(
        self,
        _token: str,
        request: Request | None = None,
    ) -> AuthResult:
        """Extract the user id from request headers.

        Raises:
            AuthenticationError: If request is None or the header is missing.
        """
        if request is None:
            msg = "HeaderAuthProvider requires request object for header access"
            raise AuthenticationError(msg)

        user_id = request.headers.get(self.user_id_header)
        if not user_id:
            msg = f"Missing required header: {self.user_id_header}"
            raise AuthenticationError(msg)

        logger.debug("Authenticated via headers", user_id=user_id)

        return AuthResult(
            user_id=user_id,
            token_type="header",  # noqa: S106 - not a password
            raw_claims={"source": "headers"},
        )

    async def initialize(self) -> None:
        """Initialize the provider."""
        logger.info(
            "HeaderAuthProvider initialized",
            user_id_header=self.user_id_header,
        )
        logger.warning(
            "HeaderAuthProvider is enabled - ensure this is only used in "
            "development or testing"
        )

    async def shutdown(self) -> None:
        """Shutdown the provider. No cleanup needed."""
        logger.debug("HeaderAuthProvider shutdown")
