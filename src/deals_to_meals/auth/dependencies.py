"""FastAPI security dependencies.

The configured auth provider (supabase or header) validates the bearer token
and yields the calling user.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from deals_to_meals.auth.providers import (
    AuthenticationError,
    AuthResult,
    AuthServiceUnavailableError,
    get_auth_provider,
)
from deals_to_meals.core.config import AuthMode, get_settings
from deals_to_meals.core.exceptions import (
    ServiceUnavailableException,
    UnauthenticatedException,
)
from deals_to_meals.observability.logging import bind_context


bearer_scheme = HTTPBearer(
    scheme_name="Bearer",
    description="Identity provider access token",
    auto_error=False,
)


class CurrentUser(BaseModel):
    """The authenticated caller."""

    id: str
    email: str | None = None

    @classmethod
    def from_auth_result(cls, result: AuthResult) -> CurrentUser:
        return cls(id=result.user_id, email=result.email)


def _extract_token(credentials: HTTPAuthorizationCredentials | None) -> str:
    return credentials.credentials if credentials else ""


async def get_auth_result(
    request: Request,
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ],
) -> AuthResult:
    """Validate the caller's token using the configured auth provider.

    Raises:
        UnauthenticatedException: Missing or rejected token.
        ServiceUnavailableException: The identity provider is unreachable.
    """
    token = _extract_token(credentials)
    if not token and get_settings().auth_mode_enum != AuthMode.HEADER:
        raise UnauthenticatedException()

    try:
        provider = get_auth_provider()
    except RuntimeError:
        msg = "Authentication not available"
        raise ServiceUnavailableException(msg) from None

    try:
        result = await provider.validate_token(token, request)
    except AuthenticationError as e:
        raise UnauthenticatedException(str(e) or "Not authenticated") from None
    except AuthServiceUnavailableError as e:
        msg = f"Authentication service unavailable: {e}"
        raise ServiceUnavailableException(msg) from None

    bind_context(user_id=result.user_id)
    return result


async def get_auth_result_optional(
    request: Request,
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ],
) -> AuthResult | None:
    """Like ``get_auth_result`` but returns None instead of failing."""
    try:
        return await get_auth_result(request, credentials)
    except (UnauthenticatedException, ServiceUnavailableException):
        return None


async def get_current_user(
    auth_result: Annotated[AuthResult, Depends(get_auth_result)],
) -> CurrentUser:
    """Primary dependency for routes that require a signed-in user."""
    return CurrentUser.from_auth_result(auth_result)


async def get_current_user_optional(
    auth_result: Annotated[AuthResult | None, Depends(get_auth_result_optional)],
) -> CurrentUser | None:
    """For routes that work for both signed-in and anonymous callers."""
    if auth_result is None:
        return None
    return CurrentUser.from_auth_result(auth_result)
