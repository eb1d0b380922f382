"""Credential models."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ScopeKind(StrEnum):
    """Whether a credential acts for the application or for one user."""

    APP = "app"
    USER = "user"


class Credential(BaseModel):
    """An OAuth access token with its expiry.

    App credentials carry no refresh token and are simply fetched again once
    expired. User credentials are renewed through the refresh-token grant.
    """

    access_token: str
    refresh_token: str | None = None
    expires_at: int = Field(..., description="Expiry as epoch milliseconds")
    scope_kind: ScopeKind

    model_config = {"frozen": True}

    def is_expired(self, now_ms: int) -> bool:
        """A credential is expired from its expiry instant onwards."""
        return now_ms >= self.expires_at


class KrogerConnection(BaseModel):
    """What is remembered about a user's linked Kroger account."""

    credential: Credential
    profile: dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True}


class TokenResponse(BaseModel):
    """Body of a successful OAuth token endpoint response."""

    access_token: str
    refresh_token: str | None = None
    expires_in: int
    token_type: str | None = None
    scope: str | None = None
