"""Authentication provider models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class AuthResult(BaseModel):
    """Result of successful token validation.

    Attributes:
        user_id: Identity provider user id.
        email: User email, when the provider reports one.
        token_type: How the caller was identified (access, header).
        raw_claims: Provider-specific details for debugging.
    """

    user_id: str = Field(..., description="Identity provider user id")
    email: str | None = Field(default=None, description="User email")
    token_type: str = Field(default="access", description="Type of validated token")
    raw_claims: dict[str, Any] = Field(
        default_factory=dict,
        description="Provider-specific details",
    )

    model_config = {"frozen": True}


class SupabaseUser(BaseModel):
    """Subset of the ``/auth/v1/user`` response body."""

    id: str
    email: str | None = None
    role: str | None = None
    aud: str | None = None
