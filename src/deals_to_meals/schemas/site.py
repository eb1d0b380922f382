"""Site gate schemas."""

from __future__ import annotations

from deals_to_meals.schemas.base import APIRequest


class SiteLoginRequest(APIRequest):
    """Shared-secret login for the static site."""

    password: str = ""
