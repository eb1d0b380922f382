"""Shared response schemas."""

from __future__ import annotations

from deals_to_meals.schemas.base import APIResponse


class SuccessResponse(APIResponse):
    """Acknowledgement for mutations without a meaningful body."""

    success: bool = True
