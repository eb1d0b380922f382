"""Linked Kroger account operations."""

from deals_to_meals.services.account.exceptions import KrogerNotConnectedError
from deals_to_meals.services.account.service import (
    ANONYMOUS_STATE,
    KrogerAccountService,
    format_coupons,
)


__all__ = [
    "ANONYMOUS_STATE",
    "KrogerAccountService",
    "KrogerNotConnectedError",
    "format_coupons",
]
