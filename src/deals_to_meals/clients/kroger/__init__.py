"""Kroger API client package."""

from deals_to_meals.clients.kroger.client import BOOST_OFFER_TYPE, KrogerClient
from deals_to_meals.clients.kroger.exceptions import (
    KrogerError,
    KrogerResponseError,
    KrogerUnavailableError,
)


__all__ = [
    "BOOST_OFFER_TYPE",
    "KrogerClient",
    "KrogerError",
    "KrogerResponseError",
    "KrogerUnavailableError",
]
