"""Spoonacular API client package."""

from deals_to_meals.clients.spoonacular.client import SpoonacularClient
from deals_to_meals.clients.spoonacular.exceptions import SpoonacularError


__all__ = [
    "SpoonacularClient",
    "SpoonacularError",
]
