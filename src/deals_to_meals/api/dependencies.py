"""FastAPI dependencies for service access.

Services are initialized during application startup and stored in
``app.state``. A missing service means it failed to start, so the request
is answered with 503.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fastapi import Request

from deals_to_meals.core.exceptions import ServiceUnavailableException


if TYPE_CHECKING:
    from deals_to_meals.clients.llm import LLMProxyClient
    from deals_to_meals.database import ProfileRepository, SavedRecipeRepository
    from deals_to_meals.services.account import KrogerAccountService
    from deals_to_meals.services.deals import DealsService
    from deals_to_meals.services.recipes import RecipeSearchService


def _from_state(request: Request, name: str, label: str) -> Any:
    service = getattr(request.app.state, name, None)
    if service is None:
        msg = f"{label} not available"
        raise ServiceUnavailableException(msg)
    return service


async def get_deals_service(request: Request) -> DealsService:
    """Get the store and deal lookup service."""
    return _from_state(request, "deals_service", "Deals service")


async def get_account_service(request: Request) -> KrogerAccountService:
    """Get the linked Kroger account service."""
    return _from_state(request, "account_service", "Kroger account service")


async def get_recipe_service(request: Request) -> RecipeSearchService:
    """Get the recipe search service."""
    return _from_state(request, "recipe_service", "Recipe search service")


async def get_llm_client(request: Request) -> LLMProxyClient:
    """Get the LLM passthrough client."""
    return _from_state(request, "llm_client", "Recipe generation")


async def get_profile_repository(request: Request) -> ProfileRepository:
    """Get the profile repository.

    Raises:
        ServiceUnavailableException: 503 if the database is not available.
    """
    return _from_state(request, "profile_repository", "Profile storage")


async def get_saved_recipe_repository(request: Request) -> SavedRecipeRepository:
    """Get the saved recipe repository.

    Raises:
        ServiceUnavailableException: 503 if the database is not available.
    """
    return _from_state(request, "saved_recipe_repository", "Saved recipe storage")
