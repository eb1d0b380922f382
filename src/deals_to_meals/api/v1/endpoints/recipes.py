"""Recipe endpoints.

Provides:
- POST /recipes/search for recipes that use the selected sale items
- POST /recipes/generate to relay a generation request to the LLM API
- GET/POST /recipes/saved and DELETE /recipes/saved/{recipe_id} for a
  user's saved recipes
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from deals_to_meals.api.dependencies import (
    get_llm_client,
    get_recipe_service,
    get_saved_recipe_repository,
)
from deals_to_meals.auth.dependencies import CurrentUser, get_current_user
from deals_to_meals.clients.llm import LLMProxyClient  # noqa: TC001
from deals_to_meals.clients.llm import LLMProxyError
from deals_to_meals.clients.spoonacular import SpoonacularError
from deals_to_meals.core.exceptions import (
    MissingParameterException,
    NotFoundException,
    UpstreamRequestException,
)
from deals_to_meals.database import SavedRecipeRepository  # noqa: TC001
from deals_to_meals.observability.logging import get_logger
from deals_to_meals.schemas.common import SuccessResponse
from deals_to_meals.schemas.profile import (
    SavedRecipe,
    SavedRecipeCreate,
    SavedRecipesResponse,
)
from deals_to_meals.schemas.recipes import RecipeSearchRequest, RecipeSearchResponse
from deals_to_meals.services.recipes import RecipeSearchService  # noqa: TC001


logger = get_logger(__name__)

router = APIRouter(prefix="/recipes", tags=["Recipes"])


@router.post(
    "/search",
    response_model=RecipeSearchResponse,
    summary="Search recipes using sale items",
    description=(
        "Finds recipes that use the selected deals, applies meal type and diet "
        "filters, and ranks results by how much the shopper saves."
    ),
    responses={
        400: {"description": "ingredients is required"},
        500: {"description": "Recipe search API error"},
    },
)
async def search_recipes(
    body: RecipeSearchRequest,
    recipe_service: Annotated[RecipeSearchService, Depends(get_recipe_service)],
) -> RecipeSearchResponse:
    """Search recipes and attribute savings to each result."""
    if not body.ingredients:
        raise MissingParameterException("ingredients")

    try:
        recipes = await recipe_service.search(body)
    except SpoonacularError as e:
        logger.warning("Recipe search failed", error=str(e))
        raise UpstreamRequestException(str(e)) from e

    return RecipeSearchResponse(recipes=recipes)


@router.post(
    "/generate",
    summary="Generate a recipe with the LLM API",
    description=(
        "Forwards the JSON body to the LLM messages endpoint and returns the "
        "upstream status and body unchanged."
    ),
    responses={401: {"description": "Not authenticated"}},
)
async def generate_recipe(
    request: Request,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    llm_client: Annotated[LLMProxyClient, Depends(get_llm_client)],
) -> Response:
    """Relay a generation request."""
    body = await request.body()
    try:
        upstream = await llm_client.forward(body)
    except LLMProxyError as e:
        raise UpstreamRequestException(str(e)) from e

    logger.debug(
        "Relayed recipe generation",
        user_id=user.id,
        status_code=upstream.status_code,
    )
    return Response(
        content=upstream.content,
        status_code=upstream.status_code,
        media_type=upstream.media_type,
    )


@router.get(
    "/saved",
    response_model=SavedRecipesResponse,
    summary="List saved recipes",
)
async def list_saved_recipes(
    user: Annotated[CurrentUser, Depends(get_current_user)],
    repository: Annotated[SavedRecipeRepository, Depends(get_saved_recipe_repository)],
) -> SavedRecipesResponse:
    """The caller's saved recipes, newest first."""
    rows = await repository.list_for_user(user.id)
    return SavedRecipesResponse(recipes=[SavedRecipe.model_validate(r) for r in rows])


@router.post(
    "/saved",
    response_model=SavedRecipe,
    summary="Save a recipe",
)
async def save_recipe(
    body: SavedRecipeCreate,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    repository: Annotated[SavedRecipeRepository, Depends(get_saved_recipe_repository)],
) -> SavedRecipe:
    """Store a recipe for the caller."""
    row = await repository.create(user.id, body)
    return SavedRecipe.model_validate(row)


@router.delete(
    "/saved/{recipe_id}",
    response_model=SuccessResponse,
    summary="Delete a saved recipe",
    responses={404: {"description": "No such recipe for this user"}},
)
async def delete_saved_recipe(
    recipe_id: str,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    repository: Annotated[SavedRecipeRepository, Depends(get_saved_recipe_repository)],
) -> SuccessResponse:
    """Delete one of the caller's saved recipes."""
    deleted = await repository.delete(user.id, recipe_id)
    if not deleted:
        raise NotFoundException("Saved recipe", recipe_id)
    return SuccessResponse()
