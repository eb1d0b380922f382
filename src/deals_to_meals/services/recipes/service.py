"""Recipe search around the shopper's sale items.

Builds a Spoonacular complexSearch query from the selected deals and filter
labels, then annotates every result with the sale items and coupons it can
use and sorts by total savings.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from pydantic import ValidationError

from deals_to_meals.observability.logging import get_logger
from deals_to_meals.schemas.recipes import EnrichedRecipe, RecipeIngredient
from deals_to_meals.schemas.spoonacular import SpoonacularRecipe
from deals_to_meals.services.recipes.constants import (
    DEFAULT_MEAL_TYPE,
    DEFAULT_SERVINGS,
    DIET_MAP,
    EXCLUDED_INGREDIENTS,
    FILTER_ONLY_DIETS,
    MEAL_TYPE_MAP,
    NUMERIC_FILTERS,
    SUMMARY_LENGTH,
)
from deals_to_meals.services.recipes.matcher import IngredientMatcher


if TYPE_CHECKING:
    from deals_to_meals.clients.spoonacular import SpoonacularClient
    from deals_to_meals.core.config import Settings
    from deals_to_meals.schemas.recipes import RecipeSearchRequest

logger = get_logger(__name__)

_TAG_PATTERN = re.compile(r"<[^>]*>")


def strip_html(text: str) -> str:
    """Remove markup tags, leaving their text content."""
    return _TAG_PATTERN.sub("", text)


def summarize(summary: str | None) -> str:
    """Plain-text excerpt of a recipe summary."""
    if not summary:
        return ""
    return strip_html(summary)[:SUMMARY_LENGTH] + "..."


def build_search_params(
    request: RecipeSearchRequest,
    *,
    results_per_search: int = 50,
    max_ingredients: int = 20,
) -> dict[str, str]:
    """Translate a search request into complexSearch query parameters."""
    names = [item.name for item in request.ingredients[:max_ingredients]]
    params = {
        "includeIngredients": ",".join(names),
        "type": MEAL_TYPE_MAP.get(request.meal_type or "", DEFAULT_MEAL_TYPE),
        "number": str(results_per_search),
        "offset": str(request.offset),
        "sort": "max-used-ingredients",
        "sortDirection": "desc",
        "addRecipeInformation": "true",
        "fillIngredients": "true",
        "instructionsRequired": "true",
    }

    diets = [
        DIET_MAP.get(label, label.lower())
        for label in request.diets
        if label and label not in FILTER_ONLY_DIETS
    ]
    if diets:
        params["diet"] = ",".join(diets)

    excluded: list[str] = []
    for label, ingredients in EXCLUDED_INGREDIENTS.items():
        if label in request.diets:
            excluded.extend(i for i in ingredients if i not in excluded)
    if excluded:
        params["excludeIngredients"] = ",".join(excluded)

    for label, (name, value) in NUMERIC_FILTERS.items():
        if label in request.diets:
            params[name] = value

    return params


def enrich(recipe: SpoonacularRecipe, matcher: IngredientMatcher) -> EnrichedRecipe:
    """Annotate one search result with savings information."""
    used_names = [i.name for i in recipe.used_ingredients]
    missed = recipe.missed_ingredient_count or 0
    attribution = matcher.attribute(used_names, missed)

    steps: list[str] = []
    if recipe.analyzed_instructions:
        steps = [s.step for s in recipe.analyzed_instructions[0].steps]

    return EnrichedRecipe(
        id=recipe.id,
        title=recipe.title,
        image=recipe.image,
        time=f"{recipe.ready_in_minutes} min" if recipe.ready_in_minutes else "N/A",
        ready_in_minutes=recipe.ready_in_minutes or 0,
        servings=recipe.servings or DEFAULT_SERVINGS,
        used_ingredient_count=recipe.used_ingredient_count or 0,
        missed_ingredient_count=missed,
        used_sale_items=attribution.used_sale_items,
        total_savings=attribution.total_savings,
        estimated_cost=attribution.estimated_cost,
        coupons_to_clip=attribution.coupons_to_clip,
        summary=summarize(recipe.summary),
        diets=recipe.diets,
        cuisines=recipe.cuisines,
        instructions=steps,
        all_ingredients=[
            *(RecipeIngredient(name=i.name, on_sale=True) for i in recipe.used_ingredients),
            *(RecipeIngredient(name=i.name, on_sale=False) for i in recipe.missed_ingredients),
        ],
    )


class RecipeSearchService:
    """Searches recipes and ranks them by what the shopper saves."""

    def __init__(self, spoonacular: SpoonacularClient, settings: Settings) -> None:
        self._spoonacular = spoonacular
        self._settings = settings

    async def search(self, request: RecipeSearchRequest) -> list[EnrichedRecipe]:
        """Run a search and return enriched results, largest savings first.

        Raises:
            SpoonacularError: The search API failed.
        """
        params = build_search_params(
            request,
            results_per_search=self._settings.spoonacular.results_per_search,
            max_ingredients=self._settings.spoonacular.max_ingredients,
        )
        results = await self._spoonacular.complex_search(params)

        matcher = IngredientMatcher(
            request.ingredients,
            [*request.coupons, *request.boost_deals],
        )
        enriched: list[EnrichedRecipe] = []
        for payload in results:
            try:
                recipe = SpoonacularRecipe.model_validate(payload)
            except ValidationError:
                logger.debug("Skipping unreadable recipe result")
                continue
            enriched.append(enrich(recipe, matcher))

        enriched.sort(key=lambda r: r.total_savings, reverse=True)
        logger.info(
            "Recipe search complete",
            result_count=len(enriched),
            offset=request.offset,
        )
        return enriched
