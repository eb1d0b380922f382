"""Recipe search and savings attribution."""

from deals_to_meals.services.recipes.matcher import (
    Attribution,
    IngredientMatcher,
    attribute,
    match_key,
)
from deals_to_meals.services.recipes.service import (
    RecipeSearchService,
    build_search_params,
    enrich,
    summarize,
)


__all__ = [
    "Attribution",
    "IngredientMatcher",
    "RecipeSearchService",
    "attribute",
    "build_search_params",
    "enrich",
    "match_key",
    "summarize",
]
