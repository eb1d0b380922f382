"""Unit tests for recipe search."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from deals_to_meals.core.config import Settings
from deals_to_meals.schemas.recipes import RecipeSearchRequest
from deals_to_meals.schemas.spoonacular import SpoonacularRecipe
from deals_to_meals.services.recipes import (
    IngredientMatcher,
    RecipeSearchService,
    build_search_params,
    enrich,
    summarize,
)


pytestmark = pytest.mark.unit


def _request(**overrides: Any) -> RecipeSearchRequest:
    body: dict[str, Any] = {
        "ingredients": [
            {"name": "Chicken Breast", "salePrice": "5.99", "savings": "2.00"},
            {"name": "Jasmine Rice", "salePrice": "2.49", "savings": "1.00"},
        ],
    }
    body.update(overrides)
    return RecipeSearchRequest.model_validate(body)


def _recipe(recipe_id: int, used: list[str], missed: list[str], **extra: Any) -> dict[str, Any]:
    return {
        "id": recipe_id,
        "title": f"Recipe {recipe_id}",
        "image": f"https://img.test/{recipe_id}.jpg",
        "readyInMinutes": 30,
        "servings": 2,
        "usedIngredientCount": len(used),
        "missedIngredientCount": len(missed),
        "usedIngredients": [{"name": n} for n in used],
        "missedIngredients": [{"name": n} for n in missed],
        "summary": "<b>Tasty</b> dish",
        "analyzedInstructions": [{"steps": [{"number": 1, "step": "Cook it."}]}],
        **extra,
    }


class TestBuildSearchParams:
    """Tests for build_search_params."""

    def test_defaults(self) -> None:
        params = build_search_params(_request())

        assert params["includeIngredients"] == "Chicken Breast,Jasmine Rice"
        assert params["type"] == "main course"
        assert params["number"] == "50"
        assert params["offset"] == "0"
        assert params["sort"] == "max-used-ingredients"
        assert "diet" not in params
        assert "excludeIngredients" not in params

    def test_meal_type_and_offset(self) -> None:
        params = build_search_params(_request(mealType="Breakfast", offset=50))

        assert params["type"] == "breakfast"
        assert params["offset"] == "50"

    def test_diet_filters(self) -> None:
        params = build_search_params(
            _request(diets=["Vegan", "Gluten-Free", "Halal", "Kosher", "Low Calorie"])
        )

        assert params["diet"] == "vegan,gluten free"
        excluded = params["excludeIngredients"].split(",")
        assert "gelatin" in excluded
        assert "shellfish" in excluded
        assert len(excluded) == len(set(excluded))
        assert params["maxCalories"] == "500"

    def test_high_fiber(self) -> None:
        params = build_search_params(_request(diets=["High Fiber"]))

        assert params["minFiber"] == "5"
        assert "diet" not in params

    def test_limits_ingredient_count(self) -> None:
        request = _request(ingredients=[{"name": f"item {i}"} for i in range(30)])

        params = build_search_params(request, max_ingredients=20)

        assert len(params["includeIngredients"].split(",")) == 20


class TestEnrich:
    """Tests for enrich and summarize."""

    def test_summarize(self) -> None:
        assert summarize("<p>Hello <b>world</b></p>") == "Hello world..."
        assert summarize("x" * 300) == "x" * 200 + "..."
        assert summarize(None) == ""

    def test_enrich(self) -> None:
        matcher = IngredientMatcher(_request().ingredients)
        recipe = SpoonacularRecipe.model_validate(
            _recipe(1, ["chicken breast"], ["soy sauce"], diets=["dairy free"])
        )

        result = enrich(recipe, matcher)

        assert result.time == "30 min"
        assert result.total_savings == 2.0
        assert result.estimated_cost == 6.49
        assert result.summary == "Tasty dish..."
        assert result.instructions == ["Cook it."]
        assert [(i.name, i.on_sale) for i in result.all_ingredients] == [
            ("chicken breast", True),
            ("soy sauce", False),
        ]
        assert result.diets == ["dairy free"]

    def test_enrich_defaults(self) -> None:
        recipe = SpoonacularRecipe.model_validate({"id": 2, "title": "Plain"})

        result = enrich(recipe, IngredientMatcher([]))

        assert result.time == "N/A"
        assert result.servings == 4
        assert result.instructions == []


class TestRecipeSearchService:
    """Tests for RecipeSearchService."""

    @pytest.mark.asyncio
    async def test_sorts_by_total_savings(self, settings: Settings) -> None:
        spoonacular = MagicMock()
        spoonacular.complex_search = AsyncMock(
            return_value=[
                _recipe(1, ["rice"], []),
                _recipe(2, ["chicken", "rice"], []),
                {"title": "no id"},
            ]
        )
        service = RecipeSearchService(spoonacular, settings)

        recipes = await service.search(_request())

        assert [r.id for r in recipes] == [2, 1]
        assert recipes[0].total_savings == 3.0
        params = spoonacular.complex_search.await_args.args[0]
        assert params["includeIngredients"] == "Chicken Breast,Jasmine Rice"
