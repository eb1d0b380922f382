"""Spoonacular complexSearch payload schemas."""

from __future__ import annotations

from pydantic import Field

from deals_to_meals.schemas.base import DownstreamResponse


class SpoonacularIngredient(DownstreamResponse):
    """Ingredient reference in a search result."""

    name: str = ""


class SpoonacularStep(DownstreamResponse):
    """One instruction step."""

    number: int | None = None
    step: str = ""


class SpoonacularInstructions(DownstreamResponse):
    """A block of analyzed instructions."""

    name: str = ""
    steps: list[SpoonacularStep] = Field(default_factory=list)


class SpoonacularRecipe(DownstreamResponse):
    """Search result with recipe information and filled ingredients."""

    id: int
    title: str = ""
    image: str | None = None
    ready_in_minutes: int | None = None
    servings: int | None = None
    used_ingredient_count: int | None = None
    missed_ingredient_count: int | None = None
    used_ingredients: list[SpoonacularIngredient] = Field(default_factory=list)
    missed_ingredients: list[SpoonacularIngredient] = Field(default_factory=list)
    summary: str | None = None
    diets: list[str] = Field(default_factory=list)
    cuisines: list[str] = Field(default_factory=list)
    analyzed_instructions: list[SpoonacularInstructions] = Field(default_factory=list)
