"""Profile and saved-recipe schemas.

These mirror the ``profiles`` and ``saved_recipes`` tables and keep the
column names on the wire.
"""

from __future__ import annotations

from typing import Any

from pydantic import ConfigDict, Field

from deals_to_meals.schemas.base import RowSchema


PROFILE_UPDATABLE_FIELDS: frozenset[str] = frozenset(
    {
        "full_name",
        "household_size",
        "dietary_preferences",
        "favorite_recipe_types",
        "preferred_store",
    }
)


class ProfileUpdate(RowSchema):
    """PATCH body for the profile. Only these columns may be changed."""

    full_name: str | None = None
    household_size: int | None = Field(default=None, ge=1)
    dietary_preferences: list[str] | None = None
    favorite_recipe_types: list[str] | None = None
    preferred_store: str | None = None

    def changes(self) -> dict[str, Any]:
        """Fields the client actually sent."""
        return self.model_dump(exclude_unset=True)


class ProfileResponse(RowSchema):
    """The profile row plus the Kroger link status.

    Unknown columns of the row are passed through.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    kroger_connected: bool = False
    kroger_profile: dict[str, Any] | None = None


class SavedRecipeCreate(RowSchema):
    """POST body for saving a recipe."""

    title: str = Field(..., min_length=1)
    emoji: str | None = None
    time: str | None = None
    servings: int | None = None
    difficulty: str | None = None
    ingredients: list[Any] = Field(default_factory=list)
    steps: list[Any] = Field(default_factory=list)
    store_name: str | None = None
    image: str | None = None


class SavedRecipe(SavedRecipeCreate):
    """A stored recipe row."""

    model_config = ConfigDict(extra="allow")

    id: Any
    user_id: str
    created_at: Any = None


class SavedRecipesResponse(RowSchema):
    """A user's saved recipes, newest first."""

    recipes: list[SavedRecipe]
