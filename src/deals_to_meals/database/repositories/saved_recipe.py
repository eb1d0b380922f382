"""Saved recipe repository."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from deals_to_meals.database.repositories.base import BaseRepository, row_to_dict
from deals_to_meals.observability.logging import get_logger


if TYPE_CHECKING:
    from deals_to_meals.schemas.profile import SavedRecipeCreate

logger = get_logger(__name__)

_INSERT_COLUMNS = (
    "title",
    "emoji",
    "time",
    "servings",
    "difficulty",
    "ingredients",
    "steps",
    "store_name",
    "image",
)


class SavedRecipeRepository(BaseRepository):
    """Rows of ``saved_recipes``; every query is scoped to one user."""

    table = "saved_recipes"

    async def list_for_user(self, user_id: str) -> list[dict[str, Any]]:
        """All of a user's saved recipes, newest first."""
        query = f"""
            SELECT * FROM {self.qualified_table}
            WHERE user_id = $1
            ORDER BY created_at DESC
        """  # noqa: S608

        async with self.pool.acquire() as conn:
            rows = await conn.fetch(query, user_id)

        return [row_to_dict(row) for row in rows]

    async def create(self, user_id: str, recipe: SavedRecipeCreate) -> dict[str, Any]:
        """Insert a saved recipe and return the stored row."""
        values = recipe.model_dump()
        placeholders = ", ".join(f"${i}" for i in range(2, len(_INSERT_COLUMNS) + 2))
        query = f"""
            INSERT INTO {self.qualified_table} (user_id, {", ".join(_INSERT_COLUMNS)})
            VALUES ($1, {placeholders})
            RETURNING *
        """  # noqa: S608

        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                query, user_id, *(values[c] for c in _INSERT_COLUMNS)
            )

        assert row is not None
        logger.info("Recipe saved", user_id=user_id, title=recipe.title)
        return row_to_dict(row)

    async def delete(self, user_id: str, recipe_id: str) -> bool:
        """Delete one of the user's recipes.

        Returns:
            True if a row was deleted.
        """
        query = f"""
            DELETE FROM {self.qualified_table}
            WHERE id::text = $1 AND user_id = $2
        """  # noqa: S608

        async with self.pool.acquire() as conn:
            status = await conn.execute(query, recipe_id, user_id)

        return status.endswith(" 1")
