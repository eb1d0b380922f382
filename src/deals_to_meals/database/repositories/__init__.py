"""Database repositories."""

from deals_to_meals.database.repositories.profile import ProfileRepository
from deals_to_meals.database.repositories.saved_recipe import SavedRecipeRepository


__all__ = ["ProfileRepository", "SavedRecipeRepository"]
