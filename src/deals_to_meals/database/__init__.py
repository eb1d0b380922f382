"""PostgreSQL database layer.

This module provides:
- Connection pool management
- Repository classes for profile and saved-recipe rows
- Health check utilities
"""

from deals_to_meals.database.connection import (
    check_database_health,
    close_database_pool,
    get_database_pool,
    init_database_pool,
    is_database_ready,
)
from deals_to_meals.database.repositories import (
    ProfileRepository,
    SavedRecipeRepository,
)


__all__ = [
    "ProfileRepository",
    "SavedRecipeRepository",
    "check_database_health",
    "close_database_pool",
    "get_database_pool",
    "init_database_pool",
    "is_database_ready",
]
