"""Mappings from the browser's filter labels to Spoonacular search filters."""

from __future__ import annotations

from typing import Final


DEFAULT_MEAL_TYPE: Final[str] = "main course"

MEAL_TYPE_MAP: Final[dict[str, str]] = {
    "Breakfast": "breakfast",
    "Lunch": "main course,salad,soup",
    "Dinner": "main course,side dish,soup",
    "Snack": "snack,fingerfood,appetizer",
    "Dessert": "dessert",
    "Appetizer": "appetizer,fingerfood",
}

DIET_MAP: Final[dict[str, str]] = {
    "Vegan": "vegan",
    "Vegetarian": "vegetarian",
    "Pescetarian": "pescetarian",
    "Ketogenic": "ketogenic",
    "Keto": "ketogenic",
    "Paleo": "paleo",
    "Gluten-Free": "gluten free",
    "Dairy-Free": "dairy free",
    "Mediterranean": "mediterranean",
}

# Labels Spoonacular has no diet for; each becomes other search filters.
EXCLUDED_INGREDIENTS: Final[dict[str, tuple[str, ...]]] = {
    "Halal": ("pork", "bacon", "lard", "gelatin", "alcohol", "wine", "beer"),
    "Kosher": ("pork", "shellfish", "bacon", "lard"),
}

NUMERIC_FILTERS: Final[dict[str, tuple[str, str]]] = {
    "Low Calorie": ("maxCalories", "500"),
    "High Fiber": ("minFiber", "5"),
}

FILTER_ONLY_DIETS: Final[frozenset[str]] = frozenset(
    {*EXCLUDED_INGREDIENTS, *NUMERIC_FILTERS}
)

SUMMARY_LENGTH: Final[int] = 200
MISSED_INGREDIENT_COST: Final[str] = "0.50"
DEFAULT_SERVINGS: Final[int] = 4
