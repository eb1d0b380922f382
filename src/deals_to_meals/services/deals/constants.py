"""Search terms used to discover deals.

Kroger has no "everything on sale" query, so deals are found by searching
each term and keeping the promoted results.
"""

from __future__ import annotations

from typing import Final


DEAL_CATEGORIES: Final[tuple[str, ...]] = (
    # Proteins
    "chicken",
    "beef",
    "pork",
    "seafood",
    "turkey",
    "lamb",
    "sausage",
    "bacon",
    # Produce
    "vegetables",
    "fruit",
    "salad",
    "herbs",
    "mushrooms",
    "potatoes",
    # Grains and bread
    "pasta",
    "rice",
    "bread",
    "tortilla",
    "noodles",
    "grains",
    # Dairy
    "dairy",
    "cheese",
    "eggs",
    "yogurt",
    "butter",
    "cream",
    # Frozen
    "frozen meals",
    "frozen vegetables",
    "frozen pizza",
    "frozen seafood",
    # Snacks
    "snacks",
    "chips",
    "crackers",
    "nuts",
    "popcorn",
    # Drinks
    "beverages",
    "juice",
    "soda",
    "water",
    "tea",
    "coffee",
    # Condiments
    "condiments",
    "sauce",
    "oil",
    "dressing",
    "spices",
    "seasoning",
    # Pantry
    "soup",
    "canned goods",
    "beans",
    "tomatoes",
    "broth",
    # Breakfast
    "breakfast",
    "cereal",
    "oatmeal",
    "pancake",
    # Desserts
    "bakery",
    "dessert",
    "ice cream",
    "cookies",
    # Deli
    "deli",
    "lunch meat",
    "hot dogs",
)
