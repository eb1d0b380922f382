"""Recipe search and generation schemas.

The search request echoes back deal and coupon objects the browser already
holds, so their price fields accept either strings (``"3.00"``) or numbers.
"""

from __future__ import annotations

from pydantic import Field

from deals_to_meals.schemas.base import APIRequest, APIResponse


Amount = str | float | int | None


class SaleItemInput(APIRequest):
    """A deal the user selected as a recipe ingredient."""

    name: str = ""
    sale_price: Amount = None
    regular_price: Amount = None
    savings: Amount = None
    upc: str = ""


class CouponInput(APIRequest):
    """A coupon or Boost deal the user can clip."""

    description: str = ""
    brand: str | None = ""
    savings: Amount = 0
    clipped: bool = False
    type: str = ""


class RecipeSearchRequest(APIRequest):
    """Search recipes that use the selected sale items."""

    ingredients: list[SaleItemInput] = Field(default_factory=list)
    meal_type: str | None = None
    diets: list[str] = Field(default_factory=list)
    coupons: list[CouponInput] = Field(default_factory=list)
    boost_deals: list[CouponInput] = Field(default_factory=list)
    offset: int = Field(default=0, ge=0)


class UsedSaleItem(APIResponse):
    """A sale item attributed to a recipe ingredient."""

    name: str
    sale_price: Amount = None
    regular_price: Amount = None
    savings: Amount = None
    upc: str = ""


class CouponToClip(APIResponse):
    """A coupon relevant to a recipe's ingredients."""

    description: str
    savings: Amount = 0
    clipped: bool = False
    type: str = ""


class RecipeIngredient(APIResponse):
    """An ingredient of a recipe and whether it is covered by a sale item."""

    name: str
    on_sale: bool


class EnrichedRecipe(APIResponse):
    """A search result annotated with savings information."""

    id: int
    title: str
    image: str | None = None
    time: str
    ready_in_minutes: int = 0
    servings: int = 4
    used_ingredient_count: int = 0
    missed_ingredient_count: int = 0
    used_sale_items: list[UsedSaleItem] = Field(default_factory=list)
    total_savings: float = 0.0
    estimated_cost: float = 0.0
    coupons_to_clip: list[CouponToClip] = Field(default_factory=list)
    summary: str = ""
    diets: list[str] = Field(default_factory=list)
    cuisines: list[str] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)
    all_ingredients: list[RecipeIngredient] = Field(default_factory=list)


class RecipeSearchResponse(APIResponse):
    """Recipes ordered by total savings, largest first."""

    recipes: list[EnrichedRecipe]
