"""Heuristic matching of recipe ingredients to sale items and coupons.

An ingredient matches a sale item when the first word of the ingredient
name (lowercased) occurs anywhere in the sale item's name. Coupons match on
their description and brand. No synonym table or canonical ingredient
identity is involved, so false positives such as "pepper" matching
"Dr Pepper" are possible.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import TYPE_CHECKING

from deals_to_meals.schemas.recipes import CouponToClip, UsedSaleItem
from deals_to_meals.services.recipes.constants import MISSED_INGREDIENT_COST


if TYPE_CHECKING:
    from collections.abc import Sequence

    from deals_to_meals.schemas.recipes import Amount, CouponInput, SaleItemInput

_CENTS = Decimal("0.01")


@dataclass(slots=True)
class Attribution:
    """Sale items and coupons attributed to one recipe."""

    used_sale_items: list[UsedSaleItem] = field(default_factory=list)
    total_savings: float = 0.0
    coupons_to_clip: list[CouponToClip] = field(default_factory=list)
    estimated_cost: float = 0.0


def match_key(name: str) -> str:
    """Lowercase first word of a name, or "" for a blank name."""
    words = name.lower().split()
    return words[0] if words else ""


def to_amount(value: Amount) -> Decimal:
    """Parse a price the way the browser sent it. Unparseable values count as 0."""
    if value is None or isinstance(value, bool):
        return Decimal(0)
    try:
        amount = Decimal(str(value).strip() or "0")
    except InvalidOperation:
        return Decimal(0)
    return amount if amount.is_finite() else Decimal(0)


def _rounded(amount: Decimal) -> float:
    return float(amount.quantize(_CENTS, ROUND_HALF_UP))


class IngredientMatcher:
    """Attributes a shopper's sale items and coupons to recipes.

    Built once per search from the shopper's selections, then applied to
    every recipe in the results. When several sale items share the same
    first word, the earliest selection is the one credited, matching the
    first-seen rule used for deal deduplication.
    """

    def __init__(
        self,
        sale_items: Sequence[SaleItemInput],
        coupons: Sequence[CouponInput] = (),
    ) -> None:
        self._sale_items = list(sale_items)
        self._coupons = list(coupons)
        self._by_key: dict[str, int] = {}
        for index, item in enumerate(self._sale_items):
            key = match_key(item.name)
            if key:
                self._by_key.setdefault(key, index)

    def find_sale_item(self, ingredient_name: str) -> int | None:
        """Index of the sale item matching an ingredient, if any.

        A sale item whose own first word equals the ingredient's is preferred
        over one that merely contains it.
        """
        key = match_key(ingredient_name)
        if not key:
            return None
        if key in self._by_key:
            return self._by_key[key]
        for index, item in enumerate(self._sale_items):
            if key in item.name.lower():
                return index
        return None

    def attribute(
        self,
        recipe_ingredients: Sequence[str],
        missed_count: int = 0,
    ) -> Attribution:
        """Attribute sale items and coupons to one recipe.

        Args:
            recipe_ingredients: Names of the recipe's ingredients that the
                search reported as used.
            missed_count: Number of recipe ingredients not covered by the
                shopper's selection; each adds a flat pantry cost estimate.
        """
        matched: list[int] = []
        for name in recipe_ingredients:
            index = self.find_sale_item(name)
            if index is not None and index not in matched:
                matched.append(index)

        used = [self._sale_items[i] for i in matched]
        savings = sum((to_amount(item.savings) for item in used), Decimal(0))
        cost = sum((to_amount(item.sale_price) for item in used), Decimal(0))
        cost += Decimal(MISSED_INGREDIENT_COST) * max(missed_count, 0)

        return Attribution(
            used_sale_items=[
                UsedSaleItem(
                    name=item.name,
                    sale_price=item.sale_price,
                    regular_price=item.regular_price,
                    savings=item.savings,
                    upc=item.upc,
                )
                for item in used
            ],
            total_savings=_rounded(savings),
            coupons_to_clip=self._match_coupons(recipe_ingredients),
            estimated_cost=_rounded(cost),
        )

    def _match_coupons(self, recipe_ingredients: Sequence[str]) -> list[CouponToClip]:
        keys = [k for k in (match_key(n) for n in recipe_ingredients) if k]
        if not keys:
            return []

        clip: list[CouponToClip] = []
        for coupon in self._coupons:
            text = f"{coupon.description} {coupon.brand or ''}".lower()
            if any(key in text for key in keys):
                clip.append(
                    CouponToClip(
                        description=coupon.description,
                        savings=coupon.savings,
                        clipped=coupon.clipped,
                        type=coupon.type,
                    )
                )
        return clip


def attribute(
    recipe_ingredients: Sequence[str],
    sale_items: Sequence[SaleItemInput],
    coupons: Sequence[CouponInput] = (),
    missed_count: int = 0,
) -> Attribution:
    """Convenience wrapper for a single recipe."""
    return IngredientMatcher(sale_items, coupons).attribute(
        recipe_ingredients, missed_count
    )
