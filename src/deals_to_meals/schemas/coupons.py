"""Coupon and cart schemas."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from deals_to_meals.schemas.base import APIRequest, APIResponse


CouponType = Literal["digital_coupon", "boost_deal"]


class Coupon(APIResponse):
    """A loyalty offer available to the linked Kroger account."""

    id: str
    description: str = ""
    brand: str = ""
    savings: float = 0
    expiry_date: str = ""
    clipped: bool = False
    category: str = ""
    type: CouponType


class CouponsResponse(APIResponse):
    """Digital coupons and weekly Boost deals."""

    coupons: list[Coupon]
    boost_deals: list[Coupon]


class CartItem(APIRequest):
    """One line to add to the Kroger cart."""

    upc: str = Field(..., min_length=1)
    quantity: int | None = Field(default=None, ge=0)


class CartRequest(APIRequest):
    """Items to add to the Kroger cart."""

    items: list[CartItem] = Field(default_factory=list)
