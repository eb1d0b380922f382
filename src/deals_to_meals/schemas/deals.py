"""Deal and store schemas."""

from __future__ import annotations

from pydantic import ConfigDict, Field

from deals_to_meals.schemas.base import APIResponse


class DealItem(APIResponse):
    """A product currently on promotion at one store.

    Prices are two-decimal amounts serialized as strings, e.g. ``"4.00"``.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Kroger product id")
    upc: str = Field(default="", description="UPC of the first item")
    name: str = Field(..., description="Product description")
    brand: str = Field(default="")
    category: str = Field(..., description="Search term that found the product")
    regular_price: str
    sale_price: str
    savings: str
    pct_off: int = Field(..., ge=0, le=100, description="Whole percent off")
    size: str = Field(default="")
    image: str | None = Field(default=None, description="Front thumbnail URL")


class DealsResponse(APIResponse):
    """Deals at a store, best discount first."""

    deals: list[DealItem]


class Store(APIResponse):
    """A store near the requested ZIP code."""

    id: str
    name: str
    address: str
    hours: str = ""


class StoresResponse(APIResponse):
    """Stores near a ZIP code."""

    stores: list[Store]
