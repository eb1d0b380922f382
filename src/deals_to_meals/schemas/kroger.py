"""Kroger API payload schemas.

Only the fields this service reads are declared; everything else in the
upstream payload is ignored.
"""

from __future__ import annotations

from pydantic import Field

from deals_to_meals.schemas.base import DownstreamResponse


class KrogerPrice(DownstreamResponse):
    """Price block of a product item."""

    regular: float = 0.0
    promo: float = 0.0


class KrogerItem(DownstreamResponse):
    """One sellable item (size variant) of a product."""

    upc: str = ""
    size: str = ""
    price: KrogerPrice | None = None


class KrogerImageSize(DownstreamResponse):
    """One rendition of a product image."""

    size: str = ""
    url: str | None = None


class KrogerImage(DownstreamResponse):
    """Product image for one perspective (front, back, ...)."""

    perspective: str = ""
    sizes: list[KrogerImageSize] = Field(default_factory=list)


class KrogerProduct(DownstreamResponse):
    """Product record returned by the products search."""

    product_id: str
    description: str = ""
    brand: str = ""
    items: list[KrogerItem] = Field(default_factory=list)
    images: list[KrogerImage] = Field(default_factory=list)

    def thumbnail_url(self) -> str | None:
        """URL of the front-perspective thumbnail, if the product has one."""
        for image in self.images:
            if image.perspective != "front":
                continue
            for rendition in image.sizes:
                if rendition.size == "thumbnail":
                    return rendition.url
            return None
        return None


class KrogerAddress(DownstreamResponse):
    """Street address of a store."""

    address_line1: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""


class KrogerHours(DownstreamResponse):
    """Store opening hours summary."""

    open24: bool = False


class KrogerLocation(DownstreamResponse):
    """Store record returned by the locations search."""

    location_id: str
    chain: str = ""
    name: str = ""
    address: KrogerAddress = Field(default_factory=KrogerAddress)
    hours: KrogerHours | None = None


class KrogerCoupon(DownstreamResponse):
    """Loyalty coupon record."""

    offer_id: str
    description: str = ""
    brand_name: str | None = None
    customer_savings: float | None = None
    expiration_date: str | None = None
    offer_state: str = ""
    categories: list[str] = Field(default_factory=list)
