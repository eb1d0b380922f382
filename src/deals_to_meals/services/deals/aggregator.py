"""Turn raw product records into a ranked list of deals."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import TYPE_CHECKING

from pydantic import ValidationError

from deals_to_meals.observability.logging import get_logger
from deals_to_meals.schemas.deals import DealItem
from deals_to_meals.schemas.kroger import KrogerProduct


if TYPE_CHECKING:
    from collections.abc import Iterable

    from deals_to_meals.services.deals.fetcher import RawProduct

logger = get_logger(__name__)

_CENTS = Decimal("0.01")
_WHOLE = Decimal("1")
_HUNDRED = Decimal("100")


def _to_decimal(value: float) -> Decimal:
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        return Decimal(0)
    return amount if amount.is_finite() else Decimal(0)


def percent_off(regular: Decimal, sale: Decimal) -> int:
    """Whole percent discount, rounding halves up."""
    return int(((regular - sale) / regular * _HUNDRED).quantize(_WHOLE, ROUND_HALF_UP))


def build_deal(record: RawProduct) -> DealItem | None:
    """Map one raw record to a deal.

    Returns None for records that are not on promotion, whose promotional
    price is not below the regular price, or that cannot be parsed.
    """
    try:
        product = KrogerProduct.model_validate(record.payload)
    except ValidationError:
        logger.debug("Skipping unreadable product record", category=record.category)
        return None

    if not product.items or product.items[0].price is None:
        return None

    item = product.items[0]
    regular = _to_decimal(item.price.regular)
    sale = _to_decimal(item.price.promo)
    if sale <= 0 or regular <= 0 or sale >= regular:
        return None

    return DealItem(
        id=product.product_id,
        upc=item.upc,
        name=product.description,
        brand=product.brand,
        category=record.category,
        regular_price=str(regular.quantize(_CENTS, ROUND_HALF_UP)),
        sale_price=str(sale.quantize(_CENTS, ROUND_HALF_UP)),
        savings=str((regular - sale).quantize(_CENTS, ROUND_HALF_UP)),
        pct_off=percent_off(regular, sale),
        size=item.size,
        image=product.thumbnail_url(),
    )


def aggregate(records: Iterable[RawProduct], cap: int) -> list[DealItem]:
    """Deduplicate, rank and truncate deals.

    The first record seen for a product id wins. Ranking is by percent off,
    largest first; ties keep their input order.
    """
    seen: set[str] = set()
    deals: list[DealItem] = []
    for record in records:
        deal = build_deal(record)
        if deal is None or deal.id in seen:
            continue
        seen.add(deal.id)
        deals.append(deal)

    deals.sort(key=lambda d: d.pct_off, reverse=True)
    return deals[: max(cap, 0)]
