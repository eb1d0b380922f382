"""Batched fan-out of product searches across category terms.

Categories are split into consecutive batches. Batches run one after
another; the searches inside a batch run concurrently. Peak concurrent load
on the Kroger API is therefore bounded by the batch size.

A failed search does not fail the fan-out. Each search produces either a
``CategorySuccess`` or a ``CategoryFailure``; failures are logged and then
discarded when the batch results are merged.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from deals_to_meals.clients.kroger import KrogerError
from deals_to_meals.observability.logging import get_logger


if TYPE_CHECKING:
    from collections.abc import Sequence

    from deals_to_meals.clients.kroger import KrogerClient

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class RawProduct:
    """An upstream product record and the search term that found it."""

    category: str
    payload: dict[str, Any]


@dataclass(frozen=True, slots=True)
class CategorySuccess:
    """Records returned by one category search."""

    category: str
    records: tuple[RawProduct, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class CategoryFailure:
    """A category search that returned nothing usable."""

    category: str
    reason: str


CategoryResult = CategorySuccess | CategoryFailure


def partition(categories: Sequence[str], batch_size: int) -> list[list[str]]:
    """Split categories into consecutive chunks of at most ``batch_size``."""
    if batch_size < 1:
        msg = f"batch_size must be positive, got {batch_size}"
        raise ValueError(msg)
    return [
        list(categories[i : i + batch_size])
        for i in range(0, len(categories), batch_size)
    ]


class CategoryFanOutFetcher:
    """Searches a store's catalog for every category term."""

    def __init__(self, kroger: KrogerClient, products_per_category: int = 20) -> None:
        self._kroger = kroger
        self._limit = products_per_category

    async def fetch_deals(
        self,
        location_id: str,
        categories: Sequence[str],
        batch_size: int,
        *,
        access_token: str,
    ) -> list[RawProduct]:
        """Search every category at a store.

        Args:
            location_id: Kroger store id.
            categories: Search terms, in the order they should be searched.
            batch_size: Maximum number of concurrent searches.
            access_token: Application access token for the catalog.

        Returns:
            All records found, in batch order and then in category order
            within a batch.
        """
        records: list[RawProduct] = []
        failures = 0

        for batch in partition(categories, batch_size):
            results = await asyncio.gather(
                *(
                    self._fetch_category(location_id, category, access_token)
                    for category in batch
                )
            )
            for result in results:
                if isinstance(result, CategoryFailure):
                    failures += 1
                    continue
                records.extend(result.records)

        logger.info(
            "Category fan-out complete",
            location_id=location_id,
            categories=len(categories),
            failures=failures,
            records=len(records),
        )
        return records

    async def _fetch_category(
        self,
        location_id: str,
        category: str,
        access_token: str,
    ) -> CategoryResult:
        try:
            products = await self._kroger.search_products(
                access_token,
                location_id,
                category,
                limit=self._limit,
            )
        except KrogerError as e:
            logger.warning(
                "Category search failed",
                category=category,
                location_id=location_id,
                error=str(e),
            )
            return CategoryFailure(category=category, reason=str(e))

        return CategorySuccess(
            category=category,
            records=tuple(RawProduct(category=category, payload=p) for p in products),
        )
