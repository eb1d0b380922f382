"""Store lookup and deal discovery at a store.

Both operations use the application-level Kroger credential.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import ValidationError

from deals_to_meals.observability.logging import get_logger
from deals_to_meals.schemas.deals import DealItem, Store
from deals_to_meals.schemas.kroger import KrogerLocation
from deals_to_meals.services.deals.aggregator import aggregate
from deals_to_meals.services.deals.constants import DEAL_CATEGORIES
from deals_to_meals.services.deals.fetcher import CategoryFanOutFetcher


if TYPE_CHECKING:
    from collections.abc import Sequence

    from deals_to_meals.clients.kroger import KrogerClient
    from deals_to_meals.core.config import Settings
    from deals_to_meals.credentials import TokenManager

logger = get_logger(__name__)


def format_store(location: KrogerLocation) -> Store:
    """Shape a Kroger location for the store picker."""
    address = location.address
    return Store(
        id=location.location_id,
        name=location.chain or location.name or "Kroger",
        address=f"{address.address_line1}, {address.city}, {address.state}",
        hours="Open 24 hrs" if location.hours and location.hours.open24 else "",
    )


class DealsService:
    """Finds stores and ranks the deals available at one of them."""

    def __init__(
        self,
        kroger: KrogerClient,
        token_manager: TokenManager,
        settings: Settings,
    ) -> None:
        self._kroger = kroger
        self._tokens = token_manager
        self._settings = settings
        self._fetcher = CategoryFanOutFetcher(
            kroger,
            products_per_category=settings.deals.products_per_category,
        )

    @property
    def categories(self) -> Sequence[str]:
        """Configured search terms, or the built-in list."""
        return self._settings.deals.categories or DEAL_CATEGORIES

    async def find_stores(self, zip_code: str) -> list[Store]:
        """Stores near a ZIP code, nearest first as returned by Kroger."""
        token = await self._tokens.get_app_token()
        raw = await self._kroger.search_locations(
            token,
            zip_code,
            radius_miles=self._settings.kroger.store_radius_miles,
            limit=self._settings.kroger.store_limit,
        )

        stores: list[Store] = []
        for payload in raw:
            try:
                stores.append(format_store(KrogerLocation.model_validate(payload)))
            except ValidationError:
                logger.debug("Skipping unreadable location record")
        return stores

    async def find_deals(self, location_id: str) -> list[DealItem]:
        """Ranked deals at a store.

        Raises:
            UpstreamAuthError: The application credential could not be issued.
        """
        token = await self._tokens.get_app_token()
        records = await self._fetcher.fetch_deals(
            location_id,
            self.categories,
            self._settings.deals.batch_size,
            access_token=token,
        )
        deals = aggregate(records, self._settings.deals.max_results)
        logger.info("Deals ranked", location_id=location_id, deal_count=len(deals))
        return deals
