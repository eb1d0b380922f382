"""Deal discovery: category fan-out, ranking and store lookup."""

from deals_to_meals.services.deals.aggregator import aggregate, build_deal, percent_off
from deals_to_meals.services.deals.constants import DEAL_CATEGORIES
from deals_to_meals.services.deals.fetcher import (
    CategoryFailure,
    CategoryFanOutFetcher,
    CategoryResult,
    CategorySuccess,
    RawProduct,
    partition,
)
from deals_to_meals.services.deals.service import DealsService, format_store


__all__ = [
    "DEAL_CATEGORIES",
    "CategoryFailure",
    "CategoryFanOutFetcher",
    "CategoryResult",
    "CategorySuccess",
    "DealsService",
    "RawProduct",
    "aggregate",
    "build_deal",
    "format_store",
    "partition",
    "percent_off",
]
