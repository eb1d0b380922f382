"""Store lookup and deal endpoints.

Provides:
- GET /stores?zip= for stores near a ZIP code
- GET /deals?locationId= for ranked deals at a store
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from deals_to_meals.api.dependencies import get_deals_service
from deals_to_meals.clients.kroger import KrogerError
from deals_to_meals.core.exceptions import (
    MissingParameterException,
    UpstreamAuthException,
    UpstreamRequestException,
)
from deals_to_meals.credentials import CredentialError
from deals_to_meals.observability.logging import get_logger
from deals_to_meals.schemas.deals import DealsResponse, StoresResponse
from deals_to_meals.services.deals import DealsService  # noqa: TC001


logger = get_logger(__name__)

router = APIRouter(tags=["Deals"])


@router.get(
    "/stores",
    response_model=StoresResponse,
    summary="Find stores near a ZIP code",
    responses={
        400: {"description": "zip is required"},
        500: {"description": "Kroger API error"},
    },
)
async def get_stores(
    deals_service: Annotated[DealsService, Depends(get_deals_service)],
    zip_code: Annotated[str | None, Query(alias="zip")] = None,
) -> StoresResponse:
    """Kroger-family stores within the configured radius of a ZIP code."""
    if not zip_code:
        raise MissingParameterException("zip")

    try:
        stores = await deals_service.find_stores(zip_code)
    except CredentialError as e:
        raise UpstreamAuthException(str(e)) from e
    except KrogerError as e:
        raise UpstreamRequestException(str(e)) from e

    return StoresResponse(stores=stores)


@router.get(
    "/deals",
    response_model=DealsResponse,
    summary="Ranked deals at a store",
    description=(
        "Searches the store's catalog across the deal category list and returns "
        "promoted products, deduplicated and ordered by percent off."
    ),
    responses={
        400: {"description": "locationId is required"},
        500: {"description": "Kroger credential error"},
    },
)
async def get_deals(
    deals_service: Annotated[DealsService, Depends(get_deals_service)],
    location_id: Annotated[str | None, Query(alias="locationId")] = None,
) -> DealsResponse:
    """Deals at a store. Individual category failures are skipped."""
    if not location_id:
        raise MissingParameterException("locationId")

    try:
        deals = await deals_service.find_deals(location_id)
    except CredentialError as e:
        raise UpstreamAuthException(str(e)) from e

    return DealsResponse(deals=deals)
