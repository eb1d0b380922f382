"""Linked Kroger account endpoints.

Provides:
- GET /coupons for the user's digital coupons and Boost deals
- POST /cart to add items to the user's Kroger cart
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from deals_to_meals.api.dependencies import get_account_service
from deals_to_meals.auth.dependencies import CurrentUser, get_current_user
from deals_to_meals.clients.kroger import KrogerError
from deals_to_meals.core.exceptions import (
    UnauthenticatedException,
    UpstreamAuthException,
    UpstreamRequestException,
)
from deals_to_meals.credentials import CredentialError
from deals_to_meals.schemas.common import SuccessResponse
from deals_to_meals.schemas.coupons import CartRequest, CouponsResponse
from deals_to_meals.services.account import KrogerAccountService  # noqa: TC001
from deals_to_meals.services.account import KrogerNotConnectedError


router = APIRouter(tags=["Kroger account"])


@router.get(
    "/coupons",
    response_model=CouponsResponse,
    summary="Digital coupons and Boost deals",
    responses={
        401: {"description": "Not authenticated or Kroger not connected"},
        500: {"description": "Kroger API error"},
    },
)
async def get_coupons(
    user: Annotated[CurrentUser, Depends(get_current_user)],
    account_service: Annotated[KrogerAccountService, Depends(get_account_service)],
) -> CouponsResponse:
    """Loyalty offers for the caller's linked Kroger account."""
    try:
        coupons, boost_deals = await account_service.get_coupons(user.id)
    except KrogerNotConnectedError as e:
        raise UnauthenticatedException(str(e)) from e
    except CredentialError as e:
        raise UpstreamAuthException(str(e)) from e
    except KrogerError as e:
        raise UpstreamRequestException(str(e)) from e

    return CouponsResponse(coupons=coupons, boost_deals=boost_deals)


@router.post(
    "/cart",
    response_model=SuccessResponse,
    summary="Add items to the Kroger cart",
    responses={
        401: {"description": "Not authenticated or Kroger not connected"},
        500: {"description": "Kroger API error"},
    },
)
async def add_to_cart(
    body: CartRequest,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    account_service: Annotated[KrogerAccountService, Depends(get_account_service)],
) -> SuccessResponse:
    """Add items for pickup. Missing quantities default to 1."""
    try:
        await account_service.add_to_cart(user.id, body.items)
    except KrogerNotConnectedError as e:
        raise UnauthenticatedException(str(e)) from e
    except CredentialError as e:
        raise UpstreamAuthException(str(e)) from e
    except KrogerError as e:
        raise UpstreamRequestException(str(e)) from e

    return SuccessResponse()
