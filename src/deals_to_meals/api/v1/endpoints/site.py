"""Site password login.

Sets the cookie checked by ``SiteGateMiddleware``.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import ORJSONResponse

from deals_to_meals.core.config import Settings, get_settings
from deals_to_meals.core.exceptions import UnauthenticatedException
from deals_to_meals.core.middleware import cookie_matches
from deals_to_meals.schemas.common import SuccessResponse
from deals_to_meals.schemas.site import SiteLoginRequest


router = APIRouter(tags=["site"])


@router.post(
    "/site-login",
    response_model=SuccessResponse,
    summary="Unlock the site",
    responses={401: {"description": "Incorrect password"}},
)
async def site_login(
    body: SiteLoginRequest,
    settings: Annotated[Settings, Depends(get_settings)],
) -> ORJSONResponse:
    """Check the shared site password and set the access cookie."""
    if not cookie_matches(body.password, settings.SITE_PASSWORD):
        msg = "Incorrect password"
        raise UnauthenticatedException(msg)

    response = ORJSONResponse(SuccessResponse().model_dump())
    response.set_cookie(
        settings.site.cookie_name,
        settings.SITE_PASSWORD,
        max_age=settings.site.cookie_max_age,
        path="/",
        httponly=True,
    )
    return response
