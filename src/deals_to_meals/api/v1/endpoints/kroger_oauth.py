"""Kroger account linking (OAuth authorization-code flow).

These routes are browser redirects, mounted outside the ``/api`` prefix so
they match the redirect URI registered with Kroger.

The OAuth ``state`` is the plain user id and is not signed, so the callback
trusts whoever started the flow to name the account being linked.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import RedirectResponse

from deals_to_meals.api.dependencies import get_account_service
from deals_to_meals.auth.dependencies import CurrentUser, get_current_user_optional
from deals_to_meals.clients.kroger import KrogerError
from deals_to_meals.credentials import CredentialError
from deals_to_meals.observability.logging import get_logger
from deals_to_meals.schemas.common import SuccessResponse
from deals_to_meals.services.account import ANONYMOUS_STATE
from deals_to_meals.services.account import KrogerAccountService  # noqa: TC001


logger = get_logger(__name__)

router = APIRouter(prefix="/auth/kroger", tags=["Kroger OAuth"])


@router.get("", summary="Start Kroger account linking")
async def start_kroger_auth(
    account_service: Annotated[KrogerAccountService, Depends(get_account_service)],
    user_id: Annotated[str | None, Query(alias="userId")] = None,
) -> RedirectResponse:
    """Redirect to the Kroger consent page."""
    return RedirectResponse(account_service.authorize_url(user_id), status_code=302)


@router.get("/callback", summary="Finish Kroger account linking")
async def kroger_callback(
    account_service: Annotated[KrogerAccountService, Depends(get_account_service)],
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
) -> RedirectResponse:
    """Exchange the authorization code and store the connection."""
    if error or not code:
        logger.warning("Kroger authorization declined", error=error)
        return RedirectResponse(
            account_service.callback_redirect(success=False), status_code=302
        )

    try:
        await account_service.connect(code, state or ANONYMOUS_STATE)
    except (CredentialError, KrogerError) as e:
        logger.warning("Kroger account linking failed", error=str(e))
        return RedirectResponse(
            account_service.callback_redirect(success=False), status_code=302
        )

    return RedirectResponse(
        account_service.callback_redirect(success=True), status_code=302
    )


@router.get(
    "/disconnect",
    response_model=SuccessResponse,
    summary="Unlink the Kroger account",
)
async def disconnect_kroger(
    user: Annotated[CurrentUser | None, Depends(get_current_user_optional)],
    account_service: Annotated[KrogerAccountService, Depends(get_account_service)],
) -> SuccessResponse:
    """Forget the caller's Kroger connection."""
    await account_service.disconnect(user.id if user else None)
    return SuccessResponse()
