"""Profile endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from deals_to_meals.api.dependencies import (
    get_account_service,
    get_profile_repository,
)
from deals_to_meals.auth.dependencies import CurrentUser, get_current_user
from deals_to_meals.core.exceptions import (
    NotFoundException,
    UpstreamAuthException,
)
from deals_to_meals.credentials import CredentialError
from deals_to_meals.database import ProfileRepository  # noqa: TC001
from deals_to_meals.schemas.profile import ProfileResponse, ProfileUpdate
from deals_to_meals.services.account import KrogerAccountService  # noqa: TC001


router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get(
    "",
    response_model=ProfileResponse,
    summary="Get the caller's profile",
    responses={404: {"description": "Profile not found"}},
)
async def get_profile(
    user: Annotated[CurrentUser, Depends(get_current_user)],
    profiles: Annotated[ProfileRepository, Depends(get_profile_repository)],
    account_service: Annotated[KrogerAccountService, Depends(get_account_service)],
) -> ProfileResponse:
    """Profile row plus whether a Kroger account is linked."""
    row = await profiles.get(user.id)
    if row is None:
        raise NotFoundException("Profile", user.id)

    try:
        connection = await account_service.get_connection(user.id)
    except CredentialError as e:
        raise UpstreamAuthException(str(e)) from e

    return ProfileResponse.model_validate(
        {
            **row,
            "kroger_connected": connection is not None,
            "kroger_profile": connection.profile if connection else None,
        }
    )


@router.patch(
    "",
    response_model=ProfileResponse,
    summary="Update the caller's profile",
    responses={404: {"description": "Profile not found"}},
)
async def update_profile(
    body: ProfileUpdate,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    profiles: Annotated[ProfileRepository, Depends(get_profile_repository)],
) -> ProfileResponse:
    """Update the editable profile fields; other fields in the body are ignored."""
    row = await profiles.update(user.id, body.changes())
    if row is None:
        raise NotFoundException("Profile", user.id)
    return ProfileResponse.model_validate(row)
