"""Operations on a user's linked Kroger account.

Covers linking (OAuth authorization code), unlinking, loyalty coupons and
cart additions. Every user-level call first makes sure the stored credential
is still valid, refreshing it through the token manager if needed.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

from pydantic import ValidationError

from deals_to_meals.clients.kroger import BOOST_OFFER_TYPE, KrogerError
from deals_to_meals.credentials import KrogerConnection
from deals_to_meals.observability.logging import get_logger
from deals_to_meals.schemas.coupons import Coupon, CouponType
from deals_to_meals.schemas.kroger import KrogerCoupon
from deals_to_meals.services.account.exceptions import KrogerNotConnectedError


if TYPE_CHECKING:
    from collections.abc import Sequence

    from deals_to_meals.clients.kroger import KrogerClient
    from deals_to_meals.core.config import Settings
    from deals_to_meals.credentials import TokenManager
    from deals_to_meals.database import ProfileRepository
    from deals_to_meals.schemas.coupons import CartItem

logger = get_logger(__name__)

ANONYMOUS_STATE = "anonymous"


def format_coupons(raw: Sequence[dict[str, Any]], coupon_type: CouponType) -> list[Coupon]:
    """Shape loyalty offers for the browser."""
    coupons: list[Coupon] = []
    for payload in raw:
        try:
            offer = KrogerCoupon.model_validate(payload)
        except ValidationError:
            logger.debug("Skipping unreadable coupon record")
            continue
        coupons.append(
            Coupon(
                id=offer.offer_id,
                description=offer.description,
                brand=offer.brand_name or "",
                savings=offer.customer_savings or 0,
                expiry_date=offer.expiration_date or "",
                clipped=offer.offer_state == "Clipped",
                category=offer.categories[0] if offer.categories else "",
                type=coupon_type,
            )
        )
    return coupons


class KrogerAccountService:
    """Links, unlinks and acts on behalf of a user's Kroger account."""

    def __init__(
        self,
        kroger: KrogerClient,
        token_manager: TokenManager,
        settings: Settings,
        profiles: ProfileRepository | None = None,
    ) -> None:
        self._kroger = kroger
        self._tokens = token_manager
        self._settings = settings
        self._profiles = profiles

    # =========================================================================
    # Linking
    # =========================================================================

    def authorize_url(self, user_id: str | None) -> str:
        """Kroger consent page URL; the user id travels as the OAuth state."""
        query = urlencode(
            {
                "scope": self._settings.kroger.user_scope,
                "response_type": "code",
                "client_id": self._settings.KROGER_CLIENT_ID,
                "redirect_uri": self._settings.kroger.redirect_uri,
                "state": user_id or ANONYMOUS_STATE,
            }
        )
        return f"{self._settings.kroger.authorize_url}?{query}"

    def callback_redirect(self, *, success: bool) -> str:
        """Where the browser lands after the OAuth callback."""
        outcome = "success" if success else "error"
        return f"{self._settings.kroger.app_url}/profile.html?kroger={outcome}"

    async def connect(self, code: str, user_id: str) -> KrogerConnection:
        """Complete the OAuth flow and remember the linked account.

        The Kroger identity profile is fetched on a best-effort basis.

        Raises:
            UpstreamAuthError: The authorization code was rejected.
        """
        credential = await self._tokens.exchange_code(code)

        profile: dict[str, Any] = {}
        try:
            profile = await self._kroger.get_identity_profile(credential.access_token)
        except KrogerError as e:
            logger.warning("Could not fetch Kroger identity profile", error=str(e))

        connection = KrogerConnection(credential=credential, profile=profile)
        await self._tokens.connections.save(user_id, connection)

        if user_id != ANONYMOUS_STATE:
            await self._set_profile_flag(user_id, connected=True)

        logger.info("Kroger account linked", user_id=user_id)
        return connection

    async def disconnect(self, user_id: str | None) -> None:
        """Forget the linked account. Unknown or anonymous callers are a no-op."""
        if not user_id:
            return
        await self._tokens.connections.delete(user_id)
        await self._set_profile_flag(user_id, connected=False)
        logger.info("Kroger account unlinked", user_id=user_id)

    async def get_connection(self, user_id: str) -> KrogerConnection | None:
        """The user's connection with a valid credential, if linked."""
        return await self._tokens.get_user_connection(user_id)

    async def _require_connection(self, user_id: str) -> KrogerConnection:
        connection = await self.get_connection(user_id)
        if connection is None:
            raise KrogerNotConnectedError(user_id)
        return connection

    async def _set_profile_flag(self, user_id: str, *, connected: bool) -> None:
        if self._profiles is None:
            logger.debug("Profile store unavailable, skipping kroger_connected update")
            return
        try:
            await self._profiles.set_kroger_connected(user_id, connected)
        except Exception as e:
            logger.warning(
                "Failed to update kroger_connected flag",
                user_id=user_id,
                error=str(e),
            )

    # =========================================================================
    # Account operations
    # =========================================================================

    async def get_coupons(self, user_id: str) -> tuple[list[Coupon], list[Coupon]]:
        """Digital coupons and weekly Boost deals, fetched concurrently.

        A Boost failure yields an empty list; a coupon failure is raised.

        Raises:
            KrogerNotConnectedError: No linked account.
            KrogerError: The coupon listing failed.
        """
        connection = await self._require_connection(user_id)
        token = connection.credential.access_token

        raw_coupons, raw_boost = await asyncio.gather(
            self._kroger.get_coupons(token),
            self._get_boost_deals(token),
        )
        return (
            format_coupons(raw_coupons, "digital_coupon"),
            format_coupons(raw_boost, "boost_deal"),
        )

    async def _get_boost_deals(self, token: str) -> list[dict[str, Any]]:
        try:
            return await self._kroger.get_coupons(token, offer_type=BOOST_OFFER_TYPE)
        except KrogerError as e:
            logger.warning("Boost deals unavailable", error=str(e))
            return []

    async def add_to_cart(self, user_id: str, items: Sequence[CartItem]) -> None:
        """Add items to the user's Kroger cart for pickup.

        Raises:
            KrogerNotConnectedError: No linked account.
            KrogerError: The cart update failed.
        """
        connection = await self._require_connection(user_id)
        await self._kroger.add_to_cart(
            connection.credential.access_token,
            [
                {
                    "upc": item.upc,
                    "quantity": item.quantity or 1,
                    "modality": self._settings.kroger.cart_modality,
                }
                for item in items
            ],
        )
