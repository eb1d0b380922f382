"""Kroger partner API client.

Thin wrapper over the locations, products, coupons, cart and identity
endpoints. Every call takes the access token to use, so the same client
serves both application-level catalog calls and user-level calls.
"""

from __future__ import annotations

from typing import Any, Final

import httpx
import orjson

from deals_to_meals.clients.kroger.exceptions import (
    KrogerResponseError,
    KrogerUnavailableError,
)
from deals_to_meals.observability.logging import get_logger


logger = get_logger(__name__)


BOOST_OFFER_TYPE: Final[str] = "BoostWeeklyDigitalDeal"


class KrogerClient:
    """Client for the Kroger public API (v1)."""

    def __init__(
        self,
        api_base: str = "https://api.kroger.com/v1",
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_base: Base URL of the Kroger API.
            http_client: Shared HTTP client for API requests.
        """
        self._api_base = api_base.rstrip("/")
        self._http = http_client
        self._owns_http_client = http_client is None

    async def initialize(self) -> None:
        """Initialize the HTTP client if not provided."""
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=10.0)
        logger.info("KrogerClient initialized", api_base=self._api_base)

    async def shutdown(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_http_client and self._http is not None:
            await self._http.aclose()
            self._http = None
        logger.debug("KrogerClient shutdown")

    # =========================================================================
    # Catalog
    # =========================================================================

    async def search_locations(
        self,
        access_token: str,
        zip_code: str,
        *,
        radius_miles: int = 15,
        limit: int = 8,
    ) -> list[dict[str, Any]]:
        """Find stores near a ZIP code."""
        data = await self._request(
            "GET",
            "/locations",
            access_token,
            params={
                "filter.zipCode.near": zip_code,
                "filter.radiusInMiles": str(radius_miles),
                "filter.limit": str(limit),
            },
        )
        return _data_list(data, "/locations")

    async def search_products(
        self,
        access_token: str,
        location_id: str,
        term: str,
        *,
        limit: int = 20,
    ) -> list[dict[str, Any]]:
        """Search products at a store for one search term."""
        data = await self._request(
            "GET",
            "/products",
            access_token,
            params={
                "filter.locationId": location_id,
                "filter.term": term,
                "filter.limit": str(limit),
            },
        )
        return _data_list(data, "/products")

    # =========================================================================
    # User-level
    # =========================================================================

    async def get_coupons(
        self,
        access_token: str,
        offer_type: str | None = None,
    ) -> list[dict[str, Any]]:
        """List loyalty coupons for the token's user, optionally by offer type."""
        params = {"filter.offerType": offer_type} if offer_type else None
        data = await self._request(
            "GET", "/loyalty/profiles/coupons", access_token, params=params
        )
        return _data_list(data, "/loyalty/profiles/coupons")

    async def add_to_cart(
        self,
        access_token: str,
        items: list[dict[str, Any]],
    ) -> None:
        """Add items to the user's Kroger cart.

        Args:
            access_token: User access token with cart scope.
            items: Entries of ``{"upc", "quantity", "modality"}``.
        """
        await self._request(
            "PUT", "/cart/add", access_token, json_body={"items": items}
        )
        logger.info("Added items to Kroger cart", item_count=len(items))

    async def get_identity_profile(self, access_token: str) -> dict[str, Any]:
        """Fetch the linked user's Kroger identity profile."""
        data = await self._request("GET", "/identity/profile", access_token)
        return _data_dict(data, "/identity/profile")

    # =========================================================================
    # Transport
    # =========================================================================

    async def _request(
        self,
        method: str,
        path: str,
        access_token: str,
        *,
        params: dict[str, str] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send an authenticated request and decode the JSON body.

        Raises:
            KrogerUnavailableError: The API could not be reached.
            KrogerResponseError: The API returned a non-success status.
        """
        if self._http is None:
            await self.initialize()
        assert self._http is not None

        headers = {
            "Authorization": f"Bearer {access_token}",
            "Accept": "application/json",
        }
        content = None
        if json_body is not None:
            headers["Content-Type"] = "application/json"
            content = orjson.dumps(json_body)

        try:
            response = await self._http.request(
                method,
                f"{self._api_base}{path}",
                params=params,
                content=content,
                headers=headers,
            )
        except httpx.RequestError as e:
            logger.warning("Failed to connect to Kroger API", path=path, error=str(e))
            msg = f"Failed to connect to Kroger API: {e}"
            raise KrogerUnavailableError(msg) from e

        if not response.is_success:
            logger.warning(
                "Kroger API returned error",
                path=path,
                status_code=response.status_code,
            )
            raise KrogerResponseError(
                response.status_code, response.text or f"HTTP {response.status_code}"
            )

        if not response.content:
            return {}
        try:
            data = orjson.loads(response.content)
        except orjson.JSONDecodeError as e:
            msg = f"Kroger API returned invalid JSON for {path}"
            raise KrogerResponseError(response.status_code, msg) from e
        return data if isinstance(data, dict) else {}


def _data_list(body: dict[str, Any], path: str) -> list[dict[str, Any]]:
    """Extract the ``data`` array of a list response.

    Raises:
        KrogerResponseError: ``data`` is present but not an array of objects.
    """
    data = body.get("data")
    if data is None:
        return []
    if not isinstance(data, list) or not all(isinstance(d, dict) for d in data):
        msg = f"Kroger API returned an unexpected payload for {path}"
        raise KrogerResponseError(502, msg)
    return data


def _data_dict(body: dict[str, Any], path: str) -> dict[str, Any]:
    """Extract the ``data`` object of a single-resource response."""
    data = body.get("data")
    if data is None:
        return {}
    if not isinstance(data, dict):
        msg = f"Kroger API returned an unexpected payload for {path}"
        raise KrogerResponseError(502, msg)
    return data
