"""Unit tests for KrogerClient."""

from __future__ import annotations

import httpx
import orjson
import pytest
import respx

from deals_to_meals.clients.kroger import (
    BOOST_OFFER_TYPE,
    KrogerClient,
    KrogerResponseError,
    KrogerUnavailableError,
)


pytestmark = pytest.mark.unit

API = "https://kroger.test/v1"


@pytest.fixture
async def client() -> KrogerClient:
    async with httpx.AsyncClient() as http:
        yield KrogerClient(api_base=API, http_client=http)


class TestCatalog:
    """Tests for location and product searches."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_search_locations_params(self, client: KrogerClient) -> None:
        """Should filter by ZIP, radius and limit with a bearer token."""
        route = respx.get(f"{API}/locations").mock(
            return_value=httpx.Response(200, json={"data": [{"locationId": "1"}]})
        )

        result = await client.search_locations("tok", "45202", radius_miles=10, limit=5)

        request = route.calls.last.request
        assert request.headers["Authorization"] == "Bearer tok"
        assert request.url.params["filter.zipCode.near"] == "45202"
        assert request.url.params["filter.radiusInMiles"] == "10"
        assert request.url.params["filter.limit"] == "5"
        assert result == [{"locationId": "1"}]

    @pytest.mark.asyncio
    @respx.mock
    async def test_search_products_params(self, client: KrogerClient) -> None:
        """Should search one term at one store."""
        route = respx.get(f"{API}/products").mock(
            return_value=httpx.Response(200, json={"data": []})
        )

        result = await client.search_products("tok", "store-1", "milk", limit=20)

        params = route.calls.last.request.url.params
        assert params["filter.locationId"] == "store-1"
        assert params["filter.term"] == "milk"
        assert params["filter.limit"] == "20"
        assert result == []

    @pytest.mark.asyncio
    @respx.mock
    async def test_missing_data_key_returns_empty(self, client: KrogerClient) -> None:
        respx.get(f"{API}/products").mock(return_value=httpx.Response(200, json={}))

        assert await client.search_products("tok", "store-1", "milk") == []


class TestUserCalls:
    """Tests for coupons, cart and identity."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_coupons_with_offer_type(self, client: KrogerClient) -> None:
        route = respx.get(f"{API}/loyalty/profiles/coupons").mock(
            return_value=httpx.Response(200, json={"data": [{"id": "c1"}]})
        )

        await client.get_coupons("tok", offer_type=BOOST_OFFER_TYPE)

        assert route.calls.last.request.url.params["filter.offerType"] == BOOST_OFFER_TYPE

    @pytest.mark.asyncio
    @respx.mock
    async def test_add_to_cart_puts_items(self, client: KrogerClient) -> None:
        """Should PUT the items and accept an empty response body."""
        route = respx.put(f"{API}/cart/add").mock(return_value=httpx.Response(204))
        items = [{"upc": "001", "quantity": 1, "modality": "PICKUP"}]

        await client.add_to_cart("user-tok", items)

        assert orjson.loads(route.calls.last.request.content) == {"items": items}

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_identity_profile(self, client: KrogerClient) -> None:
        respx.get(f"{API}/identity/profile").mock(
            return_value=httpx.Response(200, json={"data": {"id": "k-1"}})
        )

        assert await client.get_identity_profile("tok") == {"id": "k-1"}


class TestErrors:
    """Tests for error mapping."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_non_success_raises_response_error(self, client: KrogerClient) -> None:
        respx.get(f"{API}/locations").mock(
            return_value=httpx.Response(401, text="Unauthorized")
        )

        with pytest.raises(KrogerResponseError, match="Unauthorized") as exc_info:
            await client.search_locations("tok", "45202")

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    @respx.mock
    async def test_transport_error_raises_unavailable(self, client: KrogerClient) -> None:
        respx.get(f"{API}/locations").mock(side_effect=httpx.ConnectTimeout("slow"))

        with pytest.raises(KrogerUnavailableError):
            await client.search_locations("tok", "45202")

    @pytest.mark.asyncio
    @respx.mock
    @pytest.mark.parametrize("data", [5, "milk", {"productId": "1"}, [1, 2]])
    async def test_non_array_data_raises_response_error(
        self, client: KrogerClient, data: object
    ) -> None:
        respx.get(f"{API}/products").mock(
            return_value=httpx.Response(200, json={"data": data})
        )

        with pytest.raises(KrogerResponseError, match="unexpected payload"):
            await client.search_products("tok", "store-1", "milk")

    @pytest.mark.asyncio
    @respx.mock
    async def test_non_object_profile_raises_response_error(
        self, client: KrogerClient
    ) -> None:
        respx.get(f"{API}/identity/profile").mock(
            return_value=httpx.Response(200, json={"data": ["k-1"]})
        )

        with pytest.raises(KrogerResponseError, match="unexpected payload"):
            await client.get_identity_profile("tok")
