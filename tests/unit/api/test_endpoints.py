"""Unit tests for the HTTP endpoints.

The app is built without running its lifespan; services on ``app.state``
are replaced with mocks and callers are identified by the X-User-ID header.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from deals_to_meals.auth.providers import HeaderAuthProvider, set_auth_provider
from deals_to_meals.clients.kroger import KrogerResponseError
from deals_to_meals.clients.llm import LLMProxyError, ProxiedResponse
from deals_to_meals.clients.spoonacular import SpoonacularError
from deals_to_meals.core.config import Settings
from deals_to_meals.credentials import (
    Credential,
    KrogerConnection,
    ScopeKind,
    UpstreamAuthError,
)
from deals_to_meals.factory import create_app
from deals_to_meals.schemas.coupons import Coupon
from deals_to_meals.schemas.deals import DealItem, Store
from deals_to_meals.schemas.recipes import EnrichedRecipe
from deals_to_meals.services.account import ANONYMOUS_STATE, KrogerNotConnectedError


pytestmark = pytest.mark.unit

USER = {"X-User-ID": "user-1"}


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    set_auth_provider(HeaderAuthProvider())
    app = create_app(settings)

    deals_service = MagicMock()
    deals_service.find_stores = AsyncMock(return_value=[])
    deals_service.find_deals = AsyncMock(return_value=[])
    app.state.deals_service = deals_service

    account_service = MagicMock()
    account_service.get_coupons = AsyncMock(return_value=([], []))
    account_service.add_to_cart = AsyncMock()
    account_service.get_connection = AsyncMock(return_value=None)
    account_service.connect = AsyncMock()
    account_service.disconnect = AsyncMock()
    account_service.authorize_url = MagicMock(return_value="https://kroger.test/authorize?x=1")
    account_service.callback_redirect = MagicMock(
        side_effect=lambda *, success: f"https://app.test/profile.html?kroger={'success' if success else 'error'}"
    )
    app.state.account_service = account_service

    recipe_service = MagicMock()
    recipe_service.search = AsyncMock(return_value=[])
    app.state.recipe_service = recipe_service

    llm_client = MagicMock()
    llm_client.forward = AsyncMock(
        return_value=ProxiedResponse(status_code=200, content=b'{"content":[]}')
    )
    app.state.llm_client = llm_client

    app.state.profile_repository = None
    app.state.saved_recipe_repository = None
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app, follow_redirects=False)


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["environment"] == "test"

    def test_ready_without_backing_services(self, client: TestClient) -> None:
        response = client.get("/api/ready")

        assert response.json()["status"] == "ready"
        assert response.json()["dependencies"] == {
            "database": "not_configured",
            "redis": "not_configured",
        }


class TestStoresAndDeals:
    """Tests for /api/stores and /api/deals."""

    def test_stores_requires_zip(self, client: TestClient) -> None:
        response = client.get("/api/stores")

        assert response.status_code == 400
        assert response.json()["message"] == "zip is required"

    def test_stores(self, client: TestClient, app: FastAPI) -> None:
        app.state.deals_service.find_stores.return_value = [
            Store(id="1", name="KROGER", address="1 Main St, Cincinnati, OH", hours="")
        ]

        response = client.get("/api/stores", params={"zip": "45202"})

        assert response.status_code == 200
        assert response.json() == {
            "stores": [
                {"id": "1", "name": "KROGER", "address": "1 Main St, Cincinnati, OH", "hours": ""}
            ]
        }
        app.state.deals_service.find_stores.assert_awaited_once_with("45202")

    def test_stores_token_failure_is_500(self, client: TestClient, app: FastAPI) -> None:
        app.state.deals_service.find_stores.side_effect = UpstreamAuthError(
            '{"error":"invalid_client"}', status_code=401
        )

        response = client.get("/api/stores", params={"zip": "45202"})

        assert response.status_code == 500
        assert "invalid_client" in response.json()["message"]

    def test_stores_kroger_failure_is_500(self, client: TestClient, app: FastAPI) -> None:
        app.state.deals_service.find_stores.side_effect = KrogerResponseError(502, "bad gateway")

        response = client.get("/api/stores", params={"zip": "45202"})

        assert response.status_code == 500
        assert response.json()["message"] == "bad gateway"

    def test_deals_requires_location(self, client: TestClient) -> None:
        response = client.get("/api/deals")

        assert response.status_code == 400
        assert response.json()["message"] == "locationId is required"

    def test_deals(self, client: TestClient, app: FastAPI) -> None:
        app.state.deals_service.find_deals.return_value = [
            DealItem(
                id="p1",
                name="Milk",
                category="dairy",
                regular_price="4.00",
                sale_price="3.00",
                savings="1.00",
                pct_off=25,
            )
        ]

        response = client.get("/api/deals", params={"locationId": "store-1"})

        deal = response.json()["deals"][0]
        assert deal["salePrice"] == "3.00"
        assert deal["pctOff"] == 25
        app.state.deals_service.find_deals.assert_awaited_once_with("store-1")

    def test_missing_service_is_503(self, client: TestClient, app: FastAPI) -> None:
        app.state.deals_service = None

        response = client.get("/api/deals", params={"locationId": "store-1"})

        assert response.status_code == 503


class TestRecipes:
    """Tests for recipe search and generation."""

    def test_search_requires_ingredients(self, client: TestClient) -> None:
        response = client.post("/api/recipes/search", json={"ingredients": []})

        assert response.status_code == 400
        assert response.json()["message"] == "ingredients is required"

    def test_search(self, client: TestClient, app: FastAPI) -> None:
        app.state.recipe_service.search.return_value = [
            EnrichedRecipe(id=1, title="Chicken Rice", time="30 min", total_savings=3.0)
        ]

        response = client.post(
            "/api/recipes/search",
            json={"ingredients": [{"name": "Chicken Breast"}], "mealType": "Dinner"},
        )

        recipe = response.json()["recipes"][0]
        assert recipe["totalSavings"] == 3.0
        request = app.state.recipe_service.search.await_args.args[0]
        assert request.meal_type == "Dinner"

    def test_search_upstream_error(self, client: TestClient, app: FastAPI) -> None:
        app.state.recipe_service.search.side_effect = SpoonacularError("quota", 402)

        response = client.post("/api/recipes/search", json={"ingredients": [{"name": "x"}]})

        assert response.status_code == 500
        assert response.json()["message"] == "quota"

    def test_generate_requires_user(self, client: TestClient) -> None:
        assert client.post("/api/recipes/generate", json={}).status_code == 401

    def test_generate_relays_upstream(self, client: TestClient, app: FastAPI) -> None:
        app.state.llm_client.forward.return_value = ProxiedResponse(
            status_code=429, content=b'{"error":{"type":"rate_limit_error"}}'
        )

        response = client.post(
            "/api/recipes/generate",
            content=b'{"model":"m","messages":[]}',
            headers={**USER, "Content-Type": "application/json"},
        )

        assert response.status_code == 429
        assert response.json() == {"error": {"type": "rate_limit_error"}}
        app.state.llm_client.forward.assert_awaited_once_with(b'{"model":"m","messages":[]}')

    def test_generate_proxy_error(self, client: TestClient, app: FastAPI) -> None:
        app.state.llm_client.forward.side_effect = LLMProxyError("LLM API key not configured")

        response = client.post("/api/recipes/generate", json={}, headers=USER)

        assert response.status_code == 500


class TestSavedRecipes:
    """Tests for /api/recipes/saved."""

    @pytest.fixture
    def repository(self, app: FastAPI) -> MagicMock:
        repo = MagicMock()
        repo.list_for_user = AsyncMock(
            return_value=[{"id": "r1", "user_id": "user-1", "title": "Soup"}]
        )
        repo.create = AsyncMock(
            return_value={"id": "r2", "user_id": "user-1", "title": "Stew", "servings": 2}
        )
        repo.delete = AsyncMock(return_value=True)
        app.state.saved_recipe_repository = repo
        return repo

    def test_unavailable_without_database(self, client: TestClient) -> None:
        assert client.get("/api/recipes/saved", headers=USER).status_code == 503

    def test_list(self, client: TestClient, repository: MagicMock) -> None:
        response = client.get("/api/recipes/saved", headers=USER)

        assert response.json()["recipes"][0]["title"] == "Soup"
        repository.list_for_user.assert_awaited_once_with("user-1")

    def test_create(self, client: TestClient, repository: MagicMock) -> None:
        response = client.post(
            "/api/recipes/saved",
            json={"title": "Stew", "servings": 2, "store_name": "Kroger"},
            headers=USER,
        )

        assert response.status_code == 200
        assert response.json()["id"] == "r2"
        _user_id, body = repository.create.await_args.args
        assert body.store_name == "Kroger"

    def test_create_requires_title(self, client: TestClient, repository: MagicMock) -> None:
        response = client.post("/api/recipes/saved", json={"title": ""}, headers=USER)

        assert response.status_code == 422

    def test_delete(self, client: TestClient, repository: MagicMock) -> None:
        response = client.delete("/api/recipes/saved/r1", headers=USER)

        assert response.json() == {"success": True}
        repository.delete.assert_awaited_once_with("user-1", "r1")

    def test_delete_missing(self, client: TestClient, repository: MagicMock) -> None:
        repository.delete.return_value = False

        assert client.delete("/api/recipes/saved/nope", headers=USER).status_code == 404


class TestKrogerAccount:
    """Tests for /api/coupons and /api/cart."""

    def test_coupons_require_user(self, client: TestClient) -> None:
        assert client.get("/api/coupons").status_code == 401

    def test_coupons_not_connected(self, client: TestClient, app: FastAPI) -> None:
        app.state.account_service.get_coupons.side_effect = KrogerNotConnectedError("user-1")

        response = client.get("/api/coupons", headers=USER)

        assert response.status_code == 401
        assert response.json()["message"] == "Kroger not connected"

    def test_coupons(self, client: TestClient, app: FastAPI) -> None:
        app.state.account_service.get_coupons.return_value = (
            [Coupon(id="c1", description="Save", type="digital_coupon")],
            [Coupon(id="b1", description="Boost", type="boost_deal")],
        )

        response = client.get("/api/coupons", headers=USER)

        body = response.json()
        assert body["coupons"][0]["id"] == "c1"
        assert body["boostDeals"][0]["type"] == "boost_deal"

    def test_cart(self, client: TestClient, app: FastAPI) -> None:
        response = client.post(
            "/api/cart",
            json={"items": [{"upc": "001"}, {"upc": "002", "quantity": 2}]},
            headers=USER,
        )

        assert response.json() == {"success": True}
        _user_id, items = app.state.account_service.add_to_cart.await_args.args
        assert [(i.upc, i.quantity) for i in items] == [("001", None), ("002", 2)]

    def test_cart_kroger_error(self, client: TestClient, app: FastAPI) -> None:
        app.state.account_service.add_to_cart.side_effect = KrogerResponseError(400, "bad upc")

        response = client.post("/api/cart", json={"items": [{"upc": "1"}]}, headers=USER)

        assert response.status_code == 500
        assert response.json()["message"] == "bad upc"


class TestProfile:
    """Tests for /api/profile."""

    @pytest.fixture
    def profiles(self, app: FastAPI) -> MagicMock:
        repo = MagicMock()
        repo.get = AsyncMock(return_value={"id": "user-1", "full_name": "Ada"})
        repo.update = AsyncMock(return_value={"id": "user-1", "household_size": 3})
        app.state.profile_repository = repo
        return repo

    def test_get_profile_not_connected(self, client: TestClient, profiles: MagicMock) -> None:
        response = client.get("/api/profile", headers=USER)

        assert response.json() == {
            "id": "user-1",
            "full_name": "Ada",
            "kroger_connected": False,
            "kroger_profile": None,
        }

    def test_get_profile_connected(
        self, client: TestClient, app: FastAPI, profiles: MagicMock
    ) -> None:
        app.state.account_service.get_connection.return_value = KrogerConnection(
            credential=Credential(
                access_token="a", expires_at=1, scope_kind=ScopeKind.USER
            ),
            profile={"id": "kroger-1"},
        )

        body = client.get("/api/profile", headers=USER).json()

        assert body["kroger_connected"] is True
        assert body["kroger_profile"] == {"id": "kroger-1"}

    def test_get_profile_missing(self, client: TestClient, profiles: MagicMock) -> None:
        profiles.get.return_value = None

        assert client.get("/api/profile", headers=USER).status_code == 404

    def test_update_profile(self, client: TestClient, profiles: MagicMock) -> None:
        response = client.patch(
            "/api/profile",
            json={"household_size": 3, "kroger_connected": True},
            headers=USER,
        )

        assert response.status_code == 200
        profiles.update.assert_awaited_once_with("user-1", {"household_size": 3})


class TestKrogerOAuth:
    """Tests for the /auth/kroger redirect flow."""

    def test_start_redirects(self, client: TestClient, app: FastAPI) -> None:
        response = client.get("/auth/kroger", params={"userId": "user-1"})

        assert response.status_code == 302
        assert response.headers["location"] == "https://kroger.test/authorize?x=1"
        app.state.account_service.authorize_url.assert_called_once_with("user-1")

    def test_callback_success(self, client: TestClient, app: FastAPI) -> None:
        response = client.get(
            "/auth/kroger/callback", params={"code": "abc", "state": "user-1"}
        )

        assert response.headers["location"].endswith("kroger=success")
        app.state.account_service.connect.assert_awaited_once_with("abc", "user-1")

    def test_callback_links_whatever_state_names(
        self, client: TestClient, app: FastAPI
    ) -> None:
        """State is taken as the user id without any signature check."""
        client.get("/auth/kroger/callback", params={"code": "abc", "state": "someone-else"})
        client.get("/auth/kroger/callback", params={"code": "def"})

        calls = app.state.account_service.connect.await_args_list
        assert [c.args for c in calls] == [("abc", "someone-else"), ("def", ANONYMOUS_STATE)]

    def test_callback_denied(self, client: TestClient, app: FastAPI) -> None:
        response = client.get("/auth/kroger/callback", params={"error": "access_denied"})

        assert response.headers["location"].endswith("kroger=error")
        app.state.account_service.connect.assert_not_awaited()

    def test_callback_exchange_failure(self, client: TestClient, app: FastAPI) -> None:
        app.state.account_service.connect.side_effect = UpstreamAuthError("bad code", 400)

        response = client.get("/auth/kroger/callback", params={"code": "abc"})

        assert response.headers["location"].endswith("kroger=error")

    def test_disconnect(self, client: TestClient, app: FastAPI) -> None:
        response = client.get("/auth/kroger/disconnect", headers=USER)

        assert response.json() == {"success": True}
        app.state.account_service.disconnect.assert_awaited_once_with("user-1")

    def test_disconnect_anonymous(self, client: TestClient, app: FastAPI) -> None:
        response = client.get("/auth/kroger/disconnect")

        assert response.json() == {"success": True}
        app.state.account_service.disconnect.assert_awaited_once_with(None)


class TestSiteLogin:
    """Tests for /api/site-login."""

    def test_wrong_password(
        self, client: TestClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SITE_PASSWORD", "open sesame")

        response = client.post("/api/site-login", json={"password": "guess"})

        assert response.status_code == 401
        assert response.json()["message"] == "Incorrect password"

    def test_sets_cookie(self, client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SITE_PASSWORD", "open sesame")

        response = client.post("/api/site-login", json={"password": "open sesame"})

        assert response.json() == {"success": True}
        cookie = response.headers["set-cookie"]
        assert "site_auth=" in cookie
        assert "HttpOnly" in cookie
        assert "Max-Age=86400" in cookie

    def test_no_password_configured(self, client: TestClient) -> None:
        assert client.post("/api/site-login", json={"password": ""}).status_code == 401
