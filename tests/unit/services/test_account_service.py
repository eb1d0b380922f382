"""Unit tests for KrogerAccountService."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock
from urllib.parse import parse_qs, urlparse

import pytest

from deals_to_meals.clients.kroger import BOOST_OFFER_TYPE, KrogerResponseError
from deals_to_meals.core.config import Settings
from deals_to_meals.credentials import (
    ConnectionStore,
    Credential,
    InMemoryStore,
    KrogerConnection,
    ScopeKind,
)
from deals_to_meals.schemas.coupons import CartItem
from deals_to_meals.services.account import (
    ANONYMOUS_STATE,
    KrogerAccountService,
    KrogerNotConnectedError,
    format_coupons,
)


pytestmark = pytest.mark.unit


def _credential() -> Credential:
    return Credential(
        access_token="user-token",
        refresh_token="refresh",
        expires_at=9_999_999_999_999,
        scope_kind=ScopeKind.USER,
    )


@pytest.fixture
def connections() -> ConnectionStore:
    return ConnectionStore(InMemoryStore())


@pytest.fixture
def token_manager(connections: ConnectionStore) -> MagicMock:
    manager = MagicMock()
    manager.connections = connections
    manager.exchange_code = AsyncMock(return_value=_credential())
    manager.get_user_connection = AsyncMock(side_effect=connections.get)
    return manager


@pytest.fixture
def kroger() -> MagicMock:
    client = MagicMock()
    client.get_identity_profile = AsyncMock(return_value={"id": "kroger-1"})
    client.get_coupons = AsyncMock(return_value=[])
    client.add_to_cart = AsyncMock()
    return client


@pytest.fixture
def profiles() -> MagicMock:
    repo = MagicMock()
    repo.set_kroger_connected = AsyncMock()
    return repo


@pytest.fixture
def service(
    kroger: MagicMock,
    token_manager: MagicMock,
    settings: Settings,
    profiles: MagicMock,
) -> KrogerAccountService:
    return KrogerAccountService(kroger, token_manager, settings, profiles=profiles)


class TestLinking:
    """Tests for the OAuth linking flow."""

    def test_authorize_url(self, service: KrogerAccountService) -> None:
        url = urlparse(service.authorize_url("user-1"))
        query = {k: v[0] for k, v in parse_qs(url.query).items()}

        assert url.path.endswith("/connect/oauth2/authorize")
        assert query["response_type"] == "code"
        assert query["client_id"] == "client-id"
        assert query["state"] == "user-1"
        assert query["scope"] == "cart.basic:write product.compact"
        assert query["redirect_uri"].endswith("/auth/kroger/callback")

    def test_authorize_url_anonymous(self, service: KrogerAccountService) -> None:
        assert f"state={ANONYMOUS_STATE}" in service.authorize_url(None)

    def test_callback_redirect(self, service: KrogerAccountService) -> None:
        assert service.callback_redirect(success=True).endswith("/profile.html?kroger=success")
        assert service.callback_redirect(success=False).endswith("/profile.html?kroger=error")

    @pytest.mark.asyncio
    async def test_connect_saves_and_flags(
        self,
        service: KrogerAccountService,
        connections: ConnectionStore,
        profiles: MagicMock,
    ) -> None:
        connection = await service.connect("code-1", "user-1")

        assert connection.profile == {"id": "kroger-1"}
        assert await connections.get("user-1") == connection
        profiles.set_kroger_connected.assert_awaited_once_with("user-1", True)

    @pytest.mark.asyncio
    async def test_connect_survives_profile_failure(
        self,
        service: KrogerAccountService,
        kroger: MagicMock,
        profiles: MagicMock,
    ) -> None:
        """Identity lookup and profile flag failures should not abort linking."""
        kroger.get_identity_profile.side_effect = KrogerResponseError(403, "scope")
        profiles.set_kroger_connected.side_effect = RuntimeError("db down")

        connection = await service.connect("code-1", "user-1")

        assert connection.profile == {}

    @pytest.mark.asyncio
    async def test_anonymous_connect_skips_profile_flag(
        self, service: KrogerAccountService, profiles: MagicMock
    ) -> None:
        await service.connect("code-1", ANONYMOUS_STATE)

        profiles.set_kroger_connected.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_disconnect(
        self,
        service: KrogerAccountService,
        connections: ConnectionStore,
        profiles: MagicMock,
    ) -> None:
        await connections.save("user-1", KrogerConnection(credential=_credential()))

        await service.disconnect("user-1")

        assert await connections.get("user-1") is None
        profiles.set_kroger_connected.assert_awaited_once_with("user-1", False)

    @pytest.mark.asyncio
    async def test_disconnect_without_user_is_noop(
        self, service: KrogerAccountService, profiles: MagicMock
    ) -> None:
        await service.disconnect(None)

        profiles.set_kroger_connected.assert_not_awaited()


class TestAccountOperations:
    """Tests for coupons and cart."""

    @pytest.mark.asyncio
    async def test_not_connected(self, service: KrogerAccountService) -> None:
        with pytest.raises(KrogerNotConnectedError, match="Kroger not connected"):
            await service.get_coupons("user-1")

        with pytest.raises(KrogerNotConnectedError):
            await service.add_to_cart("user-1", [CartItem(upc="1")])

    @pytest.mark.asyncio
    async def test_get_coupons(
        self,
        service: KrogerAccountService,
        connections: ConnectionStore,
        kroger: MagicMock,
    ) -> None:
        await connections.save("user-1", KrogerConnection(credential=_credential()))

        async def coupons(_token: str, offer_type: str | None = None) -> list[dict]:
            if offer_type == BOOST_OFFER_TYPE:
                return [{"offerId": "b1", "description": "Boost"}]
            return [{"offerId": "c1", "description": "Coupon", "offerState": "Clipped"}]

        kroger.get_coupons.side_effect = coupons

        digital, boost = await service.get_coupons("user-1")

        assert [(c.id, c.type, c.clipped) for c in digital] == [
            ("c1", "digital_coupon", True)
        ]
        assert [(c.id, c.type) for c in boost] == [("b1", "boost_deal")]

    @pytest.mark.asyncio
    async def test_boost_failure_yields_empty_list(
        self,
        service: KrogerAccountService,
        connections: ConnectionStore,
        kroger: MagicMock,
    ) -> None:
        await connections.save("user-1", KrogerConnection(credential=_credential()))

        async def coupons(_token: str, offer_type: str | None = None) -> list[dict]:
            if offer_type:
                raise KrogerResponseError(500, "boost down")
            return [{"offerId": "c1"}]

        kroger.get_coupons.side_effect = coupons

        digital, boost = await service.get_coupons("user-1")

        assert len(digital) == 1
        assert boost == []

    @pytest.mark.asyncio
    async def test_add_to_cart_defaults_quantity(
        self,
        service: KrogerAccountService,
        connections: ConnectionStore,
        kroger: MagicMock,
    ) -> None:
        await connections.save("user-1", KrogerConnection(credential=_credential()))

        await service.add_to_cart("user-1", [CartItem(upc="001"), CartItem(upc="002", quantity=3)])

        kroger.add_to_cart.assert_awaited_once_with(
            "user-token",
            [
                {"upc": "001", "quantity": 1, "modality": "PICKUP"},
                {"upc": "002", "quantity": 3, "modality": "PICKUP"},
            ],
        )


class TestFormatCoupons:
    def test_maps_fields_and_skips_unreadable(self) -> None:
        raw = [
            {
                "offerId": "c1",
                "description": "Save $1",
                "brandName": "Kroger",
                "customerSavings": 1.0,
                "expirationDate": "2026-12-31",
                "categories": ["Dairy", "Cheese"],
            },
            {"description": "no id"},
        ]

        coupons = format_coupons(raw, "digital_coupon")

        assert len(coupons) == 1
        coupon = coupons[0]
        assert coupon.brand == "Kroger"
        assert coupon.savings == 1.0
        assert coupon.expiry_date == "2026-12-31"
        assert coupon.category == "Dairy"
        assert coupon.clipped is False
