"""Unit tests for application startup and shutdown."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient
from loguru import logger

from deals_to_meals.auth.providers import get_auth_provider
from deals_to_meals.credentials import InMemoryStore, RedisStore
from deals_to_meals.database import ProfileRepository
from deals_to_meals.factory import create_app
from deals_to_meals.services.account import KrogerAccountService
from deals_to_meals.services.deals import DealsService


if TYPE_CHECKING:
    from collections.abc import Iterator


pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def _quiet_loguru() -> Iterator[None]:
    yield
    logger.remove()


class TestLifespan:
    """Tests for the lifespan handler."""

    def test_startup_wires_services(self) -> None:
        with TestClient(create_app()) as client:
            state = client.app.state  # type: ignore[attr-defined]

            assert isinstance(state.deals_service, DealsService)
            assert isinstance(state.account_service, KrogerAccountService)
            assert state.recipe_service is not None
            assert state.llm_client is not None
            assert state.profile_repository is None
            assert isinstance(state.token_manager.connections._backend, InMemoryStore)
            assert get_auth_provider().provider_name == "header"

        assert state.http_client is None
        with pytest.raises(RuntimeError):
            get_auth_provider()

    def test_redis_failure_falls_back_to_memory(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("CREDENTIALS__BACKEND", "redis")

        with (
            patch(
                "deals_to_meals.core.events.lifespan.init_redis",
                AsyncMock(side_effect=ConnectionError("refused")),
            ),
            TestClient(create_app()) as client,
        ):
            backend = client.app.state.token_manager.connections._backend  # type: ignore[attr-defined]

        assert isinstance(backend, InMemoryStore)

    def test_redis_backend(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CREDENTIALS__BACKEND", "redis")

        with (
            patch("deals_to_meals.core.events.lifespan.init_redis", AsyncMock()),
            patch("deals_to_meals.core.events.lifespan.get_redis_client"),
            TestClient(create_app()) as client,
        ):
            backend = client.app.state.token_manager.connections._backend  # type: ignore[attr-defined]

        assert isinstance(backend, RedisStore)

    def test_database_failure_leaves_repositories_unset(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("DATABASE__ENABLED", "true")

        with (
            patch(
                "deals_to_meals.core.events.lifespan.init_database_pool",
                AsyncMock(side_effect=OSError("no database")),
            ),
            TestClient(create_app()) as client,
        ):
            repo = client.app.state.profile_repository  # type: ignore[attr-defined]

        assert repo is None

    def test_database_ready(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DATABASE__ENABLED", "true")

        with (
            patch("deals_to_meals.core.events.lifespan.init_database_pool", AsyncMock()),
            patch("deals_to_meals.core.events.lifespan.close_database_pool", AsyncMock()),
            TestClient(create_app()) as client,
        ):
            repo = client.app.state.profile_repository  # type: ignore[attr-defined]

        assert isinstance(repo, ProfileRepository)
