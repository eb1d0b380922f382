"""Shared test fixtures and configuration for the Deals to Meals tests.

Tests run with ``APP_ENV=test``: header authentication, no database and an
in-memory credential store.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest


os.environ["APP_ENV"] = "test"

from deals_to_meals.auth.providers import set_auth_provider  # noqa: E402
from deals_to_meals.core.config import Settings, get_settings  # noqa: E402
from deals_to_meals.observability.logging import clear_context  # noqa: E402


if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture(autouse=True)
def _reset_global_state() -> Iterator[None]:
    """Settings cache, auth provider and log context are process-wide."""
    get_settings.cache_clear()
    clear_context()
    yield
    set_auth_provider(None)
    get_settings.cache_clear()
    clear_context()


@pytest.fixture
def settings() -> Settings:
    """Test settings with fake upstream secrets."""
    return Settings(
        APP_ENV="test",
        KROGER_CLIENT_ID="client-id",
        KROGER_CLIENT_SECRET="client-secret",
        SPOONACULAR_API_KEY="spoon-key",
        LLM_API_KEY="llm-key",
    )
