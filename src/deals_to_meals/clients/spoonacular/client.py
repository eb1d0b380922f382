"""Spoonacular recipe search client."""

from __future__ import annotations

from typing import Any, Final

import httpx
import orjson

from deals_to_meals.clients.spoonacular.exceptions import SpoonacularError
from deals_to_meals.observability.logging import get_logger


logger = get_logger(__name__)


class SpoonacularClient:
    """Client for the Spoonacular food API.

    Only the ``complexSearch`` endpoint is used. The API key travels as a
    query parameter on every request.
    """

    COMPLEX_SEARCH_ENDPOINT: Final[str] = "/recipes/complexSearch"

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.spoonacular.com",
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._http = http_client
        self._owns_http_client = http_client is None

    async def initialize(self) -> None:
        """Initialize the HTTP client if not provided."""
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=10.0)
        logger.info("SpoonacularClient initialized")

    async def shutdown(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_http_client and self._http is not None:
            await self._http.aclose()
            self._http = None
        logger.debug("SpoonacularClient shutdown")

    async def complex_search(self, params: dict[str, str]) -> list[dict[str, Any]]:
        """Run a complexSearch query.

        Args:
            params: Search filters, without the API key.

        Returns:
            The ``results`` list from the response.

        Raises:
            SpoonacularError: Transport failure or non-success status.
        """
        if self._http is None:
            await self.initialize()
        assert self._http is not None

        query = {"apiKey": self._api_key, **params}
        try:
            response = await self._http.get(
                f"{self._base_url}{self.COMPLEX_SEARCH_ENDPOINT}",
                params=query,
            )
        except httpx.RequestError as e:
            logger.warning("Failed to connect to Spoonacular", error=str(e))
            msg = f"Failed to connect to Spoonacular: {e}"
            raise SpoonacularError(msg) from e

        if not response.is_success:
            logger.warning(
                "Spoonacular returned error",
                status_code=response.status_code,
            )
            raise SpoonacularError(
                response.text or f"HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = orjson.loads(response.content)
        except orjson.JSONDecodeError as e:
            msg = "Spoonacular returned invalid JSON"
            raise SpoonacularError(msg, status_code=response.status_code) from e

        results = data.get("results") if isinstance(data, dict) else None
        logger.debug("Spoonacular search complete", result_count=len(results or []))
        return list(results or [])
