"""Passthrough client for the LLM completion API.

Recipe generation is done entirely in the browser; the backend only adds
the API key and forwards the request body. The upstream status code and
body are returned unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from deals_to_meals.clients.llm.exceptions import LLMProxyError
from deals_to_meals.observability.logging import get_logger


logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ProxiedResponse:
    """Upstream response relayed verbatim."""

    status_code: int
    content: bytes
    media_type: str = "application/json"


class LLMProxyClient:
    """Forwards JSON request bodies to the messages endpoint."""

    def __init__(
        self,
        api_key: str,
        url: str = "https://api.anthropic.com/v1/messages",
        api_version: str = "2023-06-01",
        timeout: float = 60.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the proxy.

        Args:
            api_key: Key sent in the ``x-api-key`` header.
            url: Messages endpoint URL.
            api_version: Value of the ``anthropic-version`` header.
            timeout: Per-request timeout in seconds. Generation is slow, so
                this overrides the shared client's default.
            http_client: Shared HTTP client for API requests.
        """
        self._api_key = api_key
        self._url = url
        self._api_version = api_version
        self._timeout = timeout
        self._http = http_client
        self._owns_http_client = http_client is None

    async def initialize(self) -> None:
        """Initialize the HTTP client if not provided."""
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=httpx.Timeout(self._timeout))
        logger.info("LLMProxyClient initialized")

    async def shutdown(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_http_client and self._http is not None:
            await self._http.aclose()
            self._http = None
        logger.debug("LLMProxyClient shutdown")

    async def forward(self, body: bytes) -> ProxiedResponse:
        """POST ``body`` upstream and return whatever comes back.

        Raises:
            LLMProxyError: No API key configured, or the API is unreachable.
        """
        if not self._api_key:
            msg = "LLM API key not configured"
            raise LLMProxyError(msg)

        if self._http is None:
            await self.initialize()
        assert self._http is not None

        try:
            response = await self._http.post(
                self._url,
                content=body,
                headers={
                    "Content-Type": "application/json",
                    "x-api-key": self._api_key,
                    "anthropic-version": self._api_version,
                },
                timeout=self._timeout,
            )
        except httpx.RequestError as e:
            logger.warning("Failed to connect to LLM API", error=str(e))
            msg = f"Failed to connect to LLM API: {e}"
            raise LLMProxyError(msg) from e

        if not response.is_success:
            logger.info("LLM API returned error", status_code=response.status_code)

        return ProxiedResponse(
            status_code=response.status_code,
            content=response.content,
            media_type=response.headers.get("content-type", "application/json"),
        )
