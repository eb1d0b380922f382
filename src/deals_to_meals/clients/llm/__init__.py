"""LLM completion API passthrough."""

from deals_to_meals.clients.llm.client import LLMProxyClient, ProxiedResponse
from deals_to_meals.clients.llm.exceptions import LLMProxyError


__all__ = [
    "LLMProxyClient",
    "LLMProxyError",
    "ProxiedResponse",
]
