"""LLM proxy exceptions."""

from __future__ import annotations


class LLMProxyError(Exception):
    """Raised when the LLM API cannot be reached or is not configured.

    Non-success responses are not errors here: they are relayed to the
    caller unchanged.
    """
