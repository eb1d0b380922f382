"""Kroger API client exceptions.

These are caught by the endpoint layer and converted to 500 responses that
carry the upstream error text.
"""

from __future__ import annotations


class KrogerError(Exception):
    """Base exception for Kroger API client errors."""


class KrogerUnavailableError(KrogerError):
    """Raised when the Kroger API cannot be reached.

    This includes connection errors and timeouts.
    """


class KrogerResponseError(KrogerError):
    """Raised when the Kroger API returns a non-success or malformed response."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        super().__init__(message)
