"""Credential acquisition exceptions.

Raised by the token manager and translated into 500 responses by the
endpoint layer.
"""

from __future__ import annotations


class CredentialError(Exception):
    """Base exception for credential handling errors."""


class UpstreamAuthError(CredentialError):
    """The OAuth token endpoint refused a grant.

    Carries the upstream status code and response text.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class CredentialUnavailableError(CredentialError):
    """The token endpoint could not be reached."""
