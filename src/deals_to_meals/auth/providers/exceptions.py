"""Authentication provider exceptions.

These exceptions are caught by the dependency layer and converted to
appropriate HTTP responses.
"""

from __future__ import annotations


class AuthProviderError(Exception):
    """Base exception for auth provider errors."""


class AuthenticationError(AuthProviderError):
    """Raised when authentication fails for any reason."""


class TokenInvalidError(AuthenticationError):
    """Raised when the identity provider rejects a token."""


class AuthServiceUnavailableError(AuthProviderError):
    """Raised when the identity provider cannot be reached."""


class ConfigurationError(AuthProviderError):
    """Raised when the auth provider is misconfigured."""
