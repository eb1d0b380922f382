"""Kroger OAuth credential handling.

This module provides:
- Credential and connection models
- Pluggable storage for per-user connections (memory or Redis)
- The token manager that issues and renews credentials
"""

from deals_to_meals.credentials.exceptions import (
    CredentialError,
    CredentialUnavailableError,
    UpstreamAuthError,
)
from deals_to_meals.credentials.models import (
    Credential,
    KrogerConnection,
    ScopeKind,
    TokenResponse,
)
from deals_to_meals.credentials.store import (
    ConnectionStore,
    InMemoryStore,
    KeyValueStore,
    RedisStore,
)
from deals_to_meals.credentials.token_manager import TokenManager


__all__ = [
    # Storage
    "ConnectionStore",
    # Models
    "Credential",
    # Exceptions
    "CredentialError",
    "CredentialUnavailableError",
    "InMemoryStore",
    "KeyValueStore",
    "KrogerConnection",
    "RedisStore",
    "ScopeKind",
    # Token manager
    "TokenManager",
    "TokenResponse",
    "UpstreamAuthError",
]
