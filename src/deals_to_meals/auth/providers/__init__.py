"""Authentication providers package.

Available providers:
- SupabaseAuthProvider: Validates via the identity provider's user endpoint
- HeaderAuthProvider: Reads the user id from a header (development only)
"""

from deals_to_meals.auth.providers.exceptions import (
    AuthenticationError,
    AuthProviderError,
    AuthServiceUnavailableError,
    ConfigurationError,
    TokenInvalidError,
)
from deals_to_meals.auth.providers.factory import (
    create_auth_provider,
    get_auth_provider,
    initialize_auth_provider,
    set_auth_provider,
    shutdown_auth_provider,
)
from deals_to_meals.auth.providers.header import HeaderAuthProvider
from deals_to_meals.auth.providers.models import AuthResult
from deals_to_meals.auth.providers.protocol import AuthProvider
from deals_to_meals.auth.providers.supabase import SupabaseAuthProvider


__all__ = [
    "AuthProvider",
    "AuthProviderError",
    "AuthResult",
    "AuthServiceUnavailableError",
    "AuthenticationError",
    "ConfigurationError",
    "HeaderAuthProvider",
    "SupabaseAuthProvider",
    "TokenInvalidError",
    "create_auth_provider",
    "get_auth_provider",
    "initialize_auth_provider",
    "set_auth_provider",
    "shutdown_auth_provider",
]
