"""Configuration module with YAML and environment variable support."""

from .settings import AuthMode, CredentialBackend, Settings, get_settings


__all__ = [
    "AuthMode",
    "CredentialBackend",
    "Settings",
    "get_settings",
]
