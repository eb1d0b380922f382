"""Caller authentication.

This module provides:
- Pluggable identity providers (Supabase, header)
- FastAPI security dependencies
"""

from deals_to_meals.auth.dependencies import (
    CurrentUser,
    get_current_user,
    get_current_user_optional,
)


__all__ = [
    "CurrentUser",
    "get_current_user",
    "get_current_user_optional",
]
