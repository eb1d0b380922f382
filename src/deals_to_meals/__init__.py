"""Deals to Meals API.

Backend for a grocery deal finder: ranks promotions at a Kroger store,
suggests recipes that use them, and manages a user's linked Kroger account.
"""

__version__ = "0.1.0"
