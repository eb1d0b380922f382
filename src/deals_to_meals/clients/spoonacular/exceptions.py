"""Spoonacular API client exceptions."""

from __future__ import annotations


class SpoonacularError(Exception):
    """Raised when a recipe search cannot be completed.

    ``status_code`` is None when the API could not be reached at all.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)
