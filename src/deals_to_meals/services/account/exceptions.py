"""Kroger account service exceptions."""

from __future__ import annotations


class KrogerNotConnectedError(Exception):
    """The user has not linked a Kroger account."""

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__("Kroger not connected")
