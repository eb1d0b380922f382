"""Shared helpers for the asyncpg repositories."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from uuid import UUID

from deals_to_meals.database.connection import get_database_pool


if TYPE_CHECKING:
    from asyncpg import Pool, Record


def row_to_dict(row: Record) -> dict[str, Any]:
    """Convert a record to a plain dict with UUIDs as strings."""
    return {
        key: str(value) if isinstance(value, UUID) else value
        for key, value in row.items()
    }


class BaseRepository:
    """Pool handling and schema-qualified table names."""

    table: str = ""

    def __init__(self, pool: Pool | None = None, schema: str = "public") -> None:
        """Initialize repository with optional connection pool.

        Args:
            pool: asyncpg connection pool. If None, uses global pool.
            schema: Database schema holding the table.
        """
        self._pool = pool
        self._schema = schema

    @property
    def pool(self) -> Pool:
        """Get the database connection pool."""
        if self._pool is not None:
            return self._pool
        return get_database_pool()

    @property
    def qualified_table(self) -> str:
        return f'"{self._schema}"."{self.table}"'
