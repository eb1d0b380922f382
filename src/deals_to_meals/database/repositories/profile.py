"""User profile repository.

One row per user in ``profiles``, keyed by the identity provider's user id.
"""

from __future__ import annotations

from typing import Any

from deals_to_meals.database.repositories.base import BaseRepository, row_to_dict
from deals_to_meals.observability.logging import get_logger
from deals_to_meals.schemas.profile import PROFILE_UPDATABLE_FIELDS


logger = get_logger(__name__)


class ProfileRepository(BaseRepository):
    """Reads and updates rows of the ``profiles`` table."""

    table = "profiles"

    async def get(self, user_id: str) -> dict[str, Any] | None:
        """Fetch a user's profile row, or None if it does not exist."""
        query = f"SELECT * FROM {self.qualified_table} WHERE id = $1"  # noqa: S608

        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(query, user_id)

        return row_to_dict(row) if row is not None else None

    async def update(
        self,
        user_id: str,
        fields: dict[str, Any],
    ) -> dict[str, Any] | None:
        """Update the whitelisted columns of a profile and stamp ``updated_at``.

        Columns outside the whitelist are silently ignored.

        Returns:
            The updated row, or None if the user has no profile.
        """
        changes = {k: v for k, v in fields.items() if k in PROFILE_UPDATABLE_FIELDS}
        ignored = set(fields) - set(changes)
        if ignored:
            logger.debug("Ignoring non-updatable profile fields", fields=sorted(ignored))

        columns = sorted(changes)
        assignments = [f'"{column}" = ${i}' for i, column in enumerate(columns, start=2)]
        assignments.append("updated_at = now()")

        query = f"""
            UPDATE {self.qualified_table}
            SET {", ".join(assignments)}
            WHERE id = $1
            RETURNING *
        """  # noqa: S608

        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(query, user_id, *(changes[c] for c in columns))

        if row is None:
            return None
        logger.info("Profile updated", user_id=user_id, fields=columns)
        return row_to_dict(row)

    async def set_kroger_connected(self, user_id: str, connected: bool) -> None:
        """Record whether the user has a linked Kroger account."""
        query = f"""
            UPDATE {self.qualified_table}
            SET kroger_connected = $2
            WHERE id = $1
        """  # noqa: S608

        async with self.pool.acquire() as conn:
            await conn.execute(query, user_id, connected)
