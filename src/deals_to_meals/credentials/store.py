"""Key-value storage for per-user Kroger connections.

The token manager never touches process state directly; it talks to a
``KeyValueStore``. ``InMemoryStore`` keeps values in a dict (tests, single
instance deployments) and ``RedisStore`` keeps them in Redis so that linked
accounts survive restarts and are shared between instances.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from pydantic import ValidationError

from deals_to_meals.credentials.models import KrogerConnection
from deals_to_meals.observability.logging import get_logger


if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = get_logger(__name__)


@runtime_checkable
class KeyValueStore(Protocol):
    """Minimal async string key-value interface."""

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...

    async def delete(self, key: str) -> None: ...


class InMemoryStore:
    """Process-local store. Contents are lost on restart."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def __len__(self) -> int:
        return len(self._data)


class RedisStore:
    """Redis-backed store with an optional expiry on every write."""

    def __init__(self, client: Redis[Any], ttl_seconds: int | None = None) -> None:
        self._client = client
        self._ttl = ttl_seconds

    async def get(self, key: str) -> str | None:
        value = await self._client.get(key)
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def set(self, key: str, value: str) -> None:
        await self._client.set(key, value, ex=self._ttl)

    async def delete(self, key: str) -> None:
        await self._client.delete(key)


class ConnectionStore:
    """Typed access to stored ``KrogerConnection`` records keyed by user id."""

    def __init__(self, backend: KeyValueStore, key_prefix: str = "kroger:credentials") -> None:
        self._backend = backend
        self._prefix = key_prefix

    def _key(self, user_id: str) -> str:
        return f"{self._prefix}:{user_id}"

    async def get(self, user_id: str) -> KrogerConnection | None:
        """Load a user's connection, or None when the user never linked Kroger."""
        raw = await self._backend.get(self._key(user_id))
        if raw is None:
            return None
        try:
            return KrogerConnection.model_validate_json(raw)
        except ValidationError:
            logger.warning("Discarding unreadable stored connection", user_id=user_id)
            await self._backend.delete(self._key(user_id))
            return None

    async def save(self, user_id: str, connection: KrogerConnection) -> None:
        await self._backend.set(self._key(user_id), connection.model_dump_json())

    async def delete(self, user_id: str) -> None:
        await self._backend.delete(self._key(user_id))
