"""Key-value backed record store.

The final cache key is used verbatim (optionally namespaced by a prefix)
as the key of an async key-value client. `redis.asyncio.Redis` satisfies
the client protocol, and `InMemoryKeyValueClient` is bundled for tests and
single-process use.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
import fnmatch
import logging
from types import TracebackType
from typing import Any, Protocol

from swrcache.core.caching.errors import StoreReadError, StoreWriteError

logger = logging.getLogger(__name__)

# Single-character classes valid in both redis and fnmatch glob patterns;
# redis also reads backslash as an escape inside a class
_GLOB_ESCAPES = {"*": "[*]", "?": "[?]", "[": "[[]", "\\": "[\\\\]"}


def _glob_escape(text: str) -> str:
    """Escape text for literal matching in a glob pattern."""
    return "".join(_GLOB_ESCAPES.get(c, c) for c in text)


class KeyValueClient(Protocol):
    """Narrow async key-value interface (a subset of redis.asyncio.Redis)."""

    async def get(self, name: str) -> bytes | str | None: ...

    async def set(self, name: str, value: bytes) -> Any: ...

    async def delete(self, *names: str) -> int: ...

    def scan_iter(self, match: str | None = None) -> AsyncIterator[Any]: ...

    async def aclose(self) -> None: ...


class InMemoryKeyValueClient:
    """
    Process-local key-value client backed by a dict.

    All operations run under one asyncio.Lock, so concurrent tasks never
    observe a partially applied operation.
    """

    def __init__(self) -> None:
        self._data: dict[str, bytes] = {}
        self._lock = asyncio.Lock()

    async def get(self, name: str) -> bytes | None:
        async with self._lock:
            return self._data.get(name)

    async def set(self, name: str, value: bytes) -> bool:
        async with self._lock:
            self._data[name] = bytes(value)
            return True

    async def delete(self, *names: str) -> int:
        async with self._lock:
            removed = 0
            for name in names:
                if self._data.pop(name, None) is not None:
                    removed += 1
            return removed

    async def scan_iter(self, match: str | None = None) -> AsyncIterator[str]:
        async with self._lock:
            names = list(self._data)
        for name in names:
            if match is None or fnmatch.fnmatchcase(name, match):
                yield name

    async def aclose(self) -> None:
        """No-op."""


class KVRecordStore:
    """
    Async record store over a key-value client.

    Client errors are wrapped in StoreReadError / StoreWriteError.
    """

    def __init__(
        self,
        client: KeyValueClient,
        prefix: str = "",
        owns_client: bool = False,
    ) -> None:
        """
        Initialize key-value record store.

        Args:
            client: Async key-value client
            prefix: Namespace prepended to every key
            owns_client: Close the client when the store is closed
        """
        self.client = client
        self.prefix = prefix
        self._owns_client = owns_client

    @classmethod
    def from_redis_url(cls, url: str, prefix: str = "") -> KVRecordStore:
        """
        Build a store over a Redis server (requires the `redis` extra).

        Example:
            >>> store = KVRecordStore.from_redis_url("redis://localhost:6379/0", prefix="swr:")
        """
        import redis.asyncio as redis

        client = redis.from_url(url, decode_responses=False)
        return cls(client, prefix=prefix, owns_client=True)

    async def open(self) -> None:
        """No-op; the client connects on first command."""

    async def close(self) -> None:
        """Close the client if this store owns it."""
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> KVRecordStore:
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    def _name(self, key: str) -> str:
        return f"{self.prefix}{key}"

    async def get(self, key: str) -> bytes | None:
        """Read the value for key, None when absent."""
        try:
            value = await self.client.get(self._name(key))
        except Exception as e:
            raise StoreReadError(f"Key-value read failed: {e}", key=key) from e

        if value is None:
            return None
        if isinstance(value, str):
            return value.encode("utf-8")
        return bytes(value)

    async def put(self, key: str, data: bytes) -> None:
        """Write the value for key."""
        try:
            await self.client.set(self._name(key), data)
        except Exception as e:
            raise StoreWriteError(f"Key-value write failed: {e}", key=key) from e

    async def delete(self, key: str) -> None:
        """Delete the value for key (absent key is a no-op)."""
        try:
            await self.client.delete(self._name(key))
        except Exception as e:
            raise StoreWriteError(f"Key-value delete failed: {e}", key=key) from e

    async def purge(self) -> int:
        """
        Delete every key under the store prefix.

        Raises:
            StoreWriteError: If the store has no prefix (the client may hold
                keys this store never wrote) or the client fails
            NotImplementedError: If the client cannot enumerate keys
        """
        if not self.prefix:
            raise StoreWriteError("Refusing to purge a key-value store without a key prefix")

        scan_iter = getattr(self.client, "scan_iter", None)
        if scan_iter is None:
            raise NotImplementedError(f"{type(self.client).__name__} cannot enumerate keys")

        pattern = _glob_escape(self.prefix) + "*"
        try:
            names = [name async for name in scan_iter(match=pattern)]
            removed = await self.client.delete(*names) if names else 0
        except Exception as e:
            raise StoreWriteError(f"Key-value purge failed: {e}") from e
        logger.debug(f"Purged {removed} record(s) matching {pattern!r}")
        return int(removed)
