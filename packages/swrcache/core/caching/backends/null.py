"""No-op record store for development/testing.

Always reports absence, discards all writes.
"""

from __future__ import annotations

from types import TracebackType


class NullRecordStore:
    """No-op async record store used when caching is disabled."""

    async def open(self) -> None:
        """No-op (async)."""

    async def close(self) -> None:
        """No-op (async)."""

    async def __aenter__(self) -> NullRecordStore:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        return None

    async def get(self, key: str) -> bytes | None:
        """Always returns None (async)."""
        return None

    async def put(self, key: str, data: bytes) -> None:
        """Discard (async)."""

    async def delete(self, key: str) -> None:
        """No-op (async)."""

    async def purge(self) -> int:
        """Nothing to remove (async)."""
        return 0
