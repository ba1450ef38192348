"""Protocol for record store backends."""

from typing import Protocol


class RecordStore(Protocol):
    """
    Protocol for persisting cache records (async-first).

    All implementations must support:
    - Whole-value writes (a record is never observed half-written)
    - Miss-as-None semantics (absence is a normal outcome)
    - Safe concurrent use from multiple tasks

    Records are opaque bytes at this layer; encoding lives in the codec.
    """

    async def open(self) -> None:
        """
        Prepare the store for use.

        Called automatically on first use, but can be called explicitly.
        Safe to call multiple times.
        """
        ...

    async def close(self) -> None:
        """Release resources held by the store. Safe to call multiple times."""
        ...

    async def get(self, key: str) -> bytes | None:
        """
        Return the last value written for key.

        Returns:
            Stored bytes, or None if never written or deleted

        Raises:
            StoreReadError: On I/O failure other than "not found"
        """
        ...

    async def put(self, key: str, data: bytes) -> None:
        """
        Store data under key, overwriting any prior value.

        Raises:
            StoreWriteError: On I/O failure
        """
        ...

    async def delete(self, key: str) -> None:
        """
        Remove any stored value for key. Deleting an absent key is a no-op.

        Raises:
            StoreWriteError: On I/O failure
        """
        ...

    async def purge(self) -> int:
        """
        Remove every record held by the store.

        Returns:
            Number of records removed
        """
        ...
