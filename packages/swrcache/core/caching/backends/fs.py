"""Filesystem-backed record store using core.io for all operations.

One JSON file per key under `<cache_root>/<subdir>/<md5(key)>.json`.
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
from types import TracebackType

from swrcache.core.caching.errors import StoreReadError, StoreWriteError
from swrcache.core.io import AbsolutePath, FileSystem

logger = logging.getLogger(__name__)

DEFAULT_SUBDIR = "cache_request_data"
_SUFFIX = ".json"


def hashed_filename(key: str) -> str:
    """
    Map a cache key to a fixed-length, filesystem-safe file name.

    Example:
        >>> hashed_filename("profile")
        '7d97481b1fe66f4b51db90da7e794d9f.json'
    """
    return hashlib.md5(key.encode("utf-8")).hexdigest() + _SUFFIX


class FSRecordStore:
    """
    Async filesystem-backed record store.

    The store directory is created lazily on first use (task-safe).
    Writes are atomic through the filesystem's temp file + replace.
    """

    def __init__(
        self,
        fs: FileSystem,
        cache_root: AbsolutePath,
        subdir: str = DEFAULT_SUBDIR,
    ) -> None:
        """
        Initialize filesystem record store.

        Args:
            fs: Async filesystem implementation
            cache_root: Application-private cache root
            subdir: Dedicated subdirectory holding the records
        """
        self.fs = fs
        self.root = fs.join(cache_root, subdir)
        self._opened = False
        self._open_lock = asyncio.Lock()

    async def open(self) -> None:
        """
        Ensure the record directory exists.

        Called automatically on first use. Safe to call multiple times.

        Raises:
            StoreWriteError: If the directory cannot be created
        """
        async with self._open_lock:
            if self._opened:
                return
            try:
                await self.fs.mkdirs(self.root, exist_ok=True)
            except OSError as e:
                raise StoreWriteError(f"Failed to create cache directory {self.root}: {e}") from e
            self._opened = True
            logger.debug(f"Opened filesystem record store at {self.root}")

    async def close(self) -> None:
        """Mark the store closed; the next operation reopens it."""
        self._opened = False

    async def __aenter__(self) -> FSRecordStore:
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    def path_for(self, key: str) -> AbsolutePath:
        """Compute the record file path for key (sync)."""
        return self.fs.join(self.root, hashed_filename(key))

    async def get(self, key: str) -> bytes | None:
        """Read the record for key, None when absent."""
        await self.open()
        path = self.path_for(key)
        try:
            return await self.fs.read_bytes(path)
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StoreReadError(f"Failed to read {path}: {e}", key=key) from e

    async def put(self, key: str, data: bytes) -> None:
        """Atomically write the record for key."""
        try:
            await self.open()
            await self.fs.write_bytes(self.path_for(key), data)
        except OSError as e:
            raise StoreWriteError(f"Failed to write cache record: {e}", key=key) from e

    async def delete(self, key: str) -> None:
        """Remove the record for key if present."""
        await self.open()
        path = self.path_for(key)
        try:
            await self.fs.remove(path)
        except FileNotFoundError:
            return
        except OSError as e:
            raise StoreWriteError(f"Failed to delete {path}: {e}", key=key) from e

    async def purge(self) -> int:
        """Remove every record file in the store directory."""
        await self.open()
        removed = 0
        for name in await self.fs.listdir(self.root):
            if not name.endswith(_SUFFIX):
                continue
            try:
                await self.fs.remove(self.fs.join(self.root, name))
            except FileNotFoundError:
                continue
            except OSError as e:
                raise StoreWriteError(f"Failed to purge {name}: {e}") from e
            removed += 1
        logger.debug(f"Purged {removed} record(s) from {self.root}")
        return removed
