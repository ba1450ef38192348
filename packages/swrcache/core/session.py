"""swrcache session - wires configuration into a ready request cache.

The session owns the process-wide record store and hands out one
`CacheRequestClient` that all requests share.
"""

from __future__ import annotations

from pathlib import Path
from types import TracebackType
from typing import Any

from swrcache.core.caching import (
    CacheRequestClient,
    FSRecordStore,
    InMemoryKeyValueClient,
    KeyDeriver,
    KVRecordStore,
    NullRecordStore,
    RecordStore,
)
from swrcache.core.caching.keys import IdentityProvider
from swrcache.core.config.loader import load_app_config
from swrcache.core.config.models import AppConfig, CacheConfig
from swrcache.core.io import FileSystem, RealFileSystem, absolute_path
from swrcache.core.utils.logging import get_logger

logger = get_logger(__name__)


def create_record_store(config: CacheConfig, fs: FileSystem | None = None) -> RecordStore:
    """Build the record store selected by config.

    Args:
        config: Cache configuration
        fs: Filesystem for the fs backend (defaults to RealFileSystem)

    Returns:
        Unopened record store
    """
    if config.backend == "fs":
        return FSRecordStore(
            fs or RealFileSystem(),
            absolute_path(config.cache_root.expanduser().resolve()),
            subdir=config.subdir,
        )
    if config.backend == "memory":
        return KVRecordStore(InMemoryKeyValueClient(), prefix=config.key_prefix)
    return NullRecordStore()


class CacheSession:
    """Coordinates config, record store, and request client."""

    def __init__(
        self,
        *,
        app_config: AppConfig | Path | str | None = None,
        identity: IdentityProvider | None = None,
        store: RecordStore | None = None,
    ) -> None:
        """Initialize session.

        Args:
            app_config: AppConfig instance, path, or None (default path)
            identity: Identity provider for identity-bound keys
            store: Record store override (defaults to the configured backend)

        Raises:
            ValidationError: If config is invalid
        """
        self.app_config = self._resolve_config(app_config)
        self.store = store or create_record_store(self.app_config.cache)
        self.client = CacheRequestClient(
            self.store,
            KeyDeriver(identity),
            default_max_age=self.app_config.cache.default_max_age,
        )

        logger.debug(
            f"Session initialized: backend={self.app_config.cache.backend}, "
            f"store={type(self.store).__name__}"
        )

    @staticmethod
    def _resolve_config(value: Any) -> AppConfig:
        if value is None or isinstance(value, (Path, str)):
            return load_app_config(value)
        if isinstance(value, AppConfig):
            return value
        raise TypeError(f"Expected AppConfig, Path, str, or None; got {type(value).__name__}")

    async def open(self) -> None:
        await self.client.open()

    async def close(self) -> None:
        await self.client.close()

    async def __aenter__(self) -> CacheSession:
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()
