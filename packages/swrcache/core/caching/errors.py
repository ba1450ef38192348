"""Exceptions raised by the request cache.

Only `IdentityUnavailable` escapes `CacheRequestClient.request()`; the
storage and codec errors are absorbed and logged by the orchestrator.
"""

from __future__ import annotations


class CacheError(Exception):
    """Base exception for all cache errors.

    Attributes:
        message: Human-readable error description
        key: Final cache key involved, if known
    """

    def __init__(self, message: str, *, key: str | None = None) -> None:
        self.message = message
        self.key = key
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.key is None:
            return self.message
        return f"{self.message} | key={self.key}"


class IdentityUnavailable(CacheError):
    """Identity binding was requested but no identity is authenticated."""


class StoreError(CacheError):
    """Record store I/O failure."""


class StoreReadError(StoreError):
    """Failed to read a record from the store."""


class StoreWriteError(StoreError):
    """Failed to write or delete a record in the store."""


class CorruptRecord(CacheError):
    """Stored bytes are not a valid cache record."""


class EncodeError(CacheError):
    """Record content could not be serialized."""


class CacheRequestFailed(CacheError):
    """Terminal error of a cache request stream.

    Raised by `CacheRequestClient.stream()` in the situations where
    `request()` would invoke its error callback.
    """
