"""Shared pytest fixtures for swrcache tests."""

from __future__ import annotations

from typing import Any

import pytest

from swrcache.core.api import ApiResponse
from swrcache.core.caching import (
    CacheRequestClient,
    FSRecordStore,
    KeyDeriver,
    StaticIdentityProvider,
    encode_record,
    make_record,
)
from swrcache.core.io import FakeFileSystem, absolute_path

# ============================================================================
# Clock
# ============================================================================

NOW_MS = 1_700_000_000_000


class FakeClock:
    """Manually advanced epoch-millisecond clock."""

    def __init__(self, now: int = NOW_MS) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, *, seconds: float = 0, hours: float = 0) -> None:
        self.now += int((seconds + hours * 3600) * 1000)


@pytest.fixture
def clock() -> FakeClock:
    """Provide a fixed clock."""
    return FakeClock()


# ============================================================================
# Storage
# ============================================================================


@pytest.fixture
def fs() -> FakeFileSystem:
    """Provide fresh FakeFileSystem instance."""
    return FakeFileSystem()


@pytest.fixture
def store(fs: FakeFileSystem) -> FSRecordStore:
    """Provide a filesystem record store on the fake filesystem."""
    return FSRecordStore(fs, absolute_path("/app/cache"))


@pytest.fixture
def identity() -> StaticIdentityProvider:
    """Provide a logged-in identity."""
    return StaticIdentityProvider("1234567890")


@pytest.fixture
def client(
    store: FSRecordStore, identity: StaticIdentityProvider, clock: FakeClock
) -> CacheRequestClient:
    """Provide a request cache over the fake filesystem store."""
    return CacheRequestClient(store, KeyDeriver(identity), clock=clock)


@pytest.fixture
def seed(store: FSRecordStore, clock: FakeClock):
    """Write a record directly into the store.

    Usage: await seed("profile", {"name": "Al"}, age_seconds=0)
    """

    async def _seed(key: str, content: Any, age_seconds: float = 0) -> None:
        record = make_record(content, timestamp=clock.now - int(age_seconds * 1000))
        await store.put(key, encode_record(record))

    return _seed


# ============================================================================
# Callbacks and fetch functions
# ============================================================================


class Recorder:
    """Collects on_success / on_error invocations in call order."""

    def __init__(self) -> None:
        self.successes: list[tuple[Any, bool]] = []
        self.errors: list[str] = []
        self.calls: list[str] = []

    def on_success(self, data: Any, from_cache: bool) -> None:
        self.successes.append((data, from_cache))
        self.calls.append("cache" if from_cache else "fresh")

    def on_error(self, message: str) -> None:
        self.errors.append(message)
        self.calls.append("error")


@pytest.fixture
def recorder() -> Recorder:
    """Provide a callback recorder."""
    return Recorder()


def fetch_returning(response: ApiResponse):
    """Build an async fetch function returning response and counting calls."""

    async def fetch() -> ApiResponse:
        fetch.calls += 1
        return response

    fetch.calls = 0
    return fetch


def fetch_raising(error: BaseException):
    """Build an async fetch function that raises error."""

    async def fetch() -> ApiResponse:
        raise error

    return fetch
