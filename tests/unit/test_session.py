"""Unit tests for CacheSession record store dispatch."""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path

import pytest

from swrcache.core.api import ApiResponse
from swrcache.core.caching import (
    FSRecordStore,
    KVRecordStore,
    NullRecordStore,
    StaticIdentityProvider,
)
from swrcache.core.config.models import AppConfig, CacheConfig
from swrcache.core.session import CacheSession, create_record_store


def _make_app_config(backend: str = "fs", cache_root: Path | str = "/tmp/swrcache") -> AppConfig:
    return AppConfig.model_validate(
        {
            "cache": {
                "backend": backend,
                "cache_root": str(cache_root),
                "default_max_age_seconds": 60,
            },
            "logging": {"level": "INFO"},
        }
    )


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    monkeypatch.delenv("SWRCACHE_CACHE_ROOT", raising=False)
    monkeypatch.delenv("SWRCACHE_LOG_LEVEL", raising=False)


def test_fs_backend_resolves_cache_root(tmp_path: Path) -> None:
    """Filesystem store should live under the configured root."""
    store = create_record_store(_make_app_config("fs", tmp_path).cache)

    assert isinstance(store, FSRecordStore)
    assert Path(store.root) == tmp_path.resolve() / "cache_request_data"


def test_fs_backend_relative_root_made_absolute(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    store = create_record_store(CacheConfig(cache_root=Path("cache")))

    assert Path(store.root) == tmp_path.resolve() / "cache" / "cache_request_data"


def test_memory_backend() -> None:
    store = create_record_store(CacheConfig(backend="memory"))

    assert isinstance(store, KVRecordStore)
    assert store.prefix == "swrcache:"


async def test_memory_backend_purge() -> None:
    """Purge works on the configured memory store because it is namespaced."""
    store = create_record_store(CacheConfig(backend="memory"))
    await store.put("profile", b"x")

    assert await store.purge() == 1


def test_null_backend() -> None:
    assert isinstance(create_record_store(CacheConfig(backend="null")), NullRecordStore)


def test_session_applies_default_max_age() -> None:
    session = CacheSession(app_config=_make_app_config("memory"))
    assert session.client.default_max_age == timedelta(seconds=60)


def test_session_store_override() -> None:
    store = NullRecordStore()
    session = CacheSession(app_config=_make_app_config(), store=store)

    assert session.store is store
    assert session.client.store is store


def test_session_loads_config_path(tmp_path: Path) -> None:
    config_file = tmp_path / "swrcache.yaml"
    config_file.write_text('cache:\n  backend: "null"\n')

    session = CacheSession(app_config=config_file)

    assert isinstance(session.store, NullRecordStore)


def test_session_rejects_unknown_config_type() -> None:
    with pytest.raises(TypeError):
        CacheSession(app_config={"cache": {}})


async def test_session_round_trip(tmp_path: Path) -> None:
    """A request through the session persists under the bound identity."""
    session = CacheSession(
        app_config=_make_app_config("fs", tmp_path),
        identity=StaticIdentityProvider("u1"),
    )

    async def fetch() -> ApiResponse:
        return ApiResponse(code=200, content={"name": "Al"})

    received = []
    async with session:
        await session.client.request(
            "profile",
            bind_identity=True,
            decode=dict,
            fetch=fetch,
            on_success=lambda data, from_cache: received.append((data, from_cache)),
        )
        record = await session.client.peek("profile", bind_identity=True)

    assert received == [({"name": "Al"}, False)]
    assert record is not None
    assert record.content == {"name": "Al"}
