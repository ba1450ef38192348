"""Stale-while-revalidate request cache.

This module serves a persisted result first and then revalidates it with
a fresh fetch:
- Final keys optionally bound to the current user identity
- Pluggable record stores (filesystem, key-value, null)
- Time-based expiry with eager deletion of stale records
- Self-healing on corrupt records
- Duplicate-delivery suppression via canonical JSON comparison

Example:
    >>> from swrcache.core.caching import CacheRequestClient, FSRecordStore
    >>> from swrcache.core.io import RealFileSystem, absolute_path
    >>>
    >>> store = FSRecordStore(RealFileSystem(), absolute_path("~/.cache/myapp"))
    >>> async with CacheRequestClient(store) as client:
    ...     await client.request("profile", decode=dict, fetch=fetch_profile, on_success=show)
"""

from swrcache.core.caching.backends import (
    FSRecordStore,
    InMemoryKeyValueClient,
    KVRecordStore,
    NullRecordStore,
)
from swrcache.core.caching.canonical import canonical_json, contents_equal
from swrcache.core.caching.codec import decode_record, encode_record, make_record, now_ms
from swrcache.core.caching.errors import (
    CacheError,
    CacheRequestFailed,
    CorruptRecord,
    EncodeError,
    IdentityUnavailable,
    StoreError,
    StoreReadError,
    StoreWriteError,
)
from swrcache.core.caching.keys import IdentityProvider, KeyDeriver, StaticIdentityProvider
from swrcache.core.caching.models import CachedRecord, CacheEvent, CacheOutcome
from swrcache.core.caching.protocols import RecordStore
from swrcache.core.caching.request import CacheRequestClient
from swrcache.core.caching.staleness import is_usable, record_age

__all__ = [
    # Core
    "CacheRequestClient",
    "CachedRecord",
    "CacheEvent",
    "CacheOutcome",
    "RecordStore",
    # Keys
    "KeyDeriver",
    "IdentityProvider",
    "StaticIdentityProvider",
    # Backends
    "FSRecordStore",
    "KVRecordStore",
    "InMemoryKeyValueClient",
    "NullRecordStore",
    # Codec / policy
    "encode_record",
    "decode_record",
    "make_record",
    "now_ms",
    "canonical_json",
    "contents_equal",
    "is_usable",
    "record_age",
    # Errors
    "CacheError",
    "CacheRequestFailed",
    "CorruptRecord",
    "EncodeError",
    "IdentityUnavailable",
    "StoreError",
    "StoreReadError",
    "StoreWriteError",
]
