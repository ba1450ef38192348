"""Record store backends.

Provides filesystem, key-value, and null record stores.
"""

from .fs import FSRecordStore, hashed_filename
from .kv import InMemoryKeyValueClient, KeyValueClient, KVRecordStore
from .null import NullRecordStore

__all__ = [
    "FSRecordStore",
    "hashed_filename",
    "KVRecordStore",
    "KeyValueClient",
    "InMemoryKeyValueClient",
    "NullRecordStore",
]
