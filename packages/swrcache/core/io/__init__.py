"""Filesystem abstraction layer for swrcache.

Provides safe, testable, async filesystem operations for the filesystem
record store.

Example:
    >>> from swrcache.core.io import RealFileSystem, absolute_path
    >>> fs = RealFileSystem()
    >>> path = fs.join(absolute_path("/tmp"), "cache", "record.json")
    >>> await fs.write_bytes(path, b"{}")
    >>> data = await fs.read_bytes(path)
"""

from .impl_fake import FakeFileSystem
from .impl_real import RealFileSystem
from .models import AbsolutePath, absolute_path
from .protocols import FileSystem

__all__ = [
    "AbsolutePath",
    "absolute_path",
    "FileSystem",
    "RealFileSystem",
    "FakeFileSystem",
]
