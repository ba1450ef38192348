"""Protocol for filesystem operations used by the record stores."""

from typing import Protocol

from .models import AbsolutePath


class FileSystem(Protocol):
    """
    Async filesystem operations needed to persist cache records.

    Records are opaque bytes, so reads and writes are binary. Writes
    must be atomic: a reader never observes a partially written file.
    """

    def join(self, base: AbsolutePath, *parts: str) -> AbsolutePath:
        """
        Safely join path components (no I/O).

        Raises:
            ValueError: If result escapes base directory
        """
        ...

    async def read_bytes(self, path: AbsolutePath) -> bytes:
        """
        Read file contents.

        Raises:
            FileNotFoundError: If file doesn't exist
            OSError: On read failure
        """
        ...

    async def write_bytes(self, path: AbsolutePath, data: bytes) -> None:
        """
        Atomically write bytes to file.

        Uses temp file + atomic replace to ensure readers never
        observe partial writes.

        Raises:
            OSError: On write failure
        """
        ...

    async def mkdirs(self, path: AbsolutePath, exist_ok: bool = True) -> None:
        """
        Create directory and all parents.

        Raises:
            OSError: On creation failure
        """
        ...

    async def listdir(self, path: AbsolutePath) -> list[str]:
        """
        List directory contents (names only).

        Raises:
            FileNotFoundError: If directory doesn't exist
        """
        ...

    async def remove(self, path: AbsolutePath) -> None:
        """
        Remove a file.

        Raises:
            FileNotFoundError: If file doesn't exist
            OSError: On removal failure
        """
        ...
