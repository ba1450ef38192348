"""In-memory filesystem for fast, isolated testing.

Simulates filesystem operations without disk I/O.
Async operations complete immediately but maintain async interface.
"""

from pathlib import Path

from .models import AbsolutePath


class FakeFileSystem:
    """
    In-memory async filesystem for testing.

    Failures can be injected per path with `fail_reads` / `fail_writes`
    to exercise error handling in callers. Not thread-safe (use per-test
    instance).
    """

    def __init__(self) -> None:
        self._files: dict[str, bytes] = {}
        self._dirs: set[str] = {"/"}  # Root always exists
        self.fail_reads: set[str] = set()
        self.fail_writes: set[str] = set()

    def join(self, base: AbsolutePath, *parts: str) -> AbsolutePath:
        """Join paths (sync - no I/O)."""
        result = Path(base).joinpath(*parts)

        # Normalize to absolute
        if not result.is_absolute():
            result = Path("/") / result

        return AbsolutePath(result)

    async def read_bytes(self, path: AbsolutePath) -> bytes:
        """Read file (async, immediate)."""
        path_str = str(Path(path))
        if path_str in self.fail_reads:
            raise PermissionError(f"Permission denied: {path}")
        if path_str not in self._files:
            raise FileNotFoundError(f"File not found: {path}")
        return self._files[path_str]

    async def write_bytes(self, path: AbsolutePath, data: bytes) -> None:
        """Write file (async, immediate)."""
        path_obj = Path(path)
        path_str = str(path_obj)
        if path_str in self.fail_writes:
            raise OSError(28, "No space left on device", path_str)

        self._ensure_parents(path_obj.parent)
        self._files[path_str] = bytes(data)

    def _ensure_parents(self, path: Path) -> None:
        """Recursively create parent directories (sync helper)."""
        parts = path.parts
        for i in range(1, len(parts) + 1):
            self._dirs.add(str(Path(*parts[:i])))

    async def mkdirs(self, path: AbsolutePath, exist_ok: bool = True) -> None:
        """Create directory (async, immediate)."""
        path_str = str(Path(path))
        if not exist_ok and path_str in self._dirs:
            raise FileExistsError(f"Directory exists: {path}")
        self._ensure_parents(Path(path))

    async def listdir(self, path: AbsolutePath) -> list[str]:
        """List directory (async, immediate)."""
        path_obj = Path(path)
        if str(path_obj) not in self._dirs:
            raise FileNotFoundError(f"Directory not found: {path}")

        children = {Path(p).name for p in self._files if Path(p).parent == path_obj}
        children.update(Path(d).name for d in self._dirs if Path(d).parent == path_obj and d != "/")
        return sorted(children)

    async def remove(self, path: AbsolutePath) -> None:
        """Remove file (async, immediate)."""
        path_str = str(Path(path))
        if path_str in self.fail_writes:
            raise PermissionError(f"Permission denied: {path}")
        if path_str not in self._files:
            raise FileNotFoundError(f"File not found: {path}")
        del self._files[path_str]
