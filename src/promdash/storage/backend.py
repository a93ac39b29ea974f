"""Key-value backends for snapshot persistence.

The snapshot store talks to any object satisfying :class:`KeyValueBackend`.
Two implementations ship: a process-local dict and a directory of files.
"""

from __future__ import annotations

import errno
import re
import threading
from pathlib import Path
from typing import Protocol, runtime_checkable

from promdash._internal.errors import BackendError
from promdash._internal.logging import get_logger

logger = get_logger("storage.backend")

_SAFE_KEY = re.compile(r"[A-Za-z0-9_.-]+")
_SUFFIX = ".json"


@runtime_checkable
class KeyValueBackend(Protocol):
    """Minimal string key-value store.

    Operations are individually atomic at best. Nothing spans calls, so a
    list followed by a put can interleave with another writer.
    """

    def list(self, prefix: str = "") -> list[str]:
        """Return all keys starting with ``prefix``, in no particular order."""
        ...

    def get(self, key: str) -> str | None:
        """Return the value for ``key``, or None if it is absent."""
        ...

    def put(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        ...

    def delete(self, key: str) -> None:
        """Remove ``key``. Deleting a missing key is a no-op."""
        ...


class InMemoryBackend:
    """Thread-safe dict-backed implementation of ``KeyValueBackend``.

    Contents live only as long as the process.
    """

    def __init__(self) -> None:
        """Initialize an empty backend."""
        self._items: dict[str, str] = {}
        self._lock = threading.Lock()

    def list(self, prefix: str = "") -> list[str]:
        with self._lock:
            return [key for key in self._items if key.startswith(prefix)]

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._items.get(key)

    def put(self, key: str, value: str) -> None:
        with self._lock:
            self._items[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._items.pop(key, None)

    def __len__(self) -> int:
        """Return the number of stored keys."""
        with self._lock:
            return len(self._items)


class FileBackend:
    """Directory-backed implementation of ``KeyValueBackend``.

    Each key is one UTF-8 file named ``<key>.json`` inside ``directory``.
    The directory is created on first write.

    Attributes:
        directory: Directory holding the value files.
    """

    def __init__(self, directory: str | Path) -> None:
        """Initialize the backend.

        Args:
            directory: Directory holding the value files.
        """
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        if _SAFE_KEY.fullmatch(key) is None or ".." in key:
            msg = f"Unsupported backend key: {key!r}"
            raise BackendError(msg)
        return self.directory / f"{key}{_SUFFIX}"

    def list(self, prefix: str = "") -> list[str]:
        if not self.directory.exists():
            return []
        try:
            return [
                path.name.removesuffix(_SUFFIX)
                for path in self.directory.iterdir()
                if path.name.endswith(_SUFFIX) and path.name.startswith(prefix)
            ]
        except OSError as exc:
            msg = f"Failed to list {self.directory}: {exc}"
            raise BackendError(msg) from exc

    def get(self, key: str) -> str | None:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            if exc.errno == errno.ENAMETOOLONG:
                return None
            msg = f"Failed to read {path}: {exc}"
            raise BackendError(msg) from exc

    def put(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp_path = path.with_name(f".{path.name}.tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(value, encoding="utf-8")
            tmp_path.replace(path)
        except OSError as exc:
            msg = f"Failed to write {path}: {exc}"
            raise BackendError(msg) from exc
        logger.debug("Wrote %s (%d chars)", path, len(value))

    def delete(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            msg = f"Failed to delete {path}: {exc}"
            raise BackendError(msg) from exc
