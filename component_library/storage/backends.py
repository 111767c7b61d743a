"""
Persistence Backends
A single namespaced key-value slot holding the serialized ledger.
"""

import os
import re
import tempfile
from pathlib import Path
from typing import Protocol

from ..core.logging_config import get_logger

logger = get_logger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9._-]+$")


class PersistenceError(Exception):
    """Backend could not be read or written."""

    pass


class PersistenceBackend(Protocol):
    """Protocol for ledger persistence."""

    def read(self) -> str | None:
        """Return the stored text, or None when nothing has been written."""
        ...

    def write(self, data: str) -> None:
        """Replace the stored text. Raises PersistenceError on failure."""
        ...


class MemoryBackend:
    """
    In-process slot with an optional capacity, mimicking a browser-style
    key-value store that refuses writes past its quota.
    """

    def __init__(self, initial: str | None = None, capacity_bytes: int | None = None) -> None:
        self._data = initial
        self.capacity_bytes = capacity_bytes
        self.writes = 0

    def read(self) -> str | None:
        return self._data

    def write(self, data: str) -> None:
        size = len(data.encode("utf-8"))
        if self.capacity_bytes is not None and size > self.capacity_bytes:
            raise PersistenceError(
                f"Backend capacity exceeded: {size} bytes > {self.capacity_bytes} bytes"
            )
        self._data = data
        self.writes += 1


class FileBackend:
    """One JSON file per key inside a directory; writes replace atomically."""

    def __init__(self, directory: Path | str, key: str) -> None:
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        self.directory = Path(directory)
        self.key = key

    @property
    def path(self) -> Path:
        return self.directory / f"{self.key}.json"

    def read(self) -> str | None:
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"Failed to read {self.path}: {e}") from e

    def write(self, data: str) -> None:
        tmp_path: str | None = None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.directory, prefix=f".{self.key}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(data)
            os.replace(tmp_path, self.path)
        except OSError as e:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise PersistenceError(f"Failed to write {self.path}: {e}") from e

        logger.debug("ledger_written", path=str(self.path), size_bytes=len(data))


__all__ = [
    "PersistenceError",
    "PersistenceBackend",
    "MemoryBackend",
    "FileBackend",
]
