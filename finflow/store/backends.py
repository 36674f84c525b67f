"""Key-value persistence backends.

A backend stores string values under string keys. The transaction store
keeps its whole collection as one serialized value, so backends only need
``get`` and ``set``.
"""

import logging
import os
import sqlite3
import tempfile
from pathlib import Path
from typing import Protocol

from finflow.store.schema import get_data_dir, get_db_path

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Base exception for storage operations."""


class StorageUnavailableError(StorageError):
    """The persistence medium is not present or not initialized."""


class StorageBackend(Protocol):
    """Interface every persistence backend implements."""

    def get(self, key: str) -> str | None:
        """Return the value stored under key, or None if unset.

        Raises:
            StorageUnavailableError: If the medium is not present.
            StorageError: If the read fails.
        """
        ...

    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value.

        Raises:
            StorageUnavailableError: If the medium is not present.
            StorageError: If the write fails.
        """
        ...


class MemoryBackend:
    """In-process backend, used for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class FileBackend:
    """One JSON file per key inside a data directory.

    Writes go to a temporary file that replaces the target, so a value is
    never left half written.
    """

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def _check_available(self) -> None:
        if not self.directory.is_dir():
            raise StorageUnavailableError(f"Data directory not found: {self.directory}")

    def get(self, key: str) -> str | None:
        self._check_available()
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Could not read {path}: {e}") from e

    def set(self, key: str, value: str) -> None:
        self._check_available()
        path = self._path(key)
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Could not write {path}: {e}") from e
        logger.debug("Wrote %d bytes to %s", len(value), path)


class SqliteBackend:
    """Key-value rows in the ``kv_store`` table of a SQLite database."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        if not self.db_path.exists():
            raise StorageUnavailableError(f"Database not found: {self.db_path}")
        try:
            return sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            raise StorageError(f"Could not open {self.db_path}: {e}") from e

    def get(self, key: str) -> str | None:
        conn = self._connect()
        try:
            cursor = conn.cursor()
            cursor.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
            row = cursor.fetchone()
            return row[0] if row else None
        except sqlite3.Error as e:
            raise StorageError(f"Could not read key {key!r}: {e}") from e
        finally:
            conn.close()

    def set(self, key: str, value: str) -> None:
        conn = self._connect()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "INSERT INTO kv_store (key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                (key, value),
            )
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StorageError(f"Could not write key {key!r}: {e}") from e
        finally:
            conn.close()
        logger.debug("Wrote %d bytes to %s", len(value), self.db_path)


BACKEND_NAMES = ("sqlite", "file", "memory")


def open_backend(name: str, path: Path | None = None) -> StorageBackend:
    """Create the backend selected in configuration.

    Args:
        name: One of "sqlite", "file" or "memory".
        path: Database file (sqlite) or data directory (file). If None,
            uses the default location for the backend.

    Returns:
        Backend instance; nothing is created on disk.

    Raises:
        ValueError: If name is not a known backend.
    """
    if name == "sqlite":
        return SqliteBackend(path or get_db_path())
    if name == "file":
        return FileBackend(path or get_data_dir())
    if name == "memory":
        return MemoryBackend()
    raise ValueError(f"Unknown storage backend: {name} (expected one of {', '.join(BACKEND_NAMES)})")
