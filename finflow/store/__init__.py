"""Store layer - provides persistence for the application.

This module re-exports the public storage API for easy importing.
"""

from finflow.store.backends import (
    BACKEND_NAMES,
    FileBackend,
    MemoryBackend,
    SqliteBackend,
    StorageBackend,
    StorageError,
    StorageUnavailableError,
    open_backend,
)
from finflow.store.schema import (
    get_data_dir,
    get_db_path,
    init_database,
    init_file_store,
)
from finflow.store.transactions import STORAGE_KEY, TransactionStore

__all__ = [
    # Backends
    "BACKEND_NAMES",
    "FileBackend",
    "MemoryBackend",
    "SqliteBackend",
    "StorageBackend",
    "StorageError",
    "StorageUnavailableError",
    "open_backend",
    # Schema
    "get_data_dir",
    "get_db_path",
    "init_database",
    "init_file_store",
    # Transactions
    "STORAGE_KEY",
    "TransactionStore",
]
