"""Persistence of accepted components."""

from .backends import PersistenceError, PersistenceBackend, MemoryBackend, FileBackend
from .ids import slugify, derive_component_id
from .store import ChangeListener, LedgerCorruptedError, StoreLimits, ComponentStore

__all__ = [
    "PersistenceError",
    "PersistenceBackend",
    "MemoryBackend",
    "FileBackend",
    "slugify",
    "derive_component_id",
    "ChangeListener",
    "LedgerCorruptedError",
    "StoreLimits",
    "ComponentStore",
]
