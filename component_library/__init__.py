"""Runtime-extensible component library: validation and persistence of uploaded components."""

__version__ = "0.1.0"

from .core import Settings, get_settings
from .models import (
    ComponentDocument,
    StoredComponent,
    StorageUsage,
    ErrorKind,
    ValidationResult,
    StoreError,
)
from .validation import FileDescriptor, validate_file, validate_and_parse_json, validate_document
from .storage import ComponentStore, StoreLimits, MemoryBackend, FileBackend, PersistenceError
from .upload import ComponentUploader, UploadedFile, UploadOutcome


def create_store(settings: Settings | None = None) -> ComponentStore:
    """Store backed by a file under ``Settings.storage_dir``."""
    settings = settings or get_settings()
    backend = FileBackend(settings.storage_dir, settings.storage_key)
    return ComponentStore(backend, StoreLimits.from_settings(settings))


__all__ = [
    "Settings",
    "get_settings",
    "ComponentDocument",
    "StoredComponent",
    "StorageUsage",
    "ErrorKind",
    "ValidationResult",
    "StoreError",
    "FileDescriptor",
    "validate_file",
    "validate_and_parse_json",
    "validate_document",
    "ComponentStore",
    "StoreLimits",
    "MemoryBackend",
    "FileBackend",
    "PersistenceError",
    "ComponentUploader",
    "UploadedFile",
    "UploadOutcome",
    "create_store",
]
