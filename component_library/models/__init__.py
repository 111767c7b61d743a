"""Data contracts for components, stored entries and outcomes."""

from .component import (
    DEFAULT_CATEGORY,
    ComponentMetadata,
    ComponentTemplate,
    ComponentUI,
    ComponentDocument,
)
from .stored import (
    ComponentSource,
    StoredComponent,
    StorageLedger,
    StorageUsage,
    utc_now,
    to_stored_precision,
    format_timestamp,
)
from .errors import ErrorKind, ValidationIssue, ValidationResult, StoreError

__all__ = [
    "DEFAULT_CATEGORY",
    "ComponentMetadata",
    "ComponentTemplate",
    "ComponentUI",
    "ComponentDocument",
    "ComponentSource",
    "StoredComponent",
    "StorageLedger",
    "StorageUsage",
    "utc_now",
    "to_stored_precision",
    "format_timestamp",
    "ErrorKind",
    "ValidationIssue",
    "ValidationResult",
    "StoreError",
]
