"""Outcome types shared by the validator, store and uploader."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .component import ComponentDocument


class ErrorKind(str, Enum):
    """Every user-recoverable failure the library reports."""

    INVALID_EXTENSION = "invalid_extension"
    FILE_TOO_LARGE = "file_too_large"
    READ_FAILED = "read_failed"
    MALFORMED_JSON = "malformed_json"
    SCHEMA_VIOLATION = "schema_violation"
    QUOTA_EXCEEDED_ITEM = "quota_exceeded_item"
    QUOTA_EXCEEDED_TOTAL = "quota_exceeded_total"
    DUPLICATE_TYPE = "duplicate_type"
    PERSISTENCE_UNAVAILABLE = "persistence_unavailable"
    CONCURRENT_MUTATION = "concurrent_mutation"


@dataclass(frozen=True)
class ValidationIssue:
    """A single violated rule."""

    kind: ErrorKind
    message: str
    field: str | None = None


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a validation pass. Never persisted."""

    errors: tuple[ValidationIssue, ...] = ()
    warnings: tuple[str, ...] = ()
    normalized_component: ComponentDocument | None = None

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def error_messages(self) -> list[str]:
        return [issue.message for issue in self.errors]

    def kinds(self) -> list[ErrorKind]:
        return [issue.kind for issue in self.errors]

    def to_dict(self) -> dict[str, Any]:
        """Export in the shape the presentation layer consumes."""
        return {
            "isValid": self.is_valid,
            "errors": self.error_messages,
            "warnings": list(self.warnings),
            "normalizedComponent": (
                self.normalized_component.to_json_dict() if self.normalized_component else None
            ),
        }


@dataclass(frozen=True)
class StoreError:
    """Typed failure of a store mutation; the ledger is left untouched."""

    kind: ErrorKind
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return self.message


__all__ = [
    "ErrorKind",
    "ValidationIssue",
    "ValidationResult",
    "StoreError",
]
