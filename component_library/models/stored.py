"""Persisted envelope and ledger accounting models."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from ..core.json import json_size_bytes
from .component import ComponentDocument


class ComponentSource(str, Enum):
    """Where a stored component came from."""

    USER_UPLOAD = "user-upload"


def to_stored_precision(value: datetime) -> datetime:
    """Convert to UTC and drop sub-millisecond digits; naive values are UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.replace(microsecond=value.microsecond - value.microsecond % 1000)


def utc_now() -> datetime:
    """Current UTC time truncated to milliseconds (the persisted precision)."""
    return to_stored_precision(datetime.now(timezone.utc))


def format_timestamp(value: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and a trailing ``Z``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class StoredComponent(BaseModel):
    """A component accepted into the store."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1)
    uploaded_at: datetime = Field(..., alias="uploadedAt")
    source: ComponentSource = Field(default=ComponentSource.USER_UPLOAD)
    original_filename: str | None = Field(default=None, alias="originalFilename")
    component: ComponentDocument

    @field_serializer("uploaded_at")
    def _serialize_uploaded_at(self, value: datetime) -> str:
        return format_timestamp(value)

    @property
    def component_type(self) -> str:
        return self.component.metadata.type

    def to_json_dict(self) -> dict[str, Any]:
        """Wire representation; `originalFilename` is omitted when unknown."""
        data: dict[str, Any] = {
            "id": self.id,
            "uploadedAt": format_timestamp(self.uploaded_at),
            "source": self.source.value,
        }
        if self.original_filename is not None:
            data["originalFilename"] = self.original_filename
        data["component"] = self.component.to_json_dict()
        return data

    @property
    def size_bytes(self) -> int:
        """Serialized size counted against quotas."""
        return json_size_bytes(self.to_json_dict())


class StorageLedger(BaseModel):
    """Ordered collection of stored components plus derived accounting."""

    entries: list[StoredComponent] = Field(default_factory=list)

    @property
    def item_count(self) -> int:
        return len(self.entries)

    @property
    def current_size_bytes(self) -> int:
        return sum(entry.size_bytes for entry in self.entries)

    @property
    def serialized_size_bytes(self) -> int:
        """Size of the persisted list: entries plus brackets and separators."""
        if not self.entries:
            return 2
        return self.current_size_bytes + self.item_count + 1

    def find_by_type(self, component_type: str) -> StoredComponent | None:
        for entry in self.entries:
            if entry.component_type == component_type:
                return entry
        return None

    def ids(self) -> set[str]:
        return {entry.id for entry in self.entries}

    def to_json_list(self) -> list[dict[str, Any]]:
        return [entry.to_json_dict() for entry in self.entries]


class StorageUsage(BaseModel):
    """Read-only usage snapshot for display (MB are binary megabytes)."""

    model_config = ConfigDict(frozen=True)

    current_size_mb: float
    max_size_mb: float
    component_count: int
    available_mb: float
    current_size_bytes: int
    max_size_bytes: int
    percent_used: float
    near_capacity: bool


__all__ = [
    "ComponentSource",
    "StoredComponent",
    "StorageLedger",
    "StorageUsage",
    "utc_now",
    "to_stored_precision",
    "format_timestamp",
]
