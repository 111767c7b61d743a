"""
Component Store
Sole owner of the persisted ledger: quotas, type uniqueness, listing,
removal and usage accounting.
"""

import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from pydantic import ValidationError as PydanticValidationError
from returns.result import Failure, Result, Success

from ..core.config import MEGABYTE, Settings, get_settings
from ..core.json import JSONParseError, dumps_bytes, parse_json
from ..core.logging_config import get_logger
from ..models.component import ComponentDocument
from ..models.errors import ErrorKind, StoreError
from ..models.stored import (
    ComponentSource,
    StorageLedger,
    StorageUsage,
    StoredComponent,
    utc_now,
    to_stored_precision,
)
from .backends import PersistenceBackend, PersistenceError
from .ids import derive_component_id

logger = get_logger(__name__)

ChangeListener = Callable[[list[StoredComponent]], None]


class LedgerCorruptedError(Exception):
    """Persisted ledger exists but cannot be decoded."""

    pass


@dataclass(frozen=True)
class StoreLimits:
    """Quota configuration, in bytes."""

    max_item_bytes: int = 1 * MEGABYTE
    max_total_bytes: int = 10 * MEGABYTE
    near_capacity_ratio: float = 0.8

    def __post_init__(self) -> None:
        if self.max_item_bytes <= 0 or self.max_total_bytes <= 0:
            raise ValueError("Store limits must be positive")

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "StoreLimits":
        settings = settings or get_settings()
        return cls(
            max_item_bytes=settings.max_item_bytes,
            max_total_bytes=settings.max_total_bytes,
            near_capacity_ratio=settings.near_capacity_ratio,
        )


class ComponentStore:
    """
    Durable collection of uploaded components.

    Every operation re-reads the backend, so reads always reflect the last
    completed write. Mutations are single-flight: an overlapping save or
    remove is rejected rather than interleaved. Separate processes sharing
    one backend are last-write-wins.
    """

    def __init__(
        self,
        backend: PersistenceBackend,
        limits: StoreLimits | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._backend = backend
        self.limits = limits or StoreLimits.from_settings()
        self._clock = clock
        self._mutation_lock = threading.Lock()
        self._listeners: list[ChangeListener] = []

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """
        Register a callback invoked with the full collection after each
        successful save or remove.

        Returns:
            Callable that unsubscribes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, entries: list[StoredComponent]) -> None:
        for listener in list(self._listeners):
            try:
                listener(list(entries))
            except Exception as e:
                logger.error("listener_failed", listener=repr(listener), error=str(e), exc_info=True)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def _read_ledger(self) -> StorageLedger:
        """
        Raises:
            PersistenceError: Backend unavailable
            LedgerCorruptedError: Stored text is not a valid ledger
        """
        raw = self._backend.read()
        if raw is None or not raw.strip():
            return StorageLedger()

        try:
            data = parse_json(raw)
        except JSONParseError as e:
            raise LedgerCorruptedError(str(e)) from e

        if not isinstance(data, list):
            raise LedgerCorruptedError(f"Expected list, got {type(data).__name__}")

        try:
            return StorageLedger(entries=[StoredComponent.model_validate(item) for item in data])
        except PydanticValidationError as e:
            raise LedgerCorruptedError(str(e)) from e

    def _read_ledger_or_empty(self) -> StorageLedger:
        try:
            return self._read_ledger()
        except PersistenceError as e:
            logger.warning("persistence_unavailable", operation="read", error=str(e))
        except LedgerCorruptedError as e:
            logger.warning("ledger_corrupted", error=str(e))
        return StorageLedger()

    def load_all(self) -> list[StoredComponent]:
        """All stored components in insertion order. Never raises."""
        return list(self._read_ledger_or_empty().entries)

    def get(self, component_id: str) -> StoredComponent | None:
        for entry in self.load_all():
            if entry.id == component_id:
                return entry
        return None

    def get_usage(self) -> StorageUsage:
        """Usage snapshot for display; enforcement never relies on these rounded values."""
        ledger = self._read_ledger_or_empty()
        current = ledger.current_size_bytes
        maximum = self.limits.max_total_bytes

        return StorageUsage(
            current_size_mb=round(current / MEGABYTE, 2),
            max_size_mb=round(maximum / MEGABYTE, 2),
            component_count=ledger.item_count,
            available_mb=round(max(maximum - current, 0) / MEGABYTE, 2),
            current_size_bytes=current,
            max_size_bytes=maximum,
            percent_used=round(current / maximum * 100, 1),
            near_capacity=current >= maximum * self.limits.near_capacity_ratio,
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def save(
        self,
        component: ComponentDocument,
        original_filename: str | None = None,
    ) -> Result[StoredComponent, StoreError]:
        """
        Store a validated component.

        Args:
            component: Normalized component from the validator
            original_filename: Name of the uploaded file, if known

        Returns:
            Success with the created entry, or Failure with a StoreError
            (quota, duplicate type, persistence, concurrent mutation)
        """
        if not self._mutation_lock.acquire(blocking=False):
            logger.warning("mutation_rejected", operation="save", type=component.metadata.type)
            return Failure(
                StoreError(ErrorKind.CONCURRENT_MUTATION, "Another change is already in progress")
            )

        try:
            result, entries = self._save_locked(component, original_filename)
        finally:
            self._mutation_lock.release()

        if entries is not None:
            self._notify(entries)
        return result

    def _save_locked(
        self,
        component: ComponentDocument,
        original_filename: str | None,
    ) -> tuple[Result[StoredComponent, StoreError], list[StoredComponent] | None]:
        try:
            ledger = self._read_ledger()
        except PersistenceError as e:
            logger.error("persistence_unavailable", operation="save", error=str(e))
            return Failure(
                StoreError(ErrorKind.PERSISTENCE_UNAVAILABLE, f"Storage is unavailable: {e}")
            ), None
        except LedgerCorruptedError as e:
            logger.warning("ledger_corrupted", operation="save", error=str(e))
            ledger = StorageLedger()

        component_type = component.metadata.type
        candidate = StoredComponent(
            id=derive_component_id(component_type, ledger.ids()),
            uploaded_at=to_stored_precision(self._clock()),
            source=ComponentSource.USER_UPLOAD,
            original_filename=original_filename,
            component=component,
        )

        size = candidate.size_bytes
        if size > self.limits.max_item_bytes:
            return Failure(
                StoreError(
                    ErrorKind.QUOTA_EXCEEDED_ITEM,
                    f"Component size {size} bytes exceeds the per-component limit "
                    f"of {self.limits.max_item_bytes} bytes",
                    {"size_bytes": size, "limit_bytes": self.limits.max_item_bytes},
                )
            ), None

        current = ledger.current_size_bytes
        updated = StorageLedger(entries=[*ledger.entries, candidate])
        projected = updated.serialized_size_bytes
        if projected > self.limits.max_total_bytes:
            return Failure(
                StoreError(
                    ErrorKind.QUOTA_EXCEEDED_TOTAL,
                    f"Storage quota exceeded: {projected} bytes would exceed "
                    f"the limit of {self.limits.max_total_bytes} bytes",
                    {
                        "size_bytes": size,
                        "current_size_bytes": current,
                        "projected_bytes": projected,
                        "limit_bytes": self.limits.max_total_bytes,
                    },
                )
            ), None

        if ledger.find_by_type(component_type) is not None:
            return Failure(
                StoreError(
                    ErrorKind.DUPLICATE_TYPE,
                    f"Component with type '{component_type}' already exists",
                    {"type": component_type},
                )
            ), None

        try:
            self._write_ledger(updated)
        except PersistenceError as e:
            logger.error("persistence_unavailable", operation="save", error=str(e))
            return Failure(
                StoreError(ErrorKind.PERSISTENCE_UNAVAILABLE, f"Failed to save component: {e}")
            ), None

        logger.info(
            "component_saved",
            id=candidate.id,
            type=component_type,
            size_bytes=size,
            total_bytes=projected,
        )
        return Success(candidate), list(updated.entries)

    def remove(self, component_id: str) -> bool:
        """
        Remove the entry with the given id.

        Returns:
            True if an entry was removed; False if not found, storage is
            unavailable, or another change is in progress
        """
        if not self._mutation_lock.acquire(blocking=False):
            logger.warning("mutation_rejected", operation="remove", id=component_id)
            return False

        try:
            entries = self._remove_locked(component_id)
        finally:
            self._mutation_lock.release()

        if entries is None:
            return False
        self._notify(entries)
        return True

    def _remove_locked(self, component_id: str) -> list[StoredComponent] | None:
        try:
            ledger = self._read_ledger()
        except PersistenceError as e:
            logger.error("persistence_unavailable", operation="remove", error=str(e))
            return None
        except LedgerCorruptedError as e:
            logger.warning("ledger_corrupted", operation="remove", error=str(e))
            return None

        remaining = [entry for entry in ledger.entries if entry.id != component_id]
        if len(remaining) == ledger.item_count:
            logger.debug("component_not_found", id=component_id)
            return None

        updated = StorageLedger(entries=remaining)
        try:
            self._write_ledger(updated)
        except PersistenceError as e:
            logger.error("persistence_unavailable", operation="remove", error=str(e))
            return None

        logger.info("component_removed", id=component_id, remaining=updated.item_count)
        return list(updated.entries)

    def _write_ledger(self, ledger: StorageLedger) -> None:
        self._backend.write(dumps_bytes(ledger.to_json_list()).decode("utf-8"))


__all__ = [
    "ChangeListener",
    "LedgerCorruptedError",
    "StoreLimits",
    "ComponentStore",
]
