"""
Upload Pipeline
File checks → read → parse and validate → save, one upload at a time.
"""

import asyncio
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from returns.pipeline import is_successful

from .core.logging_config import LogContext, get_logger
from .models.errors import ErrorKind, ValidationResult
from .models.stored import StoredComponent
from .storage.store import ComponentStore
from .validation.validator import FileDescriptor, validate_and_parse_json, validate_file

logger = get_logger(__name__)

SUCCESS_MESSAGE = "Component uploaded successfully!"
MULTIPLE_FILES_MESSAGE = "Please upload only one file at a time"
NO_FILE_MESSAGE = "No file provided"
BUSY_MESSAGE = "An upload is already in progress"


@dataclass(frozen=True)
class UploadedFile:
    """A file chosen by the user: in-memory bytes or a path read on demand."""

    name: str
    size_bytes: int
    mime_type: str = ""
    content: bytes | None = None
    path: Path | None = None

    @classmethod
    def from_bytes(cls, name: str, content: bytes, mime_type: str = "application/json") -> "UploadedFile":
        return cls(name=name, size_bytes=len(content), mime_type=mime_type, content=content)

    @classmethod
    def from_path(cls, path: Path | str) -> "UploadedFile":
        path = Path(path)
        mime_type, _ = mimetypes.guess_type(path.name)
        return cls(
            name=path.name,
            size_bytes=path.stat().st_size,
            mime_type=mime_type or "",
            path=path,
        )

    @property
    def descriptor(self) -> FileDescriptor:
        return FileDescriptor(name=self.name, size_bytes=self.size_bytes, mime_type=self.mime_type)

    async def read_bytes(self) -> bytes:
        if self.content is not None:
            return self.content
        if self.path is None:
            raise OSError(f"No content available for {self.name}")
        return await asyncio.to_thread(self.path.read_bytes)


@dataclass(frozen=True)
class UploadOutcome:
    """User-facing result of an upload attempt."""

    success: bool
    message: str
    component: StoredComponent | None = None
    error_kind: ErrorKind | None = None
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()

    @classmethod
    def failed(
        cls,
        kind: ErrorKind,
        errors: Sequence[str],
        warnings: Sequence[str] = (),
    ) -> "UploadOutcome":
        return cls(
            success=False,
            message=errors[0] if errors else "Upload failed",
            error_kind=kind,
            errors=tuple(errors),
            warnings=tuple(warnings),
        )

    @classmethod
    def from_validation(cls, result: ValidationResult, warnings: Sequence[str] = ()) -> "UploadOutcome":
        return cls.failed(result.errors[0].kind, result.error_messages, [*warnings, *result.warnings])


class ComponentUploader:
    """
    Drives one upload through validation into the store.

    Callers get an UploadOutcome for every path; nothing is raised.
    """

    def __init__(self, store: ComponentStore) -> None:
        self.store = store
        self._in_flight = False

    @property
    def busy(self) -> bool:
        return self._in_flight

    async def upload_many(self, files: Sequence[UploadedFile]) -> UploadOutcome:
        """Entry point for drop/browse events that may carry several files."""
        if not files:
            return UploadOutcome.failed(ErrorKind.READ_FAILED, [NO_FILE_MESSAGE])
        if len(files) > 1:
            return UploadOutcome.failed(ErrorKind.READ_FAILED, [MULTIPLE_FILES_MESSAGE])
        return await self.upload(files[0])

    async def upload(self, file: UploadedFile) -> UploadOutcome:
        if self._in_flight:
            return UploadOutcome.failed(ErrorKind.CONCURRENT_MUTATION, [BUSY_MESSAGE])

        self._in_flight = True
        try:
            with LogContext(upload_filename=file.name):
                outcome = await self._process(file)
        finally:
            self._in_flight = False

        if outcome.success:
            logger.info("upload_succeeded", id=outcome.component.id if outcome.component else None)
        else:
            logger.info("upload_rejected", kind=outcome.error_kind, errors=list(outcome.errors))
        return outcome

    async def _process(self, file: UploadedFile) -> UploadOutcome:
        limit = self.store.limits.max_item_bytes

        file_check = validate_file(file.descriptor, max_size_bytes=limit)
        if not file_check.is_valid:
            return UploadOutcome.from_validation(file_check)

        try:
            raw = await file.read_bytes()
        except OSError as e:
            return UploadOutcome.failed(ErrorKind.READ_FAILED, [f"Failed to read file: {e}"])

        if len(raw) > limit:
            return UploadOutcome.failed(
                ErrorKind.FILE_TOO_LARGE,
                [f"File size {len(raw)} bytes exceeds maximum {limit} bytes"],
            )

        try:
            text = raw.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            return UploadOutcome.failed(
                ErrorKind.READ_FAILED, [f"Failed to read file: not valid UTF-8 ({e.reason})"]
            )

        parsed = validate_and_parse_json(text)
        warnings = [*file_check.warnings, *parsed.warnings]
        if not parsed.is_valid or parsed.normalized_component is None:
            return UploadOutcome.from_validation(parsed, file_check.warnings)

        saved = self.store.save(parsed.normalized_component, original_filename=file.name)
        if is_successful(saved):
            return UploadOutcome(
                success=True,
                message=SUCCESS_MESSAGE,
                component=saved.unwrap(),
                warnings=tuple(warnings),
            )

        error = saved.failure()
        return UploadOutcome.failed(error.kind, [error.message], warnings)


__all__ = [
    "SUCCESS_MESSAGE",
    "MULTIPLE_FILES_MESSAGE",
    "UploadedFile",
    "UploadOutcome",
    "ComponentUploader",
]
