"""Component validation: file checks, structural checks and normalization.

Everything here is pure: no logging, no storage access, and template values
are only ever inspected as strings.
"""

import copy
import re
from dataclasses import dataclass
from typing import Any, Mapping

from pydantic import ValidationError as PydanticValidationError

from ..core.config import get_settings
from ..core.json import JSONParseError, parse_json, validate_json_depth
from ..models.component import DEFAULT_CATEGORY, ComponentDocument
from ..models.errors import ErrorKind, ValidationIssue, ValidationResult

JSON_EXTENSION = ".json"
EXPECTED_MIME_TYPES = frozenset(
    {"", "application/json", "text/json", "text/plain", "application/octet-stream"}
)
TAG_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9-]*$")
KEBAB_CASE_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

# Template-content keys that do not belong in a styling-variables map.
CONTENT_LIKE_KEYS = frozenset(
    {"text", "content", "label", "title", "variant", "disabled", "placeholder", "value"}
)

_STRING_FIELDS = ("text", "css", "cssLibrary")
_STRING_MAP_FIELDS = ("attributes", "cssVariables", "cssVariablesLibrary")
_STYLE_MAP_FIELDS = ("cssVariables", "cssVariablesLibrary")


@dataclass(frozen=True)
class FileDescriptor:
    """Metadata of an uploaded file, as known before reading it."""

    name: str
    size_bytes: int
    mime_type: str = ""


class _Collector:
    """Accumulates every issue in one pass."""

    def __init__(self) -> None:
        self.errors: list[ValidationIssue] = []
        self.warnings: list[str] = []

    def error(self, kind: ErrorKind, message: str, field: str | None = None) -> None:
        self.errors.append(ValidationIssue(kind, message, field))

    def violation(self, field: str, message: str) -> None:
        self.error(ErrorKind.SCHEMA_VIOLATION, message, field)

    def warn(self, message: str) -> None:
        self.warnings.append(message)

    def result(self, component: ComponentDocument | None = None) -> ValidationResult:
        return ValidationResult(
            errors=tuple(self.errors),
            warnings=tuple(self.warnings),
            normalized_component=component if not self.errors else None,
        )


def _is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def validate_file(file: FileDescriptor, max_size_bytes: int | None = None) -> ValidationResult:
    """
    Check an uploaded file before its content is read.

    Args:
        file: Name, size and MIME type of the upload
        max_size_bytes: Per-item limit (defaults to ``Settings.max_item_bytes``)

    Returns:
        ValidationResult with INVALID_EXTENSION and/or FILE_TOO_LARGE errors
    """
    limit = max_size_bytes if max_size_bytes is not None else get_settings().max_item_bytes
    collector = _Collector()

    if not file.name.lower().endswith(JSON_EXTENSION):
        collector.error(
            ErrorKind.INVALID_EXTENSION, "File must have a .json extension", "name"
        )

    if file.size_bytes > limit:
        collector.error(
            ErrorKind.FILE_TOO_LARGE,
            f"File size {file.size_bytes} bytes exceeds maximum {limit} bytes",
            "size",
        )

    mime_type = (file.mime_type or "").split(";", 1)[0].strip().lower()
    if mime_type not in EXPECTED_MIME_TYPES:
        collector.warn(f"Unexpected MIME type '{file.mime_type}'; content will be parsed as JSON")

    return collector.result()


def validate_and_parse_json(raw_text: str | bytes, max_depth: int | None = None) -> ValidationResult:
    """
    Parse uploaded text and validate it as a component definition.

    Args:
        raw_text: File content
        max_depth: Maximum nesting depth (defaults to ``Settings.max_json_depth``)

    Returns:
        ValidationResult; ``normalized_component`` is set only when valid
    """
    try:
        data = parse_json(raw_text)
    except JSONParseError as e:
        collector = _Collector()
        collector.error(ErrorKind.MALFORMED_JSON, str(e))
        return collector.result()

    return validate_document(data, max_depth=max_depth)


def validate_document(data: Any, max_depth: int | None = None) -> ValidationResult:
    """
    Validate an already-parsed value and normalize it.

    Accepts a ``ComponentDocument`` too, so a stored component can be
    re-validated; the normalized result is unchanged by repeated passes.
    """
    if isinstance(data, ComponentDocument):
        data = data.to_json_dict()

    depth_limit = max_depth if max_depth is not None else get_settings().max_json_depth
    collector = _Collector()

    if not isinstance(data, Mapping):
        collector.violation("", "Component must be a JSON object")
        return collector.result()

    try:
        validate_json_depth(data, depth_limit)
    except JSONParseError as e:
        collector.violation("", str(e))
        return collector.result()

    _check_metadata(data.get("metadata"), collector)
    _check_ui(data.get("ui"), collector)

    if collector.errors:
        return collector.result()

    try:
        component = ComponentDocument.model_validate(copy.deepcopy(dict(data)))
    except PydanticValidationError as e:
        for err in e.errors():
            field = ".".join(str(part) for part in err["loc"])
            collector.violation(field, f"{field}: {err['msg']}")
        return collector.result()

    return collector.result(component)


def _check_metadata(metadata: Any, collector: _Collector) -> None:
    if not isinstance(metadata, Mapping):
        collector.violation("metadata", "metadata must be an object")
        return

    for key in ("type", "name"):
        if not _is_non_empty_string(metadata.get(key)):
            collector.violation(f"metadata.{key}", f"metadata.{key} must be a non-empty string")

    component_type = metadata.get("type")
    if _is_non_empty_string(component_type) and not KEBAB_CASE_PATTERN.match(component_type):
        collector.warn(f"metadata.type '{component_type}' is not kebab-case (e.g. 'custom-button')")

    category = metadata.get("category")
    if category is not None:
        if not isinstance(category, str):
            collector.violation("metadata.category", "metadata.category must be a string")
        elif not category.strip():
            collector.warn(f"metadata.category is empty; using '{DEFAULT_CATEGORY}'")

    description = metadata.get("description")
    if description is not None and not isinstance(description, str):
        collector.violation("metadata.description", "metadata.description must be a string")


def _check_ui(ui: Any, collector: _Collector) -> None:
    if not isinstance(ui, Mapping):
        collector.violation("ui", "ui must be an object")
        return

    template = ui.get("template")
    if not isinstance(template, Mapping):
        collector.violation("ui.template", "ui.template must be an object")
        return

    tag = template.get("tag")
    if not _is_non_empty_string(tag):
        collector.violation("ui.template.tag", "ui.template.tag must be a non-empty string")
    elif not TAG_PATTERN.match(tag):
        collector.violation(
            "ui.template.tag", f"ui.template.tag '{tag}' is not a valid element name"
        )

    classes = template.get("classes")
    if classes is not None and not (
        isinstance(classes, list) and all(isinstance(c, str) for c in classes)
    ):
        collector.violation("ui.template.classes", "ui.template.classes must be an array of strings")

    for key in _STRING_FIELDS:
        value = template.get(key)
        if value is not None and not isinstance(value, str):
            collector.violation(f"ui.template.{key}", f"ui.template.{key} must be a string")

    for key in _STRING_MAP_FIELDS:
        value = template.get(key)
        if value is not None and not (
            isinstance(value, Mapping) and all(isinstance(v, str) for v in value.values())
        ):
            collector.violation(
                f"ui.template.{key}", f"ui.template.{key} must be an object of string values"
            )

    for key in _STYLE_MAP_FIELDS:
        value = template.get(key)
        if isinstance(value, Mapping):
            for name in value:
                if name.lstrip("-").lower() in CONTENT_LIKE_KEYS:
                    collector.warn(
                        f"ui.template.{key}.{name} looks like content, not styling; "
                        "move it into the template"
                    )

    text = template.get("text")
    if isinstance(text, str) and "<script" in text.lower():
        collector.warn(
            "ui.template.text contains a <script> tag; it is stored as plain text and never executed"
        )


__all__ = [
    "FileDescriptor",
    "validate_file",
    "validate_and_parse_json",
    "validate_document",
]
