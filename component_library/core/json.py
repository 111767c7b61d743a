"""Strict JSON parsing and compact, deterministic serialization."""

from typing import Any
import json

import msgspec
import orjson


class JSONParseError(Exception):
    """JSON parsing failed."""

    def __init__(self, message: str, original: Exception | None = None) -> None:
        super().__init__(message)
        self.original = original


_decoder = msgspec.json.Decoder()
_UTF8_BOM = b"\xef\xbb\xbf"


def parse_json(text: str | bytes) -> Any:
    """
    Parse a complete JSON document.

    Nothing is repaired: apart from a leading UTF-8 byte-order mark, the
    whole input must be one valid JSON value.

    Args:
        text: JSON text (str or UTF-8 bytes)

    Returns:
        Parsed value (dict, list, str, int, float, bool or None)

    Raises:
        JSONParseError: If the text is not valid JSON
    """
    data = text.encode("utf-8") if isinstance(text, str) else text
    data = data.removeprefix(_UTF8_BOM)
    if not data.strip():
        raise JSONParseError("Invalid JSON: input is empty")

    try:
        return _decoder.decode(data)
    except msgspec.DecodeError as e:
        raise JSONParseError(f"Invalid JSON: {e}", e) from e


def dumps_bytes(obj: Any) -> bytes:
    """
    Encode object to compact UTF-8 JSON.

    Key order is preserved, so the same value always yields the same bytes.

    Args:
        obj: JSON-compatible object

    Returns:
        Encoded bytes
    """
    try:
        return orjson.dumps(obj)
    except (TypeError, orjson.JSONEncodeError):
        # Fallback for edge cases (e.g., integers outside 64-bit range)
        return json.dumps(obj, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def json_size_bytes(obj: Any) -> int:
    """Size of the compact UTF-8 serialization of `obj`, in bytes."""
    return len(dumps_bytes(obj))


def validate_json_depth(obj: Any, max_depth: int = 32, current_depth: int = 0) -> None:
    """
    Validate JSON nesting depth.

    Args:
        obj: Object to validate
        max_depth: Maximum allowed nesting depth
        current_depth: Current depth (internal)

    Raises:
        JSONParseError: If depth exceeds limit
    """
    if current_depth > max_depth:
        raise JSONParseError(f"JSON nesting depth exceeds maximum {max_depth}")

    if isinstance(obj, dict):
        for value in obj.values():
            validate_json_depth(value, max_depth, current_depth + 1)
    elif isinstance(obj, list):
        for item in obj:
            validate_json_depth(item, max_depth, current_depth + 1)
