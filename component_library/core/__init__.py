"""Core utilities and infrastructure."""

from .config import MEGABYTE, Settings, get_settings
from .logging_config import configure_logging, configure_from_settings, get_logger, LogContext
from .json import (
    JSONParseError,
    parse_json,
    dumps_bytes,
    json_size_bytes,
    validate_json_depth,
)
from .hash import hash_bytes, hash_string


__all__ = [
    # Config
    "MEGABYTE",
    "Settings",
    "get_settings",
    # Logging
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "LogContext",
    # JSON
    "JSONParseError",
    "parse_json",
    "dumps_bytes",
    "json_size_bytes",
    "validate_json_depth",
    # Hashing
    "hash_bytes",
    "hash_string",
]
