"""Validation of uploaded component files and documents."""

from .validator import (
    FileDescriptor,
    validate_file,
    validate_and_parse_json,
    validate_document,
)

__all__ = [
    "FileDescriptor",
    "validate_file",
    "validate_and_parse_json",
    "validate_document",
]
