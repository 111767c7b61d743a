"""Stored component identifiers.

Ids are derived from the component type, so the same type always maps to the
same id unless that id is already taken by another entry.
"""

import re
from typing import Collection

from ..core.hash import hash_string

FALLBACK_ID = "component"
_NON_SLUG = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """Lowercase, runs of other characters collapsed to ``-``."""
    return _NON_SLUG.sub("-", text.lower()).strip("-")


def derive_component_id(component_type: str, existing_ids: Collection[str]) -> str:
    """
    Derive a unique id for a component type.

    Args:
        component_type: ``metadata.type`` of the component
        existing_ids: Ids already present in the ledger

    Returns:
        The slug of the type, or slug plus a short type hash when the slug is taken

    Examples:
        >>> derive_component_id("custom-alert", set())
        'custom-alert'
    """
    base = slugify(component_type) or FALLBACK_ID
    if base not in existing_ids:
        return base

    # Different types can share a slug ("Custom Alert" vs "custom-alert").
    hashed = f"{base}-{hash_string(component_type, truncate=8)}"
    candidate = hashed
    counter = 2
    while candidate in existing_ids:
        candidate = f"{hashed}-{counter}"
        counter += 1
    return candidate


__all__ = ["slugify", "derive_component_id"]
