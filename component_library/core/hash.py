"""Deterministic xxhash64 digests for component id suffixes.

The digest must be stable across processes and interpreter runs, so the
built-in ``hash()`` (salted per process) is never used for ids.
"""

import xxhash


def hash_bytes(data: bytes, truncate: int | None = None) -> str:
    """
    Hash bytes to an xxhash64 hex digest.

    Args:
        data: Bytes to hash
        truncate: Optional length to truncate digest

    Returns:
        Hex digest string (16 characters untruncated)
    """
    digest = xxhash.xxh64(data).hexdigest()
    if truncate:
        return digest[:truncate]
    return digest


def hash_string(text: str, truncate: int | None = None) -> str:
    """
    Hash the UTF-8 encoding of a string.

    Examples:
        >>> len(hash_string("custom-alert"))
        16
        >>> len(hash_string("custom-alert", truncate=8))
        8
    """
    return hash_bytes(text.encode("utf-8"), truncate)


__all__ = [
    "hash_bytes",
    "hash_string",
]
