"""Error types raised by the catalog core.

The core raises exactly two kinds of errors. Both are deterministic functions
of their input, so callers should translate them into a protocol-level status
rather than retry.
"""

from __future__ import annotations

from typing import Any


class CatalogError(Exception):
    """Base class for all catalog errors."""


class InvalidArgument(CatalogError, ValueError):
    """Raised when a request, identifier or enumerated value is malformed."""


class NotFound(CatalogError, LookupError):
    """Raised when an entity required by an operation does not exist."""

    def __init__(self, kind: str, key: Any):
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} '{key}' not found.")
