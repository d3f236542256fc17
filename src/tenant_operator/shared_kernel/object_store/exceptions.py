"""Exceptions for object store operations.

Each outcome a controller must branch on has its own type, so callers
handle them with ``except`` clauses instead of inspecting messages or codes.
"""

from __future__ import annotations

from shared_kernel.object_store.types import ObjectKey


class ObjectStoreError(Exception):
    """Base exception for object store errors."""

    def __init__(self, message: str, key: ObjectKey | None = None):
        super().__init__(message)
        self.key = key


class NotFoundError(ObjectStoreError):
    """Raised when the addressed object (or its namespace) does not exist.

    On reads and deletes this is an observation of absence, not a failure.
    """

    pass


class AlreadyExistsError(ObjectStoreError):
    """Raised when creating an object whose key is already taken."""

    pass


class ConflictError(ObjectStoreError):
    """Raised when a conditional update carries a stale resource version.

    The caller must re-read the object and retry on its next pass.
    """

    pass


class StoreUnavailableError(ObjectStoreError):
    """Raised on transient infrastructure failures (timeouts, outages)."""

    pass
