"""Object store primitives shared by reconciliation contexts.

This module provides the store contract, its key types and the error
taxonomy that controllers use to tell absence and duplicates apart from
genuine failures.
"""

from shared_kernel.object_store.exceptions import (
    AlreadyExistsError,
    ConflictError,
    NotFoundError,
    ObjectStoreError,
    StoreUnavailableError,
)
from shared_kernel.object_store.protocols import ObjectStore, StoredObject
from shared_kernel.object_store.types import ObjectKey, OwnerReference, ResourceKind

__all__ = [
    "AlreadyExistsError",
    "ConflictError",
    "NotFoundError",
    "ObjectKey",
    "ObjectStore",
    "ObjectStoreError",
    "OwnerReference",
    "ResourceKind",
    "StoreUnavailableError",
    "StoredObject",
]
