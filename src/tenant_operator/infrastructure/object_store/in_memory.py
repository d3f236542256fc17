"""In-memory implementation of the ObjectStore protocol.

Mirrors the semantics controllers rely on from the cluster store:
resource versions, conditional updates, separate spec and status writes,
namespaced objects and owner-reference garbage collection.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from typing import Any, TypeVar

from shared_kernel.object_store import (
    AlreadyExistsError,
    ConflictError,
    NotFoundError,
    ObjectKey,
    StoredObject,
)

T = TypeVar("T", bound=StoredObject)

FailureHook = Callable[[str, ObjectKey], None]


class InMemoryObjectStore:
    """In-memory object store.

    Objects must be dataclasses. A class may declare a ``STATUS_FIELDS``
    frozenset; ``update`` then keeps those fields as stored and
    ``update_status`` only touches them.

    Every successful mutation is appended to ``mutations`` as an
    ``(operation, key)`` pair. An optional ``failure_hook`` is called before
    each operation with the same pair and may raise to inject failures.

    Thread-safety: This implementation is NOT thread-safe. It is meant for
    tests and local development.
    """

    def __init__(self, failure_hook: FailureHook | None = None) -> None:
        """Initialize an empty store with no namespaces."""
        self._objects: dict[ObjectKey, Any] = {}
        self._namespaces: set[str] = set()
        self._version = 0
        self.failure_hook = failure_hook
        self.mutations: list[tuple[str, ObjectKey]] = []

    def add_namespace(self, name: str) -> None:
        """Create a namespace."""
        self._namespaces.add(name)

    def remove_namespace(self, name: str) -> None:
        """Remove a namespace together with every object inside it."""
        self._namespaces.discard(name)
        for key in [k for k in self._objects if k.namespace == name]:
            del self._objects[key]

    def has_namespace(self, name: str) -> bool:
        """Check whether a namespace exists."""
        return name in self._namespaces

    def contains(self, key: ObjectKey) -> bool:
        """Check presence without going through the failure hook."""
        return key in self._objects

    def peek(self, key: ObjectKey) -> Any | None:
        """Return the stored object without going through the failure hook."""
        return self._objects.get(key)

    def put(self, obj: T) -> T:
        """Seed an object directly, bypassing conflict checks and recording."""
        if obj.key.namespace is not None:
            self._namespaces.add(obj.key.namespace)
        stored = dataclasses.replace(obj, resource_version=self._next_version())
        self._objects[obj.key] = stored
        return stored

    async def get(self, key: ObjectKey) -> Any:
        self._before("get", key)
        self._check_namespace(key)
        try:
            return self._objects[key]
        except KeyError:
            raise NotFoundError(f"{key} not found", key=key) from None

    async def create(self, obj: T) -> T:
        key = obj.key
        self._before("create", key)
        self._check_namespace(key)
        if key in self._objects:
            raise AlreadyExistsError(f"{key} already exists", key=key)
        stored = dataclasses.replace(obj, resource_version=self._next_version())
        self._objects[key] = stored
        self.mutations.append(("create", key))
        return stored

    async def update(self, obj: T, expected_version: str) -> T:
        key = obj.key
        self._before("update", key)
        current = self._current_for_write(key, expected_version)
        status_fields = getattr(type(obj), "STATUS_FIELDS", frozenset())
        kept = {name: getattr(current, name) for name in status_fields}
        stored = dataclasses.replace(
            obj, resource_version=self._next_version(), **kept
        )
        self._objects[key] = stored
        self.mutations.append(("update", key))
        return stored

    async def update_status(self, obj: T, expected_version: str) -> T:
        key = obj.key
        self._before("update_status", key)
        current = self._current_for_write(key, expected_version)
        status_fields = getattr(type(obj), "STATUS_FIELDS", frozenset())
        changed = {name: getattr(obj, name) for name in status_fields}
        stored = dataclasses.replace(
            current, resource_version=self._next_version(), **changed
        )
        self._objects[key] = stored
        self.mutations.append(("update_status", key))
        return stored

    async def delete(self, key: ObjectKey) -> None:
        self._before("delete", key)
        self._check_namespace(key)
        if key not in self._objects:
            raise NotFoundError(f"{key} not found", key=key)
        self._delete_with_dependents(key)
        self.mutations.append(("delete", key))

    def _delete_with_dependents(self, key: ObjectKey) -> None:
        del self._objects[key]
        dependents = [
            k
            for k, obj in self._objects.items()
            if any(ref.controller and ref.owns(key) for ref in obj.owner_references)
        ]
        for dependent in dependents:
            if dependent in self._objects:
                self._delete_with_dependents(dependent)

    def _current_for_write(self, key: ObjectKey, expected_version: str) -> Any:
        self._check_namespace(key)
        current = self._objects.get(key)
        if current is None:
            raise NotFoundError(f"{key} not found", key=key)
        if current.resource_version != expected_version:
            raise ConflictError(
                f"{key} was modified: expected version {expected_version}, "
                f"found {current.resource_version}",
                key=key,
            )
        return current

    def _check_namespace(self, key: ObjectKey) -> None:
        if key.namespace is not None and key.namespace not in self._namespaces:
            raise NotFoundError(f"namespace {key.namespace} not found", key=key)

    def _before(self, operation: str, key: ObjectKey) -> None:
        if self.failure_hook is not None:
            self.failure_hook(operation, key)

    def _next_version(self) -> str:
        self._version += 1
        return str(self._version)
