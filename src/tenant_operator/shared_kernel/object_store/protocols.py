"""Object store protocol.

Defines the interface for the store that holds tenants, workspaces and
role bindings, allowing for swappable implementations (cluster API client,
in-memory adapter, mocks in tests).
"""

from __future__ import annotations

from typing import Protocol, TypeVar

from shared_kernel.object_store.types import ObjectKey, OwnerReference


class StoredObject(Protocol):
    """Shape every object persisted through an ObjectStore must have."""

    @property
    def key(self) -> ObjectKey: ...

    @property
    def resource_version(self) -> str: ...

    @property
    def owner_references(self) -> tuple[OwnerReference, ...]: ...


T = TypeVar("T", bound=StoredObject)


class ObjectStore(Protocol):
    """Protocol for object stores.

    Every method is a blocking call from the controller's point of view.
    Implementations never retry internally; failures surface as
    ObjectStoreError subclasses.
    """

    async def get(self, key: ObjectKey) -> StoredObject:
        """Read an object.

        Args:
            key: Address of the object

        Returns:
            The stored object carrying its current resource version

        Raises:
            NotFoundError: If the object or its namespace does not exist
            ObjectStoreError: On any other failure
        """
        ...

    async def create(self, obj: T) -> T:
        """Create an object.

        Args:
            obj: The object to create

        Returns:
            The stored object with its initial resource version

        Raises:
            AlreadyExistsError: If an object with the same key exists
            NotFoundError: If the target namespace does not exist
            ObjectStoreError: On any other failure
        """
        ...

    async def update(self, obj: T, expected_version: str) -> T:
        """Conditionally replace an object's spec.

        Status fields are left as stored.

        Args:
            obj: The object carrying the desired spec
            expected_version: Resource version the caller last read

        Returns:
            The stored object with its new resource version

        Raises:
            ConflictError: If expected_version is stale
            NotFoundError: If the object does not exist
            ObjectStoreError: On any other failure
        """
        ...

    async def update_status(self, obj: T, expected_version: str) -> T:
        """Conditionally replace an object's status sub-resource.

        Spec fields are left as stored.

        Raises:
            ConflictError: If expected_version is stale
            NotFoundError: If the object does not exist
            ObjectStoreError: On any other failure
        """
        ...

    async def delete(self, key: ObjectKey) -> None:
        """Delete an object and garbage-collect the objects it controls.

        Args:
            key: Address of the object

        Raises:
            NotFoundError: If the object or its namespace does not exist
            ObjectStoreError: On any other failure
        """
        ...
