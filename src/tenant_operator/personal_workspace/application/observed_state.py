"""Observed-state reader for personal workspace convergence.

Queries the object store for what currently exists. A "not found" answer
is an observation of absence and is returned as data; every other store
failure propagates unchanged so the caller can retry the pass.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import cast

from personal_workspace.domain.resources import PermissionGrant, WorkspaceResource
from personal_workspace.domain.subscriptions import find_subscription
from personal_workspace.domain.value_objects import SubscriptionEntry, WorkspaceRole
from shared_kernel.object_store import (
    NotFoundError,
    ObjectKey,
    ObjectStore,
    ResourceKind,
)


class ObservedStateReader:
    """Reads the current state of a tenant's personal workspace resources."""

    def __init__(self, store: ObjectStore, grant_name: str):
        """Initialize the reader.

        Args:
            store: Object store to query
            grant_name: Fixed name of the permission grant in tenant namespaces
        """
        self._store = store
        self._grant_name = grant_name

    async def get_workspace(self, name: str) -> WorkspaceResource | None:
        """Return the workspace with the given name, or None if absent."""
        key = ObjectKey(kind=ResourceKind.WORKSPACE, name=name)
        try:
            return cast(WorkspaceResource, await self._store.get(key))
        except NotFoundError:
            return None

    async def exists(self, name: str) -> bool:
        """Check whether the workspace with the given name exists."""
        return await self.get_workspace(name) is not None

    async def get_grant(self, namespace: str) -> PermissionGrant | None:
        """Return the permission grant in a namespace, or None if absent.

        A namespace that does not exist holds no grant.
        """
        key = ObjectKey(
            kind=ResourceKind.ROLE_BINDING, name=self._grant_name, namespace=namespace
        )
        try:
            return cast(PermissionGrant, await self._store.get(key))
        except NotFoundError:
            return None

    @staticmethod
    def current_role(
        subscriptions: Sequence[SubscriptionEntry], name: str
    ) -> tuple[int, WorkspaceRole]:
        """Return the index and role of the subscription to ``name``.

        The index is ``NOT_FOUND`` when the tenant is not subscribed.
        """
        return find_subscription(subscriptions, name)
