"""Projection of tenant status mirrors to the object store."""

from __future__ import annotations

from personal_workspace.application.observability import (
    DefaultStatusProjectorProbe,
    StatusProjectorProbe,
)
from personal_workspace.domain.aggregates import TenantRecord
from personal_workspace.domain.exceptions import PersonalWorkspaceInvariantError
from personal_workspace.domain.value_objects import BindingStatus, WorkspaceStatus
from shared_kernel.object_store import ObjectStore


class StatusProjector:
    """Writes a tenant's status sub-resource, separately from its spec.

    The write is conditional on the record's resource version, so a tenant
    modified concurrently makes the projection fail with ConflictError
    instead of overwriting the newer record.
    """

    def __init__(self, store: ObjectStore, probe: StatusProjectorProbe | None = None):
        self._store = store
        self._probe = probe or DefaultStatusProjectorProbe()

    async def project(
        self,
        persisted: TenantRecord,
        desired: TenantRecord,
        workspace_name: str,
    ) -> TenantRecord:
        """Persist the status mirrors of ``desired`` if they changed.

        Args:
            persisted: The record as last read from or written to the store
            desired: The record carrying the status computed by the pass
            workspace_name: The tenant's derived personal workspace name

        Returns:
            The stored record, or ``desired`` when no write was needed

        Raises:
            PersonalWorkspaceInvariantError: If the status would name a
                workspace other than the derived one
            ConflictError: If the tenant changed since it was read
            ObjectStoreError: On any other store failure
        """
        self._check_invariants(desired, workspace_name)

        if desired.same_status_as(persisted):
            self._probe.status_unchanged(identity=desired.identity)
            return desired

        stored = await self._store.update_status(
            desired, expected_version=desired.resource_version
        )
        self._probe.status_projected(
            identity=desired.identity,
            workspace_created=desired.workspace_status.created,
            workspace_name=desired.workspace_status.name,
            binding_created=desired.binding_status.created,
            binding_namespace=desired.binding_status.namespace,
        )
        return stored

    @staticmethod
    def _check_invariants(tenant: TenantRecord, workspace_name: str) -> None:
        workspace = tenant.workspace_status
        if workspace.created and workspace.name != workspace_name:
            raise PersonalWorkspaceInvariantError(
                f"Status of tenant {tenant.identity} names workspace "
                f"{workspace.name!r} instead of {workspace_name!r}"
            )
        if not workspace.created and workspace != WorkspaceStatus.disabled():
            raise PersonalWorkspaceInvariantError(
                f"Status of tenant {tenant.identity} keeps name "
                f"{workspace.name!r} for a workspace that is not created"
            )
        binding = tenant.binding_status
        if not binding.created and binding != BindingStatus.disabled():
            raise PersonalWorkspaceInvariantError(
                f"Status of tenant {tenant.identity} keeps namespace "
                f"{binding.namespace!r} for a grant that is not created"
            )
