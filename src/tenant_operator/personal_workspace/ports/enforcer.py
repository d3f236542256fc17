"""Invocation surface offered to the generic tenant reconciler."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from personal_workspace.domain.aggregates import TenantRecord


@runtime_checkable
class IPersonalWorkspaceEnforcer(Protocol):
    """Entry points the tenant reconciler calls once per reconciliation pass.

    The reconciler calls ``enforce_personal_workspace`` once the tenant's
    private-namespace precondition is known, and
    ``cleanup_personal_workspace`` when the tenant record is being deleted.
    On error it re-reads the tenant and schedules another pass with its own
    backoff; implementations never retry or wait.
    """

    async def enforce_personal_workspace(self, tenant: TenantRecord) -> TenantRecord:
        """Converge the personal workspace of a tenant.

        Args:
            tenant: The tenant record as last read from the store

        Returns:
            The tenant record after the pass

        Raises:
            ObjectStoreError: On a retryable store failure
            PersonalWorkspaceInvariantError: On a logic defect
        """
        ...

    async def cleanup_personal_workspace(
        self, identity: str, namespace_name: str = ""
    ) -> None:
        """Remove the personal workspace resources of a deleted tenant."""
        ...
