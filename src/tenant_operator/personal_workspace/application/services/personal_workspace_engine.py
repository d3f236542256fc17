"""Personal workspace convergence engine.

Drives a tenant's personal workspace, its subscription entry and its
permission grant towards the state resolved from the tenant's intent.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from enum import StrEnum

from infrastructure.settings import (
    PersonalWorkspaceSettings,
    get_personal_workspace_settings,
)
from personal_workspace.application.observability import (
    DefaultPersonalWorkspaceProbe,
    PersonalWorkspaceProbe,
)
from personal_workspace.application.observed_state import ObservedStateReader
from personal_workspace.application.status_projector import StatusProjector
from personal_workspace.domain.aggregates import TenantRecord
from personal_workspace.domain.desired_state import resolve_desired_state
from personal_workspace.domain.exceptions import PersonalWorkspaceInvariantError
from personal_workspace.domain.naming import derive_personal_workspace_name
from personal_workspace.domain.resources import (
    PermissionGrant,
    WorkspaceResource,
    personal_workspace_labels,
    personal_workspace_pretty_name,
)
from personal_workspace.domain.value_objects import (
    BindingStatus,
    WorkspaceQuota,
    WorkspaceStatus,
)
from shared_kernel.object_store import (
    AlreadyExistsError,
    ConflictError,
    NotFoundError,
    ObjectStore,
    ObjectStoreError,
)


class ConvergenceStep(StrEnum):
    """Steps of a convergence pass, reported when a pass aborts."""

    WORKSPACE = "workspace"
    SUBSCRIPTION = "subscription"
    GRANT = "permission_grant"
    STATUS = "status"


class PersonalWorkspaceEngine:
    """Application service converging one tenant's personal workspace.

    A pass is a strictly ordered sequence of store operations. When
    enabled it ensures the workspace before the manager subscription and
    the permission grant, and projects status last. When disabled it drops
    the subscription and lowers the status before deleting anything. Each
    mutation is preceded by a read, so a pass over already-converged state
    writes nothing.

    "Not found" on reads and deletes and "already exists" on creates are
    resolved here. Any other store error aborts the pass at once and is
    re-raised unchanged; retries belong to whoever schedules passes. Passes
    for the same tenant must not run concurrently.
    """

    def __init__(
        self,
        store: ObjectStore,
        settings: PersonalWorkspaceSettings | None = None,
        probe: PersonalWorkspaceProbe | None = None,
        status_projector: StatusProjector | None = None,
    ):
        """Initialize the engine with its collaborators.

        Args:
            store: Object store holding tenants, workspaces and grants
            settings: Provisioning settings (defaults to the cached settings)
            probe: Optional domain probe for observability
            status_projector: Optional projector (defaults to one over ``store``)
        """
        self._store = store
        self._settings = settings or get_personal_workspace_settings()
        self._probe = probe or DefaultPersonalWorkspaceProbe()
        self._reader = ObservedStateReader(store, grant_name=self._settings.grant_name)
        self._status_projector = status_projector or StatusProjector(store)

    def workspace_name(self, identity: str) -> str:
        """Derive the personal workspace name of a tenant identity."""
        return derive_personal_workspace_name(
            identity, prefix=self._settings.name_prefix
        )

    async def enforce_personal_workspace(self, tenant: TenantRecord) -> TenantRecord:
        """Run one convergence pass for a tenant.

        Args:
            tenant: The tenant record as last read from the store

        Returns:
            The tenant record after the pass, carrying the latest persisted
            resource version

        Raises:
            ConflictError: If the tenant was modified concurrently
            PersonalWorkspaceInvariantError: On a name collision or corrupted
                subscription list
            ObjectStoreError: On any other store failure
        """
        name = self.workspace_name(tenant.identity)
        desired = resolve_desired_state(
            tenant.wants_personal_workspace, tenant.namespace_precondition
        )

        if desired.enabled:
            converged = await self._converge_enabled(tenant, name)
        else:
            if tenant.wants_personal_workspace:
                self._probe.precondition_not_met(identity=tenant.identity)
            converged = await self._converge_disabled(tenant, name)

        self._probe.convergence_completed(
            identity=tenant.identity, enabled=desired.enabled
        )
        return converged

    async def cleanup_personal_workspace(
        self, identity: str, namespace_name: str = ""
    ) -> None:
        """Remove the personal workspace and grant of a tenant being deleted.

        There is no live record to update, so only the deletions run,
        against a stand-in record holding the identity.

        Args:
            identity: Identity of the tenant being deleted
            namespace_name: The tenant's private namespace, if known

        Raises:
            PersonalWorkspaceInvariantError: If the derived workspace belongs
                to another tenant
            ObjectStoreError: On any store failure other than absence
        """
        tenant = TenantRecord.stand_in(identity, namespace_name)
        name = self.workspace_name(identity)
        with self._step(tenant, name, ConvergenceStep.WORKSPACE):
            await self._delete_workspace(tenant, name)
        with self._step(tenant, name, ConvergenceStep.GRANT):
            await self._delete_grant(tenant)

    async def _converge_enabled(
        self, tenant: TenantRecord, name: str
    ) -> TenantRecord:
        persisted = tenant

        with self._step(tenant, name, ConvergenceStep.WORKSPACE):
            await self._ensure_workspace(tenant, name)
        tenant = tenant.with_workspace_status(WorkspaceStatus.enabled(name))

        with self._step(tenant, name, ConvergenceStep.SUBSCRIPTION):
            tenant, persisted = await self._ensure_subscription(tenant, persisted, name)

        with self._step(tenant, name, ConvergenceStep.GRANT):
            await self._ensure_grant(tenant)
        binding = BindingStatus.enabled(tenant.namespace_name)
        tenant = tenant.with_binding_status(binding)

        with self._step(tenant, name, ConvergenceStep.STATUS):
            return await self._status_projector.project(persisted, tenant, name)

    async def _converge_disabled(
        self, tenant: TenantRecord, name: str
    ) -> TenantRecord:
        persisted = tenant

        # The subscription goes first: collaborators reacting to workspace
        # deletion must not see a subscription to a deleted workspace.
        with self._step(tenant, name, ConvergenceStep.SUBSCRIPTION):
            tenant, persisted = await self._remove_subscription(tenant, persisted, name)

        # Status is lowered before the resources disappear so it never over-claims.
        tenant = tenant.with_workspace_status(WorkspaceStatus.disabled())
        tenant = tenant.with_binding_status(BindingStatus.disabled())
        with self._step(tenant, name, ConvergenceStep.STATUS):
            tenant = await self._status_projector.project(persisted, tenant, name)

        with self._step(tenant, name, ConvergenceStep.WORKSPACE):
            await self._delete_workspace(tenant, name)
        with self._step(tenant, name, ConvergenceStep.GRANT):
            await self._delete_grant(tenant)
        return tenant

    @contextmanager
    def _step(
        self, tenant: TenantRecord, name: str, step: ConvergenceStep
    ) -> Iterator[None]:
        """Report a store failure aborting the given step, then re-raise it."""
        try:
            yield
        except ObjectStoreError as e:
            self._probe.convergence_failed(
                identity=tenant.identity,
                workspace_name=name,
                step=step.value,
                error=str(e),
            )
            raise

    async def _ensure_workspace(self, tenant: TenantRecord, name: str) -> None:
        owner = tenant.as_owner()
        labels = self._workspace_labels()
        existing = await self._reader.get_workspace(name)

        if existing is None:
            desired = self._build_workspace(tenant, name)
            try:
                await self._store.create(desired)
            except AlreadyExistsError:
                self._probe.workspace_already_exists(
                    identity=tenant.identity, workspace_name=name
                )
                existing = await self._reader.get_workspace(name)
                if existing is None:
                    raise ConflictError(
                        f"Workspace {desired.key} was deleted while being created",
                        key=desired.key,
                    ) from None
            else:
                self._probe.workspace_created(
                    identity=tenant.identity, workspace_name=name
                )
                return

        self._check_ownership(tenant, existing)
        if existing.needs_reconcile(owner, labels):
            await self._store.update(
                existing.reconciled(owner, labels),
                expected_version=existing.resource_version,
            )
            self._probe.workspace_reconciled(
                identity=tenant.identity, workspace_name=name
            )

    async def _ensure_subscription(
        self, tenant: TenantRecord, persisted: TenantRecord, name: str
    ) -> tuple[TenantRecord, TenantRecord]:
        _, previous_role = self._reader.current_role(tenant.subscriptions, name)
        updated = tenant.with_manager_subscription(name)
        if updated is tenant:
            return tenant, persisted

        stored = await self._store.update(
            updated, expected_version=updated.resource_version
        )
        self._probe.subscription_enforced(
            identity=tenant.identity,
            workspace_name=name,
            previous_role=previous_role.value,
        )
        return updated.with_version(stored.resource_version), stored

    async def _remove_subscription(
        self, tenant: TenantRecord, persisted: TenantRecord, name: str
    ) -> tuple[TenantRecord, TenantRecord]:
        updated = tenant.without_subscription(name)
        if updated is tenant:
            return tenant, persisted

        stored = await self._store.update(
            updated, expected_version=updated.resource_version
        )
        self._probe.subscription_removed(identity=tenant.identity, workspace_name=name)
        return updated.with_version(stored.resource_version), stored

    async def _ensure_grant(self, tenant: TenantRecord) -> None:
        desired = self._build_grant(tenant)
        existing = await self._reader.get_grant(tenant.namespace_name)

        if existing is None:
            try:
                await self._store.create(desired)
            except AlreadyExistsError:
                existing = await self._reader.get_grant(tenant.namespace_name)
                if existing is None:
                    raise ConflictError(
                        f"Permission grant {desired.key} was deleted while "
                        f"being created",
                        key=desired.key,
                    ) from None
            else:
                self._probe.grant_created(
                    identity=tenant.identity,
                    namespace=desired.namespace,
                    grant_name=desired.name,
                )
                return

        if not existing.matches(desired):
            await self._store.update(
                existing.reconciled(desired),
                expected_version=existing.resource_version,
            )
            self._probe.grant_reconciled(
                identity=tenant.identity,
                namespace=desired.namespace,
                grant_name=desired.name,
            )

    async def _delete_workspace(self, tenant: TenantRecord, name: str) -> None:
        existing = await self._reader.get_workspace(name)
        if existing is None:
            return

        self._check_ownership(tenant, existing)
        try:
            await self._store.delete(existing.key)
        except NotFoundError:
            return
        self._probe.workspace_deleted(identity=tenant.identity, workspace_name=name)

    async def _delete_grant(self, tenant: TenantRecord) -> None:
        if not tenant.namespace_name:
            return
        existing = await self._reader.get_grant(tenant.namespace_name)
        if existing is None:
            return

        try:
            await self._store.delete(existing.key)
        except NotFoundError:
            return
        self._probe.grant_deleted(
            identity=tenant.identity,
            namespace=existing.namespace,
            grant_name=existing.name,
        )

    @staticmethod
    def _check_ownership(tenant: TenantRecord, workspace: WorkspaceResource) -> None:
        controller = workspace.controller
        if controller is not None and controller != tenant.as_owner():
            raise PersonalWorkspaceInvariantError(
                f"Workspace {workspace.name} derived for tenant {tenant.identity} "
                f"is controlled by {controller.kind.value} {controller.name}"
            )

    def _workspace_labels(self) -> dict[str, str]:
        return personal_workspace_labels(
            type_label_key=self._settings.type_label_key,
            target_label_key=self._settings.target_label_key,
            target_label_value=self._settings.target_label_value,
        )

    def _build_workspace(self, tenant: TenantRecord, name: str) -> WorkspaceResource:
        return WorkspaceResource(
            name=name,
            pretty_name=personal_workspace_pretty_name(
                tenant.first_name, tenant.identity
            ),
            quota=WorkspaceQuota(
                cpu=self._settings.default_cpu,
                memory=self._settings.default_memory,
                max_instances=self._settings.default_instances,
            ),
            labels=self._workspace_labels(),
            owner_references=(tenant.as_owner(),),
        )

    def _build_grant(self, tenant: TenantRecord) -> PermissionGrant:
        return PermissionGrant(
            name=self._settings.grant_name,
            namespace=tenant.namespace_name,
            subject=tenant.identity,
            role_ref_name=self._settings.grant_cluster_role,
            labels={self._settings.target_label_key: self._settings.target_label_value},
            owner_references=(tenant.as_owner(),),
        )
