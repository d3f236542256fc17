"""Unit tests for PersonalWorkspaceEngine.

Passes run against the in-memory object store so each test can inspect
what was persisted, in which order, and what a failed pass left behind.
"""

import dataclasses
from unittest.mock import create_autospec

import pytest

from infrastructure.object_store import InMemoryObjectStore
from personal_workspace.application.services import (
    ConvergenceStep,
    PersonalWorkspaceEngine,
)
from personal_workspace.application.status_projector import StatusProjector
from personal_workspace.domain.aggregates import TenantRecord
from personal_workspace.domain.exceptions import PersonalWorkspaceInvariantError
from personal_workspace.domain.resources import PermissionGrant, WorkspaceResource
from personal_workspace.domain.value_objects import (
    BindingStatus,
    SubscriptionEntry,
    WorkspaceQuota,
    WorkspaceRole,
    WorkspaceStatus,
)
from personal_workspace.ports import IPersonalWorkspaceEnforcer
from shared_kernel.object_store import (
    AlreadyExistsError,
    ConflictError,
    NotFoundError,
    ObjectKey,
    OwnerReference,
    ResourceKind,
    StoreUnavailableError,
)

PWS = "personal-john-doe"
WORKSPACE_KEY = ObjectKey(kind=ResourceKind.WORKSPACE, name=PWS)
OTHER = SubscriptionEntry("ws-other", WorkspaceRole.VIEWER)


@pytest.fixture
def engine(store, pws_settings, mock_probe) -> PersonalWorkspaceEngine:
    """Create engine over the in-memory store with a mock probe."""
    return PersonalWorkspaceEngine(store, settings=pws_settings, probe=mock_probe)


@pytest.fixture
def grant_key(tenant_namespace) -> ObjectKey:
    return ObjectKey(
        kind=ResourceKind.ROLE_BINDING,
        name="pws-manage-templates",
        namespace=tenant_namespace,
    )


def _owner(identity: str = "john.doe") -> OwnerReference:
    return OwnerReference(kind=ResourceKind.TENANT, name=identity)


def _seed_workspace(
    store: InMemoryObjectStore, name: str = PWS, owner: str | None = "john.doe"
) -> WorkspaceResource:
    return store.put(
        WorkspaceResource(
            name=name,
            pretty_name="Seeded",
            quota=WorkspaceQuota(cpu="1", memory="1Gi", max_instances=1),
            labels={"test/workspace-type": "personal", "test/target": "unit"},
            owner_references=(_owner(owner),) if owner else (),
        )
    )


def _seed_grant(
    store: InMemoryObjectStore, namespace: str, subject: str = "john.doe"
) -> PermissionGrant:
    return store.put(
        PermissionGrant(
            name="pws-manage-templates",
            namespace=namespace,
            subject=subject,
            role_ref_name="pws-manager",
            labels={"test/target": "unit"},
            owner_references=(_owner(),),
        )
    )


def _stored_tenant(store: InMemoryObjectStore, identity: str = "john.doe") -> TenantRecord:
    return store.peek(ObjectKey(kind=ResourceKind.TENANT, name=identity))


def _assert_enabled(store, tenant_namespace, grant_key, name=PWS, identity="john.doe"):
    stored = _stored_tenant(store, identity)
    assert store.contains(ObjectKey(kind=ResourceKind.WORKSPACE, name=name))
    managers = [
        e for e in stored.subscriptions if e.workspace_name == name and e.is_manager()
    ]
    assert len(managers) == 1
    assert store.contains(grant_key)
    assert stored.workspace_status == WorkspaceStatus(created=True, name=name)
    assert stored.binding_status == BindingStatus(created=True, namespace=tenant_namespace)


def _assert_disabled(store, grant_key, name=PWS, identity="john.doe"):
    stored = _stored_tenant(store, identity)
    assert not store.contains(ObjectKey(kind=ResourceKind.WORKSPACE, name=name))
    assert all(e.workspace_name != name for e in stored.subscriptions)
    assert not store.contains(grant_key)
    assert stored.workspace_status == WorkspaceStatus(created=False, name="")
    assert stored.binding_status == BindingStatus(created=False, namespace="")


async def _disable(store, tenant: TenantRecord, **changes) -> TenantRecord:
    changes.setdefault("wants_personal_workspace", False)
    return await store.update(
        dataclasses.replace(tenant, **changes),
        expected_version=tenant.resource_version,
    )


def test_engine_implements_enforcer_port(engine):
    assert isinstance(engine, IPersonalWorkspaceEnforcer)


@pytest.mark.asyncio
async def test_status_is_written_by_injected_projector(
    store, pws_settings, mock_probe, make_tenant, tenant_namespace
):
    projector = create_autospec(StatusProjector, instance=True)
    projector.project.return_value = "projected"
    engine = PersonalWorkspaceEngine(
        store, settings=pws_settings, probe=mock_probe, status_projector=projector
    )

    result = await engine.enforce_personal_workspace(make_tenant())

    assert result == "projected"
    persisted, desired, name = projector.project.call_args.args
    assert name == PWS
    assert persisted.workspace_status == WorkspaceStatus.disabled()
    assert desired.workspace_status == WorkspaceStatus.enabled(PWS)
    assert desired.resource_version == persisted.resource_version
    assert ("update_status", desired.key) not in store.mutations


class TestEnablePersonalWorkspace:
    """Tests for passes whose desired state is enabled."""

    @pytest.mark.asyncio
    async def test_first_pass_provisions_everything(
        self, engine, store, make_tenant, tenant_namespace
    ):
        """Identity a.b@c gets workspace, subscription, grant and status."""
        tenant = make_tenant(identity="a.b@c", first_name="Ada")
        grant_key = ObjectKey(
            kind=ResourceKind.ROLE_BINDING,
            name="pws-manage-templates",
            namespace=tenant_namespace,
        )

        result = await engine.enforce_personal_workspace(tenant)

        workspace = store.peek(ObjectKey(kind=ResourceKind.WORKSPACE, name="personal-a-b@c"))
        assert workspace.pretty_name == "Ada's Personal Workspace"
        assert workspace.quota == WorkspaceQuota(cpu="2", memory="4Gi", max_instances=2)
        assert workspace.labels == {
            "test/workspace-type": "personal",
            "test/target": "unit",
        }
        assert workspace.controller == _owner("a.b@c")

        grant = store.peek(grant_key)
        assert grant.subject == "a.b@c"
        assert grant.role_ref_name == "pws-manager"
        assert grant.controller == _owner("a.b@c")

        stored = _stored_tenant(store, "a.b@c")
        assert stored.subscriptions == (
            SubscriptionEntry("personal-a-b@c", WorkspaceRole.MANAGER),
        )
        assert stored.workspace_status == WorkspaceStatus(True, "personal-a-b@c")
        assert stored.binding_status == BindingStatus(True, tenant_namespace)
        assert result == stored

    @pytest.mark.asyncio
    async def test_mutations_follow_resource_subscription_grant_status_order(
        self, engine, store, make_tenant, tenant_namespace, grant_key
    ):
        tenant = make_tenant()

        await engine.enforce_personal_workspace(tenant)

        assert store.mutations == [
            ("create", WORKSPACE_KEY),
            ("update", tenant.key),
            ("create", grant_key),
            ("update_status", tenant.key),
        ]

    @pytest.mark.asyncio
    async def test_overwrites_wrong_role_in_place(
        self, engine, store, make_tenant, tenant_namespace, mock_probe
    ):
        last = SubscriptionEntry("ws-last", WorkspaceRole.MANAGER)
        tenant = make_tenant(
            subscriptions=(OTHER, SubscriptionEntry(PWS, WorkspaceRole.VIEWER), last)
        )

        await engine.enforce_personal_workspace(tenant)

        assert _stored_tenant(store).subscriptions == (
            OTHER,
            SubscriptionEntry(PWS, WorkspaceRole.MANAGER),
            last,
        )
        mock_probe.subscription_enforced.assert_called_once_with(
            identity="john.doe", workspace_name=PWS, previous_role="user"
        )

    @pytest.mark.asyncio
    async def test_workspace_created_by_racing_actor_is_success(
        self, store, pws_settings, mock_probe, make_tenant, tenant_namespace, grant_key
    ):
        """An "already exists" answer on create lets the pass carry on."""

        def racing_actor(operation, key):
            if operation == "create" and key == WORKSPACE_KEY:
                _seed_workspace(store)
                raise AlreadyExistsError(f"{key} already exists", key=key)

        store.failure_hook = racing_actor
        engine = PersonalWorkspaceEngine(store, settings=pws_settings, probe=mock_probe)
        tenant = make_tenant()

        await engine.enforce_personal_workspace(tenant)

        _assert_enabled(store, tenant_namespace, grant_key)
        mock_probe.workspace_already_exists.assert_called_once_with(
            identity="john.doe", workspace_name=PWS
        )
        mock_probe.workspace_created.assert_not_called()

    @pytest.mark.asyncio
    async def test_workspace_created_by_racer_for_another_tenant_is_refused(
        self, store, pws_settings, mock_probe, make_tenant, tenant_namespace, grant_key
    ):
        """A racing create is re-read and held to the ownership rule."""

        def racing_actor(operation, key):
            if operation == "create" and key == WORKSPACE_KEY:
                _seed_workspace(store, owner="mallory")
                raise AlreadyExistsError(f"{key} already exists", key=key)

        store.failure_hook = racing_actor
        engine = PersonalWorkspaceEngine(store, settings=pws_settings, probe=mock_probe)
        tenant = make_tenant()

        with pytest.raises(PersonalWorkspaceInvariantError, match="mallory"):
            await engine.enforce_personal_workspace(tenant)

        stored = _stored_tenant(store)
        assert stored.subscriptions == ()
        assert stored.workspace_status == WorkspaceStatus.disabled()
        assert store.mutations == []
        assert not store.contains(grant_key)
        assert store.peek(WORKSPACE_KEY).controller == _owner("mallory")

    @pytest.mark.asyncio
    async def test_unowned_workspace_created_by_racer_is_adopted(
        self, store, pws_settings, mock_probe, make_tenant, tenant_namespace, grant_key
    ):
        def racing_actor(operation, key):
            if operation == "create" and key == WORKSPACE_KEY:
                _seed_workspace(store, owner=None)
                raise AlreadyExistsError(f"{key} already exists", key=key)

        store.failure_hook = racing_actor
        engine = PersonalWorkspaceEngine(store, settings=pws_settings, probe=mock_probe)

        await engine.enforce_personal_workspace(make_tenant())

        _assert_enabled(store, tenant_namespace, grant_key)
        assert store.peek(WORKSPACE_KEY).controller == _owner()
        assert store.mutations[0] == ("update", WORKSPACE_KEY)
        mock_probe.workspace_reconciled.assert_called_once_with(
            identity="john.doe", workspace_name=PWS
        )

    @pytest.mark.asyncio
    async def test_workspace_vanishing_after_racing_create_is_a_conflict(
        self, store, pws_settings, mock_probe, make_tenant, tenant_namespace
    ):
        def racing_actor(operation, key):
            if operation == "create" and key == WORKSPACE_KEY:
                raise AlreadyExistsError(f"{key} already exists", key=key)

        store.failure_hook = racing_actor
        engine = PersonalWorkspaceEngine(store, settings=pws_settings, probe=mock_probe)

        with pytest.raises(ConflictError):
            await engine.enforce_personal_workspace(make_tenant())

        assert store.mutations == []
        assert _stored_tenant(store).workspace_status == WorkspaceStatus.disabled()
        assert mock_probe.convergence_failed.call_args.kwargs["step"] == "workspace"

    @pytest.mark.asyncio
    async def test_reasserts_ownership_of_unowned_workspace(
        self, engine, store, make_tenant, tenant_namespace, mock_probe
    ):
        seeded = _seed_workspace(store, owner=None)
        tenant = make_tenant()

        await engine.enforce_personal_workspace(tenant)

        workspace = store.peek(WORKSPACE_KEY)
        assert workspace.controller == _owner()
        assert workspace.quota == seeded.quota
        mock_probe.workspace_reconciled.assert_called_once()

    @pytest.mark.asyncio
    async def test_workspace_of_another_tenant_is_an_invariant_violation(
        self, engine, store, make_tenant, tenant_namespace
    ):
        _seed_workspace(store, owner="jane.roe")
        tenant = make_tenant()

        with pytest.raises(PersonalWorkspaceInvariantError, match="jane.roe"):
            await engine.enforce_personal_workspace(tenant)

        assert store.mutations == []
        assert store.peek(WORKSPACE_KEY).controller == _owner("jane.roe")

    @pytest.mark.asyncio
    async def test_drifted_grant_is_reconciled(
        self, engine, store, make_tenant, tenant_namespace, grant_key, mock_probe
    ):
        _seed_grant(store, tenant_namespace, subject="mallory")
        tenant = make_tenant()

        await engine.enforce_personal_workspace(tenant)

        assert store.peek(grant_key).subject == "john.doe"

    @pytest.mark.asyncio
    async def test_grant_vanishing_after_racing_create_is_a_conflict(
        self, store, pws_settings, mock_probe, make_tenant, tenant_namespace, grant_key
    ):
        def racing_actor(operation, key):
            if operation == "create" and key == grant_key:
                raise AlreadyExistsError(f"{key} already exists", key=key)

        store.failure_hook = racing_actor
        engine = PersonalWorkspaceEngine(store, settings=pws_settings, probe=mock_probe)
        tenant = make_tenant()

        with pytest.raises(ConflictError) as exc_info:
            await engine.enforce_personal_workspace(tenant)

        assert exc_info.value.key == grant_key
        assert not store.contains(grant_key)
        assert ("update_status", tenant.key) not in store.mutations
        assert _stored_tenant(store).binding_status == BindingStatus.disabled()
        mock_probe.convergence_failed.assert_called_once()
        assert mock_probe.convergence_failed.call_args.kwargs["step"] == "permission_grant"
        assert ("update", grant_key) in store.mutations
        mock_probe.grant_reconciled.assert_called_once_with(
            identity="john.doe",
            namespace=tenant_namespace,
            grant_name="pws-manage-templates",
        )

    @pytest.mark.asyncio
    async def test_grant_created_concurrently_is_reconciled(
        self, store, pws_settings, mock_probe, make_tenant, tenant_namespace, grant_key
    ):
        def racing_actor(operation, key):
            if operation == "create" and key == grant_key:
                _seed_grant(store, tenant_namespace, subject="someone.else")
                raise AlreadyExistsError(f"{key} already exists", key=key)

        store.failure_hook = racing_actor
        engine = PersonalWorkspaceEngine(store, settings=pws_settings, probe=mock_probe)

        await engine.enforce_personal_workspace(make_tenant())

        _assert_enabled(store, tenant_namespace, grant_key)
        assert store.peek(grant_key).subject == "john.doe"

    @pytest.mark.asyncio
    async def test_missing_namespace_aborts_before_status_is_written(
        self, engine, store, make_tenant, mock_probe
    ):
        """A stale precondition surfaces the store error and claims nothing."""
        tenant = make_tenant(namespace_name="tenant-gone")

        with pytest.raises(NotFoundError):
            await engine.enforce_personal_workspace(tenant)

        stored = _stored_tenant(store)
        assert stored.workspace_status == WorkspaceStatus.disabled()
        assert stored.binding_status == BindingStatus.disabled()
        assert store.contains(WORKSPACE_KEY)
        mock_probe.convergence_failed.assert_called_once()
        assert mock_probe.convergence_failed.call_args.kwargs["step"] == "permission_grant"


class TestDisablePersonalWorkspace:
    """Tests for passes whose desired state is disabled."""

    @pytest.mark.asyncio
    async def test_disable_removes_everything(
        self, engine, store, make_tenant, tenant_namespace, grant_key
    ):
        enabled = await engine.enforce_personal_workspace(
            make_tenant(subscriptions=(OTHER,))
        )
        disabled = await _disable(store, enabled)

        result = await engine.enforce_personal_workspace(disabled)

        _assert_disabled(store, grant_key)
        assert _stored_tenant(store).subscriptions == (OTHER,)
        assert result == _stored_tenant(store)

    @pytest.mark.asyncio
    async def test_subscription_is_persisted_before_workspace_deletion(
        self, engine, store, make_tenant, tenant_namespace, grant_key
    ):
        enabled = await engine.enforce_personal_workspace(make_tenant())
        disabled = await _disable(store, enabled)
        store.mutations.clear()

        await engine.enforce_personal_workspace(disabled)

        assert store.mutations == [
            ("update", disabled.key),
            ("update_status", disabled.key),
            ("delete", WORKSPACE_KEY),
            ("delete", grant_key),
        ]

    @pytest.mark.asyncio
    async def test_missing_namespace_never_provisions(
        self, engine, store, make_tenant, mock_probe
    ):
        """The precondition gates creation whatever the tenant wants."""
        tenant = make_tenant(namespace_precondition=False, namespace_name="")

        await engine.enforce_personal_workspace(tenant)

        assert store.mutations == []
        mock_probe.precondition_not_met.assert_called_once_with(identity="john.doe")
        mock_probe.convergence_completed.assert_called_once_with(
            identity="john.doe", enabled=False
        )

    @pytest.mark.asyncio
    async def test_lost_precondition_tears_down(
        self, engine, store, make_tenant, tenant_namespace, grant_key
    ):
        enabled = await engine.enforce_personal_workspace(make_tenant())
        lost = await _disable(
            store, enabled, wants_personal_workspace=True, namespace_precondition=False
        )

        await engine.enforce_personal_workspace(lost)

        _assert_disabled(store, grant_key)

    @pytest.mark.asyncio
    async def test_deleted_namespace_makes_grant_deletion_vacuous(
        self, engine, store, make_tenant, tenant_namespace, grant_key
    ):
        enabled = await engine.enforce_personal_workspace(make_tenant())
        store.remove_namespace(tenant_namespace)
        disabled = await _disable(store, enabled, namespace_precondition=False)

        await engine.enforce_personal_workspace(disabled)

        _assert_disabled(store, grant_key)

    @pytest.mark.asyncio
    async def test_transient_failure_aborts_remaining_steps(
        self, engine, store, make_tenant, tenant_namespace, grant_key, mock_probe
    ):
        enabled = await engine.enforce_personal_workspace(make_tenant())
        disabled = await _disable(store, enabled)
        outage = StoreUnavailableError("store timed out")

        def fail_workspace_delete(operation, key):
            if operation == "delete" and key == WORKSPACE_KEY:
                raise outage

        store.failure_hook = fail_workspace_delete

        with pytest.raises(StoreUnavailableError) as exc_info:
            await engine.enforce_personal_workspace(disabled)

        assert exc_info.value is outage
        assert store.contains(WORKSPACE_KEY)
        assert store.contains(grant_key)
        assert _stored_tenant(store).workspace_status == WorkspaceStatus.disabled()
        mock_probe.convergence_failed.assert_called_once_with(
            identity="john.doe",
            workspace_name=PWS,
            step=ConvergenceStep.WORKSPACE.value,
            error="store timed out",
        )

    @pytest.mark.asyncio
    async def test_refuses_to_delete_workspace_of_another_tenant(
        self, engine, store, make_tenant
    ):
        _seed_workspace(store, owner="jane.roe")
        tenant = make_tenant(wants_personal_workspace=False)

        with pytest.raises(PersonalWorkspaceInvariantError):
            await engine.enforce_personal_workspace(tenant)

        assert store.contains(WORKSPACE_KEY)


class TestConcurrentTenantUpdate:
    """A conflicting write aborts the pass without overwriting anything."""

    @pytest.mark.asyncio
    async def test_conflict_on_subscription_update_aborts(
        self, engine, store, make_tenant, tenant_namespace, grant_key, mock_probe
    ):
        tenant = make_tenant(subscriptions=(OTHER,))
        concurrent = await store.update(
            dataclasses.replace(tenant, first_name="Johnny"),
            expected_version=tenant.resource_version,
        )
        store.mutations.clear()

        with pytest.raises(ConflictError):
            await engine.enforce_personal_workspace(tenant)

        stored = _stored_tenant(store)
        assert stored == concurrent
        assert stored.workspace_status == WorkspaceStatus.disabled()
        assert store.mutations == [("create", WORKSPACE_KEY)]
        assert not store.contains(grant_key)
        assert mock_probe.convergence_failed.call_args.kwargs["step"] == "subscription"

    @pytest.mark.asyncio
    async def test_rerun_after_conflict_converges(
        self, engine, store, make_tenant, tenant_namespace, grant_key
    ):
        tenant = make_tenant()
        fresh = await store.update(
            dataclasses.replace(tenant, first_name="Johnny"),
            expected_version=tenant.resource_version,
        )
        with pytest.raises(ConflictError):
            await engine.enforce_personal_workspace(tenant)

        await engine.enforce_personal_workspace(fresh)

        _assert_enabled(store, tenant_namespace, grant_key)
        assert _stored_tenant(store).first_name == "Johnny"


class TestIdempotence:
    """A second pass without external change writes nothing."""

    @pytest.mark.asyncio
    async def test_enabled_pass_is_idempotent(
        self, engine, store, make_tenant, tenant_namespace
    ):
        first = await engine.enforce_personal_workspace(make_tenant())
        store.mutations.clear()

        second = await engine.enforce_personal_workspace(first)

        assert store.mutations == []
        assert second == first

    @pytest.mark.asyncio
    async def test_disabled_pass_is_idempotent(
        self, engine, store, make_tenant, tenant_namespace
    ):
        enabled = await engine.enforce_personal_workspace(make_tenant())
        first = await engine.enforce_personal_workspace(await _disable(store, enabled))
        store.mutations.clear()

        second = await engine.enforce_personal_workspace(first)

        assert store.mutations == []
        assert second == first


class TestSinglePassConvergence:
    """Any starting state converges in one cooperative pass."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("enabled", [True, False])
    @pytest.mark.parametrize("workspace_present", [True, False])
    @pytest.mark.parametrize(
        "role", [None, WorkspaceRole.NONE, WorkspaceRole.VIEWER, WorkspaceRole.MANAGER]
    )
    @pytest.mark.parametrize("grant_present", [True, False])
    async def test_reaches_invariant(
        self,
        engine,
        store,
        make_tenant,
        tenant_namespace,
        grant_key,
        enabled,
        workspace_present,
        role,
        grant_present,
    ):
        subscriptions = (OTHER,) if role is None else (OTHER, SubscriptionEntry(PWS, role))
        if workspace_present:
            _seed_workspace(store)
        if grant_present:
            _seed_grant(store, tenant_namespace)
        tenant = make_tenant(
            wants_personal_workspace=enabled,
            subscriptions=subscriptions,
            workspace_status=(
                WorkspaceStatus.enabled(PWS)
                if workspace_present
                else WorkspaceStatus.disabled()
            ),
        )

        await engine.enforce_personal_workspace(tenant)

        if enabled:
            _assert_enabled(store, tenant_namespace, grant_key)
        else:
            _assert_disabled(store, grant_key)
        assert _stored_tenant(store).subscriptions[0] == OTHER


class TestStatusNeverLeads:
    """Stored status never claims a workspace the store does not hold."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("failing_operation", ["create", "update", "delete", None])
    async def test_status_lags_through_enable_and_disable(
        self,
        store,
        pws_settings,
        mock_probe,
        make_tenant,
        tenant_namespace,
        failing_operation,
    ):
        violations = []
        calls = {"count": 0}

        def observe(operation, key):
            stored = store.peek(ObjectKey(kind=ResourceKind.TENANT, name="john.doe"))
            if stored.workspace_status.created and not store.contains(WORKSPACE_KEY):
                violations.append((operation, key))
            calls["count"] += 1
            if operation == failing_operation and calls["count"] % 2 == 0:
                raise StoreUnavailableError(f"injected failure on {operation}")

        engine = PersonalWorkspaceEngine(store, settings=pws_settings, probe=mock_probe)
        make_tenant()
        store.failure_hook = observe

        for wants in (True, False, True, False):
            for _ in range(4):
                tenant = store.put(
                    dataclasses.replace(
                        _stored_tenant(store), wants_personal_workspace=wants
                    )
                )
                try:
                    await engine.enforce_personal_workspace(tenant)
                except StoreUnavailableError:
                    continue
                break

        assert violations == []
        stored = _stored_tenant(store)
        if stored.workspace_status.created:
            assert store.contains(WORKSPACE_KEY)


class TestCleanupPersonalWorkspace:
    """Tests for the tenant-deletion cleanup."""

    @pytest.mark.asyncio
    async def test_removes_workspace_and_grant(
        self, engine, store, make_tenant, tenant_namespace, grant_key, mock_probe
    ):
        await engine.enforce_personal_workspace(make_tenant())
        store.mutations.clear()

        await engine.cleanup_personal_workspace("john.doe", tenant_namespace)

        assert not store.contains(WORKSPACE_KEY)
        assert not store.contains(grant_key)
        assert store.mutations == [("delete", WORKSPACE_KEY), ("delete", grant_key)]
        mock_probe.workspace_deleted.assert_called_once_with(
            identity="john.doe", workspace_name=PWS
        )

    @pytest.mark.asyncio
    async def test_nothing_left_is_success(self, engine, store):
        await engine.cleanup_personal_workspace("john.doe", "tenant-gone")

        assert store.mutations == []

    @pytest.mark.asyncio
    async def test_without_namespace_only_workspace_is_removed(self, engine, store):
        _seed_workspace(store)

        await engine.cleanup_personal_workspace("john.doe")

        assert store.mutations == [("delete", WORKSPACE_KEY)]
