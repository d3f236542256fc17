"""Unit test fixtures with in-memory and mocked dependencies."""

from unittest.mock import create_autospec

import pytest

from infrastructure.object_store import InMemoryObjectStore
from infrastructure.settings import PersonalWorkspaceSettings
from personal_workspace.application.observability import PersonalWorkspaceProbe
from personal_workspace.domain.aggregates import TenantRecord

TENANT_NAMESPACE = "tenant-john-doe"


@pytest.fixture
def pws_settings() -> PersonalWorkspaceSettings:
    """Provide personal workspace settings with explicit test values."""
    return PersonalWorkspaceSettings(
        name_prefix="personal-",
        default_cpu="2",
        default_memory="4Gi",
        default_instances=2,
        grant_name="pws-manage-templates",
        grant_cluster_role="pws-manager",
        type_label_key="test/workspace-type",
        target_label_key="test/target",
        target_label_value="unit",
    )


@pytest.fixture
def store() -> InMemoryObjectStore:
    """Provide an empty in-memory object store."""
    return InMemoryObjectStore()


@pytest.fixture
def mock_probe():
    """Create mock personal workspace probe."""
    return create_autospec(PersonalWorkspaceProbe, instance=True)


@pytest.fixture
def tenant_namespace(store: InMemoryObjectStore) -> str:
    """Create the tenant's private namespace in the store."""
    store.add_namespace(TENANT_NAMESPACE)
    return TENANT_NAMESPACE


@pytest.fixture
def make_tenant(store: InMemoryObjectStore):
    """Factory seeding a tenant record into the store and returning it."""

    def _make(**overrides) -> TenantRecord:
        values = {
            "identity": "john.doe",
            "first_name": "John",
            "wants_personal_workspace": True,
            "namespace_precondition": True,
            "namespace_name": TENANT_NAMESPACE,
        }
        values.update(overrides)
        return store.put(TenantRecord(**values))

    return _make
