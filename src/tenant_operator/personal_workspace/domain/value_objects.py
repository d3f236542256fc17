"""Value objects for the personal workspace domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for subscriptions, status mirrors and quotas.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class WorkspaceRole(StrEnum):
    """Role of a tenant inside a workspace it is subscribed to."""

    NONE = ""
    VIEWER = "user"
    MANAGER = "manager"


@dataclass(frozen=True)
class SubscriptionEntry:
    """A tenant's subscription to a workspace with a given role."""

    workspace_name: str
    role: WorkspaceRole

    def is_manager(self) -> bool:
        """Check if this subscription grants the manager role."""
        return self.role == WorkspaceRole.MANAGER


@dataclass(frozen=True)
class WorkspaceStatus:
    """Status mirror of the personal workspace.

    ``created`` is only ever true once the workspace exists in the store,
    and ``name`` then carries its derived name.
    """

    created: bool = False
    name: str = ""

    @classmethod
    def enabled(cls, name: str) -> WorkspaceStatus:
        """Status of a workspace that exists under the given name."""
        return cls(created=True, name=name)

    @classmethod
    def disabled(cls) -> WorkspaceStatus:
        """Status of an absent workspace."""
        return cls()


@dataclass(frozen=True)
class BindingStatus:
    """Status mirror of the permission grant in the tenant namespace."""

    created: bool = False
    namespace: str = ""

    @classmethod
    def enabled(cls, namespace: str) -> BindingStatus:
        """Status of a grant that exists in the given namespace."""
        return cls(created=True, namespace=namespace)

    @classmethod
    def disabled(cls) -> BindingStatus:
        """Status of an absent grant."""
        return cls()


@dataclass(frozen=True)
class WorkspaceQuota:
    """Resource allocation of a workspace.

    ``cpu`` and ``memory`` are quantity strings (e.g. "2", "4Gi").
    """

    cpu: str
    memory: str
    max_instances: int


@dataclass(frozen=True)
class DesiredState:
    """Target state of a tenant's personal workspace.

    A single flag gates every create/delete decision of a pass.
    """

    enabled: bool
