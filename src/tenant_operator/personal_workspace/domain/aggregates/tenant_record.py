"""Tenant record aggregate for the personal workspace context."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import ClassVar

from personal_workspace.domain.exceptions import PersonalWorkspaceInvariantError
from personal_workspace.domain.naming import is_valid_identity
from personal_workspace.domain.subscriptions import NOT_FOUND, find_subscription
from personal_workspace.domain.value_objects import (
    BindingStatus,
    SubscriptionEntry,
    WorkspaceRole,
    WorkspaceStatus,
)
from shared_kernel.object_store import ObjectKey, OwnerReference, ResourceKind


@dataclass(frozen=True)
class TenantRecord:
    """Tenant record as seen by the personal workspace controller.

    The record is immutable: every transition returns a new record, so a
    reconciliation pass threads explicit values from one step to the next
    and each step's before/after state can be compared.

    Business rules:
    - The identity is non-empty and belongs to the identity character set
    - A workspace appears at most once in the subscription list
    - A met namespace precondition names the tenant namespace
    - Transitions touch only the entry they target, keeping the relative
      order of every other subscription

    Spec and status are separate sub-resources; ``STATUS_FIELDS`` names the
    fields a store persists through its status endpoint.
    """

    STATUS_FIELDS: ClassVar[frozenset[str]] = frozenset(
        {"workspace_status", "binding_status"}
    )

    identity: str
    wants_personal_workspace: bool = False
    namespace_precondition: bool = False
    namespace_name: str = ""
    first_name: str = ""
    subscriptions: tuple[SubscriptionEntry, ...] = ()
    workspace_status: WorkspaceStatus = field(default_factory=WorkspaceStatus)
    binding_status: BindingStatus = field(default_factory=BindingStatus)
    resource_version: str = ""

    def __post_init__(self) -> None:
        """Validate business rules after initialization."""
        if not self.identity or not is_valid_identity(self.identity):
            raise PersonalWorkspaceInvariantError(
                f"Invalid tenant identity: {self.identity!r}"
            )
        if self.namespace_precondition and not self.namespace_name:
            raise PersonalWorkspaceInvariantError(
                f"Tenant {self.identity} has its namespace precondition met "
                f"but no namespace name"
            )
        seen: set[str] = set()
        for entry in self.subscriptions:
            if entry.workspace_name in seen:
                raise PersonalWorkspaceInvariantError(
                    f"Tenant {self.identity} is subscribed to "
                    f"{entry.workspace_name} more than once"
                )
            seen.add(entry.workspace_name)

    @classmethod
    def stand_in(cls, identity: str, namespace_name: str = "") -> TenantRecord:
        """Build the minimal record used to clean up after a deleted tenant.

        Args:
            identity: Identity of the tenant being removed
            namespace_name: The tenant's private namespace, if known

        Returns:
            A record with no subscriptions, status or version
        """
        return cls(identity=identity, namespace_name=namespace_name)

    @property
    def key(self) -> ObjectKey:
        """Store address of this record."""
        return ObjectKey(kind=ResourceKind.TENANT, name=self.identity)

    @property
    def owner_references(self) -> tuple[OwnerReference, ...]:
        """Tenants are top-level objects without owners."""
        return ()

    def as_owner(self) -> OwnerReference:
        """Controller reference making this tenant own a dependent object."""
        return OwnerReference(kind=ResourceKind.TENANT, name=self.identity)

    def subscription_role(self, workspace_name: str) -> tuple[int, WorkspaceRole]:
        """Return the index and role of a subscription (NOT_FOUND if absent)."""
        return find_subscription(self.subscriptions, workspace_name)

    def with_manager_subscription(self, workspace_name: str) -> TenantRecord:
        """Ensure the tenant manages the given workspace.

        Appends a manager entry when absent and overwrites the role in place
        when it differs. Returns ``self`` when nothing changes.
        """
        index, role = self.subscription_role(workspace_name)
        manager = SubscriptionEntry(workspace_name, WorkspaceRole.MANAGER)
        if index == NOT_FOUND:
            return replace(self, subscriptions=(*self.subscriptions, manager))
        if role == WorkspaceRole.MANAGER:
            return self
        subscriptions = list(self.subscriptions)
        subscriptions[index] = manager
        return replace(self, subscriptions=tuple(subscriptions))

    def without_subscription(self, workspace_name: str) -> TenantRecord:
        """Drop the subscription to the given workspace, if any."""
        index, _ = self.subscription_role(workspace_name)
        if index == NOT_FOUND:
            return self
        return replace(
            self,
            subscriptions=self.subscriptions[:index] + self.subscriptions[index + 1 :],
        )

    def with_workspace_status(self, status: WorkspaceStatus) -> TenantRecord:
        """Replace the workspace status mirror."""
        if status == self.workspace_status:
            return self
        return replace(self, workspace_status=status)

    def with_binding_status(self, status: BindingStatus) -> TenantRecord:
        """Replace the permission grant status mirror."""
        if status == self.binding_status:
            return self
        return replace(self, binding_status=status)

    def with_version(self, resource_version: str) -> TenantRecord:
        """Return the record stamped with a new resource version."""
        return replace(self, resource_version=resource_version)

    def same_status_as(self, other: TenantRecord) -> bool:
        """Check whether both records carry identical status mirrors."""
        return (
            self.workspace_status == other.workspace_status
            and self.binding_status == other.binding_status
        )
