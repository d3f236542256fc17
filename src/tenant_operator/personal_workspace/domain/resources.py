"""Store resources managed on behalf of a tenant's personal workspace."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace

from personal_workspace.domain.value_objects import WorkspaceQuota
from shared_kernel.object_store import ObjectKey, OwnerReference, ResourceKind

PERSONAL_WORKSPACE_TYPE = "personal"


def _controller_of(
    owner_references: tuple[OwnerReference, ...],
) -> OwnerReference | None:
    for ref in owner_references:
        if ref.controller:
            return ref
    return None


def _with_owner(
    owner_references: tuple[OwnerReference, ...], owner: OwnerReference
) -> tuple[OwnerReference, ...]:
    others = tuple(ref for ref in owner_references if not ref.controller)
    return (*others, owner)


@dataclass(frozen=True)
class WorkspaceResource:
    """Cluster-scoped workspace owned by a single tenant.

    The controller owner reference ties the workspace's lifecycle to its
    tenant: removing the tenant record garbage-collects the workspace.
    """

    name: str
    pretty_name: str
    quota: WorkspaceQuota
    labels: Mapping[str, str] = field(default_factory=dict)
    owner_references: tuple[OwnerReference, ...] = ()
    resource_version: str = ""

    @property
    def key(self) -> ObjectKey:
        """Store address of this workspace."""
        return ObjectKey(kind=ResourceKind.WORKSPACE, name=self.name)

    @property
    def controller(self) -> OwnerReference | None:
        """The owner reference flagged as controller, if any."""
        return _controller_of(self.owner_references)

    def is_controlled_by(self, owner: OwnerReference) -> bool:
        """Check whether the given owner controls this workspace."""
        return self.controller == owner

    def needs_reconcile(
        self, owner: OwnerReference, labels: Mapping[str, str]
    ) -> bool:
        """Check whether ownership or required labels have drifted."""
        missing_labels = any(self.labels.get(k) != v for k, v in labels.items())
        return missing_labels or not self.is_controlled_by(owner)

    def reconciled(
        self, owner: OwnerReference, labels: Mapping[str, str]
    ) -> WorkspaceResource:
        """Return a copy carrying the controller reference and required labels.

        Quota and pretty name are left untouched.
        """
        return replace(
            self,
            labels={**self.labels, **labels},
            owner_references=_with_owner(self.owner_references, owner),
        )


@dataclass(frozen=True)
class PermissionGrant:
    """Namespaced role binding giving a tenant a fixed cluster role.

    The grant has a fixed, well-known name and lives in the tenant's
    private namespace.
    """

    name: str
    namespace: str
    subject: str
    role_ref_name: str
    labels: Mapping[str, str] = field(default_factory=dict)
    owner_references: tuple[OwnerReference, ...] = ()
    resource_version: str = ""

    @property
    def key(self) -> ObjectKey:
        """Store address of this grant."""
        return ObjectKey(
            kind=ResourceKind.ROLE_BINDING, name=self.name, namespace=self.namespace
        )

    @property
    def controller(self) -> OwnerReference | None:
        """The owner reference flagged as controller, if any."""
        return _controller_of(self.owner_references)

    def matches(self, desired: PermissionGrant) -> bool:
        """Check whether subject, role, labels and controller match ``desired``.

        Extra labels set by other actors are tolerated.
        """
        return (
            self.subject == desired.subject
            and self.role_ref_name == desired.role_ref_name
            and all(self.labels.get(k) == v for k, v in desired.labels.items())
            and self.controller == desired.controller
        )

    def reconciled(self, desired: PermissionGrant) -> PermissionGrant:
        """Return a copy asserting the desired subject, role, labels and owner."""
        owner = desired.controller
        owner_references = (
            self.owner_references
            if owner is None
            else _with_owner(self.owner_references, owner)
        )
        return replace(
            self,
            subject=desired.subject,
            role_ref_name=desired.role_ref_name,
            labels={**self.labels, **desired.labels},
            owner_references=owner_references,
        )


def personal_workspace_labels(
    type_label_key: str, target_label_key: str, target_label_value: str
) -> dict[str, str]:
    """Labels every personal workspace carries."""
    return {
        type_label_key: PERSONAL_WORKSPACE_TYPE,
        target_label_key: target_label_value,
    }


def personal_workspace_pretty_name(first_name: str, identity: str) -> str:
    """Human readable workspace name, falling back to the identity."""
    return f"{first_name or identity}'s Personal Workspace"
