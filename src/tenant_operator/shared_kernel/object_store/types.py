"""Key and ownership types for the object store."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class ResourceKind(StrEnum):
    """Kinds of objects handled by the tenant controllers."""

    TENANT = "Tenant"
    WORKSPACE = "Workspace"
    ROLE_BINDING = "RoleBinding"


@dataclass(frozen=True)
class ObjectKey:
    """Address of an object in the store.

    Cluster-scoped objects leave ``namespace`` unset.
    """

    kind: ResourceKind
    name: str
    namespace: str | None = None

    def __str__(self) -> str:
        """Return a kind/namespace/name path."""
        if self.namespace:
            return f"{self.kind.value}/{self.namespace}/{self.name}"
        return f"{self.kind.value}/{self.name}"


@dataclass(frozen=True)
class OwnerReference:
    """Link from a dependent object to the object owning its lifecycle.

    When ``controller`` is set the owner is the managing controller's
    object, and deleting it garbage-collects the dependent.
    """

    kind: ResourceKind
    name: str
    controller: bool = True

    def owns(self, key: ObjectKey) -> bool:
        """Check whether this reference points at the given object."""
        return self.kind == key.kind and self.name == key.name
