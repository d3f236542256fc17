"""Dependency injection for the personal workspace bounded context.

Composes the object store handed in by the controller runtime with the
personal workspace components (settings, probes, projector, engine).
"""

from infrastructure.settings import get_personal_workspace_settings
from personal_workspace.application.observability import (
    DefaultPersonalWorkspaceProbe,
    DefaultStatusProjectorProbe,
)
from personal_workspace.application.services import PersonalWorkspaceEngine
from personal_workspace.application.status_projector import StatusProjector
from shared_kernel.object_store import ObjectStore
from shared_kernel.observability_context import ObservationContext


def get_personal_workspace_engine(
    store: ObjectStore,
    context: ObservationContext | None = None,
) -> PersonalWorkspaceEngine:
    """Get a PersonalWorkspaceEngine wired to the given store.

    Args:
        store: Object store holding tenants, workspaces and grants
        context: Optional observation context bound to both probes

    Returns:
        PersonalWorkspaceEngine instance using the cached settings
    """
    probe = DefaultPersonalWorkspaceProbe()
    projector_probe = DefaultStatusProjectorProbe()
    if context is not None:
        probe = probe.with_context(context)
        projector_probe = projector_probe.with_context(context)

    return PersonalWorkspaceEngine(
        store,
        settings=get_personal_workspace_settings(),
        probe=probe,
        status_projector=StatusProjector(store, probe=projector_probe),
    )
