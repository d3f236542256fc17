"""Resolution of a tenant's desired personal workspace state."""

from personal_workspace.domain.value_objects import DesiredState


def resolve_desired_state(
    wants_personal_workspace: bool, namespace_precondition: bool
) -> DesiredState:
    """Resolve whether the personal workspace must exist.

    A personal workspace is never enabled before the tenant's private
    namespace exists, whatever the tenant asked for.
    """
    return DesiredState(enabled=wants_personal_workspace and namespace_precondition)
