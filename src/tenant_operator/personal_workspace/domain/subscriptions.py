"""Lookup helpers over a tenant's ordered subscription list."""

from __future__ import annotations

from collections.abc import Sequence

from personal_workspace.domain.exceptions import PersonalWorkspaceInvariantError
from personal_workspace.domain.value_objects import SubscriptionEntry, WorkspaceRole

NOT_FOUND = -1


def find_subscription(
    subscriptions: Sequence[SubscriptionEntry], workspace_name: str
) -> tuple[int, WorkspaceRole]:
    """Locate the subscription entry for a workspace.

    Args:
        subscriptions: The tenant's subscriptions, in order
        workspace_name: The workspace to look for

    Returns:
        The entry's index and role, or ``(NOT_FOUND, WorkspaceRole.NONE)``

    Raises:
        PersonalWorkspaceInvariantError: If the workspace is listed twice
    """
    index = NOT_FOUND
    role = WorkspaceRole.NONE
    for i, entry in enumerate(subscriptions):
        if entry.workspace_name != workspace_name:
            continue
        if index != NOT_FOUND:
            raise PersonalWorkspaceInvariantError(
                f"Workspace {workspace_name} appears more than once in the "
                f"subscription list (indexes {index} and {i})"
            )
        index, role = i, entry.role
    return index, role
