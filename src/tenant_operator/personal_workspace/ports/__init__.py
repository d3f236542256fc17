"""Ports (interfaces) for the personal workspace bounded context.

Ports define the contracts this context offers to the controllers that
drive it, without specifying implementation details.
"""

from personal_workspace.ports.enforcer import IPersonalWorkspaceEnforcer

__all__ = [
    "IPersonalWorkspaceEnforcer",
]
