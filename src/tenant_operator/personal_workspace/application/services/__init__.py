"""Application services for the personal workspace bounded context.

Application services orchestrate domain aggregates and the object store
to fulfill use cases. They are the "front door" to the context.
"""

from personal_workspace.application.services.personal_workspace_engine import (
    ConvergenceStep,
    PersonalWorkspaceEngine,
)

__all__ = [
    "ConvergenceStep",
    "PersonalWorkspaceEngine",
]
