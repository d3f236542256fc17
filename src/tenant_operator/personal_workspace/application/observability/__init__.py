"""Domain-Oriented Observability for the personal workspace application layer.

Probes for convergence operations following Domain-Oriented Observability patterns.
"""

from personal_workspace.application.observability.personal_workspace_probe import (
    DefaultPersonalWorkspaceProbe,
    PersonalWorkspaceProbe,
)
from personal_workspace.application.observability.status_projector_probe import (
    DefaultStatusProjectorProbe,
    StatusProjectorProbe,
)

__all__ = [
    "PersonalWorkspaceProbe",
    "DefaultPersonalWorkspaceProbe",
    "StatusProjectorProbe",
    "DefaultStatusProjectorProbe",
]
