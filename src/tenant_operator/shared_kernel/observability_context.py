"""Observation context for domain-oriented observability.

Observation contexts collect and manage contextual metadata for instrumentation,
following the Domain Oriented Observability pattern.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ObservationContext:
    """Immutable context containing metadata for observability.

    Captures pass-scoped and domain-relevant metadata that should be
    included with all instrumentation events. This enables correlation
    of events across reconciliation passes.

    Attributes:
        pass_id: Unique identifier for the current reconciliation pass.
        identity: Tenant identity being reconciled (if applicable).
        controller: Name of the controller driving the pass (if applicable).
        extra: Additional contextual metadata.

    Example:
        context = ObservationContext(pass_id="pass-123", identity="john.doe")
        probe = DefaultPersonalWorkspaceProbe().with_context(context)
    """

    pass_id: str | None = None
    identity: str | None = None
    controller: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging.

        Only includes non-None values to keep logs clean.
        """
        result: dict[str, Any] = {}
        if self.pass_id is not None:
            result["pass_id"] = self.pass_id
        if self.identity is not None:
            result["identity"] = self.identity
        if self.controller is not None:
            result["controller"] = self.controller
        result.update(self.extra)
        return result

    def with_identity(self, identity: str) -> ObservationContext:
        """Create a new context with the tenant identity set."""
        return ObservationContext(
            pass_id=self.pass_id,
            identity=identity,
            controller=self.controller,
            extra=self.extra,
        )

    def with_extra(self, **kwargs: Any) -> ObservationContext:
        """Create a new context with additional metadata."""
        new_extra = {**self.extra, **kwargs}
        return ObservationContext(
            pass_id=self.pass_id,
            identity=self.identity,
            controller=self.controller,
            extra=new_extra,
        )
