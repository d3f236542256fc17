"""Protocol for status projection observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class StatusProjectorProbe(Protocol):
    """Domain probe for tenant status writes."""

    def status_projected(
        self,
        identity: str,
        workspace_created: bool,
        workspace_name: str,
        binding_created: bool,
        binding_namespace: str,
    ) -> None:
        """Record the status mirrors being written to the store."""
        ...

    def status_unchanged(self, identity: str) -> None:
        """Record a projection skipped because nothing changed."""
        ...

    def with_context(self, context: ObservationContext) -> StatusProjectorProbe:
        """Return a new probe with additional context."""
        ...


class DefaultStatusProjectorProbe:
    """Default implementation of StatusProjectorProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        return {k: v for k, v in self._context.as_dict().items() if k != "identity"}

    def with_context(self, context: ObservationContext) -> DefaultStatusProjectorProbe:
        """Create a new probe with observation context bound."""
        return DefaultStatusProjectorProbe(logger=self._logger, context=context)

    def status_projected(
        self,
        identity: str,
        workspace_created: bool,
        workspace_name: str,
        binding_created: bool,
        binding_namespace: str,
    ) -> None:
        """Record the status mirrors being written to the store."""
        self._logger.info(
            "tenant_status_projected",
            identity=identity,
            workspace_created=workspace_created,
            workspace_name=workspace_name,
            binding_created=binding_created,
            binding_namespace=binding_namespace,
            **self._get_context_kwargs(),
        )

    def status_unchanged(self, identity: str) -> None:
        """Record a projection skipped because nothing changed."""
        self._logger.debug(
            "tenant_status_unchanged",
            identity=identity,
            **self._get_context_kwargs(),
        )
