"""Protocol for personal workspace convergence observability.

Defines the interface for domain probes that capture the steps taken by
the personal workspace convergence engine.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class PersonalWorkspaceProbe(Protocol):
    """Domain probe for personal workspace convergence.

    Records domain-significant events of a convergence pass.
    """

    def workspace_created(self, identity: str, workspace_name: str) -> None:
        """Record personal workspace creation."""
        ...

    def workspace_already_exists(self, identity: str, workspace_name: str) -> None:
        """Record a create that lost the race against another actor."""
        ...

    def workspace_reconciled(self, identity: str, workspace_name: str) -> None:
        """Record ownership or labels reasserted on an existing workspace."""
        ...

    def workspace_deleted(self, identity: str, workspace_name: str) -> None:
        """Record personal workspace deletion."""
        ...

    def subscription_enforced(
        self,
        identity: str,
        workspace_name: str,
        previous_role: str,
    ) -> None:
        """Record the tenant being made manager of its personal workspace."""
        ...

    def subscription_removed(self, identity: str, workspace_name: str) -> None:
        """Record the personal workspace subscription being dropped."""
        ...

    def grant_created(self, identity: str, namespace: str, grant_name: str) -> None:
        """Record permission grant creation."""
        ...

    def grant_reconciled(self, identity: str, namespace: str, grant_name: str) -> None:
        """Record permission grant drift being corrected."""
        ...

    def grant_deleted(self, identity: str, namespace: str, grant_name: str) -> None:
        """Record permission grant deletion."""
        ...

    def precondition_not_met(self, identity: str) -> None:
        """Record a pass gated off because the tenant namespace is missing."""
        ...

    def convergence_completed(self, identity: str, enabled: bool) -> None:
        """Record a successful convergence pass."""
        ...

    def convergence_failed(
        self,
        identity: str,
        workspace_name: str,
        step: str,
        error: str,
    ) -> None:
        """Record a pass aborted by a store failure."""
        ...

    def with_context(self, context: ObservationContext) -> PersonalWorkspaceProbe:
        """Return a new probe with additional context."""
        ...


class DefaultPersonalWorkspaceProbe:
    """Default implementation of PersonalWorkspaceProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self, exclude: set[str] | None = None) -> dict[str, Any]:
        """Get context as kwargs dict, excluding specified keys.

        Args:
            exclude: Set of keys to exclude from context (avoids parameter collision)

        Returns:
            Context dict with excluded keys filtered out
        """
        if self._context is None:
            return {}

        context_dict = self._context.as_dict()
        if exclude:
            return {k: v for k, v in context_dict.items() if k not in exclude}
        return context_dict

    def with_context(
        self, context: ObservationContext
    ) -> DefaultPersonalWorkspaceProbe:
        """Create a new probe with observation context bound."""
        return DefaultPersonalWorkspaceProbe(logger=self._logger, context=context)

    def workspace_created(self, identity: str, workspace_name: str) -> None:
        """Record personal workspace creation."""
        self._logger.info(
            "personal_workspace_created",
            identity=identity,
            workspace_name=workspace_name,
            **self._get_context_kwargs(exclude={"identity", "workspace_name"}),
        )

    def workspace_already_exists(self, identity: str, workspace_name: str) -> None:
        """Record a create that lost the race against another actor."""
        self._logger.debug(
            "personal_workspace_already_exists",
            identity=identity,
            workspace_name=workspace_name,
            **self._get_context_kwargs(exclude={"identity", "workspace_name"}),
        )

    def workspace_reconciled(self, identity: str, workspace_name: str) -> None:
        """Record ownership or labels reasserted on an existing workspace."""
        self._logger.info(
            "personal_workspace_reconciled",
            identity=identity,
            workspace_name=workspace_name,
            **self._get_context_kwargs(exclude={"identity", "workspace_name"}),
        )

    def workspace_deleted(self, identity: str, workspace_name: str) -> None:
        """Record personal workspace deletion."""
        self._logger.info(
            "personal_workspace_deleted",
            identity=identity,
            workspace_name=workspace_name,
            **self._get_context_kwargs(exclude={"identity", "workspace_name"}),
        )

    def subscription_enforced(
        self,
        identity: str,
        workspace_name: str,
        previous_role: str,
    ) -> None:
        """Record the tenant being made manager of its personal workspace."""
        context_kwargs = self._get_context_kwargs(
            exclude={"identity", "workspace_name", "previous_role"}
        )
        self._logger.info(
            "personal_workspace_subscription_enforced",
            identity=identity,
            workspace_name=workspace_name,
            previous_role=previous_role,
            **context_kwargs,
        )

    def subscription_removed(self, identity: str, workspace_name: str) -> None:
        """Record the personal workspace subscription being dropped."""
        self._logger.info(
            "personal_workspace_subscription_removed",
            identity=identity,
            workspace_name=workspace_name,
            **self._get_context_kwargs(exclude={"identity", "workspace_name"}),
        )

    def grant_created(self, identity: str, namespace: str, grant_name: str) -> None:
        """Record permission grant creation."""
        self._logger.info(
            "permission_grant_created",
            identity=identity,
            namespace=namespace,
            grant_name=grant_name,
            **self._get_context_kwargs(exclude={"identity", "namespace", "grant_name"}),
        )

    def grant_reconciled(self, identity: str, namespace: str, grant_name: str) -> None:
        """Record permission grant drift being corrected."""
        self._logger.info(
            "permission_grant_reconciled",
            identity=identity,
            namespace=namespace,
            grant_name=grant_name,
            **self._get_context_kwargs(exclude={"identity", "namespace", "grant_name"}),
        )

    def grant_deleted(self, identity: str, namespace: str, grant_name: str) -> None:
        """Record permission grant deletion."""
        self._logger.info(
            "permission_grant_deleted",
            identity=identity,
            namespace=namespace,
            grant_name=grant_name,
            **self._get_context_kwargs(exclude={"identity", "namespace", "grant_name"}),
        )

    def precondition_not_met(self, identity: str) -> None:
        """Record a pass gated off because the tenant namespace is missing."""
        self._logger.info(
            "personal_workspace_precondition_not_met",
            identity=identity,
            **self._get_context_kwargs(exclude={"identity"}),
        )

    def convergence_completed(self, identity: str, enabled: bool) -> None:
        """Record a successful convergence pass."""
        self._logger.debug(
            "personal_workspace_convergence_completed",
            identity=identity,
            enabled=enabled,
            **self._get_context_kwargs(exclude={"identity", "enabled"}),
        )

    def convergence_failed(
        self,
        identity: str,
        workspace_name: str,
        step: str,
        error: str,
    ) -> None:
        """Record a pass aborted by a store failure."""
        context_kwargs = self._get_context_kwargs(
            exclude={"identity", "workspace_name", "step", "error"}
        )
        self._logger.warning(
            "personal_workspace_convergence_failed",
            identity=identity,
            workspace_name=workspace_name,
            step=step,
            error=error,
            **context_kwargs,
        )
