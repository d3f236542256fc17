"""Tenant operator entry point.

The controller runtime calls ``create_personal_workspace_enforcer`` once at
startup with its object store, then drives the returned enforcer from the
tenant reconciler.
"""

import structlog

from infrastructure.logging import configure_logging
from infrastructure.settings import get_settings
from personal_workspace.dependencies import get_personal_workspace_engine
from personal_workspace.ports import IPersonalWorkspaceEnforcer
from shared_kernel.object_store import ObjectStore

CONTROLLER_NAME = "tenant"


def create_personal_workspace_enforcer(
    store: ObjectStore,
) -> IPersonalWorkspaceEnforcer:
    """Configure logging and build the personal workspace enforcer.

    Args:
        store: Object store of the controller runtime

    Returns:
        The enforcer the tenant reconciler calls on every pass
    """
    configure_logging(controller=CONTROLLER_NAME)
    settings = get_settings()
    structlog.get_logger().info(
        "tenant_operator_started",
        app_name=settings.app_name,
        debug=settings.debug,
    )
    return get_personal_workspace_engine(store)
