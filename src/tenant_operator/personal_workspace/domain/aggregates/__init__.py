"""Domain aggregates for the personal workspace context."""

from personal_workspace.domain.aggregates.tenant_record import TenantRecord

__all__ = ["TenantRecord"]
