"""
Per-call identity context.

The boundary layer resolves who is calling and passes it explicitly into
every kernel call.  The kernel never reads headers or any other ambient
request state.
"""

from dataclasses import dataclass
from enum import Enum
from uuid import UUID

from inventory_kernel.models.tenant import Plan


class UserRole(str, Enum):
    """Role asserted by the upstream identity layer."""

    ADMIN = "ADMIN"
    USER = "USER"


@dataclass(frozen=True)
class TenantContext:
    """
    Tenant on whose behalf a kernel operation runs.

    ``plan`` is trusted as given; it drives quota and feature gating.
    """

    tenant_id: UUID
    plan: Plan

    @classmethod
    def of(cls, tenant_id: UUID | str, plan: Plan | str) -> "TenantContext":
        return cls(
            tenant_id=tenant_id if isinstance(tenant_id, UUID) else UUID(str(tenant_id)),
            plan=Plan(plan),
        )
