"""
TenantDirectory -- creation and lookup of tenants.

Single-row inserts and point reads; no shared counters, so no locking.
"""

from typing import Any
from uuid import UUID

from sqlalchemy import select

from inventory_kernel.domain.dtos import TenantInfo
from inventory_kernel.domain.validation import parse_identifier, parse_plan, require_text
from inventory_kernel.exceptions import TenantNotFoundError
from inventory_kernel.logging_config import get_logger
from inventory_kernel.models.tenant import Plan, Tenant
from inventory_kernel.services.base import BaseService

logger = get_logger("services.tenant")


class TenantDirectory(BaseService):
    """Creates and looks up tenant records."""

    def create_tenant(self, name: Any, plan: Plan | str | None = Plan.FREE) -> TenantInfo:
        """
        Create a new tenant.

        Args:
            name: Display name; trimmed, must not be empty.
            plan: FREE (default) or PRO.

        Raises:
            ValidationError: If name is empty or plan is unknown.
        """
        clean_name = require_text("name", name, max_length=255)
        tier = parse_plan(plan)

        with self.storage.atomic("create_tenant") as session:
            tenant = Tenant(name=clean_name, plan=tier.value, created_at=self.clock.now())
            session.add(tenant)
            session.flush()
            info = TenantInfo.from_model(tenant)

        logger.info(
            "tenant_created",
            extra={"tenant_id": str(info.id), "tenant_name": info.name, "plan": info.plan.value},
        )
        return info

    def find_tenant(self, tenant_id: UUID | str) -> TenantInfo | None:
        """Return the tenant, or None if it does not exist."""
        key = parse_identifier(tenant_id)
        if key is None:
            return None
        with self.storage.atomic("find_tenant") as session:
            tenant = session.get(Tenant, key)
            return TenantInfo.from_model(tenant) if tenant else None

    def get_tenant_by_id(self, tenant_id: UUID | str) -> TenantInfo:
        """
        Get a tenant by id.

        Raises:
            TenantNotFoundError: If the tenant does not exist.
        """
        info = self.find_tenant(tenant_id)
        if info is None:
            raise TenantNotFoundError(str(tenant_id))
        return info

    def list_tenants(self) -> list[TenantInfo]:
        """All tenants in creation order. Administrative listing only."""
        with self.storage.atomic("list_tenants") as session:
            tenants = session.execute(
                select(Tenant).order_by(Tenant.created_at, Tenant.id)
            ).scalars().all()
            return [TenantInfo.from_model(t) for t in tenants]
