"""
MaterialCatalog -- tenant-scoped material lifecycle with plan quotas.

Responsibility:
    Creates, lists, fetches (with ledger history) and soft-deletes
    materials.  Enforces the per-plan active-material quota at creation.

Invariants enforced:
    - Tenant isolation: every query filters on tenant_id.  A material of
      another tenant is reported exactly like a missing one.
    - Quota: count-then-insert runs in ONE atomic unit that first locks
      the tenant row (SELECT ... FOR NO KEY UPDATE).  Concurrent creations for
      the same tenant serialize on that lock, so two requests cannot both
      observe count=4 on a FREE tenant.  Other tenants are never blocked.
    - Soft delete: deleted_at is set once; deleted materials disappear
      from listing, lookup and mutation.

Failure modes:
    - ValidationError: bad name/unit/stock or page/limit.
    - TenantNotFoundError: context names a tenant that does not exist.
    - QuotaExceededError: plan limit reached.
    - MaterialNotFoundError: absent, deleted, or other tenant's material.
"""

from math import ceil
from typing import Any
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from inventory_kernel.domain.context import TenantContext
from inventory_kernel.domain.dtos import (
    MaterialDetail,
    MaterialFilters,
    MaterialInfo,
    MaterialPage,
    Pagination,
)
from inventory_kernel.domain.policy import (
    DEFAULT_PAGE_LIMITS,
    DEFAULT_PLAN_POLICIES,
    PageLimits,
    PlanPolicy,
)
from inventory_kernel.domain.validation import (
    parse_identifier,
    validate_material_fields,
    validate_page,
)
from inventory_kernel.exceptions import (
    MaterialNotFoundError,
    QuotaExceededError,
    TenantNotFoundError,
    ValidationError,
)
from inventory_kernel.logging_config import get_logger
from inventory_kernel.models.material import Material
from inventory_kernel.models.tenant import Plan, Tenant
from inventory_kernel.models.transaction import InventoryTransaction
from inventory_kernel.services.base import BaseService

logger = get_logger("services.material")


def active_material_query(tenant_id: UUID):
    """Base SELECT for a tenant's active materials."""
    return select(Material).where(
        Material.tenant_id == tenant_id,
        Material.deleted_at.is_(None),
    )


class MaterialCatalog(BaseService):
    """Tenant-scoped material catalog."""

    def __init__(
        self,
        storage,
        clock=None,
        plan_policies: dict[Plan, PlanPolicy] | None = None,
        page_limits: PageLimits | None = None,
    ):
        super().__init__(storage, clock)
        self._plan_policies = dict(plan_policies or DEFAULT_PLAN_POLICIES)
        self._page_limits = page_limits or DEFAULT_PAGE_LIMITS

    def policy_for(self, plan: Plan) -> PlanPolicy:
        return self._plan_policies[Plan(plan)]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_material(
        self,
        context: TenantContext,
        name: Any,
        unit: Any,
        current_stock: Any = 0,
    ) -> MaterialInfo:
        """
        Create a material, enforcing the plan quota atomically.

        Preconditions:
            - context.tenant_id names an existing tenant.

        Postconditions:
            - Either the tenant has one more active material, or nothing
              was written.

        Raises:
            ValidationError: name/unit empty or too long, stock negative.
            TenantNotFoundError: tenant does not exist.
            QuotaExceededError: plan limit reached.
        """
        clean_name, clean_unit, opening_stock = validate_material_fields(
            name, unit, current_stock,
        )
        policy = self.policy_for(context.plan)

        with self.storage.atomic("create_material") as session:
            # Serializes creations per tenant; see module docstring.
            self._lock_tenant(session, context.tenant_id)

            active_count = session.execute(
                select(func.count())
                .select_from(Material)
                .where(
                    Material.tenant_id == context.tenant_id,
                    Material.deleted_at.is_(None),
                )
            ).scalar_one()

            if not policy.allows_another_material(active_count):
                logger.warning(
                    "material_quota_exceeded",
                    extra={
                        "tenant_id": str(context.tenant_id),
                        "plan": policy.plan.value,
                        "limit": policy.max_materials,
                        "active_count": active_count,
                    },
                )
                raise QuotaExceededError(
                    plan=policy.plan.value,
                    limit=policy.max_materials,
                    current_count=active_count,
                )

            material = Material(
                tenant_id=context.tenant_id,
                name=clean_name,
                unit=clean_unit,
                current_stock=opening_stock,
                created_at=self.clock.now(),
            )
            session.add(material)
            session.flush()
            info = MaterialInfo.from_model(material)

        logger.info(
            "material_created",
            extra={
                "tenant_id": str(context.tenant_id),
                "material_id": str(info.id),
                "material_name": info.name,
                "current_stock": info.current_stock,
            },
        )
        return info

    def delete_material(self, context: TenantContext, material_id: UUID | str) -> MaterialInfo:
        """
        Soft-delete a material.

        A second call for the same id raises MaterialNotFoundError because
        the row is no longer active.

        Raises:
            MaterialNotFoundError: absent, already deleted, or other tenant's.
        """
        with self.storage.atomic("delete_material") as session:
            material = self._get_active(session, context, material_id, lock=True)
            material.deleted_at = self.clock.now()
            session.flush()
            info = MaterialInfo.from_model(material)

        logger.info(
            "material_deleted",
            extra={"tenant_id": str(context.tenant_id), "material_id": str(info.id)},
        )
        return info

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_materials(
        self,
        context: TenantContext,
        filters: MaterialFilters | None = None,
    ) -> MaterialPage:
        """
        List active materials, newest first.

        ``limit`` is clamped to the configured ceiling; ``total`` is the
        filtered count across all pages.

        Raises:
            ValidationError: page or limit below 1, non-string name or unit.
        """
        filters = filters or MaterialFilters()
        page = validate_page(
            "page", filters.page if filters.page is not None else self._page_limits.default_page,
        )
        limit = validate_page(
            "limit", filters.limit if filters.limit is not None else self._page_limits.default_limit,
        )
        limit = min(limit, self._page_limits.max_limit)

        conditions = [
            Material.tenant_id == context.tenant_id,
            Material.deleted_at.is_(None),
        ]
        for field_name in ("name", "unit"):
            value = getattr(filters, field_name)
            if value is not None and not isinstance(value, str):
                raise ValidationError(field_name, "must be a string")
        if filters.name:
            conditions.append(
                func.lower(Material.name).contains(filters.name.lower(), autoescape=True)
            )
        if filters.unit:
            conditions.append(Material.unit == filters.unit)

        with self.storage.atomic("get_materials") as session:
            total = session.execute(
                select(func.count()).select_from(Material).where(*conditions)
            ).scalar_one()

            rows = session.execute(
                select(Material)
                .where(*conditions)
                .order_by(Material.created_at.desc(), Material.id.desc())
                .offset((page - 1) * limit)
                .limit(limit)
            ).scalars().all()

            data = tuple(MaterialInfo.from_model(m) for m in rows)

        return MaterialPage(
            data=data,
            pagination=Pagination(
                page=page,
                limit=limit,
                total=total,
                total_pages=ceil(total / limit),
            ),
        )

    def get_material_by_id(self, context: TenantContext, material_id: UUID | str) -> MaterialDetail:
        """
        Fetch an active material with its transactions, newest first.

        Raises:
            MaterialNotFoundError: absent, deleted, or other tenant's.
        """
        with self.storage.atomic("get_material_by_id") as session:
            material = self._get_active(session, context, material_id)
            history = session.execute(
                select(InventoryTransaction)
                .where(
                    InventoryTransaction.tenant_id == context.tenant_id,
                    InventoryTransaction.material_id == material.id,
                )
                .order_by(InventoryTransaction.created_at.desc(), InventoryTransaction.id.desc())
            ).scalars().all()
            return MaterialDetail.from_model_with_history(material, list(history))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _lock_tenant(self, session: Session, tenant_id: UUID) -> Tenant:
        # FOR NO KEY UPDATE: FK checks from ledger inserts (KEY SHARE) are not blocked.
        tenant = session.execute(
            select(Tenant).where(Tenant.id == tenant_id).with_for_update(key_share=True)
        ).scalar_one_or_none()
        if tenant is None:
            raise TenantNotFoundError(str(tenant_id))
        return tenant

    def _get_active(
        self,
        session: Session,
        context: TenantContext,
        material_id: UUID | str,
        lock: bool = False,
    ) -> Material:
        key = parse_identifier(material_id)
        if key is None:
            raise MaterialNotFoundError(str(material_id))

        stmt = active_material_query(context.tenant_id).where(Material.id == key)
        if lock:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        material = session.execute(stmt).scalar_one_or_none()
        if material is None:
            raise MaterialNotFoundError(str(material_id))
        return material
