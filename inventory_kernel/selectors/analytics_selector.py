"""
AnalyticsSelector -- tenant-wide stock rollups.

Sums are computed from the ledger and the cached balances at query time.
The three aggregates are independent statements and are advisory: a
transaction committing between them may be reflected in one and not the
others.
"""

from uuid import UUID

from sqlalchemy import func, select

from inventory_kernel.domain.dtos import AnalyticsSummary
from inventory_kernel.models.material import Material
from inventory_kernel.models.transaction import InventoryTransaction, TransactionType
from inventory_kernel.selectors.base import BaseSelector


class AnalyticsSelector(BaseSelector):
    """Read-only aggregates for one tenant."""

    def active_material_count(self, tenant_id: UUID) -> int:
        return self.session.execute(
            select(func.count())
            .select_from(Material)
            .where(Material.tenant_id == tenant_id, Material.deleted_at.is_(None))
        ).scalar_one()

    def total_quantity(self, tenant_id: UUID, tx_type: TransactionType) -> int:
        """
        Sum of quantities of one transaction type.

        Includes entries of soft-deleted materials; the ledger is history.
        """
        return self.session.execute(
            select(func.coalesce(func.sum(InventoryTransaction.quantity), 0))
            .where(
                InventoryTransaction.tenant_id == tenant_id,
                InventoryTransaction.type == tx_type.value,
            )
        ).scalar_one()

    def total_stock(self, tenant_id: UUID) -> int:
        """Sum of current_stock over active materials."""
        return self.session.execute(
            select(func.coalesce(func.sum(Material.current_stock), 0))
            .where(Material.tenant_id == tenant_id, Material.deleted_at.is_(None))
        ).scalar_one()

    def summary(self, tenant_id: UUID) -> AnalyticsSummary:
        return AnalyticsSummary(
            materials_count=int(self.active_material_count(tenant_id)),
            total_in=int(self.total_quantity(tenant_id, TransactionType.IN)),
            total_out=int(self.total_quantity(tenant_id, TransactionType.OUT)),
            total_stock=int(self.total_stock(tenant_id)),
        )
