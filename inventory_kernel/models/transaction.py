"""
Module: inventory_kernel.models.transaction
Responsibility: ORM persistence for append-only stock movements.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - quantity > 0 (CHECK constraint); direction is carried by type.
    - Rows are immutable once flushed (see db/immutability.py).
    - (material_id, tenant_id) references materials(id, tenant_id), so the
      tenant on a transaction always equals the tenant of its material.
"""

from enum import Enum
from uuid import UUID

from sqlalchemy import (
    CheckConstraint,
    ForeignKey,
    ForeignKeyConstraint,
    Index,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from inventory_kernel.db.base import TimestampedBase, UUIDString


class TransactionType(str, Enum):
    """Direction of a stock movement."""

    IN = "IN"
    OUT = "OUT"

    def signed(self, quantity: int) -> int:
        """Return the stock delta this movement applies."""
        return quantity if self is TransactionType.IN else -quantity


class InventoryTransaction(TimestampedBase):
    """
    One IN or OUT ledger entry against a material.

    Named InventoryTransaction to keep it apart from database transactions.
    """

    __tablename__ = "inventory_transactions"

    __table_args__ = (
        ForeignKeyConstraint(
            ["material_id", "tenant_id"],
            ["materials.id", "materials.tenant_id"],
            name="fk_transaction_material_tenant",
        ),
        CheckConstraint("quantity > 0", name="ck_transaction_quantity_positive"),
        CheckConstraint("type IN ('IN', 'OUT')", name="ck_transaction_type"),
        Index("idx_transaction_material_created", "material_id", "created_at"),
        Index("idx_transaction_tenant_type", "tenant_id", "type"),
    )

    tenant_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("tenants.id"),
        nullable=False,
    )

    material_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        nullable=False,
    )

    type: Mapped[TransactionType] = mapped_column(
        String(3),
        nullable=False,
    )

    quantity: Mapped[int] = mapped_column(
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<InventoryTransaction {self.type} {self.quantity}>"
