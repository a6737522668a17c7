"""
Module: inventory_kernel.models.material
Responsibility: ORM persistence for materials and their running stock
    counter.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - current_stock >= 0 (CHECK constraint; the LedgerEngine rejects
      overdrafts before they reach the database).
    - current_stock == initial stock + sum(IN) - sum(OUT) over committed
      transactions.  Only LedgerEngine mutates it, under a row lock.
    - (id, tenant_id) is unique so transactions can reference both columns,
      making a cross-tenant ledger row unrepresentable.
    - Soft delete only: deleted_at is set once and never cleared.

Failure modes:
    - IntegrityError if current_stock would go negative through a path that
      bypassed the LedgerEngine.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import CheckConstraint, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from inventory_kernel.db.base import TimestampedBase, UUIDString

NAME_MAX_LENGTH = 200
UNIT_MAX_LENGTH = 30


class Material(TimestampedBase):
    """
    A stock-keeping item owned by one tenant.

    Guarantees:
        - Belongs to exactly one tenant for its whole lifetime.
        - Active while deleted_at is NULL.
    """

    __tablename__ = "materials"

    __table_args__ = (
        UniqueConstraint("id", "tenant_id", name="uq_material_id_tenant"),
        CheckConstraint("current_stock >= 0", name="ck_material_stock_non_negative"),
        Index("idx_material_tenant_active", "tenant_id", "deleted_at"),
        Index("idx_material_tenant_created", "tenant_id", "created_at"),
    )

    tenant_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("tenants.id"),
        nullable=False,
    )

    name: Mapped[str] = mapped_column(
        String(NAME_MAX_LENGTH),
        nullable=False,
    )

    unit: Mapped[str] = mapped_column(
        String(UNIT_MAX_LENGTH),
        nullable=False,
    )

    current_stock: Mapped[int] = mapped_column(
        nullable=False,
        default=0,
    )

    # NULL means active
    deleted_at: Mapped[datetime | None] = mapped_column(
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Material {self.name} stock={self.current_stock} {self.unit}>"
