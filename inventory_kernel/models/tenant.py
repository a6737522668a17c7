"""
Module: inventory_kernel.models.tenant
Responsibility: ORM persistence for tenants, the ownership root of every
    material and transaction.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - Tenants are never hard-deleted (see db/immutability.py).
    - plan is one of the Plan values; it selects quota and feature gates.
"""

from enum import Enum

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from inventory_kernel.db.base import TimestampedBase


class Plan(str, Enum):
    """Subscription tier of a tenant."""

    FREE = "FREE"
    PRO = "PRO"


class Tenant(TimestampedBase):
    """
    A customer organization owning an isolated inventory.

    Guarantees:
        - name is non-empty (checked by TenantDirectory).
        - plan defaults to FREE.
    """

    __tablename__ = "tenants"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    plan: Mapped[Plan] = mapped_column(
        String(10),
        nullable=False,
        default=Plan.FREE.value,
    )

    def __repr__(self) -> str:
        return f"<Tenant {self.name} ({self.plan})>"
