"""
Immutable result values returned by the kernel.

Services never hand ORM instances to callers; every public method returns
one of these frozen dataclasses, built while the session is still open.
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from inventory_kernel.models.material import Material
from inventory_kernel.models.tenant import Plan, Tenant
from inventory_kernel.models.transaction import InventoryTransaction, TransactionType


@dataclass(frozen=True)
class TenantInfo:
    id: UUID
    name: str
    plan: Plan
    created_at: datetime

    @classmethod
    def from_model(cls, tenant: Tenant) -> "TenantInfo":
        return cls(
            id=tenant.id,
            name=tenant.name,
            plan=Plan(tenant.plan),
            created_at=tenant.created_at,
        )


@dataclass(frozen=True)
class TransactionInfo:
    id: UUID
    tenant_id: UUID
    material_id: UUID
    type: TransactionType
    quantity: int
    created_at: datetime

    @property
    def signed_quantity(self) -> int:
        """Stock delta this entry applied."""
        return self.type.signed(self.quantity)

    @classmethod
    def from_model(cls, txn: InventoryTransaction) -> "TransactionInfo":
        return cls(
            id=txn.id,
            tenant_id=txn.tenant_id,
            material_id=txn.material_id,
            type=TransactionType(txn.type),
            quantity=txn.quantity,
            created_at=txn.created_at,
        )


@dataclass(frozen=True)
class MaterialInfo:
    id: UUID
    tenant_id: UUID
    name: str
    unit: str
    current_stock: int
    created_at: datetime
    deleted_at: datetime | None

    @property
    def is_active(self) -> bool:
        return self.deleted_at is None

    @classmethod
    def from_model(cls, material: Material) -> "MaterialInfo":
        return cls(
            id=material.id,
            tenant_id=material.tenant_id,
            name=material.name,
            unit=material.unit,
            current_stock=material.current_stock,
            created_at=material.created_at,
            deleted_at=material.deleted_at,
        )


@dataclass(frozen=True)
class MaterialDetail(MaterialInfo):
    """A material together with its ledger history, newest first."""

    transactions: tuple[TransactionInfo, ...] = ()

    @classmethod
    def from_model_with_history(
        cls,
        material: Material,
        transactions: list[InventoryTransaction],
    ) -> "MaterialDetail":
        base = MaterialInfo.from_model(material)
        return cls(
            **{f: getattr(base, f) for f in base.__dataclass_fields__},
            transactions=tuple(TransactionInfo.from_model(t) for t in transactions),
        )


@dataclass(frozen=True)
class MaterialFilters:
    """
    Listing filters.

    ``name`` matches as a case-insensitive substring, ``unit`` exactly.
    page and limit of None fall back to the configured defaults.
    """

    name: str | None = None
    unit: str | None = None
    page: int | None = None
    limit: int | None = None


@dataclass(frozen=True)
class Pagination:
    page: int
    limit: int
    total: int
    total_pages: int


@dataclass(frozen=True)
class MaterialPage:
    data: tuple[MaterialInfo, ...]
    pagination: Pagination


@dataclass(frozen=True)
class AnalyticsSummary:
    """Advisory tenant-wide rollups. Missing sums are reported as 0."""

    materials_count: int
    total_in: int
    total_out: int
    total_stock: int
