"""Domain models for the inventory kernel."""

from inventory_kernel.models.material import Material
from inventory_kernel.models.tenant import Plan, Tenant
from inventory_kernel.models.transaction import InventoryTransaction, TransactionType

__all__ = [
    "InventoryTransaction",
    "Material",
    "Plan",
    "Tenant",
    "TransactionType",
]
