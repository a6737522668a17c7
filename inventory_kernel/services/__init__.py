"""Services for the inventory kernel (write side and gated reads)."""

from inventory_kernel.services.analytics_service import AnalyticsService
from inventory_kernel.services.ledger_service import LedgerEngine
from inventory_kernel.services.material_service import MaterialCatalog
from inventory_kernel.services.tenant_service import TenantDirectory

__all__ = [
    "AnalyticsService",
    "LedgerEngine",
    "MaterialCatalog",
    "TenantDirectory",
]
