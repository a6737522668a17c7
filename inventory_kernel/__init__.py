"""
Inventory Kernel

A multi-tenant, append-only inventory ledger with:
- Tenant-scoped materials with plan quotas
- Atomic stock movements under per-material row locks
- Soft delete only
- Plan-gated analytics
"""

__version__ = "0.1.0"
