"""Database layer - base classes, storage handle, append-only guards."""

from inventory_kernel.db.base import UUID, Base, TimestampedBase, UUIDString
from inventory_kernel.db.engine import StorageHandle
from inventory_kernel.db.retry import retry_on_conflict

__all__ = [
    "Base",
    "StorageHandle",
    "TimestampedBase",
    "UUID",
    "UUIDString",
    "retry_on_conflict",
]
