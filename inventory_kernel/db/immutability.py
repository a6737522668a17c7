"""
ORM-level append-only enforcement for the inventory kernel.

===============================================================================
WHAT THIS PROTECTS
===============================================================================

    InventoryTransaction  no UPDATE, no DELETE (ledger entries are final)
    Material              no DELETE (soft delete only), tenant_id never
                          changes, deleted_at is never cleared
    Tenant                no DELETE

Stock changes on Material go through a Core UPDATE issued by the
LedgerEngine under a row lock; Core statements do not fire mapper events,
so the counter path is unaffected by these listeners.

Database CHECK and composite FOREIGN KEY constraints (see models/) are the
second layer: they hold even when the ORM is bypassed.

To temporarily disable (TESTS ONLY):

    from inventory_kernel.db.immutability import unregister_immutability_listeners
    unregister_immutability_listeners()
    # ... forbidden operation ...
    register_immutability_listeners()
"""

from sqlalchemy import event
from sqlalchemy.orm.attributes import get_history

from inventory_kernel.exceptions import ImmutabilityViolationError
from inventory_kernel.logging_config import get_logger

logger = get_logger("db.immutability")


def _blocked(entity_type: str, target, operation: str, reason: str) -> ImmutabilityViolationError:
    logger.error(
        "immutability_violation_blocked",
        extra={
            "entity_type": entity_type,
            "entity_id": str(target.id),
            "operation": operation,
            "reason": reason,
        },
    )
    return ImmutabilityViolationError(entity_type, str(target.id), reason)


def _check_transaction_update(mapper, connection, target):
    """Ledger entries are immutable once written."""
    raise _blocked("InventoryTransaction", target, "UPDATE", "ledger entries are append-only")


def _check_transaction_delete(mapper, connection, target):
    raise _blocked("InventoryTransaction", target, "DELETE", "ledger entries are append-only")


def _check_material_update(mapper, connection, target):
    """
    Allow ordinary updates but reject tenant reassignment and un-deleting.

    current_stock is not checked here: its only writer is
    LedgerEngine._update_stock, which uses a Core UPDATE.
    """
    tenant_history = get_history(target, "tenant_id")
    if tenant_history.deleted and tenant_history.added:
        raise _blocked("Material", target, "UPDATE", "tenant_id cannot change")

    deleted_history = get_history(target, "deleted_at")
    if deleted_history.deleted and deleted_history.deleted[0] is not None:
        raise _blocked("Material", target, "UPDATE", "soft-deleted materials cannot be restored")


def _check_material_delete(mapper, connection, target):
    raise _blocked("Material", target, "DELETE", "materials are soft-deleted only")


def _check_tenant_delete(mapper, connection, target):
    raise _blocked("Tenant", target, "DELETE", "tenants are never deleted")


def _listeners():
    from inventory_kernel.models.material import Material
    from inventory_kernel.models.tenant import Tenant
    from inventory_kernel.models.transaction import InventoryTransaction

    return (
        (InventoryTransaction, "before_update", _check_transaction_update),
        (InventoryTransaction, "before_delete", _check_transaction_delete),
        (Material, "before_update", _check_material_update),
        (Material, "before_delete", _check_material_delete),
        (Tenant, "before_delete", _check_tenant_delete),
    )


def register_immutability_listeners() -> None:
    """Register all immutability listeners (idempotent)."""
    for target, identifier, fn in _listeners():
        if not event.contains(target, identifier, fn):
            event.listen(target, identifier, fn)


def unregister_immutability_listeners() -> None:
    """Remove all immutability listeners. FOR TESTING ONLY."""
    for target, identifier, fn in _listeners():
        if event.contains(target, identifier, fn):
            event.remove(target, identifier, fn)
