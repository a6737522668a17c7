"""
LedgerEngine -- append-only stock movements with a cached balance.

Responsibility:
    Records IN/OUT transactions against a material and keeps
    Material.current_stock equal to the opening stock plus the signed sum
    of its ledger entries.

Architecture position:
    Kernel > Services.  The only writer of current_stock after creation.

Invariants enforced:
    - Balance consistency: the ledger row and the stock update commit in
      ONE atomic unit, or neither does.
    - Non-negative stock: an OUT is checked against the stock read under
      the material row lock, so N concurrent OUTs of Q against stock S
      admit exactly floor(S / Q) of them.
    - Tenant isolation: the locked SELECT filters on tenant_id and
      deleted_at IS NULL.
    - Append-only: entries are never updated or deleted (see
      db/immutability.py).

Failure modes:
    - ValidationError: type not IN/OUT, quantity not a positive integer.
    - MaterialNotFoundError: absent, deleted, or other tenant's material.
    - InsufficientStockError: OUT larger than the locked stock.
    - StorageConflictError: lock wait aborted by the database; retryable.

Audit relevance:
    transaction_created logs carry previous_stock and new_stock so a
    balance can be reconstructed from the log stream alone.
"""

from collections.abc import Callable
from typing import Any, TypeVar
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from inventory_kernel.domain.context import TenantContext
from inventory_kernel.domain.dtos import TransactionInfo
from inventory_kernel.domain.validation import (
    parse_identifier,
    parse_transaction_type,
    validate_quantity,
)
from inventory_kernel.exceptions import InsufficientStockError, MaterialNotFoundError
from inventory_kernel.logging_config import get_logger
from inventory_kernel.models.material import Material
from inventory_kernel.models.transaction import InventoryTransaction, TransactionType
from inventory_kernel.services.base import BaseService
from inventory_kernel.services.material_service import active_material_query

logger = get_logger("services.ledger")

T = TypeVar("T")


class LedgerEngine(BaseService):
    """Records stock movements under a per-material row lock."""

    def create_transaction(
        self,
        context: TenantContext,
        material_id: UUID | str,
        type: TransactionType | str,
        quantity: Any,
    ) -> TransactionInfo:
        """
        Apply one stock movement.

        Preconditions:
            - material_id names an active material of context.tenant_id.
            - quantity is a positive integer.

        Postconditions:
            - One new ledger entry exists and current_stock moved by its
              signed quantity, or nothing changed.

        Raises:
            ValidationError, MaterialNotFoundError, InsufficientStockError.
        """
        tx_type = parse_transaction_type(type)
        amount = validate_quantity(quantity)

        def apply(session: Session, material: Material) -> tuple[TransactionInfo, int]:
            previous_stock = material.current_stock
            delta = tx_type.signed(amount)

            if previous_stock + delta < 0:
                logger.warning(
                    "transaction_rejected",
                    extra={
                        "tenant_id": str(context.tenant_id),
                        "material_id": str(material.id),
                        "type": tx_type.value,
                        "quantity": amount,
                        "current_stock": previous_stock,
                    },
                )
                raise InsufficientStockError(
                    material_id=str(material.id),
                    current_stock=previous_stock,
                    requested_quantity=amount,
                )

            entry = InventoryTransaction(
                tenant_id=context.tenant_id,
                material_id=material.id,
                type=tx_type.value,
                quantity=amount,
                created_at=self.clock.now(),
            )
            session.add(entry)
            session.flush()
            self._update_stock(session, material.id, delta)
            return TransactionInfo.from_model(entry), previous_stock

        info, previous_stock = self.with_material_lock(
            context, material_id, apply, operation="create_transaction",
        )

        logger.info(
            "transaction_created",
            extra={
                "tenant_id": str(context.tenant_id),
                "material_id": str(info.material_id),
                "transaction_id": str(info.id),
                "type": info.type.value,
                "quantity": info.quantity,
                "previous_stock": previous_stock,
                "new_stock": previous_stock + info.signed_quantity,
            },
        )
        return info

    def get_transactions_by_material(
        self,
        context: TenantContext,
        material_id: UUID | str,
    ) -> list[TransactionInfo]:
        """
        Ledger entries for a material, newest first.

        An unknown, malformed, or other tenant's id yields an empty list.
        """
        key = parse_identifier(material_id)
        if key is None:
            return []
        with self.storage.atomic("get_transactions_by_material") as session:
            rows = session.execute(
                select(InventoryTransaction)
                .where(
                    InventoryTransaction.tenant_id == context.tenant_id,
                    InventoryTransaction.material_id == key,
                )
                .order_by(InventoryTransaction.created_at.desc(), InventoryTransaction.id.desc())
            ).scalars().all()
            return [TransactionInfo.from_model(t) for t in rows]

    def with_material_lock(
        self,
        context: TenantContext,
        material_id: UUID | str,
        fn: Callable[[Session, Material], T],
        operation: str = "material_lock",
    ) -> T:
        """
        Run ``fn`` inside one atomic unit holding the material row lock.

        The lock is released when the unit commits or rolls back.  Another
        caller locking the same material blocks until then; callers
        locking other materials are unaffected.

        Raises:
            MaterialNotFoundError: before ``fn`` runs.
        """
        key = parse_identifier(material_id)
        if key is None:
            raise MaterialNotFoundError(str(material_id))

        with self.storage.atomic(operation) as session:
            material = session.execute(
                active_material_query(context.tenant_id)
                .where(Material.id == key)
                .with_for_update()
                .execution_options(populate_existing=True)
            ).scalar_one_or_none()
            if material is None:
                raise MaterialNotFoundError(str(material_id))
            return fn(session, material)

    def _update_stock(self, session: Session, material_id: UUID, delta: int) -> None:
        # Core UPDATE relative to the locked row; bypasses mapper events.
        session.execute(
            update(Material)
            .where(Material.id == material_id)
            .values(current_stock=Material.current_stock + delta)
            .execution_options(synchronize_session=False)
        )
