"""
Tests for LedgerEngine.

The balance invariant: current_stock == opening stock + sum of signed
ledger quantities, and never negative.
"""

from uuid import uuid4

import pytest

from inventory_kernel.exceptions import (
    InsufficientStockError,
    MaterialNotFoundError,
    ValidationError,
)
from inventory_kernel.models.transaction import TransactionType


class TestAcmeSteelScenario:
    def test_in_then_out(self, make_tenant, catalog, ledger):
        acme = make_tenant("Acme")
        steel = catalog.create_material(acme, "Steel", "kg", 0)

        ledger.create_transaction(acme, steel.id, "IN", 100)
        ledger.create_transaction(acme, steel.id, "OUT", 30)

        detail = catalog.get_material_by_id(acme, steel.id)
        assert detail.current_stock == 70
        assert [(t.type.value, t.quantity) for t in detail.transactions] == [
            ("OUT", 30),
            ("IN", 100),
        ]


class TestCreateTransaction:
    def test_in_increases_stock(self, ledger, catalog, free_tenant, make_material):
        material = make_material(free_tenant, current_stock=5)
        info = ledger.create_transaction(free_tenant, material.id, TransactionType.IN, 10)

        assert info.type == TransactionType.IN
        assert info.quantity == 10
        assert info.signed_quantity == 10
        assert info.material_id == material.id
        assert info.tenant_id == free_tenant.tenant_id
        assert catalog.get_material_by_id(free_tenant, material.id).current_stock == 15

    def test_out_to_exactly_zero(self, ledger, catalog, free_tenant, make_material):
        material = make_material(free_tenant, current_stock=20)
        ledger.create_transaction(free_tenant, material.id, "OUT", 20)

        assert catalog.get_material_by_id(free_tenant, material.id).current_stock == 0

    def test_accepts_string_material_id(self, ledger, free_tenant, make_material):
        material = make_material(free_tenant)
        info = ledger.create_transaction(free_tenant, str(material.id), "IN", 1)
        assert info.material_id == material.id

    @pytest.mark.parametrize("tx_type", ["in", "TRANSFER", "", None, 1])
    def test_rejects_unknown_type(self, ledger, free_tenant, make_material, tx_type):
        material = make_material(free_tenant)
        with pytest.raises(ValidationError) as exc_info:
            ledger.create_transaction(free_tenant, material.id, tx_type, 1)
        assert exc_info.value.field == "type"

    @pytest.mark.parametrize("quantity", [0, -5, 1.5, "10", None, True])
    def test_rejects_bad_quantity(self, ledger, free_tenant, make_material, quantity):
        material = make_material(free_tenant)
        with pytest.raises(ValidationError) as exc_info:
            ledger.create_transaction(free_tenant, material.id, "IN", quantity)
        assert exc_info.value.field == "quantity"

    def test_unknown_material(self, ledger, free_tenant):
        with pytest.raises(MaterialNotFoundError):
            ledger.create_transaction(free_tenant, uuid4(), "IN", 1)

    def test_malformed_material_id(self, ledger, free_tenant):
        with pytest.raises(MaterialNotFoundError):
            ledger.create_transaction(free_tenant, "nope", "IN", 1)

    def test_deleted_material_rejects_movements(self, ledger, catalog, free_tenant, make_material):
        material = make_material(free_tenant, current_stock=10)
        catalog.delete_material(free_tenant, material.id)

        with pytest.raises(MaterialNotFoundError):
            ledger.create_transaction(free_tenant, material.id, "IN", 1)

    def test_other_tenant_material_is_not_found(self, ledger, catalog, make_tenant, make_material):
        owner = make_tenant("Acme")
        intruder = make_tenant("Initech")
        material = make_material(owner, current_stock=10)

        with pytest.raises(MaterialNotFoundError):
            ledger.create_transaction(intruder, material.id, "OUT", 5)

        assert catalog.get_material_by_id(owner, material.id).current_stock == 10
        assert ledger.get_transactions_by_material(owner, material.id) == []


class TestInsufficientStock:
    def test_overdraft_rejected_and_nothing_written(self, ledger, catalog, free_tenant, make_material):
        material = make_material(free_tenant, current_stock=20)

        with pytest.raises(InsufficientStockError) as exc_info:
            ledger.create_transaction(free_tenant, material.id, "OUT", 50)

        err = exc_info.value
        assert err.current_stock == 20
        assert err.requested_quantity == 50
        assert err.code == "INSUFFICIENT_STOCK"
        assert str(err) == "Insufficient stock. Current stock: 20, requested: 50"

        assert catalog.get_material_by_id(free_tenant, material.id).current_stock == 20
        assert ledger.get_transactions_by_material(free_tenant, material.id) == []

    def test_logs_rejection(self, ledger, free_tenant, make_material, captured_logs):
        material = make_material(free_tenant, current_stock=1)
        with pytest.raises(InsufficientStockError):
            ledger.create_transaction(free_tenant, material.id, "OUT", 2)

        rejected = [r for r in captured_logs() if r["message"] == "transaction_rejected"]
        assert rejected[0]["level"] == "WARNING"
        assert rejected[0]["current_stock"] == 1


class TestTransactionHistory:
    def test_newest_first(self, ledger, free_tenant, make_material):
        material = make_material(free_tenant)
        for qty in (1, 2, 3):
            ledger.create_transaction(free_tenant, material.id, "IN", qty)

        history = ledger.get_transactions_by_material(free_tenant, material.id)
        assert [t.quantity for t in history] == [3, 2, 1]

    def test_history_survives_soft_delete(self, ledger, catalog, free_tenant, make_material):
        material = make_material(free_tenant)
        ledger.create_transaction(free_tenant, material.id, "IN", 7)
        catalog.delete_material(free_tenant, material.id)

        history = ledger.get_transactions_by_material(free_tenant, material.id)
        assert [t.quantity for t in history] == [7]

    def test_unknown_or_malformed_id_is_empty(self, ledger, free_tenant):
        assert ledger.get_transactions_by_material(free_tenant, uuid4()) == []
        assert ledger.get_transactions_by_material(free_tenant, "garbage") == []

    def test_balance_matches_ledger(self, ledger, catalog, free_tenant, make_material):
        material = make_material(free_tenant, current_stock=10)
        moves = [("IN", 5), ("OUT", 3), ("IN", 40), ("OUT", 12)]
        for tx_type, qty in moves:
            ledger.create_transaction(free_tenant, material.id, tx_type, qty)

        history = ledger.get_transactions_by_material(free_tenant, material.id)
        stock = catalog.get_material_by_id(free_tenant, material.id).current_stock
        assert stock == 10 + sum(t.signed_quantity for t in history)
        assert stock == 40


class TestWithMaterialLock:
    def test_runs_callback_with_locked_material(self, ledger, free_tenant, make_material):
        material = make_material(free_tenant, current_stock=3)

        seen = ledger.with_material_lock(
            free_tenant, material.id, lambda session, m: (m.id, m.current_stock),
        )
        assert seen == (material.id, 3)

    def test_callback_error_rolls_back(self, ledger, catalog, free_tenant, make_material):
        material = make_material(free_tenant, current_stock=3)

        def fail_after_update(session, m):
            ledger._update_stock(session, m.id, 100)
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            ledger.with_material_lock(free_tenant, material.id, fail_after_update)

        assert catalog.get_material_by_id(free_tenant, material.id).current_stock == 3

    def test_not_found_before_callback(self, ledger, free_tenant):
        calls = []
        with pytest.raises(MaterialNotFoundError):
            ledger.with_material_lock(free_tenant, uuid4(), lambda s, m: calls.append(m))
        assert calls == []

    def test_logs_previous_and_new_stock(self, ledger, free_tenant, make_material, captured_logs):
        material = make_material(free_tenant, current_stock=4)
        ledger.create_transaction(free_tenant, material.id, "OUT", 3)

        created = [r for r in captured_logs() if r["message"] == "transaction_created"]
        assert created[0]["previous_stock"] == 4
        assert created[0]["new_stock"] == 1
