"""Tests for StorageHandle.atomic() and retry_on_conflict()."""

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import DBAPIError, OperationalError

from inventory_kernel.db.retry import retry_on_conflict
from inventory_kernel.exceptions import (
    MaterialNotFoundError,
    StorageConflictError,
)
from inventory_kernel.models import Tenant


def _tenant_count(db) -> int:
    with db.atomic("count") as session:
        return session.execute(select(func.count()).select_from(Tenant)).scalar_one()


class TestAtomic:
    def test_commits_on_success(self, db, clock):
        with db.atomic("insert") as session:
            session.add(Tenant(name="Acme", plan="FREE", created_at=clock.now()))

        assert _tenant_count(db) == 1

    def test_rolls_back_on_kernel_error(self, db, clock):
        with pytest.raises(MaterialNotFoundError):
            with db.atomic("insert") as session:
                session.add(Tenant(name="Acme", plan="FREE", created_at=clock.now()))
                session.flush()
                raise MaterialNotFoundError("x")

        assert _tenant_count(db) == 0

    def test_operational_error_becomes_conflict(self, db, clock):
        with pytest.raises(StorageConflictError) as exc_info:
            with db.atomic("create_transaction") as session:
                session.add(Tenant(name="Acme", plan="FREE", created_at=clock.now()))
                session.flush()
                raise OperationalError("SELECT 1", {}, Exception("deadlock detected"))

        assert exc_info.value.operation == "create_transaction"
        assert exc_info.value.retryable
        assert isinstance(exc_info.value.__cause__, OperationalError)
        assert _tenant_count(db) == 0

    def test_invalidated_connection_becomes_conflict(self, db):
        with pytest.raises(StorageConflictError):
            with db.atomic("read"):
                raise DBAPIError("SELECT 1", {}, Exception("gone"), connection_invalidated=True)

    def test_other_dbapi_errors_propagate(self, db):
        with pytest.raises(DBAPIError) as exc_info:
            with db.atomic("read"):
                raise DBAPIError("SELECT 1", {}, Exception("syntax"))
        assert not isinstance(exc_info.value, StorageConflictError)

    def test_conflict_is_logged(self, db, captured_logs):
        with pytest.raises(StorageConflictError):
            with db.atomic("create_material"):
                raise OperationalError("SELECT 1", {}, Exception("lock timeout"))

        conflicts = [r for r in captured_logs() if r["message"] == "unit_conflict"]
        assert conflicts[0]["operation"] == "create_material"
        assert conflicts[0]["error"] == "OperationalError"


class TestHandleProperties:
    def test_ping(self, db):
        assert db.ping() is True

    def test_row_locks_only_on_postgres(self, db):
        assert db.supports_row_locks == (db.dialect == "postgresql")


class TestRetryOnConflict:
    def test_returns_first_success(self):
        assert retry_on_conflict(lambda: 42) == 42

    def test_retries_conflicts_then_succeeds(self):
        attempts = []
        sleeps = []

        def flaky():
            attempts.append(1)
            if len(attempts) < 3:
                raise StorageConflictError("create_transaction")
            return "ok"

        result = retry_on_conflict(flaky, max_attempts=3, backoff_seconds=0.5, sleep=sleeps.append)

        assert result == "ok"
        assert len(attempts) == 3
        assert sleeps == [0.5, 1.0]

    def test_gives_up_after_max_attempts(self, captured_logs):
        attempts = []

        def always_conflicts():
            attempts.append(1)
            raise StorageConflictError("create_material")

        with pytest.raises(StorageConflictError):
            retry_on_conflict(always_conflicts, max_attempts=2, sleep=lambda s: None)

        assert len(attempts) == 2
        assert any(r["message"] == "unit_retry_exhausted" for r in captured_logs())

    def test_non_retryable_conflict_is_not_retried(self):
        attempts = []

        def fatal():
            attempts.append(1)
            raise StorageConflictError("x", retryable=False)

        with pytest.raises(StorageConflictError):
            retry_on_conflict(fatal, max_attempts=5, sleep=lambda s: None)
        assert len(attempts) == 1

    def test_other_errors_propagate_immediately(self):
        attempts = []

        def not_found():
            attempts.append(1)
            raise MaterialNotFoundError("m")

        with pytest.raises(MaterialNotFoundError):
            retry_on_conflict(not_found, max_attempts=5, sleep=lambda s: None)
        assert len(attempts) == 1

    def test_rejects_zero_attempts(self):
        with pytest.raises(ValueError):
            retry_on_conflict(lambda: None, max_attempts=0)
