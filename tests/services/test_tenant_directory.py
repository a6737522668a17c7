"""Tests for TenantDirectory."""

from uuid import UUID, uuid4

import pytest

from inventory_kernel.exceptions import TenantNotFoundError, ValidationError
from inventory_kernel.models.tenant import Plan


class TestCreateTenant:
    def test_defaults_to_free_plan(self, tenants):
        info = tenants.create_tenant("Acme")

        assert isinstance(info.id, UUID)
        assert info.name == "Acme"
        assert info.plan == Plan.FREE

    def test_none_plan_defaults_to_free(self, tenants):
        assert tenants.create_tenant("Acme", None).plan == Plan.FREE

    def test_accepts_plan_as_string(self, tenants):
        assert tenants.create_tenant("Globex", "PRO").plan == Plan.PRO

    def test_name_is_trimmed(self, tenants):
        assert tenants.create_tenant("  Acme  ").name == "Acme"

    @pytest.mark.parametrize("name", ["", "   ", None, 42])
    def test_rejects_missing_name(self, tenants, name):
        with pytest.raises(ValidationError) as exc_info:
            tenants.create_tenant(name)
        assert exc_info.value.field == "name"

    def test_rejects_unknown_plan(self, tenants):
        with pytest.raises(ValidationError) as exc_info:
            tenants.create_tenant("Acme", "ENTERPRISE")
        assert exc_info.value.field == "plan"

    def test_each_tenant_gets_a_new_id(self, tenants):
        a = tenants.create_tenant("Acme")
        b = tenants.create_tenant("Acme")
        assert a.id != b.id

    def test_logs_creation(self, tenants, captured_logs):
        info = tenants.create_tenant("Acme", Plan.PRO)

        created = [r for r in captured_logs() if r["message"] == "tenant_created"]
        assert len(created) == 1
        assert created[0]["tenant_id"] == str(info.id)
        assert created[0]["plan"] == "PRO"


class TestLookup:
    def test_get_by_id(self, tenants):
        created = tenants.create_tenant("Acme", Plan.PRO)
        found = tenants.get_tenant_by_id(created.id)
        assert (found.id, found.name, found.plan) == (created.id, "Acme", Plan.PRO)

    def test_get_by_string_id(self, tenants):
        created = tenants.create_tenant("Acme")
        assert tenants.get_tenant_by_id(str(created.id)).id == created.id

    def test_unknown_id_raises_not_found(self, tenants):
        missing = uuid4()
        with pytest.raises(TenantNotFoundError) as exc_info:
            tenants.get_tenant_by_id(missing)
        assert exc_info.value.tenant_id == str(missing)

    def test_malformed_id_is_not_found(self, tenants):
        with pytest.raises(TenantNotFoundError):
            tenants.get_tenant_by_id("not-a-uuid")

    def test_find_returns_none_for_unknown(self, tenants):
        assert tenants.find_tenant(uuid4()) is None
        assert tenants.find_tenant("garbage") is None


class TestListTenants:
    def test_lists_in_creation_order(self, tenants):
        names = ["Acme", "Globex", "Initech"]
        for name in names:
            tenants.create_tenant(name)

        assert [t.name for t in tenants.list_tenants()] == names

    def test_empty(self, tenants):
        assert tenants.list_tenants() == []
