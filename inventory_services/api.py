"""
InventoryApi -- framework-neutral request boundary.

Responsibility:
    Turns header values and payloads into kernel calls and kernel results
    into response envelopes.  This is the only layer that reads
    ``x-tenant-id`` / ``x-user-role``, gates roles, maps error codes to
    status codes and retries conflicting writes.

Architecture position:
    Services layer.  Wires kernel components from an InventoryConfig via
    inventory_config.bridges.  An HTTP adapter (or a test) calls one
    method per route.

Invariants:
    - Tenant resolution runs before role extraction, then the role gate,
      then the kernel call.
    - Kernel errors map to fixed status codes; anything else is logged
      and reported as a generic 500 without internals.
    - Write operations are retried on StorageConflictError only.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any
from uuid import uuid4

from inventory_config import InventoryConfig
from inventory_config.bridges import build_page_limits, build_plan_policies, build_storage
from inventory_config.schema import RetryConfig
from inventory_kernel import __version__
from inventory_kernel.db.engine import StorageHandle
from inventory_kernel.db.retry import retry_on_conflict
from inventory_kernel.domain.clock import Clock
from inventory_kernel.domain.context import TenantContext
from inventory_kernel.domain.dtos import MaterialFilters
from inventory_kernel.domain.policy import PageLimits, PlanPolicy
from inventory_kernel.exceptions import InventoryKernelError, ValidationError
from inventory_kernel.logging_config import LogContext, configure_logging, get_logger
from inventory_kernel.models.tenant import Plan
from inventory_kernel.services import (
    AnalyticsService,
    LedgerEngine,
    MaterialCatalog,
    TenantDirectory,
)
from inventory_services.rbac_authority import check_role, parse_role
from inventory_services.responses import (
    ApiResponse,
    error_response,
    from_exception,
    internal_error_response,
    success_response,
)

logger = get_logger("services.api")

TENANT_HEADER = "x-tenant-id"
ROLE_HEADER = "x-user-role"


def _header(headers: Mapping[str, str] | None, name: str) -> str | None:
    if not headers:
        return None
    for key, val in headers.items():
        if key.lower() == name:
            return val.strip() if isinstance(val, str) and val.strip() else None
    return None


def _str_param(query: Mapping[str, Any], name: str) -> str | None:
    raw = query.get(name)
    if raw is None or raw == "":
        return None
    if not isinstance(raw, str):
        raise ValidationError(name, "must be a single string value")
    return raw


def _int_param(query: Mapping[str, Any], name: str) -> int | None:
    """Query values arrive as strings from HTTP adapters."""
    raw = query.get(name)
    if raw is None or raw == "":
        return None
    if isinstance(raw, bool):
        raise ValidationError(name, "must be a positive integer")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str) and raw.strip().lstrip("-").isdigit():
        return int(raw.strip())
    raise ValidationError(name, "must be a positive integer")


class InventoryApi:
    """One method per route of the inventory HTTP surface."""

    def __init__(
        self,
        storage: StorageHandle,
        clock: Clock | None = None,
        plan_policies: dict[Plan, PlanPolicy] | None = None,
        page_limits: PageLimits | None = None,
        retry: RetryConfig | None = None,
    ):
        self.storage = storage
        self.tenants = TenantDirectory(storage, clock)
        self.materials = MaterialCatalog(
            storage, clock, plan_policies=plan_policies, page_limits=page_limits,
        )
        self.ledger = LedgerEngine(storage, clock)
        self.analytics = AnalyticsService(storage, clock, plan_policies=plan_policies)
        self.retry = retry or RetryConfig()

    @classmethod
    def from_config(
        cls,
        config: InventoryConfig,
        storage: StorageHandle | None = None,
        clock: Clock | None = None,
    ) -> InventoryApi:
        configure_logging(level=config.logging.level)
        return cls(
            storage or build_storage(config),
            clock=clock,
            plan_policies=build_plan_policies(config),
            page_limits=build_page_limits(config),
            retry=config.retry,
        )

    # ------------------------------------------------------------------
    # Unscoped routes
    # ------------------------------------------------------------------

    def health(self) -> ApiResponse:
        return success_response(
            200,
            {
                "message": "Multi-Tenant Material Inventory API",
                "version": __version__,
                "status": "running",
                "database": "up" if self.storage.ping() else "down",
            },
        )

    def create_tenant(self, payload: Mapping[str, Any] | None) -> ApiResponse:
        payload = payload or {}
        return self._run(
            "create_tenant",
            lambda: success_response(
                201,
                self._write(lambda: self.tenants.create_tenant(payload.get("name"), payload.get("plan"))),
                "Tenant created successfully",
            ),
        )

    def list_tenants(self) -> ApiResponse:
        return self._run(
            "list_tenants",
            lambda: success_response(200, self.tenants.list_tenants()),
        )

    # ------------------------------------------------------------------
    # Tenant-scoped routes
    # ------------------------------------------------------------------

    def create_material(self, headers: Mapping[str, str], payload: Mapping[str, Any] | None) -> ApiResponse:
        payload = payload or {}

        def call(ctx: TenantContext) -> ApiResponse:
            info = self._write(lambda: self.materials.create_material(
                ctx,
                payload.get("name"),
                payload.get("unit"),
                payload.get("currentStock", 0),
            ))
            return success_response(201, info, "Material created successfully")

        return self._scoped(headers, "material.create", call)

    def list_materials(self, headers: Mapping[str, str], query: Mapping[str, Any] | None = None) -> ApiResponse:
        query = query or {}

        def call(ctx: TenantContext) -> ApiResponse:
            filters = MaterialFilters(
                name=_str_param(query, "name"),
                unit=_str_param(query, "unit"),
                page=_int_param(query, "page"),
                limit=_int_param(query, "limit"),
            )
            page = self.materials.get_materials(ctx, filters)
            return success_response(200, page.data, pagination=page.pagination)

        return self._scoped(headers, "material.list", call)

    def get_material(self, headers: Mapping[str, str], material_id: str) -> ApiResponse:
        return self._scoped(
            headers,
            "material.get",
            lambda ctx: success_response(200, self.materials.get_material_by_id(ctx, material_id)),
            material_id=material_id,
        )

    def delete_material(self, headers: Mapping[str, str], material_id: str) -> ApiResponse:
        def call(ctx: TenantContext) -> ApiResponse:
            info = self._write(lambda: self.materials.delete_material(ctx, material_id))
            return success_response(200, info, "Material deleted successfully")

        return self._scoped(headers, "material.delete", call, material_id=material_id)

    def create_transaction(
        self,
        headers: Mapping[str, str],
        material_id: str,
        payload: Mapping[str, Any] | None,
    ) -> ApiResponse:
        payload = payload or {}

        def call(ctx: TenantContext) -> ApiResponse:
            info = self._write(lambda: self.ledger.create_transaction(
                ctx, material_id, payload.get("type"), payload.get("quantity"),
            ))
            return success_response(201, info, "Transaction created successfully")

        return self._scoped(headers, "transaction.create", call, material_id=material_id)

    def list_transactions(self, headers: Mapping[str, str], material_id: str) -> ApiResponse:
        return self._scoped(
            headers,
            "transaction.list",
            lambda ctx: success_response(200, self.ledger.get_transactions_by_material(ctx, material_id)),
            material_id=material_id,
        )

    def analytics_summary(self, headers: Mapping[str, str]) -> ApiResponse:
        return self._scoped(
            headers,
            "analytics.summary",
            lambda ctx: success_response(200, self.analytics.get_summary(ctx)),
        )

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------

    def _write(self, fn: Callable[[], Any]) -> Any:
        return retry_on_conflict(
            fn,
            max_attempts=self.retry.max_attempts,
            backoff_seconds=self.retry.backoff_seconds,
        )

    def _scoped(
        self,
        headers: Mapping[str, str],
        action: str,
        call: Callable[[TenantContext], ApiResponse],
        material_id: str | None = None,
    ) -> ApiResponse:
        """Resolve tenant, then role, then run ``call`` under the role gate."""
        return self._run(action, lambda: self._gate(headers, action, call, material_id))

    def _gate(
        self,
        headers: Mapping[str, str],
        action: str,
        call: Callable[[TenantContext], ApiResponse],
        material_id: str | None,
    ) -> ApiResponse:
        tenant_header = _header(headers, TENANT_HEADER)
        if tenant_header is None:
            return error_response(400, "TENANT_ID_REQUIRED", "Please provide x-tenant-id header")

        tenant = self.tenants.find_tenant(tenant_header)
        if tenant is None:
            return error_response(404, "TENANT_NOT_FOUND", "Invalid tenant ID")

        raw_role = _header(headers, ROLE_HEADER)
        if raw_role is None:
            return error_response(401, "AUTHENTICATION_REQUIRED", "Please provide x-user-role header")
        role = parse_role(raw_role)
        if role is None:
            return error_response(403, "INVALID_ROLE", "Role must be either ADMIN or USER")

        allowed, reason = check_role(role, action)
        if not allowed:
            logger.warning(
                "access_denied",
                extra={"tenant_id": str(tenant.id), "action": action, "role": role.value},
            )
            return error_response(403, "ACCESS_DENIED", reason)

        context = TenantContext(tenant_id=tenant.id, plan=tenant.plan)
        with LogContext.bind(
            tenant_id=tenant.id,
            actor_role=role.value,
            material_id=material_id,
        ):
            return call(context)

    def _run(self, operation: str, call: Callable[[], ApiResponse]) -> ApiResponse:
        with LogContext.bind(correlation_id=uuid4(), operation=operation):
            try:
                return call()
            except InventoryKernelError as exc:
                response = from_exception(exc)
                if response.status_code >= 500:
                    logger.error("request_failed", extra={"code": exc.code}, exc_info=True)
                else:
                    logger.info(
                        "request_rejected",
                        extra={"code": exc.code, "status_code": response.status_code},
                    )
                return response
            except Exception:
                logger.exception("request_unhandled_error")
                return internal_error_response()
