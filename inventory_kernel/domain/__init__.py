"""Pure domain values: context, policies, DTOs, clock and input checks."""

from inventory_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from inventory_kernel.domain.context import TenantContext, UserRole
from inventory_kernel.domain.dtos import (
    AnalyticsSummary,
    MaterialDetail,
    MaterialFilters,
    MaterialInfo,
    MaterialPage,
    Pagination,
    TenantInfo,
    TransactionInfo,
)
from inventory_kernel.domain.policy import (
    DEFAULT_PAGE_LIMITS,
    DEFAULT_PLAN_POLICIES,
    PageLimits,
    PlanPolicy,
)

__all__ = [
    "AnalyticsSummary",
    "Clock",
    "DEFAULT_PAGE_LIMITS",
    "DEFAULT_PLAN_POLICIES",
    "DeterministicClock",
    "MaterialDetail",
    "MaterialFilters",
    "MaterialInfo",
    "MaterialPage",
    "PageLimits",
    "Pagination",
    "PlanPolicy",
    "SystemClock",
    "TenantContext",
    "TenantInfo",
    "TransactionInfo",
    "UserRole",
]
