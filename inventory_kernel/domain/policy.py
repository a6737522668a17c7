"""
Plan and paging policies consumed by the kernel.

These are plain values.  inventory_config.bridges builds them from YAML;
the defaults below match the shipped configuration so the kernel works
without any configuration at all.
"""

from dataclasses import dataclass
from types import MappingProxyType

from inventory_kernel.models.tenant import Plan


@dataclass(frozen=True)
class PlanPolicy:
    """
    Limits attached to one plan.

    ``max_materials`` of None means unlimited active materials.
    """

    plan: Plan
    max_materials: int | None
    analytics_enabled: bool

    def allows_another_material(self, active_count: int) -> bool:
        return self.max_materials is None or active_count < self.max_materials


@dataclass(frozen=True)
class PageLimits:
    """Paging defaults for material listings."""

    default_page: int = 1
    default_limit: int = 20
    max_limit: int = 100


DEFAULT_PLAN_POLICIES = MappingProxyType({
    Plan.FREE: PlanPolicy(plan=Plan.FREE, max_materials=5, analytics_enabled=False),
    Plan.PRO: PlanPolicy(plan=Plan.PRO, max_materials=None, analytics_enabled=True),
})

DEFAULT_PAGE_LIMITS = PageLimits()
