"""
Config -> Kernel Bridges.

Functions that convert an InventoryConfig into kernel inputs.  They live
here because the kernel must NEVER import inventory_config.

Usage:
    from inventory_config import get_active_config
    from inventory_config.bridges import build_storage, build_plan_policies

    config = get_active_config()
    storage = build_storage(config)
    catalog = MaterialCatalog(storage, plan_policies=build_plan_policies(config))
"""

from __future__ import annotations

from inventory_config.schema import InventoryConfig
from inventory_kernel.db.engine import StorageHandle
from inventory_kernel.domain.policy import PageLimits, PlanPolicy
from inventory_kernel.logging_config import configure_logging
from inventory_kernel.models.tenant import Plan


def build_plan_policies(config: InventoryConfig) -> dict[Plan, PlanPolicy]:
    """One PlanPolicy per configured plan."""
    return {
        Plan(p.name): PlanPolicy(
            plan=Plan(p.name),
            max_materials=p.max_materials,
            analytics_enabled=p.analytics_enabled,
        )
        for p in config.plans
    }


def build_page_limits(config: InventoryConfig) -> PageLimits:
    return PageLimits(
        default_page=config.pagination.default_page,
        default_limit=config.pagination.default_limit,
        max_limit=config.pagination.max_limit,
    )


def build_storage(config: InventoryConfig) -> StorageHandle:
    """Build the process-wide StorageHandle. Call once at startup."""
    configure_logging(level=config.logging.level)
    s = config.storage
    return StorageHandle.from_url(
        s.database_url,
        echo=s.echo,
        pool_size=s.pool_size,
        max_overflow=s.max_overflow,
        pool_pre_ping=s.pool_pre_ping,
        pool_timeout=s.pool_timeout,
        pool_recycle=s.pool_recycle,
    )
