"""
InventoryConfig schema.

YAML is parsed into these frozen dataclasses by the loader.  Nothing in
here knows about the kernel; bridges.py does the translation.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PlanConfig:
    """Limits for one subscription plan. max_materials None = unlimited."""

    name: str
    max_materials: int | None
    analytics_enabled: bool = False


@dataclass(frozen=True)
class PaginationConfig:
    default_page: int = 1
    default_limit: int = 20
    max_limit: int = 100


@dataclass(frozen=True)
class StorageConfig:
    database_url: str
    echo: bool = False
    pool_size: int = 20
    max_overflow: int = 10
    pool_pre_ping: bool = True
    pool_timeout: int = 30
    pool_recycle: int = 1800


@dataclass(frozen=True)
class RetryConfig:
    """Conflict retry policy for write operations at the boundary."""

    max_attempts: int = 3
    backoff_seconds: float = 0.05


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"


@dataclass(frozen=True)
class InventoryConfig:
    """The complete runtime configuration."""

    plans: tuple[PlanConfig, ...]
    storage: StorageConfig
    pagination: PaginationConfig = field(default_factory=PaginationConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def plan(self, name: str) -> PlanConfig:
        for plan in self.plans:
            if plan.name == name:
                return plan
        raise KeyError(f"No plan configured named {name!r}")
