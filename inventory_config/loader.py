"""
Configuration Loader (``inventory_config.loader``).

Responsibility
--------------
Loads a YAML file and parses it into ``inventory_config.schema``
dataclasses.  Runtime callers go through
``inventory_config.get_active_config()`` instead.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
* Out-of-range values  -> ``ValueError``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from inventory_config.schema import (
    InventoryConfig,
    LoggingConfig,
    PaginationConfig,
    PlanConfig,
    RetryConfig,
    StorageConfig,
)

KNOWN_PLANS = ("FREE", "PRO")


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_plans(data: dict[str, Any]) -> tuple[PlanConfig, ...]:
    """
    Parse the ``plans`` mapping.  Every known plan must be present.

    Raises:
        KeyError: a known plan is missing.
        ValueError: unknown plan name or negative max_materials.
    """
    for name in data:
        if name not in KNOWN_PLANS:
            raise ValueError(f"Unknown plan {name!r}; expected one of {KNOWN_PLANS}")

    plans = []
    for name in KNOWN_PLANS:
        entry = data[name] or {}
        max_materials = entry.get("max_materials")
        if max_materials is not None and int(max_materials) < 0:
            raise ValueError(f"plans.{name}.max_materials must be >= 0 or null")
        plans.append(
            PlanConfig(
                name=name,
                max_materials=int(max_materials) if max_materials is not None else None,
                analytics_enabled=bool(entry.get("analytics_enabled", False)),
            )
        )
    return tuple(plans)


def parse_pagination(data: dict[str, Any]) -> PaginationConfig:
    config = PaginationConfig(
        default_page=int(data.get("default_page", 1)),
        default_limit=int(data.get("default_limit", 20)),
        max_limit=int(data.get("max_limit", 100)),
    )
    if config.default_page < 1 or config.default_limit < 1:
        raise ValueError("pagination defaults must be >= 1")
    if config.default_limit > config.max_limit:
        raise ValueError("pagination.default_limit must not exceed max_limit")
    return config


def parse_storage(data: dict[str, Any]) -> StorageConfig:
    return StorageConfig(
        database_url=data["database_url"],
        echo=bool(data.get("echo", False)),
        pool_size=int(data.get("pool_size", 20)),
        max_overflow=int(data.get("max_overflow", 10)),
        pool_pre_ping=bool(data.get("pool_pre_ping", True)),
        pool_timeout=int(data.get("pool_timeout", 30)),
        pool_recycle=int(data.get("pool_recycle", 1800)),
    )


def parse_retry(data: dict[str, Any]) -> RetryConfig:
    config = RetryConfig(
        max_attempts=int(data.get("max_attempts", 3)),
        backoff_seconds=float(data.get("backoff_seconds", 0.05)),
    )
    if config.max_attempts < 1:
        raise ValueError("retry.max_attempts must be >= 1")
    return config


def parse_config(data: dict[str, Any]) -> InventoryConfig:
    """Parse a whole configuration document."""
    return InventoryConfig(
        plans=parse_plans(data["plans"]),
        storage=parse_storage(data["storage"]),
        pagination=parse_pagination(data.get("pagination") or {}),
        retry=parse_retry(data.get("retry") or {}),
        logging=LoggingConfig(level=str((data.get("logging") or {}).get("level", "INFO")).upper()),
    )
