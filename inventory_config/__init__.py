"""
inventory_config -- single public entrypoint for runtime configuration.

Responsibility:
    ``get_active_config()`` is the only place that reads configuration
    files or environment variables.  Returns a frozen ``InventoryConfig``.

Architecture position:
    Sits above ``inventory_kernel`` and below ``inventory_services``.  The
    kernel MUST NEVER import from ``inventory_config``; ``bridges`` turns
    the config into kernel inputs.

Failure modes:
    - ``FileNotFoundError`` -- the requested file does not exist.
    - ``KeyError`` / ``ValueError`` -- missing or invalid settings.
"""

from __future__ import annotations

import logging
import os
from dataclasses import replace
from pathlib import Path

from inventory_config.loader import load_yaml_file, parse_config
from inventory_config.schema import InventoryConfig

_logger = logging.getLogger("inventory_kernel.config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "defaults.yaml"

DATABASE_URL_ENV = "DATABASE_URL"


def get_active_config(
    path: Path | str | None = None,
    environ: dict[str, str] | None = None,
) -> InventoryConfig:
    """The ONLY public configuration entrypoint.

    Args:
        path: YAML file to load.  Defaults to the shipped defaults.yaml.
        environ: Environment mapping; defaults to ``os.environ``.

    Returns:
        InventoryConfig, with ``DATABASE_URL`` applied when set.
    """
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    env = os.environ if environ is None else environ

    config = parse_config(load_yaml_file(config_path))

    database_url = env.get(DATABASE_URL_ENV)
    if database_url:
        config = replace(config, storage=replace(config.storage, database_url=database_url))

    _logger.info(
        "config_loaded",
        extra={
            "config_path": str(config_path),
            "database_url_from_env": bool(database_url),
            "plans": [p.name for p in config.plans],
        },
    )
    return config


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "InventoryConfig",
    "get_active_config",
]
