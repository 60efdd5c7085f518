"""
fuel_config -- single public entrypoint for site configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  Services never read YAML files or
    environment variables for site data directly.

Resolution order for the site file:
    1. the ``path`` argument,
    2. the ``FUEL_RECON_CONFIG`` environment variable,
    3. the packaged ``sites/default.yaml``.

Failure modes:
    - ``FileNotFoundError`` -- the resolved file does not exist.
    - ``InvalidConfigError`` -- the file does not describe a valid site.

Audit relevance:
    Every successful load emits a ``FUEL_CONFIG_TRACE`` log entry with the
    site id, source path and SHA-256 checksum, tying each committed
    reconciliation to the price table that produced its revenue.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from fuel_config.loader import load_site_config
from fuel_config.schema import InsightSettings, SiteConfig

_logger = logging.getLogger("fuel_kernel.config")

CONFIG_ENV_VAR = "FUEL_RECON_CONFIG"
DEFAULT_CONFIG_PATH = Path(__file__).parent / "sites" / "default.yaml"


def resolve_config_path(path: Path | str | None = None) -> Path:
    if path is not None:
        return Path(path)
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return DEFAULT_CONFIG_PATH


def get_active_config(path: Path | str | None = None) -> SiteConfig:
    """Load the active site configuration."""
    resolved = resolve_config_path(path)
    config = load_site_config(resolved)

    _logger.info(
        "FUEL_CONFIG_TRACE",
        extra={
            "trace_type": "FUEL_CONFIG_TRACE",
            "site_id": config.site_id,
            "source": str(resolved),
            "checksum": config.checksum,
            "tank_count": len(config.tanks),
            "meter_count": len(config.meters),
        },
    )
    return config


__all__ = [
    "CONFIG_ENV_VAR",
    "DEFAULT_CONFIG_PATH",
    "InsightSettings",
    "SiteConfig",
    "get_active_config",
    "resolve_config_path",
]
