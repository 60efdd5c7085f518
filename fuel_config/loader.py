"""
Configuration Loader (``fuel_config.loader``).

Responsibility
--------------
Loads a YAML site file and parses it into the typed ``fuel_config.schema``
dataclasses.  Services obtain configuration through
``fuel_config.get_active_config()``, which delegates here.

Invariants enforced
-------------------
* Every parsed object is a frozen dataclass from ``schema.py`` or a
  kernel domain record.
* Every fuel type has a price; no silent defaults for required fields.
* ``compute_checksum`` produces a deterministic SHA-256 hash for
  configuration identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing keys, unknown fuel/meter types, bad numbers, tank volume
  outside capacity  -> ``InvalidConfigError``.
"""

from __future__ import annotations

import hashlib
import json
from decimal import Decimal
from pathlib import Path
from typing import Any

import yaml

from fuel_config.schema import InsightSettings, SiteConfig
from fuel_kernel.domain.model import Meter, Tank
from fuel_kernel.domain.values import FuelType, MeterType, to_decimal
from fuel_kernel.exceptions import InvalidConfigError


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_tank(data: dict[str, Any]) -> Tank:
    """Parse a Tank from a dict."""
    return Tank(
        id=data["id"],
        name=data.get("name", data["id"]),
        fuel_type=FuelType(data["fuel_type"]),
        capacity=to_decimal(data["capacity"], "capacity"),
        current_volume=to_decimal(data["current_volume"], "current_volume"),
    )


def parse_meter(data: dict[str, Any]) -> Meter:
    """Parse a Meter from a dict."""
    return Meter(
        id=data["id"],
        name=data.get("name", data["id"]),
        type=MeterType(data["type"]),
        last_reading=to_decimal(data.get("last_reading", 0), "last_reading"),
    )


def parse_prices(data: dict[str, Any]) -> dict[FuelType, Decimal]:
    """Parse the unit price table. Every FuelType must be priced."""
    prices = {
        FuelType(key): to_decimal(value, f"prices.{key}")
        for key, value in data.items()
    }
    missing = [fuel.value for fuel in FuelType if fuel not in prices]
    if missing:
        raise ValueError(f"no price for fuel type(s): {', '.join(missing)}")
    return prices


def parse_insight(data: dict[str, Any] | None) -> InsightSettings:
    if not data:
        return InsightSettings()
    defaults = InsightSettings()
    return InsightSettings(
        endpoint=data.get("endpoint"),
        model=data.get("model", defaults.model),
        timeout_seconds=float(data.get("timeout_seconds", defaults.timeout_seconds)),
        max_records=int(data.get("max_records", defaults.max_records)),
        api_key_env=data.get("api_key_env", defaults.api_key_env),
    )


def parse_site_config(data: dict[str, Any], source: str = "<dict>") -> SiteConfig:
    """
    Parse a ``SiteConfig`` from a dict.

    Preconditions:
        - ``data`` contains ``site_id``, ``prices``, ``tanks`` and ``meters``.
    Raises:
        InvalidConfigError: wrapping the underlying KeyError/ValueError/TypeError.
    """
    try:
        tanks = tuple(parse_tank(t) for t in data["tanks"])
        meters = tuple(parse_meter(m) for m in data["meters"])
        _require_unique_ids("tank", [t.id for t in tanks])
        _require_unique_ids("meter", [m.id for m in meters])
        return SiteConfig(
            site_id=data["site_id"],
            name=data.get("name", data["site_id"]),
            currency=data.get("currency", "USD"),
            prices=parse_prices(data["prices"]),
            tanks=tanks,
            meters=meters,
            variance_alert_threshold=to_decimal(
                data.get("variance_alert_threshold", 50), "variance_alert_threshold"
            ),
            insight=parse_insight(data.get("insight")),
            checksum=compute_checksum(data),
        )
    except KeyError as exc:
        raise InvalidConfigError(source, f"missing key {exc.args[0]!r}") from exc
    except (ValueError, TypeError) as exc:
        raise InvalidConfigError(source, str(exc)) from exc


def load_site_config(path: Path) -> SiteConfig:
    """Load and parse a YAML site file."""
    return parse_site_config(load_yaml_file(path), source=str(path))


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization (deterministic)."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


def _require_unique_ids(kind: str, ids: list[str]) -> None:
    seen: set[str] = set()
    for item_id in ids:
        if item_id in seen:
            raise ValueError(f"duplicate {kind} id {item_id!r}")
        seen.add(item_id)
