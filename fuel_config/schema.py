"""
Site configuration schema.

Defines the human-authored, reviewable description of a fuel site: unit
prices, tank and meter master data, the variance alert threshold and the
insight collaborator settings.  YAML files are parsed into these types by
the loader; every type is a frozen dataclass.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType
from typing import Mapping

from fuel_kernel.domain.model import Meter, Tank
from fuel_kernel.domain.values import FuelType


@dataclass(frozen=True)
class InsightSettings:
    """Endpoint for the optional free-text commentary collaborator.

    ``endpoint=None`` disables the call; the service then returns its
    placeholder text.
    """

    endpoint: str | None = None
    model: str = "default"
    timeout_seconds: float = 15.0
    max_records: int = 3
    api_key_env: str = "FUEL_RECON_INSIGHT_API_KEY"


@dataclass(frozen=True)
class SiteConfig:
    """Complete configuration for one fuel site."""

    site_id: str
    name: str
    currency: str
    prices: Mapping[FuelType, Decimal]
    tanks: tuple[Tank, ...]
    meters: tuple[Meter, ...]
    variance_alert_threshold: Decimal = Decimal("50")
    insight: InsightSettings = field(default_factory=InsightSettings)
    checksum: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.prices, MappingProxyType):
            object.__setattr__(self, "prices", MappingProxyType(dict(self.prices)))

    def tank(self, tank_id: str) -> Tank | None:
        for t in self.tanks:
            if t.id == tank_id:
                return t
        return None

    def meter(self, meter_id: str) -> Meter | None:
        for m in self.meters:
            if m.id == meter_id:
                return m
        return None
