"""
fuel_engines.calculator -- Per-fuel stock reconciliation.

Responsibility:
    Turn one shift's tank master data, meter readings and physical dips
    into one Reconciliation record per fuel type: opening stock, metered
    sales, actual dips, variance and revenue.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Consumed by fuel_services.shift_service at commit time.

Invariants enforced:
    - Variance definition: ``variance = (opening_stock - actual_dips) -
      calculated_sales`` for every record.  Positive variance is
      shrinkage; negative is unexplained surplus.
    - Fixed output order: one record per FuelType, in declaration order,
      including fuel types with no tanks or meters (all zeros).
    - No clamping: a meter delta is ``closing - opening`` as entered.  A
      regression that bypassed validation flows into the variance figure
      rather than being corrected here.
    - Determinism: identical inputs give identical records apart from
      ``id`` (fresh per call).  ``now`` is a parameter, never read from
      the system clock.

Failure modes:
    - MissingPriceError if ``prices`` has no entry for a fuel type.
    - No input validation is performed; run fuel_engines.validation first.

Defaults for incomplete input:
    - Missing dip -> 0.
    - Missing opening reading -> 0.
    - Missing closing reading -> the opening reading (delta 0).

Usage:
    from fuel_engines.calculator import reconcile

    records = reconcile(
        tanks, meters, openings, closings, dips,
        prices={FuelType.ADO: Decimal("1.85"), ...},
        operator_id="u1",
        now=clock.now(),
    )
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import uuid4

from fuel_engines.association import partition_meters
from fuel_engines.tracer import traced_engine
from fuel_kernel.domain.model import Meter, Reconciliation, Tank
from fuel_kernel.domain.values import (
    ZERO,
    FuelType,
    ReconciliationStatus,
    parse_quantity,
    to_decimal,
)
from fuel_kernel.exceptions import MissingPriceError
from fuel_kernel.logging_config import get_logger

logger = get_logger("engines.calculator")


def unit_price(prices: Mapping[Any, Any], fuel: FuelType) -> Decimal:
    """Look up the unit price for ``fuel`` (keyed by FuelType or its name)."""
    price = prices.get(fuel)
    if price is None:
        price = prices.get(fuel.value)
    if price is None:
        raise MissingPriceError(fuel.value)
    return to_decimal(price, f"price[{fuel.value}]")


def meter_delta(
    meter: Meter,
    openings: Mapping[str, Any],
    closings: Mapping[str, Any],
) -> Decimal:
    """Volume through ``meter`` this shift: ``closing - opening``, unclamped."""
    opening = parse_quantity(openings.get(meter.id))
    if opening is None:
        opening = ZERO
    closing = parse_quantity(closings.get(meter.id))
    if closing is None:
        closing = opening
    return closing - opening


def metered_sales(
    meters: Iterable[Meter],
    openings: Mapping[str, Any],
    closings: Mapping[str, Any],
) -> Decimal:
    return sum((meter_delta(m, openings, closings) for m in meters), ZERO)


def dip_total(tanks: Iterable[Tank], dips: Mapping[str, Any]) -> Decimal:
    total = ZERO
    for tank in tanks:
        volume = parse_quantity(dips.get(tank.id))
        if volume is not None:
            total += volume
    return total


@traced_engine(
    "calculator",
    "1.0",
    fingerprint_fields=("openings", "closings", "dips", "prices", "operator_id"),
)
def reconcile(
    tanks: Sequence[Tank],
    meters: Sequence[Meter],
    openings: Mapping[str, Any],
    closings: Mapping[str, Any],
    dips: Mapping[str, Any],
    prices: Mapping[Any, Any],
    operator_id: str,
    now: datetime,
) -> tuple[Reconciliation, ...]:
    """Produce one PENDING Reconciliation per fuel type.

    Preconditions:
        validate_readings and validate_dips returned no errors.

    Postconditions:
        ``len(result) == len(FuelType)``; version 1, empty history,
        receipts and transfers zero.
    """
    meters_by_fuel = partition_meters(meters)
    records: list[Reconciliation] = []

    for fuel in FuelType:
        price = unit_price(prices, fuel)
        fuel_tanks = [t for t in tanks if t.fuel_type == fuel]

        opening_stock = sum((t.current_volume for t in fuel_tanks), ZERO)
        actual_dips = dip_total(fuel_tanks, dips)
        sales = metered_sales(meters_by_fuel[fuel], openings, closings)
        variance = (opening_stock - actual_dips) - sales

        records.append(Reconciliation(
            id=f"rc-{fuel.value.lower()}-{uuid4().hex[:12]}",
            date=now.date(),
            fuel_type=fuel,
            opening_stock=opening_stock,
            receipts=ZERO,
            transfers=ZERO,
            calculated_sales=sales,
            actual_dips=actual_dips,
            variance=variance,
            revenue=sales * price,
            operator_id=operator_id,
            timestamp=now,
            is_locked=False,
            status=ReconciliationStatus.PENDING,
            version=1,
            version_history=(),
        ))

        logger.debug("fuel_reconciled", extra={
            "fuel_type": fuel.value,
            "tank_count": len(fuel_tanks),
            "meter_count": len(meters_by_fuel[fuel]),
            "opening_stock": str(opening_stock),
            "actual_dips": str(actual_dips),
            "calculated_sales": str(sales),
            "variance": str(variance),
        })

    return tuple(records)
