"""
fuel_engines.association -- Meter-to-fuel association by naming convention.

Responsibility:
    Decide which fuel grade a meter measures so that metered sales can be
    partitioned per fuel type.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Fixed precedence: ADO is tested first.  A meter is ADO when its id
      contains "ado" or "drum" (case-sensitive) or its type is GANTRY.
      Otherwise the first fuel type, in FuelType declaration order, whose
      lowercased name is a substring of the lowercased meter id.
    - Disjointness: each meter maps to at most one fuel type, so the
      partitions returned by ``partition_meters`` never overlap.

Failure modes:
    - A meter matching no rule maps to None and is left out of every
      partition; its fuel type then reports zero metered sales.

Note:
    This is an approximation by naming convention, not a foreign key.
    The substring semantics must stay exact so existing meter ids keep
    resolving.  Gantry meters are always ADO; a site gantry-loading
    ULP or ZOOM would be misclassified.
"""

from __future__ import annotations

from collections.abc import Iterable

from fuel_kernel.domain.model import Meter
from fuel_kernel.domain.values import FuelType, MeterType
from fuel_kernel.logging_config import get_logger

logger = get_logger("engines.association")

_ADO_ID_MARKERS = ("ado", "drum")


def fuel_type_for_meter(meter: Meter) -> FuelType | None:
    """Return the fuel type ``meter`` measures, or None if no rule matches."""
    if meter.type == MeterType.GANTRY or any(
        marker in meter.id for marker in _ADO_ID_MARKERS
    ):
        return FuelType.ADO

    meter_id = meter.id.lower()
    for fuel in FuelType:
        if fuel.value.lower() in meter_id:
            return fuel
    return None


def partition_meters(meters: Iterable[Meter]) -> dict[FuelType, tuple[Meter, ...]]:
    """Group meters by fuel type.

    Every FuelType is a key (empty tuple when no meter matches).  Input
    order is preserved within each group.
    """
    groups: dict[FuelType, list[Meter]] = {fuel: [] for fuel in FuelType}
    unassigned: list[str] = []

    for meter in meters:
        fuel = fuel_type_for_meter(meter)
        if fuel is None:
            unassigned.append(meter.id)
        else:
            groups[fuel].append(meter)

    if unassigned:
        logger.warning("meters_unassigned", extra={"meter_ids": unassigned})

    return {fuel: tuple(group) for fuel, group in groups.items()}
