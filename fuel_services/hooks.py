"""
fuel_services.hooks -- Post-commit master-data update events.

Committing a shift does NOT, by itself, move tank stock to the new dips
or advance meter readings to the closing values.  The commit emits a
``CommitOutcome`` listing those updates and hands it to every registered
``PostCommitHook``; with no hook registered, the next shift opens from
the unchanged master data.

``MasterDataAdvancer`` is the opt-in hook that applies those updates to
a ``MasterDataStore``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Any, Protocol

from fuel_kernel.domain.model import Meter, Reconciliation, Tank
from fuel_kernel.domain.values import parse_quantity
from fuel_kernel.logging_config import get_logger

logger = get_logger("services.hooks")


@dataclass(frozen=True)
class TankVolumeUpdate:
    tank_id: str
    previous_volume: Decimal
    new_volume: Decimal


@dataclass(frozen=True)
class MeterReadingUpdate:
    meter_id: str
    previous_reading: Decimal
    new_reading: Decimal


@dataclass(frozen=True)
class CommitOutcome:
    """Everything one shift commit produced."""

    shift_id: str
    operator_id: str
    reconciliations: tuple[Reconciliation, ...]
    tank_updates: tuple[TankVolumeUpdate, ...] = ()
    meter_updates: tuple[MeterReadingUpdate, ...] = ()


class PostCommitHook(Protocol):
    def __call__(self, outcome: CommitOutcome) -> None: ...


def plan_master_data_updates(
    tanks: Iterable[Tank],
    meters: Iterable[Meter],
    closings: Mapping[str, Any],
    dips: Mapping[str, Any],
) -> tuple[tuple[TankVolumeUpdate, ...], tuple[MeterReadingUpdate, ...]]:
    """Derive tank (-> dip) and meter (-> closing) updates from shift inputs."""
    tank_updates = []
    for tank in tanks:
        volume = parse_quantity(dips.get(tank.id))
        if volume is not None:
            tank_updates.append(TankVolumeUpdate(tank.id, tank.current_volume, volume))

    meter_updates = []
    for meter in meters:
        reading = parse_quantity(closings.get(meter.id))
        if reading is not None:
            meter_updates.append(MeterReadingUpdate(meter.id, meter.last_reading, reading))

    return tuple(tank_updates), tuple(meter_updates)


class MasterDataStore:
    """Current tank and meter master data for a site."""

    def __init__(self, tanks: Iterable[Tank], meters: Iterable[Meter]):
        self._tanks = tuple(tanks)
        self._meters = tuple(meters)

    @property
    def tanks(self) -> tuple[Tank, ...]:
        return self._tanks

    @property
    def meters(self) -> tuple[Meter, ...]:
        return self._meters

    def tank(self, tank_id: str) -> Tank | None:
        return next((t for t in self._tanks if t.id == tank_id), None)

    def meter(self, meter_id: str) -> Meter | None:
        return next((m for m in self._meters if m.id == meter_id), None)

    def replace_all(self, tanks: Iterable[Tank], meters: Iterable[Meter]) -> None:
        self._tanks = tuple(tanks)
        self._meters = tuple(meters)


class MasterDataAdvancer:
    """Post-commit hook that applies a commit's updates to a MasterDataStore.

    All new records are built before any is stored, so a dip above tank
    capacity (ValueError from Tank) leaves the store untouched.
    """

    def __init__(self, store: MasterDataStore):
        self._store = store

    def __call__(self, outcome: CommitOutcome) -> None:
        volumes = {u.tank_id: u.new_volume for u in outcome.tank_updates}
        readings = {u.meter_id: u.new_reading for u in outcome.meter_updates}

        tanks = [
            replace(t, current_volume=volumes[t.id]) if t.id in volumes else t
            for t in self._store.tanks
        ]
        meters = [
            replace(m, last_reading=readings[m.id]) if m.id in readings else m
            for m in self._store.meters
        ]
        self._store.replace_all(tanks, meters)

        logger.info("master_data_advanced", extra={
            "shift_id": outcome.shift_id,
            "tank_updates": len(volumes),
            "meter_updates": len(readings),
        })
