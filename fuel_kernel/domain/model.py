"""
Fuel reconciliation domain records (``fuel_kernel.domain.model``).

Responsibility
--------------
Immutable data definitions for storage tanks, flow meters, reconciliation
records (with their version snapshots) and audit log entries.  No
behavior beyond construction-time invariant checks and serialization.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.  Imports only
``domain.values`` and the logging factory.

Invariants enforced
-------------------
* Tank stock bounds: ``0 <= current_volume <= capacity``.
* Variance definition: ``variance == (opening_stock - actual_dips) -
  calculated_sales`` exactly, checked on every Reconciliation.
* Approved records carry an ``approver_id``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from fuel_kernel.domain.values import (
    ZERO,
    FuelType,
    MeterType,
    ReconciliationStatus,
    to_decimal,
)
from fuel_kernel.logging_config import get_logger

logger = get_logger("domain.model")


def _coerce_decimal(obj: Any, *names: str) -> None:
    for name in names:
        value = getattr(obj, name)
        if not isinstance(value, Decimal):
            object.__setattr__(obj, name, to_decimal(value, name))


@dataclass(frozen=True, slots=True)
class Tank:
    """One physical storage vessel.

    ``current_volume`` is the last authoritative stock level; it becomes
    the opening stock of the next reconciliation.
    """

    id: str
    name: str
    fuel_type: FuelType
    capacity: Decimal
    current_volume: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.fuel_type, FuelType):
            object.__setattr__(self, "fuel_type", FuelType(self.fuel_type))
        _coerce_decimal(self, "capacity", "current_volume")

        if self.current_volume < ZERO or self.current_volume > self.capacity:
            raise ValueError(
                f"Tank {self.id} volume {self.current_volume} outside "
                f"[0, {self.capacity}]"
            )

    @property
    def fill_percentage(self) -> Decimal:
        """Current volume as a percentage of capacity."""
        if self.capacity == ZERO:
            return ZERO
        return self.current_volume / self.capacity * Decimal("100")


@dataclass(frozen=True, slots=True)
class Meter:
    """One flow-metering point. ``last_reading`` seeds the shift's opening."""

    id: str
    name: str
    type: MeterType
    last_reading: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.type, MeterType):
            object.__setattr__(self, "type", MeterType(self.type))
        _coerce_decimal(self, "last_reading")


@dataclass(frozen=True, slots=True)
class ReconciliationVersion:
    """Snapshot of a superseded reconciliation version."""

    version: int
    calculated_sales: Decimal
    variance: Decimal
    timestamp: datetime
    changed_by: str
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "calculatedSales": str(self.calculated_sales),
            "variance": str(self.variance),
            "timestamp": self.timestamp.isoformat(),
            "changedBy": self.changed_by,
            "reason": self.reason,
        }


@dataclass(frozen=True, slots=True)
class Reconciliation:
    """
    Stock reconciliation for one fuel type for one committed shift.

    Contract:
        Created by the calculator with ``version=1``, empty history,
        ``PENDING`` and unlocked.  Status changes and revisions produce
        new instances (see ``fuel_engines.lifecycle``).

    Guarantees:
        - ``variance`` always equals
          ``(opening_stock - actual_dips) - calculated_sales``.
        - ``version_history`` is an ordered tuple, oldest first.
    """

    id: str
    date: date
    fuel_type: FuelType
    opening_stock: Decimal
    receipts: Decimal
    transfers: Decimal
    calculated_sales: Decimal
    actual_dips: Decimal
    variance: Decimal
    revenue: Decimal
    operator_id: str
    timestamp: datetime
    is_locked: bool = False
    status: ReconciliationStatus = ReconciliationStatus.PENDING
    approver_id: str | None = None
    version: int = 1
    version_history: tuple[ReconciliationVersion, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        _coerce_decimal(
            self,
            "opening_stock",
            "receipts",
            "transfers",
            "calculated_sales",
            "actual_dips",
            "variance",
            "revenue",
        )
        if isinstance(self.version_history, list):
            object.__setattr__(self, "version_history", tuple(self.version_history))

        expected = (self.opening_stock - self.actual_dips) - self.calculated_sales
        if self.variance != expected:
            logger.critical("reconciliation_variance_inconsistent", extra={
                "reconciliation_id": self.id,
                "fuel_type": self.fuel_type.value,
                "opening_stock": str(self.opening_stock),
                "actual_dips": str(self.actual_dips),
                "calculated_sales": str(self.calculated_sales),
                "variance": str(self.variance),
                "expected_variance": str(expected),
            })
            raise ValueError(
                f"Variance {self.variance} inconsistent with opening "
                f"{self.opening_stock} - dips {self.actual_dips} - sales "
                f"{self.calculated_sales}"
            )

        if self.status == ReconciliationStatus.APPROVED and not self.approver_id:
            raise ValueError(f"Approved reconciliation {self.id} has no approver")

    @property
    def is_shrinkage(self) -> bool:
        """More fuel accounted for than physically found."""
        return self.variance > ZERO

    @property
    def is_surplus(self) -> bool:
        return self.variance < ZERO

    def to_dict(self) -> dict[str, Any]:
        """Structured form used by the insight and export collaborators."""
        data: dict[str, Any] = {
            "id": self.id,
            "date": self.date.isoformat(),
            "fuelType": self.fuel_type.value,
            "openingStock": str(self.opening_stock),
            "receipts": str(self.receipts),
            "transfers": str(self.transfers),
            "calculatedSales": str(self.calculated_sales),
            "actualDips": str(self.actual_dips),
            "variance": str(self.variance),
            "revenue": str(self.revenue),
            "isLocked": self.is_locked,
            "status": self.status.value,
            "operatorId": self.operator_id,
            "timestamp": self.timestamp.isoformat(),
            "version": self.version,
            "versionHistory": [v.to_dict() for v in self.version_history],
        }
        if self.approver_id is not None:
            data["approverId"] = self.approver_id
        return data


@dataclass(frozen=True, slots=True)
class AuditLog:
    """Append-only audit event. Written by the caller, never by the engines."""

    id: str
    action: str
    user_id: str
    details: str
    timestamp: datetime
