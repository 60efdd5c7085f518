"""
Pure domain layer.

Immutable records and value types for fuel shift reconciliation with NO
dependencies on storage, network or the system clock (``SystemClock``
is the one sanctioned time boundary).
"""

from fuel_kernel.domain.clock import (
    Clock,
    DeterministicClock,
    SequentialClock,
    SystemClock,
)
from fuel_kernel.domain.model import (
    AuditLog,
    Meter,
    Reconciliation,
    ReconciliationVersion,
    Tank,
)
from fuel_kernel.domain.shift import ShiftDraft, WizardStage
from fuel_kernel.domain.values import (
    ZERO,
    FuelType,
    MeterType,
    ReconciliationStatus,
    parse_quantity,
    to_decimal,
)

__all__ = [
    # Clock
    "Clock",
    "SystemClock",
    "DeterministicClock",
    "SequentialClock",
    # Records
    "Tank",
    "Meter",
    "Reconciliation",
    "ReconciliationVersion",
    "AuditLog",
    # Shift
    "ShiftDraft",
    "WizardStage",
    # Values
    "ZERO",
    "FuelType",
    "MeterType",
    "ReconciliationStatus",
    "parse_quantity",
    "to_decimal",
]
