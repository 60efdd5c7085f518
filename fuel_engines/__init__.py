"""
Module: fuel_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    reconciliation engines.  This is the canonical import surface for the
    service shell (fuel_services) and the command-line scripts.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import fuel_kernel (and sibling engine modules).
    MUST NOT import fuel_services or fuel_config.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()``.  Timestamps are
      passed in as explicit parameters by the caller.
    - Decimal-only arithmetic for volumes, readings, prices and revenue.
    - Determinism: identical inputs produce identical outputs (record ids
      excepted).

Usage:
    from fuel_engines import validate_readings, validate_dips, reconcile, summarize
"""

from fuel_kernel.logging_config import get_logger

logger = get_logger("engines")

from fuel_engines.aggregation import (
    ReconciliationSummary,
    exceeds_variance_threshold,
    summarize,
    summarize_by_fuel,
)
from fuel_engines.association import fuel_type_for_meter, partition_meters
from fuel_engines.calculator import (
    dip_total,
    meter_delta,
    metered_sales,
    reconcile,
    unit_price,
)
from fuel_engines.lifecycle import (
    RECONCILIATION_TRANSITIONS,
    approve,
    can_transition,
    revise,
)
from fuel_engines.validation import (
    ErrorCode,
    ValidationError,
    validate_dips,
    validate_readings,
    validate_stage,
)

__all__ = [
    # Validation
    "ErrorCode",
    "ValidationError",
    "validate_readings",
    "validate_dips",
    "validate_stage",
    # Association
    "fuel_type_for_meter",
    "partition_meters",
    # Calculator
    "reconcile",
    "unit_price",
    "meter_delta",
    "metered_sales",
    "dip_total",
    # Aggregation
    "ReconciliationSummary",
    "summarize",
    "summarize_by_fuel",
    "exceeds_variance_threshold",
    # Lifecycle
    "RECONCILIATION_TRANSITIONS",
    "can_transition",
    "approve",
    "revise",
]
