"""
fuel_engines.aggregation -- Rollup of reconciliation records for reporting.

Sums metered volume, revenue and variance over any collection of
Reconciliation records.  Summaries combine with ``+``, so totals over
partitioned subsets equal the total over the whole set; an empty input
yields all zeros.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from fuel_engines.tracer import traced_engine
from fuel_kernel.domain.model import Reconciliation
from fuel_kernel.domain.values import ZERO, FuelType, to_decimal


@dataclass(frozen=True)
class ReconciliationSummary:
    """Totals over a set of reconciliation records."""

    total_volume: Decimal = ZERO
    total_revenue: Decimal = ZERO
    total_variance: Decimal = ZERO
    record_count: int = 0

    def __add__(self, other: ReconciliationSummary) -> ReconciliationSummary:
        if not isinstance(other, ReconciliationSummary):
            return NotImplemented
        return ReconciliationSummary(
            total_volume=self.total_volume + other.total_volume,
            total_revenue=self.total_revenue + other.total_revenue,
            total_variance=self.total_variance + other.total_variance,
            record_count=self.record_count + other.record_count,
        )

    @classmethod
    def of(cls, record: Reconciliation) -> ReconciliationSummary:
        return cls(
            total_volume=record.calculated_sales,
            total_revenue=record.revenue,
            total_variance=record.variance,
            record_count=1,
        )


@traced_engine("aggregation", "1.0")
def summarize(records: Iterable[Reconciliation]) -> ReconciliationSummary:
    """Fold ``records`` into volume, revenue and variance totals."""
    summary = ReconciliationSummary()
    for record in records:
        summary = summary + ReconciliationSummary.of(record)
    return summary


def summarize_by_fuel(
    records: Iterable[Reconciliation],
) -> dict[FuelType, ReconciliationSummary]:
    """Per-fuel totals; every FuelType is present."""
    result = {fuel: ReconciliationSummary() for fuel in FuelType}
    for record in records:
        result[record.fuel_type] = result[record.fuel_type] + ReconciliationSummary.of(record)
    return result


def exceeds_variance_threshold(record: Reconciliation, threshold: Decimal | int | str) -> bool:
    """True when ``|variance|`` is strictly above ``threshold`` (litres)."""
    return abs(record.variance) > to_decimal(threshold, "threshold")
