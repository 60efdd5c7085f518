"""
fuel_services.ledger -- In-memory reconciliation archive.

Holds committed reconciliation records, newest batch first, and serves
the reporting rollups.  Records are immutable; sign-off and revision
swap in the replacement instance under the same id.
"""

from __future__ import annotations

from collections.abc import Iterable

from fuel_engines.aggregation import ReconciliationSummary, summarize, summarize_by_fuel
from fuel_kernel.domain.model import Reconciliation
from fuel_kernel.domain.values import FuelType
from fuel_kernel.exceptions import ReconciliationNotFoundError
from fuel_kernel.logging_config import get_logger

logger = get_logger("services.ledger")


class ReconciliationLedger:
    """Newest-first collection of reconciliation records keyed by id."""

    def __init__(self, records: Iterable[Reconciliation] = ()):
        self._records: list[Reconciliation] = list(records)

    def add(self, records: Iterable[Reconciliation]) -> None:
        """Prepend a committed batch, keeping the batch's own order."""
        batch = list(records)
        existing = {r.id for r in self._records}
        for record in batch:
            if record.id in existing:
                raise ValueError(f"Reconciliation {record.id} already in ledger")
        self._records[:0] = batch
        logger.info("ledger_batch_added", extra={
            "record_ids": [r.id for r in batch],
            "ledger_size": len(self._records),
        })

    def get(self, reconciliation_id: str) -> Reconciliation:
        for record in self._records:
            if record.id == reconciliation_id:
                return record
        raise ReconciliationNotFoundError(reconciliation_id)

    def replace(self, record: Reconciliation) -> None:
        for idx, existing in enumerate(self._records):
            if existing.id == record.id:
                self._records[idx] = record
                return
        raise ReconciliationNotFoundError(record.id)

    def records(self, fuel_type: FuelType | None = None) -> tuple[Reconciliation, ...]:
        if fuel_type is None:
            return tuple(self._records)
        return tuple(r for r in self._records if r.fuel_type == fuel_type)

    def latest(self, limit: int) -> tuple[Reconciliation, ...]:
        return tuple(self._records[:limit])

    def summary(self) -> ReconciliationSummary:
        return summarize(self._records)

    def summary_by_fuel(self) -> dict[FuelType, ReconciliationSummary]:
        return summarize_by_fuel(self._records)

    def __len__(self) -> int:
        return len(self._records)
