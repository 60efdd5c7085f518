"""
fuel_engines.lifecycle -- Reconciliation sign-off and revision rules.

Responsibility:
    Define the reconciliation status state machine and produce the new
    record for an approval or a revision.  Records are immutable; every
    operation returns a replacement instance.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    The service shell decides WHO may approve; this module only decides
    whether the transition is legal.

Invariants enforced:
    - Lifecycle state machine: ``RECONCILIATION_TRANSITIONS`` defines the
      only valid status transitions (PENDING -> APPROVED).  APPROVED is
      terminal.
    - Locking: approval sets ``is_locked``; a locked record accepts no
      further approval or revision.
    - Versioning: each revision increments ``version`` by one and
      appends a snapshot of the superseded figures to ``version_history``.
    - Variance definition is re-established on every revision.

Failure modes:
    - ReconciliationLockedError when operating on a locked record.
    - InvalidStatusTransitionError for an edge not in the table.
    - ValueError for a revision without a reason or without changes.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Any

from fuel_kernel.domain.model import Reconciliation, ReconciliationVersion
from fuel_kernel.domain.values import ReconciliationStatus, to_decimal
from fuel_kernel.exceptions import (
    InvalidStatusTransitionError,
    ReconciliationLockedError,
)
from fuel_kernel.logging_config import get_logger

logger = get_logger("engines.lifecycle")


RECONCILIATION_TRANSITIONS: dict[ReconciliationStatus, frozenset[ReconciliationStatus]] = {
    ReconciliationStatus.PENDING: frozenset({ReconciliationStatus.APPROVED}),
    ReconciliationStatus.APPROVED: frozenset(),
}


def can_transition(from_status: ReconciliationStatus, to_status: ReconciliationStatus) -> bool:
    return to_status in RECONCILIATION_TRANSITIONS.get(from_status, frozenset())


def approve(record: Reconciliation, approver_id: str) -> Reconciliation:
    """Sign off ``record``: APPROVED, locked, ``approver_id`` set."""
    if record.is_locked:
        raise ReconciliationLockedError(record.id, "approve")
    if not can_transition(record.status, ReconciliationStatus.APPROVED):
        raise InvalidStatusTransitionError(
            record.id, record.status.value, ReconciliationStatus.APPROVED.value,
        )
    if not approver_id:
        raise ValueError("approver_id is required")

    logger.info("reconciliation_approved", extra={
        "reconciliation_id": record.id,
        "fuel_type": record.fuel_type.value,
        "approver_id": approver_id,
        "version": record.version,
    })
    return replace(
        record,
        status=ReconciliationStatus.APPROVED,
        approver_id=approver_id,
        is_locked=True,
    )


def revise(
    record: Reconciliation,
    *,
    changed_by: str,
    reason: str,
    now: datetime,
    price: Decimal | int | str,
    calculated_sales: Any = None,
    actual_dips: Any = None,
) -> Reconciliation:
    """Issue a new version of ``record`` with corrected sales and/or dips.

    The superseded figures are snapshotted into ``version_history`` with
    the time of the change, who made it and why.  Variance and revenue
    are recomputed; ``price`` is the unit price of the record's fuel.
    """
    if record.is_locked:
        raise ReconciliationLockedError(record.id, "revise")
    if not reason or not reason.strip():
        raise ValueError("A revision reason is required")
    if calculated_sales is None and actual_dips is None:
        raise ValueError("A revision must change calculated_sales or actual_dips")

    sales = record.calculated_sales if calculated_sales is None else to_decimal(
        calculated_sales, "calculated_sales"
    )
    dips = record.actual_dips if actual_dips is None else to_decimal(
        actual_dips, "actual_dips"
    )

    snapshot = ReconciliationVersion(
        version=record.version,
        calculated_sales=record.calculated_sales,
        variance=record.variance,
        timestamp=now,
        changed_by=changed_by,
        reason=reason,
    )
    revised = replace(
        record,
        calculated_sales=sales,
        actual_dips=dips,
        variance=(record.opening_stock - dips) - sales,
        revenue=sales * to_decimal(price, "price"),
        timestamp=now,
        version=record.version + 1,
        version_history=record.version_history + (snapshot,),
    )

    logger.info("reconciliation_revised", extra={
        "reconciliation_id": record.id,
        "fuel_type": record.fuel_type.value,
        "from_version": record.version,
        "to_version": revised.version,
        "changed_by": changed_by,
        "old_variance": str(record.variance),
        "new_variance": str(revised.variance),
    })
    return revised
