"""
Tests for reconciliation sign-off and revision.

Covers:
- PENDING -> APPROVED is the only legal edge
- Approval locks the record
- Revisions bump the version, snapshot prior figures, recompute variance
- Locked records reject both operations
"""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from fuel_engines.lifecycle import (
    RECONCILIATION_TRANSITIONS,
    approve,
    can_transition,
    revise,
)
from fuel_kernel.domain.model import Reconciliation
from fuel_kernel.domain.values import FuelType, ReconciliationStatus
from fuel_kernel.exceptions import ReconciliationLockedError

CREATED = datetime(2024, 3, 15, 18, 0, tzinfo=timezone.utc)
LATER = CREATED + timedelta(hours=2)


def _pending() -> Reconciliation:
    return Reconciliation(
        id="rc-ulp-1",
        date=date(2024, 3, 15),
        fuel_type=FuelType.ULP,
        opening_stock=Decimal("18500"),
        receipts=Decimal("0"),
        transfers=Decimal("0"),
        calculated_sales=Decimal("1200"),
        actual_dips=Decimal("17450"),
        variance=Decimal("-150"),
        revenue=Decimal("2304.00"),
        operator_id="u1",
        timestamp=CREATED,
    )


class TestTransitions:
    def test_table(self):
        assert RECONCILIATION_TRANSITIONS[ReconciliationStatus.APPROVED] == frozenset()
        assert can_transition(ReconciliationStatus.PENDING, ReconciliationStatus.APPROVED)
        assert not can_transition(ReconciliationStatus.APPROVED, ReconciliationStatus.PENDING)
        assert not can_transition(ReconciliationStatus.PENDING, ReconciliationStatus.PENDING)


class TestApprove:
    def test_approve_locks(self):
        record = _pending()
        approved = approve(record, "u3")

        assert approved.status == ReconciliationStatus.APPROVED
        assert approved.approver_id == "u3"
        assert approved.is_locked is True
        assert approved.variance == record.variance
        assert record.status == ReconciliationStatus.PENDING

    def test_approve_twice_rejected(self):
        approved = approve(_pending(), "u3")

        with pytest.raises(ReconciliationLockedError) as exc_info:
            approve(approved, "u4")
        assert exc_info.value.operation == "approve"

    def test_approver_required(self):
        with pytest.raises(ValueError):
            approve(_pending(), "")


class TestRevise:
    def test_revise_dips(self):
        record = _pending()
        revised = revise(
            record, changed_by="u2", reason="Re-dip after settling",
            now=LATER, price="1.92", actual_dips=Decimal("17300"),
        )

        assert revised.version == 2
        assert revised.actual_dips == Decimal("17300")
        assert revised.variance == Decimal("0")
        assert revised.revenue == Decimal("2304.00")
        assert revised.timestamp == LATER
        assert revised.id == record.id

    def test_snapshot_holds_prior_figures(self):
        revised = revise(
            _pending(), changed_by="u2", reason="Meter misread",
            now=LATER, price="1.92", calculated_sales="1250",
        )
        snapshot = revised.version_history[-1]

        assert snapshot.version == 1
        assert snapshot.calculated_sales == Decimal("1200")
        assert snapshot.variance == Decimal("-150")
        assert snapshot.timestamp == LATER
        assert snapshot.changed_by == "u2"
        assert snapshot.reason == "Meter misread"
        assert revised.calculated_sales == Decimal("1250")
        assert revised.variance == Decimal("-200")
        assert revised.revenue == Decimal("2400.00")

    def test_history_grows_in_order(self):
        first = revise(_pending(), changed_by="u2", reason="a", now=LATER, price="1.92", actual_dips=17400)
        second = revise(first, changed_by="u2", reason="b", now=LATER, price="1.92", actual_dips=17350)

        assert second.version == 3
        assert [v.version for v in second.version_history] == [1, 2]
        assert [v.reason for v in second.version_history] == ["a", "b"]

    def test_locked_record_rejected(self):
        approved = approve(_pending(), "u3")

        with pytest.raises(ReconciliationLockedError):
            revise(approved, changed_by="u2", reason="late fix", now=LATER, price="1.92", actual_dips=1)

    def test_reason_required(self):
        with pytest.raises(ValueError, match="reason"):
            revise(_pending(), changed_by="u2", reason="  ", now=LATER, price="1.92", actual_dips=1)

    def test_change_required(self):
        with pytest.raises(ValueError, match="must change"):
            revise(_pending(), changed_by="u2", reason="nothing", now=LATER, price="1.92")
