"""Tests for the in-memory reconciliation ledger and audit trail."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from fuel_engines.lifecycle import approve
from fuel_kernel.domain.clock import DeterministicClock
from fuel_kernel.domain.values import FuelType
from fuel_kernel.exceptions import ReconciliationNotFoundError
from fuel_services.audit import AuditAction, AuditTrail
from fuel_services.demo import generate_sample_day
from fuel_services.ledger import ReconciliationLedger

DAY_ONE = datetime(2024, 3, 14, 18, 0, tzinfo=timezone.utc)
DAY_TWO = DAY_ONE + timedelta(days=1)


class TestReconciliationLedger:
    def setup_method(self):
        self.ledger = ReconciliationLedger()
        self.first = generate_sample_day("u1", DAY_ONE)
        self.second = generate_sample_day("u1", DAY_TWO)

    def test_newest_batch_first(self):
        self.ledger.add(self.first)
        self.ledger.add(self.second)

        ids = [r.id for r in self.ledger.records()]
        assert ids == [r.id for r in self.second] + [r.id for r in self.first]
        assert self.ledger.latest(3) == self.second

    def test_duplicate_id_rejected(self):
        self.ledger.add(self.first)

        with pytest.raises(ValueError, match="already in ledger"):
            self.ledger.add(self.first[:1])
        assert len(self.ledger) == 3

    def test_get_and_replace(self):
        self.ledger.add(self.first)
        ado = self.ledger.get(self.first[0].id)
        approved = approve(ado, "u3")

        self.ledger.replace(approved)

        assert self.ledger.get(ado.id).is_locked
        assert self.ledger.records()[0] is approved

    def test_missing_id(self):
        with pytest.raises(ReconciliationNotFoundError):
            self.ledger.get("rc-none")
        with pytest.raises(ReconciliationNotFoundError):
            self.ledger.replace(self.first[0])

    def test_filter_by_fuel(self):
        self.ledger.add(self.first)
        self.ledger.add(self.second)

        ulp = self.ledger.records(FuelType.ULP)
        assert len(ulp) == 2
        assert all(r.fuel_type == FuelType.ULP for r in ulp)

    def test_summaries(self):
        self.ledger.add(self.first)
        self.ledger.add(self.second)

        assert self.ledger.summary().total_variance == Decimal("-400")
        by_fuel = self.ledger.summary_by_fuel()
        assert by_fuel[FuelType.ULP].total_variance == Decimal("-300")
        assert by_fuel[FuelType.ZOOM].record_count == 2

    def test_empty_summary(self):
        assert self.ledger.summary().record_count == 0


class TestAuditTrail:
    def setup_method(self):
        self.clock = DeterministicClock(DAY_ONE)
        self.trail = AuditTrail(self.clock)

    def test_record_uses_clock(self):
        entry = self.trail.record(AuditAction.SYS_SEED, "seeded", "u1")

        assert entry.timestamp == DAY_ONE
        assert entry.action == "SYS_SEED"
        assert len(entry.id) == 9

    def test_explicit_timestamp(self):
        entry = self.trail.record(AuditAction.SHIFT_COMMIT, "x", "u1", timestamp=DAY_TWO)
        assert entry.timestamp == DAY_TWO

    def test_entries_newest_first(self):
        self.trail.record(AuditAction.SHIFT_COMMIT, "first", "u1")
        self.clock.advance(60)
        self.trail.record(AuditAction.RECON_APPROVED, "second", "u3")

        assert [e.details for e in self.trail.entries()] == ["second", "first"]
        assert len(self.trail) == 2

    def test_filter_by_action(self):
        self.trail.record(AuditAction.SHIFT_COMMIT, "a", "u1")
        self.trail.record(AuditAction.RECON_REVISED, "b", "u2")
        self.trail.record(AuditAction.SHIFT_COMMIT, "c", "u1")

        commits = self.trail.entries(AuditAction.SHIFT_COMMIT)
        assert [e.details for e in commits] == ["c", "a"]

    def test_entries_is_a_snapshot(self):
        self.trail.record(AuditAction.SHIFT_COMMIT, "a", "u1")
        snapshot = self.trail.entries()
        self.trail.record(AuditAction.SHIFT_COMMIT, "b", "u1")

        assert len(snapshot) == 1
