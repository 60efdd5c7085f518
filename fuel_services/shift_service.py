"""
fuel_services.shift_service -- Shift entry wizard and commit orchestration.

Responsibility:
    Drives a shift through the 3-stage entry wizard (READINGS -> DIPS ->
    REVIEW), gating each step with the validation engine, then commits:
    runs the calculator once, archives the records in the ledger, writes
    the audit entry and notifies post-commit hooks.  Also routes
    supervisor sign-off and revisions through the lifecycle engine.

Architecture position:
    Services -- stateful orchestration over the pure engines.
    Shift inputs live in immutable ``ShiftDraft`` values owned by the
    caller; every wizard method takes a draft and returns a new one.

Invariants enforced:
    - No stage is left while its validation returns errors; the full
      error list travels on ShiftValidationError.
    - Commit only from REVIEW, after re-validating all inputs.
    - A shift id commits at most once per service instance.
    - Master data is never modified by commit itself (see hooks).

Failure modes:
    - ShiftValidationError: inputs fail the stage's checks.
    - WizardStageError: operation not allowed at the draft's stage.
    - UnknownAssetError: reading/dip for an id not in master data.
    - ShiftAlreadyCommittedError: shift id committed before.
    - ReconciliationNotFoundError / ReconciliationLockedError /
      InvalidStatusTransitionError: from sign-off and revision.
    - Exceptions raised by a post-commit hook propagate after the
      records are archived and audited.

Non-goals:
    - Does NOT serialize concurrent commits; callers own that.
    - Does NOT enforce who may approve (authorization is external).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any

from fuel_config.schema import SiteConfig
from fuel_engines.calculator import reconcile, unit_price
from fuel_engines.lifecycle import approve as approve_record
from fuel_engines.lifecycle import revise as revise_record
from fuel_engines.validation import ValidationError, validate_stage
from fuel_kernel.domain.clock import Clock, SystemClock
from fuel_kernel.domain.model import Reconciliation
from fuel_kernel.domain.shift import ShiftDraft, WizardStage
from fuel_kernel.exceptions import (
    ShiftAlreadyCommittedError,
    ShiftValidationError,
    UnknownAssetError,
    WizardStageError,
)
from fuel_kernel.logging_config import LogContext, get_logger
from fuel_services.audit import AuditAction, AuditTrail
from fuel_services.demo import generate_sample_day
from fuel_services.hooks import (
    CommitOutcome,
    MasterDataStore,
    PostCommitHook,
    plan_master_data_updates,
)
from fuel_services.ledger import ReconciliationLedger

logger = get_logger("services.shift")


class ShiftService:
    """
    Shift wizard and commit pipeline for one site.

    Contract:
        Master data, prices, clock, ledger and audit trail are injected.
        Drafts are passed in and returned; the service keeps only the set
        of committed shift ids.

    Guarantees:
        - ``commit`` appends exactly one record per fuel type to the ledger
          and exactly one SHIFT_COMMIT audit entry.
        - Hooks run in registration order, after the audit entry.
    """

    def __init__(
        self,
        master_data: MasterDataStore,
        prices: Mapping[Any, Any],
        *,
        clock: Clock | None = None,
        ledger: ReconciliationLedger | None = None,
        audit: AuditTrail | None = None,
        hooks: Iterable[PostCommitHook] = (),
    ):
        self._master_data = master_data
        self._prices = dict(prices)
        self._clock = clock or SystemClock()
        self._ledger = ledger if ledger is not None else ReconciliationLedger()
        self._audit = audit if audit is not None else AuditTrail(self._clock)
        self._hooks: list[PostCommitHook] = list(hooks)
        self._committed: set[str] = set()

    @classmethod
    def from_config(
        cls,
        config: SiteConfig,
        *,
        clock: Clock | None = None,
        hooks: Iterable[PostCommitHook] = (),
    ) -> ShiftService:
        return cls(
            MasterDataStore(config.tanks, config.meters),
            config.prices,
            clock=clock,
            hooks=hooks,
        )

    @property
    def master_data(self) -> MasterDataStore:
        return self._master_data

    @property
    def ledger(self) -> ReconciliationLedger:
        return self._ledger

    @property
    def audit(self) -> AuditTrail:
        return self._audit

    def add_post_commit_hook(self, hook: PostCommitHook) -> None:
        self._hooks.append(hook)

    # -----------------------------------------------------------------
    # Wizard
    # -----------------------------------------------------------------

    def open_shift(self, operator_id: str, shift_id: str | None = None) -> ShiftDraft:
        """New draft with openings seeded from current meter readings."""
        draft = ShiftDraft.open(self._master_data.meters, operator_id, shift_id)
        logger.info("shift_opened", extra={
            "shift_id": draft.shift_id,
            "operator_id": operator_id,
            "meter_count": len(draft.openings),
        })
        return draft

    def record_opening(self, draft: ShiftDraft, meter_id: str, value: Any) -> ShiftDraft:
        self._require_stage(draft, WizardStage.READINGS, "record opening reading on")
        self._require_meter(meter_id)
        return draft.with_opening(meter_id, value)

    def record_closing(self, draft: ShiftDraft, meter_id: str, value: Any) -> ShiftDraft:
        self._require_stage(draft, WizardStage.READINGS, "record closing reading on")
        self._require_meter(meter_id)
        return draft.with_closing(meter_id, value)

    def record_dip(self, draft: ShiftDraft, tank_id: str, value: Any) -> ShiftDraft:
        self._require_stage(draft, WizardStage.DIPS, "record dip on")
        if self._master_data.tank(tank_id) is None:
            raise UnknownAssetError("tank", tank_id)
        return draft.with_dip(tank_id, value)

    def check(self, draft: ShiftDraft) -> list[ValidationError]:
        """Validation errors gating the draft's current stage."""
        return validate_stage(
            draft.stage,
            meters=self._master_data.meters,
            tanks=self._master_data.tanks,
            openings=draft.openings,
            closings=draft.closings,
            dips=draft.dips,
        )

    def advance(self, draft: ShiftDraft) -> ShiftDraft:
        """Move to the next stage if the current one validates cleanly."""
        next_stage = draft.stage.next
        if next_stage is None:
            raise WizardStageError(draft.shift_id, draft.stage.value, "advance")

        self._raise_on_errors(draft, self.check(draft))

        logger.info("shift_stage_advanced", extra={
            "shift_id": draft.shift_id,
            "from_stage": draft.stage.value,
            "to_stage": next_stage.value,
        })
        return draft.at_stage(next_stage)

    def back(self, draft: ShiftDraft) -> ShiftDraft:
        previous = draft.stage.previous
        if previous is None:
            raise WizardStageError(draft.shift_id, draft.stage.value, "go back from")
        return draft.at_stage(previous)

    def preview(self, draft: ShiftDraft) -> tuple[Reconciliation, ...]:
        """Compute the records a commit would produce, without archiving them."""
        self._require_stage(draft, WizardStage.REVIEW, "preview")
        self._raise_on_errors(draft, self.check(draft))
        return self._reconcile(draft)

    # -----------------------------------------------------------------
    # Commit
    # -----------------------------------------------------------------

    def commit(self, draft: ShiftDraft) -> CommitOutcome:
        """Reconcile the shift and archive the records."""
        self._require_stage(draft, WizardStage.REVIEW, "commit")
        if draft.shift_id in self._committed:
            raise ShiftAlreadyCommittedError(draft.shift_id)

        with LogContext.bind(shift_id=draft.shift_id, actor_id=draft.operator_id):
            self._raise_on_errors(draft, self.check(draft))

            records = self._reconcile(draft)
            tank_updates, meter_updates = plan_master_data_updates(
                self._master_data.tanks,
                self._master_data.meters,
                draft.closings,
                draft.dips,
            )
            outcome = CommitOutcome(
                shift_id=draft.shift_id,
                operator_id=draft.operator_id,
                reconciliations=records,
                tank_updates=tank_updates,
                meter_updates=meter_updates,
            )

            self._ledger.add(records)
            self._committed.add(draft.shift_id)
            self._audit.record(
                AuditAction.SHIFT_COMMIT,
                f"Shift {draft.shift_id} committed to ledger: "
                + ", ".join(f"{r.fuel_type.value} variance {r.variance}" for r in records),
                draft.operator_id,
                records[0].timestamp if records else None,
            )

            logger.info("shift_committed", extra={
                "reconciliation_ids": [r.id for r in records],
                "total_variance": str(sum((r.variance for r in records), Decimal("0"))),
                "hook_count": len(self._hooks),
            })

            for hook in self._hooks:
                try:
                    hook(outcome)
                except Exception:
                    logger.error("post_commit_hook_failed", exc_info=True, extra={
                        "hook": type(hook).__name__,
                    })
                    raise

        return outcome

    # -----------------------------------------------------------------
    # Sign-off and revision
    # -----------------------------------------------------------------

    def approve(self, reconciliation_id: str, approver_id: str) -> Reconciliation:
        """Supervisor sign-off: APPROVED and locked."""
        approved = approve_record(self._ledger.get(reconciliation_id), approver_id)
        self._ledger.replace(approved)
        self._audit.record(
            AuditAction.RECON_APPROVED,
            f"Reconciliation {approved.id} ({approved.fuel_type.value}) approved.",
            approver_id,
        )
        return approved

    def revise(
        self,
        reconciliation_id: str,
        *,
        changed_by: str,
        reason: str,
        calculated_sales: Any = None,
        actual_dips: Any = None,
    ) -> Reconciliation:
        """Issue a corrected version of an unlocked record."""
        current = self._ledger.get(reconciliation_id)
        revised = revise_record(
            current,
            changed_by=changed_by,
            reason=reason,
            now=self._clock.now(),
            price=unit_price(self._prices, current.fuel_type),
            calculated_sales=calculated_sales,
            actual_dips=actual_dips,
        )
        self._ledger.replace(revised)
        self._audit.record(
            AuditAction.RECON_REVISED,
            f"Reconciliation {revised.id} revised to v{revised.version}: {reason}",
            changed_by,
        )
        return revised

    def seed_demo_day(self, operator_id: str) -> tuple[Reconciliation, ...]:
        """Archive a generated sample day (see fuel_services.demo)."""
        records = generate_sample_day(operator_id, self._clock.now())
        self._ledger.add(records)
        self._audit.record(
            AuditAction.SYS_SEED,
            "Generated full operational day for testing.",
            operator_id,
        )
        return records

    # -----------------------------------------------------------------
    # Internals
    # -----------------------------------------------------------------

    def _reconcile(self, draft: ShiftDraft) -> tuple[Reconciliation, ...]:
        return reconcile(
            self._master_data.tanks,
            self._master_data.meters,
            draft.openings,
            draft.closings,
            draft.dips,
            self._prices,
            draft.operator_id,
            self._clock.now(),
        )

    def _require_stage(self, draft: ShiftDraft, stage: WizardStage, operation: str) -> None:
        if draft.stage != stage:
            raise WizardStageError(draft.shift_id, draft.stage.value, operation)

    def _require_meter(self, meter_id: str) -> None:
        if self._master_data.meter(meter_id) is None:
            raise UnknownAssetError("meter", meter_id)

    def _raise_on_errors(self, draft: ShiftDraft, errors: list[ValidationError]) -> None:
        if errors:
            logger.info("shift_validation_rejected", extra={
                "shift_id": draft.shift_id,
                "stage": draft.stage.value,
                "error_codes": [e.code.value for e in errors],
            })
            raise ShiftValidationError(draft.shift_id, draft.stage.value, tuple(errors))
