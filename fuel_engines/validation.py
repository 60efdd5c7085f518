"""
fuel_engines.validation -- Shift input validation rules.

Responsibility:
    Check that a shift's meter readings are complete and monotonic, and
    that every tank has a physical dip, before the entry wizard may
    advance.  Returns every violation found across all meters and tanks
    so the caller can present the full error set at once.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Imports only fuel_kernel domain types.

Invariants enforced:
    - Completeness: each violation is reported; checking never stops at
      the first failure.
    - No correction: a closing reading below its opening is reported as
      READING_REGRESSION, never adjusted (meters are monotonic counters;
      a decrease means miscapture, rollover or meter replacement).
    - Purity: inputs are never mutated.

Failure modes:
    - None.  Malformed values (non-numeric strings, NaN, infinity) are
      reported as missing entries rather than raised.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from fuel_engines.tracer import traced_engine
from fuel_kernel.domain.model import Meter, Tank
from fuel_kernel.domain.shift import WizardStage
from fuel_kernel.domain.values import ZERO, parse_quantity
from fuel_kernel.logging_config import get_logger

logger = get_logger("engines.validation")


class ErrorCode(str, Enum):
    """Recoverable, operator-correctable input errors."""

    MISSING_READING = "MissingReading"
    READING_REGRESSION = "ReadingRegression"
    MISSING_DIP = "MissingDip"


@dataclass(frozen=True)
class ValidationError:
    """One input violation, naming the meter or tank it concerns."""

    code: ErrorCode
    subject_id: str
    subject_name: str
    message: str
    field: str | None = None  # "opening" / "closing" for readings


@traced_engine("validation", "1.0", fingerprint_fields=("openings", "closings"))
def validate_readings(
    meters: Iterable[Meter],
    openings: Mapping[str, Any],
    closings: Mapping[str, Any],
) -> list[ValidationError]:
    """Check every meter has finite opening and closing readings, closing >= opening."""
    errors: list[ValidationError] = []

    for meter in meters:
        opening = parse_quantity(openings.get(meter.id))
        closing = parse_quantity(closings.get(meter.id))

        if opening is None:
            errors.append(ValidationError(
                code=ErrorCode.MISSING_READING,
                subject_id=meter.id,
                subject_name=meter.name,
                message=f"{meter.name} opening reading required.",
                field="opening",
            ))
        if closing is None:
            errors.append(ValidationError(
                code=ErrorCode.MISSING_READING,
                subject_id=meter.id,
                subject_name=meter.name,
                message=f"{meter.name} closing reading required.",
                field="closing",
            ))
        elif opening is not None and closing < opening:
            errors.append(ValidationError(
                code=ErrorCode.READING_REGRESSION,
                subject_id=meter.id,
                subject_name=meter.name,
                message=(
                    f"{meter.name} reading regression detected: "
                    f"closing {closing} < opening {opening}."
                ),
                field="closing",
            ))

    if errors:
        logger.info("readings_validation_failed", extra={
            "error_count": len(errors),
            "meter_ids": sorted({e.subject_id for e in errors}),
        })
    return errors


@traced_engine("validation", "1.0", fingerprint_fields=("dips",))
def validate_dips(
    tanks: Iterable[Tank],
    dips: Mapping[str, Any],
) -> list[ValidationError]:
    """Check every tank has a dip volume.

    A dip of exactly zero counts as "not entered".
    """
    errors: list[ValidationError] = []

    for tank in tanks:
        volume = parse_quantity(dips.get(tank.id))
        if volume is None or volume == ZERO:
            errors.append(ValidationError(
                code=ErrorCode.MISSING_DIP,
                subject_id=tank.id,
                subject_name=tank.name,
                message=f"{tank.name} physical dip volume required.",
            ))

    if errors:
        logger.info("dips_validation_failed", extra={
            "error_count": len(errors),
            "tank_ids": [e.subject_id for e in errors],
        })
    return errors


def validate_stage(
    stage: WizardStage,
    *,
    meters: Iterable[Meter],
    tanks: Iterable[Tank],
    openings: Mapping[str, Any],
    closings: Mapping[str, Any],
    dips: Mapping[str, Any],
) -> list[ValidationError]:
    """Run the checks gating progression out of ``stage``.

    REVIEW re-runs both sets, since commit consumes everything.
    """
    if stage == WizardStage.READINGS:
        return validate_readings(meters, openings, closings)
    if stage == WizardStage.DIPS:
        return validate_dips(tanks, dips)
    return validate_readings(meters, openings, closings) + validate_dips(tanks, dips)
