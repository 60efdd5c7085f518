"""
Shift draft -- immutable working state of the 3-stage entry wizard.

The draft holds the operator's per-shift inputs (opening and closing
meter readings, tank dips) and the wizard stage reached.  Every update
returns a new draft; nothing is shared or mutated between stages.  The
draft is handed wholesale to the calculator at commit.

Values are stored exactly as entered (numbers or strings); validation
decides what counts as missing.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any
from uuid import uuid4

from fuel_kernel.domain.model import Meter


class WizardStage(str, Enum):
    """Entry wizard stages, in order."""

    READINGS = "readings"  # Opening/closing meter readings
    DIPS = "dips"          # Physical tank dips
    REVIEW = "review"      # Confirm and commit

    @property
    def next(self) -> WizardStage | None:
        stages = list(WizardStage)
        idx = stages.index(self)
        return stages[idx + 1] if idx + 1 < len(stages) else None

    @property
    def previous(self) -> WizardStage | None:
        stages = list(WizardStage)
        idx = stages.index(self)
        return stages[idx - 1] if idx > 0 else None


def _freeze(entries: Mapping[str, Any] | None) -> MappingProxyType:
    return MappingProxyType(dict(entries or {}))


@dataclass(frozen=True)
class ShiftDraft:
    """
    Caller-owned shift inputs.

    Contract:
        ``openings``/``closings`` are keyed by meter id, ``dips`` by tank id.
        All three are read-only mappings.

    Guarantees:
        - ``with_*`` and ``at_stage`` never modify ``self``.
    """

    shift_id: str
    operator_id: str
    stage: WizardStage = WizardStage.READINGS
    openings: Mapping[str, Any] = field(default_factory=dict)
    closings: Mapping[str, Any] = field(default_factory=dict)
    dips: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for name in ("openings", "closings", "dips"):
            value = getattr(self, name)
            if not isinstance(value, MappingProxyType):
                object.__setattr__(self, name, _freeze(value))

    @classmethod
    def open(
        cls,
        meters: Iterable[Meter],
        operator_id: str,
        shift_id: str | None = None,
    ) -> ShiftDraft:
        """Start a shift with openings pre-populated from meter master data."""
        return cls(
            shift_id=shift_id or f"shift-{uuid4().hex[:12]}",
            operator_id=operator_id,
            openings={m.id: m.last_reading for m in meters},
        )

    def with_opening(self, meter_id: str, value: Any) -> ShiftDraft:
        return replace(self, openings={**self.openings, meter_id: value})

    def with_closing(self, meter_id: str, value: Any) -> ShiftDraft:
        return replace(self, closings={**self.closings, meter_id: value})

    def with_dip(self, tank_id: str, value: Any) -> ShiftDraft:
        return replace(self, dips={**self.dips, tank_id: value})

    def at_stage(self, stage: WizardStage) -> ShiftDraft:
        return replace(self, stage=stage)

    def cleared(self, roll_forward: bool = False) -> ShiftDraft:
        """Fresh draft for the next shift; closings and dips are dropped.

        By default the openings are kept as entered. With ``roll_forward``
        each recorded closing becomes the next opening for its meter, which
        matches what MasterDataAdvancer writes back after a commit.
        """
        openings = {**self.openings, **self.closings} if roll_forward else self.openings
        return replace(
            self,
            shift_id=f"shift-{uuid4().hex[:12]}",
            stage=WizardStage.READINGS,
            openings=openings,
            closings={},
            dips={},
        )
