"""
Tests for the shift validation rules.

Covers:
- Missing opening/closing readings
- Reading regression (closing below opening) is reported, never corrected
- Missing and zero dips
- Completeness: every violation across meters and tanks is returned
- Stage gating via validate_stage
"""

from decimal import Decimal

from fuel_engines.validation import (
    ErrorCode,
    validate_dips,
    validate_readings,
    validate_stage,
)
from fuel_kernel.domain.model import Meter, Tank
from fuel_kernel.domain.shift import WizardStage
from fuel_kernel.domain.values import FuelType, MeterType


class TestValidateReadings:
    def setup_method(self):
        self.meter = Meter("m-ado-01", "ADO Pump", MeterType.PUMP, Decimal("500"))

    def test_clean_readings(self):
        assert validate_readings([self.meter], {"m-ado-01": 500}, {"m-ado-01": 800}) == []

    def test_equal_readings_allowed(self):
        assert validate_readings([self.meter], {"m-ado-01": 500}, {"m-ado-01": 500}) == []

    def test_regression_reported(self):
        errors = validate_readings([self.meter], {"m-ado-01": 500}, {"m-ado-01": 400})

        assert len(errors) == 1
        assert errors[0].code == ErrorCode.READING_REGRESSION
        assert errors[0].subject_id == "m-ado-01"
        assert "ADO Pump" in errors[0].message

    def test_regression_100_to_90_never_corrected(self):
        closings = {"m-ado-01": 90}
        errors = validate_readings([self.meter], {"m-ado-01": 100}, closings)

        assert [e.code for e in errors] == [ErrorCode.READING_REGRESSION]
        assert closings == {"m-ado-01": 90}

    def test_missing_closing(self):
        errors = validate_readings([self.meter], {"m-ado-01": 500}, {})

        assert len(errors) == 1
        assert errors[0].code == ErrorCode.MISSING_READING
        assert errors[0].field == "closing"
        assert errors[0].message == "ADO Pump closing reading required."

    def test_missing_both_reports_two_errors(self):
        errors = validate_readings([self.meter], {}, {})

        assert [e.field for e in errors] == ["opening", "closing"]
        assert all(e.code == ErrorCode.MISSING_READING for e in errors)

    def test_non_numeric_closing_is_missing(self):
        errors = validate_readings([self.meter], {"m-ado-01": 500}, {"m-ado-01": "12a"})

        assert [e.code for e in errors] == [ErrorCode.MISSING_READING]

    def test_nan_opening_is_missing(self):
        errors = validate_readings([self.meter], {"m-ado-01": "NaN"}, {"m-ado-01": 600})

        assert [(e.code, e.field) for e in errors] == [(ErrorCode.MISSING_READING, "opening")]

    def test_reports_all_meters(self, meters):
        errors = validate_readings(meters, {m.id: m.last_reading for m in meters}, {})

        assert {e.subject_id for e in errors} == {m.id for m in meters}

    def test_string_readings_compared_numerically(self):
        errors = validate_readings([self.meter], {"m-ado-01": "900"}, {"m-ado-01": "1000"})

        assert errors == []


class TestValidateDips:
    def setup_method(self):
        self.tank = Tank("t55-ado", "T55 (ADO Storage)", FuelType.ADO, 55000, 42000)

    def test_dip_present(self):
        assert validate_dips([self.tank], {"t55-ado": 43800}) == []

    def test_dip_omitted_gives_exactly_one_error(self):
        errors = validate_dips([self.tank], {})

        assert len(errors) == 1
        assert errors[0].code == ErrorCode.MISSING_DIP
        assert errors[0].subject_id == "t55-ado"
        assert errors[0].message == "T55 (ADO Storage) physical dip volume required."

    def test_zero_dip_counts_as_missing(self):
        errors = validate_dips([self.tank], {"t55-ado": 0})

        assert [e.code for e in errors] == [ErrorCode.MISSING_DIP]

    def test_reports_all_tanks(self, tanks):
        assert len(validate_dips(tanks, {})) == len(tanks)


class TestCompleteness:
    def test_missing_meter_and_tank_both_named(self):
        meter = Meter("m-ulp-01", "ULP Pump", MeterType.PUMP, 0)
        tank = Tank("t30-ulp", "T30", FuelType.ULP, 30000, 18500)

        errors = validate_readings([meter], {}, {}) + validate_dips([tank], {})

        assert len(errors) >= 2
        assert any(e.subject_id == "m-ulp-01" for e in errors)
        assert any(e.subject_id == "t30-ulp" for e in errors)


class TestValidateStage:
    def _validate(self, stage, meters, tanks, closings=None, dips=None):
        return validate_stage(
            stage,
            meters=meters,
            tanks=tanks,
            openings={m.id: m.last_reading for m in meters},
            closings=closings or {},
            dips=dips or {},
        )

    def test_readings_stage_ignores_dips(self, meters, tanks, closings):
        assert self._validate(WizardStage.READINGS, meters, tanks, closings=closings) == []

    def test_dips_stage_ignores_readings(self, meters, tanks, dips):
        assert self._validate(WizardStage.DIPS, meters, tanks, dips=dips) == []

    def test_review_runs_both(self, meters, tanks):
        errors = self._validate(WizardStage.REVIEW, meters, tanks)
        codes = {e.code for e in errors}

        assert codes == {ErrorCode.MISSING_READING, ErrorCode.MISSING_DIP}
        assert len(errors) == len(meters) + len(tanks)
