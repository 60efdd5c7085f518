"""
Pytest fixtures for the fuel reconciliation test suite.

Provides:
- Structured logging configured once per session, with per-test capture
- A deterministic clock
- Site master data (tanks, meters, prices) matching the packaged default
  site, with pump meters named so every meter resolves to one fuel type
"""

import json
import logging
from datetime import datetime, timezone
from decimal import Decimal
from io import StringIO

import pytest

from fuel_kernel.domain.clock import DeterministicClock
from fuel_kernel.domain.model import Meter, Tank
from fuel_kernel.domain.values import FuelType, MeterType
from fuel_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)

SHIFT_TIME = datetime(2024, 3, 15, 18, 0, 0, tzinfo=timezone.utc)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture fuel_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, service):
            service.commit(draft)
            logs = captured_logs()
            assert any(r["message"] == "shift_committed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("fuel_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Time
# =============================================================================


@pytest.fixture
def clock() -> DeterministicClock:
    return DeterministicClock(SHIFT_TIME)


# =============================================================================
# Site master data
# =============================================================================


@pytest.fixture
def tanks() -> tuple[Tank, ...]:
    return (
        Tank("t55-ado", "T55 (ADO Storage)", FuelType.ADO, Decimal("55000"), Decimal("42000")),
        Tank("t30-ulp", "T30 (ULP Storage)", FuelType.ULP, Decimal("30000"), Decimal("18500")),
        Tank("t30-zoom", "T30 (ZOOM Storage)", FuelType.ZOOM, Decimal("30000"), Decimal("12200")),
    )


@pytest.fixture
def meters() -> tuple[Meter, ...]:
    return (
        Meter("m-gantry-01", "Main Gantry Meter", MeterType.GANTRY, Decimal("1250400")),
        Meter("m-drum-01", "Drum Filling Point A", MeterType.DRUM, Decimal("45200")),
        Meter("m-ulp-pump-01", "ULP Pump 01", MeterType.PUMP, Decimal("890200")),
        Meter("m-zoom-pump-01", "ZOOM Pump 01", MeterType.PUMP, Decimal("550100")),
    )


@pytest.fixture
def prices() -> dict[FuelType, Decimal]:
    return {
        FuelType.ADO: Decimal("1.85"),
        FuelType.ULP: Decimal("1.92"),
        FuelType.ZOOM: Decimal("2.10"),
    }


@pytest.fixture
def closings() -> dict[str, Decimal]:
    """Closing readings: ADO 3000 + 200, ULP 1200, ZOOM 450."""
    return {
        "m-gantry-01": Decimal("1253400"),
        "m-drum-01": Decimal("45400"),
        "m-ulp-pump-01": Decimal("891400"),
        "m-zoom-pump-01": Decimal("550550"),
    }


@pytest.fixture
def dips() -> dict[str, Decimal]:
    """Dips giving variances ADO -50, ULP -150, ZOOM 0."""
    return {
        "t55-ado": Decimal("38850"),
        "t30-ulp": Decimal("17450"),
        "t30-zoom": Decimal("11750"),
    }
