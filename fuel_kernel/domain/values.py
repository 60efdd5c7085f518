"""
Value types for the fuel reconciliation domain.

Enumerations for fuel grades, meter categories and record status, plus
the Decimal coercion helpers every layer uses.  All stock volumes, meter
readings, prices and revenue are ``Decimal``; floats from form input are
converted through ``str()`` so that ``1.85`` stays ``Decimal("1.85")``
rather than its binary approximation.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

ZERO = Decimal("0")


class FuelType(str, Enum):
    """Fuel grades. Declaration order is the reconciliation output order."""

    ADO = "ADO"    # Automotive diesel oil
    ULP = "ULP"    # Unleaded petrol
    ZOOM = "ZOOM"  # Premium unleaded


class MeterType(str, Enum):
    """Category of a flow-metering point."""

    GANTRY = "GANTRY"  # Bulk loading
    DRUM = "DRUM"
    PUMP = "PUMP"


class ReconciliationStatus(str, Enum):
    """Sign-off status of a reconciliation record."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"


def to_decimal(value: Any, name: str = "value") -> Decimal:
    """Coerce int/float/str/Decimal to Decimal.

    Raises:
        TypeError: for None, bool, or unsupported types.
        ValueError: for strings that are not numbers.
    """
    if isinstance(value, Decimal):
        return value
    if value is None or isinstance(value, bool):
        raise TypeError(f"{name} must be numeric, not {type(value).__name__}")
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, str):
        try:
            return Decimal(value.strip())
        except InvalidOperation:
            raise ValueError(f"{name} is not a number: {value!r}") from None
    raise TypeError(f"{name} must be numeric, not {type(value).__name__}")


def parse_quantity(value: Any) -> Decimal | None:
    """Return ``value`` as a finite Decimal, or None when absent or unusable.

    Absent, unparseable, NaN and infinite inputs all map to None; the
    validation engine reports them as missing entries.
    """
    if value is None:
        return None
    try:
        result = to_decimal(value)
    except (TypeError, ValueError):
        return None
    if not result.is_finite():
        return None
    return result
