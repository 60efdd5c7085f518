"""
fuel_services.demo -- Sample operational day for demos and report testing.

Three records, one per fuel type, with variances of -50 L (ADO), -150 L
(ULP) and 0 L (ZOOM, already signed off).
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import uuid4

from fuel_engines.lifecycle import approve
from fuel_kernel.domain.model import Reconciliation
from fuel_kernel.domain.values import ZERO, FuelType

# fuel: (opening stock, metered sales, actual dips, unit price)
_SAMPLE_FIGURES: dict[FuelType, tuple[str, str, str, str]] = {
    FuelType.ADO: ("42000", "3200", "38850", "1.85"),
    FuelType.ULP: ("18500", "1200", "17450", "1.92"),
    FuelType.ZOOM: ("12200", "450", "11750", "2.10"),
}


def generate_sample_day(
    operator_id: str,
    now: datetime,
    approver_id: str = "u3",
) -> tuple[Reconciliation, ...]:
    records = []
    for fuel, (opening, sales, dips, price) in _SAMPLE_FIGURES.items():
        opening_d, sales_d, dips_d = Decimal(opening), Decimal(sales), Decimal(dips)
        record = Reconciliation(
            id=f"rc-{fuel.value.lower()}-demo-{now:%Y%m%d}-{uuid4().hex[:8]}",
            date=now.date(),
            fuel_type=fuel,
            opening_stock=opening_d,
            receipts=ZERO,
            transfers=ZERO,
            calculated_sales=sales_d,
            actual_dips=dips_d,
            variance=(opening_d - dips_d) - sales_d,
            revenue=sales_d * Decimal(price),
            operator_id=operator_id,
            timestamp=now,
        )
        if fuel == FuelType.ZOOM:
            record = approve(record, approver_id)
        records.append(record)
    return tuple(records)
