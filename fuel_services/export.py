"""
fuel_services.export -- One-way renderings of a reconciliation record.

- ``to_csv``: fixed 10-column header plus one data row.
- ``notification_summary``: fixed-template text for out-of-band alerts.

Both are lossy projections; nothing here parses back into a
Reconciliation.
"""

from __future__ import annotations

import csv
import io
from decimal import Decimal
from pathlib import Path

from fuel_kernel.domain.model import Reconciliation
from fuel_kernel.logging_config import get_logger

logger = get_logger("services.export")

CSV_HEADER = (
    "Fuel Type",
    "Date",
    "Opening Stock",
    "Receipts",
    "Sales (Metered)",
    "Actual Dip",
    "Variance",
    "Revenue",
    "Status",
    "Operator",
)


def csv_row(record: Reconciliation) -> tuple[str, ...]:
    return (
        record.fuel_type.value,
        record.date.isoformat(),
        str(record.opening_stock),
        str(record.receipts),
        str(record.calculated_sales),
        str(record.actual_dips),
        str(record.variance),
        str(record.revenue),
        record.status.value,
        record.operator_id,
    )


def to_csv(record: Reconciliation) -> str:
    """Header line and one data row, newline-separated, no trailing newline."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    writer.writerow(csv_row(record))
    return buffer.getvalue().rstrip("\n")


def export_filename(record: Reconciliation) -> str:
    return f"Recon_{record.fuel_type.value}_{record.date.isoformat()}.csv"


def write_csv(record: Reconciliation, directory: Path) -> Path:
    """Write ``to_csv(record)`` into ``directory`` and return the file path."""
    path = Path(directory) / export_filename(record)
    path.write_text(to_csv(record) + "\n", encoding="utf-8")
    logger.info("reconciliation_exported", extra={
        "reconciliation_id": record.id,
        "path": str(path),
    })
    return path


def notification_summary(record: Reconciliation, currency_symbol: str = "$") -> str:
    """Human-readable alert text for messaging channels."""
    variance = record.variance.quantize(Decimal("0.01"))
    revenue = record.revenue.quantize(Decimal("0.01"))
    return "\n".join([
        "\U0001F6A8 *Fuel Reconciliation Alert*",
        f"Grade: {record.fuel_type.value}",
        f"Date: {record.date.isoformat()}",
        "-----------------------",
        f"Metered Sales: {record.calculated_sales} L",
        f"Actual Variance: {variance} L",
        f"Revenue: {currency_symbol}{revenue:,}",
        f"Status: {record.status.value}",
        f"Operator: {record.operator_id}",
    ])
