#!/usr/bin/env python3
"""
Reconcile one shift from a YAML entry file.

Walks the entry wizard (readings -> dips -> review) against the active
site configuration, commits the shift, and prints the per-fuel records,
the shift totals and any rows whose variance breaches the site's alert
threshold.

Shift file format:
  operator_id: u1
  shift_id: shift-2024-01-01-am     # optional
  openings:                         # optional, defaults to meter last readings
    m-gantry-01: 1250400
  closings:
    m-gantry-01: 1253600
    ...
  dips:
    t55-ado: 38850
    ...

Usage:
  python3 scripts/reconcile_shift.py --shift shift.yaml
  python3 scripts/reconcile_shift.py --shift shift.yaml --export-dir out/
  python3 scripts/reconcile_shift.py --demo              # seeded sample day
  FUEL_RECON_CONFIG=sites/north.yaml python3 scripts/reconcile_shift.py --shift shift.yaml

Exit status: 0 on commit, 1 on validation errors or bad input.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import yaml

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from fuel_config import get_active_config  # noqa: E402
from fuel_config.schema import SiteConfig  # noqa: E402
from fuel_engines.aggregation import exceeds_variance_threshold, summarize  # noqa: E402
from fuel_kernel.domain.model import Reconciliation  # noqa: E402
from fuel_kernel.exceptions import FuelKernelError, ShiftValidationError  # noqa: E402
from fuel_kernel.logging_config import configure_logging  # noqa: E402
from fuel_services import InsightService, ShiftService, write_csv  # noqa: E402


def load_shift_file(path: Path) -> dict[str, Any]:
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if "operator_id" not in data:
        raise ValueError(f"{path}: operator_id is required")
    return data


def run_shift(service: ShiftService, entry: dict[str, Any]) -> tuple[Reconciliation, ...]:
    """Drive one shift through the wizard and commit it."""
    draft = service.open_shift(entry["operator_id"], entry.get("shift_id"))

    for meter_id, value in (entry.get("openings") or {}).items():
        draft = service.record_opening(draft, meter_id, value)
    for meter_id, value in (entry.get("closings") or {}).items():
        draft = service.record_closing(draft, meter_id, value)
    draft = service.advance(draft)

    for tank_id, value in (entry.get("dips") or {}).items():
        draft = service.record_dip(draft, tank_id, value)
    draft = service.advance(draft)

    return service.commit(draft).reconciliations


def print_records(records: Sequence[Reconciliation], config: SiteConfig) -> None:
    print(f"Site: {config.name} ({config.site_id})")
    print(f"{'Fuel':<6}{'Opening':>12}{'Sales':>12}{'Dips':>12}{'Variance':>12}{'Revenue':>14}  Status")
    print("-" * 78)
    for r in records:
        flag = " !" if exceeds_variance_threshold(r, config.variance_alert_threshold) else ""
        print(
            f"{r.fuel_type.value:<6}{r.opening_stock:>12}{r.calculated_sales:>12}"
            f"{r.actual_dips:>12}{r.variance:>12}{r.revenue:>14}  {r.status.value}{flag}"
        )

    total = summarize(records)
    print("-" * 78)
    print(f"Volume:   {total.total_volume} L")
    print(f"Revenue:  {config.currency} {total.total_revenue}")
    print(f"Variance: {total.total_variance} L")


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Reconcile a fuel shift from a YAML entry file.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--shift", type=Path, help="Shift entry YAML file")
    source.add_argument("--demo", action="store_true", help="Seed a sample operational day")
    parser.add_argument("--config", type=Path, default=None, help="Site YAML (default: FUEL_RECON_CONFIG or packaged default)")
    parser.add_argument("--export-dir", type=Path, default=None, help="Write one CSV per record here")
    parser.add_argument("--insight", action="store_true", help="Request commentary from the configured endpoint")
    parser.add_argument("--verbose", "-v", action="store_true", help="JSON logs at INFO to stderr")
    args = parser.parse_args()

    configure_logging(level=logging.INFO if args.verbose else logging.WARNING)

    try:
        config = get_active_config(args.config)
    except (FileNotFoundError, FuelKernelError, yaml.YAMLError) as exc:
        print(f"ERROR: {exc}")
        return 1

    service = ShiftService.from_config(config)

    try:
        if args.demo:
            records = service.seed_demo_day("u1")
        else:
            records = run_shift(service, load_shift_file(args.shift))
    except ShiftValidationError as exc:
        print(f"Shift {exc.shift_id} rejected at stage '{exc.stage}':")
        for error in exc.errors:
            print(f"  [{error.code.value}] {error.message}")
        return 1
    except (FileNotFoundError, ValueError, FuelKernelError, yaml.YAMLError) as exc:
        print(f"ERROR: {exc}")
        return 1

    print_records(records, config)

    if args.export_dir is not None:
        args.export_dir.mkdir(parents=True, exist_ok=True)
        for record in records:
            print(f"Wrote {write_csv(record, args.export_dir)}")

    if args.insight:
        with InsightService(config.insight) as insight:
            print()
            print(insight.request_insights(records).result())

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
