"""Command line interface for SeatPlanner."""
from __future__ import annotations

import argparse
import csv
import logging
from pathlib import Path
from typing import Sequence

from .csv_loader import load_all
from .solver import TieBreak


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Constraint aware event seating")
    parser.add_argument("--guests", required=True, help="Path to guests.csv")
    parser.add_argument("--tables", required=True, help="Path to tables.csv")
    parser.add_argument("--constraints", help="Path to constraints.csv")
    parser.add_argument("--tie-break", choices=[t.value for t in TieBreak], default=TieBreak.INPUT_ORDER.value,
                        help="How to choose between equally scored tables.")
    parser.add_argument("--validate-only", action="store_true",
                        help="Only report violations in the seating given in guests.csv.")
    parser.add_argument("--out-assignments", type=Path,
                        help="Write assignments CSV: guest,table,seat.")
    parser.add_argument("--out-report", type=Path,
                        help="Write per-table occupancy report CSV.")
    parser.add_argument("--verbose", action="store_true", help="Log each placement decision.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point used by ``seat-planner`` and ``python -m seat_planner.cli``."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    plan = load_all(args.guests, args.tables, args.constraints)

    if not args.validate_only:
        summary = plan.auto_assign(tie_break=args.tie_break)
        for a in summary.assigned:
            print(f"{a.guest_id},{a.table_id},{a.seat_index}")
        if summary.unplaced:
            print(f"[UNPLACED] {summary.unplaced_count} guests could not be seated: "
                  f"{'|'.join(summary.unplaced)}")

    # Optional outputs
    if args.out_assignments:
        args.out_assignments.parent.mkdir(parents=True, exist_ok=True)
        with args.out_assignments.open("w", newline="") as f:
            w = csv.writer(f)
            w.writerow(["guest", "table", "seat"])
            for g in sorted(plan.guests.values(), key=lambda g: g.id):
                if g.is_seated:
                    w.writerow([g.id, g.table_id, g.seat_index])

    report = plan.occupancy()
    for row in report.itertuples(index=False):
        print(f"[REPORT] {row.table} seated={row.seated}/{row.capacity} free={row.free}")

    if args.out_report:
        args.out_report.parent.mkdir(parents=True, exist_ok=True)
        report.to_csv(args.out_report, index=False)

    issues = plan.problems() + plan.violations()
    for v in issues:
        print(f"[VIOLATION] {v.table_id}: {v.message}")
    return 1 if issues else 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
