"""Read-only checks over any seating state, however it was produced."""
from __future__ import annotations

from typing import Dict, Iterable, List

from .models import Constraint, ConstraintKind, Guest, Table, Violation


def _label(tables: Dict[str, Table], table_id: str) -> str:
    table = tables.get(table_id)
    return table.label if table is not None else "unknown"


def validate_constraints(
    constraints: Iterable[Constraint],
    guests: Iterable[Guest],
    tables: Iterable[Table],
) -> List[Violation]:
    """Report constraint breaches in the current assignment.

    A pair is only judged once both guests are seated; a must-sit-together
    pair with one guest still unseated is not a violation yet. Constraints
    naming unknown guests are skipped.
    """
    guest_by_id = {g.id: g for g in guests}
    table_by_id = {t.id: t for t in tables}
    violations: List[Violation] = []

    for c in constraints:
        a_id, b_id = c.guest_ids
        a = guest_by_id.get(a_id)
        b = guest_by_id.get(b_id)
        if a is None or b is None:
            continue
        if not a.is_seated or not b.is_seated:
            continue

        same_table = a.table_id == b.table_id
        if c.kind is ConstraintKind.MUST_SIT_TOGETHER and not same_table:
            violations.append(
                Violation(
                    constraint_id=c.id,
                    table_id=a.table_id,
                    message=(
                        f"{a.name} and {b.name} must sit together but are at "
                        f"{_label(table_by_id, a.table_id)} and {_label(table_by_id, b.table_id)}"
                    ),
                )
            )
        elif c.kind is ConstraintKind.MUST_NOT_SIT_TOGETHER and same_table:
            violations.append(
                Violation(
                    constraint_id=c.id,
                    table_id=a.table_id,
                    message=(
                        f"{a.name} and {b.name} must not sit together but are both at "
                        f"{_label(table_by_id, a.table_id)}"
                    ),
                )
            )
    return violations


def validate_seating(guests: Iterable[Guest], tables: Iterable[Table]) -> List[Violation]:
    """Structural problems: over capacity, seat out of range, shared seat index."""
    guest_by_id = {g.id: g for g in guests}
    problems: List[Violation] = []
    for table in tables:
        if len(table.assigned_guest_ids) > table.capacity:
            problems.append(
                Violation(
                    constraint_id="",
                    table_id=table.id,
                    message=f"{table.label} seats {len(table.assigned_guest_ids)} guests but has capacity {table.capacity}",
                )
            )
        seen: Dict[int, str] = {}
        for gid in table.assigned_guest_ids:
            guest = guest_by_id.get(gid)
            if guest is None or guest.seat_index is None:
                continue
            seat = guest.seat_index
            if not 0 <= seat < table.capacity:
                problems.append(
                    Violation(
                        constraint_id="",
                        table_id=table.id,
                        message=f"{guest.name} has seat {seat} outside {table.label} (capacity {table.capacity})",
                    )
                )
            if seat in seen:
                other = guest_by_id[seen[seat]]
                problems.append(
                    Violation(
                        constraint_id="",
                        table_id=table.id,
                        message=f"{other.name} and {guest.name} share seat {seat} at {table.label}",
                    )
                )
            else:
                seen[seat] = gid
    return problems
