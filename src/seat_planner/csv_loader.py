"""CSV loading utilities."""
from __future__ import annotations

import math
from pathlib import Path
from typing import IO, Any, Dict, Iterable, List, Optional, Union

import pandas as pd

from .geometry import suggested_capacity, table_defaults
from .models import (
    Constraint,
    Guest,
    Household,
    SocialCircle,
    Table,
    TableShape,
    SeatingSide,
    parse_bool,
    parse_pipe_list,
    parse_rsvp,
)
from .plan import SeatingPlan

Source = Union[Path, str, IO[Any]]


def _text(value: object, default: str = "") -> str:
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return default
    text = str(value).strip()
    return text if text and text.lower() != "nan" else default


def _number(value: object) -> Optional[float]:
    text = _text(value)
    return float(text) if text else None


def _require_columns(df: pd.DataFrame, required: List[str], label: str) -> None:
    missing = [col for col in required if col not in df.columns]
    if missing:
        raise ValueError(f"{label} is missing columns: {', '.join(missing)}")


def _read(path: Source) -> pd.DataFrame:
    # Keep ids as strings so "01" and "1" stay distinct.
    return pd.read_csv(path, dtype=str, keep_default_na=False)


def load_guests(path: Source) -> List[Guest]:
    """Load guests from ``guests.csv``.

    ``table`` and ``seat`` must be given together.
    """
    df = _read(path)
    _require_columns(df, ["id", "name"], "guests.csv")
    guests: List[Guest] = []
    for idx, row in df.iterrows():
        table_id = _text(row.get("table")) or None
        seat = _text(row.get("seat"))
        if (table_id is None) != (not seat):
            raise ValueError(f"guests.csv row {idx + 2}: table and seat must be given together")
        try:
            seat_index = int(seat) if seat else None
        except ValueError as exc:
            raise ValueError(f"guests.csv row {idx + 2}: {exc}") from None
        guests.append(
            Guest(
                id=_text(row["id"]),
                name=_text(row["name"]),
                rsvp=parse_rsvp(row.get("rsvp")),
                household_id=_text(row.get("household")) or None,
                social_circle_ids=parse_pipe_list(row.get("circles")),
                table_id=table_id,
                seat_index=seat_index,
                email=_text(row.get("email")),
                notes=_text(row.get("notes")),
            )
        )

    ids = [g.id for g in guests]
    if len(ids) != len(set(ids)):
        raise ValueError("guests.csv contains duplicate guest ids")
    return guests


def load_tables(path: Source) -> List[Table]:
    """Load table definitions.

    Missing dimensions fall back to the shape defaults. A capacity of 0 on a
    shape that can seat guests is replaced by the suggested capacity.
    """
    df = _read(path)
    _require_columns(df, ["id", "shape"], "tables.csv")
    tables: List[Table] = []
    for idx, row in df.iterrows():
        try:
            shape = TableShape(_text(row["shape"]).lower())
            side = SeatingSide(_text(row.get("side"), SeatingSide.BOTH.value).lower())
        except ValueError as exc:
            raise ValueError(f"tables.csv row {idx + 2}: {exc}") from None
        default_w, default_h, default_cap = table_defaults(shape)
        width = _number(row.get("width")) or default_w
        height = _number(row.get("height")) or default_h
        end_seats = parse_bool(row.get("end_seats"), default=True)
        capacity_text = _text(row.get("capacity"))
        try:
            capacity = int(capacity_text) if capacity_text else default_cap
        except ValueError as exc:
            raise ValueError(f"tables.csv row {idx + 2}: {exc}") from None
        if capacity == 0 and shape is not TableShape.COCKTAIL:
            capacity = suggested_capacity(shape, width, height, side, end_seats)
        table_id = _text(row["id"])
        tables.append(
            Table(
                id=table_id,
                label=_text(row.get("label"), table_id),
                shape=shape,
                capacity=capacity,
                width=width,
                height=height,
                seating_side=side,
                include_end_seats=end_seats,
            )
        )
    return tables


def load_constraints(path: Source, guest_ids: Optional[Iterable[str]] = None) -> List[Constraint]:
    """Load must / must-not sit together rules.

    If ``guest_ids`` is provided it validates that both endpoints exist.
    """
    df = _read(path)
    _require_columns(df, ["id", "kind", "guest_a", "guest_b"], "constraints.csv")
    known = set(guest_ids) if guest_ids is not None else None
    constraints: List[Constraint] = []
    for idx, row in df.iterrows():
        a = _text(row["guest_a"])
        b = _text(row["guest_b"])
        if known is not None and (a not in known or b not in known):
            raise ValueError(f"Constraint references unknown guest: {a}, {b}")
        try:
            constraints.append(
                Constraint(
                    id=_text(row["id"]),
                    kind=_text(row["kind"]).lower(),
                    guest_ids=(a, b),
                    reason=_text(row.get("reason")),
                )
            )
        except ValueError as exc:
            raise ValueError(f"constraints.csv row {idx + 2}: {exc}") from None
    return constraints


def load_households(guests: Iterable[Guest]) -> List[Household]:
    """Households named in the guest list, members in guest order."""
    households: Dict[str, Household] = {}
    for g in guests:
        if g.household_id:
            households.setdefault(g.household_id, Household(id=g.household_id, name=g.household_id)).guest_ids.append(g.id)
    return list(households.values())


def load_social_circles(guests: Iterable[Guest]) -> List[SocialCircle]:
    """Social circles named in the guest list."""
    circles: Dict[str, SocialCircle] = {}
    for g in guests:
        for cid in g.social_circle_ids:
            circles.setdefault(cid, SocialCircle(id=cid, name=cid)).guest_ids.append(g.id)
    return list(circles.values())


def load_all(guests_path: Source, tables_path: Source, constraints_path: Optional[Source] = None) -> SeatingPlan:
    """Convenience wrapper returning a ready :class:`SeatingPlan`.

    Table occupant lists are rebuilt from the guests' ``table`` column.
    """
    guests = load_guests(guests_path)
    tables = load_tables(tables_path)
    constraints = load_constraints(constraints_path, [g.id for g in guests]) if constraints_path else []

    by_id = {t.id: t for t in tables}
    for g in guests:
        if g.table_id is None:
            continue
        if g.table_id not in by_id:
            raise ValueError(f"Guest {g.name} is seated at unknown table: {g.table_id}")
        by_id[g.table_id].assigned_guest_ids.append(g.id)

    return SeatingPlan(
        guests,
        tables,
        households=load_households(guests),
        social_circles=load_social_circles(guests),
        constraints=constraints,
    )
