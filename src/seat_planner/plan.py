"""
In-memory seating state.

``SeatingPlan`` keeps one id-indexed dict per entity and is the only place
that changes who sits where. Every update writes both sides of the
guest/table relation together, and a failed update leaves the plan as it
was.
"""
from __future__ import annotations

import copy
from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, List, Optional

import pandas as pd

from .geometry import seat_positions
from .models import (
    Assignment,
    Constraint,
    Guest,
    Household,
    SeatPosition,
    SocialCircle,
    Table,
    Violation,
)
from .solver import PlacementSummary, SeatingModel
from .validator import validate_constraints, validate_seating


class SeatingPlan:
    """Guests, tables and the relationships between them."""

    def __init__(
        self,
        guests: Iterable[Guest],
        tables: Iterable[Table],
        households: Iterable[Household] = (),
        social_circles: Iterable[SocialCircle] = (),
        constraints: Iterable[Constraint] = (),
    ) -> None:
        self.guests: Dict[str, Guest] = {g.id: copy.deepcopy(g) for g in guests}
        self.tables: Dict[str, Table] = {t.id: copy.deepcopy(t) for t in tables}
        self.households: Dict[str, Household] = {h.id: copy.deepcopy(h) for h in households}
        self.social_circles: Dict[str, SocialCircle] = {c.id: copy.deepcopy(c) for c in social_circles}
        self.constraints: Dict[str, Constraint] = {c.id: copy.deepcopy(c) for c in constraints}

    # ----------------------------- lookups -----------------------------
    def guest(self, guest_id: str) -> Guest:
        try:
            return self.guests[guest_id]
        except KeyError:
            raise KeyError(f"Unknown guest: {guest_id}") from None

    def table(self, table_id: str) -> Table:
        try:
            return self.tables[table_id]
        except KeyError:
            raise KeyError(f"Unknown table: {table_id}") from None

    def seat_owner(self, table_id: str, seat_index: int) -> Optional[str]:
        for gid in self.table(table_id).assigned_guest_ids:
            guest = self.guests.get(gid)
            if guest is not None and guest.seat_index == seat_index:
                return gid
        return None

    def free_seats(self, table_id: str) -> List[int]:
        table = self.table(table_id)
        taken = {self.guests[gid].seat_index for gid in table.assigned_guest_ids if gid in self.guests}
        return [i for i in range(table.capacity) if i not in taken]

    def unseated(self) -> List[Guest]:
        return [g for g in self.guests.values() if not g.is_seated]

    # ----------------------------- mutations -----------------------------
    @contextmanager
    def _transaction(self) -> Iterator[None]:
        saved_guests = copy.deepcopy(self.guests)
        saved_tables = copy.deepcopy(self.tables)
        try:
            yield
        except Exception:
            self.guests = saved_guests
            self.tables = saved_tables
            raise

    def _detach(self, guest: Guest) -> None:
        if guest.table_id is not None:
            old = self.tables.get(guest.table_id)
            if old is not None and guest.id in old.assigned_guest_ids:
                old.assigned_guest_ids.remove(guest.id)
        guest.table_id = None
        guest.seat_index = None

    def assign(self, guest_id: str, table_id: str, seat_index: int) -> None:
        """Seat a guest, moving it off any previous table."""
        guest = self.guest(guest_id)
        table = self.table(table_id)
        if not 0 <= seat_index < table.capacity:
            raise ValueError(f"Seat {seat_index} is outside {table.label} (capacity {table.capacity})")
        owner = self.seat_owner(table_id, seat_index)
        if owner is not None and owner != guest_id:
            raise ValueError(f"Seat {seat_index} at {table.label} is taken by {self.guests[owner].name}")
        if guest.table_id != table_id and len(table.assigned_guest_ids) >= table.capacity:
            raise ValueError(f"{table.label} is full")

        self._detach(guest)
        guest.table_id = table_id
        guest.seat_index = seat_index
        table.assigned_guest_ids.append(guest_id)

    def unassign(self, guest_id: str) -> None:
        self._detach(self.guest(guest_id))

    def swap(self, guest_a_id: str, guest_b_id: str) -> None:
        """Exchange the seats of two guests; either may be unseated."""
        a = self.guest(guest_a_id)
        b = self.guest(guest_b_id)
        if a.id == b.id:
            return
        if a.table_id is not None and a.table_id == b.table_id:
            a.seat_index, b.seat_index = b.seat_index, a.seat_index
            return

        with self._transaction():
            for guest, other in ((a, b), (b, a)):
                if guest.table_id is None:
                    continue
                table = self.tables.get(guest.table_id)
                if table is None:
                    continue
                ids = table.assigned_guest_ids
                ids[ids.index(guest.id)] = other.id
            a.table_id, b.table_id = b.table_id, a.table_id
            a.seat_index, b.seat_index = b.seat_index, a.seat_index

    def bulk_assign(self, guest_ids: Iterable[str], table_id: str) -> int:
        """Seat guests at one table in order until it is full. Returns the count seated."""
        table = self.table(table_id)
        placed = 0
        with self._transaction():
            for gid in guest_ids:
                if len(table.assigned_guest_ids) >= table.capacity:
                    break
                guest = self.guests.get(gid)
                if guest is None or guest.table_id == table_id:
                    continue
                self.assign(gid, table_id, self.free_seats(table_id)[0])
                placed += 1
        return placed

    def apply(self, assignments: Iterable[Assignment]) -> None:
        """Apply a batch of assignments all together, or not at all."""
        with self._transaction():
            for a in assignments:
                self.assign(a.guest_id, a.table_id, a.seat_index)

    def auto_assign(self, **options) -> PlacementSummary:
        """Fill unseated, eligible guests into free seats and apply the result."""
        model = SeatingModel(**options)
        model.build(
            self.guests.values(),
            self.tables.values(),
            self.households.values(),
            self.social_circles.values(),
            self.constraints.values(),
        )
        self.apply(model.solve())
        return model.summary()

    def clear(self) -> None:
        for guest in self.guests.values():
            guest.table_id = None
            guest.seat_index = None
        for table in self.tables.values():
            table.assigned_guest_ids = []

    # ----------------------------- reporting -----------------------------
    def violations(self) -> List[Violation]:
        return validate_constraints(self.constraints.values(), self.guests.values(), self.tables.values())

    def problems(self) -> List[Violation]:
        return validate_seating(self.guests.values(), self.tables.values())

    def seat_positions(self, table_id: str) -> List[SeatPosition]:
        t = self.table(table_id)
        return seat_positions(t.shape, t.capacity, t.width, t.height, t.seating_side, t.include_end_seats)

    def occupancy(self) -> pd.DataFrame:
        """One row per table with seated and free counts."""
        rows = []
        for t in self.tables.values():
            seated = sorted(t.assigned_guest_ids, key=lambda gid: self.guests[gid].seat_index or 0)
            rows.append(
                {
                    "table": t.id,
                    "label": t.label,
                    "capacity": t.capacity,
                    "seated": len(seated),
                    "free": t.remaining,
                    "guests": "|".join(self.guests[gid].name for gid in seated),
                }
            )
        return pd.DataFrame(rows, columns=["table", "label", "capacity", "seated", "free", "guests"])
