"""
Constraint aware automatic seat assignment.

Placement is a greedy, largest-group-first bin packing:

    1. Guests that must share a table (households, must-sit-together) are
       merged into affinity groups.
    2. Each group goes whole to the feasible table with the best score:
           social circle overlap * circle_weight + tightness
       where tightness rewards leaving fewer empty seats behind.
    3. Groups that fit nowhere whole are seated one guest at a time, scored:
           group mates already there * group_weight
           + social circle overlap * circle_weight + tightness
    4. A guest with no feasible table is left unplaced.

Must-not-sit-together pairs are never placed at the same table. The model
never mutates its inputs; it returns a list of assignments for the caller to
apply.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Set

from .grouping import (
    build_affinity_groups,
    build_circle_index,
    build_conflict_index,
    has_internal_conflict,
)
from .models import Assignment, Constraint, Guest, Household, SocialCircle, Table

logger = logging.getLogger(__name__)


class TieBreak(str, Enum):
    """How to choose between tables with equal scores."""

    INPUT_ORDER = "input-order"
    LOWEST_ID = "lowest-id"


@dataclass
class PlacementSummary:
    """Outcome of one auto-assign run."""

    assigned: List[Assignment] = field(default_factory=list)
    unplaced: List[str] = field(default_factory=list)

    @property
    def placed_count(self) -> int:
        return len(self.assigned)

    @property
    def unplaced_count(self) -> int:
        return len(self.unplaced)


# ----------------------------- model -----------------------------
class SeatingModel:
    """Greedy group placement with a per-guest fallback."""

    def __init__(
        self,
        circle_weight: int = 10000,
        group_weight: int = 100000,
        tightness_base: int = 1000,
        tie_break: TieBreak | str = TieBreak.INPUT_ORDER,
    ) -> None:
        # Scoring
        self.circle_weight = circle_weight
        self.group_weight = group_weight
        self.tightness_base = tightness_base
        self.tie_break = TieBreak(tie_break)
        # Inputs
        self.guests: Dict[str, Guest] = {}
        self.tables: List[Table] = []
        self.households: List[Household] = []
        self.constraints: List[Constraint] = []
        # Lookups
        self.conflicts: Dict[str, Set[str]] = {}
        self.circle_mates: Dict[str, Set[str]] = {}
        # Working state, reset on every solve
        self._remaining: Dict[str, int] = {}
        self._occupants: Dict[str, Set[str]] = {}
        self._used_seats: Dict[str, Set[int]] = {}
        self._assignments: List[Assignment] = []
        self._unplaced: List[str] = []

    def build(
        self,
        guests: Iterable[Guest],
        tables: Iterable[Table],
        households: Iterable[Household] = (),
        social_circles: Iterable[SocialCircle] = (),
        constraints: Iterable[Constraint] = (),
    ) -> None:
        """Store model data and precompute conflict and circle lookups."""
        self.guests = {g.id: g for g in guests}
        tables = list(tables)
        if self.tie_break is TieBreak.LOWEST_ID:
            tables = sorted(tables, key=lambda t: t.id)
        self.tables = tables
        self.households = list(households)
        self.constraints = list(constraints)
        self.conflicts = build_conflict_index(self.constraints)
        self.circle_mates = build_circle_index(social_circles)

    # ----------------------------- helpers -----------------------------
    def _reset_state(self) -> None:
        self._remaining = {}
        self._occupants = {}
        self._used_seats = {}
        self._assignments = []
        self._unplaced = []
        for table in self.tables:
            self._remaining[table.id] = table.capacity - len(table.assigned_guest_ids)
            self._occupants[table.id] = set(table.assigned_guest_ids)
            taken = set()
            for gid in table.assigned_guest_ids:
                guest = self.guests.get(gid)
                if guest is not None and guest.seat_index is not None:
                    taken.add(guest.seat_index)
            self._used_seats[table.id] = taken

    def _next_seat_index(self, table_id: str) -> int:
        used = self._used_seats[table_id]
        idx = 0
        while idx in used:
            idx += 1
        return idx

    def _has_conflict(self, guest_id: str, table_id: str) -> bool:
        not_with = self.conflicts.get(guest_id)
        if not not_with:
            return False
        return not not_with.isdisjoint(self._occupants[table_id])

    def _social_overlap(self, guest_ids: Iterable[str], table_id: str) -> int:
        """Count (member, occupant) pairs that share a social circle."""
        occupants = self._occupants[table_id]
        overlap = 0
        for gid in guest_ids:
            friends = self.circle_mates.get(gid)
            if friends:
                overlap += len(friends & occupants)
        return overlap

    def _assign(self, guest_id: str, table_id: str) -> None:
        seat = self._next_seat_index(table_id)
        self._assignments.append(Assignment(guest_id=guest_id, table_id=table_id, seat_index=seat))
        self._remaining[table_id] -= 1
        self._occupants[table_id].add(guest_id)
        self._used_seats[table_id].add(seat)

    def _feasible_for_group(self, group: List[str], table_id: str) -> bool:
        """Hard checks only: capacity and must-not-sit-together."""
        if self._remaining[table_id] < len(group):
            return False
        return not any(self._has_conflict(gid, table_id) for gid in group)

    def _best_table_for_group(self, group: List[str]) -> Optional[str]:
        if has_internal_conflict(group, self.conflicts):
            return None
        best_table = None
        best_score = None
        for table in self.tables:
            if not self._feasible_for_group(group, table.id):
                continue
            waste = self._remaining[table.id] - len(group)
            score = self._social_overlap(group, table.id) * self.circle_weight + (self.tightness_base - waste)
            if best_score is None or score > best_score:
                best_score = score
                best_table = table.id
        return best_table

    def _best_table_for_guest(self, guest_id: str, group: List[str]) -> Optional[str]:
        best_table = None
        best_score = None
        for table in self.tables:
            remaining = self._remaining[table.id]
            if remaining < 1 or self._has_conflict(guest_id, table.id):
                continue
            occupants = self._occupants[table.id]
            mates_there = sum(1 for other in group if other != guest_id and other in occupants)
            score = (
                mates_there * self.group_weight
                + self._social_overlap([guest_id], table.id) * self.circle_weight
                + (self.tightness_base - remaining)
            )
            if best_score is None or score > best_score:
                best_score = score
                best_table = table.id
        return best_table

    def _place_individually(self, group: List[str]) -> None:
        for gid in group:
            table_id = self._best_table_for_guest(gid, group)
            if table_id is None:
                logger.debug("No table available for guest %s", gid)
                self._unplaced.append(gid)
                continue
            logger.debug("Seated guest %s at table %s apart from its group", gid, table_id)
            self._assign(gid, table_id)

    # ----------------------------- solve -----------------------------
    def assignable_ids(self) -> List[str]:
        return [g.id for g in self.guests.values() if g.is_assignable]

    def solve(self) -> List[Assignment]:
        """Propose seats for every unseated, RSVP eligible guest that fits."""
        self._reset_state()
        assignable = self.assignable_ids()
        if not assignable:
            return []

        groups = build_affinity_groups(assignable, self.households, self.constraints)
        for group in groups:
            table_id = self._best_table_for_group(group)
            if table_id is not None:
                logger.debug("Seated group of %d at table %s", len(group), table_id)
                for gid in group:
                    self._assign(gid, table_id)
            else:
                self._place_individually(group)

        logger.info(
            "Auto-assign placed %d of %d guests", len(self._assignments), len(assignable)
        )
        return list(self._assignments)

    def summary(self) -> PlacementSummary:
        """Assignments and unplaced guest ids from the last :meth:`solve`."""
        return PlacementSummary(assigned=list(self._assignments), unplaced=list(self._unplaced))


def compute_auto_assignments(
    guests: Iterable[Guest],
    tables: Iterable[Table],
    households: Iterable[Household] = (),
    social_circles: Iterable[SocialCircle] = (),
    constraints: Iterable[Constraint] = (),
    **options,
) -> List[Assignment]:
    """Functional entry point; ``options`` are passed to :class:`SeatingModel`."""
    model = SeatingModel(**options)
    model.build(guests, tables, households, social_circles, constraints)
    return model.solve()
