"""
Tests for the automatic seat assignment engine.
"""
import copy

import pytest

from seat_planner.models import (
    Assignment,
    Constraint,
    ConstraintKind,
    Guest,
    Household,
    RSVPStatus,
    SocialCircle,
    Table,
)
from seat_planner.plan import SeatingPlan
from seat_planner.solver import SeatingModel, TieBreak, compute_auto_assignments

TOGETHER = ConstraintKind.MUST_SIT_TOGETHER
APART = ConstraintKind.MUST_NOT_SIT_TOGETHER


def guest(gid, rsvp=RSVPStatus.CONFIRMED, table_id=None, seat_index=None, circles=()):
    return Guest(id=gid, name=gid.upper(), rsvp=rsvp, table_id=table_id,
                 seat_index=seat_index, social_circle_ids=list(circles))


def table(tid, capacity, assigned=(), shape="round"):
    return Table(id=tid, label=f"Table {tid}", shape=shape, capacity=capacity,
                 assigned_guest_ids=list(assigned))


def by_guest(assignments):
    return {a.guest_id: a for a in assignments}


class TestScenarios:
    """Reference scenarios for the placement engine."""

    def test_together_pair_fills_a_two_seat_table(self):
        """Two guests that must sit together take seats 0 and 1."""
        guests = [guest("a"), guest("b")]
        tables = [table("t1", 2)]
        constraints = [Constraint(id="c1", kind=TOGETHER, guest_ids=("a", "b"))]

        result = compute_auto_assignments(guests, tables, [], [], constraints)

        assert result == [
            Assignment(guest_id="a", table_id="t1", seat_index=0),
            Assignment(guest_id="b", table_id="t1", seat_index=1),
        ]

    def test_household_goes_to_the_table_that_fits_it_whole(self):
        """A household of four skips a table with only two free seats."""
        guests = [guest("h1"), guest("h2"), guest("h3"), guest("h4"),
                  guest("x", table_id="small", seat_index=0),
                  guest("y", table_id="small", seat_index=1)]
        tables = [table("big", 6), table("small", 4, assigned=["x", "y"])]
        households = [Household(id="fam", name="Family", guest_ids=["h1", "h2", "h3", "h4"])]

        result = compute_auto_assignments(guests, tables, households, [], [])

        assert {a.guest_id for a in result} == {"h1", "h2", "h3", "h4"}
        assert {a.table_id for a in result} == {"big"}
        assert sorted(a.seat_index for a in result) == [0, 1, 2, 3]

    def test_conflicting_guest_is_left_unplaced(self):
        """A guest barred from the only table with room gets no seat."""
        guests = [guest("a"), guest("b", table_id="t1", seat_index=0),
                  guest("c", table_id="t2", seat_index=0)]
        tables = [table("t1", 2, assigned=["b"]), table("t2", 1, assigned=["c"])]
        constraints = [Constraint(id="c1", kind=APART, guest_ids=("a", "b"))]

        model = SeatingModel()
        model.build(guests, tables, [], [], constraints)

        assert model.solve() == []
        assert model.summary().unplaced == ["a"]


class TestSeatingModel:
    """Scoring, eligibility and bookkeeping."""

    def test_only_unseated_confirmed_or_tentative_guests_are_placed(self):
        guests = [
            guest("yes"),
            guest("maybe", rsvp=RSVPStatus.TENTATIVE),
            guest("no", rsvp=RSVPStatus.DECLINED),
            guest("later", rsvp=RSVPStatus.PENDING),
        ]
        result = compute_auto_assignments(guests, [table("t1", 10)])
        assert [a.guest_id for a in result] == ["yes", "maybe"]

    def test_no_assignable_guests_returns_empty(self):
        assert compute_auto_assignments([guest("a", rsvp=RSVPStatus.DECLINED)], [table("t1", 4)]) == []

    def test_zero_capacity_table_is_never_used(self):
        model = SeatingModel()
        model.build([guest("a")], [table("bar", 0, shape="cocktail")])
        assert model.solve() == []
        assert model.summary().unplaced_count == 1

    def test_prefers_tighter_fit(self):
        result = compute_auto_assignments([guest("a")], [table("wide", 8), table("snug", 3)])
        assert result[0].table_id == "snug"

    def test_very_large_table_is_still_a_candidate(self):
        result = compute_auto_assignments([guest("a")], [table("hall", 5000)])
        assert result == [Assignment(guest_id="a", table_id="hall", seat_index=0)]

    def test_social_circle_outweighs_tightness(self):
        guests = [guest("a", circles=["work"]), guest("s", table_id="t2", seat_index=0, circles=["work"])]
        tables = [table("t1", 2), table("t2", 8, assigned=["s"])]
        circles = [SocialCircle(id="work", name="Work", guest_ids=["a", "s"])]

        result = compute_auto_assignments(guests, tables, [], circles, [])

        assert result == [Assignment(guest_id="a", table_id="t2", seat_index=1)]

    def test_seat_indices_skip_taken_seats(self):
        guests = [guest("a"), guest("b"), guest("x", table_id="t1", seat_index=0),
                  guest("y", table_id="t1", seat_index=2)]
        tables = [table("t1", 4, assigned=["x", "y"])]
        result = compute_auto_assignments(guests, tables)
        assert [(a.guest_id, a.seat_index) for a in result] == [("a", 1), ("b", 3)]

    def test_oversized_group_is_seated_individually_near_each_other(self):
        guests = [guest("h1"), guest("h2"), guest("h3")]
        tables = [table("t1", 2), table("t2", 2), table("t3", 1)]
        households = [Household(id="fam", name="Family", guest_ids=["h1", "h2", "h3"])]

        placed = by_guest(compute_auto_assignments(guests, tables, households, [], []))

        assert placed["h1"].table_id == "t3"
        assert placed["h2"].table_id == "t1"
        assert placed["h3"].table_id == "t1"

    def test_contradictory_group_is_split_apart(self):
        guests = [guest("a"), guest("b")]
        tables = [table("t1", 4), table("t2", 4)]
        constraints = [
            Constraint(id="c1", kind=TOGETHER, guest_ids=("a", "b")),
            Constraint(id="c2", kind=APART, guest_ids=("a", "b")),
        ]
        placed = by_guest(compute_auto_assignments(guests, tables, [], [], constraints))
        assert placed["a"].table_id != placed["b"].table_id

    def test_tie_break_options(self):
        guests = [guest("a")]
        tables = [table("b", 4), table("a", 4)]
        assert compute_auto_assignments(guests, tables)[0].table_id == "b"
        assert compute_auto_assignments(guests, tables, tie_break=TieBreak.LOWEST_ID)[0].table_id == "a"
        assert compute_auto_assignments(guests, tables, tie_break="lowest-id")[0].table_id == "a"

    def test_custom_weights(self):
        guests = [guest("a", circles=["c"]), guest("s", table_id="big", seat_index=0)]
        tables = [table("snug", 1), table("big", 8, assigned=["s"])]
        circles = [SocialCircle(id="c", name="C", guest_ids=["a", "s"])]
        result = compute_auto_assignments(guests, tables, [], circles, [], circle_weight=1)
        assert result[0].table_id == "snug"

    def test_inputs_are_not_mutated(self):
        guests = [guest("a"), guest("b")]
        tables = [table("t1", 4)]
        before = copy.deepcopy((guests, tables))
        compute_auto_assignments(guests, tables)
        assert (guests, tables) == before

    def test_solve_twice_gives_the_same_answer(self):
        guests = [guest(f"g{i}") for i in range(9)]
        tables = [table("t1", 4), table("t2", 4), table("t3", 4)]
        model = SeatingModel()
        model.build(guests, tables)
        assert model.solve() == model.solve()


class TestInvariants:
    """Properties that hold for any input."""

    @pytest.fixture
    def crowded(self):
        guests = [guest(f"g{i}") for i in range(14)]
        tables = [table("t1", 5), table("t2", 4), table("t3", 3)]
        households = [
            Household(id="h1", name="One", guest_ids=["g0", "g1", "g2"]),
            Household(id="h2", name="Two", guest_ids=["g3", "g4", "g5", "g6", "g7", "g8"]),
        ]
        constraints = [
            Constraint(id="c1", kind=APART, guest_ids=("g0", "g9")),
            Constraint(id="c2", kind=APART, guest_ids=("g9", "g10")),
            Constraint(id="c3", kind=APART, guest_ids=("g3", "g11")),
            Constraint(id="c4", kind=TOGETHER, guest_ids=("g12", "g13")),
            Constraint(id="c5", kind=APART, guest_ids=("g12", "g9")),
        ]
        circles = [SocialCircle(id="s", name="S", guest_ids=["g9", "g12", "g4"])]
        return SeatingPlan(guests, tables, households, circles, constraints)

    def test_capacity_seats_and_conflicts_hold(self, crowded):
        summary = crowded.auto_assign()

        for t in crowded.tables.values():
            assert len(t.assigned_guest_ids) <= t.capacity
            seats = [crowded.guests[g].seat_index for g in t.assigned_guest_ids]
            assert len(seats) == len(set(seats))
            assert all(0 <= s < t.capacity for s in seats)
        apart = [c for c in crowded.constraints.values() if c.kind is APART]
        for c in apart:
            a, b = (crowded.guests[g] for g in c.guest_ids)
            assert not (a.is_seated and a.table_id == b.table_id)
        assert summary.placed_count == 12
        assert sorted(summary.unplaced) == ["g10", "g11"]
        assert crowded.problems() == []
        assert crowded.violations() == []

    def test_grouped_pair_shares_a_table(self, crowded):
        crowded.auto_assign()
        assert crowded.guests["g12"].table_id == crowded.guests["g13"].table_id
        assert crowded.guests["g0"].table_id == crowded.guests["g1"].table_id == crowded.guests["g2"].table_id

    def test_rerun_after_applying_is_empty(self, crowded):
        crowded.auto_assign()
        again = compute_auto_assignments(
            crowded.guests.values(),
            crowded.tables.values(),
            crowded.households.values(),
            crowded.social_circles.values(),
            crowded.constraints.values(),
        )
        assert again == []
