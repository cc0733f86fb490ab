"""SeatPlanner package."""
from .models import (
    Assignment,
    Constraint,
    ConstraintKind,
    Guest,
    Household,
    RSVPStatus,
    SeatingSide,
    SeatPosition,
    SocialCircle,
    Table,
    TableShape,
    Violation,
)
from .geometry import seat_positions, suggested_capacity, table_defaults
from .grouping import UnionFind, build_affinity_groups, build_conflict_index
from .solver import PlacementSummary, SeatingModel, TieBreak, compute_auto_assignments
from .validator import validate_constraints, validate_seating
from .plan import SeatingPlan
from .csv_loader import (
    load_guests,
    load_tables,
    load_constraints,
    load_all,
)

__all__ = [
    "Assignment",
    "Constraint",
    "ConstraintKind",
    "Guest",
    "Household",
    "RSVPStatus",
    "SeatingSide",
    "SeatPosition",
    "SocialCircle",
    "Table",
    "TableShape",
    "Violation",
    "seat_positions",
    "suggested_capacity",
    "table_defaults",
    "UnionFind",
    "build_affinity_groups",
    "build_conflict_index",
    "PlacementSummary",
    "SeatingModel",
    "TieBreak",
    "compute_auto_assignments",
    "validate_constraints",
    "validate_seating",
    "SeatingPlan",
    "load_guests",
    "load_tables",
    "load_constraints",
    "load_all",
]
