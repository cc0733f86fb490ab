"""Data models for SeatPlanner."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple
import math


class RSVPStatus(str, Enum):
    CONFIRMED = "confirmed"
    DECLINED = "declined"
    PENDING = "pending"
    TENTATIVE = "tentative"


class TableShape(str, Enum):
    ROUND = "round"
    RECTANGULAR = "rectangular"
    SQUARE = "square"
    HEAD = "head"
    SWEETHEART = "sweetheart"
    COCKTAIL = "cocktail"


class SeatingSide(str, Enum):
    """Which long edges of a rectangular table carry seats."""

    BOTH = "both"
    TOP_ONLY = "top-only"
    BOTTOM_ONLY = "bottom-only"


class ConstraintKind(str, Enum):
    MUST_SIT_TOGETHER = "must-sit-together"
    MUST_NOT_SIT_TOGETHER = "must-not-sit-together"


# Only these statuses are eligible for automatic placement.
ASSIGNABLE_RSVP = frozenset({RSVPStatus.CONFIRMED, RSVPStatus.TENTATIVE})

_RSVP_SYNONYMS = {
    "confirmed": RSVPStatus.CONFIRMED,
    "yes": RSVPStatus.CONFIRMED,
    "accepted": RSVPStatus.CONFIRMED,
    "declined": RSVPStatus.DECLINED,
    "no": RSVPStatus.DECLINED,
    "pending": RSVPStatus.PENDING,
    "unknown": RSVPStatus.PENDING,
    "tentative": RSVPStatus.TENTATIVE,
    "maybe": RSVPStatus.TENTATIVE,
}


def parse_pipe_list(value: object) -> List[str]:
    """Split a pipe separated string into a list.

    Empty values such as ``""`` or ``None`` return an empty list.
    ``pandas`` often provides ``float('nan')`` for missing values which is
    also treated as empty.
    """
    if value is None:
        return []
    if isinstance(value, float) and math.isnan(value):
        return []
    text = str(value).strip()
    if not text or text.lower() == "nan":
        return []
    return [part.strip() for part in text.split("|") if part.strip()]


def parse_bool(value: object, default: bool = False) -> bool:
    """Parse common truthy strings into bool."""
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return default
    text = str(value).strip().lower()
    if not text:
        return default
    return text in ("true", "yes", "1", "y")


def parse_rsvp(value: object) -> RSVPStatus:
    """Map free text RSVP answers to a status. Unrecognised text is pending."""
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return RSVPStatus.PENDING
    return _RSVP_SYNONYMS.get(str(value).strip().lower(), RSVPStatus.PENDING)


@dataclass
class Guest:
    """Representation of an event guest.

    ``table_id`` and ``seat_index`` are either both set or both ``None``.
    """

    id: str
    name: str
    rsvp: RSVPStatus = RSVPStatus.PENDING
    household_id: Optional[str] = None
    social_circle_ids: List[str] = field(default_factory=list)
    table_id: Optional[str] = None
    seat_index: Optional[int] = None
    email: str = ""
    notes: str = ""

    def __post_init__(self) -> None:
        self.rsvp = RSVPStatus(self.rsvp)
        if (self.table_id is None) != (self.seat_index is None):
            raise ValueError(f"Guest {self.id} needs both a table and a seat, or neither")

    @property
    def is_seated(self) -> bool:
        return self.table_id is not None

    @property
    def is_assignable(self) -> bool:
        """Unseated and RSVP confirmed or tentative."""
        return not self.is_seated and self.rsvp in ASSIGNABLE_RSVP


@dataclass
class Household:
    """A family unit kept at one table."""

    id: str
    name: str
    guest_ids: List[str] = field(default_factory=list)


@dataclass
class SocialCircle:
    """Soft seating preference shared by its members."""

    id: str
    name: str
    color: str = ""
    guest_ids: List[str] = field(default_factory=list)


@dataclass
class Table:
    """Table definition plus the ids of the guests currently seated there."""

    id: str
    label: str
    shape: TableShape = TableShape.ROUND
    capacity: int = 0
    width: float = 80.0
    height: float = 80.0
    assigned_guest_ids: List[str] = field(default_factory=list)
    seating_side: SeatingSide = SeatingSide.BOTH
    include_end_seats: bool = True

    def __post_init__(self) -> None:
        self.shape = TableShape(self.shape)
        self.seating_side = SeatingSide(self.seating_side)

    @property
    def remaining(self) -> int:
        return max(0, self.capacity - len(self.assigned_guest_ids))


@dataclass
class Constraint:
    """Hard rule over an unordered pair of guests."""

    id: str
    kind: ConstraintKind
    guest_ids: Tuple[str, str]
    reason: str = ""

    def __post_init__(self) -> None:
        self.kind = ConstraintKind(self.kind)
        a, b = self.guest_ids
        if a == b:
            raise ValueError(f"Constraint {self.id} references the same guest twice: {a}")
        self.guest_ids = (a, b)


@dataclass(frozen=True)
class Assignment:
    guest_id: str
    table_id: str
    seat_index: int


@dataclass(frozen=True)
class Violation:
    """A constraint breach; ``constraint_id`` is empty for structural problems."""

    constraint_id: str
    table_id: str
    message: str


@dataclass(frozen=True)
class SeatPosition:
    """Seat offset from the table centre and its facing angle in degrees."""

    x: float
    y: float
    angle: float
