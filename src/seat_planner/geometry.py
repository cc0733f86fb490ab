"""
Seat geometry for each table shape.

Seat positions are offsets from the table centre. A guest's ``seat_index``
is an index into the list returned by :func:`seat_positions`, so every
branch here must be a pure function of its inputs: the same table always
yields the same seats in the same order.

Angles are in degrees and describe which way the chair is rotated: 0 for a
seat above the table, 90 right, 180 below, 270 left.
"""
from __future__ import annotations

import math
from typing import List, Tuple

from .models import SeatPosition, SeatingSide, TableShape

SEAT_RADIUS = 14
SEAT_SPACING = 6
SEAT_PITCH = SEAT_RADIUS * 2 + SEAT_SPACING

# Head and sweetheart tables seat guests in one row at this depth.
_ROW_OFFSET = 20 + SEAT_RADIUS + SEAT_SPACING
_SWEETHEART_GAP = 40

_DEFAULTS = {
    TableShape.ROUND: (80, 80, 8),
    TableShape.RECTANGULAR: (140, 60, 8),
    TableShape.SQUARE: (80, 80, 4),
    TableShape.HEAD: (240, 40, 10),
    TableShape.SWEETHEART: (80, 40, 2),
    TableShape.COCKTAIL: (40, 40, 0),
}


def table_defaults(shape: TableShape | str) -> Tuple[float, float, int]:
    """Return ``(width, height, capacity)`` for a freshly created table."""
    return _DEFAULTS[TableShape(shape)]


def seats_per_edge(length: float) -> int:
    """How many seats fit along one table edge, leaving corner clearance."""
    return max(1, int((length - 2 * SEAT_RADIUS) // SEAT_PITCH))


def _split(n: int) -> Tuple[int, int]:
    # first side gets the extra seat on odd counts
    return (n + 1) // 2, n - (n + 1) // 2


def side_counts(
    capacity: int,
    width: float,
    height: float,
    seating_side: SeatingSide | str = SeatingSide.BOTH,
    include_end_seats: bool = True,
) -> Tuple[int, int, int, int]:
    """Distribute seats over the edges of a rectangle.

    Returns ``(top, right, bottom, left)``. The long edges are filled first,
    then the short ends share the remainder (right takes the odd seat), and
    anything still left over goes back onto the long edges so the counts
    always add up to ``capacity``.
    """
    seating_side = SeatingSide(seating_side)
    if capacity <= 0:
        return 0, 0, 0, 0
    if seating_side is SeatingSide.TOP_ONLY:
        return capacity, 0, 0, 0
    if seating_side is SeatingSide.BOTTOM_ONLY:
        return 0, 0, capacity, 0
    if not include_end_seats:
        top, bottom = _split(capacity)
        return top, 0, bottom, 0

    fit_long = seats_per_edge(width)
    fit_short = seats_per_edge(height)
    top, bottom = _split(min(capacity, 2 * fit_long))
    rest = capacity - top - bottom
    right, left = _split(rest)
    right, left = min(right, fit_short), min(left, fit_short)
    overflow = rest - right - left
    if overflow:
        extra_top, extra_bottom = _split(overflow)
        top += extra_top
        bottom += extra_bottom
    return top, right, bottom, left


def _row(count: int, pitch: float) -> List[float]:
    """Centred coordinates for ``count`` seats along a line."""
    start = -((count - 1) * pitch) / 2
    return [start + i * pitch for i in range(count)]


def _round_seats(capacity: int, diameter: float) -> List[SeatPosition]:
    radius = diameter / 2 + SEAT_RADIUS + SEAT_SPACING
    seats = []
    for i in range(capacity):
        theta = 2 * math.pi * i / capacity - math.pi / 2
        seats.append(
            SeatPosition(
                x=radius * math.cos(theta),
                y=radius * math.sin(theta),
                angle=math.degrees(theta) + 90,
            )
        )
    return seats


def _rectangular_seats(
    capacity: int,
    width: float,
    height: float,
    seating_side: SeatingSide,
    include_end_seats: bool,
) -> List[SeatPosition]:
    top, right, bottom, left = side_counts(capacity, width, height, seating_side, include_end_seats)
    half_w = width / 2 + SEAT_RADIUS + SEAT_SPACING
    half_h = height / 2 + SEAT_RADIUS + SEAT_SPACING

    seats: List[SeatPosition] = []
    # Clockwise: top left to right, right downwards, bottom right to left, left upwards.
    for x in _row(top, SEAT_PITCH):
        seats.append(SeatPosition(x=x, y=-half_h, angle=0))
    for y in _row(right, SEAT_PITCH):
        seats.append(SeatPosition(x=half_w, y=y, angle=90))
    for x in reversed(_row(bottom, SEAT_PITCH)):
        seats.append(SeatPosition(x=x, y=half_h, angle=180))
    for y in reversed(_row(left, SEAT_PITCH)):
        seats.append(SeatPosition(x=-half_w, y=y, angle=270))
    return seats


def _front_row(capacity: int, pitch: float) -> List[SeatPosition]:
    return [SeatPosition(x=x, y=-_ROW_OFFSET, angle=0) for x in _row(capacity, pitch)]


def seat_positions(
    shape: TableShape | str,
    capacity: int,
    width: float,
    height: float,
    seating_side: SeatingSide | str = SeatingSide.BOTH,
    include_end_seats: bool = True,
) -> List[SeatPosition]:
    """Ordered seat offsets for a table; always exactly ``capacity`` long."""
    shape = TableShape(shape)
    seating_side = SeatingSide(seating_side)
    if capacity <= 0:
        return []
    if shape in (TableShape.ROUND, TableShape.COCKTAIL):
        return _round_seats(capacity, width)
    if shape is TableShape.RECTANGULAR:
        return _rectangular_seats(capacity, width, height, seating_side, include_end_seats)
    if shape is TableShape.SQUARE:
        return _rectangular_seats(capacity, width, width, seating_side, include_end_seats)
    if shape is TableShape.HEAD:
        return _front_row(capacity, SEAT_PITCH)
    return _front_row(capacity, _SWEETHEART_GAP)


def suggested_capacity(
    shape: TableShape | str,
    width: float,
    height: float,
    seating_side: SeatingSide | str = SeatingSide.BOTH,
    include_end_seats: bool = True,
) -> int:
    """How many seats physically fit around a table of this size."""
    shape = TableShape(shape)
    seating_side = SeatingSide(seating_side)
    if shape in (TableShape.ROUND, TableShape.COCKTAIL):
        radius = width / 2 + SEAT_RADIUS + SEAT_SPACING
        return max(1, int(2 * math.pi * radius // SEAT_PITCH))
    if shape is TableShape.SWEETHEART:
        return 2
    if shape is TableShape.HEAD:
        return seats_per_edge(width)
    if shape is TableShape.SQUARE:
        height = width
    long_edges = 2 if seating_side is SeatingSide.BOTH else 1
    total = long_edges * seats_per_edge(width)
    if seating_side is SeatingSide.BOTH and include_end_seats:
        total += 2 * seats_per_edge(height)
    return total
