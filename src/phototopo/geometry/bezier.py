"""Cubic bezier construction and parallel-curve offsetting."""

from __future__ import annotations

import math
from dataclasses import dataclass

Coord = tuple[float, float]


def round_tenth(value: float) -> float:
    """Round to one decimal place, halves toward +infinity."""
    return math.floor(value * 10 + 0.5) / 10


def fmt(value: float) -> str:
    """Format a coordinate for SVG path data (``10.0`` -> ``10``)."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


@dataclass
class BezierCurve:
    """A cubic bezier segment."""

    start: Coord
    control1: Coord
    control2: Coord
    end: Coord

    @property
    def points(self) -> list[Coord]:
        return [self.start, self.control1, self.control2, self.end]

    def svg_part(self) -> str:
        """Path data continuing from ``start``: ``C c1 c2 end``."""
        return (
            f"C{fmt(self.control1[0])} {fmt(self.control1[1])}"
            f" {fmt(self.control2[0])} {fmt(self.control2[1])}"
            f" {fmt(self.end[0])} {fmt(self.end[1])}"
        )


def control_points(
    start: Coord,
    end: Coord,
    handle1: Coord,
    handle2: Coord,
) -> list[Coord]:
    """Return the 4-point bezier polygon from group handles.

    The handle leaves ``start`` forwards and enters ``end`` backwards, so
    both endpoints share the direction of their point group.
    """
    return [
        (start[0], start[1]),
        (round_tenth(start[0] + handle1[0]), round_tenth(start[1] + handle1[1])),
        (round_tenth(end[0] - handle2[0]), round_tenth(end[1] - handle2[1])),
        (end[0], end[1]),
    ]


def offset_bezier(points: list[Coord], offset1: float, offset2: float) -> list[Coord]:
    """Offset a bezier control polygon sideways.

    The offset varies linearly from ``offset1`` at the first point to
    ``offset2`` at the last. Interior points are pushed along the bisector
    of their two segments and stretched by the secant of the half turn so
    the offset curve keeps its width through bends.
    """
    size = len(points) - 1
    angles = [
        math.atan2(points[c + 1][1] - points[c][1], points[c + 1][0] - points[c][0])
        for c in range(size)
    ]

    res: list[Coord] = [(0.0, 0.0)] * (size + 1)
    for c in range(1, size):
        offset = (offset1 * (size - c)) / size + (offset2 * c) / size
        half_turn = math.cos((angles[c] - angles[c - 1]) / 2)
        # a full reversal has no bisector width to correct for
        off_sec = offset / half_turn if abs(half_turn) > 1e-9 else offset
        angle_avg = (angles[c] + angles[c - 1]) / 2
        res[c] = (
            points[c][0] - off_sec * math.sin(angle_avg),
            points[c][1] + off_sec * math.cos(angle_avg),
        )
    res[0] = (
        points[0][0] - offset1 * math.sin(angles[0]),
        points[0][1] + offset1 * math.cos(angles[0]),
    )
    res[size] = (
        points[size][0] - offset2 * math.sin(angles[size - 1]),
        points[size][1] + offset2 * math.cos(angles[size - 1]),
    )
    return [(round_tenth(x), round_tenth(y)) for x, y in res]


def unscale(value: float, view_scale: float = 1) -> int:
    """Convert a view coordinate back to whole photo pixels."""
    return int(math.floor(value / view_scale + 0.5))
