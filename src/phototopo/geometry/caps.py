"""End cap shapes drawn where a route stops."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from phototopo.geometry.bezier import Coord, fmt, round_tenth


class CapKind(Enum):
    """Decoration drawn at a route's open end."""

    ARROW = "arrow"
    TEE = "tee"


@dataclass
class Cap:
    """A cap outline as six coordinates, drawn as line segments."""

    kind: CapKind
    points: list[Coord]

    def svg_part(self) -> str:
        return "".join(f"L{fmt(x)} {fmt(y)} " for x, y in self.points)


def _place(angle: float, x: float, y: float, dx: float, dy: float) -> Coord:
    """Rotate a local (across, along) offset by ``angle`` around (x, y)."""
    return (
        round_tenth(x - math.sin(angle) * dx - math.cos(angle) * dy),
        round_tenth(y + math.cos(angle) * dx - math.sin(angle) * dy),
    )


def arrowhead(angle: float, x: float, y: float, thickness: float) -> Cap:
    """Filled arrowhead pointing along ``angle`` with its tip past (x, y)."""
    size = thickness * 0.5
    a_width = size * 1.5
    a_height = size * 1.5
    offsets = [
        (0, size * 1.2),
        (-a_width, a_height),
        (a_width, a_height),
        (0, -size * 2.3),
        (-a_width, a_height),
        (a_width, a_height),
    ]
    return Cap(CapKind.ARROW, [_place(angle, x, y, dx, dy) for dx, dy in offsets])


def tee_bar(angle: float, x: float, y: float, thickness: float) -> Cap:
    """Thin bar across the route end, used for jump-off points."""
    size = thickness * 0.5
    a_width = size * 4
    a_height = size * 0.1
    offsets = [
        (0, -a_height),
        (-a_width, -a_height),
        (-a_width, a_height),
        (a_width, a_height),
        (a_width, -a_height),
        (-a_width, -a_height),
    ]
    return Cap(CapKind.TEE, [_place(angle, x, y, dx, dy) for dx, dy in offsets])
