"""Route points and the curved paths between them."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from phototopo.geometry import (
    BezierCurve,
    Cap,
    arrowhead,
    control_points,
    fmt,
    offset_bezier,
    tee_bar,
    unscale,
)
from phototopo.graph.capabilities import HandleState

if TYPE_CHECKING:
    from phototopo.config import TopoOptions
    from phototopo.graph.point_group import GridKey, PointGroup
    from phototopo.topo import Topo

# Spacing between parallel routes, as a multiple of the line thickness
SPLIT_SPACING: float = 1.4


class PointType(str, Enum):
    """Marker drawn at a route point."""

    NONE = "none"
    HIDDEN = "hidden"
    JUMPOFF = "jumpoff"
    BOLT = "bolt"
    DRAW = "draw"
    CRUX = "crux"
    WARNING = "warning"
    LOWER = "lower"
    BELAY = "belay"
    BELAYSEMI = "belaysemi"
    BELAYHANGING = "belayhanging"

    @classmethod
    def parse(cls, value: str | PointType | None) -> PointType:
        """Coerce a serialized type; empty or missing means NONE."""
        if isinstance(value, PointType):
            return value
        if not value:
            return cls.NONE
        return cls(value)

    @property
    def has_icon(self) -> bool:
        return self not in (PointType.NONE, PointType.HIDDEN, PointType.JUMPOFF)


@dataclass
class LabelBox:
    """Square route label drawn below the first point of a route."""

    text: str
    classes: str
    x: float = 0.0
    y: float = 0.0
    size: float = 16.0


class Point:
    """One vertex of a route.

    Points on the same route form a doubly linked list. The point also
    references the paths on either side; those are owned by the route.
    """

    def __init__(
        self,
        route_id: str,
        x: float,
        y: float,
        type: PointType = PointType.NONE,
        position: int = 0,
    ) -> None:
        self.route_id = route_id
        self.x = x
        self.y = y
        self.type = PointType.parse(type)
        self.position = position

        self.next_point: Point | None = None
        self.prev_point: Point | None = None
        self.next_path: Path | None = None
        self.prev_path: Path | None = None

        self.group_key: GridKey | None = None
        self.label_box: LabelBox | None = None

    def __repr__(self) -> str:
        return (
            f"Point(route={self.route_id!r}, x={self.x}, y={self.y}, "
            f"type={self.type.value}, position={self.position})"
        )

    @property
    def owner_id(self) -> str:
        return self.route_id

    @property
    def is_terminal(self) -> bool:
        return self.next_point is None

    def handle_state(self, topo: Topo) -> HandleState:
        if topo.selected_point is self:
            return HandleState.ACTIVE
        if topo.selected_route is not None and topo.selected_route is topo.routes.get(self.route_id):
            return HandleState.SELECTED
        return HandleState.NORMAL

    def snap(self, topo: Topo, x: float, y: float) -> tuple[float, float]:
        """Where this point would land if moved to (x, y)."""
        qx, qy = topo.quantize(x, y)
        group = topo.find_group(qx, qy)
        if group is not None:
            return (group.x, group.y)
        return (qx, qy)

    def token(self, view_scale: float = 1) -> str:
        """Serialize as ``"x y [type]"`` in unscaled photo pixels."""
        text = f"{unscale(self.x, view_scale)} {unscale(self.y, view_scale)}"
        if self.type is not PointType.NONE:
            text += f" {self.type.value}"
        return text


class Path:
    """The curve joining two consecutive points of one route."""

    def __init__(self, point1: Point, point2: Point) -> None:
        self.point1 = point1
        self.point2 = point2
        point1.next_path = self
        point2.prev_path = self

        self.curve: BezierCurve | None = None
        self.cap: Cap | None = None
        self.hidden = False

    def __repr__(self) -> str:
        return f"Path({self.point1!r} -> {self.point2!r})"

    def redraw(self, group1: PointGroup, group2: PointGroup, options: TopoOptions) -> None:
        """Recompute the curve and end cap from the endpoint groups."""
        handle1 = group1.get_angle(self.point1)
        handle2 = group2.get_angle(self.point2)
        points = control_points(
            (self.point1.x, self.point1.y),
            (self.point2.x, self.point2.y),
            handle1,
            handle2,
        )

        if options.separate_routes:
            spacing = options.thickness * SPLIT_SPACING
            off1 = group1.get_split_offset(self.point1) * spacing
            off2 = group2.get_split_offset(self.point2) * spacing
            points = offset_bezier(points, off1, off2)

        self.curve = BezierCurve(*points)

        # Caps follow the group direction so they line up with the handles
        angle = math.atan2(handle2[1], handle2[0])
        ex, ey = points[3]
        self.cap = None
        if self.point2.is_terminal:
            if self.point2.type is PointType.JUMPOFF:
                self.cap = tee_bar(angle, ex, ey, options.thickness)
            elif self.point2.type is PointType.NONE:
                self.cap = arrowhead(angle, ex, ey, options.thickness)

        self.hidden = self.point1.type is PointType.HIDDEN

    def svg_part(self) -> str:
        """Path data continuing from the start point, cap included."""
        if self.curve is None:
            return f"L{fmt(self.point2.x)} {fmt(self.point2.y)}"
        part = self.curve.svg_part()
        if self.cap is not None:
            part += self.cap.svg_part()
        return part

    def svg_path(self) -> str:
        start = self.curve.start if self.curve else (self.point1.x, self.point1.y)
        return f"M{fmt(start[0])} {fmt(start[1])}" + self.svg_part()
