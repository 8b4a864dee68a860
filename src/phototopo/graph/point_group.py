"""Clusters of points that share a snapped location."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Mapping

if TYPE_CHECKING:
    from phototopo.graph.point import Point
    from phototopo.graph.route import Route

# Cell indices along x and y
GridKey = tuple[int, int]

# Upper bound on the squared segment length used to scale handles
MAX_HANDLE_SQR: float = 1_000_000.0
HANDLE_RATIO: float = 0.4


class PointGroup:
    """All points, across routes, that occupy the same grid cell.

    Members are kept in render order: ascending route order, ties broken by
    route id. The representative coordinate and index key come from the
    founding point and do not change while the group lives.
    """

    def __init__(self, point: Point, key: GridKey) -> None:
        self.key = key
        self.points: list[Point] = [point]
        self.x = point.x
        self.y = point.y

    def __len__(self) -> int:
        return len(self.points)

    def __contains__(self, point: object) -> bool:
        return any(p is point for p in self.points)

    def __repr__(self) -> str:
        return f"PointGroup(key={self.key}, size={len(self.points)})"

    def add(self, point: Point, routes: Mapping[str, Route]) -> None:
        """Add a point and restore render order."""
        self.points.append(point)
        self.sort(routes)

    def sort(self, routes: Mapping[str, Route]) -> None:
        self.points.sort(key=lambda p: routes[p.route_id].sort_key())

    def remove(self, point: Point) -> bool:
        """Remove a point. Returns True when the group is now empty."""
        self.points = [p for p in self.points if p is not point]
        return not self.points

    def index_of(self, point: Point) -> int:
        for i, p in enumerate(self.points):
            if p is point:
                return i
        return -1

    def get_split_offset(self, point: Point) -> float:
        """Fan-out index of a member, symmetric around zero.

        A group of three yields -1, 0 and 1; a group of two -0.5 and 0.5.
        Points not in the group get 0.
        """
        index = self.index_of(point)
        if index < 0:
            return 0.0
        return (1 - len(self.points)) / 2 + index

    def get_angle(self, point: Point | None = None) -> tuple[float, float]:
        """Shared bezier handle (dx, dy) leaving this location.

        Every member contributes the vector to its next point and the
        reverse of the vector to its previous point, so all routes through
        the location agree on one direction. The handle length is 0.4 of
        the shortest adjacent segment. Negate it for the incoming handle.
        """
        ddx = 0.0
        ddy = 0.0
        min_sqr = MAX_HANDLE_SQR
        for p in self.points:
            if p.next_point is not None:
                dx = p.next_point.x - p.x
                dy = p.next_point.y - p.y
                min_sqr = min(min_sqr, dx * dx + dy * dy)
                ddx += dx
                ddy += dy
            if p.prev_point is not None:
                dx = p.prev_point.x - p.x
                dy = p.prev_point.y - p.y
                min_sqr = min(min_sqr, dx * dx + dy * dy)
                ddx -= dx
                ddy -= dy

        angle = math.atan2(ddx, ddy)
        dist = math.sqrt(min_sqr) * HANDLE_RATIO
        return (dist * math.sin(angle), dist * math.cos(angle))
