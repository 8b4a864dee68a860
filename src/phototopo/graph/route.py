"""Routes: ordered chains of points joined by paths."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from phototopo.geometry import fmt
from phototopo.graph.capabilities import HandleState
from phototopo.graph.point import Path, Point

if TYPE_CHECKING:
    from phototopo.topo import Topo


@dataclass
class RouteLabel:
    """Display text and styling for a route, as returned by ``get_label``."""

    text: str = ""
    classes: str = ""
    color: str | None = None
    text_color: str | None = None
    border_color: str | None = None


def order_key(order: Any) -> tuple[int, float, str]:
    """Sort key that orders numbers numerically and before strings."""
    try:
        return (0, float(order), "")
    except (TypeError, ValueError):
        return (1, 0.0, str(order))


class Route:
    """A climbing line drawn as a chain of points.

    ``paths[i]`` always joins ``points[i]`` and ``points[i + 1]``.
    """

    kind = "route"

    def __init__(self, id: str, order: Any = None) -> None:
        self.id = id
        self.order = order if order not in (None, "") else id
        self.points: list[Point] = []
        self.paths: list[Path] = []
        self.label = RouteLabel()
        self.color: str | None = None
        self.text_color: str | None = None
        self.border_color: str | None = None
        self.orig: dict[str, Any] = {}

    def __repr__(self) -> str:
        return f"Route(id={self.id!r}, order={self.order!r}, points={len(self.points)})"

    @property
    def handles(self) -> list[Point]:
        return self.points

    def sort_key(self) -> tuple[int, float, str, str]:
        return (*order_key(self.order), str(self.id))

    def handle_state(self, topo: Topo) -> HandleState:
        return HandleState.SELECTED if topo.selected_route is self else HandleState.NORMAL

    def insert(self, point: Point, position: int | None = None) -> Point:
        """Link ``point`` into the chain at ``position`` (default: the end).

        Exactly one path is created once the route has two points. When the
        point lands between two others the existing path is kept for the
        second half and a new one joins the previous point to the new one.
        """
        if position is None or position > len(self.points):
            position = len(self.points)
        position = max(position, 0)

        prev = self.points[position - 1] if position > 0 else None
        nxt = self.points[position] if position < len(self.points) else None

        self.points.insert(position, point)
        self._renumber(position)

        point.prev_point = prev
        point.next_point = nxt
        if prev is not None:
            prev.next_point = point
        if nxt is not None:
            nxt.prev_point = point

        if prev is not None:
            old = prev.next_path
            self.paths.insert(position - 1, Path(prev, point))
            if old is not None:
                old.point1 = point
                point.next_path = old
        elif nxt is not None:
            self.paths.insert(0, Path(point, nxt))
        return point

    def unlink(self, point: Point) -> tuple[Point | None, Point | None]:
        """Remove ``point`` and bridge the gap. Returns its old neighbours.

        With neighbours on both sides the preceding path survives and is
        stretched to the successor; the following path is dropped.
        """
        position = point.position
        prev, nxt = point.prev_point, point.next_point

        if prev is not None and nxt is not None:
            keep = point.prev_path
            keep.point2 = nxt
            nxt.prev_path = keep
            del self.paths[position]
            prev.next_point = nxt
            nxt.prev_point = prev
        elif prev is not None:
            del self.paths[position - 1]
            prev.next_point = None
            prev.next_path = None
        elif nxt is not None:
            del self.paths[0]
            nxt.prev_point = None
            nxt.prev_path = None

        del self.points[position]
        self._renumber(position)

        point.prev_point = point.next_point = None
        point.prev_path = point.next_path = None
        return prev, nxt

    def _renumber(self, start: int) -> None:
        for c in range(start, len(self.points)):
            self.points[c].position = c

    def get_json(self, view_scale: float = 1) -> dict[str, Any]:
        return {
            "id": self.id,
            "order": self.order,
            "points": ",".join(p.token(view_scale) for p in self.points),
        }

    def svg_path(self) -> str:
        """The whole route as one SVG path string."""
        if not self.points:
            return ""
        first = self.points[0]
        if first.next_path is not None and first.next_path.curve is not None:
            sx, sy = first.next_path.curve.start
        else:
            sx, sy = first.x, first.y
        return f"M{fmt(sx)} {fmt(sy)}" + "".join(path.svg_part() for path in self.paths)
