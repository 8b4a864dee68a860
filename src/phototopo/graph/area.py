"""Areas: labelled polygons stored as circular vertex lists."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from phototopo.geometry import Cap, Coord, arrowhead, fmt, unscale
from phototopo.graph.capabilities import HandleState

if TYPE_CHECKING:
    from phototopo.topo import Topo

VERTEX_SNAP_THRESHOLD: float = 10.0

# Areas are stroked on pixel centres
PIXEL_ALIGN: float = 0.5


class HAlign(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class VAlign(str, Enum):
    TOP = "top"
    MIDDLE = "middle"
    BOTTOM = "bottom"


class PointerMode(str, Enum):
    """Connector drawn from an area label to its polygon."""

    NONE = "none"
    LINE = "line"
    ARROW = "arrow"


class WidthMode(str, Enum):
    """Whether the label box grows to its dock or shrinks to its text."""

    EXPAND = "expand"
    SHRINK = "shrink"


@dataclass
class AreaLabel:
    """Placement metadata for an area's label."""

    x: float | None = None
    y: float | None = None
    halign: HAlign = HAlign.LEFT
    valign: VAlign = VAlign.TOP
    visible: bool = True
    pointer: PointerMode = PointerMode.NONE
    width: WidthMode = WidthMode.SHRINK
    text: str = ""

    @property
    def has_anchor(self) -> bool:
        return self.x is not None and self.y is not None

    def token(self, view_scale: float = 1) -> str:
        return " ".join(
            [
                str(unscale(self.x, view_scale)),
                str(unscale(self.y, view_scale)),
                self.halign.value,
                self.valign.value,
                "visible" if self.visible else "hidden",
                self.pointer.value,
                self.width.value,
                self.text,
            ]
        )


class Vertex:
    """A polygon corner; ``next`` and ``prev`` wrap around the area."""

    def __init__(self, area_id: str, x: float, y: float) -> None:
        self.area_id = area_id
        self.x = x
        self.y = y
        self.next: Vertex = self
        self.prev: Vertex = self
        self.border: tuple[Coord, Coord] | None = None

    def __repr__(self) -> str:
        return f"Vertex(area={self.area_id!r}, x={self.x}, y={self.y})"

    @property
    def owner_id(self) -> str:
        return self.area_id

    def redraw(self) -> None:
        """Recompute the border segment to the next vertex."""
        self.border = (
            (self.x + PIXEL_ALIGN, self.y + PIXEL_ALIGN),
            (self.next.x + PIXEL_ALIGN, self.next.y + PIXEL_ALIGN),
        )

    def handle_state(self, topo: Topo) -> HandleState:
        if topo.selected_point is self:
            return HandleState.ACTIVE
        if topo.selected_route is not None and topo.selected_route is topo.routes.get(self.area_id):
            return HandleState.SELECTED
        return HandleState.NORMAL

    def snap(self, topo: Topo, x: float, y: float) -> tuple[float, float]:
        """Lock x and y independently to the nearest other vertex within range.

        Either axis may snap alone, which keeps shared area edges straight.
        """
        best_x, best_dx = x, VERTEX_SNAP_THRESHOLD
        best_y, best_dy = y, VERTEX_SNAP_THRESHOLD
        for area in topo.areas():
            for vertex in area.vertices:
                if vertex is self:
                    continue
                dx = abs(vertex.x - x)
                if dx < best_dx:
                    best_x, best_dx = vertex.x, dx
                dy = abs(vertex.y - y)
                if dy < best_dy:
                    best_y, best_dy = vertex.y, dy
        return (best_x, best_y)


class Area:
    """A closed polygon annotation with a label."""

    kind = "area"

    def __init__(self, id: str) -> None:
        self.id = id
        self.vertices: list[Vertex] = []
        self.label = AreaLabel()
        self.polygon_path: str | None = None
        self.connector: tuple[Coord, Coord] | None = None
        self.connector_cap: Cap | None = None
        self.orig: dict[str, Any] = {}

    def __repr__(self) -> str:
        return f"Area(id={self.id!r}, vertices={len(self.vertices)})"

    @property
    def handles(self) -> list[Vertex]:
        return self.vertices

    def handle_state(self, topo: Topo) -> HandleState:
        return HandleState.SELECTED if topo.selected_route is self else HandleState.NORMAL

    def insert(self, vertex: Vertex, position: int | None = None) -> Vertex:
        """Splice ``vertex`` into the ring; position 0 follows the last vertex."""
        if position is None or position > len(self.vertices):
            position = len(self.vertices)
        position = max(position, 0)

        self.vertices.insert(position, vertex)
        count = len(self.vertices)
        vertex.prev = self.vertices[position - 1]
        vertex.next = self.vertices[(position + 1) % count]
        vertex.prev.next = vertex
        vertex.next.prev = vertex
        vertex.redraw()
        vertex.prev.redraw()
        return vertex

    def unlink(self, vertex: Vertex) -> Vertex | None:
        """Remove ``vertex`` from the ring. Returns its old predecessor."""
        self.vertices = [v for v in self.vertices if v is not vertex]
        prev = vertex.prev
        vertex.prev.next = vertex.next
        vertex.next.prev = vertex.prev
        vertex.next = vertex.prev = vertex
        vertex.border = None
        if not self.vertices:
            return None
        prev.redraw()
        return prev

    def move_to(self, x: float, y: float) -> None:
        """Move the label anchor; the polygon stays put."""
        self.label.x = x
        self.label.y = y

    def centroid(self) -> Coord | None:
        if not self.vertices:
            return None
        n = len(self.vertices)
        return (
            sum(v.x for v in self.vertices) / n,
            sum(v.y for v in self.vertices) / n,
        )

    def redraw(self, thickness: float = 5) -> None:
        """Rebuild the closed polygon path and the label connector."""
        if len(self.vertices) > 2:
            last = self.vertices[-1]
            parts = [f"M{fmt(last.x + PIXEL_ALIGN)} {fmt(last.y + PIXEL_ALIGN)}"]
            for v in self.vertices:
                parts.append(f" L{fmt(v.x + PIXEL_ALIGN)} {fmt(v.y + PIXEL_ALIGN)}")
            self.polygon_path = "".join(parts)
        else:
            self.polygon_path = None

        self.connector = None
        self.connector_cap = None
        target = self.centroid()
        if self.label.pointer is PointerMode.NONE or not self.label.has_anchor or target is None:
            return
        start = (self.label.x, self.label.y)
        self.connector = (start, target)
        if self.label.pointer is PointerMode.ARROW:
            angle = math.atan2(target[1] - start[1], target[0] - start[0])
            self.connector_cap = arrowhead(angle, target[0], target[1], thickness)

    def get_json(self, view_scale: float = 1) -> dict[str, Any]:
        tokens = [f"{unscale(v.x, view_scale)} {unscale(v.y, view_scale)}" for v in self.vertices]
        if self.label.has_anchor:
            tokens.insert(0, self.label.token(view_scale))
        return {"id": self.id, "type": "area", "points": ",".join(tokens)}
