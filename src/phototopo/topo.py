"""The topo graph container.

A Topo owns every route and area drawn over one photo, the grid index that
clusters coinciding points, and the current selection. All mutations go
through it so that the geometry touched by a change is recomputed before
the call returns.
"""

from __future__ import annotations

import math
from contextlib import contextmanager
from typing import Any, Iterator

import structlog

from phototopo.config import TopoOptions
from phototopo.errors import DuplicateRouteIdError, UnknownRouteError
from phototopo.graph.area import Area, Vertex
from phototopo.graph.point import LabelBox, Path, Point, PointType
from phototopo.graph.point_group import GridKey, PointGroup
from phototopo.graph.route import Route, RouteLabel
from phototopo.parser.topo_format import parse_area_points, parse_route_points

logger = structlog.get_logger(__name__)

Entity = Route | Area
Handle = Point | Vertex

# Cell probe order: own cell, then the four sides, then the diagonals
_NEIGHBOURS = ((0, 0), (1, 0), (-1, 0), (0, 1), (0, -1), (1, 1), (1, -1), (-1, 1), (-1, -1))


def _round(value: float) -> int:
    """Round halves up, matching browser pixel rounding."""
    return int(math.floor(value + 0.5))


def _finite(value: Any) -> float | None:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


class Topo:
    """Routes and areas over a photo, with snapping and selection."""

    def __init__(self, options: TopoOptions | dict[str, Any]) -> None:
        if isinstance(options, dict):
            options = TopoOptions.from_dict(options)
        options.validate()
        self.options = options

        self.shown_width: float = options.width
        self.shown_height: float = options.height
        self.scale = 1.0

        self.routes: dict[str, Entity] = {}
        self.point_groups: dict[GridKey, PointGroup] = {}
        self.selected_route: Entity | None = None
        self.selected_point: Handle | None = None

        self.loading = False
        self.changed = False
        self.routes_visible = True
        self.load_warnings: list[str] = []

        self.set_image(options.image_url, options.image_size)
        self.load(options.routes)

    # ------------------------------------------------------------------
    # Loading and saving
    # ------------------------------------------------------------------

    @contextmanager
    def bulk_load(self) -> Iterator[None]:
        """Suppress label layout, vertex snapping and change notification."""
        self.loading = True
        try:
            yield
        finally:
            self.loading = False

    def load(self, entries: list[dict[str, Any]]) -> None:
        """Add serialized routes and areas, then draw and notify once."""
        with self.bulk_load():
            for data in entries:
                self._load_entry(data)
        self.redraw()
        self.save_data()
        logger.info(
            "Topo loaded",
            topo=self.options.element_id,
            routes=sum(1 for _ in self.iter_routes()),
            areas=sum(1 for _ in self.areas()),
            groups=len(self.point_groups),
        )

    def _load_entry(self, data: dict[str, Any]) -> None:
        route_id = str(data["id"])
        view_scale = self.options.view_scale
        if route_id in self.routes:
            if self.options.strict_ids:
                raise DuplicateRouteIdError(route_id)
            logger.warning("Duplicate route id dropped", topo=self.options.element_id, route=route_id)
            self.load_warnings.append(str(DuplicateRouteIdError(route_id)))
            return

        if data.get("type") == "area":
            area = Area(route_id)
            area.orig = data
            self.routes[route_id] = area
            label, vertices = parse_area_points(data.get("points"), view_scale)
            if label is not None:
                area.label = label
            for x, y in vertices:
                self.add_vertex(route_id, x, y)
            return

        route = Route(route_id, data.get("order"))
        route.orig = data
        self.routes[route_id] = route
        for x, y, point_type in parse_route_points(data.get("points"), view_scale):
            self.insert_point(route_id, x, y, point_type)
        if self.options.get_label:
            self.set_label(route_id, self.options.get_label(data))
        if data.get("manualColor"):
            route.color = data["manualColor"]
        if data.get("manualColorText"):
            route.text_color = data["manualColorText"]
        if data.get("manualColorBorder"):
            route.border_color = data["manualColorBorder"]

    def get_json(self) -> list[dict[str, Any]]:
        return [entity.get_json(self.options.view_scale) for entity in self.routes.values()]

    def save_data(self) -> dict[str, Any] | None:
        """Hand the serialized graph to ``on_change``.

        Nothing is emitted while loading. ``changed`` is False only for the
        first notification after load.
        """
        if self.loading:
            return None
        data = {"routes": self.get_json(), "changed": self.changed}
        self.changed = True
        if self.options.on_change:
            self.options.on_change(data)
        logger.debug("Topo saved", topo=self.options.element_id, changed=data["changed"])
        return data

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def iter_routes(self) -> Iterator[Route]:
        return (r for r in self.routes.values() if isinstance(r, Route))

    def areas(self) -> Iterator[Area]:
        return (a for a in self.routes.values() if isinstance(a, Area))

    def route(self, route_id: str) -> Route:
        route = self.routes.get(route_id)
        if not isinstance(route, Route):
            raise UnknownRouteError(route_id)
        return route

    def area(self, area_id: str) -> Area:
        area = self.routes.get(area_id)
        if not isinstance(area, Area):
            raise UnknownRouteError(area_id)
        return area

    def owner(self, handle: Handle) -> Entity:
        return self.routes[handle.owner_id]

    # ------------------------------------------------------------------
    # Photo size and grid snapping
    # ------------------------------------------------------------------

    def set_image(self, image_url: str, image_size: tuple[float, float] | None = None) -> None:
        """Set the photo and the size it is shown at.

        With ``auto_size`` and a known natural size the photo is scaled down
        to fit the canvas, keeping its aspect ratio; otherwise it fills the
        configured width and height.
        """
        self.options.image_url = image_url
        self.options.image_size = image_size
        self.shown_width = self.options.width
        self.shown_height = self.options.height
        self.scale = 1.0
        if not (self.options.auto_size and image_size):
            return

        orig_width, orig_height = image_size
        self.shown_width, self.shown_height = orig_width, orig_height
        if self.shown_height > self.options.height:
            self.scale = self.options.height / self.shown_height
            self.shown_height *= self.scale
            self.shown_width *= self.scale
        if self.shown_width > self.options.width:
            self.scale = self.scale * self.options.width / self.shown_width
            self.shown_height = orig_height * self.scale
            self.shown_width = orig_width * self.scale

    def quantize(self, x: float, y: float) -> tuple[int, int]:
        """Round to whole pixels and clamp inside the shown photo."""
        x = min(max(_round(x), 0), int(self.shown_width))
        y = min(max(_round(y), 0), int(self.shown_height))
        return (x, y)

    def grid_key(self, x: float, y: float) -> GridKey:
        """Index of the grid cell holding (x, y)."""
        t = self.options.snap_threshold
        return (int(x // t), int(y // t))

    def find_group(self, x: float, y: float) -> PointGroup | None:
        """Group in the cell of (x, y), else the first one in a neighbour cell."""
        kx, ky = self.grid_key(x, y)
        for dx, dy in _NEIGHBOURS:
            group = self.point_groups.get((kx + dx, ky + dy))
            if group is not None:
                return group
        return None

    def group_of(self, point: Point) -> PointGroup:
        return self.point_groups[point.group_key]

    def resolve_group(self, point: Point) -> PointGroup:
        """Put a point into the group at its location, founding one if needed."""
        point.x, point.y = self.quantize(point.x, point.y)
        group = self.find_group(point.x, point.y)
        if group is not None:
            group.add(point, self.routes)
        else:
            group = PointGroup(point, self.grid_key(point.x, point.y))
            self.point_groups[group.key] = group
        point.group_key = group.key
        if not self.loading:
            self._position_group_labels(group)
        return group

    def _leave_group(self, point: Point) -> PointGroup | None:
        """Take a point out of its group. Returns the group if it survives."""
        group = self.group_of(point)
        point.group_key = None
        if group.remove(point):
            del self.point_groups[group.key]
            return None
        if not self.loading:
            self._position_group_labels(group)
        return group

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    def _redraw_path(self, path: Path) -> None:
        path.redraw(self.group_of(path.point1), self.group_of(path.point2), self.options)

    def _redraw_group(self, group: PointGroup) -> None:
        """Recompute every path touching any member of the group."""
        for p in group.points:
            if p.prev_path is not None:
                self._redraw_path(p.prev_path)
            if p.next_path is not None:
                self._redraw_path(p.next_path)

    def _redraw_around(self, *points: Point | None) -> None:
        seen: set[GridKey] = set()
        for point in points:
            if point is None or point.group_key is None or point.group_key in seen:
                continue
            seen.add(point.group_key)
            self._redraw_group(self.group_of(point))

    def redraw(self) -> None:
        """Recompute all geometry and label positions."""
        for route in self.iter_routes():
            for path in route.paths:
                self._redraw_path(path)
            self._refresh_route_label(route)
        for area in self.areas():
            for vertex in area.vertices:
                vertex.redraw()
            area.redraw(self.options.thickness)

    # ------------------------------------------------------------------
    # Labels
    # ------------------------------------------------------------------

    def set_label(self, route_id: str, label: RouteLabel | None) -> None:
        """Attach display text to a route; auto colours come along with it."""
        route = self.route(route_id)
        route.label = label or RouteLabel()
        if self.options.auto_colors and label is not None:
            route.color = label.color
            route.text_color = label.text_color
            route.border_color = label.border_color
        if not self.loading:
            self._refresh_route_label(route)

    def _refresh_route_label(self, route: Route) -> None:
        """Keep the label box on the first point only."""
        for point in route.points[1:]:
            point.label_box = None
        if not route.points:
            return
        first = route.points[0]
        if route.label.text:
            first.label_box = LabelBox(route.label.text, route.label.classes)
            self._position_label(first)
        else:
            first.label_box = None

    def _position_label(self, point: Point) -> None:
        box = point.label_box
        if box is None:
            return
        size = self.options.label_size
        offset_x = self.group_of(point).get_split_offset(point) * size
        box.size = size
        box.x = _round(point.x - size / 2 + offset_x)
        box.y = _round(point.y + self.options.thickness)

    def _position_group_labels(self, group: PointGroup) -> None:
        for p in group.points:
            self._position_label(p)

    # ------------------------------------------------------------------
    # Route mutation
    # ------------------------------------------------------------------

    def insert_point(
        self,
        route_id: str,
        x: float,
        y: float,
        type: PointType | str | None = None,
        position: int | None = None,
    ) -> Point:
        """Insert a point into a route, at the end unless ``position`` is given."""
        route = self.route(route_id)
        point = Point(route.id, math.floor(x), math.floor(y), PointType.parse(type))
        route.insert(point, position)
        self.resolve_group(point)

        if not self.loading:
            self._redraw_around(point, point.prev_point, point.next_point)
            self._refresh_route_label(route)
            self.save_data()
        return point

    def add_after(
        self,
        route_id: str,
        after: Point | None,
        x: float,
        y: float,
        type: PointType | str | None = None,
    ) -> Point:
        """Insert after ``after`` (or at the end) and select the new point."""
        position = after.position + 1 if after is not None else None
        point = self.insert_point(route_id, x, y, type, position)
        self.select(self.routes[route_id], point)
        return point

    def remove_point(self, point: Point) -> None:
        route = self.route(point.route_id)
        group = self._leave_group(point)
        prev, nxt = route.unlink(point)

        if group is not None:
            self._redraw_group(group)
        self._redraw_around(prev, nxt)
        self._refresh_route_label(route)
        point.label_box = None

        if self.selected_point is point:
            self.selected_point = None
        neighbour = prev if prev is not None else nxt
        if neighbour is not None:
            self.select(route, neighbour)
        self.save_data()

    def move_point(self, point: Point, x: Any, y: Any) -> tuple[float, float]:
        """Move a point, letting it stick to nearby groups.

        Returns the coordinates the point ended up at, which may differ from
        the request. Unchanged or non-finite targets leave it in place.
        """
        fx, fy = _finite(x), _finite(y)
        if fx is None or fy is None:
            logger.debug("Ignoring move to invalid coordinate", x=x, y=y)
            return (point.x, point.y)
        if point.x == fx and point.y == fy:
            return (point.x, point.y)

        old_group = self._leave_group(point)
        if old_group is not None:
            self._redraw_group(old_group)

        point.x, point.y = point.snap(self, fx, fy)
        self.resolve_group(point)
        self._position_label(point)

        self._redraw_around(point, point.prev_point, point.next_point)
        self.save_data()
        return (point.x, point.y)

    def set_point_type(self, point: Point, type: PointType | str | None) -> None:
        point.type = PointType.parse(type)
        self._redraw_group(self.group_of(point))
        self.save_data()

    def set_order(self, order: dict[str, Any]) -> None:
        """Reorder routes, which changes how they thread through shared points."""
        for route_id, value in order.items():
            route = self.routes.get(route_id)
            if not isinstance(route, Route):
                continue
            route.order = value
            if self.options.get_label:
                self.set_label(route_id, self.options.get_label(route.orig))
        for group in self.point_groups.values():
            group.sort(self.routes)
            self._redraw_group(group)
            self._position_group_labels(group)
        self.save_data()

    # ------------------------------------------------------------------
    # Area mutation
    # ------------------------------------------------------------------

    def add_vertex(self, area_id: str, x: float, y: float, position: int | None = None) -> Vertex:
        area = self.area(area_id)
        vertex = Vertex(area.id, _round(x), _round(y))
        if not self.loading:
            vertex.x, vertex.y = vertex.snap(self, vertex.x, vertex.y)
        area.insert(vertex, position)
        if not self.loading:
            area.redraw(self.options.thickness)
            self.save_data()
        return vertex

    def remove_vertex(self, vertex: Vertex) -> None:
        area = self.area(vertex.area_id)
        prev = area.unlink(vertex)
        area.redraw(self.options.thickness)
        if self.selected_point is vertex:
            self.selected_point = None
        if prev is not None:
            self.select(area, prev)
        self.save_data()

    def move_vertex(self, vertex: Vertex, x: Any, y: Any) -> tuple[float, float]:
        fx, fy = _finite(x), _finite(y)
        if fx is None or fy is None:
            logger.debug("Ignoring move to invalid coordinate", x=x, y=y)
            return (vertex.x, vertex.y)
        vertex.x, vertex.y = vertex.snap(self, _round(fx), _round(fy))
        vertex.redraw()
        vertex.prev.redraw()
        self.area(vertex.area_id).redraw(self.options.thickness)
        self.save_data()
        return (vertex.x, vertex.y)

    def move_area_label(self, area_id: str, x: float, y: float) -> None:
        area = self.area(area_id)
        area.move_to(x, y)
        area.redraw(self.options.thickness)
        self.save_data()

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def select(self, entity: Entity, handle: Handle | None = None) -> None:
        """Select a route or area and one of its points or vertices.

        Without a handle the last one is chosen. Selecting another entity
        deselects the current one first; reselecting the same pair does
        nothing.
        """
        if handle is None and entity.handles:
            handle = entity.handles[-1]
        if self.selected_route is entity and self.selected_point is handle:
            return
        if self.selected_route is not None and self.selected_route is not entity:
            self.deselect()
        self.selected_route = entity
        self.selected_point = handle
        if self.options.on_select:
            self.options.on_select(entity)

    def select_point(self, handle: Handle) -> None:
        self.select(self.owner(handle), handle)

    def deselect(self) -> None:
        entity = self.selected_route
        if entity is None:
            return
        if self.options.on_deselect:
            self.options.on_deselect(entity)
        self.selected_route = None
        self.selected_point = None

    def select_route(self, route_id: str | None = None, toggle: bool = False) -> Entity | None:
        """Select by id. Unknown ids clear the selection."""
        entity = self.routes.get(route_id) if route_id is not None else None
        if entity is None:
            self.deselect()
            return None
        if toggle and entity is self.selected_route:
            self.deselect()
            return None
        self.select(entity)
        return entity

    # ------------------------------------------------------------------
    # Input handling
    # ------------------------------------------------------------------

    def click_background(self, x: float, y: float) -> Handle | None:
        """Extend the selected route or area with a new point at (x, y)."""
        added = None
        entity = self.selected_route
        if self.options.editable and entity is not None:
            if isinstance(entity, Route):
                after = self.selected_point if isinstance(self.selected_point, Point) else None
                added = self.add_after(entity.id, after, x, y)
            else:
                position = None
                if isinstance(self.selected_point, Vertex):
                    position = entity.vertices.index(self.selected_point) + 1
                added = self.add_vertex(entity.id, x, y, position)
                self.select(entity, added)
        if self.options.on_click:
            self.options.on_click(None)
        return added

    def click_point(self, point: Point) -> Point | None:
        """Join the selected route to an existing point of another route."""
        route = self.owner(point)
        if not self.options.editable:
            self.select(route, point)
            if self.options.on_click:
                self.options.on_click(route)
            return None
        selected = self.selected_route
        if selected is route:
            return None
        if isinstance(selected, Route):
            after = self.selected_point if isinstance(self.selected_point, Point) else None
            return self.add_after(selected.id, after, point.x, point.y)
        self.select(route, point)
        return None

    def drag_point(self, point: Point, x: float, y: float) -> tuple[float, float]:
        """Drag a point; points of unselected routes stay put while another is selected."""
        if not self.options.editable:
            return (point.x, point.y)
        selected = self.selected_route
        if selected is not None and selected is not self.owner(point):
            return (point.x, point.y)
        self.select_point(point)
        return self.move_point(point, x, y)

    def set_route_visibility(self, visible: bool) -> None:
        self.routes_visible = visible
