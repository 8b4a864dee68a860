"""Graph entities of a topo: points, paths, routes, groups and areas."""

from phototopo.graph.area import (
    Area,
    AreaLabel,
    HAlign,
    PointerMode,
    VAlign,
    Vertex,
    WidthMode,
)
from phototopo.graph.capabilities import HandleState, Selectable, Snappable
from phototopo.graph.point import LabelBox, Path, Point, PointType
from phototopo.graph.point_group import PointGroup
from phototopo.graph.route import Route, RouteLabel

__all__ = [
    "Area",
    "AreaLabel",
    "HAlign",
    "HandleState",
    "LabelBox",
    "Path",
    "Point",
    "PointGroup",
    "PointType",
    "PointerMode",
    "Route",
    "RouteLabel",
    "Selectable",
    "Snappable",
    "VAlign",
    "Vertex",
    "WidthMode",
]
