"""Geometry primitives: bezier handles, parallel offsets and end caps."""

from phototopo.geometry.bezier import (
    BezierCurve,
    Coord,
    control_points,
    fmt,
    offset_bezier,
    round_tenth,
    unscale,
)
from phototopo.geometry.caps import Cap, CapKind, arrowhead, tee_bar

__all__ = [
    "BezierCurve",
    "Cap",
    "CapKind",
    "Coord",
    "arrowhead",
    "control_points",
    "fmt",
    "offset_bezier",
    "round_tenth",
    "tee_bar",
    "unscale",
]
