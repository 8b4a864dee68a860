"""Parser for the comma-separated point lists stored per route and area.

A route is stored as ``"x y [type],x y [type],..."``. An area uses the same
list of ``"x y"`` vertices, optionally preceded by a label token. The label
token is not tagged: it is recognised by its shape, either the full form

    x y halign valign visible|hidden none|line|arrow expand|shrink text...

or the older ``x y align text...`` with at least four parts, where the
alignment may be empty. Label fields are split on single spaces so empty
fields keep their place. Anything shorter is an ordinary vertex.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from phototopo.errors import TopoFormatError
from phototopo.graph.area import AreaLabel, HAlign, PointerMode, VAlign, WidthMode
from phototopo.graph.point import PointType
from phototopo.graph.route import RouteLabel

_VISIBILITY = {"visible": True, "hidden": False}
_HALIGNS = {a.value for a in HAlign}
_VALIGNS = {a.value for a in VAlign}
_POINTERS = {m.value for m in PointerMode}
_WIDTHS = {m.value for m in WidthMode}


def _tokens(text: str | None) -> list[str]:
    if not text:
        return []
    return [token.strip() for token in text.split(",") if token.strip()]


def _coord(parts: list[str], index: int, view_scale: float) -> float:
    try:
        return float(parts[index]) * view_scale
    except (IndexError, ValueError):
        raise TopoFormatError(" ".join(parts), "expected numeric x and y") from None


def parse_route_points(
    text: str | None, view_scale: float = 1
) -> list[tuple[float, float, PointType]]:
    """Parse a route's point list into scaled ``(x, y, type)`` triples."""
    points = []
    for token in _tokens(text):
        parts = token.split()
        x = _coord(parts, 0, view_scale)
        y = _coord(parts, 1, view_scale)
        try:
            point_type = PointType.parse(parts[2] if len(parts) > 2 else None)
        except ValueError:
            raise TopoFormatError(" ".join(parts), f"unknown point type '{parts[2]}'") from None
        points.append((x, y, point_type))
    return points


def _is_full_label(parts: list[str]) -> bool:
    return (
        len(parts) >= 7
        and parts[2] in _HALIGNS
        and parts[3] in _VALIGNS
        and parts[4] in _VISIBILITY
        and parts[5] in _POINTERS
        and parts[6] in _WIDTHS
    )


def parse_label_token(parts: list[str], view_scale: float = 1) -> AreaLabel | None:
    """Return the area label encoded by a token, or None for a plain vertex."""
    if _is_full_label(parts):
        return AreaLabel(
            x=_coord(parts, 0, view_scale),
            y=_coord(parts, 1, view_scale),
            halign=HAlign(parts[2]),
            valign=VAlign(parts[3]),
            visible=_VISIBILITY[parts[4]],
            pointer=PointerMode(parts[5]),
            width=WidthMode(parts[6]),
            text=" ".join(parts[7:]),
        )
    if len(parts) > 3:
        if parts[2] and parts[2] not in _HALIGNS:
            raise TopoFormatError(" ".join(parts), f"unknown label alignment '{parts[2]}'")
        return AreaLabel(
            x=_coord(parts, 0, view_scale),
            y=_coord(parts, 1, view_scale),
            halign=HAlign(parts[2] or HAlign.LEFT),
            text=" ".join(parts[3:]),
        )
    return None


def parse_area_points(
    text: str | None, view_scale: float = 1
) -> tuple[AreaLabel | None, list[tuple[float, float]]]:
    """Parse an area's point list into its label and scaled vertices."""
    label = None
    vertices = []
    for i, token in enumerate(_tokens(text)):
        if i == 0:
            # Label fields may be empty, so keep every single-space field
            label = parse_label_token(token.split(" "), view_scale)
            if label is not None:
                continue
        parts = token.split()
        vertices.append((_coord(parts, 0, view_scale), _coord(parts, 1, view_scale)))
    return label, vertices


def label_from_data(data: dict[str, Any]) -> RouteLabel:
    """Default ``get_label``: read label fields stored on the route entry."""
    return RouteLabel(
        text=str(data.get("label", "")),
        classes=str(data.get("classes", "")),
        color=data.get("color"),
        text_color=data.get("textColor"),
        border_color=data.get("borderColor"),
    )


def load_document(path: Path) -> dict[str, Any]:
    """Read a JSON topo document into keyword options for a Topo.

    The document holds the canvas ``width``/``height``, the photo
    ``image`` (with optional natural ``image_size``) and the ``routes``
    list; any other key is passed through as an option.
    """
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise TopoFormatError(path.name, f"not valid JSON ({e.msg})") from e
    if not isinstance(data, dict):
        raise TopoFormatError(path.name, "expected a JSON object")

    options = dict(data)
    options.setdefault("element_id", path.stem)
    if "image" in options:
        options["image_url"] = options.pop("image")
    options.setdefault("routes", [])
    return options
