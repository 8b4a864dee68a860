"""SVG generation for topos using drawsvg."""

from __future__ import annotations

import drawsvg as draw

from phototopo.graph.area import Area, HAlign, VAlign
from phototopo.graph.capabilities import HandleState
from phototopo.graph.route import Route
from phototopo.render.constants import (
    HANDLE_RADIUS_RATIO,
    HANDLE_STROKE_RATIO,
    ICON_DIR,
    ICON_OFFSET,
    ICON_SIZE,
    LABEL_FONT_RATIO,
    OUTLINE_RATIO,
    VEIL_OPACITY,
)
from phototopo.render.style import Theme
from phototopo.topo import Topo

_TEXT_ANCHOR = {HAlign.LEFT: "start", HAlign.CENTER: "middle", HAlign.RIGHT: "end"}
_BASELINE = {VAlign.TOP: "hanging", VAlign.MIDDLE: "central", VAlign.BOTTOM: "auto"}


def render_svg(topo: Topo, theme: Theme) -> str:
    """Render a topo over its photo to an SVG string."""
    width = topo.shown_width
    height = topo.shown_height
    d = draw.Drawing(width, height)

    # Photo
    d.append(draw.Image(0, 0, width, height, path=topo.options.image_url, embed=False))

    areas = list(topo.areas())
    for area in areas:
        _render_area(d, area, theme)
    for area in areas:
        _render_area_label(d, area, topo, theme)

    # Selected route last so it sits on top of any it shares points with
    routes = sorted(topo.iter_routes(), key=lambda r: r is topo.selected_route)
    for route in routes:
        _render_route(d, route, topo, theme)

    if not topo.routes_visible:
        d.append(draw.Image(
            0, 0, width, height,
            path=topo.options.image_url,
            embed=False,
            opacity=VEIL_OPACITY,
        ))

    if topo.options.show_point_types:
        _render_icons(d, topo)
    _render_labels(d, topo, theme)

    if topo.options.editable:
        _render_handles(d, topo, theme)

    return d.as_svg()


def _route_colors(route: Route, topo: Topo, theme: Theme) -> tuple[str, str]:
    """Return (stroke, outline) for a route in its current state."""
    if route is topo.selected_route:
        return theme.stroke_selected, theme.outline_selected
    return route.color or theme.stroke, route.border_color or theme.outline


def _render_route(d: draw.Drawing, route: Route, topo: Topo, theme: Theme) -> None:
    """Draw each path of a route as an outline under a thinner stroke."""
    thickness = topo.options.thickness
    stroke, outline = _route_colors(route, topo, theme)
    for path in route.paths:
        data = path.svg_path()
        d.append(draw.Path(
            d=data,
            fill="none",
            stroke=outline,
            stroke_width=thickness * OUTLINE_RATIO,
            stroke_linejoin="miter",
            stroke_linecap="round",
            class_="pt_outline",
        ))
        d.append(draw.Path(
            d=data,
            fill="none",
            stroke=stroke,
            stroke_width=thickness,
            stroke_linejoin="miter",
            stroke_linecap="round",
            stroke_dasharray=theme.hidden_dasharray if path.hidden else "none",
            class_="pt_route",
        ))


def _render_area(d: draw.Drawing, area: Area, theme: Theme) -> None:
    if area.polygon_path is None:
        return
    d.append(draw.Path(
        d=area.polygon_path + " Z",
        fill="none",
        stroke=theme.area_stroke,
        stroke_width=theme.area_border_width,
        stroke_linejoin="miter",
        stroke_linecap="round",
    ))
    d.append(draw.Path(
        d=area.polygon_path + " Z",
        fill=theme.area_fill,
        fill_opacity=theme.area_fill_opacity,
        stroke=theme.area_border,
        stroke_width=1,
        class_="pt_area",
    ))


def _render_area_label(d: draw.Drawing, area: Area, topo: Topo, theme: Theme) -> None:
    label = area.label
    if area.connector is not None:
        (x1, y1), (x2, y2) = area.connector
        d.append(draw.Line(x1, y1, x2, y2, stroke=theme.area_label_color, stroke_width=1))
        if area.connector_cap is not None:
            cap = draw.Path(fill=theme.area_label_color, stroke=theme.area_label_color)
            cap.M(x2, y2)
            for x, y in area.connector_cap.points:
                cap.L(x, y)
            cap.Z()
            d.append(cap)

    if not (label.visible and label.text and label.has_anchor):
        return
    d.append(draw.Text(
        label.text,
        theme.area_label_font_size,
        label.x, label.y,
        fill=theme.area_label_color,
        font_family=theme.label_font_family,
        text_anchor=_TEXT_ANCHOR[label.halign],
        dominant_baseline=_BASELINE[label.valign],
        class_="pt_area_label",
    ))


def _render_icons(d: draw.Drawing, topo: Topo) -> None:
    """Point type icons, skipped for types drawn as caps or not at all."""
    offset = ICON_OFFSET if topo.options.editable else -ICON_OFFSET
    for route in topo.iter_routes():
        for point in route.points:
            if not point.type.has_icon:
                continue
            d.append(draw.Image(
                point.x + offset, point.y - ICON_SIZE / 2,
                ICON_SIZE, ICON_SIZE,
                path=f"{topo.options.base_url}{ICON_DIR}{point.type.value}.png",
                embed=False,
                class_=f"pt_label pt_icon {point.type.value}",
            ))


def _render_labels(d: draw.Drawing, topo: Topo, theme: Theme) -> None:
    """Square route labels under the first point of each route."""
    for route in topo.iter_routes():
        if not route.points or route.points[0].label_box is None:
            continue
        box = route.points[0].label_box

        if route is topo.selected_route:
            fill, stroke, text = theme.stroke_selected, theme.outline_selected, theme.outline_selected
        else:
            fill = route.color or theme.label_fill
            stroke = route.border_color or theme.label_stroke
            text = route.text_color or route.border_color or theme.label_text

        d.append(draw.Rectangle(
            box.x, box.y, box.size, box.size,
            fill=fill,
            stroke=stroke,
            stroke_width=topo.options.label_border,
            class_=f"pt_label {box.classes}".strip(),
        ))
        d.append(draw.Text(
            box.text,
            box.size * LABEL_FONT_RATIO,
            box.x + box.size / 2, box.y + box.size / 2,
            fill=text,
            font_family=theme.label_font_family,
            font_weight="bold",
            text_anchor="middle",
            dominant_baseline="central",
        ))


def _render_handles(d: draw.Drawing, topo: Topo, theme: Theme) -> None:
    thickness = topo.options.thickness
    for entity in topo.routes.values():
        color = getattr(entity, "color", None)
        border = getattr(entity, "border_color", None)
        for handle in entity.handles:
            state = handle.handle_state(topo)
            if state is HandleState.ACTIVE:
                fill, stroke = theme.handle_active_fill, theme.handle_active_stroke
            elif state is HandleState.SELECTED:
                fill, stroke = theme.handle_selected_fill, theme.handle_stroke
            else:
                fill, stroke = color or theme.handle_fill, border or theme.handle_stroke
            d.append(draw.Circle(
                handle.x, handle.y, thickness * HANDLE_RADIUS_RATIO,
                fill=fill,
                stroke=stroke,
                stroke_width=thickness * HANDLE_STROKE_RATIO,
                class_=f"pt_handle {state.value}",
            ))
