"""Theme definition for topo rendering."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Theme:
    """Colours used to draw routes, areas, labels and handles."""

    name: str
    stroke: str
    outline: str
    stroke_selected: str
    outline_selected: str
    label_fill: str
    label_stroke: str
    label_text: str
    label_font_family: str
    area_stroke: str
    area_border: str
    area_fill: str
    area_label_color: str
    handle_fill: str
    handle_stroke: str
    handle_selected_fill: str
    handle_active_fill: str
    handle_active_stroke: str
    # Area polygons
    area_border_width: float = 15.0
    area_fill_opacity: float = 0.01
    area_label_font_size: float = 14.0
    # Dash pattern for paths leaving a hidden point
    hidden_dasharray: str = "1,3"
