"""Load format for routes and areas."""

from phototopo.parser.topo_format import (
    label_from_data,
    load_document,
    parse_area_points,
    parse_label_token,
    parse_route_points,
)

__all__ = [
    "label_from_data",
    "load_document",
    "parse_area_points",
    "parse_label_token",
    "parse_route_points",
]
