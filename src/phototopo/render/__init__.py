"""SVG rendering for topos."""

from phototopo.render.style import Theme
from phototopo.render.svg import render_svg

__all__ = ["Theme", "render_svg"]
