"""Render constants used across render modules.

Everything here scales with nothing but itself or the route thickness.
Theme-dependent values remain in style.py.
"""

# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------
OUTLINE_RATIO: float = 1.7
"""Outline stroke width as a multiple of the route thickness."""

# ---------------------------------------------------------------------------
# Point type icons
# ---------------------------------------------------------------------------
ICON_SIZE: float = 16.0
"""Width and height of a point type icon."""

ICON_OFFSET: float = 8.0
"""Horizontal shift of an icon away from its point.

Icons sit to the right of the point while editing so the handle stays
clickable, and to the left otherwise.
"""

ICON_DIR: str = "images/"
"""Directory, relative to the base URL, holding ``<type>.png`` icons."""

# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------
LABEL_FONT_RATIO: float = 0.68
"""Label text size as a fraction of the label box size."""

# ---------------------------------------------------------------------------
# Edit handles
# ---------------------------------------------------------------------------
HANDLE_RADIUS_RATIO: float = 1.2
"""Handle circle radius as a multiple of the route thickness."""

HANDLE_STROKE_RATIO: float = 0.4
"""Handle outline width as a multiple of the route thickness."""

# ---------------------------------------------------------------------------
# Visibility
# ---------------------------------------------------------------------------
VEIL_OPACITY: float = 0.8
"""Opacity of the photo copy drawn over the routes while they are hidden."""
