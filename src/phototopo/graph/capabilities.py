"""Capabilities shared by the editable entities of a topo.

Points and vertices are both draggable handles that can be selected and
snapped, but they snap differently (grid clustering vs. vertex locking), so
each implements these protocols on its own.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from phototopo.topo import Topo


class HandleState(Enum):
    """How an edit handle should be drawn."""

    NORMAL = "normal"
    SELECTED = "selected"  # belongs to the selected route or area
    ACTIVE = "active"  # is the selected point or vertex


class Selectable(Protocol):
    """An entity whose look depends on the topo's selection."""

    def handle_state(self, topo: Topo) -> HandleState: ...


class Snappable(Protocol):
    """An entity that adjusts requested coordinates to nearby geometry."""

    def snap(self, topo: Topo, x: float, y: float) -> tuple[float, float]: ...
