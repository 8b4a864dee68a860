"""Options for a topo editing session."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Callable

from phototopo.errors import ConfigurationError

# camelCase names accepted by TopoOptions.from_dict
_ALIASES = {
    "elementId": "element_id",
    "imageUrl": "image_url",
    "baseUrl": "base_url",
    "seperateRoutes": "separate_routes",
    "separateRoutes": "separate_routes",
    "autoColors": "auto_colors",
    "autoSize": "auto_size",
    "labelSize": "label_size",
    "labelBorder": "label_border",
    "viewScale": "view_scale",
    "showPointTypes": "show_point_types",
    "strictIds": "strict_ids",
    "onchange": "on_change",
    "onselect": "on_select",
    "ondeselect": "on_deselect",
    "onclick": "on_click",
    "getlabel": "get_label",
}

_REQUIRED = ("element_id", "width", "height", "image_url")


@dataclass
class TopoOptions:
    """Configuration for a Topo.

    ``element_id``, ``width``, ``height`` and ``image_url`` are required;
    everything else has a default.
    """

    element_id: str | None = None
    width: float | None = None
    height: float | None = None
    image_url: str | None = None
    image_size: tuple[float, float] | None = None
    base_url: str = ""
    editable: bool = False
    separate_routes: bool = False
    auto_colors: bool = False
    auto_size: bool = True
    thickness: float = 5
    label_size: float = 16
    label_border: float = 1
    view_scale: float = 1
    show_point_types: bool = True
    strict_ids: bool = False
    routes: list[dict[str, Any]] = field(default_factory=list)
    # Collaborator callbacks
    on_change: Callable[[dict[str, Any]], None] | None = None
    on_select: Callable[[Any], None] | None = None
    on_deselect: Callable[[Any], None] | None = None
    on_click: Callable[[Any], None] | None = None
    get_label: Callable[[dict[str, Any]], Any] | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TopoOptions:
        """Build options from a dict, accepting camelCase keys as well.

        Unknown keys are ignored.
        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = _ALIASES.get(key, key)
            if name in known:
                kwargs[name] = value
        if kwargs.get("image_size") is not None:
            kwargs["image_size"] = tuple(kwargs["image_size"])
        return cls(**kwargs)

    def validate(self) -> None:
        """Raise ConfigurationError listing every missing required option."""
        missing = [name for name in _REQUIRED if not getattr(self, name)]
        if missing:
            raise ConfigurationError(missing)

    @property
    def snap_threshold(self) -> float:
        """Grid cell size used to cluster points."""
        return self.thickness * 4
