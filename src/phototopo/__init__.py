"""phototopo: climbing route topos drawn over photos."""

__version__ = "0.1.0"

from phototopo.config import TopoOptions
from phototopo.errors import (
    ConfigurationError,
    DuplicateRouteIdError,
    TopoError,
    TopoFormatError,
    UnknownRouteError,
)
from phototopo.registry import TopoRegistry
from phototopo.topo import Topo

__all__ = [
    "ConfigurationError",
    "DuplicateRouteIdError",
    "Topo",
    "TopoError",
    "TopoFormatError",
    "TopoOptions",
    "TopoRegistry",
    "UnknownRouteError",
    "__version__",
]
