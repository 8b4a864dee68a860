"""Exception hierarchy for phototopo."""

from __future__ import annotations


class TopoError(Exception):
    """Base exception for all phototopo errors."""

    pass


class ConfigurationError(TopoError):
    """Required topo options are missing or unusable."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(f"PhotoTopo config error: missing {', '.join(missing)}")


class DuplicateRouteIdError(TopoError):
    """Two loaded routes or areas share the same id."""

    def __init__(self, route_id: str) -> None:
        self.route_id = route_id
        super().__init__(f"Duplicate route id '{route_id}'")


class TopoFormatError(TopoError):
    """A serialized point or label token could not be parsed."""

    def __init__(self, token: str, reason: str) -> None:
        self.token = token
        self.reason = reason
        super().__init__(f"Invalid token '{token}': {reason}")


class UnknownRouteError(TopoError):
    """A mutation addressed a route or area id the topo does not hold."""

    def __init__(self, route_id: str) -> None:
        self.route_id = route_id
        super().__init__(f"No route or area with id '{route_id}'")
