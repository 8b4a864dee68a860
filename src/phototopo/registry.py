"""Registry of live topos, for broadcasting a selection across them."""

from __future__ import annotations

from typing import Iterator

from phototopo.topo import Entity, Topo


class TopoRegistry:
    """Topos keyed by element id.

    A page showing the same routes on several photos registers each topo
    here so that picking a route in one highlights it in all of them.
    """

    def __init__(self) -> None:
        self._topos: dict[str, Topo] = {}

    def __len__(self) -> int:
        return len(self._topos)

    def __iter__(self) -> Iterator[Topo]:
        return iter(list(self._topos.values()))

    def __contains__(self, element_id: object) -> bool:
        return element_id in self._topos

    def register(self, topo: Topo) -> Topo:
        self._topos[topo.options.element_id] = topo
        return topo

    def unregister(self, element_id: str) -> Topo | None:
        return self._topos.pop(element_id, None)

    def get(self, element_id: str) -> Topo | None:
        return self._topos.get(element_id)

    def select_route_everywhere(self, route_id: str | None, toggle: bool = False) -> list[Entity]:
        """Select ``route_id`` in every topo that has it; the rest deselect.

        Returns the entities that ended up selected.
        """
        selected = []
        for topo in self:
            entity = topo.select_route(route_id, toggle=toggle)
            if entity is not None:
                selected.append(entity)
        return selected
