"""Layer holding graph surfaces apart from the console text."""

from __future__ import annotations

from typing import Any, Dict, Iterator, Tuple

from .config import GraphOptions
from .surface import GraphSurface


class OverlayLayer:
    """Graph surfaces attached to the console, stacked vertically.

    Rebuilding the console text never touches this layer; surfaces are only
    added and removed through :meth:`attach` and :meth:`detach`.
    """

    def __init__(self) -> None:
        self._children: Dict[str, Tuple[GraphSurface, GraphOptions]] = {}

    def attach(self, key: str, surface: GraphSurface, options: GraphOptions) -> None:
        self._children[key] = (surface, options)

    def detach(self, key: str) -> GraphSurface | None:
        entry = self._children.pop(key, None)
        return entry[0] if entry else None

    def get(self, key: str) -> GraphSurface | None:
        entry = self._children.get(key)
        return entry[0] if entry else None

    def __contains__(self, key: object) -> bool:
        return key in self._children

    def __len__(self) -> int:
        return len(self._children)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._children))

    def layout(self, origin: Tuple[int, int] = (0, 0)) -> Dict[str, Tuple[int, int]]:
        """Return the top-left position of each surface, in attach order."""

        x0, y = origin
        positions: Dict[str, Tuple[int, int]] = {}
        for key, (surface, options) in self._children.items():
            y += options.top
            positions[key] = (x0 + options.left, y)
            y += surface.height + options.top
        return positions

    def height(self) -> int:
        return sum(surface.height + 2 * options.top for surface, options in self._children.values())

    def blit(self, target: Any, origin: Tuple[int, int] = (0, 0)) -> int:
        """Draw every attached surface onto ``target``; return how many were drawn."""

        drawn = 0
        for key, position in self.layout(origin).items():
            surface = self._children[key][0]
            if surface.released:
                continue
            target.blit(surface.surface, position)
            drawn += 1
        return drawn


__all__ = ["OverlayLayer"]
