"""Drawing surface owned by a graph, built on :mod:`pygame`."""

from __future__ import annotations

from importlib import import_module
from types import ModuleType
from typing import Any, Dict, Sequence, Tuple

from .colours import RGBA, ColourSpec, TRANSPARENT, parse_colour
from .errors import ConsoleUnavailableError

Point = Tuple[float, float]

LABEL_FONT_SIZE = 12

_FONT_CACHE: Dict[int, Any] = {}


def load_pygame() -> ModuleType:
    try:
        module = import_module("pygame")
    except ImportError as exc:  # pragma: no cover - exercised only when pygame missing
        raise ConsoleUnavailableError("pygame is not installed") from exc
    if module is None:  # pragma: no cover - defensive
        raise ConsoleUnavailableError("pygame import returned None")
    return module


def get_font(pygame: ModuleType, size: int) -> Any:
    """Return a cached monospace font of ``size`` points."""

    font = _FONT_CACHE.get(size)
    if font is None:
        if not pygame.font.get_init():
            pygame.font.init()
        font = pygame.font.SysFont("monospace", size)
        _FONT_CACHE[size] = font
    return font


class GraphSurface:
    """Offscreen RGBA surface with the few drawing primitives a graph needs.

    The surface keeps its pixels between frames; the owning graph clears and
    repaints it on every tick.  Once :meth:`release` is called every drawing
    call raises :class:`RuntimeError`.
    """

    def __init__(self, width: int, height: int, *, title: str = "", pygame_module: ModuleType | None = None) -> None:
        self._pygame = pygame_module or load_pygame()
        self.width = int(width)
        self.height = int(height)
        self.title = title
        self._surface = self._pygame.Surface((self.width, self.height), self._pygame.SRCALPHA)
        self._surface.fill(TRANSPARENT)

    @property
    def released(self) -> bool:
        return self._surface is None

    @property
    def surface(self) -> Any:
        """The underlying ``pygame.Surface``."""

        if self._surface is None:
            raise RuntimeError(f"graph surface {self.title!r} has been released")
        return self._surface

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def clear(self) -> None:
        self.surface.fill(TRANSPARENT)

    def fill(self, colour: ColourSpec) -> None:
        self.surface.fill(parse_colour(colour))

    def stroke_path(self, points: Sequence[Point], colour: ColourSpec, width: float = 1) -> None:
        """Stroke an open polyline through ``points``; fewer than two is a no-op."""

        if len(points) < 2:
            return
        line_width = max(1, int(round(width)))
        self._pygame.draw.lines(self.surface, parse_colour(colour), False, list(points), line_width)

    def fill_path(self, points: Sequence[Point], colour: RGBA) -> None:
        """Fill the closed polygon ``points`` blending ``colour`` over the pixels."""

        if len(points) < 3:
            return
        layer = self._pygame.Surface((self.width, self.height), self._pygame.SRCALPHA)
        self._pygame.draw.polygon(layer, parse_colour(colour), list(points))
        self.surface.blit(layer, (0, 0))

    def draw_text(self, text: str, position: Point, colour: ColourSpec, size: int = LABEL_FONT_SIZE) -> None:
        r, g, b, _ = parse_colour(colour)
        rendered = get_font(self._pygame, size).render(text, True, (r, g, b))
        self.surface.blit(rendered, (int(position[0]), int(position[1])))

    def get_at(self, x: int, y: int) -> RGBA:
        colour = self.surface.get_at((int(x), int(y)))
        return colour.r, colour.g, colour.b, colour.a

    def release(self) -> None:
        self._surface = None


__all__ = ["GraphSurface", "LABEL_FONT_SIZE", "Point", "get_font", "load_pygame"]
