"""The debug console: categorised messages plus live graphs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional

from .config import GraphOptions
from .graph import Getter, GraphRecord, SurfaceFactory, validate_registration
from .messages import ERROR, INFO, LOG, WARNING, MessageStore, MISSING
from .overlay import OverlayLayer
from .scheduler import DisplayFrameSource, FrameScheduler
from .surface import GraphSurface

HEADER = "Console:"

_LABELS = {INFO: "INFO", ERROR: "ERROR", WARNING: "WARNING"}


@dataclass(frozen=True, slots=True)
class ConsoleLine:
    category: str
    text: str


def format_entry(category: str, key: str, value: str) -> str:
    if category == LOG:
        return f"{key}: {value}"
    label = f"{_LABELS[category]}: {key}"
    return f"{label}: {value}" if value else label


class TelemetryConsole:
    """Message log and graph registry sharing one frame scheduler.

    Messages are rendered into :attr:`lines` after every change.  Graph
    surfaces live in :attr:`overlay`, separate from the text, and are redrawn
    only by the scheduler on each display refresh.
    """

    def __init__(
        self,
        frame_source: DisplayFrameSource | None = None,
        *,
        surface_factory: SurfaceFactory | None = None,
        echo: Callable[[str], Any] | None = None,
    ) -> None:
        self.messages = MessageStore()
        self.graphs: Dict[str, GraphRecord] = {}
        self.overlay = OverlayLayer()
        self.frames = frame_source or DisplayFrameSource()
        self.scheduler = FrameScheduler(self.frames, self.graphs)
        self.lines: List[ConsoleLine] = []
        self.render_count = 0
        self._surface_factory = surface_factory
        self._echo = echo
        self.render()

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------
    def _record(self, category: str, stored: bool, key: str) -> None:
        if not stored:
            return
        if self._echo is not None:
            text = self.messages.get(category, str(key)) or ""
            self._echo(format_entry(category, str(key), text))
        self.render()

    def log(self, key: str, value: Any = MISSING) -> None:
        self._record(LOG, self.messages.log(key, value), key)

    def warn(self, key: str, value: Any = MISSING) -> None:
        self._record(WARNING, self.messages.warn(key, value), key)

    def error(self, key: str, value: Any = MISSING) -> None:
        self._record(ERROR, self.messages.error(key, value), key)

    def info(self, key: str, value: Any = MISSING) -> None:
        self._record(INFO, self.messages.info(key, value), key)

    def clear(self) -> None:
        self.messages.clear()
        self.render()

    def render(self) -> List[ConsoleLine]:
        """Rebuild the text view from the message store."""

        lines = [ConsoleLine("header", HEADER)]
        for category, entries in self.messages.categories():
            for key, value in entries:
                lines.append(ConsoleLine(category, format_entry(category, key, value)))
        self.lines = lines
        self.render_count += 1
        return lines

    def text(self) -> str:
        return "\n".join(line.text for line in self.lines)

    # ------------------------------------------------------------------
    # Graphs
    # ------------------------------------------------------------------
    def register_graph(
        self,
        key: str,
        getter: Getter,
        config: GraphOptions | Mapping[str, Any] | None = None,
        **options: Any,
    ) -> GraphSurface:
        """Start plotting ``getter`` under ``key`` and return the graph's surface.

        An existing graph with the same key is disposed first; the new graph
        starts with an empty history.
        """

        validate_registration(key, getter)
        key = str(key)
        if isinstance(config, GraphOptions):
            resolved = config.merged(options)
        else:
            resolved = GraphOptions.from_mapping({**dict(config or {}), **options})
        if key in self.graphs:
            self.unregister_graph(key)
        record = GraphRecord(key, getter, resolved, surface_factory=self._surface_factory)
        self.graphs[record.key] = record
        self.overlay.attach(record.key, record.surface, resolved)
        self.scheduler.start()
        return record.surface

    def unregister_graph(self, key: str) -> None:
        record = self.graphs.pop(str(key), None)
        if record is None:
            return
        self.overlay.detach(record.key)
        record.dispose()
        if not self.graphs:
            self.scheduler.stop()

    # Aliases matching the names used by web tooling.
    registerGraph = register_graph
    unregisterGraph = unregister_graph

    def get_graph(self, key: str) -> Optional[GraphRecord]:
        return self.graphs.get(key)

    def dispose(self) -> None:
        """Release every graph surface and stop the scheduler."""

        for key in list(self.graphs):
            self.unregister_graph(key)
        self.scheduler.stop()


__all__ = ["ConsoleLine", "HEADER", "TelemetryConsole", "format_entry"]
