"""Interactive pygame host for the debug console and its headless runner."""

from __future__ import annotations

import math
import os
import queue
import sys
import threading
import time
from collections import deque
from types import ModuleType
from typing import Any, Callable, Dict, Tuple

import numpy as np

from . import __version__
from .colours import parse_colour
from .config import DEFAULT_CONFIG_PATH, ConsoleConfig, load_configuration
from .console import ConsoleLine, TelemetryConsole
from .diagnostics import enable_fault_logging, fault_counts
from .errors import ConsoleUnavailableError
from .messages import ERROR, INFO, WARNING
from .scheduler import DisplayFrameSource
from .surface import get_font, load_pygame
from .timing import FrameClock


CacheKey = tuple[str, str, tuple[int, int, int], str]

_CATEGORY_COLOURS: Dict[str, Tuple[int, int, int]] = {
    INFO: (120, 190, 255),
    ERROR: (255, 110, 110),
    WARNING: (255, 210, 90),
}

DEFAULT_HEADLESS_FRAMES = 120
PANEL_PADDING = 10


class AsyncThrottledPrinter:
    """Background printer that rate limits console output."""

    def __init__(
        self,
        *,
        window_seconds: float = 0.75,
        max_messages: int = 8,
        stream: Any = None,
    ) -> None:
        self._queue: "queue.Queue[tuple[str, str] | None]" = queue.Queue()
        self._history: deque[float] = deque()
        self._history_window = window_seconds
        self._max_messages = max_messages
        self._history_lock = threading.Lock()
        self._stream = stream
        self._worker = threading.Thread(target=self._run, name="status-printer", daemon=True)
        self._worker.start()

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            if item is None:
                self._queue.task_done()
                break
            text, end = item
            stream = self._stream or sys.stdout
            try:
                stream.write(text)
                stream.write(end)
                stream.flush()
            finally:
                self._queue.task_done()

    def _prune_history(self, now: float) -> None:
        while self._history and now - self._history[0] > self._history_window:
            self._history.popleft()

    def emit(self, message: str, *, end: str = "\n", force: bool = False) -> bool:
        """Queue *message* for printing when under the rate limit.

        Returns ``True`` when the message is enqueued for output."""

        now = time.monotonic()
        with self._history_lock:
            self._prune_history(now)
            if not force and len(self._history) >= self._max_messages:
                return False
            self._history.append(now)
        self._queue.put((message, end))
        return True

    def flush(self) -> None:
        """Block until queued messages have been printed."""

        self._queue.join()

    def close(self) -> None:
        """Stop the worker thread after flushing pending messages."""

        self.flush()
        self._queue.put(None)
        self._queue.join()


class TextSurfaceCache:
    """Cache rendered text surfaces keyed by console category and content."""

    def __init__(self) -> None:
        self._cache: dict[CacheKey, Any] = {}
        self._group_keys: dict[str, set[CacheKey]] = {}
        self._frame_usage: dict[str, set[CacheKey]] = {}

    def start_frame(self) -> None:
        """Initialise tracking for a new frame."""

        self._frame_usage = {}

    def fetch(
        self,
        group: str,
        text: str,
        colour: tuple[int, int, int],
        font_key: str,
        renderer: Callable[[], Any],
    ) -> Any:
        """Return a cached surface, rendering when no cache entry exists."""

        key = (group, text, colour, font_key)
        surface = self._cache.get(key)
        if surface is None:
            surface = renderer()
            self._cache[key] = surface
        self._frame_usage.setdefault(group, set()).add(key)
        return surface

    def finish_frame(self) -> None:
        """Drop cache entries no longer referenced this frame."""

        for group, used in self._frame_usage.items():
            previous = self._group_keys.get(group)
            if previous:
                for stale in previous - used:
                    self._cache.pop(stale, None)
            self._group_keys[group] = set(used)

        stale_groups = [group for group in self._group_keys if group not in self._frame_usage]
        for group in stale_groups:
            for key in self._group_keys[group]:
                self._cache.pop(key, None)
            del self._group_keys[group]

        self._frame_usage = {}

    def invalidate(self, group: str) -> None:
        """Remove cached entries for the given group."""

        cached = self._group_keys.pop(group, None)
        if not cached:
            return
        for key in cached:
            self._cache.pop(key, None)

    def __len__(self) -> int:
        return len(self._cache)


class ConsoleView:
    """Paint the console text panel and the graph overlay onto a pygame surface."""

    def __init__(
        self,
        console: TelemetryConsole,
        pygame_module: ModuleType,
        *,
        font_size: int = 14,
        text_colour: Any = "#e6e6e6",
        panel_colour: Any = "rgba(25,25,25,0.95)",
    ) -> None:
        self.console = console
        self._pygame = pygame_module
        self.font_size = int(font_size)
        self.text_colour = parse_colour(text_colour)[:3]
        self.panel_colour = parse_colour(panel_colour)
        self.cache = TextSurfaceCache()

    def _line_colour(self, line: ConsoleLine) -> tuple[int, int, int]:
        return _CATEGORY_COLOURS.get(line.category, self.text_colour)

    def draw(self, target: Any, origin: Tuple[int, int] = (PANEL_PADDING, PANEL_PADDING)) -> int:
        """Draw text then graphs starting at ``origin``; return the bottom y."""

        font = get_font(self._pygame, self.font_size)
        line_height = font.get_linesize()
        x, y = origin
        rows: list[tuple[ConsoleLine, str]] = [
            (line, row) for line in self.console.lines for row in line.text.split("\n")
        ]

        text_height = len(rows) * line_height
        overlay_height = self.console.overlay.height()
        panel_w = max(1, target.get_width() // 2)
        panel_h = text_height + overlay_height + 2 * PANEL_PADDING
        panel = self._pygame.Surface((panel_w, panel_h), self._pygame.SRCALPHA)
        panel.fill(self.panel_colour)
        target.blit(panel, (x - PANEL_PADDING, y - PANEL_PADDING))

        self.cache.start_frame()
        for line, row in rows:
            colour = self._line_colour(line)
            rendered = self.cache.fetch(
                line.category,
                row,
                colour,
                f"mono{self.font_size}",
                lambda row=row, colour=colour: font.render(row, True, colour),
            )
            target.blit(rendered, (x, y))
            y += line_height
        self.cache.finish_frame()

        self.console.overlay.blit(target, (x, y))
        return y + overlay_height


class _HeadlessClock:
    """Stand-in for :class:`FrameClock` that advances simulated time only."""

    def __init__(self) -> None:
        self.frame_count = 0
        self.dt_ms = 0.0
        self._elapsed = 0.0
        self._fps = 0.0

    def tick(self, fps: int) -> float:
        self.dt_ms = 1000.0 / max(int(fps), 1)
        self._elapsed += self.dt_ms
        self._fps = 1000.0 / self.dt_ms
        self.frame_count += 1
        return self.dt_ms / 1000.0

    @property
    def dt(self) -> float:
        return self.dt_ms / 1000.0

    @property
    def fps(self) -> float:
        return self._fps

    def elapsed_ms(self) -> int:
        return int(self._elapsed)


def build_sources(console: TelemetryConsole, clock: Any, *, seed: int | None = None) -> Dict[str, Callable[[], float]]:
    """Return the demo sampling functions addressable from configuration."""

    rng = np.random.default_rng(seed)

    def noise() -> float:
        return float(50.0 + 15.0 * rng.standard_normal())

    return {
        "fps": lambda: clock.fps,
        "frame_time": lambda: clock.dt_ms,
        "sine": lambda: 50.0 + 50.0 * math.sin(clock.elapsed_ms() / 500.0),
        "noise": noise,
        "messages": lambda: float(len(console.messages)),
        "graphs": lambda: float(len(console.graphs)),
    }


def install_graphs(console: TelemetryConsole, config: ConsoleConfig, sources: Dict[str, Callable[[], float]]) -> None:
    for graph in config.graphs:
        console.register_graph(graph.key, sources[graph.source], graph.options)


def _summary(console: TelemetryConsole, frames: int) -> str:
    lines = [
        f"Rendered {frames} frames ({console.scheduler.ticks} graph ticks) for {len(console.graphs)} graphs",
    ]
    for key, record in console.graphs.items():
        low, high = record.bounds()
        latest = record.history.latest()
        latest_text = "n/a" if latest is None else f"{latest:.3f}"
        lines.append(
            f"  - {key}: {len(record.history)}/{record.history.capacity} samples, "
            f"latest {latest_text}, range [{low:.3f}, {high:.3f}]"
        )
    faults = fault_counts()
    if faults:
        lines.append("Recovered faults: " + ", ".join(f"{k}={v}" for k, v in sorted(faults.items())))
    return "\n".join(lines)


def run_headless(config: ConsoleConfig, *, frames: int = DEFAULT_HEADLESS_FRAMES, seed: int | None = 0) -> int:
    """Drive the console for ``frames`` simulated refreshes without a window."""

    os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
    try:
        load_pygame()
    except ConsoleUnavailableError as exc:
        print(f"pygame is required to draw graphs: {exc}")
        return 1

    frames_source = DisplayFrameSource()
    console = TelemetryConsole(frames_source)
    clock = _HeadlessClock()
    install_graphs(console, config, build_sources(console, clock, seed=seed))
    console.info("mode", "headless")
    for _ in range(max(int(frames), 0)):
        clock.tick(config.fps)
        frames_source.dispatch(float(clock.elapsed_ms()))
    print(console.text())
    print(_summary(console, frames))
    console.dispose()
    return 0


def run(
    *,
    headless: bool = False,
    config_path: str | None = None,
    frames: int | None = None,
    fps: int | None = None,
    log_faults: bool | None = None,
    echo: bool | None = None,
) -> int:
    """Launch the console window, or a headless run when ``headless`` is set.

    Parameters
    ----------
    headless:
        Sample and draw the configured graphs for ``frames`` simulated
        refreshes, then print the console text and a summary.
    config_path:
        Configuration file; defaults to ``configs/default.json``.
    frames:
        Number of refreshes for headless runs, or a frame limit for the
        interactive window (``None`` runs until closed).
    fps, log_faults, echo:
        Overrides for the matching configuration entries.
    """

    config = load_configuration(config_path or DEFAULT_CONFIG_PATH)
    if fps is not None:
        config.fps = int(fps)
    if log_faults is not None:
        config.log_faults = bool(log_faults)
    if echo is not None:
        config.echo = bool(echo)
    enable_fault_logging(config.log_faults)

    if headless:
        return run_headless(config, frames=DEFAULT_HEADLESS_FRAMES if frames is None else frames)

    try:
        pygame = load_pygame()
    except ConsoleUnavailableError as exc:  # pragma: no cover - exercised only when pygame missing
        print(f"pygame is required for the interactive console: {exc}")
        return 1

    pygame.init()
    pygame.display.set_caption(config.title)
    screen = pygame.display.set_mode((config.window_width, config.window_height))

    printer = AsyncThrottledPrinter() if config.echo else None
    console = TelemetryConsole(echo=printer.emit if printer is not None else None)
    clock = FrameClock(pygame)
    sources = build_sources(console, clock)
    install_graphs(console, config, sources)
    view = ConsoleView(
        console,
        pygame,
        font_size=config.font_size,
        text_colour=config.text_colour,
        panel_colour=config.panel_colour,
    )
    console.info("build", f"devconsole {__version__}")
    console.log("keys", "C clear, G toggle sine graph, Esc quit")

    running = True
    try:
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_c:
                        console.clear()
                    elif event.key == pygame.K_g:
                        if "sine" in console.graphs:
                            console.unregister_graph("sine")
                        else:
                            console.register_graph("sine", sources["sine"], color="#ffb36b")

            clock.tick(config.fps)
            console.log("frame", clock.frame_count)
            if clock.dt_ms > 2000.0 / config.fps:
                console.warn("slow frame", f"{clock.dt_ms:.1f} ms")

            screen.fill((10, 10, 14))
            view.draw(screen)
            pygame.display.flip()
            console.frames.dispatch()

            if frames is not None and clock.frame_count >= frames:
                running = False
    finally:
        console.dispose()
        pygame.quit()
        if printer is not None:
            printer.close()
    print("Console closed.")
    return 0


__all__ = [
    "AsyncThrottledPrinter",
    "ConsoleView",
    "TextSurfaceCache",
    "build_sources",
    "install_graphs",
    "run",
    "run_headless",
]
