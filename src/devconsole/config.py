"""Configuration loading for the console and its graphs."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, List, Mapping

from .colours import parse_colour
from .errors import ValidationError
from .history import coerce_capacity

_REPO_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_CONFIG_PATH = _REPO_ROOT / "configs" / "default.json"

DEFAULT_GRAPH_WIDTH = 220
DEFAULT_GRAPH_HEIGHT = 48
DEFAULT_CAPACITY = 220
DEFAULT_COLOUR = "#9ad0ff"

# Names understood by the demo application when building graphs from a file.
DEMO_SOURCES = ("fps", "frame_time", "sine", "noise", "messages", "graphs")

# Alternative spellings accepted for graph options.
_OPTION_ALIASES = {
    "buffer": "capacity",
    "color": "colour",
    "strokeWidth": "stroke_width",
    "fill": "fill_under_curve",
    "fillUnderCurve": "fill_under_curve",
    "showValue": "show_latest_value",
    "showLatestValue": "show_latest_value",
}


@dataclass(slots=True)
class GraphOptions:
    """Rendering options for a single graph."""

    width: int = DEFAULT_GRAPH_WIDTH
    height: int = DEFAULT_GRAPH_HEIGHT
    capacity: int = DEFAULT_CAPACITY
    min: float | None = None
    max: float | None = None
    colour: Any = DEFAULT_COLOUR
    background: Any = "rgba(0,0,0,0)"
    stroke_width: float = 2
    fill_under_curve: bool = True
    show_latest_value: bool = True
    top: int = 10
    left: int = 0

    def __post_init__(self) -> None:
        self.width = int(self.width)
        self.height = int(self.height)
        if self.width <= 0 or self.height <= 0:
            raise ValidationError("graph width and height must be positive")
        self.capacity = coerce_capacity(self.capacity)
        self.min = None if self.min is None else float(self.min)
        self.max = None if self.max is None else float(self.max)
        self.stroke_width = float(self.stroke_width)
        self.fill_under_curve = bool(self.fill_under_curve)
        self.show_latest_value = bool(self.show_latest_value)
        self.top = int(self.top)
        self.left = int(self.left)
        # Fail early on colours the surface would not understand.
        for name in ("colour", "background"):
            try:
                parse_colour(getattr(self, name))
            except ValueError as exc:
                raise ValidationError(f"graph {name}: {exc}") from None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "GraphOptions":
        """Build options from ``data``, accepting camelCase and legacy names."""

        return cls(**_resolve_options(data or {}))

    def merged(self, overrides: Mapping[str, Any]) -> "GraphOptions":
        """Return a copy with ``overrides`` applied on top of these options."""

        if not overrides:
            return self
        return replace(self, **_resolve_options(overrides))


def _resolve_options(data: Mapping[str, Any]) -> dict[str, Any]:
    known = {item.name for item in fields(GraphOptions)}
    values: dict[str, Any] = {}
    for raw_name, value in data.items():
        name = _OPTION_ALIASES.get(raw_name, raw_name)
        if name not in known:
            raise ValidationError(f"unknown graph option {raw_name!r}")
        values[name] = value
    return values


@dataclass(slots=True)
class DemoGraphConfig:
    key: str
    source: str
    options: GraphOptions = field(default_factory=GraphOptions)


@dataclass(slots=True)
class ConsoleConfig:
    """Window and console parameters for the interactive application."""

    title: str = "Dev Console"
    window_width: int = 960
    window_height: int = 600
    fps: int = 60
    font_size: int = 14
    text_colour: Any = "#e6e6e6"
    panel_colour: Any = "rgba(25,25,25,0.95)"
    echo: bool = False
    log_faults: bool = False
    graphs: List[DemoGraphConfig] = field(default_factory=list)


def _normalise_graphs(items: Any) -> List[DemoGraphConfig]:
    if items is None:
        return []
    if not isinstance(items, list):
        raise ValueError("graphs must be a list of graph definitions")
    graphs: List[DemoGraphConfig] = []
    seen: set[str] = set()
    for item in items:
        key = str(item.get("key", "") or "")
        if not key:
            raise ValueError("graphs[].key must be provided")
        if key in seen:
            raise ValueError(f"duplicate graph key {key!r}")
        seen.add(key)
        source = str(item.get("source", "") or "")
        if source not in DEMO_SOURCES:
            raise ValueError(
                f"graphs[].source must be one of {', '.join(DEMO_SOURCES)} (got {source!r})"
            )
        options = GraphOptions.from_mapping(item.get("options", {}) or {})
        graphs.append(DemoGraphConfig(key=key, source=source, options=options))
    return graphs


def _normalise_console(data: Mapping[str, Any]) -> ConsoleConfig:
    defaults = ConsoleConfig()
    window = dict(data.get("window", {}) or {})
    config = ConsoleConfig(
        title=str(window.get("title", defaults.title)),
        window_width=int(window.get("width", defaults.window_width)),
        window_height=int(window.get("height", defaults.window_height)),
        fps=int(data.get("fps", defaults.fps)),
        font_size=int(data.get("font_size", defaults.font_size)),
        text_colour=data.get("text_colour", defaults.text_colour),
        panel_colour=data.get("panel_colour", defaults.panel_colour),
        echo=bool(data.get("echo", defaults.echo)),
        log_faults=bool(data.get("log_faults", defaults.log_faults)),
        graphs=_normalise_graphs(data.get("graphs")),
    )
    if config.fps <= 0:
        raise ValueError("fps must be positive")
    if config.window_width <= 0 or config.window_height <= 0:
        raise ValueError("window dimensions must be positive")
    parse_colour(config.text_colour)
    parse_colour(config.panel_colour)
    return config


def load_configuration(path: str | Path) -> ConsoleConfig:
    """Load a :class:`ConsoleConfig` from ``path``."""

    with open(path, "r", encoding="utf8") as fh:
        raw = json.load(fh)
    if not isinstance(raw, dict):
        raise ValueError("configuration root must be an object")
    return _normalise_console(raw)


__all__ = [
    "ConsoleConfig",
    "DEFAULT_CONFIG_PATH",
    "DEMO_SOURCES",
    "DemoGraphConfig",
    "GraphOptions",
    "load_configuration",
]
