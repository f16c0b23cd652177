"""Sampled graphs: rolling history plus the autoscaling line renderer."""

from __future__ import annotations

import math
from numbers import Real
from typing import Any, Callable, Tuple, Union

import numpy as np

from .colours import with_alpha
from .diagnostics import log_fault
from .errors import SamplingFault, ValidationError
from .config import GraphOptions
from .history import RollingBuffer
from .surface import GraphSurface

Getter = Union[Callable[[], Any], Real]
SurfaceFactory = Callable[[int, int, str], GraphSurface]

RANGE_EPSILON = 1e-6
FILL_ALPHA = 0.12
# Pixel margins around the plotted line.
EDGE_X = 2
EDGE_Y = 4
FILL_BASELINE = 2
LABEL_POSITION = (4, 2)


def format_latest(value: float) -> str:
    """Round ``value`` half away from zero for the latest-value label."""

    return str(int(math.copysign(math.floor(abs(value) + 0.5), value)))


def compute_bounds(
    history: np.ndarray,
    fixed_min: float | None = None,
    fixed_max: float | None = None,
) -> Tuple[float, float]:
    """Return the ``(low, high)`` value range used to scale ``history``.

    Unset bounds autoscale to the history extended with ``0`` as floor and
    ``1`` as ceiling.  A range narrower than :data:`RANGE_EPSILON` is widened
    to ``low + 1``.
    """

    low = float(fixed_min) if fixed_min is not None else float(np.min(history, initial=0.0))
    high = float(fixed_max) if fixed_max is not None else float(np.max(history, initial=1.0))
    if high - low < RANGE_EPSILON:
        high = low + 1.0
    return low, high


def project(
    history: np.ndarray,
    capacity: int,
    width: int,
    height: int,
    low: float,
    high: float,
) -> Tuple[np.ndarray, np.ndarray]:
    """Map samples to pixel coordinates.

    The newest sample always lands on the rightmost column; while the history
    is filling, the unused columns on the left stay empty.
    """

    count = history.shape[0]
    step = (width - 2 * EDGE_X) / max(capacity - 1, 1)
    index = np.arange(count, dtype=np.float64)
    xs = EDGE_X + (index + (capacity - count)) * step
    t = (history - low) / (high - low)
    ys = height - EDGE_Y - t * (height - 2 * EDGE_Y)
    return xs, ys


def validate_registration(key: Any, getter: Any) -> None:
    """Raise :class:`ValidationError` unless ``key`` and ``getter`` are usable."""

    if key is None or key == "":
        raise ValidationError("register_graph requires a key")
    if getter is None:
        raise ValidationError("register_graph requires a getter function or numeric value")
    if callable(getter):
        return
    if isinstance(getter, Real) and not isinstance(getter, bool):
        return
    raise ValidationError(
        f"graph getter must be callable or a number, not {type(getter).__name__}"
    )


def _default_surface(width: int, height: int, title: str) -> GraphSurface:
    return GraphSurface(width, height, title=title)


class GraphRecord:
    """A registered graph: its sampling source, history and owned surface."""

    def __init__(
        self,
        key: str,
        getter: Getter,
        options: GraphOptions | None = None,
        *,
        surface_factory: SurfaceFactory | None = None,
    ) -> None:
        validate_registration(key, getter)
        self.key = str(key)
        self.getter = getter
        self.options = options or GraphOptions()
        self.history = RollingBuffer(self.options.capacity)
        factory = surface_factory or _default_surface
        self.surface = factory(self.options.width, self.options.height, self.key)
        self.disposed = False

    # ------------------------------------------------------------------
    # Sampling
    # ------------------------------------------------------------------
    def evaluate(self) -> float:
        """Read the source once, raising :class:`SamplingFault` on bad values."""

        try:
            raw = self.getter() if callable(self.getter) else self.getter
            value = float(raw)
        except Exception as exc:
            raise SamplingFault(f"{self.key}: sampler raised {exc!r}") from exc
        if not math.isfinite(value):
            raise SamplingFault(f"{self.key}: non-finite sample {value!r}")
        return value

    def sample(self) -> float:
        try:
            value = self.evaluate()
        except SamplingFault as fault:
            log_fault("sampling", str(fault))
            value = 0.0
        self.history.push(value)
        return value

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------
    def bounds(self) -> Tuple[float, float]:
        return compute_bounds(self.history.snapshot(), self.options.min, self.options.max)

    def draw(self) -> None:
        opts = self.options
        surface = self.surface
        history = self.history.snapshot()
        low, high = compute_bounds(history, opts.min, opts.max)
        xs, ys = project(history, self.history.capacity, surface.width, surface.height, low, high)
        points = list(zip(xs.tolist(), ys.tolist()))

        surface.clear()
        if opts.background:
            surface.fill(opts.background)
        if opts.fill_under_curve and points:
            baseline = surface.height - FILL_BASELINE
            outline = points + [(points[-1][0], baseline), (points[0][0], baseline)]
            surface.fill_path(outline, with_alpha(opts.colour, FILL_ALPHA))
        surface.stroke_path(points, opts.colour, opts.stroke_width)
        if opts.show_latest_value and points:
            latest = float(history[-1])
            surface.draw_text(f"{self.key}: {format_latest(latest)}", LABEL_POSITION, opts.colour)

    def update(self) -> None:
        """Sample then redraw; a failed redraw zeroes this tick's sample."""

        self.sample()
        try:
            self.draw()
        except Exception as exc:
            log_fault("draw", f"{self.key}: {exc!r}")
            self.history.replace_latest(0.0)

    def dispose(self) -> None:
        if self.disposed:
            return
        self.disposed = True
        self.surface.release()


__all__ = [
    "FILL_ALPHA",
    "GraphRecord",
    "RANGE_EPSILON",
    "compute_bounds",
    "format_latest",
    "project",
    "validate_registration",
]
