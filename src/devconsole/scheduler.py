"""Display-refresh driven scheduling of graph updates."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Callable, Dict, Mapping, Optional

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .graph import GraphRecord

FrameCallback = Callable[[float], None]

IDLE = "idle"
RUNNING = "running"


class DisplayFrameSource:
    """Queue of callbacks run once on the next display refresh.

    The host loop calls :meth:`dispatch` right after presenting a frame.
    Callbacks requested while a dispatch is in progress wait for the
    following refresh, so a callback that re-requests itself runs exactly once
    per frame.
    """

    def __init__(self, clock: Callable[[], float] | None = None) -> None:
        self._clock = clock or (lambda: time.perf_counter() * 1000.0)
        self._next_handle = 1
        self._pending: Dict[int, FrameCallback] = {}
        self._due: Dict[int, FrameCallback] = {}
        self.frames = 0

    @property
    def pending(self) -> int:
        return len(self._pending)

    def request(self, callback: FrameCallback) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._pending[handle] = callback
        return handle

    def cancel(self, handle: int) -> None:
        self._pending.pop(handle, None)
        self._due.pop(handle, None)

    def dispatch(self, timestamp: float | None = None) -> int:
        """Run every callback requested before this call; return how many ran."""

        now = self._clock() if timestamp is None else float(timestamp)
        self.frames += 1
        self._due, self._pending = self._pending, {}
        ran = 0
        for handle in list(self._due):
            callback = self._due.pop(handle, None)
            if callback is None:
                continue
            callback(now)
            ran += 1
        return ran


class FrameScheduler:
    """Two-state loop that samples and redraws every live graph once per frame.

    ``idle`` has no frame requested; ``running`` has exactly one.  The owning
    console starts it on the first registration and stops it as soon as the
    registry becomes empty.
    """

    def __init__(self, frame_source: DisplayFrameSource, registry: Mapping[str, "GraphRecord"]) -> None:
        self._frames = frame_source
        self._registry = registry
        self._state = IDLE
        self._handle: Optional[int] = None
        self.ticks = 0
        self.last_timestamp: float | None = None

    @property
    def state(self) -> str:
        return self._state

    @property
    def running(self) -> bool:
        return self._state == RUNNING

    def start(self) -> None:
        if self._state == RUNNING:
            return
        self._state = RUNNING
        self._schedule()

    def stop(self) -> None:
        if self._handle is not None:
            self._frames.cancel(self._handle)
            self._handle = None
        self._state = IDLE

    def _schedule(self) -> None:
        if self._handle is None:
            self._handle = self._frames.request(self._on_frame)

    def _on_frame(self, timestamp: float) -> None:
        self._handle = None
        if not self._registry:
            self._state = IDLE
            return
        self.last_timestamp = timestamp
        for key in list(self._registry):
            # Skip graphs removed earlier in this same tick.
            record = self._registry.get(key)
            if record is None:
                continue
            record.update()
        self.ticks += 1
        if self._state == RUNNING:
            self._schedule()


__all__ = ["DisplayFrameSource", "FrameScheduler", "IDLE", "RUNNING"]
