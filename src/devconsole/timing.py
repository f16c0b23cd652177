"""Frame pacing and timing statistics for the host loop."""

from __future__ import annotations

from types import ModuleType


class FrameClock:
    """Wrap ``pygame.time.Clock`` and keep per-frame timing figures."""

    def __init__(self, pygame_module: ModuleType) -> None:
        self._pygame = pygame_module
        self._clock = pygame_module.time.Clock()
        self.frame_count = 0
        self.dt_ms = 0.0
        self.first_frame = True

    def tick(self, fps: int) -> float:
        """Advance one frame, waiting to hold ``fps``; return the delta in seconds."""

        self.dt_ms = float(self._clock.tick(fps))
        if self.frame_count:
            self.first_frame = False
        self.frame_count += 1
        return self.dt_ms / 1000.0

    @property
    def dt(self) -> float:
        return self.dt_ms / 1000.0

    @property
    def fps(self) -> float:
        return float(self._clock.get_fps())

    def elapsed_ms(self) -> int:
        return int(self._pygame.time.get_ticks())


__all__ = ["FrameClock"]
