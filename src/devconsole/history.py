"""Fixed-capacity sample history."""

from __future__ import annotations

import math
from collections import deque

import numpy as np

RAW_DTYPE = np.float64
MIN_CAPACITY = 4


def coerce_capacity(capacity: float) -> int:
    """Clamp ``capacity`` to an integer of at least :data:`MIN_CAPACITY`."""

    try:
        value = math.floor(float(capacity))
    except (TypeError, ValueError, OverflowError):
        return MIN_CAPACITY
    return max(MIN_CAPACITY, value)


class RollingBuffer:
    """FIFO history of numeric samples; the oldest sample is evicted on overflow."""

    __slots__ = ("_capacity", "_samples")

    def __init__(self, capacity: float) -> None:
        self._capacity = coerce_capacity(capacity)
        self._samples: deque[float] = deque()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def is_full(self) -> bool:
        return len(self._samples) >= self._capacity

    def push(self, value: float) -> None:
        self._samples.append(float(value))
        if len(self._samples) > self._capacity:
            self._samples.popleft()

    def replace_latest(self, value: float) -> None:
        """Overwrite the newest sample, used when a tick has to be zeroed."""

        if self._samples:
            self._samples[-1] = float(value)

    def latest(self) -> float | None:
        return self._samples[-1] if self._samples else None

    def snapshot(self) -> np.ndarray:
        """Return the samples oldest-first as a new float64 array."""

        return np.fromiter(self._samples, dtype=RAW_DTYPE, count=len(self._samples))

    def __len__(self) -> int:
        return len(self._samples)


__all__ = ["MIN_CAPACITY", "RAW_DTYPE", "RollingBuffer", "coerce_capacity"]
