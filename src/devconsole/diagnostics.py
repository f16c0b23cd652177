"""Fault log for errors the console recovers from silently."""
from __future__ import annotations

import threading
from collections import Counter
from pathlib import Path

__all__ = [
    "enable_fault_logging",
    "fault_logging_enabled",
    "log_fault",
    "fault_counts",
    "reset_fault_counts",
]


_LOG_FAULTS = False
_LOG_PATH = Path("logs/console_faults.log")
_LOG_LOCK = threading.Lock()
_COUNTS: Counter[str] = Counter()


def enable_fault_logging(enabled: bool, path: str | Path | None = None) -> None:
    """Enable or disable writing recovered faults to disk."""

    global _LOG_FAULTS, _LOG_PATH
    _LOG_FAULTS = bool(enabled)
    if path is not None:
        _LOG_PATH = Path(path)


def fault_logging_enabled() -> bool:
    """Return ``True`` when recovered faults are written to the log file."""

    return _LOG_FAULTS


def fault_counts() -> dict[str, int]:
    """Return how many faults of each kind were recovered so far."""

    with _LOG_LOCK:
        return dict(_COUNTS)


def reset_fault_counts() -> None:
    with _LOG_LOCK:
        _COUNTS.clear()


def log_fault(kind: str, message: str) -> None:
    """Count a recovered fault and append it to the log when enabled."""

    with _LOG_LOCK:
        _COUNTS[kind] += 1
    if not _LOG_FAULTS:
        return
    try:
        _LOG_PATH.parent.mkdir(parents=True, exist_ok=True)
    except Exception:
        return
    try:
        with _LOG_LOCK:
            with _LOG_PATH.open("a", encoding="utf-8") as handle:
                handle.write(f"[{kind}] {message}\n")
    except Exception:
        return
