"""Categorised key/value message storage."""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Tuple

from .serializer import stringify

INFO = "info"
WARNING = "warning"
ERROR = "error"
LOG = "log"

# Order in which categories are shown in the console view.
DISPLAY_ORDER = (INFO, ERROR, WARNING, LOG)

CLEARED_KEY = "Console cleared"

MISSING: Any = object()


class MessageStore:
    """Four insertion-ordered mappings of message key to display text.

    Writing an existing key replaces its text but keeps its position.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, Dict[str, str]] = {name: {} for name in DISPLAY_ORDER}

    def _store(self, category: str, key: str, value: Any) -> None:
        text = "" if value is MISSING else stringify(value)
        self._entries[category][str(key)] = text

    def log(self, key: str, value: Any = MISSING) -> bool:
        """Record a plain log line.

        A call without ``value`` is ignored.  Returns ``True`` when the entry
        was stored.
        """

        if value is MISSING:
            return False
        self._store(LOG, key, value)
        return True

    def warn(self, key: str, value: Any = MISSING) -> bool:
        self._store(WARNING, key, value)
        return True

    def error(self, key: str, value: Any = MISSING) -> bool:
        self._store(ERROR, key, value)
        return True

    def info(self, key: str, value: Any = MISSING) -> bool:
        self._store(INFO, key, value)
        return True

    def clear(self) -> None:
        """Drop every entry and record a single info entry for the clear."""

        for entries in self._entries.values():
            entries.clear()
        self._entries[INFO][CLEARED_KEY] = ""

    def entries(self, category: str) -> List[Tuple[str, str]]:
        try:
            return list(self._entries[category].items())
        except KeyError:
            raise ValueError(f"unknown message category {category!r}") from None

    def categories(self) -> Iterator[Tuple[str, List[Tuple[str, str]]]]:
        for name in DISPLAY_ORDER:
            yield name, list(self._entries[name].items())

    def get(self, category: str, key: str) -> str | None:
        return self._entries.get(category, {}).get(key)

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._entries.values())


__all__ = [
    "CLEARED_KEY",
    "DISPLAY_ORDER",
    "ERROR",
    "INFO",
    "LOG",
    "MISSING",
    "MessageStore",
    "WARNING",
]
