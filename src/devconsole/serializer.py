"""Conversion of arbitrary values into console display text."""

from __future__ import annotations

import dataclasses
import enum
import json
import numbers
from collections.abc import Mapping
from typing import Any

import numpy as np

from .diagnostics import log_fault
from .errors import SerializationFault


class ValueKind(enum.Enum):
    """How a value is turned into text."""

    TEXTUAL = "textual"
    NUMERIC = "numeric"
    STRUCTURED = "structured"
    UNSERIALIZABLE = "unserializable"


_STRUCTURED_TYPES = (Mapping, list, tuple, set, frozenset, np.ndarray)


def classify(value: Any) -> ValueKind:
    if isinstance(value, str):
        return ValueKind.TEXTUAL
    if isinstance(value, (numbers.Number, np.generic)):
        return ValueKind.NUMERIC
    if isinstance(value, _STRUCTURED_TYPES):
        return ValueKind.STRUCTURED
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return ValueKind.STRUCTURED
    return ValueKind.UNSERIALIZABLE


def _json_default(value: Any) -> Any:
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, (set, frozenset)):
        return list(value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    raise TypeError(f"{type(value).__name__} is not JSON serialisable")


def _pretty(value: Any) -> str:
    try:
        return json.dumps(value, indent=2, default=_json_default)
    except (TypeError, ValueError, OverflowError, RecursionError) as exc:
        raise SerializationFault(f"{type(value).__name__}: {exc}") from exc


def _coerce(value: Any) -> str:
    try:
        return str(value)
    except Exception:
        return object.__repr__(value)


def stringify(value: Any) -> str:
    """Return the display text for ``value``.

    Structured values (mappings, sequences, arrays, dataclasses) are rendered
    as indented JSON.  When that fails the value is coerced with :func:`str`
    instead, so this function never raises.
    """

    kind = classify(value)
    if kind is ValueKind.TEXTUAL:
        return value
    if kind is ValueKind.STRUCTURED:
        try:
            return _pretty(value)
        except SerializationFault as fault:
            log_fault("serialization", str(fault))
            return _coerce(value)
    return _coerce(value)


__all__ = ["ValueKind", "classify", "stringify"]
