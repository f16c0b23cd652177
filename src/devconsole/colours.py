"""Colour specification parsing."""

from __future__ import annotations

import re
from typing import Sequence, Tuple, Union

RGBA = Tuple[int, int, int, int]
ColourSpec = Union[str, Sequence[float], None]

WHITE: RGBA = (255, 255, 255, 255)
TRANSPARENT: RGBA = (0, 0, 0, 0)

_FUNC_RE = re.compile(r"^rgba?\(\s*([^)]*)\)$", re.IGNORECASE)
_HEX_RE = re.compile(r"^#?[0-9a-fA-F]+$")


def _channel(value: float) -> int:
    return max(0, min(255, int(round(float(value)))))


def _alpha_channel(value: float) -> int:
    # CSS-style alpha in [0, 1]
    return max(0, min(255, int(round(float(value) * 255))))


def _parse_hex(text: str) -> RGBA:
    digits = text.lstrip("#")
    if len(digits) in (3, 4):
        digits = "".join(ch * 2 for ch in digits)
    if len(digits) not in (6, 8):
        raise ValueError(f"hex colour must have 3, 4, 6 or 8 digits: {text!r}")
    try:
        values = [int(digits[i:i + 2], 16) for i in range(0, len(digits), 2)]
    except ValueError:
        raise ValueError(f"invalid hex colour {text!r}") from None
    if len(values) == 3:
        values.append(255)
    return values[0], values[1], values[2], values[3]


def _parse_function(text: str, body: str) -> RGBA:
    parts = [part.strip() for part in body.split(",")]
    if len(parts) not in (3, 4):
        raise ValueError(f"rgb()/rgba() expects 3 or 4 components: {text!r}")
    try:
        r, g, b = (_channel(part) for part in parts[:3])
        a = _alpha_channel(parts[3]) if len(parts) == 4 else 255
    except ValueError:
        raise ValueError(f"invalid colour components in {text!r}") from None
    return r, g, b, a


def _parse_named(text: str) -> RGBA:
    import pygame

    try:
        colour = pygame.Color(text)
    except ValueError:
        raise ValueError(f"unknown colour name {text!r}") from None
    return colour.r, colour.g, colour.b, colour.a


def parse_colour(spec: ColourSpec) -> RGBA:
    """Return an ``(r, g, b, a)`` tuple of 0-255 channels for ``spec``.

    Accepts ``#rgb``/``#rrggbb``/``#rrggbbaa`` hex strings, CSS ``rgb()`` and
    ``rgba()`` strings (alpha in ``[0, 1]``), colour names known to
    :class:`pygame.Color` (``"red"``, ``"white"``) and 3- or 4-item sequences
    of 0-255 channels.  ``None`` or an empty string means opaque white.
    """

    if spec is None or spec == "":
        return WHITE
    if isinstance(spec, str):
        text = spec.strip()
        match = _FUNC_RE.match(text)
        if match:
            return _parse_function(text, match.group(1))
        if text.startswith("#") or _HEX_RE.match(text):
            return _parse_hex(text)
        return _parse_named(text)
    items = list(spec)
    if len(items) not in (3, 4):
        raise ValueError(f"colour sequence must have 3 or 4 items: {spec!r}")
    channels = [_channel(item) for item in items]
    if len(channels) == 3:
        channels.append(255)
    return channels[0], channels[1], channels[2], channels[3]


def with_alpha(spec: ColourSpec, alpha: float) -> RGBA:
    """Return ``spec`` with its alpha replaced by ``alpha`` (``0`` to ``1``)."""

    r, g, b, _ = parse_colour(spec)
    return r, g, b, _alpha_channel(alpha)


__all__ = ["ColourSpec", "RGBA", "TRANSPARENT", "WHITE", "parse_colour", "with_alpha"]
