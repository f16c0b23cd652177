"""Exception types raised and recovered by the console."""

from __future__ import annotations


class ValidationError(ValueError):
    """Raised when a graph registration has a missing argument or bad options."""


class SamplingFault(RuntimeError):
    """A sampling source raised or produced a non-finite value.

    Recovered inside :class:`~devconsole.graph.GraphRecord`; never reaches callers.
    """


class SerializationFault(RuntimeError):
    """A structured value could not be pretty-printed.

    Recovered inside :func:`~devconsole.serializer.stringify`; never reaches callers.
    """


class ConsoleUnavailableError(RuntimeError):
    """Raised when the interactive window cannot be created."""


__all__ = [
    "ConsoleUnavailableError",
    "SamplingFault",
    "SerializationFault",
    "ValidationError",
]
