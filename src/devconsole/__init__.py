"""Live debug console with categorised messages and sampled graphs."""

from __future__ import annotations

__version__ = "0.1.0"

from .app import run as run_app
from .console import TelemetryConsole
from .errors import ValidationError

__all__ = ["TelemetryConsole", "ValidationError", "run_app", "__version__"]
