import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from devconsole import diagnostics


@pytest.fixture(autouse=True)
def _isolated_fault_log(monkeypatch, tmp_path):
    monkeypatch.setattr(diagnostics, "_LOG_FAULTS", False)
    monkeypatch.setattr(diagnostics, "_LOG_PATH", tmp_path / "logs" / "console_faults.log")
    diagnostics.reset_fault_counts()
    yield
    diagnostics.reset_fault_counts()


class RecordingSurface:
    """Surface double that records drawing calls instead of painting pixels."""

    def __init__(self, width, height, title=""):
        self.width = width
        self.height = height
        self.title = title
        self.calls = []
        self.released = False

    def clear(self):
        self.calls.append(("clear",))

    def fill(self, colour):
        self.calls.append(("fill", colour))

    def fill_path(self, points, colour):
        self.calls.append(("fill_path", list(points), colour))

    def stroke_path(self, points, colour, width=1):
        self.calls.append(("stroke_path", list(points), colour, width))

    def draw_text(self, text, position, colour, size=12):
        self.calls.append(("draw_text", text, position, colour))

    def release(self):
        self.released = True

    def names(self):
        return [call[0] for call in self.calls]


@pytest.fixture
def recording_factory():
    created = []

    def factory(width, height, title):
        surface = RecordingSurface(width, height, title)
        created.append(surface)
        return surface

    factory.created = created
    return factory
