import pytest

from devconsole.config import GraphOptions
from devconsole.console import HEADER, TelemetryConsole
from devconsole.errors import ValidationError
from devconsole.messages import INFO
from devconsole.scheduler import IDLE


def test_info_overwrite_leaves_single_entry():
    console = TelemetryConsole()
    console.info("build", "v1")
    console.info("build", "v2")

    assert console.messages.entries(INFO) == [("build", "v2")]
    assert console.text().count("INFO: build") == 1
    assert "INFO: build: v2" in console.text()


def test_render_orders_categories():
    console = TelemetryConsole()
    console.log("plain", 1)
    console.warn("careful", "hot")
    console.error("broken", "yes")
    console.info("note", "hi")

    assert console.text().splitlines() == [
        HEADER,
        "INFO: note: hi",
        "ERROR: broken: yes",
        "WARNING: careful: hot",
        "plain: 1",
    ]


def test_every_mutation_renders_but_ignored_log_does_not():
    console = TelemetryConsole()
    initial = console.render_count

    console.log("key-only")
    assert console.render_count == initial

    console.log("key", "value")
    console.clear()
    assert console.render_count == initial + 2


def test_structured_values_render_on_several_lines():
    console = TelemetryConsole()
    console.log("state", {"x": 1})
    assert console.text().endswith('state: {\n  "x": 1\n}')


def test_clear_keeps_graph_surfaces_intact():
    console = TelemetryConsole()
    options = GraphOptions(width=40, height=20, capacity=4, min=0, max=1, colour="#00ff00", show_latest_value=False)
    surface = console.register_graph("load", lambda: 1.0, options)
    console.log("noise", "x")
    for _ in range(4):
        console.frames.dispatch()
    before = surface.get_at(20, 4)

    console.clear()
    console.render()

    assert console.text().splitlines() == [HEADER, "INFO: Console cleared"]
    assert console.overlay.get("load") is surface
    assert not surface.released
    assert surface.get_at(20, 4) == before == (0, 255, 0, 255)


def test_reregistering_key_replaces_record(recording_factory):
    console = TelemetryConsole(surface_factory=recording_factory)
    first = console.register_graph("fps", lambda: 30.0)
    console.frames.dispatch()

    second = console.register_graph("fps", lambda: 60.0)

    assert first.released
    assert not second.released
    assert list(console.graphs) == ["fps"]
    assert len(console.get_graph("fps").history) == 0
    assert console.overlay.get("fps") is second

    console.frames.dispatch()
    assert console.get_graph("fps").history.snapshot().tolist() == [60.0]


def test_invalid_registration_keeps_existing_graph(recording_factory):
    console = TelemetryConsole(surface_factory=recording_factory)
    surface = console.register_graph("fps", lambda: 30.0)

    with pytest.raises(ValidationError):
        console.register_graph("fps", None)
    with pytest.raises(ValidationError):
        console.registerGraph("", lambda: 1.0)

    assert console.overlay.get("fps") is surface
    assert not surface.released


def test_options_accept_mapping_and_keyword_spellings(recording_factory):
    console = TelemetryConsole(surface_factory=recording_factory)
    console.register_graph("a", lambda: 1.0, {"fillUnderCurve": False, "buffer": 32}, showLatestValue=False)

    options = console.get_graph("a").options
    assert options.fill_under_curve is False
    assert options.show_latest_value is False
    assert options.capacity == 32

    base = GraphOptions(width=100)
    console.register_graph("b", lambda: 1.0, base, color="#123456")
    options = console.get_graph("b").options
    assert options.width == 100
    assert options.colour == "#123456"


def test_register_graph_accepts_colour_names(recording_factory):
    console = TelemetryConsole(surface_factory=recording_factory)
    console.register_graph("mem", lambda: 7.0, color="white")
    console.frames.dispatch()

    stroke = [call for call in recording_factory.created[0].calls if call[0] == "stroke_path"]
    assert stroke[-1][2] == "white"
    assert console.get_graph("mem").history.snapshot().tolist() == [7.0]


def test_bad_options_raise_validation_error(recording_factory):
    console = TelemetryConsole(surface_factory=recording_factory)
    surface = console.register_graph("fps", lambda: 30.0)

    with pytest.raises(ValidationError):
        console.register_graph("fps", lambda: 1.0, zoom=2)
    with pytest.raises(ValidationError):
        console.register_graph("fps", lambda: 1.0, {"color": "#12"})

    assert console.overlay.get("fps") is surface
    assert not surface.released


def test_unregister_missing_key_is_noop(recording_factory):
    console = TelemetryConsole(surface_factory=recording_factory)
    console.unregister_graph("ghost")
    console.unregisterGraph("ghost")
    assert console.scheduler.state == IDLE


def test_echo_receives_formatted_messages():
    echoed = []
    console = TelemetryConsole(echo=echoed.append)
    console.warn("disk", "92%")
    console.log("ignored")
    console.log("fps", 60)

    assert echoed == ["WARNING: disk: 92%", "fps: 60"]


def test_dispose_releases_everything(recording_factory):
    console = TelemetryConsole(surface_factory=recording_factory)
    console.register_graph("a", lambda: 1.0)
    console.register_graph("b", lambda: 2.0)

    console.dispose()

    assert console.graphs == {}
    assert len(console.overlay) == 0
    assert all(surface.released for surface in recording_factory.created)
    assert console.scheduler.state == IDLE
    assert console.frames.pending == 0


def test_consoles_are_independent(recording_factory):
    left = TelemetryConsole(surface_factory=recording_factory)
    right = TelemetryConsole(surface_factory=recording_factory)
    left.register_graph("shared", lambda: 1.0)
    left.info("only", "left")

    assert "shared" not in right.graphs
    assert right.scheduler.state == IDLE
    assert "only" not in right.text()
