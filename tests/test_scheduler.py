import itertools

from devconsole.console import TelemetryConsole
from devconsole.scheduler import IDLE, RUNNING, DisplayFrameSource


def test_frame_source_defers_requests_made_during_dispatch():
    frames = DisplayFrameSource()
    seen = []

    def again(timestamp):
        seen.append(timestamp)
        frames.request(again)

    frames.request(again)
    assert frames.dispatch(10.0) == 1
    assert frames.dispatch(20.0) == 1
    assert seen == [10.0, 20.0]
    assert frames.pending == 1


def test_frame_source_cancel_skips_due_callback():
    frames = DisplayFrameSource()
    ran = []
    handles = {}

    def first(_):
        ran.append("first")
        frames.cancel(handles["second"])

    handles["first"] = frames.request(first)
    handles["second"] = frames.request(lambda _: ran.append("second"))

    assert frames.dispatch() == 1
    assert ran == ["first"]


def test_scheduler_starts_on_first_registration(recording_factory):
    console = TelemetryConsole(surface_factory=recording_factory)
    assert console.scheduler.state == IDLE
    assert console.frames.pending == 0

    console.register_graph("a", lambda: 1.0)
    console.register_graph("b", lambda: 2.0)

    assert console.scheduler.state == RUNNING
    assert console.frames.pending == 1


def test_every_graph_updates_once_per_tick_in_registration_order(recording_factory):
    console = TelemetryConsole(surface_factory=recording_factory)
    order = []
    console.register_graph("a", lambda: order.append("a") or 1.0)
    console.register_graph("b", lambda: order.append("b") or 2.0)

    for _ in range(3):
        console.frames.dispatch()

    assert order == ["a", "b"] * 3
    assert console.scheduler.ticks == 3
    assert len(console.get_graph("a").history) == 3


def test_unregistering_last_graph_stops_then_registration_resumes(recording_factory):
    console = TelemetryConsole(surface_factory=recording_factory)
    console.register_graph("only", lambda: 1.0)
    console.frames.dispatch()

    console.unregister_graph("only")

    assert console.scheduler.state == IDLE
    assert console.frames.pending == 0
    assert console.frames.dispatch() == 0

    console.register_graph("next", lambda: 3.0)
    assert console.scheduler.state == RUNNING
    assert console.frames.dispatch() == 1
    assert console.get_graph("next").history.latest() == 3.0


def test_throwing_sampler_records_zero_without_blocking_others(recording_factory):
    console = TelemetryConsole(surface_factory=recording_factory)
    calls = itertools.count(1)

    def flaky():
        call = next(calls)
        if call == 3:
            raise RuntimeError("tick three")
        return float(call)

    console.register_graph("flaky", flaky)
    console.register_graph("steady", lambda: 5.0)
    for _ in range(4):
        console.frames.dispatch()

    assert console.get_graph("flaky").history.snapshot().tolist() == [1.0, 2.0, 0.0, 4.0]
    assert console.get_graph("steady").history.snapshot().tolist() == [5.0] * 4


def test_graph_removed_mid_tick_is_not_updated(recording_factory):
    console = TelemetryConsole(surface_factory=recording_factory)

    def remover():
        console.unregister_graph("victim")
        return 1.0

    console.register_graph("remover", remover)
    console.register_graph("victim", lambda: 2.0)
    victim = console.get_graph("victim")

    console.frames.dispatch()

    assert len(victim.history) == 0
    assert "victim" not in console.graphs
    assert console.scheduler.state == RUNNING


def test_emptying_registry_mid_tick_does_not_reschedule(recording_factory):
    console = TelemetryConsole(surface_factory=recording_factory)

    def self_removing():
        console.unregister_graph("once")
        return 1.0

    console.register_graph("once", self_removing)
    console.frames.dispatch()

    assert console.scheduler.state == IDLE
    assert console.frames.pending == 0
