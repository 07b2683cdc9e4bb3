"""
Tests for the dashboard state machine.
"""

import asyncio

import pytest

from app_state import DashboardApp, Phase, Tick
from input_dispatcher import Command
from report_model import Case, Report, Status, Suite, SuiteCounts
from run_errors import ReportDecodeError
from run_orchestrator import RunCompleted, RunOrchestrator


def failing_report():
    return Report(suites=[
        Suite(
            name="suite",
            cases=[
                Case("bad", Status.failure("boom", "assertion failed"), captured_output="stdout line"),
                Case("good", Status.success()),
            ],
            counts=SuiteCounts(total=2, failures=1),
        ),
    ])


def passing_report():
    return Report(suites=[
        Suite(name="suite", cases=[Case("ok", Status.success())], counts=SuiteCounts(total=1)),
    ])


async def never_called(command, target_path):
    raise AssertionError("run capability should not be invoked")


@pytest.fixture
def app():
    orchestrator = RunOrchestrator("cat", "results/report.xml", asyncio.Queue(), runner=never_called)
    return DashboardApp("results/report.xml", orchestrator)


def test_initial_state_is_idle(app):
    assert app.phase is Phase.IDLE
    assert app.result is None
    assert app.active
    assert app.detail_text() == ""


def test_successful_run_builds_navigation(app):
    app.update(RunCompleted(report=failing_report()))

    assert app.phase is Phase.SUCCEEDED
    assert app.run.totals.passes == 1
    assert app.run.totals.failures == 1
    assert app.tree_state.is_open(("suite",))
    assert app.tree_state.selected == ("suite",)


def test_failing_case_detail(app):
    app.update(RunCompleted(report=failing_report()))

    app.update(Command.DOWN)

    assert app.tree_state.selected == ("suite", "bad")
    assert app.detail_text() == "boom\nassertion failed\nstdout line"


def test_passing_case_detail_without_output(app):
    app.update(RunCompleted(report=failing_report()))
    app.update(Command.DOWN)
    app.update(Command.DOWN)

    assert app.tree_state.selected_id == "good"
    assert app.detail_text() == "\n"


def test_suite_selection_has_no_detail(app):
    app.update(RunCompleted(report=failing_report()))

    assert app.detail_text() == ""


def test_failed_run_discards_previous_result(app):
    app.update(RunCompleted(report=passing_report()))
    assert app.run is not None

    app.update(RunCompleted(error=ReportDecodeError("invalid utf-8")))

    assert app.phase is Phase.FAILED
    assert app.run is None
    assert str(app.error) == "invalid utf-8"
    assert app.tree_state.selected == ()


def test_new_run_resets_navigation(app):
    app.update(RunCompleted(report=failing_report()))
    app.update(Command.DOWN)
    app.update(Command.LEFT)

    app.update(RunCompleted(report=passing_report()))

    assert app.tree_state.selected == ("suite",)
    assert app.tree_state.opened == set()


def test_empty_report_leaves_selection_unset(app):
    app.update(RunCompleted(report=Report()))

    assert app.phase is Phase.SUCCEEDED
    assert app.run.tree == []
    assert app.tree_state.selected == ()
    assert app.detail_text() == ""


def test_tick_advances_spinner_only(app):
    app.update(Tick())
    app.update(Tick())

    assert app.spinner_frame == 2
    assert app.phase is Phase.IDLE


def test_navigation_without_run_is_noop(app):
    for command in (Command.UP, Command.DOWN, Command.LEFT, Command.RIGHT, Command.NOOP):
        app.update(command)

    assert app.tree_state.selected == ()


def test_quit(app):
    app.update(Command.QUIT)

    assert not app.active


def test_trigger_and_complete_cycle():
    async def scenario():
        release = asyncio.Event()
        calls = []

        async def runner(command, target_path):
            calls.append(command)
            await release.wait()
            return failing_report()

        queue = asyncio.Queue()
        app = DashboardApp("report.xml", RunOrchestrator("cat", "report.xml", queue, runner=runner))
        app.update(RunCompleted(report=passing_report()))

        app.update(Command.TRIGGER_RUN)
        app.update(Command.TRIGGER_RUN)
        await asyncio.sleep(0)
        phases = [app.phase]
        # The previous result stays on screen while the re-run is in flight
        previous_totals = app.run.totals

        release.set()
        app.update(await asyncio.wait_for(queue.get(), timeout=5))
        phases.append(app.phase)
        return app, calls, phases, previous_totals

    app, calls, phases, previous_totals = asyncio.run(scenario())

    assert calls == ["cat"]
    assert phases == [Phase.RUNNING, Phase.SUCCEEDED]
    assert previous_totals.passes == 1 and previous_totals.failures == 0
    assert app.run.totals.failures == 1
    assert not app.is_running
