"""
Application state machine for junit-dashboard.

DashboardApp is the single owner of everything the dashboard displays:
- The current result (a TestRun, a RunError, or nothing yet)
- Whether a run is in flight
- Tree navigation state
- The cosmetic progress indicator

The main loop feeds it Tick events, key Commands and RunCompleted events;
each is applied synchronously on the loop thread.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from input_dispatcher import Command
from run_errors import RunError
from run_orchestrator import RunCompleted, RunOrchestrator
from selection_policy import initialize
from tree_builder import TestRun, build_run
from tree_state import TreeState

logger = logging.getLogger(__name__)


class Phase(Enum):
    """What the dashboard is currently showing."""
    IDLE = "idle"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class Tick:
    """Timer event advancing the progress indicator."""
    pass


Event = Union[Tick, Command, RunCompleted]


class DashboardApp:
    """Dashboard state and its transitions."""

    def __init__(self, target_path: str, orchestrator: RunOrchestrator):
        """
        Initialize the dashboard state.

        Args:
            target_path: Report or test file the command runs against
            orchestrator: Run orchestrator launching the test command
        """
        self.target_path = Path(target_path)
        self.orchestrator = orchestrator
        self.active = True
        self.result: Optional[Union[TestRun, RunError]] = None
        self.tree_state = TreeState()
        self.spinner_frame = 0

    @property
    def is_running(self) -> bool:
        return self.orchestrator.in_progress

    @property
    def run(self) -> Optional[TestRun]:
        return self.result if isinstance(self.result, TestRun) else None

    @property
    def error(self) -> Optional[RunError]:
        return self.result if isinstance(self.result, RunError) else None

    @property
    def phase(self) -> Phase:
        if self.is_running:
            return Phase.RUNNING
        if self.result is None:
            return Phase.IDLE
        return Phase.SUCCEEDED if self.run is not None else Phase.FAILED

    def update(self, event: Event) -> None:
        """Apply one event to the state."""
        if isinstance(event, RunCompleted):
            self.complete_run(event)
        elif isinstance(event, Tick):
            self.tick()
        elif isinstance(event, Command):
            self.handle_command(event)

    def tick(self) -> None:
        self.spinner_frame += 1

    def quit(self) -> None:
        self.active = False

    def trigger_run(self) -> None:
        self.orchestrator.trigger_run()

    def complete_run(self, event: RunCompleted) -> None:
        """
        Replace the displayed result with the outcome of a finished run.

        Navigation state is reset; a successful run re-derives expanded
        suites and the default selection. A failed run discards the
        previous result.
        """
        self.orchestrator.complete()
        self.tree_state = TreeState()

        if event.error is not None:
            self.result = event.error
            return

        run = build_run(event.report)
        self.result = run
        self.tree_state = TreeState.from_expansion(initialize(run, self.tree_state.selected))
        logger.info(
            "Test run completed: %d passed, %d failed, %d skipped",
            run.totals.passes, run.totals.failures, run.totals.skipped
        )

    def handle_command(self, command: Command) -> None:
        if command is Command.QUIT:
            self.quit()
        elif command is Command.TRIGGER_RUN:
            self.trigger_run()
        elif command is not Command.NOOP:
            self.navigate(command)

    def navigate(self, command: Command) -> None:
        run = self.run
        if run is None:
            return
        if command is Command.UP:
            self.tree_state.key_up(run.tree)
        elif command is Command.DOWN:
            self.tree_state.key_down(run.tree)
        elif command is Command.LEFT:
            self.tree_state.key_left(run.tree)
        elif command is Command.RIGHT:
            self.tree_state.key_right(run.tree)

    def detail_text(self) -> str:
        """
        Detail panel text for the selected case.

        Returns:
            "status message\\ncaptured output", or "" when nothing resolvable is selected
        """
        run = self.run
        selected = self.tree_state.selected_id
        if run is None or selected is None:
            return ""
        case = run.cases.get(selected)
        if case is None:
            return ""
        return f"{case.status.describe()}\n{case.captured_output or ''}"
