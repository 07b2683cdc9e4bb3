"""
Run orchestration for junit-dashboard.

This module guarantees single-flight execution of the test command:
- A trigger while a run is in flight is silently ignored
- The run executes as a background asyncio task
- Completion is reported as exactly one RunCompleted event on the event queue
- The in-progress flag is cleared by the consumer of that event, not by the task
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Set

from command_runner import run_suite
from report_model import Report
from run_errors import RunError

logger = logging.getLogger(__name__)

RunCapability = Callable[[str, str], Awaitable[Report]]


@dataclass(frozen=True)
class RunCompleted:
    """Lifecycle event carrying either the parsed report or the failure."""
    report: Optional[Report] = None
    error: Optional[RunError] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


class RunOrchestrator:
    """Owns the run-in-progress flag and launches test runs."""

    def __init__(
        self,
        command: str,
        target_path: str,
        events: "asyncio.Queue",
        runner: RunCapability = run_suite
    ):
        """
        Initialize the orchestrator.

        Args:
            command: Test command string; the target path is appended to it
            target_path: Report or test file handed to the command
            events: Unbounded queue the RunCompleted events are delivered on
            runner: Coroutine function performing one run
        """
        self.command = command
        self.target_path = str(target_path)
        self.events = events
        self.runner = runner
        self._in_progress = False
        self._tasks: Set[asyncio.Task] = set()

    @property
    def in_progress(self) -> bool:
        return self._in_progress

    def trigger_run(self) -> bool:
        """
        Start a run unless one is already in flight.

        Must be called from within the running event loop. Returns
        immediately without waiting for the run.

        Returns:
            True if a run was started, False if the trigger was ignored
        """
        if self._in_progress:
            logger.debug("Run already in progress, ignoring trigger")
            return False

        self._in_progress = True
        logger.info("Starting test run: %s %s", self.command, self.target_path)
        task = asyncio.get_running_loop().create_task(self._execute())
        # The loop only keeps weak references to tasks
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return True

    def complete(self) -> None:
        """Clear the in-progress flag once a RunCompleted event has been consumed."""
        self._in_progress = False

    async def _execute(self) -> None:
        try:
            report = await self.runner(self.command, self.target_path)
        except RunError as e:
            logger.warning("Test run failed: %s", e)
            event = RunCompleted(error=e)
        except Exception as e:
            error_msg = f"Unexpected error during test run: {str(e)}"
            logger.warning(error_msg)
            event = RunCompleted(error=RunError(error_msg))
        else:
            event = RunCompleted(report=report)

        self.events.put_nowait(event)
