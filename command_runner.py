"""
Test command runner for junit-dashboard.

This module provides the external run capability used by the orchestrator:
- Split the configured command into program and arguments
- Execute it with the target report path appended
- Capture standard output and decode it as UTF-8
- Parse the captured text into a Report
"""

import asyncio
import logging
from typing import List, Tuple

from report_model import Report
from report_parser import parse_report
from run_errors import ReportDecodeError, SpawnError

logger = logging.getLogger(__name__)

DEFAULT_COMMAND = "cat"


def split_command(command: str) -> Tuple[str, List[str]]:
    """
    Split a command string on whitespace.

    Quoted arguments with embedded spaces are not supported.

    Args:
        command: Command string, e.g. "cargo nextest run --message-format junit"

    Returns:
        Tuple of (program, arguments)

    Raises:
        SpawnError: If the command is empty
    """
    parts = command.split()
    if not parts:
        raise SpawnError("Test command is empty")
    return parts[0], parts[1:]


async def run_suite(command: str, target_path: str) -> Report:
    """
    Execute the test command and parse its output.

    A non-zero exit status is not a failure; only spawn, decode and
    parse problems are.

    Args:
        command: Command string to execute
        target_path: Path appended as the final argument

    Returns:
        Parsed Report

    Raises:
        SpawnError: If the command could not be started
        ReportDecodeError: If the output is not valid UTF-8
        ReportParseError: If the output is not a well-formed report
    """
    program, args = split_command(command)
    argv = [*args, target_path]
    logger.debug("Spawning test command: %s %s", program, " ".join(argv))

    try:
        process = await asyncio.create_subprocess_exec(
            program,
            *argv,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.DEVNULL,
        )
        stdout, _ = await process.communicate()
    except OSError as e:
        raise SpawnError(f"Failed to execute test command '{program}': {str(e)}") from e

    logger.debug("Test command exited with code %s", process.returncode)

    try:
        raw = stdout.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ReportDecodeError(f"Test command output is not valid UTF-8: {str(e)}") from e

    return parse_report(raw)
