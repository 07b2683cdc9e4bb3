#!/usr/bin/env python3
"""
junit-dashboard entry point.

Runs a test command against a target file, parses its JUnit report and shows
the results as a navigable tree. Keys: r runs, arrows navigate, q/Esc/Ctrl-C quit.

Usage:
    junit-dashboard target.xml
    junit-dashboard --command "cargo nextest run --profile ci --junit" Cargo.toml
"""

import argparse
import asyncio
import logging
import sys
import termios
from typing import Optional

import yaml
from jsonschema import ValidationError
from rich.console import Console
from rich.live import Live
from rich.logging import RichHandler

from app_state import DashboardApp
from config_parser import DashboardConfig, apply_overrides, load_config
from dashboard_view import render
from run_orchestrator import RunOrchestrator
from terminal import EventHandler, raw_terminal

logger = logging.getLogger("junit-dashboard")


def _log_handler(log_file: Optional[str] = None) -> logging.Handler:
    """A file handler when a log file is given, otherwise rich output on stderr."""
    if log_file:
        # Owned by logging, closed by logging.shutdown() at exit
        handler = logging.FileHandler(log_file)
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        return handler
    return RichHandler(console=Console(stderr=True), rich_tracebacks=True, markup=False)


def _configure_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[_log_handler(log_file)],
    )


def drain_lifecycle_events(app: DashboardApp, lifecycle: "asyncio.Queue") -> None:
    """Apply every pending RunCompleted event without blocking."""
    while True:
        try:
            event = lifecycle.get_nowait()
        except asyncio.QueueEmpty:
            return
        app.update(event)


async def run_dashboard(target: str, config: DashboardConfig, console: Console) -> None:
    """
    Main loop: render, wait for one input or tick event, apply it, drain
    finished runs, repeat until the user quits.
    """
    lifecycle: "asyncio.Queue" = asyncio.Queue()
    orchestrator = RunOrchestrator(config.resolved_command(), target, lifecycle)
    app = DashboardApp(target, orchestrator)
    events = EventHandler(config.tick_rate_ms)

    if config.run_on_start:
        app.trigger_run()

    with raw_terminal(), Live(console=console, screen=True, auto_refresh=False) as live:
        events.start()
        try:
            while app.active:
                live.update(render(app), refresh=True)
                app.update(await events.next())
                drain_lifecycle_events(app, lifecycle)
        finally:
            events.stop()

    if orchestrator.in_progress:
        # asyncio.run() cancels the run task on exit, which terminates the command
        logger.info("Quitting with a test run in progress; its result is discarded")


def main() -> None:
    """Main entry point for the dashboard."""
    parser = argparse.ArgumentParser(
        prog="junit-dashboard",
        description="Run a test command and browse its JUnit report as a tree",
    )
    parser.add_argument(
        'file',
        help='Target file passed as the last argument to the test command'
    )
    parser.add_argument(
        '--command',
        type=str,
        default=None,
        help='Test command producing a JUnit report on stdout (default: cat)'
    )
    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Path to a junit-dashboard.yaml file (default: ./junit-dashboard.yaml if present)'
    )
    parser.add_argument(
        '--tick-rate',
        type=int,
        default=None,
        help='Progress indicator tick rate in milliseconds'
    )
    parser.add_argument(
        '--log-file',
        type=str,
        default=None,
        help='Write log messages to this file instead of stderr'
    )
    parser.add_argument(
        '-v',
        '--verbose',
        action='store_true',
        help='Enable debug-level logging'
    )

    args = parser.parse_args()

    _configure_logging(args.verbose, args.log_file)

    try:
        config = load_config(args.config)
        config = apply_overrides(config, command=args.command, tick_rate_ms=args.tick_rate)
    except FileNotFoundError as e:
        print(f"Error: {str(e)}", file=sys.stderr)
        sys.exit(1)
    except ValidationError as e:
        print(f"Error: Invalid configuration: {e.message}", file=sys.stderr)
        sys.exit(1)
    except (yaml.YAMLError, ValueError) as e:
        print(f"Error: Invalid configuration: {str(e)}", file=sys.stderr)
        sys.exit(1)

    logger.debug("Test command: %s %s", config.resolved_command(), args.file)

    try:
        asyncio.run(run_dashboard(args.file, config, Console()))
    except KeyboardInterrupt:
        sys.exit(130)
    except termios.error as e:
        print(f"Error: junit-dashboard needs an interactive terminal: {str(e)}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
