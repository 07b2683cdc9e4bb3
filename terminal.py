"""
Terminal input for junit-dashboard.

This module provides:
- A context manager putting the terminal into cbreak mode
- An EventHandler merging key presses and periodic ticks into one queue
"""

import asyncio
import contextlib
import os
import sys
import termios
import tty
from typing import Iterator, Optional, TextIO

from app_state import Event, Tick
from input_dispatcher import decode_keys, dispatch_key


@contextlib.contextmanager
def raw_terminal(stream: TextIO = sys.stdin) -> Iterator[None]:
    """Disable line buffering and echo for the duration of the block."""
    fd = stream.fileno()
    saved = termios.tcgetattr(fd)
    try:
        tty.setcbreak(fd)
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)


class EventHandler:
    """Produces Tick events at a fixed rate and Command events from key input."""

    def __init__(self, tick_rate_ms: int = 250, stream: TextIO = sys.stdin):
        """
        Initialize the event handler.

        Args:
            tick_rate_ms: Interval between Tick events in milliseconds
            stream: Terminal input stream
        """
        self.tick_rate = tick_rate_ms / 1000
        self.stream = stream
        self.queue: "asyncio.Queue[Event]" = asyncio.Queue()
        self._tick_task: Optional[asyncio.Task] = None

    def start(self) -> None:
        loop = asyncio.get_running_loop()
        loop.add_reader(self.stream.fileno(), self._on_input)
        self._tick_task = loop.create_task(self._tick())

    def stop(self) -> None:
        asyncio.get_running_loop().remove_reader(self.stream.fileno())
        if self._tick_task is not None:
            self._tick_task.cancel()

    async def next(self) -> Event:
        return await self.queue.get()

    def _on_input(self) -> None:
        data = os.read(self.stream.fileno(), 64)
        for key in decode_keys(data):
            self.queue.put_nowait(dispatch_key(key))

    async def _tick(self) -> None:
        while True:
            await asyncio.sleep(self.tick_rate)
            self.queue.put_nowait(Tick())
