"""
Tests for terminal input handling, using pipes and pseudo-terminals.
"""

import asyncio
import os
import pty
import termios

from app_state import Tick
from input_dispatcher import Command
from terminal import EventHandler, raw_terminal


def test_event_handler_merges_keys_and_ticks():
    async def scenario():
        read_fd, write_fd = os.pipe()
        with os.fdopen(read_fd, 'rb', buffering=0) as stream:
            events = EventHandler(tick_rate_ms=10, stream=stream)
            events.start()
            try:
                os.write(write_fd, b"\x1b[Bq")
                received = []
                while Command.QUIT not in received:
                    received.append(await asyncio.wait_for(events.next(), timeout=5))
                while not any(isinstance(e, Tick) for e in received):
                    received.append(await asyncio.wait_for(events.next(), timeout=5))
            finally:
                events.stop()
                os.close(write_fd)
        return received

    received = asyncio.run(scenario())

    commands = [e for e in received if isinstance(e, Command)]
    assert commands == [Command.DOWN, Command.QUIT]
    assert any(isinstance(e, Tick) for e in received)


def test_raw_terminal_restores_attributes():
    master_fd, slave_fd = pty.openpty()
    try:
        with os.fdopen(slave_fd, 'rb', buffering=0, closefd=False) as stream:
            before = termios.tcgetattr(slave_fd)
            with raw_terminal(stream):
                during = termios.tcgetattr(slave_fd)
                assert not during[3] & termios.ICANON
                assert not during[3] & termios.ECHO
            after = termios.tcgetattr(slave_fd)
        assert after == before
    finally:
        os.close(master_fd)
        os.close(slave_fd)
