"""
Key input dispatch for junit-dashboard.

Raw terminal bytes are decoded into KeyPress values, and each key press is
mapped to one dashboard Command. Unknown keys map to Command.NOOP.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List


class Command(Enum):
    """Actions the dashboard understands."""
    QUIT = "quit"
    TRIGGER_RUN = "trigger_run"
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
    NOOP = "noop"


@dataclass(frozen=True)
class KeyPress:
    """A decoded key: a printable character or a named key such as 'up' or 'esc'."""
    code: str
    ctrl: bool = False


_ESCAPE_SEQUENCES = {
    b"\x1b[A": "up",
    b"\x1b[B": "down",
    b"\x1b[C": "right",
    b"\x1b[D": "left",
    b"\x1bOA": "up",
    b"\x1bOB": "down",
    b"\x1bOC": "right",
    b"\x1bOD": "left",
}

# Escape sequences with no meaning here (Home, F5, Alt-modified keys, ...)
UNKNOWN_KEY = "unknown"

_ARROWS = {
    "left": Command.LEFT,
    "right": Command.RIGHT,
    "up": Command.UP,
    "down": Command.DOWN,
}


def decode_keys(data: bytes) -> List[KeyPress]:
    """
    Decode a chunk read from a terminal in cbreak mode.

    Args:
        data: Raw bytes, possibly holding several key presses

    Returns:
        Decoded key presses in input order
    """
    keys: List[KeyPress] = []
    i = 0
    while i < len(data):
        byte = data[i]
        if byte == 0x1b:
            # A lone ESC is only the Esc key when nothing follows it in the read
            if i + 1 == len(data):
                keys.append(KeyPress("esc"))
                i += 1
                continue
            end = _escape_sequence_end(data, i)
            keys.append(KeyPress(_ESCAPE_SEQUENCES.get(data[i:end], UNKNOWN_KEY)))
            i = end
            continue

        if 1 <= byte <= 26:
            # Ctrl-A .. Ctrl-Z
            keys.append(KeyPress(chr(byte + 96), ctrl=True))
        else:
            keys.append(KeyPress(chr(byte)))
        i += 1
    return keys


def _escape_sequence_end(data: bytes, start: int) -> int:
    """
    Find the end of the escape sequence starting at data[start].

    CSI sequences (ESC [) run up to their final byte in 0x40-0x7E, SS3
    sequences (ESC O) carry exactly one more byte, and ESC followed by any
    other byte is an Alt-modified key.
    """
    introducer = data[start + 1]
    if introducer == ord("["):
        i = start + 2
        while i < len(data) and not 0x40 <= data[i] <= 0x7e:
            i += 1
        return min(i + 1, len(data))
    if introducer == ord("O"):
        return min(start + 3, len(data))
    return start + 2


def dispatch_key(key: KeyPress) -> Command:
    """Map a key press to a Command."""
    if key.ctrl:
        return Command.QUIT if key.code in ("c", "C") else Command.NOOP
    if key.code in ("esc", "q"):
        return Command.QUIT
    if key.code == "r":
        return Command.TRIGGER_RUN
    return _ARROWS.get(key.code, Command.NOOP)
