"""ANSI terminal presentation and keyboard polling for the biome viewer."""

from __future__ import annotations

import os
import select
import shutil
import sys
import termios
import tty
from typing import List, Optional, Sequence, Tuple

TermiosAttr = List[int | List[bytes | int]]

HUD_ROWS = 1

_ESCAPE_KEYS = {
    "A": "UP",
    "B": "DOWN",
    "C": "RIGHT",
    "D": "LEFT",
}


class TerminalController:
    """Context manager owning the alternate drawing state of the terminal.

    Entering hides the cursor and, when stdin is a TTY, switches it to
    cbreak mode so single key presses can be polled without blocking.
    """

    def __init__(self, *, clear: bool = True) -> None:
        self._clear = clear
        self._cursor_hidden = False
        self._stdin_fd: Optional[int] = None
        self._termios_before: Optional[TermiosAttr] = None

    @property
    def input_enabled(self) -> bool:
        return self._stdin_fd is not None

    def __enter__(self) -> "TerminalController":
        if self._clear:
            sys.stdout.write("\033[2J")
        sys.stdout.write("\033[H\033[?25l")
        sys.stdout.flush()
        self._cursor_hidden = True

        if sys.stdin.isatty():
            fd = sys.stdin.fileno()
            try:
                self._termios_before = termios.tcgetattr(fd)
                tty.setcbreak(fd)
                self._stdin_fd = fd
            except termios.error:
                self._termios_before = None
                self._stdin_fd = None
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.restore()

    def restore(self) -> None:
        if self._cursor_hidden:
            sys.stdout.write("\033[0m\033[?25h\n")
            sys.stdout.flush()
            self._cursor_hidden = False

        if self._stdin_fd is not None and self._termios_before is not None:
            try:
                termios.tcsetattr(self._stdin_fd, termios.TCSADRAIN, self._termios_before)
            except termios.error:
                pass
        self._stdin_fd = None
        self._termios_before = None

    def draw(self, frame: str, hud: Sequence[str] = ()) -> None:
        sys.stdout.write("\033[H")
        sys.stdout.write(frame)
        sys.stdout.write("\033[0m")
        for line in hud[:HUD_ROWS]:
            sys.stdout.write("\n\033[2K" + line)
        sys.stdout.flush()

    def frame_size(self) -> Tuple[int, int]:
        """Columns and rows available for the image below the HUD."""

        size = shutil.get_terminal_size(fallback=(100, 40))
        return max(1, size.columns), max(1, size.lines - HUD_ROWS - 1)

    def poll_keys(self) -> List[str]:
        if not self.input_enabled:
            return []

        keys: List[str] = []
        try:
            while self._readable():
                char = self._read_char()
                if char is None:
                    break
                if char == "\x03":
                    raise KeyboardInterrupt
                if char == "\x1b":
                    key = self._read_escape_key()
                    if key is not None:
                        keys.append(key)
                    continue
                if char:
                    keys.append(char)
        except OSError:
            return keys
        return keys

    def _readable(self) -> bool:
        readable, _, _ = select.select([sys.stdin], [], [], 0)
        return bool(readable)

    def _read_char(self) -> Optional[str]:
        if self._stdin_fd is None:
            return None
        data = os.read(self._stdin_fd, 1)
        if not data:
            return None
        return data.decode("utf-8", errors="ignore")

    def _read_escape_key(self) -> Optional[str]:
        sequence = ""
        while self._readable():
            char = self._read_char()
            if not char:
                break
            sequence += char
            if char.isalpha() or char == "~":
                break
        return map_escape_sequence(sequence)


def map_escape_sequence(sequence: str) -> Optional[str]:
    """Translate the tail of an ``ESC [ ...`` sequence into an arrow key name."""

    if not sequence.startswith("["):
        return None
    return _ESCAPE_KEYS.get(sequence[-1])
