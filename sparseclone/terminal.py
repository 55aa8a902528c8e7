"""Terminal prompts for the interactive steps.

Owns cbreak-mode lifecycle for single-key reads and plain line reads.
Both read straight from the stdin file descriptor so the two never race
over a shared text buffer.
"""

from __future__ import annotations

import contextlib
import os
import sys
import termios
import tty
from typing import TextIO

_CTRL_C = b"\x03"
_CTRL_D = b"\x04"
_NEWLINES = {b"\n", b"\r"}


def _utf8_length(lead: int) -> int:
    """Return the encoded length of a UTF-8 sequence from its first byte."""
    if lead < 0x80:
        return 1
    if lead >> 5 == 0b110:
        return 2
    if lead >> 4 == 0b1110:
        return 3
    if lead >> 3 == 0b11110:
        return 4
    return 1


class TerminalController:
    """Switch the input tty into cbreak mode and back."""

    def __init__(self, stdin_fd: int) -> None:
        self.stdin_fd = stdin_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)

    def enable_cbreak(self) -> None:
        """Deliver keys one at a time without waiting for Enter."""
        # cbreak keeps ISIG, so Ctrl+C still raises SIGINT.
        tty.setcbreak(self.stdin_fd, termios.TCSANOW)

    def restore(self) -> None:
        """Put back the tty settings captured at construction."""
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    @contextlib.contextmanager
    def cbreak_mode(self):
        """Hold cbreak mode for the duration of the block."""
        try:
            self.enable_cbreak()
            yield
        finally:
            self.restore()


class TerminalPrompter:
    """Blocking keystroke and line prompts bound to one input fd."""

    def __init__(self, stdin_fd: int | None = None, out: TextIO | None = None) -> None:
        self._stdin_fd = stdin_fd
        self.out = sys.stdout if out is None else out

    @property
    def stdin_fd(self) -> int:
        # Resolved per read so constructing a prompter never touches stdin.
        return sys.stdin.fileno() if self._stdin_fd is None else self._stdin_fd

    def _write_prompt(self, prompt: str) -> None:
        self.out.write(prompt)
        self.out.flush()

    def _read_char(self) -> str:
        """Read one UTF-8 character from the fd, mapping Ctrl+C and Ctrl+D."""
        lead = os.read(self.stdin_fd, 1)
        if not lead:
            raise EOFError("input closed")
        if lead == _CTRL_C:
            raise KeyboardInterrupt
        if lead == _CTRL_D:
            raise EOFError("input closed")
        data = lead
        for _ in range(_utf8_length(lead[0]) - 1):
            more = os.read(self.stdin_fd, 1)
            if not more:
                break
            data += more
        return data.decode("utf-8", errors="replace")

    def read_keystroke(self, prompt: str) -> str:
        """Read exactly one character without waiting for Enter.

        On a tty the terminal is held in cbreak mode for the read. Piped input
        has no line discipline to bypass, so newlines between keys are skipped.
        """
        self._write_prompt(prompt)
        if os.isatty(self.stdin_fd):
            with TerminalController(self.stdin_fd).cbreak_mode():
                key = self._read_char()
        else:
            key = self._read_char()
            while key.encode("utf-8") in _NEWLINES:
                key = self._read_char()
        self.out.write(key + "\n")
        self.out.flush()
        return key

    def read_line(self, prompt: str) -> str:
        """Read one line; end of input yields whatever was typed so far."""
        self._write_prompt(prompt)
        chunks: list[bytes] = []
        while True:
            ch = os.read(self.stdin_fd, 1)
            if not ch or ch == b"\n":
                break
            chunks.append(ch)
        return b"".join(chunks).decode("utf-8", errors="replace").rstrip("\r")
