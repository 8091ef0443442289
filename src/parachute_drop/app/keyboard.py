"""Non-blocking keyboard input from the controlling terminal."""

from __future__ import annotations

import os
import select
import sys
import termios
import tty
from typing import Optional


class KeyboardReader:
    """Reads single key presses without waiting for Enter.

    The terminal is put in cbreak mode on ``open()`` and restored on
    ``close()``. When stdin is not a terminal the reader stays disabled and
    always returns no keys.
    """

    def __init__(self, fd: Optional[int] = None):
        """Initialize the keyboard reader.

        Args:
            fd: File descriptor to read from; stdin by default.
        """
        if fd is None:
            try:
                fd = sys.stdin.fileno()
            except (AttributeError, ValueError):
                # stdin replaced or closed, e.g. under a test runner
                fd = None
        self._fd = fd
        self._saved_attrs: Optional[list] = None

    @property
    def enabled(self) -> bool:
        """Whether the terminal is in key-at-a-time mode."""
        return self._saved_attrs is not None

    def open(self) -> bool:
        """Switch the terminal to cbreak mode.

        Returns:
            True if key input is available.
        """
        if self._saved_attrs is not None:
            return True
        if self._fd is None or not os.isatty(self._fd):
            return False
        self._saved_attrs = termios.tcgetattr(self._fd)
        tty.setcbreak(self._fd)
        return True

    def close(self) -> None:
        """Restore the terminal settings."""
        if self._saved_attrs is None:
            return
        termios.tcsetattr(self._fd, termios.TCSADRAIN, self._saved_attrs)
        self._saved_attrs = None

    def read_keys(self, timeout: float = 0.0) -> str:
        """Read whatever keys are pending.

        Args:
            timeout: Seconds to wait for the first key.

        Returns:
            The pending characters, possibly empty.
        """
        if self._saved_attrs is None:
            return ""

        ready, _, _ = select.select([self._fd], [], [], timeout)
        if not ready:
            return ""
        data = os.read(self._fd, 64)
        return data.decode("utf-8", errors="ignore")

    def __enter__(self) -> "KeyboardReader":
        self.open()
        return self

    def __exit__(self, *exc) -> None:
        self.close()
