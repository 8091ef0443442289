"""Display output functions for terminal graphics protocols."""

from __future__ import annotations

import base64
import io
import os
import sys
from typing import TYPE_CHECKING, Optional, TextIO

if TYPE_CHECKING:
    from PIL import Image

CLEAR_AND_HIDE_CURSOR = "\033[2J\033[H\033[?25l"
CURSOR_HOME = "\033[H"


def is_inside_tmux() -> bool:
    """Check if we're running inside tmux."""
    return "TMUX" in os.environ


def tmux_wrap(sequence: str) -> str:
    """Wrap an escape sequence for tmux passthrough."""
    if not is_inside_tmux():
        return sequence
    escaped = sequence.replace("\033", "\033\033")
    return f"\033Ptmux;{escaped}\033\\"


def detect_graphics_protocol() -> str:
    """Detect which inline image protocol the terminal supports.

    Returns:
        "kitty", "iterm2" or "none".
    """
    term = os.environ.get("TERM", "")
    term_program = os.environ.get("TERM_PROGRAM", "")

    if "kitty" in term.lower() or term_program == "WezTerm":
        return "kitty"
    elif term_program == "iTerm.app":
        return "iterm2"
    else:
        return "none"


def encode_png(frame: Image.Image) -> str:
    """Encode a frame as base64 PNG."""
    buf = io.BytesIO()
    try:
        frame.save(buf, format="PNG")
        raw_data = buf.getvalue()
    finally:
        buf.close()
    return base64.b64encode(raw_data).decode("ascii")


def display_kitty(frame: Image.Image, first_frame: bool, stream: Optional[TextIO] = None) -> bool:
    """Display using Kitty graphics protocol.

    Returns: new value for first_frame
    """
    out = stream or sys.stdout
    out.write(CLEAR_AND_HIDE_CURSOR if first_frame else CURSOR_HOME)

    data = encode_png(frame)
    chunk_size = 4096
    for i in range(0, len(data), chunk_size):
        chunk = data[i:i + chunk_size]
        m = 1 if i + chunk_size < len(data) else 0
        if i == 0:
            out.write(tmux_wrap(f"\033_Ga=T,f=100,m={m};{chunk}\033\\"))
        else:
            out.write(tmux_wrap(f"\033_Gm={m};{chunk}\033\\"))

    out.flush()
    return False


def display_iterm2(frame: Image.Image, first_frame: bool, stream: Optional[TextIO] = None) -> bool:
    """Display using iTerm2 inline images.

    Returns: new value for first_frame
    """
    out = stream or sys.stdout
    out.write(CLEAR_AND_HIDE_CURSOR if first_frame else CURSOR_HOME)

    width, height = frame.size
    data = encode_png(frame)
    out.write(tmux_wrap(
        f"\033]1337;File=inline=1;width={width}px;height={height}px;"
        f"preserveAspectRatio=0:{data}\007"
    ))
    out.flush()
    return False


def cleanup_terminal(stream: Optional[TextIO] = None) -> None:
    """Restore terminal state."""
    out = stream or sys.stdout
    out.write("\033[2J\033[H\033[?25h")
    out.flush()
