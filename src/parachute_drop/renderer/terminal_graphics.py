"""Terminal graphics renderer using Kitty/iTerm2 inline images."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Optional, TextIO

from .display import cleanup_terminal, detect_graphics_protocol, display_iterm2, display_kitty
from .image import ImageRenderer

if TYPE_CHECKING:
    from PIL import Image

    from parachute_drop.types import SceneSnapshot

logger = logging.getLogger(__name__)

FALLBACK_FRAME_PATH = Path("/tmp/parachute_drop_frame.png")


class TerminalGraphicsRenderer(ImageRenderer):
    """Draws each frame with Pillow and pushes it to the terminal.

    Terminals without an inline image protocol get the latest frame
    written to ``fallback_path`` instead.
    """

    def __init__(
        self,
        width: int = 800,
        height: int = 600,
        protocol: Optional[str] = None,
        stream: Optional[TextIO] = None,
        fallback_path: Path = FALLBACK_FRAME_PATH,
    ):
        """Initialize the terminal renderer.

        Args:
            width: Image width in pixels.
            height: Image height in pixels.
            protocol: Force a protocol ("kitty", "iterm2", "none"); detected if omitted.
            stream: Output stream, stdout by default.
            fallback_path: Where frames go when no protocol is available.
        """
        super().__init__(width=width, height=height)
        self.protocol = protocol or detect_graphics_protocol()
        self._stream = stream or sys.stdout
        self._fallback_path = Path(fallback_path)
        self._first_frame = True
        logger.debug("Terminal graphics protocol: %s", self.protocol)

    def render_frame(self, snapshot: SceneSnapshot) -> Image.Image:
        """Render a frame and display it."""
        frame = super().render_frame(snapshot)
        self._display_frame(frame)
        return frame

    def _display_frame(self, frame: Image.Image) -> None:
        """Display the frame using the appropriate terminal protocol."""
        if self.protocol == "kitty":
            self._first_frame = display_kitty(frame, self._first_frame, self._stream)
        elif self.protocol == "iterm2":
            self._first_frame = display_iterm2(frame, self._first_frame, self._stream)
        else:
            frame.save(self._fallback_path)
            if self._first_frame:
                self._stream.write(f"[Frames saved to {self._fallback_path}]\n")
                self._stream.flush()
                self._first_frame = False

    def cleanup(self) -> None:
        """Restore terminal state."""
        if self.protocol != "none":
            cleanup_terminal(self._stream)
