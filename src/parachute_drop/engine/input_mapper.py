"""Maps key presses to scene commands."""

from __future__ import annotations

import re
from typing import Optional

from parachute_drop.types import SceneCommand

ESCAPE = "\x1b"

# One key per match: CSI sequences (arrows, function keys), SS3 sequences,
# Alt+key, then any single character. A lone ESC only matches at the end.
_KEY_PATTERN = re.compile(r"\x1b\[[0-?]*[ -/]*[@-~]|\x1bO.|\x1b.|.", re.DOTALL)

# Key -> command mapping
KEY_COMMAND_MAP: dict[str, SceneCommand] = {
    "r": SceneCommand.RESET,
    "R": SceneCommand.RESET,
    "+": SceneCommand.INCREASE_WIND,
    "=": SceneCommand.INCREASE_WIND,  # unshifted '+' on most layouts
    "-": SceneCommand.DECREASE_WIND,
    "_": SceneCommand.DECREASE_WIND,
    "q": SceneCommand.QUIT,
    "Q": SceneCommand.QUIT,
    ESCAPE: SceneCommand.QUIT,
}


def split_keys(data: str) -> list[str]:
    """Split a burst of raw terminal input into individual key presses.

    Escape sequences stay whole, so an arrow key ("\\x1b[A") is one key and
    not an ESC followed by two letters.

    Args:
        data: Raw characters read from the terminal.

    Returns:
        The keys in the order they were pressed.
    """
    return _KEY_PATTERN.findall(data)


def map_key(key: str) -> Optional[SceneCommand]:
    """Map a single key press to a command.

    Args:
        key: The key character or escape sequence.

    Returns:
        The command, or None for keys that do nothing.
    """
    return KEY_COMMAND_MAP.get(key)


def map_keys(data: str) -> list[SceneCommand]:
    """Map a burst of buffered key presses, dropping unknown keys."""
    commands = []
    for key in split_keys(data):
        command = map_key(key)
        if command is not None:
            commands.append(command)
    return commands
