"""Main application package."""

from __future__ import annotations

from .game_loop import GameLoop
from .keyboard import KeyboardReader
from .application import Application, main

__all__ = [
    "GameLoop",
    "KeyboardReader",
    "Application",
    "main",
]
