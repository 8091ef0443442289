"""Renderer package for Parachute Drop."""

from __future__ import annotations

from .viewport import Viewport
from .headless import HeadlessRenderer
from .image import ImageRenderer
from .terminal_graphics import TerminalGraphicsRenderer
from .display import detect_graphics_protocol

__all__ = [
    "Viewport",
    "HeadlessRenderer",
    "ImageRenderer",
    "TerminalGraphicsRenderer",
    "detect_graphics_protocol",
]
