"""Simulation engine for Parachute Drop."""

from __future__ import annotations

from .game_engine import SceneEngine
from .state import SceneStateManager
from .input_mapper import map_key, map_keys, split_keys, KEY_COMMAND_MAP
from .snapshot import build_snapshot, canopy_ry, canopy_arc_height

__all__ = [
    "SceneEngine",
    "SceneStateManager",
    "map_key",
    "map_keys",
    "split_keys",
    "KEY_COMMAND_MAP",
    "build_snapshot",
    "canopy_ry",
    "canopy_arc_height",
]
