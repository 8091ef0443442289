"""Simulation systems for Parachute Drop."""

from __future__ import annotations

from .scenery import SceneryAnimator
from .plane import PlaneSequencer
from .parachutist import ParachutistSimulator

__all__ = [
    "SceneryAnimator",
    "PlaneSequencer",
    "ParachutistSimulator",
]
