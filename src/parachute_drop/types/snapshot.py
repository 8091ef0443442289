"""Read-only render snapshots handed to renderers."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class CloudSnapshot:
    """Cloud placement."""

    x: float
    y: float
    scale: float


@dataclass(frozen=True)
class ButterflySnapshot:
    """Butterfly placement and wing pose."""

    x: float
    y: float
    wing_angle: float
    color: tuple[float, float, float]


@dataclass(frozen=True)
class CanopySnapshot:
    """Canopy geometry relative to the parachutist's anchor."""

    visible: bool
    offset_y: float
    rx: float
    base_ry: float
    ry: float  # effective vertical radius after collapse and sway
    collapse_scale: float
    sway_phase: float
    sway_amplitude: float
    detached: bool


@dataclass(frozen=True)
class ParachutistSnapshot:
    """Everything a renderer needs to draw the parachutist."""

    visible: bool
    x: float
    y: float
    phase: str
    is_running: bool
    run_phase: float
    canopy: CanopySnapshot
    ropes_visible: bool


@dataclass(frozen=True)
class SceneSnapshot:
    """A complete, immutable picture of one frame."""

    frame: int
    elapsed: float
    wind_strength: float
    plane_x: float
    plane_y: float
    clouds: tuple[CloudSnapshot, ...]
    sun: tuple[float, float, float]
    hills: tuple[tuple[np.ndarray, tuple[int, int, int]], ...]
    trees: np.ndarray
    back_tree_count: int
    flowers: np.ndarray
    butterflies: tuple[ButterflySnapshot, ...]
    parachutist: ParachutistSnapshot
