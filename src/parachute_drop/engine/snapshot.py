"""Builds immutable render snapshots from the live scene state."""

from __future__ import annotations

import math

from parachute_drop.types import (
    CANOPY_REST_OFFSET,
    CANOPY_RX,
    CANOPY_RY,
    PLANE_ALTITUDE,
    ButterflySnapshot,
    CanopySnapshot,
    CloudSnapshot,
    ParachutistSnapshot,
    ParachutistState,
    SceneSnapshot,
    SceneState,
)

# Canopy sway and ropes are dropped once it is this deflated
SWAY_VISIBLE_SCALE = 0.1
MIN_VISIBLE_RY = 0.001


def _finite(value: float, default: float = 0.0) -> float:
    """Replace NaN/Inf with a safe default."""
    return value if math.isfinite(value) else default


def canopy_ry(collapse_scale: float, sway_phase: float, sway_amplitude: float) -> float:
    """Effective canopy vertical radius after collapse and sway.

    Args:
        collapse_scale: Deflation multiplier (1.0 = full canopy).
        sway_phase: Current breathing phase.
        sway_amplitude: Breathing amplitude.

    Returns:
        The vertical radius, never NaN/Inf and never negative.
    """
    ry = CANOPY_RY * collapse_scale
    if collapse_scale > SWAY_VISIBLE_SCALE:
        ry += CANOPY_RY * sway_amplitude * math.sin(sway_phase * 2.0)
    return max(0.0, _finite(ry))


def canopy_arc_height(x: float, rx: float, ry: float) -> float:
    """Height of the canopy's elliptical arc at horizontal offset x from its centre."""
    if rx <= 0.0:
        return 0.0
    t = 1.0 - (x / rx) ** 2
    return ry * math.sqrt(max(0.0, t))


def build_canopy(p: ParachutistState) -> CanopySnapshot:
    """Describe the canopy for the renderer."""
    ry = canopy_ry(p.collapse_scale, p.sway_phase, p.sway_amplitude)
    detached = p.parachute_detaching
    offset = p.detached_offset if detached else CANOPY_REST_OFFSET
    return CanopySnapshot(
        visible=p.jumped and ry > MIN_VISIBLE_RY,
        offset_y=_finite(offset, CANOPY_REST_OFFSET),
        rx=CANOPY_RX,
        base_ry=CANOPY_RY,
        ry=ry,
        collapse_scale=p.collapse_scale,
        sway_phase=p.sway_phase,
        sway_amplitude=p.sway_amplitude,
        detached=detached,
    )


def build_parachutist(p: ParachutistState) -> ParachutistSnapshot:
    """Describe the parachutist for the renderer."""
    return ParachutistSnapshot(
        visible=p.jumped,
        x=_finite(p.horizontal_drift),
        y=_finite(p.vertical_position),
        phase=p.phase.value,
        is_running=p.is_running,
        run_phase=p.run_phase,
        canopy=build_canopy(p),
        ropes_visible=(
            p.jumped
            and not p.parachute_detaching
            and p.collapse_scale > SWAY_VISIBLE_SCALE
        ),
    )


def build_snapshot(state: SceneState) -> SceneSnapshot:
    """Capture a read-only snapshot of the scene.

    Args:
        state: The live scene state.

    Returns:
        A SceneSnapshot that shares no mutable data with the state.
    """
    scenery = state.scenery
    return SceneSnapshot(
        frame=state.frame,
        elapsed=state.elapsed,
        wind_strength=state.wind.get(),
        plane_x=state.plane.x,
        plane_y=PLANE_ALTITUDE,
        clouds=tuple(CloudSnapshot(c.x, c.y, c.scale) for c in state.clouds),
        sun=scenery.sun,
        hills=tuple((polygon.copy(), color) for polygon, color in scenery.hills),
        trees=scenery.trees.copy(),
        back_tree_count=scenery.back_tree_count,
        flowers=scenery.flowers.copy(),
        butterflies=tuple(
            ButterflySnapshot(b.x, b.y, b.wing_angle, b.color)
            for b in state.butterflies
        ),
        parachutist=build_parachutist(state.parachutist),
    )
