"""Parachutist simulation: the jump, descent, landing and run-off."""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, Optional

from parachute_drop.types import (
    CANOPY_REST_OFFSET,
    CANOPY_RY,
    FEET_OFFSET,
    FRAME_TIME,
    GROUND_LEVEL,
    HALF_WIDTH,
    INITIAL_SWAY_AMPLITUDE,
    MIN_COLLAPSE_SCALE,
    ParachutistPhase,
    SceneEvent,
    SceneEventType,
)

if TYPE_CHECKING:
    from parachute_drop.types import ParachutistState, SceneState

logger = logging.getLogger(__name__)

# Jump
JUMP_ALTITUDE = 1.45
JUMP_VELOCITY = -0.0005

# Descent, per 16 ms frame
GRAVITY = -0.00005
TERMINAL_VELOCITY = -0.002
SWAY_PHASE_STEP = 0.12
WIND_DRIFT_FACTOR = 0.005
DRIFT_MARGIN = 0.2
LANDING_CLEARANCE = 0.35
LANDING_ALTITUDE = GROUND_LEVEL - LANDING_CLEARANCE
LANDING_SLOWDOWN_DISTANCE = 0.5
LANDING_DRAG_FACTOR = 0.0001

# After landing
POST_LAND_SWAY_DURATION = 2.0  # seconds
TIMER_EPSILON = 1e-9
PARACHUTE_COLLAPSE_SPEED = 0.005
DETACHED_FALL_FACTOR = 1.5

# Run-off
RUN_SPEED = 0.008
RUN_PHASE_STEP = 0.3
RUN_WRAP_BUFFER = 0.2


class ParachutistSimulator:
    """System that advances the parachutist's state machine.

    IDLE -> FALLING -> LANDED_SWAYING -> LANDED_DETACHING -> RUNNING.
    Every per-frame constant is scaled by ``dt / FRAME_TIME`` so the
    animation keeps its real-time pace at any frame rate.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        """Initialize the simulator.

        Args:
            rng: Random source for wind gusts. A fresh one is created if omitted.
        """
        self._rng = rng or random.Random()

    def update(self, state: SceneState, dt: float) -> None:
        """Advance the parachutist by one step.

        Args:
            state: The scene state to update.
            dt: Delta time in seconds.
        """
        frames = dt / FRAME_TIME
        phase = state.parachutist.phase

        if phase == ParachutistPhase.IDLE:
            self._update_idle(state)
        elif phase == ParachutistPhase.FALLING:
            self._update_falling(state, frames)
        elif phase == ParachutistPhase.LANDED_SWAYING:
            self._update_swaying(state, dt, frames)
        elif phase == ParachutistPhase.LANDED_DETACHING:
            self._update_detaching(state, frames)
        else:
            self._update_running(state.parachutist, frames)

    def _update_idle(self, state: SceneState) -> None:
        """Wait for the plane's ready signal, then jump."""
        if not state.plane.ready:
            return

        state.plane.ready = False
        p = state.parachutist
        p.phase = ParachutistPhase.FALLING
        p.vertical_position = JUMP_ALTITUDE
        p.vertical_velocity = JUMP_VELOCITY
        p.horizontal_drift = state.plane.x
        p.detached_offset = CANOPY_REST_OFFSET

        logger.info("Parachutist jumped at x=%.3f (frame %d)", p.horizontal_drift, state.frame)
        state.emit(SceneEvent(
            type=SceneEventType.JUMPED,
            frame=state.frame,
            data={"x": p.horizontal_drift, "y": p.vertical_position},
        ))

    def _update_falling(self, state: SceneState, frames: float) -> None:
        """Integrate the descent under gravity and wind."""
        p = state.parachutist
        p.sway_phase += SWAY_PHASE_STEP * frames

        # Gusts push harder the faster the fall
        wind_effect = state.wind.get() * abs(p.vertical_velocity) * 1000.0
        gust = self._rng.uniform(-1.0, 1.0)
        p.horizontal_drift += gust * WIND_DRIFT_FACTOR * wind_effect * frames
        limit = HALF_WIDTH - DRIFT_MARGIN
        p.horizontal_drift = max(-limit, min(limit, p.horizontal_drift))

        feet_y = p.vertical_position + FEET_OFFSET
        if feet_y > LANDING_ALTITUDE:
            p.vertical_velocity += GRAVITY * frames
            p.vertical_velocity = max(p.vertical_velocity, TERMINAL_VELOCITY)

            descent = p.vertical_velocity
            distance = feet_y - LANDING_ALTITUDE
            if distance < LANDING_SLOWDOWN_DISTANCE:
                # Ease out over the last stretch; never lift the parachutist
                ease = 1.0 - distance / LANDING_SLOWDOWN_DISTANCE
                descent = min(descent + LANDING_DRAG_FACTOR * ease, 0.0)

            p.vertical_position += descent * frames
        else:
            self._land(state)

    def _land(self, state: SceneState) -> None:
        """Touch down: snap feet to the landing altitude and start the sway timer."""
        p = state.parachutist
        p.vertical_position = LANDING_ALTITUDE - FEET_OFFSET
        p.vertical_velocity = 0.0
        p.phase = ParachutistPhase.LANDED_SWAYING
        p.post_land_sway_timer = POST_LAND_SWAY_DURATION
        p.landing_count += 1

        logger.info("Parachutist landed at x=%.3f (frame %d)", p.horizontal_drift, state.frame)
        state.emit(SceneEvent(
            type=SceneEventType.LANDED,
            frame=state.frame,
            data={"x": p.horizontal_drift, "y": p.vertical_position},
        ))

    def _update_swaying(self, state: SceneState, dt: float, frames: float) -> None:
        """Let the canopy settle while it slowly deflates."""
        p = state.parachutist
        p.post_land_sway_timer -= dt
        if p.post_land_sway_timer <= TIMER_EPSILON:
            p.post_land_sway_timer = 0.0

        p.sway_amplitude = max(
            0.0,
            INITIAL_SWAY_AMPLITUDE * (p.post_land_sway_timer / POST_LAND_SWAY_DURATION),
        )
        p.collapse_scale = max(
            MIN_COLLAPSE_SCALE,
            p.collapse_scale - PARACHUTE_COLLAPSE_SPEED * 0.5 * frames,
        )

        if p.post_land_sway_timer <= 0.0:
            p.phase = ParachutistPhase.LANDED_DETACHING
            logger.info("Parachute released (frame %d)", state.frame)
            state.emit(SceneEvent(
                type=SceneEventType.PARACHUTE_DETACHED,
                frame=state.frame,
                data={"collapse_scale": p.collapse_scale},
            ))

    def _update_detaching(self, state: SceneState, frames: float) -> None:
        """Drop the released canopy until it rests on the ground."""
        p = state.parachutist
        p.collapse_scale = max(
            MIN_COLLAPSE_SCALE,
            p.collapse_scale - PARACHUTE_COLLAPSE_SPEED * frames,
        )
        p.detached_offset -= PARACHUTE_COLLAPSE_SPEED * DETACHED_FALL_FACTOR * frames

        canopy_bottom = p.vertical_position + p.detached_offset - CANOPY_RY * p.collapse_scale
        if canopy_bottom <= GROUND_LEVEL:
            p.detached_offset = GROUND_LEVEL + CANOPY_RY * p.collapse_scale - p.vertical_position
            p.phase = ParachutistPhase.RUNNING
            logger.info("Parachutist started running (frame %d)", state.frame)
            state.emit(SceneEvent(
                type=SceneEventType.RUNNING,
                frame=state.frame,
                data={"x": p.horizontal_drift},
            ))

    def _update_running(self, p: ParachutistState, frames: float) -> None:
        """Run rightward, wrapping around the world."""
        p.horizontal_drift += RUN_SPEED * frames
        p.run_phase += RUN_PHASE_STEP * frames
        if p.horizontal_drift > HALF_WIDTH + RUN_WRAP_BUFFER:
            p.horizontal_drift = -HALF_WIDTH - RUN_WRAP_BUFFER
