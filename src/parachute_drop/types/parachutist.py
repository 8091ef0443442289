"""Parachutist state types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

INITIAL_ALTITUDE = 2.0
INITIAL_SWAY_AMPLITUDE = 0.2
CANOPY_REST_OFFSET = 0.15
MIN_COLLAPSE_SCALE = 0.05

# Body geometry, relative to the parachutist's anchor point
HUMAN_SCALE = 0.25
HUMAN_BASE_OFFSET = -0.05  # shoulders
TORSO_HEIGHT = 0.22
LEG_HEIGHT = 0.15
FEET_OFFSET = HUMAN_BASE_OFFSET - (TORSO_HEIGHT + LEG_HEIGHT) * HUMAN_SCALE

# Canopy half-width and resting height
CANOPY_RX = 0.17
CANOPY_RY = 0.1


class ParachutistPhase(Enum):
    """Phases of the parachutist's descent.

    Transitions are strictly forward; only a scene reset returns to IDLE.
    """

    IDLE = "idle"
    FALLING = "falling"
    LANDED_SWAYING = "landed_swaying"
    LANDED_DETACHING = "landed_detaching"
    RUNNING = "running"


_LANDED_PHASES = (
    ParachutistPhase.LANDED_SWAYING,
    ParachutistPhase.LANDED_DETACHING,
    ParachutistPhase.RUNNING,
)


@dataclass
class ParachutistState:
    """State of the single parachutist in the scene.

    The boolean flags used by renderers are derived from ``phase`` so no
    invalid combination (e.g. running but not landed) can be represented.
    """

    phase: ParachutistPhase = ParachutistPhase.IDLE
    vertical_position: float = INITIAL_ALTITUDE
    vertical_velocity: float = 0.0  # world units per 16 ms frame
    horizontal_drift: float = 0.0
    sway_phase: float = 0.0
    sway_amplitude: float = INITIAL_SWAY_AMPLITUDE
    collapse_scale: float = 1.0
    detached_offset: float = CANOPY_REST_OFFSET
    post_land_sway_timer: float = 0.0  # seconds
    run_phase: float = 0.0
    landing_count: int = 0

    @property
    def jumped(self) -> bool:
        """Whether the parachutist has left the plane."""
        return self.phase != ParachutistPhase.IDLE

    @property
    def landed(self) -> bool:
        """Whether the parachutist has touched down."""
        return self.phase in _LANDED_PHASES

    @property
    def parachute_detaching(self) -> bool:
        """Whether the canopy has been released."""
        return self.phase in (ParachutistPhase.LANDED_DETACHING, ParachutistPhase.RUNNING)

    @property
    def is_running(self) -> bool:
        """Whether the parachutist is running off."""
        return self.phase == ParachutistPhase.RUNNING

    def copy(self) -> "ParachutistState":
        """Create a copy."""
        return ParachutistState(
            phase=self.phase,
            vertical_position=self.vertical_position,
            vertical_velocity=self.vertical_velocity,
            horizontal_drift=self.horizontal_drift,
            sway_phase=self.sway_phase,
            sway_amplitude=self.sway_amplitude,
            collapse_scale=self.collapse_scale,
            detached_offset=self.detached_offset,
            post_land_sway_timer=self.post_land_sway_timer,
            run_phase=self.run_phase,
            landing_count=self.landing_count,
        )
