"""Type definitions for Parachute Drop."""

from .events import (
    SceneCommand,
    SceneEvent,
    SceneEventType,
)
from .parachutist import (
    ParachutistPhase,
    ParachutistState,
    INITIAL_ALTITUDE,
    INITIAL_SWAY_AMPLITUDE,
    MIN_COLLAPSE_SCALE,
    HUMAN_SCALE,
    HUMAN_BASE_OFFSET,
    TORSO_HEIGHT,
    LEG_HEIGHT,
    FEET_OFFSET,
    CANOPY_RX,
    CANOPY_RY,
    CANOPY_REST_OFFSET,
)
from .scene import (
    SceneState,
    WindModel,
    Cloud,
    Butterfly,
    PlanePhase,
    PlaneState,
    Scenery,
    WORLD_WIDTH,
    WORLD_HEIGHT,
    HALF_WIDTH,
    HALF_HEIGHT,
    GROUND_LEVEL,
    FRAME_TIME,
    WIND_MIN,
    WIND_MAX,
    WIND_STEP,
    DEFAULT_WIND,
    PLANE_START_X,
    PLANE_ALTITUDE,
)
from .snapshot import (
    SceneSnapshot,
    CloudSnapshot,
    ButterflySnapshot,
    CanopySnapshot,
    ParachutistSnapshot,
)

__all__ = [
    # Events
    "SceneCommand",
    "SceneEvent",
    "SceneEventType",
    # Parachutist
    "ParachutistPhase",
    "ParachutistState",
    "INITIAL_ALTITUDE",
    "INITIAL_SWAY_AMPLITUDE",
    "MIN_COLLAPSE_SCALE",
    "HUMAN_SCALE",
    "HUMAN_BASE_OFFSET",
    "TORSO_HEIGHT",
    "LEG_HEIGHT",
    "FEET_OFFSET",
    "CANOPY_RX",
    "CANOPY_RY",
    "CANOPY_REST_OFFSET",
    # Scene
    "SceneState",
    "WindModel",
    "Cloud",
    "Butterfly",
    "PlanePhase",
    "PlaneState",
    "Scenery",
    "WORLD_WIDTH",
    "WORLD_HEIGHT",
    "HALF_WIDTH",
    "HALF_HEIGHT",
    "GROUND_LEVEL",
    "FRAME_TIME",
    "WIND_MIN",
    "WIND_MAX",
    "WIND_STEP",
    "DEFAULT_WIND",
    "PLANE_START_X",
    "PLANE_ALTITUDE",
    # Snapshots
    "SceneSnapshot",
    "CloudSnapshot",
    "ButterflySnapshot",
    "CanopySnapshot",
    "ParachutistSnapshot",
]
