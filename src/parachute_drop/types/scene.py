"""World and scene state types."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from .events import SceneEvent
from .parachutist import ParachutistState

# Orthographic world extent, centred at the origin
WORLD_WIDTH = 4.0
WORLD_HEIGHT = 4.0
HALF_WIDTH = WORLD_WIDTH / 2
HALF_HEIGHT = WORLD_HEIGHT / 2

GROUND_LEVEL = -1.0

# Nominal frame period all per-frame constants are tuned for
FRAME_TIME = 0.016

WIND_MIN = 0.0
WIND_MAX = 5.0
WIND_STEP = 0.5
DEFAULT_WIND = 1.0

PLANE_START_X = -2.5
PLANE_ALTITUDE = 1.5


@dataclass
class WindModel:
    """Scalar wind strength shared by the scenery and the parachutist."""

    strength: float = DEFAULT_WIND

    def __post_init__(self) -> None:
        self.strength = max(WIND_MIN, min(WIND_MAX, float(self.strength)))

    def get(self) -> float:
        """Get the current wind strength."""
        return self.strength

    def increase(self) -> float:
        """Raise the wind by one step, saturating at the ceiling.

        Returns:
            The new wind strength.
        """
        self.strength = min(WIND_MAX, self.strength + WIND_STEP)
        return self.strength

    def decrease(self) -> float:
        """Lower the wind by one step, saturating at zero.

        Returns:
            The new wind strength.
        """
        self.strength = max(WIND_MIN, self.strength - WIND_STEP)
        return self.strength

    def copy(self) -> "WindModel":
        """Create a copy."""
        return WindModel(strength=self.strength)


@dataclass
class Cloud:
    """A cloud drifting rightward with the wind."""

    x: float
    y: float
    scale: float
    base_speed: float  # world units per frame at wind 1.0

    def copy(self) -> "Cloud":
        """Create a copy."""
        return Cloud(
            x=self.x,
            y=self.y,
            scale=self.scale,
            base_speed=self.base_speed,
        )


@dataclass
class Butterfly:
    """A butterfly oscillating around its spawn origin."""

    x: float
    y: float
    origin_x: float
    origin_y: float
    phase_offset: float
    speed_x: float
    speed_y: float
    amplitude_x: float
    amplitude_y: float
    wing_angle: float = 0.0
    color: tuple[float, float, float] = (1.0, 1.0, 1.0)

    def copy(self) -> "Butterfly":
        """Create a copy."""
        return Butterfly(
            x=self.x,
            y=self.y,
            origin_x=self.origin_x,
            origin_y=self.origin_y,
            phase_offset=self.phase_offset,
            speed_x=self.speed_x,
            speed_y=self.speed_y,
            amplitude_x=self.amplitude_x,
            amplitude_y=self.amplitude_y,
            wing_angle=self.wing_angle,
            color=self.color,
        )


class PlanePhase(Enum):
    """Phases of the plane's flight."""

    APPROACHING = "approaching"
    STOPPED = "stopped"
    DEPARTING = "departing"


@dataclass
class PlaneState:
    """State of the drop plane."""

    x: float = PLANE_START_X
    phase: PlanePhase = PlanePhase.APPROACHING
    ready: bool = False  # one-shot "ready to jump" signal

    @property
    def stopped(self) -> bool:
        """Whether the plane has reached the drop point."""
        return self.phase != PlanePhase.APPROACHING

    def copy(self) -> "PlaneState":
        """Create a copy."""
        return PlaneState(x=self.x, phase=self.phase, ready=self.ready)


@dataclass
class Scenery:
    """Static decorative geometry, never mutated by the simulation."""

    sun: tuple[float, float, float]  # x, y, radius
    hills: list[tuple[np.ndarray, tuple[int, int, int]]]  # polygon (N, 2), color
    trees: np.ndarray  # (N, 3) rows of x, base y, scale
    back_tree_count: int = 0  # trees drawn behind the front hill
    # (N, 3) rows of x, y, radius
    flowers: np.ndarray = field(default_factory=lambda: np.empty((0, 3)))

    def copy(self) -> "Scenery":
        """Create a copy."""
        return Scenery(
            sun=self.sun,
            hills=[(polygon.copy(), color) for polygon, color in self.hills],
            trees=self.trees.copy(),
            back_tree_count=self.back_tree_count,
            flowers=self.flowers.copy(),
        )


@dataclass
class SceneState:
    """Complete mutable state of one animation session."""

    wind: WindModel
    plane: PlaneState
    clouds: list[Cloud]
    butterflies: list[Butterfly]
    parachutist: ParachutistState
    scenery: Scenery
    elapsed: float = 0.0
    frame: int = 0
    events: list[SceneEvent] = field(default_factory=list)

    def emit(self, event: SceneEvent) -> None:
        """Queue an event for the engine to drain after this step."""
        self.events.append(event)

    def copy(self) -> "SceneState":
        """Create a deep copy of the scene state."""
        return SceneState(
            wind=self.wind.copy(),
            plane=self.plane.copy(),
            clouds=[c.copy() for c in self.clouds],
            butterflies=[b.copy() for b in self.butterflies],
            parachutist=self.parachutist.copy(),
            scenery=self.scenery.copy(),
            elapsed=self.elapsed,
            frame=self.frame,
            events=list(self.events),
        )
