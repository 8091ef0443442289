"""Scene events and input commands."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class SceneEventType(Enum):
    """Notable moments in the animation, emitted by the systems."""

    PLANE_STOPPED = "PLANE_STOPPED"
    JUMPED = "JUMPED"
    LANDED = "LANDED"
    PARACHUTE_DETACHED = "PARACHUTE_DETACHED"
    RUNNING = "RUNNING"
    WIND_CHANGED = "WIND_CHANGED"
    RESET = "RESET"


class SceneCommand(Enum):
    """Discrete commands accepted from the input surface."""

    RESET = "reset"
    INCREASE_WIND = "increase_wind"
    DECREASE_WIND = "decrease_wind"
    QUIT = "quit"


@dataclass
class SceneEvent:
    """An event raised during a simulation step."""

    type: SceneEventType
    frame: int = 0
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary."""
        return {
            "type": self.type.value,
            "frame": self.frame,
            "data": dict(self.data),
        }
