"""Plane flight sequencing."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from parachute_drop.types import (
    FRAME_TIME,
    HALF_WIDTH,
    PlanePhase,
    SceneEvent,
    SceneEventType,
)

if TYPE_CHECKING:
    from parachute_drop.types import SceneState

logger = logging.getLogger(__name__)

PLANE_SPEED = 0.005  # world units per frame
DROP_X = 0.0
EXIT_MARGIN = 0.5


class PlaneSequencer:
    """System that flies the plane to the drop point and away again.

    APPROACHING -> STOPPED (raises the one-shot ready signal) -> DEPARTING,
    the last transition happening once the parachutist has left the plane.
    """

    def update(self, state: SceneState, dt: float) -> None:
        """Advance the plane.

        Args:
            state: The scene state to update.
            dt: Delta time in seconds.
        """
        plane = state.plane
        step = PLANE_SPEED * dt / FRAME_TIME

        if plane.phase == PlanePhase.APPROACHING:
            plane.x += step
            if plane.x >= DROP_X:
                plane.x = DROP_X
                plane.phase = PlanePhase.STOPPED
                plane.ready = True
                logger.info("Plane reached drop point at frame %d", state.frame)
                state.emit(SceneEvent(
                    type=SceneEventType.PLANE_STOPPED,
                    frame=state.frame,
                    data={"x": plane.x},
                ))

        elif plane.phase == PlanePhase.STOPPED:
            if state.parachutist.jumped:
                plane.phase = PlanePhase.DEPARTING
                plane.x += step

        elif plane.x <= HALF_WIDTH + EXIT_MARGIN:
            plane.x += step
