"""Scenery animation: drifting clouds and fluttering butterflies."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from parachute_drop.types import FRAME_TIME, HALF_HEIGHT, HALF_WIDTH

if TYPE_CHECKING:
    from parachute_drop.types import Butterfly, SceneState

CLOUD_WRAP_MARGIN = 0.3
BUTTERFLY_MARGIN = 0.1
WING_BEAT_RATE = 5.0
WING_SWING_DEGREES = 45.0


class SceneryAnimator:
    """System that moves the decorative scenery.

    Clouds integrate a wind-scaled speed and wrap around; butterflies are
    recomputed from their spawn origin every frame, so their flight is
    bounded and they never drift off over time.
    """

    def update(self, state: SceneState, dt: float) -> None:
        """Advance clouds and butterflies.

        Args:
            state: The scene state to update.
            dt: Delta time in seconds.
        """
        frames = dt / FRAME_TIME
        wind = state.wind.get()

        right_edge = HALF_WIDTH + CLOUD_WRAP_MARGIN
        for cloud in state.clouds:
            cloud.x += cloud.base_speed * wind * frames
            if cloud.x > right_edge:
                cloud.x = -right_edge

        t = state.elapsed
        for butterfly in state.butterflies:
            self._update_butterfly(butterfly, t)

    def _update_butterfly(self, butterfly: Butterfly, t: float) -> None:
        """Place a butterfly on its oscillating path at time t."""
        phase = butterfly.phase_offset
        butterfly.x = butterfly.origin_x + butterfly.amplitude_x * math.sin(
            t * butterfly.speed_x + phase
        )
        butterfly.y = butterfly.origin_y + butterfly.amplitude_y * math.cos(
            t * butterfly.speed_y + phase * 1.5
        )
        butterfly.wing_angle = WING_SWING_DEGREES * math.sin(t * WING_BEAT_RATE + phase * 2.0)

        butterfly.x = _wrap(butterfly.x, HALF_WIDTH + BUTTERFLY_MARGIN)
        butterfly.y = _wrap(butterfly.y, HALF_HEIGHT + BUTTERFLY_MARGIN)


def _wrap(value: float, bound: float) -> float:
    """Send a coordinate past one edge to the opposite edge."""
    if value > bound:
        return -bound
    if value < -bound:
        return bound
    return value
