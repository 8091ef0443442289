"""Orthographic projection from world coordinates to pixels."""

from __future__ import annotations

import numpy as np

from parachute_drop.types import HALF_HEIGHT, HALF_WIDTH


class Viewport:
    """Maps the fixed world rectangle onto a pixel surface.

    Resizing changes only the mapping; world coordinates used by the
    simulation are never affected.
    """

    def __init__(
        self,
        width: int,
        height: int,
        half_width: float = HALF_WIDTH,
        half_height: float = HALF_HEIGHT,
    ):
        """Initialize the viewport.

        Args:
            width: Surface width in pixels (or character cells).
            height: Surface height in pixels (or character cells).
            half_width: Half of the visible world width.
            half_height: Half of the visible world height.
        """
        self.half_width = half_width
        self.half_height = half_height
        self.resize(width, height)

    def resize(self, width: int, height: int) -> None:
        """Recompute the projection for a new surface size.

        Args:
            width: New width in pixels.
            height: New height in pixels.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"viewport size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self._sx = width / (2 * self.half_width)
        self._sy = height / (2 * self.half_height)

    @property
    def pixels_per_unit(self) -> tuple[float, float]:
        """Horizontal and vertical scale factors."""
        return self._sx, self._sy

    def to_screen(self, x: float, y: float) -> tuple[float, float]:
        """Convert a world point to screen coordinates (y grows downward)."""
        return (x + self.half_width) * self._sx, (self.half_height - y) * self._sy

    def to_screen_array(self, points: np.ndarray) -> np.ndarray:
        """Convert an (N, 2) array of world points to screen coordinates."""
        points = np.asarray(points, dtype=np.float64)
        out = np.empty_like(points)
        out[:, 0] = (points[:, 0] + self.half_width) * self._sx
        out[:, 1] = (self.half_height - points[:, 1]) * self._sy
        return out

    def to_cell(self, x: float, y: float) -> tuple[int, int]:
        """Convert a world point to an integer cell index (column, row)."""
        sx, sy = self.to_screen(x, y)
        return int(np.floor(sx)), int(np.floor(sy))

    def scale_length(self, length: float) -> float:
        """Convert a world length to pixels using the horizontal scale."""
        return length * self._sx
