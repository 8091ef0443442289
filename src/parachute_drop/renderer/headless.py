"""Headless renderer for testing."""

from __future__ import annotations

import math
import time
from typing import TYPE_CHECKING

import numpy as np

from .viewport import Viewport

if TYPE_CHECKING:
    from parachute_drop.types import SceneSnapshot

UI_HEIGHT = 2

# Fill characters for the hill layers, back to front
LAYER_CHARS = [":", ";", "#"]


class HeadlessRenderer:
    """A headless renderer that draws the scene as ASCII art.

    Used for testing and demo environments.
    """

    def __init__(self, width: int = 80, height: int = 24):
        """Initialize the headless renderer.

        Args:
            width: Screen width in characters.
            height: Screen height in characters.
        """
        self.width = width
        self.height = height
        self.viewport = Viewport(width, height - UI_HEIGHT)
        self.screen: list[list[str]] = [[" " for _ in range(width)] for _ in range(height)]
        self.last_render_time: float = 0.0
        self.rendered: dict[str, dict] = {}
        self._render_count = 0

    @property
    def render_count(self) -> int:
        """Number of frames rendered so far."""
        return self._render_count

    def resize(self, width: int, height: int) -> None:
        """Change the character grid size."""
        self.width = width
        self.height = height
        self.viewport.resize(width, height - UI_HEIGHT)
        self.clear()

    def clear(self) -> None:
        """Clear the screen buffer."""
        self.screen = [[" " for _ in range(self.width)] for _ in range(self.height)]
        self.rendered.clear()

    def render_frame(self, snapshot: SceneSnapshot) -> None:
        """Render a complete frame.

        Args:
            snapshot: The scene snapshot to render.
        """
        self.clear()
        start_time = time.perf_counter()

        self._render_terrain(snapshot)
        self._render_sky(snapshot)
        self._render_plane(snapshot)
        self._render_parachutist(snapshot)
        self._render_butterflies(snapshot)

        # UI last, on top of everything
        self._render_ui(snapshot)

        self.last_render_time = time.perf_counter() - start_time
        self._render_count += 1

    def _render_terrain(self, snapshot: SceneSnapshot) -> None:
        """Fill hills and ground back to front, then trees and flowers."""
        columns = np.arange(self.width) + 0.5
        world_x = columns / self.viewport.pixels_per_unit[0] - self.viewport.half_width

        for layer, (polygon, _color) in enumerate(snapshot.hills):
            top = polygon[polygon[:, 1] > polygon[:, 1].min()]
            top = top[np.argsort(top[:, 0])]
            heights = np.interp(world_x, top[:, 0], top[:, 1])
            char = LAYER_CHARS[min(layer, len(LAYER_CHARS) - 1)]
            for col, height in enumerate(heights):
                _, row = self.viewport.to_cell(world_x[col], height)
                for y in range(max(row, 0), self.height - UI_HEIGHT):
                    self._put(col, y, char)

        for x, base_y, _scale in snapshot.trees:
            self._put_world(x, base_y, "A")

        for x, y, _radius in snapshot.flowers:
            self._put_world(x, y, "*")
        self.rendered["flowers"] = {"count": len(snapshot.flowers)}

    def _render_sky(self, snapshot: SceneSnapshot) -> None:
        """Draw sun and clouds."""
        sun_x, sun_y, _radius = snapshot.sun
        self._put_world(sun_x, sun_y, "O")
        for cloud in snapshot.clouds:
            span = max(1, int(round(3 * cloud.scale)))
            col, row = self.viewport.to_cell(cloud.x, cloud.y)
            for dx in range(span):
                self._put(col + dx, row, "@")

    def _render_plane(self, snapshot: SceneSnapshot) -> None:
        """Draw the plane."""
        col, row = self.viewport.to_cell(snapshot.plane_x, snapshot.plane_y)
        for dx, char in enumerate("-=#>"):
            self._put(col - 2 + dx, row, char)
        self.rendered["plane"] = {"position": (snapshot.plane_x, snapshot.plane_y)}

    def _render_parachutist(self, snapshot: SceneSnapshot) -> None:
        """Draw the figure and its canopy."""
        p = snapshot.parachutist
        if not p.visible:
            return

        col, row = self.viewport.to_cell(p.x, p.y)
        self._put(col, row, "o")
        self._put(col, row + 1, "|")
        if p.is_running:
            self._put(col, row + 2, "/" if math.sin(p.run_phase) > 0 else "\\")
        else:
            self._put(col, row + 2, "^")

        canopy = p.canopy
        if canopy.visible:
            c_col, c_row = self.viewport.to_cell(p.x, p.y + canopy.offset_y)
            span = self.viewport.scale_length(canopy.rx)
            half = max(1, int(round(span)))
            shape = "_" if canopy.ry < canopy.base_ry * 0.3 else "~"
            for dx in range(-half, half + 1):
                self._put(c_col + dx, c_row, shape)
            self._put(c_col - half - 1, c_row, "(")
            self._put(c_col + half + 1, c_row, ")")

        self.rendered["parachutist"] = {
            "position": (p.x, p.y),
            "phase": p.phase,
            "running": p.is_running,
            "canopy_visible": canopy.visible,
            "ropes_visible": p.ropes_visible,
        }

    def _render_butterflies(self, snapshot: SceneSnapshot) -> None:
        """Draw butterflies, wings open or closed."""
        for butterfly in snapshot.butterflies:
            char = "W" if abs(butterfly.wing_angle) > 22.5 else "v"
            self._put_world(butterfly.x, butterfly.y, char)
        self.rendered["butterflies"] = {"count": len(snapshot.butterflies)}

    def _render_ui(self, snapshot: SceneSnapshot) -> None:
        """Render the status line."""
        for y in range(UI_HEIGHT):
            for x in range(self.width):
                self.screen[y][x] = " "
        self.screen[1] = list("─" * self.width)

        wind_bar = "≋" * int(round(snapshot.wind_strength * 2))
        status = (
            f"Wind {snapshot.wind_strength:.1f} {wind_bar:<10} "
            f"│ {snapshot.parachutist.phase.upper()} "
            f"│ t={snapshot.elapsed:6.2f}s"
        )
        self.draw_text(1, 0, status)

    def _put_world(self, x: float, y: float, char: str) -> None:
        col, row = self.viewport.to_cell(x, y)
        self._put(col, row, char)

    def _put(self, col: int, row: int, char: str) -> None:
        """Write a character into the game area, ignoring off-screen cells."""
        y = row + UI_HEIGHT
        if 0 <= col < self.width and UI_HEIGHT <= y < self.height:
            self.screen[y][col] = char

    def draw_text(self, x: int, y: int, text: str) -> None:
        """Draw text at screen position."""
        if y < 0 or y >= self.height:
            return

        for i, char in enumerate(text):
            px = x + i
            if 0 <= px < self.width:
                self.screen[y][px] = char

    def get_screen_string(self) -> str:
        """Get the screen as a string."""
        return "\n".join("".join(row) for row in self.screen)
