"""Pillow renderer that draws scene snapshots into images."""

from __future__ import annotations

import math
import time
from typing import TYPE_CHECKING, Sequence

import numpy as np
from PIL import Image, ImageDraw

from parachute_drop.engine.snapshot import canopy_arc_height
from parachute_drop.types import HUMAN_BASE_OFFSET, HUMAN_SCALE, LEG_HEIGHT, TORSO_HEIGHT

from .viewport import Viewport

if TYPE_CHECKING:
    from parachute_drop.types import ButterflySnapshot, ParachutistSnapshot, SceneSnapshot

Point = tuple[float, float]

CANOPY_PANELS = 7
PANEL_SEGMENTS = 20
LIMB_SWING_DEGREES = 40.0


class ImageRenderer:
    """Renders the scene as a flat vector-style picture."""

    COLORS = {
        "sky_top": (128, 204, 255),
        "sky_bottom": (204, 230, 255),
        "sun": (255, 255, 0),
        "cloud": (255, 255, 255),
        "tree_trunk": (77, 51, 13),
        "tree_leaves": (0, 102, 26),
        "plane_body": (204, 204, 217),
        "plane_window": (128, 204, 255),
        "plane_wing": (153, 153, 166),
        "plane_tail": (230, 26, 26),
        "canopy": (255, 0, 0),
        "canopy_outline": (0, 0, 0),
        "rope": (102, 51, 26),
        "shirt": (51, 51, 204),
        "trousers": (26, 26, 102),
        "skin": (255, 217, 179),
        "flower": (255, 255, 255),
    }

    def __init__(self, width: int = 800, height: int = 600):
        """Initialize the image renderer.

        Args:
            width: Image width in pixels.
            height: Image height in pixels.
        """
        self.viewport = Viewport(width, height)
        self.frame: Image.Image = Image.new("RGB", (width, height))
        self.draw = ImageDraw.Draw(self.frame)
        self.last_render_time = 0.0
        self._frame_count = 0
        self._sky = self._build_sky(width, height)

    @property
    def width(self) -> int:
        return self.viewport.width

    @property
    def height(self) -> int:
        return self.viewport.height

    def resize(self, width: int, height: int) -> None:
        """Resize the output; world coordinates are unaffected."""
        self.viewport.resize(width, height)
        self._sky = self._build_sky(width, height)

    def _build_sky(self, width: int, height: int) -> Image.Image:
        """Pre-compute the vertical sky gradient."""
        top = np.array(self.COLORS["sky_top"], dtype=np.float64)
        bottom = np.array(self.COLORS["sky_bottom"], dtype=np.float64)
        t = np.linspace(0.0, 1.0, height)[:, None]
        rows = (top + (bottom - top) * t).astype(np.uint8)
        pixels = np.repeat(rows[:, None, :], width, axis=1)
        return Image.fromarray(pixels)

    def render_frame(self, snapshot: SceneSnapshot) -> Image.Image:
        """Render a complete frame.

        Args:
            snapshot: The scene snapshot to render.

        Returns:
            The rendered image.
        """
        start = time.perf_counter()
        self._frame_count += 1

        self.frame = self._sky.copy()
        self.draw = ImageDraw.Draw(self.frame)

        self._render_landscape(snapshot)
        for cloud in snapshot.clouds:
            self._draw_cloud(cloud.x, cloud.y, cloud.scale)
        sun_x, sun_y, sun_r = snapshot.sun
        self._circle(sun_x, sun_y, sun_r, self.COLORS["sun"])
        self._draw_plane(snapshot.plane_x, snapshot.plane_y)
        self._draw_parachutist(snapshot.parachutist)
        for butterfly in snapshot.butterflies:
            self._draw_butterfly(butterfly)

        self.last_render_time = time.perf_counter() - start
        return self.frame

    # -- primitives ---------------------------------------------------------

    def _polygon(self, points: Sequence[Point] | np.ndarray, fill) -> None:
        screen = self.viewport.to_screen_array(np.asarray(points, dtype=np.float64))
        self.draw.polygon([tuple(p) for p in screen], fill=fill)

    def _circle(self, x: float, y: float, r: float, fill) -> None:
        cx, cy = self.viewport.to_screen(x, y)
        sx, sy = self.viewport.pixels_per_unit
        rx, ry = r * sx, r * sy
        if rx <= 0 or ry <= 0:
            return
        self.draw.ellipse([cx - rx, cy - ry, cx + rx, cy + ry], fill=fill)

    def _line(self, a: Point, b: Point, fill, width: int = 1) -> None:
        self.draw.line([self.viewport.to_screen(*a), self.viewport.to_screen(*b)], fill=fill, width=width)

    # -- scenery ------------------------------------------------------------

    def _render_landscape(self, snapshot: SceneSnapshot) -> None:
        """Hills with their tree lines, back to front, then the ground and its flowers."""
        hills = snapshot.hills
        back_trees = snapshot.trees[:snapshot.back_tree_count]
        front_trees = snapshot.trees[snapshot.back_tree_count:]

        if hills:
            self._polygon(hills[0][0], hills[0][1])
        for x, y, scale in back_trees:
            self._draw_tree(x, y, scale)
        if len(hills) > 1:
            self._polygon(hills[1][0], hills[1][1])
        for x, y, scale in front_trees:
            self._draw_tree(x, y, scale)
        for polygon, color in hills[2:]:
            self._polygon(polygon, color)
        for x, y, radius in snapshot.flowers:
            self._circle(x, y, radius, self.COLORS["flower"])

    def _draw_tree(self, x: float, y: float, scale: float) -> None:
        """A trunk under three stacked triangles."""
        s = scale
        self._polygon(
            [(x - 0.02 * s, y - 0.1 * s), (x + 0.02 * s, y - 0.1 * s), (x + 0.02 * s, y), (x - 0.02 * s, y)],
            self.COLORS["tree_trunk"],
        )
        leaves = self.COLORS["tree_leaves"]
        for top, half, base in ((0.2, 0.12, 0.0), (0.25, 0.1, 0.05), (0.3, 0.07, 0.15)):
            self._polygon(
                [(x, y + top * s), (x - half * s, y + base * s), (x + half * s, y + base * s)],
                leaves,
            )

    def _draw_cloud(self, x: float, y: float, scale: float) -> None:
        color = self.COLORS["cloud"]
        self._circle(x, y, 0.07 * scale, color)
        self._circle(x + 0.05 * scale, y + 0.02 * scale, 0.06 * scale, color)
        self._circle(x + 0.10 * scale, y, 0.05 * scale, color)
        self._circle(x + 0.02 * scale, y - 0.02 * scale, 0.06 * scale, color)

    def _draw_plane(self, x: float, y: float) -> None:
        self._polygon(
            [(x - 0.25, y - 0.03), (x + 0.2, y - 0.03), (x + 0.25, y), (x + 0.2, y + 0.03), (x - 0.25, y + 0.03)],
            self.COLORS["plane_body"],
        )
        self._polygon([(x + 0.18, y + 0.03), (x + 0.25, y), (x + 0.18, y)], self.COLORS["plane_window"])
        self._polygon(
            [(x - 0.05, y), (x + 0.05, y), (x - 0.1, y - 0.2), (x - 0.15, y - 0.2)],
            self.COLORS["plane_wing"],
        )
        self._polygon([(x - 0.25, y + 0.03), (x - 0.20, y + 0.12), (x - 0.28, y + 0.03)], self.COLORS["plane_tail"])

    def _draw_butterfly(self, b: ButterflySnapshot) -> None:
        """Two triangular wings foreshortened by their flap angle."""
        color = tuple(int(round(c * 255)) for c in b.color)
        span = 0.03 * abs(math.cos(math.radians(b.wing_angle)))
        half_h = 0.02
        self._polygon([(b.x, b.y), (b.x - span, b.y + half_h), (b.x - span, b.y - half_h)], color)
        self._polygon([(b.x, b.y), (b.x + span, b.y + half_h), (b.x + span, b.y - half_h)], color)

    # -- parachutist ----------------------------------------------------------

    def _draw_parachutist(self, p: ParachutistSnapshot) -> None:
        if not p.visible:
            return
        self._draw_human(p)
        if p.canopy.visible:
            self._draw_canopy(p)
        if p.ropes_visible:
            self._draw_ropes(p)

    def _draw_human(self, p: ParachutistSnapshot) -> None:
        s = HUMAN_SCALE
        x = p.x
        shoulder_y = p.y + HUMAN_BASE_OFFSET
        torso_w = 0.12 * s
        torso_h = TORSO_HEIGHT * s
        leg_h = LEG_HEIGHT * s
        hip_y = shoulder_y - torso_h
        px = max(1, int(round(self.viewport.scale_length(0.004))))

        self._polygon(
            [(x - torso_w / 2, shoulder_y), (x + torso_w / 2, shoulder_y),
             (x + torso_w / 2, hip_y), (x - torso_w / 2, hip_y)],
            self.COLORS["shirt"],
        )
        self._circle(x, shoulder_y + 0.07 * s, 0.05 * s, self.COLORS["skin"])

        if p.is_running:
            for phase_shift, length, origin_y, color in (
                (math.pi, leg_h * 0.9, shoulder_y, "shirt"),
                (0.0, leg_h * 0.9, shoulder_y, "shirt"),
                (0.0, leg_h, hip_y, "trousers"),
                (math.pi, leg_h, hip_y, "trousers"),
            ):
                angle = math.radians(LIMB_SWING_DEGREES * math.sin(p.run_phase + phase_shift))
                end = (x + length * math.sin(angle), origin_y - length * math.cos(angle))
                self._line((x, origin_y), end, self.COLORS[color], width=px * 3)
        else:
            # Arms raised to the risers, legs together
            for side in (-1, 1):
                arm_x = x + side * torso_w / 2
                self._line((arm_x, shoulder_y), (arm_x, shoulder_y + 0.1 * s), self.COLORS["shirt"], width=px * 3)
            self._polygon(
                [(x - 0.03 * s, hip_y), (x + 0.03 * s, hip_y), (x + 0.03 * s, hip_y - leg_h), (x - 0.03 * s, hip_y - leg_h)],
                self.COLORS["trousers"],
            )

    def _draw_canopy(self, p: ParachutistSnapshot) -> None:
        """Seven panels under an elliptical arc."""
        canopy = p.canopy
        cx = p.x
        cy = p.y + canopy.offset_y
        panel_w = 2 * canopy.rx / CANOPY_PANELS

        for i in range(CANOPY_PANELS):
            x1 = cx - canopy.rx + i * panel_w
            points = []
            for j in range(PANEL_SEGMENTS + 1):
                px = x1 + panel_w * j / PANEL_SEGMENTS
                points.append((px, cy + canopy_arc_height(px - cx, canopy.rx, canopy.ry)))
            points.append((x1 + panel_w, cy))
            points.append((x1, cy))
            self._polygon(points, self.COLORS["canopy"])

        theta = np.linspace(0.0, math.pi, 101)
        outline = np.column_stack([cx + canopy.rx * np.cos(theta), cy + canopy.ry * np.sin(theta)])
        screen = self.viewport.to_screen_array(outline)
        self.draw.line([tuple(pt) for pt in screen], fill=self.COLORS["canopy_outline"], width=2)

    def _draw_ropes(self, p: ParachutistSnapshot) -> None:
        """Four risers from the hands to the canopy rim."""
        canopy = p.canopy
        cx = p.x
        cy = p.y + canopy.offset_y
        hand_dx = 0.09 * HUMAN_SCALE
        hand_y = p.y + HUMAN_BASE_OFFSET + 0.18 * HUMAN_SCALE

        for fraction in (0.4, 0.7):
            dx = canopy.rx * fraction
            attach_y = cy + canopy_arc_height(dx, canopy.rx, canopy.ry)
            for side in (-1, 1):
                self._line((cx + side * hand_dx, hand_y), (cx + side * dx, attach_y), self.COLORS["rope"], width=2)
