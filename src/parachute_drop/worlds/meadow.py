"""Meadow scene generation."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional

import numpy as np

from parachute_drop.types import (
    Butterfly,
    Cloud,
    ParachutistState,
    PlaneState,
    SceneState,
    Scenery,
    WindModel,
    DEFAULT_WIND,
    GROUND_LEVEL,
    HALF_WIDTH,
    WORLD_WIDTH,
)

# (x, y offset above ground, scale) for the tree line on the far hill
_BACK_TREES = [
    (-2.0, 0.30, 0.70), (-1.9, 0.32, 0.75), (-1.8, 0.35, 0.80), (-1.7, 0.37, 0.70),
    (-1.6, 0.40, 0.82), (-1.5, 0.43, 0.78), (-1.4, 0.45, 0.85), (-1.3, 0.47, 0.80),
    (-1.2, 0.48, 0.88), (-1.1, 0.45, 0.75), (-0.9, 0.42, 0.70), (-0.7, 0.45, 0.80),
    (-0.5, 0.47, 0.85), (-0.3, 0.44, 0.79), (-0.1, 0.42, 0.72), (0.1, 0.40, 0.75),
    (0.5, 0.45, 0.80), (0.7, 0.48, 0.88), (0.9, 0.50, 0.90), (1.1, 0.52, 0.95),
    (1.3, 0.55, 0.92), (1.5, 0.53, 0.88), (1.7, 0.50, 0.85), (1.9, 0.47, 0.80),
]

_FRONT_TREES = [
    (-1.8, 0.10, 0.80), (-1.6, 0.15, 0.85), (-1.4, 0.20, 0.90), (-1.2, 0.25, 0.95),
    (-1.0, 0.28, 1.00), (-0.8, 0.25, 0.90), (-0.6, 0.22, 0.85), (-0.4, 0.20, 0.80),
    (0.0, 0.18, 0.88), (0.2, 0.15, 0.92), (0.4, 0.12, 0.85), (0.6, 0.09, 0.80),
    (0.8, 0.07, 0.75), (1.0, 0.05, 0.70), (1.2, 0.03, 0.65), (1.4, 0.01, 0.60),
    (1.6, -0.01, 0.55), (1.8, -0.03, 0.50),
]

# (x, y offset from ground, radius) for the white flowers in the grass
_FLOWERS = [
    (-0.3, -0.2, 0.008),
    (0.8, -0.1, 0.008),
    (1.5, -0.3, 0.008),
]

# Colors are 0-255 RGB
BACK_HILL_COLOR = (153, 230, 102)
FRONT_HILL_COLOR = (102, 204, 51)
GROUND_COLOR = (77, 179, 26)


@dataclass
class MeadowConfig:
    """Configuration for meadow scene generation."""

    butterfly_count: int = 5
    wind_strength: float = DEFAULT_WIND

    # Seed for reproducibility (None = random)
    seed: Optional[int] = None


class MeadowGenerator:
    """Builds the initial meadow scene: clouds, scenery and butterflies."""

    def __init__(self, seed: Optional[int] = None):
        """Initialize the generator.

        Args:
            seed: Random seed for reproducibility.
        """
        self._rng = random.Random(seed)

    def generate_butterflies(self, count: int) -> list[Butterfly]:
        """Seed a fresh set of butterflies over the meadow.

        Args:
            count: Number of butterflies.

        Returns:
            List of butterflies sitting at their spawn origins.
        """
        if count < 0:
            raise ValueError(f"butterfly count must be non-negative, got {count}")

        rng = self._rng
        butterflies = []
        for _ in range(count):
            origin_x = rng.random() * WORLD_WIDTH - HALF_WIDTH
            origin_y = rng.random() * 0.8 + (GROUND_LEVEL - 0.5)
            butterflies.append(Butterfly(
                x=origin_x,
                y=origin_y,
                origin_x=origin_x,
                origin_y=origin_y,
                phase_offset=rng.random() * 100.0,
                speed_x=0.1 + rng.random() * 0.2,
                speed_y=0.1 + rng.random() * 0.2,
                amplitude_x=0.02 + rng.random() * 0.05,
                amplitude_y=0.02 + rng.random() * 0.05,
                color=(rng.random(), rng.random(), rng.random()),
            ))
        return butterflies

    def generate_clouds(self) -> list[Cloud]:
        """Create the three clouds at their starting positions."""
        layout = [
            (-2.2, 1.6, 1.2, 0.001),
            (1.0, 1.4, 1.0, 0.0008),
            (-1.0, 1.7, 1.5, 0.0012),
        ]
        return [
            Cloud(x=x, y=y, scale=scale, base_speed=speed)
            for x, y, scale, speed in layout
        ]

    def build_scenery(self) -> Scenery:
        """Build the static hills, trees, flowers and sun."""
        g = GROUND_LEVEL
        back_hill = np.array([
            (-HALF_WIDTH, g + 0.3),
            (-1.5, g + 0.5),
            (0.0, g + 0.4),
            (1.8, g + 0.6),
            (HALF_WIDTH, g + 0.3),
            (HALF_WIDTH, g),
            (-HALF_WIDTH, g),
        ], dtype=np.float64)
        front_hill = np.array([
            (-HALF_WIDTH, g + 0.1),
            (-1.0, g + 0.3),
            (0.5, g + 0.2),
            (HALF_WIDTH, g + 0.1),
            (HALF_WIDTH, g),
            (-HALF_WIDTH, g),
        ], dtype=np.float64)
        ground = np.array([
            (-HALF_WIDTH, g),
            (HALF_WIDTH, g),
            (HALF_WIDTH, -2.0),
            (-HALF_WIDTH, -2.0),
        ], dtype=np.float64)

        trees = np.array(_BACK_TREES + _FRONT_TREES, dtype=np.float64)
        trees[:, 1] += g  # offsets -> absolute base altitude
        flowers = np.array(_FLOWERS, dtype=np.float64)
        flowers[:, 1] += g

        return Scenery(
            sun=(-1.0, 1.5, 0.15),
            hills=[
                (back_hill, BACK_HILL_COLOR),
                (front_hill, FRONT_HILL_COLOR),
                (ground, GROUND_COLOR),
            ],
            trees=trees,
            back_tree_count=len(_BACK_TREES),
            flowers=flowers,
        )

    def create_scene(self, config: MeadowConfig) -> SceneState:
        """Create a complete initial scene.

        Args:
            config: Meadow configuration.

        Returns:
            A fresh SceneState with the parachutist waiting in the plane.
        """
        return SceneState(
            wind=WindModel(strength=config.wind_strength),
            plane=PlaneState(),
            clouds=self.generate_clouds(),
            butterflies=self.generate_butterflies(config.butterfly_count),
            parachutist=ParachutistState(),
            scenery=self.build_scenery(),
        )


def create_meadow_scene(config: Optional[MeadowConfig] = None) -> SceneState:
    """Create a meadow scene with default or custom config.

    Args:
        config: Optional configuration.

    Returns:
        Initial SceneState.
    """
    config = config or MeadowConfig()
    generator = MeadowGenerator(seed=config.seed)
    return generator.create_scene(config)
