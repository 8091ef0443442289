"""Pytest configuration and fixtures."""

from __future__ import annotations

from typing import Callable

import pytest

from parachute_drop.engine import SceneEngine
from parachute_drop.types import FRAME_TIME, ParachutistPhase, SceneState
from parachute_drop.worlds import MeadowConfig, create_meadow_scene

# Upper bounds on ticks for each stage of the animation at the nominal rate
MAX_APPROACH_TICKS = 1000
MAX_DESCENT_TICKS = 5000


@pytest.fixture
def scene_state() -> SceneState:
    """Create a seeded meadow scene."""
    return create_meadow_scene(MeadowConfig(seed=1234))


@pytest.fixture
def engine() -> SceneEngine:
    """Create a seeded scene engine."""
    return SceneEngine(config={"seed": 1234})


@pytest.fixture
def calm_engine() -> SceneEngine:
    """Create an engine with no wind, so the descent is straight down."""
    return SceneEngine(config={"seed": 1234, "wind_strength": 0.0})


def _tick_until(
    engine: SceneEngine,
    condition: Callable[[SceneState], bool],
    limit: int,
    dt: float = FRAME_TIME,
) -> int:
    """Step the engine until a condition holds on its live state.

    Returns:
        The number of ticks taken.
    """
    for ticks in range(1, limit + 1):
        engine.step(dt)
        if condition(engine._state_manager.live):
            return ticks
    raise AssertionError(f"condition not reached within {limit} ticks")


@pytest.fixture
def run_until_plane_stopped() -> Callable[[SceneEngine], int]:
    """Helper that flies the plane to the drop point."""
    def run(engine: SceneEngine) -> int:
        return _tick_until(engine, lambda s: s.plane.stopped, MAX_APPROACH_TICKS)
    return run


@pytest.fixture
def run_until_landed(run_until_plane_stopped) -> Callable[[SceneEngine], int]:
    """Helper that runs the animation until the parachutist touches down."""
    def run(engine: SceneEngine) -> int:
        run_until_plane_stopped(engine)
        return _tick_until(
            engine,
            lambda s: s.parachutist.phase == ParachutistPhase.LANDED_SWAYING,
            MAX_DESCENT_TICKS,
        )
    return run


@pytest.fixture
def tick_until() -> Callable[..., int]:
    """Helper that steps an engine until a condition on its state holds."""
    return _tick_until
