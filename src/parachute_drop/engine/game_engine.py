"""Main scene engine for Parachute Drop."""

from __future__ import annotations

import logging
import math
import random
from typing import Callable, Optional

from parachute_drop.types import (
    SceneCommand,
    SceneEvent,
    SceneEventType,
    SceneSnapshot,
    SceneState,
    DEFAULT_WIND,
)
from parachute_drop.worlds import MeadowConfig, MeadowGenerator
from .input_mapper import map_key, map_keys
from .snapshot import build_snapshot
from .state import EventListener, SceneStateManager
from .systems import ParachutistSimulator, PlaneSequencer, SceneryAnimator

logger = logging.getLogger(__name__)


class SceneEngine:
    """Coordinates the simulation systems for one animation session.

    The engine never schedules itself: callers drive it through ``step(dt)``
    and read frames back with ``get_render_state()``.
    """

    def __init__(
        self,
        initial_state: Optional[SceneState] = None,
        config: Optional[dict] = None,
    ):
        """Initialize the scene engine.

        Args:
            initial_state: Optional initial scene state. Generated if omitted.
            config: Optional configuration dictionary with ``seed``,
                ``butterfly_count`` and ``wind_strength`` keys.
        """
        self._config = config or {}
        seed = self._config.get("seed")

        self._meadow_config = MeadowConfig(
            butterfly_count=self._config.get("butterfly_count", 5),
            wind_strength=self._config.get("wind_strength", DEFAULT_WIND),
            seed=seed,
        )
        self._generator = MeadowGenerator(seed=seed)

        if initial_state is None:
            initial_state = self._generator.create_scene(self._meadow_config)
        self._state_manager = SceneStateManager(initial_state)

        # Parachutist before plane: a ready signal raised this tick is
        # consumed on the next one.
        self._systems = [
            SceneryAnimator(),
            ParachutistSimulator(rng=random.Random(seed)),
            PlaneSequencer(),
        ]

    def get_state(self) -> SceneState:
        """Get the current scene state.

        Returns:
            A copy of the current scene state.
        """
        return self._state_manager.get_state()

    def get_render_state(self) -> SceneSnapshot:
        """Get a read-only snapshot of the current frame."""
        return build_snapshot(self._state_manager.live)

    def step(self, dt: float) -> list[SceneEvent]:
        """Advance the simulation.

        Args:
            dt: Delta time in seconds since the last step.

        Returns:
            Events raised during this step.
        """
        if not math.isfinite(dt) or dt < 0:
            raise ValueError(f"dt must be a finite non-negative number, got {dt!r}")

        state = self._state_manager.live
        state.elapsed += dt
        state.frame += 1

        for system in self._systems:
            system.update(state, dt)

        return self._state_manager.flush_events()

    # Alias matching the frame clock contract
    update = step

    def reset(self) -> None:
        """Restore the whole scene to its starting state with new butterflies."""
        state = self._generator.create_scene(self._meadow_config)
        self._state_manager.replace(state)
        logger.info("Animation reset")
        state.emit(SceneEvent(type=SceneEventType.RESET, frame=state.frame))
        self._state_manager.flush_events()

    def increase_wind(self) -> float:
        """Strengthen the wind by one step.

        Returns:
            The new wind strength.
        """
        strength = self._state_manager.live.wind.increase()
        logger.info("Wind strength increased: %.2f", strength)
        self._emit_wind_change(strength)
        return strength

    def decrease_wind(self) -> float:
        """Weaken the wind by one step.

        Returns:
            The new wind strength.
        """
        strength = self._state_manager.live.wind.decrease()
        logger.info("Wind strength decreased: %.2f", strength)
        self._emit_wind_change(strength)
        return strength

    def _emit_wind_change(self, strength: float) -> None:
        state = self._state_manager.live
        state.emit(SceneEvent(
            type=SceneEventType.WIND_CHANGED,
            frame=state.frame,
            data={"strength": strength},
        ))
        self._state_manager.flush_events()

    def apply_command(self, command: SceneCommand) -> None:
        """Apply an input command.

        QUIT is left to the application; the engine ignores it.

        Args:
            command: The command to apply.
        """
        if command == SceneCommand.RESET:
            self.reset()
        elif command == SceneCommand.INCREASE_WIND:
            self.increase_wind()
        elif command == SceneCommand.DECREASE_WIND:
            self.decrease_wind()

    def handle_key(self, key: str) -> Optional[SceneCommand]:
        """Handle a key press.

        Args:
            key: The key character.

        Returns:
            The command the key mapped to, or None if it was ignored.
        """
        command = map_key(key)
        if command is None:
            logger.debug("Ignoring key %r", key)
            return None
        self.apply_command(command)
        return command

    def handle_keys(self, data: str) -> list[SceneCommand]:
        """Handle a burst of buffered terminal input.

        Escape sequences such as arrow keys count as one key, so they are
        ignored instead of being read as ESC.

        Args:
            data: Raw characters read from the terminal.

        Returns:
            The commands the input mapped to, in order.
        """
        commands = map_keys(data)
        for command in commands:
            self.apply_command(command)
        return commands

    def subscribe(self, listener: EventListener) -> Callable[[], None]:
        """Subscribe to scene events.

        Args:
            listener: A function to call for every event.

        Returns:
            An unsubscribe function.
        """
        return self._state_manager.subscribe(listener)
