"""Scene state management."""

from __future__ import annotations

import logging
from typing import Callable

from parachute_drop.types import SceneEvent, SceneState

logger = logging.getLogger(__name__)

EventListener = Callable[[SceneEvent], None]


class SceneStateManager:
    """Owns the live scene state and fans events out to subscribers."""

    def __init__(self, initial_state: SceneState):
        """Initialize with an initial scene state.

        Args:
            initial_state: The initial scene state.
        """
        self._state = initial_state
        self._listeners: list[EventListener] = []

    @property
    def live(self) -> SceneState:
        """The mutable state the systems update in place."""
        return self._state

    def get_state(self) -> SceneState:
        """Get the current scene state.

        Returns:
            A copy of the current scene state.
        """
        return self._state.copy()

    def replace(self, state: SceneState) -> None:
        """Swap in a whole new state, e.g. after a reset."""
        self._state = state

    def subscribe(self, listener: EventListener) -> Callable[[], None]:
        """Subscribe to scene events.

        Args:
            listener: A function to call for every event.

        Returns:
            An unsubscribe function.
        """
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def flush_events(self) -> list[SceneEvent]:
        """Drain pending events and notify all listeners.

        Returns:
            The events that were pending.
        """
        events = self._state.events
        self._state.events = []
        for event in events:
            logger.debug("Scene event: %s", event.to_dict())
            for listener in list(self._listeners):
                listener(event)
        return events
