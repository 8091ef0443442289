"""Frame clock coordinating engine updates and rendering."""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING, Any, Optional, Protocol

from parachute_drop.types import FRAME_TIME

if TYPE_CHECKING:
    from parachute_drop.engine import SceneEngine
    from parachute_drop.types import SceneSnapshot

MAX_FRAME_DT = 0.25


class FrameRenderer(Protocol):
    """Anything that can draw a scene snapshot."""

    def render_frame(self, snapshot: SceneSnapshot) -> Any: ...


class GameLoop:
    """Main loop that steps the engine and renders at a fixed cadence."""

    def __init__(
        self,
        engine: SceneEngine,
        renderer: FrameRenderer,
        target_fps: int = 60,
        fixed_dt: Optional[float] = FRAME_TIME,
    ):
        """Initialize the game loop.

        Args:
            engine: The scene engine.
            renderer: The renderer.
            target_fps: Target frames per second.
            fixed_dt: Step every tick by this many seconds. None uses the
                measured wall-clock time between frames instead.
        """
        self.engine = engine
        self.renderer = renderer
        self.target_fps = target_fps
        self.target_frame_time = 1.0 / target_fps
        self.fixed_dt = fixed_dt

        self._running = False
        self._last_time = 0.0
        self._frame_count = 0
        self._total_frames = 0
        self._fps = 0.0
        self._fps_update_time = 0.0

    def tick(self, dt: float) -> None:
        """Process a single frame: update, then render.

        Args:
            dt: Delta time in seconds.
        """
        self.engine.step(dt)
        self.renderer.render_frame(self.engine.get_render_state())

        # Track FPS
        self._total_frames += 1
        self._frame_count += 1
        self._fps_update_time += dt
        if self._fps_update_time >= 1.0:
            self._fps = self._frame_count / self._fps_update_time
            self._frame_count = 0
            self._fps_update_time = 0.0

    def start(self) -> None:
        """Start the game loop."""
        self._running = True
        self._last_time = time.perf_counter()

    def stop(self) -> None:
        """Stop the game loop."""
        self._running = False

    @property
    def is_running(self) -> bool:
        """Check if loop is running.

        Returns:
            True if running.
        """
        return self._running

    @property
    def fps(self) -> float:
        """Get current FPS.

        Returns:
            Current frames per second.
        """
        return self._fps

    @property
    def total_frames(self) -> int:
        """Frames processed since creation."""
        return self._total_frames

    def process_frame(self) -> float:
        """Process a single frame with timing.

        Returns:
            The dt the engine was stepped by.
        """
        current_time = time.perf_counter()
        measured = current_time - self._last_time
        self._last_time = current_time

        if self.fixed_dt is not None:
            dt = self.fixed_dt
        else:
            # Cap delta time to prevent spiral of death
            dt = min(measured, MAX_FRAME_DT)

        self.tick(dt)
        return dt

    async def run_async(self, max_frames: Optional[int] = None) -> None:
        """Run the loop until stopped, re-arming itself every frame.

        Args:
            max_frames: Stop after this many frames. Runs forever if None.
        """
        self.start()
        frames = 0
        while self._running:
            frame_start = time.perf_counter()

            self.process_frame()
            frames += 1
            if max_frames is not None and frames >= max_frames:
                self.stop()
                break

            # Sleep off the rest of the frame period
            frame_time = time.perf_counter() - frame_start
            sleep_time = max(0.0, self.target_frame_time - frame_time)
            await asyncio.sleep(sleep_time)
