"""Main application entry point."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Optional, Union

from parachute_drop.engine import SceneEngine
from parachute_drop.logging_config import setup_logging
from parachute_drop.renderer.headless import HeadlessRenderer
from parachute_drop.renderer.terminal_graphics import TerminalGraphicsRenderer
from parachute_drop.types import DEFAULT_WIND, SceneCommand

from .game_loop import GameLoop
from .keyboard import KeyboardReader

logger = logging.getLogger(__name__)

KEY_POLL_INTERVAL = 0.02


class Application:
    """Main Parachute Drop application."""

    def __init__(
        self,
        headless: bool = False,
        target_fps: int = 60,
        width: int = 800,
        height: int = 600,
        seed: Optional[int] = None,
        wind: float = DEFAULT_WIND,
        max_frames: Optional[int] = None,
        keyboard: Optional[KeyboardReader] = None,
    ):
        """Initialize the application.

        Args:
            headless: Render ASCII frames instead of terminal graphics.
            target_fps: Target frames per second.
            width: Renderer width in pixels.
            height: Renderer height in pixels.
            seed: Seed for butterflies and wind drift.
            wind: Initial wind strength.
            max_frames: Exit after this many frames. Runs until quit if None.
            keyboard: Key source; created on run if omitted.
        """
        self.headless = headless
        self.target_fps = target_fps
        self.width = width
        self.height = height
        self.seed = seed
        self.wind = wind
        self.max_frames = max_frames

        # Components (created in initialize)
        self.engine: Optional[SceneEngine] = None
        self.renderer: Optional[Union[HeadlessRenderer, TerminalGraphicsRenderer]] = None
        self.game_loop: Optional[GameLoop] = None
        self.keyboard = keyboard

        self._running = False
        self._initialized = False

    def initialize(self) -> None:
        """Initialize all application components."""
        if self._initialized:
            return

        self.engine = SceneEngine(config={
            "seed": self.seed,
            "wind_strength": self.wind,
        })

        if self.headless:
            self.renderer = HeadlessRenderer(width=80, height=24)
        else:
            self.renderer = TerminalGraphicsRenderer(
                width=self.width,
                height=self.height,
            )

        self.game_loop = GameLoop(
            engine=self.engine,
            renderer=self.renderer,
            target_fps=self.target_fps,
        )

        self._initialized = True
        logger.debug(
            "Initialized (headless=%s, fps=%d, seed=%s)",
            self.headless, self.target_fps, self.seed,
        )

    def handle_key(self, key: str) -> Optional[SceneCommand]:
        """Apply a key press before the next tick.

        Args:
            key: The key character.

        Returns:
            The command the key mapped to, if any.
        """
        if self.engine is None:
            return None
        command = self.engine.handle_key(key)
        if command == SceneCommand.QUIT:
            logger.info("Quit requested")
            self.stop()
        return command

    def handle_input(self, data: str) -> list[SceneCommand]:
        """Apply a burst of raw terminal input before the next tick.

        Args:
            data: Characters read from the keyboard, possibly several keys.

        Returns:
            The commands the input mapped to.
        """
        if self.engine is None or not data:
            return []
        commands = self.engine.handle_keys(data)
        if SceneCommand.QUIT in commands:
            logger.info("Quit requested")
            self.stop()
        return commands

    async def run(self) -> None:
        """Run the main application loop."""
        self.initialize()
        if self.keyboard is None:
            self.keyboard = KeyboardReader()

        self._running = True
        self.keyboard.open()

        game_task = asyncio.create_task(self.game_loop.run_async(self.max_frames))

        try:
            while self._running and not game_task.done():
                self.handle_input(self.keyboard.read_keys())
                await asyncio.sleep(KEY_POLL_INTERVAL)
        finally:
            self.game_loop.stop()
            game_task.cancel()
            try:
                await game_task
            except asyncio.CancelledError:
                pass

            self.keyboard.close()
            if isinstance(self.renderer, TerminalGraphicsRenderer):
                self.renderer.cleanup()
            self._running = False

    def stop(self) -> None:
        """Stop the application."""
        self._running = False
        if self.game_loop is not None:
            self.game_loop.stop()


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Parachute Drop - animated meadow scene")
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Render ASCII frames instead of terminal graphics",
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=60,
        help="Target FPS",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=800,
        help="Renderer width in pixels",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=600,
        help="Renderer height in pixels",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for a reproducible run",
    )
    parser.add_argument(
        "--wind",
        type=float,
        default=DEFAULT_WIND,
        help="Initial wind strength (0.0 to 5.0), also restored by reset",
    )
    parser.add_argument(
        "--frames",
        type=int,
        default=None,
        help="Run this many frames and exit",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write logs to this file",
    )

    args = parser.parse_args(argv)

    setup_logging(
        level=logging.DEBUG if args.verbose else logging.INFO,
        log_file=args.log_file,
    )

    if args.fps <= 0:
        parser.error("--fps must be positive")
    if args.frames is not None and args.frames <= 0:
        parser.error("--frames must be positive")

    app = Application(
        headless=args.headless,
        target_fps=args.fps,
        width=args.width,
        height=args.height,
        seed=args.seed,
        wind=args.wind,
        max_frames=args.frames,
    )

    try:
        asyncio.run(app.run())
    except KeyboardInterrupt:
        pass

    if args.headless and app.renderer is not None:
        sys.stdout.write(app.renderer.get_screen_string() + "\n")


if __name__ == "__main__":
    main()
