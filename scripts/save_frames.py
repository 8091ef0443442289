#!/usr/bin/env python3
"""Render the scene to an animated GIF."""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from parachute_drop.engine import SceneEngine
from parachute_drop.renderer import ImageRenderer
from parachute_drop.types import FRAME_TIME


def main():
    parser = argparse.ArgumentParser(description="Save Parachute Drop frames as a GIF")
    parser.add_argument("--frames", type=int, default=900, help="Simulation frames to run")
    parser.add_argument("--every", type=int, default=3, help="Keep one frame in N")
    parser.add_argument("--width", type=int, default=400)
    parser.add_argument("--height", type=int, default=300)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--wind", type=float, default=1.0)
    parser.add_argument(
        "--output",
        default=str(Path(__file__).parent.parent / "parachute_drop.gif"),
    )
    args = parser.parse_args()

    engine = SceneEngine(config={"seed": args.seed, "wind_strength": args.wind})
    renderer = ImageRenderer(width=args.width, height=args.height)

    images = []
    for i in range(args.frames):
        engine.step(FRAME_TIME)
        if i % args.every == 0:
            images.append(renderer.render_frame(engine.get_render_state()).copy())

    if not images:
        print("No frames rendered")
        return

    duration_ms = int(FRAME_TIME * args.every * 1000)
    images[0].save(
        args.output,
        save_all=True,
        append_images=images[1:],
        duration=duration_ms,
        loop=0,
    )
    print(f"Saved {len(images)} frames to {args.output}")


if __name__ == "__main__":
    main()
