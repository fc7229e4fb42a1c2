#!/usr/bin/env python3
"""Render the sphere room without a live window.

This script runs the progressive renderer to completion, printing progress
while the workers accumulate samples, and shows the final image with
Matplotlib.

Usage:
    python -m examples.render_spheres [options]

Options:
    --width WIDTH       Image width in pixels (default: 240)
    --height HEIGHT     Image height in pixels (default: 120)
    --samples SAMPLES   Number of passes over the image (default: 64)
    --threads THREADS   Number of render threads (default: 2)
    --seed SEED         Seed for reproducible sampling
    --scene SCENE       JSON scene description (default: built-in sphere room)
    --no-show           Skip the Matplotlib window
    --verbose           Enable debug logging

Example:
    python -m examples.render_spheres --width 120 --height 60 --samples 16
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path

_project_root = Path(__file__).parent.parent
if str(_project_root / "src") not in sys.path:
    sys.path.insert(0, str(_project_root / "src"))


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the sphere room.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--width", type=int, default=240, help="Image width (default: 240)")
    parser.add_argument("--height", type=int, default=120, help="Image height (default: 120)")
    parser.add_argument("--samples", type=int, default=64, help="Number of passes (default: 64)")
    parser.add_argument("--threads", type=int, default=2, help="Render threads (default: 2)")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible sampling")
    parser.add_argument("--scene", type=Path, default=None, help="JSON scene description")
    parser.add_argument("--no-show", action="store_true", help="Skip the Matplotlib window")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args()


def render_spheres(args: argparse.Namespace) -> None:
    """Render the scene described by the arguments and display it.

    Raises:
        ValueError: If the settings or the scene file are invalid.
        RuntimeError: If a render worker fails.
    """
    from spherepath.core.progressive import ProgressiveRenderer, RenderSession
    from spherepath.preview.display import show_preview
    from spherepath.scene.manager import Scene
    from spherepath.scene.sphere_room import create_sphere_room_scene

    session = RenderSession(
        width=args.width,
        height=args.height,
        num_samples=args.samples,
        num_threads=args.threads,
        seed=args.seed,
    )
    if args.scene is not None:
        scene = Scene.from_dict(json.loads(args.scene.read_text()))
    else:
        scene = create_sphere_room_scene(session.width, session.height)

    print(f"Rendering {len(scene)} spheres at {session.width}x{session.height}...")
    start_time = time.time()

    with ProgressiveRenderer(scene, session) as renderer:
        renderer.start()
        while renderer.is_alive:
            renderer.join(timeout=0.5)
            elapsed = time.time() - start_time
            print(
                f"\r  Progress: {renderer.sample_count}/{renderer.target_samples} samples "
                f"({elapsed:.1f}s)",
                end="",
                flush=True,
            )
        print()

    print(f"Total time: {time.time() - start_time:.2f}s")

    if not args.no_show:
        show_preview(renderer)


def main() -> int:
    """Main entry point."""
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        render_spheres(args)
        return 0
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
        return 130
    except (OSError, ValueError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
