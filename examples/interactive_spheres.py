#!/usr/bin/env python3
"""Live progressive render of the sphere room.

This script opens a window and shows the image while the worker threads keep
refining it. The window title is "Raytracing" and a small panel reports the
number of samples accumulated so far.

Usage:
    python -m examples.interactive_spheres [options]

Options:
    --width WIDTH       Image width in pixels (default: 1200)
    --height HEIGHT     Image height in pixels (default: 600)
    --samples SAMPLES   Number of passes over the image (default: 2048)
    --threads THREADS   Number of render threads (default: 2)
    --seed SEED         Seed for reproducible sampling
    --scene SCENE       JSON scene description (default: built-in sphere room)
    --verbose           Enable debug logging

Close the window to stop rendering.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

# Ensure the project root is in the Python path for direct execution
_project_root = Path(__file__).parent.parent
if str(_project_root / "src") not in sys.path:
    sys.path.insert(0, str(_project_root / "src"))

import taichi as ti  # noqa: E402


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the sphere room in a live window.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--width", type=int, default=1200, help="Image width (default: 1200)")
    parser.add_argument("--height", type=int, default=600, help="Image height (default: 600)")
    parser.add_argument(
        "--samples", type=int, default=2048, help="Number of passes (default: 2048)"
    )
    parser.add_argument("--threads", type=int, default=2, help="Render threads (default: 2)")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible sampling")
    parser.add_argument("--scene", type=Path, default=None, help="JSON scene description")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args()


def main() -> int:
    """Main entry point for the live renderer.

    Returns:
        Exit code (0 for success, non-zero for error).
    """
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    from spherepath.core.progressive import ProgressiveRenderer, RenderSession
    from spherepath.preview.interactive import InteractivePreview
    from spherepath.scene.manager import Scene
    from spherepath.scene.sphere_room import create_sphere_room_scene

    if not InteractivePreview.is_display_available():
        print("Error: No display available. Cannot open the render window.", file=sys.stderr)
        print("Use examples/render_spheres.py for headless rendering.", file=sys.stderr)
        return 1

    try:
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
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # The window only needs Taichi for display; rendering runs on NumPy
    ti.init(arch=ti.cpu)

    print(f"Rendering {len(scene)} spheres at {session.width}x{session.height}")
    print(f"  - {session.num_samples} samples on {session.num_threads} threads")
    print("  - Close window to exit")
    print()

    renderer = ProgressiveRenderer(scene, session)
    preview = InteractivePreview(session.width, session.height)

    try:
        preview.run(renderer)
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
    except RuntimeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        preview.close()
        print(f"Preview window closed at {renderer.sample_count} samples.")

    return 0


if __name__ == "__main__":
    sys.exit(main())
