"""Sphere room scene configuration.

This module provides a factory function for the default scene: a room whose
walls are huge spheres (radius 1000) so that their visible patches are
nearly flat, lit by an emissive ceiling, with three small spheres resting on
the floor that show off the microfacet material range.

Layout (world units, camera looking down -z from z = 14):
- Left wall: red, centered at (-1001.5, 0, 0)
- Right wall: green, centered at (1001.5, 0, 0)
- Back wall: blue, centered at (0, 0, -1001.5)
- Ceiling light: black base color with white emission, at (0, 1001.5, 0)
- Floor: grey, top surface at y = -0.85
- Three radius-0.5 spheres on the floor at x = -1, 0, 1

Example:
    >>> from spherepath.scene.sphere_room import create_sphere_room_scene
    >>> scene = create_sphere_room_scene(1200, 600)
    >>> len(scene)
    8
"""

import math

from spherepath.camera.pinhole import PinholeCamera
from spherepath.scene.manager import Scene

# Radius of the spheres used as walls, floor and ceiling
WALL_RADIUS = 1000.0

# Half extent of the room interior
ROOM_HALF_SIZE = 1.5

# Vertical offset of the floor and the spheres resting on it
FLOOR_OFFSET = 0.15

SMALL_SPHERE_RADIUS = 0.5


def create_sphere_room_scene(width: int = 1200, height: int = 600) -> Scene:
    """Create the default sphere room scene.

    Args:
        width: Image width in pixels, used for the camera aspect ratio.
        height: Image height in pixels, used for the camera aspect ratio.

    Returns:
        A Scene with eight spheres and a camera at (0, 0, 14).

    Raises:
        ValueError: If either dimension is not positive.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")

    camera = PinholeCamera(
        position=(0.0, 0.0, 14.0),
        look_at=(0.0, 0.0, -1.0),
        up=(0.0, 1.0, 0.0),
        fov=math.pi / 6.0,
        aspect_ratio=width / height,
    )
    scene = Scene(camera)

    wall_offset = WALL_RADIUS + ROOM_HALF_SIZE

    # Walls
    scene.add_sphere((-wall_offset, 0.0, 0.0), WALL_RADIUS, color=(1.0, 0.0, 0.0, 1.0))
    scene.add_sphere((wall_offset, 0.0, 0.0), WALL_RADIUS, color=(0.0, 1.0, 0.0, 1.0))
    scene.add_sphere((0.0, 0.0, -wall_offset), WALL_RADIUS, color=(0.0, 0.0, 1.0, 1.0))

    # Ceiling light
    scene.add_sphere(
        (0.0, wall_offset, 0.0),
        WALL_RADIUS,
        color=(0.0, 0.0, 0.0, 1.0),
        emission=(1.0, 1.0, 1.0, 1.0),
    )

    # Floor
    scene.add_sphere(
        (0.0, -(WALL_RADIUS + 1.0) + FLOOR_OFFSET, 0.0),
        WALL_RADIUS,
        color=(0.5, 0.5, 0.5, 1.0),
    )

    y = -SMALL_SPHERE_RADIUS + FLOOR_OFFSET

    # Rough dielectric
    scene.add_sphere(
        (-1.0, y, 0.0),
        SMALL_SPHERE_RADIUS,
        color=(0.9, 0.2, 0.1, 1.0),
        f0=(0.95, 0.64, 0.54, 1.0),
        roughness=0.9,
        metallic=0.0,
    )

    # Polished metal
    scene.add_sphere(
        (0.0, y, 0.0),
        SMALL_SPHERE_RADIUS,
        color=(1.0, 1.0, 1.0, 1.0),
        f0=(0.91, 0.92, 0.92, 1.0),
        roughness=0.1,
        metallic=1.0,
    )

    # Glossy plastic
    scene.add_sphere(
        (1.0, y, 0.0),
        SMALL_SPHERE_RADIUS,
        color=(1.0, 0.0, 0.0, 1.0),
        f0=(0.03, 0.03, 0.03, 0.03),
        roughness=0.1,
        metallic=0.0,
    )

    return scene


def get_sphere_room_bounds() -> tuple[tuple[float, float, float], tuple[float, float, float]]:
    """Get the interior bounds of the room as (min_corner, max_corner).

    The floor top sits at y = -1 + FLOOR_OFFSET and the room is open towards
    the camera (+z).
    """
    return (
        (-ROOM_HALF_SIZE, -1.0 + FLOOR_OFFSET, -ROOM_HALF_SIZE),
        (ROOM_HALF_SIZE, ROOM_HALF_SIZE, math.inf),
    )
