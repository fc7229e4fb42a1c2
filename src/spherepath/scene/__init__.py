"""Scene module for scene management and closest-hit queries.

Components:
    manager: Scene container with structure-of-arrays sphere attributes
    intersection: Closest sphere hit along each ray
    sphere_room: The default room built from large spheres
"""

from .intersection import intersect_scene
from .manager import Scene, SceneConfig
from .sphere_room import create_sphere_room_scene, get_sphere_room_bounds

__all__ = [
    "Scene",
    "SceneConfig",
    "intersect_scene",
    "create_sphere_room_scene",
    "get_sphere_room_bounds",
]
