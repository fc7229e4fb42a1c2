"""Geometry module for the sphere primitive and ray intersection."""

from .sphere import (
    DEFAULT_F0,
    T_MAX,
    HitRecord,
    Sphere,
    hit_sphere,
    make_miss_record,
    sphere_normal,
)

__all__ = [
    "Sphere",
    "HitRecord",
    "hit_sphere",
    "make_miss_record",
    "sphere_normal",
    "DEFAULT_F0",
    "T_MAX",
]
