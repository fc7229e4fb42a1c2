"""Core rendering module.

Components:
    ray: Ray data structure, vector helpers and hemisphere sampling
    pixels: The shared RGBA8 pixel buffer
    integrator: Path tracing radiance estimate
    progressive: Multi-threaded progressive accumulation

All routines operate on NumPy arrays with a trailing vector or color axis,
so one call traces a single ray or a whole row of pixels.
"""

from .pixels import PixelBuffer
from .ray import (
    Ray,
    cross,
    dot,
    length,
    length_squared,
    make_ray,
    normalize,
    random_on_hemisphere,
    ray_at,
    vec3,
)

# Note: integrator and progressive are NOT imported here to avoid circular imports.
# Import directly from spherepath.core.integrator or spherepath.core.progressive.

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "length",
    "length_squared",
    "normalize",
    "dot",
    "cross",
    "random_on_hemisphere",
    "PixelBuffer",
]
