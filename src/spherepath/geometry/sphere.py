"""Sphere primitive with ray-sphere intersection.

This module provides the Sphere dataclass carrying both geometry and surface
parameters, the HitRecord produced by intersection queries, and the
intersection routine itself.

The ray-sphere intersection is found by solving:
    |origin + t * direction - center|^2 = radius^2

which expands to the quadratic a*t^2 + b*t + c = 0 with:
    a = dot(direction, direction)
    b = 2 * dot(origin - center, direction)
    c = dot(origin - center, origin - center) - radius^2

Only the forward half of the ray (t >= 0) is considered.

Example:
    >>> from spherepath.core.ray import make_ray
    >>> from spherepath.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=(0.0, 0.0, 0.0), radius=1.0)
    >>> record = hit_sphere(make_ray((0, 0, 5), (0, 0, -1)), sphere)
    >>> bool(record.hit), float(record.t)
    (True, 4.0)
"""

from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from spherepath.core.ray import Ray, Vec3, dot, normalize, ray_at

# Hit distance reported when nothing was hit
T_MAX = 1e6

# Specular reflectance at normal incidence used when a sphere does not set one
DEFAULT_F0 = (0.91, 0.92, 0.92, 1.0)

Color = tuple[float, float, float, float]


@dataclass(frozen=True)
class Sphere:
    """A sphere with its surface parameters.

    Attributes:
        center: The center point of the sphere (x, y, z).
        radius: The radius of the sphere, strictly positive.
        color: Base (albedo) color as RGBA. Alpha takes part in the
            arithmetic but carries no shading meaning.
        emission: Radiance emitted by the surface as RGBA.
        f0: Reflectance at normal incidence as RGBA.
        roughness: Microfacet roughness, expected in (0, 1].
        metallic: Metalness, expected in [0, 1]. Neither roughness nor
            metallic is clamped here.
    """

    center: tuple[float, float, float]
    radius: float
    color: Color = (1.0, 1.0, 1.0, 1.0)
    emission: Color = (0.0, 0.0, 0.0, 0.0)
    f0: Color = DEFAULT_F0
    roughness: float = 0.5
    metallic: float = 0.0

    def __post_init__(self) -> None:
        if not self.radius > 0.0:
            raise ValueError(f"Sphere radius must be positive, got {self.radius}")
        for name in ("color", "emission", "f0"):
            if len(getattr(self, name)) != 4:
                raise ValueError(f"Sphere {name} must have 4 (RGBA) components")


@dataclass(frozen=True)
class HitRecord:
    """Record of a ray intersection, one entry per ray in the batch.

    Attributes:
        hit: Whether the ray intersected anything.
        t: The ray parameter of the intersection; T_MAX where hit is False.
        point: The intersection point; zeros where hit is False.
        normal: The outward unit normal at the point; zeros where hit is False.
        sphere_index: Index of the hit sphere in the scene's sphere sequence,
            -1 where hit is False. A lone hit_sphere() query reports 0.
    """

    hit: npt.NDArray[np.bool_]
    t: npt.NDArray[np.float64]
    point: Vec3
    normal: Vec3
    sphere_index: npt.NDArray[np.intp]


def make_miss_record(batch_shape: tuple[int, ...]) -> HitRecord:
    """Create a HitRecord indicating no intersection for every ray."""
    return HitRecord(
        hit=np.zeros(batch_shape, dtype=bool),
        t=np.full(batch_shape, T_MAX),
        point=np.zeros(batch_shape + (3,)),
        normal=np.zeros(batch_shape + (3,)),
        sphere_index=np.full(batch_shape, -1, dtype=np.intp),
    )


def sphere_normal(sphere: Sphere, point: npt.ArrayLike) -> Vec3:
    """Outward unit normal of the sphere at a surface point."""
    return normalize(np.asarray(point, dtype=np.float64) - np.asarray(sphere.center))


def hit_sphere(ray: Ray, sphere: Sphere) -> HitRecord:
    """Test rays for intersection with a single sphere.

    Root selection treats the ray as starting at t = 0 and looking forward:
    both roots negative means the sphere lies behind the origin (miss), one
    negative root means the origin is inside the sphere (the positive root is
    used), and two non-negative roots select the nearer one.

    Degenerate rays (zero direction, non-finite coefficients) report a miss.

    Args:
        ray: The ray or batch of rays to test.
        sphere: The sphere to test against.

    Returns:
        A HitRecord with one entry per ray.
    """
    center = np.asarray(sphere.center, dtype=np.float64)
    oc = ray.origin - center

    a = dot(ray.direction, ray.direction)
    b = 2.0 * dot(oc, ray.direction)
    c = dot(oc, oc) - sphere.radius * sphere.radius
    a, b, c = np.broadcast_arrays(a, b, c)

    discriminant = b * b - 4.0 * a * c

    with np.errstate(divide="ignore", invalid="ignore"):
        sqrt_d = np.sqrt(np.maximum(discriminant, 0.0))
        t1 = (-b - sqrt_d) / (2.0 * a)
        t2 = (-b + sqrt_d) / (2.0 * a)

    near = np.minimum(t1, t2)
    far = np.maximum(t1, t2)

    # NaN roots fail every comparison below and fall through as misses
    did_hit = (discriminant >= 0.0) & np.isfinite(near) & np.isfinite(far) & (far >= 0.0)
    t = np.where(did_hit, np.where(near >= 0.0, near, far), T_MAX)

    point = np.where(did_hit[..., np.newaxis], ray_at(ray, t), 0.0)
    normal = np.where(did_hit[..., np.newaxis], normalize(point - center), 0.0)

    return HitRecord(
        hit=did_hit,
        t=t,
        point=point,
        normal=normal,
        sphere_index=np.where(did_hit, 0, -1).astype(np.intp),
    )
