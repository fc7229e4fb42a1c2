"""Path tracing integrator for Monte Carlo light transport.

This module estimates the radiance arriving along camera rays. At every
surface hit the path picks up the sphere's emission, then continues along a
random direction in the hemisphere around the normal, weighted by the
Cook-Torrance BRDF and the cosine term:

    L(depth) = emission + brdf(n, v, l) * L(depth + 1) * (n . l)

Paths end when they escape the scene (no sky, black) or reach max_depth
(black). The recursion is unrolled into a loop with a per-path throughput,
and a whole batch of rays (typically one row of a worker's pixels) is traced
together: each bounce intersects only the paths that are still alive.

Key features:
    - Uniform hemisphere sampling (not cosine-weighted)
    - Fixed maximum depth, no Russian roulette
    - Self-intersection avoidance with a normal offset
    - Non-finite throughput and radiance are discarded

Example:
    >>> import numpy as np
    >>> from spherepath.core.integrator import radiance
    >>> from spherepath.scene.sphere_room import create_sphere_room_scene
    >>>
    >>> scene = create_sphere_room_scene(64, 32)
    >>> ray = scene.camera.get_ray(0.5, 0.5)
    >>> color = radiance(ray, scene, np.random.default_rng(0))  # RGBA, shape (4,)
"""

import numpy as np
import numpy.typing as npt

from spherepath.core.ray import Ray, Vec3, dot, normalize, random_on_hemisphere
from spherepath.materials.microfacet import eval_cook_torrance
from spherepath.scene.intersection import intersect_scene
from spherepath.scene.manager import Scene

# =============================================================================
# Rendering Constants
# =============================================================================

# Maximum path length
MAX_DEPTH = 4

# Ray offset epsilon to avoid self-intersection
RAY_EPSILON = 1e-3

# Radiance returned for escaped or terminated paths
BLACK = np.zeros(4)


def sanitize_radiance(values: npt.ArrayLike) -> npt.NDArray[np.float64]:
    """Replace non-finite and negative radiance components with zero."""
    values = np.asarray(values, dtype=np.float64)
    return np.where(np.isfinite(values), np.maximum(values, 0.0), 0.0)


def scatter_ray(point: Vec3, normal: Vec3, rng: np.random.Generator) -> Ray:
    """Build the bounce rays leaving surface points.

    Args:
        point: Hit point(s), shape (..., 3).
        normal: Unit surface normal(s) at the points.
        rng: The generator owned by the calling worker.

    Returns:
        Rays starting RAY_EPSILON above the surface along the normal, with
        unit directions drawn uniformly from the normal's hemisphere.
    """
    normal = np.asarray(normal, dtype=np.float64)
    return Ray(
        origin=np.asarray(point, dtype=np.float64) + RAY_EPSILON * normal,
        direction=random_on_hemisphere(normal, rng),
    )


def radiance(
    ray: Ray,
    scene: Scene,
    rng: np.random.Generator,
    depth: int = 0,
    max_depth: int = MAX_DEPTH,
) -> npt.NDArray[np.float64]:
    """Estimate the radiance carried back along rays.

    Args:
        ray: A ray or batch of rays.
        scene: The scene to trace against.
        rng: The generator owned by the calling worker.
        depth: The path depth of the given rays. Nothing is traced when
            depth >= max_depth.
        max_depth: Maximum path length.

    Returns:
        One RGBA radiance estimate per ray, shape ray.batch_shape + (4,).
    """
    batch_shape = ray.batch_shape
    origins = np.array(np.broadcast_to(ray.origin, batch_shape + (3,))).reshape(-1, 3)
    directions = np.array(np.broadcast_to(ray.direction, batch_shape + (3,))).reshape(-1, 3)

    count = origins.shape[0]
    result = np.zeros((count, 4))
    throughput = np.ones((count, 4))
    alive = np.arange(count)

    for _ in range(depth, max_depth):
        if alive.size == 0:
            break

        incident = directions[alive]
        hit = intersect_scene(Ray(origin=origins[alive], direction=incident), scene)

        # Escaped paths contribute nothing further
        alive = alive[hit.hit]
        if alive.size == 0:
            break
        incident = incident[hit.hit]
        point = hit.point[hit.hit]
        normal = hit.normal[hit.hit]
        index = hit.sphere_index[hit.hit]

        weight = throughput[alive]
        result[alive] += weight * scene.emissions[index]

        bounce = scatter_ray(point, normal, rng)
        brdf = eval_cook_torrance(
            normal,
            normalize(-incident),
            bounce.direction,
            scene.colors[index],
            scene.f0s[index],
            scene.roughness[index],
            scene.metallic[index],
        )

        with np.errstate(invalid="ignore", over="ignore"):
            weight = weight * brdf * dot(normal, bounce.direction)[:, np.newaxis]
        weight[~np.isfinite(weight)] = 0.0

        throughput[alive] = weight
        origins[alive] = bounce.origin
        directions[alive] = bounce.direction

        alive = alive[np.any(weight != 0.0, axis=-1)]

    return sanitize_radiance(result).reshape(batch_shape + (4,))
