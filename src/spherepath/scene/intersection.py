"""Scene-level ray intersection testing.

This module finds the closest sphere hit along each ray of a batch. The
search is a brute-force loop over the scene's spheres: every sphere is
tested against the whole batch and a ray's record is replaced only where the
new hit distance is strictly smaller than the current best, which starts at
T_MAX. With equal distances the earlier sphere therefore wins.

Example:
    >>> from spherepath.core.ray import make_ray
    >>> from spherepath.scene.intersection import intersect_scene
    >>> record = intersect_scene(make_ray((0, 0, 14), (0, 0, -1)), scene)
    >>> int(record.sphere_index)  # Index into scene.spheres, -1 on a miss
"""

from typing import TYPE_CHECKING

import numpy as np

from spherepath.core.ray import Ray
from spherepath.geometry.sphere import HitRecord, hit_sphere, make_miss_record

if TYPE_CHECKING:
    from spherepath.scene.manager import Scene


def intersect_scene(ray: Ray, scene: "Scene") -> HitRecord:
    """Find the closest intersection of rays with the scene.

    Args:
        ray: The ray or batch of rays to test.
        scene: The scene whose spheres are tested.

    Returns:
        A HitRecord per ray. sphere_index names the closest sphere, or -1
        when no sphere was hit (t is then T_MAX).
    """
    closest = make_miss_record(ray.batch_shape)
    hit = closest.hit.copy()
    t = closest.t.copy()
    point = closest.point.copy()
    normal = closest.normal.copy()
    sphere_index = closest.sphere_index.copy()

    for index, sphere in enumerate(scene.spheres):
        record = hit_sphere(ray, sphere)
        closer = record.hit & (record.t < t)
        if not np.any(closer):
            continue
        hit = hit | closer
        t = np.where(closer, record.t, t)
        point = np.where(closer[..., np.newaxis], record.point, point)
        normal = np.where(closer[..., np.newaxis], record.normal, normal)
        sphere_index = np.where(closer, index, sphere_index)

    return HitRecord(hit=hit, t=t, point=point, normal=normal, sphere_index=sphere_index)
