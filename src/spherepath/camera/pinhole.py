"""Pinhole camera model for perspective projection ray generation.

This module implements the pinhole camera that generates the primary ray of
every pixel. The camera is described by:
- position: where the camera sits in world space
- look_at: the viewing direction
- up: the up direction of the image plane
- fov: field of view in radians, and the image aspect ratio

The right vector is cross(look_at, up) and the focal length factor is
aspect_ratio / (2 * tan(fov)). For normalized image coordinates (u, v) in
[0, 1], remapped to [-1, 1], the point on the image plane is:
    right * u * aspect_ratio + up * v + look_at * flen
and the ray direction is that point minus the camera position. Directions are
left unnormalized.

The camera is static for a render session, so each pixel's primary ray is
computed once during the first pass and served from a flat cache of
width * height slots afterwards.

Example:
    >>> import math
    >>> from spherepath.camera.pinhole import PinholeCamera
    >>> camera = PinholeCamera(
    ...     position=(0.0, 0.0, 14.0),
    ...     look_at=(0.0, 0.0, -1.0),
    ...     up=(0.0, 1.0, 0.0),
    ...     fov=math.pi / 6.0,
    ...     aspect_ratio=2.0,
    ... )
    >>> camera.allocate_ray_cache(1200, 600)
    >>> ray = camera.get_ray(0.5, 0.5)  # Ray through image center
    >>> camera.cache_ray(ray, 600, 300)
"""

import math
from dataclasses import dataclass, field

import numpy as np
import numpy.typing as npt

from spherepath.core.ray import Ray, cross, normalize


@dataclass
class PinholeCamera:
    """A pinhole (perspective) camera with a per-pixel primary ray cache.

    Attributes:
        position: Camera position in world space (x, y, z).
        look_at: Viewing direction (x, y, z).
        up: Up direction of the image plane (typically (0, 1, 0)).
        fov: Field of view in radians.
        aspect_ratio: Width divided by height of the output image.
    """

    position: tuple[float, float, float]
    look_at: tuple[float, float, float]
    up: tuple[float, float, float]
    fov: float
    aspect_ratio: float

    _cache_width: int = field(default=0, init=False, repr=False)
    _cache_height: int = field(default=0, init=False, repr=False)
    _cached_origins: npt.NDArray[np.float64] = field(
        default_factory=lambda: np.zeros((0, 3)), init=False, repr=False
    )
    _cached_directions: npt.NDArray[np.float64] = field(
        default_factory=lambda: np.zeros((0, 3)), init=False, repr=False
    )
    _cached: npt.NDArray[np.bool_] = field(
        default_factory=lambda: np.zeros(0, dtype=bool), init=False, repr=False
    )

    def __post_init__(self) -> None:
        if not 0.0 < self.fov < math.pi / 2.0:
            raise ValueError(f"Field of view must be in (0, pi/2) radians, got {self.fov}")
        if self.aspect_ratio <= 0.0:
            raise ValueError(f"Aspect ratio must be positive, got {self.aspect_ratio}")

    @property
    def right(self) -> npt.NDArray[np.float64]:
        """Unit right vector of the image plane."""
        return normalize(cross(self.look_at, self.up))

    @property
    def focal_length(self) -> float:
        """Focal length factor applied to the viewing direction."""
        return self.aspect_ratio / (2.0 * math.tan(self.fov))

    def get_ray(self, u: npt.ArrayLike, v: npt.ArrayLike) -> Ray:
        """Generate rays through normalized image coordinates (u, v).

        Args:
            u: Horizontal coordinate(s) in [0, 1] (left to right).
            v: Vertical coordinate(s) in [0, 1] (bottom to top).
                u and v broadcast against each other.

        Returns:
            A Ray (batched when u or v are arrays) starting at the camera
            position.
        """
        u = 2.0 * np.asarray(u, dtype=np.float64)[..., np.newaxis] - 1.0
        v = 2.0 * np.asarray(v, dtype=np.float64)[..., np.newaxis] - 1.0

        origin = np.asarray(self.position, dtype=np.float64)
        pixel_dir = (
            self.right * u * self.aspect_ratio
            + np.asarray(self.up, dtype=np.float64) * v
            + np.asarray(self.look_at, dtype=np.float64) * self.focal_length
        )
        direction = pixel_dir - origin
        origin = np.broadcast_to(origin, direction.shape)
        return Ray(origin=origin, direction=direction)

    # =========================================================================
    # Primary Ray Cache
    # =========================================================================

    def allocate_ray_cache(self, width: int, height: int) -> None:
        """Allocate an empty cache with one slot per pixel.

        Slots are indexed by y * width + x. Reallocating discards every
        cached ray.

        Args:
            width: Image width in pixels.
            height: Image height in pixels.

        Raises:
            ValueError: If either dimension is not positive.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Ray cache dimensions must be positive, got {width}x{height}")
        self._cache_width = width
        self._cache_height = height
        self._cached_origins = np.zeros((width * height, 3))
        self._cached_directions = np.zeros((width * height, 3))
        self._cached = np.zeros(width * height, dtype=bool)

    def _slots(self, xs: npt.ArrayLike, y: int) -> npt.NDArray[np.intp]:
        xs = np.asarray(xs, dtype=np.intp)
        if self._cached.size == 0:
            raise RuntimeError("Ray cache not allocated. Call allocate_ray_cache() first.")
        if np.any((xs < 0) | (xs >= self._cache_width)) or not 0 <= y < self._cache_height:
            raise IndexError(
                f"Pixel outside the {self._cache_width}x{self._cache_height} ray cache"
            )
        return y * self._cache_width + xs

    def cache_rays(self, ray: Ray, xs: npt.ArrayLike, y: int) -> None:
        """Store the primary rays of several pixels of one row."""
        slots = self._slots(xs, y)
        self._cached_origins[slots] = np.broadcast_to(ray.origin, slots.shape + (3,))
        self._cached_directions[slots] = np.broadcast_to(ray.direction, slots.shape + (3,))
        self._cached[slots] = True

    def get_cached_rays(self, xs: npt.ArrayLike, y: int) -> Ray:
        """Fetch the cached primary rays of several pixels of one row.

        Raises:
            LookupError: If any requested pixel has no cached ray yet.
        """
        slots = self._slots(xs, y)
        if not np.all(self._cached[slots]):
            raise LookupError(f"No cached ray for some pixels of row {y}")
        return Ray(origin=self._cached_origins[slots], direction=self._cached_directions[slots])

    def cache_ray(self, ray: Ray, x: int, y: int) -> None:
        """Store the primary ray of pixel (x, y)."""
        self.cache_rays(ray, x, y)

    def get_cached_ray(self, x: int, y: int) -> Ray:
        """Fetch the cached primary ray of pixel (x, y).

        Raises:
            LookupError: If the pixel has no cached ray yet.
        """
        return self.get_cached_rays(x, y)

    def is_cached(self, x: int, y: int) -> bool:
        """Check whether pixel (x, y) has a cached primary ray."""
        return bool(self._cached[self._slots(x, y)])

    def to_dict(self) -> dict[str, object]:
        """Export the camera parameters (not the cache) as a dictionary."""
        return {
            "position": list(self.position),
            "look_at": list(self.look_at),
            "up": list(self.up),
            "fov": self.fov,
            "aspect_ratio": self.aspect_ratio,
        }
