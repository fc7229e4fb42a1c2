"""Ray data structure and vector utilities for CPU path tracing.

This module provides the fundamental Ray dataclass and the vector helpers used
throughout the renderer. Every helper operates on NumPy arrays whose trailing
axis holds the vector components, so the same call works on a single vector of
shape (3,) or on a batch of shape (N, 3).

Example:
    >>> import numpy as np
    >>> from spherepath.core.ray import make_ray, ray_at
    >>> ray = make_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
    >>> ray_at(ray, 5.0)  # Point 5 units along the ray
    array([ 0.,  0., -5.])
"""

from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

# Float arrays with a trailing vector axis
Vec3 = npt.NDArray[np.float64]

# Samples below this squared length are redrawn by the hemisphere sampler
_MIN_SAMPLE_LENGTH_SQUARED = 1e-12


def _frozen(values: npt.ArrayLike) -> Vec3:
    array = np.array(values, dtype=np.float64)
    array.setflags(write=False)
    return array


@dataclass(frozen=True)
class Ray:
    """A ray (or a batch of rays) with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray, shape (..., 3).
        direction: The direction vector of the ray, shape (..., 3). It is not
            required to be normalized; every consumer either normalizes it or
            only uses ratios of it.
    """

    origin: Vec3
    direction: Vec3

    def __post_init__(self) -> None:
        object.__setattr__(self, "origin", _frozen(self.origin))
        object.__setattr__(self, "direction", _frozen(self.direction))
        if self.origin.shape[-1:] != (3,) or self.direction.shape[-1:] != (3,):
            raise ValueError(
                f"Ray components need a trailing axis of 3, got "
                f"{self.origin.shape} and {self.direction.shape}"
            )

    @property
    def batch_shape(self) -> tuple[int, ...]:
        """Leading shape shared by origin and direction after broadcasting."""
        return np.broadcast_shapes(self.origin.shape, self.direction.shape)[:-1]


def make_ray(origin: npt.ArrayLike, direction: npt.ArrayLike) -> Ray:
    """Create a ray from origin and direction.

    Args:
        origin: The starting point of the ray.
        direction: The direction vector (need not be normalized).

    Returns:
        A new, read-only Ray instance.
    """
    return Ray(origin=origin, direction=direction)


def ray_at(ray: Ray, t: npt.ArrayLike) -> Vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value, a scalar or one value per ray in the batch.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + np.asarray(t, dtype=np.float64)[..., np.newaxis] * ray.direction


# =============================================================================
# Vector Utility Functions
# =============================================================================


def vec3(x: float, y: float, z: float) -> Vec3:
    """Build a 3-component float vector."""
    return np.array([x, y, z], dtype=np.float64)


def dot(a: npt.ArrayLike, b: npt.ArrayLike) -> npt.NDArray[np.float64]:
    """Compute the dot product over the trailing axis.

    Args:
        a: First vector or batch of vectors.
        b: Second vector or batch of vectors.

    Returns:
        The dot product a . b with the trailing axis removed.
    """
    return np.sum(np.asarray(a, dtype=np.float64) * np.asarray(b, dtype=np.float64), axis=-1)


def cross(a: npt.ArrayLike, b: npt.ArrayLike) -> Vec3:
    """Compute the cross product a x b."""
    return np.cross(np.asarray(a, dtype=np.float64), np.asarray(b, dtype=np.float64))


def length_squared(v: npt.ArrayLike) -> npt.NDArray[np.float64]:
    """Compute the squared length of a vector.

    Cheaper than length() when only comparing magnitudes.
    """
    return dot(v, v)


def length(v: npt.ArrayLike) -> npt.NDArray[np.float64]:
    """Compute the Euclidean length of a vector."""
    return np.sqrt(length_squared(v))


def normalize(v: npt.ArrayLike) -> Vec3:
    """Normalize a vector to unit length.

    Args:
        v: The input vector or batch of vectors.

    Returns:
        Unit vectors in the same direction as v. Zero-length inputs map to
        zero vectors instead of NaN.
    """
    v = np.asarray(v, dtype=np.float64)
    norm = length(v)[..., np.newaxis]
    safe = np.where(norm > 0.0, norm, 1.0)
    return np.where(norm > 0.0, v / safe, 0.0)


# =============================================================================
# Random Sampling Utilities for Monte Carlo
# =============================================================================


def random_on_hemisphere(normal: npt.ArrayLike, rng: np.random.Generator) -> Vec3:
    """Generate random unit vectors on the hemisphere defined by a normal.

    Draws a uniform vector in the cube [-1, 1]^3 and redraws until its dot
    product with the normal is non-negative, then normalizes it. The result
    is not cosine-weighted.

    Args:
        normal: The surface normal(s) defining the hemisphere, shape (..., 3).
        rng: The generator owned by the calling worker.

    Returns:
        Unit vectors with the same shape as normal, each satisfying
        dot(direction, normal) >= 0.
    """
    normal = np.asarray(normal, dtype=np.float64)
    flat_normal = normal.reshape(-1, 3)
    direction = rng.uniform(-1.0, 1.0, size=flat_normal.shape)

    pending = (dot(direction, flat_normal) < 0.0) | (
        length_squared(direction) < _MIN_SAMPLE_LENGTH_SQUARED
    )
    while np.any(pending):
        direction[pending] = rng.uniform(-1.0, 1.0, size=(int(np.count_nonzero(pending)), 3))
        pending[pending] = (dot(direction[pending], flat_normal[pending]) < 0.0) | (
            length_squared(direction[pending]) < _MIN_SAMPLE_LENGTH_SQUARED
        )

    return normalize(direction).reshape(normal.shape)
