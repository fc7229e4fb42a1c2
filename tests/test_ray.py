"""Unit tests for the Ray dataclass and vector utilities.

Tests cover:
- Ray construction, immutability and evaluation
- Vector helpers on single vectors and batches
- Hemisphere sampling
"""

import numpy as np
import pytest


class TestRay:
    """Tests for Ray construction and ray_at."""

    def test_make_ray(self):
        """Test make_ray stores origin and direction as float arrays."""
        from spherepath.core.ray import make_ray

        ray = make_ray((1, 2, 3), (0, 0, -1))

        assert ray.origin.dtype == np.float64
        np.testing.assert_allclose(ray.origin, [1.0, 2.0, 3.0])
        np.testing.assert_allclose(ray.direction, [0.0, 0.0, -1.0])
        assert ray.batch_shape == ()

    def test_ray_is_immutable(self):
        """Test that the ray arrays cannot be modified in place."""
        from spherepath.core.ray import make_ray

        ray = make_ray((0, 0, 0), (1, 0, 0))

        with pytest.raises(ValueError):
            ray.origin[0] = 5.0

    def test_ray_copies_input(self):
        """Test that later changes to the input array do not affect the ray."""
        from spherepath.core.ray import make_ray

        origin = np.array([0.0, 0.0, 0.0])
        ray = make_ray(origin, (1, 0, 0))
        origin[0] = 9.0

        assert ray.origin[0] == 0.0

    def test_ray_rejects_wrong_component_count(self):
        """Test that vectors without 3 components are rejected."""
        from spherepath.core.ray import make_ray

        with pytest.raises(ValueError, match="trailing axis of 3"):
            make_ray((0, 0), (1, 0, 0))

    def test_batch_shape(self):
        """Test the batch shape of a ray batch with a shared origin."""
        from spherepath.core.ray import make_ray

        ray = make_ray((0, 0, 0), np.ones((5, 3)))

        assert ray.batch_shape == (5,)

    def test_ray_at(self):
        """Test evaluating a point along the ray."""
        from spherepath.core.ray import make_ray, ray_at

        ray = make_ray((1, 0, 0), (0, 2, 0))

        np.testing.assert_allclose(ray_at(ray, 0.0), [1.0, 0.0, 0.0])
        np.testing.assert_allclose(ray_at(ray, 1.5), [1.0, 3.0, 0.0])

    def test_ray_at_batch(self):
        """Test per-ray parameters on a batch."""
        from spherepath.core.ray import make_ray, ray_at

        ray = make_ray(np.zeros((3, 3)), np.tile([0.0, 0.0, -1.0], (3, 1)))
        points = ray_at(ray, np.array([1.0, 2.0, 3.0]))

        np.testing.assert_allclose(points[:, 2], [-1.0, -2.0, -3.0])


class TestVectorUtilities:
    """Tests for the vector helpers."""

    def test_dot_single_and_batch(self):
        """Test dot over the trailing axis."""
        from spherepath.core.ray import dot

        assert dot((1, 2, 3), (4, 5, 6)) == pytest.approx(32.0)
        np.testing.assert_allclose(dot(np.eye(3), (1, 2, 3)), [1.0, 2.0, 3.0])

    def test_cross(self):
        """Test the right-handed cross product."""
        from spherepath.core.ray import cross

        np.testing.assert_allclose(cross((1, 0, 0), (0, 1, 0)), [0.0, 0.0, 1.0])
        np.testing.assert_allclose(cross((0, 0, -1), (0, 1, 0)), [1.0, 0.0, 0.0])

    def test_length(self):
        """Test length and squared length."""
        from spherepath.core.ray import length, length_squared

        assert length_squared((3, 4, 0)) == pytest.approx(25.0)
        assert length((3, 4, 0)) == pytest.approx(5.0)

    def test_normalize(self):
        """Test that normalize returns unit vectors."""
        from spherepath.core.ray import length, normalize

        vectors = np.array([[3.0, 4.0, 0.0], [0.0, 0.0, -7.0]])

        np.testing.assert_allclose(length(normalize(vectors)), 1.0)
        np.testing.assert_allclose(normalize(vectors)[0], [0.6, 0.8, 0.0])

    def test_normalize_zero_vector(self):
        """Test that a zero vector normalizes to zero instead of NaN."""
        from spherepath.core.ray import normalize

        result = normalize((0.0, 0.0, 0.0))

        assert np.all(np.isfinite(result))
        np.testing.assert_allclose(result, 0.0)

    def test_vec3(self):
        """Test the vec3 constructor."""
        from spherepath.core.ray import vec3

        v = vec3(1, 2, 3)

        assert v.shape == (3,)
        assert v.dtype == np.float64


class TestRandomOnHemisphere:
    """Tests for hemisphere sampling."""

    def test_samples_are_unit_length(self, rng):
        """Test that every sample is normalized."""
        from spherepath.core.ray import length, random_on_hemisphere

        normals = np.tile([0.0, 1.0, 0.0], (1000, 1))
        samples = random_on_hemisphere(normals, rng)

        np.testing.assert_allclose(length(samples), 1.0, atol=1e-12)

    def test_samples_lie_in_hemisphere(self, rng):
        """Test that every sample has a non-negative dot with its normal."""
        from spherepath.core.ray import dot, normalize, random_on_hemisphere

        normals = normalize(rng.normal(size=(2000, 3)))
        samples = random_on_hemisphere(normals, rng)

        assert np.all(dot(samples, normals) >= 0.0)

    def test_single_normal_shape(self, rng):
        """Test that a single normal yields a single sample."""
        from spherepath.core.ray import random_on_hemisphere

        sample = random_on_hemisphere((0.0, 0.0, 1.0), rng)

        assert sample.shape == (3,)
        assert sample[2] >= 0.0

    def test_samples_cover_hemisphere(self, rng):
        """Test that samples spread over the hemisphere rather than clustering."""
        from spherepath.core.ray import random_on_hemisphere

        normals = np.tile([0.0, 0.0, 1.0], (4000, 1))
        samples = random_on_hemisphere(normals, rng)

        # Tangential components average out; the normal component is positive
        assert abs(samples[:, 0].mean()) < 0.05
        assert abs(samples[:, 1].mean()) < 0.05
        assert 0.3 < samples[:, 2].mean() < 0.7

    def test_seeded_generators_repeat(self):
        """Test that equal seeds give equal samples."""
        from spherepath.core.ray import random_on_hemisphere

        normals = np.tile([1.0, 0.0, 0.0], (50, 1))
        a = random_on_hemisphere(normals, np.random.default_rng(7))
        b = random_on_hemisphere(normals, np.random.default_rng(7))

        np.testing.assert_array_equal(a, b)
