"""Tests for the path tracing integrator.

Tests cover:
- Escaped rays and depth exhaustion return black
- Emission is returned unchanged when nothing else contributes
- Bounce ray construction
- Radiance sanitization
- Light transport sanity: points under a light are brighter
"""

import numpy as np
import pytest


class TestTermination:
    """Tests for paths that end immediately."""

    def test_miss_returns_black(self, single_sphere_scene, rng):
        """Test that a ray escaping the scene carries no radiance."""
        from spherepath.core.integrator import radiance
        from spherepath.core.ray import make_ray

        result = radiance(make_ray((0, 0, 0), (0, 1, 0)), single_sphere_scene, rng)

        assert result.shape == (4,)
        np.testing.assert_array_equal(result, 0.0)

    def test_depth_limit_returns_black(self, emissive_enclosure_scene, rng):
        """Test that depth >= max_depth returns black even when facing a light."""
        from spherepath.core.integrator import MAX_DEPTH, radiance
        from spherepath.core.ray import make_ray

        ray = make_ray((0, 0, 0), (0, 0, -1))

        np.testing.assert_array_equal(
            radiance(ray, emissive_enclosure_scene, rng, depth=MAX_DEPTH), 0.0
        )
        np.testing.assert_array_equal(
            radiance(ray, emissive_enclosure_scene, rng, depth=2, max_depth=2), 0.0
        )

    def test_max_depth_zero_is_black(self, emissive_enclosure_scene, rng):
        """Test that a zero path length renders nothing."""
        from spherepath.core.integrator import radiance
        from spherepath.core.ray import make_ray

        result = radiance(make_ray((0, 0, 0), (1, 0, 0)), emissive_enclosure_scene, rng, max_depth=0)

        np.testing.assert_array_equal(result, 0.0)


class TestEmission:
    """Tests for emitted radiance."""

    def test_inside_emitter_returns_emission(self, emissive_enclosure_scene, rng):
        """Test that every ray from inside an emitter returns exactly its emission.

        The bounce leaves through the outside of the sphere and escapes, so
        only the emission of the first hit contributes.
        """
        from spherepath.core.integrator import radiance
        from spherepath.core.ray import make_ray, normalize

        directions = normalize(rng.normal(size=(64, 3)))
        result = radiance(make_ray((0, 0, 0), directions), emissive_enclosure_scene, rng)

        assert result.shape == (64, 4)
        np.testing.assert_allclose(result, np.tile([0.6, 0.6, 0.6, 1.0], (64, 1)))

    def test_emitter_seen_from_outside(self, camera, rng):
        """Test that a lone emitter seen from outside returns its emission."""
        from spherepath.core.integrator import radiance
        from spherepath.core.ray import make_ray
        from spherepath.scene.manager import Scene

        scene = Scene(camera)
        scene.add_sphere((0, 0, -5), 1.0, color=(0, 0, 0, 1), emission=(2.0, 1.0, 0.5, 1.0))

        result = radiance(make_ray((0, 0, 0), (0, 0, -1)), scene, rng)

        np.testing.assert_allclose(result, [2.0, 1.0, 0.5, 1.0])

    def test_batch_shape_is_preserved(self, single_sphere_scene, rng):
        """Test that a 2-D batch of rays gives a 2-D batch of colors."""
        from spherepath.core.integrator import radiance

        u, v = np.meshgrid(np.linspace(0, 1, 5), np.linspace(0, 1, 3))
        ray = single_sphere_scene.camera.get_ray(u, v)

        result = radiance(ray, single_sphere_scene, rng)

        assert result.shape == (3, 5, 4)


class TestScatterRay:
    """Tests for bounce ray construction."""

    def test_origin_offset_along_normal(self, rng):
        """Test that bounce rays start RAY_EPSILON above the surface."""
        from spherepath.core.integrator import RAY_EPSILON, scatter_ray

        point = np.array([[1.0, 2.0, 3.0]])
        normal = np.array([[0.0, 1.0, 0.0]])

        bounce = scatter_ray(point, normal, rng)

        np.testing.assert_allclose(bounce.origin, [[1.0, 2.0 + RAY_EPSILON, 3.0]])

    def test_direction_in_hemisphere(self, rng):
        """Test that bounce directions are unit vectors above the surface."""
        from spherepath.core.integrator import scatter_ray
        from spherepath.core.ray import dot, length

        normal = np.tile([0.0, 0.0, -1.0], (500, 1))
        bounce = scatter_ray(np.zeros((500, 3)), normal, rng)

        assert np.all(dot(bounce.direction, normal) >= 0.0)
        np.testing.assert_allclose(length(bounce.direction), 1.0)


class TestSanitizeRadiance:
    """Tests for radiance sanitization."""

    def test_non_finite_and_negative_become_zero(self):
        """Test that NaN, infinities and negatives are zeroed."""
        from spherepath.core.integrator import sanitize_radiance

        values = np.array([np.nan, np.inf, -np.inf, -0.5, 0.25])

        np.testing.assert_array_equal(sanitize_radiance(values), [0.0, 0.0, 0.0, 0.0, 0.25])

    def test_valid_values_unchanged(self):
        """Test that finite non-negative values pass through."""
        from spherepath.core.integrator import sanitize_radiance

        values = np.array([[0.0, 1.0, 7.5, 1.0]])

        np.testing.assert_array_equal(sanitize_radiance(values), values)


class TestLightTransport:
    """End-to-end checks of the radiance estimate."""

    def test_results_are_finite_and_non_negative(self, rng):
        """Test every estimate in the sphere room is usable."""
        from spherepath.core.integrator import radiance
        from spherepath.scene.sphere_room import create_sphere_room_scene

        scene = create_sphere_room_scene(40, 20)
        u, v = np.meshgrid(np.linspace(0, 1, 40), np.linspace(0, 1, 20))

        result = radiance(scene.camera.get_ray(u, v), scene, rng)

        assert np.all(np.isfinite(result))
        assert np.all(result >= 0.0)

    def test_floor_brighter_under_the_light(self, ceiling_light_scene, rng):
        """Test that the floor below the ceiling light receives more light.

        The point straight below the light sees the ceiling across its whole
        upper hemisphere. A far away floor point is tilted and sees the
        ceiling only at grazing angles.
        """
        from spherepath.core.integrator import radiance
        from spherepath.core.ray import make_ray

        count = 4000
        below = make_ray(np.zeros((count, 3)), np.tile([0.0, -1.0, 0.0], (count, 1)))

        far_point = np.array([800.0, -401.0, 0.0])
        far_normal = np.array([0.8, 0.6, 0.0])
        far = make_ray(
            np.tile(far_point + far_normal, (count, 1)), np.tile(-far_normal, (count, 1))
        )

        near_mean = radiance(below, ceiling_light_scene, rng)[:, :3].mean()
        far_mean = radiance(far, ceiling_light_scene, rng)[:, :3].mean()

        assert near_mean > 0.0
        assert near_mean > far_mean

    @pytest.mark.parametrize("max_depth", [1, 2])
    def test_shallow_paths_only_see_direct_emission(self, ceiling_light_scene, rng, max_depth):
        """Test that one bounce from a non-emitter cannot reach the light at depth 1."""
        from spherepath.core.integrator import radiance
        from spherepath.core.ray import make_ray

        floor_ray = make_ray(np.zeros((200, 3)), np.tile([0.0, -1.0, 0.0], (200, 1)))
        result = radiance(floor_ray, ceiling_light_scene, rng, max_depth=max_depth)

        if max_depth == 1:
            np.testing.assert_array_equal(result, 0.0)
        else:
            assert result[:, :3].mean() > 0.0
