"""Pytest configuration for spherepath tests.

This module provides shared fixtures for all test modules, including
Taichi initialization (used by the preview window), which must happen once
per session.
"""

import math

import numpy as np
import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture
def rng():
    """A seeded generator so sampling tests are reproducible."""
    return np.random.default_rng(12345)


@pytest.fixture
def camera():
    """Camera at the origin looking down -z with a square image."""
    from spherepath.camera.pinhole import PinholeCamera

    return PinholeCamera(
        position=(0.0, 0.0, 0.0),
        look_at=(0.0, 0.0, -1.0),
        up=(0.0, 1.0, 0.0),
        fov=math.pi / 4.0,
        aspect_ratio=1.0,
    )


@pytest.fixture
def single_sphere_scene(camera):
    """One grey unit sphere five units in front of the camera."""
    from spherepath.scene.manager import Scene

    scene = Scene(camera)
    scene.add_sphere((0.0, 0.0, -5.0), 1.0, color=(0.5, 0.5, 0.5, 1.0))
    return scene


@pytest.fixture
def emissive_enclosure_scene(camera):
    """Camera inside an emissive sphere: every primary ray sees only emission."""
    from spherepath.scene.manager import Scene

    scene = Scene(camera)
    scene.add_sphere(
        (0.0, 0.0, 0.0),
        5.0,
        color=(0.5, 0.5, 0.5, 1.0),
        emission=(0.6, 0.6, 0.6, 1.0),
    )
    return scene


@pytest.fixture
def ceiling_light_scene():
    """A huge emissive ceiling above a huge grey floor, viewed from below the light."""
    from spherepath.camera.pinhole import PinholeCamera
    from spherepath.scene.manager import Scene

    camera = PinholeCamera(
        position=(0.0, 0.0, 0.0),
        look_at=(0.0, -1.0, 0.0),
        up=(0.0, 0.0, -1.0),
        fov=1.2,
        aspect_ratio=1.0,
    )
    scene = Scene(camera)
    scene.add_sphere(
        (0.0, 1001.5, 0.0),
        1000.0,
        color=(0.0, 0.0, 0.0, 1.0),
        emission=(1.0, 1.0, 1.0, 1.0),
    )
    scene.add_sphere(
        (0.0, -1001.0, 0.0),
        1000.0,
        color=(0.5, 0.5, 0.5, 1.0),
        f0=(0.04, 0.04, 0.04, 1.0),
        roughness=0.9,
    )
    return scene
