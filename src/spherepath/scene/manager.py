"""Scene container coordinating spheres and the camera.

This module provides the Scene class that owns the ordered sphere sequence and
the single camera of a render. Besides the Sphere objects themselves, the
scene keeps a structure-of-arrays copy of every sphere attribute so the path
integrator can gather shading parameters for a whole batch of hits with one
fancy-indexing operation.

The Scene maintains:
- The sphere sequence (indices are stable, HitRecord.sphere_index refers to them)
- Stacked attribute arrays (centers, radii, colors, emissions, f0s, ...)
- The camera whose primary ray cache is filled during the first pass
- Scene serialization/configuration support

Example:
    >>> import math
    >>> from spherepath.camera.pinhole import PinholeCamera
    >>> from spherepath.scene.manager import Scene
    >>> camera = PinholeCamera((0, 0, 14), (0, 0, -1), (0, 1, 0), math.pi / 6, 2.0)
    >>> scene = Scene(camera)
    >>> scene.add_sphere(center=(0, 0, 0), radius=0.5, color=(1, 0, 0, 1))
    0
"""

import logging
from dataclasses import dataclass, field
from typing import Any

import numpy as np
import numpy.typing as npt

from spherepath.camera.pinhole import PinholeCamera
from spherepath.geometry.sphere import DEFAULT_F0, Color, Sphere

logger = logging.getLogger(__name__)


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        camera: Camera parameters as produced by PinholeCamera.to_dict().
        spheres: List of sphere configurations.
    """

    camera: dict[str, Any] = field(default_factory=dict)
    spheres: list[dict[str, Any]] = field(default_factory=list)


def _color(values: Any, default: Color) -> Color:
    if values is None:
        return default
    values = [float(v) for v in values]
    if len(values) == 3:
        values.append(1.0)
    if len(values) != 4:
        raise ValueError(f"Expected an RGB or RGBA color, got {values}")
    return (values[0], values[1], values[2], values[3])


def _vector(values: Any) -> tuple[float, float, float]:
    values = [float(v) for v in values]
    if len(values) != 3:
        raise ValueError(f"Expected a 3-component vector, got {values}")
    return (values[0], values[1], values[2])


class Scene:
    """An ordered set of spheres viewed through one camera.

    Attributes:
        camera: The camera that generates primary rays.
        spheres: The spheres in insertion order.

    Example:
        >>> scene = Scene(camera)
        >>> light = scene.add_sphere((0, 5, 0), 1.0, color=(0, 0, 0, 1),
        ...                          emission=(1, 1, 1, 1))
        >>> scene.emissions[light]
        array([1., 1., 1., 1.])
    """

    def __init__(self, camera: PinholeCamera, spheres: list[Sphere] | None = None) -> None:
        """Initialize a scene with a camera and optional spheres."""
        self.camera = camera
        self.spheres: list[Sphere] = []
        self._rebuild_arrays()
        for sphere in spheres or []:
            self.append(sphere)

    def _rebuild_arrays(self) -> None:
        spheres = self.spheres
        self.centers: npt.NDArray[np.float64] = np.array(
            [s.center for s in spheres], dtype=np.float64
        ).reshape(-1, 3)
        self.radii: npt.NDArray[np.float64] = np.array([s.radius for s in spheres], dtype=np.float64)
        self.colors: npt.NDArray[np.float64] = np.array(
            [s.color for s in spheres], dtype=np.float64
        ).reshape(-1, 4)
        self.emissions: npt.NDArray[np.float64] = np.array(
            [s.emission for s in spheres], dtype=np.float64
        ).reshape(-1, 4)
        self.f0s: npt.NDArray[np.float64] = np.array(
            [s.f0 for s in spheres], dtype=np.float64
        ).reshape(-1, 4)
        self.roughness: npt.NDArray[np.float64] = np.array(
            [s.roughness for s in spheres], dtype=np.float64
        )
        self.metallic: npt.NDArray[np.float64] = np.array(
            [s.metallic for s in spheres], dtype=np.float64
        )

    # =========================================================================
    # Sphere Management
    # =========================================================================

    def append(self, sphere: Sphere) -> int:
        """Add an existing Sphere to the scene.

        Returns:
            The index of the sphere, as reported in HitRecord.sphere_index.
        """
        self.spheres.append(sphere)
        self._rebuild_arrays()
        index = len(self.spheres) - 1
        logger.debug("Added sphere %d at %s (radius %g)", index, sphere.center, sphere.radius)
        return index

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        color: Color = (1.0, 1.0, 1.0, 1.0),
        emission: Color = (0.0, 0.0, 0.0, 0.0),
        f0: Color = DEFAULT_F0,
        roughness: float = 0.5,
        metallic: float = 0.0,
    ) -> int:
        """Create a sphere and add it to the scene.

        Args:
            center: The center point of the sphere.
            radius: The radius of the sphere (must be positive).
            color: Base color as RGBA.
            emission: Emitted radiance as RGBA.
            f0: Reflectance at normal incidence as RGBA.
            roughness: Microfacet roughness.
            metallic: Metalness.

        Returns:
            The index of the added sphere.

        Raises:
            ValueError: If the radius is not positive or a color is malformed.
        """
        return self.append(
            Sphere(
                center=center,
                radius=radius,
                color=color,
                emission=emission,
                f0=f0,
                roughness=roughness,
                metallic=metallic,
            )
        )

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the scene."""
        return len(self.spheres)

    def __len__(self) -> int:
        return len(self.spheres)

    def __repr__(self) -> str:
        return f"Scene(spheres={len(self.spheres)}, camera={self.camera!r})"

    # =========================================================================
    # Scene Configuration
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a SceneConfig."""
        return SceneConfig(
            camera=self.camera.to_dict(),
            spheres=[
                {
                    "center": list(s.center),
                    "radius": s.radius,
                    "color": list(s.color),
                    "emission": list(s.emission),
                    "f0": list(s.f0),
                    "roughness": s.roughness,
                    "metallic": s.metallic,
                }
                for s in self.spheres
            ],
        )

    @classmethod
    def from_config(cls, config: SceneConfig) -> "Scene":
        """Build a scene from a SceneConfig.

        Missing sphere fields take the Sphere defaults; RGB colors are
        extended with an alpha of 1.

        Raises:
            ValueError: If the configuration contains invalid data.
        """
        try:
            camera_config = config.camera
            camera = PinholeCamera(
                position=_vector(camera_config["position"]),
                look_at=_vector(camera_config["look_at"]),
                up=_vector(camera_config.get("up", [0.0, 1.0, 0.0])),
                fov=float(camera_config["fov"]),
                aspect_ratio=float(camera_config["aspect_ratio"]),
            )
        except KeyError as e:
            raise ValueError(f"Camera configuration is missing {e}") from e

        scene = cls(camera)
        for sphere_config in config.spheres:
            if "center" not in sphere_config or "radius" not in sphere_config:
                raise ValueError(f"Sphere configuration needs center and radius: {sphere_config}")
            scene.add_sphere(
                center=_vector(sphere_config["center"]),
                radius=float(sphere_config["radius"]),
                color=_color(sphere_config.get("color"), (1.0, 1.0, 1.0, 1.0)),
                emission=_color(sphere_config.get("emission"), (0.0, 0.0, 0.0, 0.0)),
                f0=_color(sphere_config.get("f0"), DEFAULT_F0),
                roughness=float(sphere_config.get("roughness", 0.5)),
                metallic=float(sphere_config.get("metallic", 0.0)),
            )
        logger.debug("Loaded scene with %d spheres", len(scene))
        return scene

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization).

        Returns:
            A dictionary representation of the scene.
        """
        config = self.to_config()
        return {"camera": config.camera, "spheres": config.spheres}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Scene":
        """Load a scene from a dictionary.

        Args:
            data: Dictionary with 'camera' and 'spheres' keys.
        """
        return cls.from_config(
            SceneConfig(camera=data.get("camera", {}), spheres=data.get("spheres", []))
        )
