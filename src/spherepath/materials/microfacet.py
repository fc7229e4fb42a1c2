"""Cook-Torrance microfacet reflectance model.

This module implements the physically based BRDF used to shade every sphere:
a Lambertian diffuse lobe blended with a Cook-Torrance specular lobe built
from three factors:

    D: GGX (Trowbridge-Reitz) normal distribution
        D = a^2 / (pi * ((n.h)^2 * (a^2 - 1) + 1)^2)
    G: Smith geometry term with the Schlick-GGX approximation
        G1(n, x, k) = (n.x) / ((n.x) * (1 - k) + k), k = a^2 / 2
    F: Schlick Fresnel approximation, evaluated per RGBA channel
        F = F0 + (1 - F0) * (1 - h.v)^5

The specular term is ct = D * F * G / (4 * (v.n) * (l.n)) and the diffuse
weight is kd = (1 - ct) * (1 - metallic). The reflectance at normal incidence
is blended toward the base color for metals: F0' = mix(F0, color, metallic).
Roughness is used directly as the GGX alpha.

All functions accept batches: vectors have shape (..., 3), colors (..., 4)
and scalar parameters broadcast over the leading axes.

Example:
    >>> from spherepath.materials.microfacet import eval_cook_torrance
    >>> weight = eval_cook_torrance(
    ...     n=(0, 1, 0), v=(0, 1, 0), l=(0, 1, 0),
    ...     color=(1, 0, 0, 1), f0=(0.04, 0.04, 0.04, 1), roughness=0.5, metallic=0.0,
    ... )
"""

import math

import numpy as np
import numpy.typing as npt

from spherepath.core.ray import dot, normalize

FloatArray = npt.NDArray[np.float64]


def _scalar(values: npt.ArrayLike) -> FloatArray:
    return np.asarray(values, dtype=np.float64)


def _channel(values: npt.ArrayLike) -> FloatArray:
    # Broadcast a per-ray scalar across the RGBA axis
    return _scalar(values)[..., np.newaxis]


def distribution_ggx(n: npt.ArrayLike, h: npt.ArrayLike, alpha: npt.ArrayLike) -> FloatArray:
    """GGX normal distribution function.

    Args:
        n: Surface normal(s).
        h: Half vector(s) between view and light directions.
        alpha: Roughness used as the GGX alpha.

    Returns:
        The microfacet density D, one value per vector pair.
    """
    a2 = _scalar(alpha) ** 2
    n_dot_h = dot(n, h)
    denom = math.pi * (n_dot_h * n_dot_h * (a2 - 1.0) + 1.0) ** 2
    with np.errstate(divide="ignore", invalid="ignore"):
        return a2 / denom


def geometry_schlick(n: npt.ArrayLike, x: npt.ArrayLike, k: npt.ArrayLike) -> FloatArray:
    """Schlick-GGX masking term for one direction."""
    n_dot_x = dot(n, x)
    with np.errstate(divide="ignore", invalid="ignore"):
        return n_dot_x / (n_dot_x * (1.0 - _scalar(k)) + _scalar(k))


def geometry_smith(
    n: npt.ArrayLike, v: npt.ArrayLike, l: npt.ArrayLike, alpha: npt.ArrayLike
) -> FloatArray:
    """Smith shadowing-masking term for the view and light directions.

    Uses k = alpha^2 / 2 for both directions.
    """
    k = _scalar(alpha) ** 2 / 2.0
    return geometry_schlick(n, v, k) * geometry_schlick(n, l, k)


def fresnel_schlick(h: npt.ArrayLike, v: npt.ArrayLike, f0: npt.ArrayLike) -> FloatArray:
    """Schlick's Fresnel approximation per RGBA channel.

    Args:
        h: Half vector(s).
        v: View direction(s).
        f0: Reflectance at normal incidence, shape (..., 4).

    Returns:
        The Fresnel reflectance with shape (..., 4).
    """
    f0 = _scalar(f0)
    return f0 + (1.0 - f0) * _channel((1.0 - dot(h, v)) ** 5)


def mix_f0(f0: npt.ArrayLike, color: npt.ArrayLike, metallic: npt.ArrayLike) -> FloatArray:
    """Blend the dielectric F0 toward the base color by metalness."""
    f0 = _scalar(f0)
    metallic = _channel(metallic)
    return f0 * (1.0 - metallic) + _scalar(color) * metallic


def cook_torrance_terms(
    n: npt.ArrayLike,
    v: npt.ArrayLike,
    l: npt.ArrayLike,
    color: npt.ArrayLike,
    f0: npt.ArrayLike,
    roughness: npt.ArrayLike,
    metallic: npt.ArrayLike,
) -> tuple[FloatArray, FloatArray, FloatArray]:
    """Evaluate the separate lobes of the Cook-Torrance BRDF.

    The terms are returned unguarded: grazing or back-facing configurations
    (v.n or l.n at or below zero) can produce infinite or NaN values, which
    the path integrator discards.

    Args:
        n: Surface normal(s), unit length.
        v: Direction(s) toward the viewer, unit length.
        l: Direction(s) toward the light, unit length.
        color: Base color, shape (..., 4).
        f0: Reflectance at normal incidence, shape (..., 4).
        roughness: Microfacet roughness (GGX alpha).
        metallic: Metalness in [0, 1].

    Returns:
        A tuple (kd, diffuse, specular) of (..., 4) arrays where kd is the
        diffuse weight, diffuse is color / pi and specular is ct.
    """
    h = normalize(_scalar(v) + _scalar(l))
    fresnel = fresnel_schlick(h, v, mix_f0(f0, color, metallic))

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        dfg = _channel(distribution_ggx(n, h, roughness) * geometry_smith(n, v, l, roughness))
        dfg = dfg * fresnel
        specular = dfg / _channel(4.0 * dot(v, n) * dot(l, n))
        kd = (1.0 - specular) * (1.0 - _channel(metallic))

    diffuse = _scalar(color) / math.pi
    return kd, np.broadcast_to(diffuse, specular.shape), specular


def eval_cook_torrance(
    n: npt.ArrayLike,
    v: npt.ArrayLike,
    l: npt.ArrayLike,
    color: npt.ArrayLike,
    f0: npt.ArrayLike,
    roughness: npt.ArrayLike,
    metallic: npt.ArrayLike,
) -> FloatArray:
    """Evaluate the Cook-Torrance BRDF weight kd * color / pi + ct.

    The weight multiplies incoming radiance and the cosine n.l in the
    rendering estimator.

    Returns:
        The BRDF value per RGBA channel, shape (..., 4).
    """
    kd, diffuse, specular = cook_torrance_terms(n, v, l, color, f0, roughness, metallic)
    with np.errstate(invalid="ignore", over="ignore"):
        return kd * diffuse + specular
