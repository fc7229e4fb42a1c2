"""Materials module for the Cook-Torrance microfacet BRDF.

Every sphere carries the same material parameters (base color, F0,
roughness, metallic), so a single reflectance model shades the whole scene:
    - distribution_ggx: GGX normal distribution (D)
    - geometry_smith: Smith shadowing-masking with Schlick-GGX (G)
    - fresnel_schlick: Schlick Fresnel approximation (F)
"""

from .microfacet import (
    cook_torrance_terms,
    distribution_ggx,
    eval_cook_torrance,
    fresnel_schlick,
    geometry_schlick,
    geometry_smith,
    mix_f0,
)

__all__ = [
    "distribution_ggx",
    "geometry_schlick",
    "geometry_smith",
    "fresnel_schlick",
    "mix_f0",
    "cook_torrance_terms",
    "eval_cook_torrance",
]
