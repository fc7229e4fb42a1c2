"""Progressive CPU path tracer for scenes made of spheres.

This package renders spheres shaded with a Cook-Torrance microfacet model,
accumulating samples from several worker threads into an 8-bit RGBA buffer
that a Taichi GGUI window displays while the render refines:
- Vectorized NumPy ray-sphere intersection and path integration
- GGX / Smith / Schlick microfacet reflectance
- Interleaved-column worker threads with a running average per pixel
- Live preview window and Matplotlib snapshot

Subpackages:
    core: Ray and vector utilities, the integrator, pixel buffer and render loop
    geometry: The sphere primitive and its intersection routine
    materials: The Cook-Torrance BRDF
    scene: Scene container, closest-hit queries and the default scene
    camera: Pinhole camera with a per-pixel primary ray cache
    preview: Live window and static preview
"""

__version__ = "0.1.0"
