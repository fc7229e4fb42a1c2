"""Matplotlib-based preview display for rendered images.

This module converts the renderer's RGBA8 pixel buffer into a float image and
shows it with Matplotlib. The stored bytes are already gamma encoded, so no
tone mapping or gamma correction is applied here.

Example:
    >>> from spherepath.preview.display import show_preview
    >>> from spherepath.core.progressive import ProgressiveRenderer
    >>>
    >>> renderer = ProgressiveRenderer(scene, session)
    >>> renderer.render()
    >>> show_preview(renderer)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

if TYPE_CHECKING:
    from spherepath.core.pixels import PixelBuffer
    from spherepath.core.progressive import ProgressiveRenderer


def pixels_to_image(pixels: PixelBuffer) -> npt.NDArray[np.float32]:
    """Convert a pixel buffer to a float RGB image, top row first.

    Args:
        pixels: The buffer to convert. Its row 0 is the bottom of the view.

    Returns:
        Array of shape (height, width, 3) with values in [0, 1], suitable
        for imshow().
    """
    image = pixels.data[..., :3].astype(np.float32) / 255.0
    return np.ascontiguousarray(np.flipud(image))


def show_preview(
    renderer: ProgressiveRenderer,
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (12, 6),
    block: bool = True,
) -> None:
    """Display the current render as a Matplotlib figure.

    Args:
        renderer: The renderer whose pixel buffer is shown.
        title: Custom title (default shows the sample count).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(1, 1, figsize=figsize)

    ax.imshow(pixels_to_image(renderer.pixels))
    ax.axis("off")

    if title is None:
        title = f"Raytracing - {renderer.sample_count} / {renderer.target_samples} SPP"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
