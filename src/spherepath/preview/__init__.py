"""Preview module for displaying the pixel buffer.

Components:
    display: Matplotlib-based static preview
    interactive: Taichi GGUI-based live window

Example:
    >>> from spherepath.preview import show_preview
    >>> renderer.render()
    >>> show_preview(renderer)

For the live window:
    >>> from spherepath.preview import InteractivePreview
    >>> InteractivePreview(renderer.width, renderer.height).run(renderer)
"""

from .display import pixels_to_image, show_preview
from .interactive import InteractivePreview

__all__ = ["InteractivePreview", "pixels_to_image", "show_preview"]
