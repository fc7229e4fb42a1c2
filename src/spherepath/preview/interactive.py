"""Interactive preview window using Taichi GGUI.

This module shows the pixel buffer of a running ProgressiveRenderer in a
Taichi ti.ui.Window. Every frame the 8-bit buffer is converted to floats,
uploaded to a Taichi field and drawn on the window canvas, and a small panel
reports how many samples have been accumulated so far. Closing the window
stops the render workers and waits for them.

Rendering happens on the renderer's own worker threads; the window loop only
reads the buffer, so frames may show rows from two consecutive passes.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spherepath.core.progressive import ProgressiveRenderer, RenderSession
    >>> from spherepath.preview.interactive import InteractivePreview
    >>> from spherepath.scene.sphere_room import create_sphere_room_scene
    >>>
    >>> session = RenderSession()
    >>> renderer = ProgressiveRenderer(create_sphere_room_scene(), session)
    >>> preview = InteractivePreview(session.width, session.height)
    >>> preview.run(renderer)  # Blocks until the window is closed
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

import numpy as np
import taichi as ti

if TYPE_CHECKING:
    from spherepath.core.pixels import PixelBuffer
    from spherepath.core.progressive import ProgressiveRenderer

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Raytracing"


class InteractivePreview:
    """Interactive preview window using Taichi GGUI.

    Attributes:
        width: Window width in pixels.
        height: Window height in pixels.
        display_image: Taichi field storing the display image (RGB float).
    """

    def __init__(self, width: int, height: int, *, title: str = DEFAULT_TITLE) -> None:
        """Initialize the preview.

        Args:
            width: Window width in pixels.
            height: Window height in pixels.
            title: Window title.

        Note:
            Taichi must be initialized before the preview is created. The
            window itself is only opened by run() or the window property.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Window dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self._title = title
        self._sample_count = 0

        self._window: ti.ui.Window | None = None
        self._canvas: ti.ui.Canvas | None = None

        # Shape is (width, height) for Taichi field, RGB values stored as vec3
        self.display_image: ti.MatrixField = ti.Vector.field(
            3, dtype=ti.f32, shape=(width, height)
        )

    def _initialize_window(self) -> None:
        if self._window is not None:
            return
        self._window = ti.ui.Window(name=self._title, res=(self.width, self.height), vsync=True)
        self._canvas = self._window.get_canvas()

    @property
    def window(self) -> ti.ui.Window:
        """Get the Taichi GGUI window, initializing if needed."""
        self._initialize_window()
        assert self._window is not None
        return self._window

    @property
    def canvas(self) -> ti.ui.Canvas:
        """Get the canvas for rendering."""
        self._initialize_window()
        assert self._canvas is not None
        return self._canvas

    @property
    def sample_count(self) -> int:
        """Sample count shown in the last frame."""
        return self._sample_count

    def update_image_from_pixels(self, pixels: PixelBuffer) -> None:
        """Upload an RGBA8 pixel buffer to the display field.

        Buffer row 0 is the bottom of the view, which matches the Taichi
        field's origin, so the conversion is a transpose to (x, y) indexing.
        Alpha is ignored.

        Raises:
            ValueError: If the buffer size doesn't match the window.
        """
        if (pixels.width, pixels.height) != (self.width, self.height):
            raise ValueError(
                f"Pixel buffer is {pixels.width}x{pixels.height}, "
                f"window is {self.width}x{self.height}"
            )
        image = pixels.data[..., :3].astype(np.float32) / 255.0
        self.display_image.from_numpy(np.ascontiguousarray(np.transpose(image, (1, 0, 2))))

    def is_running(self) -> bool:
        """Check if the window is still open."""
        return self.window.running

    def show_frame(self) -> None:
        """Present the display image on the window."""
        self.canvas.set_image(self.display_image)
        self.window.show()

    def _draw_progress_panel(self, sample_count: int, target_samples: int) -> None:
        with self.window.GUI.sub_window("Progress", 0.02, 0.02, 0.22, 0.08) as gui:
            gui.text(f"Samples: {sample_count} / {target_samples}")

    def run(self, renderer: ProgressiveRenderer) -> None:
        """Display a render until the window is closed.

        Starts the renderer if it has not been started. When the window is
        closed the renderer is stopped and joined, so worker errors surface
        here as RuntimeError.
        """
        self._initialize_window()
        if not renderer.started:
            renderer.start()

        try:
            while self.is_running():
                self.update_image_from_pixels(renderer.pixels)
                self._sample_count = renderer.sample_count
                self._draw_progress_panel(self._sample_count, renderer.target_samples)
                self.show_frame()
        finally:
            logger.info("Preview closed at %d samples", renderer.sample_count)
            renderer.stop()
            renderer.join()

    def close(self) -> None:
        """Close the preview window."""
        if self._window is not None:
            self._window.running = False

    @staticmethod
    def is_display_available() -> bool:
        """Check if a display is available for GUI rendering.

        Returns:
            True if a display is available, False for headless environments.
        """
        display = os.environ.get("DISPLAY")
        wayland = os.environ.get("WAYLAND_DISPLAY")

        if os.name == "nt":
            return True

        # On macOS, display is always available if not in SSH
        if os.uname().sysname == "Darwin":
            ssh_connection = os.environ.get("SSH_CONNECTION")
            return not (ssh_connection and not display)

        return bool(display or wayland)
