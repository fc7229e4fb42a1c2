"""8-bit RGBA pixel buffer shared by the render workers and the display.

The buffer is a uint8 array of shape (height, width, 4). Row 0 is the bottom
of the view (pixel (x, y) is seen through image coordinates u = x / width,
v = y / height), and the flat view addresses pixel (x, y) at offset
4 * (width * y + x).

Colors cross the buffer boundary as floats in [0, 1]: reads divide by 255,
writes scale by 255, clamp to [0, 255] and round to the nearest integer.

No locking is done. Every pixel is expected to have a single writer, and
readers tolerate seeing a frame where some pixels are one pass ahead of
others.

Example:
    >>> from spherepath.core.pixels import PixelBuffer
    >>> pixels = PixelBuffer(4, 2)
    >>> pixels.set_at(1, 0, (1.0, 0.5, 0.0, 1.0))
    >>> pixels.data[0, 1]
    array([255, 128,   0, 255], dtype=uint8)
"""

import numpy as np
import numpy.typing as npt


class PixelBuffer:
    """A fixed-size RGBA8 image.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
    """

    def __init__(self, width: int, height: int) -> None:
        """Allocate a black, fully transparent buffer.

        Raises:
            ValueError: If either dimension is not positive.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Pixel buffer dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self._data = np.zeros((height, width, 4), dtype=np.uint8)

    @property
    def data(self) -> npt.NDArray[np.uint8]:
        """The live (height, width, 4) array, updated in place."""
        return self._data

    @property
    def flat(self) -> npt.NDArray[np.uint8]:
        """The live buffer as a flat array of width * height * 4 bytes."""
        return self._data.reshape(-1)

    def offset(self, x: int, y: int) -> int:
        """Byte offset of pixel (x, y) in the flat view."""
        return 4 * (self.width * y + x)

    @staticmethod
    def quantize(color: npt.ArrayLike) -> npt.NDArray[np.uint8]:
        """Convert float colors in [0, 1] to bytes, clamping out-of-range values."""
        scaled = np.clip(255.0 * np.asarray(color, dtype=np.float64), 0.0, 255.0)
        return np.rint(np.nan_to_num(scaled)).astype(np.uint8)

    # =========================================================================
    # Single Pixel Access
    # =========================================================================

    def get_at(self, x: int, y: int) -> npt.NDArray[np.float64]:
        """Read pixel (x, y) as RGBA floats in [0, 1]."""
        return self._data[y, x].astype(np.float64) / 255.0

    def set_at(self, x: int, y: int, color: npt.ArrayLike) -> None:
        """Write an RGBA float color to pixel (x, y)."""
        self._data[y, x] = self.quantize(color)

    def set_at_bytes(self, x: int, y: int, r: int, g: int, b: int, a: int = 255) -> None:
        """Write raw byte channel values to pixel (x, y)."""
        self._data[y, x] = (r, g, b, a)

    # =========================================================================
    # Strided Row Access
    # =========================================================================

    def get_row(self, y: int, start: int = 0, stride: int = 1) -> npt.NDArray[np.float64]:
        """Read the pixels x = start, start + stride, ... of row y.

        Returns:
            RGBA floats in [0, 1], shape (n, 4).
        """
        return self._data[y, start::stride].astype(np.float64) / 255.0

    def set_row(self, y: int, colors: npt.ArrayLike, start: int = 0, stride: int = 1) -> None:
        """Write RGBA float colors to the pixels x = start, start + stride, ... of row y."""
        self._data[y, start::stride] = self.quantize(colors)

    def snapshot(self) -> npt.NDArray[np.uint8]:
        """Return a copy of the current buffer contents."""
        return self._data.copy()

    def clear(self) -> None:
        """Reset every byte to zero."""
        self._data.fill(0)

    def __repr__(self) -> str:
        return f"PixelBuffer(width={self.width}, height={self.height})"
