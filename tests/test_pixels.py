"""Tests for the RGBA8 pixel buffer."""

import numpy as np
import pytest


class TestPixelBuffer:
    """Tests for PixelBuffer layout and access."""

    def test_layout(self):
        """Test shape, dtype and initial contents."""
        from spherepath.core.pixels import PixelBuffer

        pixels = PixelBuffer(6, 3)

        assert pixels.data.shape == (3, 6, 4)
        assert pixels.data.dtype == np.uint8
        assert pixels.flat.size == 6 * 3 * 4
        assert not pixels.data.any()

    @pytest.mark.parametrize("width, height", [(0, 4), (4, 0), (-1, 2)])
    def test_rejects_invalid_dimensions(self, width, height):
        """Test that dimensions must be positive."""
        from spherepath.core.pixels import PixelBuffer

        with pytest.raises(ValueError, match="must be positive"):
            PixelBuffer(width, height)

    def test_flat_offset(self):
        """Test that pixel (x, y) lives at 4 * (width * y + x) in the flat view."""
        from spherepath.core.pixels import PixelBuffer

        pixels = PixelBuffer(5, 4)
        pixels.set_at_bytes(3, 2, 10, 20, 30, 40)
        offset = pixels.offset(3, 2)

        assert offset == 4 * (5 * 2 + 3)
        np.testing.assert_array_equal(pixels.flat[offset : offset + 4], [10, 20, 30, 40])

    def test_flat_is_a_view(self):
        """Test that writes through the flat view reach the buffer."""
        from spherepath.core.pixels import PixelBuffer

        pixels = PixelBuffer(2, 2)
        pixels.flat[pixels.offset(1, 1)] = 99

        assert pixels.data[1, 1, 0] == 99

    def test_set_at_bytes_default_alpha(self):
        """Test that alpha defaults to opaque."""
        from spherepath.core.pixels import PixelBuffer

        pixels = PixelBuffer(2, 2)
        pixels.set_at_bytes(0, 0, 1, 2, 3)

        np.testing.assert_array_equal(pixels.data[0, 0], [1, 2, 3, 255])

    def test_set_and_get_float_color(self):
        """Test float writes are scaled, rounded and read back divided by 255."""
        from spherepath.core.pixels import PixelBuffer

        pixels = PixelBuffer(2, 2)
        pixels.set_at(1, 0, (1.0, 0.5, 0.0, 1.0))

        np.testing.assert_array_equal(pixels.data[0, 1], [255, 128, 0, 255])
        np.testing.assert_allclose(pixels.get_at(1, 0), [1.0, 128 / 255, 0.0, 1.0])

    def test_out_of_range_colors_clamp(self):
        """Test that colors outside [0, 1] and NaN clamp into the byte range."""
        from spherepath.core.pixels import PixelBuffer

        pixels = PixelBuffer(1, 1)
        pixels.set_at(0, 0, (2.0, -1.0, np.nan, 0.5))

        np.testing.assert_array_equal(pixels.data[0, 0], [255, 0, 0, 128])

    def test_strided_rows(self):
        """Test reading and writing every other pixel of a row."""
        from spherepath.core.pixels import PixelBuffer

        pixels = PixelBuffer(5, 2)
        colors = np.array([[1.0, 0, 0, 1], [0, 1.0, 0, 1], [0, 0, 1.0, 1]])

        pixels.set_row(1, colors, start=0, stride=2)

        np.testing.assert_array_equal(pixels.data[1, [0, 2, 4], :3], (colors[:, :3] * 255))
        assert not pixels.data[1, [1, 3]].any()
        assert not pixels.data[0].any()
        np.testing.assert_allclose(pixels.get_row(1, 0, 2), colors)
        assert pixels.get_row(1, 1, 2).shape == (2, 4)

    def test_snapshot_is_a_copy(self):
        """Test that snapshots do not follow later writes."""
        from spherepath.core.pixels import PixelBuffer

        pixels = PixelBuffer(2, 2)
        snapshot = pixels.snapshot()
        pixels.set_at_bytes(0, 0, 255, 255, 255)

        assert not snapshot.any()

    def test_clear(self):
        """Test that clear zeroes every byte."""
        from spherepath.core.pixels import PixelBuffer

        pixels = PixelBuffer(3, 3)
        pixels.data[...] = 17
        pixels.clear()

        assert not pixels.data.any()
