"""Tests for png2flic.decoder module."""

import logging

import numpy as np
import pytest
from PIL import Image

from png2flic.decoder import PngDecoder, read_rgba_palette
from png2flic.error_handling import DecodeError


class TestPngDecoder:
    """Tests for PngDecoder.decode."""

    @pytest.mark.fast
    def test_decodes_indices_and_palette(self, make_png):
        palette = [(255, 0, 0), (0, 255, 0), (0, 0, 255)]
        pixels = [0, 1, 2, 1, 0, 2, 2, 1]
        path = make_png("rgb.png", 4, 2, palette, pixels)

        decoded = PngDecoder().decode(path)

        assert decoded.source == path
        assert (decoded.width, decoded.height) == (4, 2)
        assert decoded.pixels.dtype == np.uint8
        np.testing.assert_array_equal(decoded.pixels, pixels)
        assert decoded.palette_size == 3
        np.testing.assert_array_equal(
            decoded.palette,
            [(255, 0, 0, 255), (0, 255, 0, 255), (0, 0, 255, 255)],
        )

    @pytest.mark.fast
    def test_transparency_becomes_alpha(self, make_png):
        palette = [(255, 0, 0), (0, 255, 0)]
        path = make_png("alpha.png", 2, 2, palette, [0, 1, 1, 0], transparency=bytes([255, 128]))

        decoded = PngDecoder().decode(path)

        np.testing.assert_array_equal(decoded.palette[:, 3], [255, 128])

    @pytest.mark.fast
    def test_rejects_truecolor_png(self, tmp_path):
        path = tmp_path / "truecolor.png"
        Image.new("RGB", (4, 2), (10, 20, 30)).save(path, "PNG")

        with pytest.raises(DecodeError, match="not palette-based"):
            PngDecoder().decode(path)

    @pytest.mark.fast
    def test_rejects_non_png(self, tmp_path):
        path = tmp_path / "frame.gif"
        img = Image.new("P", (4, 2))
        img.putpalette([0, 0, 0, 255, 255, 255])
        img.save(path, "GIF")

        with pytest.raises(DecodeError, match="not a PNG"):
            PngDecoder().decode(path)

    @pytest.mark.fast
    def test_missing_file(self, tmp_path):
        missing = tmp_path / "missing.png"
        with pytest.raises(DecodeError) as exc_info:
            PngDecoder().decode(missing)

        assert exc_info.value.source == missing
        assert isinstance(exc_info.value.cause, OSError)

    @pytest.mark.fast
    def test_garbage_bytes(self, tmp_path):
        path = tmp_path / "broken.png"
        path.write_bytes(b"definitely not an image")

        with pytest.raises(DecodeError, match="Failed to decode PNG"):
            PngDecoder().decode(path)

    @pytest.mark.fast
    def test_failure_logged_at_debug_only(self, tmp_path, caplog):
        path = tmp_path / "broken.png"
        path.write_bytes(b"definitely not an image")

        with caplog.at_level(logging.DEBUG, logger="png2flic"):
            with pytest.raises(DecodeError):
                PngDecoder().decode(path)

        assert "Decode png failed" in caplog.text
        assert all(r.levelno == logging.DEBUG for r in caplog.records)


class TestReadRgbaPalette:
    @pytest.mark.fast
    def test_single_transparent_index(self):
        img = Image.new("P", (1, 1))
        img.putpalette([1, 2, 3, 4, 5, 6, 7, 8, 9])
        img.info["transparency"] = 1

        palette = read_rgba_palette(img)

        np.testing.assert_array_equal(
            palette, [(1, 2, 3, 255), (4, 5, 6, 0), (7, 8, 9, 255)]
        )
