"""Tests for png2flic.meta module."""

import hashlib

import numpy as np
import pytest
from PIL import Image

from png2flic.flic import FlicEncoder
from png2flic.meta import FlicMetadata, compute_file_sha256, extract_flic_metadata
from png2flic.models import Frame, Header


class TestComputeFileSha256:
    """Tests for compute_file_sha256 function."""

    @pytest.mark.fast
    def test_sha256_of_known_content(self, tmp_path):
        test_file = tmp_path / "test.bin"
        test_file.write_bytes(b"Hello, World!")

        assert compute_file_sha256(test_file) == hashlib.sha256(b"Hello, World!").hexdigest()

    @pytest.mark.fast
    def test_sha256_large_file(self, tmp_path):
        """Files larger than one read chunk hash correctly."""
        test_file = tmp_path / "large.bin"
        content = b"A" * 10000
        test_file.write_bytes(content)

        assert compute_file_sha256(test_file) == hashlib.sha256(content).hexdigest()


class TestExtractFlicMetadata:
    """Tests for extract_flic_metadata function."""

    @pytest.fixture
    def simple_flc(self, tmp_path):
        path = tmp_path / "simple.flc"
        header = Header(width=8, height=4, speed=40)
        with open(path, "wb") as fp, FlicEncoder(fp) as encoder:
            encoder.write_header(header)
            for value in range(3):
                encoder.write_frame(
                    Frame(row_stride=8, pixels=np.full(32, value, dtype=np.uint8))
                )
        return path

    @pytest.mark.fast
    def test_extract_success(self, simple_flc):
        metadata = extract_flic_metadata(simple_flc)

        assert isinstance(metadata, FlicMetadata)
        assert len(metadata.flic_sha) == 64
        assert metadata.filename == "simple.flc"
        assert metadata.kilobytes > 0
        assert (metadata.width, metadata.height) == (8, 4)
        assert metadata.frames == 3
        assert metadata.speed_ms == 40

    @pytest.mark.fast
    def test_file_not_found(self, tmp_path):
        with pytest.raises(OSError, match="File not found"):
            extract_flic_metadata(tmp_path / "missing.flc")

    @pytest.mark.fast
    def test_not_a_flic(self, tmp_path):
        png_path = tmp_path / "test.png"
        Image.new("RGB", (10, 10), color=(255, 0, 0)).save(png_path, "PNG")

        with pytest.raises(ValueError, match="not an FLI/FLC animation"):
            extract_flic_metadata(png_path)

    @pytest.mark.fast
    def test_garbage(self, tmp_path):
        path = tmp_path / "broken.flc"
        path.write_bytes(b"not a flic at all")

        with pytest.raises(ValueError, match="Error processing FLC"):
            extract_flic_metadata(path)

    @pytest.mark.fast
    def test_consistency(self, simple_flc):
        assert extract_flic_metadata(simple_flc) == extract_flic_metadata(simple_flc)
