from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from png2flic.models import DecodedImage, Frame, Header

# ---------------------------------------------------------------------------
# Fixture builders
# ---------------------------------------------------------------------------


def _write_indexed_png(
    path: Path,
    width: int,
    height: int,
    palette: list[tuple[int, int, int]],
    pixels: np.ndarray | list[int] | None = None,
    transparency: bytes | None = None,
) -> Path:
    """Write a palette-mode PNG with exactly ``len(palette)`` PLTE entries."""
    path.parent.mkdir(parents=True, exist_ok=True)
    img = Image.new("P", (width, height))
    img.putpalette([channel for color in palette for channel in color])

    if pixels is None:
        pixels = np.zeros(width * height, dtype=np.uint8)
    data = np.asarray(pixels, dtype=np.uint8).reshape(height, width)
    img.putdata(data.reshape(-1).tolist())

    save_kwargs = {}
    if transparency is not None:
        save_kwargs["transparency"] = transparency
    img.save(path, format="PNG", **save_kwargs)
    return path


def _gradient_pixels(width: int, height: int, offset: int = 0, colors: int = 16) -> np.ndarray:
    """Diagonal stripes; shifting *offset* moves every stripe by one pixel."""
    ys, xs = np.mgrid[0:height, 0:width]
    return ((xs + ys + offset) // 3 % colors).astype(np.uint8).reshape(-1)


GRAY_16 = [(i * 17, i * 17, i * 17) for i in range(16)]


@pytest.fixture
def make_png(tmp_path):
    """Factory fixture: ``make_png(name, width, height, palette, pixels)``."""

    def _make(
        name: str,
        width: int,
        height: int,
        palette: list[tuple[int, int, int]] | None = None,
        pixels: np.ndarray | list[int] | None = None,
        transparency: bytes | None = None,
    ) -> Path:
        return _write_indexed_png(
            tmp_path / name,
            width,
            height,
            palette if palette is not None else GRAY_16,
            pixels,
            transparency,
        )

    return _make


@pytest.fixture
def animation_frames(make_png):
    """Three 24x10 frames of moving stripes over a 16-gray palette."""
    return [
        make_png(f"frame_{i:03d}.png", 24, 10, GRAY_16, _gradient_pixels(24, 10, offset=i))
        for i in range(3)
    ]


# ---------------------------------------------------------------------------
# In-memory collaborators for pipeline tests
# ---------------------------------------------------------------------------


def decoded_image(
    source: str | Path,
    width: int,
    height: int,
    palette: list[tuple[int, int, int, int]] | None = None,
    pixels: np.ndarray | list[int] | None = None,
) -> DecodedImage:
    if palette is None:
        palette = [(0, 0, 0, 255)]
    if pixels is None:
        pixels = np.zeros(width * height, dtype=np.uint8)
    return DecodedImage(
        source=Path(source),
        width=width,
        height=height,
        pixels=np.asarray(pixels, dtype=np.uint8),
        palette=np.asarray(palette, dtype=np.uint8).reshape(-1, 4),
    )


class FakeDecoder:
    """Returns canned images (or raises canned errors) keyed by source path."""

    def __init__(self, images: dict):
        self.images = {Path(k): v for k, v in images.items()}
        self.calls: list[Path] = []

    def decode(self, source: Path) -> DecodedImage:
        self.calls.append(Path(source))
        result = self.images[Path(source)]
        if isinstance(result, Exception):
            raise result
        return result


class RecordingEncoder:
    """Container encoder that records calls and copies every frame."""

    retains_frames = False

    def __init__(self, fp=None):
        self.fp = fp
        self.calls: list[str] = []
        self.header: Header | None = None
        self.frames: list[tuple[np.ndarray, np.ndarray]] = []
        self.frame_objects: list[Frame] = []

    def write_header(self, header: Header) -> None:
        self.calls.append("header")
        self.header = header

    def write_frame(self, frame: Frame) -> None:
        self.calls.append("frame")
        self.frame_objects.append(frame)
        self.frames.append((frame.pixels.copy(), frame.color_map.copy()))

    def finish(self) -> None:
        self.calls.append("finish")
        self.header.frame_count = len(self.frames)


@pytest.fixture
def recording_encoder():
    """A RecordingEncoder plus a factory that hands it to the pipeline."""
    encoder = RecordingEncoder()

    def _factory(fp):
        encoder.fp = fp
        return encoder

    return encoder, _factory
