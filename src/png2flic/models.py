"""Data model shared by the decoder, validator, pipeline and encoder."""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import numpy as np

# Every FLC frame carries a full 256-entry color map
PALETTE_SIZE = 256


@dataclass
class Header:
    """Container header for one run.

    ``width``, ``height`` and ``speed`` are fixed at construction;
    ``frame_count`` is finalized by the encoder when the session closes.
    """

    width: int
    height: int
    speed: int
    frame_count: int = 0

    _FIXED_FIELDS = ("width", "height", "speed")

    def __post_init__(self) -> None:
        for name in self._FIXED_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, int) or value <= 0:
                raise ValueError(f"Header {name} must be a positive integer, got {value!r}")

    def __setattr__(self, name: str, value: Any) -> None:
        if name in self._FIXED_FIELDS and name in self.__dict__:
            raise AttributeError(f"Header.{name} is fixed at construction")
        super().__setattr__(name, value)


@dataclass
class DecodedImage:
    """Pixels and palette decoded from one source image."""

    source: Path
    width: int
    height: int
    # Flat palette indices, row-major, dtype uint8
    pixels: np.ndarray
    # (n, 4) RGBA entries, dtype uint8
    palette: np.ndarray

    @property
    def palette_size(self) -> int:
        return int(len(self.palette))


@dataclass
class Frame:
    """The reusable frame buffer handed to the container encoder.

    One instance is allocated per run and overwritten in place for every
    source image.
    """

    row_stride: int
    pixels: np.ndarray | None
    color_map: np.ndarray = field(
        default_factory=lambda: np.zeros((PALETTE_SIZE, 3), dtype=np.uint8)
    )
    released: bool = False

    @property
    def height(self) -> int:
        if self.pixels is None:
            raise RuntimeError("Frame buffer has been released")
        return len(self.pixels) // self.row_stride

    def rows(self) -> np.ndarray:
        """Return the pixel buffer as a (height, row_stride) view."""
        if self.pixels is None:
            raise RuntimeError("Frame buffer has been released")
        return self.pixels.reshape(-1, self.row_stride)

    def snapshot(self) -> "Frame":
        """Return an independent, read-only copy of the current contents."""
        if self.pixels is None:
            raise RuntimeError("Frame buffer has been released")
        pixels = self.pixels.copy()
        color_map = self.color_map.copy()
        pixels.setflags(write=False)
        color_map.setflags(write=False)
        return Frame(row_stride=self.row_stride, pixels=pixels, color_map=color_map)

    def release(self) -> None:
        if self.released:
            raise RuntimeError("Frame buffer released twice")
        self.pixels = None
        self.released = True


@contextmanager
def allocate_frame(header: Header) -> Iterator[Frame]:
    """Allocate the frame buffer for *header* and release it on scope exit.

    The buffer is released exactly once whether the body finishes or raises.
    """
    frame = Frame(
        row_stride=header.width,
        pixels=np.zeros(header.width * header.height, dtype=np.uint8),
    )
    try:
        yield frame
    finally:
        frame.release()
