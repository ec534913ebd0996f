"""PNG decoding into palette indices and RGBA palette entries.

Decoding is delegated to Pillow. Only palette-based ("P" mode) images are
accepted, since every FLC frame is an indexed-color image.
"""

import logging
from pathlib import Path
from typing import Protocol

import numpy as np
from PIL import Image

from .error_handling import DecodeError, ErrorLevel, error_context
from .models import PALETTE_SIZE, DecodedImage

logger = logging.getLogger(__name__)


class RasterDecoder(Protocol):
    """Anything that turns a source path into a :class:`DecodedImage`."""

    def decode(self, source: Path) -> DecodedImage:
        """Decode *source*, raising :class:`DecodeError` on failure."""
        ...


class PngDecoder:
    """Pillow-backed decoder for indexed-color PNG files."""

    def decode(self, source: Path) -> DecodedImage:
        context = {"source": source}

        with error_context(
            "decode PNG", DecodeError, ErrorLevel.DEBUG, context=context, logger=logger
        ):
            with Image.open(source) as img:
                img.load()

                if img.format != "PNG":
                    raise DecodeError(
                        f"File is not a PNG ({img.format}): {source}", context=context
                    )
                if img.mode != "P":
                    raise DecodeError(
                        f"Image is not palette-based (mode {img.mode}): {source}",
                        context=context,
                    )

                width, height = img.size
                pixels = np.array(img, dtype=np.uint8).reshape(-1)
                palette = read_rgba_palette(img)

        if len(palette) > PALETTE_SIZE:
            raise DecodeError(f"Invalid palette size {len(palette)}", context=context)

        return DecodedImage(
            source=source,
            width=width,
            height=height,
            pixels=pixels,
            palette=palette,
        )


def read_rgba_palette(img: Image.Image) -> np.ndarray:
    """Return the palette of a "P" mode image as an (n, 4) RGBA array.

    Alpha comes from the PNG ``tRNS`` data Pillow exposes in
    ``img.info["transparency"]``; entries it does not cover are opaque.
    """
    rgb = img.getpalette() or []
    n_entries = len(rgb) // 3

    palette = np.full((n_entries, 4), 255, dtype=np.uint8)
    if n_entries:
        palette[:, :3] = np.array(rgb[: n_entries * 3], dtype=np.uint8).reshape(-1, 3)

    transparency = img.info.get("transparency")
    if isinstance(transparency, bytes):
        alphas = np.frombuffer(transparency, dtype=np.uint8)[:n_entries]
        palette[: len(alphas), 3] = alphas
    elif isinstance(transparency, int) and 0 <= transparency < n_entries:
        palette[transparency, 3] = 0

    return palette
