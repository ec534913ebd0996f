"""Precondition checks run on every decoded image before the frame is touched."""

from .error_handling import (
    HeightMismatch,
    PaletteTooLarge,
    PixelCountMismatch,
    StrideMismatch,
    WidthMismatch,
)
from .models import PALETTE_SIZE, DecodedImage, Frame, Header


def validate_frame(header: Header, decoded: DecodedImage, frame: Frame) -> None:
    """Check that *decoded* can be copied into *frame* for *header*.

    The checks run in a fixed order and stop at the first failure, so an
    image that is wrong in several ways always reports the earliest one:
    palette size, height, width, row stride, pixel count.

    Raises:
        PaletteTooLarge: More than 256 palette entries
        HeightMismatch: Image height differs from the video height
        WidthMismatch: Image width differs from the video width
        StrideMismatch: Frame row stride differs from the video width
        PixelCountMismatch: Decoder returned the wrong number of pixels
    """
    context = {"source": decoded.source}

    if decoded.palette_size > PALETTE_SIZE:
        raise PaletteTooLarge(
            f"Invalid palette size {decoded.palette_size}", context=context
        )

    if decoded.height != header.height:
        raise HeightMismatch(
            f"image height {decoded.height} doesn't match video height {header.height}",
            context=context,
        )

    if decoded.width != header.width:
        raise WidthMismatch(
            f"image width {decoded.width} doesn't match video width {header.width}",
            context=context,
        )

    if frame.row_stride != header.width:
        raise StrideMismatch(
            f"Frame row stride {frame.row_stride} doesn't match width {header.width}",
            context=context,
        )

    expected = header.height * header.width
    if len(decoded.pixels) != expected:
        raise PixelCountMismatch(
            f"Unexpected number of pixels returned: {len(decoded.pixels)} (expected {expected})",
            context=context,
        )
