"""Normalization of source palettes into the fixed 256-entry FLC color map."""

import numpy as np

from .models import PALETTE_SIZE


def build_color_map(palette_entries: np.ndarray, color_map: np.ndarray) -> None:
    """Overwrite *color_map* from *palette_entries*.

    All 256 slots are written on every call: slot ``i`` takes the RGB channels
    of ``palette_entries[i]`` (FLC has no per-entry alpha, so it is dropped)
    and every slot past the end of the palette is reset to black. A frame
    with a small palette therefore never inherits entries left behind by a
    larger palette from an earlier frame.

    Args:
        palette_entries: (n, 4) RGBA array with n <= 256; callers guarantee
            the bound
        color_map: (256, 3) uint8 array, updated in place
    """
    palette_size = len(palette_entries)
    if palette_size:
        color_map[:palette_size] = palette_entries[:, :3]
    color_map[palette_size:PALETTE_SIZE] = 0
