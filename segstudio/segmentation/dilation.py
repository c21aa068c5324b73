"""Morphological dilation of a mask with a 3x3 structuring element."""

from __future__ import annotations

import numpy as np

from segstudio.config import DILATED_MASK_COLOR, MASK_ALPHA_CUTOFF
from segstudio.core.errors import InvalidInputError
from segstudio.imaging.pixel_buffer import CHANNELS, PixelBuffer


def _dilate_once(selected: np.ndarray) -> np.ndarray:
    h, w = selected.shape
    out = np.zeros_like(selected)
    if h < 3 or w < 3:
        return out
    acc = np.zeros((h - 2, w - 2), dtype=bool)
    for dy in range(3):
        for dx in range(3):
            acc |= selected[dy : dy + h - 2, dx : dx + w - 2]
    # Border row/column is never set.
    out[1:-1, 1:-1] = acc
    return out


def dilate(mask: PixelBuffer, iterations: int) -> PixelBuffer:
    """Grow the selection by *iterations* 3x3 passes.

    A pixel counts as selected when its alpha exceeds 128. Output pixels are
    either the dilated highlight colour or all-zero. ``iterations == 0``
    returns *mask* itself.
    """
    if iterations < 0:
        raise InvalidInputError(f"Dilation iterations must be >= 0, got {iterations}")
    if iterations == 0:
        return mask

    selected = mask.alpha > MASK_ALPHA_CUTOFF
    for _ in range(iterations):
        selected = _dilate_once(selected)

    out = np.zeros((mask.height, mask.width, CHANNELS), dtype=np.uint8)
    out[selected] = np.asarray(DILATED_MASK_COLOR, dtype=np.uint8)
    return PixelBuffer(mask.width, mask.height, out)
