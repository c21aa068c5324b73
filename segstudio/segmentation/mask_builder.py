"""Combine per-point regions into one selection and rasterise it as a mask."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence

import numpy as np

from segstudio.config import MASK_COLOR, NEGATIVE_THRESHOLD_FACTOR, POSITIVE_THRESHOLD_FACTOR
from segstudio.core.errors import InvalidInputError
from segstudio.imaging.pixel_buffer import CHANNELS, PixelBuffer
from segstudio.segmentation.region_grower import FloodFillGrower, RegionGrower
from segstudio.segmentation.types import Point, RegionKey

log = logging.getLogger(__name__)


class MaskBuilder:
    """Union of positive regions minus negative regions.

    All negatives are subtracted after every positive has been added; a pixel
    removed by a negative is never re-added.
    """

    def __init__(
        self,
        grower: RegionGrower | None = None,
        *,
        positive_factor: float = POSITIVE_THRESHOLD_FACTOR,
        negative_factor: float = NEGATIVE_THRESHOLD_FACTOR,
    ) -> None:
        self.grower: RegionGrower = grower or FloodFillGrower()
        self.positive_factor = positive_factor
        self.negative_factor = negative_factor

    def build(
        self,
        image: PixelBuffer,
        positives: Sequence[Point],
        negatives: Sequence[Point],
        threshold: float,
        *,
        checkpoint: Callable[[], None] | None = None,
    ) -> set[RegionKey]:
        """Return the selected region keys.

        *checkpoint* is called before every grow; raising from it (e.g. on
        cancellation) aborts the build.
        """
        if not positives:
            raise InvalidInputError("At least one positive point is required")

        selected: set[RegionKey] = set()
        for p in positives:
            if checkpoint is not None:
                checkpoint()
            selected |= self.grower.grow(image, p, threshold * self.positive_factor)
        for p in negatives:
            if checkpoint is not None:
                checkpoint()
            selected -= self.grower.grow(image, p, threshold * self.negative_factor)

        log.debug(
            "Built selection from %d positive / %d negative points: %d px",
            len(positives),
            len(negatives),
            len(selected),
        )
        return selected


def rasterize(
    keys: Iterable[RegionKey],
    width: int,
    height: int,
    color: Sequence[int] = MASK_COLOR,
) -> PixelBuffer:
    """Paint *keys* with *color* on an all-zero RGBA buffer."""
    flat = np.zeros((width * height, CHANNELS), dtype=np.uint8)
    idx = np.fromiter(keys, dtype=np.int64)
    if idx.size:
        flat[idx] = np.asarray(color, dtype=np.uint8)
    return PixelBuffer(width, height, flat)


def selected_keys(mask: PixelBuffer) -> set[RegionKey]:
    """Keys of pixels whose indicator (red) channel is non-zero."""
    return set(np.flatnonzero(mask.array[..., 0].reshape(-1)).tolist())
