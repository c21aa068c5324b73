"""Region growing by colour similarity.

``FloodFillGrower`` is the classical stand-in for a learned point-prompted
segmenter: breadth-first flood fill over 4-connected neighbours whose RGB
colour is close enough to the seed colour. Anything implementing
``RegionGrower`` (e.g. a remote model call) can be plugged into the mask
builder instead.
"""

from __future__ import annotations

from collections import deque
from typing import Protocol, runtime_checkable

import numpy as np

from segstudio.core.errors import InvalidInputError
from segstudio.core.observability.timing import timed
from segstudio.imaging.pixel_buffer import PixelBuffer
from segstudio.segmentation.types import Point, RegionKey, pack_key


@runtime_checkable
class RegionGrower(Protocol):
    def grow(self, image: PixelBuffer, seed: Point, threshold: float) -> set[RegionKey]:
        ...


def color_distance(image: PixelBuffer, seed_rgb: tuple[int, int, int]) -> np.ndarray:
    """Per-pixel Euclidean RGB distance to *seed_rgb*, normalised by 255."""
    diff = image.rgb.astype(np.float64) - np.asarray(seed_rgb, dtype=np.float64)
    return np.sqrt((diff * diff).sum(axis=-1)) / 255.0


class FloodFillGrower:
    """BFS flood fill; a neighbour joins iff its distance to the seed colour <= threshold."""

    @timed("segmentation.grow")
    def grow(self, image: PixelBuffer, seed: Point, threshold: float) -> set[RegionKey]:
        if not image.contains(seed.x, seed.y):
            raise InvalidInputError(
                f"Seed ({seed.x}, {seed.y}) outside image {image.width}x{image.height}"
            )
        if not 0.0 <= threshold <= 1.0:
            raise InvalidInputError(f"Threshold must be within [0, 1], got {threshold}")

        w, h = image.width, image.height
        r, g, b, _ = image.pixel(seed.x, seed.y)
        similar = (color_distance(image, (r, g, b)) <= threshold).reshape(-1).tolist()

        start = pack_key(seed.x, seed.y, w)
        visited = bytearray(w * h)
        visited[start] = 1
        queue: deque[int] = deque([start])
        region: set[RegionKey] = set()
        last_row = (h - 1) * w

        while queue:
            k = queue.popleft()
            region.add(k)
            kx = k % w
            neighbours = []
            if k >= w:
                neighbours.append(k - w)
            if k < last_row:
                neighbours.append(k + w)
            if kx > 0:
                neighbours.append(k - 1)
            if kx < w - 1:
                neighbours.append(k + 1)
            for n in neighbours:
                if visited[n]:
                    continue
                visited[n] = 1
                if similar[n]:
                    queue.append(n)
        return region
