"""Screen <-> image coordinate mapping for a zoomed/panned canvas."""

from __future__ import annotations

import math
from dataclasses import dataclass

from segstudio.config import ZOOM_RANGE, ZOOM_STEP
from segstudio.core.errors import InvalidInputError


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


@dataclass(slots=True)
class Viewport:
    zoom: float = 1.0
    pan_x: float = 0.0
    pan_y: float = 0.0

    def screen_to_image(self, sx: float, sy: float, width: int, height: int) -> tuple[int, int]:
        """Map a canvas position to a pixel of a width x height image, clamped to bounds."""
        if self.zoom <= 0:
            raise InvalidInputError(f"Zoom must be positive, got {self.zoom}")
        if width <= 0 or height <= 0:
            raise InvalidInputError(f"Image size must be positive, got {width}x{height}")
        x = math.floor((sx - self.pan_x) / self.zoom + 0.5)
        y = math.floor((sy - self.pan_y) / self.zoom + 0.5)
        return int(_clamp(x, 0, width - 1)), int(_clamp(y, 0, height - 1))

    def image_to_screen(self, x: float, y: float) -> tuple[float, float]:
        return x * self.zoom + self.pan_x, y * self.zoom + self.pan_y

    def zoom_in(self) -> float:
        self.zoom = min(self.zoom * ZOOM_STEP, ZOOM_RANGE[1])
        return self.zoom

    def zoom_out(self) -> float:
        self.zoom = max(self.zoom / ZOOM_STEP, ZOOM_RANGE[0])
        return self.zoom

    def reset(self) -> None:
        self.zoom = 1.0
        self.pan_x = 0.0
        self.pan_y = 0.0

    def pan_to(self, x: float, y: float) -> None:
        self.pan_x = float(x)
        self.pan_y = float(y)

    def fit(self, image_w: int, image_h: int, stage_w: float, stage_h: float) -> None:
        """Scale the image down (never up) to fit the stage and centre it."""
        if image_w <= 0 or image_h <= 0:
            raise InvalidInputError(f"Image size must be positive, got {image_w}x{image_h}")
        if stage_w <= 0 or stage_h <= 0:
            raise InvalidInputError(f"Stage size must be positive, got {stage_w}x{stage_h}")
        self.zoom = min(stage_w / image_w, stage_h / image_h, 1.0)
        self.pan_x = (stage_w - image_w * self.zoom) / 2
        self.pan_y = (stage_h - image_h * self.zoom) / 2
