"""Point-prompted segmentation pipeline: build -> rasterise -> dilate -> split.

Each stage returns a new buffer, so a failure in one stage leaves the output
of the previous one untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from segstudio.config import DEFAULT_DILATE, DEFAULT_THRESHOLD
from segstudio.core.errors import AppError, CancelledError, InvalidInputError, ProcessingError
from segstudio.core.observability.timing import time_block
from segstudio.imaging.pixel_buffer import PixelBuffer
from segstudio.segmentation.compositor import split
from segstudio.segmentation.dilation import dilate
from segstudio.segmentation.mask_builder import MaskBuilder, rasterize
from segstudio.segmentation.types import Point

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SegmentationRequest:
    image: PixelBuffer
    points: tuple[Point, ...]
    threshold: float = DEFAULT_THRESHOLD
    dilate: int = DEFAULT_DILATE

    @property
    def positives(self) -> list[Point]:
        return [p for p in self.points if p.is_positive]

    @property
    def negatives(self) -> list[Point]:
        return [p for p in self.points if not p.is_positive]


@dataclass(frozen=True, slots=True)
class SegmentationResult:
    mask: PixelBuffer
    object_buffer: PixelBuffer
    background_buffer: PixelBuffer
    selected_pixels: int
    stage_ms: dict[str, float] = field(default_factory=dict)


class SegmentationPipeline:
    def __init__(self, builder: MaskBuilder | None = None) -> None:
        self.builder = builder or MaskBuilder()

    def run(
        self,
        request: SegmentationRequest,
        *,
        checkpoint: Callable[[], None] | None = None,
        on_progress: Callable[[float, str | None], None] | None = None,
    ) -> SegmentationResult:
        """Run all stages.

        ``InvalidInputError`` and ``CancelledError`` propagate unchanged; any
        other failure is wrapped in ``ProcessingError``.
        """
        image = request.image
        _check_points(image, request.points)
        if request.dilate < 0:
            raise InvalidInputError(f"Dilation must be >= 0, got {request.dilate}")

        def report(p: float, msg: str) -> None:
            if on_progress is not None:
                on_progress(p, msg)

        stage_ms: dict[str, float] = {}
        try:
            with time_block("build", logger=log, sink=stage_ms):
                keys = self.builder.build(
                    image,
                    request.positives,
                    request.negatives,
                    request.threshold,
                    checkpoint=checkpoint,
                )
            report(0.5, "mask built")
            with time_block("rasterize", logger=log, sink=stage_ms):
                mask = rasterize(keys, image.width, image.height)
            if checkpoint is not None:
                checkpoint()
            with time_block("dilate", logger=log, sink=stage_ms):
                mask = dilate(mask, request.dilate)
            report(0.8, "mask dilated")
            with time_block("split", logger=log, sink=stage_ms):
                obj, background = split(image, mask)
        except (InvalidInputError, CancelledError, ProcessingError):
            raise
        except AppError as e:
            raise ProcessingError(f"Segmentation failed: {e.message}", cause=e) from e
        except Exception as e:  # noqa: BLE001
            log.exception("Segmentation stage failed")
            raise ProcessingError("Segmentation failed", cause=e) from e

        selected = int((mask.alpha > 0).sum())
        log.info(
            "Segmented %d px from %d point(s)",
            selected,
            len(request.points),
            extra={"selected": selected, "points": len(request.points)},
        )
        return SegmentationResult(
            mask=mask,
            object_buffer=obj,
            background_buffer=background,
            selected_pixels=selected,
            stage_ms=stage_ms,
        )


def _check_points(image: PixelBuffer, points: Sequence[Point]) -> None:
    if not any(p.is_positive for p in points):
        raise InvalidInputError("At least one positive point is required")
    for p in points:
        if not image.contains(p.x, p.y):
            raise InvalidInputError(
                f"Point ({p.x}, {p.y}) outside image {image.width}x{image.height}"
            )
