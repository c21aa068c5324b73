from __future__ import annotations

import numpy as np
import pytest

from segstudio.core.errors import CancelledError, InvalidInputError, ProcessingError
from segstudio.imaging.pixel_buffer import PixelBuffer
from segstudio.segmentation.mask_builder import MaskBuilder
from segstudio.segmentation.pipeline import SegmentationPipeline, SegmentationRequest
from segstudio.segmentation.types import Point, PointKind


def _red_blue() -> PixelBuffer:
    arr = np.zeros((100, 100, 4), dtype=np.uint8)
    arr[:, :50] = (255, 0, 0, 255)
    arr[:, 50:] = (0, 0, 255, 255)
    return PixelBuffer.from_array(arr)


def test_red_half_is_segmented_and_split() -> None:
    image = _red_blue()
    result = SegmentationPipeline().run(
        SegmentationRequest(image=image, points=(Point(10, 10),), threshold=0.15, dilate=0)
    )

    selected = result.mask.alpha > 0
    assert selected[:, :50].all()
    assert not selected[:, 50:].any()
    assert result.selected_pixels == 5000

    assert (result.object_buffer.alpha[:, :50] == 255).all()
    assert (result.object_buffer.alpha[:, 50:] == 0).all()
    assert (result.background_buffer.alpha[:, :50] == 0).all()
    assert (result.background_buffer.alpha[:, 50:] == 255).all()


def test_negative_point_removes_pixels_added_by_positive() -> None:
    image = _red_blue()
    result = SegmentationPipeline().run(
        SegmentationRequest(
            image=image,
            points=(
                Point(10, 10),
                Point(80, 80),
                Point(40, 40, PointKind.NEGATIVE),
            ),
            threshold=0.15,
            dilate=0,
        )
    )
    selected = result.mask.alpha > 0
    assert not selected[:, :50].any()
    assert selected[:, 50:].all()


def test_dilation_is_applied_after_building() -> None:
    image = _red_blue()
    result = SegmentationPipeline().run(
        SegmentationRequest(image=image, points=(Point(10, 10),), threshold=0.15, dilate=2)
    )
    selected = result.mask.alpha > 0
    assert selected[1:99, 1:52].all()
    assert not selected[:, 52:].any()
    assert not selected[0, :].any()


def test_run_requires_positive_point() -> None:
    with pytest.raises(InvalidInputError):
        SegmentationPipeline().run(
            SegmentationRequest(image=_red_blue(), points=(Point(1, 1, PointKind.NEGATIVE),))
        )


def test_out_of_bounds_point_is_invalid_input() -> None:
    with pytest.raises(InvalidInputError):
        SegmentationPipeline().run(
            SegmentationRequest(image=_red_blue(), points=(Point(100, 1),))
        )


class _ExplodingGrower:
    def grow(self, image, seed, threshold):
        raise RuntimeError("model crashed")


def test_unexpected_failure_is_wrapped() -> None:
    pipeline = SegmentationPipeline(MaskBuilder(_ExplodingGrower()))
    with pytest.raises(ProcessingError) as exc:
        pipeline.run(SegmentationRequest(image=_red_blue(), points=(Point(1, 1),)))
    assert isinstance(exc.value.cause, RuntimeError)


def test_cancellation_propagates_unchanged() -> None:
    def cancelled() -> None:
        raise CancelledError("Job cancelled")

    with pytest.raises(CancelledError):
        SegmentationPipeline().run(
            SegmentationRequest(image=_red_blue(), points=(Point(1, 1),)),
            checkpoint=cancelled,
        )


def test_progress_is_reported() -> None:
    seen: list[float] = []
    SegmentationPipeline().run(
        SegmentationRequest(image=_red_blue(), points=(Point(1, 1),), dilate=1),
        on_progress=lambda p, _msg: seen.append(p),
    )
    assert seen == [0.5, 0.8]


def test_stage_durations_are_recorded() -> None:
    result = SegmentationPipeline().run(
        SegmentationRequest(image=_red_blue(), points=(Point(1, 1),), dilate=1)
    )
    assert list(result.stage_ms) == ["build", "rasterize", "dilate", "split"]
    assert all(ms >= 0.0 for ms in result.stage_ms.values())
