"""Use case: segment the object under the collected points and split it into layers.

Drives the segmentation tool through RUNNING, runs the pipeline and swaps
the resulting background/object layers into the stack in one step.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future
from dataclasses import dataclass

from segstudio.core.errors import BusyError, CancelledError, InvalidInputError
from segstudio.core.events import (
    EventBus,
    SegmentationFailed,
    SegmentationFinished,
    SegmentationStarted,
)
from segstudio.core.jobs import CancelToken, JobHandle, JobRunner, ProgressFn
from segstudio.editor.layers import Layer
from segstudio.editor.state import EditorState
from segstudio.editor.tool_state import SegmentationTool
from segstudio.imaging.io import thumbnail_data_url
from segstudio.imaging.pixel_buffer import PixelBuffer
from segstudio.segmentation.pipeline import SegmentationPipeline, SegmentationRequest
from segstudio.segmentation.types import Point
from segstudio.settings.schema import SegmentationSettings

log = logging.getLogger(__name__)

OBJECT_LAYER_NAME = "Object"
BACKGROUND_LAYER_NAME = "Background"


@dataclass(frozen=True, slots=True)
class SegmentObjectRequest:
    threshold: float | None = None  # None -> settings
    dilate: int | None = None


@dataclass(frozen=True, slots=True)
class SegmentObjectResult:
    object_layer: Layer
    background_layer: Layer
    mask: PixelBuffer
    selected_pixels: int


class SegmentObjectUseCase:
    def __init__(
        self,
        pipeline: SegmentationPipeline,
        state: EditorState,
        tool: SegmentationTool,
        *,
        event_bus: EventBus | None = None,
        settings: Callable[[], SegmentationSettings] | None = None,
    ) -> None:
        self._pipeline = pipeline
        self._state = state
        self._tool = tool
        self._bus = event_bus
        self._settings = settings or SegmentationSettings

    def execute(
        self,
        req: SegmentObjectRequest | None = None,
        *,
        token: CancelToken | None = None,
        on_progress: Callable[[float, str | None], None] | None = None,
    ) -> SegmentObjectResult:
        """Run synchronously on the calling thread."""
        image, points = self._begin()
        return self._run(image, points, req or SegmentObjectRequest(), token, on_progress)

    def start(self, runner: JobRunner, req: SegmentObjectRequest | None = None) -> JobHandle:
        """Validate on the calling thread, then run on the job runner's worker.

        Input errors (no image, no positive point) raise here, before any job
        is submitted.
        """
        image, points = self._begin()
        request = req or SegmentObjectRequest()
        settled = threading.Event()

        def job(token: CancelToken, progress: ProgressFn) -> SegmentObjectResult:
            settled.set()
            return self._run(image, points, request, token, progress)

        try:
            handle = runner.submit("segment-object", job)
        except BusyError:
            self._tool.fail_run()
            self._state.set_processing(False)
            raise

        def on_done(future: Future) -> None:
            # The runner (or its shutdown) dropped the job before _run could settle the tool.
            if not settled.is_set():
                self._abandon(CancelledError("Segmentation cancelled before it started"))

        handle.future.add_done_callback(on_done)
        return handle

    def _begin(self) -> tuple[PixelBuffer, tuple[Point, ...]]:
        image = self._state.current_image
        if image is None:
            raise InvalidInputError("Open an image before segmenting")
        points = self._tool.begin_run()
        self._state.set_processing(True, "Segmenting...")
        return image, points

    def _run(
        self,
        image: PixelBuffer,
        points: tuple[Point, ...],
        req: SegmentObjectRequest,
        token: CancelToken | None,
        on_progress: Callable[[float, str | None], None] | None,
    ) -> SegmentObjectResult:
        try:
            cfg = self._settings()
            threshold = cfg.threshold if req.threshold is None else req.threshold
            if req.dilate is not None:
                dilate = req.dilate
            else:
                dilate = cfg.dilate if cfg.include_edges else 0
            request = SegmentationRequest(
                image=image, points=points, threshold=threshold, dilate=dilate
            )
            self._publish(
                SegmentationStarted(
                    positives=len(request.positives),
                    negatives=len(request.negatives),
                    threshold=threshold,
                    dilate=dilate,
                )
            )
            result = self._pipeline.run(
                request,
                checkpoint=None if token is None else token.raise_if_cancelled,
                on_progress=on_progress,
            )
            background = Layer(
                name=BACKGROUND_LAYER_NAME,
                pixel_data=result.background_buffer,
                thumbnail=thumbnail_data_url(result.background_buffer),
            )
            obj = Layer(
                name=OBJECT_LAYER_NAME,
                pixel_data=result.object_buffer,
                thumbnail=thumbnail_data_url(result.object_buffer),
            )
            if token is not None:
                token.raise_if_cancelled()
            self._state.layers.replace_background(background, obj)
        except Exception as e:
            self._abandon(e)
            raise

        self._state.current_mask = result.mask
        self._tool.complete_run()
        self._state.set_processing(False)
        self._publish(
            SegmentationFinished(
                object_layer_id=obj.id,
                background_layer_id=background.id,
                selected_pixels=result.selected_pixels,
            )
        )
        return SegmentObjectResult(
            object_layer=obj,
            background_layer=background,
            mask=result.mask,
            selected_pixels=result.selected_pixels,
        )

    def _abandon(self, error: Exception) -> None:
        log.warning("Segmentation failed; points kept for retry: %s", error)
        self._tool.fail_run()
        self._state.set_processing(False)
        self._publish(SegmentationFailed(error=error, message=str(error)))

    def _publish(self, event: object) -> None:
        if self._bus is not None:
            self._bus.publish(event)
