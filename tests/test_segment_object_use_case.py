from __future__ import annotations

import threading
from concurrent.futures import Future

import numpy as np
import pytest

from segstudio.application.container import Container
from segstudio.application.use_cases.segment_object import SegmentObjectRequest
from segstudio.core.errors import BusyError, CancelledError, InvalidInputError, ProcessingError
from segstudio.core.events import JobProgress, SegmentationFailed, SegmentationFinished
from segstudio.core.jobs import CancelToken, JobHandle
from segstudio.editor.tool_state import SEGMENT_TOOL_ID, ToolState
from segstudio.imaging.pixel_buffer import PixelBuffer
from segstudio.segmentation.region_grower import FloodFillGrower


def _red_blue() -> PixelBuffer:
    arr = np.zeros((40, 40, 4), dtype=np.uint8)
    arr[:, :20] = (255, 0, 0, 255)
    arr[:, 20:] = (0, 0, 255, 255)
    return PixelBuffer.from_array(arr)


def _ready(container: Container) -> None:
    container.state.set_current_image(_red_blue())
    container.tool.select_tool(SEGMENT_TOOL_ID)
    container.tool.click(5, 5, (40, 40))


def test_segmentation_replaces_background_with_two_layers(tmp_path) -> None:
    container = Container(settings_path=tmp_path / "settings.json")
    finished: list[SegmentationFinished] = []
    container.event_bus.subscribe(SegmentationFinished, finished.append)
    _ready(container)

    result = container.segment_object_use_case.execute(SegmentObjectRequest(dilate=0))

    layers = container.state.layers.snapshot()
    assert [layer.name for layer in layers] == ["Background", "Object"]
    assert all(layer.id != "background" for layer in layers)
    assert layers[1].id == result.object_layer.id
    assert container.state.layers.active_layer_id == result.object_layer.id
    assert (result.object_layer.pixel_data.alpha[:, :20] == 255).all()
    assert (result.background_layer.pixel_data.alpha[:, :20] == 0).all()
    assert result.object_layer.thumbnail.startswith("data:image/png;base64,")
    assert container.tool.state is ToolState.IDLE
    assert len(container.tool.points) == 0
    assert container.state.current_mask is result.mask
    assert container.state.is_processing is False
    assert finished[0].selected_pixels == 20 * 40


def test_missing_positive_point_is_reported_before_running(tmp_path) -> None:
    container = Container(settings_path=tmp_path / "settings.json")
    container.state.set_current_image(_red_blue())
    container.tool.select_tool(SEGMENT_TOOL_ID)
    container.tool.click(5, 5, (40, 40), negative_modifier=True)

    with pytest.raises(InvalidInputError):
        container.segment_object_use_case.execute()
    assert container.tool.state is ToolState.COLLECTING_POINTS
    assert container.state.is_processing is False


def test_missing_image_is_invalid_input(tmp_path) -> None:
    container = Container(settings_path=tmp_path / "settings.json")
    container.tool.select_tool(SEGMENT_TOOL_ID)
    with pytest.raises(InvalidInputError):
        container.segment_object_use_case.execute()


class _BrokenGrower:
    def grow(self, image, seed, threshold):
        raise RuntimeError("boom")


def test_failure_keeps_points_and_layers(tmp_path) -> None:
    container = Container(settings_path=tmp_path / "settings.json", grower=_BrokenGrower())
    failed: list[SegmentationFailed] = []
    container.event_bus.subscribe(SegmentationFailed, failed.append)
    _ready(container)

    with pytest.raises(ProcessingError):
        container.segment_object_use_case.execute()

    assert container.tool.state is ToolState.COLLECTING_POINTS
    assert len(container.tool.points) == 1
    assert container.state.layers.ids == ("background",)
    assert container.state.is_processing is False
    assert len(failed) == 1


class _GatedGrower:
    def __init__(self) -> None:
        self.gate = threading.Event()
        self.entered = threading.Event()
        self._inner = FloodFillGrower()

    def grow(self, image, seed, threshold):
        self.entered.set()
        self.gate.wait(timeout=2.0)
        return self._inner.grow(image, seed, threshold)


def test_background_run_is_single_slot(tmp_path) -> None:
    grower = _GatedGrower()
    container = Container(settings_path=tmp_path / "settings.json", grower=grower)
    _ready(container)
    uc = container.segment_object_use_case

    handle = uc.start(container.job_runner)
    assert container.tool.state is ToolState.RUNNING
    with pytest.raises(BusyError):
        uc.start(container.job_runner)

    grower.gate.set()
    result = handle.future.result(timeout=5.0)
    assert result.selected_pixels > 0
    assert container.tool.state is ToolState.IDLE
    assert [layer.name for layer in container.state.layers.snapshot()] == ["Background", "Object"]
    container.shutdown()


def test_threshold_and_dilation_come_from_settings(tmp_path) -> None:
    container = Container(settings_path=tmp_path / "settings.json")
    container.settings.segmentation.dilate = 0
    _ready(container)
    result = container.segment_object_use_case.execute()
    assert result.selected_pixels == 20 * 40


class _QueuedRunner:
    """Accepts the job but never runs it, like a runner that is shut down with it queued."""

    def submit(self, name, fn):
        return JobHandle(job_id="queued", name=name, future=Future(), cancel_token=CancelToken())


def test_job_dropped_before_it_runs_restores_the_tool(tmp_path) -> None:
    container = Container(settings_path=tmp_path / "settings.json")
    failed: list[SegmentationFailed] = []
    container.event_bus.subscribe(SegmentationFailed, failed.append)
    _ready(container)

    handle = container.segment_object_use_case.start(_QueuedRunner())
    assert container.state.is_processing is True
    assert handle.future.cancel() is True

    assert container.tool.state is ToolState.COLLECTING_POINTS
    assert len(container.tool.points) == 1
    assert container.state.is_processing is False
    assert container.state.layers.ids == ("background",)
    assert isinstance(failed[0].error, CancelledError)
    container.tool.clear()


def test_cancel_while_growing_keeps_points_and_layers(tmp_path) -> None:
    grower = _GatedGrower()
    container = Container(settings_path=tmp_path / "settings.json", grower=grower)
    _ready(container)

    handle = container.segment_object_use_case.start(container.job_runner)
    assert grower.entered.wait(timeout=5.0)
    handle.cancel()
    grower.gate.set()

    with pytest.raises(CancelledError):
        handle.future.result(timeout=5.0)
    assert container.tool.state is ToolState.COLLECTING_POINTS
    assert len(container.tool.points) == 1
    assert container.state.layers.ids == ("background",)
    assert container.state.is_processing is False
    container.shutdown()


def test_cancel_after_last_stage_does_not_commit(tmp_path) -> None:
    grower = _GatedGrower()
    container = Container(settings_path=tmp_path / "settings.json", grower=grower)
    finished: list[SegmentationFinished] = []
    container.event_bus.subscribe(SegmentationFinished, finished.append)
    handles: list = []

    def cancel_on_dilated(event: JobProgress) -> None:
        if event.message == "mask dilated":
            handles[0].cancel()

    container.event_bus.subscribe(JobProgress, cancel_on_dilated)
    _ready(container)

    handles.append(container.segment_object_use_case.start(container.job_runner))
    grower.gate.set()

    with pytest.raises(CancelledError):
        handles[0].future.result(timeout=5.0)
    assert finished == []
    assert container.state.layers.ids == ("background",)
    assert container.tool.state is ToolState.COLLECTING_POINTS
    assert len(container.tool.points) == 1
    container.shutdown()


def test_include_edges_off_skips_dilation(tmp_path) -> None:
    container = Container(settings_path=tmp_path / "settings.json")
    container.settings.segmentation.dilate = 5
    container.settings.segmentation.include_edges = False
    _ready(container)
    result = container.segment_object_use_case.execute()
    assert result.selected_pixels == 20 * 40
