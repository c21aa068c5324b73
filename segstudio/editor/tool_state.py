"""Segmentation tool state machine.

IDLE -> COLLECTING_POINTS   tool selected
COLLECTING_POINTS           each click appends a point
COLLECTING_POINTS -> IDLE   explicit clear
COLLECTING_POINTS -> RUNNING  run requested with at least one positive point
RUNNING -> IDLE             success (points cleared)
RUNNING -> COLLECTING_POINTS  failure (points kept for retry)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from threading import RLock

from segstudio.core.errors import BusyError, InvalidInputError
from segstudio.core.events import ToolStateChanged
from segstudio.editor.points import PointSet
from segstudio.editor.viewport import Viewport
from segstudio.segmentation.types import Point, PointKind

log = logging.getLogger(__name__)

SEGMENT_TOOL_ID = "sam2-segment"
SEGMENTATION_TOOL_IDS = (SEGMENT_TOOL_ID, "magic-cut", "smart-erase", "refine-mask")


class ToolState(str, Enum):
    IDLE = "idle"
    COLLECTING_POINTS = "collecting_points"
    RUNNING = "running"


class SegmentationTool:
    def __init__(
        self,
        viewport: Viewport | None = None,
        on_state_change: Callable[[ToolStateChanged], None] | None = None,
    ) -> None:
        self.viewport = viewport or Viewport()
        self.points = PointSet()
        self._state = ToolState.IDLE
        self._lock = RLock()
        self._on_state_change = on_state_change

    @property
    def state(self) -> ToolState:
        with self._lock:
            return self._state

    def select_tool(self, tool_id: str) -> None:
        """Only the point tool collects points; any other tool leaves the session."""
        with self._lock:
            if self._state is ToolState.RUNNING:
                raise BusyError("Segmentation is running")
            if tool_id == SEGMENT_TOOL_ID:
                if self._state is ToolState.IDLE:
                    self._set_state(ToolState.COLLECTING_POINTS)
                return
            self.points.clear()
            self._set_state(ToolState.IDLE)

    def click(
        self,
        screen_x: float,
        screen_y: float,
        image_size: tuple[int, int],
        *,
        negative_modifier: bool = False,
    ) -> Point:
        """Record a click; the modifier key makes it a negative point."""
        with self._lock:
            if self._state is not ToolState.COLLECTING_POINTS:
                raise InvalidInputError("Select the segmentation tool before placing points")
            x, y = self.viewport.screen_to_image(screen_x, screen_y, *image_size)
            kind = PointKind.NEGATIVE if negative_modifier else PointKind.POSITIVE
            point = self.points.add(x, y, kind)
            log.debug("Point %s at (%d, %d)", kind.value, x, y)
            return point

    def clear(self) -> None:
        with self._lock:
            if self._state is ToolState.RUNNING:
                raise BusyError("Segmentation is running")
            self.points.clear()
            self._set_state(ToolState.IDLE)

    def begin_run(self) -> tuple[Point, ...]:
        """Enter RUNNING and return the points to segment with."""
        with self._lock:
            if self._state is ToolState.RUNNING:
                raise BusyError("Segmentation is already running")
            if self._state is not ToolState.COLLECTING_POINTS:
                raise InvalidInputError("Select the segmentation tool before running")
            if not self.points.has_positive():
                raise InvalidInputError("Place at least one positive point before running")
            self._set_state(ToolState.RUNNING)
            return self.points.as_tuple()

    def complete_run(self) -> None:
        with self._lock:
            self._require_running()
            self.points.clear()
            self._set_state(ToolState.IDLE)

    def fail_run(self) -> None:
        with self._lock:
            self._require_running()
            self._set_state(ToolState.COLLECTING_POINTS)

    def _require_running(self) -> None:
        if self._state is not ToolState.RUNNING:
            raise InvalidInputError(f"No segmentation run in progress (state: {self._state.value})")

    def _set_state(self, new: ToolState) -> None:
        old = self._state
        if old is new:
            return
        self._state = new
        if self._on_state_change is not None:
            self._on_state_change(ToolStateChanged(previous=old.value, current=new.value))
