"""Lightweight in-process event bus.

The goal is to decouple application logic from whatever draws the editor.
Use cases publish editor/job events; views subscribe.
"""

from .event_bus import EventBus, Subscription
from .events import (
    LayersChanged,
    SegmentationFailed,
    SegmentationFinished,
    SegmentationStarted,
    ToolStateChanged,
)
from .job_events import (
    JobCancelled,
    JobFailed,
    JobFinished,
    JobProgress,
    JobStarted,
)

__all__ = [
    "EventBus",
    "Subscription",
    "JobStarted",
    "JobProgress",
    "JobFinished",
    "JobFailed",
    "JobCancelled",
    "ToolStateChanged",
    "SegmentationStarted",
    "SegmentationFinished",
    "SegmentationFailed",
    "LayersChanged",
]
