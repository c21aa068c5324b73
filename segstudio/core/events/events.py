"""Editor events published by use cases and the segmentation tool."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ToolStateChanged:
    previous: str
    current: str


@dataclass(frozen=True, slots=True)
class SegmentationStarted:
    positives: int
    negatives: int
    threshold: float
    dilate: int


@dataclass(frozen=True, slots=True)
class SegmentationFinished:
    object_layer_id: str
    background_layer_id: str
    selected_pixels: int


@dataclass(frozen=True, slots=True)
class SegmentationFailed:
    error: Exception
    message: str


@dataclass(frozen=True, slots=True)
class LayersChanged:
    layer_ids: tuple[str, ...]
    active_layer_id: str | None
