"""Point-prompted segmentation.

Data flow:
  points -> region grower (per point) -> mask builder -> dilation -> compositor
  -> object / background buffers
"""

from segstudio.segmentation.compositor import split
from segstudio.segmentation.dilation import dilate
from segstudio.segmentation.mask_builder import MaskBuilder, rasterize, selected_keys
from segstudio.segmentation.pipeline import (
    SegmentationPipeline,
    SegmentationRequest,
    SegmentationResult,
)
from segstudio.segmentation.region_grower import FloodFillGrower, RegionGrower
from segstudio.segmentation.types import Point, PointKind, RegionKey, pack_key, unpack_key

__all__ = [
    "FloodFillGrower",
    "MaskBuilder",
    "Point",
    "PointKind",
    "RegionGrower",
    "RegionKey",
    "SegmentationPipeline",
    "SegmentationRequest",
    "SegmentationResult",
    "dilate",
    "pack_key",
    "rasterize",
    "selected_keys",
    "split",
    "unpack_key",
]
