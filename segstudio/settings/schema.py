"""Typed schema + light validation for editor_settings.json.

- missing keys are filled with defaults
- basic type coercion is applied (e.g. "0.2" -> 0.2)
- out-of-range numbers are clamped to the slider ranges
- unknown keys are ignored (forward compatibility)
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from typing import Any

from segstudio.config import (
    DEFAULT_DILATE,
    DEFAULT_THRESHOLD,
    DILATE_RANGE,
    GENERATION_GUIDANCE_RANGE,
    GENERATION_SIZES,
    GENERATION_STEPS_RANGE,
    THRESHOLD_RANGE,
)

SCHEMA_VERSION = 1


def _as_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        v = value.strip().lower()
        if v in {"true", "1", "yes", "y", "on"}:
            return True
        if v in {"false", "0", "no", "n", "off"}:
            return False
    if isinstance(value, (int, float)):
        return bool(value)
    return default


def _as_int(value: Any, default: int) -> int:
    try:
        if isinstance(value, bool):
            return default
        return int(value)
    except (TypeError, ValueError):
        return default


def _as_float(value: Any, default: float) -> float:
    try:
        if isinstance(value, bool):
            return default
        return float(value)
    except (TypeError, ValueError):
        return default


def _as_str(value: Any, default: str) -> str:
    if value is None:
        return default
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        return str(value)
    return default


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


@dataclass(slots=True)
class SegmentationSettings:
    threshold: float = DEFAULT_THRESHOLD
    dilate: int = DEFAULT_DILATE
    include_edges: bool = True  # False disables edge expansion (dilate 0)
    # Panel preferences only; persisted so a front end can restore them.
    auto_refine: bool = True
    multi_object: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SegmentationSettings:
        m = _mapping(data)
        return cls(
            threshold=_clamp(_as_float(m.get("threshold"), DEFAULT_THRESHOLD), *THRESHOLD_RANGE),
            dilate=int(_clamp(_as_int(m.get("dilate"), DEFAULT_DILATE), *DILATE_RANGE)),
            include_edges=_as_bool(m.get("include_edges"), True),
            auto_refine=_as_bool(m.get("auto_refine"), True),
            multi_object=_as_bool(m.get("multi_object"), False),
        )


@dataclass(slots=True)
class GenerationDefaults:
    model: str = "sdxl-1.0"
    steps: int = 30
    guidance: float = 7.5
    seed: int = -1
    width: int = 1024
    height: int = 1024
    strength: float = 0.8
    use_upscale: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> GenerationDefaults:
        m = _mapping(data)
        width = _as_int(m.get("width"), 1024)
        height = _as_int(m.get("height"), 1024)
        return cls(
            model=_as_str(m.get("model"), "sdxl-1.0"),
            steps=int(_clamp(_as_int(m.get("steps"), 30), *GENERATION_STEPS_RANGE)),
            guidance=_clamp(_as_float(m.get("guidance"), 7.5), *GENERATION_GUIDANCE_RANGE),
            seed=_as_int(m.get("seed"), -1),
            width=width if width in GENERATION_SIZES else 1024,
            height=height if height in GENERATION_SIZES else 1024,
            strength=_clamp(_as_float(m.get("strength"), 0.8), 0.0, 1.0),
            use_upscale=_as_bool(m.get("use_upscale"), False),
        )


@dataclass(slots=True)
class EditorSettings:
    # Stored at the top-level key "schema_version".
    schema_version: int = SCHEMA_VERSION
    segmentation: SegmentationSettings = field(default_factory=SegmentationSettings)
    generation: GenerationDefaults = field(default_factory=GenerationDefaults)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> EditorSettings:
        m = _mapping(data)
        return cls(
            schema_version=_as_int(m.get("schema_version"), SCHEMA_VERSION),
            segmentation=SegmentationSettings.from_dict(_mapping(m.get("segmentation"))),
            generation=GenerationDefaults.from_dict(_mapping(m.get("generation"))),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
