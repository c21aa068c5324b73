"""Versioned migrations for editor_settings.json.

Older files stored the segmentation sliders under their on-screen labels.
Unknown keys are preserved (and ignored by the schema).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from segstudio.settings.schema import SCHEMA_VERSION, _as_int


def migrate(raw: Mapping[str, Any] | None) -> dict[str, Any]:
    """Return a migrated copy of *raw*; a non-mapping yields an empty dict."""
    if not isinstance(raw, Mapping):
        return {}

    data: dict[str, Any] = dict(raw)
    version = _as_int(data.get("schema_version"), 0)

    while version < SCHEMA_VERSION:
        if version == 0:
            data = _migrate_v0_to_v1(data)
            version = 1
        else:
            break

    data["schema_version"] = SCHEMA_VERSION
    return data


def _migrate_v0_to_v1(data: dict[str, Any]) -> dict[str, Any]:
    """Rename slider-label keys (sensitivity, edge_expansion) to their field names."""
    out = dict(data)
    seg = dict(out.get("segmentation") or {}) if isinstance(out.get("segmentation"), Mapping) else {}
    if "sensitivity" in seg and "threshold" not in seg:
        seg["threshold"] = seg.pop("sensitivity")
    if "edge_expansion" in seg and "dilate" not in seg:
        seg["dilate"] = seg.pop("edge_expansion")
    out["segmentation"] = seg
    return out
