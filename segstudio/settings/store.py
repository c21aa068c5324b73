"""Load/save editor settings (JSON).

A missing or unreadable file yields defaults; everything written goes
through the schema so the file always has every section.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from segstudio.config import EDITOR_SETTINGS_PATH
from segstudio.settings.migrations import migrate
from segstudio.settings.schema import EditorSettings

log = logging.getLogger(__name__)


def default_settings() -> EditorSettings:
    return EditorSettings()


def _normalize(data: Mapping[str, Any] | None) -> EditorSettings:
    if not isinstance(data, Mapping):
        return default_settings()
    settings = EditorSettings.from_dict(migrate(data))
    settings.schema_version = EditorSettings().schema_version
    return settings


def _read(path: Path) -> EditorSettings:
    if not path.exists():
        return default_settings()
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError):
        log.warning("Unreadable settings file %s; using defaults", path, exc_info=True)
        return default_settings()
    return _normalize(data)


def _write(settings: EditorSettings | Mapping[str, Any], path: Path) -> None:
    data = settings.to_dict() if isinstance(settings, EditorSettings) else settings
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(_normalize(data).to_dict(), f, indent=2, ensure_ascii=False)


def load_settings(path: Path | None = None) -> EditorSettings:
    return _read(path or EDITOR_SETTINGS_PATH)


def save_settings(settings: EditorSettings | Mapping[str, Any], path: Path | None = None) -> None:
    _write(settings, path or EDITOR_SETTINGS_PATH)


def export_settings_to_file(settings: EditorSettings, export_path: Path) -> None:
    """Export full settings to a user-chosen path (e.g. backup)."""
    _write(settings, export_path)


def import_settings_from_file(import_path: Path) -> EditorSettings:
    """Read settings from *import_path*, merged with defaults (caller may then save)."""
    return _read(import_path)
