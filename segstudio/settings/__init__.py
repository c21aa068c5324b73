"""Editor settings persisted as JSON and normalised through typed dataclasses."""

from segstudio.settings.schema import EditorSettings, GenerationDefaults, SegmentationSettings
from segstudio.settings.store import (
    default_settings,
    export_settings_to_file,
    import_settings_from_file,
    load_settings,
    save_settings,
)

__all__ = [
    "EditorSettings",
    "GenerationDefaults",
    "SegmentationSettings",
    "default_settings",
    "export_settings_to_file",
    "import_settings_from_file",
    "load_settings",
    "save_settings",
]
