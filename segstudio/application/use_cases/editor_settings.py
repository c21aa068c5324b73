"""Use cases for backing up and restoring the editor settings file."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from segstudio.settings import (
    EditorSettings,
    export_settings_to_file,
    import_settings_from_file,
    load_settings,
    save_settings,
)


class SettingsRepository(Protocol):
    def load(self) -> EditorSettings:
        ...

    def save(self, settings: EditorSettings) -> None:
        ...

    def export_to(self, settings: EditorSettings, export_path: Path) -> None:
        ...

    def import_from(self, import_path: Path) -> EditorSettings:
        ...


class FileSettingsRepository:
    """JSON-file repository using :mod:`segstudio.settings.store`."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path

    def load(self) -> EditorSettings:
        return load_settings(self._path)

    def save(self, settings: EditorSettings) -> None:
        save_settings(settings, self._path)

    def export_to(self, settings: EditorSettings, export_path: Path) -> None:
        export_settings_to_file(settings, export_path)

    def import_from(self, import_path: Path) -> EditorSettings:
        return import_settings_from_file(import_path)


@dataclass(frozen=True, slots=True)
class SettingsFileRequest:
    path: Path


class ExportSettingsUseCase:
    def __init__(self, repo: SettingsRepository) -> None:
        self._repo = repo

    def execute(self, req: SettingsFileRequest) -> None:
        self._repo.export_to(self._repo.load(), req.path)


class ImportSettingsUseCase:
    def __init__(self, repo: SettingsRepository) -> None:
        self._repo = repo

    def execute(self, req: SettingsFileRequest) -> EditorSettings:
        settings = self._repo.import_from(req.path)
        self._repo.save(settings)
        return settings
