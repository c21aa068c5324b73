"""Composition root / DI container.

Views should not build services themselves. The container wires the event
bus, the single-slot job runner, the editor state and the use cases, and is
the one place to swap the region grower or the generation provider.
"""

from __future__ import annotations

from pathlib import Path

from segstudio.application.use_cases.editor_settings import (
    ExportSettingsUseCase,
    FileSettingsRepository,
    ImportSettingsUseCase,
    SettingsFileRequest,
)
from segstudio.application.use_cases.generate_image import GenerateImageUseCase
from segstudio.application.use_cases.segment_object import SegmentObjectUseCase
from segstudio.core.errors import ProviderError
from segstudio.core.events import EventBus
from segstudio.core.jobs import JobRunner
from segstudio.editor.state import EditorState
from segstudio.editor.tool_state import SegmentationTool
from segstudio.generation.settings import ImageProvider
from segstudio.segmentation.mask_builder import MaskBuilder
from segstudio.segmentation.pipeline import SegmentationPipeline
from segstudio.segmentation.region_grower import FloodFillGrower, RegionGrower
from segstudio.settings.schema import EditorSettings, SegmentationSettings


class Container:
    """Resolves application services lazily."""

    def __init__(
        self,
        *,
        settings_path: Path | None = None,
        grower: RegionGrower | None = None,
        provider: ImageProvider | None = None,
    ) -> None:
        self._settings_repo = FileSettingsRepository(settings_path)
        self._grower = grower
        self._provider = provider
        self._settings: EditorSettings | None = None
        self._event_bus: EventBus | None = None
        self._job_runner: JobRunner | None = None
        self._state: EditorState | None = None
        self._tool: SegmentationTool | None = None
        self._pipeline: SegmentationPipeline | None = None
        self._segment_uc: SegmentObjectUseCase | None = None
        self._generate_uc: GenerateImageUseCase | None = None

    @property
    def event_bus(self) -> EventBus:
        if self._event_bus is None:
            self._event_bus = EventBus()
        return self._event_bus

    @property
    def job_runner(self) -> JobRunner:
        if self._job_runner is None:
            self._job_runner = JobRunner(self.event_bus)
        return self._job_runner

    @property
    def settings(self) -> EditorSettings:
        if self._settings is None:
            self._settings = self._settings_repo.load()
        return self._settings

    def save_settings(self) -> None:
        self._settings_repo.save(self.settings)

    def segmentation_settings(self) -> SegmentationSettings:
        return self.settings.segmentation

    @property
    def state(self) -> EditorState:
        if self._state is None:
            self._state = EditorState(on_layers_change=self.event_bus.publish)
        return self._state

    @property
    def tool(self) -> SegmentationTool:
        if self._tool is None:
            self._tool = SegmentationTool(on_state_change=self.event_bus.publish)
        return self._tool

    @property
    def pipeline(self) -> SegmentationPipeline:
        if self._pipeline is None:
            self._pipeline = SegmentationPipeline(MaskBuilder(self._grower or FloodFillGrower()))
        return self._pipeline

    @property
    def segment_object_use_case(self) -> SegmentObjectUseCase:
        if self._segment_uc is None:
            self._segment_uc = SegmentObjectUseCase(
                self.pipeline,
                self.state,
                self.tool,
                event_bus=self.event_bus,
                settings=self.segmentation_settings,
            )
        return self._segment_uc

    @property
    def generate_image_use_case(self) -> GenerateImageUseCase:
        if self._generate_uc is None:
            if self._provider is None:
                raise ProviderError("No image provider configured")
            self._generate_uc = GenerateImageUseCase(self._provider, self.state)
        return self._generate_uc

    @property
    def export_settings_use_case(self) -> ExportSettingsUseCase:
        return ExportSettingsUseCase(self._settings_repo)

    @property
    def import_settings_use_case(self) -> ImportSettingsUseCase:
        return ImportSettingsUseCase(self._settings_repo)

    def import_settings(self, path: Path) -> EditorSettings:
        """Import settings from *path*, persist them and refresh the cached copy."""
        self._settings = self.import_settings_use_case.execute(SettingsFileRequest(path))
        return self._settings

    def shutdown(self) -> None:
        if self._job_runner is not None:
            self._job_runner.shutdown()
