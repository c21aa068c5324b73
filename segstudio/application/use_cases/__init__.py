from segstudio.application.use_cases.editor_settings import (
    ExportSettingsUseCase,
    ImportSettingsUseCase,
    SettingsRepository,
)
from segstudio.application.use_cases.generate_image import (
    GenerateImageRequest,
    GenerateImageUseCase,
)
from segstudio.application.use_cases.segment_object import (
    SegmentObjectRequest,
    SegmentObjectResult,
    SegmentObjectUseCase,
)

__all__ = [
    "ExportSettingsUseCase",
    "GenerateImageRequest",
    "GenerateImageUseCase",
    "ImportSettingsUseCase",
    "SegmentObjectRequest",
    "SegmentObjectResult",
    "SegmentObjectUseCase",
    "SettingsRepository",
]
