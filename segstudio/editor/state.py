"""Editor session state: images, layers, active tool and processing status."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from segstudio.config import DEFAULT_BRUSH_SIZE
from segstudio.core.errors import ValidationError
from segstudio.core.events import LayersChanged
from segstudio.editor.layers import LayerStack, background_layer
from segstudio.imaging.pixel_buffer import PixelBuffer

log = logging.getLogger(__name__)


@dataclass(slots=True)
class ApiKeys:
    replicate: str | None = None
    deepinfra: str | None = None

    def for_provider(self, provider: str) -> str | None:
        return {"replicate": self.replicate, "deepinfra": self.deepinfra}.get(provider)


class EditorState:
    def __init__(self, on_layers_change: Callable[[LayersChanged], None] | None = None) -> None:
        self.current_image: PixelBuffer | None = None
        self.original_image: PixelBuffer | None = None
        self.layers = LayerStack(on_change=on_layers_change)
        self.selected_tool = "select"
        self.brush_size = DEFAULT_BRUSH_SIZE
        self.current_mask: PixelBuffer | None = None
        self.is_processing = False
        self.processing_message = ""
        self.api_keys = ApiKeys()

    def set_current_image(self, image: PixelBuffer | None, thumbnail: str | None = None) -> None:
        """Open *image*; the layer stack restarts with a single background layer."""
        self.current_image = image
        self.original_image = image
        self.current_mask = None
        if image is None:
            return
        bg = background_layer(pixel_data=image, thumbnail=thumbnail)
        self.layers.reset([bg], active_id=bg.id)
        log.info("Opened image %dx%d", image.width, image.height)

    def set_brush_size(self, size: int) -> None:
        if int(size) <= 0:
            raise ValidationError(f"Brush size must be positive, got {size}")
        self.brush_size = int(size)

    def set_processing(self, is_processing: bool, message: str = "") -> None:
        self.is_processing = is_processing
        self.processing_message = message

    def set_api_keys(self, *, replicate: str | None = None, deepinfra: str | None = None) -> None:
        """Merge keys; None leaves the stored key unchanged."""
        if replicate is not None:
            self.api_keys.replicate = replicate
        if deepinfra is not None:
            self.api_keys.deepinfra = deepinfra
