from __future__ import annotations

import pytest

from segstudio.core.errors import ValidationError
from segstudio.editor.state import EditorState
from segstudio.imaging.pixel_buffer import PixelBuffer


def test_opening_image_resets_layers_to_background() -> None:
    state = EditorState()
    state.layers.add("Old")
    image = PixelBuffer.filled(4, 4, (1, 2, 3, 255))
    state.set_current_image(image)

    layers = state.layers.snapshot()
    assert [(layer.id, layer.name) for layer in layers] == [("background", "Background")]
    assert layers[0].pixel_data is image
    assert state.layers.active_layer_id == "background"
    assert state.original_image is image


def test_api_keys_are_merged() -> None:
    state = EditorState()
    state.set_api_keys(replicate="r-1")
    state.set_api_keys(deepinfra="d-1")
    assert state.api_keys.for_provider("replicate") == "r-1"
    assert state.api_keys.for_provider("deepinfra") == "d-1"
    assert state.api_keys.for_provider("other") is None


def test_processing_flag_and_brush_size() -> None:
    state = EditorState()
    state.set_processing(True, "Working")
    assert (state.is_processing, state.processing_message) == (True, "Working")
    state.set_processing(False)
    assert state.processing_message == ""
    state.set_brush_size(25)
    assert state.brush_size == 25
    with pytest.raises(ValidationError):
        state.set_brush_size(0)
