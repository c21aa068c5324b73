from __future__ import annotations

import pytest

from segstudio.core.errors import ValidationError
from segstudio.core.events import LayersChanged
from segstudio.editor.layers import BlendMode, Layer, LayerStack, background_layer
from segstudio.imaging.pixel_buffer import PixelBuffer


def test_add_names_and_activates_new_layers() -> None:
    stack = LayerStack()
    a = stack.add()
    b = stack.add()
    assert (a.name, b.name) == ("Layer 1", "Layer 2")
    assert stack.ids == (a.id, b.id)
    assert stack.active_layer_id == b.id


def test_remove_active_falls_back_to_first_layer() -> None:
    stack = LayerStack()
    a, b, c = stack.add(), stack.add(), stack.add()
    stack.remove(c.id)
    assert stack.active_layer_id == a.id
    stack.remove(a.id)
    stack.remove(b.id)
    assert stack.active_layer_id is None
    with pytest.raises(ValidationError):
        stack.remove("missing")


def test_update_replaces_layer_and_clamps_opacity() -> None:
    stack = LayerStack()
    layer = stack.add("Paint")
    updated = stack.update(layer.id, opacity=150, visible=False, blend_mode="multiply")
    assert updated.opacity == 100
    assert updated.visible is False
    assert updated.blend_mode is BlendMode.MULTIPLY
    assert layer.opacity == 100 and layer.visible is True  # old snapshot untouched
    with pytest.raises(ValidationError):
        stack.update(layer.id, id="other")
    with pytest.raises(ValidationError):
        stack.update(layer.id, blend_mode="dissolve")


def test_pixel_data_is_replaced_not_mutated() -> None:
    stack = LayerStack()
    first = PixelBuffer.filled(2, 2, (1, 1, 1, 255))
    layer = stack.add("Paint", pixel_data=first)
    second = PixelBuffer.filled(2, 2, (2, 2, 2, 255))
    stack.update(layer.id, pixel_data=second)
    assert stack.get(layer.id).pixel_data is second
    assert first.pixel(0, 0) == (1, 1, 1, 255)


def test_duplicate_appends_copy_with_new_id() -> None:
    stack = LayerStack()
    src = stack.add("Sky", opacity=40)
    copy = stack.duplicate(src.id)
    assert copy.id != src.id
    assert copy.name == "Sky Copy"
    assert copy.opacity == 40
    assert stack.ids == (src.id, copy.id)
    assert stack.active_layer_id == src.id


def test_move_swaps_neighbours_and_ignores_edges() -> None:
    stack = LayerStack()
    a, b = stack.add(), stack.add()
    stack.move(a.id, "up")
    assert stack.ids == (b.id, a.id)
    stack.move(a.id, "up")
    assert stack.ids == (b.id, a.id)
    stack.move(a.id, "down")
    assert stack.ids == (a.id, b.id)
    with pytest.raises(ValidationError):
        stack.move(a.id, "sideways")


def test_insert_at_clamps_index() -> None:
    stack = LayerStack()
    a = stack.add()
    top = stack.insert_at(99, Layer(name="Top"))
    bottom = stack.insert_at(-5, Layer(name="Bottom"))
    assert stack.ids == (bottom.id, a.id, top.id)


def test_replace_background_swaps_in_one_notification() -> None:
    events: list[LayersChanged] = []
    stack = LayerStack(on_change=events.append)
    stack.reset([background_layer()])
    paint = stack.add("Paint")
    events.clear()

    new_bg = Layer(name="Background")
    obj = Layer(name="Object")
    stack.replace_background(new_bg, obj)

    assert stack.ids == (paint.id, new_bg.id, obj.id)
    assert stack.active_layer_id == obj.id
    assert len(events) == 1
    assert events[0].layer_ids == (paint.id, new_bg.id, obj.id)

    # a later run replaces the background it created
    newer_bg, newer_obj = Layer(name="Background"), Layer(name="Object")
    stack.replace_background(newer_bg, newer_obj)
    assert stack.ids == (paint.id, obj.id, newer_bg.id, newer_obj.id)


def test_reset_rejects_duplicate_ids() -> None:
    stack = LayerStack()
    layer = Layer(name="x")
    with pytest.raises(ValidationError):
        stack.reset([layer, layer])
    assert len(stack) == 0
