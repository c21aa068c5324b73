"""Ordered layer stack.

Layers are kept in render order (index 0 is drawn first). The stack is an
ordered map keyed by a stable layer id; every mutation happens under one
lock and readers get immutable snapshots, so a renderer never observes a
half-applied change.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from threading import RLock
from typing import Any

from segstudio.config import BACKGROUND_LAYER_ID, BACKGROUND_LAYER_NAME
from segstudio.core.errors import ValidationError
from segstudio.core.events import LayersChanged
from segstudio.imaging.pixel_buffer import PixelBuffer

log = logging.getLogger(__name__)


class BlendMode(str, Enum):
    NORMAL = "normal"
    MULTIPLY = "multiply"
    SCREEN = "screen"
    OVERLAY = "overlay"
    DARKEN = "darken"
    LIGHTEN = "lighten"


def new_layer_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True, slots=True)
class Layer:
    id: str = field(default_factory=new_layer_id)
    name: str = ""
    visible: bool = True
    locked: bool = False
    opacity: int = 100  # 0..100
    blend_mode: BlendMode = BlendMode.NORMAL
    pixel_data: PixelBuffer | None = None
    thumbnail: str | None = None  # data URL

    @property
    def is_background(self) -> bool:
        return self.id == BACKGROUND_LAYER_ID or self.name.strip().lower() == "background"


_UPDATABLE = {f.name for f in fields(Layer)} - {"id"}


def _normalize_changes(changes: dict[str, Any]) -> dict[str, Any]:
    unknown = set(changes) - _UPDATABLE
    if unknown:
        raise ValidationError(f"Unknown layer field(s): {', '.join(sorted(unknown))}")
    out = dict(changes)
    if "opacity" in out:
        out["opacity"] = int(max(0, min(100, int(out["opacity"]))))
    if "blend_mode" in out:
        try:
            out["blend_mode"] = BlendMode(out["blend_mode"])
        except ValueError as e:
            raise ValidationError(f"Unknown blend mode: {out['blend_mode']}") from e
    if "pixel_data" in out and out["pixel_data"] is not None:
        if not isinstance(out["pixel_data"], PixelBuffer):
            raise ValidationError("pixel_data must be a PixelBuffer")
    return out


class LayerStack:
    def __init__(self, on_change: Callable[[LayersChanged], None] | None = None) -> None:
        self._lock = RLock()
        self._order: list[str] = []
        self._layers: dict[str, Layer] = {}
        self._active_id: str | None = None
        self._on_change = on_change

    # -- reads ---------------------------------------------------------------

    def snapshot(self) -> tuple[Layer, ...]:
        with self._lock:
            return tuple(self._layers[i] for i in self._order)

    @property
    def ids(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._order)

    @property
    def active_layer_id(self) -> str | None:
        with self._lock:
            return self._active_id

    @property
    def active_layer(self) -> Layer | None:
        with self._lock:
            return None if self._active_id is None else self._layers.get(self._active_id)

    def get(self, layer_id: str) -> Layer:
        with self._lock:
            try:
                return self._layers[layer_id]
            except KeyError:
                raise ValidationError(f"Layer not found: {layer_id}") from None

    def index_of(self, layer_id: str) -> int:
        with self._lock:
            try:
                return self._order.index(layer_id)
            except ValueError:
                raise ValidationError(f"Layer not found: {layer_id}") from None

    def __len__(self) -> int:
        with self._lock:
            return len(self._order)

    def __contains__(self, layer_id: object) -> bool:
        with self._lock:
            return layer_id in self._layers

    # -- writes --------------------------------------------------------------

    def reset(self, layers: list[Layer] | tuple[Layer, ...] = (), active_id: str | None = None) -> None:
        by_id = {layer.id: layer for layer in layers}
        if len(by_id) != len(layers):
            raise ValidationError("Duplicate layer ids")
        with self._lock:
            self._order = [layer.id for layer in layers]
            self._layers = by_id
            self._active_id = active_id if active_id in self._layers else (
                self._order[0] if self._order else None
            )
            self._notify()

    def add(
        self,
        name: str | None = None,
        *,
        index: int | None = None,
        activate: bool = True,
        **attrs: Any,
    ) -> Layer:
        """Create a layer (default name "Layer N") and insert it; appended by default."""
        with self._lock:
            layer_name = name if name is not None else f"Layer {len(self._order) + 1}"
            layer = Layer(name=layer_name, **_normalize_changes(attrs))
            return self.insert_at(len(self._order) if index is None else index, layer, activate=activate)

    def insert_at(self, index: int, layer: Layer, *, activate: bool = True) -> Layer:
        with self._lock:
            if layer.id in self._layers:
                raise ValidationError(f"Layer id already present: {layer.id}")
            pos = max(0, min(len(self._order), int(index)))
            self._order.insert(pos, layer.id)
            self._layers[layer.id] = layer
            if activate or self._active_id is None:
                self._active_id = layer.id
            self._notify()
            return layer

    def remove(self, layer_id: str) -> None:
        with self._lock:
            self._remove_locked(layer_id)
            self._notify()

    def update(self, layer_id: str, **changes: Any) -> Layer:
        with self._lock:
            current = self.get(layer_id)
            updated = replace(current, **_normalize_changes(changes))
            self._layers[layer_id] = updated
            self._notify()
            return updated

    def set_active(self, layer_id: str) -> None:
        with self._lock:
            if layer_id not in self._layers:
                raise ValidationError(f"Layer not found: {layer_id}")
            self._active_id = layer_id
            self._notify()

    def duplicate(self, layer_id: str) -> Layer:
        with self._lock:
            src = self.get(layer_id)
            copy = replace(src, id=new_layer_id(), name=f"{src.name} Copy")
            return self.insert_at(len(self._order), copy, activate=False)

    def move(self, layer_id: str, direction: str) -> None:
        """Swap with the neighbour above ("up") or below ("down"); no-op at the edges."""
        if direction not in ("up", "down"):
            raise ValidationError(f"Unknown direction: {direction}")
        with self._lock:
            index = self.index_of(layer_id)
            new_index = index + 1 if direction == "up" else index - 1
            if new_index < 0 or new_index >= len(self._order):
                return
            self._order[index], self._order[new_index] = self._order[new_index], self._order[index]
            self._notify()

    def replace_background(self, background: Layer, top: Layer) -> None:
        """Drop existing background layers, then append *background* and *top*.

        Runs as one critical section with a single change notification.
        *top* becomes active.
        """
        with self._lock:
            stale = [i for i in self._order if self._layers[i].is_background]
            if background.id == top.id:
                raise ValidationError(f"Duplicate layer id: {top.id}")
            for layer in (background, top):
                if layer.id in self._layers and layer.id not in stale:
                    raise ValidationError(f"Layer id already present: {layer.id}")
            for layer_id in stale:
                log.debug("Replacing background layer %s", layer_id, extra={"layer_id": layer_id})
                self._remove_locked(layer_id)
            self._order.extend([background.id, top.id])
            self._layers[background.id] = background
            self._layers[top.id] = top
            self._active_id = top.id
            self._notify()

    def _remove_locked(self, layer_id: str) -> None:
        if layer_id not in self._layers:
            raise ValidationError(f"Layer not found: {layer_id}")
        self._order.remove(layer_id)
        del self._layers[layer_id]
        if self._active_id == layer_id:
            self._active_id = self._order[0] if self._order else None

    def _notify(self) -> None:
        if self._on_change is None:
            return
        self._on_change(LayersChanged(layer_ids=tuple(self._order), active_layer_id=self._active_id))


def background_layer(pixel_data: PixelBuffer | None = None, thumbnail: str | None = None) -> Layer:
    """The initial layer created when an image is opened."""
    return Layer(
        id=BACKGROUND_LAYER_ID,
        name=BACKGROUND_LAYER_NAME,
        pixel_data=pixel_data,
        thumbnail=thumbnail,
    )
