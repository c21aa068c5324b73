"""RGBA pixel buffer shared by images, masks and layers.

Samples are row-major RGBA, 4 bytes per pixel. The backing numpy array is
marked read-only: every operation that "changes" pixels builds a new buffer,
which keeps undo history and cached thumbnails valid.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from segstudio.core.errors import InvalidInputError, ProcessingError

CHANNELS = 4


class PixelBuffer:
    """Immutable width x height grid of RGBA uint8 samples."""

    __slots__ = ("_data",)

    def __init__(
        self,
        width: int,
        height: int,
        samples: bytes | bytearray | Sequence[int] | np.ndarray | None = None,
    ) -> None:
        if int(width) <= 0 or int(height) <= 0:
            raise InvalidInputError(f"Buffer size must be positive, got {width}x{height}")
        width, height = int(width), int(height)
        expected = width * height * CHANNELS
        if samples is None:
            data = np.zeros((height, width, CHANNELS), dtype=np.uint8)
        else:
            if isinstance(samples, (bytes, bytearray)):
                flat = np.frombuffer(bytes(samples), dtype=np.uint8)
            else:
                flat = np.asarray(samples)
                if flat.dtype != np.uint8:
                    flat = np.clip(flat, 0, 255).astype(np.uint8)
                flat = flat.reshape(-1)
            if flat.size != expected:
                raise ProcessingError(
                    f"Buffer size mismatch: expected {expected} samples for "
                    f"{width}x{height}, got {flat.size}"
                )
            data = flat.reshape(height, width, CHANNELS).copy()
        data.setflags(write=False)
        self._data = data

    @classmethod
    def from_array(cls, arr: np.ndarray) -> PixelBuffer:
        """Wrap an (H, W), (H, W, 3) or (H, W, 4) array; missing alpha becomes 255."""
        a = np.asarray(arr)
        if a.dtype != np.uint8:
            a = np.clip(a, 0, 255).astype(np.uint8)
        if a.ndim == 2:
            a = np.stack([a, a, a], axis=-1)
        if a.ndim != 3 or a.shape[2] not in (3, 4):
            raise InvalidInputError(f"Unsupported pixel array shape: {a.shape}")
        if a.shape[2] == 3:
            alpha = np.full(a.shape[:2] + (1,), 255, dtype=np.uint8)
            a = np.concatenate([a, alpha], axis=-1)
        h, w = a.shape[:2]
        return cls(w, h, a)

    @classmethod
    def filled(cls, width: int, height: int, rgba: Sequence[int]) -> PixelBuffer:
        if len(rgba) != CHANNELS:
            raise InvalidInputError("Fill colour must have 4 components")
        arr = np.empty((int(height), int(width), CHANNELS), dtype=np.uint8)
        arr[...] = np.asarray(rgba, dtype=np.uint8)
        return cls(width, height, arr)

    @property
    def width(self) -> int:
        return int(self._data.shape[1])

    @property
    def height(self) -> int:
        return int(self._data.shape[0])

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @property
    def array(self) -> np.ndarray:
        """Read-only (H, W, 4) view."""
        return self._data

    @property
    def samples(self) -> bytes:
        return self._data.tobytes()

    @property
    def rgb(self) -> np.ndarray:
        return self._data[..., :3]

    @property
    def alpha(self) -> np.ndarray:
        return self._data[..., 3]

    def to_array(self) -> np.ndarray:
        """Writable copy, for building a derived buffer."""
        return self._data.copy()

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        if not self.contains(x, y):
            raise InvalidInputError(f"Pixel ({x}, {y}) outside {self.width}x{self.height}")
        r, g, b, a = (int(v) for v in self._data[y, x])
        return r, g, b, a

    def same_size(self, other: PixelBuffer) -> bool:
        return self.size == other.size

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self.size == other.size and bool(np.array_equal(self._data, other._data))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"PixelBuffer({self.width}x{self.height})"
