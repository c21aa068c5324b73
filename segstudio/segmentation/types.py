from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PointKind(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"


@dataclass(frozen=True, slots=True)
class Point:
    x: int  # image-space pixel column
    y: int  # image-space pixel row
    kind: PointKind = PointKind.POSITIVE

    @property
    def is_positive(self) -> bool:
        return self.kind is PointKind.POSITIVE


# Pixel identity inside a region: y * width + x.
RegionKey = int


def pack_key(x: int, y: int, width: int) -> RegionKey:
    return y * width + x


def unpack_key(key: RegionKey, width: int) -> tuple[int, int]:
    y, x = divmod(key, width)
    return x, y
