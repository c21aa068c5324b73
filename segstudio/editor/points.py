from __future__ import annotations

from collections.abc import Iterator

from segstudio.segmentation.types import Point, PointKind


class PointSet:
    """Ordered collection of prompt points for one segmentation session."""

    def __init__(self) -> None:
        self._points: list[Point] = []

    def add(self, x: int, y: int, kind: PointKind = PointKind.POSITIVE) -> Point:
        point = Point(int(x), int(y), kind)
        self._points.append(point)
        return point

    def clear(self) -> None:
        self._points.clear()

    @property
    def positives(self) -> list[Point]:
        return [p for p in self._points if p.is_positive]

    @property
    def negatives(self) -> list[Point]:
        return [p for p in self._points if not p.is_positive]

    def has_positive(self) -> bool:
        return any(p.is_positive for p in self._points)

    def as_tuple(self) -> tuple[Point, ...]:
        return tuple(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[Point]:
        return iter(list(self._points))
