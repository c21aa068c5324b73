"""Stage timers.

``time_block`` yields a :class:`StageTiming` whose ``elapsed_ms`` is filled in
when the block exits, so callers can keep per-stage durations as well as log
them. ``timed`` wraps a whole function in one block.
"""

from __future__ import annotations

import functools
import logging
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, TypeVar

T = TypeVar("T")


@dataclass(slots=True)
class StageTiming:
    name: str
    elapsed_ms: float = 0.0


@contextmanager
def time_block(
    name: str,
    *,
    logger: logging.Logger | None = None,
    level: int = logging.DEBUG,
    sink: dict[str, float] | None = None,
) -> Iterator[StageTiming]:
    """Time the enclosed block; record it into *sink* under *name* if given."""
    timing = StageTiming(name)
    start = time.perf_counter()
    try:
        yield timing
    finally:
        timing.elapsed_ms = (time.perf_counter() - start) * 1000
        if sink is not None:
            sink[name] = timing.elapsed_ms
        (logger or logging.getLogger(__name__)).log(
            level,
            "%s: %.1f ms",
            name,
            timing.elapsed_ms,
            extra={"event": "timing", "duration_ms": round(timing.elapsed_ms, 3)},
        )


def timed(name: str | None = None) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Log each call's duration; *name* defaults to the function's qualified name."""

    def _decorator(fn: Callable[..., T]) -> Callable[..., T]:
        label = name or fn.__qualname__
        logger = logging.getLogger(fn.__module__)

        @functools.wraps(fn)
        def _wrapped(*args: Any, **kwargs: Any) -> T:
            with time_block(label, logger=logger):
                return fn(*args, **kwargs)

        return _wrapped

    return _decorator
