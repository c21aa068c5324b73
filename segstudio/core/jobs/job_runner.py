from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from threading import Event, RLock
from typing import Generic, TypeVar

from segstudio.core.errors import BusyError, CancelledError
from segstudio.core.events import EventBus
from segstudio.core.events.job_events import (
    JobCancelled,
    JobFailed,
    JobFinished,
    JobProgress,
    JobStarted,
)

T = TypeVar("T")

log = logging.getLogger(__name__)


class CancelToken:
    """Cooperative cancellation token for background jobs."""

    def __init__(self) -> None:
        self._evt = Event()

    def cancel(self) -> None:
        self._evt.set()

    def is_cancelled(self) -> bool:
        return self._evt.is_set()

    def raise_if_cancelled(self) -> None:
        if self._evt.is_set():
            raise CancelledError("Job cancelled")


ProgressFn = Callable[[float, str | None], None]
JobFn = Callable[[CancelToken, ProgressFn], T]


@dataclass(slots=True)
class JobHandle(Generic[T]):
    job_id: str
    name: str
    future: Future[T]
    cancel_token: CancelToken

    def cancel(self) -> None:
        self.cancel_token.cancel()

    def done(self) -> bool:
        return self.future.done()


class JobRunner:
    """Single-slot job runner that publishes lifecycle events to an EventBus.

    At most one job is outstanding at a time: ``submit`` raises ``BusyError``
    while the previous handle is unresolved. The work runs on one background
    thread so the caller never blocks on pixel processing.
    """

    def __init__(self, event_bus: EventBus) -> None:
        self._bus = event_bus
        self._pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="job")
        self._lock = RLock()
        self._current: JobHandle | None = None

    @property
    def busy(self) -> bool:
        with self._lock:
            return self._current is not None and not self._current.done()

    @property
    def current(self) -> JobHandle | None:
        with self._lock:
            return self._current

    def submit(self, name: str, fn: JobFn[T]) -> JobHandle[T]:
        with self._lock:
            if self._current is not None and not self._current.done():
                raise BusyError(f"Job '{self._current.name}' is still running")
            job_id = uuid.uuid4().hex
            token = CancelToken()

            def progress(p: float, msg: str | None = None) -> None:
                pp = 0.0 if p < 0 else 1.0 if p > 1 else p
                self._bus.publish(JobProgress(job_id=job_id, name=name, progress=pp, message=msg))

            def _run() -> T:
                try:
                    token.raise_if_cancelled()
                    result = fn(token, progress)
                except CancelledError:
                    log.info("Job cancelled: %s", name, extra={"job_id": job_id})
                    self._bus.publish(JobCancelled(job_id=job_id, name=name))
                    raise
                except Exception as e:  # noqa: BLE001
                    log.warning("Job failed: %s: %s", name, e, extra={"job_id": job_id})
                    self._bus.publish(JobFailed(job_id=job_id, name=name, error=str(e)))
                    raise
                progress(1.0, "finished")
                self._bus.publish(JobFinished(job_id=job_id, name=name, result=result))
                return result

            self._bus.publish(JobStarted(job_id=job_id, name=name))
            progress(0.0, "started")
            fut = self._pool.submit(_run)
            handle: JobHandle[T] = JobHandle(
                job_id=job_id, name=name, future=fut, cancel_token=token
            )
            self._current = handle
            return handle

    def shutdown(self) -> None:
        with self._lock:
            if self._current is not None:
                self._current.cancel()
        self._pool.shutdown(wait=False, cancel_futures=True)
