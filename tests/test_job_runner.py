from __future__ import annotations

import threading

import pytest

from segstudio.core.errors import BusyError, CancelledError
from segstudio.core.events import EventBus
from segstudio.core.events.job_events import JobCancelled, JobFailed, JobFinished, JobStarted
from segstudio.core.jobs.job_runner import JobRunner


def test_job_runner_publishes_lifecycle_and_result() -> None:
    bus = EventBus()
    runner = JobRunner(bus)
    started: list[JobStarted] = []
    finished: list[JobFinished] = []
    bus.subscribe(JobStarted, started.append)
    bus.subscribe(JobFinished, finished.append)

    handle = runner.submit("answer", lambda _token, _progress: 42)

    assert handle.future.result(timeout=2.0) == 42
    assert [e.name for e in started] == ["answer"]
    assert finished[0].result == 42
    runner.shutdown()


def test_job_runner_allows_single_outstanding_job() -> None:
    runner = JobRunner(EventBus())
    gate = threading.Event()

    def blocker(_token, _progress):
        gate.wait(timeout=2.0)
        return "done"

    first = runner.submit("first", blocker)
    assert runner.busy is True
    with pytest.raises(BusyError):
        runner.submit("second", lambda _t, _p: None)

    gate.set()
    assert first.future.result(timeout=2.0) == "done"
    assert runner.busy is False
    assert runner.submit("third", lambda _t, _p: 3).future.result(timeout=2.0) == 3
    runner.shutdown()


def test_job_runner_emits_single_cancel_event_when_cancelled_during_run() -> None:
    bus = EventBus()
    runner = JobRunner(bus)
    cancelled_events: list[JobCancelled] = []
    bus.subscribe(JobCancelled, cancelled_events.append)
    gate = threading.Event()

    def cancellable_job(token, _progress):
        gate.wait(timeout=2.0)
        token.raise_if_cancelled()
        return "done"

    handle = runner.submit("cancel-mid", cancellable_job)
    handle.cancel()
    gate.set()

    with pytest.raises(CancelledError):
        handle.future.result(timeout=2.0)
    assert len(cancelled_events) == 1
    runner.shutdown()


def test_job_runner_publishes_failure() -> None:
    bus = EventBus()
    runner = JobRunner(bus)
    failed: list[JobFailed] = []
    bus.subscribe(JobFailed, failed.append)

    def broken(_token, _progress):
        raise ValueError("bad pixels")

    handle = runner.submit("broken", broken)
    with pytest.raises(ValueError):
        handle.future.result(timeout=2.0)
    assert failed[0].error == "bad pixels"
    runner.shutdown()


def test_job_that_finished_its_work_is_not_reported_cancelled() -> None:
    bus = EventBus()
    runner = JobRunner(bus)
    cancelled: list[JobCancelled] = []
    finished: list[JobFinished] = []
    bus.subscribe(JobCancelled, cancelled.append)
    bus.subscribe(JobFinished, finished.append)
    gate = threading.Event()

    def late_cancel(_token, _progress):
        gate.wait(timeout=2.0)
        return "committed"

    handle = runner.submit("late-cancel", late_cancel)
    handle.cancel()
    gate.set()

    assert handle.future.result(timeout=2.0) == "committed"
    assert cancelled == []
    assert finished[0].result == "committed"
    runner.shutdown()
