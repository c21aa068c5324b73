from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class JobStarted:
    job_id: str
    name: str


@dataclass(frozen=True, slots=True)
class JobProgress:
    job_id: str
    name: str
    progress: float  # 0..1
    message: str | None = None


@dataclass(frozen=True, slots=True)
class JobFinished:
    job_id: str
    name: str
    result: Any = None


@dataclass(frozen=True, slots=True)
class JobFailed:
    job_id: str
    name: str
    error: str


@dataclass(frozen=True, slots=True)
class JobCancelled:
    job_id: str
    name: str
