"""Background jobs infrastructure.

A small, thread-based single-slot runner so segmentation never blocks the
interactive surface.
"""

from .job_runner import CancelToken, JobHandle, JobRunner, ProgressFn

__all__ = [
    "CancelToken",
    "JobHandle",
    "JobRunner",
    "ProgressFn",
]
