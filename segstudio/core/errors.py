"""Shared error types.

The goal is to make errors explicit and easy to handle at the editor boundary:
invalid input is shown to the user as-is, processing failures send the tool
back to point collection, provider errors come from generation backends.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(eq=False)
class AppError(Exception):
    """Base error for application-level failures."""

    message: str
    cause: Exception | None = None

    def __str__(self) -> str:  # pragma: no cover
        if self.cause is None:
            return self.message
        return f"{self.message} (cause: {self.cause})"


class ValidationError(AppError):
    """Invalid user input or configuration."""


class InvalidInputError(ValidationError):
    """Segmentation input rejected (no positive point, seed out of bounds, bad sizes)."""


class ProcessingError(AppError):
    """Unexpected failure inside grow/build/dilate/split."""


class IntegrationError(AppError):
    """External integration failed."""


class ProviderError(IntegrationError):
    """Generation provider failed or is not configured."""


class InfrastructureError(AppError):
    """IO/OS/FS failures."""


class BusyError(AppError):
    """A job is already in flight."""


class CancelledError(AppError):
    """User-initiated cancellation."""
