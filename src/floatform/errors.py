"""Exception hierarchy for floatform."""

from __future__ import annotations

from typing import Any


class FloatformError(Exception):
    """Base class for every error raised by floatform."""


class ConfigError(FloatformError):
    """A required construction argument is missing or invalid."""


class ValidationError(FloatformError):
    """A field value was rejected by its validator.

    ``value`` holds the offending raw text.
    """

    def __init__(self, message: str, value: Any = None) -> None:
        super().__init__(message)
        self.value = value


class HostOperationError(FloatformError):
    """The host could not perform an operation.

    Usually the buffer, window or variable it refers to no longer exists.
    """
