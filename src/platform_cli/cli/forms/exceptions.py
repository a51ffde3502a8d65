"""Errors raised while resolving a form."""

from typing import Any


class FormError(Exception):
    """Base class for form errors. Always names the offending field."""

    def __init__(self, key: str, message: str) -> None:
        self.key = key
        self.message = message
        super().__init__(f"{key}: {message}")


class InvalidValueError(FormError):
    """A supplied value failed normalization or validation."""

    def __init__(self, key: str, value: Any, reason: str = "Invalid value") -> None:
        self.value = value
        self.reason = reason
        super().__init__(key, f"{reason}: {value!r}")


class MissingValueError(FormError):
    """A required field has no value and no default."""

    def __init__(self, key: str) -> None:
        super().__init__(key, "A value is required")
