"""Validation module for activity input and generated schedules."""

from weekplanner.validation.validator import (
    InputValidator,
    ScheduleValidator,
    ValidationError,
    ValidationErrorType,
    ValidationResult,
)

__all__ = [
    "InputValidator",
    "ScheduleValidator",
    "ValidationError",
    "ValidationErrorType",
    "ValidationResult",
]
