"""Validation module for verifying roster correctness."""

from shiftdesk.validation.validator import (
    RosterValidator,
    ValidationError,
    ValidationErrorType,
    ValidationResult,
)

__all__ = [
    "RosterValidator",
    "ValidationError",
    "ValidationErrorType",
    "ValidationResult",
]
