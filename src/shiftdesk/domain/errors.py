"""Exceptions raised by the scheduling core.

Only operations that must fail as a whole raise. A shift slot or task
without an eligible employee is a reportable outcome, not an error, and
is returned to the caller instead.
"""

from typing import Optional


class ShiftdeskError(Exception):
    """Base exception for all scheduling core errors."""

    pass


class ConflictError(ShiftdeskError):
    """Raised when a shift already exists for a (date, shift type) pair."""

    def __init__(self, message: str, conflicts: Optional[list] = None):
        super().__init__(message)
        self.conflicts = conflicts or []


class InvalidRangeError(ShiftdeskError):
    """Raised when a date range is malformed or not allowed."""

    pass


class LeaveStateError(ShiftdeskError):
    """Raised on an illegal leave status transition or edit."""

    pass


class EligibilityError(ShiftdeskError):
    """Raised when an explicit assignment breaks an eligibility rule."""

    pass
