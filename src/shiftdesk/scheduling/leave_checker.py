"""Leave overlap checks and leave request validation."""

import logging
from datetime import date
from typing import Iterable, Optional

from shiftdesk.domain.errors import ConflictError, InvalidRangeError
from shiftdesk.domain.models import DateRange, Leave, ranges_overlap
from shiftdesk.domain.policies import DefaultLeavePolicy, LeavePolicy

logger = logging.getLogger(__name__)

__all__ = ["LeaveOverlapChecker", "LeaveRequestValidator", "ranges_overlap"]


class LeaveOverlapChecker:
    """Finds pending or approved leaves that intersect a date range.

    Example:
        >>> checker = LeaveOverlapChecker(existing_leaves)
        >>> checker.check_leave_overlap("E001", date(2024, 2, 3), date(2024, 2, 5))
        True
    """

    def __init__(self, leaves: Iterable[Leave] = ()):
        self.leaves = list(leaves)

    def find_overlapping(
        self,
        employee_id: str,
        start_date: date,
        end_date: date,
        exclude_leave_id: Optional[str] = None,
    ) -> list[Leave]:
        """Get the employee's blocking leaves that overlap a range.

        Args:
            employee_id: Employee whose leaves are checked.
            start_date: First day of the range.
            end_date: Last day of the range (inclusive).
            exclude_leave_id: Leave to ignore, e.g. the one being edited.

        Returns:
            Pending or approved leaves intersecting the range.
        """
        requested = DateRange(start_date, end_date)
        return [
            leave
            for leave in self.leaves
            if leave.employee_id == employee_id
            and leave.is_blocking
            and leave.id != exclude_leave_id
            and ranges_overlap(leave, requested)
        ]

    def check_leave_overlap(
        self,
        employee_id: str,
        start_date: date,
        end_date: date,
        exclude_leave_id: Optional[str] = None,
    ) -> bool:
        """Check if a range intersects any of the employee's blocking leaves."""
        return bool(
            self.find_overlapping(employee_id, start_date, end_date, exclude_leave_id)
        )


class LeaveRequestValidator:
    """Validates new and edited leave requests before they are stored.

    Rules:
    - end date must not be before start date
    - the start date must be after today, unless the policy exempts the
      leave type (Emergency by default)
    - the request must not overlap another pending or approved leave of
      the same employee
    """

    def __init__(self, policy: Optional[LeavePolicy] = None):
        self.policy = policy or DefaultLeavePolicy()

    def validate(
        self,
        leave: Leave,
        existing_leaves: Iterable[Leave],
        today: Optional[date] = None,
    ) -> None:
        """Raise if the leave request may not be stored.

        Args:
            leave: The new or edited leave.
            existing_leaves: Leaves already stored (the leave itself is skipped).
            today: Reference date for the future-dating rule.

        Raises:
            InvalidRangeError: Dates are reversed or not far enough ahead.
            ConflictError: The request overlaps another blocking leave.
        """
        today = today or date.today()

        if leave.end_date < leave.start_date:
            raise InvalidRangeError(
                f"End date {leave.end_date} is before start date {leave.start_date}"
            )

        if self.policy.requires_future_start(leave.leave_type) and leave.start_date <= today:
            raise InvalidRangeError(
                f"{leave.leave_type.value} must start after {today}"
            )

        checker = LeaveOverlapChecker(existing_leaves)
        overlapping = checker.find_overlapping(
            leave.employee_id,
            leave.start_date,
            leave.end_date,
            exclude_leave_id=leave.id,
        )
        if overlapping:
            logger.info(
                "Leave %s for %s overlaps %s",
                leave.id,
                leave.employee_id,
                ", ".join(o.id for o in overlapping),
            )
            raise ConflictError(
                "Employee already has a leave request for overlapping dates",
                conflicts=overlapping,
            )

