"""Availability resolution for shift allocation.

Decides which employees may work on a given date, net of their fixed
weekend-off dates and approved leave.
"""

import logging
from datetime import date
from typing import Iterable, Optional

from shiftdesk.domain.models import Employee, Leave, LeaveStatus, SkillLevel

logger = logging.getLogger(__name__)


class AvailabilityResolver:
    """Determines which employees are eligible to work on a date.

    An employee is available when they are active, the date is not one of
    their two fixed weekend-off dates, and no approved leave covers the
    date (both leave ends inclusive). Only leaves with status Approved are
    considered, whatever the caller passes in.

    Example:
        >>> resolver = AvailabilityResolver()
        >>> available = resolver.available_employees(day, roster, leaves)
    """

    def available_employees(
        self,
        d: date,
        roster: Iterable[Employee],
        approved_leaves: Iterable[Leave] = (),
        exclude_ids: Optional[set[str]] = None,
    ) -> list[Employee]:
        """Get roster employees available on a date, in roster order.

        Args:
            d: Date being staffed.
            roster: Employees to consider.
            approved_leaves: Leaves to honor; non-approved ones are ignored.
            exclude_ids: Employees already used and not to be returned.

        Returns:
            Available employees; may be empty.
        """
        on_leave = self.employees_on_leave(d, approved_leaves)
        excluded = exclude_ids or set()

        available = []
        for employee in roster:
            if employee.id in excluded:
                continue
            if not self.is_available(employee, d, on_leave):
                continue
            available.append(employee)

        if not available:
            logger.debug("No employees available on %s", d)
        return available

    def available_at_level(
        self,
        d: date,
        roster: Iterable[Employee],
        level: SkillLevel,
        approved_leaves: Iterable[Leave] = (),
        exclude_ids: Optional[set[str]] = None,
    ) -> list[Employee]:
        """Get available employees of one skill level, in roster order."""
        return [
            e
            for e in self.available_employees(d, roster, approved_leaves, exclude_ids)
            if e.skill_level == level
        ]

    def is_available(
        self,
        employee: Employee,
        d: date,
        on_leave: set[str],
    ) -> bool:
        """Check a single employee against the availability rules."""
        if not employee.is_active:
            return False
        if employee.is_scheduled_off(d):
            return False
        if employee.id in on_leave:
            return False
        return True

    def employees_on_leave(
        self,
        d: date,
        leaves: Iterable[Leave],
    ) -> set[str]:
        """Ids of employees with an approved leave covering a date."""
        return {
            leave.employee_id
            for leave in leaves
            if leave.status == LeaveStatus.APPROVED and leave.covers(d)
        }
