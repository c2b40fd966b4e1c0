"""Weekday shift allocation.

Fills the four weekday shift types of a single date from the available
pool, seniors first, in roster order.
"""

import logging
from datetime import date
from typing import Optional

from shiftdesk.domain.models import (
    Employee,
    Leave,
    Shift,
    ShiftType,
    SkillLevel,
    UnfilledSlot,
)
from shiftdesk.domain.policies import DefaultStaffingPolicy, StaffingPolicy
from shiftdesk.scheduling.availability import AvailabilityResolver

logger = logging.getLogger(__name__)


class WeekdayShiftAllocator:
    """Greedy per-date allocator for weekday shifts.

    For each weekday shift type in the policy's evaluation order the
    allocator takes the employees still unused that day, fills the senior
    slots and then the junior slots in roster order (no secondary sort),
    and marks everyone picked as used for the rest of the date. A shift
    whose quota cannot be met is still produced, understaffed.
    """

    def __init__(
        self,
        staffing_policy: Optional[StaffingPolicy] = None,
        resolver: Optional[AvailabilityResolver] = None,
    ):
        self.staffing_policy = staffing_policy or DefaultStaffingPolicy()
        self.resolver = resolver or AvailabilityResolver()

    def allocate(
        self,
        d: date,
        roster: list[Employee],
        approved_leaves: list[Leave],
    ) -> tuple[list[Shift], list[UnfilledSlot]]:
        """Allocate all weekday shifts for a date.

        Args:
            d: Date being staffed.
            roster: Active roster in its stable iteration order.
            approved_leaves: Approved leaves that may cover the date.

        Returns:
            Tuple of (shifts in evaluation order, unfilled slots).
        """
        used: set[str] = set()
        shifts = []
        unfilled = []

        for shift_type in self.staffing_policy.weekday_shift_types():
            shift, missing = self._allocate_shift(
                d, shift_type, roster, approved_leaves, used
            )
            used.update(shift.employee_ids)
            shifts.append(shift)
            unfilled.extend(missing)

        return shifts, unfilled

    def _allocate_shift(
        self,
        d: date,
        shift_type: ShiftType,
        roster: list[Employee],
        approved_leaves: list[Leave],
        used: set[str],
    ) -> tuple[Shift, list[UnfilledSlot]]:
        """Fill one shift type from the unused available pool."""
        quota = self.staffing_policy.get_quota(shift_type)
        pool = self.resolver.available_employees(
            d, roster, approved_leaves, exclude_ids=used
        )

        shift = Shift(shift_date=d, shift_type=shift_type, quota=quota)
        missing = []

        for level in (SkillLevel.SENIOR, SkillLevel.JUNIOR):
            needed = quota.slots_for(level)
            candidates = [e for e in pool if e.skill_level == level]
            for employee in candidates[:needed]:
                shift.add_employee(employee.id)

            shortfall = needed - min(needed, len(candidates))
            if shortfall > 0:
                missing.append(
                    UnfilledSlot(
                        shift_date=d,
                        shift_type=shift_type,
                        required_level=level,
                        missing=shortfall,
                    )
                )

        for slot in missing:
            logger.warning("Understaffed: %s", slot)
        logger.debug(
            "%s %s -> %s", d, shift_type.value, ", ".join(shift.employee_ids) or "-"
        )
        return shift, missing
