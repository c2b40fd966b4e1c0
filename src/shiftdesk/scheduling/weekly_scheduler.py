"""Weekly schedule generation.

This module provides the WeeklyScheduleGenerator class that orchestrates
the weekday and weekend allocators across seven consecutive dates with
support for:
- All-or-nothing conflict checking against existing shifts
- At most one shift per (date, shift type)
- Weekend rotation state carried from day to day
"""

import logging
from datetime import date, timedelta
from typing import Callable, Optional

from shiftdesk.domain.errors import ConflictError
from shiftdesk.domain.models import (
    Employee,
    Leave,
    Shift,
    ShiftType,
    WeekendRotationState,
    WeeklySchedule,
)
from shiftdesk.domain.policies import DefaultStaffingPolicy, StaffingPolicy
from shiftdesk.scheduling.availability import AvailabilityResolver
from shiftdesk.scheduling.weekday_allocator import WeekdayShiftAllocator
from shiftdesk.scheduling.weekend_allocator import WeekendShiftAllocator

logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7

ShiftLookup = Callable[[date, ShiftType], Optional[Shift]]


def week_dates(week_start: date) -> list[date]:
    """The seven dates of the week starting at ``week_start``."""
    return [week_start + timedelta(days=i) for i in range(DAYS_PER_WEEK)]


def is_weekend(d: date) -> bool:
    """Saturday and Sunday are weekend days."""
    return d.weekday() >= 5


class WeeklyScheduleGenerator:
    """Generates one week's full shift set.

    The generator itself is pure. It checks an injected shift lookup for
    conflicts, runs the allocators date by date and returns the shifts
    together with the new weekend rotation state. Persisting both is the
    caller's job.

    Example:
        >>> generator = WeeklyScheduleGenerator()
        >>> schedule = generator.generate(
        ...     date(2024, 1, 22), roster, approved_leaves,
        ...     find_shift=repository.find_shift,
        ... )
    """

    def __init__(
        self,
        staffing_policy: Optional[StaffingPolicy] = None,
        resolver: Optional[AvailabilityResolver] = None,
    ):
        """Initialize the generator with policies.

        Args:
            staffing_policy: Quotas and shift type order.
            resolver: Availability rules shared by both allocators.
        """
        self.staffing_policy = staffing_policy or DefaultStaffingPolicy()
        self.resolver = resolver or AvailabilityResolver()

        self.weekday_allocator = WeekdayShiftAllocator(
            staffing_policy=self.staffing_policy,
            resolver=self.resolver,
        )
        self.weekend_allocator = WeekendShiftAllocator(
            staffing_policy=self.staffing_policy,
            resolver=self.resolver,
        )

    def planned_keys(self, week_start: date) -> list[tuple[date, ShiftType]]:
        """Every (date, shift type) pair the week will produce."""
        return [
            (d, shift_type)
            for d in week_dates(week_start)
            for shift_type in self.staffing_policy.shift_types_for(d)
        ]

    def find_conflicts(self, week_start: date, find_shift: ShiftLookup) -> list[Shift]:
        """Existing shifts that occupy any planned (date, shift type) pair."""
        conflicts = []
        for d, shift_type in self.planned_keys(week_start):
            existing = find_shift(d, shift_type)
            if existing is not None:
                conflicts.append(existing)
        return conflicts

    def generate(
        self,
        week_start: date,
        roster: list[Employee],
        approved_leaves: list[Leave],
        state: Optional[WeekendRotationState] = None,
        find_shift: Optional[ShiftLookup] = None,
    ) -> WeeklySchedule:
        """Generate a complete weekly schedule.

        Args:
            week_start: First date of the week (any weekday).
            roster: Active employees in stable roster order.
            approved_leaves: Approved leaves intersecting the week.
            state: Weekend rotation state; seeded from the roster if omitted.
            find_shift: Lookup of already stored shifts. When given, any
                existing shift in the week aborts generation.

        Returns:
            WeeklySchedule with one shift per (date, shift type).

        Raises:
            ConflictError: A shift already exists in the week; nothing is
                generated.
        """
        if find_shift is not None:
            conflicts = self.find_conflicts(week_start, find_shift)
            if conflicts:
                logger.error(
                    "Week of %s already has %d shifts scheduled",
                    week_start,
                    len(conflicts),
                )
                raise ConflictError(
                    f"Shifts already exist for the week of {week_start}",
                    conflicts=conflicts,
                )

        if state is None:
            state = WeekendRotationState.from_employees(roster)

        schedule = WeeklySchedule(week_start=week_start)
        shifts_by_key: dict[tuple[date, ShiftType], Shift] = {}

        for d in week_dates(week_start):
            if is_weekend(d):
                state, day_shifts, unfilled = self.weekend_allocator.allocate(
                    d, roster, approved_leaves, state
                )
            else:
                day_shifts, unfilled = self.weekday_allocator.allocate(
                    d, roster, approved_leaves
                )

            for shift in day_shifts:
                if shift.key in shifts_by_key:
                    raise ConflictError(
                        f"Allocator produced a second {shift.shift_type.value} "
                        f"shift on {shift.shift_date}",
                        conflicts=[shifts_by_key[shift.key]],
                    )
                shifts_by_key[shift.key] = shift
            schedule.unfilled.extend(unfilled)

        schedule.shifts = list(shifts_by_key.values())
        schedule.rotation_state = state

        logger.info(
            "Generated %d shifts for week %s to %s (%d unfilled slots)",
            len(schedule.shifts),
            schedule.week_start,
            schedule.week_end,
            len(schedule.unfilled),
        )
        return schedule
