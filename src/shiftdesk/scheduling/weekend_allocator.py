"""Weekend shift allocation with fairness rotation.

Each weekend shift type takes exactly one employee. The level needed
comes from the shift's quota or, for a pure-rotation quota, from an
alternation key derived from the week number. Among the candidates of
that level the one with the fewest weekend shifts so far is picked,
ties keeping roster order.

The allocator does not stop one employee from being picked for more than
one weekend shift type on the same date; each type's pool is computed
independently.
"""

import logging
from datetime import date
from typing import Optional

from shiftdesk.domain.models import (
    WEEKEND_SHIFT_TYPES,
    Employee,
    Leave,
    Shift,
    ShiftType,
    SkillLevel,
    StaffingQuota,
    UnfilledSlot,
    WeekendRotationState,
    WeekendShiftRecord,
    epoch_days,
)
from shiftdesk.domain.policies import DefaultStaffingPolicy, StaffingPolicy
from shiftdesk.scheduling.availability import AvailabilityResolver

logger = logging.getLogger(__name__)


def rotation_level(d: date, shift_type: ShiftType) -> SkillLevel:
    """Level required by the alternation key for a pure-rotation slot.

    ``week_number = epoch_days // 7``; the slot is Senior when
    ``(week_number + index of the type) % 2 == 0``, Junior otherwise.
    """
    week_number = epoch_days(d) // 7
    shift_type_index = WEEKEND_SHIFT_TYPES.index(shift_type)
    if (week_number + shift_type_index) % 2 == 0:
        return SkillLevel.SENIOR
    return SkillLevel.JUNIOR


def required_level(d: date, shift_type: ShiftType, quota: StaffingQuota) -> SkillLevel:
    """Level needed for a weekend slot: the fixed quota level, else rotation."""
    fixed = quota.fixed_level
    if fixed is not None:
        return fixed
    return rotation_level(d, shift_type)


class WeekendShiftAllocator:
    """Per-date allocator for weekend shifts.

    The allocator is pure: it reads the rotation state it is given and
    returns a new one, leaving both the input state and the employees
    untouched. The caller persists the returned state.

    Example:
        >>> allocator = WeekendShiftAllocator()
        >>> state = WeekendRotationState.from_employees(roster)
        >>> state, shifts, unfilled = allocator.allocate(saturday, roster, [], state)
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
        state: WeekendRotationState,
    ) -> tuple[WeekendRotationState, list[Shift], list[UnfilledSlot]]:
        """Allocate all weekend shifts for a date.

        Args:
            d: Weekend date being staffed.
            roster: Active roster in its stable iteration order.
            approved_leaves: Approved leaves that may cover the date.
            state: Rotation state before this date.

        Returns:
            Tuple of (new state, shifts in evaluation order, unfilled slots).
            An unfilled type still yields a shift with no employees.
        """
        shifts = []
        unfilled = []

        for shift_type in self.staffing_policy.weekend_shift_types():
            quota = self.staffing_policy.get_quota(shift_type)
            level = required_level(d, shift_type, quota)
            shift = Shift(shift_date=d, shift_type=shift_type, quota=quota)

            pick = self.select_candidate(d, roster, approved_leaves, level, state)
            if pick is None:
                slot = UnfilledSlot(shift_date=d, shift_type=shift_type, required_level=level)
                logger.warning("Unassigned weekend slot: %s", slot)
                unfilled.append(slot)
            else:
                shift.add_employee(pick.id)
                # Recorded before the next type so the same date sees the new count
                state = state.with_assignment(
                    pick.id,
                    WeekendShiftRecord(shift_date=d, shift_type=shift_type, skill_level=level),
                )
                logger.debug(
                    "%s %s -> %s (%s, now %d weekend shifts)",
                    d,
                    shift_type.value,
                    pick.id,
                    level.value,
                    state.count(pick.id),
                )

            shifts.append(shift)

        return state, shifts, unfilled

    def select_candidate(
        self,
        d: date,
        roster: list[Employee],
        approved_leaves: list[Leave],
        level: SkillLevel,
        state: WeekendRotationState,
    ) -> Optional[Employee]:
        """Pick the available employee of a level with the fewest weekend shifts."""
        pool = self.resolver.available_at_level(d, roster, level, approved_leaves)
        if not pool:
            return None
        # sorted() is stable, so equal counts keep roster order
        ranked = sorted(pool, key=lambda e: state.count(e.id))
        return ranked[0]
