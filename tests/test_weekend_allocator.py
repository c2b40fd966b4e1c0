"""Tests for weekend shift allocation and rotation fairness."""

from datetime import date, timedelta

import pytest

from shiftdesk.domain.models import (
    Employee,
    Leave,
    LeaveStatus,
    ShiftType,
    SkillLevel,
    StaffingQuota,
    WeekendFairnessMetrics,
    WeekendRotationState,
)
from shiftdesk.domain.policies import DefaultStaffingPolicy
from shiftdesk.scheduling.weekend_allocator import (
    WeekendShiftAllocator,
    required_level,
    rotation_level,
)

SATURDAY = date(2024, 1, 27)
SUNDAY = date(2024, 1, 28)


def make_roster(seniors: int, juniors: int) -> list[Employee]:
    roster = [
        Employee(id=f"S{i + 1}", name=f"Senior {i + 1}", skill_level=SkillLevel.SENIOR)
        for i in range(seniors)
    ]
    roster.extend(
        Employee(id=f"J{i + 1}", name=f"Junior {i + 1}", skill_level=SkillLevel.JUNIOR)
        for i in range(juniors)
    )
    return roster


class RosterOrderAllocator(WeekendShiftAllocator):
    """Baseline that ignores weekend counters and takes the first candidate."""

    def select_candidate(self, d, roster, approved_leaves, level, state):
        pool = self.resolver.available_at_level(d, roster, level, approved_leaves)
        return pool[0] if pool else None


class TestRequiredLevel:
    """Tests for weekend level selection."""

    def test_rotation_level_known_date(self):
        """2024-01-27 falls in an odd epoch week."""
        assert rotation_level(SATURDAY, ShiftType.WEEKEND_MORNING) == SkillLevel.JUNIOR
        assert rotation_level(SATURDAY, ShiftType.WEEKEND_AFTERNOON) == SkillLevel.SENIOR
        assert rotation_level(SATURDAY, ShiftType.WEEKEND_NIGHT) == SkillLevel.JUNIOR

    def test_rotation_alternates_weekly(self):
        """The same slot flips level from one week to the next."""
        for shift_type in (ShiftType.WEEKEND_MORNING, ShiftType.WEEKEND_NIGHT):
            this_week = rotation_level(SATURDAY, shift_type)
            next_week = rotation_level(SATURDAY + timedelta(days=7), shift_type)
            assert this_week != next_week

    def test_fixed_quota_wins(self):
        """A quota naming a level overrides the rotation."""
        quota = StaffingQuota(1, 0, SkillLevel.JUNIOR)
        assert required_level(SATURDAY, ShiftType.WEEKEND_MORNING, quota) == SkillLevel.SENIOR
        quota = StaffingQuota(0, 1, SkillLevel.SENIOR)
        assert required_level(SATURDAY, ShiftType.WEEKEND_AFTERNOON, quota) == SkillLevel.JUNIOR

    def test_pure_rotation_quota(self):
        """A (0, 0) quota falls back to the rotation."""
        quota = StaffingQuota(0, 0)
        assert required_level(SATURDAY, ShiftType.WEEKEND_AFTERNOON, quota) == SkillLevel.SENIOR


class TestWeekendShiftAllocator:
    """Tests for WeekendShiftAllocator."""

    @pytest.fixture
    def allocator(self):
        return WeekendShiftAllocator()

    def test_one_employee_per_weekend_shift(self, allocator):
        """Each weekend type gets exactly one employee of the quota level."""
        roster = make_roster(2, 2)
        state = WeekendRotationState.from_employees(roster)

        new_state, shifts, unfilled = allocator.allocate(SATURDAY, roster, [], state)

        assert [s.employee_ids for s in shifts] == [["S1"], ["J1"], ["S2"]]
        assert unfilled == []
        assert new_state.count("S1") == 1
        assert new_state.count("S2") == 1
        assert new_state.count("J1") == 1

    def test_lowest_counter_wins(self, allocator):
        """The candidate with the fewest weekend shifts is picked."""
        roster = make_roster(2, 1)
        state = WeekendRotationState(counts={"S1": 3, "S2": 0, "J1": 0})

        _, shifts, _ = allocator.allocate(SATURDAY, roster, [], state)

        assert shifts[0].employee_ids == ["S2"]

    def test_ties_keep_roster_order(self, allocator):
        """Equal counters fall back to roster order."""
        roster = make_roster(3, 1)
        state = WeekendRotationState(counts={"S1": 1, "S2": 0, "S3": 0})

        _, shifts, _ = allocator.allocate(SATURDAY, roster, [], state)

        assert shifts[0].employee_ids == ["S2"]
        assert shifts[2].employee_ids == ["S3"]

    def test_counter_updates_before_next_type(self, allocator):
        """The Night pick sees the Morning pick's new count."""
        roster = make_roster(2, 1)
        state = WeekendRotationState.from_employees(roster)

        _, shifts, _ = allocator.allocate(SATURDAY, roster, [], state)

        assert shifts[0].employee_ids == ["S1"]
        assert shifts[2].employee_ids == ["S2"]

    def test_same_day_double_pick_is_possible(self, allocator):
        """A lone senior is picked for both senior weekend types of a date."""
        roster = make_roster(1, 1)
        state = WeekendRotationState.from_employees(roster)

        new_state, shifts, _ = allocator.allocate(SATURDAY, roster, [], state)

        assert shifts[0].employee_ids == ["S1"]
        assert shifts[2].employee_ids == ["S1"]
        assert new_state.count("S1") == 2

    def test_missing_level_leaves_shift_unassigned(self, allocator):
        """No junior available gives an empty shift and an unfilled slot."""
        roster = make_roster(2, 0)
        state = WeekendRotationState.from_employees(roster)

        _, shifts, unfilled = allocator.allocate(SATURDAY, roster, [], state)

        assert len(shifts) == 3
        assert shifts[1].shift_type == ShiftType.WEEKEND_AFTERNOON
        assert shifts[1].is_unassigned
        assert len(unfilled) == 1
        assert unfilled[0].required_level == SkillLevel.JUNIOR

    def test_weekend_off_never_scheduled(self, allocator):
        """An employee with both weekend-off dates on Saturday is skipped."""
        roster = make_roster(2, 1)
        roster[0].weekends_off = (SATURDAY, SATURDAY)
        state = WeekendRotationState.from_employees(roster)

        _, saturday_shifts, _ = allocator.allocate(SATURDAY, roster, [], state)
        _, sunday_shifts, _ = allocator.allocate(SUNDAY, roster, [], state)

        assert all("S1" not in s.employee_ids for s in saturday_shifts)
        assert "S1" in sunday_shifts[0].employee_ids

    def test_approved_leave_excludes_weekend_pick(self, allocator):
        """An employee on approved leave is skipped for weekend shifts."""
        roster = make_roster(2, 2)
        leave = Leave("L1", "J1", SATURDAY, SUNDAY, status=LeaveStatus.APPROVED)
        state = WeekendRotationState.from_employees(roster)

        _, shifts, _ = allocator.allocate(SATURDAY, roster, [leave], state)

        assert shifts[1].employee_ids == ["J2"]

    def test_leave_emptying_pool_leaves_shift_unassigned(self, allocator):
        """A lone junior on leave leaves the junior weekend slot unfilled."""
        roster = make_roster(2, 1)
        leave = Leave("L1", "J1", SATURDAY, SUNDAY, status=LeaveStatus.APPROVED)
        state = WeekendRotationState.from_employees(roster)

        _, shifts, unfilled = allocator.allocate(SATURDAY, roster, [leave], state)

        assert shifts[1].is_unassigned
        assert [slot.shift_type for slot in unfilled] == [ShiftType.WEEKEND_AFTERNOON]

    def test_state_and_employees_untouched(self, allocator):
        """Allocation returns a new state and leaves its inputs alone."""
        roster = make_roster(2, 2)
        state = WeekendRotationState.from_employees(roster)

        new_state, _, _ = allocator.allocate(SATURDAY, roster, [], state)

        assert all(state.count(e.id) == 0 for e in roster)
        assert all(e.weekend_shifts_worked == 0 for e in roster)
        assert all(e.weekend_shift_history == [] for e in roster)
        assert len(new_state.records("S1")) == 1
        assert new_state.records("S1")[0].shift_type == ShiftType.WEEKEND_MORNING

    def test_pure_rotation_policy(self):
        """With (0, 0) quotas the level alternates by week."""
        quotas = dict(DefaultStaffingPolicy().quotas)
        for shift_type in (
            ShiftType.WEEKEND_MORNING,
            ShiftType.WEEKEND_AFTERNOON,
            ShiftType.WEEKEND_NIGHT,
        ):
            quotas[shift_type] = StaffingQuota(0, 0)
        allocator = WeekendShiftAllocator(DefaultStaffingPolicy(quotas=quotas))
        roster = make_roster(2, 2)
        state = WeekendRotationState.from_employees(roster)

        state, this_week, _ = allocator.allocate(SATURDAY, roster, [], state)
        _, next_week, _ = allocator.allocate(SATURDAY + timedelta(days=7), roster, [], state)

        assert this_week[0].employee_ids[0].startswith("J")
        assert this_week[1].employee_ids[0].startswith("S")
        assert next_week[0].employee_ids[0].startswith("S")


class TestRotationFairness:
    """Weekend counters stay balanced over many weeks."""

    def _run_weeks(self, allocator, roster, weeks):
        state = WeekendRotationState.from_employees(roster)
        for week in range(weeks):
            for d in (SATURDAY + timedelta(days=7 * week), SUNDAY + timedelta(days=7 * week)):
                state, _, _ = allocator.allocate(d, roster, [], state)
        return state

    def test_rotation_beats_roster_order(self):
        """Std dev of counters is at most that of a roster-order baseline."""
        roster = make_roster(4, 4)
        weeks = 8

        rotated = self._run_weeks(WeekendShiftAllocator(), roster, weeks)
        baseline = self._run_weeks(RosterOrderAllocator(), roster, weeks)

        rotated_metrics = WeekendFairnessMetrics.calculate(rotated.counts)
        baseline_metrics = WeekendFairnessMetrics.calculate(baseline.counts)

        assert rotated_metrics.std_dev <= baseline_metrics.std_dev
        assert sum(rotated.counts.values()) == sum(baseline.counts.values()) == weeks * 6

    def test_counts_within_one_per_level(self):
        """Employees of one level differ by at most one weekend shift."""
        roster = make_roster(4, 4)
        state = self._run_weeks(WeekendShiftAllocator(), roster, 5)

        senior_counts = [state.count(e.id) for e in roster if e.is_senior]
        junior_counts = [state.count(e.id) for e in roster if not e.is_senior]
        assert max(senior_counts) - min(senior_counts) <= 1
        assert max(junior_counts) - min(junior_counts) <= 1
