"""Tests for scheduling policies."""

from datetime import date

import pytest

from shiftdesk.domain.models import (
    Employee,
    LeaveType,
    ShiftType,
    SkillLevel,
    StaffingQuota,
    Task,
    TaskDifficulty,
    TaskPriority,
)
from shiftdesk.domain.policies import (
    DefaultLeavePolicy,
    DefaultStaffingPolicy,
    DefaultTaskScoringPolicy,
)


def _employee(level: SkillLevel, tasks_completed: int = 0) -> Employee:
    return Employee(
        id="E1",
        name="Test",
        skill_level=level,
        skills={"Python"},
        tasks_completed=tasks_completed,
    )


def _task(difficulty: TaskDifficulty, priority: TaskPriority = TaskPriority.MEDIUM) -> Task:
    return Task(
        id="T1",
        title="Task",
        difficulty=difficulty,
        skill_required="Python",
        priority=priority,
    )


class TestDefaultStaffingPolicy:
    """Tests for DefaultStaffingPolicy."""

    @pytest.mark.parametrize(
        "shift_type,seniors,juniors",
        [
            (ShiftType.MORNING, 1, 1),
            (ShiftType.GENERAL, 2, 3),
            (ShiftType.AFTERNOON, 1, 1),
            (ShiftType.NIGHT, 1, 1),
        ],
    )
    def test_weekday_quotas(self, shift_type, seniors, juniors):
        """Weekday quotas match the staffing table."""
        quota = DefaultStaffingPolicy().get_quota(shift_type)
        assert (quota.seniors, quota.juniors) == (seniors, juniors)

    def test_weekend_quotas_take_one(self):
        """Every weekend type takes exactly one employee."""
        policy = DefaultStaffingPolicy()
        for shift_type in policy.weekend_shift_types():
            assert policy.get_quota(shift_type).total == 1

    def test_weekend_quota_levels(self):
        """Morning and Night are Senior slots, Afternoon is Junior."""
        policy = DefaultStaffingPolicy()
        assert policy.get_quota(ShiftType.WEEKEND_MORNING).fixed_level == SkillLevel.SENIOR
        assert policy.get_quota(ShiftType.WEEKEND_AFTERNOON).fixed_level == SkillLevel.JUNIOR
        assert policy.get_quota(ShiftType.WEEKEND_NIGHT).fixed_level == SkillLevel.SENIOR

    def test_shift_types_for_weekday_and_weekend(self):
        """Saturday and Sunday use the weekend types."""
        policy = DefaultStaffingPolicy()
        assert policy.shift_types_for(date(2024, 1, 26)) == policy.weekday_shift_types()
        assert policy.shift_types_for(date(2024, 1, 27)) == policy.weekend_shift_types()
        assert policy.shift_types_for(date(2024, 1, 28)) == policy.weekend_shift_types()

    def test_custom_quota(self):
        """Custom quotas replace the defaults."""
        quotas = dict(DefaultStaffingPolicy().quotas)
        quotas[ShiftType.GENERAL] = StaffingQuota(1, 1)
        policy = DefaultStaffingPolicy(quotas=quotas)
        assert policy.get_quota(ShiftType.GENERAL).total == 2


class TestDefaultTaskScoringPolicy:
    """Tests for DefaultTaskScoringPolicy."""

    @pytest.fixture
    def policy(self):
        return DefaultTaskScoringPolicy()

    def test_hard_senior(self, policy):
        """Hard task for a senior: 30 + 10."""
        assert policy.base_score(_employee(SkillLevel.SENIOR), _task(TaskDifficulty.HARD)) == 40

    def test_medium_senior(self, policy):
        """Medium task for a senior: 25 + 10."""
        assert policy.base_score(_employee(SkillLevel.SENIOR), _task(TaskDifficulty.MEDIUM)) == 35

    def test_easy_junior(self, policy):
        """Easy task for a junior: 20 + 10 + 15."""
        assert policy.base_score(_employee(SkillLevel.JUNIOR), _task(TaskDifficulty.EASY)) == 45

    def test_medium_junior(self, policy):
        """Medium task for a junior gets only load and growth bonus."""
        assert policy.base_score(_employee(SkillLevel.JUNIOR), _task(TaskDifficulty.MEDIUM)) == 25

    def test_hard_junior(self, policy):
        """Hard task for a junior gets only the load bonus."""
        assert policy.base_score(_employee(SkillLevel.JUNIOR), _task(TaskDifficulty.HARD)) == 10

    def test_load_reduces_score(self, policy):
        """Every ten completed tasks cost two points, floored at zero."""
        assert policy.estimated_load(_employee(SkillLevel.SENIOR, 19)) == 1
        assert policy.base_score(_employee(SkillLevel.SENIOR, 19), _task(TaskDifficulty.HARD)) == 38
        assert policy.base_score(_employee(SkillLevel.SENIOR, 80), _task(TaskDifficulty.HARD)) == 30

    def test_distribution_weight(self, policy):
        """Priority and difficulty weights add up."""
        assert policy.distribution_weight(_task(TaskDifficulty.HARD, TaskPriority.HIGH)) == 6
        assert policy.distribution_weight(_task(TaskDifficulty.EASY, TaskPriority.LOW)) == 2

    def test_defaults(self, policy):
        """Default jitter bound and recommendation limit."""
        assert policy.jitter_bound() == 5.0
        assert policy.recommendation_limit() == 5


class TestDefaultLeavePolicy:
    """Tests for DefaultLeavePolicy."""

    def test_emergency_is_exempt(self):
        """Only emergency leave may start today or earlier."""
        policy = DefaultLeavePolicy()
        assert policy.requires_future_start(LeaveType.EMERGENCY) is False
        assert policy.requires_future_start(LeaveType.VACATION) is True
        assert policy.requires_future_start(LeaveType.SICK) is True
