"""Policy definitions for scheduling rules.

This module contains configurable policies that define business rules
for shift staffing, task scoring, and leave requests. Policies are kept
separate from the allocators to allow independent testing and easy
modification.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date

from shiftdesk.domain.models import (
    WEEKDAY_SHIFT_TYPES,
    WEEKEND_SHIFT_TYPES,
    Employee,
    LeaveType,
    ShiftType,
    SkillLevel,
    StaffingQuota,
    Task,
    TaskDifficulty,
    TaskPriority,
)


class StaffingPolicy(ABC):
    """Abstract base class for shift staffing quotas."""

    @abstractmethod
    def get_quota(self, shift_type: ShiftType) -> StaffingQuota:
        """Get the required staffing for a shift type."""
        pass

    @abstractmethod
    def weekday_shift_types(self) -> tuple[ShiftType, ...]:
        """Weekday shift types in evaluation order."""
        pass

    @abstractmethod
    def weekend_shift_types(self) -> tuple[ShiftType, ...]:
        """Weekend shift types in evaluation order."""
        pass

    def shift_types_for(self, d: date) -> tuple[ShiftType, ...]:
        """Shift types staffed on a date (Saturday and Sunday are weekend)."""
        if d.weekday() >= 5:
            return self.weekend_shift_types()
        return self.weekday_shift_types()


class TaskScoringPolicy(ABC):
    """Abstract base class for task-to-employee scoring."""

    @abstractmethod
    def base_score(self, employee: Employee, task: Task) -> float:
        """Deterministic part of the assignment score."""
        pass

    @abstractmethod
    def estimated_load(self, employee: Employee) -> int:
        """Proxy for the employee's current task count."""
        pass

    @abstractmethod
    def jitter_bound(self) -> float:
        """Upper bound (exclusive) of the random tie-breaker."""
        pass

    @abstractmethod
    def distribution_weight(self, task: Task) -> int:
        """Ordering weight used when distributing a batch of tasks."""
        pass

    @abstractmethod
    def recommendation_limit(self) -> int:
        """Maximum number of task recommendations per employee."""
        pass


class LeavePolicy(ABC):
    """Abstract base class for leave request rules."""

    @abstractmethod
    def requires_future_start(self, leave_type: LeaveType) -> bool:
        """Whether a leave of this type must start after today."""
        pass


@dataclass
class DefaultStaffingPolicy(StaffingPolicy):
    """Default staffing quotas.

    Weekday quotas (seniors, juniors):
    - Morning: (1, 1)
    - General: (2, 3)
    - Afternoon: (1, 1)
    - Night: (1, 1)

    Weekend shifts take exactly one employee. Their quota names a level
    and the level it alternates with; a quota of (0, 0) is resolved purely
    by the week-number rotation.
    """

    quotas: dict[ShiftType, StaffingQuota] = field(
        default_factory=lambda: {
            ShiftType.MORNING: StaffingQuota(1, 1),
            ShiftType.GENERAL: StaffingQuota(2, 3),
            ShiftType.AFTERNOON: StaffingQuota(1, 1),
            ShiftType.NIGHT: StaffingQuota(1, 1),
            ShiftType.WEEKEND_MORNING: StaffingQuota(1, 0, SkillLevel.JUNIOR),
            ShiftType.WEEKEND_AFTERNOON: StaffingQuota(0, 1, SkillLevel.SENIOR),
            ShiftType.WEEKEND_NIGHT: StaffingQuota(1, 0, SkillLevel.JUNIOR),
        }
    )

    def get_quota(self, shift_type: ShiftType) -> StaffingQuota:
        return self.quotas[shift_type]

    def weekday_shift_types(self) -> tuple[ShiftType, ...]:
        return WEEKDAY_SHIFT_TYPES

    def weekend_shift_types(self) -> tuple[ShiftType, ...]:
        return WEEKEND_SHIFT_TYPES


@dataclass
class DefaultTaskScoringPolicy(TaskScoringPolicy):
    """Default skill-match scoring.

    Score components:
    - +30 for a Hard task and a Senior, +25 for a Medium task and a Senior,
      +20 for any Easy task
    - + max(0, 10 - 2 * load), load = tasks_completed // 10
    - +15 for a Junior on a task that is not Hard
    - + a random tie-breaker in [0, jitter)

    Set ``jitter`` to 0 for fully deterministic scoring.
    """

    hard_senior_bonus: int = 30
    medium_senior_bonus: int = 25
    easy_bonus: int = 20
    load_base: int = 10
    load_step: int = 2
    load_bucket: int = 10
    junior_growth_bonus: int = 15
    jitter: float = 5.0
    max_recommendations: int = 5

    priority_weights: dict[TaskPriority, int] = field(
        default_factory=lambda: {
            TaskPriority.HIGH: 3,
            TaskPriority.MEDIUM: 2,
            TaskPriority.LOW: 1,
        }
    )
    difficulty_weights: dict[TaskDifficulty, int] = field(
        default_factory=lambda: {
            TaskDifficulty.HARD: 3,
            TaskDifficulty.MEDIUM: 2,
            TaskDifficulty.EASY: 1,
        }
    )

    def base_score(self, employee: Employee, task: Task) -> float:
        score = 0.0

        if task.difficulty == TaskDifficulty.HARD and employee.is_senior:
            score += self.hard_senior_bonus
        elif task.difficulty == TaskDifficulty.MEDIUM and employee.is_senior:
            score += self.medium_senior_bonus
        elif task.difficulty == TaskDifficulty.EASY:
            score += self.easy_bonus

        score += max(0, self.load_base - self.load_step * self.estimated_load(employee))

        if not employee.is_senior and task.difficulty != TaskDifficulty.HARD:
            score += self.junior_growth_bonus

        return score

    def estimated_load(self, employee: Employee) -> int:
        return employee.tasks_completed // self.load_bucket

    def jitter_bound(self) -> float:
        return self.jitter

    def distribution_weight(self, task: Task) -> int:
        return self.priority_weights[task.priority] + self.difficulty_weights[task.difficulty]

    def recommendation_limit(self) -> int:
        return self.max_recommendations


@dataclass
class DefaultLeavePolicy(LeavePolicy):
    """Default leave rules.

    Leaves must start after today, except for the exempt types
    (Emergency by default).
    """

    exempt_types: frozenset[LeaveType] = frozenset({LeaveType.EMERGENCY})

    def requires_future_start(self, leave_type: LeaveType) -> bool:
        return leave_type not in self.exempt_types
