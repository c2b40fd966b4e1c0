"""Statistics aggregation for shifts, tasks and leaves.

Each ``calculate`` classmethod builds its statistics from a plain list of
records, so the aggregators work the same over a freshly generated week
or over anything read back from a repository.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable

from shiftdesk.domain.models import (
    Employee,
    Leave,
    LeaveStatus,
    Shift,
    ShiftType,
    SkillLevel,
    StaffingStatus,
    Task,
    TaskStatus,
    WeekendRotationState,
)


@dataclass
class ShiftStatistics:
    """Aggregate numbers over a set of shifts.

    Attributes:
        total_shifts: Number of shift records.
        weekday_shifts: Number of weekday shift records.
        weekend_shifts: Number of weekend shift records.
        shift_coverage: Shift type value to number of records.
        employee_workload: Employee id to number of shifts worked.
        weekend_workload: Employee id to number of weekend shifts worked.
        fully_staffed: Shifts meeting (or exceeding) their quota.
        staffing_breakdown: Staffing status value to number of shifts.
        total_slots: Sum of required slots over all shifts.
        filled_slots: Sum of assigned employees over all shifts.
    """

    total_shifts: int = 0
    weekday_shifts: int = 0
    weekend_shifts: int = 0
    shift_coverage: dict[str, int] = field(default_factory=dict)
    employee_workload: dict[str, int] = field(default_factory=dict)
    weekend_workload: dict[str, int] = field(default_factory=dict)
    fully_staffed: int = 0
    staffing_breakdown: dict[str, int] = field(default_factory=dict)
    total_slots: int = 0
    filled_slots: int = 0

    @property
    def fill_rate(self) -> float:
        """Fraction of required slots that were filled."""
        if self.total_slots == 0:
            return 0.0
        return min(1.0, self.filled_slots / self.total_slots)

    @classmethod
    def calculate(cls, shifts: Iterable[Shift]) -> "ShiftStatistics":
        shifts = list(shifts)
        workload: Counter = Counter()
        weekend_workload: Counter = Counter()

        for shift in shifts:
            for employee_id in shift.employee_ids:
                workload[employee_id] += 1
                if shift.is_weekend:
                    weekend_workload[employee_id] += 1

        weekend_count = sum(1 for s in shifts if s.is_weekend)
        coverage = Counter(s.shift_type.value for s in shifts)
        breakdown = Counter(s.staffing_status.value for s in shifts)

        return cls(
            total_shifts=len(shifts),
            weekday_shifts=len(shifts) - weekend_count,
            weekend_shifts=weekend_count,
            shift_coverage={
                t.value: coverage[t.value] for t in ShiftType if coverage[t.value]
            },
            employee_workload=dict(workload),
            weekend_workload=dict(weekend_workload),
            fully_staffed=sum(1 for s in shifts if s.is_fully_staffed()),
            staffing_breakdown={
                status.value: breakdown[status.value]
                for status in StaffingStatus
                if breakdown[status.value]
            },
            total_slots=sum(s.quota.total for s in shifts),
            filled_slots=sum(len(s.employee_ids) for s in shifts),
        )


@dataclass
class WeekendCount:
    """Weekend shifts worked by one employee, split by level."""

    total: int = 0
    senior: int = 0
    junior: int = 0


def weekend_distribution(state: WeekendRotationState) -> dict[str, WeekendCount]:
    """Per-employee weekend shift totals from a rotation state's history."""
    distribution: dict[str, WeekendCount] = {}
    for employee_id, records in state.history.items():
        counts = WeekendCount()
        for record in records:
            counts.total += 1
            if record.skill_level == SkillLevel.SENIOR:
                counts.senior += 1
            else:
                counts.junior += 1
        distribution[employee_id] = counts
    return distribution


@dataclass
class TaskStatistics:
    """Aggregate numbers over a set of tasks.

    Attributes:
        total: Number of tasks.
        completed: Completed tasks.
        in_progress: Tasks being worked on.
        pending: Tasks not started.
        completion_rate: Whole-number percentage of completed tasks.
        by_priority: Priority value to number of tasks.
        by_difficulty: Difficulty value to number of tasks.
    """

    total: int = 0
    completed: int = 0
    in_progress: int = 0
    pending: int = 0
    completion_rate: int = 0
    by_priority: dict[str, int] = field(default_factory=dict)
    by_difficulty: dict[str, int] = field(default_factory=dict)

    @classmethod
    def calculate(cls, tasks: Iterable[Task]) -> "TaskStatistics":
        tasks = list(tasks)
        status_counts = Counter(t.status for t in tasks)
        completed = status_counts[TaskStatus.COMPLETED]

        return cls(
            total=len(tasks),
            completed=completed,
            in_progress=status_counts[TaskStatus.IN_PROGRESS],
            pending=status_counts[TaskStatus.PENDING],
            completion_rate=round(completed / len(tasks) * 100) if tasks else 0,
            by_priority=dict(Counter(t.priority.value for t in tasks)),
            by_difficulty=dict(Counter(t.difficulty.value for t in tasks)),
        )


@dataclass
class LeaveStatistics:
    """Aggregate numbers over a set of leave requests."""

    total: int = 0
    pending: int = 0
    approved: int = 0
    rejected: int = 0
    emergency: int = 0
    total_days: int = 0

    @classmethod
    def calculate(cls, leaves: Iterable[Leave]) -> "LeaveStatistics":
        leaves = list(leaves)
        status_counts = Counter(leave.status for leave in leaves)
        return cls(
            total=len(leaves),
            pending=status_counts[LeaveStatus.PENDING],
            approved=status_counts[LeaveStatus.APPROVED],
            rejected=status_counts[LeaveStatus.REJECTED],
            emergency=sum(1 for leave in leaves if leave.is_emergency),
            total_days=sum(leave.duration_days for leave in leaves),
        )


def top_performers(employees: Iterable[Employee], limit: int = 10) -> list[Employee]:
    """Active employees ranked by skill points, then tasks completed."""
    active = [e for e in employees if e.is_active]
    active.sort(key=lambda e: (e.skill_points, e.tasks_completed), reverse=True)
    return active[:limit]
