"""Domain models for the scheduling system.

This module contains all core data structures used throughout the scheduling
system, including employees, leaves, tasks, shifts, and schedule outputs.
"""

from dataclasses import dataclass, field, replace
from datetime import date, timedelta
from enum import Enum
from typing import Optional

from shiftdesk.domain.errors import (
    EligibilityError,
    InvalidRangeError,
    LeaveStateError,
)

EPOCH = date(1970, 1, 1)


def epoch_days(d: date) -> int:
    """Number of whole days between the Unix epoch and a date."""
    return (d - EPOCH).days


def ranges_overlap(a, b) -> bool:
    """Check if two inclusive date ranges intersect.

    Both arguments only need ``start_date`` and ``end_date`` attributes,
    so leaves and plain ``DateRange`` values can be mixed freely.
    """
    return a.start_date <= b.end_date and a.end_date >= b.start_date


class SkillLevel(Enum):
    """Coarse seniority tier driving staffing quotas."""

    SENIOR = "Senior"
    JUNIOR = "Junior"


class ShiftType(Enum):
    """The seven recurring work-slot categories."""

    MORNING = "Morning"
    GENERAL = "General"
    AFTERNOON = "Afternoon"
    NIGHT = "Night"
    WEEKEND_MORNING = "WeekendMorning"
    WEEKEND_AFTERNOON = "WeekendAfternoon"
    WEEKEND_NIGHT = "WeekendNight"

    @property
    def is_weekend(self) -> bool:
        return self in WEEKEND_SHIFT_TYPES


WEEKDAY_SHIFT_TYPES = (
    ShiftType.MORNING,
    ShiftType.GENERAL,
    ShiftType.AFTERNOON,
    ShiftType.NIGHT,
)

WEEKEND_SHIFT_TYPES = (
    ShiftType.WEEKEND_MORNING,
    ShiftType.WEEKEND_AFTERNOON,
    ShiftType.WEEKEND_NIGHT,
)


class ShiftStatus(Enum):
    """Lifecycle status of a shift."""

    SCHEDULED = "Scheduled"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class StaffingStatus(Enum):
    """How well a shift's roster matches its quota."""

    UNSTAFFED = "Unstaffed"
    UNDERSTAFFED = "Understaffed"
    FULLY_STAFFED = "Fully Staffed"
    OVERSTAFFED = "Overstaffed"


class LeaveStatus(Enum):
    """Review status of a leave request."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class LeaveType(Enum):
    """Category of a leave request."""

    SICK = "Sick Leave"
    PERSONAL = "Personal Leave"
    VACATION = "Vacation"
    EMERGENCY = "Emergency"


class TaskDifficulty(Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class TaskPriority(Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class TaskStatus(Enum):
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


@dataclass(frozen=True)
class DateRange:
    """An inclusive range of calendar days.

    Attributes:
        start_date: First day of the range.
        end_date: Last day of the range (inclusive).
    """

    start_date: date
    end_date: date

    def __post_init__(self):
        if self.end_date < self.start_date:
            raise InvalidRangeError(
                f"End date {self.end_date} is before start date {self.start_date}"
            )

    @property
    def num_days(self) -> int:
        """Number of days covered, counting both ends."""
        return (self.end_date - self.start_date).days + 1

    @property
    def dates(self) -> list[date]:
        """All dates in the range, in order."""
        return [self.start_date + timedelta(days=i) for i in range(self.num_days)]

    def contains(self, d: date) -> bool:
        """Check if a date falls within the range (both ends inclusive)."""
        return self.start_date <= d <= self.end_date

    def overlaps(self, other) -> bool:
        """Check if this range intersects another."""
        return ranges_overlap(self, other)


@dataclass(frozen=True)
class StaffingQuota:
    """Required staffing for a shift type.

    Attributes:
        seniors: Number of Senior slots.
        juniors: Number of Junior slots.
        alternate_with: Level the slot rotates with, if the quota is not
            fixed. A quota with no senior or junior slots is resolved
            purely by rotation.
    """

    seniors: int
    juniors: int
    alternate_with: Optional[SkillLevel] = None

    @property
    def total(self) -> int:
        return self.seniors + self.juniors

    @property
    def fixed_level(self) -> Optional[SkillLevel]:
        """Level named directly by the quota, or None for pure rotation."""
        if self.seniors > 0:
            return SkillLevel.SENIOR
        if self.juniors > 0:
            return SkillLevel.JUNIOR
        return None

    def slots_for(self, level: SkillLevel) -> int:
        """Number of slots for a given level."""
        return self.seniors if level == SkillLevel.SENIOR else self.juniors


@dataclass(frozen=True)
class WeekendShiftRecord:
    """One past weekend shift worked by an employee.

    Attributes:
        shift_date: Date of the weekend shift.
        shift_type: Weekend shift type worked.
        skill_level: Employee's level at the time of assignment.
    """

    shift_date: date
    shift_type: ShiftType
    skill_level: SkillLevel


@dataclass
class Employee:
    """Represents an employee who can be scheduled and assigned tasks.

    Attributes:
        id: Unique identifier for the employee.
        name: Display name.
        skill_level: Senior or Junior.
        skills: Skill tags used to match tasks.
        tasks_completed: Lifetime count of completed tasks.
        skill_points: Lifetime skill points earned from tasks.
        weekend_shifts_worked: Persistent weekend rotation counter.
        weekends_off: The two designated recurring weekend-off dates.
        weekend_shift_history: Ordered past weekend assignments.
        is_active: Inactive employees are never scheduled.
        department: Free-form department name.
    """

    id: str
    name: str
    skill_level: SkillLevel
    skills: set[str] = field(default_factory=set)
    tasks_completed: int = 0
    skill_points: int = 0
    weekend_shifts_worked: int = 0
    weekends_off: tuple[Optional[date], Optional[date]] = (None, None)
    weekend_shift_history: list[WeekendShiftRecord] = field(default_factory=list)
    is_active: bool = True
    department: str = ""

    @property
    def is_senior(self) -> bool:
        return self.skill_level == SkillLevel.SENIOR

    def has_skill(self, skill: str) -> bool:
        """Check if the employee carries a skill tag."""
        return skill in self.skills

    def is_scheduled_off(self, d: date) -> bool:
        """Check if a date is one of the employee's fixed weekend-off dates."""
        return any(off == d for off in self.weekends_off if off is not None)


@dataclass
class Leave:
    """A time-off request for an employee.

    Attributes:
        id: Unique identifier for the leave.
        employee_id: Employee requesting the leave.
        start_date: First day off.
        end_date: Last day off (inclusive).
        leave_type: Category of leave.
        status: Review status.
        reason: Free-form reason given by the employee.
        reviewed_by: Reviewer id once approved or rejected.
        reviewed_at: Review date once approved or rejected.
        review_comments: Optional reviewer comments.
    """

    id: str
    employee_id: str
    start_date: date
    end_date: date
    leave_type: LeaveType = LeaveType.PERSONAL
    status: LeaveStatus = LeaveStatus.PENDING
    reason: str = ""
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[date] = None
    review_comments: str = ""

    def __post_init__(self):
        if self.end_date < self.start_date:
            raise InvalidRangeError(
                f"Leave {self.id}: end date {self.end_date} is before "
                f"start date {self.start_date}"
            )

    @property
    def is_emergency(self) -> bool:
        return self.leave_type == LeaveType.EMERGENCY

    @property
    def is_blocking(self) -> bool:
        """Pending and approved leaves block overlapping requests."""
        return self.status in (LeaveStatus.PENDING, LeaveStatus.APPROVED)

    @property
    def duration_days(self) -> int:
        """Leave length in days, counting both ends."""
        return (self.end_date - self.start_date).days + 1

    @property
    def date_range(self) -> DateRange:
        return DateRange(self.start_date, self.end_date)

    def covers(self, d: date) -> bool:
        """Check if the leave includes a date."""
        return self.start_date <= d <= self.end_date

    def overlaps_with(self, other: "Leave") -> bool:
        """Check if two leaves share at least one day."""
        return ranges_overlap(self, other)

    def approve(
        self,
        reviewer_id: str,
        comments: str = "",
        reviewed_at: Optional[date] = None,
    ) -> None:
        """Approve a pending leave."""
        self._review(LeaveStatus.APPROVED, reviewer_id, comments, reviewed_at)

    def reject(
        self,
        reviewer_id: str,
        comments: str = "",
        reviewed_at: Optional[date] = None,
    ) -> None:
        """Reject a pending leave."""
        self._review(LeaveStatus.REJECTED, reviewer_id, comments, reviewed_at)

    def edit(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        leave_type: Optional[LeaveType] = None,
        reason: Optional[str] = None,
    ) -> "Leave":
        """Return a copy of a pending leave with new dates, type or reason.

        The leave itself is left untouched so a caller can validate the
        edited copy before storing it.
        """
        self._require_pending("edited")
        return replace(
            self,
            start_date=start_date or self.start_date,
            end_date=end_date or self.end_date,
            leave_type=leave_type if leave_type is not None else self.leave_type,
            reason=reason if reason is not None else self.reason,
        )

    def withdraw(self) -> None:
        """Check that the leave may be withdrawn; the caller deletes it."""
        self._require_pending("withdrawn")

    def _review(
        self,
        status: LeaveStatus,
        reviewer_id: str,
        comments: str,
        reviewed_at: Optional[date],
    ) -> None:
        self._require_pending("reviewed")
        self.status = status
        self.reviewed_by = reviewer_id
        self.review_comments = comments
        self.reviewed_at = reviewed_at or date.today()

    def _require_pending(self, action: str) -> None:
        if self.status != LeaveStatus.PENDING:
            raise LeaveStateError(
                f"Leave {self.id} is {self.status.value} and cannot be {action}"
            )


@dataclass
class Task:
    """A discrete work item that can be assigned to one employee.

    Attributes:
        id: Unique identifier for the task.
        title: Short title (opaque to the core).
        difficulty: Easy, Medium or Hard.
        skill_required: Skill tag an assignee must carry.
        priority: Low, Medium or High.
        skill_points_reward: Points awarded on completion.
        description: Free-form description (opaque to the core).
        assigned_to: Assigned employee id, if any.
        status: Pending, In Progress or Completed.
        completed_at: Completion date once completed.
    """

    id: str
    title: str
    difficulty: TaskDifficulty
    skill_required: str
    priority: TaskPriority = TaskPriority.MEDIUM
    skill_points_reward: int = 10
    description: str = ""
    assigned_to: Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING
    completed_at: Optional[date] = None

    @property
    def is_assigned(self) -> bool:
        return self.assigned_to is not None

    def assign_to(self, employee: Employee) -> None:
        """Assign the task to an employee carrying the required skill."""
        if not employee.has_skill(self.skill_required):
            raise EligibilityError(
                f"Employee {employee.id} lacks skill '{self.skill_required}' "
                f"required by task {self.id}"
            )
        self.assigned_to = employee.id
        self.status = TaskStatus.IN_PROGRESS

    def complete(
        self,
        assignee: Optional[Employee] = None,
        completed_on: Optional[date] = None,
    ) -> Optional[Employee]:
        """Mark the task completed and award the assignee.

        Args:
            assignee: The assigned employee, if the task is assigned.
            completed_on: Completion date (defaults to today).

        Returns:
            The assignee with skill points and completed-task counter
            updated, or None when the task has no assignee.
        """
        if self.status == TaskStatus.COMPLETED:
            raise EligibilityError(f"Task {self.id} is already completed")
        if assignee is not None and assignee.id != self.assigned_to:
            raise EligibilityError(
                f"Employee {assignee.id} is not assigned to task {self.id}"
            )

        self.status = TaskStatus.COMPLETED
        self.completed_at = completed_on or date.today()

        if assignee is None:
            return None
        return replace(
            assignee,
            skill_points=assignee.skill_points + self.skill_points_reward,
            tasks_completed=assignee.tasks_completed + 1,
        )


@dataclass(frozen=True)
class ShiftReplacement:
    """Record of one employee being swapped for another on a shift."""

    original_employee_id: str
    replacement_employee_id: str
    reason: str
    replaced_at: Optional[date] = None


@dataclass
class Shift:
    """Staffing of one shift type on one date.

    Attributes:
        shift_date: Date of the shift.
        shift_type: One of the seven shift types.
        quota: Required staffing for this shift.
        employee_ids: Assigned employees, in assignment order, no duplicates.
        replacements: Swaps made after generation.
        status: Lifecycle status.
        notes: Free-form notes.
    """

    shift_date: date
    shift_type: ShiftType
    quota: StaffingQuota
    employee_ids: list[str] = field(default_factory=list)
    replacements: list[ShiftReplacement] = field(default_factory=list)
    status: ShiftStatus = ShiftStatus.SCHEDULED
    notes: str = ""

    @property
    def id(self) -> str:
        return f"{self.shift_date.isoformat()}-{self.shift_type.value}"

    @property
    def key(self) -> tuple[date, ShiftType]:
        """Uniqueness key: at most one shift per (date, shift type)."""
        return (self.shift_date, self.shift_type)

    @property
    def is_weekend(self) -> bool:
        return self.shift_type.is_weekend

    @property
    def is_unassigned(self) -> bool:
        return not self.employee_ids

    @property
    def staffing_status(self) -> StaffingStatus:
        required = self.quota.total
        actual = len(self.employee_ids)
        if actual == 0:
            return StaffingStatus.UNSTAFFED
        if actual < required:
            return StaffingStatus.UNDERSTAFFED
        if actual == required:
            return StaffingStatus.FULLY_STAFFED
        return StaffingStatus.OVERSTAFFED

    def is_fully_staffed(self) -> bool:
        return len(self.employee_ids) >= self.quota.total

    def add_employee(self, employee_id: str) -> bool:
        """Add an employee if not already on the shift.

        Returns:
            True if the employee was added.
        """
        if employee_id in self.employee_ids:
            return False
        self.employee_ids.append(employee_id)
        return True

    def remove_employee(self, employee_id: str) -> bool:
        """Remove an employee from the shift.

        Returns:
            True if the employee was on the shift.
        """
        if employee_id not in self.employee_ids:
            return False
        self.employee_ids.remove(employee_id)
        return True

    def replace_employee(
        self,
        original_id: str,
        replacement_id: str,
        reason: str,
        replaced_at: Optional[date] = None,
    ) -> ShiftReplacement:
        """Swap one assigned employee for another and record why."""
        if original_id not in self.employee_ids:
            raise ValueError(f"Employee {original_id} is not on shift {self.id}")
        if replacement_id in self.employee_ids:
            raise ValueError(f"Employee {replacement_id} is already on shift {self.id}")

        position = self.employee_ids.index(original_id)
        self.employee_ids[position] = replacement_id
        record = ShiftReplacement(
            original_employee_id=original_id,
            replacement_employee_id=replacement_id,
            reason=reason,
            replaced_at=replaced_at or date.today(),
        )
        self.replacements.append(record)
        return record


@dataclass(frozen=True)
class UnfilledSlot:
    """A shift slot the allocator could not fill.

    Attributes:
        shift_date: Date of the shift.
        shift_type: Shift type affected.
        required_level: Level that was needed.
        missing: Number of slots left open.
    """

    shift_date: date
    shift_type: ShiftType
    required_level: SkillLevel
    missing: int = 1

    def __str__(self) -> str:
        return (
            f"{self.shift_date} {self.shift_type.value}: "
            f"{self.missing} {self.required_level.value} slot(s) unfilled"
        )


@dataclass
class WeekendRotationState:
    """Weekend rotation counters and histories owned by one allocation run.

    The state is treated as a value: ``with_assignment`` returns a new
    state and leaves the receiver untouched.

    Attributes:
        counts: Employee id to weekend shifts worked.
        history: Employee id to ordered weekend shift records.
    """

    counts: dict[str, int] = field(default_factory=dict)
    history: dict[str, list[WeekendShiftRecord]] = field(default_factory=dict)

    @classmethod
    def from_employees(cls, employees: list[Employee]) -> "WeekendRotationState":
        """Seed state from the employees' persisted counters and histories."""
        return cls(
            counts={e.id: e.weekend_shifts_worked for e in employees},
            history={e.id: list(e.weekend_shift_history) for e in employees},
        )

    def count(self, employee_id: str) -> int:
        return self.counts.get(employee_id, 0)

    def records(self, employee_id: str) -> list[WeekendShiftRecord]:
        return list(self.history.get(employee_id, []))

    def with_assignment(
        self,
        employee_id: str,
        record: WeekendShiftRecord,
    ) -> "WeekendRotationState":
        """Return a new state with one more weekend shift recorded."""
        counts = dict(self.counts)
        counts[employee_id] = counts.get(employee_id, 0) + 1
        history = dict(self.history)
        history[employee_id] = self.records(employee_id) + [record]
        return WeekendRotationState(counts=counts, history=history)

    def apply_to(self, employee: Employee) -> Employee:
        """Return the employee with this state's counter and history."""
        return replace(
            employee,
            weekend_shifts_worked=self.count(employee.id),
            weekend_shift_history=self.records(employee.id),
        )

    def changed_employees(self, employees: list[Employee]) -> list[Employee]:
        """Updated copies of the employees whose counter moved."""
        return [
            self.apply_to(e)
            for e in employees
            if self.count(e.id) != e.weekend_shifts_worked
        ]


@dataclass
class WeekendFairnessMetrics:
    """Metrics for evaluating weekend rotation fairness.

    Attributes:
        counts: Employee id to weekend shifts worked.
        mean: Average weekend shifts per employee.
        std_dev: Population standard deviation of the counts.
        min_count: Fewest weekend shifts of any employee.
        max_count: Most weekend shifts of any employee.
        fairness_score: Overall fairness score (0-100, higher is fairer).
    """

    counts: dict[str, int] = field(default_factory=dict)
    mean: float = 0.0
    std_dev: float = 0.0
    min_count: int = 0
    max_count: int = 0
    fairness_score: float = 100.0

    @classmethod
    def calculate(cls, counts: dict[str, int]) -> "WeekendFairnessMetrics":
        """Calculate fairness metrics from weekend counters."""
        if not counts:
            return cls()

        values = list(counts.values())
        mean = sum(values) / len(values)
        variance = sum((v - mean) ** 2 for v in values) / len(values)
        std_dev = variance ** 0.5

        # 100 = every employee has worked the same number of weekend shifts
        max_acceptable_std_dev = 2.0
        score = max(0.0, 100.0 - (std_dev / max_acceptable_std_dev) * 100.0)

        return cls(
            counts=dict(counts),
            mean=mean,
            std_dev=std_dev,
            min_count=min(values),
            max_count=max(values),
            fairness_score=score,
        )


@dataclass
class WeeklySchedule:
    """Complete shift set for one week.

    Attributes:
        week_start: First date of the week.
        shifts: One shift per (date, shift type), in generation order.
        unfilled: Slots the allocators could not fill.
        rotation_state: Weekend rotation state after the week.
    """

    week_start: date
    shifts: list[Shift] = field(default_factory=list)
    unfilled: list[UnfilledSlot] = field(default_factory=list)
    rotation_state: WeekendRotationState = field(default_factory=WeekendRotationState)

    @property
    def week_end(self) -> date:
        return self.week_start + timedelta(days=6)

    @property
    def schedule_dates(self) -> list[date]:
        """List of all dates in the week."""
        return [self.week_start + timedelta(days=i) for i in range(7)]

    def get_shift(self, d: date, shift_type: ShiftType) -> Optional[Shift]:
        """Find the shift for a (date, shift type) pair."""
        for shift in self.shifts:
            if shift.key == (d, shift_type):
                return shift
        return None

    def shifts_on(self, d: date) -> list[Shift]:
        """All shifts on a date, in generation order."""
        return [s for s in self.shifts if s.shift_date == d]

    def get_employee_shifts(self, employee_id: str) -> list[Shift]:
        """All shifts an employee is assigned to this week."""
        return [s for s in self.shifts if employee_id in s.employee_ids]


@dataclass
class TaskDistribution:
    """Result of distributing a batch of tasks across the roster.

    Attributes:
        assignments: Employee id to assigned tasks, in assignment order.
        unassigned: Tasks no employee was eligible for.
    """

    assignments: dict[str, list[Task]] = field(default_factory=dict)
    unassigned: list[Task] = field(default_factory=list)

    def tasks_for(self, employee_id: str) -> list[Task]:
        return self.assignments.get(employee_id, [])

    @property
    def assigned_count(self) -> int:
        return sum(len(tasks) for tasks in self.assignments.values())
