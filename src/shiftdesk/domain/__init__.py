"""Domain models and business rules for scheduling."""

from shiftdesk.domain.errors import (
    ConflictError,
    EligibilityError,
    InvalidRangeError,
    LeaveStateError,
    ShiftdeskError,
)
from shiftdesk.domain.models import (
    WEEKDAY_SHIFT_TYPES,
    WEEKEND_SHIFT_TYPES,
    DateRange,
    Employee,
    Leave,
    LeaveStatus,
    LeaveType,
    Shift,
    ShiftReplacement,
    ShiftStatus,
    ShiftType,
    SkillLevel,
    StaffingQuota,
    StaffingStatus,
    Task,
    TaskDifficulty,
    TaskDistribution,
    TaskPriority,
    TaskStatus,
    UnfilledSlot,
    WeekendFairnessMetrics,
    WeekendRotationState,
    WeekendShiftRecord,
    WeeklySchedule,
    epoch_days,
    ranges_overlap,
)
from shiftdesk.domain.policies import (
    DefaultLeavePolicy,
    DefaultStaffingPolicy,
    DefaultTaskScoringPolicy,
    LeavePolicy,
    StaffingPolicy,
    TaskScoringPolicy,
)

__all__ = [
    # Errors
    "ConflictError",
    "EligibilityError",
    "InvalidRangeError",
    "LeaveStateError",
    "ShiftdeskError",
    # Models
    "WEEKDAY_SHIFT_TYPES",
    "WEEKEND_SHIFT_TYPES",
    "DateRange",
    "Employee",
    "Leave",
    "LeaveStatus",
    "LeaveType",
    "Shift",
    "ShiftReplacement",
    "ShiftStatus",
    "ShiftType",
    "SkillLevel",
    "StaffingQuota",
    "StaffingStatus",
    "Task",
    "TaskDifficulty",
    "TaskDistribution",
    "TaskPriority",
    "TaskStatus",
    "UnfilledSlot",
    "WeekendFairnessMetrics",
    "WeekendRotationState",
    "WeekendShiftRecord",
    "WeeklySchedule",
    "epoch_days",
    "ranges_overlap",
    # Policies
    "DefaultLeavePolicy",
    "DefaultStaffingPolicy",
    "DefaultTaskScoringPolicy",
    "LeavePolicy",
    "StaffingPolicy",
    "TaskScoringPolicy",
]
