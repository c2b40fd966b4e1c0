"""Scheduling engine for generating shift rosters and assigning tasks."""

from shiftdesk.scheduling.availability import AvailabilityResolver
from shiftdesk.scheduling.leave_checker import (
    LeaveOverlapChecker,
    LeaveRequestValidator,
    ranges_overlap,
)
from shiftdesk.scheduling.scheduler import Scheduler
from shiftdesk.scheduling.statistics import (
    LeaveStatistics,
    ShiftStatistics,
    TaskStatistics,
    WeekendCount,
    top_performers,
    weekend_distribution,
)
from shiftdesk.scheduling.task_assigner import ScoredCandidate, TaskAssigner
from shiftdesk.scheduling.weekday_allocator import WeekdayShiftAllocator
from shiftdesk.scheduling.weekend_allocator import WeekendShiftAllocator
from shiftdesk.scheduling.weekly_scheduler import WeeklyScheduleGenerator

__all__ = [
    # Core schedulers
    "Scheduler",
    "WeeklyScheduleGenerator",
    # Allocators
    "AvailabilityResolver",
    "WeekdayShiftAllocator",
    "WeekendShiftAllocator",
    # Tasks
    "TaskAssigner",
    "ScoredCandidate",
    # Leaves
    "LeaveOverlapChecker",
    "LeaveRequestValidator",
    "ranges_overlap",
    # Statistics
    "ShiftStatistics",
    "TaskStatistics",
    "LeaveStatistics",
    "WeekendCount",
    "weekend_distribution",
    "top_performers",
]
