"""Main scheduler interface.

This module provides the high-level Scheduler class that fetches
snapshots from a repository, runs the allocators and task assigner over
them, and persists the results.
"""

import logging
import random
from datetime import date, timedelta
from typing import Iterable, Optional

from shiftdesk.data.repository import ScheduleRepository
from shiftdesk.domain.errors import EligibilityError, ShiftdeskError
from shiftdesk.domain.models import (
    Employee,
    Leave,
    LeaveType,
    Task,
    TaskDistribution,
    WeeklySchedule,
)
from shiftdesk.domain.policies import (
    DefaultLeavePolicy,
    DefaultStaffingPolicy,
    DefaultTaskScoringPolicy,
    LeavePolicy,
    StaffingPolicy,
    TaskScoringPolicy,
)
from shiftdesk.scheduling.leave_checker import LeaveOverlapChecker, LeaveRequestValidator
from shiftdesk.scheduling.statistics import ShiftStatistics, weekend_distribution
from shiftdesk.scheduling.task_assigner import TaskAssigner
from shiftdesk.scheduling.weekly_scheduler import WeeklyScheduleGenerator

logger = logging.getLogger(__name__)


class Scheduler:
    """High-level entry point for shift generation and task assignment.

    Example:
        >>> scheduler = Scheduler(InMemoryScheduleRepository(employees=roster))
        >>> schedule = scheduler.generate_week(date(2024, 1, 22))
        >>> employee_id = scheduler.assign_task(task)
    """

    def __init__(
        self,
        repository: ScheduleRepository,
        staffing_policy: Optional[StaffingPolicy] = None,
        scoring_policy: Optional[TaskScoringPolicy] = None,
        leave_policy: Optional[LeavePolicy] = None,
        rng: Optional[random.Random] = None,
    ):
        """Initialize scheduler with a repository and policies.

        Args:
            repository: Storage for employees, leaves, shifts and tasks.
            staffing_policy: Quotas per shift type.
            scoring_policy: Task scoring rules.
            leave_policy: Leave request rules.
            rng: Random source for task scoring tie-breakers.
        """
        self.repository = repository
        self.staffing_policy = staffing_policy or DefaultStaffingPolicy()
        self.scoring_policy = scoring_policy or DefaultTaskScoringPolicy()
        self.leave_policy = leave_policy or DefaultLeavePolicy()
        self.rng = rng or random.Random()

        self.generator = WeeklyScheduleGenerator(staffing_policy=self.staffing_policy)
        self.leave_validator = LeaveRequestValidator(policy=self.leave_policy)

    def generate_week(self, week_start: date) -> WeeklySchedule:
        """Generate and store all shifts for the week starting at ``week_start``.

        Raises:
            ConflictError: A shift already exists in the week; nothing is
                stored and no employee is updated.
        """
        week_end = week_start + timedelta(days=6)
        roster = self.repository.list_active_employees()
        leaves = self.repository.list_approved_leaves(week_start, week_end)

        schedule = self.generator.generate(
            week_start,
            roster,
            leaves,
            find_shift=self.repository.find_shift,
        )

        self.repository.bulk_create_shifts(schedule.shifts)

        changed = schedule.rotation_state.changed_employees(roster)
        for employee in changed:
            self.repository.save_employee(employee)

        logger.info(
            "Stored %d shifts for week of %s; updated %d weekend counters",
            len(schedule.shifts),
            week_start,
            len(changed),
        )
        return schedule

    def generate_week_with_stats(self, week_start: date) -> tuple[WeeklySchedule, dict]:
        """Generate a week and return statistics.

        Returns:
            Tuple of (schedule, stats_dict).
        """
        schedule = self.generate_week(week_start)
        return schedule, self._calculate_stats(schedule)

    def _calculate_stats(self, schedule: WeeklySchedule) -> dict:
        shift_stats = ShiftStatistics.calculate(schedule.shifts)
        distribution = weekend_distribution(schedule.rotation_state)

        return {
            "total_shifts": shift_stats.total_shifts,
            "weekday_shifts": shift_stats.weekday_shifts,
            "weekend_shifts": shift_stats.weekend_shifts,
            "fully_staffed": shift_stats.fully_staffed,
            "unfilled_slots": sum(slot.missing for slot in schedule.unfilled),
            "fill_rate": shift_stats.fill_rate,
            "staffing_breakdown": shift_stats.staffing_breakdown,
            "employee_workload": shift_stats.employee_workload,
            "weekend_totals": {k: v.total for k, v in distribution.items()},
        }

    def _task_assigner(self, employees: Optional[Iterable[Employee]] = None) -> TaskAssigner:
        if employees is None:
            employees = self.repository.list_active_employees()
        return TaskAssigner(employees, scoring_policy=self.scoring_policy, rng=self.rng)

    def assign_task(self, task: Task) -> Optional[str]:
        """Best-scoring eligible employee id for a task, or None."""
        return self._task_assigner().assign_task(task)

    def auto_assign_task(self, task: Task) -> Optional[str]:
        """Assign a task to its best candidate and store it.

        Returns:
            The chosen employee id, or None if nobody is eligible.

        Raises:
            EligibilityError: The task is already assigned.
        """
        if task.is_assigned:
            raise EligibilityError(f"Task {task.id} is already assigned to {task.assigned_to}")

        employee_id = self.assign_task(task)
        if employee_id is None:
            return None

        task.assign_to(self.repository.get_employee(employee_id))
        self.repository.save_task(task)
        logger.info("Assigned task %s to %s", task.id, employee_id)
        return employee_id

    def get_task_recommendations(self, employee_id: str, tasks: Iterable[Task]) -> list[Task]:
        """Up to five best-scoring tasks for an employee."""
        return self._task_assigner().get_task_recommendations(employee_id, tasks)

    def distribute_tasks_equally(self, tasks: Iterable[Task]) -> TaskDistribution:
        """Assign a batch of tasks across the active roster."""
        return self._task_assigner().distribute_tasks_equally(tasks)

    def complete_task(self, task: Task, completed_on: Optional[date] = None) -> Optional[Employee]:
        """Complete a task and store the rewarded assignee.

        Raises:
            EligibilityError: The task is already completed.
        """
        assignee = None
        if task.assigned_to is not None:
            assignee = self.repository.get_employee(task.assigned_to)

        updated = task.complete(assignee, completed_on=completed_on)
        self.repository.save_task(task)
        if updated is not None:
            self.repository.save_employee(updated)
        return updated

    def check_leave_overlap(
        self,
        employee_id: str,
        start_date: date,
        end_date: date,
        exclude_leave_id: Optional[str] = None,
    ) -> bool:
        """Check if a range intersects the employee's pending or approved leaves."""
        checker = LeaveOverlapChecker(self.repository.list_leaves(employee_id))
        return checker.check_leave_overlap(employee_id, start_date, end_date, exclude_leave_id)

    def request_leave(self, leave: Leave, today: Optional[date] = None) -> Leave:
        """Validate and store a new or edited leave request.

        Raises:
            InvalidRangeError: Dates are reversed or not in the future.
            ConflictError: The request overlaps another blocking leave.
        """
        self.leave_validator.validate(
            leave,
            self.repository.list_leaves(leave.employee_id),
            today=today,
        )
        self.repository.save_leave(leave)
        return leave

    def edit_leave(
        self,
        leave_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        leave_type: Optional[LeaveType] = None,
        reason: Optional[str] = None,
        today: Optional[date] = None,
    ) -> Leave:
        """Edit a stored pending leave.

        The edited copy is validated against the employee's other leaves
        and stored only if it passes; on failure the stored leave keeps
        its previous values.

        Raises:
            ShiftdeskError: No leave with this id.
            LeaveStateError: The leave is no longer pending.
            InvalidRangeError: Dates are reversed or not in the future.
            ConflictError: The edit overlaps another blocking leave.
        """
        stored = self.repository.get_leave(leave_id)
        if stored is None:
            raise ShiftdeskError(f"Leave {leave_id} not found")

        edited = stored.edit(
            start_date=start_date,
            end_date=end_date,
            leave_type=leave_type,
            reason=reason,
        )
        return self.request_leave(edited, today=today)
