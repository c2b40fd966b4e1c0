"""Validation module for verifying roster correctness.

This module provides a single source of truth for the constraints a
generated roster must satisfy. Every generated week should pass
validation before being output.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Iterable, Optional

from shiftdesk.domain.models import (
    Employee,
    Leave,
    LeaveStatus,
    Shift,
    SkillLevel,
    StaffingStatus,
    Task,
)


class ValidationErrorType(Enum):
    """Types of validation errors."""

    DUPLICATE_SHIFT = "duplicate_shift"
    DUPLICATE_EMPLOYEE = "duplicate_employee"
    DOUBLE_BOOKED = "double_booked"
    SENIOR_QUOTA_EXCEEDED = "senior_quota_exceeded"
    JUNIOR_QUOTA_EXCEEDED = "junior_quota_exceeded"
    WEEKEND_OVERSTAFFED = "weekend_overstaffed"
    EMPLOYEE_ON_LEAVE = "employee_on_leave"
    EMPLOYEE_WEEKEND_OFF = "employee_weekend_off"
    UNKNOWN_EMPLOYEE = "unknown_employee"
    INACTIVE_EMPLOYEE = "inactive_employee"
    SKILL_MISSING = "skill_missing"


@dataclass
class ValidationError:
    """A single validation error."""

    error_type: ValidationErrorType
    message: str
    employee_id: Optional[str] = None
    shift_id: Optional[str] = None
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        parts = [f"[{self.error_type.value}]"]
        if self.employee_id:
            parts.append(f"Employee {self.employee_id}:")
        parts.append(self.message)
        if self.shift_id is not None:
            parts.append(f"(shift {self.shift_id})")
        return " ".join(parts)


@dataclass
class ValidationResult:
    """Result of validating a roster."""

    is_valid: bool
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_error(self, error: ValidationError) -> None:
        """Add an error and mark as invalid."""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str) -> None:
        """Add a warning (doesn't affect validity)."""
        self.warnings.append(warning)


class RosterValidator:
    """Validates generated shifts and task assignments.

    Understaffed shifts and an employee picked for more than one weekend
    shift on the same date are reported as warnings; the allocators are
    allowed to produce both.

    Example:
        >>> validator = RosterValidator()
        >>> result = validator.validate(schedule.shifts, employees_map, leaves)
        >>> if not result.is_valid:
        ...     for error in result.errors:
        ...         print(error)
    """

    def validate(
        self,
        shifts: Iterable[Shift],
        employees_map: dict[str, Employee],
        leaves: Iterable[Leave] = (),
    ) -> ValidationResult:
        """Validate a set of shifts.

        Args:
            shifts: Shifts to validate, typically one generated week.
            employees_map: Dict mapping employee IDs to Employee objects.
            leaves: Leaves to check against; only approved ones count.

        Returns:
            ValidationResult with is_valid flag and any errors.
        """
        result = ValidationResult(is_valid=True)
        shifts = list(shifts)
        approved = [leave for leave in leaves if leave.status == LeaveStatus.APPROVED]

        seen_keys = set()
        for shift in shifts:
            if shift.key in seen_keys:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.DUPLICATE_SHIFT,
                        message=(
                            f"More than one {shift.shift_type.value} shift "
                            f"on {shift.shift_date}"
                        ),
                        shift_id=shift.id,
                    )
                )
            seen_keys.add(shift.key)

            self._validate_shift(shift, employees_map, approved, result)

        self._validate_daily_bookings(shifts, result)

        return result

    def _validate_shift(
        self,
        shift: Shift,
        employees_map: dict[str, Employee],
        approved_leaves: list[Leave],
        result: ValidationResult,
    ) -> None:
        """Validate a single shift."""
        if len(set(shift.employee_ids)) != len(shift.employee_ids):
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.DUPLICATE_EMPLOYEE,
                    message="Employee listed more than once",
                    shift_id=shift.id,
                )
            )

        level_counts = {SkillLevel.SENIOR: 0, SkillLevel.JUNIOR: 0}

        for employee_id in shift.employee_ids:
            employee = employees_map.get(employee_id)
            if employee is None:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.UNKNOWN_EMPLOYEE,
                        message=f"Unknown employee ID: {employee_id}",
                        employee_id=employee_id,
                        shift_id=shift.id,
                    )
                )
                continue

            level_counts[employee.skill_level] += 1

            if not employee.is_active:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.INACTIVE_EMPLOYEE,
                        message="Inactive employee is scheduled",
                        employee_id=employee_id,
                        shift_id=shift.id,
                    )
                )

            if employee.is_scheduled_off(shift.shift_date):
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.EMPLOYEE_WEEKEND_OFF,
                        message=f"{shift.shift_date} is a designated weekend off",
                        employee_id=employee_id,
                        shift_id=shift.id,
                    )
                )

            for leave in approved_leaves:
                if leave.employee_id == employee_id and leave.covers(shift.shift_date):
                    result.add_error(
                        ValidationError(
                            error_type=ValidationErrorType.EMPLOYEE_ON_LEAVE,
                            message=f"On approved leave {leave.id}",
                            employee_id=employee_id,
                            shift_id=shift.id,
                            details={"leave_id": leave.id},
                        )
                    )

        if shift.is_weekend:
            if len(shift.employee_ids) > 1:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.WEEKEND_OVERSTAFFED,
                        message=(
                            f"Weekend shift has {len(shift.employee_ids)} "
                            f"employees but takes one"
                        ),
                        shift_id=shift.id,
                    )
                )
        else:
            if level_counts[SkillLevel.SENIOR] > shift.quota.seniors:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.SENIOR_QUOTA_EXCEEDED,
                        message=(
                            f"{level_counts[SkillLevel.SENIOR]} seniors assigned "
                            f"but quota is {shift.quota.seniors}"
                        ),
                        shift_id=shift.id,
                    )
                )
            if level_counts[SkillLevel.JUNIOR] > shift.quota.juniors:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.JUNIOR_QUOTA_EXCEEDED,
                        message=(
                            f"{level_counts[SkillLevel.JUNIOR]} juniors assigned "
                            f"but quota is {shift.quota.juniors}"
                        ),
                        shift_id=shift.id,
                    )
                )

        status = shift.staffing_status
        if status in (StaffingStatus.UNSTAFFED, StaffingStatus.UNDERSTAFFED):
            result.add_warning(
                f"Shift {shift.id} is {status.value.lower()} "
                f"({len(shift.employee_ids)}/{shift.quota.total})"
            )

    def _validate_daily_bookings(
        self,
        shifts: list[Shift],
        result: ValidationResult,
    ) -> None:
        """Check that nobody works two shifts on the same date."""
        bookings: dict[tuple[date, str], list[Shift]] = defaultdict(list)
        for shift in shifts:
            for employee_id in shift.employee_ids:
                bookings[(shift.shift_date, employee_id)].append(shift)

        for (d, employee_id), booked in bookings.items():
            if len(booked) < 2:
                continue

            if all(s.is_weekend for s in booked):
                result.add_warning(
                    f"Employee {employee_id} holds {len(booked)} weekend shifts "
                    f"on {d}: {', '.join(s.shift_type.value for s in booked)}"
                )
                continue

            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.DOUBLE_BOOKED,
                    message=(
                        f"Booked on {len(booked)} shifts on {d}: "
                        f"{', '.join(s.shift_type.value for s in booked)}"
                    ),
                    employee_id=employee_id,
                    details={"date": d.isoformat()},
                )
            )

    def validate_task_assignment(
        self,
        task: Task,
        employees_map: dict[str, Employee],
    ) -> ValidationResult:
        """Validate that an assigned task's employee carries the required skill.

        Args:
            task: Task to check; unassigned tasks are always valid.
            employees_map: Dict mapping employee IDs to Employee objects.

        Returns:
            ValidationResult for the assignment.
        """
        result = ValidationResult(is_valid=True)
        if task.assigned_to is None:
            return result

        employee = employees_map.get(task.assigned_to)
        if employee is None:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.UNKNOWN_EMPLOYEE,
                    message=f"Task {task.id} assigned to unknown employee",
                    employee_id=task.assigned_to,
                )
            )
        elif not employee.has_skill(task.skill_required):
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.SKILL_MISSING,
                    message=(
                        f"Lacks skill '{task.skill_required}' required by "
                        f"task {task.id}"
                    ),
                    employee_id=employee.id,
                    details={"skill": task.skill_required},
                )
            )
        return result
