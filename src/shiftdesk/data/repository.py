"""Storage boundary for the scheduling core.

The core never performs I/O itself. Callers fetch snapshots through a
``ScheduleRepository``, run the allocators in memory and persist the
results back through it. ``InMemoryScheduleRepository`` is the reference
implementation used by the CLI and the tests.
"""

import logging
from abc import ABC, abstractmethod
from datetime import date
from typing import Iterable, Optional

from shiftdesk.domain.errors import ConflictError
from shiftdesk.domain.models import (
    DateRange,
    Employee,
    Leave,
    LeaveStatus,
    Shift,
    ShiftType,
    Task,
    ranges_overlap,
)

logger = logging.getLogger(__name__)


class ScheduleRepository(ABC):
    """Abstract storage for employees, leaves, shifts and tasks."""

    @abstractmethod
    def list_active_employees(self) -> list[Employee]:
        """Active employees in stable roster order."""
        pass

    @abstractmethod
    def get_employee(self, employee_id: str) -> Optional[Employee]:
        pass

    @abstractmethod
    def save_employee(self, employee: Employee) -> None:
        """Insert or replace an employee."""
        pass

    @abstractmethod
    def list_leaves(self, employee_id: Optional[str] = None) -> list[Leave]:
        """All leaves, optionally for one employee."""
        pass

    @abstractmethod
    def get_leave(self, leave_id: str) -> Optional[Leave]:
        pass

    @abstractmethod
    def list_approved_leaves(self, start_date: date, end_date: date) -> list[Leave]:
        """Approved leaves intersecting an inclusive date range."""
        pass

    @abstractmethod
    def save_leave(self, leave: Leave) -> None:
        pass

    @abstractmethod
    def find_shift(self, d: date, shift_type: ShiftType) -> Optional[Shift]:
        """The shift for a (date, shift type) pair, if any."""
        pass

    @abstractmethod
    def list_shifts(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Shift]:
        pass

    @abstractmethod
    def bulk_create_shifts(self, shifts: list[Shift]) -> list[Shift]:
        """Create shifts all-or-nothing.

        Raises:
            ConflictError: A (date, shift type) pair already exists or
                appears twice in the batch; nothing is created.
        """
        pass

    @abstractmethod
    def delete_shift(self, d: date, shift_type: ShiftType) -> bool:
        pass

    @abstractmethod
    def list_tasks(self) -> list[Task]:
        pass

    @abstractmethod
    def save_task(self, task: Task) -> None:
        pass


class InMemoryScheduleRepository(ScheduleRepository):
    """Dictionary-backed repository.

    Dicts preserve insertion order, which gives the roster its stable
    iteration order.
    """

    def __init__(
        self,
        employees: Iterable[Employee] = (),
        leaves: Iterable[Leave] = (),
        shifts: Iterable[Shift] = (),
        tasks: Iterable[Task] = (),
    ):
        self.employees: dict[str, Employee] = {e.id: e for e in employees}
        self.leaves: dict[str, Leave] = {leave.id: leave for leave in leaves}
        self.shifts: dict[tuple[date, ShiftType], Shift] = {}
        self.tasks: dict[str, Task] = {t.id: t for t in tasks}
        if shifts:
            self.bulk_create_shifts(list(shifts))

    def list_active_employees(self) -> list[Employee]:
        return [e for e in self.employees.values() if e.is_active]

    def get_employee(self, employee_id: str) -> Optional[Employee]:
        return self.employees.get(employee_id)

    def save_employee(self, employee: Employee) -> None:
        self.employees[employee.id] = employee

    def list_leaves(self, employee_id: Optional[str] = None) -> list[Leave]:
        return [
            leave
            for leave in self.leaves.values()
            if employee_id is None or leave.employee_id == employee_id
        ]

    def get_leave(self, leave_id: str) -> Optional[Leave]:
        return self.leaves.get(leave_id)

    def list_approved_leaves(self, start_date: date, end_date: date) -> list[Leave]:
        window = DateRange(start_date, end_date)
        return [
            leave
            for leave in self.leaves.values()
            if leave.status == LeaveStatus.APPROVED and ranges_overlap(leave, window)
        ]

    def save_leave(self, leave: Leave) -> None:
        self.leaves[leave.id] = leave

    def find_shift(self, d: date, shift_type: ShiftType) -> Optional[Shift]:
        return self.shifts.get((d, shift_type))

    def list_shifts(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Shift]:
        result = []
        for shift in self.shifts.values():
            if start_date is not None and shift.shift_date < start_date:
                continue
            if end_date is not None and shift.shift_date > end_date:
                continue
            result.append(shift)
        return sorted(result, key=lambda s: (s.shift_date, s.shift_type.value))

    def bulk_create_shifts(self, shifts: list[Shift]) -> list[Shift]:
        seen = set()
        conflicts = []
        for shift in shifts:
            if shift.key in self.shifts or shift.key in seen:
                conflicts.append(shift)
            seen.add(shift.key)

        if conflicts:
            logger.error(
                "Refusing to create %d shifts: %d duplicate (date, type) pairs",
                len(shifts),
                len(conflicts),
            )
            raise ConflictError(
                "Shift already exists for this date and type",
                conflicts=conflicts,
            )

        for shift in shifts:
            self.shifts[shift.key] = shift
        return list(shifts)

    def delete_shift(self, d: date, shift_type: ShiftType) -> bool:
        return self.shifts.pop((d, shift_type), None) is not None

    def list_tasks(self) -> list[Task]:
        return list(self.tasks.values())

    def save_task(self, task: Task) -> None:
        self.tasks[task.id] = task
