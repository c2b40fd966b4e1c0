"""JSON roster files.

A roster file holds the snapshot the CLI schedules from::

    {
      "employees": [{"id": "E001", "name": "Alice", "skill_level": "Senior",
                     "skills": ["Python"], "weekends_off": ["2024-01-27", null]}],
      "leaves": [{"id": "L001", "employee_id": "E001", "start_date": "2024-01-23",
                  "end_date": "2024-01-24", "type": "Vacation", "status": "Approved"}],
      "tasks": [{"id": "T001", "title": "Fix build", "difficulty": "Hard",
                 "skill_required": "Python", "priority": "High"}]
    }

Enum fields use their display values ("Senior", "Sick Leave", "In Progress").
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Optional, Union

from shiftdesk.data.repository import InMemoryScheduleRepository
from shiftdesk.domain.errors import ShiftdeskError
from shiftdesk.domain.models import (
    Employee,
    Leave,
    LeaveStatus,
    LeaveType,
    Shift,
    ShiftType,
    SkillLevel,
    Task,
    TaskDifficulty,
    TaskPriority,
    TaskStatus,
    WeekendShiftRecord,
    WeeklySchedule,
)

logger = logging.getLogger(__name__)


class RosterFileError(ShiftdeskError):
    """Raised when a roster file is missing or malformed."""

    pass


@dataclass
class Roster:
    """Contents of a roster file."""

    employees: list[Employee] = field(default_factory=list)
    leaves: list[Leave] = field(default_factory=list)
    tasks: list[Task] = field(default_factory=list)

    def to_repository(self) -> InMemoryScheduleRepository:
        return InMemoryScheduleRepository(
            employees=self.employees,
            leaves=self.leaves,
            tasks=self.tasks,
        )


def _parse_date(value: Optional[str]) -> Optional[date]:
    if value is None:
        return None
    return date.fromisoformat(value)


def employee_from_dict(data: dict[str, Any]) -> Employee:
    weekends_off = [_parse_date(v) for v in data.get("weekends_off", [])]
    weekends_off = (weekends_off + [None, None])[:2]
    history = [
        WeekendShiftRecord(
            shift_date=date.fromisoformat(record["date"]),
            shift_type=ShiftType(record["shift_type"]),
            skill_level=SkillLevel(record["skill_level"]),
        )
        for record in data.get("weekend_shift_history", [])
    ]
    return Employee(
        id=str(data["id"]),
        name=data.get("name", str(data["id"])),
        skill_level=SkillLevel(data["skill_level"]),
        skills=set(data.get("skills", [])),
        tasks_completed=int(data.get("tasks_completed", 0)),
        skill_points=int(data.get("skill_points", 0)),
        weekend_shifts_worked=int(data.get("weekend_shifts_worked", len(history))),
        weekends_off=tuple(weekends_off),
        weekend_shift_history=history,
        is_active=bool(data.get("is_active", True)),
        department=data.get("department", ""),
    )


def employee_to_dict(employee: Employee) -> dict[str, Any]:
    return {
        "id": employee.id,
        "name": employee.name,
        "skill_level": employee.skill_level.value,
        "skills": sorted(employee.skills),
        "tasks_completed": employee.tasks_completed,
        "skill_points": employee.skill_points,
        "weekend_shifts_worked": employee.weekend_shifts_worked,
        "weekends_off": [d.isoformat() if d else None for d in employee.weekends_off],
        "weekend_shift_history": [
            {
                "date": r.shift_date.isoformat(),
                "shift_type": r.shift_type.value,
                "skill_level": r.skill_level.value,
            }
            for r in employee.weekend_shift_history
        ],
        "is_active": employee.is_active,
        "department": employee.department,
    }


def leave_from_dict(data: dict[str, Any]) -> Leave:
    return Leave(
        id=str(data["id"]),
        employee_id=str(data["employee_id"]),
        start_date=date.fromisoformat(data["start_date"]),
        end_date=date.fromisoformat(data["end_date"]),
        leave_type=LeaveType(data.get("type", LeaveType.PERSONAL.value)),
        status=LeaveStatus(data.get("status", LeaveStatus.PENDING.value)),
        reason=data.get("reason", ""),
    )


def task_from_dict(data: dict[str, Any]) -> Task:
    return Task(
        id=str(data["id"]),
        title=data.get("title", ""),
        difficulty=TaskDifficulty(data["difficulty"]),
        skill_required=data["skill_required"],
        priority=TaskPriority(data.get("priority", TaskPriority.MEDIUM.value)),
        skill_points_reward=int(data.get("skill_points_reward", 10)),
        description=data.get("description", ""),
        assigned_to=data.get("assigned_to"),
        status=TaskStatus(data.get("status", TaskStatus.PENDING.value)),
    )


def task_to_dict(task: Task) -> dict[str, Any]:
    return {
        "id": task.id,
        "title": task.title,
        "difficulty": task.difficulty.value,
        "skill_required": task.skill_required,
        "priority": task.priority.value,
        "skill_points_reward": task.skill_points_reward,
        "assigned_to": task.assigned_to,
        "status": task.status.value,
    }


def shift_to_dict(shift: Shift) -> dict[str, Any]:
    return {
        "id": shift.id,
        "date": shift.shift_date.isoformat(),
        "type": shift.shift_type.value,
        "employees": list(shift.employee_ids),
        "requirements": {
            "seniors": shift.quota.seniors,
            "juniors": shift.quota.juniors,
            "alternate_with": (
                shift.quota.alternate_with.value.lower()
                if shift.quota.alternate_with
                else None
            ),
        },
        "is_weekend": shift.is_weekend,
        "staffing_status": shift.staffing_status.value,
    }


def schedule_to_dict(schedule: WeeklySchedule) -> dict[str, Any]:
    return {
        "week_start": schedule.week_start.isoformat(),
        "week_end": schedule.week_end.isoformat(),
        "shifts": [shift_to_dict(s) for s in schedule.shifts],
        "unfilled": [
            {
                "date": slot.shift_date.isoformat(),
                "type": slot.shift_type.value,
                "required_level": slot.required_level.value,
                "missing": slot.missing,
            }
            for slot in schedule.unfilled
        ],
    }


def load_roster(path: Union[str, Path]) -> Roster:
    """Load employees, leaves and tasks from a JSON roster file.

    Raises:
        RosterFileError: The file is missing, not JSON, or has bad records.
    """
    path = Path(path)
    if not path.exists():
        raise RosterFileError(f"Roster file not found: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise RosterFileError(f"Roster file {path} is not valid JSON: {e}") from e

    try:
        roster = Roster(
            employees=[employee_from_dict(e) for e in data.get("employees", [])],
            leaves=[leave_from_dict(leave) for leave in data.get("leaves", [])],
            tasks=[task_from_dict(t) for t in data.get("tasks", [])],
        )
    except (KeyError, ValueError, TypeError) as e:
        raise RosterFileError(f"Roster file {path} has an invalid record: {e}") from e

    logger.info(
        "Loaded %d employees, %d leaves, %d tasks from %s",
        len(roster.employees),
        len(roster.leaves),
        len(roster.tasks),
        path,
    )
    return roster


def save_employees(path: Union[str, Path], employees: list[Employee]) -> None:
    """Write updated employees back into an existing roster file."""
    path = Path(path)
    data = json.loads(path.read_text(encoding="utf-8")) if path.exists() else {}
    data["employees"] = [employee_to_dict(e) for e in employees]
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    logger.info("Saved %d employees to %s", len(employees), path)
