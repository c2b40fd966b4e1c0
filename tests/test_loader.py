"""Tests for JSON roster files and the in-memory repository."""

import json
from datetime import date

import pytest

from shiftdesk.data.loader import (
    RosterFileError,
    employee_from_dict,
    employee_to_dict,
    load_roster,
    save_employees,
    schedule_to_dict,
)
from shiftdesk.data.repository import InMemoryScheduleRepository
from shiftdesk.domain.errors import ConflictError
from shiftdesk.domain.models import (
    LeaveStatus,
    LeaveType,
    Shift,
    ShiftType,
    SkillLevel,
    StaffingQuota,
    TaskDifficulty,
    TaskPriority,
)
from shiftdesk.scheduling.weekly_scheduler import WeeklyScheduleGenerator

ROSTER = {
    "employees": [
        {
            "id": "E001",
            "name": "Alice",
            "skill_level": "Senior",
            "skills": ["Python", "SQL"],
            "weekends_off": ["2024-01-27", None],
        },
        {
            "id": "E002",
            "name": "Bob",
            "skill_level": "Junior",
            "skills": ["Python"],
            "weekend_shift_history": [
                {"date": "2024-01-20", "shift_type": "WeekendAfternoon", "skill_level": "Junior"}
            ],
        },
    ],
    "leaves": [
        {
            "id": "L001",
            "employee_id": "E001",
            "start_date": "2024-01-23",
            "end_date": "2024-01-24",
            "type": "Sick Leave",
            "status": "Approved",
        }
    ],
    "tasks": [
        {
            "id": "T001",
            "title": "Fix build",
            "difficulty": "Hard",
            "skill_required": "Python",
            "priority": "High",
        }
    ],
}


@pytest.fixture
def roster_file(tmp_path):
    path = tmp_path / "roster.json"
    path.write_text(json.dumps(ROSTER), encoding="utf-8")
    return path


class TestLoadRoster:
    """Tests for load_roster."""

    def test_loads_all_sections(self, roster_file):
        """Employees, leaves and tasks are parsed."""
        roster = load_roster(roster_file)
        assert [e.id for e in roster.employees] == ["E001", "E002"]
        assert roster.leaves[0].leave_type == LeaveType.SICK
        assert roster.leaves[0].status == LeaveStatus.APPROVED
        assert roster.tasks[0].difficulty == TaskDifficulty.HARD
        assert roster.tasks[0].priority == TaskPriority.HIGH

    def test_employee_fields(self, roster_file):
        """Weekend-off dates and history are parsed, counter defaults to history."""
        alice, bob = load_roster(roster_file).employees
        assert alice.skill_level == SkillLevel.SENIOR
        assert alice.weekends_off == (date(2024, 1, 27), None)
        assert alice.skills == {"Python", "SQL"}
        assert bob.weekend_shifts_worked == 1
        assert bob.weekend_shift_history[0].shift_type == ShiftType.WEEKEND_AFTERNOON

    def test_missing_file(self, tmp_path):
        """A missing file raises RosterFileError."""
        with pytest.raises(RosterFileError):
            load_roster(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        """Malformed JSON raises RosterFileError."""
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(RosterFileError):
            load_roster(path)

    def test_invalid_record(self, tmp_path):
        """An unknown skill level raises RosterFileError."""
        path = tmp_path / "bad.json"
        path.write_text(
            json.dumps({"employees": [{"id": "E1", "skill_level": "Principal"}]}),
            encoding="utf-8",
        )
        with pytest.raises(RosterFileError):
            load_roster(path)

    def test_employee_round_trip(self, roster_file):
        """Serializing an employee and parsing it back keeps its fields."""
        alice = load_roster(roster_file).employees[0]
        assert employee_from_dict(employee_to_dict(alice)) == alice

    def test_save_employees_keeps_other_sections(self, roster_file):
        """Saving employees leaves leaves and tasks in place."""
        roster = load_roster(roster_file)
        roster.employees[0].weekend_shifts_worked = 4

        save_employees(roster_file, roster.employees)

        reloaded = load_roster(roster_file)
        assert reloaded.employees[0].weekend_shifts_worked == 4
        assert len(reloaded.leaves) == 1
        assert len(reloaded.tasks) == 1

    def test_schedule_to_dict(self, roster_file):
        """A generated week serializes with shifts and unfilled slots."""
        roster = load_roster(roster_file)
        schedule = WeeklyScheduleGenerator().generate(date(2024, 1, 22), roster.employees, roster.leaves)
        data = schedule_to_dict(schedule)
        assert data["week_start"] == "2024-01-22"
        assert data["week_end"] == "2024-01-28"
        assert len(data["shifts"]) == 26
        assert data["shifts"][0]["id"] == "2024-01-22-Morning"
        assert data["unfilled"]


class TestInMemoryScheduleRepository:
    """Tests for InMemoryScheduleRepository."""

    def _shift(self, d, shift_type=ShiftType.MORNING):
        return Shift(d, shift_type, StaffingQuota(1, 1))

    def test_bulk_create_is_all_or_nothing(self):
        """One duplicate rejects the whole batch."""
        repository = InMemoryScheduleRepository(shifts=[self._shift(date(2024, 1, 22))])
        batch = [self._shift(date(2024, 1, 23)), self._shift(date(2024, 1, 22))]

        with pytest.raises(ConflictError):
            repository.bulk_create_shifts(batch)

        assert len(repository.list_shifts()) == 1

    def test_duplicate_within_batch(self):
        """A batch repeating a key is rejected."""
        repository = InMemoryScheduleRepository()
        with pytest.raises(ConflictError):
            repository.bulk_create_shifts(
                [self._shift(date(2024, 1, 22)), self._shift(date(2024, 1, 22))]
            )
        assert repository.list_shifts() == []

    def test_list_shifts_range(self):
        """Shifts are filtered by inclusive date range."""
        repository = InMemoryScheduleRepository(
            shifts=[self._shift(date(2024, 1, d)) for d in range(20, 26)]
        )
        shifts = repository.list_shifts(date(2024, 1, 22), date(2024, 1, 23))
        assert [s.shift_date.day for s in shifts] == [22, 23]

    def test_list_approved_leaves_window(self, roster_file):
        """Only approved leaves intersecting the window are listed."""
        repository = load_roster(roster_file).to_repository()
        assert len(repository.list_approved_leaves(date(2024, 1, 24), date(2024, 1, 30))) == 1
        assert repository.list_approved_leaves(date(2024, 1, 25), date(2024, 1, 30)) == []
