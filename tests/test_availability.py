"""Tests for availability resolution and leave overlap checks."""

from datetime import date

import pytest

from shiftdesk.data.repository import InMemoryScheduleRepository
from shiftdesk.domain.errors import ConflictError, InvalidRangeError, LeaveStateError
from shiftdesk.domain.models import Employee, Leave, LeaveStatus, LeaveType, SkillLevel
from shiftdesk.scheduling.availability import AvailabilityResolver
from shiftdesk.scheduling.leave_checker import LeaveOverlapChecker, LeaveRequestValidator
from shiftdesk.scheduling.scheduler import Scheduler


@pytest.fixture
def roster():
    """Two seniors and a junior, one inactive senior."""
    return [
        Employee(id="E1", name="Alice", skill_level=SkillLevel.SENIOR),
        Employee(id="E2", name="Bob", skill_level=SkillLevel.JUNIOR),
        Employee(id="E3", name="Carol", skill_level=SkillLevel.SENIOR, is_active=False),
        Employee(
            id="E4",
            name="David",
            skill_level=SkillLevel.SENIOR,
            weekends_off=(date(2024, 1, 27), None),
        ),
    ]


class TestAvailabilityResolver:
    """Tests for AvailabilityResolver."""

    @pytest.fixture
    def resolver(self):
        return AvailabilityResolver()

    def test_inactive_excluded(self, resolver, roster):
        """Inactive employees are never available."""
        available = resolver.available_employees(date(2024, 1, 22), roster)
        assert [e.id for e in available] == ["E1", "E2", "E4"]

    def test_weekend_off_excluded(self, resolver, roster):
        """An employee is unavailable on a designated weekend-off date."""
        available = resolver.available_employees(date(2024, 1, 27), roster)
        assert "E4" not in [e.id for e in available]
        sunday = resolver.available_employees(date(2024, 1, 28), roster)
        assert "E4" in [e.id for e in sunday]

    def test_approved_leave_inclusive(self, resolver, roster):
        """Approved leave blocks both its first and last day."""
        leave = Leave(
            id="L1",
            employee_id="E1",
            start_date=date(2024, 1, 22),
            end_date=date(2024, 1, 23),
            status=LeaveStatus.APPROVED,
        )
        for d in (date(2024, 1, 22), date(2024, 1, 23)):
            ids = [e.id for e in resolver.available_employees(d, roster, [leave])]
            assert "E1" not in ids
        ids = [e.id for e in resolver.available_employees(date(2024, 1, 24), roster, [leave])]
        assert "E1" in ids

    def test_pending_leave_ignored(self, resolver, roster):
        """Only approved leaves affect availability."""
        leave = Leave(
            id="L1",
            employee_id="E1",
            start_date=date(2024, 1, 22),
            end_date=date(2024, 1, 22),
            status=LeaveStatus.PENDING,
        )
        ids = [e.id for e in resolver.available_employees(date(2024, 1, 22), roster, [leave])]
        assert "E1" in ids

    def test_exclude_ids(self, resolver, roster):
        """Already-used employees are skipped."""
        available = resolver.available_employees(date(2024, 1, 22), roster, exclude_ids={"E1"})
        assert [e.id for e in available] == ["E2", "E4"]

    def test_available_at_level(self, resolver, roster):
        """Filtering by level keeps roster order."""
        seniors = resolver.available_at_level(date(2024, 1, 22), roster, SkillLevel.SENIOR)
        assert [e.id for e in seniors] == ["E1", "E4"]

    def test_empty_roster(self, resolver):
        """An empty result is not an error."""
        assert resolver.available_employees(date(2024, 1, 22), []) == []


class TestLeaveOverlapChecker:
    """Tests for LeaveOverlapChecker."""

    @pytest.fixture
    def existing(self):
        return [
            Leave(
                id="L1",
                employee_id="E1",
                start_date=date(2024, 2, 1),
                end_date=date(2024, 2, 3),
                status=LeaveStatus.APPROVED,
            ),
            Leave(
                id="L2",
                employee_id="E1",
                start_date=date(2024, 3, 1),
                end_date=date(2024, 3, 2),
                status=LeaveStatus.REJECTED,
            ),
        ]

    def test_boundary_overlap(self, existing):
        """A request starting on the last day of a leave overlaps."""
        checker = LeaveOverlapChecker(existing)
        assert checker.check_leave_overlap("E1", date(2024, 2, 3), date(2024, 2, 5))

    def test_no_overlap_after(self, existing):
        """A request starting the next day does not overlap."""
        checker = LeaveOverlapChecker(existing)
        assert not checker.check_leave_overlap("E1", date(2024, 2, 4), date(2024, 2, 5))

    def test_rejected_leaves_ignored(self, existing):
        """Rejected leaves do not block."""
        checker = LeaveOverlapChecker(existing)
        assert not checker.check_leave_overlap("E1", date(2024, 3, 1), date(2024, 3, 1))

    def test_other_employee_ignored(self, existing):
        """Only the named employee's leaves count."""
        checker = LeaveOverlapChecker(existing)
        assert not checker.check_leave_overlap("E2", date(2024, 2, 1), date(2024, 2, 3))

    def test_exclude_leave_id(self, existing):
        """The leave being edited is ignored."""
        checker = LeaveOverlapChecker(existing)
        assert not checker.check_leave_overlap(
            "E1", date(2024, 2, 2), date(2024, 2, 6), exclude_leave_id="L1"
        )

    def test_reversed_range_raises(self, existing):
        """A reversed query range is rejected before checking."""
        checker = LeaveOverlapChecker(existing)
        with pytest.raises(InvalidRangeError):
            checker.check_leave_overlap("E1", date(2024, 2, 5), date(2024, 2, 1))


class TestLeaveRequestValidator:
    """Tests for LeaveRequestValidator."""

    @pytest.fixture
    def validator(self):
        return LeaveRequestValidator()

    def test_future_leave_accepted(self, validator):
        """A future, non-overlapping leave passes."""
        leave = Leave(id="L9", employee_id="E1", start_date=date(2024, 2, 10), end_date=date(2024, 2, 12))
        validator.validate(leave, [], today=date(2024, 2, 1))

    def test_past_leave_rejected(self, validator):
        """Non-emergency leave starting today is rejected."""
        leave = Leave(
            id="L9",
            employee_id="E1",
            start_date=date(2024, 2, 1),
            end_date=date(2024, 2, 2),
            leave_type=LeaveType.SICK,
        )
        with pytest.raises(InvalidRangeError):
            validator.validate(leave, [], today=date(2024, 2, 1))

    def test_emergency_may_start_today(self, validator):
        """Emergency leave bypasses the future-dating rule."""
        leave = Leave(
            id="L9",
            employee_id="E1",
            start_date=date(2024, 2, 1),
            end_date=date(2024, 2, 2),
            leave_type=LeaveType.EMERGENCY,
        )
        validator.validate(leave, [], today=date(2024, 2, 1))

    def test_overlap_rejected(self, validator):
        """Overlapping a pending leave raises a conflict."""
        existing = Leave(id="L1", employee_id="E1", start_date=date(2024, 2, 1), end_date=date(2024, 2, 3))
        leave = Leave(id="L2", employee_id="E1", start_date=date(2024, 2, 3), end_date=date(2024, 2, 5))
        with pytest.raises(ConflictError) as exc_info:
            validator.validate(leave, [existing], today=date(2024, 1, 1))
        assert exc_info.value.conflicts == [existing]

    def test_editing_self_is_not_overlap(self, validator):
        """A stored leave does not conflict with its own edit."""
        leave = Leave(id="L1", employee_id="E1", start_date=date(2024, 2, 1), end_date=date(2024, 2, 3))
        validator.validate(leave, [leave], today=date(2024, 1, 1))


class TestEditLeave:
    """Tests for Scheduler.edit_leave."""

    TODAY = date(2030, 1, 15)

    @pytest.fixture
    def repository(self):
        return InMemoryScheduleRepository(
            leaves=[
                Leave(id="L1", employee_id="E1", start_date=date(2030, 2, 1), end_date=date(2030, 2, 3)),
                Leave(id="L2", employee_id="E1", start_date=date(2030, 2, 10), end_date=date(2030, 2, 12)),
            ]
        )

    @pytest.fixture
    def scheduler(self, repository):
        return Scheduler(repository)

    def test_edit_saved(self, scheduler, repository):
        """A valid edit replaces the stored leave."""
        scheduler.edit_leave("L2", end_date=date(2030, 2, 14), today=self.TODAY)
        assert repository.get_leave("L2").end_date == date(2030, 2, 14)

    def test_overlapping_edit_not_stored(self, scheduler, repository):
        """An edit overlapping another leave keeps the stored dates."""
        with pytest.raises(ConflictError):
            scheduler.edit_leave("L2", start_date=date(2030, 2, 2), today=self.TODAY)

        stored = repository.get_leave("L2")
        assert (stored.start_date, stored.end_date) == (date(2030, 2, 10), date(2030, 2, 12))
        assert not scheduler.check_leave_overlap("E1", date(2030, 2, 4), date(2030, 2, 9))

    def test_past_dated_edit_not_stored(self, scheduler, repository):
        """Moving a leave into the past is refused and not stored."""
        with pytest.raises(InvalidRangeError):
            scheduler.edit_leave("L2", start_date=date(2030, 1, 10), today=self.TODAY)
        assert repository.get_leave("L2").start_date == date(2030, 2, 10)

    def test_reviewed_leave_cannot_be_edited(self, scheduler, repository):
        """Only pending leaves can be edited."""
        repository.get_leave("L1").approve("M1", reviewed_at=self.TODAY)
        with pytest.raises(LeaveStateError):
            scheduler.edit_leave("L1", end_date=date(2030, 2, 5), today=self.TODAY)
        assert repository.get_leave("L1").end_date == date(2030, 2, 3)
