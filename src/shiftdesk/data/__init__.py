"""Storage boundary and roster files."""

from shiftdesk.data.loader import Roster, RosterFileError, load_roster, save_employees
from shiftdesk.data.repository import InMemoryScheduleRepository, ScheduleRepository

__all__ = [
    "InMemoryScheduleRepository",
    "Roster",
    "RosterFileError",
    "ScheduleRepository",
    "load_roster",
    "save_employees",
]
