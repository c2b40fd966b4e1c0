"""Command-line interface for the shiftdesk scheduling tool."""

import argparse
import json
import logging
import random
import sys
from datetime import date, timedelta
from pathlib import Path
from typing import Optional, Sequence

from shiftdesk.data.loader import load_roster, save_employees, schedule_to_dict
from shiftdesk.data.repository import InMemoryScheduleRepository
from shiftdesk.domain.errors import ShiftdeskError
from shiftdesk.domain.models import (
    Employee,
    Leave,
    SkillLevel,
    Task,
    TaskDifficulty,
    TaskPriority,
    WeekendFairnessMetrics,
    WeeklySchedule,
)
from shiftdesk.domain.policies import DefaultTaskScoringPolicy
from shiftdesk.output.pdf_generator import RosterPDFGenerator
from shiftdesk.output.report_generator import RosterReportGenerator
from shiftdesk.scheduling.scheduler import Scheduler
from shiftdesk.scheduling.statistics import TaskStatistics
from shiftdesk.validation.validator import RosterValidator

logger = logging.getLogger(__name__)

SAMPLE_SKILLS = ["Python", "SQL", "Networking", "Linux", "Support"]


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging for the CLI."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def next_monday(today: Optional[date] = None) -> date:
    """The first Monday on or after ``today``."""
    today = today or date.today()
    return today + timedelta(days=(7 - today.weekday()) % 7)


def create_sample_employees(count: int = 10) -> list[Employee]:
    """Create sample employees for testing.

    Roughly 60% are Senior. Every fourth employee has a designated
    weekend off on the first Saturday after today.

    Args:
        count: Number of employees to create.
    """
    names = [
        "Alice", "Bob", "Carol", "David", "Eve", "Frank", "Grace", "Henry",
        "Ivy", "Jack", "Kate", "Leo", "Mia", "Noah", "Olivia", "Paul",
        "Quinn", "Rose", "Sam", "Tina", "Uma", "Victor", "Wendy", "Xavier",
    ]
    saturday = next_monday() + timedelta(days=5)

    employees = []
    senior_count = round(count * 0.6)
    for i in range(count):
        name = names[i % len(names)]
        if i >= len(names):
            name = f"{name}{i // len(names) + 1}"

        skills = {SAMPLE_SKILLS[i % len(SAMPLE_SKILLS)], SAMPLE_SKILLS[(i + 2) % len(SAMPLE_SKILLS)]}
        weekends_off = (saturday, None) if i % 4 == 3 else (None, None)

        employees.append(
            Employee(
                id=f"E{i + 1:03d}",
                name=name,
                skill_level=SkillLevel.SENIOR if i < senior_count else SkillLevel.JUNIOR,
                skills=skills,
                tasks_completed=(i * 7) % 25,
                weekends_off=weekends_off,
            )
        )
    return employees


def create_sample_tasks(count: int = 8) -> list[Task]:
    """Create sample tasks covering every difficulty and priority."""
    difficulties = list(TaskDifficulty)
    priorities = list(TaskPriority)
    skills = SAMPLE_SKILLS + ["Rust"]
    return [
        Task(
            id=f"T{i + 1:03d}",
            title=f"Sample task {i + 1}",
            difficulty=difficulties[i % len(difficulties)],
            skill_required=skills[i % len(skills)],
            priority=priorities[(i // 2) % len(priorities)],
        )
        for i in range(count)
    ]


def print_schedule_summary(
    schedule: WeeklySchedule,
    stats: dict,
    employees_map: dict[str, Employee],
    leaves: Sequence[Leave] = (),
) -> None:
    """Print the week's statistics and validation results."""
    print(f"\n{'=' * 60}")
    print(f"Weekly Roster: {schedule.week_start} to {schedule.week_end}")
    print(f"{'=' * 60}")
    print(f"  Total Shifts: {stats['total_shifts']} "
          f"({stats['weekday_shifts']} weekday, {stats['weekend_shifts']} weekend)")
    print(f"  Fully Staffed: {stats['fully_staffed']}")
    print(f"  Fill Rate: {stats['fill_rate'] * 100:.0f}%")
    print(f"  Unfilled Slots: {stats['unfilled_slots']}")

    for slot in schedule.unfilled[:5]:
        print(f"    - {slot}")
    if len(schedule.unfilled) > 5:
        print(f"    ... and {len(schedule.unfilled) - 5} more")

    metrics = WeekendFairnessMetrics.calculate(schedule.rotation_state.counts)
    print("\nWeekend Fairness:")
    print(f"  Avg Weekend Shifts: {metrics.mean:.2f}")
    print(f"  Std Dev: {metrics.std_dev:.2f}")
    print(f"  Range: {metrics.min_count} - {metrics.max_count}")
    print(f"  Fairness Score: {metrics.fairness_score:.1f}/100")

    validator = RosterValidator()
    result = validator.validate(schedule.shifts, employees_map, leaves)
    if result.is_valid:
        print("\nValidation: PASSED")
    else:
        print(f"\nValidation: FAILED ({len(result.errors)} errors)")
        for error in result.errors[:5]:
            print(f"    - {error}")
        if len(result.errors) > 5:
            print(f"    ... and {len(result.errors) - 5} more errors")

    if result.warnings:
        print(f"\nWarnings ({len(result.warnings)}):")
        for warning in result.warnings[:3]:
            print(f"    - {warning}")
        if len(result.warnings) > 3:
            print(f"    ... and {len(result.warnings) - 3} more warnings")


def write_outputs(
    schedule: WeeklySchedule,
    employees_map: dict[str, Employee],
    pdf_path: Optional[str] = None,
    report_path: Optional[str] = None,
    json_path: Optional[str] = None,
    leaves: Sequence[Leave] = (),
) -> None:
    """Write the requested PDF, text report and JSON files."""
    if pdf_path:
        print(f"\nGenerating PDF: {pdf_path}")
        RosterPDFGenerator().generate(schedule, employees_map, pdf_path)
        print("  PDF created successfully!")

    if report_path:
        validation = RosterValidator().validate(schedule.shifts, employees_map, leaves)
        RosterReportGenerator().generate(schedule, employees_map, report_path, validation)
        print(f"\nReport written to {report_path}")

    if json_path:
        Path(json_path).write_text(
            json.dumps(schedule_to_dict(schedule), indent=2), encoding="utf-8"
        )
        print(f"\nSchedule JSON written to {json_path}")


def run_demo(
    employee_count: int = 10,
    week_start: Optional[date] = None,
    output_path: Optional[str] = None,
    report_path: Optional[str] = None,
) -> WeeklySchedule:
    """Run a demo week generation and task distribution."""
    week_start = week_start or next_monday()
    print(f"Generating demo roster for {employee_count} employees, week of {week_start}...")

    employees = create_sample_employees(employee_count)
    tasks = create_sample_tasks()
    repository = InMemoryScheduleRepository(employees=employees, tasks=tasks)
    scheduler = Scheduler(repository, rng=random.Random(42))

    schedule, stats = scheduler.generate_week_with_stats(week_start)
    employees_map = {e.id: e for e in repository.list_active_employees()}
    leaves = repository.list_leaves()
    print_schedule_summary(schedule, stats, employees_map, leaves)

    distribution = scheduler.distribute_tasks_equally(tasks)
    print(f"\nTask Distribution ({distribution.assigned_count}/{len(tasks)} assigned):")
    for employee_id, assigned in distribution.assignments.items():
        if assigned:
            titles = ", ".join(t.id for t in assigned)
            print(f"  {employees_map[employee_id].name} ({employee_id}): {titles}")
    for task in distribution.unassigned:
        print(f"  UNASSIGNED {task.id}: no employee with '{task.skill_required}'")

    write_outputs(schedule, employees_map, output_path, report_path, leaves=leaves)
    return schedule


def run_generate_week(
    roster_path: str,
    week_start: date,
    pdf_path: Optional[str] = None,
    report_path: Optional[str] = None,
    json_path: Optional[str] = None,
    save: bool = False,
) -> WeeklySchedule:
    """Generate a week from a roster file.

    Args:
        roster_path: JSON roster file with employees and leaves.
        week_start: First date of the week.
        pdf_path: Optional PDF output path.
        report_path: Optional text report output path.
        json_path: Optional JSON schedule output path.
        save: Write updated weekend counters back into the roster file.
    """
    roster = load_roster(roster_path)
    repository = roster.to_repository()
    scheduler = Scheduler(repository)

    schedule, stats = scheduler.generate_week_with_stats(week_start)
    employees_map = {e.id: e for e in repository.list_active_employees()}
    leaves = repository.list_leaves()
    print_schedule_summary(schedule, stats, employees_map, leaves)
    write_outputs(schedule, employees_map, pdf_path, report_path, json_path, leaves)

    if save:
        save_employees(roster_path, list(repository.employees.values()))
        print(f"\nWeekend counters saved to {roster_path}")

    return schedule


def run_assign_tasks(
    roster_path: str,
    seed: Optional[int] = None,
    deterministic: bool = False,
) -> None:
    """Distribute the roster file's unassigned tasks and print the result."""
    roster = load_roster(roster_path)
    repository = roster.to_repository()
    policy = DefaultTaskScoringPolicy(jitter=0.0) if deterministic else DefaultTaskScoringPolicy()
    scheduler = Scheduler(repository, scoring_policy=policy, rng=random.Random(seed))

    pending = [t for t in roster.tasks if not t.is_assigned]
    distribution = scheduler.distribute_tasks_equally(pending)
    employees_map = {e.id: e for e in roster.employees}

    print(f"\n{'=' * 60}")
    print(f"Task Distribution: {distribution.assigned_count}/{len(pending)} assigned")
    print(f"{'=' * 60}")
    for employee_id, assigned in distribution.assignments.items():
        employee = employees_map[employee_id]
        print(f"  {employee.name} ({employee.skill_level.value}): {len(assigned)} tasks")
        for task in assigned:
            print(f"    - {task.id} [{task.priority.value}/{task.difficulty.value}] {task.title}")

    if distribution.unassigned:
        print(f"\nNo eligible employee ({len(distribution.unassigned)}):")
        for task in distribution.unassigned:
            print(f"    - {task.id} needs '{task.skill_required}'")

    stats = TaskStatistics.calculate(roster.tasks)
    print("\nTask Statistics:")
    print(f"  Total: {stats.total}, Completed: {stats.completed}, "
          f"In Progress: {stats.in_progress}, Pending: {stats.pending}")
    print(f"  Completion Rate: {stats.completion_rate}%")


def parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date '{value}', expected YYYY-MM-DD")


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="shiftdesk - Shift Roster and Task Assignment Tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s demo                                   Run demo with 10 employees
  %(prog)s demo --count 20 --output roster.pdf    Demo with PDF output

  %(prog)s generate-week roster.json --week-start 2024-01-22
  %(prog)s generate-week roster.json --week-start 2024-01-22 --pdf week.pdf --save

  %(prog)s assign-tasks roster.json --seed 7      Distribute pending tasks
        """,
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Demo command
    demo_parser = subparsers.add_parser("demo", help="Run demo roster generation")
    demo_parser.add_argument(
        "--count", "-c",
        type=int,
        default=10,
        help="Number of employees to generate (default: 10)",
    )
    demo_parser.add_argument(
        "--week-start", "-w",
        type=parse_date,
        help="First date of the week (default: next Monday)",
    )
    demo_parser.add_argument(
        "--output", "-o",
        type=str,
        help="Output PDF file path",
    )
    demo_parser.add_argument(
        "--report", "-r",
        type=str,
        help="Output text report path",
    )

    # Generate-week command
    week_parser = subparsers.add_parser(
        "generate-week",
        help="Generate a week's shifts from a roster file",
    )
    week_parser.add_argument("roster", type=str, help="JSON roster file")
    week_parser.add_argument(
        "--week-start", "-w",
        type=parse_date,
        required=True,
        help="First date of the week (YYYY-MM-DD)",
    )
    week_parser.add_argument("--pdf", type=str, help="Output PDF file path")
    week_parser.add_argument("--report", "-r", type=str, help="Output text report path")
    week_parser.add_argument("--json", "-j", type=str, help="Output schedule JSON path")
    week_parser.add_argument(
        "--save",
        action="store_true",
        help="Write updated weekend counters back to the roster file",
    )

    # Assign-tasks command
    tasks_parser = subparsers.add_parser(
        "assign-tasks",
        help="Distribute a roster file's pending tasks",
    )
    tasks_parser.add_argument("roster", type=str, help="JSON roster file")
    tasks_parser.add_argument(
        "--seed", "-s",
        type=int,
        help="Random seed for score tie-breakers",
    )
    tasks_parser.add_argument(
        "--deterministic",
        action="store_true",
        help="Disable the random tie-breaker entirely",
    )

    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    try:
        if args.command == "demo":
            run_demo(args.count, args.week_start, args.output, args.report)
            return 0
        elif args.command == "generate-week":
            run_generate_week(
                args.roster,
                args.week_start,
                args.pdf,
                args.report,
                args.json,
                args.save,
            )
            return 0
        elif args.command == "assign-tasks":
            run_assign_tasks(args.roster, args.seed, args.deterministic)
            return 0
        else:
            parser.print_help()
            return 1
    except ShiftdeskError as e:
        logger.error("%s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
