"""Text report output for roster analysis.

This module creates text-based output to review:
- Per-date shift staffing with assigned names
- Unfilled slots left by the allocators
- Per-employee workload and weekend rotation fairness
"""

from pathlib import Path
from typing import Optional, Union

from shiftdesk.domain.models import Employee, WeekendFairnessMetrics, WeeklySchedule
from shiftdesk.scheduling.statistics import ShiftStatistics, weekend_distribution
from shiftdesk.validation.validator import ValidationResult


class RosterReportGenerator:
    """Generates plain-text weekly roster reports.

    Creates human-readable text files showing:
    - Every shift of the week with names and staffing status
    - Unfilled slots and validation findings
    - Workload and weekend distribution tables
    """

    def generate(
        self,
        schedule: WeeklySchedule,
        employees_map: dict[str, Employee],
        output_path: Union[str, Path],
        validation: Optional[ValidationResult] = None,
    ) -> str:
        """Generate the report and save to file.

        Args:
            schedule: The week to report on.
            employees_map: Dict mapping employee IDs to Employee objects.
            output_path: Path to save the text file.
            validation: Optional validation result to include.

        Returns:
            The generated text content.
        """
        content = self._generate_content(schedule, employees_map, validation)
        Path(output_path).write_text(content, encoding="utf-8")
        return content

    def generate_to_string(
        self,
        schedule: WeeklySchedule,
        employees_map: dict[str, Employee],
        validation: Optional[ValidationResult] = None,
    ) -> str:
        """Generate the report and return as string."""
        return self._generate_content(schedule, employees_map, validation)

    def _generate_content(
        self,
        schedule: WeeklySchedule,
        employees_map: dict[str, Employee],
        validation: Optional[ValidationResult],
    ) -> str:
        """Generate the full report content."""
        lines = []
        stats = ShiftStatistics.calculate(schedule.shifts)

        lines.append("=" * 80)
        lines.append(f"WEEKLY ROSTER - {schedule.week_start} to {schedule.week_end}")
        lines.append("=" * 80)
        lines.append("")

        lines.append(
            f"Total Shifts: {stats.total_shifts} "
            f"({stats.weekday_shifts} weekday, {stats.weekend_shifts} weekend)"
        )
        lines.append(f"Fully Staffed: {stats.fully_staffed}")
        lines.append(
            f"Slots Filled: {stats.filled_slots}/{stats.total_slots} "
            f"({stats.fill_rate * 100:.0f}%)"
        )
        lines.append("")

        lines.append("-" * 80)
        lines.append("SHIFTS BY DATE")
        lines.append("-" * 80)

        for d in schedule.schedule_dates:
            lines.append(f"\n{d.strftime('%A %Y-%m-%d')}")
            for shift in schedule.shifts_on(d):
                if shift.is_unassigned:
                    names = "UNASSIGNED"
                else:
                    names = ", ".join(
                        self._name(employee_id, employees_map)
                        for employee_id in shift.employee_ids
                    )
                count = f"{len(shift.employee_ids)}/{shift.quota.total}"
                lines.append(
                    f"  {shift.shift_type.value:<17} {count:>5}  "
                    f"{shift.staffing_status.value:<14} {names}"
                )

        lines.append("")

        lines.append("-" * 80)
        lines.append("UNFILLED SLOTS")
        lines.append("-" * 80)
        if schedule.unfilled:
            for slot in schedule.unfilled:
                lines.append(f"  {slot}")
        else:
            lines.append("  None")
        lines.append("")

        lines.append("-" * 80)
        lines.append("WORKLOAD")
        lines.append("-" * 80)
        lines.append(f"{'Name':<24} {'Level':<7} {'Shifts':>6} {'Weekend':>8}")

        for employee_id in sorted(
            employees_map, key=lambda e: -stats.employee_workload.get(e, 0)
        ):
            employee = employees_map[employee_id]
            lines.append(
                f"{employee.name[:24]:<24} {employee.skill_level.value:<7} "
                f"{stats.employee_workload.get(employee_id, 0):>6} "
                f"{stats.weekend_workload.get(employee_id, 0):>8}"
            )
        lines.append("")

        lines.append("-" * 80)
        lines.append("WEEKEND ROTATION")
        lines.append("-" * 80)

        fairness = WeekendFairnessMetrics.calculate(schedule.rotation_state.counts)
        distribution = weekend_distribution(schedule.rotation_state)
        lines.append(
            f"Fairness score: {fairness.fairness_score:.1f} "
            f"(mean {fairness.mean:.2f}, std dev {fairness.std_dev:.2f})"
        )
        lines.append(f"{'Name':<24} {'Total':>5} {'Senior':>6} {'Junior':>6}")
        for employee_id, counts in distribution.items():
            if counts.total == 0:
                continue
            lines.append(
                f"{self._name(employee_id, employees_map)[:24]:<24} "
                f"{counts.total:>5} {counts.senior:>6} {counts.junior:>6}"
            )
        lines.append("")

        if validation is not None:
            lines.append("-" * 80)
            lines.append(
                f"VALIDATION: {'PASSED' if validation.is_valid else 'FAILED'} "
                f"({len(validation.errors)} errors, {len(validation.warnings)} warnings)"
            )
            lines.append("-" * 80)
            for error in validation.errors:
                lines.append(f"  ERROR {error}")
            for warning in validation.warnings:
                lines.append(f"  WARN  {warning}")
            lines.append("")

        lines.append("=" * 80)
        lines.append("END OF REPORT")
        lines.append("=" * 80)

        return "\n".join(lines)

    def _name(self, employee_id: str, employees_map: dict[str, Employee]) -> str:
        employee = employees_map.get(employee_id)
        return employee.name if employee else employee_id
