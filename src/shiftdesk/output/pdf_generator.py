"""PDF generation for roster output.

This module creates printable PDF rosters showing:
- A week grid of dates by shift type with assigned names
- Unassigned markers and staffing status per shift
- Summary pages with staffing and weekend fairness statistics
"""

from io import BytesIO
from pathlib import Path
from typing import Union

from shiftdesk.domain.models import (
    WEEKDAY_SHIFT_TYPES,
    WEEKEND_SHIFT_TYPES,
    Employee,
    Shift,
    StaffingStatus,
    WeekendFairnessMetrics,
    WeeklySchedule,
)
from shiftdesk.scheduling.statistics import ShiftStatistics

# Color definitions (RGB tuples, 0-1 scale)
COLORS = {
    StaffingStatus.FULLY_STAFFED: (0.75, 0.9, 0.75),  # Green
    StaffingStatus.UNDERSTAFFED: (1.0, 0.9, 0.5),  # Yellow
    StaffingStatus.UNSTAFFED: (0.95, 0.6, 0.6),  # Red
    StaffingStatus.OVERSTAFFED: (0.6, 0.75, 0.95),  # Blue
    "not_scheduled": (0.95, 0.95, 0.95),  # Light gray
}

UNASSIGNED = "UNASSIGNED"


class RosterPDFGenerator:
    """Generates printable PDF weekly rosters.

    Example:
        >>> generator = RosterPDFGenerator()
        >>> generator.generate(schedule, employees_map, "roster.pdf")
    """

    def __init__(
        self,
        page_width: float = 792,  # Letter landscape width (11")
        page_height: float = 612,  # Letter landscape height (8.5")
        margin: float = 36,  # 0.5 inch margins
    ):
        self.page_width = page_width
        self.page_height = page_height
        self.margin = margin

    def generate(
        self,
        schedule: WeeklySchedule,
        employees_map: dict[str, Employee],
        output_path: Union[str, Path],
        include_summary: bool = True,
    ) -> None:
        """Generate PDF roster and save to file.

        Args:
            schedule: The week to render.
            employees_map: Dict mapping employee IDs to Employee objects.
            output_path: Path to save the PDF.
            include_summary: Whether to include the summary page.
        """
        try:
            from reportlab.lib.pagesizes import landscape, letter
            from reportlab.pdfgen import canvas
        except ImportError:
            raise ImportError(
                "reportlab is required for PDF generation. "
                "Install with: pip install reportlab"
            )

        c = canvas.Canvas(str(output_path), pagesize=landscape(letter))
        self._draw_document(c, schedule, employees_map, include_summary)
        c.save()

    def generate_to_buffer(
        self,
        schedule: WeeklySchedule,
        employees_map: dict[str, Employee],
        include_summary: bool = True,
    ) -> BytesIO:
        """Generate PDF and return as bytes buffer.

        Args:
            schedule: The week to render.
            employees_map: Dict mapping employee IDs to Employee objects.
            include_summary: Whether to include the summary page.

        Returns:
            BytesIO buffer containing PDF data.
        """
        try:
            from reportlab.lib.pagesizes import landscape, letter
            from reportlab.pdfgen import canvas
        except ImportError:
            raise ImportError(
                "reportlab is required for PDF generation. "
                "Install with: pip install reportlab"
            )

        buffer = BytesIO()
        c = canvas.Canvas(buffer, pagesize=landscape(letter))
        self._draw_document(c, schedule, employees_map, include_summary)
        c.save()
        buffer.seek(0)
        return buffer

    def _draw_document(
        self,
        c,
        schedule: WeeklySchedule,
        employees_map: dict[str, Employee],
        include_summary: bool,
    ) -> None:
        c.setTitle(f"Roster {schedule.week_start.isoformat()}")
        self._draw_week_grid(c, schedule, employees_map)
        if include_summary:
            self._draw_summary_page(c, schedule, employees_map)

    def _draw_header(self, c, schedule: WeeklySchedule, title: str) -> None:
        """Draw page header with the week's dates."""
        c.setFont("Helvetica-Bold", 16)
        c.drawString(
            self.margin,
            self.page_height - self.margin - 20,
            f"{title} - {schedule.week_start.strftime('%B %d')} to "
            f"{schedule.week_end.strftime('%B %d, %Y')}",
        )

        c.setFont("Helvetica", 10)
        c.drawString(
            self.margin,
            self.page_height - self.margin - 35,
            f"Shifts: {len(schedule.shifts)}    Unfilled slots: "
            f"{sum(slot.missing for slot in schedule.unfilled)}",
        )

    def _draw_week_grid(
        self,
        c,
        schedule: WeeklySchedule,
        employees_map: dict[str, Employee],
    ) -> None:
        """Draw the dates x shift types grid."""
        self._draw_header(c, schedule, "Weekly Roster")

        shift_types = WEEKDAY_SHIFT_TYPES + WEEKEND_SHIFT_TYPES
        label_width = 95
        header_height = 60
        footer_height = 40
        grid_top = self.page_height - self.margin - header_height
        grid_left = self.margin + label_width
        col_width = (self.page_width - 2 * self.margin - label_width) / 7
        row_height = (
            self.page_height - 2 * self.margin - header_height - footer_height - 20
        ) / len(shift_types)

        # Column headers
        c.setFont("Helvetica-Bold", 9)
        c.setFillColorRGB(0, 0, 0)
        for col, d in enumerate(schedule.schedule_dates):
            x = grid_left + col * col_width
            c.drawCentredString(x + col_width / 2, grid_top + 5, d.strftime("%a %m/%d"))

        for row, shift_type in enumerate(shift_types):
            y = grid_top - (row + 1) * row_height

            c.setFillColorRGB(0, 0, 0)
            c.setFont("Helvetica-Bold", 8)
            c.drawString(self.margin, y + row_height / 2 - 3, shift_type.value)

            for col, d in enumerate(schedule.schedule_dates):
                x = grid_left + col * col_width
                shift = schedule.get_shift(d, shift_type)
                self._draw_cell(c, shift, employees_map, x, y, col_width, row_height)

        self._draw_legend(c, self.margin, self.margin + 10)
        c.showPage()

    def _draw_cell(
        self,
        c,
        shift,
        employees_map: dict[str, Employee],
        x: float,
        y: float,
        width: float,
        height: float,
    ) -> None:
        """Draw one grid cell with names and staffing status."""
        if shift is None:
            color = COLORS["not_scheduled"]
        else:
            color = COLORS[shift.staffing_status]

        c.setFillColorRGB(*color)
        c.setStrokeColorRGB(0.3, 0.3, 0.3)
        c.setLineWidth(0.5)
        c.rect(x, y, width, height, fill=1, stroke=1)

        if shift is None:
            return

        c.setFillColorRGB(0, 0, 0)
        text_y = y + height - 10
        if shift.is_unassigned:
            c.setFont("Helvetica-Bold", 7)
            c.drawCentredString(x + width / 2, y + height / 2 - 3, UNASSIGNED)
            return

        c.setFont("Helvetica", 7)
        max_lines = max(1, int((height - 12) / 8))
        names = self._employee_names(shift, employees_map)
        for name in names[:max_lines]:
            c.drawString(x + 3, text_y, name[:18])
            text_y -= 8
        if len(names) > max_lines:
            c.drawString(x + 3, text_y, f"+{len(names) - max_lines} more")

        c.setFont("Helvetica-Oblique", 6)
        c.drawRightString(
            x + width - 3,
            y + 3,
            f"{len(shift.employee_ids)}/{shift.quota.total}",
        )

    def _employee_names(self, shift: Shift, employees_map: dict[str, Employee]) -> list[str]:
        names = []
        for employee_id in shift.employee_ids:
            employee = employees_map.get(employee_id)
            if employee is None:
                names.append(employee_id)
            else:
                names.append(f"{employee.name} ({employee.skill_level.value[0]})")
        return names

    def _draw_legend(self, c, x: float, y: float) -> None:
        """Draw legend for colors."""
        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica-Bold", 8)
        c.drawString(x, y, "Legend:")

        items = [
            (StaffingStatus.FULLY_STAFFED, StaffingStatus.FULLY_STAFFED.value),
            (StaffingStatus.UNDERSTAFFED, StaffingStatus.UNDERSTAFFED.value),
            (StaffingStatus.UNSTAFFED, StaffingStatus.UNSTAFFED.value),
            (StaffingStatus.OVERSTAFFED, StaffingStatus.OVERSTAFFED.value),
            ("not_scheduled", "Not scheduled"),
        ]

        c.setFont("Helvetica", 7)
        current_x = x + 45

        for key, label in items:
            c.setFillColorRGB(*COLORS[key])
            c.rect(current_x, y - 2, 12, 10, fill=1, stroke=1)
            c.setFillColorRGB(0, 0, 0)
            c.drawString(current_x + 15, y, label)
            current_x += 90

    def _draw_summary_page(
        self,
        c,
        schedule: WeeklySchedule,
        employees_map: dict[str, Employee],
    ) -> None:
        """Draw summary page with staffing and fairness statistics."""
        self._draw_header(c, schedule, "Roster Summary")
        stats = ShiftStatistics.calculate(schedule.shifts)
        fairness = WeekendFairnessMetrics.calculate(schedule.rotation_state.counts)

        y = self.page_height - self.margin - 70

        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica-Bold", 12)
        c.drawString(self.margin, y, "Overview")
        y -= 20

        c.setFont("Helvetica", 10)
        lines = [
            f"Total Shifts: {stats.total_shifts} "
            f"({stats.weekday_shifts} weekday, {stats.weekend_shifts} weekend)",
            f"Fully Staffed: {stats.fully_staffed}",
            f"Slots Filled: {stats.filled_slots} of {stats.total_slots} "
            f"({stats.fill_rate * 100:.0f}%)",
        ]
        for status, count in stats.staffing_breakdown.items():
            lines.append(f"{status}: {count}")
        lines.append(
            f"Weekend Fairness: {fairness.fairness_score:.1f} "
            f"(std dev {fairness.std_dev:.2f}, range {fairness.min_count}-{fairness.max_count})"
        )

        for line in lines:
            c.drawString(self.margin + 20, y, line)
            y -= 15

        y -= 20
        c.setFont("Helvetica-Bold", 12)
        c.drawString(self.margin, y, "Shifts per Employee")
        y -= 10

        self._draw_workload_chart(
            c, stats, employees_map, self.margin, y - 200, 500, 190
        )

        c.showPage()

    def _draw_workload_chart(
        self,
        c,
        stats: ShiftStatistics,
        employees_map: dict[str, Employee],
        x: float,
        y: float,
        width: float,
        height: float,
    ) -> None:
        """Draw a horizontal bar chart of shifts per employee."""
        workload = stats.employee_workload
        if not workload:
            return

        max_count = max(workload.values()) or 1
        rows = sorted(workload.items(), key=lambda item: (-item[1], item[0]))
        bar_height = min(14, height / len(rows))
        label_width = 110

        c.setFont("Helvetica", 7)
        for i, (employee_id, count) in enumerate(rows):
            bar_y = y + height - (i + 1) * bar_height
            if bar_y < self.margin:
                break

            employee = employees_map.get(employee_id)
            name = employee.name if employee else employee_id
            c.setFillColorRGB(0, 0, 0)
            c.drawString(x, bar_y + 2, name[:20])

            weekend = stats.weekend_workload.get(employee_id, 0)
            bar_w = (count / max_count) * (width - label_width)
            weekend_w = (weekend / max_count) * (width - label_width)

            c.setFillColorRGB(0.4, 0.6, 0.8)
            c.rect(x + label_width, bar_y, bar_w, bar_height - 2, fill=1, stroke=0)
            c.setFillColorRGB(0.8, 0.5, 0.3)
            c.rect(x + label_width, bar_y, weekend_w, bar_height - 2, fill=1, stroke=0)

            c.setFillColorRGB(0, 0, 0)
            c.drawString(x + label_width + bar_w + 4, bar_y + 2, f"{count} ({weekend} wknd)")
