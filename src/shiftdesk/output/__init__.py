"""Output generation for rosters (PDF, text)."""

from shiftdesk.output.pdf_generator import RosterPDFGenerator
from shiftdesk.output.report_generator import RosterReportGenerator

__all__ = [
    "RosterPDFGenerator",
    "RosterReportGenerator",
]
