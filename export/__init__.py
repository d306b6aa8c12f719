"""Export-Modul: Excel (openpyxl) und PDF (fpdf2) für Förderstunden."""

from export.excel_export import SessionExcelExporter
from export.pdf_export import WeeklyPlanPdf

__all__ = ["SessionExcelExporter", "WeeklyPlanPdf"]
