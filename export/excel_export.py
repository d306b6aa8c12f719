"""Excel-Export für Förderstunden (openpyxl)."""

import logging
from pathlib import Path
from typing import Optional

from models.school_data import SchoolData
from models.session import Session

from export.helpers import (
    COLORS, MONTH_NAMES, STUDENT_HEADERS, TEACHER_HEADERS,
    safe_filename, sort_sessions, status_color, student_row, teacher_row, today_str,
)

logger = logging.getLogger(__name__)


class SessionExcelExporter:
    """Exportiert Förderstunden als Listen in Excel-Dateien (ein Blatt "Förderstunden").

    Jede export_*-Methode schreibt eine Datei nach output_dir und gibt deren
    Pfad zurück. Die History-Exporte geben None zurück, wenn kein Treffer
    gefunden wurde.
    """

    SHEET_TITLE = "Förderstunden"

    # Spaltenbreiten (Excel-Einheiten), in der Reihenfolge der Kopfzeile
    TEACHER_WIDTHS = [12, 14, 24, 24, 16, 18, 12, 36]
    STUDENT_WIDTHS = [12, 14, 24, 10, 24, 16, 18, 12, 36]

    ROW_HEADER_H = 22

    def __init__(self, school_data: SchoolData, output_dir: Path):
        self.data       = school_data
        self.output_dir = Path(output_dir)

    # ─── Öffentliche API ──────────────────────────────────────────────────────

    def export_teacher_sessions(self) -> Path:
        """Alle Förderstunden aus Sicht der Lehrkräfte."""
        return self._write(
            "lehrkraft_foerderstunden.xlsx", TEACHER_HEADERS, self.TEACHER_WIDTHS,
            self.data.sessions, teacher_row,
        )

    def export_student_sessions(self) -> Path:
        """Alle Förderstunden aus Sicht der Schüler (mit Klasse)."""
        return self._write(
            "schueler_foerderstunden.xlsx", STUDENT_HEADERS, self.STUDENT_WIDTHS,
            self.data.sessions, student_row,
        )

    def export_teacher_history(self, name: str) -> Optional[Path]:
        """Verlauf der ersten Lehrkraft, deren Name name enthält."""
        teacher = self.data.find_teacher_by_name(name)
        if teacher is None:
            logger.warning(f"Keine Lehrkraft zu '{name}' gefunden")
            return None
        return self._write(
            f"{safe_filename(teacher.name)}_verlauf.xlsx", TEACHER_HEADERS,
            self.TEACHER_WIDTHS, self.data.sessions_for_teacher(teacher.id), teacher_row,
        )

    def export_student_history(self, name: str) -> Optional[Path]:
        """Verlauf des ersten Schülers, dessen Name name enthält."""
        student = self.data.find_student_by_name(name)
        if student is None:
            logger.warning(f"Kein Schüler zu '{name}' gefunden")
            return None
        return self._write(
            f"{safe_filename(student.name)}_verlauf.xlsx", STUDENT_HEADERS,
            self.STUDENT_WIDTHS, self.data.sessions_for_student(student.id), student_row,
        )

    def export_monthly(self, year: int, month: int) -> Path:
        """Alle Förderstunden eines Kalendermonats (month: 1–12)."""
        if not 1 <= month <= 12:
            raise ValueError(f"Ungültiger Monat: {month}")
        sessions = [
            s for s in self.data.sessions
            if s.date.year == year and s.date.month == month
        ]
        return self._write(
            f"{year}_{MONTH_NAMES[month - 1]}_foerderstunden.xlsx", STUDENT_HEADERS,
            self.STUDENT_WIDTHS, sessions, student_row,
        )

    def export_class_history(self, class_name: str) -> Path:
        """Förderstunden aller Schüler, deren Klasse class_name enthält."""
        term = class_name.lower()
        ids = {s.id for s in self.data.students if term in s.class_name.lower()}
        sessions = [s for s in self.data.sessions if s.student_id in ids]
        return self._write(
            f"{safe_filename(class_name)}_klasse_verlauf.xlsx", STUDENT_HEADERS,
            self.STUDENT_WIDTHS, sessions, student_row,
        )

    def export_all(self) -> list[Path]:
        """Die beiden Gesamtlisten (Lehrkräfte und Schüler)."""
        return [self.export_teacher_sessions(), self.export_student_sessions()]

    # ─── Style-Helpers ────────────────────────────────────────────────────────

    def _fill(self, hex_color: str):
        from openpyxl.styles import PatternFill
        return PatternFill(start_color=hex_color, end_color=hex_color, fill_type="solid")

    def _thin_border(self):
        from openpyxl.styles import Border, Side
        s = Side(border_style="thin", color="BBBBBB")
        return Border(left=s, right=s, top=s, bottom=s)

    # ─── Schreiben ────────────────────────────────────────────────────────────

    def _write(
        self, filename: str, headers: list[str], widths: list[int],
        sessions: list[Session], row_builder,
    ) -> Path:
        from openpyxl import Workbook
        from openpyxl.styles import Alignment, Font
        from openpyxl.utils import get_column_letter

        wb = Workbook()
        ws = wb.active
        ws.title = self.SHEET_TITLE

        fill_h = self._fill(COLORS["header"])
        border = self._thin_border()
        for col, text in enumerate(headers, 1):
            c = ws.cell(row=1, column=col, value=text)
            c.fill = fill_h
            c.font = Font(bold=True, color="FFFFFF", size=10)
            c.alignment = Alignment(horizontal="center", vertical="center")
            c.border = border
        ws.row_dimensions[1].height = self.ROW_HEADER_H

        status_col = headers.index("Status") + 1
        for row, session in enumerate(sort_sessions(sessions), 2):
            for col, value in enumerate(row_builder(session, self.data.teachers,
                                                    self.data.students), 1):
                ws.cell(row=row, column=col, value=value).border = border
            ws.cell(row=row, column=status_col).fill = self._fill(status_color(session.status))

        for col, width in enumerate(widths, 1):
            ws.column_dimensions[get_column_letter(col)].width = width
        ws.freeze_panes = "A2"
        ws.oddFooter.center.text = f"Erstellt: {today_str()}"

        output_path = self.output_dir / filename
        output_path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(output_path)
        logger.info(f"Excel-Export: {len(sessions)} Förderstunden → {output_path}")
        return output_path
