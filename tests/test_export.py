"""Tests für Wochenansicht, Excel-/PDF-Export und Schüler-Import."""

import tempfile
from datetime import date, datetime, timezone
from pathlib import Path

import openpyxl
import pytest

from config.defaults import default_time_slots
from data.excel_import import (
    ExcelImportError,
    TEMPLATE_HEADERS,
    generate_student_template,
    import_students,
)
from data.sample_data import SampleDataGenerator
from export import SessionExcelExporter, WeeklyPlanPdf
from export.helpers import STUDENT_HEADERS, TEACHER_HEADERS, format_cell, safe_filename
from export.week_view import render_week_rows, slot_rows_for_week, week_header
from models.school_data import SchoolData
from models.student import Student
from scheduling import book_session, mark_completed
from scheduling.timeslots import TimeSlotRegistry


MONDAY = date(2024, 3, 4)
NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def _make_data() -> SchoolData:
    """Beispielbestand mit zwei Förderstunden im März 2024."""
    slots = TimeSlotRegistry.from_definitions(default_time_slots()).slots
    data = SampleDataGenerator(slots).generate()
    _, sessions = book_session("1", "1", "09:30-10:10", MONDAY,
                               data.teachers, data.students, [], now=NOW)
    _, sessions = book_session("1", "2", "10:20-11:00", MONDAY,
                               data.teachers, data.students, sessions, now=NOW)
    sessions = mark_completed(sessions[0].id, sessions)
    return data.model_copy(update={"sessions": sessions})


def _sheet_rows(path: Path) -> list[tuple]:
    wb = openpyxl.load_workbook(path)
    ws = wb["Förderstunden"]
    return [tuple(c.value for c in row) for row in ws.iter_rows()]


# ─── HILFSFUNKTIONEN ──────────────────────────────────────────────────────────

class TestHelpers:
    def test_safe_filename(self):
        assert safe_filename("Ali Veli") == "Ali_Veli"
        assert safe_filename("9-A") == "9_A"

    def test_format_cell_modes(self):
        data = _make_data()
        here = [data.sessions[0]]
        assert format_cell(here, data.students, "teacher") == "Ali Veli (9-A)"
        assert format_cell(here, data.students, "all") == "Mathematik: Ali Veli"

    def test_format_cell_unknown_student(self):
        data = _make_data()
        assert format_cell([data.sessions[0]], [], "all") == "Mathematik: Unbekannt"


# ─── WOCHENANSICHT ────────────────────────────────────────────────────────────

class TestWeekView:
    def test_header(self):
        header = week_header(MONDAY)
        assert header[0] == "Zeit"
        assert header[1] == "Montag 04.03."
        assert header[7] == "Sonntag 10.03."

    def test_rows_show_sessions(self):
        data = _make_data()
        rows = render_week_rows(MONDAY, data)
        assert len(rows) == 13
        first = rows[0]
        assert first[0] == "09:30-10:10"
        assert first[1] == "Mathematik: Ali Veli"
        assert first[2] == "—"

    def test_teacher_mode_marks_free_availability(self):
        data = _make_data()
        rows = {r[0]: r for r in render_week_rows(MONDAY, data, teacher_id="1")}
        assert rows["10:20-11:00"][1] == "Fatma Yılmaz (10-B)"
        # Ahmet ist mittwochs im ersten Slot verfügbar, aber nicht gebucht
        assert rows["09:30-10:10"][3] == "·"
        assert rows["09:30-10:10"][5] == "—"

    def test_other_weeks_are_empty(self):
        data = _make_data()
        rows = render_week_rows(date(2024, 3, 11), data)
        assert all(cell == "—" for row in rows for cell in row[1:])

    def test_session_in_deleted_slot_stays_visible(self):
        data = _make_data()
        registry = TimeSlotRegistry(data.time_slots)
        slot_id = next(s.id for s in data.time_slots if s.label == "09:30-10:10")
        data = data.model_copy(update={"time_slots": registry.delete(slot_id)})
        assert "09:30-10:10" in slot_rows_for_week(MONDAY, data)
        assert "09:30-10:10" not in slot_rows_for_week(date(2024, 3, 11), data)


# ─── EXCEL ────────────────────────────────────────────────────────────────────

class TestExcelExport:
    def test_teacher_list(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = SessionExcelExporter(_make_data(), Path(tmp)).export_teacher_sessions()
            assert path.name == "lehrkraft_foerderstunden.xlsx"
            rows = _sheet_rows(path)
        assert list(rows[0]) == TEACHER_HEADERS
        assert rows[1][:6] == ("04.03.2024", "09:30-10:10", "Ahmet Hoca", "Ali Veli",
                               "Mathematik", "Abgeschlossen")
        assert rows[2][5] == "Geplant"

    def test_student_list_has_class(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = SessionExcelExporter(_make_data(), Path(tmp)).export_student_sessions()
            rows = _sheet_rows(path)
        assert list(rows[0]) == STUDENT_HEADERS
        assert rows[2][2:4] == ("Fatma Yılmaz", "10-B")

    def test_unknown_references(self):
        data = _make_data().model_copy(update={"teachers": [], "students": []})
        with tempfile.TemporaryDirectory() as tmp:
            rows = _sheet_rows(SessionExcelExporter(data, Path(tmp)).export_teacher_sessions())
        assert rows[1][2] == "Unbekannt"
        assert rows[1][3] == "Unbekannt"

    def test_student_history(self):
        with tempfile.TemporaryDirectory() as tmp:
            exporter = SessionExcelExporter(_make_data(), Path(tmp))
            path = exporter.export_student_history("fatma")
            assert path.name == "Fatma_Yılmaz_verlauf.xlsx"
            assert len(_sheet_rows(path)) == 2

    def test_history_without_match(self):
        with tempfile.TemporaryDirectory() as tmp:
            exporter = SessionExcelExporter(_make_data(), Path(tmp))
            assert exporter.export_teacher_history("niemand") is None
            assert exporter.export_student_history("niemand") is None

    def test_teacher_history(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = SessionExcelExporter(_make_data(), Path(tmp)).export_teacher_history("Ahmet")
            assert path.name == "Ahmet_Hoca_verlauf.xlsx"
            assert len(_sheet_rows(path)) == 3

    def test_monthly(self):
        with tempfile.TemporaryDirectory() as tmp:
            exporter = SessionExcelExporter(_make_data(), Path(tmp))
            march = exporter.export_monthly(2024, 3)
            april = exporter.export_monthly(2024, 4)
            assert march.name == "2024_März_foerderstunden.xlsx"
            assert len(_sheet_rows(march)) == 3
            assert len(_sheet_rows(april)) == 1

    def test_monthly_invalid_month(self):
        with tempfile.TemporaryDirectory() as tmp:
            with pytest.raises(ValueError):
                SessionExcelExporter(_make_data(), Path(tmp)).export_monthly(2024, 13)

    def test_class_history(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = SessionExcelExporter(_make_data(), Path(tmp)).export_class_history("9-A")
            assert path.name == "9_A_klasse_verlauf.xlsx"
            rows = _sheet_rows(path)
        assert len(rows) == 2
        assert rows[1][2] == "Ali Veli"

    def test_export_all(self):
        with tempfile.TemporaryDirectory() as tmp:
            paths = SessionExcelExporter(_make_data(), Path(tmp)).export_all()
            assert [p.exists() for p in paths] == [True, True]


# ─── PDF ──────────────────────────────────────────────────────────────────────

class TestPdfExport:
    def test_week_plan(self):
        with tempfile.TemporaryDirectory() as tmp:
            out = Path(tmp) / "plan" / "woche.pdf"
            path = WeeklyPlanPdf(_make_data(), "Muster-Schule").export(MONDAY, out)
            assert path.exists()
            assert path.read_bytes().startswith(b"%PDF")

    def test_teacher_page(self):
        with tempfile.TemporaryDirectory() as tmp:
            out = Path(tmp) / "ahmet.pdf"
            WeeklyPlanPdf(_make_data()).export(MONDAY, out, teacher_id="1")
            assert out.stat().st_size > 0

    def test_all_teachers(self):
        with tempfile.TemporaryDirectory() as tmp:
            out = Path(tmp) / "alle.pdf"
            WeeklyPlanPdf(_make_data()).export_all_teachers(MONDAY, out)
            assert out.exists()


# ─── SCHÜLER-IMPORT ───────────────────────────────────────────────────────────

class TestStudentImport:
    def _write(self, path: Path, rows: list[list]) -> Path:
        wb = openpyxl.Workbook()
        ws = wb.active
        for row in rows:
            ws.append(row)
        wb.save(path)
        return path

    def test_template(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = generate_student_template(Path(tmp) / "vorlage.xlsx")
            ws = openpyxl.load_workbook(path)["Schüler"]
            assert [c.value for c in ws[1]] == TEMPLATE_HEADERS
            assert [c.value for c in ws[2]] == ["Ali Veli", "9-A", "001"]

    def test_template_imports_example_row(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = generate_student_template(Path(tmp) / "vorlage.xlsx")
            students, report = import_students(path)
        assert report.imported == 1
        assert students[0].student_number == "001"

    def test_import_skips_duplicates_and_incomplete(self):
        existing = [Student(id="1", name="Ali Veli", class_name="9-A", student_number="001")]
        with tempfile.TemporaryDirectory() as tmp:
            path = self._write(Path(tmp) / "liste.xlsx", [
                ["Name", "Klasse", "Nr"],
                ["Ali Veli", "9-A", "001"],
                ["Can Demir", "8-C", 17],
                ["Ohne Klasse", None, "018"],
                [None, None, None],
                ["Doppelt", "8-C", 17.0],
            ])
            students, report = import_students(path, existing)
        assert [s.name for s in students] == ["Can Demir"]
        assert students[0].student_number == "17"
        assert report.skipped_duplicates == ["001", "17"]
        assert report.incomplete_rows == [4]
        assert report.has_issues

    def test_missing_name_column(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = self._write(Path(tmp) / "liste.xlsx", [["Foo", "Bar"], ["a", "b"]])
            with pytest.raises(ExcelImportError):
                import_students(path)

    def test_missing_file(self):
        with pytest.raises(ExcelImportError):
            import_students(Path("gibt_es_nicht.xlsx"))
