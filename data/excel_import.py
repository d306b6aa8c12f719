"""Excel-Import und Vorlagen-Generator für Schülerlisten.

Vorlage:  Leere Excel-Datei mit Kopfzeile und Beispielzeile.
Import:   Erstes Tabellenblatt → neue Schüler plus ImportReport.
"""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ValidationError

from models.school_data import new_id
from models.student import Student


class ExcelImportError(Exception):
    """Fehler beim Excel-Import."""


# ─── Spalten-Zuordnung ────────────────────────────────────────────────────────
# Kopfzeilen werden kleingeschrieben verglichen; mehrere Schreibweisen erlaubt.

_COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    "name":           ("name", "schüler", "schueler", "vorname nachname"),
    "class_name":     ("klasse", "class", "klassenname"),
    "student_number": ("schülernummer", "schuelernummer", "nummer", "nr", "nr."),
}

TEMPLATE_HEADERS = ["Name", "Klasse", "Schülernummer"]


class ImportReport(BaseModel):
    """Ergebnis eines Schüler-Imports."""
    imported: int = 0
    skipped_duplicates: list[str] = []    # Schülernummern, die schon vergeben sind
    incomplete_rows: list[int] = []       # Excel-Zeilennummern ohne Pflichtfeld

    @property
    def has_issues(self) -> bool:
        return bool(self.skipped_duplicates or self.incomplete_rows)

    def print_rich(self) -> None:
        from rich.console import Console
        console = Console()
        console.print(f"[green]✓[/green] {self.imported} Schüler importiert")
        if self.skipped_duplicates:
            console.print(
                f"[yellow]Übersprungen (Nummer bereits vergeben):[/yellow] "
                f"{', '.join(self.skipped_duplicates)}"
            )
        if self.incomplete_rows:
            console.print(
                f"[yellow]Unvollständige Zeilen:[/yellow] "
                f"{', '.join(str(r) for r in self.incomplete_rows)}"
            )


# ─── Lesen ────────────────────────────────────────────────────────────────────

def read_rows(path: Path) -> list[dict[str, str]]:
    """Erstes Tabellenblatt → Liste von Dicts (erste Zeile = Header).

    Schlüssel sind die kleingeschriebenen Kopfzeilen, Werte als String.
    Komplett leere Zeilen werden übersprungen.
    """
    import openpyxl

    path = Path(path)
    if not path.exists():
        raise ExcelImportError(f"Datei nicht gefunden: {path}")
    try:
        wb = openpyxl.load_workbook(str(path), read_only=True, data_only=True)
    except Exception as e:
        raise ExcelImportError(f"Fehler beim Öffnen der Excel-Datei: {e}") from e

    try:
        rows = list(wb.worksheets[0].iter_rows(values_only=True))
    finally:
        wb.close()
    if not rows:
        return []

    headers = [
        str(h).strip().lower() if h is not None else f"col_{i}"
        for i, h in enumerate(rows[0])
    ]
    result = []
    for row in rows[1:]:
        if all(v is None or v == "" for v in row):
            continue
        result.append({
            headers[i]: (_cell_str(v) if v is not None else "")
            for i, v in enumerate(row)
            if i < len(headers)
        })
    return result


def _cell_str(value) -> str:
    """Zahlen wie 1.0 aus Excel werden zu "1"."""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def _pick(row: dict[str, str], field: str) -> str:
    for alias in _COLUMN_ALIASES[field]:
        if row.get(alias):
            return row[alias]
    return ""


# ─── Import ───────────────────────────────────────────────────────────────────

def import_students(
    path: Path, existing: Optional[list[Student]] = None
) -> tuple[list[Student], ImportReport]:
    """Liest Schüler aus einer Excel-Datei.

    Gibt nur die neuen Schüler zurück. Zeilen mit einer bereits vergebenen
    Schülernummer (im Bestand oder weiter oben in der Datei) werden
    übersprungen, ebenso Zeilen ohne Name, Klasse oder Nummer.

    Raises:
        ExcelImportError: Datei fehlt, ist unlesbar oder hat keine Name-Spalte.
    """
    rows = read_rows(path)
    if rows and not any(alias in rows[0] for alias in _COLUMN_ALIASES["name"]):
        raise ExcelImportError(
            f"Keine Name-Spalte gefunden. Erwartete Kopfzeile: {', '.join(TEMPLATE_HEADERS)}"
        )

    taken = {s.student_number for s in existing or []}
    report = ImportReport()
    students: list[Student] = []

    for excel_row, row in enumerate(rows, 2):
        values = {field: _pick(row, field) for field in _COLUMN_ALIASES}
        if not all(values.values()):
            report.incomplete_rows.append(excel_row)
            continue
        if values["student_number"] in taken:
            report.skipped_duplicates.append(values["student_number"])
            continue
        try:
            student = Student(id=new_id(), **values)
        except ValidationError:
            report.incomplete_rows.append(excel_row)
            continue
        taken.add(student.student_number)
        students.append(student)

    report.imported = len(students)
    return students, report


# ─── Vorlage ──────────────────────────────────────────────────────────────────

def generate_student_template(path: Path) -> Path:
    """Erzeugt eine Excel-Vorlage für den Schüler-Import.

    Die kursive Beispielzeile vor dem Import überschreiben oder löschen.
    """
    import openpyxl
    from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Schüler"

    hdr_font = Font(bold=True, color="FFFFFF", size=11)
    hdr_fill = PatternFill("solid", fgColor="2E6DA4")
    ex_font = Font(italic=True, color="888888")
    thin = Side(style="thin", color="BBBBBB")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)

    for col, h in enumerate(TEMPLATE_HEADERS, 1):
        cell = ws.cell(row=1, column=col, value=h)
        cell.font = hdr_font
        cell.fill = hdr_fill
        cell.alignment = Alignment(horizontal="center", vertical="center")
        cell.border = border

    for col, val in enumerate(["Ali Veli", "9-A", "001"], 1):
        cell = ws.cell(row=2, column=col, value=val)
        cell.font = ex_font
        cell.border = border

    for letter, width in zip("ABC", (28, 10, 16)):
        ws.column_dimensions[letter].width = width

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(path)
    return path
