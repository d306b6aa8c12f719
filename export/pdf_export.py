"""PDF-Export für den Wochenplan (fpdf2)."""

from datetime import date
from pathlib import Path
from typing import Optional, Sequence

from fpdf import FPDF

from models.school_data import SchoolData
from scheduling.weeks import week_dates, week_year, weekday_name

from export.helpers import COLORS, format_cell, hex_to_rgb, status_color, today_str
from export.week_view import slot_rows_for_week, week_grid, week_header


def _pdf_safe(text: str) -> str:
    """Ersetzt nicht-latin-1-fähige Zeichen für fpdf2-Built-in-Fonts."""
    text = (
        text
        .replace("—", "-")
        .replace("–", "-")
        .replace("·", ".")
    )
    return text.encode("latin-1", "replace").decode("latin-1")


# ─── Seitenraster (A4 quer, 297 × 210 mm) ─────────────────────────────────────
# Zeitspalte 25 mm + 7 Tagesspalten à 36 mm = 277 mm bei 10 mm Rand

_MARGIN      = 10.0
_TOP         = 22.0
_BOTTOM      = 18.0
_W_TIME      = 25.0
_W_DAY       = 36.0
_H_HEAD      = 7.0
_H_ROW       = 10.0
_PT_HEAD     = 8
_PT_BODY     = 7
_LINE        = 3.2    # mm je Textzeile bei 7 pt
_MAX_LINES   = 3
_MAX_CHARS   = 24


class _PlanDocument(FPDF):
    """FPDF mit Schulname links und Seitentitel rechts in der Kopfzeile."""

    def __init__(self, school_name: str):
        super().__init__(orientation="L", unit="mm", format="A4")
        self.school_name = school_name
        self.page_title = ""
        self.alias_nb_pages()
        self.set_auto_page_break(auto=False)
        self.set_margins(left=_MARGIN, top=_TOP, right=_MARGIN)

    def header(self):
        self.set_font("Helvetica", "B", 11)
        self.set_xy(_MARGIN, 8)
        self.cell(130, 7, _pdf_safe(self.school_name), align="L")
        self.cell(0, 7, _pdf_safe(self.page_title), align="R")
        self.set_draw_color(150, 150, 150)
        self.line(_MARGIN, 18, self.w - _MARGIN, 18)

    def footer(self):
        self.set_y(-14)
        self.set_font("Helvetica", "I", 7)
        self.cell(0, 8, f"Stand {today_str()}  |  Seite {self.page_no()}/{{nb}}",
                  align="C")

    @property
    def bottom_limit(self) -> float:
        return self.h - _BOTTOM

    def box(
        self, x: float, y: float, w: float, h: float, text: str = "",
        fill: Optional[str] = None, bold: bool = False, size: int = _PT_BODY,
        color: tuple[int, int, int] = (0, 0, 0),
    ) -> None:
        """Gerahmte Zelle; Text zentriert, höchstens drei Zeilen."""
        if fill:
            self.set_fill_color(*hex_to_rgb(fill))
            self.rect(x, y, w, h, style="F")
        self.set_draw_color(180, 180, 180)
        self.rect(x, y, w, h, style="D")
        if not text:
            return

        self.set_font("Helvetica", "B" if bold else "", size)
        self.set_text_color(*color)
        lines = [ln for ln in _pdf_safe(text).split("\n") if ln][:_MAX_LINES]
        top = y + max(0.5, (h - len(lines) * _LINE) / 2)
        for i, line in enumerate(lines):
            self.set_xy(x, top + i * _LINE)
            self.cell(w, _LINE, line[:_MAX_CHARS], align="C")
        self.set_text_color(0, 0, 0)


class WeeklyPlanPdf:
    """Druckbarer Wochenplan: Zeitslots × Montag–Sonntag."""

    def __init__(
        self,
        school_data: SchoolData,
        school_name: str = "Förderplan",
        day_names: Optional[Sequence[str]] = None,
    ):
        self.data        = school_data
        self.school_name = school_name
        self.day_names   = day_names

    def export(
        self, day: date, output_path: Path, teacher_id: Optional[str] = None
    ) -> Path:
        """Wochenplan für die Woche von day.

        Ohne teacher_id: alle Förderstunden. Mit teacher_id: nur diese
        Lehrkraft, verfügbare freie Slots als "frei" markiert.
        """
        doc = _PlanDocument(self.school_name)
        self._week(doc, day, teacher_id)
        return self._save(doc, output_path)

    def export_all_teachers(self, day: date, output_path: Path) -> Path:
        """Je ein Wochenplan pro Lehrkraft (sortiert nach Name)."""
        doc = _PlanDocument(self.school_name)
        teachers = sorted(self.data.teachers, key=lambda t: t.name)
        for teacher in teachers:
            self._week(doc, day, teacher.id)
        if not teachers:
            self._week(doc, day, None)
        return self._save(doc, output_path)

    def _save(self, doc: _PlanDocument, output_path: Path) -> Path:
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        doc.output(str(path))
        return path

    # ─── Tabelle ──────────────────────────────────────────────────────────────

    def _new_page(self, doc: _PlanDocument, day: date) -> float:
        """Neue Seite mit Kopfzeile der Tabelle; gibt die y-Position darunter zurück."""
        doc.add_page()
        x, y = _MARGIN, _TOP
        for i, label in enumerate(week_header(day, self.day_names)):
            w = _W_TIME if i == 0 else _W_DAY
            doc.box(x, y, w, _H_HEAD, label, fill=COLORS["header"], bold=True,
                    size=_PT_HEAD, color=(255, 255, 255))
            x += w
        return y + _H_HEAD

    def _week(self, doc: _PlanDocument, day: date, teacher_id: Optional[str]) -> None:
        dates = week_dates(day)
        title = f"Woche {week_year(dates[0])} ({dates[0]:%d.%m.} - {dates[-1]:%d.%m.%Y})"
        teacher = self.data.get_teacher(teacher_id) if teacher_id else None
        if teacher is not None:
            title = f"{teacher.name} ({teacher.subject}) | {title}"
        doc.page_title = title

        grid = week_grid(day, self.data, teacher_id)
        mode = "teacher" if teacher is not None else "all"

        y = self._new_page(doc, day)
        for label in slot_rows_for_week(day, self.data):
            if y + _H_ROW > doc.bottom_limit:
                y = self._new_page(doc, day)
            doc.box(_MARGIN, y, _W_TIME, _H_ROW, label, bold=True)
            x = _MARGIN + _W_TIME
            for d in dates:
                here = grid.get((d, label), [])
                if here:
                    fill = status_color(here[0].status)
                    text = format_cell(here, self.data.students, mode)
                elif teacher is not None and label in teacher.slots_on(
                    weekday_name(d, self.day_names)
                ):
                    fill, text = "FFFFFF", "frei"
                else:
                    fill, text = COLORS["free"], ""
                doc.box(x, y, _W_DAY, _H_ROW, text, fill=fill)
                x += _W_DAY
            y += _H_ROW
