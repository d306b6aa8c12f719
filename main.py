"""Förderplan — Haupt-CLI.

Verwendung:
  python main.py setup                          Ersteinrichtung
  python main.py config show|edit               Konfiguration anzeigen / bearbeiten
  python main.py sample                         Beispieldaten anlegen
  python main.py slots list|add|update|delete|toggle
  python main.py teacher list|add|availability|remove
  python main.py student list|add|unban|remove|import|template
  python main.py session assign|complete|absent|notes|delete|list
  python main.py week [DATUM]                   Wochenansicht
  python main.py report                         Auswertung
  python main.py check                          Konsistenzprüfung
  python main.py export excel|pdf               Exporte
  python main.py backup save|load|clear         Sicherung
"""

import functools
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box

console = Console()
logger = logging.getLogger("foerderplan")

DATE_TYPE = click.DateTime(formats=["%Y-%m-%d", "%d.%m.%Y"])


def _abort(message: str) -> None:
    console.print(f"[red]{message}[/red]")
    sys.exit(1)


def _handle_errors(func):
    """Fachliche Fehler als rote Meldung ausgeben und mit Code 1 beenden."""
    from pydantic import ValidationError

    from data.excel_import import ExcelImportError
    from models.school_data import EntityError
    from scheduling import SessionNotFoundError, SessionTransitionError, TimeSlotError
    from storage import StorageError

    handled = (
        EntityError, TimeSlotError, SessionNotFoundError, SessionTransitionError,
        StorageError, ExcelImportError, ValidationError,
    )

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except handled as e:
            logger.debug(f"{type(e).__name__}: {e}")
            _abort(str(e))
    return wrapper


def _load_config():
    from config.manager import ConfigManager
    mgr = ConfigManager()
    try:
        return mgr.load_or_default()
    except ValueError as e:
        _abort(str(e))


def _open_store(config):
    from storage import JsonStore
    return JsonStore(Path(config.data_dir), default_slots=config.default_time_slots)


def _load():
    """Lädt Konfiguration, Ablage und Datenbestand."""
    config = _load_config()
    store = _open_store(config)
    return config, store, store.load()


def _save(store, data) -> None:
    store.save_all(data.refresh_counters())


def _registry(config, data):
    from scheduling import TimeSlotRegistry
    return TimeSlotRegistry(data.time_slots,
                            reject_overlaps=not config.allow_overlapping_slots)


def _save_slots(store, config, data, registry, slots) -> None:
    """Speichert das Slot-Raster und ergänzt die Verfügbarkeiten um alle Wochentage."""
    store.save_time_slots(slots)
    store.save_teachers(registry.refresh_availability(data.teachers, config.day_names))


def _resolve_teacher(data, key: str):
    """Lehrkraft über id oder Namensteil."""
    teacher = data.get_teacher(key) or data.find_teacher_by_name(key)
    if teacher is None:
        _abort(f"Lehrkraft '{key}' nicht gefunden.")
    return teacher


def _resolve_student(data, key: str):
    """Schüler über id, Schülernummer oder Namensteil."""
    student = (
        data.get_student(key)
        or next((s for s in data.students if s.student_number == key), None)
        or data.find_student_by_name(key)
    )
    if student is None:
        _abort(f"Schüler '{key}' nicht gefunden.")
    return student


def _fmt_date(d: date) -> str:
    return d.strftime("%d.%m.%Y")


# ─── SETUP ────────────────────────────────────────────────────────────────────

@click.command("setup")
@click.option("--defaults", is_flag=True, default=False,
              help="Ohne Rückfragen mit Standardwerten einrichten.")
def cmd_setup(defaults: bool):
    """Ersteinrichtung: Konfiguration und Standard-Zeitslots anlegen."""
    from config.defaults import default_app_config
    from config.manager import ConfigManager

    mgr = ConfigManager()
    if not mgr.first_run_check():
        console.print(
            "[yellow]Eine Konfiguration existiert bereits.[/yellow]\n"
            "Verwenden Sie [bold]python main.py config edit[/bold] zum Bearbeiten."
        )
        if defaults or not click.confirm("Trotzdem neu einrichten?", default=False):
            return

    config = default_app_config()
    if not defaults:
        config = mgr.edit_interactive(config)
    mgr.save(config)

    slots = _open_store(config).load_time_slots()
    console.print(f"[green]✓[/green] {len(slots)} Zeitslots bereit")
    console.print("[bold green]Einrichtung abgeschlossen![/bold green]")
    console.print("Mit [bold]python main.py sample[/bold] Beispieldaten anlegen.")


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Konfiguration anzeigen oder bearbeiten."""


@cmd_config.command("show")
def config_show():
    """Zeigt die aktuelle Konfiguration an."""
    config = _load_config()

    console.print(Panel(
        f"[bold]{config.school_name}[/bold]\n"
        f"Sperrdauer: {config.ban_days} Tage  |  "
        f"Überlappende Slots: {'erlaubt' if config.allow_overlapping_slots else 'abgelehnt'}\n"
        f"Daten: {config.data_dir}  |  Exporte: {config.export_dir}",
        title="Konfiguration",
        border_style="cyan",
    ))
    console.print(f"[bold]Wochentage:[/bold] {', '.join(config.day_names)}")
    console.print(f"[bold]Fächer:[/bold] {', '.join(config.subjects) or '—'}")


@cmd_config.command("edit")
def config_edit():
    """Bearbeitet die Konfiguration interaktiv."""
    from config.manager import ConfigManager
    mgr = ConfigManager()
    config = mgr.edit_interactive(_load_config())
    mgr.save(config)


# ─── SAMPLE ───────────────────────────────────────────────────────────────────

@click.command("sample")
@click.option("--force", is_flag=True, default=False,
              help="Auch anlegen, wenn bereits Lehrkräfte oder Schüler existieren.")
def cmd_sample(force: bool):
    """Legt Beispiel-Lehrkräfte und -Schüler an."""
    from data.sample_data import SampleDataGenerator

    config, store, data = _load()
    if (data.teachers or data.students) and not force:
        console.print("[yellow]Es existieren bereits Daten – nichts geändert.[/yellow]")
        return

    gen = SampleDataGenerator(data.time_slots, config.day_names)
    sample = gen.generate()
    data = data.model_copy(update={
        "teachers": sample.teachers, "students": sample.students, "sessions": [],
    })
    _save(store, data)
    gen.print_summary(data)


# ─── SLOTS ────────────────────────────────────────────────────────────────────

@click.group("slots")
def cmd_slots():
    """Zeitslots verwalten."""


def _print_slots(slots) -> None:
    table = Table(title="Zeitslots", box=box.ROUNDED)
    table.add_column("ID", style="dim")
    table.add_column("Zeit", style="bold")
    table.add_column("Dauer", justify="right")
    table.add_column("Aktiv")
    for s in slots:
        table.add_row(s.id, s.label, f"{s.duration_minutes} Min.",
                      "[green]ja[/green]" if s.is_active else "[dim]nein[/dim]")
    console.print(table)


@cmd_slots.command("list")
def slots_list():
    """Listet alle Zeitslots."""
    config, store, data = _load()
    registry = _registry(config, data)
    _print_slots(registry.slots)
    for a, b in registry.find_overlaps():
        console.print(f"[yellow]Überschneidung:[/yellow] {a.label} / {b.label}")


@cmd_slots.command("add")
@click.argument("start")
@click.argument("end")
@_handle_errors
def slots_add(start: str, end: str):
    """Neuer Zeitslot START bis END (HH:MM)."""
    config, store, data = _load()
    registry = _registry(config, data)
    _save_slots(store, config, data, registry, registry.add(start, end))
    console.print(f"[green]✓[/green] Zeitslot {start}-{end} angelegt")


@cmd_slots.command("update")
@click.argument("slot_id")
@click.option("--start", default=None, help="Neuer Beginn (HH:MM).")
@click.option("--end", default=None, help="Neues Ende (HH:MM).")
@_handle_errors
def slots_update(slot_id: str, start: Optional[str], end: Optional[str]):
    """Ändert Beginn und/oder Ende eines Zeitslots."""
    config, store, data = _load()
    fields = {k: v for k, v in (("start_time", start), ("end_time", end)) if v}
    registry = _registry(config, data)
    _save_slots(store, config, data, registry, registry.update(slot_id, **fields))
    console.print(f"[green]✓[/green] Zeitslot {slot_id} geändert")


@cmd_slots.command("delete")
@click.argument("slot_id")
@_handle_errors
def slots_delete(slot_id: str):
    """Löscht einen Zeitslot (bestehende Förderstunden bleiben erhalten)."""
    config, store, data = _load()
    registry = _registry(config, data)
    _save_slots(store, config, data, registry, registry.delete(slot_id))
    console.print(f"[green]✓[/green] Zeitslot {slot_id} gelöscht")


@cmd_slots.command("toggle")
@click.argument("slot_id")
@click.option("--on/--off", "active", default=None,
              help="Aktivieren bzw. deaktivieren (ohne Angabe: umschalten).")
@_handle_errors
def slots_toggle(slot_id: str, active: Optional[bool]):
    """Aktiviert oder deaktiviert einen Zeitslot."""
    config, store, data = _load()
    registry = _registry(config, data)
    if active is None:
        active = not registry.get(slot_id).is_active
    _save_slots(store, config, data, registry, registry.toggle(slot_id, active))
    console.print(f"[green]✓[/green] Zeitslot {slot_id} {'aktiv' if active else 'inaktiv'}")


# ─── TEACHER ──────────────────────────────────────────────────────────────────

@click.group("teacher")
def cmd_teacher():
    """Lehrkräfte verwalten."""


@cmd_teacher.command("list")
def teacher_list():
    """Listet alle Lehrkräfte mit ihren Verfügbarkeiten."""
    config, store, data = _load()
    table = Table(title="Lehrkräfte", box=box.ROUNDED, show_lines=True)
    table.add_column("ID", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Fach")
    table.add_column("Stunden", justify="right")
    table.add_column("Verfügbarkeit")
    for t in sorted(data.teachers, key=lambda t: t.name):
        avail = "\n".join(
            f"{day}: {', '.join(t.slots_on(day))}"
            for day in config.day_names if t.slots_on(day)
        )
        table.add_row(t.id, t.name, t.subject, str(t.total_sessions), avail or "—")
    console.print(table)


@cmd_teacher.command("add")
@click.option("--name", required=True, help="Name der Lehrkraft.")
@click.option("--subject", required=True, help="Fach der Förderstunden.")
@click.option("--email", default="", help="E-Mail-Adresse.")
@_handle_errors
def teacher_add(name: str, subject: str, email: str):
    """Legt eine Lehrkraft an (ohne Verfügbarkeiten)."""
    from models.school_data import new_id
    from models.teacher import Teacher

    config, store, data = _load()
    if config.subjects and subject not in config.subjects:
        console.print(f"[yellow]Fach '{subject}' ist nicht im Fächerkatalog.[/yellow]")
    teacher = Teacher(id=new_id(), name=name, subject=subject, email=email)
    teacher = _registry(config, data).refresh_availability([teacher], config.day_names)[0]
    _save(store, data.add_teacher(teacher))
    console.print(f"[green]✓[/green] Lehrkraft {name} angelegt (id {teacher.id})")


@cmd_teacher.command("availability")
@click.argument("teacher")
@click.argument("day")
@click.argument("slots", nargs=-1)
@_handle_errors
def teacher_availability(teacher: str, day: str, slots: tuple[str, ...]):
    """Setzt die verfügbaren SLOTS einer Lehrkraft an einem Wochentag.

    Ohne SLOTS wird der Tag geleert.
    """
    from scheduling import set_availability

    config, store, data = _load()
    t = _resolve_teacher(data, teacher)
    day_name = next((d for d in config.day_names if d.lower() == day.lower()), None)
    if day_name is None:
        _abort(f"Unbekannter Wochentag '{day}'. Erlaubt: {', '.join(config.day_names)}")
    vocabulary = _registry(config, data).active_slot_strings()
    unknown = [s for s in slots if s not in vocabulary]
    if unknown:
        _abort(f"Unbekannte oder inaktive Zeitslots: {', '.join(unknown)}")

    updated = set_availability(t, day_name, list(slots))
    data = data.update_teacher(t.id, available_hours=updated.available_hours)
    _save(store, data)
    console.print(
        f"[green]✓[/green] {t.name}, {day_name}: {', '.join(slots) or 'nicht verfügbar'}"
    )


@cmd_teacher.command("remove")
@click.argument("teacher")
@_handle_errors
def teacher_remove(teacher: str):
    """Entfernt eine Lehrkraft. Ihre Förderstunden bleiben erhalten."""
    config, store, data = _load()
    t = _resolve_teacher(data, teacher)
    _save(store, data.remove_teacher(t.id))
    console.print(f"[green]✓[/green] Lehrkraft {t.name} entfernt")


# ─── STUDENT ──────────────────────────────────────────────────────────────────

@click.group("student")
def cmd_student():
    """Schüler verwalten."""


@cmd_student.command("list")
@click.option("--search", "-s", default="", help="Suche über Name, Klasse oder Nummer.")
def student_list(search: str):
    """Listet Schüler mit Sperrstatus und Förderstunden."""
    from analysis.statistics import SessionStatistics
    from scheduling import utc_now

    config, store, data = _load()
    matches = {s.id for s in data.search_students(search)}
    stats = SessionStatistics().per_student(data, utc_now())

    table = Table(title="Schüler", box=box.ROUNDED)
    table.add_column("Nr.", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Klasse")
    table.add_column("Gesamt", justify="right")
    table.add_column("Abgeschl.", justify="right")
    table.add_column("Nicht ersch.", justify="right")
    table.add_column("Status")
    by_id = {s.id: s for s in data.students}
    for st in stats:
        if st.student_id not in matches:
            continue
        student = by_id[st.student_id]
        status = (
            f"[red]gesperrt bis {_fmt_date(student.ban_end_date)}[/red]"
            if st.is_banned else "[green]aktiv[/green]"
        )
        table.add_row(student.student_number, st.name, st.class_name, str(st.total),
                      str(st.completed), str(st.absent), status)
    console.print(table)


@cmd_student.command("add")
@click.option("--name", required=True, help="Name des Schülers.")
@click.option("--class", "class_name", required=True, help="Klasse, z.B. 9-A.")
@click.option("--number", required=True, help="Eindeutige Schülernummer.")
@_handle_errors
def student_add(name: str, class_name: str, number: str):
    """Legt einen Schüler an."""
    from models.school_data import new_id
    from models.student import Student

    config, store, data = _load()
    student = Student(id=new_id(), name=name, class_name=class_name, student_number=number)
    _save(store, data.add_student(student))
    console.print(f"[green]✓[/green] Schüler {name} ({class_name}) angelegt")


@cmd_student.command("unban")
@click.argument("student")
@_handle_errors
def student_unban(student: str):
    """Hebt die Sperre eines Schülers vorzeitig auf."""
    from scheduling import unban_student

    config, store, data = _load()
    s = _resolve_student(data, student)
    cleared = unban_student(s)
    data = data.update_student(s.id, is_banned=cleared.is_banned,
                               ban_end_date=cleared.ban_end_date)
    _save(store, data)
    console.print(f"[green]✓[/green] Sperre für {s.name} aufgehoben")


@cmd_student.command("remove")
@click.argument("student")
@_handle_errors
def student_remove(student: str):
    """Entfernt einen Schüler. Seine Förderstunden bleiben erhalten."""
    config, store, data = _load()
    s = _resolve_student(data, student)
    _save(store, data.remove_student(s.id))
    console.print(f"[green]✓[/green] Schüler {s.name} entfernt")


@cmd_student.command("import")
@click.argument("datei", type=click.Path(exists=True, path_type=Path))
@_handle_errors
def student_import(datei: Path):
    """Importiert Schüler aus einer Excel-Datei (Name, Klasse, Schülernummer)."""
    from data.excel_import import import_students

    config, store, data = _load()
    console.print(f"[bold]Importiere:[/bold] {datei}")
    new_students, report = import_students(datei, data.students)
    for s in new_students:
        data = data.add_student(s)
    _save(store, data)
    report.print_rich()


@cmd_student.command("template")
@click.option("--output", "-o", default="output/schueler_vorlage.xlsx",
              help="Ausgabepfad für die Excel-Vorlage.")
def student_template(output: str):
    """Erzeugt eine leere Excel-Vorlage für den Schüler-Import."""
    from data.excel_import import generate_student_template

    out_path = generate_student_template(Path(output))
    console.print(f"[green]✓[/green] Vorlage gespeichert: {out_path}")


# ─── SESSION ──────────────────────────────────────────────────────────────────

@click.group("session")
def cmd_session():
    """Förderstunden buchen und verwalten."""


@cmd_session.command("assign")
@click.argument("teacher")
@click.argument("student")
@click.argument("datum", type=DATE_TYPE)
@click.argument("slot")
@click.option("--notes", default="", help="Notiz zur Förderstunde.")
@_handle_errors
def session_assign(teacher: str, student: str, datum, slot: str, notes: str):
    """Bucht eine Förderstunde: LEHRKRAFT SCHÜLER DATUM SLOT."""
    from scheduling import book_session

    config, store, data = _load()
    t = _resolve_teacher(data, teacher)
    s = _resolve_student(data, student)
    result, sessions = book_session(
        t.id, s.id, slot, datum.date(), data.teachers, data.students, data.sessions,
        notes=notes, day_names=config.day_names,
    )
    if not result.valid:
        _abort(f"Abgelehnt ({result.reason.value}): {result.message}")

    session = sessions[-1]
    _save(store, data.model_copy(update={"sessions": sessions}))
    console.print(
        f"[green]✓[/green] Förderstunde {session.id}: {s.name} bei {t.name} "
        f"({session.subject}) am {_fmt_date(session.date)} {session.time_slot} "
        f"[dim]{session.week_year}[/dim]"
    )


@cmd_session.command("complete")
@click.argument("session_id")
@_handle_errors
def session_complete(session_id: str):
    """Markiert eine Förderstunde als abgeschlossen."""
    from scheduling import mark_completed

    config, store, data = _load()
    sessions = mark_completed(session_id, data.sessions)
    _save(store, data.model_copy(update={"sessions": sessions}))
    console.print(f"[green]✓[/green] Förderstunde {session_id} abgeschlossen")


@cmd_session.command("absent")
@click.argument("session_id")
@_handle_errors
def session_absent(session_id: str):
    """Markiert Nicht-Erscheinen und sperrt den Schüler."""
    from scheduling import mark_absent

    config, store, data = _load()
    sessions, students = mark_absent(session_id, data.sessions, data.students,
                                     ban_days=config.ban_days)
    data = data.model_copy(update={"sessions": sessions, "students": students})
    _save(store, data)
    student = data.get_student(data.get_session(session_id).student_id)
    console.print(
        f"[yellow]![/yellow] Förderstunde {session_id}: nicht erschienen. "
        f"{student.name} ist gesperrt bis {_fmt_date(student.ban_end_date)}."
    )


@cmd_session.command("notes")
@click.argument("session_id")
@click.argument("text")
@_handle_errors
def session_notes(session_id: str, text: str):
    """Setzt die Notiz einer Förderstunde."""
    from scheduling import update_notes

    config, store, data = _load()
    sessions = update_notes(session_id, text, data.sessions)
    _save(store, data.model_copy(update={"sessions": sessions}))
    console.print(f"[green]✓[/green] Notiz gespeichert")


@cmd_session.command("delete")
@click.argument("session_id")
@_handle_errors
def session_delete(session_id: str):
    """Löscht eine Förderstunde (eine Sperre bleibt bestehen)."""
    from scheduling import delete_session

    config, store, data = _load()
    sessions = delete_session(session_id, data.sessions)
    _save(store, data.model_copy(update={"sessions": sessions}))
    console.print(f"[green]✓[/green] Förderstunde {session_id} gelöscht")


@cmd_session.command("list")
@click.option("--week", "week_of", type=DATE_TYPE, default=None,
              help="Nur die Woche dieses Datums.")
@click.option("--teacher", default=None, help="Nur diese Lehrkraft (id oder Name).")
@click.option("--student", default=None, help="Nur dieser Schüler (id, Nummer oder Name).")
@click.option("--status", type=click.Choice(["scheduled", "completed", "absent"]),
              default=None, help="Nur dieser Status.")
def session_list(week_of, teacher: Optional[str], student: Optional[str],
                 status: Optional[str]):
    """Listet Förderstunden chronologisch."""
    from export.helpers import UNKNOWN, sort_sessions
    from scheduling import week_dates

    config, store, data = _load()
    sessions = data.sessions
    if week_of is not None:
        days = set(week_dates(week_of.date()))
        sessions = [s for s in sessions if s.date in days]
    if teacher:
        t = _resolve_teacher(data, teacher)
        sessions = [s for s in sessions if s.teacher_id == t.id]
    if student:
        st = _resolve_student(data, student)
        sessions = [s for s in sessions if s.student_id == st.id]
    if status:
        sessions = [s for s in sessions if s.status.value == status]

    table = Table(title=f"Förderstunden ({len(sessions)})", box=box.ROUNDED)
    table.add_column("ID", style="dim")
    table.add_column("Datum")
    table.add_column("Zeit")
    table.add_column("Woche", style="dim")
    table.add_column("Lehrkraft")
    table.add_column("Schüler")
    table.add_column("Fach")
    table.add_column("Status")
    table.add_column("Notiz")
    colors = {"scheduled": "cyan", "completed": "green", "absent": "red"}
    for s in sort_sessions(sessions):
        t = data.get_teacher(s.teacher_id)
        st = data.get_student(s.student_id)
        c = colors[s.status.value]
        table.add_row(
            s.id, _fmt_date(s.date), s.time_slot, s.week_year,
            t.name if t else UNKNOWN, st.name if st else UNKNOWN, s.subject,
            f"[{c}]{s.status_label}[/{c}]", s.notes,
        )
    console.print(table)


# ─── WEEK ─────────────────────────────────────────────────────────────────────

@click.command("week")
@click.argument("datum", type=DATE_TYPE, required=False)
@click.option("--teacher", default=None, help="Wochenplan einer Lehrkraft (id oder Name).")
def cmd_week(datum, teacher: Optional[str]):
    """Zeigt die Woche von DATUM (Standard: heute) als Raster."""
    from export.week_view import render_week_rows, week_header
    from scheduling import week_dates, week_year

    config, store, data = _load()
    day = datum.date() if datum else date.today()
    teacher_id = _resolve_teacher(data, teacher).id if teacher else None

    dates = week_dates(day)
    title = f"Woche {week_year(dates[0])}: {_fmt_date(dates[0])} – {_fmt_date(dates[-1])}"
    if teacher_id:
        t = data.get_teacher(teacher_id)
        title = f"{t.name} ({t.subject}) | {title}"

    table = Table(title=title, box=box.ROUNDED, show_lines=True)
    for i, col in enumerate(week_header(day, config.day_names)):
        table.add_column(col, style="bold" if i == 0 else None)
    for row in render_week_rows(day, data, teacher_id, config.day_names):
        table.add_row(*row)
    console.print(table)


# ─── REPORT / CHECK ───────────────────────────────────────────────────────────

@click.command("report")
@click.option("--months", default=6, show_default=True, help="Monate im Verlauf.")
def cmd_report(months: int):
    """Auswertung: Status, Lehrkräfte, Fächer, Monatsverlauf."""
    from analysis.statistics import SessionStatistics

    config, store, data = _load()
    console.print(f"[dim]{data.summary()}[/dim]\n")
    stats = SessionStatistics(months=months)
    stats.print_rich(stats.analyze(data))


@click.command("check")
def cmd_check():
    """Prüft den Datenbestand auf Doppelbuchungen und verwaiste Einträge."""
    from analysis.integrity import IntegrityChecker

    config, store, data = _load()
    report = IntegrityChecker().check(data)
    report.print_rich()
    sys.exit(0 if report.is_consistent else 1)


# ─── EXPORT ───────────────────────────────────────────────────────────────────

@click.group("export")
def cmd_export():
    """Förderstunden als Excel oder PDF exportieren."""


@cmd_export.command("excel")
@click.option("--kind", "-k", default="all", show_default=True,
              type=click.Choice(["all", "teachers", "students", "teacher", "student",
                                 "month", "class"]),
              help="Art des Exports.")
@click.option("--name", default=None,
              help="Name (teacher/student) bzw. Klasse (class).")
@click.option("--month", default=None, help="Monat als JJJJ-MM (month).")
@click.option("--output-dir", default=None, help="Zielverzeichnis.")
@_handle_errors
def export_excel(kind: str, name: Optional[str], month: Optional[str],
                 output_dir: Optional[str]):
    """Exportiert Förderstunden-Listen als Excel."""
    from export import SessionExcelExporter

    config, store, data = _load()
    exporter = SessionExcelExporter(data, Path(output_dir or config.export_dir))

    if kind in ("teacher", "student", "class") and not name:
        _abort(f"--name ist für --kind {kind} erforderlich.")
    if kind == "all":
        paths = exporter.export_all()
    elif kind == "teachers":
        paths = [exporter.export_teacher_sessions()]
    elif kind == "students":
        paths = [exporter.export_student_sessions()]
    elif kind == "teacher":
        paths = [exporter.export_teacher_history(name)]
    elif kind == "student":
        paths = [exporter.export_student_history(name)]
    elif kind == "class":
        paths = [exporter.export_class_history(name)]
    else:
        try:
            year, mon = (int(x) for x in (month or "").split("-"))
            paths = [exporter.export_monthly(year, mon)]
        except ValueError:
            _abort("--month erwartet JJJJ-MM, z.B. 2024-03.")

    if any(p is None for p in paths):
        _abort(f"Kein Treffer für '{name}'.")
    for p in paths:
        console.print(f"[green]✓[/green] Excel gespeichert: {p}")


@cmd_export.command("pdf")
@click.argument("datum", type=DATE_TYPE, required=False)
@click.option("--teacher", default=None, help="Nur diese Lehrkraft (id oder Name).")
@click.option("--all-teachers", is_flag=True, default=False,
              help="Je eine Seite pro Lehrkraft.")
@click.option("--output", "-o", default=None, help="Ausgabepfad der PDF.")
def export_pdf(datum, teacher: Optional[str], all_teachers: bool, output: Optional[str]):
    """Exportiert den Wochenplan von DATUM (Standard: heute) als PDF."""
    from export import WeeklyPlanPdf
    from scheduling import week_year

    config, store, data = _load()
    day = datum.date() if datum else date.today()
    out = Path(output or Path(config.export_dir) / f"wochenplan_{week_year(day)}.pdf")
    pdf = WeeklyPlanPdf(data, config.school_name, config.day_names)

    if all_teachers:
        path = pdf.export_all_teachers(day, out)
    else:
        teacher_id = _resolve_teacher(data, teacher).id if teacher else None
        path = pdf.export(day, out, teacher_id)
    console.print(f"[green]✓[/green] PDF gespeichert: {path}")


# ─── BACKUP ───────────────────────────────────────────────────────────────────

@click.group("backup")
def cmd_backup():
    """Datenbestand sichern, wiederherstellen oder löschen."""


@cmd_backup.command("save")
@click.argument("datei", type=click.Path(path_type=Path), required=False)
@_handle_errors
def backup_save(datei: Optional[Path]):
    """Schreibt alle Daten in eine JSON-Sicherung."""
    config, store, data = _load()
    target = datei or Path(config.export_dir) / f"foerderplan_backup_{date.today():%Y-%m-%d}.json"
    path = store.export_backup(target, data)
    console.print(f"[green]✓[/green] Sicherung gespeichert: {path}")


@cmd_backup.command("load")
@click.argument("datei", type=click.Path(exists=True, path_type=Path))
@_handle_errors
def backup_load(datei: Path):
    """Ersetzt den Datenbestand durch eine JSON-Sicherung."""
    config = _load_config()
    data = _open_store(config).import_backup(datei)
    console.print(f"[green]✓[/green] Sicherung eingespielt")
    console.print(f"\n{data.summary()}")


@cmd_backup.command("clear")
@click.option("--yes", is_flag=True, default=False, help="Ohne Rückfrage löschen.")
def backup_clear(yes: bool):
    """Löscht alle gespeicherten Daten."""
    if not yes and not click.confirm("Wirklich ALLE Daten löschen?", default=False):
        return
    config = _load_config()
    _open_store(config).clear()
    console.print("[green]✓[/green] Alle Daten gelöscht")


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False,
              help="Ausführliche Protokollierung.")
def cli(verbose: bool):
    """Förderplan: Förderstunden zwischen Lehrkräften und Schülern planen.

    Starten Sie mit: python main.py setup
    """
    from config.logging_config import setup_logging
    setup_logging(logging.DEBUG if verbose else logging.WARNING)


def main():
    """Einstiegspunkt. Startet automatisch die Einrichtung beim ersten Aufruf."""
    from config.manager import ConfigManager
    mgr = ConfigManager()

    if len(sys.argv) == 1 and mgr.first_run_check():
        console.print(Panel(
            "[bold]Willkommen beim Förderplan![/bold]\n\n"
            "Keine Konfiguration gefunden.\n"
            "Die Einrichtung wird jetzt gestartet...",
            border_style="cyan",
        ))
        sys.argv.append("setup")

    cli()


# Befehle registrieren
cli.add_command(cmd_setup)
cli.add_command(cmd_config)
cli.add_command(cmd_sample)
cli.add_command(cmd_slots)
cli.add_command(cmd_teacher)
cli.add_command(cmd_student)
cli.add_command(cmd_session)
cli.add_command(cmd_week)
cli.add_command(cmd_report)
cli.add_command(cmd_check)
cli.add_command(cmd_export)
cli.add_command(cmd_backup)


if __name__ == "__main__":
    main()
