from config.schema import AppConfig, SlotDefinition

# Wochentage ab Montag; date.weekday() indiziert direkt in diese Liste.
WEEKDAY_NAMES: list[str] = [
    "Montag", "Dienstag", "Mittwoch", "Donnerstag", "Freitag", "Samstag", "Sonntag",
]

SUBJECTS: list[str] = [
    "Mathematik", "Physik", "Chemie", "Biologie", "Deutsch", "Geschichte",
    "Erdkunde", "Englisch", "Französisch", "Philosophie", "Literatur",
]

BAN_DAYS = 14


def default_time_slots() -> list[SlotDefinition]:
    """Standard-Raster: 13 Slots à 40 Minuten mit 10 Minuten Pause.

    09:30-10:10, 10:20-11:00, ... , 18:40-19:20, dazu der kurze
    Abendslot 19:30-20:00.
    """
    pairs = [
        ("09:30", "10:10"), ("10:20", "11:00"), ("11:10", "11:50"),
        ("12:00", "12:40"), ("12:50", "13:30"), ("13:40", "14:20"),
        ("14:30", "15:10"), ("15:20", "16:00"), ("16:10", "16:50"),
        ("17:00", "17:40"), ("17:50", "18:30"), ("18:40", "19:20"),
        ("19:30", "20:00"),
    ]
    return [SlotDefinition(start_time=s, end_time=e) for s, e in pairs]


def default_app_config() -> AppConfig:
    """Vollständige Default-Konfiguration."""
    return AppConfig(
        school_name="Muster-Schule",
        day_names=list(WEEKDAY_NAMES),
        ban_days=BAN_DAYS,
        subjects=list(SUBJECTS),
        default_time_slots=default_time_slots(),
    )
