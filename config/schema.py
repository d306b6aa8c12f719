from pydantic import BaseModel, Field, field_validator


# ─── ZEITSLOTS ───

class SlotDefinition(BaseModel):
    """Ein Zeitslot des Standard-Rasters, mit dem die Slot-Registry startet."""
    # Beginn im Format "HH:MM"
    start_time: str
    # Ende im Format "HH:MM"
    end_time: str


# ─── GESAMT-CONFIG ───

class AppConfig(BaseModel):
    """Gesamtkonfiguration des Förderplans."""
    # Name der Schule (erscheint in Exporten)
    school_name: str = Field("Muster-Schule",
        description="Name der Schule")
    # Namen der Wochentage, beginnend mit Montag (genau 7)
    day_names: list[str] = Field(
        default=["Montag", "Dienstag", "Mittwoch", "Donnerstag",
                 "Freitag", "Samstag", "Sonntag"],
        description="Wochentage ab Montag")
    # Dauer der Sperre nach einer Abwesenheit
    ban_days: int = Field(14, ge=1, le=90,
        description="Sperrdauer in Tagen nach Nicht-Erscheinen")
    # Verzeichnis für die JSON-Datenbestände
    data_dir: str = Field("output/daten",
        description="Verzeichnis der gespeicherten Daten")
    # Verzeichnis für Excel-/PDF-Exporte
    export_dir: str = Field("output",
        description="Zielverzeichnis für Exporte")
    # Überlappende Zeitslots zulassen (Produktentscheidung, Standard: ja)
    allow_overlapping_slots: bool = Field(True,
        description="Überlappende aktive Zeitslots zulassen")
    # Fächerkatalog für neue Lehrkräfte
    subjects: list[str] = Field(default_factory=list,
        description="Angebotene Fächer")
    # Startraster der Zeitslots (wird beim ersten Laden gespeichert)
    default_time_slots: list[SlotDefinition] = Field(default_factory=list,
        description="Standard-Zeitslots")

    @field_validator("day_names")
    @classmethod
    def _seven_unique_days(cls, v: list[str]) -> list[str]:
        if len(v) != 7:
            raise ValueError(f"day_names braucht genau 7 Einträge, nicht {len(v)}")
        if len(set(v)) != 7:
            raise ValueError("day_names enthält doppelte Wochentage")
        return v
