from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class Weekday(str, Enum):
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"

    @property
    def short_name(self) -> str:
        """Abgekürzter deutscher Tagesname (Mo, Di, ...)."""
        return _DAY_SHORT_NAMES[self]


_DAY_SHORT_NAMES = {
    Weekday.MONDAY: "Mo",
    Weekday.TUESDAY: "Di",
    Weekday.WEDNESDAY: "Mi",
    Weekday.THURSDAY: "Do",
    Weekday.FRIDAY: "Fr",
    Weekday.SATURDAY: "Sa",
    Weekday.SUNDAY: "So",
}


def parse_clock(value: str) -> datetime:
    """Wandelt "HH:MM" in ein datetime am Referenzdatum 1900-01-01 um."""
    return datetime.strptime(value, "%H:%M")


# ─── GENERIERUNG ───

class GenerationConfig(BaseModel):
    """Einstellungen für den Batch-Lauf."""
    # Seed für die Durchmischung von Tagen, Lehrkräften und Räumen.
    # None = bei jedem Lauf anders.
    seed: Optional[int] = Field(42,
        description="Zufalls-Seed für reproduzierbare Stundenpläne")
    # Kalenderdatum, an dem die Zeitstempel der Stunden verankert werden.
    # Nur Uhrzeit und Wochentag sind fachlich relevant.
    anchor_date: date = Field(date(2024, 1, 1),
        description="Referenzdatum für Start-/Endzeitstempel")


# ─── GESAMT-CONFIG ───

class SchoolConfig(BaseModel):
    """Schulkonfiguration: Tagesrahmen, Stundenlänge, Mittagspause, Schultage."""
    # Name der Schule
    school_name: str = Field("Muster-Gesamtschule",
        description="Name der Schule")
    # Unterrichtsbeginn im Format "HH:MM"
    start_time: Optional[str] = Field("08:00",
        description="Unterrichtsbeginn (HH:MM)")
    # Unterrichtsende im Format "HH:MM"
    end_time: Optional[str] = Field("17:00",
        description="Unterrichtsende (HH:MM)")
    # Länge einer Unterrichtseinheit in Minuten
    session_duration_minutes: int = Field(60, gt=0, le=240,
        description="Dauer einer Stunde in Minuten")
    # Beginn der Mittagspause im Format "HH:MM"
    lunch_break_start: Optional[str] = Field("12:00",
        description="Beginn der Mittagspause (HH:MM)")
    # Ende der Mittagspause im Format "HH:MM"
    lunch_break_end: Optional[str] = Field("14:00",
        description="Ende der Mittagspause (HH:MM)")
    # Aktive Unterrichtstage
    school_days: list[Weekday] = Field(
        default=[Weekday.MONDAY, Weekday.TUESDAY, Weekday.WEDNESDAY,
                 Weekday.THURSDAY, Weekday.FRIDAY],
        description="Aktive Unterrichtstage")
    # Einstellungen für die Stundenplan-Generierung
    generation: GenerationConfig = Field(default_factory=GenerationConfig)

    @field_validator("start_time", "end_time", "lunch_break_start",
                     "lunch_break_end")
    @classmethod
    def check_clock_format(cls, v: Optional[str]) -> Optional[str]:
        if v is None or v == "":
            return None
        try:
            parse_clock(v)
        except ValueError as e:
            raise ValueError(f"Ungültige Uhrzeit '{v}' (erwartet HH:MM)") from e
        return v

    @field_validator("school_days", mode="before")
    @classmethod
    def normalize_days(cls, v):
        if isinstance(v, list):
            return [d.upper() if isinstance(d, str) else d for d in v]
        return v

    @model_validator(mode="after")
    def validate_day_frame(self):
        """Prüfe Beginn < Mittag-Beginn ≤ Mittag-Ende < Ende (falls alle gesetzt)."""
        if len(set(self.school_days)) != len(self.school_days):
            raise ValueError("Schultage enthalten Duplikate")
        times = (self.start_time, self.lunch_break_start,
                 self.lunch_break_end, self.end_time)
        if any(t is None for t in times):
            return self
        start, lunch_start, lunch_end, end = (parse_clock(t) for t in times)
        if not start < lunch_start:
            raise ValueError(
                f"Mittagspause ({self.lunch_break_start}) muss nach "
                f"Unterrichtsbeginn ({self.start_time}) liegen")
        if not lunch_start <= lunch_end:
            raise ValueError(
                f"Mittagspause endet ({self.lunch_break_end}) vor ihrem "
                f"Beginn ({self.lunch_break_start})")
        if not lunch_end < end:
            raise ValueError(
                f"Mittagspause ({self.lunch_break_end}) muss vor "
                f"Unterrichtsende ({self.end_time}) enden")
        return self

    @property
    def has_complete_day_frame(self) -> bool:
        """True wenn alle vier Uhrzeiten gesetzt sind."""
        return all((self.start_time, self.end_time,
                    self.lunch_break_start, self.lunch_break_end))
