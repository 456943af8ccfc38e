from config.schema import GenerationConfig, SchoolConfig, Weekday


def default_school_config() -> SchoolConfig:
    """Standard-Tagesrahmen einer Ganztagsschule.

    Zeitraster bei 60-Minuten-Stunden:
    08:00  09:00  10:00  11:00
       ── Mittagspause 12:00 - 14:00 ──
    14:00  15:00  16:00

    Ergibt 7 Stunden pro Tag, Montag bis Freitag.
    """
    return SchoolConfig(
        school_name="Muster-Gesamtschule",
        start_time="08:00",
        end_time="17:00",
        session_duration_minutes=60,
        lunch_break_start="12:00",
        lunch_break_end="14:00",
        school_days=[
            Weekday.MONDAY,
            Weekday.TUESDAY,
            Weekday.WEDNESDAY,
            Weekday.THURSDAY,
            Weekday.FRIDAY,
        ],
        generation=GenerationConfig(seed=42),
    )


# ─── DEMO-STUNDENTAFEL ───
# Fach → Wochenstunden (gilt für jede Klasse).

DEMO_SUBJECTS: dict[str, int] = {
    "Mathematik":   5,
    "Deutsch":      6,
    "Geschichte":   3,
    "Biologie":     2,
    "Sport":        2,
    "Englisch":     3,
}

# Kürzel, Anzeigename, Schülerzahl
DEMO_CLASSES: list[tuple[str, str, int]] = [
    ("5A", "Klasse 5a", 25),
    ("5B", "Klasse 5b", 28),
    ("6A", "Klasse 6a", 30),
    ("6B", "Klasse 6b", 29),
    ("7A", "Klasse 7a", 31),
    ("8B", "Klasse 8b", 28),
    ("9C", "Klasse 9c", 27),
]

# Kürzel, Anzeigename, Plätze
DEMO_CLASSROOMS: list[tuple[str, str, int]] = [
    ("R101", "Raum 101", 30),
    ("R102", "Raum 102", 30),
    ("R203", "Raum 203", 32),
    ("R204", "Raum 204", 28),
    ("AULA", "Mehrzweckraum", 60),
    ("HALLE", "Sporthalle", 50),
]
