"""Tests für Schulkonfiguration, Standardwerte und YAML-Persistenz."""

from datetime import date
from pathlib import Path

import pytest
from pydantic import ValidationError

from config.schema import GenerationConfig, SchoolConfig, Weekday, parse_clock
from config.defaults import (
    DEMO_CLASSES,
    DEMO_CLASSROOMS,
    DEMO_SUBJECTS,
    default_school_config,
)
from config.manager import ConfigManager
from solver.time_grid import TimeGrid


# ─── DEFAULT-KONFIGURATION ────────────────────────────────────────────────────

class TestDefaultConfig:
    def test_default_school_config_valid(self):
        """Standard-Config ist valide und vollständig."""
        config = default_school_config()
        assert config.school_name == "Muster-Gesamtschule"
        assert config.start_time == "08:00"
        assert config.end_time == "17:00"
        assert config.session_duration_minutes == 60
        assert config.has_complete_day_frame

    def test_default_days_monday_to_friday(self):
        config = default_school_config()
        assert config.school_days == [
            Weekday.MONDAY, Weekday.TUESDAY, Weekday.WEDNESDAY,
            Weekday.THURSDAY, Weekday.FRIDAY,
        ]

    def test_default_grid_has_seven_slots(self):
        """08–12 und 14–17 Uhr bei 60 Minuten → 7 Stunden."""
        grid = TimeGrid.from_config(default_school_config())
        assert len(grid) == 7

    def test_default_generation_settings(self):
        gen = GenerationConfig()
        assert gen.seed == 42
        assert gen.anchor_date == date(2024, 1, 1)

    def test_demo_tables_consistent(self):
        """Demo-Stammdaten: eindeutige Kürzel, positive Größen."""
        assert len({abbr for abbr, _, _ in DEMO_CLASSES}) == len(DEMO_CLASSES)
        assert len({rid for rid, _, _ in DEMO_CLASSROOMS}) == len(DEMO_CLASSROOMS)
        assert all(h > 0 for h in DEMO_SUBJECTS.values())

    def test_every_demo_class_fits_somewhere(self):
        biggest_room = max(seats for _, _, seats in DEMO_CLASSROOMS)
        assert all(size <= biggest_room for _, _, size in DEMO_CLASSES)


# ─── PYDANTIC-VALIDIERUNG ─────────────────────────────────────────────────────

class TestPydanticValidation:
    def test_invalid_clock_raises(self):
        """Uhrzeit nicht im Format HH:MM → ValidationError."""
        with pytest.raises(ValidationError):
            SchoolConfig(start_time="8 Uhr")

    def test_empty_clock_becomes_none(self):
        """Leere Uhrzeit gilt als nicht gesetzt, nicht als Fehler."""
        config = SchoolConfig(lunch_break_start="")
        assert config.lunch_break_start is None
        assert not config.has_complete_day_frame

    def test_missing_time_gives_empty_grid(self):
        config = SchoolConfig(end_time=None)
        assert len(TimeGrid.from_config(config)) == 0

    def test_lunch_before_start_raises(self):
        with pytest.raises(ValidationError):
            SchoolConfig(start_time="09:00", lunch_break_start="08:30",
                         lunch_break_end="09:30", end_time="15:00")

    def test_lunch_end_before_lunch_start_raises(self):
        with pytest.raises(ValidationError):
            SchoolConfig(lunch_break_start="13:00", lunch_break_end="12:00")

    def test_lunch_after_end_raises(self):
        with pytest.raises(ValidationError):
            SchoolConfig(end_time="13:00", lunch_break_start="12:00",
                         lunch_break_end="14:00")

    def test_zero_length_lunch_allowed(self):
        config = SchoolConfig(lunch_break_start="12:00", lunch_break_end="12:00")
        assert config.lunch_break_start == config.lunch_break_end

    def test_session_duration_must_be_positive(self):
        with pytest.raises(ValidationError):
            SchoolConfig(session_duration_minutes=0)

    def test_duplicate_days_raise(self):
        with pytest.raises(ValidationError):
            SchoolConfig(school_days=["MONDAY", "MONDAY"])

    def test_lowercase_days_normalized(self):
        """Tagesnamen werden unabhängig von der Schreibweise akzeptiert."""
        config = SchoolConfig(school_days=["monday", "Wednesday"])
        assert config.school_days == [Weekday.MONDAY, Weekday.WEDNESDAY]

    def test_unknown_day_raises(self):
        with pytest.raises(ValidationError):
            SchoolConfig(school_days=["MONTAG"])

    def test_weekday_short_names(self):
        assert Weekday.MONDAY.short_name == "Mo"
        assert Weekday.SUNDAY.short_name == "So"

    def test_parse_clock(self):
        assert parse_clock("14:30").hour == 14
        assert parse_clock("14:30").minute == 30
        with pytest.raises(ValueError):
            parse_clock("25:00")


# ─── YAML SPEICHERN / LADEN ───────────────────────────────────────────────────

class TestConfigManager:
    def test_save_and_load_roundtrip(self, tmp_path: Path):
        """Config speichern, laden und validieren (Roundtrip)."""
        config = default_school_config().model_copy(update={
            "school_name": "Roundtrip-Schule",
            "school_days": [Weekday.MONDAY, Weekday.SATURDAY],
        })
        mgr = ConfigManager(tmp_path / "school_config.yaml")

        written = mgr.save(config)
        assert written.exists()

        loaded = mgr.load()
        assert loaded.school_name == "Roundtrip-Schule"
        assert loaded.start_time == config.start_time
        assert loaded.lunch_break_end == config.lunch_break_end
        assert loaded.school_days == [Weekday.MONDAY, Weekday.SATURDAY]
        assert loaded.generation.seed == 42
        assert loaded.generation.anchor_date == date(2024, 1, 1)

    def test_saved_file_has_comments(self, tmp_path: Path):
        mgr = ConfigManager(tmp_path / "school_config.yaml")
        path = mgr.save(default_school_config())
        text = path.read_text(encoding="utf-8")
        assert text.startswith("# ====")
        assert "Tagesrahmen" in text
        assert "Schultage" in text

    def test_first_run_check_no_file(self, tmp_path: Path):
        """first_run_check gibt True zurück wenn keine Config existiert."""
        mgr = ConfigManager(tmp_path / "nonexistent.yaml")
        assert mgr.first_run_check() is True

    def test_first_run_check_with_file(self, tmp_path: Path):
        """first_run_check gibt False zurück wenn Config existiert."""
        mgr = ConfigManager(tmp_path / "school_config.yaml")
        mgr.save(default_school_config())
        assert mgr.first_run_check() is False

    def test_load_nonexistent_raises(self, tmp_path: Path):
        """Laden einer nicht-existenten Datei → FileNotFoundError."""
        mgr = ConfigManager()
        with pytest.raises(FileNotFoundError):
            mgr.load(tmp_path / "not_there.yaml")

    def test_load_invalid_raises_value_error(self, tmp_path: Path):
        """Ungültige Werte in der YAML-Datei → ValueError mit Dateiname."""
        path = tmp_path / "broken.yaml"
        path.write_text(
            'school_name: "Kaputt"\nsession_duration_minutes: 0\n',
            encoding="utf-8",
        )
        with pytest.raises(ValueError, match="broken.yaml"):
            ConfigManager(path).load()

    def test_load_or_default_without_file(self, tmp_path: Path):
        mgr = ConfigManager(tmp_path / "missing.yaml")
        assert mgr.load_or_default() == default_school_config()

    def test_load_or_default_reads_file(self, tmp_path: Path):
        mgr = ConfigManager(tmp_path / "school_config.yaml")
        mgr.save(default_school_config().model_copy(update={"school_name": "Datei"}))
        assert mgr.load_or_default().school_name == "Datei"

    def test_load_partial_file_uses_defaults(self, tmp_path: Path):
        path = tmp_path / "partial.yaml"
        path.write_text(
            'school_name: "Teilweise"\nschool_days: [monday, tuesday]\n',
            encoding="utf-8",
        )
        config = ConfigManager(path).load()
        assert config.school_name == "Teilweise"
        assert config.school_days == [Weekday.MONDAY, Weekday.TUESDAY]
        assert config.start_time == "08:00"
