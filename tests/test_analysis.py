"""Tests für Stundenplan-Validierung und Machbarkeits-Check."""

from pathlib import Path

import pytest

from config.schema import Weekday
from config.defaults import default_school_config
from data.fake_data import FakeDataGenerator
from models.classroom import Classroom
from models.lesson import Lesson
from models.school_class import SchoolClass
from models.school_data import SchoolData
from models.subject import Subject
from models.teacher import Teacher
from solver.scheduler import BatchScheduler
from analysis.solution_validator import SolutionValidator, ValidationReport, ValidationViolation


# ─── Testdaten-Hilfsfunktionen ────────────────────────────────────────────────

def _make_data(**overrides) -> SchoolData:
    fields = dict(
        config=default_school_config(),
        classes=[
            SchoolClass(id="5A", name="Klasse 5a", abbreviation="5A", capacity=25),
            SchoolClass(id="7A", name="Klasse 7a", abbreviation="7A", capacity=31),
        ],
        subjects=[
            Subject(id="MAT", name="Mathematik", weekly_hours=2),
            Subject(id="DEU", name="Deutsch", weekly_hours=1),
        ],
        teachers=[
            Teacher(id="L01", name="Anna", surname="Müller", subject_ids=["MAT"]),
            Teacher(id="L02", name="Hans", surname="Schmidt", subject_ids=["DEU"]),
        ],
        classrooms=[
            Classroom(id="R101", name="Raum 101", capacity=30),
            Classroom(id="AULA", name="Aula", capacity=60),
        ],
    )
    fields.update(overrides)
    return SchoolData(**fields)


def _lesson(lesson_id: int, subject_id: str = "MAT", class_id: str = "5A",
            teacher_id: str = "L01", room_id: str = "R101",
            start_slot: str = "08:00", slot_count: int = 1,
            day: Weekday = Weekday.MONDAY) -> Lesson:
    return Lesson.create(
        lesson_id=lesson_id,
        name=f"{subject_id} - {class_id}",
        subject_id=subject_id,
        class_id=class_id,
        teacher_id=teacher_id,
        classroom_id=room_id,
        day=day,
        start_slot=start_slot,
        slot_count=slot_count,
        session_duration_minutes=60,
        anchor_date=default_school_config().generation.anchor_date,
    )


def _complete_lessons() -> list[Lesson]:
    """Erfüllt den Bedarf beider Klassen ohne Konflikte."""
    return [
        _lesson(1, "MAT", "5A", "L01", "R101", "08:00", slot_count=2),
        _lesson(2, "DEU", "5A", "L02", "R101", "10:00"),
        _lesson(3, "MAT", "7A", "L01", "AULA", "14:00", slot_count=2),
        _lesson(4, "DEU", "7A", "L02", "AULA", "08:00"),
    ]


# ─── Solution-Validator ───────────────────────────────────────────────────────

class TestSolutionValidator:
    def test_clean_timetable_valid(self):
        report = SolutionValidator().validate(_complete_lessons(), _make_data())
        assert isinstance(report, ValidationReport)
        assert report.is_valid
        assert report.violations == []

    def test_empty_timetable_only_warnings(self):
        """Ohne Stunden: nur Bedarfs-Warnungen, keine Fehler."""
        report = SolutionValidator().validate([], _make_data())
        assert report.is_valid
        shortfalls = report.by_constraint("demand_shortfall")
        assert len(shortfalls) == 4
        assert all(v.severity == "warning" for v in shortfalls)

    def test_teacher_double_booking(self):
        lessons = _complete_lessons() + [
            _lesson(5, "MAT", "7A", "L01", "AULA", "09:00"),
        ]
        report = SolutionValidator().validate(lessons, _make_data())
        assert not report.is_valid
        violations = report.by_constraint("teacher_double_booking")
        assert len(violations) == 1
        assert violations[0].entity == "L01"

    def test_class_and_room_double_booking(self):
        lessons = [
            _lesson(1, "MAT", "5A", "L01", "R101", "08:00"),
            _lesson(2, "DEU", "5A", "L02", "R101", "08:00"),
        ]
        report = SolutionValidator().validate(lessons, _make_data())
        assert report.by_constraint("class_double_booking")
        assert report.by_constraint("room_double_booking")
        assert not report.by_constraint("teacher_double_booking")

    def test_room_capacity(self):
        """7a (31 Schüler) passt nicht in Raum 101 (30 Plätze)."""
        lessons = [_lesson(1, "DEU", "7A", "L02", "R101", "08:00")]
        report = SolutionValidator().validate(lessons, _make_data())
        violations = report.by_constraint("room_capacity")
        assert len(violations) == 1
        assert violations[0].entity == "R101"

    def test_unknown_reference(self):
        lessons = [_lesson(1, room_id="R999")]
        report = SolutionValidator().validate(lessons, _make_data())
        assert report.by_constraint("unknown_reference")

    def test_teacher_qualification(self):
        lessons = [_lesson(1, "DEU", "5A", "L01", "R101", "08:00")]
        report = SolutionValidator().validate(lessons, _make_data())
        violations = report.by_constraint("teacher_qualification")
        assert len(violations) == 1
        assert violations[0].severity == "error"

    def test_lunch_overlap_and_off_grid(self):
        """Doppelstunde ab 11:00 reicht in die Mittagspause."""
        lessons = [_lesson(1, start_slot="11:00", slot_count=2)]
        report = SolutionValidator().validate(lessons, _make_data())
        assert report.by_constraint("lunch_overlap")
        assert report.by_constraint("slot_off_grid")

    def test_daily_subject_cap(self):
        lessons = [
            _lesson(1, start_slot="08:00"),
            _lesson(2, start_slot="09:00"),
            _lesson(3, start_slot="10:00"),
        ]
        report = SolutionValidator().validate(lessons, _make_data())
        violations = report.by_constraint("daily_subject_cap")
        assert len(violations) == 1
        assert violations[0].entity == "5A"

    def test_generated_timetable_passes(self):
        """Ausgabe des Batch-Generators hält alle harten Regeln ein."""
        data = FakeDataGenerator(default_school_config(), seed=42).generate()
        result = BatchScheduler(data, seed=42).generate()
        report = SolutionValidator().validate(result.lessons, data)
        errors = [v for v in report.violations if v.severity == "error"]
        assert errors == [], errors

    def test_print_rich_does_not_fail(self):
        report = ValidationReport(
            violations=[ValidationViolation(
                severity="error", constraint="room_capacity",
                description="zu klein", entity="R101",
            )],
            is_valid=False,
        )
        report.print_rich()


# ─── Machbarkeits-Check ───────────────────────────────────────────────────────

class TestFeasibility:
    def test_demo_data_feasible(self):
        data = FakeDataGenerator(default_school_config(), seed=42).generate()
        report = data.validate_feasibility()
        assert report.is_feasible
        assert report.errors == []

    def test_missing_classes_is_error(self):
        report = _make_data(classes=[]).validate_feasibility()
        assert not report.is_feasible
        assert any("Klassen" in e for e in report.errors)

    def test_missing_school_name_is_error(self):
        config = default_school_config().model_copy(update={"school_name": "  "})
        report = _make_data(config=config).validate_feasibility()
        assert not report.is_feasible

    def test_empty_grid_is_error(self):
        config = default_school_config().model_copy(update={"start_time": None})
        report = _make_data(config=config).validate_feasibility()
        assert not report.is_feasible
        assert any("Zeitraster" in e for e in report.errors)

    def test_teacher_without_subject_is_error(self):
        teachers = [
            Teacher(id="L01", name="Anna", surname="Müller", subject_ids=["MAT", "DEU"]),
            Teacher(id="L09", name="Olga", surname="Koch"),
        ]
        report = _make_data(teachers=teachers).validate_feasibility()
        assert not report.is_feasible
        assert any("Olga Koch" in e for e in report.errors)

    def test_duplicate_ids_are_error(self):
        rooms = [
            Classroom(id="R101", name="Raum 101", capacity=30),
            Classroom(id="R101", name="Raum 101b", capacity=40),
        ]
        report = _make_data(classrooms=rooms).validate_feasibility()
        assert any("R101" in e for e in report.errors)

    def test_subject_without_teacher_is_warning(self):
        teachers = [Teacher(id="L01", name="Anna", surname="Müller", subject_ids=["MAT"])]
        report = _make_data(teachers=teachers).validate_feasibility()
        assert report.is_feasible
        assert any("Deutsch" in w for w in report.warnings)

    def test_class_without_room_is_warning(self):
        rooms = [Classroom(id="R101", name="Raum 101", capacity=30)]
        report = _make_data(classrooms=rooms).validate_feasibility()
        assert report.is_feasible
        assert any("Klasse 7a" in w for w in report.warnings)

    def test_weekly_hours_above_daily_cap_is_warning(self):
        subjects = [Subject(id="MAT", name="Mathematik", weekly_hours=11)]
        report = _make_data(subjects=subjects).validate_feasibility()
        assert any("Mathematik" in w for w in report.warnings)

    def test_unknown_teacher_subject_is_warning(self):
        teachers = [
            Teacher(id="L01", name="Anna", surname="Müller", subject_ids=["MAT", "PHY"]),
            Teacher(id="L02", name="Hans", surname="Schmidt", subject_ids=["DEU"]),
        ]
        report = _make_data(teachers=teachers).validate_feasibility()
        assert report.is_feasible
        assert any("PHY" in w for w in report.warnings)


# ─── Persistenz der Stammdaten ────────────────────────────────────────────────

class TestSchoolDataPersistence:
    def test_json_roundtrip(self, tmp_path: Path):
        data = FakeDataGenerator(default_school_config(), seed=42).generate()
        path = tmp_path / "school_data.json"
        data.save_json(path)
        loaded = SchoolData.load_json(path)
        assert loaded.classes == data.classes
        assert loaded.teachers == data.teachers
        assert loaded.config.school_days == data.config.school_days
        assert loaded.created_at is not None

    def test_load_missing_raises(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            SchoolData.load_json(tmp_path / "missing.json")

    def test_demo_data_reproducible(self):
        a = FakeDataGenerator(default_school_config(), seed=1).generate()
        b = FakeDataGenerator(default_school_config(), seed=1).generate()
        assert a.teachers == b.teachers
