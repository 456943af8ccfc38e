"""Testdaten-Generator für den Stundenplan-Generator.

Erzeugt einen kleinen, realistischen Datensatz: sieben Klassen unterschiedlicher
Größe, sechs Fächer, sechs Räume (davon zwei große) und ein Kollegium, in dem
jedes Fach von mindestens zwei Lehrkräften abgedeckt wird.

Absichtliche Engpässe:
  1. Raumgröße: Klasse 7a (31 Schüler) passt nur in R203, Aula und Halle
  2. Knappe Fachlehrer: Sport und Biologie nur mit je zwei Lehrkräften
"""

import random
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich import box

from config.defaults import DEMO_CLASSES, DEMO_CLASSROOMS, DEMO_SUBJECTS
from config.schema import SchoolConfig
from models.classroom import Classroom
from models.school_class import SchoolClass
from models.school_data import SchoolData
from models.subject import Subject
from models.teacher import Teacher

console = Console()

# ─── Namens-Listen ────────────────────────────────────────────────────────────

_FIRST_NAMES = [
    "Andreas", "Birgit", "Christian", "Eva", "Franz", "Iris", "Jürgen",
    "Karin", "Lena", "Markus", "Olga", "Peter", "Sandra", "Thomas",
    "Ulrike", "Werner", "Zoe", "Martin", "Sabine", "Helmut",
]

_LAST_NAMES = [
    "Müller", "Schmidt", "Schneider", "Fischer", "Weber", "Meyer",
    "Wagner", "Becker", "Schulz", "Hoffmann", "Schäfer", "Koch",
    "Bauer", "Richter", "Klein", "Wolf", "Schröder", "Neumann",
]

# ─── Fächerkombinationen ─────────────────────────────────────────────────────
# Jede Kombination ergibt eine Lehrkraft; zusammen ≥ 2 Lehrkräfte pro Fach.

_SUBJECT_COMBOS: list[list[str]] = [
    ["Mathematik", "Biologie"],
    ["Mathematik"],
    ["Mathematik", "Englisch"],
    ["Deutsch", "Geschichte"],
    ["Deutsch"],
    ["Deutsch", "Englisch"],
    ["Deutsch", "Geschichte"],
    ["Geschichte", "Englisch"],
    ["Biologie", "Sport"],
    ["Sport"],
]


def _subject_id(name: str) -> str:
    return name[:3].upper()


class FakeDataGenerator:
    """Erzeugt reproduzierbare Demo-Stammdaten (Seed-gesteuert)."""

    def __init__(self, config: SchoolConfig, seed: Optional[int] = 42) -> None:
        self.config = config
        self.rng = random.Random(seed)

    def generate(self) -> SchoolData:
        """Baut den vollständigen Demo-Datensatz."""
        subjects = [
            Subject(id=_subject_id(name), name=name, weekly_hours=hours)
            for name, hours in DEMO_SUBJECTS.items()
        ]
        classes = [
            SchoolClass(id=abbr, name=name, abbreviation=abbr, capacity=size)
            for abbr, name, size in DEMO_CLASSES
        ]
        classrooms = [
            Classroom(id=room_id, name=name, capacity=seats)
            for room_id, name, seats in DEMO_CLASSROOMS
        ]
        return SchoolData(
            config=self.config,
            classes=classes,
            subjects=subjects,
            teachers=self._generate_teachers(),
            classrooms=classrooms,
        )

    def _generate_teachers(self) -> list[Teacher]:
        first_names = self.rng.sample(_FIRST_NAMES, len(_SUBJECT_COMBOS))
        last_names = self.rng.sample(_LAST_NAMES, len(_SUBJECT_COMBOS))
        teachers: list[Teacher] = []
        for i, combo in enumerate(_SUBJECT_COMBOS, start=1):
            teachers.append(Teacher(
                id=f"L{i:02d}",
                name=first_names[i - 1],
                surname=last_names[i - 1],
                subject_ids=[_subject_id(s) for s in combo],
            ))
        return teachers

    def print_summary(self, data: SchoolData) -> None:
        """Gibt das Kollegium als Rich-Tabelle aus."""
        subject_names = {s.id: s.name for s in data.subjects}
        table = Table(title="Lehrkräfte", box=box.ROUNDED)
        table.add_column("ID", style="bold")
        table.add_column("Name")
        table.add_column("Fächer")
        for t in data.teachers:
            table.add_row(
                t.id, t.full_name,
                ", ".join(subject_names.get(s, s) for s in t.subject_ids),
            )
        console.print(table)
