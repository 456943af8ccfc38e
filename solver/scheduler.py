"""Heuristischer Stundenplan-Generator (Batch-Lauf).

Architektur:
  - Tagesraster aus der Schulkonfiguration (solver.time_grid)
  - Wochenstunden je (Klasse, Fach) → Blöcke aus 1–2 Slots (solver.demand)
  - Blöcke absteigend nach Länge sortiert: Doppelstunden zuerst
  - Pro Block: Tage zufällig durchlaufen, Slots von früh nach spät,
    erste freie qualifizierte Lehrkraft, erster freier ausreichend großer Raum
  - Belegung aller drei Achsen über ein frisches OccupancyLedger pro Lauf

Kein exakter Solver: Blöcke ohne passende Kombination bleiben unverplant und
werden als Warnung im Ergebnis geführt.
"""

import logging
import time
from collections import defaultdict
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel

from config.schema import Weekday
from models.lesson import Lesson
from models.school_class import SchoolClass
from models.school_data import SchoolData
from models.subject import Subject
from solver.demand import PlacementRequest, build_placement_requests
from solver.occupancy import ConflictChecker, OccupancyLedger, ResourceKind
from solver.shuffle import Shuffler, seeded_shuffler
from solver.time_grid import TimeGrid

logger = logging.getLogger(__name__)

# Eine Klasse bekommt ein Fach höchstens 2 Slots pro Tag
MAX_SLOTS_PER_SUBJECT_PER_DAY = 2

UnplacedReason = Literal["no_qualified_teacher", "no_suitable_room", "no_free_slot"]

_REASON_LABELS: dict[str, str] = {
    "no_qualified_teacher": "keine qualifizierte Lehrkraft",
    "no_suitable_room": "kein ausreichend großer Raum",
    "no_free_slot": "kein freier Slot",
}


class ConfigurationError(ValueError):
    """Die Konfiguration erlaubt keinen Lauf (z.B. leeres Zeitraster)."""


# ─── Ergebnis-Modelle ─────────────────────────────────────────────────────────

class UnplacedRequest(BaseModel):
    """Ein Block, für den keine Kombination aus Tag/Slot/Lehrkraft/Raum frei war."""

    class_id: str
    subject_id: str
    block_length: int
    reason: UnplacedReason

    @property
    def reason_label(self) -> str:
        return _REASON_LABELS[self.reason]


class GenerationResult(BaseModel):
    """Vollständiges Ergebnis eines Batch-Laufs.

    `lessons` ist die komplette Ersatzliste für die Persistenzschicht.
    """

    lessons: list[Lesson]
    unplaced: list[UnplacedRequest]
    time_grid: list[str]
    school_days: list[Weekday]
    requested_count: int
    elapsed_seconds: float = 0.0
    seed: Optional[int] = None

    @property
    def placed_count(self) -> int:
        return self.requested_count - len(self.unplaced)

    @property
    def unplaced_count(self) -> int:
        return len(self.unplaced)

    @property
    def is_complete(self) -> bool:
        return not self.unplaced

    def get_class_schedule(self, class_id: str) -> list[Lesson]:
        """Alle Stunden einer Klasse, nach Tag und Uhrzeit sortiert."""
        return _sorted_lessons(l for l in self.lessons if l.class_id == class_id)

    def get_teacher_schedule(self, teacher_id: str) -> list[Lesson]:
        """Alle Stunden einer Lehrkraft, nach Tag und Uhrzeit sortiert."""
        return _sorted_lessons(l for l in self.lessons if l.teacher_id == teacher_id)

    def print_rich(self, school_data: Optional[SchoolData] = None) -> None:
        """Gibt Zusammenfassung und unverplante Blöcke über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()
        status = (
            "[bold green]✓ VOLLSTÄNDIG[/bold green]"
            if self.is_complete
            else "[bold yellow]⚠ UNVOLLSTÄNDIG[/bold yellow]"
        )
        lines = [
            status,
            f"Blöcke: {self.requested_count} | verplant: {self.placed_count} | "
            f"unverplant: {self.unplaced_count}",
            f"Stunden: {len(self.lessons)} | Slots/Tag: {len(self.time_grid)} | "
            f"Seed: {self.seed} | Zeit: {self.elapsed_seconds:.2f}s",
        ]
        console.print(Panel("\n".join(lines), title="Generierung", border_style="cyan"))

        if not self.unplaced:
            return

        class_names: dict[str, str] = {}
        subject_names: dict[str, str] = {}
        if school_data is not None:
            class_names = {c.id: c.name for c in school_data.classes}
            subject_names = {s.id: s.name for s in school_data.subjects}

        table = Table(title="Unverplante Blöcke", box=box.ROUNDED)
        table.add_column("Klasse")
        table.add_column("Fach")
        table.add_column("Länge", justify="right")
        table.add_column("Grund", style="yellow")
        for u in self.unplaced:
            table.add_row(
                class_names.get(u.class_id, u.class_id),
                subject_names.get(u.subject_id, u.subject_id),
                str(u.block_length),
                u.reason_label,
            )
        console.print(table)

    def save_json(self, path: Path) -> None:
        """Speichert das Ergebnis als JSON-Datei (komplette Ersatzliste)."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.model_dump_json(indent=2))

    @classmethod
    def load_json(cls, path: Path) -> "GenerationResult":
        """Lädt ein gespeichertes Ergebnis aus JSON."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Stundenplan nicht gefunden: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return cls.model_validate_json(f.read())


def _sorted_lessons(lessons) -> list[Lesson]:
    day_order = {d: i for i, d in enumerate(Weekday)}
    return sorted(lessons, key=lambda l: (day_order[l.day], l.start_time, l.class_id))


# ─── Haupt-Solver ─────────────────────────────────────────────────────────────

class BatchScheduler:
    """Heuristischer Batch-Generator.

    Verwendung:
        scheduler = BatchScheduler(school_data)
        result = scheduler.generate()

    Mit `shuffle` lässt sich die Permutation von Tagen, Lehrkräften und Räumen
    austauschen; ohne wird pro Lauf ein seeded_shuffler aus `seed` bzw.
    config.generation.seed gebaut.
    """

    def __init__(
        self,
        school_data: SchoolData,
        shuffle: Optional[Shuffler] = None,
        seed: Optional[int] = None,
    ) -> None:
        self.data = school_data
        self.config = school_data.config
        self.seed = seed if seed is not None else self.config.generation.seed
        self._shuffle_override = shuffle

        self._classes: dict[str, SchoolClass] = {c.id: c for c in school_data.classes}
        self._subjects: dict[str, Subject] = {s.id: s for s in school_data.subjects}

    # ─── Öffentliche API ──────────────────────────────────────────────────────

    def generate(self) -> GenerationResult:
        """Führt einen vollständigen Lauf aus und gibt das Ergebnis zurück.

        Raises:
            ConfigurationError: Zeitraster leer oder keine Schultage.
        """
        t0 = time.time()

        grid = TimeGrid.from_config(self.config)
        if not grid:
            raise ConfigurationError(
                "Zeitraster ist leer: Unterrichtsbeginn/-ende, Mittagspause und "
                "Stundenlänge prüfen."
            )
        if not self.config.school_days:
            raise ConfigurationError("Keine Schultage konfiguriert.")

        shuffle = self._shuffle_override or seeded_shuffler(self.seed)
        ledger = OccupancyLedger(grid)
        daily_load: dict[tuple[str, str, Weekday], int] = defaultdict(int)

        requests = build_placement_requests(self.data.classes, self.data.subjects)
        # Stabile Sortierung: Doppelstunden zuerst, sonst Eingabereihenfolge
        requests.sort(key=lambda r: r.block_length, reverse=True)

        logger.info(
            f"Generierung: {len(requests)} Blöcke | {len(grid)} Slots/Tag | "
            f"{len(self.config.school_days)} Tage | Seed {self.seed}"
        )

        lessons: list[Lesson] = []
        unplaced: list[UnplacedRequest] = []

        for request in requests:
            lesson, reason = self._place_request(
                request, grid, ledger, daily_load, shuffle, next_id=len(lessons) + 1
            )
            if lesson is None:
                unplaced.append(UnplacedRequest(
                    class_id=request.class_id,
                    subject_id=request.subject_id,
                    block_length=request.block_length,
                    reason=reason,
                ))
                continue
            lessons.append(lesson)
            daily_load[(request.class_id, request.subject_id, lesson.day)] += \
                request.block_length

        elapsed = time.time() - t0
        logger.info(
            f"Generierung beendet: {len(lessons)}/{len(requests)} Blöcke verplant | "
            f"Zeit: {elapsed:.2f}s"
        )
        if unplaced:
            logger.warning(
                f"{len(unplaced)} Block/Blöcke nicht verplant "
                f"({sum(u.block_length for u in unplaced)} Stunden)"
            )
            for u in unplaced:
                logger.debug(
                    f"  unverplant: Klasse {u.class_id}, Fach {u.subject_id}, "
                    f"Länge {u.block_length} – {u.reason_label}"
                )

        return GenerationResult(
            lessons=lessons,
            unplaced=unplaced,
            time_grid=list(grid.slots),
            school_days=list(self.config.school_days),
            requested_count=len(requests),
            elapsed_seconds=elapsed,
            seed=self.seed,
        )

    # ─── Platzierung eines Blocks ─────────────────────────────────────────────

    def _place_request(
        self,
        request: PlacementRequest,
        grid: TimeGrid,
        checker: ConflictChecker,
        daily_load: dict[tuple[str, str, Weekday], int],
        shuffle: Shuffler,
        next_id: int,
    ) -> tuple[Optional[Lesson], Optional[UnplacedReason]]:
        """Sucht Tag/Slot/Lehrkraft/Raum für einen Block.

        Gibt (Stunde, None) bei Erfolg zurück, sonst (None, Grund).
        """
        cls = self._classes[request.class_id]
        subject = self._subjects[request.subject_id]
        length = request.block_length

        teachers = shuffle(self.data.qualified_teachers(subject.id))
        if not teachers:
            return None, "no_qualified_teacher"
        rooms = shuffle(self.data.suitable_classrooms(cls))
        if not rooms:
            return None, "no_suitable_room"

        for day in shuffle(self.config.school_days):
            if daily_load[(cls.id, subject.id, day)] + length > MAX_SLOTS_PER_SUBJECT_PER_DAY:
                continue

            for start_index in range(len(grid)):
                if not checker.is_block_free(ResourceKind.CLASS, cls.id, day,
                                             start_index, length):
                    continue
                teacher = next(
                    (t for t in teachers
                     if checker.is_block_free(ResourceKind.TEACHER, t.id, day,
                                              start_index, length)),
                    None,
                )
                if teacher is None:
                    continue
                room = next(
                    (r for r in rooms
                     if checker.is_block_free(ResourceKind.ROOM, r.id, day,
                                              start_index, length)),
                    None,
                )
                if room is None:
                    continue

                checker.reserve_block(ResourceKind.CLASS, cls.id, day, start_index, length)
                checker.reserve_block(ResourceKind.TEACHER, teacher.id, day, start_index, length)
                checker.reserve_block(ResourceKind.ROOM, room.id, day, start_index, length)

                lesson = Lesson.create(
                    lesson_id=next_id,
                    name=f"{subject.name} - {cls.abbreviation}",
                    subject_id=subject.id,
                    class_id=cls.id,
                    teacher_id=teacher.id,
                    classroom_id=room.id,
                    day=day,
                    start_slot=grid.slots[start_index],
                    slot_count=length,
                    session_duration_minutes=grid.session_duration_minutes,
                    anchor_date=self.config.generation.anchor_date,
                )
                return lesson, None

        return None, "no_free_slot"
