"""Belegungsbuch: welche Klasse, Lehrkraft und welcher Raum wann belegt ist.

Ein Eintrag (Ressourcenart, Ressourcen-ID, Tag, Slot) bedeutet "belegt".
Batch-Solver und interaktiver Editor prüfen Konflikte ausschließlich über das
ConflictChecker-Protokoll.
"""

from enum import Enum
from typing import Iterable, NamedTuple, Protocol

from config.schema import Weekday
from models.lesson import Lesson
from solver.time_grid import TimeGrid


class ResourceKind(str, Enum):
    CLASS = "class"
    TEACHER = "teacher"
    ROOM = "room"


class OccupancyKey(NamedTuple):
    kind: ResourceKind
    resource_id: str
    day: Weekday
    slot: str


class ConflictChecker(Protocol):
    """Belegungsprüfung über die drei Achsen Klasse, Lehrkraft, Raum."""

    def is_free(self, kind: ResourceKind, resource_id: str,
                day: Weekday, slot: str) -> bool: ...

    def reserve(self, kind: ResourceKind, resource_id: str,
                day: Weekday, slot: str) -> None: ...

    def release(self, kind: ResourceKind, resource_id: str,
                day: Weekday, slot: str) -> None: ...

    def is_block_free(self, kind: ResourceKind, resource_id: str,
                      day: Weekday, start_index: int, block_length: int) -> bool: ...

    def reserve_block(self, kind: ResourceKind, resource_id: str,
                      day: Weekday, start_index: int, block_length: int) -> None: ...

    def release_block(self, kind: ResourceKind, resource_id: str,
                      day: Weekday, start_index: int, block_length: int) -> None: ...


class OccupancyLedger:
    """Mengenbasierte Belegung für einen Lauf bzw. eine Editier-Sitzung.

    Es gibt keine Verdrängung: Einträge bleiben bis zum Ende des Laufs.
    Für jeden neuen Batch-Lauf wird ein frisches Ledger gebaut.
    """

    def __init__(self, grid: TimeGrid) -> None:
        self.grid = grid
        self._busy: set[OccupancyKey] = set()
        # Stunden, die beim Aufbau nicht ins Raster passten (nicht belegt)
        self.off_grid: list[Lesson] = []

    @classmethod
    def from_lessons(cls, grid: TimeGrid, lessons: Iterable[Lesson]) -> "OccupancyLedger":
        """Baut die Belegung aus einer vorhandenen Stundenliste neu auf.

        Stunden außerhalb des Rasters werden nicht belegt, sondern in
        `off_grid` gesammelt.
        """
        ledger = cls(grid)
        for lesson in lessons:
            if grid.span_of(lesson.start_slot, lesson.slot_count) is None:
                ledger.off_grid.append(lesson)
                continue
            ledger.reserve_lesson(lesson)
        return ledger

    # ─── Einzelslots ───

    def is_free(self, kind: ResourceKind, resource_id: str,
                day: Weekday, slot: str) -> bool:
        return OccupancyKey(kind, resource_id, day, slot) not in self._busy

    def reserve(self, kind: ResourceKind, resource_id: str,
                day: Weekday, slot: str) -> None:
        self._busy.add(OccupancyKey(kind, resource_id, day, slot))

    def release(self, kind: ResourceKind, resource_id: str,
                day: Weekday, slot: str) -> None:
        self._busy.discard(OccupancyKey(kind, resource_id, day, slot))

    # ─── Blöcke ───

    def is_block_free(self, kind: ResourceKind, resource_id: str,
                      day: Weekday, start_index: int, block_length: int) -> bool:
        """True wenn alle Slots des Blocks frei sind und der Block ins Raster passt."""
        labels = self.grid.block_labels(start_index, block_length)
        if labels is None:
            return False
        return all(self.is_free(kind, resource_id, day, slot) for slot in labels)

    def reserve_block(self, kind: ResourceKind, resource_id: str,
                      day: Weekday, start_index: int, block_length: int) -> None:
        for slot in self._require_block(start_index, block_length):
            self.reserve(kind, resource_id, day, slot)

    def release_block(self, kind: ResourceKind, resource_id: str,
                      day: Weekday, start_index: int, block_length: int) -> None:
        for slot in self._require_block(start_index, block_length):
            self.release(kind, resource_id, day, slot)

    # ─── Stunden (alle drei Achsen) ───

    def reserve_lesson(self, lesson: Lesson) -> None:
        for kind, resource_id in lesson_axes(lesson):
            self.reserve_block(kind, resource_id, lesson.day,
                               self.grid.index_of(lesson.start_slot),
                               lesson.slot_count)

    def release_lesson(self, lesson: Lesson) -> None:
        for kind, resource_id in lesson_axes(lesson):
            self.release_block(kind, resource_id, lesson.day,
                               self.grid.index_of(lesson.start_slot),
                               lesson.slot_count)

    def _require_block(self, start_index: int, block_length: int) -> tuple[str, ...]:
        labels = self.grid.block_labels(start_index, block_length)
        if labels is None:
            raise ValueError(
                f"Block ab Index {start_index} mit Länge {block_length} "
                f"passt nicht ins Zeitraster")
        return labels

    def __len__(self) -> int:
        return len(self._busy)

    def __contains__(self, key: object) -> bool:
        return key in self._busy


def lesson_axes(lesson: Lesson) -> tuple[tuple[ResourceKind, str], ...]:
    return (
        (ResourceKind.CLASS, lesson.class_id),
        (ResourceKind.TEACHER, lesson.teacher_id),
        (ResourceKind.ROOM, lesson.classroom_id),
    )
