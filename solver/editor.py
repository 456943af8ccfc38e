"""Interaktives Bearbeiten eines fertigen Stundenplans.

Einzelne Stunden werden in eine Zelle (Klasse, Tag, Slot) gezogen oder in den
Papierkorb gelegt. Jede Operation ist eine einzelne, atomare Änderung der
Stundenliste: bei einem Konflikt bleibt die Liste unverändert.
"""

import logging
from typing import Iterable, Optional

from config.schema import Weekday
from models.lesson import Lesson
from models.school_data import SchoolData
from solver.occupancy import ConflictChecker, OccupancyLedger, ResourceKind, lesson_axes
from solver.time_grid import TimeGrid

logger = logging.getLogger(__name__)


class PlacementConflict(Exception):
    """Basisklasse: die Stunde kann an dieser Stelle nicht eingeplant werden."""

    title = "Konflikt bei der Planung"

    def __init__(self, message: str, day: Weekday, slot: str) -> None:
        super().__init__(message)
        self.day = day
        self.slot = slot


class SlotOccupied(PlacementConflict):
    """Die Klasse hat in dieser Zelle bereits eine Stunde."""

    title = "Slot belegt"


class TeacherConflict(PlacementConflict):
    """Die Lehrkraft unterrichtet zur selben Zeit bereits eine andere Klasse."""

    title = "Lehrkraft belegt"

    def __init__(self, message: str, day: Weekday, slot: str,
                 conflicting_lesson: Optional[Lesson] = None) -> None:
        super().__init__(message, day, slot)
        self.conflicting_lesson = conflicting_lesson


class NoRoomAvailable(PlacementConflict):
    """Zu diesem Zeitpunkt ist kein Raum mehr frei."""

    title = "Kein Raum frei"


class TimetableEditor:
    """Fügt einzelne Stunden hinzu oder entfernt sie.

    Der Editor arbeitet auf einer eigenen Kopie der Stundenliste und hält die
    Belegung inkrementell aktuell. Konflikte werden über dasselbe
    ConflictChecker-Protokoll geprüft wie im Batch-Lauf, und zwar über die
    gesamte Dauer vorhandener Stunden (eine Doppelstunde blockiert beide Slots).
    """

    def __init__(
        self,
        school_data: SchoolData,
        lessons: Iterable[Lesson] = (),
        checker: Optional[ConflictChecker] = None,
    ) -> None:
        self.data = school_data
        self.config = school_data.config
        self.grid = TimeGrid.from_config(self.config)
        self._lessons: list[Lesson] = list(lessons)
        if checker is None:
            ledger = OccupancyLedger.from_lessons(self.grid, self._lessons)
            for lesson in ledger.off_grid:
                logger.warning(
                    f"Stunde {lesson.id} ({lesson.name}, {lesson.day.short_name} "
                    f"{lesson.start_slot}) liegt nicht im aktuellen Zeitraster"
                )
            checker = ledger
        self._checker: ConflictChecker = checker

    @property
    def off_grid_lessons(self) -> list[Lesson]:
        """Stunden, deren Slots im aktuellen Zeitraster nicht existieren."""
        return [
            l for l in self._lessons
            if self.grid.span_of(l.start_slot, l.slot_count) is None
        ]

    @property
    def lessons(self) -> list[Lesson]:
        """Kopie der aktuellen Stundenliste."""
        return list(self._lessons)

    def __len__(self) -> int:
        return len(self._lessons)

    # ─── Entfernen ───

    def remove_lesson(self, lesson_id: int) -> Optional[Lesson]:
        """Entfernt eine Stunde. Unbekannte IDs ändern nichts und liefern None.

        Stunden außerhalb des aktuellen Rasters belegen nichts und werden nur
        aus der Liste genommen.
        """
        lesson = next((l for l in self._lessons if l.id == lesson_id), None)
        if lesson is None:
            logger.debug(f"Entfernen: Stunde {lesson_id} nicht vorhanden")
            return None

        if self.grid.span_of(lesson.start_slot, lesson.slot_count) is not None:
            start_index = self.grid.index_of(lesson.start_slot)
            for kind, resource_id in lesson_axes(lesson):
                self._checker.release_block(kind, resource_id, lesson.day,
                                            start_index, lesson.slot_count)
        self._lessons = [l for l in self._lessons if l.id != lesson_id]
        logger.info(f"Stunde entfernt: {lesson.name} ({lesson.day.short_name} {lesson.start_slot})")
        return lesson

    # ─── Hinzufügen ───

    def add_lesson(
        self,
        teacher_id: str,
        subject_id: str,
        class_id: str,
        day: Weekday,
        start_slot: str,
    ) -> Lesson:
        """Plant eine Einzelstunde in die Zelle (Klasse, Tag, Slot) ein.

        Prüfreihenfolge: Zelle der Klasse frei → Lehrkraft frei → ein Raum frei.
        Der erste freie Raum in Eingabereihenfolge wird vergeben.

        Raises:
            SlotOccupied, TeacherConflict, NoRoomAvailable: Planungskonflikt.
            ValueError: unbekannte IDs, inaktiver Tag, Slot nicht im Raster
                oder Lehrkraft nicht für das Fach qualifiziert.
        """
        day = Weekday(day)
        teacher = self.data.get_teacher(teacher_id)
        subject = self.data.get_subject(subject_id)
        school_class = self.data.get_class(class_id)
        if teacher is None:
            raise ValueError(f"Unbekannte Lehrkraft: {teacher_id}")
        if subject is None:
            raise ValueError(f"Unbekanntes Fach: {subject_id}")
        if school_class is None:
            raise ValueError(f"Unbekannte Klasse: {class_id}")
        if day not in self.config.school_days:
            raise ValueError(f"{day.value} ist kein Schultag")
        if start_slot not in self.grid:
            raise ValueError(f"Slot {start_slot} liegt nicht im Zeitraster")
        if not teacher.can_teach(subject.id):
            raise ValueError(
                f"{teacher.full_name} ist für {subject.name} nicht qualifiziert")

        checker = self._checker
        if not checker.is_free(ResourceKind.CLASS, school_class.id, day, start_slot):
            raise SlotOccupied(
                f"Diese Zelle ist für {school_class.name} bereits belegt.",
                day, start_slot,
            )

        if not checker.is_free(ResourceKind.TEACHER, teacher.id, day, start_slot):
            other = self._lesson_at(day, start_slot, teacher_id=teacher.id)
            other_class = self.data.get_class(other.class_id) if other else None
            raise TeacherConflict(
                f"{teacher.full_name} ist bereits mit der Klasse "
                f"{other_class.name if other_class else 'N/A'} belegt.",
                day, start_slot, conflicting_lesson=other,
            )

        room = next(
            (r for r in self.data.classrooms
             if checker.is_free(ResourceKind.ROOM, r.id, day, start_slot)),
            None,
        )
        if room is None:
            raise NoRoomAvailable(
                "Zu diesem Zeitpunkt ist kein Raum verfügbar.", day, start_slot)

        lesson = Lesson.create(
            lesson_id=max((l.id for l in self._lessons), default=0) + 1,
            name=f"{subject.name} - {school_class.abbreviation}",
            subject_id=subject.id,
            class_id=school_class.id,
            teacher_id=teacher.id,
            classroom_id=room.id,
            day=day,
            start_slot=start_slot,
            slot_count=1,
            session_duration_minutes=self.grid.session_duration_minutes,
            anchor_date=self.config.generation.anchor_date,
        )
        start_index = self.grid.index_of(start_slot)
        for kind, resource_id in lesson_axes(lesson):
            checker.reserve_block(kind, resource_id, day, start_index, 1)
        self._lessons.append(lesson)
        logger.info(
            f"Stunde hinzugefügt: {lesson.name} mit {teacher.full_name} "
            f"({day.short_name} {start_slot}, Raum {room.id})"
        )
        return lesson

    def _lesson_at(self, day: Weekday, slot: str, teacher_id: str) -> Optional[Lesson]:
        """Stunde der Lehrkraft, die den Slot an diesem Tag belegt."""
        for lesson in self._lessons:
            if lesson.teacher_id != teacher_id or lesson.day != day:
                continue
            span = self.grid.span_of(lesson.start_slot, lesson.slot_count)
            if span is not None and slot in span:
                return lesson
        return None
