"""Nachprüfung fertiger Stundenpläne.

Läuft unabhängig von Batch-Generator und Editor über die gespeicherte
Stundenliste und meldet jede Regelverletzung einzeln.
"""

from collections import Counter, defaultdict
from typing import Literal

from pydantic import BaseModel

from config.schema import parse_clock
from models.lesson import Lesson
from models.school_data import SchoolData
from solver.scheduler import MAX_SLOTS_PER_SUBJECT_PER_DAY
from solver.time_grid import TimeGrid


class ValidationViolation(BaseModel):
    """Ein Verstoß gegen eine Regel."""

    severity: Literal["error", "warning"]
    constraint: str      # Regelname, z.B. "room_capacity"
    description: str
    entity: str          # betroffene Klasse, Lehrkraft, Raum oder Stunden-ID


class ValidationReport(BaseModel):
    """Alle gefundenen Verstöße eines Prüflaufs."""

    violations: list[ValidationViolation]
    is_valid: bool       # nur Warnungen zählen nicht als ungültig

    @property
    def errors(self) -> list[ValidationViolation]:
        return [v for v in self.violations if v.severity == "error"]

    @property
    def warnings(self) -> list[ValidationViolation]:
        return [v for v in self.violations if v.severity == "warning"]

    def by_constraint(self, constraint: str) -> list[ValidationViolation]:
        return [v for v in self.violations if v.constraint == constraint]

    def print_rich(self) -> None:
        """Zusammenfassung je Regel, danach alle Verstöße (Fehler zuerst)."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()
        headline = (
            "[bold green]✓ Keine Regelverletzung[/bold green]"
            if self.is_valid
            else f"[bold red]✗ {len(self.errors)} Regelverletzung(en)[/bold red]"
        )
        counts = Counter(v.constraint for v in self.violations)
        per_rule = "  ".join(f"{name}: {n}" for name, n in sorted(counts.items()))
        body = headline + (f"\n[dim]{per_rule}[/dim]" if per_rule else "")
        console.print(Panel(body, title="Stundenplan-Prüfung", border_style="cyan"))

        if not self.violations:
            return

        table = Table(box=box.SIMPLE_HEAD)
        table.add_column("", width=2)
        table.add_column("Regel", style="bold")
        table.add_column("Betrifft")
        table.add_column("Details")
        for v in self.errors + self.warnings:
            marker = "[red]✗[/red]" if v.severity == "error" else "[yellow]![/yellow]"
            table.add_row(marker, v.constraint, v.entity, v.description)
        console.print(table)


class SolutionValidator:
    """Prüft eine Stundenliste gegen die Stammdaten."""

    def validate(self, lessons: list[Lesson], school_data: SchoolData) -> ValidationReport:
        """Alle Prüfungen über die komplette Stundenliste."""
        grid = TimeGrid.from_config(school_data.config)
        violations: list[ValidationViolation] = []

        occupied = self._expand_slots(lessons, grid, violations)
        violations.extend(self._check_double_booking(occupied))
        violations.extend(self._check_lunch_overlap(lessons, school_data))
        violations.extend(self._check_room_capacity(lessons, school_data))
        violations.extend(self._check_teacher_qualification(lessons, school_data))
        violations.extend(self._check_daily_subject_cap(lessons))
        violations.extend(self._check_demand_fulfillment(lessons, school_data))

        has_errors = any(v.severity == "error" for v in violations)
        return ValidationReport(violations=violations, is_valid=not has_errors)

    # ── Einzelne Prüfungen ────────────────────────────────────────────────────

    def _expand_slots(
        self, lessons: list[Lesson], grid: TimeGrid,
        violations: list[ValidationViolation],
    ) -> list[tuple[Lesson, str]]:
        """(Stunde, Slot) für jeden belegten Slot; Stunden außerhalb des Rasters
        werden als slot_off_grid gemeldet."""
        occupied: list[tuple[Lesson, str]] = []
        for lesson in lessons:
            labels = None
            if lesson.start_slot in grid:
                labels = grid.block_labels(grid.index_of(lesson.start_slot),
                                           lesson.slot_count)
            if labels is None:
                violations.append(ValidationViolation(
                    severity="error",
                    constraint="slot_off_grid",
                    entity=str(lesson.id),
                    description=(
                        f"{lesson.name}: {lesson.day.short_name} {lesson.start_slot} "
                        f"({lesson.slot_count} Slots) liegt nicht lückenlos im Zeitraster."
                    ),
                ))
                continue
            occupied.extend((lesson, slot) for slot in labels)
        return occupied

    def _check_double_booking(
        self, occupied: list[tuple[Lesson, str]]
    ) -> list[ValidationViolation]:
        """Keine Klasse, Lehrkraft oder kein Raum zweimal im selben Slot."""
        violations: list[ValidationViolation] = []
        axes = (
            ("class_double_booking", lambda l: l.class_id),
            ("teacher_double_booking", lambda l: l.teacher_id),
            ("room_double_booking", lambda l: l.classroom_id),
        )
        for constraint, key_of in axes:
            seen: dict[tuple, list[Lesson]] = defaultdict(list)
            for lesson, slot in occupied:
                seen[(key_of(lesson), lesson.day, slot)].append(lesson)
            for (entity, day, slot), entries in seen.items():
                if len(entries) > 1:
                    violations.append(ValidationViolation(
                        severity="error",
                        constraint=constraint,
                        entity=entity,
                        description=(
                            f"{day.short_name} {slot}: gleichzeitig "
                            f"{', '.join(l.name for l in entries)}."
                        ),
                    ))
        return violations

    def _check_lunch_overlap(
        self, lessons: list[Lesson], school_data: SchoolData
    ) -> list[ValidationViolation]:
        """Keine Stunde darf die Mittagspause schneiden."""
        config = school_data.config
        if not config.has_complete_day_frame:
            return []
        lunch_start = parse_clock(config.lunch_break_start).time()
        lunch_end = parse_clock(config.lunch_break_end).time()
        violations: list[ValidationViolation] = []
        for lesson in lessons:
            start, end = lesson.start_time.time(), lesson.end_time.time()
            if start < lunch_end and end > lunch_start:
                violations.append(ValidationViolation(
                    severity="error",
                    constraint="lunch_overlap",
                    entity=str(lesson.id),
                    description=(
                        f"{lesson.name} ({lesson.day.short_name} "
                        f"{start:%H:%M}–{end:%H:%M}) schneidet die Mittagspause."
                    ),
                ))
        return violations

    def _check_room_capacity(
        self, lessons: list[Lesson], school_data: SchoolData
    ) -> list[ValidationViolation]:
        """Der Raum muss mindestens so viele Plätze haben wie die Klasse Schüler."""
        violations: list[ValidationViolation] = []
        for lesson in lessons:
            room = school_data.get_classroom(lesson.classroom_id)
            cls = school_data.get_class(lesson.class_id)
            if room is None or cls is None:
                violations.append(ValidationViolation(
                    severity="error",
                    constraint="unknown_reference",
                    entity=str(lesson.id),
                    description=f"{lesson.name}: Raum oder Klasse unbekannt.",
                ))
                continue
            if not room.fits(cls.capacity):
                violations.append(ValidationViolation(
                    severity="error",
                    constraint="room_capacity",
                    entity=room.id,
                    description=(
                        f"{lesson.name}: {room.name} hat {room.capacity} Plätze, "
                        f"{cls.name} {cls.capacity} Schüler."
                    ),
                ))
        return violations

    def _check_teacher_qualification(
        self, lessons: list[Lesson], school_data: SchoolData
    ) -> list[ValidationViolation]:
        """Lehrkräfte unterrichten nur Fächer, für die sie qualifiziert sind."""
        violations: list[ValidationViolation] = []
        for lesson in lessons:
            teacher = school_data.get_teacher(lesson.teacher_id)
            if teacher is None or not teacher.can_teach(lesson.subject_id):
                violations.append(ValidationViolation(
                    severity="error",
                    constraint="teacher_qualification",
                    entity=lesson.teacher_id,
                    description=(
                        f"{lesson.name}: Lehrkraft {lesson.teacher_id} ist für "
                        f"Fach {lesson.subject_id} nicht qualifiziert."
                    ),
                ))
        return violations

    def _check_daily_subject_cap(self, lessons: list[Lesson]) -> list[ValidationViolation]:
        """Höchstens 2 Slots pro (Klasse, Fach, Tag)."""
        load: dict[tuple, int] = defaultdict(int)
        for lesson in lessons:
            load[(lesson.class_id, lesson.subject_id, lesson.day)] += lesson.slot_count

        violations: list[ValidationViolation] = []
        for (class_id, subject_id, day), slots in load.items():
            if slots > MAX_SLOTS_PER_SUBJECT_PER_DAY:
                violations.append(ValidationViolation(
                    severity="error",
                    constraint="daily_subject_cap",
                    entity=class_id,
                    description=(
                        f"{day.short_name}: Fach {subject_id} mit {slots} Slots "
                        f"(max. {MAX_SLOTS_PER_SUBJECT_PER_DAY})."
                    ),
                ))
        return violations

    def _check_demand_fulfillment(
        self, lessons: list[Lesson], school_data: SchoolData
    ) -> list[ValidationViolation]:
        """Vergleicht verplante Slots mit dem Wochenstunden-Soll (nur Warnungen)."""
        actual: dict[tuple, int] = defaultdict(int)
        for lesson in lessons:
            actual[(lesson.class_id, lesson.subject_id)] += lesson.slot_count

        violations: list[ValidationViolation] = []
        for cls in school_data.classes:
            for subject in school_data.subjects:
                got = actual.get((cls.id, subject.id), 0)
                if got < subject.weekly_hours:
                    violations.append(ValidationViolation(
                        severity="warning",
                        constraint="demand_shortfall",
                        entity=cls.id,
                        description=(
                            f"Fach {subject.name}: Soll {subject.weekly_hours}h, "
                            f"Ist {got}h (Differenz {got - subject.weekly_hours:+d}h)."
                        ),
                    ))
        return violations
