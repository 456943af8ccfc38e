"""SchoolData: Vollständiger Schuldatensatz + Machbarkeits-Check (Pydantic v2)."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import BaseModel

from config.schema import SchoolConfig
from models.classroom import Classroom
from models.school_class import SchoolClass
from models.subject import Subject
from models.teacher import Teacher


class FeasibilityReport(BaseModel):
    """Vorab-Prüfung der Stammdaten vor einem Batch-Lauf."""

    is_feasible: bool
    errors: list[str]      # blockieren die Generierung
    warnings: list[str]    # Generierung läuft, bleibt aber lückenhaft

    def print_rich(self) -> None:
        from rich.console import Console
        from rich.panel import Panel

        console = Console()
        verdict = (
            "[bold green]✓ Generierung möglich[/bold green]"
            if self.is_feasible
            else "[bold red]✗ Generierung nicht möglich[/bold red]"
        )
        sections = [verdict]
        for heading, color, items in (
            ("Fehler", "red", self.errors),
            ("Warnungen", "yellow", self.warnings),
        ):
            if items:
                sections.append(f"\n[{color} bold]{heading} ({len(items)}):[/{color} bold]")
                sections.extend(f"  [{color}]– {item}[/{color}]" for item in items)

        console.print(Panel("\n".join(sections), title="Stammdaten-Prüfung",
                            border_style="cyan"))


class SchoolData(BaseModel):
    """Vollständiger Schuldatensatz: Klassen, Fächer, Lehrkräfte, Räume."""

    config: SchoolConfig
    classes: list[SchoolClass]
    subjects: list[Subject]
    teachers: list[Teacher]
    classrooms: list[Classroom]
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None
    data_version: str = "1.0"

    # ─── Lookups ───

    def get_class(self, class_id: str) -> Optional[SchoolClass]:
        return next((c for c in self.classes if c.id == class_id), None)

    def get_subject(self, subject_id: str) -> Optional[Subject]:
        return next((s for s in self.subjects if s.id == subject_id), None)

    def get_teacher(self, teacher_id: str) -> Optional[Teacher]:
        return next((t for t in self.teachers if t.id == teacher_id), None)

    def get_classroom(self, classroom_id: str) -> Optional[Classroom]:
        return next((r for r in self.classrooms if r.id == classroom_id), None)

    def qualified_teachers(self, subject_id: str) -> list[Teacher]:
        """Alle Lehrkräfte, die das Fach unterrichten dürfen (Eingabereihenfolge)."""
        return [t for t in self.teachers if t.can_teach(subject_id)]

    def suitable_classrooms(self, school_class: SchoolClass) -> list[Classroom]:
        """Alle Räume mit genug Plätzen für die Klasse (Eingabereihenfolge)."""
        return [r for r in self.classrooms if r.fits(school_class.capacity)]

    # ─── Übersicht ───

    def summary(self) -> str:
        """Kurze Übersicht über den Datensatz."""
        total_need = sum(s.weekly_hours for s in self.subjects) * len(self.classes)
        lines = [
            f"Schule: {self.config.school_name}",
            f"Klassen: {len(self.classes)}",
            f"Fächer: {len(self.subjects)}",
            f"Lehrkräfte: {len(self.teachers)}",
            f"Räume: {len(self.classrooms)}",
            f"Gesamtbedarf: {total_need}h/Woche",
            f"Schultage: {', '.join(d.short_name for d in self.config.school_days)}",
        ]
        return "\n".join(lines)

    # ─── Machbarkeits-Check ───

    def validate_feasibility(self) -> FeasibilityReport:
        """Prüft ob eine Generierung grundsätzlich sinnvoll ist.

        Prüfungen:
        1. Stammdaten vollständig (Name, Klassen, Fächer, Lehrkräfte, Räume)
        2. Zeitraster nicht leer
        3. Jede Lehrkraft hat mindestens ein Fach
        4. Jedes Fach hat mindestens eine Lehrkraft
        5. Jede Klasse passt in mindestens einen Raum
        6. Wochenbedarf pro Klasse ≤ verfügbare Slots
        """
        from solver.time_grid import TimeGrid
        from solver.scheduler import MAX_SLOTS_PER_SUBJECT_PER_DAY

        errors: list[str] = []
        warnings: list[str] = []

        # ── 1. Stammdaten ────────────────────────────────────────────────
        if not self.config.school_name.strip():
            errors.append("Der Name der Schule fehlt.")
        if not self.classes:
            errors.append("Keine Klassen konfiguriert.")
        if not self.subjects:
            errors.append("Keine Fächer konfiguriert.")
        if not self.teachers:
            errors.append("Keine Lehrkräfte konfiguriert.")
        if not self.classrooms:
            errors.append("Keine Räume konfiguriert.")
        if not self.config.school_days:
            errors.append("Keine Schultage konfiguriert.")

        for label, items in (
            ("Klassen", self.classes), ("Fächer", self.subjects),
            ("Lehrkräfte", self.teachers), ("Räume", self.classrooms),
        ):
            ids = [item.id for item in items]
            dupes = sorted({i for i in ids if ids.count(i) > 1})
            if dupes:
                errors.append(f"{label}: doppelte IDs {', '.join(dupes)}.")

        # ── 2. Zeitraster ────────────────────────────────────────────────
        grid = TimeGrid.from_config(self.config)
        if not grid:
            errors.append(
                "Zeitraster leer: Beginn, Ende, Mittagspause oder Stundenlänge "
                "fehlen oder lassen keine Stunde zu."
            )

        # ── 3. Lehrkräfte ohne Fach ──────────────────────────────────────
        unassigned = [t for t in self.teachers if not t.subject_ids]
        if unassigned:
            errors.append(
                f"{len(unassigned)} Lehrkraft/Lehrkräfte ohne Fach: "
                f"{', '.join(t.full_name for t in unassigned)}."
            )

        subject_ids = {s.id for s in self.subjects}
        for teacher in self.teachers:
            unknown = [sid for sid in teacher.subject_ids if sid not in subject_ids]
            if unknown:
                warnings.append(
                    f"Lehrkraft {teacher.full_name}: unbekannte Fächer "
                    f"{', '.join(unknown)} werden ignoriert."
                )

        # ── 4. Fächer ohne Lehrkraft ─────────────────────────────────────
        untaught = [s for s in self.subjects if not self.qualified_teachers(s.id)]
        if untaught:
            warnings.append(
                f"{len(untaught)} Fach/Fächer ohne Lehrkraft: "
                f"{', '.join(s.name for s in untaught)} – bleiben unverplant."
            )

        days = len(self.config.school_days)
        for subject in self.subjects:
            if subject.weekly_hours > MAX_SLOTS_PER_SUBJECT_PER_DAY * days:
                warnings.append(
                    f"Fach '{subject.name}': {subject.weekly_hours}h/Woche bei max. "
                    f"{MAX_SLOTS_PER_SUBJECT_PER_DAY}h pro Tag und {days} Tagen "
                    f"nicht vollständig verplanbar."
                )

        # ── 5. Raumgröße ─────────────────────────────────────────────────
        if self.classrooms:
            for cls in self.classes:
                if not self.suitable_classrooms(cls):
                    warnings.append(
                        f"{cls.name} ({cls.capacity} Schüler): "
                        f"kein ausreichend großer Raum vorhanden."
                    )

        # ── 6. Wochenbedarf pro Klasse ───────────────────────────────────
        supply = len(grid) * days
        need = sum(s.weekly_hours for s in self.subjects)
        if grid and need > supply:
            warnings.append(
                f"Wochenbedarf pro Klasse ({need}h) übersteigt die verfügbaren "
                f"Slots ({supply} = {len(grid)} Stunden × {days} Tage)."
            )

        return FeasibilityReport(
            is_feasible=len(errors) == 0,
            errors=errors,
            warnings=warnings,
        )

    # ─── Persistenz ────────────────────────────────────────────────────────

    def save_json(self, path: Path) -> None:
        """Speichert den kompletten Datensatz als JSON-Datei."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        now = datetime.now(timezone.utc)
        updated = self.model_copy(update={
            "modified_at": now,
            "created_at": self.created_at or now,
        })
        with open(path, "w", encoding="utf-8") as f:
            f.write(updated.model_dump_json(indent=2))

    @classmethod
    def load_json(cls, path: Path) -> "SchoolData":
        """Lädt einen Datensatz aus einer JSON-Datei."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"JSON-Datei nicht gefunden: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return cls.model_validate_json(f.read())
