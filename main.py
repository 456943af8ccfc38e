"""Stundenplan-Generator: Haupt-CLI.

Verwendung:
  python main.py setup                         Standard-Konfiguration anlegen
  python main.py config show                   Konfiguration + Zeitraster anzeigen
  python main.py demo                          Demo-Stammdaten erzeugen (JSON)
  python main.py validate                      Machbarkeits-Check
  python main.py generate                      Stundenplan berechnen (Batch)
  python main.py show --class 5A               Stundenplan einer Klasse
  python main.py show --teacher L01            Stundenplan einer Lehrkraft
  python main.py add L01 MAT 5A monday 08:00   Einzelstunde einplanen
  python main.py remove 17                     Stunde entfernen
  python main.py check                         Stundenplan validieren
"""

import logging
import sys
from pathlib import Path
from typing import Callable, Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich import box

console = Console()

# Standard-Pfade für Stammdaten und Stundenplan
DEFAULT_DATA_JSON = Path("output/school_data.json")
DEFAULT_TIMETABLE_JSON = Path("output/timetable.json")


def _load_config_or_default():
    """Lädt die Konfiguration, sonst die Standard-Konfiguration."""
    from config.manager import ConfigManager
    mgr = ConfigManager()
    if mgr.first_run_check():
        console.print(
            "[yellow]Keine Konfiguration gefunden – verwende Standardwerte.[/yellow]\n"
            "Mit [bold]python main.py setup[/bold] lässt sie sich anlegen."
        )
    try:
        return mgr.load_or_default()
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)


def _load_data_or_abort(json_path: str):
    """Lädt die Stammdaten oder bricht mit Fehlermeldung ab."""
    from models.school_data import SchoolData
    p = Path(json_path)
    if not p.exists():
        console.print(
            f"[red]Keine Datendatei gefunden: {p}[/red]\n"
            "Verwenden Sie zunächst [bold]python main.py demo[/bold]."
        )
        sys.exit(1)
    return SchoolData.load_json(p)


def _load_timetable_or_abort(timetable_path: str):
    """Lädt den gespeicherten Stundenplan oder bricht ab."""
    from solver.scheduler import GenerationResult
    p = Path(timetable_path)
    if not p.exists():
        console.print(
            f"[red]Kein Stundenplan gefunden: {p}[/red]\n"
            "Verwenden Sie zunächst [bold]python main.py generate[/bold]."
        )
        sys.exit(1)
    return GenerationResult.load_json(p)


# ─── SETUP ────────────────────────────────────────────────────────────────────

@click.command("setup")
def cmd_setup():
    """Legt die Standard-Schulkonfiguration als YAML an."""
    from config.manager import ConfigManager
    from config.defaults import default_school_config

    mgr = ConfigManager()
    if not mgr.first_run_check():
        console.print(
            "[yellow]Eine Konfiguration existiert bereits:[/yellow] "
            f"{mgr.DEFAULT_CONFIG}"
        )
        if not click.confirm("Mit Standardwerten überschreiben?", default=False):
            return

    mgr.save(default_school_config())
    console.print("Passen Sie die Datei an und führen Sie dann "
                  "[bold]python main.py demo[/bold] aus.")


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Konfiguration anzeigen."""


@cmd_config.command("show")
def config_show():
    """Zeigt die aktuelle Konfiguration und das daraus berechnete Zeitraster."""
    from solver.time_grid import TimeGrid

    config = _load_config_or_default()
    console.print(Panel(
        f"[bold]{config.school_name}[/bold]  |  "
        f"{config.start_time}–{config.end_time}  |  "
        f"Mittag {config.lunch_break_start}–{config.lunch_break_end}  |  "
        f"{config.session_duration_minutes} min",
        title="Schulkonfiguration",
        border_style="cyan",
    ))

    grid = TimeGrid.from_config(config)
    table = Table(title="Zeitraster", box=box.ROUNDED)
    table.add_column("Std.")
    table.add_column("Beginn")
    table.add_column("Ende")
    for i, slot in enumerate(grid, start=1):
        table.add_row(str(i), slot, grid.end_of(slot))
    console.print(table)
    console.print(
        f"[bold]Schultage:[/bold] "
        f"{', '.join(d.short_name for d in config.school_days)} | "
        f"[bold]Seed:[/bold] {config.generation.seed}"
    )


# ─── DEMO ─────────────────────────────────────────────────────────────────────

@click.command("demo")
@click.option("--seed", default=42, help="Zufalls-Seed für reproduzierbare Daten.")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON),
              help="Pfad für die Stammdaten (JSON).")
def cmd_demo(seed: int, json_path: str):
    """Erzeugt Demo-Stammdaten (Klassen, Fächer, Lehrkräfte, Räume)."""
    from data.fake_data import FakeDataGenerator

    config = _load_config_or_default()
    gen = FakeDataGenerator(config, seed=seed)
    data = gen.generate()
    gen.print_summary(data)
    console.print(f"\n[dim]{data.summary()}[/dim]")

    data.validate_feasibility().print_rich()

    out_path = Path(json_path)
    data.save_json(out_path)
    console.print(f"[green]✓[/green] Stammdaten gespeichert: {out_path}")


# ─── VALIDATE ─────────────────────────────────────────────────────────────────

@click.command("validate")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON),
              help="Pfad zur Stammdaten-Datei.")
def cmd_validate(json_path: str):
    """Führt einen Machbarkeits-Check auf den Stammdaten durch."""
    data = _load_data_or_abort(json_path)
    console.print(f"\n{data.summary()}\n")
    report = data.validate_feasibility()
    report.print_rich()
    sys.exit(0 if report.is_feasible else 1)


# ─── GENERATE ─────────────────────────────────────────────────────────────────

@click.command("generate")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON),
              help="Pfad zur Stammdaten-Datei.")
@click.option("--output", "-o", default=str(DEFAULT_TIMETABLE_JSON),
              help="Pfad für den Stundenplan (JSON, ersetzt den bisherigen).")
@click.option("--seed", type=int, default=None,
              help="Seed überschreiben (Standard: aus der Konfiguration).")
def cmd_generate(json_path: str, output: str, seed: Optional[int]):
    """Berechnet den kompletten Stundenplan neu (Batch-Heuristik)."""
    from solver.scheduler import BatchScheduler, ConfigurationError

    data = _load_data_or_abort(json_path)
    report = data.validate_feasibility()
    if not report.is_feasible:
        report.print_rich()
        sys.exit(1)

    try:
        result = BatchScheduler(data, seed=seed).generate()
    except ConfigurationError as e:
        console.print(f"[red bold]Konfigurationsfehler:[/red bold] {e}")
        sys.exit(1)

    result.print_rich(data)
    out_path = Path(output)
    result.save_json(out_path)
    console.print(f"[green]✓[/green] Stundenplan gespeichert: {out_path}")


# ─── SHOW ─────────────────────────────────────────────────────────────────────

def _render_week(
    title: str, lessons, result, cell: Callable,
) -> Table:
    """Wochentabelle: Zeilen = Slots, Spalten = Schultage.

    Doppelstunden erscheinen in jedem belegten Slot.
    """
    slot_index = {slot: i for i, slot in enumerate(result.time_grid)}
    by_cell: dict = {}
    for lesson in lessons:
        start = slot_index.get(lesson.start_slot)
        if start is None:
            continue
        for offset in range(lesson.slot_count):
            if start + offset < len(result.time_grid):
                by_cell[(lesson.day, result.time_grid[start + offset])] = lesson

    table = Table(title=title, box=box.ROUNDED, show_lines=True)
    table.add_column("Zeit", style="bold")
    for day in result.school_days:
        table.add_column(day.short_name)
    for slot in result.time_grid:
        row = [slot]
        for day in result.school_days:
            lesson = by_cell.get((day, slot))
            row.append(cell(lesson) if lesson else "·")
        table.add_row(*row)
    return table


@click.command("show")
@click.option("--class", "class_id", default=None, help="Klassen-ID (z.B. 5A).")
@click.option("--teacher", "teacher_id", default=None, help="Lehrkraft-ID (z.B. L01).")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON),
              help="Pfad zur Stammdaten-Datei.")
@click.option("--timetable", default=str(DEFAULT_TIMETABLE_JSON),
              help="Pfad zum Stundenplan.")
def cmd_show(class_id: Optional[str], teacher_id: Optional[str],
             json_path: str, timetable: str):
    """Zeigt den Stundenplan einer Klasse oder einer Lehrkraft."""
    data = _load_data_or_abort(json_path)
    result = _load_timetable_or_abort(timetable)
    subject_names = {s.id: s.name for s in data.subjects}

    if teacher_id:
        teacher = data.get_teacher(teacher_id)
        if teacher is None:
            console.print(f"[red]Unbekannte Lehrkraft: {teacher_id}[/red]")
            sys.exit(1)
        table = _render_week(
            f"Stundenplan {teacher.full_name}",
            result.get_teacher_schedule(teacher.id), result,
            lambda l: f"{subject_names.get(l.subject_id, l.subject_id)}\n"
                      f"{l.class_id} · {l.classroom_id}",
        )
        console.print(table)
        return

    classes = data.classes
    if class_id:
        cls = data.get_class(class_id)
        if cls is None:
            console.print(f"[red]Unbekannte Klasse: {class_id}[/red]")
            sys.exit(1)
        classes = [cls]
    for cls in classes:
        table = _render_week(
            f"Stundenplan {cls.name}",
            result.get_class_schedule(cls.id), result,
            lambda l: f"{subject_names.get(l.subject_id, l.subject_id)}\n"
                      f"{l.teacher_id} · {l.classroom_id}",
        )
        console.print(table)


# ─── ADD / REMOVE ─────────────────────────────────────────────────────────────

def _open_editor(data, result):
    """Editor über dem gespeicherten Stundenplan.

    Stunden außerhalb des aktuellen Zeitrasters (z.B. nach geänderter
    Stundenlänge) werden gemeldet, blockieren aber nichts.
    """
    from solver.editor import TimetableEditor
    try:
        editor = TimetableEditor(data, result.lessons)
    except ValueError as e:
        console.print(f"[red]Stundenplan passt nicht zu den Stammdaten: {e}[/red]")
        sys.exit(1)
    off_grid = editor.off_grid_lessons
    if off_grid:
        console.print(
            f"[yellow]{len(off_grid)} Stunde(n) außerhalb des Zeitrasters "
            f"(IDs {', '.join(str(l.id) for l in off_grid)}). "
            "Neu berechnen mit [bold]python main.py generate[/bold].[/yellow]"
        )
    return editor


@click.command("add")
@click.argument("teacher_id")
@click.argument("subject_id")
@click.argument("class_id")
@click.argument("day")
@click.argument("slot")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON),
              help="Pfad zur Stammdaten-Datei.")
@click.option("--timetable", default=str(DEFAULT_TIMETABLE_JSON),
              help="Pfad zum Stundenplan.")
def cmd_add(teacher_id: str, subject_id: str, class_id: str, day: str, slot: str,
            json_path: str, timetable: str):
    """Plant eine Einzelstunde in eine Zelle (Klasse, Tag, Slot) ein."""
    from config.schema import Weekday
    from solver.editor import PlacementConflict

    data = _load_data_or_abort(json_path)
    result = _load_timetable_or_abort(timetable)
    editor = _open_editor(data, result)

    try:
        lesson = editor.add_lesson(teacher_id, subject_id, class_id,
                                   Weekday(day.upper()), slot)
    except PlacementConflict as e:
        console.print(f"[red bold]{e.title}:[/red bold] {e}")
        sys.exit(1)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    result.model_copy(update={"lessons": editor.lessons}).save_json(Path(timetable))
    console.print(
        f"[green]✓[/green] Stunde hinzugefügt: {lesson.name} "
        f"({lesson.day.short_name} {lesson.start_slot}, Raum {lesson.classroom_id})"
    )


@click.command("remove")
@click.argument("lesson_id", type=int)
@click.option("--json-path", default=str(DEFAULT_DATA_JSON),
              help="Pfad zur Stammdaten-Datei.")
@click.option("--timetable", default=str(DEFAULT_TIMETABLE_JSON),
              help="Pfad zum Stundenplan.")
def cmd_remove(lesson_id: int, json_path: str, timetable: str):
    """Entfernt eine Stunde aus dem Stundenplan."""
    data = _load_data_or_abort(json_path)
    result = _load_timetable_or_abort(timetable)
    editor = _open_editor(data, result)

    removed = editor.remove_lesson(lesson_id)
    if removed is None:
        console.print(f"[yellow]Keine Stunde mit ID {lesson_id} vorhanden.[/yellow]")
        return

    result.model_copy(update={"lessons": editor.lessons}).save_json(Path(timetable))
    console.print(f"[green]✓[/green] Stunde entfernt: {removed.name}")


# ─── CHECK ────────────────────────────────────────────────────────────────────

@click.command("check")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON),
              help="Pfad zur Stammdaten-Datei.")
@click.option("--timetable", default=str(DEFAULT_TIMETABLE_JSON),
              help="Pfad zum Stundenplan.")
def cmd_check(json_path: str, timetable: str):
    """Prüft den gespeicherten Stundenplan auf Constraint-Verletzungen."""
    from analysis.solution_validator import SolutionValidator

    data = _load_data_or_abort(json_path)
    result = _load_timetable_or_abort(timetable)
    report = SolutionValidator().validate(result.lessons, data)
    report.print_rich()
    sys.exit(0 if report.is_valid else 1)


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False,
              help="Ausführliche Log-Ausgabe.")
def cli(verbose: bool):
    """Stundenplan-Generator: Wochenraster, Batch-Heuristik, manuelle Korrektur.

    Starten Sie mit: python main.py demo
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def main():
    """Einstiegspunkt."""
    cli()


# Befehle registrieren
cli.add_command(cmd_setup)
cli.add_command(cmd_config)
cli.add_command(cmd_demo)
cli.add_command(cmd_validate)
cli.add_command(cmd_generate)
cli.add_command(cmd_show)
cli.add_command(cmd_add)
cli.add_command(cmd_remove)
cli.add_command(cmd_check)


if __name__ == "__main__":
    main()
