"""Konfigurationsmanager: Tagesrahmen und Schultage als kommentierte YAML-Datei.

Geladen wird immer über SchoolConfig, damit jede Datei dieselben Prüfungen
durchläuft wie eine im Code gebaute Konfiguration.
"""

import json
from datetime import date
from pathlib import Path
from typing import Optional

from pydantic import ValidationError
from rich.console import Console
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from config.defaults import default_school_config
from config.schema import SchoolConfig

console = Console()
yaml = YAML()
yaml.default_flow_style = False
yaml.width = 120


# ─── YAML-KOMMENTARE ───

_YAML_HEADER = f"""\
# ============================================
# Stundenplan-Generator: Tagesrahmen
# Angelegt am {date.today().isoformat()}
# ============================================
"""

# Feld, vor dem der Abschnitt beginnt → (Überschrift, Erläuterung)
_SECTION_COMMENTS = {
    "start_time": (
        "Tagesrahmen",
        "Uhrzeiten im Format HH:MM. Stunden, die die Mittagspause berühren,\n"
        "werden nicht vergeben.",
    ),
    "school_days": (
        "Schultage",
        "MONDAY … SUNDAY (Groß- oder Kleinschreibung).",
    ),
    "generation": (
        "Generierung",
        "seed: gleicher Seed + gleiche Daten = gleicher Stundenplan.",
    ),
}


class ConfigManager:
    CONFIG_DIR = Path("config")
    DEFAULT_CONFIG = CONFIG_DIR / "school_config.yaml"

    def __init__(self, path: Optional[Path] = None) -> None:
        if path is not None:
            self.DEFAULT_CONFIG = Path(path)

    def first_run_check(self) -> bool:
        """True, solange noch keine Konfigurationsdatei angelegt wurde."""
        return not self.DEFAULT_CONFIG.exists()

    # ─── Laden ───

    def load(self, path: Optional[Path] = None) -> SchoolConfig:
        """Liest die YAML-Datei und validiert sie als SchoolConfig.

        Raises:
            FileNotFoundError: Datei fehlt.
            ValueError: Inhalt verletzt eine Regel der Konfiguration.
        """
        source = Path(path) if path else self.DEFAULT_CONFIG
        if not source.exists():
            raise FileNotFoundError(
                f"Keine Konfiguration unter {source}.\n"
                f"Mit 'python main.py setup' wird eine Standard-Datei angelegt."
            )
        with open(source, "r", encoding="utf-8") as f:
            raw = yaml.load(f)
        try:
            return SchoolConfig.model_validate(dict(raw or {}))
        except ValidationError as e:
            raise ValueError(f"Konfiguration {source} ist ungültig:\n{e}") from e

    def load_or_default(self) -> SchoolConfig:
        """Wie load(), liefert ohne Datei aber die Standard-Konfiguration."""
        if self.first_run_check():
            return default_school_config()
        return self.load()

    # ─── Speichern ───

    def save(self, config: SchoolConfig, path: Optional[Path] = None) -> Path:
        """Schreibt die Konfiguration samt Abschnitts-Kommentaren."""
        target = Path(path) if path else self.DEFAULT_CONFIG
        target.parent.mkdir(parents=True, exist_ok=True)

        with open(target, "w", encoding="utf-8") as f:
            f.write(_YAML_HEADER + "\n")
            yaml.dump(self._to_commented_map(config), f)

        console.print(f"[green]✓[/green] Konfiguration geschrieben: {target}")
        return target

    def _to_commented_map(self, config: SchoolConfig) -> CommentedMap:
        # Umweg über JSON: Enums und Datumswerte werden zu einfachen Strings
        cm = CommentedMap(json.loads(config.model_dump_json()))

        for key, (heading, text) in _SECTION_COMMENTS.items():
            if key in cm:
                cm.yaml_set_comment_before_after_key(
                    key, before=f"\n─── {heading} ───\n{text}")

        cm.yaml_add_eol_comment("Minuten", "session_duration_minutes")
        return cm
