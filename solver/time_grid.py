"""Tagesraster: Aus Tagesrahmen, Stundenlänge und Mittagspause werden Slots.

Das Raster ist eine einzige Tagesvorlage, die für jeden Schultag gleich gilt.
Ein Slot wird über seine Startzeit ("HH:MM") identifiziert.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterator, Optional

from config.schema import SchoolConfig, parse_clock


@dataclass(frozen=True)
class TimeGrid:
    """Geordnete Slot-Startzeiten eines Schultags.

    Immutable (frozen=True), damit ein Raster gefahrlos zwischen Solver,
    Editor und Validierung geteilt werden kann.
    """

    slots: tuple[str, ...]
    session_duration_minutes: int

    @classmethod
    def from_config(cls, config: SchoolConfig) -> "TimeGrid":
        return build_time_grid(
            config.start_time,
            config.end_time,
            config.session_duration_minutes,
            config.lunch_break_start,
            config.lunch_break_end,
        )

    def __len__(self) -> int:
        return len(self.slots)

    def __iter__(self) -> Iterator[str]:
        return iter(self.slots)

    def __contains__(self, label: object) -> bool:
        return label in self.slots

    def index_of(self, label: str) -> int:
        """Index eines Slots. ValueError wenn der Slot nicht im Raster liegt."""
        try:
            return self.slots.index(label)
        except ValueError:
            raise ValueError(f"Slot {label} liegt nicht im Zeitraster") from None

    def block_labels(self, start_index: int, length: int) -> Optional[tuple[str, ...]]:
        """Slots eines Blocks ab start_index, oder None wenn er nicht passt.

        Ein Block passt nur, wenn er vor Tagesende endet und lückenlos ist:
        jeder Folgeslot beginnt genau eine Stundenlänge nach seinem Vorgänger.
        Damit kann kein Block über die Mittagspause reichen.
        """
        if length < 1 or start_index < 0 or start_index + length > len(self.slots):
            return None
        labels = self.slots[start_index:start_index + length]
        step = timedelta(minutes=self.session_duration_minutes)
        for prev, nxt in zip(labels, labels[1:]):
            if parse_clock(nxt) - parse_clock(prev) != step:
                return None
        return labels

    def span_of(self, label: str, length: int) -> Optional[tuple[str, ...]]:
        """Wie block_labels, aber ab einem Slot-Bezeichner.

        None, wenn der Slot nicht im Raster liegt, etwa bei Stunden aus einem
        Lauf mit anderer Stundenlänge.
        """
        if label not in self.slots:
            return None
        return self.block_labels(self.slots.index(label), length)

    def end_of(self, label: str, length: int = 1) -> str:
        """Endzeit ("HH:MM") eines Blocks ab label."""
        end = parse_clock(label) + timedelta(
            minutes=length * self.session_duration_minutes)
        return end.strftime("%H:%M")


def _overlaps_lunch(
    slot_start: datetime, slot_end: datetime,
    lunch_start: datetime, lunch_end: datetime,
) -> bool:
    starts_during = lunch_start <= slot_start < lunch_end
    ends_during = lunch_start < slot_end <= lunch_end
    spans = slot_start <= lunch_start and slot_end >= lunch_end
    return starts_during or ends_during or spans


def build_time_grid(
    start_time: Optional[str],
    end_time: Optional[str],
    session_duration_minutes: Optional[int],
    lunch_break_start: Optional[str],
    lunch_break_end: Optional[str],
) -> TimeGrid:
    """Erzeugt die Slot-Startzeiten eines Tages.

    Ablauf: Ab Unterrichtsbeginn wird jeweils ein Kandidat
    [cursor, cursor + Dauer) gebildet. Endet er nach Unterrichtsende, ist der
    Tag voll. Berührt er die Mittagspause (beginnt darin, endet darin oder
    umschließt sie), springt der Cursor ohne Slot auf das Pausenende.
    Sonst wird cursor als Slot ausgegeben und um die Dauer verschoben.

    Fehlt eine der vier Uhrzeiten oder ist die Dauer ≤ 0, ist das Raster leer.
    """
    duration_minutes = session_duration_minutes or 0
    if (not start_time or not end_time or not lunch_break_start
            or not lunch_break_end or duration_minutes <= 0):
        return TimeGrid(slots=(), session_duration_minutes=max(duration_minutes, 0))

    cursor = parse_clock(start_time)
    end = parse_clock(end_time)
    lunch_start = parse_clock(lunch_break_start)
    lunch_end = parse_clock(lunch_break_end)
    # Eine Pause ohne Dauer sperrt nichts
    has_lunch = lunch_start < lunch_end
    duration = timedelta(minutes=duration_minutes)

    slots: list[str] = []
    while True:
        slot_end = cursor + duration
        if slot_end > end:
            break
        if has_lunch and _overlaps_lunch(cursor, slot_end, lunch_start, lunch_end):
            cursor = lunch_end
            continue
        slots.append(cursor.strftime("%H:%M"))
        cursor = slot_end

    return TimeGrid(slots=tuple(slots), session_duration_minutes=duration_minutes)
