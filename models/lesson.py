"""Datenmodell für eine geplante Unterrichtsstunde (Ausgabe des Solvers)."""

from datetime import date, datetime, timedelta

from pydantic import BaseModel, Field, model_validator

from config.schema import Weekday, parse_clock


class Lesson(BaseModel):
    """Eine Stunde im fertigen Stundenplan.

    Belegt `slot_count` aufeinanderfolgende Zeitslots ab `start_slot`.
    Start- und Endzeit liegen auf einem festen Referenzdatum; fachlich zählen
    nur Uhrzeit und Wochentag.
    """

    id: int
    name: str                 # "Mathematik - 5A"
    subject_id: str
    class_id: str
    teacher_id: str
    classroom_id: str
    day: Weekday
    start_time: datetime
    end_time: datetime
    slot_count: int = Field(1, ge=1)

    @model_validator(mode="after")
    def _check_order(self):
        if self.end_time <= self.start_time:
            raise ValueError(
                f"Stunde {self.id}: Ende ({self.end_time:%H:%M}) "
                f"nicht nach Beginn ({self.start_time:%H:%M})")
        return self

    @property
    def start_slot(self) -> str:
        """Slot-Bezeichner der ersten belegten Stunde ("HH:MM")."""
        return self.start_time.strftime("%H:%M")

    @classmethod
    def create(
        cls,
        lesson_id: int,
        name: str,
        subject_id: str,
        class_id: str,
        teacher_id: str,
        classroom_id: str,
        day: Weekday,
        start_slot: str,
        slot_count: int,
        session_duration_minutes: int,
        anchor_date: date,
    ) -> "Lesson":
        """Baut eine Stunde aus Slot-Bezeichner und Blocklänge."""
        clock = parse_clock(start_slot).time()
        start = datetime.combine(anchor_date, clock)
        end = start + timedelta(minutes=slot_count * session_duration_minutes)
        return cls(
            id=lesson_id,
            name=name,
            subject_id=subject_id,
            class_id=class_id,
            teacher_id=teacher_id,
            classroom_id=classroom_id,
            day=day,
            start_time=start,
            end_time=end,
            slot_count=slot_count,
        )
