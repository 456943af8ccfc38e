"""Datenmodell für eine Lehrkraft (Pydantic v2)."""

from pydantic import BaseModel, field_validator


class Teacher(BaseModel):
    """Repräsentiert eine einzelne Lehrkraft."""

    id: str
    name: str                     # Vorname
    surname: str                  # Nachname
    subject_ids: list[str] = []   # Fächer, für die die Lehrkraft qualifiziert ist

    @field_validator("subject_ids")
    @classmethod
    def dedupe_subjects(cls, v: list[str]) -> list[str]:
        return list(dict.fromkeys(v))

    @property
    def full_name(self) -> str:
        return f"{self.name} {self.surname}"

    def can_teach(self, subject_id: str) -> bool:
        return subject_id in self.subject_ids
