"""Datenmodell für ein Unterrichtsfach (Pydantic v2)."""

from pydantic import BaseModel, Field


class Subject(BaseModel):
    """Repräsentiert ein Unterrichtsfach mit seinem Wochenstunden-Soll."""

    id: str
    name: str
    weekly_hours: int = Field(ge=1)  # Stunden pro Klasse und Woche
