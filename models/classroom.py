"""Datenmodell für einen Unterrichtsraum (Pydantic v2)."""

from pydantic import BaseModel, Field


class Classroom(BaseModel):
    """Repräsentiert einen Raum mit begrenzter Platzzahl."""

    id: str         # "R101", "HALLE"
    name: str       # "Raum 101"
    capacity: int = Field(ge=1)

    def fits(self, class_size: int) -> bool:
        """True wenn der Raum genug Plätze für die Klasse hat."""
        return self.capacity >= class_size
