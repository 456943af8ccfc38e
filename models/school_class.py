"""Datenmodell für eine Schulklasse (Pydantic v2)."""

from pydantic import BaseModel, Field


class SchoolClass(BaseModel):
    """Repräsentiert eine Klasse (z.B. 5a) mit ihrer Schülerzahl."""

    id: str                       # "5A", "9C"
    name: str                     # Anzeigename, z.B. "Klasse 5a"
    abbreviation: str             # Kürzel für Stundenbezeichnungen
    capacity: int = Field(ge=1)   # Anzahl Schüler (bestimmt die Mindest-Raumgröße)
