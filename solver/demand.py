"""Bedarfszerlegung: Wochenstunden eines Fachs → Blöcke aus 1 oder 2 Slots."""

from typing import NamedTuple, Sequence

from models.school_class import SchoolClass
from models.subject import Subject

# Längster zulässiger Block (Doppelstunde)
MAX_BLOCK_LENGTH = 2


class PlacementRequest(NamedTuple):
    """Ein zu platzierender Block für (Klasse, Fach)."""

    class_id: str
    subject_id: str
    block_length: int


def decompose_weekly_hours(weekly_hours: int) -> list[int]:
    """Zerlegt Wochenstunden in Blocklängen, Doppelstunden zuerst.

    5 → [2, 2, 1], 4 → [2, 2], 1 → [1].
    """
    if weekly_hours < 0:
        raise ValueError(f"Wochenstunden dürfen nicht negativ sein: {weekly_hours}")
    blocks: list[int] = []
    remaining = weekly_hours
    while remaining >= MAX_BLOCK_LENGTH:
        blocks.append(MAX_BLOCK_LENGTH)
        remaining -= MAX_BLOCK_LENGTH
    if remaining == 1:
        blocks.append(1)
    return blocks


def build_placement_requests(
    classes: Sequence[SchoolClass], subjects: Sequence[Subject]
) -> list[PlacementRequest]:
    """Alle Blöcke für jedes (Klasse, Fach)-Paar, Klasse für Klasse."""
    return [
        PlacementRequest(cls.id, subject.id, block)
        for cls in classes
        for subject in subjects
        for block in decompose_weekly_hours(subject.weekly_hours)
    ]
