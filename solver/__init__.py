"""Solver-Modul (heuristischer Batch-Lauf + interaktiver Editor)."""

from .time_grid import TimeGrid, build_time_grid
from .demand import PlacementRequest, decompose_weekly_hours, build_placement_requests
from .occupancy import ConflictChecker, OccupancyKey, OccupancyLedger, ResourceKind
from .shuffle import Shuffler, seeded_shuffler
from .scheduler import (
    BatchScheduler,
    ConfigurationError,
    GenerationResult,
    UnplacedRequest,
    MAX_SLOTS_PER_SUBJECT_PER_DAY,
)
from .editor import (
    TimetableEditor,
    PlacementConflict,
    SlotOccupied,
    TeacherConflict,
    NoRoomAvailable,
)

__all__ = [
    "TimeGrid",
    "build_time_grid",
    "PlacementRequest",
    "decompose_weekly_hours",
    "build_placement_requests",
    "ConflictChecker",
    "OccupancyKey",
    "OccupancyLedger",
    "ResourceKind",
    "Shuffler",
    "seeded_shuffler",
    "BatchScheduler",
    "ConfigurationError",
    "GenerationResult",
    "UnplacedRequest",
    "MAX_SLOTS_PER_SUBJECT_PER_DAY",
    "TimetableEditor",
    "PlacementConflict",
    "SlotOccupied",
    "TeacherConflict",
    "NoRoomAvailable",
]
