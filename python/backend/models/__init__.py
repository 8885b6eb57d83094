from backend.models.camera import CameraModel, Viewport
from backend.models.exceptions import (
    CorruptionError,
    EditRejected,
    NoSolution,
    OutOfRange,
    SudokuError,
)
from backend.models.savegame import SaveRecord, SaveSlot

__all__ = [
    "CameraModel",
    "CorruptionError",
    "EditRejected",
    "NoSolution",
    "OutOfRange",
    "SaveRecord",
    "SaveSlot",
    "SudokuError",
    "Viewport",
]
