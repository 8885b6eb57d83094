"""Owns the packed cell buffer of the game in progress."""

from __future__ import annotations

from typing import Callable

from backend.engine.gamegenerator import GameGenerator
from backend.engine.gamevalidator import is_solved, mark_errors
from backend.models.cell import board_length, cell_value, is_given, user_cell
from backend.models.exceptions import CorruptionError, EditRejected, OutOfRange
from backend.models.savegame import SaveRecord, SaveSlot
from backend.utils.logger import get_logger

LOGGER = get_logger(__name__)

Generator = Callable[[int, int, bool], bytearray]
Validator = Callable[[bytearray, int, int], bytearray]


class PuzzleStateStore:
    """Holds the board, validates edits, and persists accepted ones.

    The generator and validator are injected so the store never depends on
    how boards are produced or checked.
    """

    def __init__(
        self,
        generator: Generator = GameGenerator.generate,
        validator: Validator = mark_errors,
        slot: SaveSlot | None = None,
    ) -> None:
        self._generator = generator
        self._validator = validator
        self._slot = slot
        self.cells = bytearray()
        self.n = 0
        self.m = 0

    # -- lifecycle ------------------------------------------------------------

    def new_game(self, n: int, m: int, randomize: bool = True) -> None:
        if n < 1 or m < 1:
            raise ValueError(f"Board dimensions must be >= 1, got {n}x{m}.")
        self.cells = bytearray(self._generator(n, m, randomize))
        self.n, self.m = n, m

    def load(self, data: bytes, n: int, m: int) -> None:
        """Install a stored buffer after checking it fits the dimensions."""
        if n < 1 or m < 1:
            raise CorruptionError(f"Invalid stored dimensions {n}x{m}")
        expected = board_length(n, m)
        if len(data) != expected:
            raise CorruptionError(
                f"Stored board has {len(data)} cells, expected {expected} for {n}x{m}"
            )
        self.cells = bytearray(data)
        self.n, self.m = n, m

    def restore(self, record: SaveRecord) -> None:
        self.load(record.data, record.n, record.m)

    def serialize(self) -> SaveRecord:
        return SaveRecord(n=self.n, m=self.m, data=bytes(self.cells))

    # -- cells ----------------------------------------------------------------

    def read_value(self, index: int) -> int:
        return cell_value(self.cells[index])

    def write_user_value(self, index: int, value: int) -> None:
        """Write a player digit (0 clears) and re-validate the whole board.

        Raises :class:`OutOfRange` for an index off the board and
        :class:`EditRejected` for given cells; the board is then left
        untouched.
        """
        if not 0 <= value <= 9:
            raise ValueError(f"Cell value must be in 0..9, got {value}.")
        if not 0 <= index < len(self.cells):
            raise OutOfRange(f"Index {index} outside board of {len(self.cells)} cells")
        if is_given(self.cells[index]):
            raise EditRejected(f"Cell {index} holds a given digit")

        self.cells[index] = user_cell(value)
        self.cells = bytearray(self._validator(self.cells, self.n, self.m))
        if self._slot is not None:
            self._slot.save(self.serialize())

    # -- queries --------------------------------------------------------------

    @property
    def is_solved(self) -> bool:
        return bool(self.cells) and is_solved(self.cells, self.n, self.m)
