"""Exception hierarchy for the infinite sudoku core."""


class SudokuError(Exception):
    """Base exception for game failures."""


class CorruptionError(SudokuError):
    """Raised when persisted puzzle data does not match its dimensions."""


class EditRejected(SudokuError):
    """Raised when an edit targets an immutable given cell."""


class OutOfRange(SudokuError):
    """Raised by the canonical indexer for coordinates outside the board."""


class NoSolution(SudokuError):
    """Raised when the solver exhausts its search."""
