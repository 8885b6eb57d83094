"""Error flagging across overlapping sudokus."""

from __future__ import annotations

from backend.engine.gamegenerator import GameGenerator
from backend.engine.gamevalidator import is_solved, mark_errors
from backend.engine.tiling import GridLayout
from backend.models.cell import ERROR_FLAG, USER_FLAG, cell_value, is_error


def _flagged(board: bytes | bytearray) -> set[int]:
    return {i for i, b in enumerate(board) if is_error(b)}


def test_solved_board_has_no_errors() -> None:
    board = GameGenerator.solved(2, 2)

    assert _flagged(mark_errors(board, 2, 2)) == set()


def test_duplicate_in_row_flags_both_cells() -> None:
    layout = GridLayout(1, 1)
    board = bytearray(layout.size)
    a = layout.cell_index(0, 0, 0, 4)
    b = layout.cell_index(0, 0, 7, 4)
    board[a] = 5 | USER_FLAG
    board[b] = 5

    marked = mark_errors(board, 1, 1)

    assert _flagged(marked) == {a, b}
    assert cell_value(marked[a]) == 5 and marked[a] & USER_FLAG


def test_stale_flags_are_cleared() -> None:
    board = bytearray(GameGenerator.solved(1, 1))
    board[10] |= ERROR_FLAG

    assert _flagged(mark_errors(board, 1, 1)) == set()


def test_clash_through_a_borrowed_block_is_seen() -> None:
    layout = GridLayout(2, 2)
    board = bytearray(layout.size)
    # top-left block of (0, 0) is stored as the bottom-right block of (0, 1)
    shared = layout.cell_index(0, 0, 0, 0)
    assert shared == layout.cell_index(0, 1, 6, 6)
    other = layout.cell_index(0, 0, 5, 0)
    board[shared] = 4
    board[other] = 4

    assert _flagged(mark_errors(board, 2, 2)) == {shared, other}


def test_is_solved_rejects_gaps_and_clashes() -> None:
    board = bytearray(GameGenerator.solved(1, 1))
    assert is_solved(board, 1, 1)

    gap = bytearray(board)
    gap[0] = 0
    assert not is_solved(gap, 1, 1)

    clash = bytearray(board)
    clash[0], clash[1] = clash[1], clash[1]
    assert not is_solved(clash, 1, 1)
