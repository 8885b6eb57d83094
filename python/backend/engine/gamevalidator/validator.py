"""Constraint checks over the whole interlocking board."""

from __future__ import annotations

from collections import defaultdict

from backend.engine.tiling.layout import GridLayout
from backend.models.cell import ERROR_FLAG, VALUE_MASK


def mark_errors(board: bytes | bytearray, n: int, m: int) -> bytearray:
    """Return a copy of *board* with error flags recomputed from scratch.

    A filled cell is flagged when its digit appears more than once in any
    row, column or block of any sudoku that contains it.
    """
    layout = GridLayout(n, m)
    marked = bytearray(b & ~ERROR_FLAG & 0xFF for b in board)
    for region in layout.regions():
        seen: dict[int, list[int]] = defaultdict(list)
        for index in region:
            value = marked[index] & VALUE_MASK
            if value:
                seen[value].append(index)
        for indexes in seen.values():
            if len(indexes) > 1:
                for index in indexes:
                    marked[index] |= ERROR_FLAG
    return marked


def is_solved(board: bytes | bytearray, n: int, m: int) -> bool:
    """Check that every cell is filled and no region repeats a digit."""
    layout = GridLayout(n, m)
    if any(b & VALUE_MASK == 0 for b in board):
        return False
    for region in layout.regions():
        values = {board[i] & VALUE_MASK for i in region}
        if len(values) != len(region):
            return False
    return True
