"""Packed cell encoding for the board buffer.

Every cell is a single byte:

* bits 0-3 -- the digit (0 means empty, 1-9 a value)
* bit 4    -- set when the player wrote the value
* bit 5    -- set by the validator when the value clashes in some region
"""

from __future__ import annotations

VALUE_MASK = 0x0F
USER_FLAG = 0x10
ERROR_FLAG = 0x20

BLOCK_CELLS = 9
BLOCKS_PER_SUDOKU = 7  # top-left and top-right blocks live in the neighbours
CELLS_PER_SUDOKU = BLOCK_CELLS * BLOCKS_PER_SUDOKU  # 63

DIGITS: tuple[int, ...] = tuple(range(1, 10))


def board_length(n: int, m: int) -> int:
    """Number of packed bytes for an ``n`` x ``m`` tiling."""
    return CELLS_PER_SUDOKU * n * m


def cell_value(byte: int) -> int:
    return byte & VALUE_MASK


def is_user_entered(byte: int) -> bool:
    return bool(byte & USER_FLAG)


def is_error(byte: int) -> bool:
    return bool(byte & ERROR_FLAG)


def is_given(byte: int) -> bool:
    """A generator-placed digit: non-empty and not written by the player."""
    return cell_value(byte) != 0 and not is_user_entered(byte)


def user_cell(value: int) -> int:
    return (value & VALUE_MASK) | USER_FLAG
