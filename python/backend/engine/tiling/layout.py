"""Memory layout of the interlocking sudoku grid and its canonical indexer.

Sudoku ``(x, y)`` owns 63 bytes starting at ``(x + y*n) * 63``: seven
blocks of nine cells in ``BLOCK_MEMORY_ORDER``.  Its two remaining blocks
are borrowed from neighbours on the torus:

* top-left  == bottom-right of sudoku ``(x, (y + 1) % m)``
* top-right == bottom-left  of sudoku ``((x + 1) % n, y)``
"""

from __future__ import annotations

from functools import lru_cache
from typing import Iterator

from backend.models.cell import BLOCK_CELLS, CELLS_PER_SUDOKU, board_length
from backend.models.exceptions import OutOfRange

SUDOKU_SIZE = 9
BLOCK_SIZE = 3

Coords = tuple[int, int]

# block numbers, row-major within a sudoku
TOP_LEFT_BLOCK = 0
TOP_CENTER_BLOCK = 1
TOP_RIGHT_BLOCK = 2
MIDDLE_LEFT_BLOCK = 3
MIDDLE_CENTER_BLOCK = 4
MIDDLE_RIGHT_BLOCK = 5
BOTTOM_LEFT_BLOCK = 6
BOTTOM_CENTER_BLOCK = 7
BOTTOM_RIGHT_BLOCK = 8

BLOCK_MEMORY_ORDER: tuple[int, ...] = (
    TOP_CENTER_BLOCK,
    MIDDLE_LEFT_BLOCK,
    MIDDLE_CENTER_BLOCK,
    MIDDLE_RIGHT_BLOCK,
    BOTTOM_LEFT_BLOCK,
    BOTTOM_CENTER_BLOCK,
    BOTTOM_RIGHT_BLOCK,
)


class GridLayout:
    """Index arithmetic for an ``n`` x ``m`` torus of sudokus."""

    def __init__(self, n: int, m: int) -> None:
        if n < 1 or m < 1:
            raise ValueError(f"Grid dimensions must be >= 1, got {n}x{m}.")
        self.n = n
        self.m = m

    @property
    def size(self) -> int:
        return board_length(self.n, self.m)

    # -- blocks ---------------------------------------------------------------

    def sudoku_start(self, coords: Coords) -> int:
        x, y = coords
        return (x + y * self.n) * CELLS_PER_SUDOKU

    def block_starts(self, coords: Coords) -> tuple[int, ...]:
        """Start offset of each of the nine blocks of a sudoku."""
        x, y = coords
        own = self.sudoku_start(coords)
        above = self.sudoku_start((x, (y + 1) % self.m))
        right = self.sudoku_start(((x + 1) % self.n, y))
        starts = [0] * 9
        for slot, block in enumerate(BLOCK_MEMORY_ORDER):
            starts[block] = own + slot * BLOCK_CELLS
        starts[TOP_LEFT_BLOCK] = above + BLOCK_MEMORY_ORDER.index(BOTTOM_RIGHT_BLOCK) * BLOCK_CELLS
        starts[TOP_RIGHT_BLOCK] = right + BLOCK_MEMORY_ORDER.index(BOTTOM_LEFT_BLOCK) * BLOCK_CELLS
        return tuple(starts)

    def cell_index(self, sx: int, sy: int, scx: int, scy: int) -> int:
        """Flat board offset of cell ``(scx, scy)`` of sudoku ``(sx, sy)``."""
        if not (0 <= sx < self.n and 0 <= sy < self.m):
            raise OutOfRange(f"Sudoku ({sx}, {sy}) outside {self.n}x{self.m} grid")
        if not (0 <= scx < SUDOKU_SIZE and 0 <= scy < SUDOKU_SIZE):
            raise OutOfRange(f"Cell ({scx}, {scy}) outside a 9x9 sudoku")
        block = (scy // BLOCK_SIZE) * BLOCK_SIZE + scx // BLOCK_SIZE
        offset = (scy % BLOCK_SIZE) * BLOCK_SIZE + scx % BLOCK_SIZE
        return self.block_starts((sx, sy))[block] + offset

    def sudoku_at_index(self, index: int) -> Coords:
        """Sudoku that owns ``index`` in memory."""
        if not 0 <= index < self.size:
            raise OutOfRange(f"Index {index} outside board of {self.size} cells")
        sudoku = index // CELLS_PER_SUDOKU
        return (sudoku % self.n, sudoku // self.n)

    # -- regions --------------------------------------------------------------

    def block(self, coords: Coords, i: int) -> list[int]:
        start = self.block_starts(coords)[i]
        return list(range(start, start + BLOCK_CELLS))

    def row(self, coords: Coords, r: int) -> list[int]:
        return [self.cell_index(*coords, c, r) for c in range(SUDOKU_SIZE)]

    def column(self, coords: Coords, c: int) -> list[int]:
        return [self.cell_index(*coords, c, r) for r in range(SUDOKU_SIZE)]

    def sudokus(self) -> Iterator[Coords]:
        for y in range(self.m):
            for x in range(self.n):
                yield (x, y)

    def regions(self) -> Iterator[tuple[int, ...]]:
        """Every row, column and block of every sudoku on the torus."""
        yield from _regions(self.n, self.m)

    def peers(self) -> list[frozenset[int]]:
        """For each index, the other indexes that share a region with it."""
        return list(_peers(self.n, self.m))


@lru_cache(maxsize=32)
def _regions(n: int, m: int) -> tuple[tuple[int, ...], ...]:
    layout = GridLayout(n, m)
    regions: list[tuple[int, ...]] = []
    for coords in layout.sudokus():
        for i in range(SUDOKU_SIZE):
            regions.append(tuple(layout.row(coords, i)))
            regions.append(tuple(layout.column(coords, i)))
            regions.append(tuple(layout.block(coords, i)))
    return tuple(regions)


@lru_cache(maxsize=32)
def _peers(n: int, m: int) -> tuple[frozenset[int], ...]:
    found: list[set[int]] = [set() for _ in range(board_length(n, m))]
    for region in _regions(n, m):
        for index in region:
            found[index].update(region)
    for index, peers in enumerate(found):
        peers.discard(index)
    return tuple(frozenset(p) for p in found)


def cell_index(n: int, m: int, sx: int, sy: int, scx: int, scy: int) -> int:
    """Canonical index for wrapped tiling coordinates.

    Raises :class:`OutOfRange` when any coordinate lies outside the board.
    """
    return GridLayout(n, m).cell_index(sx, sy, scx, scy)
