"""Map view-space points onto cells of the periodic diamond tiling.

The board repeats in 12x12 tiles.  Each tile is split into 4x4 quadrants
of 3x3 cells; fourteen of them are blocks of two interlocking sudokus and
two are dead corners of the diamond lattice.  Moving one tile right steps
the sudoku lattice by ``(+1, -1)``, one tile down by ``(-1, -1)``.

Quadrant map of one tile (``B`` = base sudoku of the tile, ``L``/``R``/``D``
= the neighbours reached through the three corrections, ``.`` = dead)::

    L . R R
    L B R R
    B B B .
    B B B D
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from backend.engine.tiling.layout import BLOCK_SIZE, SUDOKU_SIZE, cell_index
from backend.models.exceptions import OutOfRange

TILE_SIZE = 12
DEAD_ZONES: frozenset[tuple[int, int]] = frozenset({(1, 0), (3, 2)})
NEIGHBOUR_SHIFT = 6  # in-tile offset between a quadrant's sudoku and the base
BASE_ROW_OFFSET = 3  # the base sudoku starts one block below the tile top


@dataclass(frozen=True)
class BlockCoord:
    """Wrapped sudoku coordinates plus a cell inside that sudoku."""

    sx: int
    sy: int
    scx: int
    scy: int


def resolve(point: tuple[float, float], n: int, m: int) -> BlockCoord | None:
    """Resolve a view-space point to a cell, or ``None`` for dead zones/padding."""
    bx, by = point
    if not (math.isfinite(bx) and math.isfinite(by)):
        return None

    cx, cy = math.floor(bx), math.floor(by)
    qx = (cx % TILE_SIZE) // BLOCK_SIZE
    qy = (cy % TILE_SIZE) // BLOCK_SIZE
    if (qx, qy) in DEAD_ZONES:
        return None

    top_left = qx == 0 and qy < 2
    top_right = qx >= 2 and qy < 2
    bottom_right = qx == 3 and qy == 3

    fx, fy = cx // TILE_SIZE, cy // TILE_SIZE
    sx = fx - fy
    sy = -fx - fy
    if top_left:
        sy += 1
    elif top_right:
        sx += 1
    elif bottom_right:
        sy -= 1

    shift = NEIGHBOUR_SHIFT if (top_left or top_right or bottom_right) else 0
    scx = (cx + shift) % TILE_SIZE
    scy = (cy - BASE_ROW_OFFSET + shift) % TILE_SIZE
    if scx >= SUDOKU_SIZE or scy >= SUDOKU_SIZE:
        return None

    return BlockCoord(sx % n, sy % m, scx, scy)


def resolve_index(point: tuple[float, float], n: int, m: int) -> int | None:
    """Resolve a view-space point straight to its canonical board index."""
    coord = resolve(point, n, m)
    if coord is None:
        return None
    try:
        return cell_index(n, m, coord.sx, coord.sy, coord.scx, coord.scy)
    except OutOfRange:
        return None
