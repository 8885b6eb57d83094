"""Generates playable interlocking sudoku boards."""

from __future__ import annotations

import math
import random

from backend.engine.gamesolver import Solver
from backend.engine.tiling.layout import BLOCK_SIZE, GridLayout
from backend.models.cell import CELLS_PER_SUDOKU, DIGITS, VALUE_MASK
from backend.models.exceptions import NoSolution
from backend.utils.logger import get_logger

LOGGER = get_logger(__name__)

CLUE_RATIO = 0.45
REFILL_CELLS = 27  # cells cleared and re-solved with a shuffled candidate order
RANDOM_FILL_STEPS = 2_000  # backtracks allowed before keeping the shuffled grid

# Per-block row/column offsets of the seed grid.  Rows of _ROW_SHIFT and
# columns of _COL_SHIFT are permutations, and block (0,0) == (2,2),
# (0,2) == (2,0), which is what a 1x1 torus demands.
_ROW_SHIFT = ((0, 2, 1), (0, 1, 2), (1, 2, 0))
_COL_SHIFT = ((0, 0, 1), (2, 1, 2), (1, 2, 0))


def _line_order(rng: random.Random) -> list[int]:
    order = list(range(BLOCK_SIZE))
    rng.shuffle(order)
    return order


class GameGenerator:
    """Creates boards by tiling one self-wrapping sudoku across the torus.

    On a 1x1 torus a sudoku's top-left block is its own bottom-right block
    and its top-right block is its own bottom-left block.  Once such a grid
    is solved, repeating its 63 bytes for every sudoku of an ``n`` x ``m``
    board makes each sudoku read back the same valid grid.

    Random boards start from that tiling and are then made distinct per
    sudoku: digits are relabelled, rows are shuffled within bands and
    columns within stacks, and finally a random sample of cells is handed
    back to :class:`Solver` to re-fill with a shuffled candidate order.
    Every step keeps each sudoku valid.
    """

    @staticmethod
    def seed() -> bytearray:
        """Return the fixed, fully solved 1x1 grid."""
        layout = GridLayout(1, 1)
        cells = bytearray(CELLS_PER_SUDOKU)
        for u in range(BLOCK_SIZE):
            for v in range(BLOCK_SIZE):
                for j in range(BLOCK_SIZE):
                    for k in range(BLOCK_SIZE):
                        band = (j + _ROW_SHIFT[u][v]) % BLOCK_SIZE
                        stack = (k + _COL_SHIFT[u][v]) % BLOCK_SIZE
                        index = layout.cell_index(0, 0, v * BLOCK_SIZE + k, u * BLOCK_SIZE + j)
                        cells[index] = band * BLOCK_SIZE + stack + 1
        return cells

    @staticmethod
    def relabel(cells: bytearray, rng: random.Random) -> bytearray:
        """Apply one random digit permutation to every cell."""
        digits = list(DIGITS)
        rng.shuffle(digits)
        mapping = dict(zip(DIGITS, digits))
        return bytearray(mapping.get(b & VALUE_MASK, 0) for b in cells)

    @staticmethod
    def shuffle_lines(board: bytearray, layout: GridLayout, rng: random.Random) -> bytearray:
        """Shuffle rows within bands and columns within stacks.

        A sudoku's top and bottom bands run on through the corner blocks it
        shares, so the whole plane band gets one row order.  Plane bands
        repeat every ``2 * gcd(n, m)`` blocks on the torus.  The middle band
        touches no other sudoku and gets its own order.  Stacks work the
        same way.
        """
        period = 2 * math.gcd(layout.n, layout.m)
        band_rows = [_line_order(rng) for _ in range(period)]
        stack_cols = [_line_order(rng) for _ in range(period)]
        out = bytearray(board)
        for sx, sy in layout.sudokus():
            own_rows, own_cols = _line_order(rng), _line_order(rng)
            for scy in range(3 * BLOCK_SIZE):
                u, j = divmod(scy, BLOCK_SIZE)
                rows = own_rows if u == 1 else band_rows[(u - 2 * (sx + sy)) % period]
                for scx in range(3 * BLOCK_SIZE):
                    v, k = divmod(scx, BLOCK_SIZE)
                    cols = own_cols if v == 1 else stack_cols[(v + 2 * (sx - sy)) % period]
                    source = layout.cell_index(
                        sx, sy, v * BLOCK_SIZE + cols[k], u * BLOCK_SIZE + rows[j]
                    )
                    out[layout.cell_index(sx, sy, scx, scy)] = board[source]
        return out

    @staticmethod
    def refill(
        board: bytearray,
        layout: GridLayout,
        rng: random.Random,
        cells: int = REFILL_CELLS,
    ) -> bytearray:
        """Clear *cells* random cells and let the solver fill them again.

        Returns *board* unchanged when the solver runs out of budget.
        """
        trial = bytearray(board)
        for index in rng.sample(range(len(trial)), min(cells, len(trial))):
            trial[index] = 0
        try:
            backtracks = Solver.solve(trial, layout, rng=rng, max_steps=RANDOM_FILL_STEPS)
        except NoSolution as exc:
            LOGGER.warning("Random refill failed (%s); keeping the shuffled grid", exc)
            return board
        LOGGER.debug("Refilled %d cells with %d backtracks", cells, backtracks)
        return trial

    @staticmethod
    def solved(n: int, m: int, rng: random.Random | None = None) -> bytearray:
        """Return a completely filled, valid ``n`` x ``m`` board.

        Without *rng* this is the plain seed tiling.
        """
        layout = GridLayout(n, m)  # validates the dimensions
        board = bytearray(bytes(GameGenerator.seed()) * (layout.n * layout.m))
        if rng is None:
            return board
        board = GameGenerator.relabel(board, rng)
        board = GameGenerator.shuffle_lines(board, layout, rng)
        return GameGenerator.refill(board, layout, rng)

    @staticmethod
    def carve(board: bytearray, rng: random.Random, clue_ratio: float = CLUE_RATIO) -> None:
        """Empty cells in place, keeping each as a clue with *clue_ratio*."""
        for index in range(len(board)):
            if rng.random() >= clue_ratio:
                board[index] = 0

    @staticmethod
    def generate(
        n: int,
        m: int,
        randomize: bool = True,
        rng: random.Random | None = None,
    ) -> bytearray:
        """Return a playable board of ``63 * n * m`` packed cells.

        ``randomize=False`` returns the fixed, fully solved seed board used
        as the menu backdrop.
        """
        if not randomize:
            return GameGenerator.solved(n, m)

        rng = rng or random.Random()
        board = GameGenerator.solved(n, m, rng)
        GameGenerator.carve(board, rng)
        LOGGER.info("Generated %dx%d board with %d clues", n, m, sum(1 for b in board if b))
        return board
