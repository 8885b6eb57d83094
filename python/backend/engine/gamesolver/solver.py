"""Backtracking solver for the interlocking sudoku grid."""

from __future__ import annotations

import random

from backend.engine.tiling.layout import GridLayout
from backend.models.cell import DIGITS, VALUE_MASK
from backend.models.exceptions import NoSolution

DEFAULT_MAX_STEPS = 50_000


class Solver:
    """Stateless solver; all methods are static."""

    @staticmethod
    def solve(
        cells: bytearray,
        layout: GridLayout,
        rng: random.Random | None = None,
        max_steps: int = DEFAULT_MAX_STEPS,
    ) -> int:
        """Fill every empty cell of *cells* in place.

        Depth-first search that always branches on the empty cell with the
        fewest candidates.  With *rng* the candidate order is shuffled.
        Returns the number of backtracks; raises :class:`NoSolution` when
        the search is exhausted or exceeds *max_steps* backtracks.  On
        failure the cells that were empty are empty again.
        """
        peers = layout.peers()
        stack: list[tuple[int, list[int]]] = []
        backtracks = 0

        while True:
            index, options = Solver._most_constrained(cells, peers)
            if index is None:
                return backtracks

            if options:
                if rng is not None:
                    rng.shuffle(options)
                else:
                    options.reverse()  # pop() then tries the smallest digit first
                cells[index] = options.pop()
                stack.append((index, options))
                continue

            # dead end: undo guesses until one still has an alternative
            while True:
                if not stack:
                    raise NoSolution("No assignment satisfies the grid constraints")
                index, options = stack.pop()
                cells[index] = 0
                backtracks += 1
                if backtracks > max_steps:
                    for pending, _ in stack:
                        cells[pending] = 0
                    raise NoSolution(f"Gave up after {max_steps} backtracks")
                if options:
                    cells[index] = options.pop()
                    stack.append((index, options))
                    break

    @staticmethod
    def candidates(cells: bytearray, peers: list[frozenset[int]], index: int) -> list[int]:
        """Digits that do not clash with any peer of *index*."""
        used = {cells[p] & VALUE_MASK for p in peers[index]}
        return [d for d in DIGITS if d not in used]

    # -- helpers --------------------------------------------------------------

    @staticmethod
    def _most_constrained(
        cells: bytearray, peers: list[frozenset[int]]
    ) -> tuple[int | None, list[int]]:
        best: int | None = None
        best_options: list[int] = []
        for index, value in enumerate(cells):
            if value & VALUE_MASK:
                continue
            options = Solver.candidates(cells, peers, index)
            if best is None or len(options) < len(best_options):
                best, best_options = index, options
                if len(options) <= 1:
                    break
        return best, best_options
