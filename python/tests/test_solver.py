"""Solver test suite.

Every test is hard-killed by ``pytest-timeout`` (configured in
``pyproject.toml``), so a runaway search shows up as a failure rather
than a hung run.
"""

from __future__ import annotations

import random

import pytest

from backend.engine.gamegenerator import GameGenerator
from backend.engine.gamesolver import Solver
from backend.engine.gamevalidator import is_solved
from backend.engine.tiling import GridLayout
from backend.models.cell import board_length
from backend.models.exceptions import NoSolution


# -- helpers ------------------------------------------------------------------


def _carved(n: int, m: int, seed: int) -> bytearray:
    rng = random.Random(seed)
    board = GameGenerator.solved(n, m)
    GameGenerator.carve(board, rng, clue_ratio=0.5)
    return board


# -- tests --------------------------------------------------------------------


def test_solve_empty_single_sudoku() -> None:
    layout = GridLayout(1, 1)
    cells = bytearray(layout.size)

    Solver.solve(cells, layout)

    assert is_solved(cells, 1, 1), "Solver left an invalid 1x1 grid"


@pytest.mark.parametrize("seed", [1, 2, 3])
def test_solve_shuffled_empty_single_sudoku(seed: int) -> None:
    layout = GridLayout(1, 1)
    cells = bytearray(layout.size)

    try:
        Solver.solve(cells, layout, rng=random.Random(seed), max_steps=2_000)
    except NoSolution:
        assert not any(cells), "Failed search must leave the cells empty"
        return
    assert is_solved(cells, 1, 1)


@pytest.mark.parametrize("n, m", [(1, 1), (2, 1), (2, 2)])
def test_solve_keeps_clues(n: int, m: int) -> None:
    board = _carved(n, m, seed=n * 10 + m)
    clues = {i: b for i, b in enumerate(board) if b}

    Solver.solve(board, GridLayout(n, m))

    assert is_solved(board, n, m), f"Carved {n}x{m} board not solved"
    for index, value in clues.items():
        assert board[index] == value, f"Clue at {index} was overwritten"


def test_solve_raises_when_a_cell_has_no_candidate() -> None:
    layout = GridLayout(1, 1)
    cells = bytearray(layout.size)
    for scx in range(8):
        cells[layout.cell_index(0, 0, scx, 4)] = scx + 1
    cells[layout.cell_index(0, 0, 8, 0)] = 9
    before = bytes(cells)

    with pytest.raises(NoSolution):
        Solver.solve(cells, layout)

    assert bytes(cells) == before


def test_candidates_excludes_peer_digits() -> None:
    layout = GridLayout(1, 1)
    cells = bytearray(board_length(1, 1))
    cells[layout.cell_index(0, 0, 0, 4)] = 3
    cells[layout.cell_index(0, 0, 4, 0)] = 7
    cells[layout.cell_index(0, 0, 5, 5)] = 1

    options = Solver.candidates(cells, layout.peers(), layout.cell_index(0, 0, 4, 4))

    assert options == [2, 4, 5, 6, 8, 9]
