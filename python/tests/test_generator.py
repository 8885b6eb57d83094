"""Board generation: every produced board must sit on a valid solution."""

from __future__ import annotations

import random

import pytest

from backend.engine.gamegenerator import GameGenerator
from backend.engine.gamesolver import Solver
from backend.engine.gamevalidator import is_solved, mark_errors
from backend.engine.tiling import GridLayout
from backend.models.cell import CELLS_PER_SUDOKU, USER_FLAG, board_length
from backend.models.exceptions import NoSolution


# -- helpers ------------------------------------------------------------------


def _is_relabelling(board: bytes, reference: bytes) -> bool:
    """True when *board* is *reference* with its digits renamed."""
    forward: dict[int, int] = {}
    backward: dict[int, int] = {}
    for a, b in zip(reference, board):
        if forward.setdefault(a, b) != b or backward.setdefault(b, a) != a:
            return False
    return True


def _chunks(board: bytes, n: int, m: int) -> set[bytes]:
    return {
        bytes(board[i * CELLS_PER_SUDOKU : (i + 1) * CELLS_PER_SUDOKU]) for i in range(n * m)
    }


# -- tests --------------------------------------------------------------------


def test_seed_is_a_valid_single_sudoku() -> None:
    seed = GameGenerator.seed()

    assert len(seed) == board_length(1, 1)
    assert is_solved(seed, 1, 1)


@pytest.mark.parametrize("n, m", [(1, 1), (2, 1), (1, 3), (3, 2), (4, 4)])
def test_solved_board_is_valid(n: int, m: int) -> None:
    board = GameGenerator.solved(n, m)

    assert len(board) == board_length(n, m)
    assert is_solved(board, n, m), f"Seed tiling broke a {n}x{m} board"


@pytest.mark.parametrize("seed", [0, 11, 42])
def test_randomised_solution_is_valid(seed: int) -> None:
    board = GameGenerator.solved(3, 2, random.Random(seed))

    assert is_solved(board, 3, 2)


def test_relabel_keeps_board_valid() -> None:
    relabelled = GameGenerator.relabel(GameGenerator.seed(), random.Random(5))

    assert is_solved(relabelled, 1, 1)
    assert sorted(set(relabelled)) == list(range(1, 10))


def test_fixed_board_is_the_full_seed_tiling() -> None:
    assert GameGenerator.generate(2, 3, randomize=False) == GameGenerator.solved(2, 3)


def test_generated_board_is_playable() -> None:
    board = GameGenerator.generate(2, 2, rng=random.Random(3))

    assert len(board) == board_length(2, 2)
    assert 0 < sum(1 for b in board if b) < len(board)
    assert not any(b & USER_FLAG for b in board), "Clues must not look user-entered"
    assert mark_errors(board, 2, 2) == board, "Clues must never clash"


def test_generation_is_reproducible_with_a_seed() -> None:
    first = GameGenerator.generate(2, 1, rng=random.Random(99))
    second = GameGenerator.generate(2, 1, rng=random.Random(99))

    assert first == second


def test_carve_ratio_bounds() -> None:
    board = GameGenerator.solved(1, 1)
    GameGenerator.carve(board, random.Random(1), clue_ratio=0.0)
    assert not any(board)

    board = GameGenerator.solved(1, 1)
    GameGenerator.carve(board, random.Random(1), clue_ratio=1.0)
    assert board == GameGenerator.solved(1, 1)


@pytest.mark.parametrize("n, m", [(0, 1), (1, 0)])
def test_invalid_dimensions_rejected(n: int, m: int) -> None:
    with pytest.raises(ValueError):
        GameGenerator.generate(n, m, randomize=False)


def test_random_board_is_not_just_the_seed_relabelled() -> None:
    seed = bytes(GameGenerator.seed())
    boards = [GameGenerator.solved(1, 1, random.Random(s)) for s in range(5)]

    assert all(is_solved(b, 1, 1) for b in boards)
    assert any(not _is_relabelling(bytes(b), seed) for b in boards)


@pytest.mark.parametrize("n, m", [(3, 3), (2, 3), (4, 4)])
def test_random_board_varies_between_sudokus(n: int, m: int) -> None:
    board = GameGenerator.solved(n, m, random.Random(1))

    assert is_solved(board, n, m)
    assert len(_chunks(board, n, m)) > 1, "Every sudoku got the same solution"


@pytest.mark.parametrize("n, m", [(1, 1), (3, 3), (2, 4)])
def test_shuffle_lines_keeps_every_sudoku_valid(n: int, m: int) -> None:
    layout = GridLayout(n, m)
    board = GameGenerator.shuffle_lines(GameGenerator.solved(n, m), layout, random.Random(8))

    assert is_solved(board, n, m)
    assert sorted(board) == sorted(GameGenerator.solved(n, m))


def test_refill_completes_the_cleared_cells() -> None:
    layout = GridLayout(2, 2)
    board = GameGenerator.solved(2, 2)
    refilled = GameGenerator.refill(board, layout, random.Random(4))

    assert 0 not in refilled
    assert is_solved(refilled, 2, 2)


def test_refill_keeps_board_when_solver_gives_up(monkeypatch: pytest.MonkeyPatch) -> None:
    def give_up(cells, layout, rng=None, max_steps=0):
        raise NoSolution("Gave up after 0 backtracks")

    monkeypatch.setattr(Solver, "solve", staticmethod(give_up))
    board = GameGenerator.solved(1, 1)

    assert GameGenerator.refill(board, GridLayout(1, 1), random.Random(4)) is board
