"""GameSession wiring: modes, cursor coupling and save handling."""

from __future__ import annotations

import random
from pathlib import Path

import pytest

from backend.engine.gameplay import AppMode, GameSession
from backend.engine.input import PointerDown, PointerUp
from backend.engine.selection import NO_SELECTION
from backend.engine.tiling import resolve_index
from backend.models.camera import ZOOM_MAX, ZOOM_MIN, Viewport
from backend.models.cell import is_given, is_user_entered
from backend.models.exceptions import CorruptionError
from backend.models.savegame import SaveRecord, SaveSlot

VIEWPORT = Viewport(800, 600)


# -- helpers ------------------------------------------------------------------


def _session(tmp_path: Path, seed: int = 7) -> GameSession:
    slot = SaveSlot(tmp_path / "savegame.json")
    return GameSession(slot, VIEWPORT, n=1, m=1, rng=random.Random(seed))


def _find_point(session: GameSession, wanted) -> tuple[float, float]:
    """World point of the first cell whose byte satisfies *wanted*."""
    store = session.store
    for cy in range(12):
        for cx in range(12):
            point = (cx + 0.5, cy + 0.5)
            index = resolve_index(point, store.n, store.m)
            if index is not None and wanted(store.cells[index]):
                return point
    raise AssertionError("No matching cell on the board")


@pytest.fixture
def session(tmp_path: Path) -> GameSession:
    s = _session(tmp_path)
    s.new_game()
    return s


# -- modes --------------------------------------------------------------------


def test_menu_shows_solved_backdrop(tmp_path: Path) -> None:
    s = _session(tmp_path)
    s.show_menu()

    assert s.mode is AppMode.MENU
    assert s.store.is_solved
    assert not s.is_won


def test_menu_idles_the_zoom(tmp_path: Path) -> None:
    s = _session(tmp_path)
    s.show_menu()
    levels = []
    for _ in range(600):
        s.tick(0.1)
        levels.append(s.camera.zoom_level)

    assert all(ZOOM_MIN <= lvl <= ZOOM_MAX for lvl in levels)
    assert max(levels) >= 5.0
    assert levels[-1] < max(levels), "Idle zoom should turn around"


def test_playing_does_not_idle(session: GameSession) -> None:
    level = session.camera.zoom_level
    session.tick(1.0)

    assert session.camera.zoom_level == level


def test_menu_ignores_selection(tmp_path: Path) -> None:
    s = _session(tmp_path)
    s.show_menu()
    s.select_at(400, 300)

    assert not s.selection.active


def test_new_game_resets_view(session: GameSession) -> None:
    session.pan(50, 50)
    session.select_at(10, 10)
    session.new_game(2, 1)

    assert session.camera.translate == [0.0, 0.0]
    assert session.selection.point == NO_SELECTION
    assert (session.store.n, session.store.m) == (2, 1)
    assert session.mode is AppMode.PLAYING


@pytest.mark.parametrize("n, m", [(0, 1), (1, 0)])
def test_new_game_rejects_zero_size(session: GameSession, n: int, m: int) -> None:
    with pytest.raises(ValueError):
        session.new_game(n, m)

    assert (session.n, session.m) == (1, 1)
    assert (session.store.n, session.store.m) == (1, 1)


# -- cursor -------------------------------------------------------------------


def test_nudge_moves_view_and_cursor_together(session: GameSession) -> None:
    session.select_at(*VIEWPORT.center())
    step = session.camera.key_step()

    session.nudge(1, 0)
    session.nudge(0, 1)

    assert session.camera.translate == pytest.approx([step, -step])
    assert session.selection.point == pytest.approx((step, step))
    on_screen = session.camera.world_to_screen(session.selection.point, VIEWPORT)
    assert on_screen == pytest.approx(VIEWPORT.center())


def test_first_arrow_press_moves_to_the_next_cell(session: GameSession) -> None:
    session.select_center()
    start = session.selected_index
    x, y = session.selection.point

    assert (x % 1, y % 1) == pytest.approx((0.5, 0.5))

    session.nudge(1, 0)

    assert session.selected_index is not None
    assert session.selected_index != start


def test_select_center_keeps_cursor_on_screen_centre(session: GameSession) -> None:
    session.pan(37, -12)
    session.select_center()

    on_screen = session.camera.world_to_screen(session.selection.point, VIEWPORT)
    assert on_screen == pytest.approx(VIEWPORT.center())


def test_nudge_without_selection_only_scrolls(session: GameSession) -> None:
    session.nudge(-1, 0)

    assert session.selection.point == NO_SELECTION
    assert session.camera.translate[0] < 0


def test_pointer_click_selects_cell(session: GameSession) -> None:
    session.input.handle(PointerDown(400, 300))
    session.input.handle(PointerUp(400, 300))

    assert session.selection.active
    assert session.selected_index == resolve_index((0.0, 0.0), 1, 1)


# -- editing ------------------------------------------------------------------


def test_given_cell_rejects_digit(session: GameSession) -> None:
    session.selection.point = _find_point(session, is_given)

    assert not session.enter_digit(5)
    assert session.edits == 0
    assert not session.slot.exists()


def test_empty_cell_accepts_digit_and_saves(session: GameSession) -> None:
    session.selection.point = _find_point(session, lambda b: b == 0)

    assert session.enter_digit(5)

    assert session.store.read_value(session.selected_index) == 5
    assert is_user_entered(session.store.cells[session.selected_index])
    assert session.edits == 1
    assert session.slot.exists()


def test_digit_without_selection_is_ignored(session: GameSession) -> None:
    assert not session.enter_digit(5)


# -- continue -----------------------------------------------------------------


def test_continue_without_save(tmp_path: Path) -> None:
    s = _session(tmp_path)

    assert not s.continue_available
    assert not s.continue_game()
    assert s.mode is AppMode.MENU


def test_continue_restores_saved_board(session: GameSession, tmp_path: Path) -> None:
    session.selection.point = _find_point(session, lambda b: b == 0)
    session.enter_digit(3)

    resumed = _session(tmp_path, seed=99)
    resumed.show_menu()

    assert resumed.continue_available
    assert resumed.continue_game()
    assert resumed.mode is AppMode.PLAYING
    assert resumed.store.cells == session.store.cells


@pytest.mark.parametrize("content", ["{broken", '{"n": 2, "m": 2, "data": ""}'])
def test_corrupt_save_is_discarded(tmp_path: Path, content: str) -> None:
    s = _session(tmp_path)
    s.slot.filepath.write_text(content)
    s.show_menu()

    with pytest.raises(CorruptionError):
        s.continue_game()

    assert not s.slot.exists()
    assert s.mode is AppMode.MENU


def test_mismatched_dimensions_are_discarded(tmp_path: Path) -> None:
    s = _session(tmp_path)
    s.slot.save(SaveRecord(n=2, m=2, data=bytes(63)))

    with pytest.raises(CorruptionError):
        s.continue_game()

    assert not s.continue_available
