"""Game session: the application state shared by every frontend."""

from __future__ import annotations

import enum
import math
import random

from backend.engine.gamegenerator import GameGenerator
from backend.engine.gamestate import PuzzleStateStore
from backend.engine.input import InputStateMachine
from backend.engine.selection import SelectionController
from backend.models.camera import CameraModel, Viewport
from backend.models.exceptions import CorruptionError, EditRejected
from backend.models.savegame import SaveSlot
from backend.utils.logger import get_logger

LOGGER = get_logger(__name__)

DEFAULT_N = 4
DEFAULT_M = 4
IDLE_ZOOM_RATE = 0.15  # zoom levels per second while the menu is shown
IDLE_ZOOM_MIN = 2.0
IDLE_ZOOM_MAX = 5.0


class AppMode(enum.Enum):
    MENU = "menu"
    PLAYING = "playing"


class GameSession:
    """Owns camera, selection, board and input for one running app.

    Event handlers receive the session instead of reaching for globals.
    Starting or continuing a game replaces the camera and the selection.
    """

    def __init__(
        self,
        slot: SaveSlot,
        viewport: Viewport,
        n: int = DEFAULT_N,
        m: int = DEFAULT_M,
        rng: random.Random | None = None,
    ) -> None:
        self.slot = slot
        self.viewport = viewport
        self.n = n
        self.m = m
        self._rng = rng
        self.mode = AppMode.MENU
        self.camera = CameraModel()
        self.selection = SelectionController()
        self.store = PuzzleStateStore(generator=self._generate, slot=slot)
        self.input = InputStateMachine(self)
        self._idle_direction = -1.0
        self.edits = 0

    # -- lifecycle ------------------------------------------------------------

    def show_menu(self) -> None:
        """Install the fixed backdrop board and let the camera idle."""
        self.store.new_game(self.n, self.m, randomize=False)
        self._reset_view()
        self.mode = AppMode.MENU

    def new_game(self, n: int | None = None, m: int | None = None) -> None:
        n = self.n if n is None else n
        m = self.m if m is None else m
        self.store.new_game(n, m, randomize=True)
        self.n, self.m = n, m
        self._reset_view()
        self.mode = AppMode.PLAYING
        LOGGER.info("New %dx%d game started", self.n, self.m)

    @property
    def continue_available(self) -> bool:
        return self.slot.exists()

    def continue_game(self) -> bool:
        """Resume the saved game.  Returns False when nothing is saved.

        Corrupt save data is discarded and the error re-raised so the
        frontend can tell the player.
        """
        try:
            record = self.slot.load()
            if record is None:
                return False
            self.store.restore(record)
        except CorruptionError as exc:
            LOGGER.error("Discarding corrupt save: %s", exc)
            self.slot.discard()
            raise
        self.n, self.m = record.n, record.m
        self._reset_view()
        self.mode = AppMode.PLAYING
        LOGGER.info("Continued %dx%d game", self.n, self.m)
        return True

    def resize(self, width: float, height: float) -> None:
        self.viewport = Viewport(width, height)

    # -- input commands -------------------------------------------------------

    def pan(self, dx: float, dy: float) -> None:
        self.camera.pan(dx, dy)

    def zoom_at(self, delta: float, x: float, y: float) -> None:
        self.camera.zoom(delta, (x, y), self.viewport.center())

    def select_at(self, x: float, y: float) -> None:
        if self.mode is AppMode.PLAYING:
            self.selection.select((x, y), self.camera, self.viewport)

    def select_center(self) -> None:
        """Select the cell under the viewport centre.

        The view is first slid so the centre sits in the middle of that
        cell, which keeps each arrow-key step landing in the next cell.
        """
        wx, wy = self.camera.screen_to_world(self.viewport.center(), self.viewport)
        self.camera.shift(math.floor(wx) + 0.5 - wx, math.floor(wy) + 0.5 - wy)
        self.select_at(*self.viewport.center())

    def clear_selection(self) -> None:
        self.selection.clear()

    def nudge(self, dx: int, dy: int) -> None:
        """Arrow-key step: scroll the view and move the cursor together."""
        step = self.camera.key_step()
        self.camera.shift(dx * step, dy * step)
        self.selection.nudge(dx * step, dy * step)

    def enter_digit(self, value: int) -> bool:
        """Write *value* into the selected cell.  Returns whether it stuck."""
        if self.mode is not AppMode.PLAYING:
            return False
        index = self.selection.current_index(self.store.n, self.store.m)
        if index is None:
            return False
        try:
            self.store.write_user_value(index, value)
        except EditRejected as exc:
            LOGGER.info("Edit ignored: %s", exc)
            return False
        self.edits += 1
        return True

    # -- per-frame ------------------------------------------------------------

    def tick(self, dt: float) -> None:
        if self.mode is AppMode.MENU:
            self._idle_zoom(dt)

    @property
    def selected_index(self) -> int | None:
        return self.selection.current_index(self.store.n, self.store.m)

    @property
    def is_won(self) -> bool:
        return self.mode is AppMode.PLAYING and self.store.is_solved

    # -- helpers --------------------------------------------------------------

    def _generate(self, n: int, m: int, randomize: bool) -> bytearray:
        return GameGenerator.generate(n, m, randomize, rng=self._rng)

    def _reset_view(self) -> None:
        self.camera = CameraModel()
        self.selection = SelectionController()
        self.input.reset()
        self.edits = 0

    def _idle_zoom(self, dt: float) -> None:
        level = self.camera.zoom_level
        if level <= IDLE_ZOOM_MIN:
            self._idle_direction = -1.0  # negative delta zooms out
        elif level >= IDLE_ZOOM_MAX:
            self._idle_direction = 1.0
        center = self.viewport.center()
        self.camera.zoom(self._idle_direction * IDLE_ZOOM_RATE * dt, center, center)
