"""Pygame GUI frontend.

Translates pygame mouse, wheel, touch and keyboard events into the
backend's input events, and draws the visible part of the endless board
each frame after all input of that frame has been applied.
"""

from __future__ import annotations

import math
import random
from pathlib import Path

import pygame

from backend.engine.gameplay import AppMode, GameSession
from backend.engine.input import (
    KeyPress,
    PointerDown,
    PointerMove,
    PointerUp,
    TouchEnd,
    TouchMove,
    TouchStart,
    Wheel,
)
from backend.engine.tiling import GridLayout, resolve
from backend.models.camera import Viewport
from backend.models.cell import cell_value, is_error, is_user_entered
from backend.models.exceptions import CorruptionError
from backend.models.savegame import SaveSlot
from backend.utils.logger import get_logger

LOGGER = get_logger(__name__)

# ---------------------------------------------------------------------------
# Catppuccin Mocha palette
# ---------------------------------------------------------------------------
COL_BASE = (30, 30, 46)
COL_MANTLE = (24, 24, 37)
COL_SURFACE0 = (49, 50, 68)
COL_SURFACE1 = (69, 71, 90)
COL_OVERLAY0 = (108, 112, 134)
COL_TEXT = (205, 214, 244)
COL_SUBTEXT = (166, 173, 200)
COL_BLUE = (137, 180, 250)
COL_LAVENDER = (180, 190, 254)
COL_GREEN = (166, 227, 161)
COL_PINK = (245, 194, 231)
COL_YELLOW = (249, 226, 175)
COL_RED = (243, 139, 168)

# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------
WIN_W, WIN_H = 960, 720
MIN_CELL_PX = 6  # below this the board is too dense to draw cell by cell
MIN_DIGIT_PX = 14
FPS = 60

_SIZES: list[tuple[str, int]] = [
    ("1×1", 1),
    ("2×2", 2),
    ("3×3", 3),
    ("4×4", 4),
]

_KEY_NAMES: dict[int, str] = {
    pygame.K_LEFT: "ArrowLeft",
    pygame.K_RIGHT: "ArrowRight",
    pygame.K_UP: "ArrowUp",
    pygame.K_DOWN: "ArrowDown",
    pygame.K_BACKSPACE: "Backspace",
    pygame.K_DELETE: "Delete",
    pygame.K_ESCAPE: "Escape",
}


# ---------------------------------------------------------------------------
# Simple clickable button
# ---------------------------------------------------------------------------
class _Btn:
    __slots__ = ("rect", "text", "font", "bg", "hover", "fg", "radius", "enabled", "_hot")

    def __init__(
        self,
        rect: tuple[int, int, int, int],
        text: str,
        font: pygame.font.Font,
        *,
        bg: tuple = COL_SURFACE0,
        hover: tuple = COL_SURFACE1,
        fg: tuple = COL_TEXT,
        radius: int = 8,
    ) -> None:
        self.rect = pygame.Rect(rect)
        self.text = text
        self.font = font
        self.bg = bg
        self.hover = hover
        self.fg = fg
        self.radius = radius
        self.enabled = True
        self._hot = False

    def draw(self, surf: pygame.Surface) -> None:
        if not self.enabled:
            c, fg = COL_MANTLE, COL_OVERLAY0
        else:
            c, fg = (self.hover if self._hot else self.bg), self.fg
        pygame.draw.rect(surf, c, self.rect, border_radius=self.radius)
        lbl = self.font.render(self.text, True, fg)
        surf.blit(
            lbl,
            (
                self.rect.centerx - lbl.get_width() // 2,
                self.rect.centery - lbl.get_height() // 2,
            ),
        )

    def motion(self, pos: tuple[int, int]) -> None:
        self._hot = self.rect.collidepoint(pos)

    def hit(self, pos: tuple[int, int]) -> bool:
        return self.enabled and self.rect.collidepoint(pos)


# ---------------------------------------------------------------------------
# Main application
# ---------------------------------------------------------------------------
class PygameApp:
    def __init__(
        self,
        n: int,
        m: int,
        data_dir: Path,
        resume: bool = False,
        seed: int | None = None,
    ) -> None:
        pygame.init()
        self._surf = pygame.display.set_mode((WIN_W, WIN_H), pygame.RESIZABLE)
        pygame.display.set_caption("Infinite Sudoku")
        self._clock = pygame.time.Clock()

        # Fonts
        self._f_big = pygame.font.SysFont("Helvetica", 38, bold=True)
        self._f_title = pygame.font.SysFont("Helvetica", 20, bold=True)
        self._f_body = pygame.font.SysFont("Helvetica", 16)
        self._f_btn = pygame.font.SysFont("Helvetica", 17, bold=True)
        self._f_btn_sm = pygame.font.SysFont("Helvetica", 14, bold=True)
        self._f_small = pygame.font.SysFont("Helvetica", 13)
        self._digit_fonts: dict[int, pygame.font.Font] = {}
        self._digit_cache: dict[tuple[int, int, tuple], pygame.Surface] = {}

        rng = random.Random(seed) if seed is not None else None
        self._session = GameSession(
            SaveSlot(data_dir / "savegame.json"),
            Viewport(WIN_W, WIN_H),
            n=n,
            m=m,
            rng=rng,
        )
        self._sel_size = n if n == m and n in {s for _, s in _SIZES} else None
        self._fingers: dict[int, tuple[float, float]] = {}
        self._status_msg = ""
        self._won = False
        self._seen_edits = 0

        self._session.show_menu()
        self._build_menu_btns()
        if resume:
            self._continue_game()

    # ── menu buttons ────────────────────────────────────────────────────────

    def _build_menu_btns(self) -> None:
        w, _ = self._surf.get_size()
        bw, bh, gap = 90, 40, 8
        total_w = len(_SIZES) * bw + (len(_SIZES) - 1) * gap
        sx = (w - total_w) // 2

        self._size_btns: dict[int, _Btn] = {}
        for i, (label, s) in enumerate(_SIZES):
            self._size_btns[s] = _Btn(
                (sx + i * (bw + gap), 250, bw, bh), label, self._f_btn_sm
            )

        bw_lg = 240
        cx = (w - bw_lg) // 2
        self._play_btn = _Btn(
            (cx, 320, bw_lg, 50),
            "N E W   G A M E",
            self._f_btn,
            bg=COL_BLUE,
            hover=COL_LAVENDER,
            fg=COL_BASE,
        )
        self._continue_btn = _Btn(
            (cx, 384, bw_lg, 42),
            "C O N T I N U E",
            self._f_btn_sm,
            bg=COL_YELLOW,
            hover=(255, 240, 200),
            fg=COL_BASE,
        )
        self._quit_btn = _Btn(
            (cx, 440, bw_lg, 42),
            "Q U I T",
            self._f_btn_sm,
            bg=COL_RED,
            hover=(255, 170, 185),
            fg=COL_BASE,
        )
        self._menu_all: list[_Btn] = [
            *self._size_btns.values(),
            self._play_btn,
            self._continue_btn,
            self._quit_btn,
        ]

    # ── helpers ─────────────────────────────────────────────────────────────

    def _blit_center(self, rendered: pygame.Surface, y: int) -> None:
        w = self._surf.get_width()
        self._surf.blit(rendered, ((w - rendered.get_width()) // 2, y))

    def _digit(self, value: int, px: int, colour: tuple) -> pygame.Surface:
        key = (value, px, colour)
        if key not in self._digit_cache:
            if len(self._digit_cache) > 512:  # zooming renders many sizes
                self._digit_cache.clear()
            font = self._digit_fonts.get(px)
            if font is None:
                font = pygame.font.SysFont("Helvetica", px, bold=True)
                self._digit_fonts[px] = font
            self._digit_cache[key] = font.render(str(value), True, colour)
        return self._digit_cache[key]

    # ── drawing ─────────────────────────────────────────────────────────────

    def _draw_board(self) -> None:
        """Draw every visible cell by resolving it through the tiling."""
        session = self._session
        camera, viewport, store = session.camera, session.viewport, session.store
        cell_px = 1.0 / camera.inv_scale
        self._surf.fill(COL_BASE)
        if cell_px < MIN_CELL_PX:
            self._blit_center(
                self._f_small.render("Zoom in to see the cells", True, COL_OVERLAY0),
                int(viewport.height // 2),
            )
            return

        layout = GridLayout(store.n, store.m)
        selected = session.selected_index if session.mode is AppMode.PLAYING else None
        x0, y0 = camera.screen_to_world((0, 0), viewport)
        x1, y1 = camera.screen_to_world((viewport.width, viewport.height), viewport)
        size = math.ceil(cell_px)
        gap = 1 if cell_px >= 10 else 0
        digit_px = int(cell_px * 0.6)

        for cy in range(math.floor(y0), math.ceil(y1)):
            for cx in range(math.floor(x0), math.ceil(x1)):
                coord = resolve((cx + 0.5, cy + 0.5), store.n, store.m)
                if coord is None:
                    continue
                index = layout.cell_index(coord.sx, coord.sy, coord.scx, coord.scy)
                byte = store.cells[index]
                px, py = camera.world_to_screen((cx, cy), viewport)
                rect = pygame.Rect(int(px), int(py), size, size)

                if index == selected:
                    bg = COL_BLUE
                elif is_error(byte):
                    bg = (90, 50, 68)
                else:
                    bg = COL_SURFACE0
                pygame.draw.rect(self._surf, bg, rect.inflate(-gap, -gap))

                if coord.scx % 3 == 0 and coord.scy % 3 == 0 and cell_px >= 10:
                    block = pygame.Rect(int(px), int(py), 3 * size, 3 * size)
                    pygame.draw.rect(self._surf, COL_OVERLAY0, block, width=1)

                value = cell_value(byte)
                if value and digit_px >= MIN_DIGIT_PX:
                    if index == selected:
                        fg = COL_BASE
                    elif is_error(byte):
                        fg = COL_RED
                    elif is_user_entered(byte):
                        fg = COL_PINK
                    else:
                        fg = COL_TEXT
                    lbl = self._digit(value, digit_px, fg)
                    self._surf.blit(
                        lbl,
                        (
                            rect.centerx - lbl.get_width() // 2,
                            rect.centery - lbl.get_height() // 2,
                        ),
                    )

    def _draw_menu(self) -> None:
        self._draw_board()
        w, h = self._surf.get_size()
        veil = pygame.Surface((w, h), pygame.SRCALPHA)
        veil.fill((*COL_MANTLE, 170))
        self._surf.blit(veil, (0, 0))

        self._blit_center(self._f_big.render("INFINITE  SUDOKU", True, COL_TEXT), 110)
        self._blit_center(
            self._f_body.render("Board size (sudokus across × down)", True, COL_SUBTEXT),
            215,
        )

        for s, btn in self._size_btns.items():
            btn.bg = COL_GREEN if s == self._sel_size else COL_SURFACE0
            btn.fg = COL_BASE if s == self._sel_size else COL_TEXT
            btn.draw(self._surf)

        self._continue_btn.enabled = self._session.continue_available
        self._play_btn.draw(self._surf)
        self._continue_btn.draw(self._surf)
        self._quit_btn.draw(self._surf)

        if self._status_msg:
            self._blit_center(self._f_small.render(self._status_msg, True, COL_YELLOW), 500)

    def _draw_game(self) -> None:
        self._draw_board()
        session = self._session
        w, h = self._surf.get_size()

        pygame.draw.rect(self._surf, COL_MANTLE, pygame.Rect(0, 0, w, 64))
        self._blit_center(
            self._f_title.render(
                f"Infinite Sudoku  {session.n}×{session.m}", True, COL_TEXT
            ),
            8,
        )
        coord = session.selection.current_coord(session.n, session.m)
        where = (
            f"Sudoku ({coord.sx}, {coord.sy})  cell ({coord.scx + 1}, {coord.scy + 1})"
            if coord is not None
            else "No cell selected"
        )
        self._blit_center(
            self._f_body.render(f"Edits: {session.edits}    {where}", True, COL_PINK),
            36,
        )

        if self._won:
            self._blit_center(
                self._f_big.render("★  S O L V E D  ★", True, COL_GREEN),
                h // 2 - 20,
            )

        pygame.draw.rect(self._surf, COL_MANTLE, pygame.Rect(0, h - 48, w, 48))
        if self._status_msg:
            self._blit_center(
                self._f_small.render(self._status_msg, True, COL_YELLOW), h - 44
            )
        self._blit_center(
            self._f_small.render(
                "Drag  pan     Wheel / + -  zoom     Click  select     1-9  enter"
                "     0 / Del  clear     Arrows  scroll     M  menu",
                True,
                COL_OVERLAY0,
            ),
            h - 24,
        )

    # ── event translation ───────────────────────────────────────────────────

    def _feed_pointer(self, ev: pygame.event.Event) -> None:
        machine = self._session.input
        if getattr(ev, "touch", False):
            return  # synthetic mouse event mirrored from a finger
        if ev.type == pygame.MOUSEBUTTONDOWN and ev.button <= 3:
            machine.handle(PointerDown(*ev.pos, button=ev.button))
        elif ev.type == pygame.MOUSEBUTTONUP and ev.button <= 3:
            machine.handle(PointerUp(*ev.pos, button=ev.button))
        elif ev.type == pygame.MOUSEMOTION:
            machine.handle(PointerMove(*ev.pos, buttons=sum(ev.buttons)))
        elif ev.type == pygame.MOUSEWHEEL:
            mx, my = pygame.mouse.get_pos()
            machine.handle(Wheel(mx, my, delta_y=-ev.y))

    def _feed_touch(self, ev: pygame.event.Event) -> None:
        w, h = self._surf.get_size()
        pos = (ev.x * w, ev.y * h)
        machine = self._session.input
        if ev.type == pygame.FINGERDOWN:
            self._fingers[ev.finger_id] = pos
            machine.handle(TouchStart(tuple(self._fingers.values())))
        elif ev.type == pygame.FINGERMOTION:
            self._fingers[ev.finger_id] = pos
            machine.handle(TouchMove(tuple(self._fingers.values())))
        elif ev.type == pygame.FINGERUP:
            self._fingers.pop(ev.finger_id, None)
            machine.handle(TouchEnd(tuple(self._fingers.values())))

    @staticmethod
    def _key_name(ev: pygame.event.Event) -> str | None:
        if ev.key in _KEY_NAMES:
            return _KEY_NAMES[ev.key]
        if ev.unicode and ev.unicode in "0123456789+-=":
            return ev.unicode
        return None

    # ── event handling ──────────────────────────────────────────────────────

    def _ev_menu(self, ev: pygame.event.Event) -> bool:
        if ev.type == pygame.MOUSEMOTION:
            for b in self._menu_all:
                b.motion(ev.pos)
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            for s, b in self._size_btns.items():
                if b.hit(ev.pos):
                    self._sel_size = s
                    return True
            if self._play_btn.hit(ev.pos):
                self._start_game()
            elif self._continue_btn.hit(ev.pos):
                self._continue_game()
            elif self._quit_btn.hit(ev.pos):
                return False
        elif ev.type == pygame.KEYDOWN:
            if ev.key == pygame.K_RETURN:
                self._start_game()
            elif ev.key == pygame.K_c:
                self._continue_game()
            elif ev.key in (pygame.K_q, pygame.K_ESCAPE):
                return False
        return True

    def _ev_game(self, ev: pygame.event.Event) -> bool:
        if ev.type in (
            pygame.MOUSEBUTTONDOWN,
            pygame.MOUSEBUTTONUP,
            pygame.MOUSEMOTION,
            pygame.MOUSEWHEEL,
        ):
            self._feed_pointer(ev)
        elif ev.type in (pygame.FINGERDOWN, pygame.FINGERMOTION, pygame.FINGERUP):
            self._feed_touch(ev)
        elif ev.type == pygame.WINDOWFOCUSLOST:
            self._fingers.clear()
            self._session.input.reset()
        elif ev.type == pygame.KEYDOWN:
            if ev.key == pygame.K_m:
                self._to_menu()
                return True
            name = self._key_name(ev)
            if name is not None:
                edits = self._session.edits
                self._session.input.handle(KeyPress(name))
                if name.isdigit() or name in ("Backspace", "Delete"):
                    self._status_msg = (
                        "" if self._session.edits != edits else "That cell cannot be changed"
                    )
        return True

    # ── game state ──────────────────────────────────────────────────────────

    def _start_game(self) -> None:
        if self._sel_size is not None:
            self._session.new_game(self._sel_size, self._sel_size)
        else:
            self._session.new_game()
        self._fingers.clear()
        self._won = False
        self._seen_edits = 0
        self._status_msg = ""

    def _continue_game(self) -> None:
        try:
            resumed = self._session.continue_game()
        except CorruptionError:
            self._status_msg = "The saved game was damaged and has been discarded."
            return
        if not resumed:
            self._status_msg = "No saved game to continue."
            return
        self._fingers.clear()
        self._won = self._session.is_won
        self._seen_edits = 0
        self._status_msg = ""

    def _to_menu(self) -> None:
        self._session.show_menu()
        self._status_msg = ""

    def _check_win(self) -> None:
        session = self._session
        if session.edits == self._seen_edits:
            return
        self._seen_edits = session.edits
        if not self._won and session.is_won:
            self._won = True
            LOGGER.info("Board solved after %d edits", session.edits)
            self._status_msg = "Every sudoku on the board is complete!"

    # ── main loop ───────────────────────────────────────────────────────────

    def run_loop(self) -> None:
        _dispatch = {
            AppMode.MENU: self._ev_menu,
            AppMode.PLAYING: self._ev_game,
        }
        _draw = {
            AppMode.MENU: self._draw_menu,
            AppMode.PLAYING: self._draw_game,
        }

        running = True
        while running:
            dt = self._clock.tick(FPS) / 1000.0
            for ev in pygame.event.get():
                if ev.type == pygame.QUIT:
                    running = False
                    break
                if ev.type == pygame.VIDEORESIZE:
                    self._session.resize(ev.w, ev.h)
                    LOGGER.debug("Window resized to %dx%d", ev.w, ev.h)
                    self._build_menu_btns()
                    continue
                handler = _dispatch.get(self._session.mode)
                if handler and not handler(ev):
                    running = False
                    break

            self._session.tick(dt)
            if self._session.mode is AppMode.PLAYING:
                self._check_win()

            drawer = _draw.get(self._session.mode)
            if drawer:
                drawer()
            pygame.display.flip()

        pygame.quit()


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------
def run(
    n: int = 4,
    m: int = 4,
    data_dir: Path = Path("data"),
    resume: bool = False,
    seed: int | None = None,
) -> None:
    """Launch the Pygame GUI (opens on the menu unless resuming)."""
    app = PygameApp(n, m, data_dir, resume=resume, seed=seed)
    app.run_loop()
