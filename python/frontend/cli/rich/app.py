"""Rich terminal frontend.

Shows a window of the endless board centred on the cursor.  The cursor
stays in the middle of the window and the board scrolls underneath it,
one cell per arrow press.
"""

from __future__ import annotations

import math
import random
from pathlib import Path

from rich.align import Align
from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from backend.engine.gameplay import GameSession
from backend.engine.input import KeyPress
from backend.engine.tiling import GridLayout, resolve
from backend.models.camera import Viewport
from backend.models.cell import cell_value, is_error, is_user_entered
from backend.models.exceptions import CorruptionError
from backend.models.savegame import SaveSlot
from frontend.cli.input_handler import get_key

console = Console()

VIEW_COLS = 27
VIEW_ROWS = 15
MIN_SIZE, MAX_SIZE = 1, 8

_KEYS: dict[str, str] = {
    "up": "ArrowUp",
    "down": "ArrowDown",
    "left": "ArrowLeft",
    "right": "ArrowRight",
    "clear": "0",
}


# -- board rendering ----------------------------------------------------------


def _render_board(session: GameSession) -> Text:
    """Return the cells around the cursor, two columns per cell."""
    store = session.store
    layout = GridLayout(store.n, store.m)
    selected = session.selected_index
    wx, wy = session.camera.screen_to_world(session.viewport.center(), session.viewport)
    cx, cy = math.floor(wx), math.floor(wy)

    text = Text()
    for y in range(cy - VIEW_ROWS // 2, cy + VIEW_ROWS // 2 + 1):
        for x in range(cx - VIEW_COLS // 2, cx + VIEW_COLS // 2 + 1):
            coord = resolve((x + 0.5, y + 0.5), store.n, store.m)
            if coord is None:
                text.append("  ")
                continue
            index = layout.cell_index(coord.sx, coord.sy, coord.scx, coord.scy)
            byte = store.cells[index]
            value = cell_value(byte)
            glyph = str(value) if value else "·"

            if is_error(byte):
                style = "bold red"
            elif is_user_entered(byte):
                style = "bold magenta"
            elif value:
                style = "bold white"
            else:
                style = "dim"
            if (coord.scx // 3 + coord.scy // 3) % 2 == 0:
                style += " on #313244"
            if index == selected:
                style = "reverse " + style
            text.append(glyph, style=style)
            text.append(" ")
        text.append("\n")
    return text


# -- screens ------------------------------------------------------------------


def _draw_menu(sel_size: int, can_continue: bool, status: str = "") -> None:
    console.clear()

    sizes = Text()
    for s in range(MIN_SIZE, MAX_SIZE + 1):
        if s > MIN_SIZE:
            sizes.append(" ")
        if s == sel_size:
            sizes.append(f" {s}×{s} ", style="bold green on #313244")
        else:
            sizes.append(f" {s}×{s} ", style="dim")

    nav = Text("  ← →  change size", style="dim")

    opts = Text()
    opts.append("  1", style="bold cyan")
    opts.append("  New game    ")
    if can_continue:
        opts.append("2", style="bold yellow")
        opts.append("  Continue    ")
    else:
        opts.append("2", style="dim bold")
        opts.append("  Continue    ", style="dim")
    opts.append("Q", style="dim bold")
    opts.append("  Quit", style="dim")

    parts = [
        Text(""),
        Align.center(sizes),
        Align.center(nav),
        Text(""),
        Align.center(opts),
        Text(""),
    ]
    if status:
        parts.append(Align.center(Text.from_markup(status)))

    panel = Panel(
        Group(*parts),
        title="[bold]I N F I N I T E   S U D O K U[/bold]",
        border_style="bright_blue",
        padding=(1, 4),
    )

    console.print()
    console.print(Align.center(panel))


def _draw_game(session: GameSession, status: str = "") -> None:
    console.clear()

    coord = session.selection.current_coord(session.n, session.m)
    where = Text()
    if coord is not None:
        where.append("  Sudoku ", style="dim")
        where.append(f"({coord.sx}, {coord.sy})", style="bold yellow")
        where.append("    Cell ", style="dim")
        where.append(f"({coord.scx + 1}, {coord.scy + 1})", style="bold yellow")
    where.append("    Edits: ", style="dim")
    where.append(str(session.edits), style="bold yellow")

    controls = Text()
    controls.append("  ↑↓←→", style="bold cyan")
    controls.append(" / ", style="dim")
    controls.append("WASD", style="bold cyan")
    controls.append("  scroll   ", style="dim")
    controls.append("1-9", style="bold cyan")
    controls.append("  enter   ", style="dim")
    controls.append("0 / X", style="bold cyan")
    controls.append("  clear   ", style="dim")
    controls.append("N", style="bold cyan")
    controls.append("  new   ", style="dim")
    controls.append("Q", style="bold cyan")
    controls.append("  back", style="dim")

    panel = Panel(
        Align.center(_render_board(session)),
        title=f"[bold cyan]Infinite Sudoku  {session.n}×{session.m}[/bold cyan]",
        border_style="bold green" if session.is_won else "bright_blue",
        padding=(1, 2),
    )

    console.print()
    console.print(Align.center(panel))
    console.print(Align.center(where))
    if status:
        console.print(Align.center(Text.from_markup(f"  {status}")))
    console.print(Align.center(controls))


# -- game loop ----------------------------------------------------------------


def _play(session: GameSession) -> None:
    """Play until the player backs out to the menu."""
    session.select_center()
    status = ""

    while True:
        if session.is_won:
            status = "[bold green]★ Every sudoku on the board is complete! ★[/bold green]"
        _draw_game(session, status)
        status = ""
        key = get_key()

        if key == "quit":
            return
        if key == "new":
            session.new_game()
            session.select_center()
            continue

        name = _KEYS.get(key, key)
        if name in ("0", "1", "2", "3", "4", "5", "6", "7", "8", "9"):
            edits = session.edits
            session.input.handle(KeyPress(name))
            if session.edits == edits:
                status = "[yellow]That cell cannot be changed.[/yellow]"
        elif name.startswith("Arrow"):
            session.input.handle(KeyPress(name))


# -- menu loop ----------------------------------------------------------------


def _continue(session: GameSession) -> str:
    try:
        resumed = session.continue_game()
    except CorruptionError:
        return "[red]The saved game was damaged and has been discarded.[/red]"
    if not resumed:
        return "[yellow]No saved game to continue.[/yellow]"
    _play(session)
    return ""


def _menu_loop(session: GameSession, resume: bool) -> None:
    sel_size = max(MIN_SIZE, min(MAX_SIZE, session.n))
    status = _continue(session) if resume else ""

    while True:
        session.show_menu()
        _draw_menu(sel_size, session.continue_available, status)
        status = ""
        key = get_key()

        if key == "quit":
            console.clear()
            console.print(Align.center(Text("\nGoodbye!\n", style="bold cyan")))
            return
        elif key == "left":
            sel_size = max(MIN_SIZE, sel_size - 1)
        elif key == "right":
            sel_size = min(MAX_SIZE, sel_size + 1)
        elif key in ("1", "enter", "new"):
            session.new_game(sel_size, sel_size)
            _play(session)
        elif key in ("2", "continue"):
            status = _continue(session)


# -- public entry point -------------------------------------------------------


def run(
    n: int = 4,
    m: int = 4,
    data_dir: Path = Path("data"),
    resume: bool = False,
    seed: int | None = None,
) -> None:
    """Launch the Rich CLI with interactive menu."""
    rng = random.Random(seed) if seed is not None else None
    session = GameSession(
        SaveSlot(data_dir / "savegame.json"),
        Viewport(console.width, console.height),
        n=n,
        m=m,
        rng=rng,
    )
    _menu_loop(session, resume)
