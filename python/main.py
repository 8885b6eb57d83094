#!/usr/bin/env python3
"""Infinite Sudoku.

Usage::

    python main.py                    # interactive menu
    python main.py -f pygame          # Pygame GUI (has its own menu)
    python main.py -f rich -w 2 -H 3  # Rich terminal, 2×3 sudokus
    python main.py -f pygame --continue
    python main.py --info             # describe the saved game
"""

import importlib
import logging
import sys
from enum import StrEnum
from pathlib import Path
from typing import Optional

import typer

ROOT = Path(__file__).resolve().parent  # python/
PROJECT_ROOT = ROOT.parent
DATA_DIR = PROJECT_ROOT / "data"
SAVE_FILE = DATA_DIR / "savegame.json"

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.utils.logger import configure_logging  # noqa: E402


# -- frontend registry -------------------------------------------------------


class Frontend(StrEnum):
    rich = "rich"
    pygame = "pygame"


_RUNNERS = {
    Frontend.rich: "frontend.cli.rich.app",
    Frontend.pygame: "frontend.gui.pygame.app",
}


# -- helpers ------------------------------------------------------------------


def _print_save_info() -> None:
    from backend.models.cell import cell_value, is_error, is_user_entered
    from backend.models.exceptions import CorruptionError
    from backend.models.savegame import SaveSlot

    try:
        record = SaveSlot(SAVE_FILE).load()
    except CorruptionError as exc:
        print(f"\n  Saved game is damaged: {exc}\n")
        return
    if record is None:
        print("\n  No saved game.\n")
        return

    filled = sum(1 for b in record.data if cell_value(b))
    entered = sum(1 for b in record.data if is_user_entered(b))
    errors = sum(1 for b in record.data if is_error(b))
    print(f"\n  === SAVED GAME ({record.n}x{record.m} sudokus) ===")
    print(f"  Cells:   {len(record.data)}")
    print(f"  Filled:  {filled}")
    print(f"  Entered: {entered}")
    print(f"  Errors:  {errors}\n")


def _ask_dimension(label: str) -> int:
    raw = input(f"  {label} (1-8, default 4): ").strip() or "4"
    try:
        value = int(raw)
        if not 1 <= value <= 8:
            raise ValueError
    except ValueError:
        print("  Invalid size, using 4.")
        value = 4
    return value


def _menu_loop() -> None:
    while True:
        print()
        print("  ======================================")
        print("       I N F I N I T E   S U D O K U    ")
        print("  ======================================")
        print()
        print("  1.  Play  (Pygame GUI)")
        print("  2.  Play  (Rich Terminal)")
        print("  3.  Saved game info")
        print("  0.  Quit")
        print()

        choice = input("  Select: ").strip()

        if choice == "0":
            print("\n  Goodbye!\n")
            return

        if choice in ("1", "2"):
            n = _ask_dimension("Sudokus across")
            m = _ask_dimension("Sudokus down")
            frontend = Frontend.pygame if choice == "1" else Frontend.rich
            mod = importlib.import_module(_RUNNERS[frontend])
            mod.run(n=n, m=m, data_dir=DATA_DIR)

        elif choice == "3":
            _print_save_info()

        else:
            print("  Unknown option.")


# -- CLI entry point ----------------------------------------------------------

app = typer.Typer(add_completion=False)


@app.command()
def main(
    frontend: Optional[Frontend] = typer.Option(
        None, "-f", "--frontend",
        help="Frontend to launch. Omit for interactive menu.",
    ),
    width: int = typer.Option(
        4, "-w", "--width",
        min=1, max=8,
        help="Sudokus across the repeating board (1-8).",
    ),
    height: int = typer.Option(
        4, "-H", "--height",
        min=1, max=8,
        help="Sudokus down the repeating board (1-8).",
    ),
    resume: bool = typer.Option(
        False, "--continue",
        help="Resume the saved game straight away.",
    ),
    seed: Optional[int] = typer.Option(
        None, "--seed",
        help="Seed for reproducible puzzles.",
    ),
    log_level: str = typer.Option(
        "WARNING", "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ERROR).",
    ),
    info: bool = typer.Option(
        False, "--info",
        help="Describe the saved game and exit.",
    ),
    discard: bool = typer.Option(
        False, "--discard",
        help="Delete the saved game and exit.",
    ),
) -> None:
    """Infinite Sudoku."""
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise typer.BadParameter(f"Unknown log level {log_level!r}.", param_hint="--log-level")
    configure_logging(level)

    if info:
        _print_save_info()
        return

    if discard:
        from backend.models.savegame import SaveSlot

        SaveSlot(SAVE_FILE).discard()
        print("\n  Saved game discarded.\n")
        return

    if frontend is None:
        _menu_loop()
        return

    mod = importlib.import_module(_RUNNERS[frontend])
    mod.run(n=width, m=height, data_dir=DATA_DIR, resume=resume, seed=seed)


if __name__ == "__main__":
    app()
