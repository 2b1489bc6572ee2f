#!/usr/bin/env python3
"""Sliding Puzzle Solver.

Usage::

    python main.py solve "1,2,3,4,5,6,7,8,9,10,11,0,13,14,15,12"
    python main.py solve "4,1,3,0,2,5,7,8,6" -s 3 --animate
    python main.py check "1,2,3,4,5,6,8,7,0" -s 3
    python main.py scramble -s 4 -m 60 --seed 7
    python main.py hint "1,2,3,4,5,6,7,0,8" -s 3
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.logging import RichHandler

ROOT = Path(__file__).resolve().parent  # python/
PROJECT_ROOT = ROOT.parent
DEFAULT_CONFIG = PROJECT_ROOT / "solver.json"

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.engine.gamegenerator import GameGenerator  # noqa: E402
from backend.engine.gamesolver import SolverConfig  # noqa: E402
from backend.errors import SolverError  # noqa: E402
from backend.models.board import validate_board_input  # noqa: E402
from frontend.cli.rich import app as rich_app  # noqa: E402


# -- helpers ------------------------------------------------------------------


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=rich_app.console, show_path=False)],
        force=True,
    )


def _fail(error: Exception) -> None:
    rich_app.console.print(f"[red]{error}[/red]")
    raise typer.Exit(code=1)


_SIZE = typer.Option(4, "-s", "--size", min=2, max=8, help="Grid size (2-8).")
_VERBOSE = typer.Option(False, "-v", "--verbose", help="Log solver progress.")
_CONFIG = typer.Option(
    None, "-c", "--config",
    help="JSON file with per-tier search budgets.",
)


# -- CLI entry point ----------------------------------------------------------

app = typer.Typer(add_completion=False, help="Sliding Puzzle Solver.")


@app.command()
def solve(
    board: str = typer.Argument(..., help="Comma-separated start board, 0 = blank."),
    target: Optional[str] = typer.Option(
        None, "-t", "--target",
        help="Comma-separated target board. Defaults to the solved board.",
    ),
    size: int = _SIZE,
    config: Optional[Path] = _CONFIG,
    animate: bool = typer.Option(False, "--animate", help="Replay the solution."),
    verbose: bool = _VERBOSE,
) -> None:
    """Find a short move sequence from BOARD to the target."""
    _setup_logging(verbose)
    try:
        initial = validate_board_input(board, size)
        goal = (
            validate_board_input(target, size)
            if target is not None
            else GameGenerator.solved(size)
        )
        solver_config = SolverConfig.from_file(config or DEFAULT_CONFIG)
        rich_app.solve_board(initial, goal, solver_config, animate=animate)
    except SolverError as e:
        _fail(e)


@app.command()
def check(
    board: str = typer.Argument(..., help="Comma-separated board, 0 = blank."),
    size: int = _SIZE,
) -> None:
    """Report whether BOARD can reach the solved board."""
    try:
        solvable = rich_app.print_check(validate_board_input(board, size))
    except SolverError as e:
        _fail(e)
    if not solvable:
        raise typer.Exit(code=2)


@app.command()
def scramble(
    size: int = _SIZE,
    moves: int = typer.Option(100, "-m", "--moves", min=1, help="Random moves to apply."),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed."),
) -> None:
    """Print a random solvable board."""
    rich_app.print_scramble(size, moves, seed)


@app.command()
def hint(
    board: str = typer.Argument(..., help="Comma-separated board, 0 = blank."),
    size: int = _SIZE,
    config: Optional[Path] = _CONFIG,
    verbose: bool = _VERBOSE,
) -> None:
    """Print the next move toward the solved board."""
    _setup_logging(verbose)
    try:
        rich_app.print_hint(
            validate_board_input(board, size),
            SolverConfig.from_file(config or DEFAULT_CONFIG),
        )
    except SolverError as e:
        _fail(e)


if __name__ == "__main__":
    app()
