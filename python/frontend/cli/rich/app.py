"""Rich terminal frontend — board panels and live solver progress.

Drives the cooperative solver from ``asyncio.run`` and feeds its progress
events into a Rich progress bar, so the terminal keeps redrawing while
the search runs.
"""

from __future__ import annotations

import asyncio
import sys
import time

import rich.box
from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table
from rich.text import Text

from backend.engine.gamegenerator import GameGenerator
from backend.engine.gamesolver import (
    SolverConfig,
    Solver,
    apply_moves,
    get_solution_steps,
    is_solvable,
)
from backend.engine.gamesolver import Progress as SolverProgress
from backend.engine.gamesolver.solver import SolveSession
from backend.models.board import Board, Move

console = Console()


# -- board rendering ----------------------------------------------------------


def _render_board(board: Board, goal: Board | None = None) -> Table:
    """Return a Rich Table representing the puzzle grid."""
    width = len(str(board.size * board.size - 1))
    table = Table(
        show_header=False,
        show_edge=True,
        pad_edge=True,
        box=rich.box.HEAVY,
        border_style="bright_blue",
        padding=(0, 1),
    )
    for _ in range(board.size):
        table.add_column(width=width + 1, justify="center")

    for r, row in enumerate(board.rows()):
        cells: list[str] = []
        for c, val in enumerate(row):
            if val == 0:
                cells.append("[dim]·[/dim]")
            elif goal is not None and board.is_tile_correct(r, c, goal):
                cells.append(f"[bold green]{val:>{width}}[/bold green]")
            else:
                cells.append(f"[bold white]{val:>{width}}[/bold white]")
        table.add_row(*cells)

    return table


def _board_panel(board: Board, goal: Board | None, title: str, style: str = "bright_blue") -> Panel:
    return Panel(
        Align.center(_render_board(board, goal)),
        title=f"[bold]{title}[/bold]",
        border_style=style,
        padding=(1, 2),
    )


def _render_steps(moves: list[Move]) -> Table:
    table = Table(
        title="Solution",
        title_style="bold cyan",
        box=rich.box.ROUNDED,
        border_style="dim",
    )
    table.add_column("#", justify="right", style="dim", width=4)
    table.add_column("Tile", justify="right", style="yellow")
    table.add_column("From", style="dim")
    table.add_column("To", style="dim")
    table.add_column("Move")

    for step in get_solution_steps(moves):
        table.add_row(
            str(step.step),
            str(step.tile),
            str(step.from_pos),
            str(step.to_pos),
            step.description,
        )
    return table


# -- solving ------------------------------------------------------------------


async def _run_with_progress(session: SolveSession) -> list[Move]:
    columns = (
        SpinnerColumn(),
        TextColumn("[cyan]{task.description}"),
        BarColumn(),
        TextColumn("{task.percentage:>3.0f}%"),
        TimeElapsedColumn(),
    )
    with Progress(*columns, console=console, transient=True) as bar:
        task = bar.add_task("Starting solver...", total=100)

        def on_progress(event: SolverProgress) -> None:
            bar.update(task, description=event.status)
            if event.progress is not None:
                bar.update(task, completed=min(event.progress, 100))

        session.on_progress = on_progress
        return await session.run()


def _animate(boards: list[Board], goal: Board, moves: list[Move], delay: float) -> None:
    for i, (board, move) in enumerate(zip(boards[1:], moves)):
        console.clear()
        progress = Text()
        progress.append(f"  Solving… move {i + 1}/{len(moves)} ", style="bold cyan")
        progress.append(f"({move.tile} {move.direction.arrow})", style="dim")

        size = board.size
        console.print()
        console.print(Align.center(
            _board_panel(board, goal, f"Auto-Solve  {size}×{size}", "cyan")
        ))
        console.print(Align.center(progress))
        sys.stdout.flush()
        time.sleep(delay)


def solve_board(
    initial: Board,
    target: Board,
    config: SolverConfig,
    animate: bool = False,
    delay: float = 0.05,
) -> list[Move]:
    """Solve *initial* toward *target* and print the result."""
    size = initial.size
    console.print(Align.center(_board_panel(initial, target, f"Start  {size}×{size}")))

    session = Solver(config).session(initial, target)
    started = time.perf_counter()
    moves = asyncio.run(_run_with_progress(session))
    elapsed = time.perf_counter() - started

    boards = apply_moves(initial, moves)
    if animate and moves:
        _animate(boards, target, moves, delay)

    if moves:
        console.print(Align.center(_render_steps(moves)))
    summary = Text()
    summary.append(f"  Solved in {len(moves)} moves", style="bold green")
    summary.append(f"  ({session.tier or 'no search'}, {elapsed:.2f}s)", style="dim")
    console.print(Align.center(summary))
    return moves


def print_check(board: Board) -> bool:
    solvable = is_solvable(board)
    console.print(Align.center(_board_panel(board, None, "Board")))
    if solvable:
        console.print("[green]Solvable.[/green]")
    else:
        console.print("[red]Not solvable: the tile parity cannot reach the solved board.[/red]")
    return solvable


def print_scramble(size: int, moves: int, seed: int | None) -> Board:
    board = GameGenerator.generate(size, moves, seed)
    console.print(Align.center(_board_panel(board, GameGenerator.solved(size), "Scrambled")))
    console.print(board.to_text())
    return board


def print_hint(board: Board, config: SolverConfig) -> Move | None:
    move = asyncio.run(Solver(config).hint(board))
    if move is None:
        console.print("[green]Already solved![/green]")
    else:
        console.print(
            f"[cyan]Hint:[/cyan] move tile [bold]{move.tile}[/bold] "
            f"{move.direction.value} {move.direction.arrow}"
        )
    return move
