"""Sliding puzzle solver.

Validates that the target is reachable, then tries A*, IDA* and a guided
best-first search in that order.  A tier that runs out of budget is
logged and the next tier takes over; only exhaustion of every tier is
reported to the caller.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import StrEnum
from typing import Awaitable, Callable, Iterable, Sequence

from backend.engine.gamegenerator import GameGenerator
from backend.engine.gamesolver.astar import astar_search
from backend.engine.gamesolver.config import SolverConfig
from backend.engine.gamesolver.context import (
    CancellationToken,
    Progress,
    ProgressObserver,
    SearchContext,
)
from backend.engine.gamesolver.fallback import fallback_search
from backend.engine.gamesolver.heuristic import Heuristic
from backend.engine.gamesolver.ida_star import ida_star_search
from backend.engine.gamesolver.outcome import Cancelled, SearchOutcome, Solved
from backend.engine.gamesolver.solvability import is_solvable, same_parity_class
from backend.errors import (
    InvalidInputError,
    MalformedBoardError,
    SearchExhaustedError,
    SolveCancelledError,
    UnsolvableConfigurationError,
)
from backend.models.board import Board, Direction, Move, Position

logger = logging.getLogger(__name__)

BoardLike = Board | Sequence[int]
SearchFn = Callable[[SearchContext], Awaitable[SearchOutcome]]


class SolveStatus(StrEnum):
    IDLE = "idle"
    VALIDATING = "validating"
    UNSOLVABLE = "unsolvable"
    SEARCHING = "searching"
    SOLVED = "solved"
    EXHAUSTED = "exhausted"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class TierResult:
    tier: str
    outcome: SearchOutcome
    seconds: float


@dataclass(frozen=True)
class SolutionStep:
    step: int
    tile: int
    from_pos: Position
    to_pos: Position
    direction: Direction
    description: str
    short_description: str


def _as_board(board: BoardLike) -> Board:
    if isinstance(board, Board):
        return board
    try:
        return Board.from_flat(board)
    except MalformedBoardError as e:
        raise InvalidInputError(str(e)) from e


def _check_values(board: Board, label: str) -> None:
    if sorted(board.tiles) != list(range(board.size * board.size)):
        raise InvalidInputError(
            f"The {label} board must hold each value 0..{board.size * board.size - 1} once."
        )


# -- one solve ----------------------------------------------------------------


class SolveSession:
    """State machine for a single solve invocation.

    ``status`` moves idle -> validating -> (unsolvable | searching) and from
    searching to solved, exhausted or cancelled.  ``history`` records what
    every attempted tier returned.
    """

    def __init__(
        self,
        initial: BoardLike,
        target: BoardLike,
        config: SolverConfig | None = None,
        on_progress: ProgressObserver | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> None:
        self.initial = _as_board(initial)
        self.target = _as_board(target)
        self.config = config or SolverConfig()
        self.on_progress = on_progress
        self.cancel_token = cancel_token
        self.status = SolveStatus.IDLE
        self.tier: str | None = None
        self.history: list[TierResult] = []

    def _tiers(self) -> list[tuple[str, str, float, SearchFn]]:
        config = self.config
        return [
            ("a*", "Trying A* algorithm...", 5,
             lambda ctx: astar_search(ctx, config.astar)),
            ("ida*", "Switching to IDA* algorithm...", 10,
             lambda ctx: ida_star_search(ctx, config.ida_star)),
            ("fallback", "Using simple search...", 60,
             lambda ctx: fallback_search(ctx, config.fallback)),
        ]

    def _validate(self) -> None:
        self.status = SolveStatus.VALIDATING
        if self.initial.size != self.target.size:
            raise InvalidInputError(
                f"Initial board is {self.initial.size}×{self.initial.size} but "
                f"target is {self.target.size}×{self.target.size}."
            )
        _check_values(self.initial, "initial")
        _check_values(self.target, "target")
        if not same_parity_class(self.initial, self.target):
            self.status = SolveStatus.UNSOLVABLE
            logger.warning("Rejected unsolvable board %s", self.initial.to_text())
            raise UnsolvableConfigurationError("This puzzle configuration cannot be solved.")

    def _cancelled(self) -> SolveCancelledError:
        self.status = SolveStatus.CANCELLED
        logger.info("Solve cancelled during %s", self.tier or "validation")
        return SolveCancelledError("Solve was cancelled.")

    async def run(self) -> list[Move]:
        self._validate()

        if self.initial.key == self.target.key:
            self.status = SolveStatus.SOLVED
            return []

        self.status = SolveStatus.SEARCHING
        ctx = SearchContext(
            start=self.initial,
            goal=self.target,
            heuristic=Heuristic(self.target),
            observer=self.on_progress,
            cancel_token=self.cancel_token,
            yield_delay=self.config.yield_delay,
        )

        for name, status, progress, search in self._tiers():
            if ctx.cancelled:
                raise self._cancelled()
            self.tier = name
            ctx.report(Progress(status=status, progress=progress, tier=name))
            logger.info("Starting %s search", name)

            started = time.perf_counter()
            outcome = await search(ctx)
            self.history.append(TierResult(name, outcome, time.perf_counter() - started))

            if isinstance(outcome, Solved):
                self.status = SolveStatus.SOLVED
                logger.info("%s search found %d moves", name, len(outcome.moves))
                return list(outcome.moves)
            if isinstance(outcome, Cancelled):
                raise self._cancelled()
            logger.info(
                "%s search gave up (%s after %d iterations), falling through",
                name, outcome.reason, outcome.iterations,
            )

        self.status = SolveStatus.EXHAUSTED
        logger.warning("No solution found for %s", self.initial.to_text())
        raise SearchExhaustedError("No solution found within resource limits.")


# -- public API ---------------------------------------------------------------


class Solver:
    """Holds the tier budgets; every solve gets its own session and goal cache."""

    def __init__(self, config: SolverConfig | None = None) -> None:
        self.config = config or SolverConfig()

    def session(
        self,
        initial: BoardLike,
        target: BoardLike,
        on_progress: ProgressObserver | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> SolveSession:
        return SolveSession(initial, target, self.config, on_progress, cancel_token)

    async def solve(
        self,
        initial: BoardLike,
        target: BoardLike,
        on_progress: ProgressObserver | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> list[Move]:
        """Return the moves turning *initial* into *target*."""
        return await self.session(initial, target, on_progress, cancel_token).run()

    async def hint(self, board: BoardLike, target: BoardLike | None = None) -> Move | None:
        """Return the next move toward *target*, or ``None`` if already there.

        *target* defaults to the standard solved board.
        """
        board = _as_board(board)
        if target is None:
            target = GameGenerator.solved(board.size)
        moves = await self.solve(board, target)
        return moves[0] if moves else None

    @staticmethod
    def is_solvable(board: BoardLike) -> bool:
        return is_solvable(board)

    @staticmethod
    def apply_moves(initial: BoardLike, moves: Iterable[Move]) -> list[Board]:
        return apply_moves(initial, moves)

    @staticmethod
    def get_solution_steps(moves: Iterable[Move]) -> list[SolutionStep]:
        return get_solution_steps(moves)


async def solve(
    initial: BoardLike,
    target: BoardLike,
    on_progress: ProgressObserver | None = None,
    *,
    config: SolverConfig | None = None,
    cancel_token: CancellationToken | None = None,
) -> list[Move]:
    return await Solver(config).solve(initial, target, on_progress, cancel_token)


def apply_moves(initial: BoardLike, moves: Iterable[Move]) -> list[Board]:
    """Replay *moves*: the initial board followed by one board per move."""
    board = _as_board(initial)
    boards = [board]
    for move in moves:
        board = board.apply(move)
        boards.append(board)
    return boards


def get_solution_steps(moves: Iterable[Move]) -> list[SolutionStep]:
    return [
        SolutionStep(
            step=i,
            tile=move.tile,
            from_pos=move.from_pos,
            to_pos=move.to_pos,
            direction=move.direction,
            description=f"Move tile {move.tile} {move.direction.value} {move.direction.arrow}",
            short_description=f"{move.tile} {move.direction.arrow}",
        )
        for i, move in enumerate(moves, 1)
    ]
