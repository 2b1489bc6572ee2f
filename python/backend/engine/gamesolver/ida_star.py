"""Tier 2: iterative-deepening A* on an explicit frame stack.

Memory stays proportional to the current path: cycle checks only look at
the boards on that path, never at a global visited set.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import Iterator

from backend.engine.gamesolver.config import IDAStarBudget
from backend.engine.gamesolver.context import Progress, SearchContext
from backend.engine.gamesolver.outcome import (
    BudgetExceeded,
    Cancelled,
    Exhausted,
    SearchOutcome,
    Solved,
)
from backend.models.board import Board, BoardKey, Move

logger = logging.getLogger(__name__)

TIER = "ida*"


@dataclass
class _Frame:
    board: Board
    g: int
    children: Iterator[tuple[Board, Move]]


class _Run:
    """Counters shared by every deepening iteration of one IDA* search."""

    def __init__(self, ctx: SearchContext, budget: IDAStarBudget) -> None:
        self.ctx = ctx
        self.budget = budget
        self.started = time.perf_counter()
        self.generated = 0

    @property
    def elapsed(self) -> float:
        return time.perf_counter() - self.started

    async def bounded_dfs(
        self, threshold: int, iteration: int
    ) -> tuple[SearchOutcome | None, float]:
        """Depth-first pass that prunes every branch with f > *threshold*.

        Returns ``(outcome, next_threshold)``: *outcome* is set when the goal
        was found or a budget/cancellation stopped the pass, otherwise
        *next_threshold* is the smallest pruned f (``inf`` if nothing was
        pruned).
        """
        ctx = self.ctx
        h = ctx.heuristic
        goal_key = ctx.goal.key
        start = ctx.start

        if start.key == goal_key:
            return Solved((), iteration), math.inf

        next_threshold = math.inf
        path_keys: set[BoardKey] = {start.key}
        path_moves: list[Move] = []
        stack = [_Frame(start, 0, iter(start.neighbors()))]

        while stack:
            frame = stack[-1]
            child = next(frame.children, None)
            if child is None:
                stack.pop()
                path_keys.discard(frame.board.key)
                if stack:
                    path_moves.pop()
                continue

            board, move = child
            key = board.key
            if key in path_keys:
                continue

            self.generated += 1
            if self.generated % self.budget.yield_every == 0:
                elapsed = self.elapsed
                if await ctx.suspend():
                    return Cancelled(iteration), next_threshold
                if elapsed > self.budget.max_seconds:
                    logger.info("IDA* timed out after %.2fs at threshold %d", elapsed, threshold)
                    return BudgetExceeded("time", iteration), next_threshold

            g = frame.g + 1
            f = g + h(board)
            if f > threshold:
                next_threshold = min(next_threshold, f)
                continue

            if key == goal_key:
                return Solved(tuple(path_moves) + (move,), iteration), next_threshold

            path_keys.add(key)
            path_moves.append(move)
            stack.append(_Frame(board, g, iter(board.neighbors())))

        return None, next_threshold


async def ida_star_search(ctx: SearchContext, budget: IDAStarBudget) -> SearchOutcome:
    """Deepen the f threshold from ``h(start)`` until the goal is reached.

    Stops with :class:`BudgetExceeded` once the threshold reaches
    ``max_threshold``, after ``max_iterations`` deepening passes, or after
    ``max_seconds``; with :class:`Exhausted` when a pass prunes nothing.
    """
    run = _Run(ctx, budget)
    threshold = ctx.heuristic(ctx.start)
    iteration = 0

    while threshold < budget.max_threshold and iteration < budget.max_iterations:
        iteration += 1
        elapsed = run.elapsed

        cancelled = await ctx.suspend(Progress(
            status=f"IDA* depth {threshold} ({int(elapsed)}s)",
            iterations=iteration,
            threshold=threshold,
            progress=50 + threshold / budget.max_threshold * 30,
            tier=TIER,
        ))
        if cancelled:
            return Cancelled(iteration)
        if elapsed > budget.max_seconds:
            logger.info("IDA* timed out after %.2fs", elapsed)
            return BudgetExceeded("time", iteration)

        outcome, next_threshold = await run.bounded_dfs(threshold, iteration)
        if isinstance(outcome, Solved):
            ctx.report(Progress(status="IDA* solution found!", progress=95, tier=TIER))
            return outcome
        if outcome is not None:
            return outcome
        if next_threshold == math.inf:
            return Exhausted("no pruned branches", iteration)

        logger.debug("IDA* threshold %d -> %d", threshold, next_threshold)
        threshold = int(next_threshold)

    if iteration >= budget.max_iterations:
        return BudgetExceeded("iterations", iteration)
    return BudgetExceeded("threshold", iteration)
