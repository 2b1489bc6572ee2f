"""Tier 1: A* with a slack bound over the starting estimate."""

from __future__ import annotations

import logging
import time

from backend.engine.gamesolver.config import AStarBudget
from backend.engine.gamesolver.context import Progress, SearchContext
from backend.engine.gamesolver.outcome import (
    BudgetExceeded,
    Cancelled,
    Exhausted,
    SearchOutcome,
    Solved,
)
from backend.engine.gamesolver.priority_queue import PriorityQueue
from backend.models.board import Board, BoardKey, Move

logger = logging.getLogger(__name__)

TIER = "a*"


def reconstruct_path(
    came_from: dict[BoardKey, tuple[Board, Move]], goal: Board
) -> tuple[Move, ...]:
    """Walk predecessor links from *goal* back to the start."""
    path: list[Move] = []
    key = goal.key
    while key in came_from:
        previous, move = came_from[key]
        path.append(move)
        key = previous.key
    path.reverse()
    return tuple(path)


async def astar_search(ctx: SearchContext, budget: AStarBudget) -> SearchOutcome:
    """Best-first search on f = g + h.

    Neighbours whose f exceeds ``h(start) + budget.slack`` are never queued,
    so the result is optimal only among the paths that survive pruning.
    Running past ``max_iterations`` or ``max_seconds`` yields
    :class:`BudgetExceeded`; an open set emptied by pruning yields
    :class:`Exhausted`.
    """
    h = ctx.heuristic
    goal_key = ctx.goal.key
    started = time.perf_counter()

    open_set: PriorityQueue[Board] = PriorityQueue()
    closed_set: set[BoardKey] = set()
    g_score: dict[BoardKey, int] = {ctx.start.key: 0}
    came_from: dict[BoardKey, tuple[Board, Move]] = {}

    initial_h = h(ctx.start)
    max_f = initial_h + budget.slack
    open_set.enqueue(ctx.start, initial_h)

    ctx.report(Progress(
        status="A* search in progress...",
        iterations=0,
        open_set_size=1,
        closed_set_size=0,
        best_heuristic=initial_h,
        tier=TIER,
    ))

    iterations = 0
    while not open_set.is_empty():
        if iterations >= budget.max_iterations:
            return BudgetExceeded("iterations", iterations)
        iterations += 1

        if iterations % budget.yield_every == 0:
            elapsed = time.perf_counter() - started
            current = open_set.peek()
            cancelled = await ctx.suspend(Progress(
                status=f"A* searching... ({int(elapsed)}s)",
                iterations=iterations,
                open_set_size=open_set.size(),
                closed_set_size=len(closed_set),
                best_heuristic=h(current) if current is not None else 0,
                progress=15 + iterations / budget.max_iterations * 30,
                tier=TIER,
            ))
            if cancelled:
                return Cancelled(iterations)
            if elapsed > budget.max_seconds:
                logger.info("A* timed out after %.2fs", elapsed)
                return BudgetExceeded("time", iterations)

        current = open_set.dequeue()
        assert current is not None
        current_key = current.key

        if current_key == goal_key:
            ctx.report(Progress(status="A* solution found!", progress=50, tier=TIER))
            return Solved(reconstruct_path(came_from, current), iterations)

        if current_key in closed_set:
            continue
        closed_set.add(current_key)

        tentative_g = g_score[current_key] + 1
        for neighbor, move in current.neighbors():
            neighbor_key = neighbor.key
            if neighbor_key in closed_set:
                continue
            neighbor_h = h(neighbor)
            if tentative_g + neighbor_h > max_f:
                continue
            existing = g_score.get(neighbor_key)
            if existing is None or tentative_g < existing:
                came_from[neighbor_key] = (current, move)
                g_score[neighbor_key] = tentative_g
                open_set.enqueue(neighbor, tentative_g + neighbor_h)

    return Exhausted("open set empty", iterations)
