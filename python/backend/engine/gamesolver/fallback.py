"""Tier 3: guided best-first search, capped in states, time and depth."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from backend.engine.gamesolver.config import FallbackBudget
from backend.engine.gamesolver.context import Progress, SearchContext
from backend.engine.gamesolver.outcome import Cancelled, Exhausted, SearchOutcome, Solved
from backend.engine.gamesolver.priority_queue import PriorityQueue
from backend.models.board import Board, BoardKey, Move

logger = logging.getLogger(__name__)

TIER = "fallback"


@dataclass(frozen=True, slots=True)
class _Node:
    board: Board
    depth: int
    parent: _Node | None = None
    move: Move | None = None

    def path(self) -> tuple[Move, ...]:
        moves: list[Move] = []
        node: _Node | None = self
        while node is not None and node.move is not None:
            moves.append(node.move)
            node = node.parent
        moves.reverse()
        return tuple(moves)


async def fallback_search(ctx: SearchContext, budget: FallbackBudget) -> SearchOutcome:
    """Best-first on ``h + depth`` with a global visited set.

    Boards are never revisited, which keeps memory bounded but gives up
    optimality (and completeness).  Any cap being hit, or the frontier
    running dry, yields :class:`Exhausted`.
    """
    h = ctx.heuristic
    goal_key = ctx.goal.key
    started = time.perf_counter()

    queue: PriorityQueue[_Node] = PriorityQueue()
    visited: set[BoardKey] = {ctx.start.key}
    best_heuristic = h(ctx.start)
    queue.enqueue(_Node(ctx.start, 0), best_heuristic)

    iterations = 0
    while not queue.is_empty():
        if iterations >= budget.max_states:
            logger.info("Fallback search hit its state cap (%d)", budget.max_states)
            return Exhausted("states", iterations)
        iterations += 1

        if iterations % budget.yield_every == 0:
            elapsed = time.perf_counter() - started
            cancelled = await ctx.suspend(Progress(
                status=f"Guided search (h={best_heuristic})... ({int(elapsed)}s)",
                iterations=iterations,
                open_set_size=queue.size(),
                closed_set_size=len(visited),
                best_heuristic=best_heuristic,
                progress=70 + iterations / budget.max_states * 25,
                tier=TIER,
            ))
            if cancelled:
                return Cancelled(iterations)
            if elapsed > budget.max_seconds:
                logger.info("Fallback search timed out after %.2fs", elapsed)
                return Exhausted("time", iterations)

        node = queue.dequeue()
        assert node is not None
        node_h = h(node.board)
        if node_h < best_heuristic:
            best_heuristic = node_h
            logger.debug("Improved heuristic to %d at depth %d", best_heuristic, node.depth)

        if node.board.key == goal_key:
            logger.info("Fallback search found a %d-move solution", node.depth)
            ctx.report(Progress(status="Guided search found solution!", progress=100, tier=TIER))
            return Solved(node.path(), iterations)

        if node.depth >= budget.max_depth:
            continue

        for neighbor, move in node.board.neighbors():
            neighbor_key = neighbor.key
            if neighbor_key in visited:
                continue
            visited.add(neighbor_key)
            child = _Node(neighbor, node.depth + 1, node, move)
            queue.enqueue(child, h(neighbor) + child.depth)

    logger.info("Fallback search exhausted after %d states (best h=%d)", iterations, best_heuristic)
    return Exhausted("search space", iterations)
