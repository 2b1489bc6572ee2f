"""Tagged results returned by each search tier."""

from __future__ import annotations

from dataclasses import dataclass

from backend.models.board import Move


@dataclass(frozen=True)
class Solved:
    moves: tuple[Move, ...]
    iterations: int = 0


@dataclass(frozen=True)
class BudgetExceeded:
    """An iteration, time, or depth cap stopped the tier."""

    reason: str
    iterations: int = 0


@dataclass(frozen=True)
class Exhausted:
    """The tier ran out of states to explore without reaching the goal."""

    reason: str
    iterations: int = 0


@dataclass(frozen=True)
class Cancelled:
    iterations: int = 0


SearchOutcome = Solved | BudgetExceeded | Exhausted | Cancelled
