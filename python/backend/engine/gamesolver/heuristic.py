"""Admissible distance estimate: Manhattan distance plus linear conflicts.

Goal positions are always passed in explicitly (or bound inside a
:class:`Heuristic` built for one solve), so two solves running side by
side never read each other's target.
"""

from __future__ import annotations

from typing import Sequence

from backend.models.board import Board

# goals[value] -> (row, col) of that tile on the target board.
GoalPositions = tuple[tuple[int, int], ...]

LINEAR_CONFLICT_WEIGHT = 2


def goal_positions(target: Board) -> GoalPositions:
    n = target.size
    goals: list[tuple[int, int]] = [(0, 0)] * (n * n)
    for index, value in enumerate(target.tiles):
        goals[value] = divmod(index, n)
    return tuple(goals)


def manhattan(board: Board, goals: GoalPositions) -> int:
    n = board.size
    distance = 0
    for index, value in enumerate(board.tiles):
        if value == 0:
            continue
        row, col = divmod(index, n)
        goal_row, goal_col = goals[value]
        distance += abs(row - goal_row) + abs(col - goal_col)
    return distance


def _reversed_pairs(order: Sequence[int]) -> int:
    count = 0
    for i in range(len(order)):
        for j in range(i + 1, len(order)):
            if order[i] > order[j]:
                count += 1
    return count


def linear_conflicts(board: Board, goals: GoalPositions) -> int:
    """Count tile pairs sharing their goal line but sitting in reversed order.

    A pair counts when both tiles are in the row (column) that is also their
    goal row (column) and their current order is the opposite of their
    goal-column (goal-row) order.
    """
    n = board.size
    tiles = board.tiles
    conflicts = 0
    for row in range(n):
        goal_cols = [
            goals[v][1] for v in tiles[row * n : (row + 1) * n]
            if v and goals[v][0] == row
        ]
        conflicts += _reversed_pairs(goal_cols)
    for col in range(n):
        goal_rows = [
            goals[v][0] for v in tiles[col::n]
            if v and goals[v][1] == col
        ]
        conflicts += _reversed_pairs(goal_rows)
    return conflicts


def estimate(board: Board, goals: GoalPositions) -> int:
    return manhattan(board, goals) + LINEAR_CONFLICT_WEIGHT * linear_conflicts(board, goals)


class Heuristic:
    """Distance estimate toward one target board.

    Built fresh for every solve; calling it returns
    ``manhattan + 2 * linear_conflicts`` for the given board.
    """

    __slots__ = ("target", "goals")

    def __init__(self, target: Board) -> None:
        self.target = target
        self.goals = goal_positions(target)

    def __call__(self, board: Board) -> int:
        return estimate(board, self.goals)

    def manhattan(self, board: Board) -> int:
        return manhattan(board, self.goals)
