"""Shared helpers for the solver test-suite."""

from __future__ import annotations

import json
from collections import deque
from pathlib import Path
from typing import Callable

import pytest

from backend.models.board import Board, BoardKey

FIXTURES_DIR = Path(__file__).resolve().parent.parent.parent / "fixtures"


def load_boards(name: str) -> list[dict]:
    with open(FIXTURES_DIR / name) as f:
        return json.load(f)


def _bfs_distances(goal: Board, max_depth: int) -> dict[BoardKey, tuple[Board, int]]:
    """Exact move distance to *goal* for every board within *max_depth*."""
    seen: dict[BoardKey, tuple[Board, int]] = {goal.key: (goal, 0)}
    frontier: deque[Board] = deque([goal])
    while frontier:
        board = frontier.popleft()
        depth = seen[board.key][1]
        if depth == max_depth:
            continue
        for neighbor, _move in board.neighbors():
            if neighbor.key not in seen:
                seen[neighbor.key] = (neighbor, depth + 1)
                frontier.append(neighbor)
    return seen


@pytest.fixture
def bfs_distances() -> Callable[[Board, int], dict[BoardKey, tuple[Board, int]]]:
    return _bfs_distances
