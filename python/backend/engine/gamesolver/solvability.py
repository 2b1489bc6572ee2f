"""Permutation-parity solvability test."""

from __future__ import annotations

from typing import Sequence

from backend.models.board import Board


def count_inversions(tiles: Sequence[int]) -> int:
    """Count pairs of non-blank tiles that appear in descending order."""
    flat = [v for v in tiles if v != 0]
    inversions = 0
    for i in range(len(flat)):
        for j in range(i + 1, len(flat)):
            if flat[i] > flat[j]:
                inversions += 1
    return inversions


def is_solvable(board: Board | Sequence[int]) -> bool:
    """Return True if *board* can reach the standard solved board.

    Odd sizes need an even inversion count.  Even sizes also depend on the
    blank's row counted from the bottom (1-based): on an even row the
    inversion count must be odd, on an odd row it must be even.
    """
    if not isinstance(board, Board):
        board = Board.from_flat(board)
    inversions = count_inversions(board.tiles)
    if board.size % 2 == 1:
        return inversions % 2 == 0
    blank_row_from_bottom = board.size - board.blank // board.size
    if blank_row_from_bottom % 2 == 0:
        return inversions % 2 == 1
    return inversions % 2 == 0


def same_parity_class(initial: Board, target: Board) -> bool:
    """True when *target* is reachable from *initial* by legal moves."""
    return initial.size == target.size and is_solvable(initial) == is_solvable(target)
