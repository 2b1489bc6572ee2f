"""Generates solvable sliding puzzle boards."""

from __future__ import annotations

import random

from backend.errors import InvalidInputError
from backend.models.board import Board

DEFAULT_SCRAMBLE_MOVES = 100


class GameGenerator:
    """Creates solvable puzzles by random walks from the solved state."""

    @staticmethod
    def solved(size: int) -> Board:
        """Return the goal-state board (all tiles in order, blank bottom-right)."""
        cells = size * size
        return Board.from_flat([*range(1, cells), 0], size)

    @staticmethod
    def scramble(
        board: Board,
        moves: int = DEFAULT_SCRAMBLE_MOVES,
        rng: random.Random | None = None,
    ) -> Board:
        """Return *board* after *moves* random legal moves.

        The walk never immediately undoes its previous move.
        """
        rng = rng or random.Random()
        prev_blank: int | None = None

        for _ in range(moves):
            options = [
                nb for nb, _move in board.neighbors() if nb.blank != prev_blank
            ]
            prev_blank = board.blank
            board = rng.choice(options)
        return board

    @staticmethod
    def generate(
        size: int,
        moves: int = DEFAULT_SCRAMBLE_MOVES,
        seed: int | None = None,
    ) -> Board:
        """Return a random *solvable* board of the given size that is not solved.

        Raises InvalidInputError when *moves* is below 1.
        """
        if moves < 1:
            raise InvalidInputError(f"A scramble needs at least one move, got {moves}.")
        rng = random.Random(seed)
        solved = GameGenerator.solved(size)
        board = GameGenerator.scramble(solved, moves, rng)

        # Ensure the board is not already solved
        while board == solved:
            board = GameGenerator.scramble(board, moves, rng)

        return board
