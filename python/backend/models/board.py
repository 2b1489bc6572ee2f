"""Board model for the sliding puzzle solver."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import StrEnum
from typing import Sequence

from backend.errors import InvalidInputError, MalformedBoardError


class Direction(StrEnum):
    """Direction the *tile* slides; the blank moves the opposite way."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def arrow(self) -> str:
        return _ARROWS[self]


_ARROWS: dict[Direction, str] = {
    Direction.UP: "↑",
    Direction.DOWN: "↓",
    Direction.LEFT: "←",
    Direction.RIGHT: "→",
}

# Blank offset -> direction of the tile that slides into the blank.
# Enumeration order is fixed so tie-breaking is reproducible.
_NEIGHBOR_OFFSETS: tuple[tuple[int, int, Direction], ...] = (
    (-1, 0, Direction.DOWN),
    (1, 0, Direction.UP),
    (0, -1, Direction.RIGHT),
    (0, 1, Direction.LEFT),
)

BoardKey = tuple[int, ...]


@dataclass(frozen=True, slots=True)
class Position:
    row: int
    col: int

    def __str__(self) -> str:
        return f"({self.row}, {self.col})"


@dataclass(frozen=True, slots=True)
class Move:
    """One tile sliding from ``from_pos`` into the blank at ``to_pos``."""

    from_pos: Position
    to_pos: Position
    tile: int
    direction: Direction


@dataclass(frozen=True, slots=True)
class Board:
    """Immutable N×N sliding puzzle board.

    Tiles are stored row-major in a flat tuple; 0 represents the blank.
    ``blank`` caches the index of the 0 entry.  Boards are never mutated:
    every transition returns a new board.
    """

    size: int
    tiles: tuple[int, ...]
    blank: int

    # -- construction helpers -------------------------------------------------

    @classmethod
    def from_flat(cls, flat: Sequence[int], size: int | None = None) -> Board:
        """Create a board from a flat row-major tile list.

        Example::

            Board.from_flat([1, 2, 3, 4, 5, 6, 7, 0, 8])
        """
        tiles = tuple(flat)
        if size is None:
            size = math.isqrt(len(tiles))
            if size * size != len(tiles):
                raise MalformedBoardError(
                    f"{len(tiles)} tiles do not form a square board."
                )
        if len(tiles) != size * size:
            raise MalformedBoardError(
                f"Expected {size * size} tiles for a {size}×{size} board, "
                f"got {len(tiles)}."
            )
        blanks = tiles.count(0)
        if blanks != 1:
            raise MalformedBoardError(
                f"A board needs exactly one blank, found {blanks}."
            )
        return cls(size=size, tiles=tiles, blank=tiles.index(0))

    # -- queries --------------------------------------------------------------

    @property
    def key(self) -> BoardKey:
        """Collision-free hashable key: the tiles themselves."""
        return self.tiles

    @property
    def blank_pos(self) -> Position:
        return self.position(self.blank)

    def position(self, index: int) -> Position:
        row, col = divmod(index, self.size)
        return Position(row, col)

    def get_tile(self, row: int, col: int) -> int:
        return self.tiles[row * self.size + col]

    def rows(self) -> list[list[int]]:
        n = self.size
        return [list(self.tiles[r * n : (r + 1) * n]) for r in range(n)]

    def is_tile_correct(self, row: int, col: int, goal: Board) -> bool:
        """Check if the tile at (row, col) matches *goal* there."""
        return self.get_tile(row, col) == goal.get_tile(row, col)

    def to_text(self) -> str:
        return ",".join(str(v) for v in self.tiles)

    # -- transitions ----------------------------------------------------------

    def neighbors(self) -> list[tuple[Board, Move]]:
        """Every board one move away, paired with the move producing it."""
        n = self.size
        br, bc = divmod(self.blank, n)
        result: list[tuple[Board, Move]] = []
        for dr, dc, direction in _NEIGHBOR_OFFSETS:
            tr, tc = br + dr, bc + dc
            if not (0 <= tr < n and 0 <= tc < n):
                continue
            tile_index = tr * n + tc
            tiles = list(self.tiles)
            tile = tiles[tile_index]
            tiles[self.blank] = tile
            tiles[tile_index] = 0
            move = Move(
                from_pos=Position(tr, tc),
                to_pos=Position(br, bc),
                tile=tile,
                direction=direction,
            )
            result.append((Board(n, tuple(tiles), tile_index), move))
        return result

    def apply(self, move: Move) -> Board:
        """Return the board after *move*; raise if it is not legal here."""
        for board, candidate in self.neighbors():
            if candidate == move:
                return board
        raise InvalidInputError(
            f"Illegal move: tile {move.tile} {move.direction.value} "
            f"from {move.from_pos} to {move.to_pos}."
        )


# -- parsing ------------------------------------------------------------------


def validate_board_input(text: str, size: int = 4) -> Board:
    """Parse a comma-separated board such as ``"1,2,3,4,5,6,7,8,0"``.

    Requires exactly ``size * size`` distinct integers covering
    ``0 .. size * size - 1``.
    """
    cells = size * size
    parts = [p.strip() for p in text.split(",")]

    if len(parts) != cells:
        raise InvalidInputError(f"Board must have {cells} values.")

    numbers: list[int] = []
    for part in parts:
        digits = part[1:] if part[:1] in ("+", "-") else part
        if not (digits.isascii() and digits.isdigit()):
            raise InvalidInputError(f"Invalid number: {part!r}")
        numbers.append(int(part))

    values = set(numbers)
    if len(values) != len(numbers):
        raise InvalidInputError("Duplicate values found.")

    for i in range(cells):
        if i not in values:
            raise InvalidInputError(f"Missing value: {i}")

    return Board.from_flat(numbers, size)
