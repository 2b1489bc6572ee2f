from backend.models.board import (
    Board,
    BoardKey,
    Direction,
    Move,
    Position,
    validate_board_input,
)

__all__ = ["Board", "BoardKey", "Direction", "Move", "Position", "validate_board_input"]
