"""Solver test suite — tier orchestration and fixture replays.

Boards are pre-built JSON fixtures under ``<project_root>/fixtures/``.
Every test is hard-killed by ``pytest-timeout`` (configured in
``pyproject.toml``).  Returned move lists are replayed through
``apply_moves`` to verify they reach the target.
"""

from __future__ import annotations

import asyncio

import pytest

from backend.engine.gamegenerator import GameGenerator
from backend.engine.gamesolver import (
    AStarBudget,
    CancellationToken,
    FallbackBudget,
    IDAStarBudget,
    Progress,
    SolveStatus,
    Solver,
    SolverConfig,
    apply_moves,
    get_solution_steps,
    is_solvable,
    solve,
)
from backend.engine.gamesolver.outcome import BudgetExceeded, Exhausted, Solved
from backend.errors import (
    InvalidInputError,
    MalformedBoardError,
    SearchExhaustedError,
    SolveCancelledError,
    UnsolvableConfigurationError,
)
from backend.models.board import Board, Direction, Move, Position

from conftest import load_boards

SOLVED_4x4 = [1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15, 0]
ONE_MOVE_4x4 = [1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 0, 13, 14, 15, 12]
WALK_5 = [4, 1, 3, 0, 2, 5, 7, 8, 6]

SKIP_A_STAR = AStarBudget(max_iterations=1)
SKIP_IDA_STAR = IDAStarBudget(max_threshold=0)

_BOARDS_3x3 = load_boards("3x3.json")
_BOARDS_4x4 = load_boards("4x4.json")


def _ids(board_data: dict) -> str:
    return board_data["id"]


def _assert_solve(data: dict) -> None:
    """Solve the board and verify the returned moves reach the goal state."""
    board = Board.from_flat(data["tiles"], data["size"])
    goal = GameGenerator.solved(data["size"])

    moves = asyncio.run(solve(board, goal))

    # ---- move-list sanity ---------------------------------------------------
    assert isinstance(moves, list), "solve() must return a list of Move"
    assert len(moves) > 0, f"Solvable board returned 0 moves ({data['id']})"
    assert all(isinstance(m, Move) for m in moves)

    # ---- replay and check the target is reached ----------------------------
    boards = apply_moves(board, moves)
    assert len(boards) == len(moves) + 1
    assert boards[-1] == goal, f"Board not solved after {len(moves)} moves ({data['id']})"


# -- fixtures -----------------------------------------------------------------


@pytest.mark.parametrize("board_data", _BOARDS_3x3, ids=_ids)
def test_solve_3x3(board_data: dict) -> None:
    _assert_solve(board_data)


@pytest.mark.parametrize("board_data", _BOARDS_4x4, ids=_ids)
def test_solve_4x4(board_data: dict) -> None:
    _assert_solve(board_data)


@pytest.mark.parametrize("seed", range(6))
def test_solve_scrambled_3x3(seed: int) -> None:
    board = GameGenerator.generate(3, 30, seed=seed)
    moves = asyncio.run(solve(board, GameGenerator.solved(3)))
    assert apply_moves(board, moves)[-1] == GameGenerator.solved(3)


# -- concrete cases -----------------------------------------------------------


def test_single_move_scenario() -> None:
    moves = asyncio.run(solve(ONE_MOVE_4x4, SOLVED_4x4))
    assert moves == [Move(Position(3, 3), Position(2, 3), 12, Direction.UP)]
    assert apply_moves(ONE_MOVE_4x4, moves)[-1].tiles == tuple(SOLVED_4x4)


def test_identity_returns_no_moves() -> None:
    session = Solver().session(SOLVED_4x4, SOLVED_4x4)
    assert asyncio.run(session.run()) == []
    assert session.status == SolveStatus.SOLVED
    assert session.history == []
    assert apply_moves(SOLVED_4x4, []) == [Board.from_flat(SOLVED_4x4)]


def test_custom_target() -> None:
    start = GameGenerator.solved(3)
    target = Board.from_flat(WALK_5)
    moves = asyncio.run(solve(start, target))
    assert apply_moves(start, moves)[-1] == target


# -- validation ---------------------------------------------------------------


def test_unsolvable_fails_fast() -> None:
    swapped = [1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 15, 14, 0]
    events: list[Progress] = []
    session = Solver().session(swapped, SOLVED_4x4, on_progress=events.append)
    with pytest.raises(UnsolvableConfigurationError):
        asyncio.run(session.run())
    assert session.status == SolveStatus.UNSOLVABLE
    assert events == []
    assert session.history == []


def test_unsolvable_pair_of_mutually_reachable_boards_is_accepted() -> None:
    # Neither board reaches the standard goal, but they reach each other.
    swapped = Board.from_flat([1, 2, 3, 4, 5, 6, 8, 7, 0])
    target = swapped.neighbors()[0][0]
    assert not is_solvable(swapped) and not is_solvable(target)
    moves = asyncio.run(solve(swapped, target))
    assert apply_moves(swapped, moves)[-1] == target


def test_size_mismatch_is_rejected() -> None:
    with pytest.raises(InvalidInputError, match="target"):
        asyncio.run(solve(WALK_5, SOLVED_4x4))


def test_duplicate_values_are_rejected() -> None:
    with pytest.raises(InvalidInputError):
        asyncio.run(solve([1, 1, 3, 4, 5, 6, 7, 8, 0], WALK_5))


@pytest.mark.parametrize(
    "flat",
    [
        [1, 2, 3, 4, 5, 6, 7, 8, 9],
        [0, 0, 3, 4, 5, 6, 7, 8, 1],
        [1, 2, 3, 4, 5, 6, 7, 0],
    ],
    ids=["no-blank", "two-blanks", "non-square"],
)
def test_malformed_board_is_rejected_as_invalid_input(flat: list[int]) -> None:
    with pytest.raises(InvalidInputError) as info:
        asyncio.run(solve(flat, WALK_5))
    assert not isinstance(info.value, MalformedBoardError)
    assert isinstance(info.value.__cause__, MalformedBoardError)


def test_malformed_target_is_rejected_as_invalid_input() -> None:
    with pytest.raises(InvalidInputError):
        Solver().session(WALK_5, [1, 2, 3, 4, 5, 6, 7, 8, 9])


# -- tier fall-through --------------------------------------------------------


def test_falls_through_to_ida_star() -> None:
    config = SolverConfig(astar=SKIP_A_STAR)
    session = Solver(config).session(WALK_5, GameGenerator.solved(3))
    moves = asyncio.run(session.run())

    assert session.tier == "ida*"
    assert [r.tier for r in session.history] == ["a*", "ida*"]
    assert isinstance(session.history[0].outcome, BudgetExceeded)
    assert isinstance(session.history[1].outcome, Solved)
    assert apply_moves(WALK_5, moves)[-1] == GameGenerator.solved(3)


def test_falls_through_to_fallback() -> None:
    config = SolverConfig(astar=SKIP_A_STAR, ida_star=SKIP_IDA_STAR)
    session = Solver(config).session(WALK_5, GameGenerator.solved(3))
    moves = asyncio.run(session.run())

    assert session.status == SolveStatus.SOLVED
    assert session.tier == "fallback"
    assert [r.tier for r in session.history] == ["a*", "ida*", "fallback"]
    assert apply_moves(WALK_5, moves)[-1] == GameGenerator.solved(3)


def test_all_tiers_exhausted() -> None:
    config = SolverConfig(
        astar=SKIP_A_STAR,
        ida_star=SKIP_IDA_STAR,
        fallback=FallbackBudget(max_states=1),
    )
    session = Solver(config).session(WALK_5, GameGenerator.solved(3))
    with pytest.raises(SearchExhaustedError, match="resource limits"):
        asyncio.run(session.run())
    assert session.status == SolveStatus.EXHAUSTED
    assert isinstance(session.history[-1].outcome, Exhausted)


def test_cancelled_before_search() -> None:
    token = CancellationToken()
    token.cancel()
    session = Solver().session(WALK_5, GameGenerator.solved(3), cancel_token=token)
    with pytest.raises(SolveCancelledError):
        asyncio.run(session.run())
    assert session.status == SolveStatus.CANCELLED
    assert session.history == []


def test_cancelled_mid_search() -> None:
    token = CancellationToken()

    def on_progress(event: Progress) -> None:
        if event.iterations:
            token.cancel()

    config = SolverConfig(astar=AStarBudget(yield_every=1))
    session = Solver(config).session(
        [0, 4, 1, 7, 5, 3, 8, 2, 6], GameGenerator.solved(3), on_progress, token
    )
    with pytest.raises(SolveCancelledError):
        asyncio.run(session.run())
    assert session.status == SolveStatus.CANCELLED
    assert [r.tier for r in session.history] == ["a*"]


# -- progress and concurrency -------------------------------------------------


def test_progress_events() -> None:
    events: list[Progress] = []
    config = SolverConfig(astar=AStarBudget(yield_every=1))
    asyncio.run(solve(WALK_5, GameGenerator.solved(3), events.append, config=config))

    assert events[0].status == "Trying A* algorithm..."
    assert events[0].progress == 5
    assert any(e.iterations for e in events)
    assert all(0 <= e.progress <= 100 for e in events if e.progress is not None)


def test_concurrent_solves_keep_their_own_goals() -> None:
    solver = Solver(SolverConfig(astar=AStarBudget(yield_every=1)))
    solved = GameGenerator.solved(3)
    walk = Board.from_flat(WALK_5)

    async def both() -> tuple[list[Move], list[Move]]:
        return await asyncio.gather(solver.solve(walk, solved), solver.solve(solved, walk))

    forward, backward = asyncio.run(both())
    assert apply_moves(walk, forward)[-1] == solved
    assert apply_moves(solved, backward)[-1] == walk


# -- helpers ------------------------------------------------------------------


def test_hint() -> None:
    solver = Solver()
    move = asyncio.run(solver.hint(ONE_MOVE_4x4))
    assert move is not None and move.tile == 12
    assert asyncio.run(solver.hint(SOLVED_4x4)) is None


def test_apply_moves_rejects_illegal_move() -> None:
    bad = Move(Position(0, 0), Position(0, 1), 1, Direction.RIGHT)
    with pytest.raises(InvalidInputError):
        apply_moves(ONE_MOVE_4x4, [bad])


def test_solution_steps() -> None:
    moves = asyncio.run(solve(ONE_MOVE_4x4, SOLVED_4x4))
    (step,) = get_solution_steps(moves)
    assert step.step == 1
    assert step.tile == 12
    assert step.from_pos == Position(3, 3)
    assert step.to_pos == Position(2, 3)
    assert step.direction == Direction.UP
    assert step.description == "Move tile 12 up ↑"
    assert step.short_description == "12 ↑"
    assert Solver.get_solution_steps([]) == []


def test_static_helpers() -> None:
    assert Solver.is_solvable(ONE_MOVE_4x4)
    assert Solver.apply_moves(SOLVED_4x4, []) == [Board.from_flat(SOLVED_4x4)]
