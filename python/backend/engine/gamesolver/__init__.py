from backend.engine.gamesolver.config import (
    AStarBudget,
    FallbackBudget,
    IDAStarBudget,
    SolverConfig,
)
from backend.engine.gamesolver.context import CancellationToken, Progress
from backend.engine.gamesolver.solvability import is_solvable
from backend.engine.gamesolver.solver import (
    SolutionStep,
    SolveSession,
    SolveStatus,
    Solver,
    apply_moves,
    get_solution_steps,
    solve,
)

__all__ = [
    "AStarBudget",
    "CancellationToken",
    "FallbackBudget",
    "IDAStarBudget",
    "Progress",
    "SolutionStep",
    "SolveSession",
    "SolveStatus",
    "Solver",
    "SolverConfig",
    "apply_moves",
    "get_solution_steps",
    "is_solvable",
    "solve",
]
