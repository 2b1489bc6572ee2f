"""Exception hierarchy for the sliding puzzle solver.

Only :class:`InvalidInputError`, :class:`UnsolvableConfigurationError`,
:class:`SearchExhaustedError` and :class:`SolveCancelledError` reach
callers of ``Solver.solve``.  Per-tier budget overruns are reported as
outcome values, never raised.
"""

from __future__ import annotations


class SolverError(Exception):
    """Base class for every error raised by the solver package."""


class InvalidInputError(SolverError, ValueError):
    """Board text or move list that cannot be used as given."""


class MalformedBoardError(SolverError, ValueError):
    """A board that breaks the one-blank / square-size contract."""


class UnsolvableConfigurationError(SolverError):
    """The target board cannot be reached from the initial board."""


class SearchExhaustedError(SolverError):
    """Every search tier gave up without reaching the target."""


class SolveCancelledError(SolverError):
    """The caller cancelled the solve while it was in progress."""


class ConfigError(SolverError, ValueError):
    """Invalid solver configuration."""
