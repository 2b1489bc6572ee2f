"""Per-solve search context: progress reporting, suspension, cancellation."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable

from backend.engine.gamesolver.heuristic import Heuristic
from backend.models.board import Board

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Progress:
    """Snapshot handed to the progress observer at suspension points."""

    status: str
    iterations: int | None = None
    open_set_size: int | None = None
    closed_set_size: int | None = None
    best_heuristic: int | None = None
    threshold: int | None = None
    progress: float | None = None
    tier: str | None = None


ProgressObserver = Callable[[Progress], None]


class CancellationToken:
    """Flag a host sets to stop a running solve at its next suspension point."""

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


@dataclass
class SearchContext:
    """Everything one search tier needs for a single solve.

    Built once per solve and never shared, so the heuristic's goal
    positions and the observer belong to that invocation only.
    """

    start: Board
    goal: Board
    heuristic: Heuristic
    observer: ProgressObserver | None = None
    cancel_token: CancellationToken | None = None
    yield_delay: float = 0.0

    @property
    def cancelled(self) -> bool:
        return self.cancel_token is not None and self.cancel_token.cancelled

    def report(self, progress: Progress) -> None:
        logger.debug("%s", progress.status)
        if self.observer is not None:
            self.observer(progress)

    async def suspend(self, progress: Progress | None = None) -> bool:
        """Report *progress*, hand control back to the event loop.

        Returns True when the solve was cancelled meanwhile.
        """
        if progress is not None:
            self.report(progress)
        await asyncio.sleep(self.yield_delay)
        return self.cancelled
