"""Qt bridge to run engine search in a worker thread.

Move the worker to a ``QThread`` and connect a queued signal to
:meth:`EngineWorker.request_move`. Results come back by signal on the
caller's thread, where they can be fed to ``GameSession.submit``.
"""

from __future__ import annotations

import logging
import threading

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from knightfall.core.board import Board
from knightfall.core.enums import Color
from knightfall.engine.negamax import NegamaxEngine
from knightfall.engine.search import SearchLimits

_LOGGER = logging.getLogger(__name__)


class EngineWorker(QObject):
    """Thread-affine worker that computes engine moves on demand."""

    best_move_ready = pyqtSignal(int, object, int, int, int)
    search_cancelled = pyqtSignal(int)
    search_no_move = pyqtSignal(int, int, int, int)
    search_error = pyqtSignal(int, str)

    def __init__(
        self,
        *,
        max_depth: int = 3,
        time_limit_ms: int | None = None,
    ) -> None:
        super().__init__()
        self._engine = NegamaxEngine()
        self._limits = SearchLimits(max_depth=max_depth, time_limit_ms=time_limit_ms)
        self._cancel_event = threading.Event()

    @property
    def limits(self) -> SearchLimits:
        return self._limits

    @pyqtSlot(object, int, int)
    def request_move(self, board_obj: object, side: int, request_id: int) -> None:
        """Search for *side*'s best move on *board_obj* and emit the result.

        The board is snapshotted first, so the caller may keep mutating its
        own copy while the search runs.
        """
        if not isinstance(board_obj, Board):
            self.search_error.emit(request_id, "Engine received invalid board")
            return
        try:
            color = Color(side)
        except ValueError:
            self.search_error.emit(request_id, f"Engine received invalid side {side}")
            return

        self._cancel_event.clear()
        try:
            result = self._engine.search(
                board_obj.snapshot(),
                color,
                self._limits,
                is_cancelled=self._cancel_event.is_set,
            )
        except Exception as exc:
            _LOGGER.exception("Engine search failed")
            self.search_error.emit(request_id, str(exc))
            return

        if self._cancel_event.is_set():
            self.search_cancelled.emit(request_id)
            return

        if result.best_move is None:
            self.search_no_move.emit(
                request_id,
                result.score,
                result.depth,
                result.nodes,
            )
            return

        self.best_move_ready.emit(
            request_id,
            result.best_move,
            result.score,
            result.depth,
            result.nodes,
        )

    @pyqtSlot()
    def cancel(self) -> None:
        """Request cancellation of the current search."""
        self._cancel_event.set()

    @pyqtSlot(int, int)
    def set_limits(self, max_depth: int, time_limit_ms: int) -> None:
        """Update search limits (takes effect on the next search).

        A non-positive time limit means no limit. A non-positive depth is
        ignored and the previous limits are kept.
        """
        try:
            self._limits = SearchLimits(
                max_depth=max_depth,
                time_limit_ms=time_limit_ms if time_limit_ms > 0 else None,
            )
        except ValueError as exc:
            _LOGGER.warning("Ignoring engine limits: %s", exc)
