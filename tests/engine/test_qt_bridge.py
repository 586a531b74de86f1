"""Tests for Qt engine bridge worker."""

from __future__ import annotations

from PyQt6.QtTest import QSignalSpy

from knightfall.core.board import Board
from knightfall.core.enums import Color
from knightfall.core.move import Move
from knightfall.core.notation import board_from_placement
from knightfall.core.rules import Rules
from knightfall.engine.qt_bridge import EngineWorker
from knightfall.engine.search import CancelCheck, SearchLimits, SearchResult


class _CancellingEngine:
    def __init__(self, worker: EngineWorker) -> None:
        self._worker = worker

    def search(
        self,
        board: Board,
        side: Color,
        _limits: SearchLimits,
        is_cancelled: CancelCheck | None = None,
    ) -> SearchResult:
        del is_cancelled
        legal = next(Rules.legal_moves(board, side))
        self._worker.cancel()
        return SearchResult(best_move=legal, score=0, depth=1, nodes=1)


class _NoMoveEngine:
    def search(
        self,
        _board: Board,
        _side: Color,
        _limits: SearchLimits,
        is_cancelled: CancelCheck | None = None,
    ) -> SearchResult:
        del is_cancelled
        return SearchResult(best_move=None, score=-100_000, depth=0, nodes=0)


class _FailingEngine:
    def search(
        self,
        _board: Board,
        _side: Color,
        _limits: SearchLimits,
        is_cancelled: CancelCheck | None = None,
    ) -> SearchResult:
        del is_cancelled
        raise RuntimeError("boom")


class _MutatingEngine:
    def search(
        self,
        board: Board,
        _side: Color,
        _limits: SearchLimits,
        is_cancelled: CancelCheck | None = None,
    ) -> SearchResult:
        del is_cancelled
        board.clear()
        return SearchResult(best_move=Move(6, 4, 4, 4), score=0, depth=1, nodes=1)


class TestEngineWorker:
    def test_emits_best_move(self, qapp: object) -> None:
        worker = EngineWorker(max_depth=1)
        best_moves = QSignalSpy(worker.best_move_ready)
        errors = QSignalSpy(worker.search_error)

        worker.request_move(board_from_placement("3k4/8/3K4/8/8/8/8/R7"), int(Color.WHITE), 3)

        assert len(errors) == 0
        assert len(best_moves) == 1
        request_id, move, score, depth, nodes = best_moves[0]
        assert request_id == 3
        assert move == Move(7, 0, 0, 0)
        assert score == 100_000
        assert depth == 1
        assert nodes > 0

    def test_emits_cancelled_when_search_is_cancelled(self, qapp: object) -> None:
        worker = EngineWorker()
        worker._engine = _CancellingEngine(worker)

        cancelled = QSignalSpy(worker.search_cancelled)
        best_moves = QSignalSpy(worker.best_move_ready)

        worker.request_move(Board.initial(), int(Color.WHITE), 7)

        assert len(cancelled) == 1
        assert cancelled[0][0] == 7
        assert len(best_moves) == 0

    def test_emits_no_move_when_search_returns_none(self, qapp: object) -> None:
        worker = EngineWorker()
        worker._engine = _NoMoveEngine()

        no_move = QSignalSpy(worker.search_no_move)
        best_moves = QSignalSpy(worker.best_move_ready)
        errors = QSignalSpy(worker.search_error)

        worker.request_move(Board.initial(), int(Color.WHITE), 11)

        assert len(no_move) == 1
        assert no_move[0][0] == 11
        assert no_move[0][1] == -100_000
        assert len(best_moves) == 0
        assert len(errors) == 0

    def test_invalid_board_reports_error(self, qapp: object) -> None:
        worker = EngineWorker()
        errors = QSignalSpy(worker.search_error)

        worker.request_move("not a board", int(Color.WHITE), 5)

        assert len(errors) == 1
        assert errors[0][0] == 5
        assert "invalid board" in errors[0][1]

    def test_invalid_side_reports_error(self, qapp: object) -> None:
        worker = EngineWorker()
        errors = QSignalSpy(worker.search_error)

        worker.request_move(Board.initial(), 9, 6)

        assert len(errors) == 1
        assert "invalid side" in errors[0][1]

    def test_engine_exception_reports_error(self, qapp: object) -> None:
        worker = EngineWorker()
        worker._engine = _FailingEngine()
        errors = QSignalSpy(worker.search_error)

        worker.request_move(Board.initial(), int(Color.WHITE), 2)

        assert len(errors) == 1
        assert errors[0][1] == "boom"

    def test_search_runs_on_a_copy(self, qapp: object) -> None:
        worker = EngineWorker()
        worker._engine = _MutatingEngine()
        board = Board.initial()

        worker.request_move(board, int(Color.WHITE), 1)

        assert board == Board.initial()

    def test_cancel_flag_resets_for_next_request(self, qapp: object) -> None:
        worker = EngineWorker(max_depth=1)
        worker.cancel()
        best_moves = QSignalSpy(worker.best_move_ready)

        worker.request_move(Board.initial(), int(Color.WHITE), 4)

        assert len(best_moves) == 1

    def test_set_limits(self, qapp: object) -> None:
        worker = EngineWorker()
        worker.set_limits(2, 0)
        assert worker.limits == SearchLimits(max_depth=2, time_limit_ms=None)
        worker.set_limits(4, 250)
        assert worker.limits == SearchLimits(max_depth=4, time_limit_ms=250)

    def test_set_limits_ignores_non_positive_depth(self, qapp: object) -> None:
        worker = EngineWorker(max_depth=2)
        worker.set_limits(0, 100)
        assert worker.limits == SearchLimits(max_depth=2, time_limit_ms=None)
