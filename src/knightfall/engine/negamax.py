"""Pure-Python move picker (fixed-depth negamax + alpha-beta)."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from time import perf_counter

from knightfall.core.board import Board
from knightfall.core.enums import Color, PieceType
from knightfall.core.move import Move
from knightfall.core.rules import Rules
from knightfall.engine.search import CancelCheck, IEngine, SearchLimits, SearchResult

_LOGGER = logging.getLogger(__name__)

_INF_SCORE = 1_000_000
MATE_SCORE = 100_000
CHECK_PENALTY = 10

PIECE_VALUES: dict[PieceType, int] = {
    PieceType.PAWN: 100,
    PieceType.KNIGHT: 300,
    PieceType.BISHOP: 300,
    PieceType.ROOK: 500,
    PieceType.QUEEN: 900,
    PieceType.KING: 0,
}


def _never_cancelled() -> bool:
    return False


def legal_children(board: Board, color: Color) -> Iterator[tuple[Move, Board]]:
    """Yield ``(move, resulting board)`` for every legal move of *color*.

    Moves come from :meth:`Rules.legal_moves` in its order. *board* is never
    touched; each child is a fresh snapshot.
    """
    for move in Rules.legal_moves(board, color):
        child = board.snapshot()
        child.execute(*move.as_tuple())
        yield move, child


class NegamaxEngine(IEngine):
    """Material-only searcher walking the full tree to a fixed depth.

    Results are reproducible: moves are generated in a fixed order and the
    first root move reaching the best score wins ties.
    """

    __slots__ = ("limits", "_nodes", "_deadline", "_cancel_check")

    def __init__(self, limits: SearchLimits | None = None) -> None:
        self.limits = limits if limits is not None else SearchLimits()
        self._nodes = 0
        self._deadline: float | None = None
        self._cancel_check: CancelCheck = _never_cancelled

    def choose_move(
        self, board: Board, side: Color, depth: int | None = None
    ) -> Move | None:
        """Best move for *side*, or ``None`` when it has no legal move."""
        limits = self.limits
        if depth is not None:
            limits = SearchLimits(max_depth=depth, time_limit_ms=limits.time_limit_ms)
        return self.search(board, side, limits).best_move

    def search(
        self,
        board: Board,
        side: Color,
        limits: SearchLimits,
        is_cancelled: CancelCheck | None = None,
    ) -> SearchResult:
        self._nodes = 0
        self._cancel_check = is_cancelled or _never_cancelled
        self._deadline = None
        if limits.time_limit_ms is not None:
            ms = max(limits.time_limit_ms, 1)
            self._deadline = perf_counter() + (ms / 1000.0)

        best_move: Move | None = None
        best_score = -_INF_SCORE
        first_move: Move | None = None
        alpha = -_INF_SCORE
        beta = _INF_SCORE
        interrupted = False

        for move, child in legal_children(board, side):
            if first_move is None:
                first_move = move
            if self._should_stop():
                interrupted = True
                break

            score = -self._negamax(child, side.opposite, limits.max_depth - 1, -beta, -alpha)
            if self._should_stop():
                # The subtree was cut short; its score cannot be trusted.
                interrupted = True
                break

            if score > best_score:
                best_score = score
                best_move = move
            if score > alpha:
                alpha = score

        if first_move is None:
            return SearchResult(None, self._terminal_score(board, side), 0, self._nodes)

        if interrupted:
            if best_move is None:
                return SearchResult(first_move, self.evaluate(board, side), 0, self._nodes)
            return SearchResult(best_move, best_score, 0, self._nodes)

        _LOGGER.debug(
            "Search for %s: %s score=%d depth=%d nodes=%d",
            side,
            best_move,
            best_score,
            limits.max_depth,
            self._nodes,
        )
        return SearchResult(best_move, best_score, limits.max_depth, self._nodes)

    def _negamax(
        self,
        board: Board,
        to_move: Color,
        depth: int,
        alpha: int,
        beta: int,
    ) -> int:
        self._nodes += 1
        if self._should_stop():
            return self.evaluate(board, to_move)

        if depth <= 0:
            # Mate and stalemate are scored even on the horizon.
            if not Rules.has_any_legal_move(board, to_move):
                return self._terminal_score(board, to_move)
            return self.evaluate(board, to_move)

        best = -_INF_SCORE
        any_move = False
        for _move, child in legal_children(board, to_move):
            any_move = True
            score = -self._negamax(child, to_move.opposite, depth - 1, -beta, -alpha)
            if score > best:
                best = score
            if score > alpha:
                alpha = score
            if alpha >= beta:
                return best

        if not any_move:
            return self._terminal_score(board, to_move)
        return best

    # -- Evaluation ----------------------------------------------------------

    @staticmethod
    def evaluate(board: Board, perspective: Color) -> int:
        """Material balance from *perspective*, minus a penalty when in check."""
        material = 0
        for piece in board.occupied():
            value = PIECE_VALUES[piece.piece_type]
            material += value if piece.color == Color.WHITE else -value

        score = material if perspective == Color.WHITE else -material
        if Rules.is_in_check(board, perspective):
            score -= CHECK_PENALTY
        return score

    @staticmethod
    def _terminal_score(board: Board, to_move: Color) -> int:
        """Score for a side with no legal move: mated or stalemated."""
        return -MATE_SCORE if Rules.is_in_check(board, to_move) else 0

    def _should_stop(self) -> bool:
        if self._cancel_check():
            return True
        return self._deadline is not None and perf_counter() >= self._deadline
