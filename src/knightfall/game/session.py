"""GameSession: turn order, legality, undo/redo over an authoritative board.

Emits events via simple callbacks so a UI, a network peer or tests can
subscribe.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from knightfall.core.board import Board, PromotionSelector
from knightfall.core.enums import Color, GameResult, MoveRejection
from knightfall.core.move import Move
from knightfall.core.movement import can_move
from knightfall.core.piece import Piece
from knightfall.core.rules import Rules
from knightfall.core.types import in_bounds

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

MoveCallback = Callable[[Move, "Piece | None"], None]  # move, captured
GameOverCallback = Callable[[GameResult], None]


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)


@dataclass(slots=True)
class _HistoryEntry:
    """Whole-board snapshot plus the turn state that went with it."""

    board: Board
    side_to_move: Color
    game_over: bool


# ── Session ──────────────────────────────────────────────────────────────────


class GameSession:
    """Orchestrates a chess game: validates moves, switches turns, keeps
    undo/redo history as whole-board snapshots.

    Every entry point is total: a refused request returns ``False`` and leaves
    the session untouched.

    Thread-safety: none. A UI thread and a network listener must serialise
    their calls (one dispatch queue or one lock per session).
    """

    __slots__ = (
        "_board",
        "_side_to_move",
        "_game_over",
        "_undo_stack",
        "_redo_stack",
        "last_rejection",
        "events",
    )

    def __init__(
        self,
        board: Board | None = None,
        promotion_selector: PromotionSelector | None = None,
    ) -> None:
        self._board = board if board is not None else Board()
        if promotion_selector is not None:
            self._board.promotion_selector = promotion_selector
        self._side_to_move = Color.WHITE
        self._game_over = False
        self._undo_stack: list[_HistoryEntry] = []
        self._redo_stack: list[_HistoryEntry] = []
        self.last_rejection: MoveRejection | None = None
        self.events = GameEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def board(self) -> Board:
        return self._board

    @property
    def side_to_move(self) -> Color:
        return self._side_to_move

    @property
    def is_game_over(self) -> bool:
        return self._game_over

    @property
    def can_undo(self) -> bool:
        return bool(self._undo_stack)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    @property
    def promotion_selector(self) -> PromotionSelector | None:
        return self._board.promotion_selector

    @promotion_selector.setter
    def promotion_selector(self, selector: PromotionSelector | None) -> None:
        self._board.promotion_selector = selector

    @property
    def result(self) -> GameResult:
        """Outcome of the game; the side to move is the one that ended it."""
        if not self._game_over:
            return GameResult.IN_PROGRESS
        loser = self._side_to_move.opposite
        if Rules.is_checkmate(self._board, loser):
            return (
                GameResult.WHITE_WINS if loser == Color.BLACK else GameResult.BLACK_WINS
            )
        return GameResult.DRAW

    # ── Lifecycle ────────────────────────────────────────────────────────

    def start(self) -> None:
        """Set up (or reset) a new game from the standard position."""
        self._board.reset_to_standard()
        self._side_to_move = Color.WHITE
        self._game_over = False
        self.last_rejection = None
        self.clear_history()

    def load(self, board: Board, side_to_move: Color, game_over: bool) -> None:
        """Replace the game state wholesale; a loaded game has no history."""
        self._board.restore_from(board)
        self.set_side_to_move(side_to_move)
        self.set_game_over(game_over)
        self.last_rejection = None
        self.clear_history()

    def set_side_to_move(self, color: Color) -> None:
        self._side_to_move = color

    def set_game_over(self, game_over: bool) -> None:
        self._game_over = game_over

    def clear_history(self) -> None:
        self._undo_stack.clear()
        self._redo_stack.clear()

    # ── Moves ────────────────────────────────────────────────────────────

    def check_move(self, sr: int, sc: int, er: int, ec: int) -> MoveRejection | None:
        """Why (sr, sc) -> (er, ec) cannot be played now, or ``None`` if it can."""
        if self._game_over:
            return MoveRejection.GAME_OVER
        if not in_bounds(sr, sc) or not in_bounds(er, ec):
            return MoveRejection.OUT_OF_BOUNDS
        piece = self._board.get(sr, sc)
        if piece is None:
            return MoveRejection.NO_PIECE
        if piece.color != self._side_to_move:
            return MoveRejection.WRONG_TURN
        if not can_move(self._board, sr, sc, er, ec):
            return MoveRejection.ILLEGAL_GEOMETRY
        if not Rules.leaves_king_safe(self._board, sr, sc, er, ec):
            return MoveRejection.SELF_CHECK
        return None

    def play_move(self, sr: int, sc: int, er: int, ec: int) -> bool:
        """Play a move for the side to move. Returns True if it was applied."""
        rejection = self.check_move(sr, sc, er, ec)
        self.last_rejection = rejection
        if rejection is not None:
            _LOGGER.debug(
                "Rejected %s: %s", Move(sr, sc, er, ec).notation, rejection.name
            )
            return False

        entry = self._history_entry()
        try:
            captured = self._board.execute(sr, sc, er, ec)
        except Exception:
            # Only the promotion selector can raise; the board is untouched.
            _LOGGER.warning(
                "Promotion for %s was not resolved",
                Move(sr, sc, er, ec).notation,
                exc_info=True,
            )
            self.last_rejection = MoveRejection.PROMOTION_CANCELLED
            return False
        self._undo_stack.append(entry)
        self._redo_stack.clear()

        mover = self._side_to_move
        opponent = mover.opposite
        if Rules.is_checkmate(self._board, opponent):
            self._game_over = True
            _LOGGER.info("Checkmate: %s wins", mover)
        elif Rules.is_stalemate(self._board, opponent):
            self._game_over = True
            _LOGGER.info("Stalemate: draw")
        else:
            self._side_to_move = opponent

        self._emit_move(Move(sr, sc, er, ec), captured)
        if self._game_over:
            self._emit_game_over(self.result)
        return True

    def submit(self, move: Move) -> bool:
        """Play a :class:`Move`; the entry point for remote or engine moves."""
        return self.play_move(*move.as_tuple())

    def undo(self) -> bool:
        """Step back one move. Returns False if there is nothing to undo.

        The side to move and the game-over flag are restored from history
        rather than flipped, so undoing a mating move reopens the game with
        the mating side to move, and redoing it ends the game again.
        """
        if not self._undo_stack:
            return False
        self._redo_stack.append(self._history_entry())
        self._restore_entry(self._undo_stack.pop())
        return True

    def redo(self) -> bool:
        """Re-apply the last undone move. Returns False if there is none."""
        if not self._redo_stack:
            return False
        self._undo_stack.append(self._history_entry())
        self._restore_entry(self._redo_stack.pop())
        return True

    # ── Internal helpers ─────────────────────────────────────────────────

    def _history_entry(self) -> _HistoryEntry:
        return _HistoryEntry(self._board.snapshot(), self._side_to_move, self._game_over)

    def _restore_entry(self, entry: _HistoryEntry) -> None:
        # The turn is restored rather than flipped: a game-ending move does
        # not pass the turn, so a flip would hand it to the wrong side.
        self._board.restore_from(entry.board)
        self._side_to_move = entry.side_to_move
        self._game_over = entry.game_over
        self.last_rejection = None

    def _emit_move(self, move: Move, captured: Piece | None) -> None:
        for cb in self.events.on_move:
            cb(move, captured)

    def _emit_game_over(self, result: GameResult) -> None:
        for cb in self.events.on_game_over:
            cb(result)
