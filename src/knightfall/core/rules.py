"""High-level chess rules: check, legality, checkmate, stalemate."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

from knightfall.core.enums import Color, GameResult
from knightfall.core.move import Move
from knightfall.core.movement import attacks, can_move
from knightfall.core.types import BOARD_SIZE

if TYPE_CHECKING:
    from knightfall.core.board import Board


class Rules:
    """Static rule-checker that operates on a :class:`Board`.

    Nothing here mutates the board passed in; trial moves are played on
    snapshots.
    """

    @staticmethod
    def is_square_attacked(board: Board, row: int, col: int, by_color: Color) -> bool:
        """Is (row, col) attacked by any piece of *by_color*?"""
        for piece in board.pieces_of(by_color):
            if attacks(board, piece.row, piece.col, row, col):
                return True
        return False

    @staticmethod
    def is_in_check(board: Board, color: Color) -> bool:
        """Is *color*'s king attacked? A side without a king is never in check."""
        king = board.find_king(color)
        if king is None:
            return False
        return Rules.is_square_attacked(board, king[0], king[1], color.opposite)

    @staticmethod
    def leaves_king_safe(board: Board, sr: int, sc: int, er: int, ec: int) -> bool:
        """Would the mover's king be out of check after playing the move?"""
        piece = board.get(sr, sc)
        if piece is None:
            return False
        trial = board.snapshot()
        trial.execute(sr, sc, er, ec)
        return not Rules.is_in_check(trial, piece.color)

    @staticmethod
    def is_legal_move(board: Board, sr: int, sc: int, er: int, ec: int) -> bool:
        """Pseudo-legal for the piece on (sr, sc) and not a self-check."""
        return can_move(board, sr, sc, er, ec) and Rules.leaves_king_safe(
            board, sr, sc, er, ec
        )

    @staticmethod
    def legal_moves(board: Board, color: Color) -> Iterator[Move]:
        """Yield every legal move of *color*.

        Order: pieces row by row, then destinations by ascending row and column.
        """
        for piece in board.pieces_of(color):
            sr, sc = piece.row, piece.col
            for er in range(BOARD_SIZE):
                for ec in range(BOARD_SIZE):
                    if Rules.is_legal_move(board, sr, sc, er, ec):
                        yield Move(sr, sc, er, ec)

    @staticmethod
    def has_any_legal_move(board: Board, color: Color) -> bool:
        return next(Rules.legal_moves(board, color), None) is not None

    @staticmethod
    def is_checkmate(board: Board, color: Color) -> bool:
        return Rules.is_in_check(board, color) and not Rules.has_any_legal_move(
            board, color
        )

    @staticmethod
    def is_stalemate(board: Board, color: Color) -> bool:
        return not Rules.is_in_check(board, color) and not Rules.has_any_legal_move(
            board, color
        )

    @staticmethod
    def game_result(board: Board, side_to_move: Color) -> GameResult:
        """Outcome for a position where *side_to_move* is about to play."""
        if Rules.has_any_legal_move(board, side_to_move):
            return GameResult.IN_PROGRESS
        if Rules.is_in_check(board, side_to_move):
            return (
                GameResult.BLACK_WINS
                if side_to_move == Color.WHITE
                else GameResult.WHITE_WINS
            )
        return GameResult.DRAW  # stalemate
