"""Per-piece movement and attack predicates.

Everything here is pseudo-legal: whose turn it is and whether the mover's own
king ends up in check are the caller's concern (see :mod:`knightfall.core.rules`).

Moves and attacks differ for two kinds only. A pawn moves straight ahead but
attacks the forward diagonals whether or not anything stands there, and a king
attacks all eight neighbours regardless of occupancy.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from knightfall.core.enums import Color, PieceType
from knightfall.core.types import in_bounds

if TYPE_CHECKING:
    from knightfall.core.board import Board
    from knightfall.core.piece import Piece

_Rule = Callable[["Board", "Piece", int, int], bool]


def pawn_direction(color: Color) -> int:
    """Row step of a forward pawn move for *color*."""
    return -1 if color == Color.WHITE else 1


def pawn_start_row(color: Color) -> int:
    return 6 if color == Color.WHITE else 1


def path_clear(board: Board, sr: int, sc: int, er: int, ec: int) -> bool:
    """Every square strictly between start and end is empty.

    Only meaningful for straight or diagonal lines; other geometry is False.
    """
    if not in_bounds(sr, sc) or not in_bounds(er, ec):
        return False
    if (sr, sc) == (er, ec):
        return False
    dr = er - sr
    dc = ec - sc
    if dr != 0 and dc != 0 and abs(dr) != abs(dc):
        return False

    step_r = (dr > 0) - (dr < 0)
    step_c = (dc > 0) - (dc < 0)
    r, c = sr + step_r, sc + step_c
    while (r, c) != (er, ec):
        if board.get(r, c) is not None:
            return False
        r += step_r
        c += step_c
    return True


# -- Geometry per kind -------------------------------------------------------


def _pawn_moves(board: Board, piece: Piece, er: int, ec: int) -> bool:
    direction = pawn_direction(piece.color)
    dr = er - piece.row
    dc = abs(ec - piece.col)
    target = board.get(er, ec)

    if dc == 0:
        if target is not None:
            return False
        if dr == direction:
            return True
        return (
            dr == 2 * direction
            and piece.row == pawn_start_row(piece.color)
            and board.get(piece.row + direction, piece.col) is None
        )

    # No en passant: a diagonal step needs an enemy piece on the square.
    return dc == 1 and dr == direction and target is not None


def _pawn_attacks(board: Board, piece: Piece, er: int, ec: int) -> bool:
    return er - piece.row == pawn_direction(piece.color) and abs(ec - piece.col) == 1


def _knight(board: Board, piece: Piece, er: int, ec: int) -> bool:
    dr = abs(er - piece.row)
    dc = abs(ec - piece.col)
    return (dr, dc) in ((2, 1), (1, 2))


def _bishop(board: Board, piece: Piece, er: int, ec: int) -> bool:
    if abs(er - piece.row) != abs(ec - piece.col):
        return False
    return path_clear(board, piece.row, piece.col, er, ec)


def _rook(board: Board, piece: Piece, er: int, ec: int) -> bool:
    if er != piece.row and ec != piece.col:
        return False
    return path_clear(board, piece.row, piece.col, er, ec)


def _queen(board: Board, piece: Piece, er: int, ec: int) -> bool:
    return _rook(board, piece, er, ec) or _bishop(board, piece, er, ec)


def _king(board: Board, piece: Piece, er: int, ec: int) -> bool:
    # No castling.
    return abs(er - piece.row) <= 1 and abs(ec - piece.col) <= 1


_MOVE_RULES: dict[PieceType, _Rule] = {
    PieceType.PAWN: _pawn_moves,
    PieceType.KNIGHT: _knight,
    PieceType.BISHOP: _bishop,
    PieceType.ROOK: _rook,
    PieceType.QUEEN: _queen,
    PieceType.KING: _king,
}

_ATTACK_RULES: dict[PieceType, _Rule] = {
    **_MOVE_RULES,
    PieceType.PAWN: _pawn_attacks,
}

# Kinds whose attack ignores what stands on the target square.
_OCCUPANCY_BLIND_ATTACKS = frozenset({PieceType.PAWN, PieceType.KING})


# -- Public predicates -------------------------------------------------------


def _resolve(board: Board, sr: int, sc: int, er: int, ec: int) -> Piece | None:
    if not in_bounds(sr, sc) or not in_bounds(er, ec):
        return None
    if (sr, sc) == (er, ec):
        return None
    return board.get(sr, sc)


def can_move(board: Board, sr: int, sc: int, er: int, ec: int) -> bool:
    """Can the piece on (sr, sc) move to (er, ec) by its own geometry?"""
    piece = _resolve(board, sr, sc, er, ec)
    if piece is None:
        return False
    target = board.get(er, ec)
    if target is not None and target.color == piece.color:
        return False
    return _MOVE_RULES[piece.piece_type](board, piece, er, ec)


def attacks(board: Board, sr: int, sc: int, er: int, ec: int) -> bool:
    """Does the piece on (sr, sc) threaten (er, ec)?"""
    piece = _resolve(board, sr, sc, er, ec)
    if piece is None:
        return False
    if piece.piece_type not in _OCCUPANCY_BLIND_ATTACKS:
        target = board.get(er, ec)
        if target is not None and target.color == piece.color:
            return False
    return _ATTACK_RULES[piece.piece_type](board, piece, er, ec)
