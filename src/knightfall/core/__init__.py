"""Core domain layer: pure chess logic with zero external dependencies.

Quick start::

    from knightfall.core import Board, Color, Rules

    board = Board.initial()
    for move in Rules.legal_moves(board, Color.WHITE):
        print(move)
"""

from knightfall.core.board import Board, PromotionSelector
from knightfall.core.enums import (
    PROMOTION_TYPES,
    Color,
    GameResult,
    MoveRejection,
    PieceType,
)
from knightfall.core.move import Move
from knightfall.core.movement import attacks, can_move, path_clear
from knightfall.core.notation import (
    STARTING_PLACEMENT,
    board_from_placement,
    board_to_placement,
)
from knightfall.core.piece import Piece
from knightfall.core.rules import Rules
from knightfall.core.types import (
    BOARD_SIZE,
    Square,
    in_bounds,
    parse_square,
    square_name,
)

__all__ = [
    # Enums
    "Color",
    "GameResult",
    "MoveRejection",
    "PieceType",
    "PROMOTION_TYPES",
    # Types / helpers
    "BOARD_SIZE",
    "Square",
    "in_bounds",
    "parse_square",
    "square_name",
    # Domain objects
    "Board",
    "Move",
    "Piece",
    "PromotionSelector",
    "Rules",
    # Movement predicates
    "attacks",
    "can_move",
    "path_clear",
    # Notation
    "STARTING_PLACEMENT",
    "board_from_placement",
    "board_to_placement",
]
