"""Piece-placement text (the board field of FEN) parsing and serialization.

Ranks are listed from row 0 (rank 8) down to row 7 (rank 1), so the text reads
the same way the board is laid out.
"""

from __future__ import annotations

from knightfall.core.board import Board
from knightfall.core.piece import Piece
from knightfall.core.types import BOARD_SIZE, parse_square, square_name

STARTING_PLACEMENT = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"

__all__ = [
    "STARTING_PLACEMENT",
    "board_from_placement",
    "board_to_placement",
    "parse_square",
    "square_name",
]


def board_from_placement(placement: str) -> Board:
    """Parse a placement string such as ``"4k3/8/8/8/8/8/8/4K3"``.

    A full FEN is accepted as well; everything after the first field is
    ignored.
    """
    fields = placement.split()
    if not fields:
        raise ValueError("Empty placement")
    ranks = fields[0].split("/")
    if len(ranks) != BOARD_SIZE:
        raise ValueError(f"Invalid placement (must contain 8 ranks): {placement!r}")

    board = Board()
    for row, rank_text in enumerate(ranks):
        col = 0
        for ch in rank_text:
            if ch.isdigit():
                step = int(ch)
                if not (1 <= step <= BOARD_SIZE):
                    raise ValueError(f"Invalid placement digit {ch!r}: {placement!r}")
                col += step
            else:
                if col >= BOARD_SIZE:
                    raise ValueError(f"Invalid placement rank width: {placement!r}")
                board.place(row, col, Piece.from_char(ch))
                col += 1
            if col > BOARD_SIZE:
                raise ValueError(f"Invalid placement rank width: {placement!r}")
        if col != BOARD_SIZE:
            raise ValueError(f"Invalid placement rank width: {placement!r}")
    return board


def board_to_placement(board: Board) -> str:
    """Serialize *board* to a placement string."""
    ranks: list[str] = []
    for row in range(BOARD_SIZE):
        text = ""
        empty = 0
        for col in range(BOARD_SIZE):
            piece = board.get(row, col)
            if piece is None:
                empty += 1
                continue
            if empty:
                text += str(empty)
                empty = 0
            text += str(piece)
        if empty:
            text += str(empty)
        ranks.append(text)
    return "/".join(ranks)
