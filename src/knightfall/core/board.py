"""Board - piece placement on an 8x8 grid."""

from __future__ import annotations

import logging
from collections.abc import Callable

from knightfall.core.enums import PROMOTION_TYPES, Color, PieceType
from knightfall.core.piece import Piece
from knightfall.core.types import BOARD_SIZE, Square, in_bounds

_LOGGER = logging.getLogger(__name__)

PromotionSelector = Callable[[Color, int, int], PieceType]

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


def promotion_row(color: Color) -> int:
    """Far rank a pawn of *color* promotes on."""
    return 0 if color == Color.WHITE else BOARD_SIZE - 1


class Board:
    """Mutable 8x8 grid of optional pieces.

    The board knows nothing about rules: :meth:`execute` moves whatever it is
    told to move. It is the only place that writes a piece's coordinates, so
    the grid and the pieces never disagree.
    """

    __slots__ = ("_squares", "promotion_selector")

    def __init__(self, promotion_selector: PromotionSelector | None = None) -> None:
        self._squares: list[list[Piece | None]] = [
            [None] * BOARD_SIZE for _ in range(BOARD_SIZE)
        ]
        self.promotion_selector = promotion_selector

    # -- Element access -----------------------------------------------------

    def get(self, row: int, col: int) -> Piece | None:
        if not in_bounds(row, col):
            return None
        return self._squares[row][col]

    def place(self, row: int, col: int, piece: Piece | None) -> None:
        if not in_bounds(row, col):
            return
        self._squares[row][col] = piece
        if piece is not None:
            piece.row = row
            piece.col = col

    def clear_square(self, row: int, col: int) -> None:
        self.place(row, col, None)

    def is_empty(self, row: int, col: int) -> bool:
        return self.get(row, col) is None

    # -- Query helpers ------------------------------------------------------

    def pieces_of(self, color: Color) -> list[Piece]:
        """All pieces of *color*, scanned row by row."""
        return [
            piece
            for rank in self._squares
            for piece in rank
            if piece is not None and piece.color == color
        ]

    def find_king(self, color: Color) -> Square | None:
        """Square of *color*'s king, or ``None`` if it has none."""
        for piece in self.pieces_of(color):
            if piece.piece_type == PieceType.KING:
                return piece.row, piece.col
        return None

    def occupied(self) -> list[Piece]:
        return [piece for rank in self._squares for piece in rank if piece is not None]

    # -- Mutation -----------------------------------------------------------

    def execute(self, sr: int, sc: int, er: int, ec: int) -> Piece | None:
        """Move the piece on (sr, sc) to (er, ec) without validation.

        Returns the captured piece, if any. A pawn arriving on its far rank is
        replaced by the kind picked by :attr:`promotion_selector` (Queen when
        unset). The selector is asked before anything moves, so if it raises
        the board is left as it was.
        """
        if not in_bounds(sr, sc) or not in_bounds(er, ec):
            return None
        moving = self._squares[sr][sc]
        if moving is None:
            return None

        promote_to: PieceType | None = None
        if moving.piece_type == PieceType.PAWN and er == promotion_row(moving.color):
            promote_to = self._promotion_choice(moving.color, er, ec)

        captured = self._squares[er][ec]
        self.place(sr, sc, None)
        self.place(er, ec, moving)
        if promote_to is not None:
            self.place(er, ec, Piece(moving.color, promote_to))

        return captured

    def _promotion_choice(self, color: Color, row: int, col: int) -> PieceType:
        if self.promotion_selector is None:
            return PieceType.QUEEN
        kind = self.promotion_selector(color, row, col)
        if kind not in PROMOTION_TYPES:
            _LOGGER.warning("Invalid promotion choice %r, using queen", kind)
            return PieceType.QUEEN
        return kind

    def clear(self) -> None:
        for row in range(BOARD_SIZE):
            for col in range(BOARD_SIZE):
                self._squares[row][col] = None

    def reset_to_standard(self) -> None:
        """Set up the standard starting position."""
        self.clear()
        for col, pt in enumerate(_BACK_RANK):
            self.place(0, col, Piece(Color.BLACK, pt))
            self.place(1, col, Piece(Color.BLACK, PieceType.PAWN))
            self.place(6, col, Piece(Color.WHITE, PieceType.PAWN))
            self.place(7, col, Piece(Color.WHITE, pt))

    # -- Copying ------------------------------------------------------------

    def snapshot(self) -> Board:
        """Independent deep copy. The promotion selector is not carried over."""
        copy = Board()
        copy.restore_from(self)
        return copy

    def restore_from(self, other: Board) -> None:
        """Overwrite every cell with clones of *other*'s pieces."""
        for row in range(BOARD_SIZE):
            for col in range(BOARD_SIZE):
                piece = other._squares[row][col]
                self.place(row, col, None if piece is None else piece.clone())

    # -- Factory ------------------------------------------------------------

    @classmethod
    def initial(cls, promotion_selector: PromotionSelector | None = None) -> Board:
        """Standard starting position."""
        b = cls(promotion_selector)
        b.reset_to_standard()
        return b

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._squares == other._squares

    def __repr__(self) -> str:
        rows: list[str] = []
        for row in range(BOARD_SIZE):
            cells = [str(p) if p else "." for p in self._squares[row]]
            rows.append(f"{BOARD_SIZE - row} {' '.join(cells)}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)
