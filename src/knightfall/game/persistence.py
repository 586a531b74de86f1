"""Save/load a game session as a flat per-square record.

The record stores one ``"COLOR_KIND"`` token (e.g. ``"WHITE_KING"``) or
``None`` per square, the side to move and the game-over flag. That is enough
to rebuild the session; undo/redo history is not saved. Where files live is
the caller's choice.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from knightfall.core.board import Board
from knightfall.core.enums import Color, PieceType
from knightfall.core.piece import Piece
from knightfall.core.types import BOARD_SIZE
from knightfall.game.session import GameSession

_LOGGER = logging.getLogger(__name__)

SAVE_SUFFIX = ".chess"
_FORMAT_VERSION = 1

SquareToken = str | None


def piece_token(piece: Piece | None) -> SquareToken:
    """``Piece(WHITE, KING)`` -> ``"WHITE_KING"``; empty -> ``None``."""
    if piece is None:
        return None
    return f"{piece.color.name}_{piece.piece_type.name}"


def piece_from_token(token: SquareToken) -> Piece | None:
    if token is None:
        return None
    if not isinstance(token, str):
        raise ValueError(f"Invalid square token: {token!r}")
    color_name, sep, kind_name = token.partition("_")
    if not sep or color_name not in Color.__members__:
        raise ValueError(f"Invalid square token: {token!r}")
    if kind_name not in PieceType.__members__:
        raise ValueError(f"Invalid square token: {token!r}")
    return Piece(Color[color_name], PieceType[kind_name])


@dataclass
class SaveRecord:
    """Serializable snapshot of a :class:`GameSession`."""

    squares: list[list[SquareToken]]
    side_to_move: Color
    game_over: bool
    name: str = ""
    saved_at: datetime = field(default_factory=datetime.now)

    # ── Session conversion ───────────────────────────────────────────────

    @classmethod
    def from_session(cls, session: GameSession, name: str = "") -> SaveRecord:
        board = session.board
        squares = [
            [piece_token(board.get(row, col)) for col in range(BOARD_SIZE)]
            for row in range(BOARD_SIZE)
        ]
        return cls(
            squares=squares,
            side_to_move=session.side_to_move,
            game_over=session.is_game_over,
            name=name,
        )

    def to_board(self) -> Board:
        board = Board()
        for row, rank in enumerate(self.squares):
            for col, token in enumerate(rank):
                board.place(row, col, piece_from_token(token))
        return board

    def apply_to(self, session: GameSession) -> None:
        """Restore *session* to this record; its undo/redo history is cleared."""
        session.load(self.to_board(), self.side_to_move, self.game_over)

    # ── Dict conversion ──────────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": _FORMAT_VERSION,
            "name": self.name,
            "saved_at": self.saved_at.isoformat(),
            "side_to_move": self.side_to_move.name,
            "game_over": self.game_over,
            "squares": [list(rank) for rank in self.squares],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SaveRecord:
        try:
            squares = data["squares"]
            side_name = data["side_to_move"]
            game_over = data["game_over"]
        except (KeyError, TypeError):
            raise ValueError("Save record is missing required fields") from None

        if not isinstance(squares, list) or len(squares) != BOARD_SIZE:
            raise ValueError("Save record must contain 8 rows")
        for rank in squares:
            if not isinstance(rank, list) or len(rank) != BOARD_SIZE:
                raise ValueError("Save record rows must contain 8 squares")
            for token in rank:
                piece_from_token(token)  # validate
        if not isinstance(side_name, str) or side_name not in Color.__members__:
            raise ValueError(f"Invalid side to move: {side_name!r}")
        if not isinstance(game_over, bool):
            raise ValueError(f"Invalid game-over flag: {game_over!r}")

        saved_at = datetime.now()
        if "saved_at" in data:
            try:
                saved_at = datetime.fromisoformat(data["saved_at"])
            except (TypeError, ValueError):
                raise ValueError(
                    f"Invalid save timestamp: {data['saved_at']!r}"
                ) from None

        return cls(
            squares=[list(rank) for rank in squares],
            side_to_move=Color[side_name],
            game_over=game_over,
            name=str(data.get("name", "")),
            saved_at=saved_at,
        )


# ── File helpers ─────────────────────────────────────────────────────────────


def save_game(session: GameSession, file_path: Path, name: str | None = None) -> Path:
    """Write *session* to *file_path* (``.chess`` suffix added if missing)."""
    save_path = Path(file_path)
    if save_path.suffix.lower() != SAVE_SUFFIX:
        save_path = save_path.with_suffix(SAVE_SUFFIX)
    save_path.parent.mkdir(parents=True, exist_ok=True)

    record = SaveRecord.from_session(session, name if name is not None else save_path.stem)
    save_path.write_text(json.dumps(record.to_dict(), indent=2), encoding="utf-8")
    _LOGGER.info("Game saved to %s", save_path)
    return save_path


def load_game(file_path: Path) -> SaveRecord:
    """Read a record written by :func:`save_game`."""
    text = Path(file_path).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Corrupt save file {file_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Corrupt save file {file_path}: expected an object")
    record = SaveRecord.from_dict(data)
    _LOGGER.info("Game loaded from %s", file_path)
    return record


def list_saves(directory: Path) -> list[str]:
    """Names (without suffix) of the saves in *directory*, sorted."""
    save_dir = Path(directory)
    if not save_dir.is_dir():
        return []
    return sorted(p.stem for p in save_dir.glob(f"*{SAVE_SUFFIX}") if p.is_file())
