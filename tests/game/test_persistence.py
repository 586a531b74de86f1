"""Tests for saving and loading game sessions."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from knightfall.core.board import Board
from knightfall.core.enums import Color, PieceType
from knightfall.core.piece import Piece
from knightfall.game.persistence import (
    SAVE_SUFFIX,
    SaveRecord,
    list_saves,
    load_game,
    piece_from_token,
    piece_token,
    save_game,
)
from knightfall.game.session import GameSession


def _record_dict() -> dict[str, Any]:
    s = GameSession()
    s.start()
    return SaveRecord.from_session(s, "fixture").to_dict()


class TestTokens:
    def test_piece_token(self) -> None:
        assert piece_token(Piece(Color.WHITE, PieceType.KING)) == "WHITE_KING"
        assert piece_token(Piece(Color.BLACK, PieceType.KNIGHT)) == "BLACK_KNIGHT"
        assert piece_token(None) is None

    def test_piece_from_token(self) -> None:
        assert piece_from_token("BLACK_QUEEN") == Piece(Color.BLACK, PieceType.QUEEN)
        assert piece_from_token(None) is None

    @pytest.mark.parametrize("token", ["WHITE", "GREEN_KING", "WHITE_DRAGON", "", 5])
    def test_invalid_token(self, token: object) -> None:
        with pytest.raises(ValueError, match="Invalid square token"):
            piece_from_token(token)  # type: ignore[arg-type]


class TestSaveRecord:
    def test_from_session_captures_state(self, session: GameSession) -> None:
        session.play_move(6, 4, 4, 4)
        record = SaveRecord.from_session(session, "opening")
        assert record.name == "opening"
        assert record.side_to_move == Color.BLACK
        assert not record.game_over
        assert record.squares[4][4] == "WHITE_PAWN"
        assert record.squares[6][4] is None
        assert record.squares[0][4] == "BLACK_KING"

    def test_to_board_syncs_coordinates(self, session: GameSession) -> None:
        board = SaveRecord.from_session(session).to_board()
        assert board == Board.initial()
        for piece in board.occupied():
            assert board.get(piece.row, piece.col) is piece

    def test_apply_to_replaces_state_and_history(self, session: GameSession) -> None:
        record = SaveRecord.from_session(session)
        session.play_move(6, 4, 4, 4)
        session.play_move(1, 4, 3, 4)
        record.apply_to(session)
        assert session.board == Board.initial()
        assert session.side_to_move == Color.WHITE
        assert not session.can_undo
        assert not session.can_redo

    def test_dict_round_trip(self, session: GameSession) -> None:
        record = SaveRecord.from_session(session, "x")
        restored = SaveRecord.from_dict(record.to_dict())
        assert restored.squares == record.squares
        assert restored.side_to_move == record.side_to_move
        assert restored.saved_at == record.saved_at
        assert restored.name == "x"

    def test_to_dict_is_json_ready(self) -> None:
        data = _record_dict()
        assert json.loads(json.dumps(data)) == data
        assert data["side_to_move"] == "WHITE"
        assert data["version"] == 1

    def test_missing_fields(self) -> None:
        data = _record_dict()
        del data["squares"]
        with pytest.raises(ValueError, match="missing required fields"):
            SaveRecord.from_dict(data)

    def test_wrong_row_count(self) -> None:
        data = _record_dict()
        data["squares"] = data["squares"][:7]
        with pytest.raises(ValueError, match="8 rows"):
            SaveRecord.from_dict(data)

    def test_wrong_square_count(self) -> None:
        data = _record_dict()
        data["squares"][3] = [None] * 9
        with pytest.raises(ValueError, match="8 squares"):
            SaveRecord.from_dict(data)

    def test_bad_token(self) -> None:
        data = _record_dict()
        data["squares"][4][4] = "WHITE_DRAGON"
        with pytest.raises(ValueError, match="Invalid square token"):
            SaveRecord.from_dict(data)

    @pytest.mark.parametrize("side", ["RED", ["WHITE"], {"WHITE": 1}, 0, None])
    def test_bad_side(self, side: object) -> None:
        data = _record_dict()
        data["side_to_move"] = side
        with pytest.raises(ValueError, match="Invalid side to move"):
            SaveRecord.from_dict(data)

    def test_bad_game_over_flag(self) -> None:
        data = _record_dict()
        data["game_over"] = "no"
        with pytest.raises(ValueError, match="Invalid game-over flag"):
            SaveRecord.from_dict(data)

    def test_bad_timestamp(self) -> None:
        data = _record_dict()
        data["saved_at"] = "yesterday"
        with pytest.raises(ValueError, match="Invalid save timestamp"):
            SaveRecord.from_dict(data)


class TestFiles:
    def test_save_adds_suffix(self, session: GameSession, tmp_path: Path) -> None:
        path = save_game(session, tmp_path / "first")
        assert path == tmp_path / f"first{SAVE_SUFFIX}"
        assert path.is_file()

    def test_save_creates_parent_dirs(self, session: GameSession, tmp_path: Path) -> None:
        path = save_game(session, tmp_path / "nested" / "dir" / "g.chess")
        assert path.is_file()

    def test_save_and_load(self, session: GameSession, tmp_path: Path) -> None:
        session.play_move(6, 4, 4, 4)
        path = save_game(session, tmp_path / "mid")
        record = load_game(path)
        assert record.name == "mid"

        restored = GameSession()
        record.apply_to(restored)
        assert restored.board == session.board
        assert restored.side_to_move == Color.BLACK
        assert not restored.is_game_over

    def test_game_over_survives_save(self, tmp_path: Path) -> None:
        s = GameSession()
        s.load(Board.initial(), Color.BLACK, True)
        record = load_game(save_game(s, tmp_path / "done"))
        assert record.game_over
        assert record.side_to_move == Color.BLACK

    def test_explicit_name(self, session: GameSession, tmp_path: Path) -> None:
        record = load_game(save_game(session, tmp_path / "file", name="Club night"))
        assert record.name == "Club night"

    def test_corrupt_file(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.chess"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ValueError, match="Corrupt save file"):
            load_game(path)

    def test_non_object_file(self, tmp_path: Path) -> None:
        path = tmp_path / "list.chess"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ValueError, match="expected an object"):
            load_game(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            load_game(tmp_path / "absent.chess")

    def test_list_saves(self, session: GameSession, tmp_path: Path) -> None:
        save_game(session, tmp_path / "b")
        save_game(session, tmp_path / "a")
        (tmp_path / "notes.txt").write_text("x", encoding="utf-8")
        assert list_saves(tmp_path) == ["a", "b"]

    def test_list_saves_missing_dir(self, tmp_path: Path) -> None:
        assert list_saves(tmp_path / "nope") == []
