"""Game management layer: session state machine with history and persistence.

Quick start::

    from knightfall.game import GameSession

    session = GameSession()
    session.start()
    session.play_move(6, 4, 4, 4)  # e2-e4
    session.undo()
"""

from knightfall.game.persistence import (
    SaveRecord,
    list_saves,
    load_game,
    save_game,
)
from knightfall.game.session import GameEvents, GameSession

__all__ = [
    "GameEvents",
    "GameSession",
    "SaveRecord",
    "list_saves",
    "load_game",
    "save_game",
]
