"""Square type alias and coordinate helpers.

Board layout (row, col), row 0 at the top as rendered:
    (0, 0)=a8 ... (0, 7)=h8
    ...
    (7, 0)=a1 ... (7, 7)=h1
"""

from __future__ import annotations

from typing import TypeAlias

BOARD_SIZE = 8

Square: TypeAlias = tuple[int, int]  # (row, col), each 0-7


def in_bounds(row: int, col: int) -> bool:
    """Whether (row, col) lies on the board."""
    return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE


def square_name(row: int, col: int) -> str:
    """Human-readable name, e.g. (6, 4) -> 'e2'. Off-board -> '??'."""
    if not in_bounds(row, col):
        return "??"
    return chr(ord("a") + col) + str(BOARD_SIZE - row)


def parse_square(name: str) -> Square:
    """Parse square name, e.g. 'e2' -> (6, 4)."""
    text = name.strip().lower()
    if len(text) != 2 or text[0] not in "abcdefgh" or text[1] not in "12345678":
        raise ValueError(f"Invalid square name: {name!r}")
    return BOARD_SIZE - int(text[1]), ord(text[0]) - ord("a")
