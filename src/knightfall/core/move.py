"""Move value object (four board coordinates)."""

from __future__ import annotations

import re
from dataclasses import dataclass

from knightfall.core.types import in_bounds, parse_square, square_name

_NOTATION_RE = re.compile(r"^\s*([a-hA-H][1-8])\s*-?\s*([a-hA-H][1-8])\s*$")


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable request to move from one square to another.

    Carries no identity and says nothing about legality; it is validated
    fresh every time it is played.
    """

    from_row: int
    from_col: int
    to_row: int
    to_col: int

    @property
    def is_valid(self) -> bool:
        """On-board coordinates and not a null move."""
        return (
            in_bounds(self.from_row, self.from_col)
            and in_bounds(self.to_row, self.to_col)
            and (self.from_row, self.from_col) != (self.to_row, self.to_col)
        )

    def as_tuple(self) -> tuple[int, int, int, int]:
        return self.from_row, self.from_col, self.to_row, self.to_col

    # ── Display ──────────────────────────────────────────────────────────

    @property
    def notation(self) -> str:
        """Coordinate notation, e.g. 'e2-e4'."""
        start = square_name(self.from_row, self.from_col)
        end = square_name(self.to_row, self.to_col)
        return f"{start}-{end}"

    def __str__(self) -> str:
        return self.notation

    @classmethod
    def from_notation(cls, text: str) -> Move:
        """Parse 'e2-e4' or 'e2e4'."""
        match = _NOTATION_RE.match(text)
        if match is None:
            raise ValueError(f"Invalid move notation: {text!r}")
        start = parse_square(match.group(1))
        end = parse_square(match.group(2))
        return cls(*start, *end)
