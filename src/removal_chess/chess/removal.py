"""
The removal ledger: squares that have been deleted from the board.

A removed square cannot be entered by any piece, blocks sliding pieces exactly like an occupied square,
and can never be captured. Removal is permanent for the rest of the game.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Optional, Protocol

from removal_chess.chess.pieces import Piece
from removal_chess.chess.square import Square
from removal_chess.core.exceptions import InvalidRemovalError


class Board(Protocol):
    """Just the part of the board the ledger needs"""

    def piece(self, square: Square) -> Optional[Piece]: ...


@dataclass(frozen=True)
class RemovalLedger:
    """Append-only set of removed squares. Adding a square returns a new ledger."""

    removed: frozenset[Square] = field(default_factory=frozenset)

    @classmethod
    def from_squares(cls, squares: Iterable[Square]) -> RemovalLedger:
        return cls(frozenset(squares))

    @classmethod
    def from_keys(cls, keys: Iterable[str]) -> RemovalLedger:
        """Keys as used by the shell: 'row-col'"""
        return cls.from_squares(Square.from_key(key) for key in keys)

    def is_removed(self, square: Square) -> bool:
        return square in self.removed

    def remove(self, square: Square, board: Board) -> RemovalLedger:
        """Delete an empty square. Raises InvalidRemovalError if it is occupied or already gone."""
        if self.is_removed(square):
            raise InvalidRemovalError(f"Square {square.to_algebraic()} is already removed.")

        # NOTE: board.piece() raises OutOfBoundsError for squares off the grid
        if board.piece(square) is not None:
            raise InvalidRemovalError(
                f"Cannot remove square {square.to_algebraic()}: it is occupied by a piece."
            )
        return RemovalLedger(self.removed | {square})

    def squares(self) -> list[Square]:
        return sorted(self.removed)

    def keys(self) -> list[str]:
        return [square.to_key() for square in self.squares()]

    def __contains__(self, square: object) -> bool:
        return square in self.removed

    def __iter__(self) -> Iterator[Square]:
        return iter(self.squares())

    def __len__(self) -> int:
        return len(self.removed)
