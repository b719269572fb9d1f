"""
Castling rules and the castling-rights tracker.

Four independent rights (color x side). A right only ever goes from available to revoked:
* moving the king revokes both rights of that color (castling is a king move, so castling does too)
* moving a rook off its home square revokes the right on that side
* capturing a rook on its home square revokes the opponent's right on that side
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Protocol, Self

from removal_chess.chess.pieces import Piece
from removal_chess.chess.square import Square
from removal_chess.core.shared_types import Color, PieceType


class Board(Protocol):
    def piece(self, square: Square) -> Optional[Piece]: ...


class CastlingDirection(Enum):
    """The four castling directions. Values represent their encodings in FEN string."""

    WHITE_KING_SIDE = "K"
    WHITE_QUEEN_SIDE = "Q"
    BLACK_KING_SIDE = "k"
    BLACK_QUEEN_SIDE = "q"

    @property
    def color(self) -> Color:
        return Color.WHITE if self.value.isupper() else Color.BLACK


CASTLING_ORDER: tuple[CastlingDirection, ...] = (
    CastlingDirection.WHITE_KING_SIDE,
    CastlingDirection.WHITE_QUEEN_SIDE,
    CastlingDirection.BLACK_KING_SIDE,
    CastlingDirection.BLACK_QUEEN_SIDE,
)


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.
    NOTE: If castling rights have not been revoked, we already know the king / rook are still at their starting squares.
    """

    king_from: Square
    king_to: Square
    rook_from: Square
    rook_to: Square

    @classmethod
    def from_algebraic(cls, k_from: str, k_to: str, r_from: str, r_to: str) -> Self:
        """Convenience method: to make mapping shown below (from CastlingDirection) more readable"""
        king_from = Square.from_algebraic(k_from)
        king_to = Square.from_algebraic(k_to)
        rook_from = Square.from_algebraic(r_from)
        rook_to = Square.from_algebraic(r_to)
        return cls(king_from, king_to, rook_from, rook_to)

    def between(self) -> list[Square]:
        """Squares strictly between king and rook: must be empty and not removed."""
        low, high = sorted((self.king_from.col, self.rook_from.col))
        return [Square(self.king_from.row, col) for col in range(low + 1, high)]

    def king_path(self) -> list[Square]:
        """Start, intermediate and destination square of the king: none may be attacked."""
        step = 1 if self.king_to.col > self.king_from.col else -1
        return [
            Square(self.king_from.row, col)
            for col in range(self.king_from.col, self.king_to.col + step, step)
        ]


# The moves (in classical chess) made when castling
CASTLING_RULES: dict[CastlingDirection, CastlingSquares] = {
    CastlingDirection.WHITE_KING_SIDE: CastlingSquares.from_algebraic(
        "e1", "g1", "h1", "f1"
    ),
    CastlingDirection.WHITE_QUEEN_SIDE: CastlingSquares.from_algebraic(
        "e1", "c1", "a1", "d1"
    ),
    CastlingDirection.BLACK_KING_SIDE: CastlingSquares.from_algebraic(
        "e8", "g8", "h8", "f8"
    ),
    CastlingDirection.BLACK_QUEEN_SIDE: CastlingSquares.from_algebraic(
        "e8", "c8", "a8", "d8"
    ),
}


def castling_directions(color: Color) -> list[CastlingDirection]:
    return [direction for direction in CASTLING_ORDER if direction.color == color]


# dataclass field of CastlingRights that stores each direction
_FIELD_NAMES: dict[CastlingDirection, str] = {
    direction: direction.name.lower() for direction in CastlingDirection
}


@dataclass(frozen=True)
class CastlingRights:
    white_king_side: bool = True
    white_queen_side: bool = True
    black_king_side: bool = True
    black_queen_side: bool = True

    @classmethod
    def none(cls) -> CastlingRights:
        return cls(False, False, False, False)

    @classmethod
    def from_fen(cls, castle_fen: str) -> CastlingRights:
        """parse the part of the FEN string that encodes castling rights"""
        return cls(
            **{
                _FIELD_NAMES[direction]: (direction.value in castle_fen)
                for direction in CastlingDirection
            }
        )

    def to_fen(self) -> str:
        """create the part of the FEN string that encodes castling rights"""
        castling_chars = "".join(
            direction.value
            for direction in CASTLING_ORDER
            if self.is_available(direction)
        )
        return castling_chars or "-"

    def is_available(self, direction: CastlingDirection) -> bool:
        return getattr(self, _FIELD_NAMES[direction])

    def any_for(self, color: Color) -> bool:
        return any(self.is_available(d) for d in castling_directions(color))

    def revoke(self, direction: CastlingDirection) -> CastlingRights:
        return replace(self, **{_FIELD_NAMES[direction]: False})

    def revoke_color(self, color: Color) -> CastlingRights:
        return replace(
            self, **{_FIELD_NAMES[d]: False for d in castling_directions(color)}
        )


def update_castling_rights(
    rights: CastlingRights, board: Board, from_square: Square, to_square: Square
) -> CastlingRights:
    """
    Recompute the rights after a move, given the board BEFORE the move was made.
    ----

    1. If you are moving your king (incl. castling) --> revoke both
    2. If you are moving a rook from its home square --> revoke the right on that side
    3. If you are taking your opponent's rook on its home square --> revoke the opponent's right on that side
    """
    moving_piece = board.piece(from_square)
    captured_piece = board.piece(to_square)
    if moving_piece is None:
        return rights

    if moving_piece.type == PieceType.KING:
        rights = rights.revoke_color(moving_piece.color)

    if moving_piece.type == PieceType.ROOK:
        for direction in castling_directions(moving_piece.color):
            if CASTLING_RULES[direction].rook_from == from_square:
                rights = rights.revoke(direction)

    if captured_piece is not None and captured_piece.type == PieceType.ROOK:
        for direction in castling_directions(captured_piece.color):
            if CASTLING_RULES[direction].rook_from == to_square:
                rights = rights.revoke(direction)

    return rights
