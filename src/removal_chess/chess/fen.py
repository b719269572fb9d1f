"""
Text record of a single position, modelled on FEN. Used to persist games and to set up positions in tests.
"""

from dataclasses import dataclass, field
from typing import Self

from removal_chess.chess.board import (
    REMOVED_SQUARE_CHAR,
    STARTING_POSITION,
    is_ascii_digits,
)
from removal_chess.chess.castling import CASTLING_ORDER, CastlingRights
from removal_chess.chess.pieces import FEN_TO_PIECE
from removal_chess.chess.square import BOARD_DIMENSIONS
from removal_chess.core.exceptions import InvalidFENError
from removal_chess.core.shared_types import Color

STARTING_FEN = f"{STARTING_POSITION} w KQkq 0 0"
NUM_FIELDS = 5


def is_valid_fen(fen: str) -> bool:
    """
    Check if given string follows the (variant) FEN notation.
    """

    # there should be 5 parts to the string
    parts = fen.split(" ")
    if len(parts) != NUM_FIELDS:
        return False

    position, color, castling, white_removals, black_removals = parts
    if not is_valid_position(position):
        return False

    if not is_valid_color_code(color):
        return False

    if not is_valid_castling_rights(castling):
        return False

    return is_valid_counter(white_removals) and is_valid_counter(black_removals)


def is_valid_position(position: str) -> bool:
    """Only check the part of the FEN encoding for the board position."""
    num_rows, num_cols = BOARD_DIMENSIONS
    row_fens = position.split("/")
    if len(row_fens) != num_rows:
        return False

    for row_fen in row_fens:
        col_count = 0
        for character in row_fen:
            # make sure every character is valid
            if is_ascii_digits(character):
                col_count += int(character)
            elif character.lower() in FEN_TO_PIECE or character == REMOVED_SQUARE_CHAR:
                col_count += 1
            else:
                # immediately invalidate if the character is anything else
                return False

        # make sure you are creating a correctly sized board
        if col_count != num_cols:
            return False

    # exactly one king of each color
    return position.count("K") == 1 and position.count("k") == 1


def is_valid_color_code(color: str) -> bool:
    return color in {"w", "b"}


def is_valid_castling_rights(castling: str) -> bool:
    """Either '-' or the available directions, each at most once and in KQkq order"""
    if castling == "-":
        return True
    order = "".join(direction.value for direction in CASTLING_ORDER)
    remaining = iter(order)
    # every character must appear in `order`, after the previous one
    return bool(castling) and all(char in remaining for char in castling)


def is_valid_counter(counter: str) -> bool:
    return is_ascii_digits(counter)


@dataclass
class FENState:
    """
    Data that can be constructed from a (variant) FEN string.
    ----

    <piece placement> <active color> <castling rights> <removals used by white> <removals used by black>

    * Piece placement is standard FEN: top rank (8th) first, ranks separated by '/', digits count empty squares.
      The letter 'x' marks a removed square.
    * The active color is either "w" or "b"
    * Castling rights: "K"/"Q" for white king-/queen-side, "k"/"q" for black. "-" if all rights have been revoked.
    * The number of squares each player has removed so far (counted against the removal quota).

    ex) The standard starting position is
    rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq 0 0

    NOTE: en passant and the move clocks of the standard FEN are not part of this variant.
    """

    position: str
    color_to_move: Color
    castling_rights: CastlingRights
    removals_used: dict[Color, int] = field(
        default_factory=lambda: {Color.WHITE: 0, Color.BLACK: 0}
    )

    @classmethod
    def from_fen(cls, fen: str) -> Self:
        """Parse the FEN into data"""

        # raise an exception if invalid FEN:
        if not is_valid_fen(fen):
            raise InvalidFENError(f"Cannot interpret supplied string as FEN: {fen}")

        position, active_color, castling_str, white_removals, black_removals = (
            fen.split(" ")
        )
        color_to_move = Color.WHITE if active_color == "w" else Color.BLACK
        castling_rights = CastlingRights.from_fen(castling_str)
        removals_used = {
            Color.WHITE: int(white_removals),
            Color.BLACK: int(black_removals),
        }
        return cls(position, color_to_move, castling_rights, removals_used)

    def to_fen(self) -> str:
        """reverse operation: write a FEN from the given data"""
        active_color = "w" if self.color_to_move == Color.WHITE else "b"
        castling_str = self.castling_rights.to_fen()
        white_removals = self.removals_used[Color.WHITE]
        black_removals = self.removals_used[Color.BLACK]
        return f"{self.position} {active_color} {castling_str} {white_removals} {black_removals}"

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_FEN)
