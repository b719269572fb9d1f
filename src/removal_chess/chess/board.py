"""The Game board: the position (in chess: the configuration of pieces on the board) and the rules that read it"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from removal_chess.chess.moves import (
    MOVEMENT_RULES,
    CandidateMovesFn,
    Move,
    is_square_attacked,
)
from removal_chess.chess.pieces import FEN_TO_PIECE, Piece
from removal_chess.chess.removal import RemovalLedger
from removal_chess.chess.square import ALL_SQUARES, BOARD_DIMENSIONS, Square
from removal_chess.core.exceptions import (
    GameStateError,
    InvalidFENError,
    OutOfBoundsError,
)
from removal_chess.core.shared_types import Color, PieceType

STARTING_POSITION = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
# Marks a removed square in the piece placement string
REMOVED_SQUARE_CHAR = "x"

Grid = list[list[Optional[Piece]]]


def is_ascii_digits(text: str) -> bool:
    """ASCII 0-9 only: str.isdigit() also accepts characters like '²'"""
    return text.isascii() and text.isdigit()


def empty_grid() -> Grid:
    num_rows, num_cols = BOARD_DIMENSIONS
    return [[None] * num_cols for _ in range(num_rows)]


@dataclass
class Board:
    grid: Grid = field(default_factory=empty_grid)

    @classmethod
    def starting_position(cls) -> Board:
        board, _ = cls.from_fen(STARTING_POSITION)
        return board

    @classmethod
    def from_fen(cls, fen_str: str) -> tuple[Board, RemovalLedger]:
        """Construct a board (and the removed squares) from the piece placement part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank (row 0), starting with rook on a8, knight on b8, etc.
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank (row 7) are the white pieces.

        An 'x' denotes a removed square.
        """
        board = cls()
        removed: list[Square] = []
        fen_by_rows = fen_str.split("/")
        if len(fen_by_rows) != BOARD_DIMENSIONS[0]:
            raise InvalidFENError(f"Expected {BOARD_DIMENSIONS[0]} ranks in {fen_str!r}")

        for row, fen_one_row in enumerate(fen_by_rows):
            col = 0
            for character in fen_one_row:
                if is_ascii_digits(character):
                    # A number denotes the amount of empty squares after each other
                    col += int(character)
                    continue

                square = Square(row, col)
                if not square.is_within_bounds():
                    raise InvalidFENError(f"Rank {fen_one_row!r} is too long")
                if character == REMOVED_SQUARE_CHAR:
                    removed.append(square)
                elif character.lower() in FEN_TO_PIECE:
                    board.place_piece(Piece.from_fen(character), square)
                else:
                    raise InvalidFENError(f"Unknown piece character {character!r}")
                col += 1

            if col != BOARD_DIMENSIONS[1]:
                raise InvalidFENError(f"Rank {fen_one_row!r} does not span the board")
        return board, RemovalLedger.from_squares(removed)

    def to_fen(self, removed: Optional[RemovalLedger] = None) -> str:
        """Rows are separated by slashes in FEN string."""
        removed = removed or RemovalLedger()
        return "/".join(
            self._row_to_fen(row, removed) for row in range(BOARD_DIMENSIONS[0])
        )

    def _row_to_fen(self, row: int, removed: RemovalLedger) -> str:
        """FEN string of a single row"""
        fen_characters: list[str] = []
        empty_count = 0
        for col in range(BOARD_DIMENSIONS[1]):
            square = Square(row, col)
            piece = self.piece(square)
            if piece is None and not removed.is_removed(square):
                empty_count += 1
                continue

            if empty_count > 0:
                fen_characters.append(str(empty_count))
                empty_count = 0
            fen_characters.append(
                piece.to_fen() if piece is not None else REMOVED_SQUARE_CHAR
            )

        # if the entire row is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    def copy(self) -> Board:
        """Pieces are immutable, so copying the rows is enough"""
        return Board([list(row) for row in self.grid])

    # --- ACCESSORS ---
    def piece(self, square: Square) -> Optional[Piece]:
        self._assert_within_bounds(square)
        return self.grid[square.row][square.col]

    def place_piece(self, piece: Piece, square: Square) -> None:
        self._assert_within_bounds(square)
        self.grid[square.row][square.col] = piece

    def remove_piece(self, square: Square) -> Optional[Piece]:
        captured = self.piece(square)
        self.grid[square.row][square.col] = None
        return captured

    def move_piece(self, move: Move) -> Optional[Piece]:
        """Update the position on the board. Returns the captured piece (if any)"""
        piece_that_moved = self.remove_piece(move.from_square)
        captured = self.piece(move.to_square)
        if piece_that_moved is not None:
            self.place_piece(piece_that_moved, move.to_square)
        return captured

    def locate_color(self, color: Color) -> list[Square]:
        return [
            square
            for square in ALL_SQUARES
            if (piece := self.piece(square)) is not None and piece.color == color
        ]

    def king_square(self, color: Color) -> Square:
        king = Piece(PieceType.KING, color)
        square = next((sq for sq in ALL_SQUARES if self.piece(sq) == king), None)
        if square is None:
            raise GameStateError(f"There is no {color} king on the board.")
        return square

    # --- RULES THAT READ THE POSITION ---
    def generate_candidate_moves(
        self, color: Color, removed: RemovalLedger
    ) -> list[Move]:
        """
        Before knowing the set of legal moves, we use raycasting to find candidate moves, which will later be tested for legality
        (making sure it does not put yourself in check.)

        NOTE: Castling moves are added separately, they depend on the castling rights.
        """
        candidate_moves: list[Move] = []
        for starting_square in self.locate_color(color):
            piece = self.piece(starting_square)
            assert piece is not None
            movement_rule: CandidateMovesFn = MOVEMENT_RULES[piece.type]
            candidate_moves.extend(movement_rule(starting_square, self, removed))
        return candidate_moves

    def is_square_attacked(
        self, square: Square, by_color: Color, removed: RemovalLedger
    ) -> bool:
        return is_square_attacked(square, by_color, self, removed)

    def is_check(self, color: Color, removed: RemovalLedger) -> bool:
        """Is the king of `color` attacked by the opponent?"""
        return self.is_square_attacked(self.king_square(color), color.opponent, removed)

    @staticmethod
    def _assert_within_bounds(square: Square) -> None:
        if not square.is_within_bounds():
            raise OutOfBoundsError(f"Square {square} is not on the board.")
