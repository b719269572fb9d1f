"""Unit tests for /src/removal_chess/chess/pieces.py"""

from dataclasses import FrozenInstanceError

import pytest

from removal_chess.chess.pieces import FEN_TO_PIECE, Piece
from removal_chess.core.shared_types import Color, PieceType


@pytest.mark.parametrize("character", list(FEN_TO_PIECE))
def test_piece_from_fen(character: str) -> None:
    """lower case: Black pieces, upper case: White pieces"""
    black_piece = Piece.from_fen(character)
    white_piece = Piece.from_fen(character.upper())
    assert black_piece == Piece(FEN_TO_PIECE[character], Color.BLACK)
    assert white_piece == Piece(FEN_TO_PIECE[character], Color.WHITE)


@pytest.mark.parametrize("character", ["K", "q", "R", "b", "N", "p"])
def test_piece_to_fen(character: str) -> None:
    assert Piece.from_fen(character).to_fen() == character


def test_pieces_are_immutable() -> None:
    """Pieces get replaced on the board, never changed"""
    piece = Piece(PieceType.PAWN, Color.WHITE)
    with pytest.raises(FrozenInstanceError):
        piece.type = PieceType.QUEEN  # type: ignore[misc]


def test_opponent_color() -> None:
    assert Color.WHITE.opponent == Color.BLACK
    assert Color.BLACK.opponent == Color.WHITE
