"""Unit tests for /src/removal_chess/chess/castling.py"""

import pytest

from removal_chess.chess.board import Board
from removal_chess.chess.castling import (
    CASTLING_RULES,
    CastlingDirection,
    CastlingRights,
    CastlingSquares,
    castling_directions,
    update_castling_rights,
)
from removal_chess.chess.square import Square
from removal_chess.core.shared_types import Color

CASTLING_POSITION = "r3k2r/8/8/8/8/8/8/R3K2R"


def squares(*names: str) -> list[Square]:
    return [Square.from_algebraic(name) for name in names]


@pytest.fixture
def castling_board() -> Board:
    """Only the Kings and the Rooks, ready to perform any castling move."""
    board, _ = Board.from_fen(CASTLING_POSITION)
    return board


def test_castling_squares_creation() -> None:
    castling_squares = CastlingSquares.from_algebraic("e1", "g1", "h1", "f1")
    assert castling_squares.king_from == Square.from_algebraic("e1")
    assert castling_squares.king_to == Square.from_algebraic("g1")
    assert castling_squares.rook_from == Square.from_algebraic("h1")
    assert castling_squares.rook_to == Square.from_algebraic("f1")


@pytest.mark.parametrize(
    "direction, between, king_path",
    [
        (CastlingDirection.WHITE_KING_SIDE, ["f1", "g1"], ["e1", "f1", "g1"]),
        (CastlingDirection.WHITE_QUEEN_SIDE, ["b1", "c1", "d1"], ["e1", "d1", "c1"]),
        (CastlingDirection.BLACK_KING_SIDE, ["f8", "g8"], ["e8", "f8", "g8"]),
        (CastlingDirection.BLACK_QUEEN_SIDE, ["b8", "c8", "d8"], ["e8", "d8", "c8"]),
    ],
)
def test_castling_paths(
    direction: CastlingDirection, between: list[str], king_path: list[str]
) -> None:
    """The squares that must be empty vs. the squares that must not be attacked"""
    rule = CASTLING_RULES[direction]
    assert rule.between() == squares(*between)
    assert rule.king_path() == squares(*king_path)


def test_directions_per_color() -> None:
    assert castling_directions(Color.WHITE) == [
        CastlingDirection.WHITE_KING_SIDE,
        CastlingDirection.WHITE_QUEEN_SIDE,
    ]
    assert all(d.color == Color.BLACK for d in castling_directions(Color.BLACK))


@pytest.mark.parametrize("fen", ["KQkq", "KQ", "Kq", "k", "-"])
def test_castling_rights_fen(fen: str) -> None:
    assert CastlingRights.from_fen(fen).to_fen() == fen


def test_revoking_is_one_way() -> None:
    rights = CastlingRights()
    revoked = rights.revoke(CastlingDirection.WHITE_KING_SIDE)
    assert rights.is_available(CastlingDirection.WHITE_KING_SIDE)
    assert not revoked.is_available(CastlingDirection.WHITE_KING_SIDE)

    # revoking again keeps it revoked, there is no way back
    assert revoked.revoke(CastlingDirection.WHITE_KING_SIDE) == revoked


def test_revoking_a_color() -> None:
    rights = CastlingRights().revoke_color(Color.BLACK)
    assert rights.to_fen() == "KQ"
    assert rights.any_for(Color.WHITE)
    assert not rights.any_for(Color.BLACK)


def test_king_move_revokes_both_sides(castling_board: Board) -> None:
    rights = update_castling_rights(
        CastlingRights(), castling_board, *squares("e1", "e2")
    )
    assert rights.to_fen() == "kq"


def test_castling_revokes_both_sides(castling_board: Board) -> None:
    rights = update_castling_rights(
        CastlingRights(), castling_board, *squares("e8", "c8")
    )
    assert rights.to_fen() == "KQ"


@pytest.mark.parametrize(
    "rook_from, rook_to, expected",
    [("h1", "h4", "Qkq"), ("a1", "b1", "Kkq"), ("h8", "g8", "KQq"), ("a8", "a2", "KQk")],
)
def test_rook_move_revokes_one_side(
    castling_board: Board, rook_from: str, rook_to: str, expected: str
) -> None:
    rights = update_castling_rights(
        CastlingRights(), castling_board, *squares(rook_from, rook_to)
    )
    assert rights.to_fen() == expected


def test_rook_capture_revokes_opponent_side(castling_board: Board) -> None:
    """White rook takes the black rook on a8: white loses queen-side (rook moved), black loses queen-side (rook captured)"""
    rights = update_castling_rights(
        CastlingRights(), castling_board, *squares("a1", "a8")
    )
    assert rights.to_fen() == "Kk"


def test_other_moves_keep_rights() -> None:
    board = Board.starting_position()
    rights = update_castling_rights(CastlingRights(), board, *squares("g1", "f3"))
    assert rights == CastlingRights()


def test_rights_never_come_back(castling_board: Board) -> None:
    """A rook returning to its home square does not restore the right"""
    rights = update_castling_rights(
        CastlingRights(), castling_board, *squares("h1", "h2")
    )
    board_after, _ = Board.from_fen("r3k2r/8/8/8/8/8/7R/R3K3")
    rights = update_castling_rights(rights, board_after, *squares("h2", "h1"))
    assert not rights.is_available(CastlingDirection.WHITE_KING_SIDE)
