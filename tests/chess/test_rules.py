"""Unit tests for /src/removal_chess/chess/rules.py"""

import pytest

from removal_chess.chess.board import Board
from removal_chess.chess.castling import CastlingDirection, CastlingRights
from removal_chess.chess.moves import Move
from removal_chess.chess.pieces import Piece
from removal_chess.chess.removal import RemovalLedger
from removal_chess.chess.rules import (
    castling_direction_of,
    find_move,
    has_legal_move,
    initialize_board,
    is_checkmate,
    is_in_check,
    is_valid_move,
    leaves_king_in_check,
    legal_destinations,
    legal_moves,
    make_move,
    removal_leaves_king_in_check,
)
from removal_chess.chess.square import ALL_SQUARES, Square
from removal_chess.core.shared_types import Color, PieceType

sq = Square.from_algebraic


def play(board: Board, *uci_moves: str) -> Board:
    for uci in uci_moves:
        board = make_move(board, Move.from_uci(uci)).board
    return board


def test_first_move_e2e4() -> None:
    """Opening move of the pawn in front of the king"""
    board = initialize_board()
    assert sq("e4") in legal_destinations(board, sq("e2"), RemovalLedger(), CastlingRights())

    result = make_move(board, Move.from_uci("e2e4"))
    assert result.board.piece(sq("e4")) == Piece(PieceType.PAWN, Color.WHITE)
    assert result.board.piece(sq("e2")) is None
    assert not result.is_castling
    assert result.captured is None
    # the board that was passed in is untouched
    assert board.piece(sq("e2")) == Piece(PieceType.PAWN, Color.WHITE)


def test_starting_position_has_twenty_legal_moves() -> None:
    board = initialize_board()
    assert len(legal_moves(board, Color.WHITE, RemovalLedger(), CastlingRights())) == 20


def test_legal_destinations_of_empty_square() -> None:
    assert legal_destinations(initialize_board(), sq("e4"), RemovalLedger(), CastlingRights()) == []


def test_removed_squares_are_never_destinations() -> None:
    board = initialize_board()
    removed = RemovalLedger.from_squares([sq("e4"), sq("f3"), sq("d5")])
    for move in legal_moves(board, Color.WHITE, removed, CastlingRights()):
        assert move.to_square not in removed


def test_pinned_piece_cannot_move() -> None:
    """The knight on e2 is pinned to the king by the rook on e8"""
    board, removed = Board.from_fen("4r2k/8/8/8/8/8/4N3/4K3")
    assert legal_destinations(board, sq("e2"), removed, CastlingRights.none()) == []
    assert leaves_king_in_check(board, Move.from_uci("e2c3"), removed)


def test_removed_square_breaks_pin() -> None:
    board, removed = Board.from_fen("4r2k/8/8/4x3/8/8/4N3/4K3")
    assert len(legal_destinations(board, sq("e2"), removed, CastlingRights.none())) > 0


def test_legal_moves_never_leave_own_king_in_check() -> None:
    board = play(initialize_board(), "e2e4", "e7e5", "d1h5", "b8c6", "f1c4", "g8f6")
    removed = RemovalLedger.from_squares([sq("a6")])
    for color in Color:
        for move in legal_moves(board, color, removed, CastlingRights()):
            after = make_move(board, move).board
            assert not is_in_check(after, color, removed)


def test_king_cannot_walk_into_attack() -> None:
    board, removed = Board.from_fen("4k3/8/8/8/8/8/3r4/4K3")
    destinations = legal_destinations(board, sq("e1"), removed, CastlingRights.none())
    # the rook on d2 is undefended; the rest of the d-file and the 2nd rank are covered
    assert set(destinations) == {sq("d2"), sq("f1")}


# --- CASTLING ---
CASTLING_FEN = "r3k2r/8/8/8/8/8/8/R3K2R"


@pytest.mark.parametrize(
    "uci, king_to, rook_from, rook_to",
    [
        ("e1g1", "g1", "h1", "f1"),
        ("e1c1", "c1", "a1", "d1"),
        ("e8g8", "g8", "h8", "f8"),
        ("e8c8", "c8", "a8", "d8"),
    ],
)
def test_castling_moves_king_and_rook(uci: str, king_to: str, rook_from: str, rook_to: str) -> None:
    board, _ = Board.from_fen(CASTLING_FEN)
    move = Move.from_uci(uci)
    king = board.piece(move.from_square)

    result = make_move(board, move)
    assert result.is_castling
    assert result.board.piece(sq(king_to)) == king
    assert result.board.piece(move.from_square) is None
    assert result.board.piece(sq(rook_from)) is None
    assert result.board.piece(sq(rook_to)) == Piece(PieceType.ROOK, king.color)


def test_castling_direction_of() -> None:
    board, _ = Board.from_fen(CASTLING_FEN)
    assert castling_direction_of(board, Move.from_uci("e1g1")) == CastlingDirection.WHITE_KING_SIDE
    assert castling_direction_of(board, Move.from_uci("e8c8")) == CastlingDirection.BLACK_QUEEN_SIDE
    assert castling_direction_of(board, Move.from_uci("e1f1")) is None
    assert castling_direction_of(board, Move.from_uci("h1g1")) is None


def test_find_move_fills_in_castling() -> None:
    board, removed = Board.from_fen(CASTLING_FEN)
    move = find_move(board, sq("e1"), sq("g1"), removed, CastlingRights())
    assert move is not None
    assert move.castling_direction == CastlingDirection.WHITE_KING_SIDE


def test_castling_needs_rights() -> None:
    board, removed = Board.from_fen(CASTLING_FEN)
    rights = CastlingRights.from_fen("kq")
    assert not is_valid_move(board, sq("e1"), sq("g1"), removed, rights)
    assert not is_valid_move(board, sq("e1"), sq("c1"), removed, rights)
    assert is_valid_move(board, sq("e8"), sq("g8"), removed, rights)


def test_no_castling_over_removed_square() -> None:
    board, removed = Board.from_fen("r3k2r/8/8/8/8/8/8/R3Kx1R")
    assert not is_valid_move(board, sq("e1"), sq("g1"), removed, CastlingRights())
    assert is_valid_move(board, sq("e1"), sq("c1"), removed, CastlingRights())


# --- CHECK / CHECKMATE ---
def test_fools_mate() -> None:
    board = play(initialize_board(), "f2f3", "e7e5", "g2g4", "d8h4")
    assert is_in_check(board, Color.WHITE, RemovalLedger())
    assert is_checkmate(board, Color.WHITE, RemovalLedger(), CastlingRights())
    assert not has_legal_move(board, Color.WHITE, RemovalLedger(), CastlingRights())


def test_back_rank_mate() -> None:
    board, removed = Board.from_fen("R5k1/5ppp/8/8/8/8/8/6K1")
    assert is_checkmate(board, Color.BLACK, removed, CastlingRights.none())


def test_single_escape_is_not_mate() -> None:
    """Same back rank, but h7 is free for the king"""
    board, removed = Board.from_fen("R5k1/5pp1/8/8/8/8/8/6K1")
    assert is_in_check(board, Color.BLACK, removed)
    assert not is_checkmate(board, Color.BLACK, removed, CastlingRights.none())
    assert legal_destinations(board, sq("g8"), removed, CastlingRights.none()) == [sq("h7")]


def test_removed_escape_square_gives_mate() -> None:
    """The only flight square has been removed from the board"""
    board, removed = Board.from_fen("R5k1/5ppx/8/8/8/8/8/6K1")
    assert is_checkmate(board, Color.BLACK, removed, CastlingRights.none())


def test_capturing_the_checker_is_not_mate() -> None:
    board, removed = Board.from_fen("R5k1/5ppp/8/8/8/8/8/r5K1")
    assert not is_checkmate(board, Color.BLACK, removed, CastlingRights.none())


def test_no_check_is_never_mate() -> None:
    """Without legal moves but not in check: the game simply is not over"""
    board, removed = Board.from_fen("7k/5Q2/6K1/8/8/8/8/8")
    assert not is_in_check(board, Color.BLACK, removed)
    assert not has_legal_move(board, Color.BLACK, removed, CastlingRights.none())
    assert not is_checkmate(board, Color.BLACK, removed, CastlingRights.none())


# --- REMOVALS AND CHECK ---
def test_removal_outside_of_check() -> None:
    board = initialize_board()
    for square in ALL_SQUARES:
        if board.piece(square) is None:
            assert not removal_leaves_king_in_check(board, Color.WHITE, RemovalLedger(), square)


@pytest.mark.parametrize("square, leaves_check", [("e2", False), ("e3", False), ("a3", True), ("d2", True)])
def test_removal_in_check_must_block(square: str, leaves_check: bool) -> None:
    board, removed = Board.from_fen("4k3/8/8/8/4q3/8/8/4K3")
    assert removal_leaves_king_in_check(board, Color.WHITE, removed, sq(square)) == leaves_check


def test_removal_cannot_stop_knight_check() -> None:
    board, removed = Board.from_fen("4k3/8/8/8/8/3n4/8/4K3")
    assert is_in_check(board, Color.WHITE, removed)
    assert removal_leaves_king_in_check(board, Color.WHITE, removed, sq("e2"))
