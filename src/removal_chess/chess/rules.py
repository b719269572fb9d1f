"""
Rule engine entry points: legality filter, check detection and checkmate detection.

All functions are pure: they read the board they are given and return new values.
A move is simulated on a copy of the board, never on the live one.
"""

from dataclasses import dataclass
from typing import Optional

from removal_chess.chess.board import Board
from removal_chess.chess.castling import CASTLING_RULES, CastlingDirection, CastlingRights
from removal_chess.chess.moves import Move, candidate_castling_moves
from removal_chess.chess.pieces import Piece
from removal_chess.chess.removal import RemovalLedger
from removal_chess.chess.square import Square
from removal_chess.core.shared_types import Color, PieceType


@dataclass(frozen=True)
class MoveResult:
    board: Board
    is_castling: bool
    captured: Optional[Piece] = None


def initialize_board() -> Board:
    return Board.starting_position()


def castling_direction_of(board: Board, move: Move) -> Optional[CastlingDirection]:
    """A king moving from its home square to a castling destination is a castling move"""
    if move.castling_direction is not None:
        return move.castling_direction

    piece = board.piece(move.from_square)
    if piece is None or piece.type != PieceType.KING:
        return None
    for direction, squares in CASTLING_RULES.items():
        if direction.color != piece.color:
            continue
        if (move.from_square, move.to_square) == (squares.king_from, squares.king_to):
            return direction
    return None


def make_move(board: Board, move: Move) -> MoveResult:
    """
    Play the move on a copy of the board.
    ---

    Castling displaces two pieces (king and rook) in one go.
    """
    new_board = board.copy()
    direction = castling_direction_of(board, move)
    if direction is not None:
        squares = CASTLING_RULES[direction]
        new_board.move_piece(Move(squares.king_from, squares.king_to))
        new_board.move_piece(Move(squares.rook_from, squares.rook_to))
        return MoveResult(new_board, is_castling=True)

    captured = new_board.move_piece(move)
    return MoveResult(new_board, is_castling=False, captured=captured)


def is_in_check(board: Board, color: Color, removed: RemovalLedger) -> bool:
    return board.is_check(color, removed)


def pseudo_legal_moves(
    board: Board, color: Color, removed: RemovalLedger, rights: CastlingRights
) -> list[Move]:
    """Movement patterns of all pieces of `color`, plus castling"""
    candidate_moves = board.generate_candidate_moves(color, removed)
    candidate_moves.extend(candidate_castling_moves(color, board, removed, rights))
    return candidate_moves


def leaves_king_in_check(board: Board, move: Move, removed: RemovalLedger) -> bool:
    """
    Return True if the move puts (or leaves) the mover's own king in check

    plan:
    1. Copy the board
    2. make the candidate move
    3. determine if king is in check on the new board

    Pins and discovered checks need no special treatment: the simulation covers them.
    """
    mover = board.piece(move.from_square)
    assert mover is not None
    result = make_move(board, move)
    return is_in_check(result.board, mover.color, removed)


def legal_moves(
    board: Board, color: Color, removed: RemovalLedger, rights: CastlingRights
) -> list[Move]:
    """Union of the legal moves over all pieces of `color`"""
    return [
        move
        for move in pseudo_legal_moves(board, color, removed, rights)
        if not leaves_king_in_check(board, move, removed)
    ]


def legal_moves_from(
    board: Board, square: Square, removed: RemovalLedger, rights: CastlingRights
) -> list[Move]:
    """Legal moves of the single piece standing on `square`"""
    piece = board.piece(square)
    if piece is None:
        return []
    return [
        move
        for move in legal_moves(board, piece.color, removed, rights)
        if move.from_square == square
    ]


def legal_destinations(
    board: Board, square: Square, removed: RemovalLedger, rights: CastlingRights
) -> list[Square]:
    return [move.to_square for move in legal_moves_from(board, square, removed, rights)]


def find_move(
    board: Board,
    from_square: Square,
    to_square: Square,
    removed: RemovalLedger,
    rights: CastlingRights,
) -> Optional[Move]:
    """Resolve a (from, to) pair into the legal Move (with castling filled in), if there is one"""
    return next(
        (
            move
            for move in legal_moves_from(board, from_square, removed, rights)
            if move.to_square == to_square
        ),
        None,
    )


def is_valid_move(
    board: Board,
    from_square: Square,
    to_square: Square,
    removed: RemovalLedger,
    rights: CastlingRights,
) -> bool:
    return find_move(board, from_square, to_square, removed, rights) is not None


def has_legal_move(
    board: Board, color: Color, removed: RemovalLedger, rights: CastlingRights
) -> bool:
    return any(
        not leaves_king_in_check(board, move, removed)
        for move in pseudo_legal_moves(board, color, removed, rights)
    )


def is_checkmate(
    board: Board, color: Color, removed: RemovalLedger, rights: CastlingRights
) -> bool:
    """
    In check, and no piece of `color` has a move that escapes it.

    NOTE: a position without legal moves that is not check (stalemate) is deliberately not a terminal state.
    """
    return is_in_check(board, color, removed) and not has_legal_move(
        board, color, removed, rights
    )


def removal_leaves_king_in_check(
    board: Board, color: Color, removed: RemovalLedger, square: Square
) -> bool:
    """
    Removing a square only ever blocks lines, so it can never expose your king.
    While in check however, a removal is only allowed if it blocks every check.
    """
    if not is_in_check(board, color, removed):
        return False
    return is_in_check(board, color, removed.remove(square, board))
