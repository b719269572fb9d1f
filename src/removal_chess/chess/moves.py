"""
Geometry/Base movement and capturing/attacking rules

Key idea: Use strategy pattern to define candidate move sets for each piece type.
Every rule consults the removal ledger: a removed square is never a destination and blocks a ray like an occupied square.

Legality (not leaving your own king in check) is checked later in rules.py
"""

from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol, Self

from removal_chess.chess.castling import (
    CASTLING_RULES,
    CastlingDirection,
    CastlingRights,
    castling_directions,
)
from removal_chess.chess.pieces import Piece
from removal_chess.chess.removal import RemovalLedger
from removal_chess.chess.square import BOARD_DIMENSIONS, Square
from removal_chess.core.shared_types import Color, PieceType


class Board(Protocol):
    """Just the parts the movement strategies need"""

    def piece(self, square: Square) -> Optional[Piece]: ...


Vector = tuple[int, int]

STRAIGHTS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]
DIAGONALS: list[Vector] = [(1, 1), (1, -1), (-1, 1), (-1, -1)]
KNIGHT_DELTAS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
KING_DELTAS: list[Vector] = STRAIGHTS + DIAGONALS

# White moves UP the board (towards row 0), black moves DOWN.
PAWN_DIRECTION: dict[Color, int] = {Color.WHITE: -1, Color.BLACK: 1}
PAWN_START_ROW: dict[Color, int] = {
    Color.WHITE: BOARD_DIMENSIONS[0] - 2,
    Color.BLACK: 1,
}


@dataclass
class Move:
    """basic definition of a move to be made"""

    from_square: Square
    to_square: Square
    # Set by the rule engine; a move typed in by a user does not know it is castling yet
    castling_direction: Optional[CastlingDirection] = field(default=None, compare=False)

    @classmethod
    def from_uci(cls, uci: str) -> Self:
        """
        Universal Chess Interface notation: <from_square><to_square>

        examples:
        * "e2e4": move the piece that was on e2 to e4
        * "e1g1": the king moved from e1 to g1 (castling will be recognized by the rule engine)
        """
        from_sq = Square.from_algebraic(uci[:2])
        to_sq = Square.from_algebraic(uci[2:4])
        return cls(from_sq, to_sq)

    def to_uci(self) -> str:
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}"

    @property
    def is_castling(self) -> bool:
        return self.castling_direction is not None


def is_blocked(square: Square, board: Board, removed: RemovalLedger) -> bool:
    """Removed and occupied squares both stop a ray"""
    return removed.is_removed(square) or board.piece(square) is not None


# --- MOVEMENT RULES ---
def raycasting_move(
    square: Square, board: Board, removed: RemovalLedger, directions: list[Vector]
) -> list[Move]:
    """
    Raycasting algorithm
    -----

    We define move directions and move along them until we hit another piece, a removed square or
    the edge of the board.
    Only the first occupied square can be added (if it holds an opponent's piece: then it can be captured).
    A removed square can never be captured.
    """
    mover = board.piece(square)
    assert mover is not None

    moves: list[Move] = []
    for d_row, d_col in directions:
        target_square = square.offset(d_row, d_col)
        while target_square.is_within_bounds():
            if removed.is_removed(target_square):
                break

            target_piece = board.piece(target_square)
            if target_piece is not None:
                if target_piece.color != mover.color:
                    moves.append(Move(square, target_square))
                break

            moves.append(Move(square, target_square))
            target_square = target_square.offset(d_row, d_col)
    return moves


def single_step_move(
    square: Square, board: Board, removed: RemovalLedger, deltas: list[Vector]
) -> list[Move]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just can move a single step along a direction"""
    mover = board.piece(square)
    assert mover is not None

    moves: list[Move] = []
    for d_row, d_col in deltas:
        target_square = square.offset(d_row, d_col)
        if not target_square.is_within_bounds():
            continue
        if removed.is_removed(target_square):
            continue

        target_piece = board.piece(target_square)
        if target_piece is None or target_piece.color != mover.color:
            moves.append(Move(square, target_square))
    return moves


def candidate_pawn_moves(
    square: Square, board: Board, removed: RemovalLedger
) -> list[Move]:
    """
    A pawn:
    - moves by a single square forward (onto an empty, non-removed square)
    - It can move by two in their first move, if both squares are empty and non-removed
    - takes diagonally

    NOTE: No en passant and no promotion in this variant
    """
    pawn = board.piece(square)
    assert pawn is not None
    direction = PAWN_DIRECTION[pawn.color]

    moves: list[Move] = []
    one_step = square.offset(direction, 0)
    if one_step.is_within_bounds() and not is_blocked(one_step, board, removed):
        moves.append(Move(square, one_step))

        two_steps = square.offset(2 * direction, 0)
        if (
            square.row == PAWN_START_ROW[pawn.color]
            and two_steps.is_within_bounds()
            and not is_blocked(two_steps, board, removed)
        ):
            moves.append(Move(square, two_steps))

    # pawns take diagonally (an occupied square is never a removed one)
    for d_col in (-1, 1):
        target_square = square.offset(direction, d_col)
        if not target_square.is_within_bounds():
            continue
        target_piece = board.piece(target_square)
        if target_piece is not None and target_piece.color != pawn.color:
            moves.append(Move(square, target_square))
    return moves


def candidate_knight_moves(
    square: Square, board: Board, removed: RemovalLedger
) -> list[Move]:
    """Knights jump: |delta_row| + |delta_col| = 3. They jump over removed squares, but cannot land on one"""
    return single_step_move(square, board, removed, KNIGHT_DELTAS)


def candidate_bishop_moves(
    square: Square, board: Board, removed: RemovalLedger
) -> list[Move]:
    """Bishops move diagonally: |delta_row| = |delta_col|"""
    return raycasting_move(square, board, removed, DIAGONALS)


def candidate_rook_moves(
    square: Square, board: Board, removed: RemovalLedger
) -> list[Move]:
    """Rooks move either horizontally or vertically"""
    return raycasting_move(square, board, removed, STRAIGHTS)


def candidate_queen_moves(
    square: Square, board: Board, removed: RemovalLedger
) -> list[Move]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    diagonal_moves = candidate_bishop_moves(square, board, removed)
    horizontal_and_vertical_moves = candidate_rook_moves(square, board, removed)
    return diagonal_moves + horizontal_and_vertical_moves


def candidate_king_moves(
    square: Square, board: Board, removed: RemovalLedger
) -> list[Move]:
    """
    The king can move by a single square at the time.

    Castling is modelled as a special king move (see `candidate_castling_moves()`).
    """
    return single_step_move(square, board, removed, KING_DELTAS)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Square, Board, RemovalLedger], list[Move]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}


# --- CAPTURING RULES / ATTACKING RULES ---
def raycasting_attack(
    square: Square,
    by_color: Color,
    by_piece_types: tuple[PieceType, ...],
    board: Board,
    removed: RemovalLedger,
    directions: list[Vector],
) -> bool:
    """
    Raycasting algorithm for attacks.
    ---

    Where `raycasting_move()` determines
    _"What is the line-of-sight of the piece standing on the specified square?"_

    This function determines:
    _"Is the specified square in the line-of-sight of a piece of the specified color and that
    is allowed to move along the given direction?"_

    A removed square on the ray cuts the line of sight.
    """
    for d_row, d_col in directions:
        target_square = square.offset(d_row, d_col)
        while target_square.is_within_bounds():
            if removed.is_removed(target_square):
                break

            piece_found = board.piece(target_square)
            if piece_found is not None:
                if piece_found.color == by_color and piece_found.type in by_piece_types:
                    return True
                break
            target_square = target_square.offset(d_row, d_col)
    return False


def single_step_attack(
    square: Square,
    by_color: Color,
    by_piece_type: PieceType,
    board: Board,
    deltas: list[Vector],
) -> bool:
    """
    Equivalent for pawns, kings, and knights that just can move a single step along a direction.

    NOTE: an attacker can never stand on a removed square, so the ledger is not needed here.
    """
    for d_row, d_col in deltas:
        target_square = square.offset(d_row, d_col)
        if not target_square.is_within_bounds():
            continue

        piece_found = board.piece(target_square)
        if piece_found == Piece(by_piece_type, by_color):
            return True
    return False


def is_attacked_by_pawn(
    square: Square, by_color: Color, board: Board, removed: RemovalLedger
) -> bool:
    """
    Pawns attack diagonally, whether or not the attacked square is occupied.
    ----

    NOTE: Pawn moves are not symmetric, so to check IF a white pawn could take on your square -->
    Must look one row DOWN the board (white pawns move towards row 0).
    """
    direction = -PAWN_DIRECTION[by_color]
    inverse_pawn_take_deltas: list[Vector] = [(direction, 1), (direction, -1)]
    return single_step_attack(
        square, by_color, PieceType.PAWN, board, inverse_pawn_take_deltas
    )


def is_attacked_by_knight(
    square: Square, by_color: Color, board: Board, removed: RemovalLedger
) -> bool:
    return single_step_attack(square, by_color, PieceType.KNIGHT, board, KNIGHT_DELTAS)


def is_attacked_by_bishop(
    square: Square, by_color: Color, board: Board, removed: RemovalLedger
) -> bool:
    return raycasting_attack(
        square, by_color, (PieceType.BISHOP,), board, removed, DIAGONALS
    )


def is_attacked_by_rook(
    square: Square, by_color: Color, board: Board, removed: RemovalLedger
) -> bool:
    return raycasting_attack(
        square, by_color, (PieceType.ROOK,), board, removed, STRAIGHTS
    )


def is_attacked_by_queen(
    square: Square, by_color: Color, board: Board, removed: RemovalLedger
) -> bool:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return raycasting_attack(
        square, by_color, (PieceType.QUEEN,), board, removed, STRAIGHTS + DIAGONALS
    )


def is_attacked_by_king(
    square: Square, by_color: Color, board: Board, removed: RemovalLedger
) -> bool:
    return single_step_attack(square, by_color, PieceType.KING, board, KING_DELTAS)


# --- STRATEGY PATTERN: ATTACKING RULES ---
IsAttackedFn = Callable[[Square, Color, Board, RemovalLedger], bool]
ATTACK_RULES: dict[PieceType, IsAttackedFn] = {
    PieceType.PAWN: is_attacked_by_pawn,
    PieceType.KNIGHT: is_attacked_by_knight,
    PieceType.BISHOP: is_attacked_by_bishop,
    PieceType.ROOK: is_attacked_by_rook,
    PieceType.QUEEN: is_attacked_by_queen,
    PieceType.KING: is_attacked_by_king,
}


def is_square_attacked(
    square: Square, by_color: Color, board: Board, removed: RemovalLedger
) -> bool:
    """Could any piece of `by_color` capture on `square`? (ignores whose turn it is)"""
    return any(
        is_attacked(square, by_color, board, removed)
        for is_attacked in ATTACK_RULES.values()
    )


# -- CASTLING MOVES ---
def candidate_castling_moves(
    color: Color, board: Board, removed: RemovalLedger, rights: CastlingRights
) -> list[Move]:
    """
    Find the castling moves for the player with the `color` pieces
    ---

    **you are allowed to castle if**

    * Castling rights are not yet revoked (and king and rook actually stand on their home squares).
    * You are not currently in check (you cannot castle out of check).
    * All squares in between king and rook are empty and not removed.
    * None of the squares the king passes through (incl. start and destination) is under attack.
    """
    opponent_color = color.opponent
    moves: list[Move] = []
    for direction in castling_directions(color):
        if not rights.is_available(direction):
            continue

        squares = CASTLING_RULES[direction]
        if board.piece(squares.king_from) != Piece(PieceType.KING, color):
            continue
        if board.piece(squares.rook_from) != Piece(PieceType.ROOK, color):
            continue

        if any(is_blocked(sq, board, removed) for sq in squares.between()):
            continue

        # NOTE: the king's starting square is part of its path, so this also covers "not in check"
        if any(
            is_square_attacked(sq, opponent_color, board, removed)
            for sq in squares.king_path()
        ):
            continue

        moves.append(Move(squares.king_from, squares.king_to, castling_direction=direction))
    return moves
