"""
GameState: a complete, consistent snapshot of a game.

Every accepted action produces a new GameState; a snapshot is never partially updated.
The transitions validate the action and raise IllegalMoveError / InvalidRemovalError when it is rejected.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional

from removal_chess.chess.board import Board
from removal_chess.chess.castling import CastlingRights, update_castling_rights
from removal_chess.chess.fen import FENState
from removal_chess.chess.removal import RemovalLedger
from removal_chess.chess.rules import (
    MoveResult,
    find_move,
    is_checkmate,
    make_move,
    removal_leaves_king_in_check,
)
from removal_chess.chess.square import Square
from removal_chess.core.exceptions import IllegalMoveError, InvalidRemovalError
from removal_chess.core.shared_types import Color, Status


def no_removals_used() -> dict[Color, int]:
    return {Color.WHITE: 0, Color.BLACK: 0}


@dataclass(frozen=True)
class GameState:
    board: Board = field(default_factory=Board.starting_position)
    current_player: Color = Color.WHITE
    selected_square: Optional[Square] = None
    removed: RemovalLedger = field(default_factory=RemovalLedger)
    castling_rights: CastlingRights = field(default_factory=CastlingRights)
    removals_used: dict[Color, int] = field(default_factory=no_removals_used)
    status: Status = Status.IN_PROGRESS
    winner: Optional[Color] = None

    # --- ENCODING ---
    @classmethod
    def from_fen(
        cls,
        fen: str,
        status: Status = Status.IN_PROGRESS,
        winner: Optional[Color] = None,
    ) -> GameState:
        fen_state = FENState.from_fen(fen)
        board, removed = Board.from_fen(fen_state.position)
        return cls(
            board=board,
            current_player=fen_state.color_to_move,
            removed=removed,
            castling_rights=fen_state.castling_rights,
            removals_used=dict(fen_state.removals_used),
            status=status,
            winner=winner,
        )

    def to_fen(self) -> str:
        return FENState(
            position=self.board.to_fen(self.removed),
            color_to_move=self.current_player,
            castling_rights=self.castling_rights,
            removals_used=dict(self.removals_used),
        ).to_fen()

    # --- QUERIES ---
    @property
    def game_over(self) -> bool:
        return self.status != Status.IN_PROGRESS

    def removals_left(self, color: Color, quota: Optional[int]) -> Optional[int]:
        """None means unlimited"""
        if quota is None:
            return None
        return max(quota - self.removals_used[color], 0)

    # --- TRANSITIONS ---
    def with_selection(self, square: Optional[Square]) -> GameState:
        """Only a square holding one of the current player's pieces can be selected; anything else clears it."""
        if square is not None:
            piece = self.board.piece(square)
            if piece is None or piece.color != self.current_player:
                square = None
        return replace(self, selected_square=square)

    def apply_move(
        self, from_square: Square, to_square: Square
    ) -> tuple[GameState, MoveResult]:
        """
        Attempt to make a move
        -----

        1. resolve the move in the set of legal moves (rejects it otherwise)
        2. play it on a copy of the board (if castling, move the king and the rook)
        3. update the castling rights (from the board before the move)
        4. pass the turn
        5. check if the opponent has been mated
        """
        piece = self.board.piece(from_square)
        if piece is None:
            raise IllegalMoveError(f"There is no piece on {from_square.to_algebraic()}.")
        if piece.color != self.current_player:
            raise IllegalMoveError(
                f"The piece on {from_square.to_algebraic()} does not belong to {self.current_player}."
            )

        move = find_move(
            self.board, from_square, to_square, self.removed, self.castling_rights
        )
        if move is None:
            raise IllegalMoveError(
                f"Move not allowed: {from_square.to_algebraic()}{to_square.to_algebraic()}"
            )

        result = make_move(self.board, move)
        castling_rights = update_castling_rights(
            self.castling_rights, self.board, from_square, to_square
        )
        next_player = self.current_player.opponent

        status, winner = self.status, self.winner
        if is_checkmate(result.board, next_player, self.removed, castling_rights):
            status, winner = Status.CHECKMATE, self.current_player

        new_state = replace(
            self,
            board=result.board,
            current_player=next_player,
            selected_square=None,
            castling_rights=castling_rights,
            status=status,
            winner=winner,
        )
        return new_state, result

    def apply_removal(self, square: Square, quota: Optional[int] = None) -> GameState:
        """Delete an empty square and pass the turn"""
        if self.removals_left(self.current_player, quota) == 0:
            raise InvalidRemovalError(
                f"{self.current_player} has no square removals left (quota: {quota})."
            )

        removed = self.removed.remove(square, self.board)
        if removal_leaves_king_in_check(
            self.board, self.current_player, self.removed, square
        ):
            raise InvalidRemovalError(
                f"Removing {square.to_algebraic()} leaves your king in check."
            )

        removals_used = dict(self.removals_used)
        removals_used[self.current_player] += 1
        return replace(
            self,
            removed=removed,
            removals_used=removals_used,
            current_player=self.current_player.opponent,
            selected_square=None,
        )

    def apply_timeout(self, color: Color) -> GameState:
        """The clock of `color` ran out: the opponent wins"""
        return replace(
            self,
            selected_square=None,
            status=Status.TIMEOUT,
            winner=color.opponent,
        )
