"""
The Game class is the entrypoint into the domain layer for the service layer (and for any shell).
It orchestrates one action per turn: move a piece or remove a square, and accepts an external timeout signal.

Rejected actions never raise past the Game: they come back as an ActionResult with accepted=False
and the state left exactly as it was.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Optional, Self

from removal_chess.chess.moves import Move
from removal_chess.chess.rules import legal_destinations
from removal_chess.chess.square import Square
from removal_chess.chess.state import GameState
from removal_chess.core.exceptions import (
    GameStateError,
    IllegalMoveError,
    InvalidRemovalError,
)
from removal_chess.core.models import GameModel
from removal_chess.core.shared_types import ActionMode, Color, Status

_LOGGER = logging.getLogger(__name__)

REMOVAL_PREFIX = "x"
TIMEOUT_PREFIX = "timeout:"


@dataclass(frozen=True)
class ActionResult:
    """What the shell needs to render after an action: the (possibly unchanged) state and a message"""

    accepted: bool
    state: GameState
    message: str = ""
    is_castling: bool = False


def removal_notation(square: Square) -> str:
    return f"{REMOVAL_PREFIX}{square.to_algebraic()}"


def timeout_notation(color: Color) -> str:
    return f"{TIMEOUT_PREFIX}{color}"


@dataclass
class Game:
    state: GameState = field(default_factory=GameState)
    history: list[str] = field(default_factory=list)  # FEN before every accepted action
    actions: list[str] = field(default_factory=list)  # "e2e4", "xd5", "timeout:white"
    removals_per_player: Optional[int] = None
    time_limit_seconds: Optional[int] = None

    # --- CREATION / ENCODING ---
    @classmethod
    def new_game(
        cls,
        removals_per_player: Optional[int] = None,
        time_limit_seconds: Optional[int] = None,
        starting_fen: Optional[str] = None,
    ) -> Self:
        """Standard starting position unless a (variant) FEN is given"""
        if removals_per_player is not None and removals_per_player < 0:
            raise GameStateError(
                f"Removal quota cannot be negative: {removals_per_player}"
            )
        state = GameState.from_fen(starting_fen) if starting_fen else GameState()
        return cls(
            state=state,
            removals_per_player=removals_per_player,
            time_limit_seconds=time_limit_seconds,
        )

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a Game from the information the Service layer actually has"""

        # Validation
        if model.status not in [status.value for status in Status]:
            raise GameStateError(
                f"Invalid status code: {model.status!r}. \nPick one from {','.join(Status)}"
            )
        if model.winner is not None and model.winner not in [color.value for color in Color]:
            raise GameStateError(f"Invalid winner: {model.winner!r}")

        state = GameState.from_fen(
            model.current_fen,
            status=Status(model.status),
            winner=Color(model.winner) if model.winner else None,
        )
        return cls(
            state=state,
            history=list(model.history_fen),
            actions=list(model.actions),
            removals_per_player=model.removals_per_player,
            time_limit_seconds=model.time_limit_seconds,
        )

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(
            current_fen=self.state.to_fen(),
            history_fen=list(self.history),
            actions=list(self.actions),
            status=str(self.state.status),
            winner=str(self.state.winner) if self.state.winner else None,
            removals_per_player=self.removals_per_player,
            time_limit_seconds=self.time_limit_seconds,
        )

    # --- QUERIES ---
    @property
    def winner(self) -> Optional[Color]:
        return self.state.winner

    @property
    def is_over(self) -> bool:
        return self.state.game_over

    def removals_left(self, color: Color) -> Optional[int]:
        return self.state.removals_left(color, self.removals_per_player)

    def legal_destinations(self, square: Square) -> list[Square]:
        """Where the piece on `square` may go (empty if it is not the current player's piece, or the game is over)"""
        piece = self.state.board.piece(square)
        if self.is_over or piece is None or piece.color != self.state.current_player:
            return []
        return legal_destinations(
            self.state.board, square, self.state.removed, self.state.castling_rights
        )

    # --- ACTIONS ---
    def tap(self, square: Square, mode: ActionMode = ActionMode.MOVE) -> ActionResult:
        """
        Single entry point for a shell that only knows which square was tapped and in which mode.
        ----

        Remove mode: delete the tapped square.
        Move mode:
        1. tapping the selected square again clears the selection
        2. with a selection, a legal destination plays the move
        3. otherwise an own piece becomes the (new) selection, anything else clears it
        """
        if mode == ActionMode.REMOVE:
            return self.remove(square)

        if self.is_over:
            return self._reject("The game is over.")

        selected = self.state.selected_square
        if selected == square:
            return self._set_selection(None)

        if selected is not None and square in self.legal_destinations(selected):
            return self.move(selected, square)

        result = self.select(square)
        if not result.accepted and selected is not None:
            # tapping anything else drops the current selection
            self.state = self.state.with_selection(None)
            return replace(result, state=self.state)
        return result

    def select(self, square: Square) -> ActionResult:
        """Select one of your own pieces. Anything else is rejected and leaves the state unchanged."""
        if self.is_over:
            return self._reject("The game is over.")

        piece = self.state.board.piece(square)
        if piece is None or piece.color != self.state.current_player:
            return self._reject(
                f"No piece of {self.state.current_player} on {square.to_algebraic()}."
            )
        return self._set_selection(square)

    def move(self, from_square: Square, to_square: Square) -> ActionResult:
        """
        Attempt to make a move
        -----

        1. refuse if the game has ended
        2. let the state validate / apply the move (castling rights, turn, checkmate)
        3. update the FEN history and the list of actions
        """
        move = Move(from_square, to_square)
        try:
            self._assert_in_progress()
            new_state, result = self.state.apply_move(from_square, to_square)
        except (GameStateError, IllegalMoveError) as error:
            return self._reject(str(error))

        self._commit(new_state, move.to_uci())
        _LOGGER.info(
            "%s played %s%s",
            new_state.current_player.opponent,
            move.to_uci(),
            " (castling)" if result.is_castling else "",
        )

        message = "Castled." if result.is_castling else ""
        if new_state.status == Status.CHECKMATE:
            _LOGGER.info("Checkmate, %s wins", new_state.winner)
            message = f"Checkmate! {new_state.winner} wins."
        return ActionResult(
            accepted=True,
            state=new_state,
            message=message,
            is_castling=result.is_castling,
        )

    def remove(self, square: Square) -> ActionResult:
        """Delete an empty square instead of moving. Passes the turn."""
        try:
            self._assert_in_progress()
            new_state = self.state.apply_removal(square, self.removals_per_player)
        except (GameStateError, InvalidRemovalError) as error:
            return self._reject(str(error))

        self._commit(new_state, removal_notation(square))
        _LOGGER.info(
            "%s removed square %s",
            new_state.current_player.opponent,
            square.to_algebraic(),
        )
        return ActionResult(accepted=True, state=new_state)

    def declare_timeout(self, color: Color) -> ActionResult:
        """
        The external clock of `color` ran out.
        ---

        Authoritative: it ends the game whatever is in flight in the shell. After it, every action is rejected.
        """
        try:
            self._assert_in_progress()
        except GameStateError as error:
            return self._reject(str(error))

        new_state = self.state.apply_timeout(color)
        self._commit(new_state, timeout_notation(color))
        _LOGGER.info("%s ran out of time, %s wins", color, new_state.winner)
        return ActionResult(
            accepted=True,
            state=new_state,
            message=f"{color} ran out of time. {new_state.winner} wins.",
        )

    def reset(self) -> None:
        """Start over from the standard position with the same quota configuration"""
        self.state = GameState()
        self.history = []
        self.actions = []

    # -- PRIVATE HELPERS ---
    def _assert_in_progress(self) -> None:
        if self.is_over:
            raise GameStateError(f"Game is not in progress. status: {self.state.status}")

    def _set_selection(self, square: Optional[Square]) -> ActionResult:
        self.state = self.state.with_selection(square)
        return ActionResult(accepted=True, state=self.state)

    def _commit(self, new_state: GameState, action: str) -> None:
        """Before storing the new state, commit the state prior to the action to the history."""
        self.history.append(self.state.to_fen())
        self.actions.append(action)
        self.state = new_state

    def _reject(self, reason: str) -> ActionResult:
        _LOGGER.info("Rejected action: %s", reason)
        return ActionResult(accepted=False, state=self.state, message=reason)
