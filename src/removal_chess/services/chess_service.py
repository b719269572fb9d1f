"""Orchestration of communication from request models to business logic and persistence layers (and the reverse direction)."""

import logging
from typing import Optional
from uuid import UUID

from removal_chess.api.models import (
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    RemoveSquareRequest,
    TimeoutRequest,
)
from removal_chess.chess.game import ActionResult, Game
from removal_chess.chess.square import Square
from removal_chess.core.config import Settings
from removal_chess.core.exceptions import RepositoryError
from removal_chess.core.shared_types import Color
from removal_chess.db.repository import GameRepository

_LOGGER = logging.getLogger(__name__)


class ChessService:
    """Orchestration of layers for a removal chess game."""

    def __init__(
        self, repository: GameRepository, settings: Optional[Settings] = None
    ) -> None:
        self.repo = repository
        self.settings = settings or Settings()

    # -- Request handling logic ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """Start a new game. Quotas missing from the request come from the settings."""

        removals_per_player = (
            request.removals_per_player
            if request.removals_per_player is not None
            else self.settings.removals_per_player
        )
        time_limit_seconds = (
            request.time_limit_seconds
            if request.time_limit_seconds is not None
            else self.settings.time_limit_seconds
        )
        new_game = Game.new_game(
            removals_per_player=removals_per_player,
            time_limit_seconds=time_limit_seconds,
            starting_fen=request.starting_fen,
        )

        # Store the GameModel in the repository
        _, game_id = self.repo.create_game(new_game.to_model())
        _LOGGER.info("New game %s", game_id)
        return self._create_game_response(game_id, new_game)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """Retrieve current game state."""
        game = self._load_game(request.game_id)
        return self._create_game_response(request.game_id, game)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """Destinations of the piece on the requested square (for highlighting)."""
        game = self._load_game(request.game_id)
        destinations = game.legal_destinations(Square.from_algebraic(request.square))
        return LegalMovesResponse(
            game_id=request.game_id,
            square=request.square,
            destinations=[square.to_algebraic() for square in destinations],
        )

    def make_move(self, request: MoveRequest) -> GameResponse:
        """Make a move attempt."""
        game = self._load_game(request.game_id)
        result = game.move(
            Square.from_algebraic(request.from_square),
            Square.from_algebraic(request.to_square),
        )
        return self._store_result(request.game_id, game, result)

    def remove_square(self, request: RemoveSquareRequest) -> GameResponse:
        """Attempt to remove a square."""
        game = self._load_game(request.game_id)
        result = game.remove(Square.from_algebraic(request.square))
        return self._store_result(request.game_id, game, result)

    def declare_timeout(self, request: TimeoutRequest) -> GameResponse:
        """The shell's clock ran out for one of the players."""
        game = self._load_game(request.game_id)
        result = game.declare_timeout(request.color)
        return self._store_result(request.game_id, game, result)

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        if self.repo.delete_game(request.game_id) is None:
            raise RepositoryError(f"Game with {request.game_id=} not found.")

    # -- Internal helpers --
    def _store_result(
        self, game_id: UUID, game: Game, result: ActionResult
    ) -> GameResponse:
        """Only accepted actions are persisted. A rejection is reported back with the unchanged state."""
        if result.accepted:
            self.repo.update_game(game_id, game.to_model())
        return self._create_game_response(game_id, game, result)

    def _create_game_response(
        self, game_id: UUID, game: Game, result: Optional[ActionResult] = None
    ) -> GameResponse:
        """Convert the Game (and the outcome of the last action) to a GameResponse"""
        state = game.state
        return GameResponse(
            game_id=game_id,
            fen_state=state.to_fen(),
            current_player=state.current_player,
            removed_squares=[square.to_algebraic() for square in state.removed],
            removals_left={
                color.value: game.removals_left(color) for color in Color
            },
            status=state.status,
            winner=state.winner,
            action_history=list(game.actions),
            time_limit_seconds=game.time_limit_seconds,
            accepted=result.accepted if result else True,
            message=result.message if result else "",
            is_castling=result.is_castling if result else False,
        )

    def _load_game(self, game_id: UUID) -> Game:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return Game.from_model(game_model)
