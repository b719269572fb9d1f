"""Storage contract the ChessService depends on. SQLGameRepository implements it; the service tests use a dict."""

from typing import Protocol
from uuid import UUID

from removal_chess.core.models import GameModel


class GameRepository(Protocol):
    """
    A game is stored as a whole: the current variant FEN, the FEN before every accepted action,
    the action log ("e2e4", "xd5", "timeout:white"), the result and the quota configuration.
    """

    def get_game(self, game_id: UUID) -> GameModel | None:
        """None if no game is stored under `game_id`."""
        ...

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Assign a new id to a freshly started game."""
        ...

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Replace the stored game after an accepted action. None if the id is unknown."""
        ...

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Return the deleted game, or None if the id is unknown."""
        ...
