"""GameRepository backed by SQLAlchemy"""

import logging
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from removal_chess.core.models import GameModel
from removal_chess.db.schema import DBGame

_LOGGER = logging.getLogger(__name__)


def _copy_into_record(game: GameModel, game_db: DBGame) -> None:
    """Write every GameModel field onto the row"""
    game_db.current_fen = game.current_fen
    # NOTE: assign new lists, JSON columns do not track in-place mutation
    game_db.history_fen = list(game.history_fen)
    game_db.actions = list(game.actions)
    game_db.status = game.status
    game_db.winner = game.winner
    game_db.removals_per_player = game.removals_per_player
    game_db.time_limit_seconds = game.time_limit_seconds


def _to_model(game_db: DBGame) -> GameModel:
    return GameModel(
        current_fen=game_db.current_fen,
        history_fen=list(game_db.history_fen),
        actions=list(game_db.actions),
        status=game_db.status,
        winner=game_db.winner,
        removals_per_player=game_db.removals_per_player,
        time_limit_seconds=game_db.time_limit_seconds,
    )


class SQLGameRepository:
    """One row per game in the `games` table. Every write is committed immediately."""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_game(self, game_id: UUID) -> GameModel | None:
        game_db = self._fetch_game(game_id)
        return _to_model(game_db) if game_db else None

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        game_db = DBGame(id=uuid4())
        _copy_into_record(game, game_db)
        self.db.add(game_db)
        self._commit(game_db)
        _LOGGER.debug("Created game %s", game_db.id)
        return _to_model(game_db), game_db.id

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        _copy_into_record(game, game_db)
        self._commit(game_db)
        _LOGGER.debug("Updated game %s (%d actions)", game_id, len(game.actions))
        return _to_model(game_db)

    def delete_game(self, game_id: UUID) -> GameModel | None:
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        game_model = _to_model(game_db)
        self.db.delete(game_db)
        self.db.commit()
        _LOGGER.debug("Deleted game %s", game_id)
        return game_model

    def _fetch_game(self, game_id: UUID) -> DBGame | None:
        return self.db.scalar(select(DBGame).where(DBGame.id == game_id))

    def _commit(self, game_db: DBGame) -> None:
        self.db.commit()
        self.db.refresh(game_db)
