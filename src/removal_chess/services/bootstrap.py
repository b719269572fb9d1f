"""Wire settings, logging, database and service together."""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from removal_chess.core.config import Settings, load_settings
from removal_chess.core.log_setup import configure_logging
from removal_chess.db.database import build_engine, build_session_factory
from removal_chess.db.sql_repository import SQLGameRepository
from removal_chess.services.chess_service import ChessService

_LOGGER = logging.getLogger(__name__)


def bootstrap(settings: Optional[Settings] = None) -> tuple[ChessService, Session]:
    """
    Build a ready-to-use ChessService. The caller owns the returned session and should close it.
    """
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    engine = build_engine(settings.database_url)
    session = build_session_factory(engine)()
    _LOGGER.info("Using database %s", engine.url.render_as_string(hide_password=True))
    return ChessService(SQLGameRepository(session), settings), session
