"""
Shared fixtures. Every test that touches the database gets its own in-memory SQLite engine,
built the same way the application builds it.
"""

from typing import Generator

import pytest
from sqlalchemy import Engine
from sqlalchemy.orm import Session

from removal_chess.db.database import build_engine, build_session_factory
from removal_chess.db.schema import Base

DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture
def db_engine() -> Generator[Engine, None, None]:
    engine = build_engine(DATABASE_URL)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def db_session_repo(db_engine: Engine) -> Generator[Session, None, None]:
    """Session on a fresh database, so repository tests never see each other's games."""
    session = build_session_factory(db_engine)()
    try:
        yield session
    finally:
        session.close()
