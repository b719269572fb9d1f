"""Generate database engine / sessions"""

from sqlalchemy import Engine, StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from removal_chess.db.schema import Base


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Create the engine and make sure all tables exist"""
    if database_url.startswith("sqlite") and ":memory:" in database_url:
        # a single shared connection, otherwise every session sees its own empty database
        engine = create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(database_url, echo=echo)

    Base.metadata.create_all(bind=engine)
    return engine


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(autoflush=False, bind=engine)
